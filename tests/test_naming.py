"""Tests for entity name resolution (crudforge.naming)."""

from __future__ import annotations

import pytest

from crudforge.errors import InvalidArgument
from crudforge.naming import (
    camel_of,
    normalize_name,
    plural_of,
    resolve_entity_name,
    singular_of,
)

pytestmark = pytest.mark.unit


class TestNameForms:
    def test_singular_input(self):
        entity = resolve_entity_name("order")
        assert entity.singular_name == "Order"
        assert entity.plural_name == "Orders"
        assert entity.camel_name == "order"
        assert entity.raw_name == "order"

    def test_plural_input(self):
        entity = resolve_entity_name("Orders")
        assert entity.singular_name == "Order"
        assert entity.plural_name == "Orders"

    def test_naive_rule_for_words_ending_in_s(self):
        entity = resolve_entity_name("status")
        assert entity.singular_name == "Statu"
        assert entity.plural_name == "Status"
        assert entity.camel_name == "statu"

    def test_rest_of_name_is_preserved(self):
        entity = resolve_entity_name("purchaseOrder")
        assert entity.singular_name == "PurchaseOrder"
        assert entity.plural_name == "PurchaseOrders"
        assert entity.camel_name == "purchaseOrder"

    def test_single_letter_s(self):
        entity = resolve_entity_name("s")
        assert entity.singular_name == "S"
        assert entity.plural_name == "Ss"

    def test_surrounding_whitespace_is_ignored(self):
        entity = resolve_entity_name("  invoice ")
        assert entity.singular_name == "Invoice"
        assert entity.raw_name == "  invoice "

    @pytest.mark.parametrize("name", ["order", "Product", "category", "x", "a_b", "Item2"])
    def test_plural_singular_round_trip(self, name: str):
        entity = resolve_entity_name(name)
        assert singular_of(entity.plural_name) == entity.singular_name


class TestUnicodeNames:
    @pytest.mark.parametrize(
        ("raw", "singular", "plural"),
        [
            ("ordér", "Ordér", "Ordérs"),
            ("café", "Café", "Cafés"),
            ("Straße", "Straße", "Straßes"),
            ("élève", "Élève", "Élèves"),
        ],
    )
    def test_letters_beyond_ascii(self, raw: str, singular: str, plural: str):
        entity = resolve_entity_name(raw)
        assert entity.singular_name == singular
        assert entity.plural_name == plural

    def test_camel_form_lowers_first_letter(self):
        assert resolve_entity_name("Élève").camel_name == "élève"


class TestInvalidNames:
    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty(self, name: str):
        with pytest.raises(InvalidArgument):
            resolve_entity_name(name)

    @pytest.mark.parametrize("name", ["1order", "_order", "-order"])
    def test_must_start_with_letter(self, name: str):
        with pytest.raises(InvalidArgument, match="must start with a letter"):
            resolve_entity_name(name)

    @pytest.mark.parametrize("name", ["order item", "order-item", "order.item", "order€"])
    def test_non_identifier_characters(self, name: str):
        with pytest.raises(InvalidArgument):
            resolve_entity_name(name)

    def test_error_kind(self):
        with pytest.raises(InvalidArgument) as info:
            resolve_entity_name("")
        assert info.value.kind == "InvalidArgument"


class TestHelpers:
    def test_normalize_name(self):
        assert normalize_name("order") == "Order"
        assert normalize_name("") == ""

    def test_plural_of(self):
        assert plural_of("Order") == "Orders"
        assert plural_of("Orders") == "Orders"

    def test_camel_of(self):
        assert camel_of("OrderLine") == "orderLine"

"""Entity name normalisation.

Turns a raw entity name into the singular, plural and camel-case forms used by
every generated artifact.  Pluralisation is a single suffix rule, not a
linguistic algorithm: a name ending in ``s`` is taken to be plural already,
so ``"status"`` resolves to singular ``"Statu"``.
"""

from __future__ import annotations

import re

from crudforge.errors import InvalidArgument
from crudforge.models import EntitySpec

_IDENTIFIER_RE = re.compile(r"\w+")


def normalize_name(name: str) -> str:
    """Upper-case the first character and keep the rest unchanged."""
    if not name:
        return ""
    return name[0].upper() + name[1:]


def singular_of(name: str) -> str:
    return name[:-1] if name.endswith("s") and len(name) > 1 else name


def plural_of(name: str) -> str:
    return name if name.endswith("s") and len(name) > 1 else name + "s"


def camel_of(name: str) -> str:
    return name[0].lower() + name[1:] if name else ""


def resolve_entity_name(raw_name: str) -> EntitySpec:
    """Resolve *raw_name* into an ``EntitySpec``.

    Raises:
        InvalidArgument: If the name is empty, does not start with a letter,
            or contains characters that cannot appear in an identifier.
    """
    candidate = (raw_name or "").strip()
    if not candidate:
        raise InvalidArgument("Entity name must not be empty")
    if not candidate[0].isalpha():
        raise InvalidArgument(
            f"Entity name '{raw_name}' must start with a letter"
        )
    if not _IDENTIFIER_RE.fullmatch(candidate):
        raise InvalidArgument(
            f"Entity name '{raw_name}' may only contain letters, digits and underscores"
        )

    base = normalize_name(candidate)
    singular = singular_of(base)
    return EntitySpec(
        raw_name=raw_name,
        singular_name=singular,
        plural_name=plural_of(base),
        camel_name=camel_of(singular),
    )

"""Tests for artifact planning (crudforge.planner)."""

from __future__ import annotations

from itertools import combinations

import pytest

from crudforge.errors import ConflictingArtifact
from crudforge.models import (
    OPERATION_ORDER,
    ArtifactCategory,
    ArtifactDescriptor,
    EntityTier,
    Operation,
)
from crudforge.planner import (
    ACCESS_CONTROL,
    BY_ID_QUERY,
    ENDPOINT,
    LIST_QUERY,
    MAPPING_PROFILE,
    MODEL,
    PERSISTENCE_MAPPING,
    UNKNOWN_INTENT,
    candidate_descriptors,
    model_path,
    order_by_dependencies,
    plan_artifacts,
)

pytestmark = pytest.mark.unit

OPERATION_SUBSETS = [
    frozenset(c)
    for size in range(1, len(OPERATION_ORDER) + 1)
    for c in combinations(OPERATION_ORDER, size)
]


def _names(descriptors: list[ArtifactDescriptor]) -> list[str]:
    return [d.logical_name for d in descriptors]


def _by_name(descriptors: list[ArtifactDescriptor]) -> dict[str, ArtifactDescriptor]:
    return {d.logical_name: d for d in descriptors}


# ---------------------------------------------------------------------------
# Descriptor table
# ---------------------------------------------------------------------------


class TestCreateReadAudited:
    """order, Create+Read, Audited, tests and permissions on, no events or mapping."""

    @pytest.fixture
    def descriptors(self, make_plan):
        plan = make_plan(
            {Operation.CREATE, Operation.READ},
            generate_events=False,
            generate_mapping_profiles=False,
        )
        return plan_artifacts(plan)

    def test_twelve_descriptors(self, descriptors):
        assert len(descriptors) == 12

    def test_expected_names(self, descriptors):
        assert set(_names(descriptors)) == {
            MODEL,
            PERSISTENCE_MAPPING,
            ACCESS_CONTROL,
            "create-command",
            "create-validator",
            LIST_QUERY,
            BY_ID_QUERY,
            ENDPOINT,
            "create-command-test",
            "create-validator-test",
            "list-query-test",
            "by-id-query-test",
        }

    def test_paths(self, descriptors):
        paths = {d.logical_name: d.relative_path for d in descriptors}
        assert paths[MODEL] == "src/Core/Domain/Orders/Order.cs"
        assert paths[PERSISTENCE_MAPPING] == (
            "src/Infra/Persistence/Configurations/Tenants/Orders/OrderEntityConfiguration.cs"
        )
        assert paths[ACCESS_CONTROL] == "src/Core/Domain/PermissionsConstants/OrdersPermissions.cs"
        assert paths["create-command"] == (
            "src/Core/Application/Orders/Commands/CreateOrder/CreateOrderCommand.cs"
        )
        assert paths["create-validator"] == (
            "src/Core/Application/Orders/Commands/CreateOrder/CreateOrderCommandValidator.cs"
        )
        assert paths[LIST_QUERY] == "src/Core/Application/Orders/Queries/GetOrders/GetOrdersQuery.cs"
        assert paths[BY_ID_QUERY] == (
            "src/Core/Application/Orders/Queries/GetOrderById/GetOrderByIdQuery.cs"
        )
        assert paths[ENDPOINT] == "src/Apps/Api/Controllers/OrdersController.cs"
        assert paths["create-command-test"] == (
            "tests/Application/ApplicationTests/Orders/Commands/CreateOrderCommandTests.cs"
        )
        assert paths["by-id-query-test"] == (
            "tests/Application/ApplicationTests/Orders/Queries/GetOrderByIdQueryTests.cs"
        )

    def test_no_events(self, descriptors):
        assert not any(d.category == ArtifactCategory.EVENT for d in descriptors)

    def test_model_comes_first(self, descriptors):
        assert descriptors[0].logical_name == MODEL

    def test_model_intent_records_tier(self, descriptors):
        assert _by_name(descriptors)[MODEL].intent == "model:Order:Audited"


class TestTable:
    def test_all_operations_all_flags(self, make_plan):
        descriptors = plan_artifacts(make_plan())
        names = set(_names(descriptors))
        for op in ("create", "update", "delete"):
            assert f"{op}-command" in names
            assert f"{op}-validator" in names
            assert f"{op}-event" in names
        assert MAPPING_PROFILE in names
        assert "read-event" not in names
        # model, persistence, access control, 3 events, 6 write units,
        # 2 queries, mapping profile, endpoint, 8 tests
        assert len(descriptors) == 24

    def test_events_need_more_than_one_operation(self, make_plan):
        single = plan_artifacts(make_plan({Operation.CREATE}))
        assert not any(d.category == ArtifactCategory.EVENT for d in single)

        pair = plan_artifacts(make_plan({Operation.CREATE, Operation.READ}))
        events = [d for d in pair if d.category == ArtifactCategory.EVENT]
        assert [e.logical_name for e in events] == ["create-event"]
        assert events[0].relative_path.endswith("Orders/Events/OrderCreatedEvent.cs")

    def test_read_only_with_events_has_no_events(self, make_plan):
        descriptors = plan_artifacts(make_plan({Operation.READ}))
        assert not any(d.category == ArtifactCategory.EVENT for d in descriptors)

    def test_permissions_flag(self, make_plan):
        descriptors = plan_artifacts(make_plan(generate_permissions=False))
        names = _by_name(descriptors)
        assert ACCESS_CONTROL not in names
        assert ACCESS_CONTROL not in names[ENDPOINT].depends_on

    def test_mapping_flag(self, make_plan):
        descriptors = plan_artifacts(make_plan(generate_mapping_profiles=False))
        assert MAPPING_PROFILE not in _names(descriptors)

    def test_tests_only_cover_operation_units(self, make_plan):
        descriptors = plan_artifacts(make_plan())
        tests = [d for d in descriptors if d.category == ArtifactCategory.TEST]
        subjects = _by_name(descriptors)
        assert len(tests) == 8
        for test in tests:
            assert subjects[test.subject].category in (
                ArtifactCategory.WRITE_OPERATION,
                ArtifactCategory.READ_OPERATION,
            )
            assert test.depends_on == {test.subject}

    @pytest.mark.parametrize("operations", OPERATION_SUBSETS, ids=lambda ops: "+".join(sorted(o.value for o in ops)))
    def test_generate_tests_only_adds_tests(self, make_plan, operations):
        with_tests = plan_artifacts(make_plan(operations, generate_tests=True))
        without = plan_artifacts(make_plan(operations, generate_tests=False))
        production = [d for d in with_tests if d.category != ArtifactCategory.TEST]
        assert production == without

    def test_endpoint_depends_on_every_exposed_unit(self, make_plan):
        descriptors = _by_name(plan_artifacts(make_plan({Operation.CREATE, Operation.READ})))
        assert descriptors[ENDPOINT].depends_on == {
            "create-command",
            "create-validator",
            LIST_QUERY,
            BY_ID_QUERY,
            ACCESS_CONTROL,
        }

    def test_custom_permissions_dir(self, make_plan):
        plan = make_plan({Operation.READ})
        plan = plan.model_copy(
            update={"layout": plan.layout.model_copy(update={"permissions_dir": "Auth/Permissions"})}
        )
        descriptors = _by_name(plan_artifacts(plan))
        assert descriptors[ACCESS_CONTROL].relative_path == (
            "src/Core/Domain/Auth/Permissions/OrdersPermissions.cs"
        )

    def test_paths_are_unique(self, make_plan):
        descriptors = plan_artifacts(make_plan())
        paths = [d.relative_path for d in descriptors]
        assert len(paths) == len(set(paths))


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    @pytest.mark.parametrize("operations", OPERATION_SUBSETS, ids=lambda ops: "+".join(sorted(o.value for o in ops)))
    def test_dependencies_precede_dependents(self, make_plan, operations):
        descriptors = plan_artifacts(make_plan(operations))
        seen: set[str] = set()
        for descriptor in descriptors:
            assert descriptor.depends_on <= seen, descriptor.logical_name
            seen.add(descriptor.logical_name)

    def test_cycle_is_rejected(self):
        a = ArtifactDescriptor(
            category=ArtifactCategory.MODEL,
            relative_path="a.cs",
            logical_name="a",
            depends_on=frozenset({"b"}),
            intent="a",
        )
        b = a.model_copy(update={"relative_path": "b.cs", "logical_name": "b", "depends_on": frozenset({"a"})})
        with pytest.raises(ValueError, match="cycle"):
            order_by_dependencies([a, b])

    def test_stable_for_independent_items(self):
        items = [
            ArtifactDescriptor(
                category=ArtifactCategory.MODEL,
                relative_path=f"{name}.cs",
                logical_name=name,
                intent=name,
            )
            for name in ("c", "a", "b")
        ]
        assert _names(order_by_dependencies(items)) == ["c", "a", "b"]

    def test_deterministic(self, make_plan):
        assert plan_artifacts(make_plan()) == plan_artifacts(make_plan())


# ---------------------------------------------------------------------------
# Existing artifacts
# ---------------------------------------------------------------------------


class TestExistingArtifacts:
    def test_existing_model_with_same_intent_is_reused(self, make_plan):
        plan = make_plan({Operation.CREATE})
        existing = {model_path(plan): "model:Order:Audited"}
        descriptors = plan_artifacts(plan, existing)
        names = _names(descriptors)
        assert MODEL not in names
        assert all(MODEL not in d.depends_on for d in descriptors)

    def test_handwritten_model_is_reused(self, make_plan):
        plan = make_plan({Operation.CREATE})
        descriptors = plan_artifacts(plan, {model_path(plan): UNKNOWN_INTENT})
        assert MODEL not in _names(descriptors)

    def test_tier_change_conflicts(self, make_plan):
        plan = make_plan({Operation.CREATE}, tier=EntityTier.FULLY_AUDITED)
        with pytest.raises(ConflictingArtifact) as info:
            plan_artifacts(plan, {model_path(plan): "model:Order:Audited"})
        assert info.value.path == model_path(plan)
        assert info.value.kind == "ConflictingArtifact"

    def test_regenerate_model_overrides_conflict(self, make_plan):
        plan = make_plan({Operation.CREATE}, tier=EntityTier.FULLY_AUDITED, regenerate_model=True)
        descriptors = plan_artifacts(plan, {model_path(plan): "model:Order:Audited"})
        assert descriptors[0].logical_name == MODEL

    def test_regenerate_model_rewrites_unchanged_model(self, make_plan):
        plan = make_plan({Operation.CREATE}, regenerate_model=True)
        descriptors = plan_artifacts(plan, {model_path(plan): "model:Order:Audited"})
        assert MODEL in _names(descriptors)

    def test_other_artifact_with_foreign_intent_conflicts(self, make_plan):
        plan = make_plan({Operation.READ})
        endpoint = _by_name(candidate_descriptors(plan))[ENDPOINT]
        with pytest.raises(ConflictingArtifact):
            plan_artifacts(plan, {endpoint.relative_path: "endpoint:Invoice"})

    def test_same_intent_or_handwritten_files_are_overwritten(self, make_plan):
        plan = make_plan({Operation.READ})
        endpoint = _by_name(candidate_descriptors(plan))[ENDPOINT]
        for intent in (endpoint.intent, UNKNOWN_INTENT):
            descriptors = plan_artifacts(plan, {endpoint.relative_path: intent})
            assert ENDPOINT in _names(descriptors)

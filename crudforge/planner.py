"""Artifact planning.

Expands a ``GenerationPlan`` into the ordered set of ``ArtifactDescriptor``
values that the composer renders and the emitter writes.  The mapping from
operations and flags to descriptors is a fixed table; the result is sorted so
that every descriptor comes after the descriptors it depends on.

Collisions are detected here, before any rendering or I/O: two descriptors on
one path with different logical content, or an existing generated file whose
recorded intent differs from what would be written over it.
"""

from __future__ import annotations

from collections.abc import Mapping
from posixpath import join as path_join

from crudforge.errors import ConflictingArtifact
from crudforge.models import (
    ArtifactCategory,
    ArtifactDescriptor,
    GenerationPlan,
    Operation,
)

#: Intent recorded for files that exist but carry no generator header.
UNKNOWN_INTENT = "unknown"

MODEL = "model"
PERSISTENCE_MAPPING = "persistence-mapping"
ENDPOINT = "endpoint"
ACCESS_CONTROL = "access-control"
MAPPING_PROFILE = "mapping-profile"
LIST_QUERY = "list-query"
BY_ID_QUERY = "by-id-query"

_PAST_TENSE: dict[Operation, str] = {
    Operation.CREATE: "Created",
    Operation.UPDATE: "Updated",
    Operation.DELETE: "Deleted",
}

_TESTED_CATEGORIES = frozenset(
    {ArtifactCategory.WRITE_OPERATION, ArtifactCategory.READ_OPERATION}
)


def command_name(op: Operation) -> str:
    return f"{op.value.lower()}-command"


def validator_name(op: Operation) -> str:
    return f"{op.value.lower()}-validator"


def event_name(op: Operation) -> str:
    return f"{op.value.lower()}-event"


def unit_test_name(subject: str) -> str:
    return f"{subject}-test"


def event_class_suffix(op: Operation) -> str:
    """``Created``/``Updated``/``Deleted`` for the event raised by *op*."""
    return _PAST_TENSE[op]


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def model_path(plan: GenerationPlan) -> str:
    e, layout = plan.entity, plan.layout
    return path_join(layout.domain_path, e.plural_name, f"{e.singular_name}.cs")


def _feature_dir(plan: GenerationPlan, *parts: str) -> str:
    return path_join(plan.layout.application_path, plan.entity.plural_name, *parts)


def _command_dir(plan: GenerationPlan, op: Operation) -> str:
    return _feature_dir(plan, "Commands", f"{op.value}{plan.entity.singular_name}")


def _tests_dir(plan: GenerationPlan, *parts: str) -> str:
    return path_join(plan.layout.application_tests_path, plan.entity.plural_name, *parts)


# ---------------------------------------------------------------------------
# Descriptor table
# ---------------------------------------------------------------------------

class _Builder:
    """Accumulates descriptors in table order."""

    def __init__(self, plan: GenerationPlan) -> None:
        self.plan = plan
        self.items: list[ArtifactDescriptor] = []

    def add(
        self,
        category: ArtifactCategory,
        logical_name: str,
        relative_path: str,
        depends_on: set[str] | None = None,
        *,
        intent: str | None = None,
        operation: Operation | None = None,
        subject: str | None = None,
    ) -> ArtifactDescriptor:
        descriptor = ArtifactDescriptor(
            category=category,
            relative_path=relative_path,
            logical_name=logical_name,
            depends_on=frozenset(depends_on or ()),
            intent=intent or f"{logical_name}:{self.plan.entity.singular_name}",
            operation=operation,
            subject=subject,
        )
        self.items.append(descriptor)
        return descriptor


def candidate_descriptors(plan: GenerationPlan) -> list[ArtifactDescriptor]:
    """Every descriptor the table yields for *plan*, ignoring existing files.

    The list is in table order and still contains edges to every descriptor
    it references, including the model.
    """
    e = plan.entity
    s, p = e.singular_name, e.plural_name
    b = _Builder(plan)

    b.add(
        ArtifactCategory.MODEL,
        MODEL,
        model_path(plan),
        intent=f"{MODEL}:{s}:{plan.entity_tier.value}",
    )
    b.add(
        ArtifactCategory.MAPPING,
        PERSISTENCE_MAPPING,
        path_join(
            plan.layout.persistence_path,
            "Configurations",
            "Tenants",
            p,
            f"{s}EntityConfiguration.cs",
        ),
        {MODEL},
    )

    if plan.flags.generate_permissions:
        b.add(
            ArtifactCategory.ACCESS_CONTROL,
            ACCESS_CONTROL,
            path_join(plan.layout.domain_path, plan.layout.permissions_dir, f"{p}Permissions.cs"),
        )

    if plan.emits_events:
        for op in plan.write_operations:
            b.add(
                ArtifactCategory.EVENT,
                event_name(op),
                _feature_dir(plan, "Events", f"{s}{event_class_suffix(op)}Event.cs"),
                {MODEL},
                operation=op,
            )

    exposed: set[str] = set()
    for op in plan.write_operations:
        command_deps = {MODEL}
        if plan.emits_events:
            command_deps.add(event_name(op))
        command = b.add(
            ArtifactCategory.WRITE_OPERATION,
            command_name(op),
            path_join(_command_dir(plan, op), f"{op.value}{s}Command.cs"),
            command_deps,
            operation=op,
        )
        validator = b.add(
            ArtifactCategory.WRITE_OPERATION,
            validator_name(op),
            path_join(_command_dir(plan, op), f"{op.value}{s}CommandValidator.cs"),
            {command.logical_name},
            operation=op,
        )
        exposed.update({command.logical_name, validator.logical_name})

    if plan.has(Operation.READ):
        b.add(
            ArtifactCategory.READ_OPERATION,
            LIST_QUERY,
            _feature_dir(plan, "Queries", f"Get{p}", f"Get{p}Query.cs"),
            {MODEL},
            operation=Operation.READ,
        )
        b.add(
            ArtifactCategory.READ_OPERATION,
            BY_ID_QUERY,
            _feature_dir(plan, "Queries", f"Get{s}ById", f"Get{s}ByIdQuery.cs"),
            {MODEL},
            operation=Operation.READ,
        )
        exposed.update({LIST_QUERY, BY_ID_QUERY})

    if plan.flags.generate_mapping_profiles:
        profile_deps = {MODEL}
        if plan.has(Operation.READ):
            profile_deps.update({LIST_QUERY, BY_ID_QUERY})
        b.add(
            ArtifactCategory.MAPPING,
            MAPPING_PROFILE,
            _feature_dir(plan, "Mapping", f"{s}MappingProfile.cs"),
            profile_deps,
        )

    endpoint_deps = set(exposed)
    if plan.flags.generate_permissions:
        endpoint_deps.add(ACCESS_CONTROL)
    b.add(
        ArtifactCategory.ENDPOINT,
        ENDPOINT,
        path_join(plan.layout.controllers_path, f"{p}Controller.cs"),
        endpoint_deps,
    )

    if plan.flags.generate_tests:
        production = [d for d in b.items if d.category in _TESTED_CATEGORIES]
        for subject in production:
            b.add(
                ArtifactCategory.TEST,
                unit_test_name(subject.logical_name),
                _test_path(plan, subject),
                {subject.logical_name},
                operation=subject.operation,
                subject=subject.logical_name,
            )

    return b.items


def _test_path(plan: GenerationPlan, subject: ArtifactDescriptor) -> str:
    stem = subject.relative_path.rsplit("/", 1)[-1].removesuffix(".cs")
    group = "Commands" if subject.category == ArtifactCategory.WRITE_OPERATION else "Queries"
    return _tests_dir(plan, group, f"{stem}Tests.cs")


# ---------------------------------------------------------------------------
# Reconciliation & ordering
# ---------------------------------------------------------------------------

def _check_unique_paths(descriptors: list[ArtifactDescriptor]) -> None:
    seen: dict[str, ArtifactDescriptor] = {}
    for descriptor in descriptors:
        other = seen.get(descriptor.relative_path)
        if other is not None and other.logical_name != descriptor.logical_name:
            raise ConflictingArtifact(
                descriptor.relative_path,
                f"both '{other.logical_name}' and '{descriptor.logical_name}' "
                "resolve to this path",
            )
        seen[descriptor.relative_path] = descriptor


def _reconcile_existing(
    plan: GenerationPlan,
    descriptors: list[ArtifactDescriptor],
    existing: Mapping[str, str],
) -> list[ArtifactDescriptor]:
    """Drop a kept model and reject overwrites of differently-generated files."""
    kept: list[ArtifactDescriptor] = []
    for descriptor in descriptors:
        found = existing.get(descriptor.relative_path)
        if found is None:
            kept.append(descriptor)
            continue

        if descriptor.logical_name == MODEL:
            if plan.regenerate_model:
                kept.append(descriptor)
            elif found == UNKNOWN_INTENT or found == descriptor.intent:
                continue  # existing model is reused as is
            else:
                raise ConflictingArtifact(
                    descriptor.relative_path,
                    f"an existing model was generated as '{found}' but this run "
                    f"would generate '{descriptor.intent}'; pass regenerate_model "
                    "to overwrite it",
                )
            continue

        if found not in (UNKNOWN_INTENT, descriptor.intent):
            raise ConflictingArtifact(
                descriptor.relative_path,
                f"existing artifact '{found}' differs from planned '{descriptor.intent}'",
            )
        kept.append(descriptor)
    return kept


def _prune_edges(descriptors: list[ArtifactDescriptor]) -> list[ArtifactDescriptor]:
    """Remove edges to descriptors that are not part of the plan."""
    present = {d.logical_name for d in descriptors}
    return [
        d if d.depends_on <= present
        else d.model_copy(update={"depends_on": d.depends_on & present})
        for d in descriptors
    ]


def order_by_dependencies(descriptors: list[ArtifactDescriptor]) -> list[ArtifactDescriptor]:
    """Stable topological sort: dependencies first, ties in input order.

    Raises:
        ValueError: If the dependency relation contains a cycle.
    """
    remaining = list(descriptors)
    placed: set[str] = set()
    ordered: list[ArtifactDescriptor] = []
    while remaining:
        for index, descriptor in enumerate(remaining):
            if descriptor.depends_on <= placed:
                ordered.append(descriptor)
                placed.add(descriptor.logical_name)
                del remaining[index]
                break
        else:
            names = ", ".join(d.logical_name for d in remaining)
            raise ValueError(f"Dependency cycle between artifacts: {names}")
    return ordered


def plan_artifacts(
    plan: GenerationPlan,
    existing: Mapping[str, str] | None = None,
) -> list[ArtifactDescriptor]:
    """Expand *plan* into dependency-ordered artifact descriptors.

    Args:
        plan: The resolved generation plan.
        existing: Relative path -> intent of generated files already on
            disk (see ``crudforge.inventory``).  ``None`` means nothing exists.

    Raises:
        ConflictingArtifact: If two descriptors, or a descriptor and an
            existing file, claim one path with different intent.
    """
    descriptors = candidate_descriptors(plan)
    _check_unique_paths(descriptors)
    if existing:
        descriptors = _reconcile_existing(plan, descriptors, existing)
    return order_by_dependencies(_prune_edges(descriptors))

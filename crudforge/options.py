"""Option resolution: merge invocation flags over configured defaults.

Produces the immutable ``GenerationPlan`` that drives every later stage.
Resolution is a pure function of its inputs and performs no I/O.
"""

from __future__ import annotations

from crudforge.config import Config
from crudforge.errors import InvalidEntityType, NoOperationSelected
from crudforge.models import (
    OPERATION_ORDER,
    EntitySpec,
    EntityTier,
    GenerationFlags,
    GenerationPlan,
    Operation,
    ResolvedOptions,
)


def determine_operations(options: ResolvedOptions) -> frozenset[Operation]:
    """Return the requested operations (all four when ``all`` is set)."""
    if options.all:
        return frozenset(OPERATION_ORDER)
    requested = {
        Operation.CREATE: options.create,
        Operation.READ: options.read,
        Operation.UPDATE: options.update,
        Operation.DELETE: options.delete,
    }
    return frozenset(op for op, wanted in requested.items() if wanted)


def resolve_tier(override: str | None, default: EntityTier) -> EntityTier:
    if override is None:
        return default
    tier = EntityTier.parse(override)
    if tier is None:
        raise InvalidEntityType(override, [t.value for t in EntityTier])
    return tier


def resolve_plan(
    entity: EntitySpec,
    options: ResolvedOptions,
    config: Config,
) -> GenerationPlan:
    """Build the generation plan for *entity*.

    Explicit options always win over configuration defaults.

    Raises:
        NoOperationSelected: If no operation flag and no ``all`` flag is set.
        InvalidEntityType: If the tier override is not a recognised tier.
    """
    operations = determine_operations(options)
    if not operations:
        raise NoOperationSelected()

    codegen = config.code_generation
    tier = resolve_tier(options.entity_type, codegen.default_entity_type)

    flags = GenerationFlags(
        generate_tests=codegen.generate_tests and not options.skip_tests,
        generate_permissions=codegen.generate_permissions and not options.skip_permissions,
        generate_events=(
            codegen.generate_events
            if options.generate_events is None
            else options.generate_events
        ),
        generate_mapping_profiles=(
            codegen.generate_mapping_profiles
            if options.generate_mapping_profiles is None
            else options.generate_mapping_profiles
        ),
    )

    return GenerationPlan(
        entity=entity,
        operations=operations,
        entity_tier=tier,
        flags=flags,
        template_id=options.template or config.templates.default_template,
        output_root=options.output_root or config.paths.root_path,
        layout=config.paths.layout(),
        regenerate_model=options.regenerate_model,
    )

"""Slot and fragment primitives for skeleton composition.

A ``Skeleton`` is one Jinja2 template file plus an ordered list of named
``Slot`` values.  Each slot collects the ``Fragment`` values whose predicate
holds for the current (plan, descriptor) pair, joins them with the slot's
separator, and wraps the result in the slot's prefix/suffix only when at
least one fragment was emitted.  An empty slot renders its ``default`` (which
is itself a template) or nothing at all.

Slots are filled in declaration order and every fragment sees the slots
filled before it, so a fragment may embed an earlier slot.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from crudforge.models import (
    ArtifactDescriptor,
    EntityTier,
    GenerationPlan,
    Operation,
)

Predicate = Callable[[GenerationPlan, ArtifactDescriptor], bool]


@dataclass(frozen=True)
class Fragment:
    """A template snippet that is emitted only when ``when`` holds."""

    source: str
    when: Predicate = field(default=lambda plan, descriptor: True)


@dataclass(frozen=True)
class Slot:
    """A named insertion point in a skeleton."""

    name: str
    fragments: tuple[Fragment, ...] = ()
    separator: str = "\n"
    prefix: str = ""
    suffix: str = ""
    default: str = ""


@dataclass(frozen=True)
class Skeleton:
    """Base template for one artifact kind and the slots it declares."""

    key: str
    template: str
    slots: tuple[Slot, ...] = ()


def fragment(source: str, when: Predicate | None = None) -> Fragment:
    """Build a fragment, trimming the surrounding newlines of *source*."""
    text = source.strip("\n")
    return Fragment(text) if when is None else Fragment(text, when)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def has_op(*operations: Operation) -> Predicate:
    """The plan requests at least one of *operations*."""
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return any(op in plan.operations for op in operations)
    return check


def lacks_op(operation: Operation) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return operation not in plan.operations
    return check


def op_is(*operations: Operation) -> Predicate:
    """The descriptor being rendered belongs to one of *operations*."""
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return descriptor.operation in operations
    return check


def tier_at_least(tier: EntityTier) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return plan.tier_at_least(tier)
    return check


def tier_below(tier: EntityTier) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return not plan.tier_at_least(tier)
    return check


def emits_events(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
    return plan.emits_events


def permissions(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
    return plan.flags.generate_permissions


def all_of(*predicates: Predicate) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return all(p(plan, descriptor) for p in predicates)
    return check


def any_of(*predicates: Predicate) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return any(p(plan, descriptor) for p in predicates)
    return check


def negate(predicate: Predicate) -> Predicate:
    def check(plan: GenerationPlan, descriptor: ArtifactDescriptor) -> bool:
        return not predicate(plan, descriptor)
    return check

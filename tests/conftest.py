"""Shared pytest fixtures for the crudforge test suite.

Provides reusable fixtures for:
- Output roots and configurations rooted in ``tmp_path``
- Resolved entity names
- A plan factory covering operations, tiers and flags
- A shared template composer
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from crudforge.composer import TemplateComposer
from crudforge.config import Config, PathsConfig
from crudforge.models import (
    OPERATION_ORDER,
    EntitySpec,
    EntityTier,
    GenerationFlags,
    GenerationPlan,
    Operation,
    ResolvedOptions,
)
from crudforge.naming import resolve_entity_name


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Empty output root for a generation run (auto-cleanup)."""
    root = tmp_path / "project"
    root.mkdir()
    yield root


@pytest.fixture
def config(output_root: Path) -> Config:
    """Default configuration rooted at ``output_root``."""
    return Config(paths=PathsConfig(root_path=output_root))


# ---------------------------------------------------------------------------
# Entities & plans
# ---------------------------------------------------------------------------

@pytest.fixture
def order_entity() -> EntitySpec:
    return resolve_entity_name("order")


PlanFactory = Callable[..., GenerationPlan]


@pytest.fixture
def make_plan(order_entity: EntitySpec, tmp_path: Path) -> PlanFactory:
    """Factory for plans; defaults to every operation, Audited, all flags on.

    Usage::

        def test_something(make_plan):
            plan = make_plan({Operation.CREATE}, tier=EntityTier.BASIC, generate_tests=False)
    """

    def _make(
        operations: Iterable[Operation] = OPERATION_ORDER,
        *,
        tier: EntityTier = EntityTier.AUDITED,
        entity: EntitySpec | None = None,
        regenerate_model: bool = False,
        **flags: bool,
    ) -> GenerationPlan:
        return GenerationPlan(
            entity=entity or order_entity,
            operations=frozenset(operations),
            entity_tier=tier,
            flags=GenerationFlags(**flags),
            output_root=tmp_path,
            regenerate_model=regenerate_model,
        )

    return _make


@pytest.fixture
def all_options() -> ResolvedOptions:
    """Options requesting every operation for ``order``."""
    return ResolvedOptions(entity_name="order", all=True)


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def composer() -> TemplateComposer:
    """Composer over the built-in templates, shared across the session."""
    return TemplateComposer()

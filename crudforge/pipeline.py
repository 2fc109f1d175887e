"""crudforge generation pipeline.

Runs the five stages for one entity:

1. NAMING   -- normalise the raw entity name.
2. OPTIONS  -- merge invocation flags over configured defaults.
3. PLAN     -- expand the plan into ordered artifact descriptors, checking
               existing generated files for conflicts.
4. COMPOSE  -- render every descriptor from its skeleton.
5. EMIT     -- write the artifacts, or project them for a dry run.

Every failure before stage 5 leaves the output tree untouched.  The pipeline
never prints; callers present the returned ``GenerationResult``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from crudforge.composer import TemplateComposer
from crudforge.config import Config
from crudforge.emitter import Emitter
from crudforge.inventory import read_existing_intents
from crudforge.models import (
    ArtifactDescriptor,
    EntitySpec,
    GenerationPlan,
    Manifest,
    PreviewTree,
    RenderedArtifact,
    ResolvedOptions,
)
from crudforge.naming import resolve_entity_name
from crudforge.options import resolve_plan
from crudforge.planner import candidate_descriptors, plan_artifacts


class GenerationResult(BaseModel):
    """Everything one invocation produced, for presentation by the caller."""

    entity: EntitySpec
    plan: GenerationPlan
    descriptors: list[ArtifactDescriptor] = Field(default_factory=list)
    artifacts: list[RenderedArtifact] = Field(default_factory=list)
    manifest: Manifest
    preview: Optional[PreviewTree] = None

    @property
    def dry_run(self) -> bool:
        return self.preview is not None


def build_plan(options: ResolvedOptions, config: Config) -> GenerationPlan:
    """Stages 1 and 2: resolve the entity name and the generation plan."""
    entity = resolve_entity_name(options.entity_name)
    return resolve_plan(entity, options, config)


def generate(
    options: ResolvedOptions,
    config: Config,
    *,
    composer: TemplateComposer | None = None,
    emitter: Emitter | None = None,
) -> GenerationResult:
    """Generate (or preview) the artifact set for one entity.

    Args:
        options: Per-invocation options.
        config: Project configuration, read once by the caller.
        composer: Override the template composer (custom template roots).
        emitter: Override the emitter.

    Raises:
        CrudForgeError: Any subclass; see ``crudforge.errors``.  Only
            ``IOFailure`` can occur after the first write.
    """
    plan = build_plan(options, config)
    root = Path(plan.output_root)

    candidates = [d.relative_path for d in candidate_descriptors(plan)]
    existing = read_existing_intents(root, candidates)
    descriptors = plan_artifacts(plan, existing)

    composer = composer or TemplateComposer(custom_templates_dir=config.custom_templates_dir)
    artifacts = composer.render_all(descriptors, plan)

    emitter = emitter or Emitter()
    if options.dry_run:
        emitted = emitter.preview(artifacts)
    else:
        emitted = emitter.materialize(artifacts, root)

    return GenerationResult(
        entity=plan.entity,
        plan=plan,
        descriptors=descriptors,
        artifacts=artifacts,
        manifest=emitted.manifest,
        preview=emitted.preview,
    )

"""Pydantic v2 models shared by every stage of the generation pipeline.

Defines the entity naming forms, the resolved generation plan, artifact
descriptors produced by the planner, rendered artifacts produced by the
composer, and the manifest returned by the emitter.  All pipeline models are
frozen: once a stage has produced a value, later stages can only read it.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    """A CRUD operation that can be requested for an entity."""
    CREATE = "Create"
    READ = "Read"
    UPDATE = "Update"
    DELETE = "Delete"


#: Canonical operation order, used everywhere a stable ordering is needed.
OPERATION_ORDER: tuple[Operation, ...] = (
    Operation.CREATE,
    Operation.READ,
    Operation.UPDATE,
    Operation.DELETE,
)

#: Operations that produce write units (command + validator) and events.
WRITE_OPERATIONS: tuple[Operation, ...] = (
    Operation.CREATE,
    Operation.UPDATE,
    Operation.DELETE,
)


class EntityTier(str, Enum):
    """Audit tier of the generated model.

    Tiers are ordered: every capability of a lower tier is present in all
    higher tiers.
    """
    BASIC = "Basic"
    AUDITED = "Audited"
    FULLY_AUDITED = "FullyAudited"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    @classmethod
    def parse(cls, value: str) -> Optional["EntityTier"]:
        """Case-insensitive lookup; returns ``None`` for unknown names."""
        wanted = value.strip().lower()
        for tier in cls:
            if tier.value.lower() == wanted:
                return tier
        return None


_TIER_RANK: dict[EntityTier, int] = {
    EntityTier.BASIC: 0,
    EntityTier.AUDITED: 1,
    EntityTier.FULLY_AUDITED: 2,
}


class ArtifactCategory(str, Enum):
    """Kind of generated artifact."""
    MODEL = "Model"
    WRITE_OPERATION = "WriteOperation"
    READ_OPERATION = "ReadOperation"
    MAPPING = "Mapping"
    ENDPOINT = "Endpoint"
    ACCESS_CONTROL = "AccessControl"
    EVENT = "Event"
    TEST = "Test"


class WriteStatus(str, Enum):
    """Outcome of emitting a single artifact."""
    WRITTEN = "written"
    FAILED = "failed"
    NOT_ATTEMPTED = "not_attempted"
    PREVIEWED = "previewed"


class EmissionMode(str, Enum):
    MATERIALIZE = "materialize"
    PREVIEW = "preview"


# ---------------------------------------------------------------------------
# Entity & plan
# ---------------------------------------------------------------------------

class EntitySpec(BaseModel):
    """Canonical name forms of the entity being generated."""

    model_config = ConfigDict(frozen=True)

    raw_name: str = Field(..., description="Name exactly as supplied by the caller")
    singular_name: str = Field(..., min_length=1, description="e.g. 'Order'")
    plural_name: str = Field(..., min_length=1, description="e.g. 'Orders'")
    camel_name: str = Field(..., min_length=1, description="e.g. 'order'")


class GenerationFlags(BaseModel):
    """Independent boolean switches that shape the artifact set."""

    model_config = ConfigDict(frozen=True)

    generate_tests: bool = True
    generate_permissions: bool = True
    generate_events: bool = True
    generate_mapping_profiles: bool = True


class LayoutPaths(BaseModel):
    """Layer roots, relative to the output root, that artifacts are placed under."""

    model_config = ConfigDict(frozen=True)

    domain_path: str = Field(default="src/Core/Domain", description="Model root")
    application_path: str = Field(default="src/Core/Application", description="Operation root")
    persistence_path: str = Field(default="src/Infra/Persistence", description="Persistence mapping root")
    controllers_path: str = Field(default="src/Apps/Api/Controllers", description="Endpoint root")
    application_tests_path: str = Field(
        default="tests/Application/ApplicationTests", description="Tests root"
    )
    permissions_dir: str = Field(
        default="PermissionsConstants",
        description="Directory under the model root that holds access-control constants",
    )


class GenerationPlan(BaseModel):
    """Fully resolved, immutable description of one generation run."""

    model_config = ConfigDict(frozen=True)

    entity: EntitySpec
    operations: frozenset[Operation] = Field(..., min_length=1)
    entity_tier: EntityTier = EntityTier.AUDITED
    flags: GenerationFlags = Field(default_factory=GenerationFlags)
    template_id: str = "clean-architecture"
    output_root: Path = Field(default=Path("."))
    layout: LayoutPaths = Field(default_factory=LayoutPaths)
    regenerate_model: bool = False

    def has(self, operation: Operation) -> bool:
        return operation in self.operations

    @property
    def ordered_operations(self) -> list[Operation]:
        """Requested operations in canonical order."""
        return [op for op in OPERATION_ORDER if op in self.operations]

    @property
    def write_operations(self) -> list[Operation]:
        return [op for op in WRITE_OPERATIONS if op in self.operations]

    @property
    def emits_events(self) -> bool:
        """Events are produced only when more than one operation is requested."""
        return self.flags.generate_events and len(self.operations) > 1

    def tier_at_least(self, tier: EntityTier) -> bool:
        return self.entity_tier.rank >= tier.rank


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

class ArtifactDescriptor(BaseModel):
    """A planned artifact: where it goes, what it is, what it depends on."""

    model_config = ConfigDict(frozen=True)

    category: ArtifactCategory
    relative_path: str = Field(..., description="POSIX path relative to the output root")
    logical_name: str = Field(..., description="Unique name inside a plan, e.g. 'create-command'")
    depends_on: frozenset[str] = Field(default_factory=frozenset)
    intent: str = Field(..., description="Fingerprint of the logical content at this path")
    operation: Optional[Operation] = Field(
        default=None, description="Operation this artifact belongs to, if any"
    )
    subject: Optional[str] = Field(
        default=None, description="Logical name of the production artifact a test covers"
    )


class RenderedArtifact(BaseModel):
    """A descriptor together with its composed text content."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    category: ArtifactCategory
    logical_name: str


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class ManifestEntry(BaseModel):
    """Emission status of a single artifact."""

    model_config = ConfigDict(frozen=True)

    category: ArtifactCategory
    relative_path: str
    status: WriteStatus
    error: str = ""


class Manifest(BaseModel):
    """Per-artifact emission report, returned as data for presentation."""

    mode: EmissionMode
    entries: list[ManifestEntry] = Field(default_factory=list)

    def _with_status(self, status: WriteStatus) -> list[ManifestEntry]:
        return [e for e in self.entries if e.status == status]

    @property
    def written(self) -> list[ManifestEntry]:
        return self._with_status(WriteStatus.WRITTEN)

    @property
    def failed(self) -> list[ManifestEntry]:
        return self._with_status(WriteStatus.FAILED)

    @property
    def pending(self) -> list[ManifestEntry]:
        return self._with_status(WriteStatus.NOT_ATTEMPTED)

    @computed_field  # type: ignore[misc]
    @property
    def ok(self) -> bool:
        """True when nothing failed and nothing was left unattempted."""
        return not self.failed and not self.pending


PreviewTree = dict[ArtifactCategory, list[RenderedArtifact]]


class EmissionResult(BaseModel):
    """What the emitter hands back: the manifest and, in preview mode, the tree."""

    manifest: Manifest
    preview: Optional[PreviewTree] = None


# ---------------------------------------------------------------------------
# Input boundary
# ---------------------------------------------------------------------------

class ResolvedOptions(BaseModel):
    """Per-invocation options as supplied by the command line layer."""

    model_config = ConfigDict(frozen=True)

    entity_name: str = ""
    all: bool = False
    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False
    entity_type: Optional[str] = Field(
        default=None, description="Tier override; falls back to the configured default"
    )
    skip_tests: bool = False
    skip_permissions: bool = False
    generate_events: Optional[bool] = Field(
        default=None, description="Explicit override of the configured events default"
    )
    generate_mapping_profiles: Optional[bool] = Field(
        default=None, description="Explicit override of the configured mapping-profile default"
    )
    template: Optional[str] = None
    output_root: Optional[Path] = None
    dry_run: bool = False
    regenerate_model: bool = False

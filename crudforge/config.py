"""crudforge project configuration.

Typed, project-level defaults for code generation.  All settings use Pydantic
v2 models so they are validated on construction and can be serialised to and
from ``crudforge.json`` or overridden from environment variables.

The configuration is read once per invocation and never mutated by the
generation pipeline.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from crudforge.models import EntityTier, LayoutPaths

CONFIG_FILENAME = "crudforge.json"


class ProjectInfo(BaseModel):
    """Descriptive metadata about the target project."""

    name: str = Field(default="")
    description: str = Field(default="")
    author: str = Field(default="")
    version: str = Field(default="1.0.0")


class PathsConfig(BaseModel):
    """Where each architectural layer lives inside the target repository.

    ``root_path`` is the output root; every other path is relative to it and
    is joined as-is, never interpreted.
    """

    root_path: Path = Field(default=Path("."))
    domain_path: str = Field(default="src/Core/Domain")
    application_path: str = Field(default="src/Core/Application")
    persistence_path: str = Field(default="src/Infra/Persistence")
    controllers_path: str = Field(default="src/Apps/Api/Controllers")
    application_tests_path: str = Field(default="tests/Application/ApplicationTests")
    permissions_dir: str = Field(default="PermissionsConstants")

    def layout(self) -> LayoutPaths:
        """Return the layer roots as a ``LayoutPaths`` value for the planner."""
        return LayoutPaths(
            domain_path=self.domain_path,
            application_path=self.application_path,
            persistence_path=self.persistence_path,
            controllers_path=self.controllers_path,
            application_tests_path=self.application_tests_path,
            permissions_dir=self.permissions_dir,
        )


class CodeGenerationConfig(BaseModel):
    """Defaults for the generation flags; command line options override them."""

    default_entity_type: EntityTier = Field(default=EntityTier.AUDITED)
    generate_events: bool = Field(default=True)
    generate_mapping_profiles: bool = Field(default=True)
    generate_permissions: bool = Field(default=True)
    generate_tests: bool = Field(default=True)

    @field_validator("default_entity_type", mode="before")
    @classmethod
    def _tier_name_any_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return EntityTier.parse(value) or value
        return value


class TemplateConfig(BaseModel):
    """Template set selection."""

    default_template: str = Field(default="clean-architecture")
    custom_templates_path: Optional[Path] = Field(
        default=None,
        description="Directory searched before the built-in templates when enabled",
    )
    enable_custom_templates: bool = Field(default=False)


class Config(BaseModel):
    """Global crudforge configuration."""

    version: str = Field(default="1.0")
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    code_generation: CodeGenerationConfig = Field(default_factory=CodeGenerationConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def custom_templates_dir(self) -> Path | None:
        """Resolved custom template directory, or ``None`` when disabled."""
        if not self.templates.enable_custom_templates or self.templates.custom_templates_path is None:
            return None
        path = self.templates.custom_templates_path
        return path if path.is_absolute() else self.paths.root_path / path

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<root_path>/crudforge.json``.

        Returns:
            The path the file was written to.
        """
        target = path or (self.paths.root_path / CONFIG_FILENAME)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration file written by :meth:`save` (or by hand)."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def discover(cls, start: Path | None = None) -> "Config":
        """Find ``crudforge.json`` in *start* or any parent directory.

        When no file is found a default configuration rooted at *start* is
        returned.  A file's relative ``root_path`` is resolved against the
        directory the file was found in.
        """
        origin = Path(start or Path.cwd()).resolve()
        for directory in (origin, *origin.parents):
            candidate = directory / CONFIG_FILENAME
            if candidate.is_file():
                config = cls.load(candidate)
                if not config.paths.root_path.is_absolute():
                    config.paths.root_path = directory / config.paths.root_path
                return config
        return cls(paths=PathsConfig(root_path=origin))

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Apply ``CRUDFORGE_*`` environment overrides on top of *base*.

        Recognised variables (all optional):
            CRUDFORGE_ROOT, CRUDFORGE_ENTITY_TYPE, CRUDFORGE_TEMPLATE,
            CRUDFORGE_GENERATE_TESTS, CRUDFORGE_GENERATE_PERMISSIONS,
            CRUDFORGE_GENERATE_EVENTS, CRUDFORGE_GENERATE_MAPPING_PROFILES.
        """
        config = (base or cls()).model_copy(deep=True)

        if os.environ.get("CRUDFORGE_ROOT"):
            config.paths.root_path = Path(os.environ["CRUDFORGE_ROOT"])
        if os.environ.get("CRUDFORGE_TEMPLATE"):
            config.templates.default_template = os.environ["CRUDFORGE_TEMPLATE"]

        codegen: dict[str, Any] = config.code_generation.model_dump()
        if os.environ.get("CRUDFORGE_ENTITY_TYPE"):
            codegen["default_entity_type"] = os.environ["CRUDFORGE_ENTITY_TYPE"]
        for flag in (
            "generate_tests",
            "generate_permissions",
            "generate_events",
            "generate_mapping_profiles",
        ):
            value = os.environ.get(f"CRUDFORGE_{flag.upper()}")
            if value:
                codegen[flag] = _parse_bool(value)
        config.code_generation = CodeGenerationConfig.model_validate(codegen)
        return config

    @classmethod
    def sample(cls) -> "Config":
        """A fully populated example configuration."""
        return cls(
            project=ProjectInfo(
                name="MyProject",
                description="A sample Clean Architecture project",
                author="Developer Name",
            ),
            paths=PathsConfig(root_path=Path("/projects/MyProject")),
            code_generation=CodeGenerationConfig(),
            templates=TemplateConfig(custom_templates_path=Path("templates")),
        )


def _parse_bool(value: str) -> bool:
    """Interpret common truthy strings (``1``, ``true``, ``yes``, ``on``)."""
    return value.strip().lower() in {"1", "true", "yes", "on"}

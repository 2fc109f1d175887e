"""Unit tests for Config and related Pydantic models (crudforge.config).

Tests cover:
- PathsConfig defaults and layout()
- CodeGenerationConfig / TemplateConfig defaults
- Config save/load, discover, from_env, sample
- custom_templates_dir resolution
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from crudforge.config import (
    CONFIG_FILENAME,
    CodeGenerationConfig,
    Config,
    PathsConfig,
    TemplateConfig,
)
from crudforge.models import EntityTier, LayoutPaths


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    @pytest.mark.unit
    def test_paths_defaults(self):
        paths = PathsConfig()
        assert paths.domain_path == "src/Core/Domain"
        assert paths.application_path == "src/Core/Application"
        assert paths.persistence_path == "src/Infra/Persistence"
        assert paths.controllers_path == "src/Apps/Api/Controllers"
        assert paths.application_tests_path == "tests/Application/ApplicationTests"
        assert paths.permissions_dir == "PermissionsConstants"

    @pytest.mark.unit
    def test_layout_matches_paths(self):
        paths = PathsConfig(domain_path="Domain")
        layout = paths.layout()
        assert isinstance(layout, LayoutPaths)
        assert layout.domain_path == "Domain"
        assert layout.controllers_path == paths.controllers_path

    @pytest.mark.unit
    def test_code_generation_defaults(self):
        codegen = CodeGenerationConfig()
        assert codegen.default_entity_type is EntityTier.AUDITED
        assert codegen.generate_events
        assert codegen.generate_mapping_profiles
        assert codegen.generate_permissions
        assert codegen.generate_tests

    @pytest.mark.unit
    def test_template_defaults(self):
        templates = TemplateConfig()
        assert templates.default_template == "clean-architecture"
        assert templates.custom_templates_path is None
        assert not templates.enable_custom_templates

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("raw", "tier"),
        [("basic", EntityTier.BASIC), ("AUDITED", EntityTier.AUDITED), (" fullyaudited ", EntityTier.FULLY_AUDITED)],
    )
    def test_entity_type_any_case(self, raw: str, tier: EntityTier):
        assert CodeGenerationConfig(default_entity_type=raw).default_entity_type is tier

    @pytest.mark.unit
    def test_invalid_entity_type_rejected(self):
        with pytest.raises(ValidationError):
            CodeGenerationConfig(default_entity_type="Premium")


# ---------------------------------------------------------------------------
# custom_templates_dir
# ---------------------------------------------------------------------------


class TestCustomTemplatesDir:
    @pytest.mark.unit
    def test_disabled_by_default(self):
        config = Config(templates=TemplateConfig(custom_templates_path=Path("templates")))
        assert config.custom_templates_dir is None

    @pytest.mark.unit
    def test_relative_to_root(self, tmp_path: Path):
        config = Config(
            paths=PathsConfig(root_path=tmp_path),
            templates=TemplateConfig(
                custom_templates_path=Path("templates"), enable_custom_templates=True
            ),
        )
        assert config.custom_templates_dir == tmp_path / "templates"

    @pytest.mark.unit
    def test_absolute_path_kept(self, tmp_path: Path):
        config = Config(
            templates=TemplateConfig(custom_templates_path=tmp_path, enable_custom_templates=True)
        )
        assert config.custom_templates_dir == tmp_path


# ---------------------------------------------------------------------------
# Config.save / Config.load / Config.discover
# ---------------------------------------------------------------------------


class TestConfigPersistence:
    @pytest.mark.unit
    def test_save_default_path(self, tmp_path: Path):
        config = Config(paths=PathsConfig(root_path=tmp_path))
        saved = config.save()
        assert saved == tmp_path / CONFIG_FILENAME
        assert json.loads(saved.read_text(encoding="utf-8"))["version"] == "1.0"

    @pytest.mark.unit
    def test_load_roundtrip(self, tmp_path: Path):
        config = Config(
            paths=PathsConfig(root_path=tmp_path, domain_path="Core/Domain"),
            code_generation=CodeGenerationConfig(
                default_entity_type=EntityTier.FULLY_AUDITED, generate_tests=False
            ),
        )
        loaded = Config.load(config.save(tmp_path / "nested" / CONFIG_FILENAME))
        assert loaded.paths.domain_path == "Core/Domain"
        assert loaded.code_generation.default_entity_type is EntityTier.FULLY_AUDITED
        assert not loaded.code_generation.generate_tests

    @pytest.mark.unit
    def test_load_accepts_lowercase_entity_type(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"code_generation": {"default_entity_type": "basic"}}), encoding="utf-8")
        assert Config.load(path).code_generation.default_entity_type is EntityTier.BASIC

    @pytest.mark.unit
    def test_discover_walks_up(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"paths": {"root_path": ".", "domain_path": "Domain"}}),
            encoding="utf-8",
        )
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        config = Config.discover(nested)
        assert config.paths.domain_path == "Domain"
        assert config.paths.root_path == tmp_path.resolve()

    @pytest.mark.unit
    def test_discover_without_file(self, tmp_path: Path):
        config = Config.discover(tmp_path)
        assert config.paths.root_path == tmp_path.resolve()
        assert config.code_generation == CodeGenerationConfig()

    @pytest.mark.unit
    def test_sample_is_populated(self):
        sample = Config.sample()
        assert sample.project.name == "MyProject"
        assert sample.templates.custom_templates_path == Path("templates")


# ---------------------------------------------------------------------------
# Config.from_env
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_root_and_template_from_env(self):
        env = {"CRUDFORGE_ROOT": "/work/project", "CRUDFORGE_TEMPLATE": "minimal"}
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.paths.root_path == Path("/work/project")
        assert config.templates.default_template == "minimal"

    @pytest.mark.unit
    def test_flags_from_env(self):
        env = {
            "CRUDFORGE_ENTITY_TYPE": "Basic",
            "CRUDFORGE_GENERATE_TESTS": "false",
            "CRUDFORGE_GENERATE_EVENTS": "0",
            "CRUDFORGE_GENERATE_PERMISSIONS": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.code_generation.default_entity_type is EntityTier.BASIC
        assert not config.code_generation.generate_tests
        assert not config.code_generation.generate_events
        assert config.code_generation.generate_permissions

    @pytest.mark.unit
    def test_lowercase_entity_type_from_env(self):
        with patch.dict(os.environ, {"CRUDFORGE_ENTITY_TYPE": "fullyaudited"}, clear=True):
            config = Config.from_env()
        assert config.code_generation.default_entity_type is EntityTier.FULLY_AUDITED

    @pytest.mark.unit
    def test_base_is_not_mutated(self):
        base = Config()
        with patch.dict(os.environ, {"CRUDFORGE_GENERATE_TESTS": "off"}, clear=True):
            config = Config.from_env(base)
        assert base.code_generation.generate_tests
        assert not config.code_generation.generate_tests

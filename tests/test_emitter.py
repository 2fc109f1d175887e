"""Tests for artifact emission (crudforge.emitter)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from crudforge.emitter import Emitter, project
from crudforge.errors import IOFailure
from crudforge.models import (
    ArtifactCategory,
    EmissionMode,
    Operation,
    RenderedArtifact,
    WriteStatus,
)
from crudforge.planner import plan_artifacts

pytestmark = pytest.mark.unit


@pytest.fixture
def artifacts(composer, make_plan) -> list[RenderedArtifact]:
    plan = make_plan({Operation.CREATE, Operation.READ})
    return composer.render_all(plan_artifacts(plan), plan)


def _artifact(path: str, category: ArtifactCategory = ArtifactCategory.MODEL) -> RenderedArtifact:
    return RenderedArtifact(path=path, content=f"// {path}\n", category=category, logical_name=path)


class TestPreview:
    def test_no_filesystem_access(self, artifacts, output_root: Path):
        result = Emitter().preview(artifacts)
        assert list(output_root.iterdir()) == []
        assert result.manifest.mode == EmissionMode.PREVIEW
        assert all(e.status == WriteStatus.PREVIEWED for e in result.manifest.entries)

    def test_tree_grouped_by_category(self, artifacts):
        tree = Emitter().preview(artifacts).preview
        assert list(tree) == [c for c in ArtifactCategory if c in tree]
        assert sum(len(items) for items in tree.values()) == len(artifacts)
        assert [a.logical_name for a in tree[ArtifactCategory.TEST]] == [
            a.logical_name for a in artifacts if a.category == ArtifactCategory.TEST
        ]

    def test_project_skips_empty_categories(self):
        tree = project([_artifact("a.cs")])
        assert list(tree) == [ArtifactCategory.MODEL]


class TestMaterialize:
    def test_writes_every_artifact(self, artifacts, output_root: Path):
        result = Emitter().materialize(artifacts, output_root)
        assert result.preview is None
        assert result.manifest.ok
        assert len(result.manifest.written) == len(artifacts)
        for artifact in artifacts:
            assert (output_root / artifact.path).read_text(encoding="utf-8") == artifact.content

    def test_preview_matches_materialize(self, artifacts, output_root: Path):
        preview = Emitter().preview(artifacts).manifest
        written = Emitter().materialize(artifacts, output_root).manifest
        assert [(e.relative_path, e.category) for e in preview.entries] == [
            (e.relative_path, e.category) for e in written.entries
        ]

    def test_overwrites_existing_files(self, output_root: Path):
        target = output_root / "a.cs"
        target.write_text("old\n", encoding="utf-8")
        Emitter().materialize([_artifact("a.cs")], output_root)
        assert target.read_text(encoding="utf-8") == "// a.cs\n"

    def test_partial_manifest_on_failure(self, output_root: Path):
        items = [_artifact("one.cs"), _artifact("two.cs"), _artifact("three.cs")]
        real_open = Path.open

        def failing_open(self, *args, **kwargs):
            if self.name == "two.cs":
                raise PermissionError("read-only file system")
            return real_open(self, *args, **kwargs)

        with patch.object(Path, "open", failing_open):
            with pytest.raises(IOFailure) as info:
                Emitter().materialize(items, output_root)

        failure = info.value
        assert failure.path == "two.cs"
        assert isinstance(failure.cause, PermissionError)
        statuses = [e.status for e in failure.manifest.entries]
        assert statuses == [WriteStatus.WRITTEN, WriteStatus.FAILED, WriteStatus.NOT_ATTEMPTED]
        assert "read-only" in failure.manifest.entries[1].error
        assert not failure.manifest.ok
        assert (output_root / "one.cs").exists()
        assert not (output_root / "three.cs").exists()

    def test_directory_creation_failure(self, output_root: Path):
        blocker = output_root / "src"
        blocker.write_text("not a directory\n", encoding="utf-8")
        with pytest.raises(IOFailure) as info:
            Emitter().materialize([_artifact("src/Domain/A.cs")], output_root)
        assert info.value.manifest.entries[0].status == WriteStatus.FAILED

"""Artifact emission: write rendered artifacts, or project them for preview.

Both modes walk the same ordered artifact list and build the same
per-category projection, so a dry run shows exactly the files and contents a
real run would write.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from crudforge.errors import IOFailure
from crudforge.models import (
    ArtifactCategory,
    EmissionMode,
    EmissionResult,
    Manifest,
    ManifestEntry,
    PreviewTree,
    RenderedArtifact,
    WriteStatus,
)


def project(artifacts: Sequence[RenderedArtifact]) -> PreviewTree:
    """Group *artifacts* by category, in category order, keeping artifact order."""
    tree: PreviewTree = {}
    for category in ArtifactCategory:
        members = [a for a in artifacts if a.category == category]
        if members:
            tree[category] = members
    return tree


class Emitter:
    """Writes rendered artifacts under an output root."""

    def preview(self, artifacts: Sequence[RenderedArtifact]) -> EmissionResult:
        """Return the preview tree without touching the filesystem."""
        manifest = Manifest(
            mode=EmissionMode.PREVIEW,
            entries=[
                ManifestEntry(
                    category=a.category,
                    relative_path=a.path,
                    status=WriteStatus.PREVIEWED,
                )
                for a in artifacts
            ],
        )
        return EmissionResult(manifest=manifest, preview=project(artifacts))

    def materialize(
        self,
        artifacts: Sequence[RenderedArtifact],
        root: str | Path,
    ) -> EmissionResult:
        """Write every artifact under *root*, in order.

        Existing files at planned paths are overwritten.  Writing stops at the
        first failure.

        Raises:
            IOFailure: If a directory or file cannot be written.  Its
                ``manifest`` marks earlier artifacts written, the failing one
                failed and the remainder not attempted.
        """
        base = Path(root)
        entries: list[ManifestEntry] = []
        for index, artifact in enumerate(artifacts):
            try:
                _write_file(base / artifact.path, artifact.content)
            except OSError as exc:
                entries.append(
                    ManifestEntry(
                        category=artifact.category,
                        relative_path=artifact.path,
                        status=WriteStatus.FAILED,
                        error=str(exc),
                    )
                )
                entries.extend(
                    ManifestEntry(
                        category=rest.category,
                        relative_path=rest.path,
                        status=WriteStatus.NOT_ATTEMPTED,
                    )
                    for rest in artifacts[index + 1:]
                )
                manifest = Manifest(mode=EmissionMode.MATERIALIZE, entries=entries)
                raise IOFailure(artifact.path, exc, manifest) from exc

            entries.append(
                ManifestEntry(
                    category=artifact.category,
                    relative_path=artifact.path,
                    status=WriteStatus.WRITTEN,
                )
            )

        return EmissionResult(
            manifest=Manifest(mode=EmissionMode.MATERIALIZE, entries=entries)
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write content with LF line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)

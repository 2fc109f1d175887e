"""Error taxonomy for the entity generation pipeline.

Every failure the pipeline can report is a subclass of ``CrudForgeError``.
All kinds except ``IOFailure`` are raised during naming, option resolution,
planning or composition, before anything touches the filesystem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crudforge.models import Manifest


class CrudForgeError(Exception):
    """Base class for all errors surfaced by the generator."""

    kind: str = "CrudForgeError"


class InvalidArgument(CrudForgeError):
    """Raised when the raw entity name is empty or not a valid identifier."""

    kind = "InvalidArgument"


class NoOperationSelected(CrudForgeError):
    """Raised when neither an operation flag nor ``all`` was requested."""

    kind = "NoOperationSelected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "No operations specified. Use --all or specify individual "
            "operations (--create, --read, --update, --delete)"
        )


class InvalidEntityType(CrudForgeError):
    """Raised when the entity tier override is not a recognised tier."""

    kind = "InvalidEntityType"

    def __init__(self, value: str, allowed: list[str]) -> None:
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid entity type '{value}'. Expected one of: {', '.join(allowed)}"
        )


class ConflictingArtifact(CrudForgeError):
    """Raised when two artifacts with different intent claim the same path."""

    kind = "ConflictingArtifact"

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class UnknownTemplate(CrudForgeError):
    """Raised when the requested template set cannot be found."""

    kind = "UnknownTemplate"


class TemplateCompositionError(CrudForgeError):
    """Raised when a composed artifact is not well formed."""

    kind = "TemplateCompositionError"


class IOFailure(CrudForgeError):
    """Raised when writing an artifact (or creating its directory) fails.

    The ``manifest`` attribute records, per artifact, whether it was already
    written, is the one that failed, or was never attempted.
    """

    kind = "IOFailure"

    def __init__(self, path: str, cause: BaseException, manifest: "Manifest") -> None:
        self.path = path
        self.cause = cause
        self.manifest = manifest
        super().__init__(f"Failed to write {path}: {cause}")

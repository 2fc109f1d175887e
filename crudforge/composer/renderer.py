"""Jinja2 template rendering for artifact skeletons.

Provides the TemplateRenderer class which loads ``.j2`` skeletons from the
built-in ``crudforge/templates/`` directory, optionally shadowed by a
project-level custom template directory, and renders them with the artifact
context.  Inline fragment sources are compiled once and cached.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    select_autoescape,
)

from crudforge.errors import UnknownTemplate


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 skeletons and fragments.

    Template sets are subdirectories of a template root (for example
    ``clean-architecture/``).  When *custom_dir* is given it is searched
    first, so a project can override individual skeletons while inheriting
    the rest.  Undefined variables raise instead of rendering as empty text.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        custom_dir: str | Path | None = None,
    ) -> None:
        self.template_dir = Path(template_dir or _DEFAULT_TEMPLATE_DIR)
        self.custom_dir = Path(custom_dir) if custom_dir else None

        roots = [self.template_dir]
        if self.custom_dir is not None:
            roots.insert(0, self.custom_dir)
        self.search_path = roots

        self.env = Environment(
            loader=ChoiceLoader([FileSystemLoader(str(root)) for root in roots]),
            autoescape=select_autoescape([], default_for_string=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["namespace"] = _namespace_filter
        self._compiled: dict[str, Template] = {}

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a skeleton file, e.g. ``"clean-architecture/model.cs.j2"``."""
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline fragment source with the provided context."""
        template = self._compiled.get(template_string)
        if template is None:
            template = self.env.from_string(template_string)
            self._compiled[template_string] = template
        return template.render(**context)

    # -- Template sets -----------------------------------------------------

    def has_template_set(self, template_id: str) -> bool:
        return any((root / template_id).is_dir() for root in self.search_path)

    def require_template_set(self, template_id: str) -> None:
        """Raise ``UnknownTemplate`` unless *template_id* exists in a search root."""
        if not self.has_template_set(template_id):
            searched = ", ".join(str(root) for root in self.search_path)
            raise UnknownTemplate(
                f"Template '{template_id}' not found (searched: {searched})"
            )

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to their template root; a custom template that
        shadows a built-in one is listed once.
        """
        found: set[str] = set()
        for root in self.search_path:
            search_dir = root / prefix if prefix else root
            if not search_dir.is_dir():
                continue
            found.update(
                p.relative_to(root).as_posix() for p in search_dir.rglob("*.j2")
            )
        return sorted(found)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _namespace_filter(value: str) -> str:
    """Convert a relative directory such as ``Auth/Permissions`` to ``Auth.Permissions``."""
    parts = [part for part in value.replace("\\", "/").split("/") if part]
    return ".".join(parts)

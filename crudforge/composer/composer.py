"""Template composition: turn artifact descriptors into text.

``TemplateComposer`` selects the skeleton for a descriptor, fills each slot
from the fragments whose predicates hold for the plan, renders the skeleton,
normalises whitespace and rejects output that is not well formed.  Rendering
never touches the output tree; it only reads template files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import TemplateError, TemplateNotFound

from crudforge.composer.fragments import SKELETONS, skeleton_key
from crudforge.composer.renderer import TemplateRenderer
from crudforge.composer.slots import Skeleton, Slot
from crudforge.errors import TemplateCompositionError, UnknownTemplate
from crudforge.models import (
    ArtifactDescriptor,
    GenerationPlan,
    Operation,
    RenderedArtifact,
)
from crudforge.planner import event_class_suffix

#: First line of every generated artifact; the inventory reads it back.
HEADER_TEMPLATE = '// <auto-generated by="crudforge" intent="{intent}" />'

_RESULT_TYPES: dict[Operation, str] = {
    Operation.CREATE: "Guid",
    Operation.UPDATE: "Unit",
    Operation.DELETE: "Unit",
}

_LEFTOVER_MARKUP = ("{{", "}}", "{%", "%}", "{#", "#}")
_DANGLING_SEPARATOR = re.compile(r",\s*[)\]>]|[(\[<]\s*,|,\s*,")
_EMPTY_REGION = re.compile(r"#region[^\n]*\n\s*#endregion")
_ESCAPED_ENTITY = re.compile(r"&(?:lt|gt|amp|quot|#34|#39|#x27);")
_PAIRS = {"{": "}", "(": ")", "[": "]"}


class TemplateComposer:
    """Renders descriptors of a plan into ``RenderedArtifact`` values.

    Args:
        custom_templates_dir: Optional directory searched before the built-in
            templates; a template set found there shadows the built-in one
            file by file.
        renderer: Inject a preconfigured renderer (mainly for tests).
    """

    def __init__(
        self,
        custom_templates_dir: str | Path | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer(custom_dir=custom_templates_dir)
        self.skeletons: dict[str, Skeleton] = dict(SKELETONS)

    # -- Public API --------------------------------------------------------

    def render(self, descriptor: ArtifactDescriptor, plan: GenerationPlan) -> RenderedArtifact:
        """Compose one artifact.

        Raises:
            UnknownTemplate: If the plan's template set or the descriptor's
                skeleton cannot be found.
            TemplateCompositionError: If the composed text is not well formed.
        """
        self.renderer.require_template_set(plan.template_id)
        key = skeleton_key(descriptor)
        skeleton = self.skeletons.get(key)
        if skeleton is None:
            raise UnknownTemplate(
                f"Template '{plan.template_id}' has no skeleton for '{descriptor.logical_name}'"
            )

        context = self._context(descriptor, plan)
        template_path = f"{plan.template_id}/{skeleton.template}"
        try:
            context["slots"] = self._fill_slots(skeleton, context)
            body = self.renderer.render(template_path, context)
        except TemplateError as exc:
            if isinstance(exc, TemplateNotFound):
                raise UnknownTemplate(
                    f"Template '{plan.template_id}' is missing '{skeleton.template}'"
                ) from exc
            raise TemplateCompositionError(
                f"{descriptor.relative_path}: failed to render '{skeleton.template}': {exc}"
            ) from exc

        header = HEADER_TEMPLATE.format(intent=descriptor.intent)
        content = normalize_whitespace(f"{header}\n{body}")
        check_well_formed(content, descriptor.relative_path)

        return RenderedArtifact(
            path=descriptor.relative_path,
            content=content,
            category=descriptor.category,
            logical_name=descriptor.logical_name,
        )

    def render_all(
        self,
        descriptors: Iterable[ArtifactDescriptor],
        plan: GenerationPlan,
    ) -> list[RenderedArtifact]:
        """Compose every descriptor, preserving order.  Fails on the first error."""
        return [self.render(descriptor, plan) for descriptor in descriptors]

    # -- Internals ---------------------------------------------------------

    def _context(self, descriptor: ArtifactDescriptor, plan: GenerationPlan) -> dict[str, Any]:
        entity = plan.entity
        op = descriptor.operation
        return {
            "singular": entity.singular_name,
            "plural": entity.plural_name,
            "camel": entity.camel_name,
            "plan": plan,
            "descriptor": descriptor,
            "layout": plan.layout,
            "Op": op.value if op else "",
            "event": event_class_suffix(op) if op in _RESULT_TYPES else "",
            "result_type": _RESULT_TYPES.get(op, ""),
            "dto_owner": "Create" if plan.has(Operation.CREATE) else "Update",
        }

    def _fill_slots(self, skeleton: Skeleton, context: dict[str, Any]) -> dict[str, str]:
        plan: GenerationPlan = context["plan"]
        descriptor: ArtifactDescriptor = context["descriptor"]
        filled: dict[str, str] = {}
        for slot in skeleton.slots:
            scope = {**context, "slots": filled}
            filled[slot.name] = self._fill_slot(slot, plan, descriptor, scope)
        return filled

    def _fill_slot(
        self,
        slot: Slot,
        plan: GenerationPlan,
        descriptor: ArtifactDescriptor,
        scope: dict[str, Any],
    ) -> str:
        parts = [
            self.renderer.render_string(f.source, scope)
            for f in slot.fragments
            if f.when(plan, descriptor)
        ]
        parts = [p for p in parts if p.strip()]
        if not parts:
            return self.renderer.render_string(slot.default, scope) if slot.default else ""
        return f"{slot.prefix}{slot.separator.join(parts)}{slot.suffix}"


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------

def normalize_whitespace(text: str) -> str:
    """Canonical layout for composed text.

    Trailing whitespace is stripped, runs of blank lines collapse to one,
    blank lines directly inside a ``{ ... }`` block are removed, and the text
    ends with exactly one newline.
    """
    lines = [line.rstrip() for line in text.replace("\r\n", "\n").split("\n")]

    out: list[str] = []
    for line in lines:
        if not line:
            if not out or not out[-1] or out[-1].endswith("{"):
                continue
            out.append(line)
            continue
        if line.lstrip().startswith("}") and out and not out[-1]:
            out.pop()
        out.append(line)

    while out and not out[-1]:
        out.pop()
    return "\n".join(out) + "\n"


def check_well_formed(text: str, path: str = "<artifact>") -> None:
    """Reject composed text with leftover markup or broken structure.

    Raises:
        TemplateCompositionError: On unresolved template markup, HTML-escaped
            characters, a dangling list separator, an empty ``#region`` or
            unbalanced brackets.
    """
    for token in _LEFTOVER_MARKUP:
        if token in text:
            raise TemplateCompositionError(f"{path}: unresolved template markup '{token}'")

    escaped = _ESCAPED_ENTITY.search(text)
    if escaped:
        raise TemplateCompositionError(f"{path}: markup-escaped text {escaped.group(0)!r}")

    match = _DANGLING_SEPARATOR.search(text)
    if match:
        raise TemplateCompositionError(
            f"{path}: dangling separator near {match.group(0)!r}"
        )

    if _EMPTY_REGION.search(text):
        raise TemplateCompositionError(f"{path}: empty #region block")

    stack: list[str] = []
    closers = {v: k for k, v in _PAIRS.items()}
    for line_no, line in enumerate(text.split("\n"), start=1):
        for char in _strip_literals(line):
            if char in _PAIRS:
                stack.append(char)
            elif char in closers:
                if not stack or stack[-1] != closers[char]:
                    raise TemplateCompositionError(
                        f"{path}:{line_no}: unbalanced '{char}'"
                    )
                stack.pop()
    if stack:
        raise TemplateCompositionError(f"{path}: unclosed '{stack[-1]}'")


def _strip_literals(line: str) -> str:
    """Drop ``//`` comments and the contents of string literals from a line."""
    stripped = re.sub(r'"(?:[^"\\]|\\.)*"', '""', line)
    comment = stripped.find("//")
    return stripped if comment < 0 else stripped[:comment]
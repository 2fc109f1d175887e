"""Skeleton and fragment based composition of generated artifacts."""

from crudforge.composer.composer import (
    HEADER_TEMPLATE,
    TemplateComposer,
    check_well_formed,
    normalize_whitespace,
)
from crudforge.composer.renderer import TemplateRenderer

__all__ = [
    "HEADER_TEMPLATE",
    "TemplateComposer",
    "TemplateRenderer",
    "check_well_formed",
    "normalize_whitespace",
]

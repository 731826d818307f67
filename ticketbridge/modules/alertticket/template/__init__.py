"""Template rendering for ticket fields."""

from .defaults import DEFAULT_DESCRIPTION, DEFAULT_SUMMARY, DEFAULT_TEMPLATES
from .renderer import TemplateSet, has_template_syntax
from .values import render_fields, render_value

__all__ = [
    "DEFAULT_DESCRIPTION",
    "DEFAULT_SUMMARY",
    "DEFAULT_TEMPLATES",
    "TemplateSet",
    "has_template_syntax",
    "render_fields",
    "render_value",
]

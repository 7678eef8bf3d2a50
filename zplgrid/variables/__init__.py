"""Placeholder extraction for template documents."""

from .lib import (
    TEMPLATE_MACROS,
    TemplateVariables,
    element_placeholders,
    extract_placeholders,
    extract_template_variables,
)

__all__ = [
    "TEMPLATE_MACROS",
    "TemplateVariables",
    "extract_placeholders",
    "element_placeholders",
    "extract_template_variables",
]

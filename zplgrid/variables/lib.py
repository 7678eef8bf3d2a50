"""Placeholder extraction.

Text elements (`text`) and 2D codes (`data`) may contain `{name}`
placeholders. Doubled braces (`{{` and `}}`) are literal braces and are
removed before scanning, so they never produce a placeholder. Names that
belong to the reserved macro set are filled in by the renderer; every
other name must be supplied by the user.
"""

import re
from dataclasses import dataclass, field

from zplgrid.ids import list_nodes
from zplgrid.schema import DataMatrixElement, Element, LeafNode, QrElement, TemplateDoc, TextElement

TEMPLATE_MACROS: frozenset[str] = frozenset(
    {
        "_now_iso",
        "_date_yyyy_mm_dd",
        "_date_dd_mm_yyyy",
        "_time_hh_mm",
        "_time_hh_mm_ss",
        "_timestamp_ms",
        "_uuid",
        "_short_id",
        "_printer_id",
        "_template_name",
        "_counter_global",
        "_counter_daily",
        "_counter_printer",
        "_counter_printer_daily",
        "_counter_template",
        "_counter_template_daily",
    }
)

_PLACEHOLDER_RE = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


@dataclass(frozen=True)
class TemplateVariables:
    """Placeholders used by a template.

    Attributes:
        variables: User-supplied names, sorted.
        macros: Reserved macro names, sorted.
    """

    variables: list[str] = field(default_factory=list)
    macros: list[str] = field(default_factory=list)


def extract_placeholders(text: str) -> list[str]:
    """List placeholder names in a string, in order of appearance.

    Example:
        >>> extract_placeholders("{{literal}} {sku}-{lot}")
        ['sku', 'lot']
    """
    cleaned = text.replace("{{", "").replace("}}", "")
    return _PLACEHOLDER_RE.findall(cleaned)


def element_placeholders(element: Element) -> list[str]:
    """Placeholder names of the templated field of an element, if it has one."""
    if isinstance(element, TextElement):
        return extract_placeholders(element.text)
    if isinstance(element, (QrElement, DataMatrixElement)):
        return extract_placeholders(element.data)
    return []


def extract_template_variables(doc: TemplateDoc) -> TemplateVariables:
    """Collect the placeholders of every leaf, split into variables and macros.

    Args:
        doc: Template document.

    Returns:
        TemplateVariables: Deduplicated, sorted user variables and macros.
    """
    names: set[str] = set()
    for entry in list_nodes(doc.layout):
        if isinstance(entry.node, LeafNode):
            names.update(element_placeholders(entry.node.element))

    return TemplateVariables(
        variables=sorted(names - TEMPLATE_MACROS),
        macros=sorted(names & TEMPLATE_MACROS),
    )


__all__ = [
    "TEMPLATE_MACROS",
    "TemplateVariables",
    "extract_placeholders",
    "element_placeholders",
    "extract_template_variables",
]

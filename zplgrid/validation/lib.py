"""Template validation and static analysis.

This module validates template documents in two passes:
    - Shape: pydantic parses the value into a TemplateDoc. Failures are
      reported per field and no document is returned.
    - Semantics: independent rule functions run over one walk of the tree
      and report cross-field problems next to the parsed document.

Validation never raises. Semantic issues are advisory: a document that
carries them stays editable and exportable, it is only unfit to send to
a renderer.
"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from zplgrid.schema import (
    BUILTIN_DEFAULTS,
    DEFAULT_DIVIDER_THICKNESS_MM,
    LeafNode,
    Node,
    QrElement,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    TextElement,
    TextFit,
    TextWrap,
    resolve,
)

logger = logging.getLogger(__name__)

ROOT_PATH = "$"

_FITS_NEEDING_WRAP = frozenset(
    {TextFit.WRAP.value, TextFit.TRUNCATE.value, TextFit.SHRINK_TO_FIT.value}
)


@dataclass
class ValidationIssue:
    """A single problem found in a template document.

    Attributes:
        path: Dotted path to the offending field ("$" for the document root).
        message: Human-readable description.
        issue_type: Category of the issue.
    """

    path: str
    message: str
    issue_type: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating a template document.

    Attributes:
        doc: The parsed document, or None when the value is not shape-valid.
        issues: Shape errors (when doc is None) or semantic issues.
    """

    doc: TemplateDoc | None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the value parsed into a document."""
        return self.doc is not None

    @property
    def is_renderable(self) -> bool:
        """True when the document parsed and has no issues at all."""
        return self.ok and not self.issues

    @property
    def messages(self) -> list[str]:
        """Issues formatted as `path: message` strings."""
        return [str(issue) for issue in self.issues]


# === TREE WALK ===


def iter_node_paths(root: Node, base: str = "layout") -> Iterator[tuple[str, Node]]:
    """Yield `(path, node)` pairs in pre-order.

    Paths use the document's field names, e.g. `layout.children.0`.
    """
    yield base, root
    if isinstance(root, SplitNode):
        yield from iter_node_paths(root.children[0], f"{base}.children.0")
        yield from iter_node_paths(root.children[1], f"{base}.children.1")


# === RULES ===


def check_fit_wrap(fit: str | None, wrap: str | None, path: str) -> list[ValidationIssue]:
    """Check one fit/wrap pair. A missing value never triggers a rule.

    Args:
        fit: Text fit mode, or None.
        wrap: Text wrap mode, or None.
        path: Path of the object holding both fields.

    Returns:
        One issue per offending field.
    """
    issues: list[ValidationIssue] = []
    if fit == TextFit.OVERFLOW.value and wrap is not None and wrap != TextWrap.NONE.value:
        issues.append(
            ValidationIssue(
                path=f"{path}.wrap",
                message="wrap must be none when fit is overflow",
                issue_type="text_fit_wrap",
            )
        )
    if fit in _FITS_NEEDING_WRAP and wrap == TextWrap.NONE.value:
        issues.append(
            ValidationIssue(
                path=f"{path}.wrap",
                message="wrap must be word or char when fit is wrap, truncate, or shrink_to_fit",
                issue_type="text_fit_wrap",
            )
        )
    if wrap == TextWrap.NONE.value and fit is not None and fit != TextFit.OVERFLOW.value:
        issues.append(
            ValidationIssue(
                path=f"{path}.fit",
                message="fit must be overflow when wrap is none",
                issue_type="text_fit_wrap",
            )
        )
    return issues


def check_text_element(
    element: TextElement, path: str, defaults: TemplateDefaults | None
) -> list[ValidationIssue]:
    """Check the effective fit/wrap combination of a text element.

    Only elements that set `fit` or `wrap` themselves are checked; the
    other value is inherited through the defaults before the check.
    """
    if element.fit is None and element.wrap is None:
        return []

    text_defaults = defaults.text if defaults else None
    fit = resolve(
        element.fit,
        text_defaults.fit if text_defaults else None,
        BUILTIN_DEFAULTS.text.fit,
    )
    wrap = resolve(
        element.wrap,
        text_defaults.wrap if text_defaults else None,
        BUILTIN_DEFAULTS.text.wrap,
    )
    return check_fit_wrap(fit, wrap, path)


def check_text_defaults(defaults: TemplateDefaults | None) -> list[ValidationIssue]:
    """Check the raw fit/wrap pair of the template text defaults."""
    if defaults is None or defaults.text is None:
        return []
    return check_fit_wrap(defaults.text.fit, defaults.text.wrap, "defaults.text")


def check_qr_modes(element: QrElement, path: str) -> list[ValidationIssue]:
    """Check the pairing of QR input mode and character mode."""
    issues: list[ValidationIssue] = []
    if element.input_mode == "M" and element.character_mode is None:
        issues.append(
            ValidationIssue(
                path=f"{path}.character_mode",
                message="character_mode is required when input_mode is M",
                issue_type="qr_mode",
            )
        )
    if element.character_mode is not None and element.input_mode != "M":
        issues.append(
            ValidationIssue(
                path=f"{path}.input_mode",
                message="input_mode must be M when character_mode is set",
                issue_type="qr_mode",
            )
        )
    return issues


def check_divider_gutter(split: SplitNode, path: str) -> list[ValidationIssue]:
    """A visible divider must fit inside the split's gutter."""
    divider = split.divider
    if divider is None or not divider.visible:
        return []

    gutter = split.gutter_mm or 0.0
    thickness = resolve(divider.thickness_mm, None, DEFAULT_DIVIDER_THICKNESS_MM)
    if gutter < thickness:
        return [
            ValidationIssue(
                path=f"{path}.divider",
                message="gutter_mm must be >= divider.thickness_mm when divider is visible",
                issue_type="divider_gutter",
            )
        ]
    return []


def check_alias_unique(nodes: list[tuple[str, Node]]) -> list[ValidationIssue]:
    """Report every repeated alias. The first occurrence is accepted."""
    issues: list[ValidationIssue] = []
    seen: set[str] = set()
    for path, node in nodes:
        if not node.alias:
            continue
        if node.alias in seen:
            issues.append(
                ValidationIssue(
                    path=f"{path}.alias",
                    message=f"Duplicate alias: {node.alias}",
                    issue_type="duplicate_alias",
                )
            )
        else:
            seen.add(node.alias)
    return issues


def check_template(doc: TemplateDoc) -> list[ValidationIssue]:
    """Run every semantic rule over a parsed document.

    Args:
        doc: A shape-valid document.

    Returns:
        list[ValidationIssue]: Issues in tree order (empty if valid).
    """
    nodes = list(iter_node_paths(doc.layout))

    issues = check_text_defaults(doc.defaults)
    issues.extend(check_alias_unique(nodes))

    for path, node in nodes:
        if isinstance(node, SplitNode):
            issues.extend(check_divider_gutter(node, path))
        elif isinstance(node, LeafNode):
            element = node.element
            element_path = f"{path}.elements.0"
            if isinstance(element, TextElement):
                issues.extend(check_text_element(element, element_path, doc.defaults))
            elif isinstance(element, QrElement):
                issues.extend(check_qr_modes(element, element_path))

    return issues


# === ENTRY POINTS ===


def _format_loc(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or ROOT_PATH


def validate_template(value: Any) -> ValidationResult:
    """Validate a JSON-shaped value (or an existing document).

    Args:
        value: Parsed JSON data, or a TemplateDoc.

    Returns:
        ValidationResult: The document and its semantic issues, or no
        document and the shape errors.

    Example:
        >>> result = validate_template({"schema_version": 1, "layout": leaf})
        >>> if not result.ok:
        ...     print("\\n".join(result.messages))
    """
    if isinstance(value, TemplateDoc):
        doc = value
    else:
        try:
            doc = TemplateDoc.model_validate(value)
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    path=_format_loc(err["loc"]),
                    message=err["msg"],
                    issue_type="shape",
                )
                for err in e.errors()
            ]
            logger.debug(f"Template rejected with {len(issues)} shape error(s)")
            return ValidationResult(doc=None, issues=issues)

    issues = check_template(doc)
    if issues:
        logger.debug(f"Template parsed with {len(issues)} semantic issue(s)")
    return ValidationResult(doc=doc, issues=issues)


def parse_template_json(text: str) -> ValidationResult:
    """Parse and validate JSON text.

    Malformed JSON is reported as a shape error at the document root.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return ValidationResult(
            doc=None,
            issues=[
                ValidationIssue(
                    path=ROOT_PATH,
                    message=f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
                    issue_type="invalid_json",
                )
            ],
        )
    return validate_template(data)


def is_valid(value: Any) -> bool:
    """Check if a value is a shape-valid document with no issues.

    Example:
        >>> if is_valid(doc):
        ...     send_to_renderer(doc)
    """
    return validate_template(value).is_renderable


__all__ = [
    "ROOT_PATH",
    "ValidationIssue",
    "ValidationResult",
    "iter_node_paths",
    "check_fit_wrap",
    "check_text_element",
    "check_text_defaults",
    "check_qr_modes",
    "check_divider_gutter",
    "check_alias_unique",
    "check_template",
    "validate_template",
    "parse_template_json",
    "is_valid",
]

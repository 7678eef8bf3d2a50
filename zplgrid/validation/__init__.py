"""Template validation utilities."""

from .lib import (
    ROOT_PATH,
    ValidationIssue,
    ValidationResult,
    check_alias_unique,
    check_divider_gutter,
    check_fit_wrap,
    check_qr_modes,
    check_template,
    check_text_defaults,
    check_text_element,
    is_valid,
    iter_node_paths,
    parse_template_json,
    validate_template,
)

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

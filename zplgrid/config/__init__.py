"""Centralized configuration management for zplgrid.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from zplgrid.config import EnvVar, get_environment
    >>>
    >>> width = get_environment(EnvVar.LABEL_WIDTH_MM)  # Returns float: 74.0
    >>> dpi = get_environment(EnvVar.DPI, override=300)
    >>>
    >>> for var in list_environment_variables("preview"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    preview: Physical label size and printer resolution
    editor: Canvas scale and ratio snapping
    logging: CLI log level
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_preview_target,
    get_scale_px_per_mm,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_preview_target",
    "get_scale_px_per_mm",
    # Introspection
    "list_environment_variables",
]

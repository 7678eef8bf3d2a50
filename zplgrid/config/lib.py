"""Centralized environment configuration management for zplgrid.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from zplgrid.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> dpi = get_environment(EnvVar.DPI)  # Returns int
    >>> scale = get_environment(EnvVar.SCALE_PX_PER_MM)  # Returns float
    >>>
    >>> # Override at runtime
    >>> dpi = get_environment(EnvVar.DPI, override=300)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "ZPLGRID_DPI").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by zplgrid.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - preview: Physical label size used for geometry
        - editor: Interactive editing behaviour
        - logging: Log output
    """

    # -------------------------------------------------------------------------
    # Label Preview Target
    # -------------------------------------------------------------------------
    LABEL_WIDTH_MM = EnvConfig(
        name="ZPLGRID_LABEL_WIDTH_MM",
        default=74.0,
        var_type=float,
        description="Physical label width in millimetres",
        category="preview",
    )
    LABEL_HEIGHT_MM = EnvConfig(
        name="ZPLGRID_LABEL_HEIGHT_MM",
        default=26.0,
        var_type=float,
        description="Physical label height in millimetres",
        category="preview",
    )
    DPI = EnvConfig(
        name="ZPLGRID_DPI",
        default=203,
        var_type=int,
        description="Printer resolution in dots per inch",
        category="preview",
    )

    # -------------------------------------------------------------------------
    # Editor Settings
    # -------------------------------------------------------------------------
    SCALE_PX_PER_MM = EnvConfig(
        name="ZPLGRID_SCALE_PX_PER_MM",
        default=8.0,
        var_type=float,
        description="Canvas pixels per millimetre for geometry resolution",
        category="editor",
    )
    SNAP_PERCENT_STEP = EnvConfig(
        name="ZPLGRID_SNAP_PERCENT_STEP",
        default=5,
        var_type=int,
        description="Ratio snapping step in percent while dragging dividers",
        category="editor",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="ZPLGRID_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.

    Example:
        >>> get_environment(EnvVar.DPI)
        203
        >>> get_environment(EnvVar.DPI, override=300)
        300
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_preview_target() -> dict[str, float | int]:
    """Get the configured physical label target.

    Width and height are floored at 1 mm and the resolution at 1 dpi.

    Returns:
        Dict with "width_mm", "height_mm" and "dpi".
    """
    return {
        "width_mm": max(1.0, get_environment(EnvVar.LABEL_WIDTH_MM)),
        "height_mm": max(1.0, get_environment(EnvVar.LABEL_HEIGHT_MM)),
        "dpi": max(1, get_environment(EnvVar.DPI)),
    }


def get_scale_px_per_mm(override: float | None = None) -> float:
    """Get canvas scale in pixels per millimetre."""
    return get_environment(EnvVar.SCALE_PX_PER_MM, override=override)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (preview, editor, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


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

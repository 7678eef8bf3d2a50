"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_preview_target,
    get_scale_px_per_mm,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("ZPLGRID_DPI", raising=False)
        assert get_environment(EnvVar.DPI) == 203

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("ZPLGRID_DPI", "600")
        assert get_environment(EnvVar.DPI, override=300) == 300

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("ZPLGRID_DPI", "300")
        result = get_environment(EnvVar.DPI)
        assert result == 300
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("ZPLGRID_LABEL_WIDTH_MM", "101.6")
        result = get_environment(EnvVar.LABEL_WIDTH_MM)
        assert result == pytest.approx(101.6)
        assert isinstance(result, float)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("ZPLGRID_DPI", "not-a-number")
        assert get_environment(EnvVar.DPI) == 203

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid float value returns default."""
        monkeypatch.setenv("ZPLGRID_SCALE_PX_PER_MM", "wide")
        assert get_environment(EnvVar.SCALE_PX_PER_MM) == 8.0


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.SCALE_PX_PER_MM)
        assert isinstance(info, EnvConfig)
        assert info.name == "ZPLGRID_SCALE_PX_PER_MM"
        assert info.default == 8.0
        assert info.var_type is float
        assert info.category == "editor"


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        preview_vars = list_environment_variables("preview")
        assert EnvVar.LABEL_WIDTH_MM in preview_vars
        assert EnvVar.DPI in preview_vars
        assert EnvVar.LOG_LEVEL not in preview_vars


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestPreviewTarget:
    """Tests for the physical label target."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch):
        """Default target is a 74 x 26 mm label at 203 dpi."""
        for name in ("ZPLGRID_LABEL_WIDTH_MM", "ZPLGRID_LABEL_HEIGHT_MM", "ZPLGRID_DPI"):
            monkeypatch.delenv(name, raising=False)
        assert get_preview_target() == {"width_mm": 74.0, "height_mm": 26.0, "dpi": 203}

    @pytest.mark.unit
    def test_floors_at_one(self, monkeypatch):
        """Non-positive sizes are floored at 1."""
        monkeypatch.setenv("ZPLGRID_LABEL_WIDTH_MM", "-5")
        monkeypatch.setenv("ZPLGRID_DPI", "0")
        target = get_preview_target()
        assert target["width_mm"] == 1.0
        assert target["dpi"] == 1

    @pytest.mark.unit
    def test_scale_override(self):
        """Scale override bypasses the environment."""
        assert get_scale_px_per_mm(12.0) == 12.0


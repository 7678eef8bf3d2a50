"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared template documents used across the package tests
"""

from __future__ import annotations

from typing import Any

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def sample_template() -> dict[str, Any]:
    """Create a simple two-leaf template document.

    Returns:
        A vertical split with a text leaf on the left and a QR leaf on the right.
    """
    return {
        "schema_version": 1,
        "name": "Shelf label",
        "layout": {
            "kind": "split",
            "direction": "v",
            "ratio": 0.5,
            "children": [
                {
                    "kind": "leaf",
                    "alias": "title",
                    "elements": [{"type": "text", "text": "Hi {name}"}],
                },
                {
                    "kind": "leaf",
                    "alias": "code",
                    "elements": [{"type": "qr", "data": "{sku}"}],
                },
            ],
        },
    }


@pytest.fixture
def complex_template() -> dict[str, Any]:
    """Create a nested template using every element type.

    Layout (ids):
        r      split h 0.4, gutter 1 mm, visible divider
        r/0    leaf "header" text
        r/1    split v 0.25
        r/1/0  leaf "logo" image
        r/1/1  split v 0.5
        r/1/1/0  split h 0.5
        r/1/1/0/0  leaf "qr" qr
        r/1/1/0/1  leaf line
        r/1/1/1  leaf "dm" datamatrix

    Returns:
        A semantically valid template document.
    """
    return {
        "schema_version": 1,
        "name": "Warehouse bin",
        "defaults": {
            "leaf_padding_mm": [0.5, 0.5, 0.5, 0.5],
            "text": {"font_height_mm": 3.0, "wrap": "word", "fit": "shrink_to_fit"},
            "code2d": {"quiet_zone_mm": 1.0, "render_mode": "zpl"},
            "image": {"fit": "contain", "threshold": 128},
            "render": {"missing_variables": "error", "emit_ci28": True},
        },
        "layout": {
            "kind": "split",
            "alias": "body",
            "direction": "h",
            "ratio": 0.4,
            "gutter_mm": 1.0,
            "divider": {"visible": True, "thickness_mm": 0.5},
            "children": [
                {
                    "kind": "leaf",
                    "alias": "header",
                    "padding_mm": [1, 1, 1, 1],
                    "elements": [
                        {
                            "type": "text",
                            "text": "{product} printed {_date_yyyy_mm_dd}",
                            "align_h": "center",
                            "max_lines": 2,
                        }
                    ],
                },
                {
                    "kind": "split",
                    "direction": "v",
                    "ratio": 0.25,
                    "children": [
                        {
                            "kind": "leaf",
                            "alias": "logo",
                            "elements": [
                                {
                                    "type": "image",
                                    "source": {"kind": "url", "data": "https://example.com/logo.png"},
                                    "dither": "floyd_steinberg",
                                }
                            ],
                        },
                        {
                            "kind": "split",
                            "direction": "v",
                            "ratio": 0.5,
                            "children": [
                                {
                                    "kind": "split",
                                    "direction": "h",
                                    "ratio": 0.5,
                                    "children": [
                                        {
                                            "kind": "leaf",
                                            "alias": "qr",
                                            "elements": [
                                                {
                                                    "type": "qr",
                                                    "data": "{sku}-{_counter_daily}",
                                                    "error_correction": "Q",
                                                    "input_mode": "M",
                                                    "character_mode": "A",
                                                    "theme": {"preset": "dots"},
                                                }
                                            ],
                                        },
                                        {
                                            "kind": "leaf",
                                            "debug_border": True,
                                            "elements": [
                                                {
                                                    "type": "line",
                                                    "orientation": "h",
                                                    "thickness_mm": 0.3,
                                                    "align": "center",
                                                }
                                            ],
                                        },
                                    ],
                                },
                                {
                                    "kind": "leaf",
                                    "alias": "dm",
                                    "elements": [
                                        {
                                            "type": "datamatrix",
                                            "data": "{{literal}} {lot}",
                                            "module_size_mm": 0.5,
                                            "quality": 200,
                                            "escape_char": "_",
                                            "padding_mm": [0.25, 0.25, 0.25, 0.25],
                                        }
                                    ],
                                },
                            ],
                        },
                    ],
                },
            ],
        },
    }

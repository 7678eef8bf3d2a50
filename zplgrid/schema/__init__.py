"""Schema module - authoritative source for label template documents.

This module provides:
- Node and element models (frozen pydantic, discriminated unions)
- Template defaults, built-in defaults and three-level resolution
- JSON serialization and JSON Schema export

Example usage:
    >>> from zplgrid.schema import TemplateDoc, dump_template
    >>> doc = TemplateDoc.model_validate(
    ...     {"schema_version": 1, "layout": {"kind": "leaf", "elements": [{"type": "text", "text": "Hi"}]}}
    ... )
    >>> dump_template(doc)["layout"]["kind"]
    'leaf'
"""

from .lib import (
    BUILTIN_DEFAULTS,
    DEFAULT_DIVIDER_THICKNESS_MM,
    SCHEMA_VERSION,
    ZERO_PADDING,
    AlignH,
    AlignV,
    Code2dDefaults,
    DataMatrixElement,
    Direction,
    Dither,
    Divider,
    Element,
    ElementBase,
    ElementType,
    ErrorCorrection,
    ImageDefaults,
    ImageElement,
    ImageFit,
    ImageSource,
    ImageSourceKind,
    LeafNode,
    LineAlign,
    LineElement,
    LineOrientation,
    MissingVariables,
    ModuleShape,
    Node,
    PaddingMm,
    QrCharacterMode,
    QrElement,
    QrInputMode,
    QrTheme,
    QrThemePreset,
    RenderDefaults,
    RenderMode,
    SizeMode,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    TextDefaults,
    TextElement,
    TextFit,
    TextOptions,
    TextWrap,
    default_template,
    dump_template,
    effective_leaf_padding,
    effective_text_options,
    export_json_schema,
    resolve,
    template_to_json,
)

__all__ = [
    "SCHEMA_VERSION",
    "DEFAULT_DIVIDER_THICKNESS_MM",
    # Enums
    "Direction",
    "TextWrap",
    "TextFit",
    "AlignH",
    "AlignV",
    "SizeMode",
    "RenderMode",
    "ErrorCorrection",
    "QrInputMode",
    "QrCharacterMode",
    "QrThemePreset",
    "ModuleShape",
    "ImageSourceKind",
    "ImageFit",
    "Dither",
    "LineOrientation",
    "LineAlign",
    "MissingVariables",
    "ElementType",
    # Scalars
    "PaddingMm",
    "ZERO_PADDING",
    # Elements
    "ElementBase",
    "TextElement",
    "QrTheme",
    "QrElement",
    "DataMatrixElement",
    "ImageSource",
    "ImageElement",
    "LineElement",
    "Element",
    # Nodes
    "Divider",
    "LeafNode",
    "SplitNode",
    "Node",
    # Template
    "TextDefaults",
    "Code2dDefaults",
    "ImageDefaults",
    "RenderDefaults",
    "TemplateDefaults",
    "TemplateDoc",
    # Defaults & resolution
    "BUILTIN_DEFAULTS",
    "resolve",
    "effective_leaf_padding",
    "TextOptions",
    "effective_text_options",
    "default_template",
    # Serialization
    "dump_template",
    "template_to_json",
    "export_json_schema",
]

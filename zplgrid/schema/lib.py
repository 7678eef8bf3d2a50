"""Authoritative Schema Module for label template documents.

This module serves as the single source of truth for the shape of a
template document. It provides:
- Enumerations for every closed value domain
- Element models (text, qr, datamatrix, image, line) as a discriminated union
- Node models (split, leaf) forming the recursive binary layout tree
- Template-wide defaults, built-in defaults and the resolution helpers
- JSON serialization and JSON Schema export

All documents are frozen pydantic models. Edits never mutate a document;
they build a new one with `model_copy(update=...)`.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool

SCHEMA_VERSION = 1

# Divider thickness used when a divider omits `thickness_mm`.
DEFAULT_DIVIDER_THICKNESS_MM = 0.3


# === ENUMERATIONS ===


class Direction(str, Enum):
    """Split axis.

    - V: vertical cut, children sit side by side (left/right)
    - H: horizontal cut, children are stacked (top/bottom)
    """

    V = "v"
    H = "h"


class TextWrap(str, Enum):
    """Line breaking strategy for text elements."""

    NONE = "none"
    WORD = "word"
    CHAR = "char"


class TextFit(str, Enum):
    """How text that does not fit its box is handled."""

    OVERFLOW = "overflow"
    WRAP = "wrap"
    SHRINK_TO_FIT = "shrink_to_fit"
    TRUNCATE = "truncate"


class AlignH(str, Enum):
    """Horizontal alignment inside the content rectangle."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class AlignV(str, Enum):
    """Vertical alignment inside the content rectangle."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class SizeMode(str, Enum):
    """2D code sizing: fixed module size or largest that fits."""

    FIXED = "fixed"
    MAX = "max"


class RenderMode(str, Enum):
    """Whether a 2D code is emitted as a printer command or a bitmap."""

    ZPL = "zpl"
    IMAGE = "image"


class ErrorCorrection(str, Enum):
    """QR error correction level."""

    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class QrInputMode(str, Enum):
    """QR data input mode: automatic or manual."""

    A = "A"
    M = "M"


class QrCharacterMode(str, Enum):
    """QR character mode, only meaningful with manual input."""

    N = "N"
    A = "A"


class QrThemePreset(str, Enum):
    CLASSIC = "classic"
    DOTS = "dots"
    ROUNDED = "rounded"


class ModuleShape(str, Enum):
    SQUARE = "square"
    CIRCLE = "circle"
    ROUNDED = "rounded"


class ImageSourceKind(str, Enum):
    """Image bytes are either inlined (base64) or referenced by URL."""

    BASE64 = "base64"
    URL = "url"


class ImageFit(str, Enum):
    NONE = "none"
    CONTAIN = "contain"
    COVER = "cover"
    STRETCH = "stretch"


class Dither(str, Enum):
    NONE = "none"
    FLOYD_STEINBERG = "floyd_steinberg"
    BAYER = "bayer"


class LineOrientation(str, Enum):
    H = "h"
    V = "v"


class LineAlign(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"


class MissingVariables(str, Enum):
    """Renderer behaviour when a placeholder has no value."""

    ERROR = "error"
    EMPTY = "empty"


class ElementType(str, Enum):
    """Discriminator values of the Element union."""

    TEXT = "text"
    QR = "qr"
    DATAMATRIX = "datamatrix"
    IMAGE = "image"
    LINE = "line"


# === CONSTRAINED SCALARS ===

# Strict scalars: wrong-typed input is reported, never coerced. Ints still
# pass for floats.
NonNegativeMm = Annotated[float, Field(strict=True, ge=0)]
PositiveMm = Annotated[float, Field(strict=True, gt=0)]

# Padding tuples are [top, right, bottom, left] in millimetres.
PaddingMm = tuple[NonNegativeMm, NonNegativeMm, NonNegativeMm, NonNegativeMm]
SizeMm = tuple[NonNegativeMm, NonNegativeMm]

ZERO_PADDING: PaddingMm = (0.0, 0.0, 0.0, 0.0)


class _Model(BaseModel):
    """Base for all document models: immutable, enums stored as values."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)


# === ELEMENTS ===


class ElementBase(_Model):
    """Fields shared by every element variant.

    Attributes:
        id: Optional stable element identifier.
        padding_mm: Inset applied inside the leaf's content rectangle.
        min_size_mm: Minimum [width, height] hint for the renderer.
        max_size_mm: Maximum [width, height] hint for the renderer.
        extensions: Free-form data carried through untouched.
    """

    id: Annotated[str, Field(min_length=1)] | None = None
    padding_mm: PaddingMm | None = None
    min_size_mm: SizeMm | None = None
    max_size_mm: SizeMm | None = None
    extensions: dict[str, Any] | None = None


class TextElement(ElementBase):
    """Text block. `text` may contain `{name}` placeholders."""

    type: Literal["text"] = "text"
    text: str
    font_height_mm: PositiveMm | None = None
    font_width_mm: PositiveMm | None = None
    wrap: TextWrap | None = None
    fit: TextFit | None = None
    max_lines: Annotated[int, Field(strict=True, ge=1)] | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None


class QrTheme(_Model):
    preset: QrThemePreset | None = None
    module_shape: ModuleShape | None = None
    finder_shape: ModuleShape | None = None


class QrElement(ElementBase):
    """QR code. `data` may contain `{name}` placeholders."""

    type: Literal["qr"] = "qr"
    data: str
    magnification: Annotated[int, Field(strict=True, ge=1, le=10)] | None = None
    size_mode: SizeMode | None = None
    render_mode: RenderMode | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None
    error_correction: ErrorCorrection | None = None
    input_mode: QrInputMode | None = None
    character_mode: QrCharacterMode | None = None
    quiet_zone_mm: NonNegativeMm | None = None
    theme: QrTheme | None = None


class DataMatrixElement(ElementBase):
    """Data Matrix code. `data` may contain `{name}` placeholders."""

    type: Literal["datamatrix"] = "datamatrix"
    data: str
    module_size_mm: PositiveMm | None = None
    size_mode: SizeMode | None = None
    render_mode: RenderMode | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None
    quality: Literal[200] | None = None
    columns: Annotated[int, Field(strict=True, ge=0, le=49)] | None = None
    rows: Annotated[int, Field(strict=True, ge=0, le=49)] | None = None
    format_id: Annotated[int, Field(strict=True, ge=0, le=6)] | None = None
    escape_char: Annotated[str, Field(min_length=1, max_length=1)] | None = None
    quiet_zone_mm: NonNegativeMm | None = None


class ImageSource(_Model):
    kind: ImageSourceKind
    data: Annotated[str, Field(min_length=1)]


class ImageElement(ElementBase):
    """Monochrome image converted by the renderer."""

    type: Literal["image"] = "image"
    source: ImageSource
    fit: ImageFit | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None
    input_dpi: Annotated[int, Field(strict=True, ge=1)] | None = None
    threshold: Annotated[int, Field(strict=True, ge=0, le=255)] | None = None
    dither: Dither | None = None
    invert: StrictBool | None = None


class LineElement(ElementBase):
    """Rule line drawn across the content rectangle."""

    type: Literal["line"] = "line"
    orientation: LineOrientation
    thickness_mm: PositiveMm
    align: LineAlign | None = None


Element = Annotated[
    Union[TextElement, QrElement, DataMatrixElement, ImageElement, LineElement],
    Field(discriminator="type"),
]


# === NODES ===


class Divider(_Model):
    """Optional visible line centered in a split's gutter."""

    visible: StrictBool | None = None
    thickness_mm: PositiveMm | None = None


class LeafNode(_Model):
    """Tree node holding exactly one renderable element.

    Attributes:
        alias: Optional unique human-readable name.
        padding_mm: Leaf padding; absent means inherit `defaults.leaf_padding_mm`.
        debug_border: Ask the renderer to outline this leaf.
        elements: Exactly one element.
    """

    kind: Literal["leaf"] = "leaf"
    alias: Annotated[str, Field(min_length=1)] | None = None
    padding_mm: PaddingMm | None = None
    debug_border: StrictBool | None = None
    elements: tuple[Element]
    extensions: dict[str, Any] | None = None

    @property
    def element(self) -> TextElement | QrElement | DataMatrixElement | ImageElement | LineElement:
        """The single element held by this leaf."""
        return self.elements[0]


class SplitNode(_Model):
    """Tree node dividing its rectangle into two children along one axis.

    Attributes:
        alias: Optional unique human-readable name.
        direction: "v" places children left/right, "h" top/bottom.
        ratio: Share of the space left after the gutter given to the first child.
        gutter_mm: Empty space between the children.
        divider: Optional visible line centered in the gutter.
        children: Exactly two child nodes.
    """

    kind: Literal["split"] = "split"
    alias: Annotated[str, Field(min_length=1)] | None = None
    direction: Direction
    ratio: Annotated[float, Field(strict=True, gt=0, lt=1)]
    gutter_mm: NonNegativeMm | None = None
    divider: Divider | None = None
    children: tuple["Node", "Node"]
    extensions: dict[str, Any] | None = None


Node = Annotated[Union[SplitNode, LeafNode], Field(discriminator="kind")]

SplitNode.model_rebuild()


# === TEMPLATE DEFAULTS ===


class TextDefaults(_Model):
    font_height_mm: PositiveMm | None = None
    font_width_mm: PositiveMm | None = None
    wrap: TextWrap | None = None
    fit: TextFit | None = None
    max_lines: Annotated[int, Field(strict=True, ge=1)] | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None


class Code2dDefaults(_Model):
    quiet_zone_mm: NonNegativeMm | None = None
    size_mode: SizeMode | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None
    render_mode: RenderMode | None = None


class ImageDefaults(_Model):
    fit: ImageFit | None = None
    align_h: AlignH | None = None
    align_v: AlignV | None = None
    input_dpi: Annotated[int, Field(strict=True, ge=1)] | None = None
    threshold: Annotated[int, Field(strict=True, ge=0, le=255)] | None = None
    dither: Dither | None = None
    invert: StrictBool | None = None


class RenderDefaults(_Model):
    missing_variables: MissingVariables | None = None
    emit_ci28: StrictBool | None = None
    debug_padding_guides: StrictBool | None = None
    debug_gutter_guides: StrictBool | None = None


class TemplateDefaults(_Model):
    """Fallback values per element family, overridden by leaf-level fields."""

    leaf_padding_mm: PaddingMm | None = None
    text: TextDefaults | None = None
    code2d: Code2dDefaults | None = None
    image: ImageDefaults | None = None
    render: RenderDefaults | None = None


class TemplateDoc(_Model):
    """Root of a label template document."""

    schema_version: Literal[1] = SCHEMA_VERSION
    name: Annotated[str, Field(min_length=1)] | None = None
    defaults: TemplateDefaults | None = None
    layout: Node
    extensions: dict[str, Any] | None = None


# === BUILT-IN DEFAULTS & RESOLUTION ===

# Last level of the leaf -> template -> built-in resolution chain.
BUILTIN_DEFAULTS = TemplateDefaults(
    leaf_padding_mm=ZERO_PADDING,
    text=TextDefaults(
        font_height_mm=4.0,
        wrap=TextWrap.WORD,
        fit=TextFit.SHRINK_TO_FIT,
        max_lines=1,
        align_h=AlignH.LEFT,
        align_v=AlignV.TOP,
    ),
    code2d=Code2dDefaults(
        quiet_zone_mm=1.0,
        size_mode=SizeMode.FIXED,
        align_h=AlignH.CENTER,
        align_v=AlignV.CENTER,
        render_mode=RenderMode.ZPL,
    ),
    image=ImageDefaults(
        fit=ImageFit.CONTAIN,
        align_h=AlignH.CENTER,
        align_v=AlignV.CENTER,
        input_dpi=203,
        threshold=128,
        dither=Dither.NONE,
        invert=False,
    ),
    render=RenderDefaults(
        missing_variables=MissingVariables.ERROR,
        emit_ci28=True,
        debug_padding_guides=False,
        debug_gutter_guides=False,
    ),
)

T = TypeVar("T")


def resolve(leaf_value: T | None, template_default: T | None, builtin_default: T) -> T:
    """Resolve a field through the three inheritance levels.

    A value that is present at a level wins over every level below it;
    `None` means "absent, inherit".
    """
    if leaf_value is not None:
        return leaf_value
    if template_default is not None:
        return template_default
    return builtin_default


def effective_leaf_padding(leaf: LeafNode, defaults: TemplateDefaults | None) -> PaddingMm:
    """Leaf padding after inheritance."""
    template_padding = defaults.leaf_padding_mm if defaults else None
    return resolve(leaf.padding_mm, template_padding, ZERO_PADDING)


@dataclass(frozen=True)
class TextOptions:
    """Fully resolved text layout options of one text element."""

    font_height_mm: float
    font_width_mm: float | None
    wrap: str
    fit: str
    max_lines: int
    align_h: str
    align_v: str


def effective_text_options(
    element: TextElement, defaults: TemplateDefaults | None
) -> TextOptions:
    """Resolve every text option of an element against the defaults."""
    template = (defaults.text if defaults else None) or TextDefaults()
    builtin = BUILTIN_DEFAULTS.text
    return TextOptions(
        font_height_mm=resolve(
            element.font_height_mm, template.font_height_mm, builtin.font_height_mm
        ),
        font_width_mm=resolve(element.font_width_mm, template.font_width_mm, None),
        wrap=resolve(element.wrap, template.wrap, builtin.wrap),
        fit=resolve(element.fit, template.fit, builtin.fit),
        max_lines=resolve(element.max_lines, template.max_lines, builtin.max_lines),
        align_h=resolve(element.align_h, template.align_h, builtin.align_h),
        align_v=resolve(element.align_v, template.align_v, builtin.align_v),
    )


def default_template() -> TemplateDoc:
    """The document a "new template" action starts from."""
    return TemplateDoc(
        name="New template",
        defaults=TemplateDefaults(
            leaf_padding_mm=(0.375, 0.375, 0.375, 0.375),
            text=TextDefaults(
                font_height_mm=4.0,
                wrap=TextWrap.WORD,
                fit=TextFit.SHRINK_TO_FIT,
                max_lines=1,
                align_h=AlignH.LEFT,
                align_v=AlignV.TOP,
            ),
            code2d=Code2dDefaults(quiet_zone_mm=1.0, render_mode=RenderMode.ZPL),
            image=ImageDefaults(
                fit=ImageFit.CONTAIN,
                align_h=AlignH.CENTER,
                align_v=AlignV.CENTER,
                input_dpi=203,
                threshold=128,
                dither=Dither.NONE,
                invert=False,
            ),
            render=RenderDefaults(
                missing_variables=MissingVariables.ERROR, emit_ci28=True
            ),
        ),
        layout=LeafNode(
            alias="root",
            debug_border=False,
            elements=(TextElement(text=""),),
        ),
    )


# === SERIALIZATION ===


def dump_template(doc: TemplateDoc) -> dict[str, Any]:
    """Serialize a document to its JSON-shaped dict. Absent fields are omitted."""
    return doc.model_dump(mode="json", exclude_none=True)


def template_to_json(doc: TemplateDoc, indent: int | None = 2) -> str:
    """Serialize a document to JSON text."""
    return json.dumps(dump_template(doc), indent=indent)


def export_json_schema() -> dict[str, Any]:
    """Export the JSON Schema of a template document.

    Returns:
        JSON Schema dictionary with `$defs` for every node and element model.
    """
    return TemplateDoc.model_json_schema()


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

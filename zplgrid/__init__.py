"""zplgrid: Document model for split-grid label templates."""

from zplgrid.editor import TemplateEditor
from zplgrid.ids import get_node_by_id, list_nodes, update_node_by_id
from zplgrid.layout import LayoutRender, compute_layout, compute_template_layout
from zplgrid.schema import LeafNode, SplitNode, TemplateDoc, default_template, export_json_schema
from zplgrid.validation import ValidationIssue, is_valid, validate_template
from zplgrid.variables import extract_template_variables

__all__ = [
    # Schema
    "TemplateDoc",
    "SplitNode",
    "LeafNode",
    "default_template",
    "export_json_schema",
    # Addressing
    "list_nodes",
    "get_node_by_id",
    "update_node_by_id",
    # Geometry
    "compute_layout",
    "compute_template_layout",
    "LayoutRender",
    # Validation
    "validate_template",
    "is_valid",
    "ValidationIssue",
    # Variables
    "extract_template_variables",
    # Editor
    "TemplateEditor",
]

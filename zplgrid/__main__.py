"""CLI entry point for zplgrid.

Inspects and validates label template documents from the command line:

    python -m zplgrid new -o label.json
    python -m zplgrid validate label.json
    python -m zplgrid tree label.json
    python -m zplgrid layout label.json --dpi 203
    python -m zplgrid variables label.json --json
    python -m zplgrid schema
    python -m zplgrid env
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from zplgrid.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    get_preview_target,
    get_scale_px_per_mm,
    list_environment_variables,
)
from zplgrid.core import get_logger, setup_logging
from zplgrid.layout import compute_template_layout, scale_for_dpi
from zplgrid.output import format_layout_report, format_template_tree
from zplgrid.schema import default_template, export_json_schema, template_to_json
from zplgrid.validation import ValidationResult, parse_template_json
from zplgrid.variables import extract_template_variables

logger = get_logger("zplgrid.cli")

COMMANDS = ("new", "validate", "tree", "layout", "variables", "schema", "env")


def _write_or_print(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Saved to {output}")
    else:
        print(text)


def _load(path: Path) -> ValidationResult | None:
    """Read and validate a template file. Prints shape errors on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return None

    result = parse_template_json(text)
    if not result.ok:
        logger.error(f"{path} is not a valid template")
        for message in result.messages:
            print(message)
        return None
    return result


# =============================================================================
# Commands
# =============================================================================


def cmd_new(args: argparse.Namespace) -> int:
    """Handle the new command."""
    doc = default_template()
    if args.name:
        doc = doc.model_copy(update={"name": args.name})
    _write_or_print(template_to_json(doc), args.output)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    result = _load(args.file)
    if result is None:
        return 1

    if result.issues:
        for message in result.messages:
            print(message)
        logger.warning(f"{args.file}: {len(result.issues)} issue(s)")
        return 1

    print(f"{args.file}: OK")
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Handle the tree command."""
    result = _load(args.file)
    if result is None:
        return 1
    print(format_template_tree(result.doc))
    return 0


def cmd_layout(args: argparse.Namespace) -> int:
    """Handle the layout command."""
    result = _load(args.file)
    if result is None:
        return 1

    target = get_preview_target()
    width_mm = args.width_mm if args.width_mm is not None else target["width_mm"]
    height_mm = args.height_mm if args.height_mm is not None else target["height_mm"]
    if args.dpi is not None:
        scale = scale_for_dpi(args.dpi)
    else:
        scale = get_scale_px_per_mm(args.scale)

    if width_mm <= 0 or height_mm <= 0 or scale <= 0:
        logger.error("Label size and scale must be positive")
        return 1

    render = compute_template_layout(result.doc, width_mm, height_mm, scale)
    logger.info(f"Layout of {width_mm:g}x{height_mm:g} mm at {scale:g} px/mm")

    if args.json:
        data = {node_id: vars(rect) for node_id, rect in render.rects.items()}
        print(json.dumps({"rects": data, "alias_to_id": render.alias_to_id}, indent=2))
    else:
        print(format_layout_report(render))
    return 0


def cmd_variables(args: argparse.Namespace) -> int:
    """Handle the variables command."""
    result = _load(args.file)
    if result is None:
        return 1

    variables = extract_template_variables(result.doc)
    if args.json:
        print(json.dumps({"variables": variables.variables, "macros": variables.macros}, indent=2))
    else:
        print("Variables: " + (", ".join(variables.variables) or "(none)"))
        print("Macros:    " + (", ".join(variables.macros) or "(none)"))
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Handle the schema command."""
    _write_or_print(json.dumps(export_json_schema(), indent=2), args.output)
    return 0


def cmd_env(args: argparse.Namespace) -> int:
    """Handle the env command."""
    for var in list_environment_variables(args.category):
        info = get_environment_info(var)
        current = get_environment(var)
        marker = "*" if info.name in os.environ else " "
        print(f"{marker} {info.name} = {current!r}  [{info.category}] {info.description}")
    return 0


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog="python -m zplgrid",
        description="Inspect and validate label template documents",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    new_parser = subparsers.add_parser("new", help="Write a new default template")
    new_parser.add_argument("--name", "-n", type=str, default=None, help="Template name")
    new_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    new_parser.set_defaults(func=cmd_new)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a template (exit 1 on any issue)"
    )
    validate_parser.add_argument("file", type=Path, help="Template JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    tree_parser = subparsers.add_parser("tree", help="Show the layout tree")
    tree_parser.add_argument("file", type=Path, help="Template JSON file")
    tree_parser.set_defaults(func=cmd_tree)

    layout_parser = subparsers.add_parser("layout", help="Compute pixel rectangles")
    layout_parser.add_argument("file", type=Path, help="Template JSON file")
    layout_parser.add_argument(
        "--width-mm", type=float, default=None, help="Label width (default: ZPLGRID_LABEL_WIDTH_MM)"
    )
    layout_parser.add_argument(
        "--height-mm", type=float, default=None, help="Label height (default: ZPLGRID_LABEL_HEIGHT_MM)"
    )
    scale_group = layout_parser.add_mutually_exclusive_group()
    scale_group.add_argument(
        "--scale", type=float, default=None, help="Pixels per mm (default: ZPLGRID_SCALE_PX_PER_MM)"
    )
    scale_group.add_argument("--dpi", type=float, default=None, help="Printer resolution")
    layout_parser.add_argument("--json", action="store_true", help="Output JSON")
    layout_parser.set_defaults(func=cmd_layout)

    variables_parser = subparsers.add_parser("variables", help="List placeholders")
    variables_parser.add_argument("file", type=Path, help="Template JSON file")
    variables_parser.add_argument("--json", action="store_true", help="Output JSON")
    variables_parser.set_defaults(func=cmd_variables)

    schema_parser = subparsers.add_parser("schema", help="Export the template JSON Schema")
    schema_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    schema_parser.set_defaults(func=cmd_schema)

    env_parser = subparsers.add_parser("env", help="Show configuration variables")
    env_parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=["preview", "editor", "logging"],
        help="Only show one category",
    )
    env_parser.set_defaults(func=cmd_env)

    return parser


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python -m zplgrid {command} [args]")
    print("\n=== Templates ===")
    print("  new        Write a new default template")
    print("  validate   Validate a template file")
    print("  tree       Show the layout tree")
    print("  layout     Compute pixel rectangles for a label size")
    print("  variables  List required variables and macros")
    print("  schema     Export the template JSON Schema")
    print("\n=== Configuration ===")
    print("  env        Show configuration variables")
    print("\nExamples:")
    print("  python -m zplgrid new -o label.json")
    print("  python -m zplgrid validate label.json")
    print("  python -m zplgrid layout label.json --width-mm 74 --height-mm 26 --dpi 203")
    print("  python -m zplgrid variables label.json --json")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    if argv[0] in ("-h", "--help"):
        show_help()
        return 0

    load_dotenv()
    setup_logging(get_environment(EnvVar.LOG_LEVEL))

    parser = build_parser()
    if argv[0] not in COMMANDS:
        logger.error(f"Unknown command: {argv[0]}")
        show_help()
        return 1

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

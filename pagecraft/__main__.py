"""CLI entry point for pagecraft.

Commands operate on JSON document files:

    python -m pagecraft generate page.json --target vue --out build/
    python -m pagecraft tree page.json
    python -m pagecraft validate page.json
    python -m pagecraft targets
    python -m pagecraft env --category canvas
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from pagecraft.codegen import CodeGenerationOptions, get_emitter, list_targets, write_result
from pagecraft.config import (
    get_environment,
    get_environment_info,
    list_environment_variables,
)
from pagecraft.core import get_logger, setup_logging
from pagecraft.model import CorruptDocumentError, Document, validate_document
from pagecraft.output import OutputGenerator, format_document_tree
from pagecraft.persistence import read_document

logger = get_logger("cli")


def _load(path: Path) -> Document | None:
    """Read a document file, logging why it could not be loaded."""
    try:
        return read_document(path)
    except FileNotFoundError:
        logger.error(f"File not found: {path}")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
    except CorruptDocumentError as e:
        logger.error(f"{path}: {e}")
    return None


# =============================================================================
# Commands
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    document = _load(args.document)
    if document is None:
        return 1

    options = CodeGenerationOptions(
        typescript=args.typescript,
        include_imports=not args.no_imports,
        include_styles=not args.no_styles,
    )
    if args.indent is not None:
        options.indent_size = args.indent
    try:
        output = OutputGenerator().generate(document, args.target, options)
    except KeyError as e:
        logger.error(e.args[0])
        return 1

    if args.out:
        written = write_result(output.result, args.out)
        logger.info(f"Wrote {len(written)} files to {args.out}")
        print(output.summary)
    else:
        for f in output.result.files:
            print(f"// ===== {f.path} =====")
            print(f.content)
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Handle the tree command."""
    document = _load(args.document)
    if document is None:
        return 1
    print(format_document_tree(document))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    try:
        data = json.loads(args.document.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.error(f"File not found: {args.document}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {args.document}: {e}")
        return 1

    errors = validate_document(data)
    if not errors:
        print(f"{args.document}: valid")
        return 0

    print(f"{args.document}: {len(errors)} error(s)")
    for error in errors:
        print(f"  [{error.error_type}] {error.node_id}: {error.message}")
    return 1


def cmd_targets(_args: argparse.Namespace) -> int:
    """Handle the targets command."""
    for name in list_targets():
        emitter = get_emitter(name)
        print(f"{name:<10} {emitter.description}")
    return 0


def cmd_env(args: argparse.Namespace) -> int:
    """Handle the env command."""
    for var in list_environment_variables(args.category):
        info = get_environment_info(var)
        value = get_environment(var)
        print(f"{info.name}={value if value is not None else ''}")
        print(f"    [{info.category}] {info.description}")
    return 0


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog="python -m pagecraft",
        description="Page-builder documents: inspect, validate and generate code",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: PAGECRAFT_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a project from a document",
    )
    generate_parser.add_argument("document", type=Path, help="Document JSON file")
    generate_parser.add_argument(
        "--target",
        "-t",
        default=None,
        help="Target framework (default: PAGECRAFT_DEFAULT_TARGET)",
    )
    generate_parser.add_argument(
        "--typescript",
        action="store_true",
        help="Emit TypeScript where the target supports it",
    )
    generate_parser.add_argument(
        "--no-imports",
        action="store_true",
        help="Omit import statements",
    )
    generate_parser.add_argument(
        "--no-styles",
        action="store_true",
        help="Omit stylesheets",
    )
    generate_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indentation width (default: PAGECRAFT_INDENT_SIZE)",
    )
    generate_parser.add_argument(
        "--out",
        "-o",
        type=Path,
        default=None,
        help="Write files below this directory instead of printing them",
    )
    generate_parser.set_defaults(func=cmd_generate)

    # tree command
    tree_parser = subparsers.add_parser("tree", help="Print the component tree")
    tree_parser.add_argument("document", type=Path, help="Document JSON file")
    tree_parser.set_defaults(func=cmd_tree)

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check document integrity (exit code 1 when corrupt)",
    )
    validate_parser.add_argument("document", type=Path, help="Document JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    # targets command
    targets_parser = subparsers.add_parser("targets", help="List code generation targets")
    targets_parser.set_defaults(func=cmd_targets)

    # env command
    env_parser = subparsers.add_parser("env", help="List configuration variables")
    env_parser.add_argument(
        "--category",
        "-c",
        default=None,
        help="Only show one category (canvas, history, codegen, storage, general)",
    )
    env_parser.set_defaults(func=cmd_env)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    # Load environment variables from .env file
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

# File: nestgen/cli.py
"""
nestgen - Command-Line Interface
================================

Command-line front end built with the standard-library ``argparse`` module.

Usage examples::

    # Generate the whole project
    nestgen --model shop.yaml --output ./server

    # Only the 'src.orders' subtree, tab indentation, table prefix
    nestgen -m shop.yaml -o ./server --root src.orders --tab --table-prefix app

    # Validate only (no file output)
    nestgen -m shop.yaml --validate-only

Exit codes:
    0  success
    1  validation error
    2  generation error (a model precondition does not hold)
    3  export error (a directory or file could not be written)
    4  input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from nestgen.errors import PreconditionViolation

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root nestgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("nestgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from nestgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="nestgen",
        description=(
            "nestgen - NestJS source generator.\n\n"
            "Turns a UML model document (JSON/YAML) into a NestJS + TypeORM "
            "source tree: entities, read-models, CRUD services, CRUD "
            "controllers and module descriptors."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -m shop.yaml -o ./server\n"
            "  %(prog)s -m shop.yaml -o ./server --root src.orders --clean\n"
            "  %(prog)s -m shop.json --validate-only\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"nestgen v{__version__}",
    )

    # --- Required arguments ---
    parser.add_argument(
        "-m", "--model",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the model document (JSON or YAML).",
    )

    # --- Output ---
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output directory. Required unless --validate-only is set.",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        metavar="NAME",
        help="Generate only below this package (dotted path, e.g. 'src.orders').",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the model without generating code.",
    )

    # --- Option overrides ---
    options_group = parser.add_argument_group("generation option overrides")
    options_group.add_argument(
        "--tab",
        action="store_true",
        default=False,
        help="Indent with tabs.",
    )
    options_group.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Spaces per indent level.",
    )
    options_group.add_argument(
        "--table-prefix",
        type=str,
        default=None,
        metavar="PREFIX",
        help="Prefix for storage table names.",
    )
    options_group.add_argument(
        "--author",
        type=str,
        default=None,
        metavar="NAME",
        help="Author line added to class documentation.",
    )
    options_group.add_argument(
        "--no-doc-comments",
        action="store_true",
        default=False,
        help="Do not emit documentation comments.",
    )
    options_group.add_argument(
        "--ext",
        type=str,
        default=None,
        metavar="EXT",
        help="Extension of emitted files (default: ts).",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Remove the root's output directory before generation.",
    )
    behaviour_group.add_argument(
        "--no-strict",
        action="store_true",
        default=False,
        help="Continue even if validation reports errors.",
    )
    behaviour_group.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=False,
        help="Treat validation warnings as errors.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Option override builder
# ---------------------------------------------------------------------------


def _build_option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a ``GenerationOptions`` override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.tab:
        overrides["use_tab_indent"] = True
    if args.indent is not None:
        overrides["indent_width"] = args.indent
    if args.table_prefix is not None:
        overrides["table_prefix"] = args.table_prefix
    if args.author is not None:
        overrides["author"] = args.author
    if args.no_doc_comments:
        overrides["include_doc_comments"] = False
    if args.ext is not None:
        overrides["file_extension"] = args.ext

    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(model_path: Path, overrides: Dict[str, Any]) -> int:
    """
    Run validation only (no code generation).

    Returns the appropriate exit code.
    """
    from nestgen.generator import load_graph
    from nestgen.utils import Timer
    from nestgen.validators import validate_graph

    logger.info("Running validation-only mode for: %s", model_path)

    try:
        graph, _ = load_graph(model_path, overrides)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load model: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result = validate_graph(graph)

    print(f"\n{'='*50}")
    print("  Model Validation Report")
    print(f"{'='*50}")
    print(f"  File:     {model_path.name}")
    print(f"  Project:  {graph.root.name}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({len(result.warnings)}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.is_valid and not result.warnings:
        print("\n  ✅ All validations passed!")

    print(f"{'='*50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(
    model_path: Path,
    output_dir: Path,
    args: argparse.Namespace,
) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from nestgen.generator import GenerationReport, NestGenerator

    overrides: Dict[str, Any] = _build_option_overrides(args)
    generator: NestGenerator = NestGenerator(
        strict_validation=not args.no_strict,
        fail_on_warnings=args.fail_on_warnings,
        clean_output=args.clean,
    )

    try:
        report: GenerationReport = generator.generate_from_file(
            model_path,
            output_dir,
            root_name=args.root,
            option_overrides=overrides or None,
        )
    except PreconditionViolation as exc:
        logger.error("Generation failed: %s", exc)
        return EXIT_GENERATION_ERROR
    except FileNotFoundError as exc:
        logger.error("Failed to load model: %s", exc)
        return EXIT_INPUT_ERROR
    except OSError as exc:
        logger.error("Failed to write output: %s", exc)
        return EXIT_EXPORT_ERROR
    except ValueError as exc:
        logger.error("Invalid model: %s", exc)
        return EXIT_INPUT_ERROR

    print(report.summary())

    if not report.success:
        return EXIT_VALIDATION_ERROR
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    model_path: Path = Path(args.model).resolve()

    if not model_path.exists():
        logger.error("Model file not found: %s", model_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not model_path.is_file():
        logger.error("Model path is not a file: %s", model_path)
        sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(model_path, _build_option_overrides(args)))

    if args.output is None:
        logger.error(
            "Output directory is required for generation. "
            "Use -o/--output or --validate-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    output_dir: Path = Path(args.output).resolve()

    logger.info("Model:   %s", model_path)
    logger.info("Output:  %s", output_dir)
    logger.info("Root:    %s", args.root or "<project>")
    logger.info("Clean:   %s", args.clean)
    logger.info("Strict:  %s", not args.no_strict)

    exit_code: int = _run_generation(model_path, output_dir, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("nestgen.cli loaded.")

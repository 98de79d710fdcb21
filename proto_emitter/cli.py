"""
Command-line interface for the generator.

Loads a JSON code generator request, runs generation and writes (or
previews) the generated files.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen import (
    ConfigError,
    GenerationResult,
    RegistryError,
    generate_from_request,
    get_generator,
    get_registry,
    is_language_supported,
    list_supported_languages,
    load_config,
)
from .logging_config import configure_logging, get_logger
from .utils import RequestLoaderError, load_request, write_generated_files

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proto-emitter",
        description="Generate Go source files from a protoc code generator request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  proto-emitter request.json -o gen/
  proto-emitter --stdin --parameter paths=import < request.json
  proto-emitter request.json --dry-run --no-version-markers
  proto-emitter --list-languages
        """.strip(),
    )

    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("file", nargs="?", help="JSON request file")
    input_group.add_argument("--url", help="URL to fetch the JSON request from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the JSON request from standard input"
    )

    parser.add_argument(
        "--language", "-l", default="go", help="Target language (default: go)"
    )
    parser.add_argument(
        "--output-dir", "-o", default=".", help="Directory for generated files (default: .)"
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "--parameter",
        metavar="PARAMS",
        help="Plugin parameter string, overriding the request's (e.g. paths=import)",
    )
    parser.add_argument(
        "--no-version-markers",
        action="store_true",
        help="Omit the version comment and the version assertions",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Print generated files instead of writing them"
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages", action="store_true", help="List supported languages and exit"
    )
    info_group.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    log_group = parser.add_argument_group("logging")
    log_group.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    log_group.add_argument("--log-file", metavar="FILE", help="Also write the log to FILE")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``proto-emitter`` command."""
    args = build_parser().parse_args(argv)
    configure_logging(
        verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None
    )

    try:
        if args.list_languages:
            return _list_languages()
        return _run(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (ConfigError, RegistryError, RequestLoaderError, FileNotFoundError) as e:
        logger.error("%s", e)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _run(args: argparse.Namespace) -> int:
    if not (args.file or args.url or args.stdin):
        raise CLIError("Input source required (file, --url, or --stdin)")

    if not is_language_supported(args.language):
        raise CLIError(
            f"Language '{args.language}' is not supported "
            f"(available: {', '.join(list_supported_languages())})"
        )

    source, request = load_request(
        file_path=args.file,
        url=args.url,
        stream=sys.stdin if args.stdin else None,
    )
    console.print(f"📄 Loaded: {source}")

    overrides = {"generate_version_markers": False} if args.no_version_markers else None
    parameter = args.parameter if args.parameter is not None else request.parameter
    config = load_config(custom_config=overrides, config_file=args.config, parameter=parameter)

    result = generate_from_request(request, language=args.language, config=config)
    if not result.success:
        console.print(f"[red]✗ {result.error_message}[/red]")
        return 1

    if args.dry_run:
        _preview(result)
    else:
        written = write_generated_files(result.files, args.output_dir)
        logger.info("Wrote %d files to %s", len(written), args.output_dir)

    _print_summary(result, dry_run=args.dry_run, output_dir=args.output_dir)
    return 0


def _preview(result: GenerationResult) -> None:
    lexer = result.metadata.get("language", "go")
    for filename in sorted(result.files):
        console.print(
            Panel(
                Syntax(result.files[filename], lexer, theme="monokai", line_numbers=False),
                title=f"📄 {filename}",
                border_style="blue",
            )
        )


def _print_summary(result: GenerationResult, dry_run: bool, output_dir: str) -> None:
    table = Table(title="✨ Generated Files", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("File", style="bold green", no_wrap=True)
    table.add_column("Lines", style="cyan", justify="right")

    for filename in sorted(result.files):
        table.add_row(filename, str(result.files[filename].count("\n")))

    console.print(table)
    where = "not written (dry run)" if dry_run else f"written to {output_dir}"
    console.print(
        f"[dim]{len(result.files)} file(s) {where}; "
        f"supported features: {result.supported_features}[/dim]"
    )
    for warning in result.warnings:
        console.print(f"[yellow]⚠️ {warning}[/yellow]")


def _list_languages() -> int:
    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Aliases", style="magenta")
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")

    registry = get_registry()
    for language in list_supported_languages():
        generator = get_generator(language)
        aliases = ", ".join(registry.get_aliases_for_language(language)) or "-"
        table.add_row(language, aliases, generator.file_extension, type(generator).__name__)

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())

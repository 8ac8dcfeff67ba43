"""Command-line interface for metapull."""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

# Check if --doctor flag is present before checking dependencies
if "--doctor" in sys.argv:
    from .doctor import run_doctor

    sys.exit(run_doctor())

# Verify core dependencies
try:
    import bs4  # noqa: F401
    import pydantic  # noqa: F401
    import rich  # noqa: F401
except ImportError as e:
    print(f"\nERROR: Missing required dependency: {e.name}", file=sys.stderr)
    print("\nmetapull requires all core dependencies to be installed.", file=sys.stderr)
    print("\nRecommended fixes:", file=sys.stderr)
    print("  1. For pipx users: pipx reinstall metapull --force", file=sys.stderr)
    print("  2. For pip users: pip install --upgrade --force-reinstall metapull", file=sys.stderr)
    print("  3. For development: pip install -e .[dev]", file=sys.stderr)
    print("\nTo diagnose issues, run: metapull --doctor", file=sys.stderr)
    sys.exit(1)

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.extractor import MetadataExtractor
from .errors import ConfigError, MetapullError
from .logging_config import setup_logging
from .models.config import ExtractionConfig, ProfileName, Syntax
from .models.results import ExtractionResult


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="metapull",
        description="Extract structured metadata (JSON-LD, Microdata, Microformats, Open Graph, ...) from HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Everything, as pretty-printed JSON
  metapull page.html --base-url https://example.com/article

  # Read from stdin, only item graphs
  curl -s https://example.com | metapull - --profile structured

  # Pick syntaxes explicitly
  metapull page.html --syntax jsonld microdata --compact

  # Overview of what the page carries
  metapull page.html --summary
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="HTML file to read, or - for stdin (default: -)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--doctor",
        action="store_true",
        help="Run diagnostic checks",
    )

    # Extraction settings
    extract_group = parser.add_argument_group("extraction settings")
    extract_group.add_argument(
        "--base-url",
        "-b",
        type=str,
        metavar="URL",
        help="Document URL used to resolve relative URLs",
    )
    extract_group.add_argument(
        "--profile",
        "-p",
        choices=[p.value for p in ProfileName],
        default=None,
        help="Preset profile (default: custom, i.e. every syntax)",
    )
    extract_group.add_argument(
        "--syntax",
        "-s",
        nargs="+",
        choices=[s.value for s in Syntax],
        metavar="NAME",
        help=f"Syntaxes to extract ({', '.join(s.value for s in Syntax)})",
    )
    extract_group.add_argument(
        "--parser",
        choices=["html.parser", "lxml", "html5lib"],
        default=None,
        help="BeautifulSoup tree builder (default: html.parser)",
    )
    extract_group.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum nesting depth for items and JSON-LD nodes",
    )
    extract_group.add_argument(
        "--max-items",
        type=int,
        default=None,
        help="Maximum Microdata, Microformats2 or RDFa items per document (default: 10000)",
    )
    extract_group.add_argument(
        "--config",
        "-c",
        type=Path,
        metavar="FILE",
        help="YAML configuration file (requires metapull[yaml])",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--compact",
        action="store_true",
        help="Write JSON on a single line without highlighting",
    )
    output_group.add_argument(
        "--summary",
        action="store_true",
        help="Print a table of what was found instead of JSON",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose logging to stderr",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log errors",
    )

    return parser


def load_config(args: argparse.Namespace) -> ExtractionConfig:
    """
    Build the configuration from an optional YAML file and CLI flags.

    Flags given on the command line override values from the file.

    Raises:
        ConfigError: If the file cannot be read or the result is invalid
    """
    data: dict[str, Any] = {}

    if args.config:
        try:
            import yaml
        except ImportError as e:
            raise ConfigError("YAML config requires PyYAML: pip install metapull[yaml]") from e

        try:
            data = ExtractionConfig.from_yaml_file(args.config).model_dump(exclude_unset=True)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {args.config}: {e}") from e
        except ValidationError as e:
            raise ConfigError(f"Invalid config file {args.config}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse config file {args.config}: {e}") from e

    if args.base_url is not None:
        data["base_url"] = args.base_url
    if args.profile is not None:
        data["profile"] = args.profile
    if args.syntax:
        data["syntaxes"] = args.syntax
    if args.parser is not None:
        data["parser"] = args.parser
    if args.max_depth is not None:
        data.setdefault("limits", {})["max_depth"] = args.max_depth
    if args.max_items is not None:
        data.setdefault("limits", {})["max_items"] = args.max_items

    # Log level
    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    try:
        return ExtractionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def read_input(source: str) -> bytes:
    """Read HTML bytes from a file path or stdin ("-")."""
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def _count(value: Any) -> int:
    if isinstance(value, dict) and "json_endpoints" in value:
        return len(value["json_endpoints"]) + len(value["xml_endpoints"])
    if isinstance(value, dict) and value and all(isinstance(v, list) for v in value.values()):
        # microformats kinds / rel tokens
        return sum(len(v) for v in value.values())
    return len(value)


def render_summary(result: ExtractionResult, console: Console) -> None:
    """Print a table of what each syntax produced."""
    table = Table(title="metapull summary")
    table.add_column("Syntax", style="cyan")
    table.add_column("Found", justify="right")
    table.add_column("Details")

    for syntax in Syntax:
        value = getattr(result, syntax.value)
        if value is None:
            continue

        if syntax == Syntax.JSONLD:
            count = len(value.nodes)
            details = ", ".join(sorted({t for node in value.nodes for t in node.types}))
        elif syntax in (Syntax.MICRODATA, Syntax.RDFA):
            count = len(value)
            details = ", ".join(sorted({t for item in value for t in item.types}))
        elif syntax == Syntax.MICROFORMATS:
            count = _count(value)
            details = ", ".join(value)
        else:
            count = _count(value)
            details = ""

        table.add_row(syntax.value, str(count), details, style=None if count else "dim")

    console.print(table)

    if result.diagnostics:
        console.print(f"[yellow]{len(result.diagnostics)} diagnostics:[/yellow]")
        for diag in result.diagnostics:
            console.print(f"  {diag.kind.value}: {escape(diag.message)}")


def run_extractor(args: argparse.Namespace) -> int:
    """Run extraction with given arguments."""
    console = Console()
    err_console = Console(stderr=True)

    try:
        config = load_config(args)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
        force=True,
    )

    try:
        html = read_input(args.input)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Cannot read {escape(str(args.input))}: {escape(str(e))}")
        return 1

    try:
        result = MetadataExtractor(config).extract(html)
    except MetapullError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    if args.summary:
        render_summary(result, console)
    elif args.compact:
        sys.stdout.write(result.to_json(indent=None) + "\n")
    else:
        console.print_json(result.to_json())

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.doctor:
        from .doctor import run_doctor

        return run_doctor()

    return run_extractor(args)


if __name__ == "__main__":
    sys.exit(main())

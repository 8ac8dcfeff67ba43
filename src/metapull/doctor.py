"""Diagnostic tool for verifying metapull installation and dependencies."""

import sys
from importlib import import_module
from typing import Optional

try:
    from rich.console import Console
    from rich.table import Table

    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False
    Console = None  # type: ignore
    Table = None  # type: ignore


def check_dependency(
    module_name: str, package_name: Optional[str] = None, optional: bool = False
) -> tuple[bool, str]:
    """
    Check if a Python module is importable.

    Args:
        module_name: Name of the module to import
        package_name: Display name of the package (defaults to module_name)
        optional: Whether this is an optional dependency

    Returns:
        Tuple of (success: bool, message: str)
    """
    display_name = package_name or module_name

    try:
        import_module(module_name)
        return True, f"[OK] {display_name}"
    except ImportError:
        if optional:
            return False, f"[WARN] {display_name} (optional - not installed)"
        else:
            return False, f"[MISSING] {display_name}"


def check_parser(parser_name: str) -> tuple[bool, str]:
    """
    Check that BeautifulSoup can build a tree with the given parser.

    Args:
        parser_name: Tree builder name (html.parser, lxml, html5lib)

    Returns:
        Tuple of (success: bool, message: str)
    """
    try:
        from bs4 import BeautifulSoup, FeatureNotFound
    except ImportError:
        return False, f"[FAIL] Parser {parser_name} - beautifulsoup4 not installed"

    try:
        BeautifulSoup("<p itemscope>ok</p>", parser_name)
        return True, f"[OK] Parser {parser_name}"
    except FeatureNotFound:
        return False, f"[WARN] Parser {parser_name} (optional - not installed)"


def run_doctor(use_rich: bool = True) -> int:
    """
    Run diagnostic checks and display results.

    Args:
        use_rich: Whether to use rich formatting (if available)

    Returns:
        Exit code (0 if all core dependencies OK, 1 if any core dependency missing)
    """
    # Determine if we can use rich formatting
    use_rich = use_rich and RICH_AVAILABLE

    print("Running metapull diagnostics...\n")

    # Core dependencies
    core_checks = [
        ("bs4", "beautifulsoup4"),
        ("pydantic", "pydantic"),
        ("rich", "rich"),
    ]

    # Optional dependencies
    optional_checks = [
        ("yaml", "pyyaml", True),
        ("lxml", "lxml", True),
        ("html5lib", "html5lib", True),
    ]

    core_results = [check_dependency(mod, pkg) for mod, pkg in core_checks]
    optional_results = [check_dependency(mod, pkg, opt) for mod, pkg, opt in optional_checks]
    parser_results = [check_parser(name) for name in ("html.parser", "lxml", "html5lib")]

    all_checks = {
        "Core Dependencies": core_results,
        "Optional Dependencies": optional_results,
        "HTML Parsers": parser_results,
    }

    # Display results
    if use_rich:
        console = Console()

        for category, results in all_checks.items():
            table = Table(title=category, show_header=False, box=None)
            table.add_column("Status", style="bold")

            for success, message in results:
                style = "green" if success else ("yellow" if "optional" in message else "red")
                table.add_row(message, style=style)

            console.print(table)
            console.print()
    else:
        # Fallback to plain text
        for category, results in all_checks.items():
            print(f"{category}:")
            for _success, message in results:
                print(f"  {message}")
            print()

    # Check if any core dependencies failed
    core_failed = any(not success for success, _ in core_results)

    # Print summary
    if core_failed:
        print("\nWARNING: Some core dependencies are missing!")
        print("\nRecommended fixes:")
        print("  1. For pipx users: pipx reinstall metapull --force")
        print("  2. For pip users: pip install --upgrade --force-reinstall metapull")
        print("  3. For development: pip install -e .[dev]")
        return 1
    else:
        print("\nAll core dependencies installed correctly!")

        # Check if optional dependencies are missing
        optional_missing = [msg for success, msg in optional_results if not success]
        if optional_missing:
            print("\nOptional features available:")
            print("  - YAML config support: pip install metapull[yaml]")
            print("  - Faster parsing: pip install metapull[lxml]")
            print("  - Browser-grade parsing: pip install metapull[html5lib]")
            print("  - All optional features: pip install metapull[all]")

        return 0


if __name__ == "__main__":
    sys.exit(run_doctor())

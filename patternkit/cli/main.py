"""
Main CLI module with argument parsing and command execution.

This module provides the main CLI interface including:
- Command line argument parsing
- Command routing and execution
- Integration with the catalog and pattern demonstrations
"""
import argparse
import os
import sys
from typing import Any, Callable, Dict, List, Optional

from patternkit._package import DESCRIPTION, PACKAGE_NAME, __version__
from patternkit.application.decorators import get_demo, list_demos
from patternkit.cli.formatters import format_output
from patternkit.config.manager import ConfigurationManager
from patternkit.config.schemas import OUTPUT_FORMATS, AppConfig
from patternkit.domain.catalog import GLOSSARY, Catalog
from patternkit.domain.exceptions import DomainException
from patternkit.infrastructure.logging.logger import get_logger, setup_logging

logger = get_logger(__name__)


class FidelityCheckFailed(DomainException):
    """Raised by ``patterns verify`` when the catalog is not faithful."""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with resource-action structure."""
    parser = argparse.ArgumentParser(
        prog=PACKAGE_NAME,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s patterns list                   # List all patterns in document order
  %(prog)s patterns show observer          # Show one pattern
  %(prog)s patterns list --format table    # Display as table
  %(prog)s patterns verify                 # Check catalog fidelity
  %(prog)s demo proxy                      # Run the proxy demonstration
        """,
    )

    # Global options
    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level",
    )
    parser.add_argument("--format", choices=OUTPUT_FORMATS, help="Output format")
    parser.add_argument("--output", help="Output file (default: stdout)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="resource", help="Available resources")

    # Patterns resource
    patterns_parser = subparsers.add_parser("patterns", help="Browse the pattern catalog")
    patterns_subparsers = patterns_parser.add_subparsers(dest="action", help="Pattern actions")
    patterns_subparsers.add_parser("list", help="List all patterns")
    patterns_show = patterns_subparsers.add_parser("show", help="Show pattern details")
    patterns_show.add_argument("name", help="Pattern name, key or anchor")
    patterns_subparsers.add_parser("toc", help="Print the table of contents")
    patterns_subparsers.add_parser("markdown", help="Render the catalog as Markdown")
    patterns_subparsers.add_parser("verify", help="Check the catalog against the canonical document")

    # Glossary resource
    subparsers.add_parser("glossary", help="Show the glossary")

    # Demo resource
    demo_parser = subparsers.add_parser("demo", help="Run pattern demonstrations")
    demo_parser.add_argument("name", help="Pattern key, or 'all'")

    # Config resource
    config_parser = subparsers.add_parser("config", help="Inspect configuration")
    config_subparsers = config_parser.add_subparsers(dest="action", help="Config actions")
    config_subparsers.add_parser("show", help="Show the effective configuration")

    return parser


def _patterns_list(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    return {
        "patterns": [
            {
                "order": entry.order,
                "name": entry.name,
                "key": entry.key,
                "category": entry.category.value,
                "summary": entry.summary,
            }
            for entry in catalog
        ]
    }


def _patterns_show(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    return catalog.get(args.name).to_dict()


def _patterns_toc(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> str:
    return "\n".join(catalog.table_of_contents())


def _patterns_markdown(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> str:
    return catalog.to_markdown()


def _patterns_verify(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    problems = catalog.verify_fidelity()
    if problems:
        raise FidelityCheckFailed("Catalog fidelity check failed:\n- " + "\n- ".join(problems))
    return {"status": "ok", "patterns": len(catalog)}


def _glossary(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    return {"glossary": [{"term": name, "definition": GLOSSARY[name]} for name in catalog.names()]}


def _demo(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    if args.name == "all":
        return {key: get_demo(key)(config) for key in list_demos()}
    entry = catalog.get(args.name)
    return get_demo(entry.key)(config)


def _config_show(args: argparse.Namespace, catalog: Catalog, config: AppConfig) -> Any:
    return config.to_dict()


Action = Callable[[argparse.Namespace, Catalog, AppConfig], Any]

COMMANDS: Dict[tuple, Action] = {
    ("patterns", "list"): _patterns_list,
    ("patterns", "show"): _patterns_show,
    ("patterns", "toc"): _patterns_toc,
    ("patterns", "markdown"): _patterns_markdown,
    ("patterns", "verify"): _patterns_verify,
    ("glossary", None): _glossary,
    ("demo", None): _demo,
    ("config", "show"): _config_show,
}


def execute(args: argparse.Namespace, config: AppConfig) -> str:
    """Route parsed arguments to their action and format the result."""
    key = (args.resource, getattr(args, "action", None))
    action = COMMANDS.get(key)
    if action is None:
        raise DomainException(f"Unknown command: {' '.join(part for part in key if part)}")

    logger.debug("Executing command", resource=args.resource, action=key[1])
    result = action(args, Catalog.default(), config)
    if isinstance(result, str):
        return result
    return format_output(result, args.format or config.output.format)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.resource:
        parser.print_help()
        return 1

    try:
        config = ConfigurationManager(args.config).app_config
        logging_config = config.logging
        if args.log_level:
            logging_config = logging_config.model_copy(update={"level": args.log_level})
        setup_logging(logging_config)

        output = execute(args, config)
    except DomainException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        output_dir = os.path.dirname(args.output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as handle:
            handle.write(output + "\n")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

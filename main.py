# main.py

"""Entry point for the vendor marketplace (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.storage.backend import ConfigError, MarketplaceBackend

logger = logging.getLogger("vendor_market.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="vendor_market",
        description=f"{Settings.MARKETPLACE_NAME}: vendor product listings.",
        epilog="Routes: /, /auth, /admin/auth, /dashboard, "
        "/products/new, /products/edit/<id>, /admin",
    )
    parser.add_argument(
        "--route",
        default=Settings.HOME_ROUTE,
        help="Route to open in the TUI (default: /).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_catalog",
        help="Print the public catalog instead of launching the TUI.",
    )
    parser.add_argument(
        "--search",
        default=None,
        help="With --list: only products whose name, category or "
        "description contains this text.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --list (default: table).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the backend.",
    )
    return parser


def _create_backend() -> MarketplaceBackend:
    """Create the backend client or exit with a readable message."""
    try:
        return MarketplaceBackend.from_settings()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        Console(stderr=True).print(f"[red]{exc}[/red]")
        sys.exit(1)


def _run_tui(route: str) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import MarketplaceApp

    backend = _create_backend()
    try:
        app = MarketplaceApp(backend, initial_route=route)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("vendor_market TUI shutting down")


def _run_list(args: argparse.Namespace) -> None:
    """Print the catalog headless and exit."""
    from src.cli.runner import cli_list

    backend = _create_backend()
    exit_code = asyncio.run(
        cli_list(backend, args.output_format, args.search)
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run backend connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (default) or a headless command."""
    log_file = setup_logging()
    logger.info("vendor_market starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.list_catalog:
        _run_list(args)
    else:
        _run_tui(args.route)


if __name__ == "__main__":
    main()

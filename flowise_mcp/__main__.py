"""
Flowise MCP CLI entry point.

Provides the command-line interface for running the MCP server over stdio
and for inspecting the effective configuration.
"""

import argparse
import sys
from pathlib import Path

from flowise_mcp import __version__
from flowise_mcp.config.logging import get_logger, setup_logging
from flowise_mcp.config.settings import Settings, load_settings


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="flowise-mcp",
        description="MCP server exposing the Flowise API as tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"flowise-mcp {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "run",
        help="Serve the Flowise tools over stdio (default)",
    )

    subparsers.add_parser(
        "config",
        help="Show current configuration",
    )

    return parser


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== Flowise MCP Configuration ===\n")
    logger.info(f"Flowise Base URL: {settings.base_url}")
    logger.info(f"Flowise API Key: {'Set' if settings.api_key else 'Not set'}")
    logger.info(f"HTTP Timeout: {settings.timeout}s")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")

    return 0


def cmd_run(settings: Settings) -> int:
    """Serve the MCP tools over stdio until the client disconnects."""
    logger = get_logger(__name__)

    from flowise_mcp.tools import build_server

    try:
        server = build_server(settings)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    if not settings.api_key:
        logger.debug("No Flowise API key set; requests are sent without Authorization")

    logger.info("Flowise MCP server running on stdio")
    server.run(transport="stdio")
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level

    try:
        settings = load_settings(env_file=args.env_file, **overrides)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    # Default: serve, so MCP client configs can launch the bare command
    return cmd_run(settings)


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point and argument parsing"""

import argparse
import sys
from typing import List, Optional

import settings
from github_oauth import parse_scopes
from utils.debug_console import (
    SecretRedactingFilter,
    configure_logging,
    create_debug_console,
    setup_debug_logger,
)
from cli.cli_app import TokenDispenserCLI


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port must be between 1 and 65535, got {port}")
    return port


def _timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout: {value!r}")
    if timeout <= 0:
        raise argparse.ArgumentTypeError("timeout must be a positive number of seconds")
    return timeout


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="octopat",
        description="An interactive GitHub personal access token command line dispenser ✨",
    )
    parser.add_argument(
        "--port", "-p",
        type=_port,
        default=settings.PORT,
        help=f"Port to listen for responses from GitHub on (default: {settings.PORT})"
    )
    parser.add_argument(
        "--alias", "-a",
        default=settings.ALIAS,
        help=f"Name of the GitHub app stored on the keychain (default: {settings.ALIAS})"
    )
    parser.add_argument(
        "--scope", "-s",
        action="append",
        default=[],
        metavar="SCOPE",
        help="Scope to request; repeat or comma separate for several (prompted for when omitted)"
    )
    parser.add_argument(
        "--timeout", "-t",
        type=_timeout,
        default=settings.CALLBACK_TIMEOUT,
        help=f"Seconds to wait for the authorization (default: {settings.CALLBACK_TIMEOUT:g})"
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the authorization URL instead of opening a browser"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the stored app credentials for the alias and enter new ones"
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    redactor = SecretRedactingFilter()
    configure_logging(settings.LOG_LEVEL, redactor=redactor)

    debug_logger = None
    if args.debug:
        debug_logger = setup_debug_logger(settings.DEBUG_LOG_FILE, redactor=redactor)
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        debug_logger.debug(f"[CLI] Port: {args.port}, alias: {args.alias}, timeout: {args.timeout}")
    console = create_debug_console(debug_enabled=args.debug, debug_logger=debug_logger)

    if args.debug:
        console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {settings.DEBUG_LOG_FILE}[/yellow]")

    cli = TokenDispenserCLI(
        console=console,
        port=args.port,
        alias=args.alias,
        timeout=args.timeout,
        open_browser=not args.no_browser,
        redactor=redactor,
    )
    scopes = parse_scopes(",".join(args.scope))
    return cli.run(scopes=scopes or None, reset=args.reset)


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for ShotSolve."""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List

from PIL import Image

from core.auth.credential_manager import CredentialManager
from core.config.config_loader import ConfigLoader, ConfigurationError
from core.models.config import ShotSolveConfig
from core.models.shot import CapturedShot
from shotsolve.app import ShotSolveApp
from shotsolve.console import InteractiveConsole
from shotsolve.formatting import format_error, format_result, result_to_json
from shotsolve.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _load_config(args) -> ShotSolveConfig:
    loader = ConfigLoader()
    return ShotSolveConfig.from_dict(loader.load(args.config))


def _credentials(args) -> CredentialManager:
    return CredentialManager(use_keyring=not args.no_keyring)


def _resolve_language(args, app: ShotSolveApp) -> str:
    language = (args.language or app.config.solver.default_language).lower()
    if language not in app.languages:
        logger.error(f"Unsupported language '{language}'. Choose from: {', '.join(app.languages)}")
        sys.exit(2)
    return language


def _load_shots(app: ShotSolveApp, paths: List[str]) -> List[CapturedShot]:
    """Open image files as shots without touching the queue."""
    shots = []
    for path in paths:
        try:
            with Image.open(path) as img:
                img.load()
                shots.append(CapturedShot.from_image(img.copy(), app.config.queue.thumbnail_size))
        except OSError as e:
            logger.error(f"Could not read image {path}: {e}")
            sys.exit(1)
    return shots


def _report(app: ShotSolveApp, success: bool, as_json: bool) -> None:
    state = app.request_state
    if not success:
        print(format_error(state.last_error), file=sys.stderr)
        sys.exit(1)

    if as_json:
        print(result_to_json(state.last_result))
    else:
        print(format_result(state.last_result, state.mode))


def cmd_key(args, app: ShotSolveApp):
    """Manage the stored API key.

    Args:
        args: Parsed command-line arguments
        app: Application context
    """
    credentials = app.credentials

    if args.key_command == "set":
        api_key = args.api_key or getpass.getpass("API key: ")
        if not api_key.strip():
            logger.error("API key is empty")
            sys.exit(1)
        if not credentials.set_api_key(api_key):
            logger.error("Failed to store API key")
            sys.exit(1)
        print("API key saved")

    elif args.key_command == "status":
        print("API key is set" if credentials.has_api_key() else "API key is not set")

    elif args.key_command == "clear":
        if not credentials.delete_api_key():
            logger.error("Failed to remove API key")
            sys.exit(1)
        print("API key removed")


def cmd_languages(args, app: ShotSolveApp):
    """List the languages solutions can be written in."""
    default = app.config.solver.default_language
    for language in app.languages:
        marker = " (default)" if language == default else ""
        print(f"{language}{marker}")


def cmd_solve(args, app: ShotSolveApp):
    """Solve the problem shown in a screenshot file.

    Every file is read and checked, but only the first one is sent.

    Args:
        args: Parsed command-line arguments
        app: Application context
    """
    language = _resolve_language(args, app)
    # The queue is bypassed; the first file is always the one sent
    shots = _load_shots(app, args.images)

    success = asyncio.run(app.request_state.process(shots, language))
    _report(app, success, args.json)


def cmd_debug(args, app: ShotSolveApp):
    """Review an attempted solution against the original problem.

    Args:
        args: Parsed command-line arguments
        app: Application context
    """
    language = _resolve_language(args, app)
    problem = _load_shots(app, args.problem)
    attempts = _load_shots(app, args.attempt)

    # The newest attempt screenshot is sent last, after everything else
    success = asyncio.run(app.request_state.debug_process(
        problem + attempts[:-1],
        attempts[-1:],
        language
    ))
    _report(app, success, args.json)


def cmd_interactive(args, app: ShotSolveApp):
    """Run the interactive console.

    Args:
        args: Parsed command-line arguments
        app: Application context
    """
    language = _resolve_language(args, app)
    console = InteractiveConsole(app, language=language)
    try:
        asyncio.run(console.run())
    except KeyboardInterrupt:
        print()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="shotsolve",
        description="ShotSolve - solve coding problems from screenshots",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Global options
    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--no-keyring",
        action="store_true",
        help="Store the API key in a local file instead of the system keyring"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command"
    )

    # Key command
    key_parser = subparsers.add_parser(
        "key",
        help="Manage the provider API key"
    )
    key_subparsers = key_parser.add_subparsers(dest="key_command", required=True)
    key_set_parser = key_subparsers.add_parser("set", help="Store an API key")
    key_set_parser.add_argument(
        "api_key",
        nargs="?",
        help="API key (prompted for when omitted)"
    )
    key_subparsers.add_parser("status", help="Show whether an API key is stored")
    key_subparsers.add_parser("clear", help="Remove the stored API key")
    key_parser.set_defaults(func=cmd_key)

    # Languages command
    languages_parser = subparsers.add_parser(
        "languages",
        help="List supported solution languages"
    )
    languages_parser.set_defaults(func=cmd_languages)

    # Solve command
    solve_parser = subparsers.add_parser(
        "solve",
        help="Solve the problem in a screenshot file"
    )
    solve_parser.add_argument(
        "images",
        nargs="+",
        help="Screenshot files; only the first one is analyzed"
    )
    solve_parser.add_argument(
        "--language",
        help="Solution language (default: from config)"
    )
    solve_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )
    solve_parser.set_defaults(func=cmd_solve)

    # Debug command
    debug_parser = subparsers.add_parser(
        "debug",
        help="Review an attempted solution"
    )
    debug_parser.add_argument(
        "--problem",
        nargs="+",
        required=True,
        help="Screenshot(s) of the original problem"
    )
    debug_parser.add_argument(
        "--attempt",
        nargs="+",
        required=True,
        help="Screenshot(s) of the attempt; the last one is the newest"
    )
    debug_parser.add_argument(
        "--language",
        help="Language for the revised code (default: from config)"
    )
    debug_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )
    debug_parser.set_defaults(func=cmd_debug)

    # Interactive command
    interactive_parser = subparsers.add_parser(
        "interactive",
        help="Capture and solve from an interactive console"
    )
    interactive_parser.add_argument(
        "--language",
        help="Initial solution language (default: from config)"
    )
    interactive_parser.set_defaults(func=cmd_interactive)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    try:
        config = _load_config(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(config.logging, verbose=args.verbose)

    app = ShotSolveApp(config=config, credentials=_credentials(args))
    try:
        args.func(args, app)
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()

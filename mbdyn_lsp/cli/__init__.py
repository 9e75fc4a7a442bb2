"""
MBDyn language server CLI entry point.

Dispatches the ``lsp`` and ``check`` subcommands after loading the server
configuration and configuring logging.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from mbdyn_lsp import __version__
from mbdyn_lsp.config import load_server_config
from mbdyn_lsp.errors import ConfigurationError
from mbdyn_lsp.observability.logging import configure_logging

from .commands import cmd_check, cmd_lsp
from .errors import CLIFileNotFoundError, handle_cli_exception


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Language server and checker for MBDyn input files",
        prog="mbdyn-lsp",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a mbdyn-lsp.toml or .mbdyn-lsp.json configuration file'
    )
    parser.add_argument(
        '--workspace',
        default=None,
        help='Workspace root used to locate the configuration file (defaults to current working directory)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set MBDYN_LSP_VERBOSE=1)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set MBDYN_LSP_LOG_LEVEL)'
    )
    parser.add_argument(
        '--log-file',
        default=None,
        help='Write logs to this file instead of stderr (or set MBDYN_LSP_LOG_FILE)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    lsp_parser = subparsers.add_parser(
        'lsp',
        help='Start the language server over stdio'
    )
    lsp_parser.set_defaults(func=cmd_lsp)

    check_parser = subparsers.add_parser(
        'check',
        help='Report redefined constants in MBDyn input files'
    )
    check_parser.add_argument('files', nargs='+', help='Input files to check')
    check_parser.add_argument(
        '--max-problems',
        type=int,
        default=None,
        help='Maximum number of diagnostics per file (default: server configuration, 1000)'
    )
    check_parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Examples:
        Start the server for an editor:
        >>> main(['lsp'])  # doctest: +SKIP

        Check input files:
        >>> main(['check', 'model.mbd'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'command', None):
        parser.print_help()
        sys.exit(1)

    try:
        workspace_root = Path(args.workspace).resolve() if args.workspace else Path.cwd()
        explicit = Path(args.config).resolve() if args.config else None
        if explicit is not None and not explicit.exists():
            raise CLIFileNotFoundError(
                f"Configuration file not found: {explicit}",
                hint="Pass an existing file to --config",
            )
        config = load_server_config(workspace_root, explicit)
    except (CLIFileNotFoundError, ConfigurationError) as exc:
        handle_cli_exception(exc, verbose=args.verbose)
        return

    log_level = args.log_level or config.log_level
    log_file = Path(args.log_file) if args.log_file else config.log_file
    configure_logging(log_level, log_file)

    args.server_config = config
    args.func(args)


__all__ = ["build_parser", "main"]

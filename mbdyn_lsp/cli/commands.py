"""
Command handlers for the MBDyn language server CLI.

``lsp`` starts the language server over stdio; ``check`` runs the
constant redefinition diagnostics on input files without an editor.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from lsprotocol.types import Diagnostic

from ..config import ServerConfig
from ..lsp.diagnostics import compute_diagnostics
from ..lsp.state import TextSnapshot
from ..observability.logging import get_logger
from .errors import (
    CLIFileNotFoundError,
    CLIRuntimeError,
    CLIValidationError,
    handle_cli_exception,
)

logger = get_logger("mbdyn_lsp.cli")


def _server_config(args: argparse.Namespace) -> ServerConfig:
    config = getattr(args, "server_config", None)
    return config if config is not None else ServerConfig()


def cmd_lsp(args: argparse.Namespace) -> None:
    """
    Handle the 'lsp' subcommand to launch the MBDyn language server.

    Starts the server over stdio for editor integration. Log output goes to
    stderr or the configured log file because stdout carries the protocol.
    """
    try:
        from ..lsp.server import create_server

        server = create_server(_server_config(args))
        pid = os.getpid()
        print(f"Starting MBDyn language server (pid={pid})", file=sys.stderr)
        logger.info("Starting MBDyn language server (pid=%s)", pid)

        try:
            server.start_io()
        except KeyboardInterrupt:
            print("Language server interrupted by user.", file=sys.stderr)
        except Exception as exc:
            raise CLIRuntimeError(
                f"Language server stopped unexpectedly: {exc}",
            ) from exc

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def _diagnostic_record(path: Path, diagnostic: Diagnostic) -> Dict[str, Any]:
    start = diagnostic.range.start
    end = diagnostic.range.end
    return {
        "path": str(path),
        "line": start.line + 1,
        "column": start.character + 1,
        "end_line": end.line + 1,
        "end_column": end.character + 1,
        "severity": "error",
        "message": diagnostic.message,
        "source": diagnostic.source,
    }


def check_file(path: Path, config: ServerConfig, max_problems: int) -> List[Dict[str, Any]]:
    """Return the diagnostic records for one input file."""
    if not path.is_file():
        raise CLIFileNotFoundError(
            f"Input file not found: {path}",
            hint="Check the path passed to 'mbdyn-lsp check'",
            context={"path": str(path)},
        )
    text = path.read_text(encoding="utf-8")
    snapshot = TextSnapshot(uri=path.resolve().as_uri(), version=0, text=text)
    diagnostics = compute_diagnostics(snapshot, max_problems, source=config.diagnostic_source)
    return [_diagnostic_record(path, diagnostic) for diagnostic in diagnostics]


def cmd_check(args: argparse.Namespace) -> None:
    """
    Handle the 'check' subcommand.

    Prints one line per diagnostic (``path:line:column: error: message``)
    and exits with status 1 when any file redefines a constant.
    """
    try:
        config = _server_config(args)
        max_problems = args.max_problems if args.max_problems is not None else config.max_number_of_problems
        if max_problems < 0:
            raise CLIValidationError(
                f"--max-problems must not be negative, got {max_problems}",
                hint="Use 0 or a positive integer",
            )

        records: List[Dict[str, Any]] = []
        for raw_path in args.files:
            records.extend(check_file(Path(raw_path), config, max_problems))

        if args.format == "json":
            print(json.dumps(records, indent=2))
        else:
            for record in records:
                print(
                    f"{record['path']}:{record['line']}:{record['column']}: "
                    f"{record['severity']}: {record['message']} [{record['source']}]"
                )
            if not records:
                print(f"No problems found in {len(args.files)} file(s)")
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
        return

    if records:
        sys.exit(1)

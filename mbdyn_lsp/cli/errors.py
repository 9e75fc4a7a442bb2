"""CLI error types and the top-level handler used by every subcommand."""

import os
import sys
import traceback
from typing import Any, Dict, Optional


_CLI_TRACE_LIMIT = 4000


class CLIError(Exception):
    """Failure reported to the user with a code and an optional hint."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class CLIValidationError(CLIError):
    """Bad option value, such as a negative ``--max-problems``."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_VALIDATION_ERROR')
        super().__init__(message, **kwargs)


class CLIRuntimeError(CLIError):
    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_RUNTIME_ERROR')
        super().__init__(message, **kwargs)


class CLIFileNotFoundError(CLIError):
    """Missing input file or ``--config`` file."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_FILE_NOT_FOUND')
        super().__init__(message, **kwargs)


def format_cli_error(
    exc: BaseException,
    *,
    verbose: bool = False,
    include_traceback: bool = False
) -> str:
    """
    Render *exc* for stderr.

    ``CLIError`` shows its code and hint (and context when verbose);
    ``MbdynError`` uses its own ``format()``; anything else shows its type.

        >>> print(format_cli_error(CLIValidationError("Bad limit", hint="Use 0 or more")))
        Error [CLI_VALIDATION_ERROR]: Bad limit
        Hint: Use 0 or more
    """
    formatter = getattr(exc, "format", None)
    if callable(formatter) and not isinstance(exc, CLIError):
        return f"Error: {formatter()}"

    if isinstance(exc, CLIError):
        lines = [f"Error [{exc.code}]: {exc.message}"]
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        if verbose and exc.context:
            lines.append("\nContext:")
            lines.extend(f"  {key}: {value}" for key, value in exc.context.items())
    else:
        lines = [f"Error: {exc.__class__.__name__}: {exc}"]

    if include_traceback:
        lines.append("\nTraceback:")
        lines.append(format_traceback_excerpt())

    return "\n".join(lines)


def format_traceback_excerpt() -> str:
    # Only meaningful inside an ``except`` block.
    trace = traceback.format_exc().strip()
    if len(trace) <= _CLI_TRACE_LIMIT:
        return trace
    return f"{trace[:_CLI_TRACE_LIMIT - 3]}..."


def _env_flag(name: str) -> bool:
    val = os.getenv(name)
    if val is None:
        return False
    return val.strip().lower() in {"1", "true", "yes", "on"}


def cli_verbose_enabled(verbose_flag: bool = False) -> bool:
    return verbose_flag or _env_flag("MBDYN_LSP_VERBOSE") or _env_flag("MBDYN_LSP_DEBUG")


def cli_reraise_enabled() -> bool:
    return _env_flag("MBDYN_LSP_RERAISE") or _env_flag("MBDYN_LSP_DEBUG")


def handle_cli_exception(
    exc: BaseException,
    *,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Print *exc* to stderr and exit, or re-raise it when MBDYN_LSP_RERAISE is set."""
    verbose_effective = cli_verbose_enabled(verbose)
    if cli_reraise_enabled():
        raise exc

    print(
        format_cli_error(exc, verbose=verbose_effective, include_traceback=verbose_effective),
        file=sys.stderr,
    )
    sys.exit(exit_code)

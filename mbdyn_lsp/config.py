"""Server configuration support for the MBDyn language server."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    tomllib = None  # type: ignore

from .errors import ConfigurationError

DEFAULT_CONFIG_SECTION = "languageServerExample"
DEFAULT_DIAGNOSTIC_SOURCE = "ex"
DEFAULT_MAX_NUMBER_OF_PROBLEMS = 1000

_LOG_LEVELS = {"debug", "info", "warn", "warning", "error"}


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings that do not come from the editor."""

    config_section: str = DEFAULT_CONFIG_SECTION
    diagnostic_source: str = DEFAULT_DIAGNOSTIC_SOURCE
    # Used as the global settings value when the client cannot answer
    # scoped configuration requests.
    max_number_of_problems: int = DEFAULT_MAX_NUMBER_OF_PROBLEMS
    log_level: str = "info"
    log_file: Optional[Path] = None


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    if tomllib is None:
        raise ConfigurationError("TOML parsing requires Python 3.11 or later.", path=str(path))
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _as_int(value: Any, *, name: str, path: Optional[Path] = None) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"'{name}' must be an integer", path=str(path) if path else None)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"'{name}' must be an integer, got {value!r}",
            path=str(path) if path else None,
        ) from exc


def _as_level(value: Any, *, path: Optional[Path] = None) -> str:
    level = str(value).strip().lower()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level {value!r}",
            path=str(path) if path else None,
            hint="Use one of: debug, info, warn, error",
        )
    return level


def _parse_server_section(data: Dict[str, Any], root: Path, path: Path) -> ServerConfig:
    section = data.get("server") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("'server' must be a table", path=str(path))
    config = ServerConfig()
    if "config_section" in section:
        config = replace(config, config_section=str(section["config_section"]))
    if "diagnostic_source" in section:
        config = replace(config, diagnostic_source=str(section["diagnostic_source"]))
    if "max_number_of_problems" in section:
        config = replace(
            config,
            max_number_of_problems=_as_int(section["max_number_of_problems"], name="max_number_of_problems", path=path),
        )
    logging_section = data.get("logging") or {}
    if not isinstance(logging_section, dict):
        raise ConfigurationError("'logging' must be a table", path=str(path))
    if "level" in logging_section:
        config = replace(config, log_level=_as_level(logging_section["level"], path=path))
    if logging_section.get("file"):
        log_file = Path(str(logging_section["file"]))
        if not log_file.is_absolute():
            log_file = (root / log_file).resolve()
        config = replace(config, log_file=log_file)
    return config


def _apply_environment(config: ServerConfig, environ: Mapping[str, str]) -> ServerConfig:
    level = environ.get("MBDYN_LSP_LOG_LEVEL")
    if level:
        config = replace(config, log_level=_as_level(level))
    log_file = environ.get("MBDYN_LSP_LOG_FILE")
    if log_file:
        config = replace(config, log_file=Path(log_file))
    max_problems = environ.get("MBDYN_LSP_MAX_PROBLEMS")
    if max_problems:
        config = replace(config, max_number_of_problems=_as_int(max_problems, name="MBDYN_LSP_MAX_PROBLEMS"))
    return config


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    candidates = ["mbdyn-lsp.toml", ".mbdyn-lsp.json"]
    for candidate in candidates:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_server_config(
    root: Path,
    explicit: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    root = root.resolve()
    environ = os.environ if environ is None else environ
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return _apply_environment(ServerConfig(), environ)

    try:
        if config_path.suffix == ".toml":
            data = _read_toml_config(config_path)
        else:
            data = _read_json_config(config_path)
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read configuration: {exc}", path=str(config_path)) from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be a table", path=str(config_path))

    config = _parse_server_section(data, root, config_path)
    return _apply_environment(config, environ)


__all__ = [
    "DEFAULT_CONFIG_SECTION",
    "DEFAULT_DIAGNOSTIC_SOURCE",
    "DEFAULT_MAX_NUMBER_OF_PROBLEMS",
    "ServerConfig",
    "load_server_config",
    "locate_config_file",
]

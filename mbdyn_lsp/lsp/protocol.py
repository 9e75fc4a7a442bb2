"""Shared protocol helpers for the MBDyn language server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

from lsprotocol.types import Diagnostic

from mbdyn_lsp.config import DEFAULT_MAX_NUMBER_OF_PROBLEMS


@dataclass(frozen=True, slots=True)
class ClientCapabilities:
    """Optional protocol features the client declared during ``initialize``."""

    configuration: bool = False
    workspace_folders: bool = False
    diagnostic_related_information: bool = False


@dataclass(frozen=True, slots=True)
class EffectiveSettings:
    """Resolved configuration applied to one open document."""

    max_number_of_problems: int = DEFAULT_MAX_NUMBER_OF_PROBLEMS

    @classmethod
    def from_payload(cls, payload: Any, default: Optional["EffectiveSettings"] = None) -> "EffectiveSettings":
        """Build settings from the ``{"maxNumberOfProblems": n}`` wire shape.

        Missing, null or malformed payloads fall back to *default*.
        """

        fallback = default or cls()
        value = _lookup(payload, "maxNumberOfProblems")
        if value is None or isinstance(value, bool):
            return fallback
        try:
            return cls(max_number_of_problems=int(value))
        except (TypeError, ValueError):
            return fallback


class LanguageClient(Protocol):
    """Operations the core needs from the connected editor."""

    def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None: ...

    async def fetch_configuration(self, scope_uri: str, section: str) -> Any: ...

    async def register_configuration_changes(self) -> None: ...

    def log(self, message: str) -> None: ...


def _lookup(payload: Any, key: str) -> Any:
    if payload is None:
        return None
    if isinstance(payload, Mapping):
        return payload.get(key)
    return getattr(payload, key, None)


def section_payload(settings: Any, section: str) -> Any:
    """Return ``settings[section]`` for dict or attribute style payloads."""

    return _lookup(settings, section)


__all__ = [
    "ClientCapabilities",
    "EffectiveSettings",
    "LanguageClient",
    "section_payload",
]

"""Unified error model for the MBDyn language server."""

from __future__ import annotations

from typing import Optional


class MbdynError(Exception):
    """Base class for errors surfaced by the language server and the CLI."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        if self.path:
            meta_parts.append(self.path)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class ConfigurationError(MbdynError):
    """Raised when the server configuration file or environment is invalid."""

    code = "CONFIG_INVALID"


class SettingsFetchError(MbdynError):
    """Raised when the client fails to answer a scoped configuration request."""

    code = "SETTINGS_FETCH_FAILED"


__all__ = ["MbdynError", "ConfigurationError", "SettingsFetchError"]

"""Per-document settings cache backed by ``workspace/configuration`` requests."""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Dict, Optional, Union

from mbdyn_lsp.errors import SettingsFetchError
from mbdyn_lsp.observability.logging import get_logger

from .capabilities import CapabilityRegistry
from .protocol import EffectiveSettings, LanguageClient, section_payload

_Entry = Union["asyncio.Future[EffectiveSettings]", EffectiveSettings]


class SettingsCache:
    """Supplies the effective settings for a document URI.

    When the client answers scoped configuration requests, the first
    lookup for a URI stores the in-flight request future under that URI
    before it resolves.  Every concurrent lookup for the same document awaits
    that one future, so a document never has more than one outstanding
    fetch.  Once the future completes the entry is replaced by the resolved
    value.

    When the client cannot answer such requests nothing is cached: every
    lookup returns :attr:`global_settings`, which only changes on
    ``workspace/didChangeConfiguration``.
    """

    def __init__(
        self,
        client: LanguageClient,
        capabilities: CapabilityRegistry,
        *,
        section: str,
        defaults: Optional[EffectiveSettings] = None,
    ) -> None:
        self.logger = get_logger("mbdyn_lsp.lsp.settings")
        self.section = section
        self.defaults = defaults or EffectiveSettings()
        self.global_settings = self.defaults
        self._client = client
        self._capabilities = capabilities
        self._entries: Dict[str, _Entry] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, uri: str) -> EffectiveSettings:
        if not self._capabilities.configuration:
            return self.global_settings
        entry = self._entries.get(uri)
        if entry is None:
            future = asyncio.ensure_future(self._fetch(uri))
            self._entries[uri] = future
            future.add_done_callback(functools.partial(self._settle, uri))
            entry = future
        if isinstance(entry, EffectiveSettings):
            return entry
        return await entry

    def configuration_changed(self, settings: Any) -> None:
        if self._capabilities.configuration:
            self.logger.debug("Configuration changed; dropping %d cached entries", len(self._entries))
            self._entries.clear()
            return
        payload = section_payload(settings, self.section)
        if payload is None:
            self.global_settings = self.defaults
        else:
            self.global_settings = EffectiveSettings.from_payload(payload, self.defaults)
        self.logger.debug("Global settings replaced: %s", self.global_settings)

    def evict(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    async def _fetch(self, uri: str) -> EffectiveSettings:
        self.logger.debug("Requesting '%s' settings for %s", self.section, uri)
        try:
            payload = await self._client.fetch_configuration(uri, self.section)
        except Exception as exc:
            raise SettingsFetchError(
                f"Configuration request for {uri} failed: {exc}",
                path=uri,
            ) from exc
        return EffectiveSettings.from_payload(payload, self.defaults)

    def _settle(self, uri: str, future: "asyncio.Future[EffectiveSettings]") -> None:
        if self._entries.get(uri) is not future or future.cancelled():
            return
        error = future.exception()
        if error is not None:
            # The failed future stays cached: later validations of this
            # document fail the same way until it is closed or the
            # configuration changes.
            self.logger.error("Settings for %s are unavailable: %s", uri, error)
            return
        self._entries[uri] = future.result()


__all__ = ["SettingsCache"]

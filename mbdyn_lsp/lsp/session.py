"""Mutable server state, owned by the language server instance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from lsprotocol.types import Diagnostic

from mbdyn_lsp.config import ServerConfig

from .capabilities import CapabilityRegistry
from .completion import CompletionBridge
from .diagnostics import DiagnosticEngine
from .protocol import EffectiveSettings, LanguageClient
from .settings import SettingsCache
from .state import DocumentState
from .workspace import DocumentStore


@dataclass
class ServerSession:
    """Everything a handler may read or change, passed explicitly."""

    client: LanguageClient
    config: ServerConfig
    capabilities: CapabilityRegistry
    settings: SettingsCache
    documents: DocumentStore
    engine: DiagnosticEngine
    completion: CompletionBridge

    @classmethod
    def create(cls, client: LanguageClient, config: Optional[ServerConfig] = None) -> "ServerSession":
        config = config or ServerConfig()
        capabilities = CapabilityRegistry()
        settings = SettingsCache(
            client,
            capabilities,
            section=config.config_section,
            defaults=EffectiveSettings(max_number_of_problems=config.max_number_of_problems),
        )
        return cls(
            client=client,
            config=config,
            capabilities=capabilities,
            settings=settings,
            documents=DocumentStore(settings),
            engine=DiagnosticEngine(client, settings, source=config.diagnostic_source),
            completion=CompletionBridge(),
        )

    async def validate(self, document: DocumentState) -> List[Diagnostic]:
        return await self.engine.validate(document)


__all__ = ["ServerSession"]

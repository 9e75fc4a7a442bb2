"""Client capability negotiation and the server capabilities it implies."""

from __future__ import annotations

from typing import Any, Optional

from lsprotocol.types import (
    CompletionOptions,
    PositionEncodingKind,
    ServerCapabilities,
    TextDocumentSyncKind,
    WorkspaceFoldersServerCapabilities,
    WorkspaceOptions,
)

from mbdyn_lsp.observability.logging import get_logger

from .protocol import ClientCapabilities


def _flag(root: Any, *path: str) -> bool:
    node = root
    for name in path:
        if node is None:
            return False
        node = getattr(node, name, None)
    return bool(node)


class CapabilityRegistry:
    """Records what the client supports; frozen once ``initialize`` is handled."""

    def __init__(self) -> None:
        self.logger = get_logger("mbdyn_lsp.lsp.capabilities")
        self._client: Optional[ClientCapabilities] = None

    @property
    def negotiated(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> ClientCapabilities:
        # Before negotiation every optional feature counts as unsupported.
        return self._client or ClientCapabilities()

    @property
    def configuration(self) -> bool:
        return self.client.configuration

    @property
    def workspace_folders(self) -> bool:
        return self.client.workspace_folders

    @property
    def diagnostic_related_information(self) -> bool:
        return self.client.diagnostic_related_information

    def negotiate(self, capabilities: Any) -> ClientCapabilities:
        """Read the client's declared capabilities from ``InitializeParams``."""

        if self._client is not None:
            self.logger.warning("Ignoring repeated capability negotiation")
            return self._client
        self._client = ClientCapabilities(
            configuration=_flag(capabilities, "workspace", "configuration"),
            workspace_folders=_flag(capabilities, "workspace", "workspace_folders"),
            diagnostic_related_information=_flag(
                capabilities, "text_document", "publish_diagnostics", "related_information"
            ),
        )
        self.logger.info(
            "Client capabilities: configuration=%s workspace_folders=%s related_information=%s",
            self._client.configuration,
            self._client.workspace_folders,
            self._client.diagnostic_related_information,
        )
        return self._client

    def server_capabilities(self) -> ServerCapabilities:
        # Document positions are tracked in UTF-16 code units.
        capabilities = ServerCapabilities(
            position_encoding=PositionEncodingKind.Utf16,
            text_document_sync=TextDocumentSyncKind.Incremental,
            completion_provider=CompletionOptions(resolve_provider=True),
        )
        if self.workspace_folders:
            capabilities.workspace = WorkspaceOptions(
                workspace_folders=WorkspaceFoldersServerCapabilities(supported=True),
            )
        return capabilities

    def apply(self, target: ServerCapabilities) -> ServerCapabilities:
        """Overwrite the negotiated fields on a framework-built capability object."""

        advertised = self.server_capabilities()
        target.position_encoding = advertised.position_encoding
        target.text_document_sync = advertised.text_document_sync
        target.completion_provider = advertised.completion_provider
        target.workspace = advertised.workspace
        return target


__all__ = ["CapabilityRegistry"]

"""pygls based Language Server entrypoint."""

from __future__ import annotations

import os
import uuid
from typing import Any, Generator, Optional, Sequence

from lsprotocol.types import (
    INITIALIZE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    ConfigurationItem,
    ConfigurationParams,
    Diagnostic,
    InitializeParams,
    InitializeResult,
    LogMessageParams,
    MessageType,
    PublishDiagnosticsParams,
    Registration,
    RegistrationParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.protocol import LanguageServerProtocol, lsp_method

from mbdyn_lsp import __version__
from mbdyn_lsp.config import ServerConfig
from mbdyn_lsp.observability.logging import get_logger

from .handlers import register_all
from .session import ServerSession

logger = get_logger("mbdyn_lsp.lsp.server")


class PyglsClient:
    """Routes the core's client operations through a pygls server."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self._server.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, diagnostics=list(diagnostics))
        )

    async def fetch_configuration(self, scope_uri: str, section: str) -> Any:
        result = await self._server.workspace_configuration_async(
            ConfigurationParams(items=[ConfigurationItem(scope_uri=scope_uri, section=section)])
        )
        return result[0] if result else None

    async def register_configuration_changes(self) -> None:
        await self._server.client_register_capability_async(
            RegistrationParams(
                registrations=[Registration(id=str(uuid.uuid4()), method=WORKSPACE_DID_CHANGE_CONFIGURATION)]
            )
        )

    def log(self, message: str) -> None:
        logger.info(message)
        self._server.window_log_message(LogMessageParams(type=MessageType.Log, message=message))


class MbdynLanguageServerProtocol(LanguageServerProtocol):
    """Sends the capabilities negotiated by the session instead of the pygls defaults.

    pygls builds the server capabilities after the user ``initialize`` handler
    has run, so the negotiated fields are written onto the finished result.
    """

    @lsp_method(INITIALIZE)
    def lsp_initialize(self, params: InitializeParams) -> Generator[Any, Any, InitializeResult]:
        result = yield from super().lsp_initialize(params)
        self._server.session.capabilities.apply(result.capabilities)
        return result


class MbdynLanguageServer(LanguageServer):
    """Concrete LanguageServer holding the MBDyn session state."""

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        super().__init__(
            name="mbdyn-lsp",
            version=__version__,
            text_document_sync_kind=TextDocumentSyncKind.Incremental,
            protocol_cls=MbdynLanguageServerProtocol,
        )
        self.session = ServerSession.create(PyglsClient(self), config)
        register_all(self)


def create_server(config: Optional[ServerConfig] = None) -> MbdynLanguageServer:
    return MbdynLanguageServer(config)


def main() -> None:
    server = create_server()
    logger.info("Starting MBDyn LSP (pid=%s)", os.getpid())
    server.start_io()


if __name__ == "__main__":  # pragma: no cover
    main()

"""Initialize handshake handlers."""

from __future__ import annotations

from lsprotocol.types import InitializedParams, InitializeParams

from mbdyn_lsp.observability.logging import get_logger

logger = get_logger("mbdyn_lsp.lsp.handlers.lifecycle")


def register(server) -> None:
    session = server.session

    @server.feature("initialize")
    def _initialize(ls, params: InitializeParams) -> None:
        # The protocol applies the negotiated capabilities to the initialize result.
        session.capabilities.negotiate(params.capabilities)

    @server.feature("initialized")
    async def _initialized(ls, params: InitializedParams) -> None:  # noqa: ARG001
        if session.capabilities.configuration:
            await session.client.register_configuration_changes()
            logger.info("Registered for workspace/didChangeConfiguration")

"""Document synchronisation handlers; every content change is re-validated."""

from __future__ import annotations

from lsprotocol.types import (
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
)


def register(server) -> None:
    session = server.session

    @server.feature("textDocument/didOpen")
    async def _did_open(ls, params: DidOpenTextDocumentParams) -> None:
        document = session.documents.did_open(params.text_document)
        await session.validate(document)

    @server.feature("textDocument/didChange")
    async def _did_change(ls, params: DidChangeTextDocumentParams) -> None:
        if not params.content_changes:
            return
        document = session.documents.did_change(
            params.text_document.uri,
            params.text_document.version or 0,
            params.content_changes,
        )
        await session.validate(document)

    @server.feature("textDocument/didClose")
    async def _did_close(ls, params: DidCloseTextDocumentParams) -> None:
        session.documents.did_close(params.text_document.uri)

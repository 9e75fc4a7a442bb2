"""Completion handlers."""

from __future__ import annotations

from lsprotocol.types import CompletionItem, CompletionOptions, CompletionParams


def register(server) -> None:
    bridge = server.session.completion

    @server.feature("textDocument/completion", CompletionOptions(resolve_provider=True))
    async def _completion(ls, params: CompletionParams):
        return bridge.list(params)

    @server.feature("completionItem/resolve")
    async def _resolve(ls, item: CompletionItem):
        return bridge.resolve(item)

"""Workspace notification handlers."""

from __future__ import annotations

from lsprotocol.types import (
    DidChangeConfigurationParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
)


def register(server) -> None:
    session = server.session

    @server.feature("workspace/didChangeConfiguration")
    async def _did_change_configuration(ls, params: DidChangeConfigurationParams) -> None:
        # Open documents keep their diagnostics until their next edit.
        session.settings.configuration_changed(params.settings)

    @server.feature("workspace/didChangeWatchedFiles")
    async def _did_change_watched_files(ls, params: DidChangeWatchedFilesParams) -> None:  # noqa: ARG001
        session.client.log("We received a file change event")

    @server.feature("workspace/didChangeWorkspaceFolders")
    async def _did_change_workspace_folders(ls, params: DidChangeWorkspaceFoldersParams) -> None:  # noqa: ARG001
        if session.capabilities.workspace_folders:
            session.client.log("Workspace folder change event received.")

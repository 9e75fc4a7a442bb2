from __future__ import annotations

from lsprotocol.types import (
    CompletionItem,
    CompletionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    InitializedParams,
    InitializeParams,
    Position,
    TextDocumentContentChangeWholeDocument,
    TextDocumentIdentifier,
    VersionedTextDocumentIdentifier,
    WorkspaceFoldersChangeEvent,
)

from tests.lsp.conftest import RecordingServer, client_capabilities

URI = "file:///models/pendulum.mbd"
CONSTANT = "set: const integer N = 4;\n"


async def _initialize(server: RecordingServer, **flags: bool) -> None:
    params = InitializeParams(capabilities=client_capabilities(**flags), process_id=None, root_uri=None)
    await server.notify("initialize", params)
    await server.notify("initialized", InitializedParams())


def test_all_features_registered(server: RecordingServer) -> None:
    assert {
        "initialize",
        "initialized",
        "textDocument/didOpen",
        "textDocument/didChange",
        "textDocument/didClose",
        "textDocument/completion",
        "completionItem/resolve",
        "workspace/didChangeConfiguration",
        "workspace/didChangeWatchedFiles",
        "workspace/didChangeWorkspaceFolders",
    } <= set(server.handlers)
    assert server.options["textDocument/completion"].resolve_provider is True


async def test_initialize_negotiates_client_capabilities(server: RecordingServer, client) -> None:
    await _initialize(server, workspace_folders=True)
    capabilities = server.session.capabilities
    assert capabilities.negotiated
    assert capabilities.workspace_folders
    assert not capabilities.configuration
    assert client.registrations == 0


async def test_initialized_registers_for_configuration_changes(server: RecordingServer, client) -> None:
    await _initialize(server, configuration=True)
    assert client.registrations == 1


async def test_open_change_close_cycle(server: RecordingServer, client, make_item) -> None:
    await _initialize(server, configuration=True)
    await server.notify("textDocument/didOpen", DidOpenTextDocumentParams(text_document=make_item(CONSTANT)))
    assert client.published[-1][0] == URI
    assert len(client.published[-1][1]) == 1
    assert URI in server.session.settings

    await server.notify(
        "textDocument/didChange",
        DidChangeTextDocumentParams(
            text_document=VersionedTextDocumentIdentifier(uri=URI, version=2),
            content_changes=[TextDocumentContentChangeWholeDocument(text=CONSTANT + "set: integer N = 5;\n")],
        ),
    )
    assert len(client.published[-1][1]) == 2
    assert server.session.documents.get(URI).version == 2

    published = len(client.published)
    await server.notify(
        "textDocument/didClose",
        DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri=URI)),
    )
    assert URI not in server.session.documents
    assert URI not in server.session.settings
    assert len(client.published) == published


async def test_change_without_content_is_ignored(server: RecordingServer, client, make_item) -> None:
    await _initialize(server)
    await server.notify("textDocument/didOpen", DidOpenTextDocumentParams(text_document=make_item(CONSTANT)))
    await server.notify(
        "textDocument/didChange",
        DidChangeTextDocumentParams(
            text_document=VersionedTextDocumentIdentifier(uri=URI, version=2),
            content_changes=[],
        ),
    )
    assert len(client.published) == 1


async def test_configuration_change_updates_global_limit(server: RecordingServer, client, make_item) -> None:
    await _initialize(server)
    await server.notify(
        "workspace/didChangeConfiguration",
        DidChangeConfigurationParams(settings={"languageServerExample": {"maxNumberOfProblems": 0}}),
    )
    # Diagnostics already published are left alone until the next edit.
    assert client.published == []
    await server.notify("textDocument/didOpen", DidOpenTextDocumentParams(text_document=make_item(CONSTANT)))
    assert client.published[-1][1] == []


async def test_completion_and_resolve(server: RecordingServer) -> None:
    await _initialize(server)
    params = CompletionParams(
        text_document=TextDocumentIdentifier(uri=URI),
        position=Position(line=0, character=0),
    )
    items = await server.notify("textDocument/completion", params)
    assert any(item.label == "begin:" for item in items)

    resolved = await server.notify("completionItem/resolve", CompletionItem(label="Time", data="builtin-variable"))
    assert resolved.detail == "Built-in variable"


async def test_watched_file_events_are_logged(server: RecordingServer, client) -> None:
    await _initialize(server)
    await server.notify("workspace/didChangeWatchedFiles", DidChangeWatchedFilesParams(changes=[]))
    assert client.messages == ["We received a file change event"]


async def test_workspace_folder_events_logged_only_when_supported(server: RecordingServer, client) -> None:
    event = DidChangeWorkspaceFoldersParams(event=WorkspaceFoldersChangeEvent(added=[], removed=[]))

    await _initialize(server)
    await server.notify("workspace/didChangeWorkspaceFolders", event)
    assert client.messages == []


async def test_workspace_folder_events_logged(server: RecordingServer, client) -> None:
    event = DidChangeWorkspaceFoldersParams(event=WorkspaceFoldersChangeEvent(added=[], removed=[]))

    await _initialize(server, workspace_folders=True)
    await server.notify("workspace/didChangeWorkspaceFolders", event)
    assert client.messages == ["Workspace folder change event received."]

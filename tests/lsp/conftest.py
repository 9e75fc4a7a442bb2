from __future__ import annotations

import asyncio
import itertools
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from lsprotocol.types import (
    ClientCapabilities,
    Diagnostic,
    PublishDiagnosticsClientCapabilities,
    TextDocumentClientCapabilities,
    TextDocumentItem,
    WorkspaceClientCapabilities,
)

from mbdyn_lsp.config import ServerConfig
from mbdyn_lsp.lsp.handlers import register_all
from mbdyn_lsp.lsp.server import MbdynLanguageServer
from mbdyn_lsp.lsp.session import ServerSession


class FakeClient:
    """Records what the server sends and answers configuration requests."""

    def __init__(self, settings: Any = None) -> None:
        self.settings = {"maxNumberOfProblems": 1000} if settings is None else settings
        self.published: List[Tuple[str, List[Diagnostic]]] = []
        self.fetches: List[Tuple[str, str]] = []
        self.registrations = 0
        self.messages: List[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    def publish_diagnostics(self, uri: str, diagnostics) -> None:
        self.published.append((uri, list(diagnostics)))

    async def fetch_configuration(self, scope_uri: str, section: str) -> Any:
        self.fetches.append((scope_uri, section))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.settings

    async def register_configuration_changes(self) -> None:
        self.registrations += 1

    def log(self, message: str) -> None:
        self.messages.append(message)


class RecordingServer:
    """Collects handlers registered through ``feature`` like a pygls server."""

    def __init__(self, session: ServerSession) -> None:
        self.session = session
        self.handlers: Dict[str, Callable] = {}
        self.options: Dict[str, Any] = {}

    def feature(self, method: str, options: Any = None):
        def decorator(func):
            self.handlers[method] = func
            self.options[method] = options
            return func

        return decorator

    async def notify(self, method: str, params: Any) -> Any:
        result = self.handlers[method](self, params)
        if asyncio.iscoroutine(result):
            return await result
        return result


class WireClient:
    """Drives a real server protocol with JSON-RPC messages, like an editor would.

    Outgoing data is captured through the protocol writer.  The server's
    ``workspace/configuration`` and ``client/registerCapability`` requests are
    answered automatically.
    """

    def __init__(self, server: MbdynLanguageServer, settings: Any = None) -> None:
        self.server = server
        self.protocol = server.protocol
        self.settings = {"maxNumberOfProblems": 1000} if settings is None else settings
        self.sent: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)
        self.protocol.set_writer(self, include_headers=False)

    # Writer interface used by the protocol
    def write(self, data: bytes) -> None:
        message = json.loads(data.decode("utf-8"))
        self.sent.append(message)
        if "id" not in message or "method" not in message:
            return
        if message["method"] == "workspace/configuration":
            result = [self.settings for _ in message["params"]["items"]]
        else:
            result = None
        asyncio.get_running_loop().call_soon(self._receive, {"id": message["id"], "result": result})

    def _receive(self, payload: Dict[str, Any]) -> None:
        message = self.protocol.structure_message({"jsonrpc": "2.0", **payload})
        self.protocol.handle_message(message)

    def request(self, method: str, params: Any) -> int:
        msg_id = next(self._ids)
        self._receive({"id": msg_id, "method": method, "params": params})
        return msg_id

    def notify(self, method: str, params: Any) -> None:
        self._receive({"method": method, "params": params})

    def outgoing(self, method: str) -> List[Dict[str, Any]]:
        return [message for message in self.sent if message.get("method") == method]

    def response(self, msg_id: int) -> Optional[Dict[str, Any]]:
        for message in self.sent:
            if message.get("id") == msg_id and "method" not in message:
                return message
        return None

    async def wait_for(self, predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async def _poll() -> None:
            while not predicate():
                await asyncio.sleep(0.01)

        await asyncio.wait_for(_poll(), timeout)

    async def initialize(self, capabilities: Dict[str, Any]) -> Dict[str, Any]:
        msg_id = self.request(
            "initialize",
            {"processId": None, "rootUri": None, "capabilities": capabilities},
        )
        await self.wait_for(lambda: self.response(msg_id) is not None)
        self.notify("initialized", {})
        return self.response(msg_id)


def client_capabilities(
    *,
    configuration: bool = False,
    workspace_folders: bool = False,
    related_information: bool = False,
) -> ClientCapabilities:
    return ClientCapabilities(
        workspace=WorkspaceClientCapabilities(
            configuration=configuration,
            workspace_folders=workspace_folders,
        ),
        text_document=TextDocumentClientCapabilities(
            publish_diagnostics=PublishDiagnosticsClientCapabilities(
                related_information=related_information,
            ),
        ),
    )


@pytest.fixture()
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture()
def session(client: FakeClient) -> ServerSession:
    return ServerSession.create(client, ServerConfig())


@pytest.fixture()
def configured_session(session: ServerSession) -> ServerSession:
    """Session whose client answers scoped configuration requests."""
    session.capabilities.negotiate(client_capabilities(configuration=True))
    return session


@pytest.fixture()
def server(session: ServerSession) -> RecordingServer:
    recording = RecordingServer(session)
    register_all(recording)
    return recording


@pytest.fixture()
def make_capabilities():
    return client_capabilities


@pytest.fixture()
def make_item():
    def _make_item(text: str, *, uri: str = "file:///models/pendulum.mbd", version: int = 1) -> TextDocumentItem:
        return TextDocumentItem(uri=uri, language_id="mbdyn", version=version, text=text)

    return _make_item


@pytest.fixture()
def wire() -> WireClient:
    return WireClient(MbdynLanguageServer(ServerConfig()))

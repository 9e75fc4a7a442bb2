"""Open document tracking for the MBDyn language server."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

from lsprotocol.types import TextDocumentContentChangeEvent, TextDocumentItem
from pygls.uris import to_fs_path

from mbdyn_lsp.observability.logging import get_logger

from .settings import SettingsCache
from .state import DocumentState


class DocumentStore:
    """Owns every open document; closing one also evicts its cached settings."""

    def __init__(self, settings: SettingsCache) -> None:
        self.logger = get_logger("mbdyn_lsp.lsp.workspace")
        self._settings = settings
        self._open_documents: Dict[str, DocumentState] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._open_documents

    def __len__(self) -> int:
        return len(self._open_documents)

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> DocumentState:
        document = DocumentState(
            uri=item.uri,
            text=item.text,
            version=item.version,
            language_id=item.language_id,
        )
        self._open_documents[item.uri] = document
        self.logger.debug("Opened %s (version %s)", item.uri, item.version)
        return document

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> DocumentState:
        document = self._open_documents.get(uri)
        if document is None:
            self.logger.warning("Change for unopened document %s; seeding from disk", uri)
            document = DocumentState(uri=uri, text=self._read_document_from_fs(uri), version=version)
            self._open_documents[uri] = document
        document.apply_changes(changes, version)
        return document

    def did_close(self, uri: str) -> Optional[DocumentState]:
        document = self._open_documents.pop(uri, None)
        self._settings.evict(uri)
        self.logger.debug("Closed %s", uri)
        return document

    def get(self, uri: str) -> Optional[DocumentState]:
        return self._open_documents.get(uri)

    def all(self) -> Iterable[DocumentState]:
        return list(self._open_documents.values())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _read_document_from_fs(self, uri: str) -> str:
        try:
            fs_path = to_fs_path(uri)
        except ValueError:
            return ""
        if not fs_path:
            return ""
        try:
            return Path(fs_path).read_text(encoding="utf-8")
        except OSError:
            return ""


__all__ = ["DocumentStore"]

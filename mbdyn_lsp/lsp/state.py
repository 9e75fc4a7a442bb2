"""Document level state tracking for the MBDyn language server."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from lsprotocol.types import Position, Range, TextDocumentContentChangeEvent


def compute_line_offsets(text: str) -> Tuple[int, ...]:
    """Return the start offset of every line; ``\\r``, ``\\n`` and ``\\r\\n`` end a line."""

    offsets: List[int] = [0]
    idx = 0
    length = len(text)
    while idx < length:
        char = text[idx]
        if char == "\r":
            next_idx = idx + 1
            if next_idx < length and text[next_idx] == "\n":
                offsets.append(next_idx + 1)
                idx = next_idx + 1
            else:
                offsets.append(idx + 1)
                idx += 1
        elif char == "\n":
            offsets.append(idx + 1)
            idx += 1
        else:
            idx += 1
    return tuple(offsets)


def _utf16_length(text: str) -> int:
    return sum(2 if ord(char) > 0xFFFF else 1 for char in text)


def _index_for_utf16(text: str, units: int) -> int:
    consumed = 0
    for index, char in enumerate(text):
        if consumed >= units:
            return index
        consumed += 2 if ord(char) > 0xFFFF else 1
    return len(text)


@dataclass(frozen=True)
class TextSnapshot:
    """Immutable view of a document's text at one version.

    Positions use the LSP default encoding: ``character`` counts UTF-16
    code units.
    """

    uri: str
    version: int
    text: str
    line_offsets: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "line_offsets", compute_line_offsets(self.text))

    @property
    def line_count(self) -> int:
        return len(self.line_offsets)

    def line_text(self, line: int) -> str:
        start = self.line_offsets[line]
        end = self.line_offsets[line + 1] if line + 1 < len(self.line_offsets) else len(self.text)
        return self.text[start:end].rstrip("\r\n")

    def position_at(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self.text))
        line = bisect_right(self.line_offsets, offset) - 1
        start = self.line_offsets[line]
        return Position(line=line, character=_utf16_length(self.text[start:offset]))

    def offset_at(self, position: Position) -> int:
        if position.line >= len(self.line_offsets):
            return len(self.text)
        line = max(position.line, 0)
        start = self.line_offsets[line]
        content = self.line_text(line)
        return start + _index_for_utf16(content, max(position.character, 0))

    def range_of(self, start: int, end: int) -> Range:
        return Range(start=self.position_at(start), end=self.position_at(end))


@dataclass
class DocumentState:
    """Tracks the current text of an open text document."""

    uri: str
    text: str
    version: int
    language_id: str = "mbdyn"
    _snapshot: TextSnapshot = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._snapshot = TextSnapshot(uri=self.uri, version=self.version, text=self.text)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def snapshot(self) -> TextSnapshot:
        return self._snapshot

    def apply_changes(self, changes: Sequence[TextDocumentContentChangeEvent], version: int) -> None:
        """Apply incremental or full content changes in order."""

        snapshot = self._snapshot
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                snapshot = TextSnapshot(uri=self.uri, version=version, text=change.text)
                continue
            start = snapshot.offset_at(change_range.start)
            end = snapshot.offset_at(change_range.end)
            text = snapshot.text[:start] + change.text + snapshot.text[end:]
            snapshot = TextSnapshot(uri=self.uri, version=version, text=text)
        self.replace(snapshot.text, version)

    def replace(self, text: str, version: int) -> None:
        self.text = text
        self.version = version
        self._snapshot = TextSnapshot(uri=self.uri, version=version, text=text)


__all__ = ["DocumentState", "TextSnapshot", "compute_line_offsets"]

from __future__ import annotations

from lsprotocol.types import (
    Position,
    Range,
    TextDocumentContentChangePartial,
    TextDocumentContentChangeWholeDocument,
)

from mbdyn_lsp.lsp.state import DocumentState, TextSnapshot, compute_line_offsets


def _edit(start: tuple[int, int], end: tuple[int, int], text: str) -> TextDocumentContentChangePartial:
    return TextDocumentContentChangePartial(
        range=Range(
            start=Position(line=start[0], character=start[1]),
            end=Position(line=end[0], character=end[1]),
        ),
        text=text,
    )


def test_line_offsets_accept_every_line_ending() -> None:
    assert compute_line_offsets("a\nb\r\nc\rd") == (0, 2, 5, 7)
    assert compute_line_offsets("") == (0,)


def test_position_round_trip_with_crlf() -> None:
    snapshot = TextSnapshot(uri="file:///a.mbd", version=1, text="begin: data;\r\nend: data;\r\n")
    offset = snapshot.text.index("end")
    position = snapshot.position_at(offset)
    assert (position.line, position.character) == (1, 0)
    assert snapshot.offset_at(position) == offset
    assert snapshot.line_text(0) == "begin: data;"


def test_position_counts_utf16_code_units() -> None:
    snapshot = TextSnapshot(uri="file:///a.mbd", version=1, text="# \U0001F600 x\n")
    offset = snapshot.text.index("x")
    assert snapshot.position_at(offset).character == 5
    assert snapshot.offset_at(Position(line=0, character=5)) == offset


def test_offsets_are_clamped() -> None:
    snapshot = TextSnapshot(uri="file:///a.mbd", version=1, text="ab\ncd")
    assert snapshot.position_at(100) == Position(line=1, character=2)
    assert snapshot.offset_at(Position(line=9, character=0)) == len(snapshot.text)
    assert snapshot.offset_at(Position(line=0, character=99)) == 2


def test_incremental_changes_apply_in_order() -> None:
    document = DocumentState(uri="file:///a.mbd", text="set: real a = 1;\n", version=1)
    document.apply_changes(
        [
            _edit((0, 5), (0, 5), "const "),
            _edit((0, 20), (0, 21), "2"),
        ],
        version=2,
    )
    assert document.text == "set: const real a = 2;\n"
    assert document.version == 2
    assert document.snapshot().version == 2


def test_full_replacement_change() -> None:
    document = DocumentState(uri="file:///a.mbd", text="old", version=1)
    document.apply_changes([TextDocumentContentChangeWholeDocument(text="new\ntext")], version=3)
    assert document.text == "new\ntext"
    assert document.snapshot().line_count == 2


def test_snapshot_is_not_affected_by_later_changes() -> None:
    document = DocumentState(uri="file:///a.mbd", text="first", version=1)
    snapshot = document.snapshot()
    document.replace("second", 2)
    assert snapshot.text == "first"
    assert document.snapshot().text == "second"

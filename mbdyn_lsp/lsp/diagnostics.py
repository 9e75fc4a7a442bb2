"""Constant redefinition diagnostics.

A line that contains the ``set:`` marker, the ``const`` modifier and a
statement terminator declares a constant, for example::

    set: const integer N_BODIES = 4;

The text before the first ``=`` or ``;`` minus the ``set:`` marker and the
``const`` modifier is the declared name-and-type fragment (``integer N_BODIES``).  The
whole document is then scanned for that fragment, tolerating any amount of
whitespace between its tokens, and every occurrence is reported as an
illegal redefinition.  The declaring occurrence is matched as well, and no
token boundary is enforced, so a single-letter constant also matches inside
longer identifiers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from lsprotocol.types import Diagnostic, DiagnosticSeverity

from mbdyn_lsp.config import DEFAULT_DIAGNOSTIC_SOURCE
from mbdyn_lsp.observability.logging import get_logger

from .protocol import LanguageClient
from .settings import SettingsCache
from .state import DocumentState, TextSnapshot

SET_MARKER = "set:"
CONST_KEYWORD = "const"
TERMINATOR = ";"
ASSIGNMENT = "="

_LINE_BREAK = re.compile(r"\r?\n")
_FRAGMENT_END = re.compile(re.escape(ASSIGNMENT) + "|" + re.escape(TERMINATOR))


@dataclass(frozen=True)
class DeclaredConstant:
    """Whitespace-tolerant token sequence taken from one declaration line."""

    tokens: Tuple[str, ...]
    line: int

    def match_at(self, text: str, start: int) -> Optional[int]:
        """Return the end offset if the constant occurs at *start*."""

        position = start
        length = len(text)
        for index, token in enumerate(self.tokens):
            if index:
                while position < length and text[position].isspace():
                    position += 1
            if not text.startswith(token, position):
                return None
            position += len(token)
        return position


@dataclass(frozen=True)
class ConstantMatch:
    start: int
    end: int
    text: str
    constant: DeclaredConstant


def declared_constant_from_line(line: str, index: int) -> Optional[DeclaredConstant]:
    if SET_MARKER not in line or CONST_KEYWORD not in line or TERMINATOR not in line:
        return None
    fragment = _FRAGMENT_END.split(line, 1)[0]
    marker = fragment.find(SET_MARKER)
    if marker != -1:
        fragment = fragment[marker + len(SET_MARKER):]
    fragment = fragment.replace(CONST_KEYWORD, "", 1)
    tokens = tuple(fragment.split())
    if not tokens:
        return None
    return DeclaredConstant(tokens=tokens, line=index)


def extract_declared_constants(text: str) -> List[DeclaredConstant]:
    constants: List[DeclaredConstant] = []
    for index, line in enumerate(_LINE_BREAK.split(text)):
        constant = declared_constant_from_line(line, index)
        if constant is not None:
            constants.append(constant)
    return constants


class ConstantMatcher:
    """Finds non-overlapping occurrences of any declared constant.

    At each offset the constants are tried in declaration order and the first
    one that matches wins, the same result an ordered alternation gives.
    """

    def __init__(self, constants: Sequence[DeclaredConstant]) -> None:
        self.constants = tuple(constants)
        self._by_first_char: Dict[str, List[DeclaredConstant]] = {}
        for constant in self.constants:
            self._by_first_char.setdefault(constant.tokens[0][0], []).append(constant)

    def __bool__(self) -> bool:
        return bool(self.constants)

    def finditer(self, text: str) -> Iterator[ConstantMatch]:
        position = 0
        length = len(text)
        while position < length:
            match = self._match_at(text, position)
            if match is None:
                position += 1
                continue
            yield match
            position = match.end

    def _match_at(self, text: str, position: int) -> Optional[ConstantMatch]:
        for constant in self._by_first_char.get(text[position], ()):
            end = constant.match_at(text, position)
            if end is not None:
                return ConstantMatch(start=position, end=end, text=text[position:end], constant=constant)
        return None


def redefinition_message(matched: str) -> str:
    return f"{matched} is a const variable, it cannot be redefined."


def compute_diagnostics(
    snapshot: TextSnapshot,
    max_number_of_problems: int,
    *,
    source: str = DEFAULT_DIAGNOSTIC_SOURCE,
) -> List[Diagnostic]:
    """Return at most *max_number_of_problems* redefinition diagnostics."""

    diagnostics: List[Diagnostic] = []
    if max_number_of_problems <= 0:
        return diagnostics
    matcher = ConstantMatcher(extract_declared_constants(snapshot.text))
    if not matcher:
        return diagnostics
    for match in matcher.finditer(snapshot.text):
        diagnostics.append(
            Diagnostic(
                range=snapshot.range_of(match.start, match.end),
                message=redefinition_message(match.text),
                severity=DiagnosticSeverity.Error,
                source=source,
            )
        )
        if len(diagnostics) >= max_number_of_problems:
            break
    return diagnostics


class DiagnosticEngine:
    """Validates documents and publishes the result as a full replacement set."""

    def __init__(
        self,
        client: LanguageClient,
        settings: SettingsCache,
        *,
        source: str = DEFAULT_DIAGNOSTIC_SOURCE,
    ) -> None:
        self.logger = get_logger("mbdyn_lsp.lsp.diagnostics")
        self.source = source
        self._client = client
        self._settings = settings

    async def validate(self, document: DocumentState) -> List[Diagnostic]:
        # The snapshot pins the text of the triggering event; the document may
        # change again while the settings request is outstanding.
        snapshot = document.snapshot()
        settings = await self._settings.get(snapshot.uri)
        diagnostics = compute_diagnostics(
            snapshot,
            settings.max_number_of_problems,
            source=self.source,
        )
        self.logger.debug(
            "%s (version %s): %d diagnostic(s)", snapshot.uri, snapshot.version, len(diagnostics)
        )
        self._client.publish_diagnostics(snapshot.uri, diagnostics)
        return diagnostics


__all__ = [
    "ConstantMatch",
    "ConstantMatcher",
    "DeclaredConstant",
    "DiagnosticEngine",
    "compute_diagnostics",
    "declared_constant_from_line",
    "extract_declared_constants",
    "redefinition_message",
]

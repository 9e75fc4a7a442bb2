"""Completion list and resolve over the static lexicon."""

from __future__ import annotations

from typing import Any, List, Optional

from lsprotocol.types import CompletionItem

from .lexicon import DEFAULT_LEXICON, Lexicon, LexiconCategory


class CompletionBridge:
    """Serves ``textDocument/completion`` and ``completionItem/resolve``."""

    def __init__(self, lexicon: Optional[Lexicon] = None) -> None:
        self.lexicon = lexicon or DEFAULT_LEXICON

    def list(self, params: Any = None) -> List[CompletionItem]:
        """Return the whole catalog; position and trigger are not consulted."""

        return [
            CompletionItem(label=entry.label, kind=entry.kind, data=entry.category.value)
            for entry in self.lexicon.entries()
        ]

    def resolve(self, item: CompletionItem) -> CompletionItem:
        category = LexiconCategory.from_data(item.data)
        if category is None:
            return item
        item.detail = category.detail
        documentation = self.lexicon.documentation(category, item.label)
        if documentation is not None:
            item.documentation = documentation
        return item


__all__ = ["CompletionBridge"]

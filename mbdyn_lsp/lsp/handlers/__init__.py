"""Handler registration helpers."""

from __future__ import annotations

from . import completion, diagnostics, lifecycle, workspace


def register_all(server) -> None:
    lifecycle.register(server)
    diagnostics.register(server)
    completion.register(server)
    workspace.register(server)


__all__ = ["register_all"]

"""Language Server Protocol implementation for MBDyn input files."""

from .server import MbdynLanguageServer, create_server

__all__ = [
    "MbdynLanguageServer",
    "create_server",
]

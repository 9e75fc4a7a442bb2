"""
MBDyn language server package.

This package provides editor support for MBDyn input files over the
Language Server Protocol.  The server publishes diagnostics for constants
that are redefined after their ``set: const`` declaration and offers
completion for the statements, types, built-in variables, functions,
directives and drives of the input language.

The code is organised into several modules:

* ``lsp`` – the pygls based language server: capability negotiation,
  per-document settings, document synchronisation, the diagnostic engine
  and the completion catalog.
* ``cli`` – a command line interface that starts the server over stdio or
  checks input files without an editor.
* ``config`` – server configuration loaded from ``mbdyn-lsp.toml`` and
  environment variables.
* ``observability`` – logging helpers shared by the server and the CLI.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]

"""
Main entry point for the CLI when run as a module.

This allows the CLI to be executed using:
    python -m mbdyn_lsp.cli
"""

from . import main

if __name__ == '__main__':
    main()

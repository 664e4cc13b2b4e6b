"""
Shared test infrastructure for olparse.

Modules:
- file_utils: writing source files and keyword overlays
- cli_utils: running the CLI in a subprocess
- parser_utils: scanner/parser factories over inline source text
"""

from .file_utils import write, write_source, write_keywords
from .cli_utils import run_cli, jload
from .parser_utils import make_scanner, make_parser, SampleParser

__all__ = [
    # File utilities
    "write",
    "write_source",
    "write_keywords",
    # CLI
    "run_cli",
    "jload",
    # Parser helpers
    "make_scanner",
    "make_parser",
    "SampleParser",
]

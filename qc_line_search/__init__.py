"""Package utilities for qc-line-search.

The line search itself lives in the top-level packages `core/`, `geometry/`
and `runtime/`. This package carries the distribution version and re-exports
the public entry points.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from core.exceptions import LineSearchError, LineSearchErrorKind
from core.parameters.line_search_parameters import (
    LineSearchParameters,
    LineSearchTermination,
)
from core.parameters.loader import load_parameters
from runtime.line_search import (
    LineSearchBacktracking,
    LineSearchResult,
    line_search_backtracking,
)
from runtime.logging_config import setup_logging

try:
    __version__ = version("qc-line-search")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "LineSearchBacktracking",
    "LineSearchError",
    "LineSearchErrorKind",
    "LineSearchParameters",
    "LineSearchResult",
    "LineSearchTermination",
    "line_search_backtracking",
    "load_parameters",
    "setup_logging",
]

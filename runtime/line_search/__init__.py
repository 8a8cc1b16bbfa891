"""Constrained backtracking line search for quasiconformal mappings."""

from .backtracking import (
    LineSearchBacktracking,
    LineSearchResult,
    LineSearchState,
    TrialRecord,
    line_search_backtracking,
)
from .feasibility import FeasibilityChecker, FeasibilityReport
from .model import EnergyEvaluation, QuasiconformalModel

__all__ = [
    "EnergyEvaluation",
    "FeasibilityChecker",
    "FeasibilityReport",
    "LineSearchBacktracking",
    "LineSearchResult",
    "LineSearchState",
    "QuasiconformalModel",
    "TrialRecord",
    "line_search_backtracking",
]

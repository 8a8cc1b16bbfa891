"""Custom exception types for the quasiconformal line search."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineSearchErrorKind(Enum):
    """Fatal outcomes of a single line-search call."""

    PRECONDITION = "precondition"
    ITERATION_BUDGET = "iteration_budget"
    STEP_TOO_SMALL = "step_too_small"
    STEP_TOO_LARGE = "step_too_large"
    CONFIGURATION = "configuration"


class QCLineSearchError(Exception):
    """Base class for domain-specific errors."""


class InvalidParameterError(QCLineSearchError):
    """Raised when a line-search parameter is outside its admissible range."""

    def __init__(self, key: str, value, message: str | None = None) -> None:
        if message is None:
            message = f"Invalid value {value!r} for line-search parameter '{key}'."
        super().__init__(message)
        self.key = key
        self.value = value


class LineSearchError(QCLineSearchError):
    """Raised when a line search cannot produce an acceptable step."""

    kind: LineSearchErrorKind = LineSearchErrorKind.PRECONDITION

    def __init__(
        self,
        message: str,
        *,
        step: float | None = None,
        iteration: int | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.iteration = iteration


class PreconditionError(LineSearchError):
    """Raised for a non-positive initial step or a non-descent direction."""

    kind = LineSearchErrorKind.PRECONDITION


class IterationBudgetExceeded(LineSearchError):
    """Raised when the iteration budget is exhausted without acceptance."""

    kind = LineSearchErrorKind.ITERATION_BUDGET


class StepBoundError(LineSearchError):
    """Raised when the step leaves ``[min_step, max_step]``."""


class StepTooSmallError(StepBoundError):
    kind = LineSearchErrorKind.STEP_TOO_SMALL


class StepTooLargeError(StepBoundError):
    kind = LineSearchErrorKind.STEP_TOO_LARGE


class TerminationModeError(LineSearchError):
    """Raised for an unrecognized line-search termination mode."""

    kind = LineSearchErrorKind.CONFIGURATION


_KIND_TO_EXCEPTION = {
    LineSearchErrorKind.PRECONDITION: PreconditionError,
    LineSearchErrorKind.ITERATION_BUDGET: IterationBudgetExceeded,
    LineSearchErrorKind.STEP_TOO_SMALL: StepTooSmallError,
    LineSearchErrorKind.STEP_TOO_LARGE: StepTooLargeError,
    LineSearchErrorKind.CONFIGURATION: TerminationModeError,
}


@dataclass(frozen=True)
class LineSearchFailure:
    """Value form of a fatal line-search outcome."""

    kind: LineSearchErrorKind
    message: str
    step: float | None = None
    iteration: int | None = None

    def to_exception(self) -> LineSearchError:
        exc_type = _KIND_TO_EXCEPTION[self.kind]
        return exc_type(self.message, step=self.step, iteration=self.iteration)


__all__ = [
    "LineSearchErrorKind",
    "QCLineSearchError",
    "InvalidParameterError",
    "LineSearchError",
    "PreconditionError",
    "IterationBudgetExceeded",
    "StepBoundError",
    "StepTooSmallError",
    "StepTooLargeError",
    "TerminationModeError",
    "LineSearchFailure",
]

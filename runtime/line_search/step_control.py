"""Step size bookkeeping for one backtracking line search."""

from __future__ import annotations

from core.exceptions import LineSearchErrorKind, LineSearchFailure


class StepSizeController:
    """Shrink the step after each rejection and police its bounds.

    The step only ever decreases; ``history`` holds every step proposed,
    including a final one rejected by ``check_bounds``.
    """

    def __init__(
        self,
        step: float,
        *,
        min_step: float,
        max_step: float,
        max_iterations: int,
        decrease_factor: float = 0.5,
    ) -> None:
        self.step = float(step)
        self.min_step = float(min_step)
        self.max_step = float(max_step)
        self.max_iterations = int(max_iterations)
        self.decrease_factor = float(decrease_factor)
        self.history = [self.step]

    def check_budget(self, iteration: int) -> LineSearchFailure | None:
        """Failure if no trial may follow trial number ``iteration``."""
        if iteration >= self.max_iterations:
            return LineSearchFailure(
                LineSearchErrorKind.ITERATION_BUDGET,
                "The line search routine reached the maximum number of "
                f"iterations ({self.max_iterations}).",
                step=self.step,
                iteration=iteration,
            )
        return None

    def check_bounds(self, iteration: int) -> LineSearchFailure | None:
        """Failure if the current step lies outside ``[min_step, max_step]``."""
        if not (self.step > 0.0 and self.step >= self.min_step):
            return LineSearchFailure(
                LineSearchErrorKind.STEP_TOO_SMALL,
                f"The line search step {self.step:.3e} became smaller than the "
                f"minimum allowed value {self.min_step:.3e}.",
                step=self.step,
                iteration=iteration,
            )
        if self.step > self.max_step:
            return LineSearchFailure(
                LineSearchErrorKind.STEP_TOO_LARGE,
                f"The line search step {self.step:.3e} became larger than the "
                f"maximum allowed value {self.max_step:.3e}.",
                step=self.step,
                iteration=iteration,
            )
        return None

    def shrink(self) -> float:
        self.step *= self.decrease_factor
        self.history.append(self.step)
        return self.step

    def retry(self, iteration: int) -> LineSearchFailure | None:
        """Prepare the trial after rejected trial ``iteration``.

        Checks the budget, shrinks the step and checks the new step's bounds.
        """
        failure = self.check_budget(iteration)
        if failure is not None:
            return failure
        self.shrink()
        return self.check_bounds(iteration + 1)

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{self.__class__.__name__}({params})"

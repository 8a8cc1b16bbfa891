"""Backtracking line search for quasiconformal mapping energies.

One call starts from a feasible state ``(x, w)`` and walks along the
directions ``(drt, dw)``. Each trial is rebuilt from the base state, its
mapping constrained to the unit disk, and tested for admissibility before the
(expensive) energy is evaluated. Rejected trials halve the step (or apply the
configured ``decrease_factor``) until a trial is accepted or the iteration
budget or step bounds are exhausted.

Failures are returned as values on ``LineSearchResult``; call
``LineSearchResult.unwrap()`` to turn them into exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Any, Callable

import numpy as np

from core.exceptions import LineSearchErrorKind, LineSearchFailure
from core.parameters.line_search_parameters import LineSearchParameters
from runtime.line_search.candidate import build_candidate
from runtime.line_search.feasibility import FeasibilityChecker
from runtime.line_search.model import QuasiconformalModel, normalize_energy_output
from runtime.line_search.step_control import StepSizeController
from runtime.line_search.termination import TerminationDecision, evaluate_termination

logger = logging.getLogger("qc_line_search")


class LineSearchState(Enum):
    """Verdict on a trial; EVALUATING until the trial has been scored."""

    EVALUATING = "evaluating"
    REJECTED_INFEASIBLE = "rejected_infeasible"
    REJECTED_ENERGY = "rejected_energy"
    ACCEPTED = "accepted"
    FAILED = "failed"


@dataclass
class TrialRecord:
    """One evaluated (or rejected-before-evaluation) trial step."""

    iteration: int
    step: float
    state: LineSearchState
    energy: float | None = None
    reason: str | None = None


@dataclass
class LineSearchResult:
    """Outcome of one line search.

    On success ``x``, ``w``, ``mu`` and ``energy`` describe the accepted trial
    and ``step`` is the step that produced it. On failure they are ``None``,
    ``error`` describes the failure and ``step`` is the step at which the
    search gave up.
    """

    x: np.ndarray | None
    w: np.ndarray | None
    mu: np.ndarray | None
    energy: float | None
    step: float
    iterations: int
    state: LineSearchState
    error: LineSearchFailure | None = None
    trials: list[TrialRecord] = field(default_factory=list)
    lifted_positions: np.ndarray | None = None
    growth: np.ndarray | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def steps(self) -> list[float]:
        return [t.step for t in self.trials]

    def unwrap(self) -> "LineSearchResult":
        """Return ``self`` on success, raise the matching ``LineSearchError`` otherwise."""
        if self.error is not None:
            raise self.error.to_exception()
        return self


class LineSearchBacktracking:
    """Constrained backtracking line search bound to one mapping model.

    Parameters
    ----------
    model : QuasiconformalModel
        Supplies the triangulation, the boundary vertices, the conversion of
        the real unknowns to a Beltrami coefficient and the energy.
    params : LineSearchParameters, optional
        Search configuration; defaults are used when omitted.
    intersection_test : Callable, optional
        Replacement for ``geometry.self_intersection.find_self_intersections``.
    """

    def __init__(
        self,
        model: QuasiconformalModel,
        params: LineSearchParameters | None = None,
        intersection_test: Callable | None = None,
    ) -> None:
        self.model = model
        self.params = (params if params is not None else LineSearchParameters()).validate()
        self.intersection_test = intersection_test
        # Trials of the most recent search; the last one stays EVALUATING if the
        # model raised while it was being scored.
        self.trials: list[TrialRecord] = []

    def _fail(
        self,
        failure: LineSearchFailure,
        step: float,
        iterations: int,
        trials: list[TrialRecord],
    ) -> LineSearchResult:
        logger.warning("Line search failed: %s", failure.message)
        return LineSearchResult(
            x=None,
            w=None,
            mu=None,
            energy=None,
            step=step,
            iterations=iterations,
            state=LineSearchState.FAILED,
            error=failure,
            trials=trials,
        )

    @staticmethod
    def _precondition(message: str, step: float) -> LineSearchFailure:
        return LineSearchFailure(
            LineSearchErrorKind.PRECONDITION, message, step=step, iteration=None
        )

    def _check_inputs(self, x, w, drt, dw, grad, step, fixed_idx, boundary_idx):
        if not (np.isfinite(step) and step > 0.0):
            return self._precondition(f"'step' must be positive; got {step!r}", step)

        if x.ndim != 1 or w.ndim != 1:
            return self._precondition("'x' and 'w' must be 1-D arrays", step)
        if drt.shape != x.shape or grad.shape != x.shape:
            return self._precondition(
                f"'drt' {drt.shape} and 'grad' {grad.shape} must match 'x' {x.shape}",
                step,
            )
        if dw.shape != w.shape:
            return self._precondition(
                f"'dw' {dw.shape} must match 'w' {w.shape}", step
            )
        for name, idx in (("fixed", fixed_idx), ("boundary", boundary_idx)):
            if idx.size and (idx.min() < 0 or idx.max() >= w.shape[0]):
                return self._precondition(
                    f"{name} vertex indices out of range for {w.shape[0]} vertices",
                    step,
                )
        return None

    def search(
        self,
        x,
        w,
        drt,
        dw,
        grad,
        fx: float,
        step: float,
        *,
        fixed_idx=(),
        interpolant: Any = None,
        calc_growth_energy: bool = True,
        calc_mu_energy: bool = True,
        callback: Callable[[int, np.ndarray, np.ndarray], None] | None = None,
    ) -> LineSearchResult:
        """Search along ``(drt, dw)`` from the feasible state ``(x, w)``.

        Parameters
        ----------
        x, w : array_like
            Current real unknowns and quasiconformal mapping.
        drt, dw : array_like
            Search directions for ``x`` and ``w``.
        grad : array_like
            Energy gradient with respect to ``x``; ``grad @ drt`` must be negative.
        fx : float
            Energy of the current state.
        step : float
            Initial step size, strictly positive.
        fixed_idx : array_like, optional
            Vertices whose mapping is pinned to its current value.
        interpolant : Any, optional
            Forwarded untouched to ``model.calculate_energy``.
        calc_growth_energy, calc_mu_energy : bool, optional
            Energy terms to include, forwarded to the model.
        callback : Callable, optional
            Called as ``callback(iteration, x_trial, w_trial)`` for every
            trial after the constraints are applied.

        Returns
        -------
        LineSearchResult
            The accepted state, or the failure that ended the search. The
            caller's arrays are never modified.
        """
        self.trials = []
        p = self.params
        real_t, cplx_t, idx_t = p.real_type, p.complex_type, p.index_type

        xp = np.array(x, dtype=real_t)
        wp = np.array(w, dtype=cplx_t)
        drt = np.asarray(drt, dtype=real_t)
        dw = np.asarray(dw, dtype=cplx_t)
        grad = np.asarray(grad, dtype=real_t)
        fixed_idx = np.asarray(fixed_idx, dtype=idx_t).ravel()
        boundary_idx = np.asarray(self.model.boundary_indices, dtype=idx_t).ravel()
        step = float(step)
        fx_init = float(fx)

        failure = self._check_inputs(xp, wp, drt, dw, grad, step, fixed_idx, boundary_idx)
        if failure is not None:
            return self._fail(failure, step, 0, self.trials)

        # Projection of the gradient onto the search direction
        dg_init = float(np.dot(grad, drt))
        if not dg_init < 0.0:
            failure = self._precondition(
                "The update direction increases the objective function value "
                f"(grad . drt = {dg_init:.6e})",
                step,
            )
            return self._fail(failure, step, 0, self.trials)

        controller = StepSizeController(
            step,
            min_step=p.min_step,
            max_step=p.max_step,
            max_iterations=p.max_line_search,
            decrease_factor=p.decrease_factor,
        )
        checker = FeasibilityChecker(
            self.model.faces,
            check_self_intersections=p.check_self_intersections,
            intersection_test=self.intersection_test,
        )
        mode = p.termination

        failure = controller.check_bounds(0)
        if failure is not None:
            return self._fail(failure, step, 0, self.trials)

        x_trial = np.empty_like(xp)
        w_trial = np.empty_like(wp)
        trials = self.trials

        for iteration in count():
            step = controller.step
            record = TrialRecord(iteration, step, LineSearchState.EVALUATING)
            trials.append(record)
            build_candidate(
                xp, wp, drt, dw, step, fixed_idx, boundary_idx,
                x_out=x_trial, w_out=w_trial,
            )
            mu = np.asarray(self.model.convert_real_to_complex(x_trial), dtype=cplx_t)
            if callback is not None:
                callback(iteration, x_trial, w_trial)

            report = checker.check(mu, w_trial)
            if not report:
                record.state = LineSearchState.REJECTED_INFEASIBLE
                record.reason = report.reason
                logger.debug(
                    "Line search trial %d: step=%.3e infeasible (%s; max|mu|=%.4f, max|w|=%.4f)",
                    iteration, step, report.reason, report.max_mu, report.max_w,
                )
            else:
                evaluation = normalize_energy_output(
                    self.model.calculate_energy(
                        mu, w_trial, interpolant, calc_growth_energy, calc_mu_energy
                    )
                )
                fx_trial = evaluation.energy
                record.energy = fx_trial
                decision = evaluate_termination(
                    mode, fx_init, fx_trial, dg_init, step, p.ftol
                )

                if decision is TerminationDecision.ACCEPT:
                    record.state = LineSearchState.ACCEPTED
                    logger.debug(
                        "Line search success: step=%.3e, backtracks=%d, E0=%.6f, Etrial=%.6f",
                        step, iteration, fx_init, fx_trial,
                    )
                    return LineSearchResult(
                        x=x_trial,
                        w=w_trial,
                        mu=mu,
                        energy=fx_trial,
                        step=step,
                        iterations=iteration + 1,
                        state=LineSearchState.ACCEPTED,
                        trials=trials,
                        lifted_positions=evaluation.lifted_positions,
                        growth=evaluation.growth,
                    )

                if decision is TerminationDecision.INVALID:
                    record.state = LineSearchState.FAILED
                    record.reason = "invalid termination mode"
                    failure = LineSearchFailure(
                        LineSearchErrorKind.CONFIGURATION,
                        "Invalid line search termination procedure: "
                        f"{p.line_search_termination!r}",
                        step=step,
                        iteration=iteration,
                    )
                    return self._fail(failure, step, iteration + 1, trials)

                record.state = LineSearchState.REJECTED_ENERGY
                if not np.isfinite(fx_trial):
                    record.reason = "non-finite energy"
                logger.debug(
                    "Line search trial %d: step=%.3e rejected (E0=%.6f, Etrial=%.6f)",
                    iteration, step, fx_init, fx_trial,
                )

            failure = controller.retry(iteration)
            if failure is not None:
                return self._fail(failure, controller.step, iteration + 1, trials)


def line_search_backtracking(
    model: QuasiconformalModel,
    x,
    w,
    drt,
    dw,
    grad,
    fx: float,
    step: float,
    params: LineSearchParameters | None = None,
    **kwargs,
) -> LineSearchResult:
    """Run a single backtracking line search; see ``LineSearchBacktracking.search``."""
    intersection_test = kwargs.pop("intersection_test", None)
    searcher = LineSearchBacktracking(model, params, intersection_test=intersection_test)
    return searcher.search(x, w, drt, dw, grad, fx, step, **kwargs)

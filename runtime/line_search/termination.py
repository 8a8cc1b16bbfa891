"""Acceptance rules for feasible trial steps."""

from __future__ import annotations

import math
from enum import Enum

from core.parameters.line_search_parameters import LineSearchTermination


class TerminationDecision(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    # The configured mode is not a known criterion.
    INVALID = "invalid"


def evaluate_termination(
    mode,
    fx_init: float,
    fx: float,
    dg_init: float,
    step: float,
    ftol: float,
) -> TerminationDecision:
    """Decide whether the trial energy ``fx`` ends the line search.

    Rules are checked in order and the first match wins: a non-finite energy
    is rejected, ``NONE`` accepts, an energy increase is rejected,
    ``DECREASE`` accepts, an energy above the Armijo bound
    ``fx_init + step * ftol * dg_init`` is rejected, ``ARMIJO`` accepts.
    """
    mode = LineSearchTermination.coerce(mode)

    if not math.isfinite(fx):
        return TerminationDecision.REJECT

    if mode is LineSearchTermination.NONE:
        return TerminationDecision.ACCEPT

    if fx > fx_init:
        return TerminationDecision.REJECT

    if mode is LineSearchTermination.DECREASE:
        return TerminationDecision.ACCEPT

    if fx > fx_init + step * (ftol * dg_init):
        return TerminationDecision.REJECT

    if mode is LineSearchTermination.ARMIJO:
        return TerminationDecision.ACCEPT

    return TerminationDecision.INVALID

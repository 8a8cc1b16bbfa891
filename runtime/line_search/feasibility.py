"""Admissibility test for trial line-search states."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from geometry.self_intersection import find_self_intersections
from geometry.unit_disk import lift_to_3d, max_modulus

logger = logging.getLogger("qc_line_search")

BELTRAMI_BOUND = "beltrami_bound"
DISK_BOUND = "disk_bound"
SELF_INTERSECTION = "self_intersection"


@dataclass(frozen=True)
class FeasibilityReport:
    feasible: bool
    reason: str | None = None
    max_mu: float = 0.0
    max_w: float = 0.0

    def __bool__(self) -> bool:
        return self.feasible


class FeasibilityChecker:
    """Check ``|mu| < 1``, ``|w| <= 1`` and, optionally, that the lifted
    embedding does not fold over itself.

    ``intersection_test`` is any callable ``(points3d, faces)`` returning a
    bool or a tuple whose first item is the bool.
    """

    def __init__(
        self,
        faces: np.ndarray,
        check_self_intersections: bool = True,
        intersection_test: Callable | None = None,
    ) -> None:
        self.faces = np.asarray(faces).reshape(-1, 3)
        self.check_self_intersections = bool(check_self_intersections)
        self.intersection_test = intersection_test or find_self_intersections

    def _intersects(self, w: np.ndarray) -> bool:
        result = self.intersection_test(lift_to_3d(w), self.faces)
        if isinstance(result, tuple):
            result = result[0]
        return bool(result)

    def check(self, mu: np.ndarray, w: np.ndarray) -> FeasibilityReport:
        max_mu = max_modulus(mu)
        # NaN compares false, so a NaN entry fails the bound as well.
        if not max_mu < 1.0:
            return FeasibilityReport(False, BELTRAMI_BOUND, max_mu=max_mu)

        max_w = max_modulus(w)
        if not max_w <= 1.0:
            return FeasibilityReport(False, DISK_BOUND, max_mu=max_mu, max_w=max_w)

        if self.check_self_intersections and self._intersects(w):
            return FeasibilityReport(
                False, SELF_INTERSECTION, max_mu=max_mu, max_w=max_w
            )

        return FeasibilityReport(True, max_mu=max_mu, max_w=max_w)

    def is_feasible(self, mu: np.ndarray, w: np.ndarray) -> bool:
        return self.check(mu, w).feasible

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        return (
            f"{self.__class__.__name__}(n_faces={self.faces.shape[0]}, "
            f"check_self_intersections={self.check_self_intersections})"
        )

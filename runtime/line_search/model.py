"""Interfaces of the collaborators a line search consumes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np


@dataclass
class EnergyEvaluation:
    """Energy of a trial state plus the optional per-vertex side outputs."""

    energy: float
    lifted_positions: np.ndarray | None = None
    growth: np.ndarray | None = None


class QuasiconformalModel(Protocol):
    """What the line search needs from the surrounding mapping problem.

    ``faces`` is the ``(F, 3)`` triangulation of the surface and
    ``boundary_indices`` the vertices that must stay on the unit circle.
    """

    faces: np.ndarray
    boundary_indices: np.ndarray

    def convert_real_to_complex(self, x: np.ndarray) -> np.ndarray:
        """Map the real unknown vector to the complex Beltrami coefficient."""

    def calculate_energy(
        self,
        mu: np.ndarray,
        w: np.ndarray,
        interpolant: Any,
        calc_growth_energy: bool,
        calc_mu_energy: bool,
    ) -> float | EnergyEvaluation:
        """Return the energy of ``(mu, w)``; may include side outputs."""


def normalize_energy_output(value) -> EnergyEvaluation:
    """Accept a bare number, an ``(energy, lifted, growth)`` tuple or an
    ``EnergyEvaluation``."""
    if isinstance(value, EnergyEvaluation):
        return EnergyEvaluation(float(value.energy), value.lifted_positions, value.growth)
    if isinstance(value, tuple):
        energy, *extras = value
        lifted = extras[0] if len(extras) > 0 else None
        growth = extras[1] if len(extras) > 1 else None
        return EnergyEvaluation(float(energy), lifted, growth)
    return EnergyEvaluation(float(value))


def split_real_imag(x: np.ndarray) -> np.ndarray:
    """Convert ``x = [Re mu; Im mu]`` to ``mu``."""
    x = np.asarray(x)
    if x.ndim != 1 or x.shape[0] % 2:
        raise ValueError(f"expected an even-length 1-D vector; got shape {x.shape}")
    n = x.shape[0] // 2
    return x[:n] + 1j * x[n:]

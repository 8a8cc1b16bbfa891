"""Trial states along a search direction."""

from __future__ import annotations

import numpy as np

from geometry.unit_disk import clip_to_unit_circle


def build_candidate(
    x_base: np.ndarray,
    w_base: np.ndarray,
    drt: np.ndarray,
    dw: np.ndarray,
    step: float,
    fixed_idx: np.ndarray,
    boundary_idx: np.ndarray,
    *,
    x_out: np.ndarray | None = None,
    w_out: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(x_base + step*drt, w_base + step*dw)`` with constraints applied.

    Boundary entries of the mapping are pushed onto the unit circle, then
    pinned entries are restored to their base values; pinning wins where the
    two index sets overlap. ``x_out``/``w_out`` are filled in place when given.
    """
    if x_out is None:
        x_out = np.empty_like(x_base)
    if w_out is None:
        w_out = np.empty_like(w_base)

    np.multiply(drt, step, out=x_out)
    x_out += x_base
    np.multiply(dw, step, out=w_out)
    w_out += w_base

    clip_to_unit_circle(boundary_idx, w_out)

    if len(fixed_idx):
        w_out[fixed_idx] = w_base[fixed_idx]

    return x_out, w_out

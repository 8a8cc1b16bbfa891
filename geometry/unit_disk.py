"""Helpers for embeddings of a surface into the closed unit disk."""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger("qc_line_search")


def clip_to_unit_circle(boundary_idx: np.ndarray, w: np.ndarray) -> np.ndarray:
    """Project ``w[boundary_idx]`` radially onto the unit circle, in place.

    Rounding can leave ``|w|`` one ulp above 1 after the division; such entries
    are pulled back so the projected values never leave the closed disk. A
    boundary entry sitting exactly at the origin has no radial direction and
    is sent to ``1 + 0j``.
    """
    boundary_idx = np.asarray(boundary_idx)
    if boundary_idx.size == 0:
        return w

    wb = w[boundary_idx]
    radius = np.abs(wb)
    zero = radius == 0
    if np.any(zero):
        logger.warning(
            "clip_to_unit_circle: %d boundary point(s) at the origin; "
            "mapping to 1+0j.",
            int(np.count_nonzero(zero)),
        )
        wb[zero] = 1.0
        radius[zero] = 1.0
    wb = wb / radius

    shrink = np.nextafter(wb.real.dtype.type(1), wb.real.dtype.type(0))
    over = np.abs(wb) > 1
    while np.any(over):
        wb[over] *= shrink
        over = np.abs(wb) > 1

    w[boundary_idx] = wb
    return w


def lift_to_3d(w: np.ndarray) -> np.ndarray:
    """Return the ``(N, 3)`` lift ``[Re w, Im w, 0]`` of a planar embedding."""
    w = np.asarray(w)
    points = np.zeros((w.shape[0], 3), dtype=w.real.dtype)
    points[:, 0] = w.real
    points[:, 1] = w.imag
    return points


def max_modulus(values: np.ndarray) -> float:
    """Largest ``|value|``; NaN if any entry is NaN, 0 for an empty field."""
    values = np.asarray(values)
    if values.size == 0:
        return 0.0
    return float(np.max(np.abs(values)))

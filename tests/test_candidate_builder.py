import os
import sys

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry.unit_disk import clip_to_unit_circle, lift_to_3d
from runtime.line_search.candidate import build_candidate
from sample_meshes import disk_mesh


def test_candidate_updates_fields_along_direction():
    x = np.array([0.1, -0.2, 0.3])
    drt = np.array([1.0, 2.0, -1.0])
    w = np.array([0.1 + 0.1j, 0.2j])
    dw = np.array([0.5, -0.5j])

    xt, wt = build_candidate(x, w, drt, dw, 0.25, np.array([], dtype=int), np.array([], dtype=int))

    np.testing.assert_allclose(xt, x + 0.25 * drt)
    np.testing.assert_allclose(wt, w + 0.25 * dw)


def test_boundary_vertices_land_on_unit_circle():
    w, _, boundary = disk_mesh(n_rings=2, n_sectors=8)
    rng = np.random.default_rng(0)
    dw = rng.normal(size=w.shape) + 1j * rng.normal(size=w.shape)

    _, wt = build_candidate(
        np.zeros(1), w, np.zeros(1), dw, 0.3, np.array([], dtype=int), boundary
    )

    np.testing.assert_allclose(np.abs(wt[boundary]), 1.0, rtol=0, atol=1e-14)
    interior = np.setdiff1d(np.arange(w.shape[0]), boundary)
    np.testing.assert_allclose(wt[interior], w[interior] + 0.3 * dw[interior])


def test_pinned_vertices_override_boundary_projection():
    w, _, boundary = disk_mesh(n_rings=2, n_sectors=6)
    dw = np.full(w.shape, 0.2 + 0.1j)
    fixed = np.array([0, boundary[0]])

    _, wt = build_candidate(np.zeros(1), w, np.zeros(1), dw, 1.0, fixed, boundary)

    assert wt[0] == w[0]
    assert wt[boundary[0]] == w[boundary[0]]
    assert wt[boundary[1]] != w[boundary[1]]


def test_output_buffers_are_filled_in_place():
    x = np.zeros(4)
    w = np.zeros(2, dtype=complex)
    x_out = np.empty_like(x)
    w_out = np.empty_like(w)

    xt, wt = build_candidate(
        x, w, np.ones(4), np.ones(2, dtype=complex), 0.5,
        np.array([], dtype=int), np.array([], dtype=int),
        x_out=x_out, w_out=w_out,
    )

    assert xt is x_out
    assert wt is w_out
    np.testing.assert_allclose(x_out, 0.5)


def test_clip_sends_origin_to_one():
    w = np.array([0.0 + 0.0j, 3.0 + 4.0j])
    clip_to_unit_circle(np.array([0, 1]), w)
    assert w[0] == 1.0 + 0.0j
    np.testing.assert_allclose(w[1], 0.6 + 0.8j)


def test_lift_to_3d_has_zero_height():
    pts = lift_to_3d(np.array([0.5 - 0.25j, 1j]))
    np.testing.assert_array_equal(pts, [[0.5, -0.25, 0.0], [0.0, 1.0, 0.0]])

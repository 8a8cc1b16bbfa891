import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry.averaging import face_angles, face_areas, mesh_averaging_operators
from geometry.unit_disk import lift_to_3d
from sample_meshes import disk_mesh


def _disk():
    w, faces, _ = disk_mesh(n_rings=2, n_sectors=6)
    return faces, lift_to_3d(w)


@pytest.mark.parametrize("weight_type", ["uniform", "area", "angle"])
def test_operators_average_constants_exactly(weight_type):
    faces, vertices = _disk()
    v2f, f2v = mesh_averaging_operators(faces, vertices, weight_type)

    assert v2f.shape == (faces.shape[0], vertices.shape[0])
    assert f2v.shape == (vertices.shape[0], faces.shape[0])
    np.testing.assert_allclose(v2f @ np.ones(vertices.shape[0]), 1.0)
    np.testing.assert_allclose(f2v @ np.ones(faces.shape[0]), 1.0)


def test_vertex_to_face_takes_corner_mean():
    faces, vertices = _disk()
    v2f, _ = mesh_averaging_operators(faces, vertices)
    values = np.arange(vertices.shape[0], dtype=float)
    np.testing.assert_allclose(v2f @ values, values[faces].mean(axis=1))


def test_uniform_weights_are_inverse_valence():
    faces, vertices = _disk()
    _, f2v = mesh_averaging_operators(faces, vertices, "uniform")
    # The center vertex touches the six fan triangles.
    row = f2v[0].toarray().ravel()
    np.testing.assert_allclose(row[:6], 1.0 / 6.0)
    np.testing.assert_allclose(row[6:], 0.0)


def test_angles_of_a_right_triangle():
    faces = np.array([[0, 1, 2]])
    vertices = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    np.testing.assert_allclose(
        face_angles(faces, vertices), [[math.pi / 2, math.pi / 4, math.pi / 4]]
    )
    np.testing.assert_allclose(face_areas(faces, vertices), [0.5])


def test_face_quantities_average_complex_fields():
    faces, vertices = _disk()
    _, f2v = mesh_averaging_operators(faces, vertices, "area")
    mu_faces = np.full(faces.shape[0], 0.2 - 0.1j)
    np.testing.assert_allclose(f2v @ mu_faces, 0.2 - 0.1j)


def test_invalid_weight_type_is_rejected():
    faces, vertices = _disk()
    with pytest.raises(ValueError, match="Invalid weight type"):
        mesh_averaging_operators(faces, vertices, "cotangent")


def test_out_of_range_faces_are_rejected():
    vertices = np.zeros((3, 3))
    with pytest.raises(ValueError):
        mesh_averaging_operators(np.array([[0, 1, 3]]), vertices)

"""Sparse operators averaging quantities between faces and vertices."""

from __future__ import annotations

import numpy as np
from scipy import sparse

_WEIGHT_TYPES = ("uniform", "area", "angle")


def _validate_mesh(faces: np.ndarray, vertices: np.ndarray) -> None:
    if vertices.ndim != 2:
        raise ValueError(f"vertices must be a 2-D array; got shape {vertices.shape}")
    if not np.all(np.isfinite(vertices)):
        raise ValueError("vertices must be finite")
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise ValueError(f"faces must have shape (F, 3); got {faces.shape}")
    if faces.size and (faces.min() < 0 or faces.max() >= vertices.shape[0]):
        raise ValueError("faces reference vertices outside the vertex list")


def face_edge_lengths(faces: np.ndarray, vertices: np.ndarray) -> np.ndarray:
    """``(F, 3)`` lengths of the edge opposite each face corner."""
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    return np.stack(
        [
            np.linalg.norm(v2 - v1, axis=1),
            np.linalg.norm(v0 - v2, axis=1),
            np.linalg.norm(v1 - v0, axis=1),
        ],
        axis=1,
    )


def face_areas(faces: np.ndarray, vertices: np.ndarray) -> np.ndarray:
    """Triangle areas from Heron's formula."""
    lengths = face_edge_lengths(faces, vertices)
    s = lengths.sum(axis=1) / 2.0
    prod = s * (s - lengths[:, 0]) * (s - lengths[:, 1]) * (s - lengths[:, 2])
    return np.sqrt(np.clip(prod, 0.0, None))


def face_angles(faces: np.ndarray, vertices: np.ndarray) -> np.ndarray:
    """``(F, 3)`` interior angle at each face corner (law of cosines)."""
    gi = face_edge_lengths(faces, vertices)
    gj = np.roll(gi, -1, axis=1)
    gk = np.roll(gi, -2, axis=1)
    cos_theta = (gj**2 + gk**2 - gi**2) / (2.0 * gj * gk)
    return np.arccos(np.clip(cos_theta, -1.0, 1.0))


def mesh_averaging_operators(faces, vertices, weight_type: str = "angle"):
    """Build operators converting quantities between faces and vertices.

    Parameters
    ----------
    faces : array_like
        ``(F, 3)`` zero-based face connectivity.
    vertices : array_like
        ``(V, D)`` vertex coordinates.
    weight_type : str, optional
        Weighting used to average face quantities onto vertices: ``"uniform"``,
        ``"area"`` or ``"angle"`` (default).

    Returns
    -------
    tuple[scipy.sparse.csr_matrix, scipy.sparse.csr_matrix]
        ``V2F`` of shape ``(F, V)`` averaging vertex quantities onto faces and
        ``F2V`` of shape ``(V, F)`` averaging face quantities onto vertices.
        Rows of ``F2V`` belonging to vertices without faces are empty.
    """
    faces = np.asarray(faces)
    vertices = np.asarray(vertices, dtype=float)
    if not np.issubdtype(faces.dtype, np.integer):
        raise ValueError("faces must contain integer vertex indices")
    _validate_mesh(faces, vertices)

    weight_type = str(weight_type).lower()
    if weight_type not in _WEIGHT_TYPES:
        raise ValueError(
            f"Invalid weight type {weight_type!r}; expected one of {_WEIGHT_TYPES}"
        )

    n_faces = faces.shape[0]
    n_verts = vertices.shape[0]
    face_ids = np.tile(np.arange(n_faces), 3)
    vert_ids = faces.T.ravel()

    v2f = sparse.csr_matrix(
        (np.full(3 * n_faces, 1.0 / 3.0), (face_ids, vert_ids)),
        shape=(n_faces, n_verts),
    )

    if weight_type == "uniform":
        raw = np.ones(3 * n_faces)
    elif weight_type == "area":
        raw = np.tile(face_areas(faces, vertices), 3)
    else:
        raw = face_angles(faces, vertices).T.ravel()

    totals = np.bincount(vert_ids, weights=raw, minlength=n_verts)
    denom = totals[vert_ids]
    weights = np.divide(raw, denom, out=np.zeros_like(raw), where=denom != 0)

    f2v = sparse.csr_matrix(
        (weights, (vert_ids, face_ids)), shape=(n_verts, n_faces)
    )
    return v2f, f2v

"""Detect self-intersecting face pairs in a triangulated surface.

Faces are treated as closed triangles. Pairs that share mesh vertices are
judged combinatorially:

- sharing an edge, they intersect only when coplanar and folded onto the
  same side of that edge;
- sharing a single vertex, they intersect when they meet anywhere else;
- sharing no vertex, any contact counts.

Degenerate (zero-area) faces are reported as intersecting with themselves.
All sign decisions go through the exact predicates in ``geometry.predicates``.
"""

from __future__ import annotations

import numpy as np

from geometry.predicates import orient2d, orient3d


def _face_projection_axis(a, b, c) -> int:
    """Coordinate to drop when projecting the plane of ``(a, b, c)`` to 2-D."""
    u = (b[0] - a[0], b[1] - a[1], b[2] - a[2])
    v = (c[0] - a[0], c[1] - a[1], c[2] - a[2])
    n = (
        abs(u[1] * v[2] - u[2] * v[1]),
        abs(u[2] * v[0] - u[0] * v[2]),
        abs(u[0] * v[1] - u[1] * v[0]),
    )
    return max(range(3), key=lambda k: (n[k], k))


def _drop(p, axis: int):
    if axis == 0:
        return (p[1], p[2])
    if axis == 1:
        return (p[2], p[0])
    return (p[0], p[1])


def _is_degenerate(a, b, c) -> bool:
    return all(orient2d(_drop(a, k), _drop(b, k), _drop(c, k)) == 0 for k in range(3))


def _on_segment_2d(a, b, p) -> bool:
    """``p`` (known collinear with ``a``, ``b``) lies on the closed segment."""
    return (
        min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
        and min(a[1], b[1]) <= p[1] <= max(a[1], b[1])
    )


def _segments_intersect_2d(p1, p2, q1, q2) -> bool:
    d1 = orient2d(q1, q2, p1)
    d2 = orient2d(q1, q2, p2)
    d3 = orient2d(p1, p2, q1)
    d4 = orient2d(p1, p2, q2)
    if d1 * d2 < 0 and d3 * d4 < 0:
        return True
    if d1 == 0 and _on_segment_2d(q1, q2, p1):
        return True
    if d2 == 0 and _on_segment_2d(q1, q2, p2):
        return True
    if d3 == 0 and _on_segment_2d(p1, p2, q1):
        return True
    if d4 == 0 and _on_segment_2d(p1, p2, q2):
        return True
    return False


def _point_in_triangle_2d(a, b, c, p) -> bool:
    s = (orient2d(a, b, p), orient2d(b, c, p), orient2d(c, a, p))
    return not (min(s) < 0 < max(s))


def _segment_triangle_2d(p, q, a, b, c) -> bool:
    if _point_in_triangle_2d(a, b, c, p) or _point_in_triangle_2d(a, b, c, q):
        return True
    return (
        _segments_intersect_2d(p, q, a, b)
        or _segments_intersect_2d(p, q, b, c)
        or _segments_intersect_2d(p, q, c, a)
    )


def _segment_triangle(p, q, a, b, c) -> bool:
    """Closed segment ``pq`` meets the closed, non-degenerate triangle ``abc``."""
    sp = orient3d(a, b, c, p)
    sq = orient3d(a, b, c, q)
    if sp * sq > 0:
        return False
    if sp == 0 and sq == 0:
        axis = _face_projection_axis(a, b, c)
        return _segment_triangle_2d(
            _drop(p, axis), _drop(q, axis), _drop(a, axis), _drop(b, axis), _drop(c, axis)
        )
    s = (orient3d(p, q, a, b), orient3d(p, q, b, c), orient3d(p, q, c, a))
    return not (min(s) < 0 < max(s))


def _ray_in_corner(v, c, d, e) -> bool:
    """Direction ``e - v`` lies in the closed corner of triangle ``(v, c, d)`` at ``v``.

    All four points must be coplanar.
    """
    axis = _face_projection_axis(v, c, d)
    v2, c2, d2, e2 = (_drop(p, axis) for p in (v, c, d, e))
    s = orient2d(v2, c2, d2)
    return orient2d(v2, c2, e2) * s >= 0 and orient2d(v2, e2, d2) * s >= 0


def _edge_adjacent_intersect(P, s0, s1, a, b) -> bool:
    if orient3d(P[s0], P[s1], P[a], P[b]) != 0:
        return False
    axis = _face_projection_axis(P[s0], P[s1], P[a])
    p0, p1 = _drop(P[s0], axis), _drop(P[s1], axis)
    side_a = orient2d(p0, p1, _drop(P[a], axis))
    side_b = orient2d(p0, p1, _drop(P[b], axis))
    return side_a * side_b >= 0


def _vertex_adjacent_intersect(P, v, a, b, c, d) -> bool:
    pv, pa, pb, pc, pd = P[v], P[a], P[b], P[c], P[d]
    if _segment_triangle(pa, pb, pv, pc, pd) or _segment_triangle(pc, pd, pv, pa, pb):
        return True
    for e in (pa, pb):
        if orient3d(pv, pc, pd, e) == 0 and _ray_in_corner(pv, pc, pd, e):
            return True
    for e in (pc, pd):
        if orient3d(pv, pa, pb, e) == 0 and _ray_in_corner(pv, pa, pb, e):
            return True
    return False


def _disjoint_intersect(P, f, g) -> bool:
    fa, fb, fc = (P[i] for i in f)
    ga, gb, gc = (P[i] for i in g)
    for p, q in ((fa, fb), (fb, fc), (fc, fa)):
        if _segment_triangle(p, q, ga, gb, gc):
            return True
    for p, q in ((ga, gb), (gb, gc), (gc, ga)):
        if _segment_triangle(p, q, fa, fb, fc):
            return True
    return False


def faces_intersect(P, f, g) -> bool:
    """Whether non-degenerate faces ``f`` and ``g`` intersect beyond shared elements."""
    shared = [i for i in f if i in g]
    if len(shared) == 3:
        return True
    if len(shared) == 2:
        s0, s1 = shared
        a = next(i for i in f if i not in shared)
        b = next(i for i in g if i not in shared)
        return _edge_adjacent_intersect(P, s0, s1, a, b)
    if len(shared) == 1:
        v = shared[0]
        a, b = (i for i in f if i != v)
        c, d = (i for i in g if i != v)
        return _vertex_adjacent_intersect(P, v, a, b, c, d)
    return _disjoint_intersect(P, f, g)


def candidate_pairs(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Face pairs ``(i, j)``, ``i < j``, whose bounding boxes overlap."""
    if faces.shape[0] < 2:
        return np.zeros((0, 2), dtype=np.int64)
    corners = vertices[faces]
    lo = corners.min(axis=1)
    hi = corners.max(axis=1)

    order = np.argsort(lo[:, 0], kind="stable")
    lo_sorted = lo[order]
    hi_sorted = hi[order]
    # Last sorted position whose x-extent starts before each box ends.
    stop = np.searchsorted(lo_sorted[:, 0], hi_sorted[:, 0], side="right")

    pairs = []
    for k in range(order.shape[0] - 1):
        if stop[k] <= k + 1:
            continue
        js = np.arange(k + 1, stop[k])
        overlap = np.all(
            (lo_sorted[js, 1:] <= hi_sorted[k, 1:])
            & (lo_sorted[k, 1:] <= hi_sorted[js, 1:]),
            axis=1,
        )
        js = js[overlap]
        if js.size:
            i = np.full(js.shape, order[k])
            j = order[js]
            pairs.append(np.stack([np.minimum(i, j), np.maximum(i, j)], axis=1))
    if not pairs:
        return np.zeros((0, 2), dtype=np.int64)
    out = np.concatenate(pairs).astype(np.int64)
    return out[np.lexsort((out[:, 1], out[:, 0]))]


def find_self_intersections(
    vertices: np.ndarray, faces: np.ndarray, first_only: bool = True
) -> tuple[bool, np.ndarray]:
    """Return whether the surface self-intersects and the offending face pairs.

    Parameters
    ----------
    vertices : np.ndarray
        ``(N, 3)`` vertex coordinates.
    faces : np.ndarray
        ``(F, 3)`` vertex indices per triangle.
    first_only : bool, optional
        Stop at the first intersecting pair, by default ``True``.

    Returns
    -------
    tuple[bool, np.ndarray]
        The intersection flag and a ``(K, 2)`` array of face index pairs. A
        degenerate face ``f`` is reported as the pair ``(f, f)``.
    """
    vertices = np.asarray(vertices, dtype=float)
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if vertices.ndim != 2 or vertices.shape[1] != 3:
        raise ValueError(f"vertices must have shape (N, 3); got {vertices.shape}")
    if not np.all(np.isfinite(vertices)):
        raise ValueError("vertices must be finite")
    if faces.size and (faces.min() < 0 or faces.max() >= vertices.shape[0]):
        raise ValueError("faces reference vertices outside the point set")

    P = [tuple(p) for p in vertices.tolist()]
    F = [tuple(f) for f in faces.tolist()]
    found = []

    degenerate = set()
    for fi, (a, b, c) in enumerate(F):
        if _is_degenerate(P[a], P[b], P[c]):
            degenerate.add(fi)
            found.append((fi, fi))
            if first_only:
                return True, np.asarray(found, dtype=np.int64)

    for i, j in candidate_pairs(vertices, faces).tolist():
        if i in degenerate or j in degenerate:
            continue
        if faces_intersect(P, F[i], F[j]):
            found.append((i, j))
            if first_only:
                break

    return bool(found), np.asarray(found, dtype=np.int64).reshape(-1, 2)

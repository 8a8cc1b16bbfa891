"""Orientation predicates with an exact rational fallback.

Both predicates first evaluate the determinant in double precision and accept
its sign when it clears Shewchuk's static error bound. Otherwise the
determinant is recomputed with ``fractions.Fraction``, which represents every
binary float exactly, so the returned sign is always the exact one. Point sets
sharing a coordinate (such as a planar embedding lifted to ``z = 0``) have an
exactly zero determinant and are answered before any arithmetic.
"""

from __future__ import annotations

from fractions import Fraction

_EPS = 2.0**-53
_ORIENT2D_BOUND = (3.0 + 16.0 * _EPS) * _EPS
_ORIENT3D_BOUND = (7.0 + 56.0 * _EPS) * _EPS


def _sign(value) -> int:
    return (value > 0) - (value < 0)


def orient2d(a, b, c) -> int:
    """Sign of the signed area of ``(a, b, c)``; +1 counter-clockwise."""
    acx, acy = a[0] - c[0], a[1] - c[1]
    bcx, bcy = b[0] - c[0], b[1] - c[1]
    # A float difference is zero only for equal inputs, so both products are
    # then exactly zero.
    if (acx == 0 or bcy == 0) and (acy == 0 or bcx == 0):
        return 0
    detleft = acx * bcy
    detright = acy * bcx
    det = detleft - detright
    detsum = abs(detleft) + abs(detright)
    if abs(det) > _ORIENT2D_BOUND * detsum:
        return _sign(det)
    return _orient2d_exact(a, b, c)


def _orient2d_exact(a, b, c) -> int:
    ax, ay = Fraction(a[0]), Fraction(a[1])
    bx, by = Fraction(b[0]), Fraction(b[1])
    cx, cy = Fraction(c[0]), Fraction(c[1])
    return _sign((ax - cx) * (by - cy) - (ay - cy) * (bx - cx))


def orient3d(a, b, c, d) -> int:
    """Sign of the signed volume of the tetrahedron ``(a, b, c, d)``.

    Zero exactly when the four points are coplanar.
    """
    adx, ady, adz = a[0] - d[0], a[1] - d[1], a[2] - d[2]
    bdx, bdy, bdz = b[0] - d[0], b[1] - d[1], b[2] - d[2]
    cdx, cdy, cdz = c[0] - d[0], c[1] - d[1], c[2] - d[2]

    # All four points share a coordinate (the planar lift has z == 0): the
    # difference matrix has a zero column.
    if (
        adz == bdz == cdz == 0
        or adx == bdx == cdx == 0
        or ady == bdy == cdy == 0
    ):
        return 0

    bdxcdy = bdx * cdy
    cdxbdy = cdx * bdy
    cdxady = cdx * ady
    adxcdy = adx * cdy
    adxbdy = adx * bdy
    bdxady = bdx * ady

    det = (
        adz * (bdxcdy - cdxbdy)
        + bdz * (cdxady - adxcdy)
        + cdz * (adxbdy - bdxady)
    )
    permanent = (
        (abs(bdxcdy) + abs(cdxbdy)) * abs(adz)
        + (abs(cdxady) + abs(adxcdy)) * abs(bdz)
        + (abs(adxbdy) + abs(bdxady)) * abs(cdz)
    )
    if abs(det) > _ORIENT3D_BOUND * permanent:
        return _sign(det)
    return _orient3d_exact(a, b, c, d)


def _orient3d_exact(a, b, c, d) -> int:
    a, b, c, d = ([Fraction(x) for x in p[:3]] for p in (a, b, c, d))
    adx, ady, adz = a[0] - d[0], a[1] - d[1], a[2] - d[2]
    bdx, bdy, bdz = b[0] - d[0], b[1] - d[1], b[2] - d[2]
    cdx, cdy, cdz = c[0] - d[0], c[1] - d[1], c[2] - d[2]
    det = (
        adz * (bdx * cdy - cdx * bdy)
        + bdz * (cdx * ady - adx * cdy)
        + cdz * (adx * bdy - bdx * ady)
    )
    return _sign(det)

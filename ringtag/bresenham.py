"""Walk along the gradient direction from one edge point to the next."""

from __future__ import annotations

import math

from .edgepoint import EdgeMap, EdgePoint


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _advance(
    major: float, minor: float, u: int, v: int, error: float
) -> tuple[int, int, float]:
    """One Bresenham step: always move on the major axis, sometimes on the minor."""
    if major != 0:
        ratio = abs(minor / major)
    else:
        ratio = math.inf if minor != 0 else math.nan
    error += ratio
    u += _sign(major)
    if error >= 0.5:
        v += _sign(minor)
        error -= 1.0
    return u, v, error


class _Walker:
    """Current position of a discrete line walk and the step just taken."""

    __slots__ = ("x", "y", "along_y", "error", "step_x", "step_y")

    def __init__(self, x: int, y: int, along_y: bool) -> None:
        self.x = x
        self.y = y
        self.along_y = along_y
        self.error = 0.0
        self.step_x = 0
        self.step_y = 0

    def step(self, dx: float, dy: float) -> None:
        if self.along_y:
            self.y, self.x, self.error = _advance(dy, dx, self.y, self.x, self.error)
        else:
            self.x, self.y, self.error = _advance(dx, dy, self.x, self.y, self.error)
        self.step_x = _sign(dx)
        self.step_y = _sign(dy)

    def behind(self) -> tuple[int, int]:
        """The pixel one step back along the major axis."""
        if self.along_y:
            return self.x, self.y - self.step_y
        return self.x - self.step_x, self.y


def gradient_direction_descent(
    canny: EdgeMap,
    p: EdgePoint,
    direction: int,
    nmax: int,
    img_dx,
    img_dy,
    thr_gradient: float,
) -> EdgePoint | None:
    """Follow the gradient at ``p`` until another edge point is met.

    ``direction`` is +1 to follow the gradient and -1 to go against it. The
    derivative images are indexed ``[y, x]``. At most about ``nmax`` pixels
    are visited; the walk stops with None when it leaves the map.
    """
    gx = float(img_dx[p.y, p.x])
    gy = float(img_dy[p.y, p.x])
    dx = direction * gx
    dy = direction * gy
    dx_ref, dy_ref = dx, dy

    walker = _Walker(p.x, p.y, along_y=abs(dy) > abs(dx))

    walker.step(dx, dy)
    if dx * dx + dy * dy > thr_gradient:
        redirected = _sign(gx * dx_ref + gy * dy_ref)
        dx = redirected * gx
        dy = redirected * gy
    walker.step(dx, dy)
    n = 2

    if not canny.in_bounds(walker.x, walker.y):
        return None
    found = canny.get(walker.x, walker.y)
    if found is not None:
        return found

    while n <= nmax:
        walker.step(dx, dy)
        n += 1
        if not canny.in_bounds(walker.x, walker.y):
            return None
        found = canny.get(walker.x, walker.y)
        if found is not None:
            return found
        bx, by = walker.behind()
        if not canny.in_bounds(bx, by):
            return None
        found = canny.get(bx, by)
        if found is not None:
            return found
    return None
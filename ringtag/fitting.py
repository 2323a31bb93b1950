"""Least-squares fitting of ellipses and circles to edge points."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

_FLOAT_EPS = float(np.finfo(np.float32).eps)
_FLOAT_MAX = float(np.finfo(np.float32).max)
_DET_THRESHOLD = 1e-5
_C1_INV = np.array(
    [
        [0.0, 0.0, 0.5],
        [0.0, -1.0, 0.0],
        [0.5, 0.0, 0.0],
    ]
)


@dataclass(frozen=True)
class FittedEllipse:
    """An ellipse given by its center, semi-axes and orientation.

    ``a`` is the semi-axis along direction ``angle`` (radians); ``b`` is the
    one perpendicular to it.
    """

    center: tuple[float, float]
    a: float
    b: float
    angle: float


def _coords(points) -> np.ndarray:
    rows = [
        (p.x, p.y) if hasattr(p, "x") else (p[0], p[1])
        for p in points
    ]
    return np.array(rows, dtype=np.float64).reshape(-1, 2)


def _fit_conic(xy: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Direct least-squares conic fit; returns the 6 coefficients and the offset."""
    offset = xy.mean(axis=0)
    centered = xy - offset
    x, y = centered[:, 0], centered[:, 1]
    d1 = np.column_stack((x * x, x * y, y * y))
    d2 = np.column_stack((x, y, np.ones_like(x)))
    s1 = d1.T @ d1
    s2 = d1.T @ d2
    s3 = d2.T @ d2

    det = np.linalg.det(s3)
    if not np.isfinite(det) or abs(det) <= _DET_THRESHOLD:
        raise ValueError("fit_solver: the input points appear to be linearly dependent")

    t = -np.linalg.solve(s3, s2.T)
    m = _C1_INV @ (s1 + s2 @ t)
    try:
        _, vectors = np.linalg.eig(m)
    except np.linalg.LinAlgError as exc:
        raise ValueError("fit_solver: degeneracy") from exc
    real = np.real(vectors)
    cond = 4.0 * real[0] * real[2] - real[1] * real[1]

    best = None
    best_value = _FLOAT_MAX
    for i, value in enumerate(cond):
        if _FLOAT_EPS < value < best_value:
            best = i
            best_value = value
    if best is None:
        raise ValueError("fit_solver: degeneracy")

    a1 = real[:, best]
    a2 = t @ a1
    return np.concatenate((a1, a2)), offset


def _conic_to_ellipse(coef: np.ndarray, offset: np.ndarray) -> FittedEllipse:
    coef = np.array(coef, dtype=np.float64)
    idet = coef[0] * coef[2] - coef[1] * coef[1] / 4.0
    idet = 1.0 / idet if idet > _FLOAT_EPS else 0.0
    scale = math.sqrt(idet / 4.0)
    if scale < _FLOAT_EPS:
        raise ValueError("to_ellipse_2: singularity 1")

    coef *= scale
    aa, bb, cc, dd, ee, ff = (float(v) for v in coef)
    cx = 2.0 * (-dd * cc + ee * bb / 2.0)
    cy = 2.0 * (-aa * ee + dd * bb / 2.0)

    ff += aa * cx * cx + bb * cx * cy + cc * cy * cy + dd * cx + ee * cy
    if abs(ff) < _FLOAT_EPS:
        raise ValueError("to_ellipse_2: singularity 2")

    s = np.array([[aa, bb / 2.0], [bb / 2.0, cc]]) / -ff
    u, values, _ = np.linalg.svd(s)
    if not np.all(np.isfinite(values)) or np.any(values <= 0):
        raise ValueError("Degenerate ellipse after fitEllipse => line or point.")
    r0 = math.sqrt(1.0 / values[0])
    r1 = math.sqrt(1.0 / values[1])
    if r0 <= 0 or r1 <= 0:
        raise ValueError("Degenerate ellipse after fitEllipse => line or point.")
    angle = math.pi - math.atan2(u[0, 1], u[1, 1])

    center = (cx + float(offset[0]), cy + float(offset[1]))
    return FittedEllipse(center, r0, r1, angle)


def fit_ellipse(points) -> FittedEllipse:
    """Fit an ellipse to at least five points.

    Points are edge points or (x, y) pairs. Raises ValueError when there are
    too few points or they describe no proper ellipse.
    """
    xy = _coords(points)
    count = len(xy)
    if count < 5:
        raise ValueError(
            f"fitEllipse: {count} provided, at least 5 are needed to estimate an ellipse"
        )
    coef, offset = _fit_conic(xy)
    return _conic_to_ellipse(coef, offset)


def circle_fitting(points) -> FittedEllipse:
    """Fit a circle to points, returned as an ellipse with equal semi-axes."""
    xy = _coords(points)
    if len(xy) < 3:
        raise ValueError(
            f"circleFitting: {len(xy)} provided, at least 3 are needed to estimate a circle"
        )
    x, y = xy[:, 0], xy[:, 1]
    design = np.column_stack((x, y, np.ones_like(x), x * x + y * y))
    _, _, vt = np.linalg.svd(design)
    v = vt[3]
    if v[3] == 0:
        raise ValueError("Degenerate circle in circleFitting: points are collinear")
    xc = float(-0.5 * v[0] / v[3])
    yc = float(-0.5 * v[1] / v[3])
    squared = xc * xc + yc * yc - float(v[2] / v[3])
    radius = math.sqrt(squared) if squared > 0 else math.nan
    if not radius > 0:
        raise ValueError(
            f"Degenerate circle in circleFitting, radius is negative: {radius}"
        )
    return FittedEllipse((xc, yc), radius, radius, 0.0)


def _unit_gradient(point) -> tuple[float, float]:
    norm = math.sqrt(point.dx * point.dx + point.dy * point.dy)
    if norm == 0:
        return math.nan, math.nan
    return point.dx / norm, point.dy / norm


def _distance(p, q) -> float:
    return math.hypot(p.x - q.x, p.y - q.y)


def inner_prod_min(filtered_children: Sequence, thr_cos_diff_max: float):
    """Find how far apart the gradient directions of edge points spread.

    Returns ``(min_inner_product, p1, p2)``. The search stops as soon as an
    inner product of unit gradients is at most ``thr_cos_diff_max`` and
    returns that product. ``p1`` is the point farthest from the first one and
    ``p2`` the point farthest from ``p1``; either is None if not reached.
    """
    if not filtered_children:
        raise ValueError("inner_prod_min needs at least one edge point")
    if len(filtered_children) < 2:
        raise ValueError("inner_prod_min needs at least two edge points")

    p1 = None
    p2 = None
    first = filtered_children[0]
    gx0, gy0 = _unit_gradient(first)

    minimum = 1.1
    dist_max = 0.0
    angle1 = None
    for current in filtered_children[1:]:
        gx, gy = _unit_gradient(current)
        inner = gx0 * gx + gy0 * gy
        if inner <= thr_cos_diff_max:
            return inner, p1, p2
        if inner < minimum:
            minimum = inner
            angle1 = current
        dist = _distance(first, current)
        if dist > dist_max:
            dist_max = dist
            p1 = current

    if angle1 is None:
        raise ValueError("inner_prod_min: gradients are degenerate")
    gx_min, gy_min = _unit_gradient(angle1)

    minimum = 1.0
    dist_max = 0.0
    for current in filtered_children:
        gx, gy = _unit_gradient(current)
        inner = gx_min * gx + gy_min * gy
        if inner <= thr_cos_diff_max:
            return inner, p1, p2
        if inner < minimum:
            minimum = inner
        if p1 is not None:
            dist = _distance(p1, current)
        else:
            dist = math.hypot(current.x, current.y)
        if dist > dist_max:
            dist_max = dist
            p2 = current
    return minimum, p1, p2
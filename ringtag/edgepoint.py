"""Edge points with their image gradient, and the map that holds them."""

from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np


class EdgePoint:
    """A pixel on an edge, with its gradient and detection bookkeeping."""

    __slots__ = (
        "x",
        "y",
        "dx",
        "dy",
        "norm_gradient",
        "flow_length",
        "processed",
        "is_max",
        "n_segment_out",
    )

    def __init__(self, x: int, y: int, dx: float, dy: float) -> None:
        self.x = int(x)
        self.y = int(y)
        self.dx = float(dx)
        self.dy = float(dy)
        self.norm_gradient = math.sqrt(self.dx * self.dx + self.dy * self.dy)
        self.flow_length = 0.0
        self.processed = 0
        self.is_max = -1
        self.n_segment_out = -1

    @property
    def gradient(self) -> tuple[float, float]:
        """The gradient vector (dx, dy)."""
        return (self.dx, self.dy)

    def copy(self) -> "EdgePoint":
        """Return a copy keeping position and gradient, with bookkeeping reset."""
        return EdgePoint(self.x, self.y, self.dx, self.dy)

    def __str__(self) -> str:
        return f"quiver( {self.x} , {self.y},{self.dx:g},{self.dy:g} ); "

    def __repr__(self) -> str:
        return f"EdgePoint(x={self.x}, y={self.y}, dx={self.dx!r}, dy={self.dy!r})"


def received_more_vote_than(p1: EdgePoint, p2: EdgePoint) -> bool:
    """Tell whether ``p1`` received more votes than ``p2``."""
    return p1.is_max > p2.is_max


class EdgeMap:
    """Edge points of an image, addressed by pixel coordinates."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"invalid map size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._points: dict[tuple[int, int], EdgePoint] = {}

    @property
    def shape(self) -> tuple[int, int]:
        """The map size as (width, height)."""
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        """Tell whether (x, y) lies inside the map."""
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(
                f"({x}, {y}) is outside a {self.width}x{self.height} edge map"
            )

    def add_point(self, x: int, y: int, dx: float, dy: float) -> EdgePoint:
        """Create an edge point at (x, y) and return it."""
        self._check_bounds(x, y)
        key = (int(x), int(y))
        if key in self._points:
            raise ValueError(f"an edge point already exists at {key}")
        point = EdgePoint(x, y, dx, dy)
        self._points[key] = point
        return point

    def get(self, x: int, y: int) -> EdgePoint | None:
        """Return the edge point at (x, y), or None if that pixel has none."""
        self._check_bounds(x, y)
        return self._points.get((int(x), int(y)))

    def __iter__(self) -> Iterator[EdgePoint]:
        return iter(self._points.values())

    def __len__(self) -> int:
        return len(self._points)


def edge_points_from_canny(edges, dx, dy) -> EdgeMap:
    """Build an edge map from a Canny edge image and its derivative images.

    Every pixel whose edge value is 255 becomes an edge point, taken in
    row-major order.
    """
    edges = np.asarray(edges)
    dx = np.asarray(dx)
    dy = np.asarray(dy)
    if edges.ndim != 2:
        raise ValueError("the edge image must be two-dimensional")
    if dx.shape != edges.shape or dy.shape != edges.shape:
        raise ValueError(
            f"derivative images {dx.shape}, {dy.shape} do not match "
            f"edge image {edges.shape}"
        )
    height, width = edges.shape
    edge_map = EdgeMap(width, height)
    for y, x in np.argwhere(edges == 255):
        edge_map.add_point(int(x), int(y), float(dx[y, x]), float(dy[y, x]))
    return edge_map
"""Edge points, gradient walks, ellipse fitting, marker-code identification,
noisy frame generation and detection-log comparison for concentric-ring markers."""

__version__ = "0.1.0"
__all__ = [
    "bresenham",
    "edgepoint",
    "fitting",
    "markers_bank",
    "regression",
    "simulation",
    "status",
]
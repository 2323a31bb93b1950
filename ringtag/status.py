"""Marker status codes and the default ring geometry of a marker."""

from __future__ import annotations

from enum import IntEnum

_RADIUS_RATIOS_INIT = (
    29.0 / 9.0,
    29.0 / 13.0,
    29.0 / 17.0,
    29.0 / 21.0,
    29.0 / 25.0,
)


class Status(IntEnum):
    """Outcome of detecting and identifying a marker.

    Only ``ID_RELIABLE`` marks a valid, identified marker. ``NO_COLLECTED_CUTS``
    shares its value with ``TOO_FEW_OUTER_POINTS``.
    """

    ID_RELIABLE = 1
    TOO_FEW_OUTER_POINTS = -1
    NO_COLLECTED_CUTS = -1
    NO_SELECTED_CUTS = -2
    OPTI_HAS_DIVERGED = -3
    ID_NOT_RELIABLE = -4
    DEGENERATE = -5


def default_radius_ratios() -> list[float]:
    """Return a fresh list of the initial radius ratios of a marker's rings."""
    return list(_RADIUS_RATIOS_INIT)


def default_circle_count() -> int:
    """Return the number of circles of a marker with the default ratios."""
    return len(_RADIUS_RATIOS_INIT) + 1
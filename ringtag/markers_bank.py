"""The bank of known marker codes and identification against it."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Iterator, Sequence

_MAX_IDENTIFICATION_DISTANCE = 0.6

_ID_THREE_CROWNS: tuple[tuple[float, ...], ...] = (
    (2.000000, 1.666667, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.666667, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.428571, 1.250000, 1.111111),
    (2.500000, 1.818182, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.250000, 1.111111),
    (2.500000, 1.818182, 1.538462, 1.250000, 1.111111),
    (2.500000, 2.000000, 1.538462, 1.250000, 1.111111),
    (2.857143, 2.000000, 1.538462, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.333333, 1.111111),
    (2.500000, 1.818182, 1.538462, 1.333333, 1.111111),
    (2.500000, 2.000000, 1.538462, 1.333333, 1.111111),
    (2.857143, 2.000000, 1.538462, 1.333333, 1.111111),
    (2.500000, 2.000000, 1.666667, 1.333333, 1.111111),
    (2.857143, 2.000000, 1.666667, 1.333333, 1.111111),
    (2.857143, 2.222222, 1.666667, 1.333333, 1.111111),
    (3.333333, 2.222222, 1.666667, 1.333333, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.333333, 1.176471),
    (2.500000, 1.818182, 1.538462, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.538462, 1.333333, 1.176471),
    (2.857143, 2.000000, 1.538462, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.666667, 1.333333, 1.176471),
    (2.857143, 2.000000, 1.666667, 1.333333, 1.176471),
    (2.857143, 2.222222, 1.666667, 1.333333, 1.176471),
    (3.333333, 2.222222, 1.666667, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.000000, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.222222, 1.666667, 1.428571, 1.176471),
    (3.333333, 2.222222, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.222222, 1.818182, 1.428571, 1.176471),
    (3.333333, 2.222222, 1.818182, 1.428571, 1.176471),
    (3.333333, 2.500000, 1.818182, 1.428571, 1.176471),
    (4.000000, 2.500000, 1.818182, 1.428571, 1.176471),
)

_ID_FOUR_CROWNS: tuple[tuple[float, ...], ...] = (
    (2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (6.250000, 3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
)

_FRACTION = re.compile(r"(\d+)\s*/\s*(\d+)")
_NUMBER = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|nan|inf(?:inity)?)",
    re.IGNORECASE,
)
_SPACE = re.compile(r"\s*")


class IdentificationError(RuntimeError):
    """Raised when a marker matches no code in the bank closely enough."""


def _divide(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return math.nan if numerator == 0 else math.inf
    return numerator / denominator


def parse_bank_line(line: str) -> list[float]:
    """Parse the radius ratios on one line of a bank file.

    Each value is either a fraction of two unsigned integers (``29/9``) or a
    decimal number; values are separated by whitespace. Parsing stops at the
    first text that is neither, and the values read so far are returned.
    """
    values: list[float] = []
    pos = _SPACE.match(line, 0).end()
    while pos < len(line):
        fraction = _FRACTION.match(line, pos)
        if fraction:
            values.append(_divide(int(fraction.group(1)), int(fraction.group(2))))
            pos = fraction.end()
        else:
            number = _NUMBER.match(line, pos)
            if not number:
                break
            values.append(float(number.group(0)))
            pos = number.end()
        pos = _SPACE.match(line, pos).end()
    return values


class MarkersBank:
    """The radius-ratio codes of the known markers.

    A bank built for 3 or 4 crowns holds the built-in codes; any other count
    gives an empty bank that can be filled from a file.
    """

    def __init__(self, n_crowns: int) -> None:
        if n_crowns == 3:
            table = _ID_THREE_CROWNS
        elif n_crowns == 4:
            table = _ID_FOUR_CROWNS
        else:
            table = ()
        self._markers: list[list[float]] = [list(row) for row in table]

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> "MarkersBank":
        """Build a bank holding only the codes read from ``path``."""
        bank = cls(0)
        bank.read(path)
        return bank

    def read(self, path: str | os.PathLike) -> None:
        """Append the codes of a bank file, one per non-empty line."""
        try:
            with open(path, encoding="utf-8") as stream:
                lines = stream.read().splitlines()
        except OSError as exc:
            raise OSError(f"Unable to open the bank file: {os.fspath(path)}") from exc
        for line in lines:
            values = parse_bank_line(line)
            if values:
                self._markers.append(values)

    @property
    def markers(self) -> list[list[float]]:
        """A copy of the codes in the bank, in bank order."""
        return [list(row) for row in self._markers]

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[list[float]]:
        return (list(row) for row in self._markers)

    def identify(self, marker: Sequence[float]) -> int:
        """Return the 1-based index of the code nearest to ``marker``.

        Codes are compared over their common length by Euclidean distance.
        Raises IdentificationError if the nearest code is farther than 0.6.
        """
        best_index = 0
        best_norm = math.inf
        for index, code in enumerate(self._markers):
            norm = math.sqrt(sum((m - c) ** 2 for m, c in zip(marker, code)))
            if norm < best_norm:
                best_norm = norm
                best_index = index
        if best_norm > _MAX_IDENTIFICATION_DISTANCE:
            raise IdentificationError("Unable to identify marker")
        return best_index + 1
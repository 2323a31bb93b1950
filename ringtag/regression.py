"""Detection logs and the comparison of test logs against reference logs."""

from __future__ import annotations

import logging
import math
import os
import statistics
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from .status import Status

_log = logging.getLogger(__name__)

_ROOT_ELEMENT = "FileLog"
_N_CROWNS_KEY = "_nCrowns"


class CheckError(RuntimeError):
    """Raised when a test log does not agree with its reference log."""


@dataclass
class DetectedTag:
    """Marker information compared during regression testing."""

    id: int
    status: int
    x: float
    y: float
    quality: float


@dataclass
class FrameLog:
    """The markers detected in one frame and the time it took."""

    frame: int
    elapsed_time: float
    tags: list[DetectedTag] = field(default_factory=list)


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _parse_value(text: str):
    if text in ("true", "false"):
        return text == "true"
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def _child_text(element: ET.Element, name: str) -> str:
    child = element.find(name)
    if child is None:
        raise ValueError(f"missing <{name}> in <{element.tag}>")
    return child.text or ""


@dataclass
class FileLog:
    """The detection results of one image or video with their parameters."""

    filename: str = ""
    parameters: dict = field(default_factory=dict)
    frame_logs: list[FrameLog] = field(default_factory=list)

    @property
    def n_crowns(self):
        """The number of crowns named in the parameters, or None."""
        return self.parameters.get(_N_CROWNS_KEY)

    def save(self, path: str | os.PathLike) -> None:
        """Write the log as XML."""
        root = ET.Element(_ROOT_ELEMENT)
        ET.SubElement(root, "filename").text = self.filename
        params = ET.SubElement(root, "parameters")
        for name, value in self.parameters.items():
            ET.SubElement(params, name).text = _format_value(value)
        frames = ET.SubElement(root, "frameLogs")
        for frame_log in self.frame_logs:
            item = ET.SubElement(frames, "item")
            ET.SubElement(item, "frame").text = str(frame_log.frame)
            ET.SubElement(item, "elapsedTime").text = repr(float(frame_log.elapsed_time))
            tags = ET.SubElement(item, "tags")
            for tag in frame_log.tags:
                tag_item = ET.SubElement(tags, "item")
                ET.SubElement(tag_item, "id").text = str(tag.id)
                ET.SubElement(tag_item, "status").text = str(tag.status)
                ET.SubElement(tag_item, "x").text = repr(float(tag.x))
                ET.SubElement(tag_item, "y").text = repr(float(tag.y))
                ET.SubElement(tag_item, "quality").text = repr(float(tag.quality))
        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(path, encoding="utf-8", xml_declaration=True)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "FileLog":
        """Read a log written by :meth:`save`."""
        root = ET.parse(path).getroot()
        if root.tag != _ROOT_ELEMENT:
            raise ValueError(f"expected <{_ROOT_ELEMENT}>, found <{root.tag}>")
        parameters = {}
        params = root.find("parameters")
        if params is not None:
            parameters = {child.tag: _parse_value(child.text or "") for child in params}
        frame_logs = []
        frames = root.find("frameLogs")
        for item in frames if frames is not None else ():
            tags_element = item.find("tags")
            tags = [
                DetectedTag(
                    id=int(_child_text(t, "id")),
                    status=int(_child_text(t, "status")),
                    x=float(_child_text(t, "x")),
                    y=float(_child_text(t, "y")),
                    quality=float(_child_text(t, "quality")),
                )
                for t in (tags_element if tags_element is not None else ())
            ]
            frame_logs.append(
                FrameLog(
                    frame=int(_child_text(item, "frame")),
                    elapsed_time=float(_child_text(item, "elapsedTime")),
                    tags=tags,
                )
            )
        return cls(_child_text(root, "filename"), parameters, frame_logs)


def is_supported_image(filename: str) -> bool:
    """Tell whether the file name ends in .png or .jpg, in any case."""
    lower = filename.lower()
    return lower.endswith(".png") or lower.endswith(".jpg")


def is_supported_video(filename: str) -> bool:
    """Tell whether the file name ends in .avi, in any case."""
    return filename.lower().endswith(".avi")


def is_supported_format(filename: str) -> bool:
    """Tell whether the file is a supported image or video."""
    return is_supported_image(filename) or is_supported_video(filename)


def sort_tags(log: FrameLog) -> bool:
    """Drop tags with status below 1, sort the rest by id.

    Returns True if no two remaining tags share an id.
    """
    log.tags = sorted((t for t in log.tags if t.status >= 1), key=lambda t: t.id)
    return all(a.id != b.id for a, b in zip(log.tags, log.tags[1:]))


def collect_files(dir_path: str | os.PathLike) -> list[Path]:
    """Return the resolved paths of the regular files in a directory, sorted."""
    return sorted(
        Path(entry.path).resolve()
        for entry in os.scandir(dir_path)
        if entry.is_file(follow_symlinks=False)
    )


def _mean(values: list[float]) -> float:
    return statistics.fmean(values) if values else math.nan


def _stdev(values: list[float]) -> float:
    return math.sqrt(statistics.pvariance(values)) if values else math.nan


class RegressionChecker:
    """Compare test logs with the reference logs of the same file names.

    All reliable marker ids in a frame are assumed to be different.
    """

    def __init__(
        self,
        reference_dir: str | os.PathLike,
        test_dir: str | os.PathLike,
        epsilon: float = 0.5,
    ) -> None:
        self.reference_dir = Path(reference_dir)
        self.test_dir = Path(test_dir)
        if not self.reference_dir.is_dir():
            raise NotADirectoryError("RegressionChecker: reference_dir is not a directory")
        if not self.test_dir.is_dir():
            raise NotADirectoryError("RegressionChecker: test_dir is not a directory")
        self.epsilon = float(epsilon)
        self._reference_paths = collect_files(self.reference_dir)
        self._test_paths = collect_files(self.test_dir)
        self._elapsed_diffs: list[float] = []
        self._quality_diffs: list[float] = []
        self.failed = False

    def _reference_path_for(self, test_path: Path) -> Path | None:
        name = Path(test_path).name
        return next((p for p in self._reference_paths if p.name == name), None)

    def check(self) -> bool:
        """Check every test file; return True if none failed."""
        count = len(self._test_paths)
        for index, test_path in enumerate(self._test_paths, start=1):
            _log.info("Processing file %d/%d: %s", index, count, test_path)
            try:
                self.check_file(test_path)
            except CheckError as exc:
                _log.info("  FAILED: %s", exc)
                self.failed = True
        return not self.failed

    def check_file(self, test_path: str | os.PathLike) -> None:
        """Compare one test file with its reference; raise CheckError on mismatch."""
        reference_path = self._reference_path_for(Path(test_path))
        if reference_path is None:
            raise CheckError("reference file not found")
        self.compare_files(FileLog.load(reference_path), FileLog.load(test_path))

    def compare_files(self, reference_log: FileLog, test_log: FileLog) -> None:
        """Compare two file logs frame by frame."""
        if reference_log.filename != test_log.filename:
            raise CheckError("mismatching filenames")
        if reference_log.n_crowns != test_log.n_crowns:
            raise CheckError("mismatching parameters")
        if len(reference_log.frame_logs) != len(test_log.frame_logs):
            raise CheckError("mismatching frame counts")
        if not _is_monotonic(reference_log.frame_logs):
            raise CheckError("reference log frames not monotonic")
        if not _is_monotonic(test_log.frame_logs):
            raise CheckError("test log frames not monotonic")
        for index, (ref, test) in enumerate(
            zip(reference_log.frame_logs, test_log.frame_logs)
        ):
            self.compare_frames(ref, test, index)

    def compare_frames(self, reference_log: FrameLog, test_log: FrameLog, frame: int) -> None:
        """Compare the reliable tags of two frame logs, matched by id."""
        if len(reference_log.tags) != len(test_log.tags):
            raise CheckError(f"different # of tags in frame {frame}")
        if not sort_tags(reference_log):
            raise CheckError("reference log contains duplicate IDs")
        if not sort_tags(test_log):
            raise CheckError("test log contains duplicate IDs")
        if len(reference_log.tags) != len(test_log.tags):
            raise CheckError(f"different # of tags in frame {frame}")

        self._elapsed_diffs.append(test_log.elapsed_time - reference_log.elapsed_time)
        for ref_tag, test_tag in zip(reference_log.tags, test_log.tags):
            self._quality_diffs.append(test_tag.quality - ref_tag.quality)
            self.compare_tags(ref_tag, test_tag, frame)

    def compare_tags(self, reference_tag: DetectedTag, test_tag: DetectedTag, frame: int) -> None:
        """Compare status, id and position of two tags."""
        ref_reliable = reference_tag.status == Status.ID_RELIABLE
        test_reliable = test_tag.status == Status.ID_RELIABLE
        if ref_reliable != test_reliable:
            raise CheckError(f"tags of different status in frame {frame}")
        if ref_reliable and test_reliable:
            if reference_tag.id != test_tag.id:
                raise CheckError(f"tags with different IDs frame {frame}")
            dx = abs(reference_tag.x - test_tag.x)
            dy = abs(reference_tag.y - test_tag.y)
            if dx > self.epsilon or dy > self.epsilon:
                raise CheckError(f"tags at different positions in frame {frame}")

    def elapsed_time_difference_mean(self) -> float:
        """Mean of test minus reference elapsed time over all compared frames."""
        return _mean(self._elapsed_diffs)

    def elapsed_time_difference_stdev(self) -> float:
        """Population standard deviation of the elapsed-time differences."""
        return _stdev(self._elapsed_diffs)

    def quality_difference_mean(self) -> float:
        """Mean of test minus reference quality over all compared tags."""
        return _mean(self._quality_diffs)

    def quality_difference_stdev(self) -> float:
        """Population standard deviation of the quality differences."""
        return _stdev(self._quality_diffs)


def _is_monotonic(frame_logs: list[FrameLog]) -> bool:
    return all(not (b.frame < a.frame) for a, b in zip(frame_logs, frame_logs[1:]))
import pytest

from ringtag.regression import (
    CheckError,
    DetectedTag,
    FileLog,
    FrameLog,
    RegressionChecker,
    collect_files,
    is_supported_format,
    is_supported_image,
    is_supported_video,
    sort_tags,
)


def _make_log(x=10.0, tag_id=3, quality=0.5, elapsed=1.0, filename="scene.png"):
    return FileLog(
        filename=filename,
        parameters={"_nCrowns": 3, "_cannyThrLow": 0.01, "_useCuda": False},
        frame_logs=[
            FrameLog(
                frame=0,
                elapsed_time=elapsed,
                tags=[
                    DetectedTag(id=tag_id, status=1, x=x, y=20.0, quality=quality),
                    DetectedTag(id=-1, status=-4, x=1.0, y=2.0, quality=0.1),
                ],
            )
        ],
    )


@pytest.fixture
def dirs(tmp_path):
    ref = tmp_path / "ref"
    test = tmp_path / "test"
    ref.mkdir()
    test.mkdir()
    return ref, test


def test_save_load_round_trip(tmp_path):
    log = _make_log()
    path = tmp_path / "scene.xml"
    log.save(path)
    loaded = FileLog.load(path)
    assert loaded == log
    assert loaded.n_crowns == 3


def test_load_rejects_other_root(tmp_path):
    path = tmp_path / "other.xml"
    path.write_text("<Other/>", encoding="utf-8")
    with pytest.raises(ValueError):
        FileLog.load(path)


def test_supported_formats():
    assert is_supported_image("a.PNG")
    assert is_supported_image("b.jpg")
    assert not is_supported_image("c.tif")
    assert is_supported_video("v.AVI")
    assert not is_supported_video("v.mov")
    assert is_supported_format("v.avi")
    assert not is_supported_format("notes.txt")


def test_sort_tags_filters_and_sorts():
    log = FrameLog(
        frame=0,
        elapsed_time=0.0,
        tags=[
            DetectedTag(5, 1, 0.0, 0.0, 0.0),
            DetectedTag(2, 1, 0.0, 0.0, 0.0),
            DetectedTag(7, -2, 0.0, 0.0, 0.0),
        ],
    )
    assert sort_tags(log) is True
    assert [t.id for t in log.tags] == [2, 5]


def test_sort_tags_detects_duplicates():
    log = FrameLog(0, 0.0, [DetectedTag(4, 1, 0, 0, 0), DetectedTag(4, 1, 1, 1, 0)])
    assert sort_tags(log) is False


def test_collect_files_lists_only_files(tmp_path):
    (tmp_path / "b.xml").write_text("x")
    (tmp_path / "a.xml").write_text("x")
    (tmp_path / "sub").mkdir()
    names = [p.name for p in collect_files(tmp_path)]
    assert names == ["a.xml", "b.xml"]


def test_checker_passes_on_equal_logs(dirs):
    ref, test = dirs
    _make_log(elapsed=1.0, quality=0.5).save(ref / "scene.xml")
    _make_log(x=10.3, elapsed=1.5, quality=0.75).save(test / "scene.xml")
    checker = RegressionChecker(ref, test, 0.5)
    assert checker.check() is True
    assert checker.elapsed_time_difference_mean() == pytest.approx(0.5)
    assert checker.quality_difference_mean() == pytest.approx(0.25)
    assert checker.elapsed_time_difference_stdev() == pytest.approx(0.0)


def test_checker_fails_on_moved_tag(dirs):
    ref, test = dirs
    _make_log(x=10.0).save(ref / "scene.xml")
    _make_log(x=12.0).save(test / "scene.xml")
    assert RegressionChecker(ref, test, 0.5).check() is False


def test_checker_fails_on_missing_reference(dirs):
    ref, test = dirs
    _make_log().save(test / "scene.xml")
    checker = RegressionChecker(ref, test, 0.5)
    with pytest.raises(CheckError, match="reference file not found"):
        checker.check_file(test / "scene.xml")
    assert checker.check() is False


def test_compare_files_mismatching_filenames(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    with pytest.raises(CheckError, match="mismatching filenames"):
        checker.compare_files(_make_log(filename="a.png"), _make_log(filename="b.png"))


def test_compare_files_mismatching_parameters(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    other = _make_log()
    other.parameters["_nCrowns"] = 4
    with pytest.raises(CheckError, match="mismatching parameters"):
        checker.compare_files(_make_log(), other)


def test_compare_files_non_monotonic(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    log = _make_log()
    log.frame_logs = [FrameLog(1, 0.0), FrameLog(0, 0.0)]
    good = _make_log()
    good.frame_logs = [FrameLog(0, 0.0), FrameLog(1, 0.0)]
    with pytest.raises(CheckError, match="reference log frames not monotonic"):
        checker.compare_files(log, good)


def test_compare_frames_duplicate_ids(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    dup = FrameLog(0, 0.0, [DetectedTag(1, 1, 0, 0, 0), DetectedTag(1, 1, 0, 0, 0)])
    ok = FrameLog(0, 0.0, [DetectedTag(1, 1, 0, 0, 0), DetectedTag(2, 1, 0, 0, 0)])
    with pytest.raises(CheckError, match="reference log contains duplicate IDs"):
        checker.compare_frames(dup, ok, 0)


def test_compare_tags_status_and_id(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    with pytest.raises(CheckError, match="different status"):
        checker.compare_tags(DetectedTag(1, 1, 0, 0, 0), DetectedTag(1, -4, 0, 0, 0), 3)
    with pytest.raises(CheckError, match="different IDs"):
        checker.compare_tags(DetectedTag(1, 1, 0, 0, 0), DetectedTag(2, 1, 0, 0, 0), 3)


def test_statistics_are_nan_before_any_comparison(dirs):
    checker = RegressionChecker(*dirs, 0.5)
    mean = checker.quality_difference_mean()
    stdev = checker.quality_difference_stdev()
    assert str(float(mean)) == "nan"
    assert str(float(stdev)) == "nan"


def test_checker_requires_directories(tmp_path):
    with pytest.raises(NotADirectoryError):
        RegressionChecker(tmp_path / "missing", tmp_path, 0.5)
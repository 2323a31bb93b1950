import pytest

from ringtag.status import Status, default_circle_count, default_radius_ratios


def test_status_lookup_by_value():
    assert Status(1) is Status.ID_RELIABLE
    assert Status(-5) is Status.DEGENERATE


def test_no_collected_cuts_is_alias_of_too_few_outer_points():
    assert Status.NO_COLLECTED_CUTS is Status.TOO_FEW_OUTER_POINTS
    assert Status(-1) is Status.TOO_FEW_OUTER_POINTS


def test_unknown_status_value_raises():
    with pytest.raises(ValueError):
        Status(42)


@pytest.mark.parametrize("value", [-1, -2, -3, -4, -5])
def test_failure_statuses_are_negative(value):
    status = Status(value)
    assert status < 0
    assert status is not Status.ID_RELIABLE


def test_only_one_status_is_positive():
    positives = [Status(member.value) for member in Status if Status(member.value) > 0]
    assert positives == [Status.ID_RELIABLE]


def test_default_radius_ratios_values():
    assert default_radius_ratios() == pytest.approx(
        [29.0 / 9.0, 29.0 / 13.0, 29.0 / 17.0, 29.0 / 21.0, 29.0 / 25.0]
    )


def test_default_radius_ratios_decrease_and_exceed_one():
    ratios = default_radius_ratios()
    assert all(a > b for a, b in zip(ratios, ratios[1:]))
    assert all(r > 1.0 for r in ratios)


def test_default_radius_ratios_returns_independent_list():
    first = default_radius_ratios()
    first.append(0.0)
    assert len(default_radius_ratios()) == len(first) - 1


def test_default_circle_count_is_one_more_than_ratios():
    assert default_circle_count() == len(default_radius_ratios()) + 1
    assert default_circle_count() == 6
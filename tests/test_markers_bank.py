import math

import pytest

from ringtag.markers_bank import (
    IdentificationError,
    MarkersBank,
    parse_bank_line,
)


def test_three_crown_bank_shape():
    bank = MarkersBank(3)
    markers = bank.markers
    assert len(bank) == 32
    assert all(len(row) == 5 for row in markers)
    assert markers[0] == [2.000000, 1.666667, 1.428571, 1.250000, 1.111111]
    assert markers[-1] == [4.000000, 2.500000, 1.818182, 1.428571, 1.176471]


def test_four_crown_bank_shape():
    bank = MarkersBank(4)
    markers = bank.markers
    assert len(markers) == 128
    assert all(len(row) == 7 for row in markers)
    assert markers[0][0] == 2.272727
    assert markers[-1][0] == 6.250000


def test_other_crown_counts_give_empty_bank():
    assert len(MarkersBank(5)) == 0
    assert MarkersBank(0).markers == []


def test_codes_are_distinct():
    for n in (3, 4):
        rows = [tuple(r) for r in MarkersBank(n)]
        assert len(set(rows)) == len(rows)


@pytest.mark.parametrize("n_crowns", [3, 4])
def test_identify_each_exact_code(n_crowns):
    bank = MarkersBank(n_crowns)
    for index, row in enumerate(bank.markers):
        assert bank.identify(row) == index + 1


def test_identify_near_code():
    bank = MarkersBank(3)
    row = bank.markers[4]
    noisy = [v + 0.001 for v in row]
    assert bank.identify(noisy) == 5


def test_identify_far_marker_raises():
    bank = MarkersBank(3)
    with pytest.raises(IdentificationError):
        bank.identify([100.0, 100.0, 100.0, 100.0, 100.0])


def test_identify_on_empty_bank_raises():
    with pytest.raises(IdentificationError):
        MarkersBank(0).identify([1.0, 2.0])


def test_identify_compares_common_prefix():
    bank = MarkersBank(3)
    row = bank.markers[0]
    assert bank.identify(row + [999.0]) == 1


def test_markers_returns_copy():
    bank = MarkersBank(3)
    bank.markers[0][0] = 50.0
    assert bank.markers[0][0] == 2.000000


def test_parse_fractions_and_decimals():
    values = parse_bank_line("  29/9 2.5 29 / 13  ")
    assert values == pytest.approx([29 / 9, 2.5, 29 / 13])


def test_parse_stops_at_garbage():
    assert parse_bank_line("1.5 abc 2.0") == [1.5]


def test_parse_decimal_followed_by_slash():
    assert parse_bank_line("1.5/2") == [1.5]


def test_parse_empty_line():
    assert parse_bank_line("") == []
    assert parse_bank_line("   ") == []


def test_parse_division_by_zero():
    values = parse_bank_line("3/0")
    assert len(values) == 1 and math.isinf(values[0])


def test_read_file(tmp_path):
    path = tmp_path / "ids.txt"
    path.write_text("29/9 29/13\n\n2.0 1.5\n", encoding="utf-8")
    bank = MarkersBank.from_file(path)
    assert len(bank) == 2
    assert bank.markers[0] == pytest.approx([29 / 9, 29 / 13])
    assert bank.identify([2.0, 1.5]) == 2


def test_read_appends_to_builtin(tmp_path):
    path = tmp_path / "extra.txt"
    path.write_text("7.0 7.0 7.0 7.0 7.0\n", encoding="utf-8")
    bank = MarkersBank(3)
    bank.read(path)
    assert len(bank) == 33
    assert bank.identify([7.0, 7.0, 7.0, 7.0, 7.0]) == 33


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        MarkersBank.from_file(tmp_path / "missing.txt")
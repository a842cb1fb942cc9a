from datetime import date
from types import SimpleNamespace

import pytest

from app.domain.validity import ValidityWindow, find_conflicts, windows_conflict


def window(start: str, end: str | None = None) -> ValidityWindow:
    return ValidityWindow(
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end) if end else None,
    )


def test_two_open_ended_windows_conflict():
    assert windows_conflict(window("2020-01-01"), window("2030-01-01"))


def test_open_ended_conflicts_with_window_ending_after_its_start():
    assert windows_conflict(window("2020-01-01"), window("2019-01-01", "2020-06-30"))


def test_open_ended_does_not_conflict_with_window_ending_before_its_start():
    assert not windows_conflict(window("2020-01-01"), window("2019-01-01", "2019-12-31"))


def test_bounded_windows_touching_on_a_day_conflict():
    assert windows_conflict(
        window("2020-01-01", "2020-06-30"), window("2020-06-30", "2020-12-31")
    )


def test_adjacent_bounded_windows_do_not_conflict():
    assert not windows_conflict(
        window("2020-01-01", "2020-06-29"), window("2020-06-30", "2020-12-31")
    )


def test_nested_bounded_windows_conflict():
    assert windows_conflict(
        window("2020-01-01", "2020-12-31"), window("2020-03-01", "2020-04-01")
    )


@pytest.mark.parametrize(
    "a, b",
    [
        (window("2020-01-01"), window("2021-01-01")),
        (window("2020-01-01"), window("2019-01-01", "2020-06-30")),
        (window("2020-01-01"), window("2019-01-01", "2019-12-31")),
        (window("2020-01-01", "2020-06-30"), window("2020-06-30", "2020-12-31")),
        (window("2020-01-01", "2020-06-29"), window("2020-06-30", "2020-12-31")),
        (window("2021-01-01", "2021-12-31"), window("2020-01-01")),
    ],
)
def test_conflict_is_symmetric(a, b):
    assert windows_conflict(a, b) == windows_conflict(b, a)


def test_window_of_reads_start_and_end_date():
    right = SimpleNamespace(start_date=date(2020, 1, 1), end_date=None)

    result = ValidityWindow.of(right)

    assert result == ValidityWindow(date(2020, 1, 1))
    assert result.is_open_ended


def test_find_conflicts_checks_every_right_pairwise():
    overlapping = SimpleNamespace(right_id="a", start_date=date(2020, 5, 1), end_date=None)
    before = SimpleNamespace(
        right_id="b", start_date=date(2018, 1, 1), end_date=date(2018, 12, 31)
    )
    after = SimpleNamespace(
        right_id="c", start_date=date(2021, 1, 1), end_date=date(2021, 12, 31)
    )

    conflicts = find_conflicts(window("2020-01-01", "2020-12-31"), [overlapping, before, after])

    assert [r.right_id for r in conflicts] == ["a"]

"""Validity windows of rights and the rule deciding when two of them conflict."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class ValidityWindow:
    """The time range ``[start_date, end_date]`` in which a right applies.

    ``end_date`` is inclusive. A window without ``end_date`` is open-ended.
    """

    start_date: date
    end_date: date | None = None

    @property
    def is_open_ended(self) -> bool:
        return self.end_date is None

    @classmethod
    def of(cls, right) -> ValidityWindow:
        """Build the window of anything carrying ``start_date``/``end_date`` (ORM rows, schemas)."""
        return cls(start_date=right.start_date, end_date=right.end_date)


def windows_conflict(a: ValidityWindow, b: ValidityWindow) -> bool:
    """Decide whether two validity windows on the same item conflict.

    Semantics:
    - Two open-ended windows always conflict.
    - An open-ended window conflicts with a bounded window ending after its start.
    - Two bounded windows conflict when they overlap; touching boundaries overlap.

    The relation is symmetric.
    """
    if a.end_date is None and b.end_date is None:
        return True
    if a.end_date is None:
        return b.end_date > a.start_date
    if b.end_date is None:
        return a.end_date > b.start_date
    return a.start_date <= b.end_date and b.start_date <= a.end_date


def find_conflicts(window: ValidityWindow, rights) -> list:
    """Return the rights whose window conflicts with ``window``.

    Evaluated pairwise against every given right, not globally.
    """
    return [r for r in rights if windows_conflict(window, ValidityWindow.of(r))]

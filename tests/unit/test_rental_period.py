"""
Unit tests for rental/utils/rental_period.py

Pins the overlap boundary rule (strict, half-open intervals) and the default
duration used when a reservation has no end date.
"""

from datetime import date

import pytest

from rental.utils.rental_period import (
    DEFAULT_RENTAL_DAYS,
    DefaultDuration,
    FixedEnd,
    effective_end,
    intervals_overlap,
    rental_days,
    rental_end_from,
    stored_end,
)


class TestRentalEnd:
    """FixedEnd / DefaultDuration construction and derived dates."""

    def test_none_end_date_is_default_duration(self):
        assert rental_end_from(None) == DefaultDuration()

    def test_end_date_is_fixed_end(self):
        assert rental_end_from(date(2024, 1, 14)) == FixedEnd(date(2024, 1, 14))

    def test_default_duration_is_four_days(self):
        assert DEFAULT_RENTAL_DAYS == 4

    def test_default_duration_effective_end(self):
        assert effective_end(date(2024, 3, 1), DefaultDuration()) == date(2024, 3, 5)

    def test_default_duration_crosses_month_end(self):
        assert effective_end(date(2024, 2, 27), DefaultDuration()) == date(2024, 3, 2)

    def test_fixed_end_effective_end(self):
        assert effective_end(date(2024, 1, 10), FixedEnd(date(2024, 1, 14))) == date(2024, 1, 14)

    def test_stored_end_keeps_null_for_default_duration(self):
        assert stored_end(DefaultDuration()) is None
        assert stored_end(FixedEnd(date(2024, 1, 14))) == date(2024, 1, 14)


class TestRentalDays:

    def test_fixed_end_days(self):
        assert rental_days(date(2024, 1, 10), FixedEnd(date(2024, 1, 14))) == 4

    def test_default_duration_days(self):
        assert rental_days(date(2024, 1, 10), DefaultDuration()) == DEFAULT_RENTAL_DAYS

    def test_same_day_is_zero(self):
        assert rental_days(date(2024, 1, 10), FixedEnd(date(2024, 1, 10))) == 0

    def test_end_before_start_is_negative(self):
        assert rental_days(date(2024, 1, 10), FixedEnd(date(2024, 1, 8))) == -2


class TestIntervalsOverlap:
    """Boundary rule: [s1, e1) and [s2, e2) overlap iff s1 < e2 and s2 < e1."""

    EXISTING = (date(2024, 1, 10), date(2024, 1, 14))

    def test_adjacent_after_does_not_overlap(self):
        assert intervals_overlap(date(2024, 1, 14), date(2024, 1, 18), *self.EXISTING) is False

    def test_adjacent_before_does_not_overlap(self):
        assert intervals_overlap(date(2024, 1, 6), date(2024, 1, 10), *self.EXISTING) is False

    def test_last_day_overlaps(self):
        assert intervals_overlap(date(2024, 1, 13), date(2024, 1, 17), *self.EXISTING) is True

    def test_contained_interval_overlaps(self):
        assert intervals_overlap(date(2024, 1, 11), date(2024, 1, 12), *self.EXISTING) is True

    def test_containing_interval_overlaps(self):
        assert intervals_overlap(date(2024, 1, 1), date(2024, 1, 31), *self.EXISTING) is True

    def test_identical_interval_overlaps(self):
        assert intervals_overlap(*self.EXISTING, *self.EXISTING) is True

    @pytest.mark.parametrize(
        "start,end",
        [
            (date(2024, 1, 1), date(2024, 1, 5)),
            (date(2024, 1, 20), date(2024, 1, 25)),
        ],
    )
    def test_disjoint_intervals_do_not_overlap(self, start, end):
        assert intervals_overlap(start, end, *self.EXISTING) is False

    def test_overlap_is_symmetric(self):
        a = (date(2024, 1, 12), date(2024, 1, 16))
        assert intervals_overlap(*a, *self.EXISTING) == intervals_overlap(*self.EXISTING, *a)

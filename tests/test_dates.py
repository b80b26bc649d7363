"""
Tests for calendar helpers used by scheduling and payment windows
"""

from datetime import date

from loan_service.dates import (
    add_months, last_day_of_month, first_day_of_next_month,
    payment_window_end, days_between
)


class TestAddMonths:
    """Test month arithmetic"""

    def test_simple(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)

    def test_year_rollover(self):
        assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)

    def test_day_clamped_to_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)


class TestMonthBoundaries:
    """Test month boundary helpers"""

    def test_last_day_of_month(self):
        assert last_day_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
        assert last_day_of_month(date(2024, 4, 1)) == date(2024, 4, 30)

    def test_first_day_of_next_month(self):
        assert first_day_of_next_month(date(2024, 1, 31)) == date(2024, 2, 1)
        assert first_day_of_next_month(date(2024, 12, 15)) == date(2025, 1, 1)


class TestPaymentWindow:
    """Test the payment window end date"""

    def test_window_covers_current_and_two_following_months(self):
        assert payment_window_end(date(2024, 1, 15)) == date(2024, 3, 31)

    def test_window_across_year_end(self):
        assert payment_window_end(date(2024, 11, 30)) == date(2025, 1, 31)

    def test_window_ending_in_february(self):
        assert payment_window_end(date(2023, 12, 31)) == date(2024, 2, 29)

    def test_custom_months_ahead(self):
        assert payment_window_end(date(2024, 5, 5), months_ahead=0) == date(2024, 5, 31)


class TestDaysBetween:

    def test_signed(self):
        assert days_between(date(2024, 1, 1), date(2024, 1, 11)) == 10
        assert days_between(date(2024, 1, 11), date(2024, 1, 1)) == -10

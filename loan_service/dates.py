"""
Calendar Arithmetic Module

Calendar-month helpers used by the installment scheduler and the payment
window. All values are calendar dates without a time of day.
"""

from datetime import date
import calendar


def add_months(start_date: date, months: int) -> date:
    """Add months to a date, clamping the day to the target month's length"""
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def last_day_of_month(value: date) -> date:
    """Last calendar day of the month containing value"""
    return value.replace(day=calendar.monthrange(value.year, value.month)[1])


def first_day_of_next_month(value: date) -> date:
    """1st of the calendar month following value"""
    return add_months(value, 1).replace(day=1)


def payment_window_end(payment_date: date, months_ahead: int = 2) -> date:
    """
    Last eligible due date for a payment made on payment_date.

    The window covers the payment's own month plus the following
    ``months_ahead`` months, so the end is the last day of the month that is
    ``months_ahead`` months after payment_date's month.
    """
    return last_day_of_month(add_months(payment_date.replace(day=1), months_ahead))


def days_between(start: date, end: date) -> int:
    """Signed day count from start to end (negative when end is earlier)"""
    return (end - start).days

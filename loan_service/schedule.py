"""
Installment Schedule Module

Splits an interest-inclusive loan total into equal monthly installments due
on the 1st of each month, starting the month after issuance.
"""

from decimal import Decimal
from datetime import date, datetime, timezone
from typing import List

from .dates import add_months, first_day_of_next_month
from .exceptions import InvalidInstallmentCountError
from .models import ALLOWED_INSTALLMENT_COUNTS, LoanInstallment
from .money import ZERO, round_money


class InstallmentScheduler:
    """Deterministic equal-installment schedule generator"""

    def installment_amount(self, total_amount: Decimal, count: int) -> Decimal:
        """
        Equal share of the total, rounded half-up to 2 decimals.

        The rounding residue is not redistributed, so the schedule may differ
        from the total by up to count * 0.005.
        """
        return round_money(total_amount / Decimal(count))

    def due_dates(self, issue_date: date, count: int) -> List[date]:
        first_due = first_day_of_next_month(issue_date)
        return [add_months(first_due, offset) for offset in range(count)]

    def build_schedule(self, total_amount: Decimal, count: int, issue_date: date) -> List[LoanInstallment]:
        """
        Generate the installments of a new loan

        Args:
            total_amount: Interest-inclusive amount owed
            count: Number of installments (6, 9, 12 or 24)
            issue_date: Loan issuance date

        Returns:
            Unpaid installments in ascending due-date order

        Raises:
            InvalidInstallmentCountError: If count is not an allowed value
        """
        if count not in ALLOWED_INSTALLMENT_COUNTS:
            raise InvalidInstallmentCountError(count, ALLOWED_INSTALLMENT_COUNTS)

        amount = self.installment_amount(total_amount, count)
        now = datetime.now(timezone.utc)

        return [
            LoanInstallment(
                id=None,
                created_at=now,
                updated_at=now,
                loan_id=None,
                sequence=position,
                amount=amount,
                due_date=due_date,
                paid_amount=ZERO,
                payment_date=None,
                is_paid=False,
            )
            for position, due_date in enumerate(self.due_dates(issue_date, count), start=1)
        ]

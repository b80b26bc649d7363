"""
Loan Issuance Module

Validates a loan request against the customer's credit line, applies the
flat interest rate, builds the installment schedule and debits the credit
line. Works purely on in-memory records; the caller persists the result.
"""

from decimal import Decimal
from datetime import date, datetime, timezone

from .exceptions import (
    InvalidInstallmentCountError, InvalidLoanRequestError, InsufficientCreditError
)
from .ledger import CustomerLedger
from .models import (
    ALLOWED_INSTALLMENT_COUNTS, MIN_INTEREST_RATE, MAX_INTEREST_RATE, Customer, Loan
)
from .money import ZERO, round_money, round_rate, to_decimal
from .schedule import InstallmentScheduler


class LoanIssuer:
    """Creates loans and their schedules"""

    def __init__(self, ledger: CustomerLedger, scheduler: InstallmentScheduler):
        self.ledger = ledger
        self.scheduler = scheduler

    @staticmethod
    def total_amount(principal: Decimal, interest_rate: Decimal) -> Decimal:
        """Interest-inclusive amount owed: principal * (1 + rate)"""
        return round_money(principal * (Decimal('1') + interest_rate))

    def validate_request(self, principal: Decimal, count: int, interest_rate: Decimal) -> None:
        if count not in ALLOWED_INSTALLMENT_COUNTS:
            raise InvalidInstallmentCountError(count, ALLOWED_INSTALLMENT_COUNTS)
        if principal <= ZERO:
            raise InvalidLoanRequestError("Loan amount must be positive")
        if not MIN_INTEREST_RATE <= interest_rate <= MAX_INTEREST_RATE:
            raise InvalidLoanRequestError(
                f"Interest rate must be between {MIN_INTEREST_RATE} and {MAX_INTEREST_RATE}"
            )

    def issue_loan(
        self,
        customer: Customer,
        principal: Decimal,
        count: int,
        interest_rate: Decimal,
        today: date
    ) -> Loan:
        """
        Issue a loan against the customer's available credit

        Args:
            customer: Borrower; its used credit is debited by the loan total
            principal: Requested amount before interest
            count: Number of installments (6, 9, 12 or 24)
            interest_rate: Flat rate between 0.1 and 0.5
            today: Issuance date, also the loan's create date

        Returns:
            Unsaved Loan with its installments attached

        Raises:
            InvalidInstallmentCountError: If count is not an allowed value
            InvalidLoanRequestError: If principal or rate is out of range
            InsufficientCreditError: If the total exceeds available credit
        """
        principal = round_money(to_decimal(principal))
        interest_rate = round_rate(to_decimal(interest_rate))
        self.validate_request(principal, count, interest_rate)

        total = self.total_amount(principal, interest_rate)
        if not self.ledger.can_extend(customer, total):
            raise InsufficientCreditError(self.ledger.available_credit(customer), total)

        installments = self.scheduler.build_schedule(total, count, today)

        now = datetime.now(timezone.utc)
        loan = Loan(
            id=None,
            created_at=now,
            updated_at=now,
            customer_id=customer.id,
            loan_amount=total,
            number_of_installment=count,
            interest_rate=interest_rate,
            create_date=today,
            is_paid=False,
            installments=installments,
        )

        self.ledger.debit(customer, total)
        return loan

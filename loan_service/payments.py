"""
Payment Allocation Module

Applies a payment to a loan's outstanding installments.

Only installments due within the payment's month and the two following
months are eligible. Eligible installments are settled oldest first, each one
in full or not at all. An installment paid before its due date earns a
discount of 0.1% of its amount per day early; one paid after its due date
carries a penalty of 0.1% per day late. Allocation stops at the first
installment the remaining funds cannot cover. When the last installment of a
loan is paid the loan is closed and its full total is released back to the
customer's credit line.
"""

from decimal import Decimal
from datetime import date
from typing import List, Optional

from .dates import payment_window_end
from .exceptions import (
    InvalidPaymentAmountError, InvalidPaymentDateError, LoanAlreadyPaidError,
    NoInstallmentsAvailableError, InsufficientPaymentAmountError
)
from .ledger import CustomerLedger
from .models import (
    Customer, Loan, LoanInstallment, InstallmentPaymentDetail, PaymentResult, PaymentType
)
from .money import ZERO, round_money, to_decimal


DAILY_ADJUSTMENT_RATE = Decimal('0.001')
PAYMENT_WINDOW_MONTHS = 2


class PaymentAllocator:
    """FIFO, all-or-nothing installment payment engine"""

    def __init__(self, ledger: CustomerLedger):
        self.ledger = ledger

    def validate_request(self, payment_amount: Decimal, payment_date: date, today: date) -> None:
        """Checks that need no loan; callers may run them before loading it"""
        if payment_amount <= ZERO:
            raise InvalidPaymentAmountError()
        if payment_date > today:
            raise InvalidPaymentDateError()

    def validate_payment(self, loan: Loan, payment_amount: Decimal, payment_date: date, today: date) -> None:
        """Check preconditions in order; the first failure wins"""
        self.validate_request(payment_amount, payment_date, today)
        if loan.is_paid:
            raise LoanAlreadyPaidError()

    def eligible_installments(self, loan: Loan, payment_date: date) -> List[LoanInstallment]:
        """Unpaid installments due by the end of the payment window, FIFO ordered"""
        window_end = payment_window_end(payment_date, PAYMENT_WINDOW_MONTHS)
        return [i for i in loan.unpaid_installments() if i.due_date <= window_end]

    def price_installment(self, installment: LoanInstallment, payment_date: date) -> InstallmentPaymentDetail:
        """Effective amount of an installment when paid on payment_date"""
        days = installment.days_from_due_date(payment_date)
        original = installment.remaining_amount
        discount = ZERO
        penalty = ZERO

        if days < 0:
            discount = original * Decimal(-days) * DAILY_ADJUSTMENT_RATE
            payment_type = PaymentType.EARLY
        elif days > 0:
            penalty = original * Decimal(days) * DAILY_ADJUSTMENT_RATE
            payment_type = PaymentType.LATE
        else:
            payment_type = PaymentType.ON_TIME

        return InstallmentPaymentDetail(
            installment_id=installment.id,
            original_amount=original,
            effective_amount=round_money(original - discount + penalty),
            discount=round_money(discount),
            penalty=round_money(penalty),
            payment_type=payment_type,
        )

    def apply_payment(
        self,
        loan: Loan,
        payment_amount: Decimal,
        payment_date: date,
        today: date,
        customer: Optional[Customer] = None
    ) -> PaymentResult:
        """
        Apply a payment to a loan

        Args:
            loan: Loan with its installments attached
            payment_amount: Funds available for this payment
            payment_date: Date the payment is made
            today: Reference date for rejecting future payments
            customer: Loan owner; required to release credit on payoff

        Returns:
            PaymentResult describing the settled installments

        Raises:
            InvalidPaymentAmountError: If the amount is not positive
            InvalidPaymentDateError: If the payment date is after today
            LoanAlreadyPaidError: If the loan is already closed
            NoInstallmentsAvailableError: If nothing is due within the window
            InsufficientPaymentAmountError: If the first eligible installment
                cannot be covered; nothing is modified in that case
        """
        payment_amount = to_decimal(payment_amount)
        self.validate_payment(loan, payment_amount, payment_date, today)

        eligible = self.eligible_installments(loan, payment_date)
        if not eligible:
            raise NoInstallmentsAvailableError()

        # Price until the funds run out before touching any installment
        remaining = payment_amount
        settled = []
        for installment in eligible:
            if remaining <= ZERO:
                break
            detail = self.price_installment(installment, payment_date)
            if remaining < detail.effective_amount:
                break
            remaining -= detail.effective_amount
            settled.append((installment, detail))

        if not settled:
            raise InsufficientPaymentAmountError()

        if customer is None and len(settled) == loan.unpaid_count:
            raise ValueError("Customer is required to release credit when a loan is paid off")

        for installment, _ in settled:
            installment.mark_paid(payment_date)

        is_loan_complete = loan.unpaid_count == 0
        if is_loan_complete:
            loan.is_paid = True
            loan.touch()
            self.ledger.credit(customer, loan.loan_amount)

        details = [detail for _, detail in settled]
        return PaymentResult(
            installments_paid_count=len(details),
            total_amount_spent=sum((d.effective_amount for d in details), ZERO),
            is_loan_complete=is_loan_complete,
            payment_details=details,
        )

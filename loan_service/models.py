"""
Loan Domain Model

Customer, Loan and LoanInstallment records plus the value types returned by
the payment allocator. Amounts are Decimals with 2 fraction digits.
"""

from decimal import Decimal
from datetime import datetime, timezone, date
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum

from .dates import days_between
from .money import ZERO, round_money, money_or_zero
from .storage import StorageRecord


ALLOWED_INSTALLMENT_COUNTS = (6, 9, 12, 24)
MIN_INTEREST_RATE = Decimal('0.1')
MAX_INTEREST_RATE = Decimal('0.5')


class InstallmentStatus(Enum):
    """Display status of an installment as of a given date"""
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    UNPAID = "UNPAID"

    @property
    def description(self) -> str:
        return {
            InstallmentStatus.PAID: "Payment completed",
            InstallmentStatus.OVERDUE: "Payment overdue",
            InstallmentStatus.UNPAID: "Payment pending",
        }[self]


class PaymentType(Enum):
    """Timing of an installment payment relative to its due date"""
    EARLY = "EARLY"
    ON_TIME = "ON_TIME"
    LATE = "LATE"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Customer(StorageRecord):
    """
    Borrower with a revolving credit limit.

    ``used_credit_limit`` is changed only through the CustomerLedger.
    """
    name: str
    surname: str
    credit_limit: Decimal
    used_credit_limit: Decimal = ZERO

    def __post_init__(self):
        for label, value in (("Name", self.name), ("Surname", self.surname)):
            if not value or not value.strip():
                raise ValueError(f"{label} cannot be blank")
            if not 2 <= len(value) <= 50:
                raise ValueError(f"{label} must be between 2 and 50 characters")

        self.credit_limit = round_money(self.credit_limit)
        self.used_credit_limit = round_money(money_or_zero(self.used_credit_limit))

        if self.credit_limit <= ZERO:
            raise ValueError("Credit limit must be positive")
        if self.used_credit_limit < ZERO:
            raise ValueError("Used credit limit cannot be negative")

    @property
    def available_credit(self) -> Decimal:
        return self.credit_limit - self.used_credit_limit

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    @classmethod
    def new(cls, name: str, surname: str, credit_limit: Decimal) -> 'Customer':
        """Create an unsaved customer with no used credit"""
        now = _now()
        return cls(
            id=None,
            created_at=now,
            updated_at=now,
            name=name,
            surname=surname,
            credit_limit=credit_limit,
        )


@dataclass
class LoanInstallment(StorageRecord):
    """One scheduled repayment of a loan"""
    loan_id: Optional[str]
    sequence: int                       # 1-based position in the schedule
    amount: Decimal
    due_date: date
    paid_amount: Decimal = ZERO
    payment_date: Optional[date] = None
    is_paid: bool = False

    @property
    def remaining_amount(self) -> Decimal:
        return self.amount - self.paid_amount

    def days_from_due_date(self, payment_date: date) -> int:
        """Negative when paying before the due date, positive when after"""
        return days_between(self.due_date, payment_date)

    def status(self, as_of: date) -> InstallmentStatus:
        if self.is_paid:
            return InstallmentStatus.PAID
        if self.due_date < as_of:
            return InstallmentStatus.OVERDUE
        return InstallmentStatus.UNPAID

    def mark_paid(self, payment_date: date) -> None:
        """Settle the full nominal amount; an installment is paid at most once"""
        if self.is_paid:
            raise ValueError(f"Installment {self.id} is already paid")
        self.paid_amount = self.amount
        self.is_paid = True
        self.payment_date = payment_date
        self.touch()


@dataclass
class Loan(StorageRecord):
    """
    Installment loan owned by a single customer.

    ``loan_amount`` is the interest-inclusive total that is scheduled and
    owed. ``is_paid`` flips to True once, when the last installment is paid.
    """
    customer_id: str
    loan_amount: Decimal
    number_of_installment: int
    interest_rate: Decimal
    create_date: date
    is_paid: bool = False
    installments: List[LoanInstallment] = field(default_factory=list)

    def ordered_installments(self) -> List[LoanInstallment]:
        """Installments in FIFO order: due date, then schedule position"""
        return sorted(self.installments, key=lambda i: (i.due_date, i.sequence))

    def unpaid_installments(self) -> List[LoanInstallment]:
        return [i for i in self.ordered_installments() if not i.is_paid]

    @property
    def unpaid_count(self) -> int:
        return sum(1 for i in self.installments if not i.is_paid)


@dataclass
class InstallmentPaymentDetail:
    """How one installment was settled by a payment"""
    installment_id: Optional[str]
    original_amount: Decimal
    effective_amount: Decimal
    discount: Decimal
    penalty: Decimal
    payment_type: PaymentType


@dataclass
class PaymentResult:
    """Outcome of applying one payment to a loan"""
    installments_paid_count: int
    total_amount_spent: Decimal
    is_loan_complete: bool
    payment_details: List[InstallmentPaymentDetail] = field(default_factory=list)

"""
Tests for loan domain records
"""

import pytest
from decimal import Decimal
from datetime import date, datetime, timezone

from loan_service.models import (
    Customer, Loan, LoanInstallment, InstallmentStatus
)


def make_installment(sequence, due_date, amount='1000.00', is_paid=False):
    now = datetime.now(timezone.utc)
    return LoanInstallment(
        id=f"inst-{sequence}",
        created_at=now,
        updated_at=now,
        loan_id="loan-1",
        sequence=sequence,
        amount=Decimal(amount),
        due_date=due_date,
        is_paid=is_paid,
    )


class TestCustomer:
    """Test customer validation"""

    def test_new_customer(self):
        customer = Customer.new("Muhammed Hakan", "Celik", Decimal('50000'))
        assert customer.id is None
        assert customer.credit_limit == Decimal('50000.00')
        assert customer.used_credit_limit == Decimal('0.00')
        assert customer.available_credit == Decimal('50000.00')
        assert customer.full_name == "Muhammed Hakan Celik"

    @pytest.mark.parametrize("name", ["", "   ", "J", "x" * 51])
    def test_invalid_name(self, name):
        with pytest.raises(ValueError):
            Customer.new(name, "Smith", Decimal('1000'))

    def test_invalid_surname(self):
        with pytest.raises(ValueError, match="Surname"):
            Customer.new("Jane", "S", Decimal('1000'))

    def test_non_positive_limit(self):
        with pytest.raises(ValueError, match="Credit limit must be positive"):
            Customer.new("Jane", "Smith", Decimal('0'))


class TestLoanInstallment:
    """Test installment state"""

    def test_days_from_due_date(self):
        installment = make_installment(1, date(2024, 3, 1))
        assert installment.days_from_due_date(date(2024, 3, 6)) == 5
        assert installment.days_from_due_date(date(2024, 2, 20)) == -10
        assert installment.days_from_due_date(date(2024, 3, 1)) == 0

    def test_status(self):
        installment = make_installment(1, date(2024, 3, 1))
        assert installment.status(date(2024, 3, 1)) == InstallmentStatus.UNPAID
        assert installment.status(date(2024, 3, 2)) == InstallmentStatus.OVERDUE

        installment.mark_paid(date(2024, 3, 2))
        assert installment.status(date(2024, 3, 2)) == InstallmentStatus.PAID
        assert InstallmentStatus.PAID.description == "Payment completed"

    def test_mark_paid_records_nominal_amount(self):
        installment = make_installment(1, date(2024, 3, 1))
        installment.mark_paid(date(2024, 2, 20))

        assert installment.is_paid
        assert installment.paid_amount == Decimal('1000.00')
        assert installment.remaining_amount == Decimal('0.00')
        assert installment.payment_date == date(2024, 2, 20)

    def test_mark_paid_twice_rejected(self):
        installment = make_installment(1, date(2024, 3, 1))
        installment.mark_paid(date(2024, 3, 1))
        with pytest.raises(ValueError, match="already paid"):
            installment.mark_paid(date(2024, 3, 1))


class TestLoan:
    """Test loan installment views"""

    def setup_method(self):
        now = datetime.now(timezone.utc)
        self.loan = Loan(
            id="loan-1",
            created_at=now,
            updated_at=now,
            customer_id="cust-1",
            loan_amount=Decimal('3000.00'),
            number_of_installment=3,
            interest_rate=Decimal('0.200'),
            create_date=date(2024, 1, 15),
            installments=[
                make_installment(3, date(2024, 4, 1)),
                make_installment(1, date(2024, 2, 1), is_paid=True),
                make_installment(2, date(2024, 3, 1)),
            ],
        )

    def test_ordered_installments(self):
        assert [i.sequence for i in self.loan.ordered_installments()] == [1, 2, 3]

    def test_unpaid_installments(self):
        assert [i.sequence for i in self.loan.unpaid_installments()] == [2, 3]
        assert self.loan.unpaid_count == 2

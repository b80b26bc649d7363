"""
Pydantic schemas for API requests and response serializers
"""

from decimal import Decimal
from datetime import date
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator

from ..models import (
    ALLOWED_INSTALLMENT_COUNTS, MAX_INTEREST_RATE, MIN_INTEREST_RATE,
    Customer, Loan, LoanInstallment, PaymentResult
)
from ..money import format_money, format_rate


# Customer schemas
class CreateCustomerRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    surname: str = Field(..., min_length=2, max_length=50)
    credit_limit: Decimal = Field(..., gt=0, max_digits=19, decimal_places=2)


class UpdateCreditLimitRequest(BaseModel):
    credit_limit: Decimal = Field(..., gt=0, max_digits=19, decimal_places=2)


# Loan schemas
class CreateLoanRequest(BaseModel):
    customer_id: str
    loan_amount: Decimal = Field(..., gt=0, max_digits=19, decimal_places=2,
                                 description="Principal before interest")
    number_of_installment: int = Field(..., description="Number of installments (6, 9, 12 or 24)")
    interest_rate: Decimal = Field(..., ge=MIN_INTEREST_RATE, le=MAX_INTEREST_RATE,
                                   max_digits=4, decimal_places=3,
                                   description="Flat interest rate between 0.1 and 0.5")

    @field_validator("number_of_installment")
    @classmethod
    def check_installment_count(cls, value: int) -> int:
        if value not in ALLOWED_INSTALLMENT_COUNTS:
            raise ValueError("Number of installments must be 6, 9, 12, or 24")
        return value


class PaymentRequest(BaseModel):
    payment_amount: Decimal = Field(..., gt=0, max_digits=19, decimal_places=2)
    payment_date: Optional[date] = Field(None, description="Defaults to today; cannot be in the future")

    @field_validator("payment_date")
    @classmethod
    def check_not_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("Payment date cannot be in the future")
        return value


# Response serializers
def customer_response(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "name": customer.name,
        "surname": customer.surname,
        "credit_limit": format_money(customer.credit_limit),
        "used_credit_limit": format_money(customer.used_credit_limit),
        "available_credit": format_money(customer.available_credit),
    }


def installment_response(installment: LoanInstallment, as_of: date) -> Dict[str, Any]:
    status = installment.status(as_of)
    return {
        "id": installment.id,
        "loan_id": installment.loan_id,
        "amount": format_money(installment.amount),
        "paid_amount": format_money(installment.paid_amount),
        "remaining_amount": format_money(installment.remaining_amount),
        "due_date": installment.due_date.isoformat(),
        "payment_date": installment.payment_date.isoformat() if installment.payment_date else None,
        "is_paid": installment.is_paid,
        "status": status.value,
        "status_description": status.description,
    }


def loan_response(loan: Loan, as_of: date, include_installments: bool = True) -> Dict[str, Any]:
    result = {
        "id": loan.id,
        "customer_id": loan.customer_id,
        "loan_amount": format_money(loan.loan_amount),
        "number_of_installment": loan.number_of_installment,
        "interest_rate": format_rate(loan.interest_rate),
        "create_date": loan.create_date.isoformat(),
        "is_paid": loan.is_paid,
    }
    if include_installments:
        result["installments"] = [
            installment_response(i, as_of) for i in loan.ordered_installments()
        ]
    return result


def payment_response(payment: PaymentResult) -> Dict[str, Any]:
    return {
        "installments_paid_count": payment.installments_paid_count,
        "total_amount_spent": format_money(payment.total_amount_spent),
        "is_loan_complete": payment.is_loan_complete,
        "payment_details": [
            {
                "installment_id": detail.installment_id,
                "original_amount": format_money(detail.original_amount),
                "effective_amount": format_money(detail.effective_amount),
                "discount": format_money(detail.discount),
                "penalty": format_money(detail.penalty),
                "payment_type": detail.payment_type.value,
            }
            for detail in payment.payment_details
        ],
    }

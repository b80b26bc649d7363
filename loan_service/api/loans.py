"""
Loan endpoints
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from .dependencies import LendingSystem, get_lending_system
from .schemas import (
    CreateLoanRequest, PaymentRequest,
    installment_response, loan_response, payment_response
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_loan(
    request: CreateLoanRequest,
    system: LendingSystem = Depends(get_lending_system)
):
    """Issue a new loan against the customer's credit line"""
    loan = system.loan_manager.create_loan(
        customer_id=request.customer_id,
        principal=request.loan_amount,
        number_of_installments=request.number_of_installment,
        interest_rate=request.interest_rate
    )
    return loan_response(loan, as_of=loan.create_date)


@router.get("/customer/{customer_id}")
async def list_customer_loans(
    customer_id: str,
    is_paid: Optional[bool] = Query(None),
    number_of_installments: Optional[int] = Query(None),
    system: LendingSystem = Depends(get_lending_system)
):
    """List a customer's loans, optionally filtered by paid state or installment count"""
    loans = system.loan_manager.get_customer_loans(
        customer_id, is_paid=is_paid, number_of_installments=number_of_installments
    )
    today = date.today()
    return {
        "customer_id": customer_id,
        "loans": [loan_response(loan, today, include_installments=False) for loan in loans],
        "count": len(loans)
    }


@router.get("/{loan_id}")
async def get_loan(
    loan_id: str,
    system: LendingSystem = Depends(get_lending_system)
):
    loan = system.loan_manager.get_loan(loan_id)
    return loan_response(loan, date.today())


@router.get("/{loan_id}/installments")
async def list_installments(
    loan_id: str,
    as_of: Optional[date] = Query(None, description="Reference date for overdue status"),
    system: LendingSystem = Depends(get_lending_system)
):
    installments = system.loan_manager.get_loan_installments(loan_id)
    reference = as_of or date.today()
    return {
        "loan_id": loan_id,
        "installments": [installment_response(i, reference) for i in installments],
        "count": len(installments)
    }


@router.get("/{loan_id}/payable-installments")
async def list_payable_installments(
    loan_id: str,
    payment_date: Optional[date] = Query(None),
    system: LendingSystem = Depends(get_lending_system)
):
    """Unpaid installments a payment on payment_date could settle"""
    reference = payment_date or date.today()
    installments = system.loan_manager.get_payable_installments(loan_id, reference)
    return {
        "loan_id": loan_id,
        "payment_date": reference.isoformat(),
        "installments": [installment_response(i, reference) for i in installments],
        "count": len(installments)
    }


@router.post("/{loan_id}/payments")
async def pay_loan(
    loan_id: str,
    request: PaymentRequest,
    system: LendingSystem = Depends(get_lending_system)
):
    """Pay as many eligible installments as the amount covers, oldest first"""
    result = system.loan_manager.process_payment(
        loan_id=loan_id,
        payment_amount=request.payment_amount,
        payment_date=request.payment_date
    )
    return payment_response(result)

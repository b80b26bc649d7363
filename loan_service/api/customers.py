"""
Customer endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import LendingSystem, get_lending_system
from .schemas import CreateCustomerRequest, UpdateCreditLimitRequest, customer_response


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: CreateCustomerRequest,
    system: LendingSystem = Depends(get_lending_system)
):
    """Register a customer with a credit line"""
    customer = system.customer_manager.create_customer(
        name=request.name,
        surname=request.surname,
        credit_limit=request.credit_limit
    )
    return customer_response(customer)


@router.get("/{customer_id}")
async def get_customer(
    customer_id: str,
    system: LendingSystem = Depends(get_lending_system)
):
    customer = system.customer_manager.get_customer(customer_id)
    return customer_response(customer)


@router.put("/{customer_id}/credit-limit")
async def update_credit_limit(
    customer_id: str,
    request: UpdateCreditLimitRequest,
    system: LendingSystem = Depends(get_lending_system)
):
    """Change a customer's credit limit; it may not drop below used credit"""
    customer = system.customer_manager.update_credit_limit(customer_id, request.credit_limit)
    return customer_response(customer)

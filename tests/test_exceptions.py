"""
Tests for domain error codes and messages
"""

import pytest
from decimal import Decimal

from loan_service.exceptions import (
    LoanServiceError, CustomerNotFoundError, LoanNotFoundError,
    InvalidInstallmentCountError, InvalidLoanRequestError, InsufficientCreditError,
    InvalidLimitError, PaymentError, InvalidPaymentAmountError, InvalidPaymentDateError,
    LoanAlreadyPaidError, NoInstallmentsAvailableError, InsufficientPaymentAmountError
)


class TestErrorCodes:

    @pytest.mark.parametrize("error, code, status", [
        (CustomerNotFoundError("c1"), "CUSTOMER_NOT_FOUND", 404),
        (LoanNotFoundError("l1"), "LOAN_NOT_FOUND", 404),
        (InvalidInstallmentCountError(7), "INVALID_INSTALLMENT_COUNT", 400),
        (InvalidLoanRequestError("bad"), "INVALID_LOAN_REQUEST", 400),
        (InsufficientCreditError(Decimal('1'), Decimal('2')), "INSUFFICIENT_CREDIT", 400),
        (InvalidLimitError("bad"), "INVALID_CREDIT_LIMIT", 400),
        (InvalidPaymentAmountError(), "INVALID_PAYMENT_AMOUNT", 400),
        (InvalidPaymentDateError(), "INVALID_PAYMENT_DATE", 400),
        (LoanAlreadyPaidError(), "LOAN_ALREADY_PAID", 400),
        (NoInstallmentsAvailableError(), "NO_INSTALLMENTS_AVAILABLE", 400),
        (InsufficientPaymentAmountError(), "INSUFFICIENT_PAYMENT_AMOUNT", 400),
    ])
    def test_code_and_status(self, error, code, status):
        assert isinstance(error, LoanServiceError)
        assert isinstance(error, ValueError)
        assert error.error_code == code
        assert error.status_code == status
        assert str(error) == error.message

    def test_payment_errors_share_base(self):
        assert issubclass(InsufficientPaymentAmountError, PaymentError)
        assert not issubclass(InsufficientCreditError, PaymentError)

    def test_messages(self):
        assert InvalidInstallmentCountError(7).message == (
            "Invalid number of installments: 7. Must be one of 6, 9, 12, 24"
        )
        assert CustomerNotFoundError("c1").message == "Customer with ID c1 not found"

"""
Domain Error Module

Every error the loan service raises for a client-caused condition. Each error
carries a stable error code and the HTTP status the API layer answers with.
None of them are retried; they describe invalid requests.
"""

from decimal import Decimal
from typing import Iterable


class LoanServiceError(ValueError):
    """Base exception for all loan service domain errors"""

    error_code = "BUSINESS_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CustomerNotFoundError(LoanServiceError):
    """Raised when a referenced customer does not exist"""

    error_code = "CUSTOMER_NOT_FOUND"
    status_code = 404

    def __init__(self, customer_id: str):
        super().__init__(f"Customer with ID {customer_id} not found")
        self.customer_id = customer_id


class LoanNotFoundError(LoanServiceError):
    """Raised when a referenced loan does not exist"""

    error_code = "LOAN_NOT_FOUND"
    status_code = 404

    def __init__(self, loan_id: str):
        super().__init__(f"Loan with ID {loan_id} not found")
        self.loan_id = loan_id


class InvalidInstallmentCountError(LoanServiceError):
    """Raised when the installment count is outside the allowed set"""

    error_code = "INVALID_INSTALLMENT_COUNT"

    def __init__(self, number_of_installments, allowed: Iterable[int] = (6, 9, 12, 24)):
        allowed_text = ", ".join(str(n) for n in allowed)
        super().__init__(
            f"Invalid number of installments: {number_of_installments}. "
            f"Must be one of {allowed_text}"
        )
        self.number_of_installments = number_of_installments


class InvalidLoanRequestError(LoanServiceError):
    """Raised when the principal or interest rate of a loan request is invalid"""

    error_code = "INVALID_LOAN_REQUEST"


class InsufficientCreditError(LoanServiceError):
    """Raised when the loan total exceeds the customer's available credit"""

    error_code = "INSUFFICIENT_CREDIT"

    def __init__(self, available: Decimal, requested: Decimal):
        super().__init__(
            f"Insufficient credit limit. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


class InvalidLimitError(LoanServiceError):
    """Raised when a credit limit change would leave used credit above the limit"""

    error_code = "INVALID_CREDIT_LIMIT"


class PaymentError(LoanServiceError):
    """Base exception for rejected loan payments"""

    error_code = "PAYMENT_ERROR"


class InvalidPaymentAmountError(PaymentError):
    error_code = "INVALID_PAYMENT_AMOUNT"

    def __init__(self, message: str = "Payment amount must be positive"):
        super().__init__(message)


class InvalidPaymentDateError(PaymentError):
    error_code = "INVALID_PAYMENT_DATE"

    def __init__(self, message: str = "Payment date cannot be in the future"):
        super().__init__(message)


class LoanAlreadyPaidError(PaymentError):
    error_code = "LOAN_ALREADY_PAID"

    def __init__(self, message: str = "Loan is already fully paid"):
        super().__init__(message)


class NoInstallmentsAvailableError(PaymentError):
    error_code = "NO_INSTALLMENTS_AVAILABLE"

    def __init__(self, message: str = "No unpaid installments available within payment window"):
        super().__init__(message)


class InsufficientPaymentAmountError(PaymentError):
    error_code = "INSUFFICIENT_PAYMENT_AMOUNT"

    def __init__(self, message: str = "Payment amount is insufficient to pay any complete installment"):
        super().__init__(message)

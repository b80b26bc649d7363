"""
Loan Module

Service layer for the loan lifecycle: issuing loans against a customer's
credit line, querying loans and installments, and applying payments. Each
mutating operation loads its records, runs the engine and saves the results
inside a single storage unit of work.
"""

from decimal import Decimal
from datetime import date
from typing import List, Optional

from .audit import AuditTrail, AuditEventType
from .dates import payment_window_end
from .exceptions import InvalidInstallmentCountError, LoanNotFoundError, CustomerNotFoundError
from .issuance import LoanIssuer
from .logging_config import get_logger, log_action
from .models import ALLOWED_INSTALLMENT_COUNTS, Loan, LoanInstallment, PaymentResult
from .money import to_decimal
from .payments import PaymentAllocator, PAYMENT_WINDOW_MONTHS
from .repository import LoanRepository

logger = get_logger(__name__)


class LoanManager:
    """
    Manages loans from issuance through payoff
    """

    def __init__(
        self,
        repository: LoanRepository,
        issuer: LoanIssuer,
        allocator: PaymentAllocator,
        audit_trail: AuditTrail
    ):
        self.repository = repository
        self.storage = repository.storage
        self.issuer = issuer
        self.allocator = allocator
        self.audit_trail = audit_trail

    def create_loan(
        self,
        customer_id: str,
        principal: Decimal,
        number_of_installments: int,
        interest_rate: Decimal,
        today: Optional[date] = None
    ) -> Loan:
        """
        Issue a new loan for a customer

        Args:
            customer_id: Borrower customer ID
            principal: Requested amount before interest
            number_of_installments: 6, 9, 12 or 24
            interest_rate: Flat interest rate between 0.1 and 0.5
            today: Issuance date (defaults to today)

        Returns:
            Saved Loan with its installments

        Raises:
            InvalidInstallmentCountError: If the installment count is not allowed
            CustomerNotFoundError: If the customer does not exist
            InvalidLoanRequestError: If principal or rate is out of range
            InsufficientCreditError: If the customer lacks available credit
        """
        if today is None:
            today = date.today()

        if number_of_installments not in ALLOWED_INSTALLMENT_COUNTS:
            raise InvalidInstallmentCountError(number_of_installments, ALLOWED_INSTALLMENT_COUNTS)

        with self.storage.atomic():
            customer = self.repository.load_customer(customer_id)
            loan = self.issuer.issue_loan(
                customer,
                to_decimal(principal),
                number_of_installments,
                to_decimal(interest_rate),
                today
            )

            self.repository.save_loan(loan)
            self.repository.save_installments(loan.installments, loan_id=loan.id)
            self.repository.save_customer(customer)

            self.audit_trail.log_event(
                event_type=AuditEventType.LOAN_CREATED,
                entity_type="loan",
                entity_id=loan.id,
                metadata={
                    "customer_id": customer.id,
                    "loan_amount": loan.loan_amount,
                    "interest_rate": loan.interest_rate,
                    "number_of_installment": loan.number_of_installment,
                    "create_date": loan.create_date,
                }
            )

        log_action(
            logger, "info",
            f"Loan {loan.id} created for customer {customer_id} with total {loan.loan_amount}",
            action="create_loan", resource=loan.id,
            extra={"number_of_installment": loan.number_of_installment,
                   "used_credit_limit": str(customer.used_credit_limit)}
        )
        return loan

    def get_loan(self, loan_id: str) -> Loan:
        """Loan with installments; raises LoanNotFoundError when absent"""
        return self.repository.load_loan(loan_id)

    def get_customer_loans(
        self,
        customer_id: str,
        is_paid: Optional[bool] = None,
        number_of_installments: Optional[int] = None
    ) -> List[Loan]:
        """Loans of a customer without installments, optionally filtered"""
        if not self.repository.customer_exists(customer_id):
            raise CustomerNotFoundError(customer_id)
        return self.repository.find_loans(customer_id, is_paid, number_of_installments)

    def get_loan_installments(self, loan_id: str) -> List[LoanInstallment]:
        if not self.repository.loan_exists(loan_id):
            raise LoanNotFoundError(loan_id)
        return self.repository.find_installments(loan_id)

    def get_payable_installments(self, loan_id: str, payment_date: Optional[date] = None) -> List[LoanInstallment]:
        """Unpaid installments a payment made on payment_date could reach"""
        if payment_date is None:
            payment_date = date.today()
        if not self.repository.loan_exists(loan_id):
            raise LoanNotFoundError(loan_id)
        return self.repository.find_unpaid_installments_due_by(
            loan_id, payment_window_end(payment_date, PAYMENT_WINDOW_MONTHS)
        )

    def process_payment(
        self,
        loan_id: str,
        payment_amount: Decimal,
        payment_date: Optional[date] = None,
        today: Optional[date] = None
    ) -> PaymentResult:
        """
        Apply a payment to a loan's installments

        Args:
            loan_id: Loan ID
            payment_amount: Funds available for the payment
            payment_date: Date of payment (defaults to today)
            today: Reference date for rejecting future payments (defaults to today)

        Returns:
            PaymentResult with one detail per settled installment

        Raises:
            InvalidPaymentAmountError, InvalidPaymentDateError, LoanNotFoundError,
            LoanAlreadyPaidError, NoInstallmentsAvailableError,
            InsufficientPaymentAmountError
        """
        if today is None:
            today = date.today()
        if payment_date is None:
            payment_date = today
        payment_amount = to_decimal(payment_amount)

        log_action(
            logger, "info",
            f"Processing payment for loan {loan_id} - amount: {payment_amount}, date: {payment_date}",
            action="process_payment", resource=loan_id
        )
        self.allocator.validate_request(payment_amount, payment_date, today)

        with self.storage.atomic():
            loan = self.repository.load_loan(loan_id)
            customer = self.repository.load_customer(loan.customer_id)

            result = self.allocator.apply_payment(loan, payment_amount, payment_date, today, customer)

            paid_ids = {detail.installment_id for detail in result.payment_details}
            paid_installments = [i for i in loan.installments if i.id in paid_ids]
            self.repository.save_installments(paid_installments)

            for detail in result.payment_details:
                self.audit_trail.log_event(
                    event_type=AuditEventType.INSTALLMENT_PAID,
                    entity_type="installment",
                    entity_id=detail.installment_id,
                    metadata={
                        "loan_id": loan.id,
                        "original_amount": detail.original_amount,
                        "effective_amount": detail.effective_amount,
                        "payment_type": detail.payment_type,
                        "payment_date": payment_date,
                    }
                )
                logger.info(
                    "Installment %s paid fully. Effective amount: %s",
                    detail.installment_id, detail.effective_amount
                )

            self.audit_trail.log_event(
                event_type=AuditEventType.LOAN_PAYMENT_APPLIED,
                entity_type="loan",
                entity_id=loan.id,
                metadata={
                    "payment_amount": payment_amount,
                    "total_amount_spent": result.total_amount_spent,
                    "installments_paid_count": result.installments_paid_count,
                }
            )

            if result.is_loan_complete:
                self.repository.save_loan(loan)
                self.repository.save_customer(customer)
                self.audit_trail.log_event(
                    event_type=AuditEventType.LOAN_PAID_OFF,
                    entity_type="loan",
                    entity_id=loan.id,
                    metadata={"customer_id": customer.id, "released_credit": loan.loan_amount}
                )

        if result.is_loan_complete:
            log_action(
                logger, "info", f"Loan {loan_id} is now fully paid",
                action="loan_paid_off", resource=loan_id,
                extra={"released_credit": str(loan.loan_amount)}
            )
        return result

    def owner_of(self, loan_id: str) -> str:
        """Customer ID owning the loan; raises LoanNotFoundError when absent"""
        return self.repository.load_loan(loan_id, with_installments=False).customer_id

    def is_loan_owned_by_customer(self, loan_id: str, customer_id: str) -> bool:
        try:
            return self.owner_of(loan_id) == customer_id
        except LoanNotFoundError:
            return False

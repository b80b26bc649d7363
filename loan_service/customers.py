"""
Customer Management Module

Creates customers, looks them up and changes their credit limits. Credit
limit arithmetic goes through the CustomerLedger.
"""

from decimal import Decimal

from .audit import AuditTrail, AuditEventType
from .ledger import CustomerLedger
from .logging_config import get_logger, log_action
from .models import Customer
from .money import round_money, to_decimal
from .repository import LoanRepository

logger = get_logger(__name__)


class CustomerManager:
    """
    Manages customer records and their credit limits
    """

    def __init__(self, repository: LoanRepository, ledger: CustomerLedger, audit_trail: AuditTrail):
        self.repository = repository
        self.storage = repository.storage
        self.ledger = ledger
        self.audit_trail = audit_trail

    def create_customer(self, name: str, surname: str, credit_limit: Decimal) -> Customer:
        """
        Create a customer with an unused credit line

        Args:
            name: First name (2-50 characters)
            surname: Last name (2-50 characters)
            credit_limit: Positive credit limit

        Returns:
            Saved Customer

        Raises:
            ValueError: If the name or limit fails validation
        """
        customer = Customer.new(name, surname, round_money(to_decimal(credit_limit)))

        with self.storage.atomic():
            self.repository.save_customer(customer)
            self.audit_trail.log_event(
                event_type=AuditEventType.CUSTOMER_CREATED,
                entity_type="customer",
                entity_id=customer.id,
                metadata={"full_name": customer.full_name, "credit_limit": customer.credit_limit}
            )

        log_action(
            logger, "info", f"Customer {customer.id} created with credit limit {customer.credit_limit}",
            action="create_customer", resource=customer.id
        )
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        """Raises CustomerNotFoundError when absent"""
        return self.repository.load_customer(customer_id)

    def update_credit_limit(self, customer_id: str, new_credit_limit: Decimal) -> Customer:
        """
        Change a customer's credit limit

        Raises:
            CustomerNotFoundError: If the customer does not exist
            InvalidLimitError: If the new limit is below the used credit
        """
        with self.storage.atomic():
            customer = self.repository.load_customer(customer_id)
            previous_limit = customer.credit_limit
            self.ledger.set_credit_limit(customer, to_decimal(new_credit_limit))
            self.repository.save_customer(customer)
            self.audit_trail.log_event(
                event_type=AuditEventType.CREDIT_LIMIT_CHANGED,
                entity_type="customer",
                entity_id=customer.id,
                metadata={"previous_limit": previous_limit, "new_limit": customer.credit_limit}
            )

        log_action(
            logger, "info", f"Credit limit for customer {customer_id} changed to {customer.credit_limit}",
            action="update_credit_limit", resource=customer_id,
            extra={"previous_limit": str(previous_limit)}
        )
        return customer

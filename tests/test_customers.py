"""
Tests for customer management and sample data
"""

import pytest
from decimal import Decimal

from loan_service.audit import AuditTrail, AuditEventType
from loan_service.customers import CustomerManager
from loan_service.exceptions import CustomerNotFoundError, InvalidLimitError
from loan_service.ledger import CustomerLedger
from loan_service.repository import LoanRepository
from loan_service.seed import SAMPLE_CUSTOMERS, initialize_sample_customers
from loan_service.storage import InMemoryStorage


class TestCustomerManager:
    """Test customer operations"""

    def setup_method(self):
        """Set up test fixtures"""
        self.storage = InMemoryStorage()
        self.audit_trail = AuditTrail(self.storage)
        self.repository = LoanRepository(self.storage)
        self.customer_manager = CustomerManager(self.repository, CustomerLedger(), self.audit_trail)

    def test_create_customer(self):
        customer = self.customer_manager.create_customer("Jane", "Smith", Decimal('75000'))

        assert customer.id is not None
        assert customer.used_credit_limit == Decimal('0.00')
        assert self.customer_manager.get_customer(customer.id).full_name == "Jane Smith"

        events = self.audit_trail.get_events_for_entity("customer", customer.id)
        assert [e.event_type for e in events] == [AuditEventType.CUSTOMER_CREATED]

    def test_create_customer_invalid(self):
        with pytest.raises(ValueError):
            self.customer_manager.create_customer("J", "Smith", Decimal('1000'))
        assert self.repository.count_customers() == 0

    def test_get_missing_customer(self):
        with pytest.raises(CustomerNotFoundError):
            self.customer_manager.get_customer("missing")

    def test_update_credit_limit(self):
        customer = self.customer_manager.create_customer("Jane", "Smith", Decimal('1000'))

        updated = self.customer_manager.update_credit_limit(customer.id, Decimal('2500.00'))

        assert updated.credit_limit == Decimal('2500.00')
        assert self.repository.load_customer(customer.id).credit_limit == Decimal('2500.00')
        event = self.audit_trail.get_events_for_entity("customer", customer.id)[-1]
        assert event.event_type == AuditEventType.CREDIT_LIMIT_CHANGED
        assert event.metadata == {"previous_limit": "1000.00", "new_limit": "2500.00"}

    def test_update_credit_limit_below_used(self):
        customer = self.customer_manager.create_customer("Jane", "Smith", Decimal('1000'))
        customer.used_credit_limit = Decimal('800.00')
        self.repository.save_customer(customer)

        with pytest.raises(InvalidLimitError):
            self.customer_manager.update_credit_limit(customer.id, Decimal('799.99'))

        assert self.repository.load_customer(customer.id).credit_limit == Decimal('1000.00')
        assert len(self.audit_trail.get_all_events()) == 1


class TestSampleCustomers:

    def setup_method(self):
        storage = InMemoryStorage()
        self.repository = LoanRepository(storage)
        self.customer_manager = CustomerManager(self.repository, CustomerLedger(), AuditTrail(storage))

    def test_seed_empty_store(self):
        created = initialize_sample_customers(self.customer_manager)

        assert len(created) == len(SAMPLE_CUSTOMERS)
        assert sorted(c.credit_limit for c in created) == [
            Decimal('30000.00'), Decimal('50000.00'), Decimal('75000.00')
        ]

    def test_seed_skipped_when_customers_exist(self):
        self.customer_manager.create_customer("Existing", "Customer", Decimal('100'))

        assert initialize_sample_customers(self.customer_manager) == []
        assert self.repository.count_customers() == 1

"""
Service wiring and FastAPI dependencies
"""

from typing import Optional

from ..audit import AuditTrail
from ..config import LoanServiceConfig, get_config
from ..customers import CustomerManager
from ..issuance import LoanIssuer
from ..ledger import CustomerLedger
from ..loans import LoanManager
from ..payments import PaymentAllocator
from ..repository import LoanRepository
from ..schedule import InstallmentScheduler
from ..seed import initialize_sample_customers
from ..storage import InMemoryStorage, SQLiteStorage, StorageInterface


class LendingSystem:
    """Loan service with all components initialized"""

    def __init__(self, storage: Optional[StorageInterface] = None, enable_audit_logging: bool = True):
        self.storage = storage if storage is not None else InMemoryStorage()

        self.audit_trail = AuditTrail(self.storage, enabled=enable_audit_logging)
        self.repository = LoanRepository(self.storage)
        self.ledger = CustomerLedger()
        self.scheduler = InstallmentScheduler()
        self.issuer = LoanIssuer(self.ledger, self.scheduler)
        self.allocator = PaymentAllocator(self.ledger)

        self.customer_manager = CustomerManager(self.repository, self.ledger, self.audit_trail)
        self.loan_manager = LoanManager(
            self.repository, self.issuer, self.allocator, self.audit_trail
        )

    @classmethod
    def from_config(cls, config: LoanServiceConfig) -> 'LendingSystem':
        if config.use_sqlite:
            storage = SQLiteStorage(config.database_path)
        else:
            storage = InMemoryStorage()

        system = cls(storage, enable_audit_logging=config.enable_audit_logging)
        if config.seed_sample_customers:
            initialize_sample_customers(system.customer_manager)
        return system


# Global lending system instance, created on first use
_lending_system: Optional[LendingSystem] = None


def get_lending_system() -> LendingSystem:
    global _lending_system
    if _lending_system is None:
        _lending_system = LendingSystem.from_config(get_config())
    return _lending_system

"""
Loan Repository Module

Persistence boundary of the loan engine. Maps Customer, Loan and
LoanInstallment records to storage documents and answers the queries the
engine and its services need.
"""

from datetime import datetime, date
from typing import Dict, List, Optional, Any
import uuid

from .exceptions import CustomerNotFoundError, LoanNotFoundError
from .models import Customer, Loan, LoanInstallment
from .money import decimal_from_string
from .storage import StorageInterface


class LoanRepository:
    """Loads and saves customers, loans and installments"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.customers_table = "customers"
        self.loans_table = "loans"
        self.installments_table = "loan_installments"

    # Customers

    def load_customer(self, customer_id: str) -> Customer:
        data = self.storage.load(self.customers_table, customer_id)
        if not data:
            raise CustomerNotFoundError(customer_id)
        return self._customer_from_dict(data)

    def customer_exists(self, customer_id: str) -> bool:
        return self.storage.exists(self.customers_table, customer_id)

    def save_customer(self, customer: Customer) -> Customer:
        if customer.id is None:
            customer.id = str(uuid.uuid4())
        self.storage.save(self.customers_table, customer.id, self._customer_to_dict(customer))
        return customer

    def count_customers(self) -> int:
        return self.storage.count(self.customers_table)

    # Loans

    def save_loan(self, loan: Loan) -> Loan:
        """Save loan header; assigns identity on first save"""
        if loan.id is None:
            loan.id = str(uuid.uuid4())
        self.storage.save(self.loans_table, loan.id, self._loan_to_dict(loan))
        return loan

    def load_loan(self, loan_id: str, with_installments: bool = True) -> Loan:
        data = self.storage.load(self.loans_table, loan_id)
        if not data:
            raise LoanNotFoundError(loan_id)
        loan = self._loan_from_dict(data)
        if with_installments:
            loan.installments = self.find_installments(loan.id)
        return loan

    def loan_exists(self, loan_id: str) -> bool:
        return self.storage.exists(self.loans_table, loan_id)

    def find_loans(
        self,
        customer_id: str,
        is_paid: Optional[bool] = None,
        number_of_installments: Optional[int] = None
    ) -> List[Loan]:
        """Loans of a customer, optionally filtered, oldest first"""
        filters: Dict[str, Any] = {"customer_id": customer_id}
        if is_paid is not None:
            filters["is_paid"] = is_paid
        if number_of_installments is not None:
            filters["number_of_installment"] = number_of_installments
        return [self._loan_from_dict(data) for data in self.storage.find(self.loans_table, filters)]

    # Installments

    def save_installments(self, installments: List[LoanInstallment], loan_id: Optional[str] = None) -> None:
        """Save installments; assigns identities and stamps the owning loan id"""
        for installment in installments:
            if loan_id is not None:
                installment.loan_id = loan_id
            if installment.loan_id is None:
                raise ValueError("Installment must belong to a saved loan")
            if installment.id is None:
                installment.id = str(uuid.uuid4())
            self.storage.save(self.installments_table, installment.id, self._installment_to_dict(installment))

    def find_installments(self, loan_id: str) -> List[LoanInstallment]:
        """All installments of a loan in due-date order"""
        installments = [
            self._installment_from_dict(data)
            for data in self.storage.find(self.installments_table, {"loan_id": loan_id})
        ]
        installments.sort(key=lambda i: (i.due_date, i.sequence))
        return installments

    def find_unpaid_installments_due_by(self, loan_id: str, max_due_date: date) -> List[LoanInstallment]:
        return [
            i for i in self.find_installments(loan_id)
            if not i.is_paid and i.due_date <= max_due_date
        ]

    def count_unpaid_installments(self, loan_id: str) -> int:
        return len(self.storage.find(self.installments_table, {"loan_id": loan_id, "is_paid": False}))

    # Serialization

    def _customer_to_dict(self, customer: Customer) -> Dict[str, Any]:
        return {
            'id': customer.id,
            'created_at': customer.created_at.isoformat(),
            'updated_at': customer.updated_at.isoformat(),
            'name': customer.name,
            'surname': customer.surname,
            'credit_limit': str(customer.credit_limit),
            'used_credit_limit': str(customer.used_credit_limit),
        }

    def _customer_from_dict(self, data: Dict[str, Any]) -> Customer:
        return Customer(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            name=data['name'],
            surname=data['surname'],
            credit_limit=decimal_from_string(data['credit_limit'], 2),
            used_credit_limit=decimal_from_string(data['used_credit_limit'], 2),
        )

    def _loan_to_dict(self, loan: Loan) -> Dict[str, Any]:
        return {
            'id': loan.id,
            'created_at': loan.created_at.isoformat(),
            'updated_at': loan.updated_at.isoformat(),
            'customer_id': loan.customer_id,
            'loan_amount': str(loan.loan_amount),
            'number_of_installment': loan.number_of_installment,
            'interest_rate': str(loan.interest_rate),
            'create_date': loan.create_date.isoformat(),
            'is_paid': loan.is_paid,
        }

    def _loan_from_dict(self, data: Dict[str, Any]) -> Loan:
        return Loan(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            customer_id=data['customer_id'],
            loan_amount=decimal_from_string(data['loan_amount'], 2),
            number_of_installment=data['number_of_installment'],
            interest_rate=decimal_from_string(data['interest_rate'], 3),
            create_date=date.fromisoformat(data['create_date']),
            is_paid=data['is_paid'],
        )

    def _installment_to_dict(self, installment: LoanInstallment) -> Dict[str, Any]:
        return {
            'id': installment.id,
            'created_at': installment.created_at.isoformat(),
            'updated_at': installment.updated_at.isoformat(),
            'loan_id': installment.loan_id,
            'sequence': installment.sequence,
            'amount': str(installment.amount),
            'paid_amount': str(installment.paid_amount),
            'due_date': installment.due_date.isoformat(),
            'payment_date': installment.payment_date.isoformat() if installment.payment_date else None,
            'is_paid': installment.is_paid,
        }

    def _installment_from_dict(self, data: Dict[str, Any]) -> LoanInstallment:
        payment_date = data.get('payment_date')
        return LoanInstallment(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            loan_id=data['loan_id'],
            sequence=data['sequence'],
            amount=decimal_from_string(data['amount'], 2),
            due_date=date.fromisoformat(data['due_date']),
            paid_amount=decimal_from_string(data['paid_amount'], 2),
            payment_date=date.fromisoformat(payment_date) if payment_date else None,
            is_paid=data['is_paid'],
        )

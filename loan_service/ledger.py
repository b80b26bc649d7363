"""
Customer Ledger Module

Single mutation entry point for a customer's credit line: availability
checks, debits on loan issuance, credit release on loan payoff and credit
limit changes. Persistence is the caller's responsibility.
"""

from decimal import Decimal
from typing import Optional

from .exceptions import InvalidLimitError
from .models import Customer
from .money import ZERO, round_money, money_or_zero


class CustomerLedger:
    """Tracks used and available credit on Customer records"""

    def available_credit(self, customer: Customer) -> Decimal:
        """Credit limit minus used credit"""
        return customer.credit_limit - money_or_zero(customer.used_credit_limit)

    def can_extend(self, customer: Customer, amount: Decimal) -> bool:
        """True when the customer has at least ``amount`` of unused credit"""
        return self.available_credit(customer) >= amount

    def debit(self, customer: Customer, amount: Decimal) -> None:
        """
        Consume credit. No upper bound is enforced here; callers check
        can_extend first.
        """
        customer.used_credit_limit = round_money(
            money_or_zero(customer.used_credit_limit) + amount
        )
        customer.touch()

    def credit(self, customer: Customer, amount: Optional[Decimal]) -> None:
        """Release credit, treating a missing amount as zero"""
        customer.used_credit_limit = round_money(
            money_or_zero(customer.used_credit_limit) - money_or_zero(amount)
        )
        customer.touch()

    def set_credit_limit(self, customer: Customer, new_limit: Decimal) -> None:
        """
        Change the credit limit

        Raises:
            InvalidLimitError: If the new limit is not positive or is below
                the credit already in use
        """
        new_limit = round_money(new_limit)
        if new_limit <= ZERO:
            raise InvalidLimitError("Credit limit must be positive")
        if new_limit < money_or_zero(customer.used_credit_limit):
            raise InvalidLimitError(
                f"New credit limit {new_limit} cannot be less than used credit limit "
                f"{customer.used_credit_limit}"
            )
        customer.credit_limit = new_limit
        customer.touch()

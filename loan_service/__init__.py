"""
Loan Service

Customer credit lines, fixed-schedule installment loans and installment
payments with early-payment discounts and late-payment penalties. All
money arithmetic uses Decimal and every state change is recorded in a
hash-chained audit trail.
"""

__version__ = "1.0.0"

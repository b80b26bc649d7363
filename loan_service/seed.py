"""
Sample data for local runs: three customers with unused credit lines.
"""

from decimal import Decimal
from typing import List

from .customers import CustomerManager
from .logging_config import get_logger
from .models import Customer

logger = get_logger(__name__)

SAMPLE_CUSTOMERS = [
    ("Muhammed Hakan", "Celik", Decimal('50000.00')),
    ("Jane", "Smith", Decimal('75000.00')),
    ("Bob", "Johnson", Decimal('30000.00')),
]


def initialize_sample_customers(customer_manager: CustomerManager) -> List[Customer]:
    """Create the sample customers unless any customer already exists"""
    if customer_manager.repository.count_customers() > 0:
        return []

    logger.info("Initializing sample customers...")
    created = [
        customer_manager.create_customer(name, surname, credit_limit)
        for name, surname, credit_limit in SAMPLE_CUSTOMERS
    ]
    logger.info("Sample customers created successfully")
    return created

"""
External services - customer directory clients.
"""

from dealroom.infrastructure.external.http_customer_directory import HttpCustomerDirectory
from dealroom.infrastructure.external.in_memory_customer_directory import (
    InMemoryCustomerDirectory,
)

__all__ = [
    "HttpCustomerDirectory",
    "InMemoryCustomerDirectory",
]

"""In-memory customer directory, used when CUSTOMER_DIRECTORY_URL is not set."""

from typing import Iterable

from dealroom.domain.exceptions import NotFoundError
from dealroom.domain.ports.customer_directory import CustomerDirectory, CustomerProfile


class InMemoryCustomerDirectory(CustomerDirectory):
    def __init__(self, customers: Iterable[CustomerProfile] = ()):
        self._customers = {c.customer_id: c for c in customers}

    def add(self, customer: CustomerProfile) -> None:
        self._customers[customer.customer_id] = customer

    async def resolve(self, customer_id: str) -> CustomerProfile:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

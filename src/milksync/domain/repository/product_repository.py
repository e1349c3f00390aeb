"""Abstract repository for Product lookups.

Defined in the domain layer so the domain never depends on
infrastructure. The HTTP implementation lives in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from milksync.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def list_by_company(self, company_name: str) -> list[Product]:
        """Return the products a distributor of *company_name* can order."""

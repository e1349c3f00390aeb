"""Product entity (read-only to the order desk).

Products are owned by the catalog screens of the backend. The order desk
only reads their pricing fields; any of them may be missing on older
records, which is why they are all optional here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    """A catalog product as populated into an order line.

    ``cost_per_tub`` is optional: older products only carry
    ``cost_per_packet`` and ``packets_per_tub``. See
    ``milksync.domain.service.pricing`` for how missing prices resolve.
    """

    id: str
    name: str
    company: str = ""
    cost_per_packet: Decimal | None = None
    packets_per_tub: int | None = None
    cost_per_tub: Decimal | None = None
    unit: str = ""
    pack_size: Decimal | None = None

    @staticmethod
    def reference(product_id: str) -> Product:
        """A bare product known only by id (unpopulated order line)."""
        return Product(id=product_id, name="Unknown Product")

    @property
    def label(self) -> str:
        """Name plus pack size, e.g. ``Curd 500ml``."""
        if self.pack_size and self.unit:
            return f"{self.name} {self.pack_size.normalize():f}{self.unit}"
        return self.name

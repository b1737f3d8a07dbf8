from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from coffeecore.errors import ValidationFailed

# Product line status
PRESENT = "present"
FUTURE = "future"
STATUSES = (PRESENT, FUTURE)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    status: str
    summary: str
    # Presentation badge ("Core", "R&D"); not used by the interest flow
    tag: str = ""

    def __post_init__(self):
        if self.status not in STATUSES:
            raise ValueError(f"unknown product status: {self.status!r}")

    @property
    def is_future(self) -> bool:
        return self.status == FUTURE


class Catalog:
    """
    Read-only product catalog, loaded once per process and shared by every
    page session. Ids are unique; order is the display order.
    """

    def __init__(self, products: Iterable[Product]):
        items: Tuple[Product, ...] = tuple(products)
        by_id: Dict[str, Product] = {}
        for p in items:
            if p.id in by_id:
                raise ValueError(f"duplicate product id: {p.id!r}")
            by_id[p.id] = p
        self._items = items
        self._by_id = by_id

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def require(self, product_id: str) -> Product:
        p = self._by_id.get(product_id)
        if p is None:
            raise ValidationFailed("productId", f"unknown product {product_id!r}")
        return p

    def list(self, status: Optional[str] = None) -> List[Product]:
        if status is None:
            return list(self._items)
        return [p for p in self._items if p.status == status]

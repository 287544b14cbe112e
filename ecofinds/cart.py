"""In-process cart state.

The cart is never persisted: it lives for one client session (or, at
checkout, for one request) and is discarded afterwards.
"""
import uuid
from dataclasses import dataclass, field
from typing import Optional


def _local_id():
    return f'local-{uuid.uuid4().hex}'


@dataclass
class CartItem:
    id: str
    product_id: str
    quantity: int
    unit_price_cents: int = 0
    product: Optional[dict] = field(default=None, repr=False)

    @property
    def subtotal_cents(self):
        return self.unit_price_cents * self.quantity

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'unit_price_cents': self.unit_price_cents,
            'subtotal_cents': self.subtotal_cents,
            'product': self.product,
        }


class CartStore:
    def __init__(self):
        self._items = {}

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    @property
    def items(self):
        return list(self._items.values())

    @property
    def is_empty(self):
        return not self._items

    @property
    def total_cents(self):
        return sum(item.subtotal_cents for item in self._items.values())

    def get(self, item_id):
        return self._items.get(item_id)

    def find_by_product(self, product_ref):
        for item in self._items.values():
            if item.product_id == product_ref:
                return item
        return None

    def add_item(self, product_ref, quantity, unit_price_cents=0, product=None):
        # no upper bound here; callers cap the requested quantity
        existing = self.find_by_product(product_ref)
        if existing:
            existing.quantity += quantity
            return existing
        item = CartItem(
            id=_local_id(),
            product_id=product_ref,
            quantity=quantity,
            unit_price_cents=unit_price_cents,
            product=product,
        )
        self._items[item.id] = item
        return item

    def update_quantity(self, item_id, new_quantity):
        if new_quantity <= 0:
            self.remove_item(item_id)
            return None
        item = self._items.get(item_id)
        if item:
            item.quantity = new_quantity
        return item

    def remove_item(self, item_id):
        self._items.pop(item_id, None)

    def clear_cart(self):
        self._items.clear()

    def to_dict(self):
        return {'items': [item.to_dict() for item in self.items], 'total_cents': self.total_cents}

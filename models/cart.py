"""
Quotation cart: rentable items bound to one candidate event date.

The Cart is a plain value object. It owns the business rules (quantity
clamping against the known availability snapshot, totals) and knows nothing
about storage or availability lookups: callers resolve availability with
models.stock and persist with utils.cart_storage after each mutation.

Mutations return a CartResult instead of prompting, so the presentation layer
decides how to show "only N available".
"""

from dataclasses import dataclass, asdict
from typing import NamedTuple

from utils.exceptions import CapacityError


class CartResult(NamedTuple):
    """Outcome of a cart mutation."""

    ok: bool
    error: CapacityError | None = None


OK = CartResult(True)


@dataclass
class CartLine:
    """One product in the cart."""

    product_id: int
    name: str
    price: float
    quantity: int
    stock: int
    available_stock: int | None = None
    degraded: bool = False

    @property
    def max_quantity(self) -> int:
        """Last known availability; total stock when the snapshot was invalidated."""
        if self.available_stock is None:
            return self.stock
        return self.available_stock

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        data = asdict(self)
        data['subtotal'] = self.subtotal
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'CartLine':
        available = data.get('available_stock')
        return cls(
            product_id=int(data['product_id']),
            name=data.get('name', ''),
            price=float(data['price']),
            quantity=int(data['quantity']),
            stock=int(data.get('stock', 0)),
            available_stock=int(available) if available is not None else None,
            degraded=bool(data.get('degraded', False)),
        )


class Cart:
    """Cart lines unique by product id plus the selected event date."""

    def __init__(self, lines: list = None, event_date: str = None):
        self._lines: dict[int, CartLine] = {}
        for line in lines or []:
            self._lines[line.product_id] = line
        self.event_date = event_date or None

    @property
    def lines(self) -> list:
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: int) -> CartLine | None:
        return self._lines.get(product_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_event_date(self, event_date: str | None) -> None:
        """
        Rebind the cart to a new date.

        Every availability snapshot becomes stale; callers must refresh each
        line through refresh_availability() afterwards.
        """
        self.event_date = event_date or None
        for line in self._lines.values():
            line.available_stock = None
            line.degraded = False

    def add_item(self, product: dict, quantity: int = 1,
                 available_stock: int = None, degraded: bool = False) -> CartResult:
        """
        Add a product, or increase its quantity if already present.

        Args:
            product: Product dict (id, name, price, stock)
            quantity: Units to add; raised to 1 for a new line
            available_stock: Availability on the cart's date (product stock if None)
            degraded: Whether available_stock came from the degraded fallback

        Returns:
            CartResult; not ok with CapacityError when the quantity exceeds
            availability (no line is created)
        """
        product_id = product['id']
        existing = self._lines.get(product_id)
        if existing:
            if available_stock is not None:
                self.refresh_availability(product_id, available_stock, degraded)
            return self.update_quantity(product_id, existing.quantity + quantity)

        quantity = max(1, quantity)
        stock = int(product.get('stock') or 0)
        limit = available_stock if available_stock is not None else stock

        if quantity > limit:
            return CartResult(False, CapacityError(limit, product_id))

        self._lines[product_id] = CartLine(
            product_id=product_id,
            name=product.get('name', ''),
            price=float(product['price']),
            quantity=quantity,
            stock=stock,
            available_stock=available_stock,
            degraded=degraded,
        )
        return OK

    def update_quantity(self, product_id: int, new_quantity: int) -> CartResult:
        """
        Set a line's quantity exactly.

        Below 1 removes the line. Above the line's known availability the
        update is rejected and the line stays unchanged.
        """
        line = self._lines.get(product_id)
        if line is None:
            return OK

        if new_quantity < 1:
            self.remove_item(product_id)
            return OK

        if new_quantity > line.max_quantity:
            return CartResult(False, CapacityError(line.max_quantity, product_id))

        line.quantity = new_quantity
        return OK

    def remove_item(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        """Empty the cart and unbind its date."""
        self._lines.clear()
        self.event_date = None

    def refresh_availability(self, product_id: int, available_stock: int,
                             degraded: bool = False) -> None:
        """
        Store a fresh availability snapshot for a line.

        The quantity is left alone even when it is now above the snapshot;
        the next update_quantity() enforces the new bound.
        """
        line = self._lines.get(product_id)
        if line is not None:
            line.available_stock = available_stock
            line.degraded = degraded

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def total(self) -> float:
        return sum(line.price * line.quantity for line in self._lines.values())

    def total_units(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def contains(self, product_id: int) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: int) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def over_capacity_lines(self) -> list:
        """Lines whose quantity is above their snapshot (stale after a refresh)."""
        return [line for line in self._lines.values() if line.quantity > line.max_quantity]

    def to_dict(self) -> dict:
        return {
            'event_date': self.event_date,
            'items': [line.to_dict() for line in self._lines.values()],
            'total': self.total(),
            'total_units': self.total_units(),
        }

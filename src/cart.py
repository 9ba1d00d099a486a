# src/cart.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterator, List, Optional, Tuple
import logging

from errors import ExpiredProductError, InsufficientStockError
from products import Product

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    """A line in the in‑memory shopping cart."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class Cart:
    """
    Ordered collection of cart lines.  Insertion order is the order in which
    lines appear on the receipt.  Adding the same product twice produces two
    lines.
    """

    def __init__(self, today: Optional[Callable[[], date]] = None) -> None:
        self._items: List[CartItem] = []
        self._today = today or date.today

    # ---- Cart operations ----

    def add(self, product: Product, quantity: int = 1) -> CartItem:
        """Validate a product against expiry and stock and append a line.

        Stock is compared with the product's live quantity only; lines
        already in this cart are not taken into account and nothing is
        reserved until checkout.

        Raises:
            ValueError: If ``quantity`` is not positive.
            ExpiredProductError: If the product is past its expiry date.
            InsufficientStockError: If ``quantity`` exceeds the current stock.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be positive.")
        if product.is_expired(self._today()):
            raise ExpiredProductError(product.name)
        if quantity > product.quantity:
            raise InsufficientStockError(product.name, quantity, product.quantity)

        item = CartItem(product=product, quantity=quantity)
        self._items.append(item)
        logger.debug("Added %d x %s to cart", quantity, product.name)
        return item

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    def subtotal(self) -> float:
        return sum((item.line_total for item in self._items), 0.0)

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self._items)

# src/products.py
"""
Product catalogue types.

Products form a closed set of variants.  Each variant is tagged with a
:class:`ProductKind` and the tag, not the Python class, answers whether a
product needs physical shipping.  Shippable variants expose ``name`` and
``weight`` (kilograms) so the shipping calculator can treat them through the
:class:`Shippable` protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar, Optional, Protocol


class ProductKind(Enum):
    EXPIRABLE = "expirable"
    NON_EXPIRABLE = "non_expirable"
    DIGITAL = "digital"

    @property
    def shippable(self) -> bool:
        return self is not ProductKind.DIGITAL


class Shippable(Protocol):
    """Anything with a name and a weight that can be packed into a shipment."""

    name: str
    weight: float


@dataclass(eq=False)
class Product:
    """Fields shared by every product variant.

    Instances are shared by reference between the catalogue and any cart
    lines pointing at them, so equality is identity.
    """

    name: str
    price: float
    quantity: int

    kind: ClassVar[ProductKind]

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Price of {self.name} must not be negative.")
        if self.quantity < 0:
            raise ValueError(f"Stock of {self.name} must not be negative.")

    def is_expired(self, today: Optional[date] = None) -> bool:
        return False

    def is_shippable(self) -> bool:
        return self.kind.shippable

    def decrease_quantity(self, q: int) -> None:
        # No bounds check: the cart validated the quantity when it was added.
        self.quantity -= q


def _check_weight(product: Product, weight: float) -> None:
    if weight <= 0:
        raise ValueError(f"Weight of {product.name} must be positive.")


@dataclass(eq=False)
class ExpirableProduct(Product):
    """A perishable, shippable product such as cheese."""

    expiry_date: date = None  # type: ignore[assignment]
    weight: float = 0.0

    kind: ClassVar[ProductKind] = ProductKind.EXPIRABLE

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.expiry_date is None:
            raise ValueError(f"Expiry date of {self.name} is required.")
        _check_weight(self, self.weight)

    def is_expired(self, today: Optional[date] = None) -> bool:
        """Return True once ``today`` is strictly after the expiry date."""
        if today is None:
            today = date.today()
        return today > self.expiry_date


@dataclass(eq=False)
class NonExpirableProduct(Product):
    """A shippable product that never expires, such as a TV."""

    weight: float = 0.0

    kind: ClassVar[ProductKind] = ProductKind.NON_EXPIRABLE

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_weight(self, self.weight)


@dataclass(eq=False)
class DigitalProduct(Product):
    """A product delivered without shipping, such as a scratch card."""

    kind: ClassVar[ProductKind] = ProductKind.DIGITAL

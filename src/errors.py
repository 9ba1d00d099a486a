"""
Exceptions raised by the cart and the checkout routine.

Every failure carries a short ``code`` that is used as the ``type`` label of
the checkout error counter and in structured log records.  Cart failures
also derive from :class:`ValueError` (bad argument to ``Cart.add``) and
checkout failures from :class:`RuntimeError` so callers that only know the
builtin hierarchy can still catch them.
"""

from __future__ import annotations


class CheckoutError(Exception):
    """Base class for all cart and checkout failures."""

    code = "checkout_error"


class ExpiredProductError(CheckoutError, ValueError):
    code = "expired_product"

    def __init__(self, product_name: str) -> None:
        super().__init__(f"{product_name} is expired")
        self.product_name = product_name


class InsufficientStockError(CheckoutError, ValueError):
    code = "insufficient_stock"

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Not enough stock for {product_name} (requested {requested}, available {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class EmptyCartError(CheckoutError, RuntimeError):
    code = "empty_cart"

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class InsufficientBalanceError(CheckoutError, RuntimeError):
    code = "insufficient_balance"

    def __init__(self, balance: float, required: float) -> None:
        super().__init__(f"Insufficient balance: {balance:.2f} available, {required:.2f} required")
        self.balance = balance
        self.required = required

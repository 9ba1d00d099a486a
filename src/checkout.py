# src/checkout.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging
import time
import uuid

from cart import Cart, CartItem
from customer import Customer
from errors import CheckoutError, EmptyCartError, InsufficientBalanceError
from formatting import format_number
from metrics import (
    CHECKOUT_DURATION_SECONDS,
    CHECKOUT_ERROR_TOTAL,
    CHECKOUT_TOTAL,
    SHIPPED_UNITS_TOTAL,
)
from products import Shippable
from shipping import ShippingCalculator, Sink

logger = logging.getLogger(__name__)

RECEIPT_SEPARATOR = "----------------------"


class CheckoutStage(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    PRICING = "pricing"
    DEDUCTING = "deducting"
    SHIPPING = "shipping"
    RECEIPT = "receipt"
    CLEARED = "cleared"


@dataclass(frozen=True)
class ReceiptLine:
    quantity: int
    name: str
    line_total: float


@dataclass
class Receipt:
    """Outcome of a successful checkout."""

    checkout_id: str
    lines: List[ReceiptLine]
    subtotal: float
    shipping: float
    total: float
    balance_left: float
    manifest: List[Shippable] = field(default_factory=list)

    def text_lines(self) -> List[str]:
        out = ["** Checkout receipt **"]
        for ln in self.lines:
            out.append(f"{ln.quantity}x {ln.name}\t{format_number(ln.line_total)}")
        out.append(RECEIPT_SEPARATOR)
        out.append(f"Subtotal\t{format_number(self.subtotal)}")
        out.append(f"Shipping\t{format_number(self.shipping)}")
        out.append(f"Amount\t\t{format_number(self.total)}")
        out.append(f"Balance left\t{format_number(self.balance_left)}")
        return out

    def __str__(self) -> str:
        return "\n".join(self.text_lines())


class CheckoutProcessor:
    """
    Runs a cart through validation, pricing, balance deduction, shipment
    notice and receipt.  The processor holds no per‑checkout state, so one
    instance can serve any number of sequential checkouts.

    Args:
        shipping: Calculator used to build and price the manifest.
        sink: Receives every printed line (shipment notice then receipt).
    """

    def __init__(self, shipping: Optional[ShippingCalculator] = None, sink: Sink = print) -> None:
        self.shipping = shipping or ShippingCalculator()
        self.sink = sink

    def checkout(self, customer: Customer, cart: Cart) -> Receipt:
        """Charge ``customer`` for everything in ``cart`` and print the receipt.

        Stock is decremented while pricing, before the balance is checked.
        A balance failure therefore leaves stock decremented; nothing is
        rolled back.

        Raises:
            EmptyCartError: If the cart has no lines.
            InsufficientBalanceError: If the balance does not cover subtotal
                plus shipping.
        """
        checkout_id = uuid.uuid4().hex[:12]
        context = {"checkout_id": checkout_id, "customer": customer.name}
        start_time = time.perf_counter()
        stage = CheckoutStage.IDLE
        error_type: str | None = None
        try:
            stage = CheckoutStage.VALIDATING
            if cart.is_empty():
                raise EmptyCartError()
            logger.info("Checkout started", extra={**context, "extra": {"lines": len(cart)}})

            stage = CheckoutStage.PRICING
            items: List[CartItem] = list(cart)
            subtotal = 0.0
            for item in items:
                item.product.decrease_quantity(item.quantity)
                subtotal += item.line_total
            manifest = self.shipping.build_manifest(items)
            shipping = self.shipping.quote(manifest).fee

            stage = CheckoutStage.DEDUCTING
            total = subtotal + shipping
            if not customer.can_afford(total):
                raise InsufficientBalanceError(customer.balance, total)
            customer.deduct(total)

            stage = CheckoutStage.SHIPPING
            if manifest:
                self.shipping.print_notice(manifest, self.sink)
                SHIPPED_UNITS_TOTAL.inc(len(manifest))

            stage = CheckoutStage.RECEIPT
            receipt = Receipt(
                checkout_id=checkout_id,
                lines=[ReceiptLine(it.quantity, it.product.name, it.line_total) for it in items],
                subtotal=subtotal,
                shipping=shipping,
                total=total,
                balance_left=customer.balance,
                manifest=manifest,
            )
            for line in receipt.text_lines():
                self.sink(line)

            stage = CheckoutStage.CLEARED
            cart.clear()
            logger.info(
                "Checkout completed",
                extra={**context, "extra": {"total": total, "shipping": shipping, "units": len(manifest)}},
            )
            return receipt
        except CheckoutError as ex:
            error_type = ex.code
            logger.warning(
                "Checkout failed",
                extra={**context, "extra": {"stage": stage.value, "error": error_type, "reason": str(ex)}},
            )
            raise
        except Exception:
            error_type = "unexpected"
            logger.exception(
                "Checkout aborted",
                extra={**context, "extra": {"stage": stage.value, "error": error_type}},
            )
            raise
        finally:
            CHECKOUT_DURATION_SECONDS.observe(time.perf_counter() - start_time)
            if error_type:
                CHECKOUT_TOTAL.inc(outcome="failure")
                CHECKOUT_ERROR_TOTAL.inc(type=error_type)
            elif stage is CheckoutStage.CLEARED:
                CHECKOUT_TOTAL.inc(outcome="success")


def checkout(customer: Customer, cart: Cart, sink: Sink = print) -> Receipt:
    """Run a single checkout with the default shipping fee."""
    return CheckoutProcessor(sink=sink).checkout(customer, cart)

"""
Shipping aggregation for checkout.

A manifest holds one entry per physical unit: a cart line of three
cheeses contributes three entries.  The calculator prices the manifest at
a flat fee per unit and prints the shipment notice that precedes the
receipt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence
import logging

from cart import CartItem
from config import DEFAULT_SHIPPING_FEE
from formatting import format_number
from products import Shippable

logger = logging.getLogger(__name__)

Sink = Callable[[str], None]


@dataclass(frozen=True)
class ShippingQuote:
    unit_count: int
    fee: float
    total_weight: float


class ShippingCalculator:
    """Build, price and print shipment manifests.

    Args:
        fee_per_unit: Flat fee charged for each shipped unit.
    """

    def __init__(self, fee_per_unit: float = DEFAULT_SHIPPING_FEE) -> None:
        if fee_per_unit < 0:
            raise ValueError("Shipping fee must not be negative.")
        self.fee_per_unit = fee_per_unit

    def units_for(self, item: CartItem) -> List[Shippable]:
        """Return the shipping units of one cart line (empty for digital goods)."""
        if not item.product.is_shippable():
            return []
        return [item.product] * item.quantity  # type: ignore[list-item]

    def build_manifest(self, items: Iterable[CartItem]) -> List[Shippable]:
        manifest: List[Shippable] = []
        for item in items:
            manifest.extend(self.units_for(item))
        return manifest

    def fee_for(self, unit_count: int) -> float:
        return self.fee_per_unit * unit_count

    def quote(self, manifest: Sequence[Shippable]) -> ShippingQuote:
        return ShippingQuote(
            unit_count=len(manifest),
            fee=self.fee_for(len(manifest)),
            total_weight=sum((unit.weight for unit in manifest), 0.0),
        )

    def notice_lines(self, manifest: Sequence[Shippable]) -> List[str]:
        if not manifest:
            return []
        lines = ["** Shipment notice **"]
        for unit in manifest:
            lines.append(f"{unit.name}\t{format_number(unit.weight * 1000)}g")
        total_weight = self.quote(manifest).total_weight
        lines.append(f"Total package weight {format_number(total_weight, 1)}kg")
        lines.append("")
        return lines

    def print_notice(self, manifest: Sequence[Shippable], sink: Sink = print) -> None:
        """Emit the shipment notice; nothing at all for an empty manifest."""
        lines = self.notice_lines(manifest)
        if not lines:
            return
        for line in lines:
            sink(line)
        logger.debug("Printed shipment notice for %d units", len(manifest))

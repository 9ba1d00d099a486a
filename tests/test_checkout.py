# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
# --- end path/bootstrap ---

import unittest
from datetime import date, timedelta

from cart import Cart
from checkout import CheckoutProcessor, checkout
from customer import Customer
from errors import EmptyCartError, InsufficientBalanceError
from metrics import (
    CHECKOUT_DURATION_SECONDS,
    CHECKOUT_ERROR_TOTAL,
    CHECKOUT_TOTAL,
    SHIPPED_UNITS_TOTAL,
    reset_metrics,
)
from products import DigitalProduct, ExpirableProduct, NonExpirableProduct
from shipping import ShippingCalculator

EXPECTED_SCENARIO_OUTPUT = [
    "** Shipment notice **",
    "Cheese\t200g",
    "Cheese\t200g",
    "Biscuits\t700g",
    "Total package weight 1.1kg",
    "",
    "** Checkout receipt **",
    "2x Cheese\t200",
    "1x Biscuits\t150",
    "1x ScratchCard\t50",
    "----------------------",
    "Subtotal\t450",
    "Shipping\t30",
    "Amount\t\t480",
    "Balance left\t520",
]


class TestCheckout(unittest.TestCase):
    """End‑to‑end checkout against in‑memory products."""

    def setUp(self):
        reset_metrics()
        today = date.today()
        self.cheese = ExpirableProduct("Cheese", 100, 5, today + timedelta(days=5), 0.2)
        self.biscuits = ExpirableProduct("Biscuits", 150, 2, today + timedelta(days=2), 0.7)
        self.tv = NonExpirableProduct("TV", 1000, 3, 10)
        self.card = DigitalProduct("ScratchCard", 50, 10)
        self.customer = Customer("Ahmed", 1000)
        self.cart = Cart()
        self.output = []
        self.processor = CheckoutProcessor(sink=self.output.append)

    def test_sample_scenario(self):
        self.cart.add(self.cheese, 2)
        self.cart.add(self.biscuits, 1)
        self.cart.add(self.card, 1)

        receipt = self.processor.checkout(self.customer, self.cart)

        self.assertEqual(receipt.subtotal, 450)
        self.assertEqual(receipt.shipping, 30)
        self.assertEqual(receipt.total, 480)
        self.assertEqual(receipt.balance_left, 520)
        self.assertEqual(self.customer.balance, 520)
        self.assertEqual([u.name for u in receipt.manifest], ["Cheese", "Cheese", "Biscuits"])
        self.assertEqual(self.output, EXPECTED_SCENARIO_OUTPUT)

        # Stock decremented and cart cleared
        self.assertEqual(self.cheese.quantity, 3)
        self.assertEqual(self.biscuits.quantity, 1)
        self.assertEqual(self.card.quantity, 9)
        self.assertTrue(self.cart.is_empty())

        self.assertEqual(CHECKOUT_TOTAL.value(outcome="success"), 1)
        self.assertEqual(SHIPPED_UNITS_TOTAL.value(), 3)
        self.assertEqual(CHECKOUT_DURATION_SECONDS.count(), 1)

    def test_receipt_str_matches_printed_receipt(self):
        self.cart.add(self.card, 2)
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(str(receipt).splitlines(), self.output)

    def test_empty_cart_fails_without_mutation(self):
        with self.assertRaises(EmptyCartError):
            self.processor.checkout(self.customer, self.cart)
        self.assertEqual(self.customer.balance, 1000)
        self.assertEqual(self.output, [])
        self.assertEqual(CHECKOUT_ERROR_TOTAL.value(type="empty_cart"), 1)
        self.assertEqual(CHECKOUT_TOTAL.value(outcome="failure"), 1)

    def test_digital_only_cart_ships_nothing(self):
        self.cart.add(self.card, 3)
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.shipping, 0)
        self.assertEqual(receipt.manifest, [])
        self.assertNotIn("** Shipment notice **", self.output)
        self.assertEqual(self.output[0], "** Checkout receipt **")
        self.assertEqual(self.customer.balance, 850)

    def test_shipping_counts_every_unit(self):
        self.cart.add(self.tv, 1)
        self.cart.add(self.cheese, 3)
        self.cart.add(self.card, 4)
        self.customer.balance = 5000
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.shipping, 10.0 * 4)
        self.assertEqual(receipt.subtotal, 1000 + 300 + 200)
        self.assertIn("TV\t10000g", self.output)
        self.assertIn("Total package weight 10.6kg", self.output)

    def test_insufficient_balance_keeps_decremented_stock(self):
        self.cart.add(self.tv, 1)
        with self.assertRaises(InsufficientBalanceError) as ctx:
            self.processor.checkout(self.customer, self.cart)
        self.assertEqual(ctx.exception.required, 1010)
        self.assertEqual(self.customer.balance, 1000)
        # No rollback of the stock decrement
        self.assertEqual(self.tv.quantity, 2)
        # Nothing printed and cart kept
        self.assertEqual(self.output, [])
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(CHECKOUT_ERROR_TOTAL.value(type="insufficient_balance"), 1)

    def test_exact_balance_is_enough(self):
        self.cart.add(self.cheese, 1)
        self.customer.balance = 110
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.balance_left, 0)

    def test_processor_is_reusable(self):
        self.cart.add(self.card, 1)
        self.processor.checkout(self.customer, self.cart)
        self.cart.add(self.cheese, 1)
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.total, 110)
        self.assertEqual(self.customer.balance, 1000 - 50 - 110)
        self.assertEqual(CHECKOUT_TOTAL.value(outcome="success"), 2)

    def test_custom_fee_per_unit(self):
        processor = CheckoutProcessor(ShippingCalculator(fee_per_unit=2.5), sink=self.output.append)
        self.cart.add(self.cheese, 2)
        receipt = processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.shipping, 5.0)

    def test_checkout_logs_completion(self):
        self.cart.add(self.card, 1)
        with self.assertLogs("checkout", level="INFO") as logs:
            receipt = self.processor.checkout(self.customer, self.cart)
        self.assertTrue(any("Checkout completed" in m for m in logs.output))
        self.assertEqual(logs.records[-1].checkout_id, receipt.checkout_id)
        self.assertEqual(logs.records[-1].customer, "Ahmed")

    def test_half_amounts_round_up_on_receipt(self):
        voucher = DigitalProduct("Voucher", 2.5, 5)
        pin = NonExpirableProduct("Pin", 1, 5, 0.25)
        self.cart.add(voucher, 1)
        self.cart.add(pin, 1)
        receipt = self.processor.checkout(self.customer, self.cart)
        self.assertEqual(receipt.subtotal, 3.5)
        self.assertIn("1x Voucher\t3", self.output)
        self.assertIn("Pin\t250g", self.output)
        self.assertIn("Total package weight 0.3kg", self.output)
        self.assertIn("Subtotal\t4", self.output)
        self.assertIn("Amount\t\t14", self.output)
        self.assertIn("Balance left\t987", self.output)

    def test_unexpected_error_is_counted_and_logged(self):
        def broken_sink(line):
            raise OSError("printer offline")

        processor = CheckoutProcessor(sink=broken_sink)
        self.cart.add(self.card, 1)
        with self.assertLogs("checkout", level="ERROR") as logs:
            with self.assertRaises(OSError):
                processor.checkout(self.customer, self.cart)
        self.assertTrue(any("Checkout aborted" in m for m in logs.output))
        self.assertEqual(logs.records[-1].extra["error"], "unexpected")
        self.assertEqual(CHECKOUT_TOTAL.value(outcome="failure"), 1)
        self.assertEqual(CHECKOUT_ERROR_TOTAL.value(type="unexpected"), 1)
        # Balance was already deducted when printing failed
        self.assertEqual(self.customer.balance, 950)
        self.assertEqual(len(self.cart), 1)

    def test_module_level_checkout(self):
        self.cart.add(self.card, 1)
        receipt = checkout(self.customer, self.cart, sink=self.output.append)
        self.assertEqual(receipt.total, 50)
        self.assertTrue(self.cart.is_empty())


if __name__ == "__main__":
    unittest.main(verbosity=2)

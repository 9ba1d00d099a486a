"""
Command‑line driver for the checkout application.

By default this runs the sample scenario: a customer buys two cheeses, a
pack of biscuits and a scratch card, and the shipment notice and receipt
are printed.  With ``--interactive`` it starts a menu loop over the same
catalogue.  The driver only uses the public cart and checkout API, which
keeps the business logic free from I/O code.
"""

import argparse
import sys
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from cart import Cart
from checkout import CheckoutProcessor, Receipt
from config import Settings
from customer import Customer
from errors import CheckoutError
from logging_config import configure_logging
from products import DigitalProduct, ExpirableProduct, NonExpirableProduct, Product
from shipping import ShippingCalculator, Sink


def build_catalog(today: Optional[date] = None) -> Dict[str, Product]:
    """Return the sample catalogue keyed by product name."""
    today = today or date.today()
    products: List[Product] = [
        ExpirableProduct("Cheese", 100, 5, today + timedelta(days=5), 0.2),
        ExpirableProduct("Biscuits", 150, 2, today + timedelta(days=2), 0.7),
        NonExpirableProduct("TV", 1000, 3, 10),
        DigitalProduct("ScratchCard", 50, 10),
    ]
    return {p.name: p for p in products}


def run_demo(sink: Sink = print, settings: Optional[Settings] = None) -> Receipt:
    settings = settings or Settings()
    catalog = build_catalog()
    customer = Customer("Ahmed", 1000)
    cart = Cart()

    cart.add(catalog["Cheese"], 2)
    cart.add(catalog["Biscuits"], 1)
    cart.add(catalog["ScratchCard"], 1)

    processor = CheckoutProcessor(ShippingCalculator(settings.shipping_fee_per_unit), sink=sink)
    return processor.checkout(customer, cart)


def interactive_cli(
    settings: Optional[Settings] = None,
    input_fn: Callable[[str], str] = input,
    output: Sink = print,
) -> None:
    """Provide a simple menu to fill a cart and check out."""
    settings = settings or Settings()
    catalog = build_catalog()
    names = list(catalog)
    customer = Customer("Ahmed", 1000)
    cart = Cart()
    processor = CheckoutProcessor(ShippingCalculator(settings.shipping_fee_per_unit), sink=output)

    def print_menu() -> None:
        output("\n-- Checkout --")
        output("1. List Products")
        output("2. Add Product to Cart")
        output("3. View Cart")
        output("4. Checkout")
        output("0. Exit")

    while True:
        print_menu()
        choice = input_fn("Select an option: ").strip()
        if choice == "1":
            for idx, name in enumerate(names, start=1):
                p = catalog[name]
                output(f"{idx}. {p.name} - {p.price:.2f} (Stock: {p.quantity})")
        elif choice == "2":
            try:
                idx = int(input_fn("Enter Product number: "))
                qty = int(input_fn("Enter quantity: "))
            except ValueError:
                output("Please enter valid numeric values.")
                continue
            if not 1 <= idx <= len(names):
                output("Product not found.")
                continue
            product = catalog[names[idx - 1]]
            try:
                cart.add(product, qty)
            except ValueError as ex:
                output(f"Could not add: {ex}")
                continue
            output(f"Added {qty} x {product.name} to cart")
        elif choice == "3":
            if cart.is_empty():
                output("Cart is empty.")
            else:
                output("\nCart Contents:")
                for item in cart:
                    output(f"{item.product.name} x {item.quantity} = {item.line_total:.2f}")
                output(f"Balance: {customer.balance:.2f}")
        elif choice == "4":
            try:
                processor.checkout(customer, cart)
            except CheckoutError as ex:
                output(f"Checkout failed: {ex}")
        elif choice == "0":
            output("Exiting application.")
            break
        else:
            output("Invalid option. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="In-memory retail checkout demo")
    parser.add_argument("--interactive", action="store_true", help="start the menu-driven session")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_dir, settings.log_level)
    if args.interactive:
        interactive_cli(settings)
        return 0
    try:
        run_demo(settings=settings)
    except CheckoutError as ex:
        print(f"Checkout failed: {ex}")
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting.")
        sys.exit(0)

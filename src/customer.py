from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class Customer:
    """A shopper with a prepaid balance."""

    name: str
    balance: float

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ValueError(f"Balance of {self.name} must not be negative.")

    def can_afford(self, amount: float) -> bool:
        return self.balance >= amount

    def deduct(self, amount: float) -> None:
        self.balance -= amount

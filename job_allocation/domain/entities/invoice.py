"""
Invoice entity attached to a job on completion.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert a user-entered number to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Number) -> Decimal:
    """Round a monetary value to 2 decimal places, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class InvoiceLineItem:
    """Single invoice line; the amount is always derived."""

    name: str
    quantity: Decimal
    rate: Decimal
    id: str = ""

    def __post_init__(self):
        self.quantity = to_decimal(self.quantity)
        self.rate = to_decimal(self.rate)

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": float(self.quantity),
            "rate": float(money(self.rate)),
            "amount": float(money(self.amount)),
        }


@dataclass
class Invoice:
    """Line-itemized invoice with computed subtotal, tax and total."""

    description: str
    items: List[InvoiceLineItem] = field(default_factory=list)
    tax_percentage: Decimal = Decimal("0")
    notes: str = ""

    def __post_init__(self):
        self.tax_percentage = to_decimal(self.tax_percentage)
        if not (Decimal("0") <= self.tax_percentage <= Decimal("100")):
            raise ValueError("Tax percentage must be between 0 and 100")
        if not self.items:
            raise ValueError("Invoice needs at least one line item")

    @property
    def subtotal(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))

    @property
    def tax(self) -> Decimal:
        return self.subtotal * self.tax_percentage / Decimal("100")

    @property
    def total_cost(self) -> Decimal:
        return self.subtotal + self.tax

    def to_payload(self) -> dict:
        """Serialize with totals recomputed from the current items."""
        return {
            "description": self.description,
            "items": [item.to_payload() for item in self.items],
            "subtotal": float(money(self.subtotal)),
            "tax": float(money(self.tax)),
            "taxPercentage": float(self.tax_percentage),
            "totalCost": float(money(self.total_cost)),
            "notes": self.notes,
        }

"""Order pricing — line amounts and order totals from product snapshots.

Tax uses the per-product ``tax_rate`` (a percentage) of the catalogue. The
checkout layer supplies shipping cost and discount; this module does not
recompute them.
"""

from dataclasses import dataclass, field


def _money(amount):
    return round(amount + 0.0, 2)


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float
    tax: float

    @property
    def tax_per_unit(self):
        return round(self.tax / self.quantity, 4)


@dataclass(frozen=True)
class OrderPricing:
    lines: list[PricedLine] = field(default_factory=list)
    subtotal: float = 0.0
    tax_amount: float = 0.0
    shipping_cost: float = 0.0
    discount_amount: float = 0.0
    total_amount: float = 0.0


def price_line(product, quantity):
    """Price `quantity` units of `product` at its current selling price and tax rate."""
    subtotal = product.selling_price * quantity
    tax = subtotal * (product.tax_rate or 0.0) / 100
    return PricedLine(
        product_id=str(product.id),
        product_name=product.name,
        quantity=quantity,
        unit_price=product.selling_price,
        subtotal=_money(subtotal),
        tax=tax,
    )


def total_order(lines, shipping_cost=0.0, discount_amount=0.0):
    """Sum priced lines into order totals.

    total = subtotal + tax + shipping_cost - discount_amount
    """
    subtotal = _money(sum(line.subtotal for line in lines))
    tax_amount = _money(sum(line.tax for line in lines))
    shipping_cost = _money(shipping_cost or 0.0)
    discount_amount = _money(discount_amount or 0.0)
    return OrderPricing(
        lines=list(lines),
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        discount_amount=discount_amount,
        total_amount=_money(subtotal + tax_amount + shipping_cost - discount_amount),
    )

"""Product registration — command and handler.

The catalogue is the system of record for products; this is the hook it
uses to publish the price, tax rate and opening stock the ordering domain
reserves against.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.inventory.product import Product


@ordering.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=255)
    seller_id = Identifier()
    selling_price = Float(required=True, min_value=0.0)
    tax_rate = Float(default=0.0, min_value=0.0)
    quantity_available = Integer(default=0, min_value=0)


@ordering.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.create(
            name=command.name,
            seller_id=command.seller_id,
            selling_price=command.selling_price,
            tax_rate=command.tax_rate or 0.0,
            quantity_available=command.quantity_available or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

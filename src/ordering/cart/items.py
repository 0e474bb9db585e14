"""Cart item management — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import CartItem
from ordering.domain import ordering


@ordering.command(part_of="CartItem")
class AddToCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command_handler(part_of=CartItem)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(CartItem)
        row = repo.find_row(command.buyer_id, command.product_id)
        if row is None:
            row = CartItem.create(
                buyer_id=command.buyer_id,
                product_id=command.product_id,
                quantity=command.quantity,
            )
        else:
            row.increase(command.quantity)
        repo.add(row)
        return str(row.id)

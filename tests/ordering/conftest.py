import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _collaborators():
    """Fresh fake payment gateway and invoicer for every test."""
    from ordering.invoicing import reset_invoicer
    from ordering.payment_gateway import reset_payment_gateway

    reset_payment_gateway()
    reset_invoicer()
    yield
    reset_payment_gateway()
    reset_invoicer()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def service():
    from ordering.service import OrderService

    return OrderService()


@pytest.fixture()
def shipping_address():
    return {
        "street": "123 Main St",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }


@pytest.fixture()
def make_product(service):
    """Register a product and return its id."""

    def _make(name="Widget", price=10.0, stock=10, tax_rate=0.0, seller_id="seller-001"):
        product = service.register_product(
            name=name,
            selling_price=price,
            quantity_available=stock,
            tax_rate=tax_rate,
            seller_id=seller_id,
        )
        return product["product_id"]

    return _make


@pytest.fixture()
def place_order(service, shipping_address):
    """Place an order for `lines` ([(product_id, quantity), ...]) and return the result."""

    def _place(lines, buyer_id="buyer-001", **overrides):
        request = {
            "items": [{"product_id": product_id, "quantity": quantity} for product_id, quantity in lines],
            "shipping_address": shipping_address,
        }
        request.update(overrides)
        return service.create_order(buyer_id, request)

    return _place

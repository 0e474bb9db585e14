"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that match the field names expected by the
Ordering API's Pydantic request schemas and pass its validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def buyer_id() -> str:
    return f"buyer-lt-{uuid.uuid4().hex[:8]}"


def seller_id() -> str:
    return f"seller-lt-{random.randint(1, 20):03d}"


def product_data(stock: int | None = None) -> dict:
    """Generate a RegisterProductRequest payload."""
    return {
        "name": f"{fake.color_name()} {fake.word().title()}"[:255],
        "selling_price": round(random.uniform(1.0, 250.0), 2),
        "tax_rate": random.choice([0.0, 5.0, 10.0, 18.0]),
        "quantity_available": stock if stock is not None else random.randint(50, 500),
        "seller_id": seller_id(),
    }


def address_data() -> dict:
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postal_code": fake.zipcode()[:20],
        "country": "US",
    }


def order_data(buyer: str, product_ids: list[str], max_quantity: int = 3) -> dict:
    """Generate a CreateOrderRequest payload over one to three of `product_ids`."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    return {
        "buyer_id": buyer,
        "items": [{"product_id": pid, "quantity": random.randint(1, max_quantity)} for pid in chosen],
        "shipping_address": address_data(),
        "notes": fake.sentence(nb_words=6) if random.random() < 0.3 else None,
        "shipping_cost": random.choice([0.0, 4.99, 9.99]),
        "discount_amount": 0.0,
    }


def cancellation_reason() -> str:
    return random.choice(
        [
            "Ordered by mistake",
            "Found a better price",
            "Delivery too slow",
            "Changed my mind",
        ]
    )

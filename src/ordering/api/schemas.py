"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Emptiness checks (no items, no shipping address)
are left to the service so they surface with their own error codes.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str


class OrderLineSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    buyer_id: str
    items: list[OrderLineSchema] = []
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    notes: str | None = None
    discount_amount: float = Field(ge=0, default=0.0)
    shipping_cost: float = Field(ge=0, default=0.0)
    seller_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "buyer_id": "buyer-001",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "street": "123 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "shipping_cost": 5.0,
                    "discount_amount": 0.0,
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str
    admin_notes: str | None = None
    tracking_number: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class RecordPaymentStatusRequest(BaseModel):
    payment_status: str


# ---------------------------------------------------------------------------
# Cart & Product Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class RegisterProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    selling_price: float = Field(ge=0)
    tax_rate: float = Field(ge=0, default=0.0)
    quantity_available: int = Field(ge=0, default=0)
    seller_id: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CreateOrderResponse(BaseModel):
    order_id: str
    order_number: str
    total_amount: float
    status: str
    created_at: str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict = {}


class ErrorResponse(BaseModel):
    error: ErrorBody

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CartLine(BaseModel):
    """A (product, quantity) line item from the shopping cart."""
    product_id: int = Field(description="Product in the cart")
    quantity: int = Field(gt=0, description="Units in the cart")


class PricedCartLine(BaseModel):
    """Cart line annotated with an advisory promotional price."""
    product_id: int = Field(description="Product in the cart")
    quantity: int = Field(description="Units in the cart")
    regular_price: Optional[Decimal] = Field(default=None, description="Catalog price per unit; None when the catalog has no price")
    unit_price: Optional[Decimal] = Field(default=None, description="Estimated price per unit after the blended discount")
    discount_percent: float = Field(default=0.0, description="Blended discount shown to the shopper")
    promotional: bool = Field(default=False, description="Whether a promotion priced this line")


class GuardDecision(BaseModel):
    """Result of the add-to-cart quantity check."""
    allowed: bool = Field(description="Whether the quantity may be added")
    requested_quantity: int = Field(description="Units the shopper asked for")
    remaining: Optional[int] = Field(default=None, description="Promotional units left, when a promotion applies")
    reason: Optional[str] = Field(default=None, description="User-facing rejection message")

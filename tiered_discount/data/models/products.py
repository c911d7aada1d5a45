from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class CatalogProduct(BaseModel):
    """Catalog entry needed for pricing and notifications."""
    product_id: int = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    base_price: Decimal = Field(ge=0, description="Regular (undiscounted) product price")

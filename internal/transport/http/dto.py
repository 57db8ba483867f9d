"""
Data Transfer Objects for Product Catalog Service API.

Contains Pydantic models for request/response validation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from internal.domain.product import Product


class CreateProductRequest(BaseModel):
    """Request body for creating a product."""

    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price")
    active: bool = Field(True, description="Whether the product is active")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Widget",
                "description": "A small widget",
                "price": "9.99",
                "active": True,
            }
        }
    )

    def to_entity(self) -> Product:
        """Build the candidate product."""
        return Product(
            name=self.name,
            description=self.description,
            price=self.price,
            active=self.active,
        )


class UpdateProductRequest(BaseModel):
    """Request body for updating a product."""

    id: int = Field(..., description="Identifier of the product to update")
    name: str = Field(..., min_length=1, description="New product name")
    description: Optional[str] = Field(None, description="New description")
    price: Decimal = Field(..., description="New unit price")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Widget v2",
                "description": "A slightly larger widget",
                "price": "12.50",
            }
        }
    )


class ProductResponse(BaseModel):
    """Response body for a product."""

    id: int = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price")
    active: bool = Field(..., description="Whether the product is active")

    @classmethod
    def from_entity(cls, product: Product) -> ProductResponse:
        """Build the response from a domain entity."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            active=product.active,
        )


class UpdateProductResponse(BaseModel):
    """Response body for a product update."""

    id: int
    updated: bool


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    code: str
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response body."""

    status: str
    service: str

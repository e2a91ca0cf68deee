# src/sheworks/schemas/product.py
"""Catalog schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from sheworks.models.product import CURRENCIES, PRODUCT_CATEGORIES

from .common import CamelModel

ProductCategory = Literal[PRODUCT_CATEGORIES]  # type: ignore[valid-type]
Currency = Literal[CURRENCIES]  # type: ignore[valid-type]
ProductSort = Literal["newest", "price-asc", "price-desc", "rating-desc", "bestselling"]


class ProductCreate(CamelModel):
    """Body of ``POST /products``."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: ProductCategory
    price: float = Field(..., ge=0)
    original_price: float | None = Field(default=None, ge=0)
    currency: Currency = "USD"
    stock: int = Field(default=0, ge=0)
    sku: str | None = Field(default=None, max_length=64)
    image_url: str | None = Field(default=None, max_length=512)
    tags: list[str] = Field(default_factory=list)
    featured: bool = False


class ProductUpdate(CamelModel):
    """Partial update; only supplied fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    category: ProductCategory | None = None
    price: float | None = Field(default=None, ge=0)
    original_price: float | None = Field(default=None, ge=0)
    currency: Currency | None = None
    stock: int | None = Field(default=None, ge=0)
    sku: str | None = Field(default=None, max_length=64)
    image_url: str | None = Field(default=None, max_length=512)
    tags: list[str] | None = None
    featured: bool | None = None
    is_active: bool | None = None


class ProductResponse(CamelModel):
    id: str
    vendor_id: str
    name: str
    description: str
    category: str
    price: float
    original_price: float | None = None
    currency: str
    stock: int
    sku: str | None = None
    image_url: str | None = None
    tags: list[str]
    featured: bool
    is_active: bool
    rating_average: float = 0.0
    rating_count: int = 0
    sales_count: int = 0
    created_at: datetime


class ProductEnvelope(CamelModel):
    product: ProductResponse


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class ProductList(CamelModel):
    """One page of the catalog."""

    products: list[ProductResponse]
    pagination: Pagination


class ProductRecommendations(CamelModel):
    products: list[ProductResponse]


class ReviewCreate(CamelModel):
    """Body of ``POST /products/{id}/reviews``."""

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=1000)


class ReviewResponse(CamelModel):
    id: int
    product_id: str
    customer_id: str
    author: str | None = None
    rating: int
    comment: str
    created_at: datetime


class ProductRating(CamelModel):
    average: float
    count: int


class ReviewEnvelope(CamelModel):
    review: ReviewResponse
    rating: ProductRating


class ReviewList(CamelModel):
    reviews: list[ReviewResponse]
    rating: ProductRating

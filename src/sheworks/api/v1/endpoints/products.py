# src/sheworks/api/v1/endpoints/products.py
"""Catalog endpoints for the SheWorks API."""

from __future__ import annotations

import math

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from sheworks.models import Customer, OrderItem, Product, ProductReview
from sheworks.schemas.common import StatusMessage
from sheworks.schemas.product import (
    Pagination,
    ProductCategory,
    ProductCreate,
    ProductEnvelope,
    ProductList,
    ProductRating,
    ProductRecommendations,
    ProductResponse,
    ProductSort,
    ProductUpdate,
    ReviewCreate,
    ReviewEnvelope,
    ReviewList,
    ReviewResponse,
)

from ..dependencies import CustomerDep, SessionDep, VendorDep

router = APIRouter(prefix="/products", tags=["products"])

_SORTS = {
    "newest": (Product.created_at.desc(),),
    "price-asc": (Product.price.asc(), Product.created_at.desc()),
    "price-desc": (Product.price.desc(), Product.created_at.desc()),
    "rating-desc": (
        Product.rating_average.desc(),
        Product.rating_count.desc(),
        Product.created_at.desc(),
    ),
    "bestselling": (Product.sales_count.desc(), Product.created_at.desc()),
}

RECOMMENDATION_LIMIT = 8


def _owned_product(db: Session, product_id: str, vendor_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    if product.vendor_id != vendor_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your product")
    return product


@router.get("/", response_model=ProductList)
async def list_products(
    db: SessionDep,
    category: ProductCategory | None = Query(None),
    search: str | None = Query(None, max_length=100),
    sort: ProductSort = Query("newest"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> ProductList:
    """List active products with optional filtering, search and sorting."""
    conditions = [Product.is_active.is_(True)]
    if category:
        conditions.append(Product.category == category)
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
                # Tags are stored as a JSON array; match against its text form.
                func.lower(cast(Product.tags, String)).like(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(Product).where(*conditions)) or 0
    products = db.scalars(
        select(Product)
        .where(*conditions)
        .order_by(*_SORTS[sort])
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    return ProductList(
        products=[ProductResponse.model_validate(product) for product in products],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/recommendations", response_model=ProductRecommendations)
async def recommended_products(db: SessionDep) -> ProductRecommendations:
    """Most ordered active products, or the newest ones before any sales."""
    popular_ids = db.scalars(
        select(OrderItem.product_id)
        .where(OrderItem.product_id.is_not(None))
        .group_by(OrderItem.product_id)
        .order_by(func.sum(OrderItem.quantity).desc(), OrderItem.product_id)
        .limit(RECOMMENDATION_LIMIT)
    ).all()

    products: list[Product] = []
    if popular_ids:
        active = {
            product.id: product
            for product in db.scalars(
                select(Product).where(Product.id.in_(popular_ids), Product.is_active.is_(True))
            )
        }
        products = [active[product_id] for product_id in popular_ids if product_id in active]

    if not products:
        products = list(
            db.scalars(
                select(Product)
                .where(Product.is_active.is_(True))
                .order_by(Product.created_at.desc())
                .limit(RECOMMENDATION_LIMIT)
            )
        )
    return ProductRecommendations(
        products=[ProductResponse.model_validate(product) for product in products]
    )


@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(product_id: str, db: SessionDep) -> ProductEnvelope:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.post("/", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    vendor: VendorDep,
    db: SessionDep,
) -> ProductEnvelope:
    """List a new product; only approved vendors may sell."""
    if not vendor.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Vendor account is not active",
        )
    product = Product(vendor_id=vendor.id, **payload.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    vendor: VendorDep,
    db: SessionDep,
) -> ProductEnvelope:
    product = _owned_product(db, product_id, vendor.id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, key, value)
    db.commit()
    db.refresh(product)
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.delete("/{product_id}", response_model=StatusMessage)
async def delete_product(product_id: str, vendor: VendorDep, db: SessionDep) -> StatusMessage:
    product = _owned_product(db, product_id, vendor.id)
    db.delete(product)
    db.commit()
    return StatusMessage(message="Product deleted")


def _rating(product: Product) -> ProductRating:
    return ProductRating(average=product.rating_average, count=product.rating_count)


def _review_response(review: ProductReview, author: str | None) -> ReviewResponse:
    return ReviewResponse.model_validate(review).model_copy(update={"author": author})


@router.get("/{product_id}/reviews", response_model=ReviewList)
async def list_reviews(product_id: str, db: SessionDep) -> ReviewList:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    rows = db.execute(
        select(ProductReview, Customer.username)
        .outerjoin(Customer, Customer.id == ProductReview.customer_id)
        .where(ProductReview.product_id == product.id)
        .order_by(ProductReview.created_at.desc(), ProductReview.id.desc())
    ).all()
    return ReviewList(
        reviews=[_review_response(review, username) for review, username in rows],
        rating=_rating(product),
    )


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    product_id: str,
    payload: ReviewCreate,
    customer: CustomerDep,
    db: SessionDep,
) -> ReviewEnvelope:
    """Review a product once and refresh its rating summary.

    Raises:
        HTTPException: 404 for an unknown product, 400 if this customer has
            already reviewed it.
    """
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    already_reviewed = db.scalar(
        select(ProductReview.id).where(
            ProductReview.product_id == product.id,
            ProductReview.customer_id == customer.id,
        )
    )
    if already_reviewed is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already reviewed this product",
        )

    review = ProductReview(
        product_id=product.id,
        customer_id=customer.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    db.add(review)
    db.flush()

    count, average = db.execute(
        select(func.count(ProductReview.id), func.avg(ProductReview.rating)).where(
            ProductReview.product_id == product.id
        )
    ).one()
    product.rating_count = int(count)
    product.rating_average = round(float(average or 0.0), 2)
    db.commit()
    db.refresh(review)

    return ReviewEnvelope(
        review=_review_response(review, customer.username),
        rating=_rating(product),
    )

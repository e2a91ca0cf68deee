# src/sheworks/api/v1/endpoints/admin.py
"""Admin panel endpoints for the SheWorks API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from sheworks.models import Customer, Order, Product, Vendor
from sheworks.models.vendor import (
    VENDOR_STATUS_ACTIVE,
    VENDOR_STATUS_PENDING,
    VENDOR_STATUS_SUSPENDED,
)
from sheworks.schemas.admin import (
    AdminCustomer,
    AdminCustomerList,
    AdminVendor,
    AdminVendorList,
    DashboardStats,
)
from sheworks.schemas.common import StatusMessage
from sheworks.schemas.product import ProductEnvelope, ProductResponse

from ..dependencies import AdminDep, SessionDep

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

# Orders in these states do not count towards revenue.
_NON_REVENUE_STATUSES = ("cancelled", "refunded")


def _get_or_404(db: Session, model: type, object_id: str, label: str):  # type: ignore[no-untyped-def]
    instance = db.get(model, object_id)
    if instance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return instance


def _count(db: Session, model: type, *conditions) -> int:  # type: ignore[no-untyped-def]
    return int(db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0)


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(admin: AdminDep, db: SessionDep) -> DashboardStats:
    revenue = db.scalar(
        select(func.coalesce(func.sum(Order.total), 0.0)).where(
            Order.status.not_in(_NON_REVENUE_STATUSES)
        )
    )
    return DashboardStats(
        customers=_count(db, Customer),
        vendors=_count(db, Vendor),
        active_vendors=_count(db, Vendor, Vendor.status == VENDOR_STATUS_ACTIVE),
        pending_vendors=_count(db, Vendor, Vendor.status == VENDOR_STATUS_PENDING),
        products=_count(db, Product),
        orders=_count(db, Order),
        revenue=round(float(revenue or 0.0), 2),
    )


@router.get("/customers", response_model=AdminCustomerList)
async def list_customers(admin: AdminDep, db: SessionDep) -> AdminCustomerList:
    customers = db.scalars(select(Customer).order_by(Customer.created_at.desc()))
    return AdminCustomerList(customers=[AdminCustomer.model_validate(c) for c in customers])


@router.put("/customers/{customer_id}/suspend", response_model=AdminCustomer)
async def suspend_customer(customer_id: str, admin: AdminDep, db: SessionDep) -> AdminCustomer:
    customer = _get_or_404(db, Customer, customer_id, "Customer")
    customer.is_active = False
    db.commit()
    db.refresh(customer)
    logger.info("Admin %s suspended customer %s", admin.id, customer.id)
    return AdminCustomer.model_validate(customer)


@router.delete("/customers/{customer_id}", response_model=StatusMessage)
async def delete_customer(customer_id: str, admin: AdminDep, db: SessionDep) -> StatusMessage:
    customer = _get_or_404(db, Customer, customer_id, "Customer")
    db.delete(customer)
    db.commit()
    logger.info("Admin %s deleted customer %s", admin.id, customer_id)
    return StatusMessage(message="Customer deleted")


@router.get("/vendors", response_model=AdminVendorList)
async def list_vendors(admin: AdminDep, db: SessionDep) -> AdminVendorList:
    vendors = db.scalars(select(Vendor).order_by(Vendor.created_at.desc()))
    return AdminVendorList(vendors=[AdminVendor.model_validate(v) for v in vendors])


@router.put("/vendors/{vendor_id}/activate", response_model=AdminVendor)
async def activate_vendor(vendor_id: str, admin: AdminDep, db: SessionDep) -> AdminVendor:
    """Approve a vendor so they can sell and appear in the messaging directory."""
    vendor = _get_or_404(db, Vendor, vendor_id, "Vendor")
    vendor.status = VENDOR_STATUS_ACTIVE
    vendor.is_verified = True
    db.commit()
    db.refresh(vendor)
    logger.info("Admin %s activated vendor %s", admin.id, vendor.id)
    return AdminVendor.model_validate(vendor)


@router.put("/vendors/{vendor_id}/suspend", response_model=AdminVendor)
async def suspend_vendor(vendor_id: str, admin: AdminDep, db: SessionDep) -> AdminVendor:
    vendor = _get_or_404(db, Vendor, vendor_id, "Vendor")
    vendor.status = VENDOR_STATUS_SUSPENDED
    db.commit()
    db.refresh(vendor)
    logger.info("Admin %s suspended vendor %s", admin.id, vendor.id)
    return AdminVendor.model_validate(vendor)


@router.delete("/vendors/{vendor_id}", response_model=StatusMessage)
async def delete_vendor(vendor_id: str, admin: AdminDep, db: SessionDep) -> StatusMessage:
    """Delete a vendor together with its catalog."""
    vendor = _get_or_404(db, Vendor, vendor_id, "Vendor")
    db.execute(delete(Product).where(Product.vendor_id == vendor.id))
    db.delete(vendor)
    db.commit()
    logger.info("Admin %s deleted vendor %s", admin.id, vendor_id)
    return StatusMessage(message="Vendor deleted")


@router.put("/products/{product_id}/suspend", response_model=ProductEnvelope)
async def suspend_product(product_id: str, admin: AdminDep, db: SessionDep) -> ProductEnvelope:
    product = _get_or_404(db, Product, product_id, "Product")
    product.is_active = False
    db.commit()
    db.refresh(product)
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.delete("/products/{product_id}", response_model=StatusMessage)
async def delete_product(product_id: str, admin: AdminDep, db: SessionDep) -> StatusMessage:
    product = _get_or_404(db, Product, product_id, "Product")
    db.delete(product)
    db.commit()
    return StatusMessage(message="Product deleted")


@router.delete("/orders/{order_id}", response_model=StatusMessage)
async def delete_order(order_id: str, admin: AdminDep, db: SessionDep) -> StatusMessage:
    order = _get_or_404(db, Order, order_id, "Order")
    db.delete(order)
    db.commit()
    logger.info("Admin %s deleted order %s", admin.id, order_id)
    return StatusMessage(message="Order deleted")

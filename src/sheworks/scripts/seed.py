# src/sheworks/scripts/seed.py
"""
Seed a development database with an administrator, a demo vendor and products.

Run once after creating the schema:

    python -m sheworks.scripts.seed --admin-email admin@sheworks.com

Existing rows are left untouched, so the script can be re-run safely.
"""

import argparse
import os

from sqlalchemy import select
from sqlalchemy.orm import Session

from sheworks.core.security import hash_password
from sheworks.db.session import create_tables, session_scope
from sheworks.models import Admin, Product, Vendor
from sheworks.models.vendor import VENDOR_STATUS_ACTIVE

DEMO_VENDOR_EMAIL = "atelier@sheworks.com"

SAMPLE_PRODUCTS = [
    {
        "name": "Elegant Pearl Necklace",
        "description": "Beautiful handcrafted pearl necklace perfect for any occasion",
        "category": "necklaces",
        "price": 89.99,
        "original_price": 120.00,
        "stock": 15,
        "sku": "NECK001",
        "image_url": "/necklace.png",
        "featured": True,
    },
    {
        "name": "Diamond Stud Earrings",
        "description": "Classic diamond stud earrings with brilliant cut stones",
        "category": "earrings",
        "price": 299.99,
        "original_price": 399.00,
        "stock": 8,
        "sku": "EARR001",
        "image_url": "/earring.png",
        "featured": True,
    },
    {
        "name": "Gold Wedding Ring",
        "description": "Timeless 18k gold band, polished by hand",
        "category": "rings",
        "price": 449.00,
        "original_price": None,
        "stock": 5,
        "sku": "RING001",
        "image_url": "/ring.png",
        "featured": False,
    },
    {
        "name": "Silk Floral Scarf",
        "description": "Lightweight silk scarf with a hand-painted floral print",
        "category": "scarves",
        "price": 59.50,
        "original_price": 75.00,
        "stock": 30,
        "sku": "SCRF001",
        "image_url": "/scarf.png",
        "featured": False,
    },
]


def seed_admin(db: Session, email: str, password: str) -> Admin:
    """Create the administrator account unless one already uses ``email``.

    Args:
        db: Database session
        email: Login email of the administrator
        password: Plain-text password to hash
    """
    admin = db.scalar(select(Admin).where(Admin.email == email))
    if admin is not None:
        print(f"Admin already exists: {email}")
        return admin
    admin = Admin(email=email, password_hash=hash_password(password), name="Administrator")
    db.add(admin)
    db.commit()
    print(f"Created admin: {email}")
    return admin


def seed_vendor(db: Session, password: str) -> Vendor:
    """Create an approved demo vendor to own the sample catalog."""
    vendor = db.scalar(select(Vendor).where(Vendor.email == DEMO_VENDOR_EMAIL))
    if vendor is not None:
        return vendor
    vendor = Vendor(
        business_name="Atelier Amani",
        email=DEMO_VENDOR_EMAIL,
        password_hash=hash_password(password),
        contact_first_name="Amani",
        contact_last_name="Okafor",
        phone="+15550100",
        category="jewelry",
        status=VENDOR_STATUS_ACTIVE,
        is_verified=True,
        rating_average=4.8,
    )
    db.add(vendor)
    db.commit()
    print(f"Created vendor: {DEMO_VENDOR_EMAIL}")
    return vendor


def seed_products(db: Session, vendor: Vendor) -> int:
    """Add any sample products the vendor does not list yet (matched by SKU)."""
    existing = set(db.scalars(select(Product.sku).where(Product.vendor_id == vendor.id)))
    created = 0
    for data in SAMPLE_PRODUCTS:
        if data["sku"] in existing:
            continue
        db.add(Product(vendor_id=vendor.id, **data))
        created += 1
    db.commit()
    print(f"Created {created} products")
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the SheWorks database")
    parser.add_argument("--admin-email", default=os.getenv("SEED_ADMIN_EMAIL", "admin@sheworks.com"))
    parser.add_argument("--admin-password", default=os.getenv("SEED_ADMIN_PASSWORD", "admin123"))
    parser.add_argument("--vendor-password", default=os.getenv("SEED_VENDOR_PASSWORD", "vendor123"))
    parser.add_argument("--no-products", action="store_true", help="Skip the sample catalog")
    args = parser.parse_args()

    create_tables()
    with session_scope() as db:
        seed_admin(db, args.admin_email, args.admin_password)
        vendor = seed_vendor(db, args.vendor_password)
        if not args.no_products:
            seed_products(db, vendor)


if __name__ == "__main__":
    main()

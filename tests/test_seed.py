# tests/test_seed.py
from sqlalchemy import func, select

from sheworks.models import Admin, Product
from sheworks.scripts.seed import SAMPLE_PRODUCTS, seed_admin, seed_products, seed_vendor


def test_seed_is_idempotent(db_session) -> None:
    admin = seed_admin(db_session, "ops@sheworks.com", "changeme")
    assert seed_admin(db_session, "ops@sheworks.com", "changeme").id == admin.id
    assert db_session.scalar(select(func.count()).select_from(Admin)) == 1

    vendor = seed_vendor(db_session, "vendor-pass")
    assert vendor.is_active
    assert seed_products(db_session, vendor) == len(SAMPLE_PRODUCTS)
    assert seed_products(db_session, vendor) == 0
    assert db_session.scalar(select(func.count()).select_from(Product)) == len(SAMPLE_PRODUCTS)

# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-sheworks")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("REDIS_URL", None)
os.environ.pop("DEEPL_API_KEY", None)
os.environ.pop("STRIPE_SECRET_KEY", None)

from sheworks.api.v1.dependencies import get_translation_gateway
from sheworks.core.security import create_access_token, hash_password
from sheworks.db.session import Base
from sheworks.db.session import get_db as app_get_session
from sheworks.main import app as fastapi_app
from sheworks.models import Admin, Customer, Product, Vendor
from sheworks.models.vendor import VENDOR_STATUS_ACTIVE
from sheworks.services.translation import (
    InMemoryTranslationCache,
    TranslationError,
    TranslationGateway,
)

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password123"


class FakeProvider:
    """Translation provider that tags text with the target language."""

    def __init__(self, name: str = "fake", fail: bool = False, enabled: bool = True) -> None:
        self.name = name
        self.fail = fail
        self.enabled = enabled
        self.calls: list[tuple[str, str, str]] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if self.fail:
            raise TranslationError(f"{self.name} unavailable")
        return f"[{target_lang}] {text}"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def make_provider() -> type[FakeProvider]:
    """Return the fake provider class so tests can build provider chains."""
    return FakeProvider


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def translation_gateway(fake_provider: FakeProvider) -> TranslationGateway:
    """Gateway backed by an in-process provider so no test reaches the network."""
    return TranslationGateway(
        [fake_provider],
        InMemoryTranslationCache(ttl_seconds=3600, max_entries=100),
        batch_concurrency=2,
    )


@pytest.fixture(autouse=True)
def override_translation_gateway(
    app: FastAPI, translation_gateway: TranslationGateway
) -> Iterator[None]:
    app.dependency_overrides[get_translation_gateway] = lambda: translation_gateway
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_translation_gateway, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def auth_headers(participant: Any) -> dict[str, str]:
    token = create_access_token(participant.id, participant.kind)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash the shared test password once; bcrypt is deliberately slow."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture()
def customer(db_session: Session, password_hash: str) -> Iterator[Customer]:
    """Create and return a persisted customer."""
    customer = Customer(
        username="amara",
        email="amara@example.com",
        password_hash=password_hash,
        first_name="Amara",
        last_name="Diallo",
        preferred_language="en",
    )
    db_session.add(customer)
    db_session.flush()
    db_session.refresh(customer)
    yield customer


@pytest.fixture()
def other_customer(db_session: Session, password_hash: str) -> Iterator[Customer]:
    """Create and return a second persisted customer who reads French."""
    customer = Customer(
        username="lucie",
        email="lucie@example.com",
        password_hash=password_hash,
        first_name="Lucie",
        last_name="Martin",
        preferred_language="fr",
    )
    db_session.add(customer)
    db_session.flush()
    db_session.refresh(customer)
    yield customer


@pytest.fixture()
def vendor(db_session: Session, password_hash: str) -> Iterator[Vendor]:
    """Create and return an approved, verified vendor."""
    vendor = Vendor(
        business_name="Atelier Amani",
        email="atelier@example.com",
        password_hash=password_hash,
        contact_first_name="Amani",
        contact_last_name="Okafor",
        phone="+15550100",
        category="jewelry",
        status=VENDOR_STATUS_ACTIVE,
        is_verified=True,
        rating_average=4.5,
    )
    db_session.add(vendor)
    db_session.flush()
    db_session.refresh(vendor)
    yield vendor


@pytest.fixture()
def other_vendor(db_session: Session, password_hash: str) -> Iterator[Vendor]:
    """Create and return a second approved vendor."""
    vendor = Vendor(
        business_name="Maison Soie",
        email="soie@example.com",
        password_hash=password_hash,
        contact_first_name="Nadia",
        contact_last_name="Haddad",
        phone="+15550101",
        category="accessories",
        status=VENDOR_STATUS_ACTIVE,
        is_verified=True,
        rating_average=4.9,
    )
    db_session.add(vendor)
    db_session.flush()
    db_session.refresh(vendor)
    yield vendor


@pytest.fixture()
def admin(db_session: Session, password_hash: str) -> Iterator[Admin]:
    admin = Admin(email="admin@example.com", password_hash=password_hash, name="Root")
    db_session.add(admin)
    db_session.flush()
    db_session.refresh(admin)
    yield admin


@pytest.fixture()
def customer_headers(customer: Customer) -> dict[str, str]:
    return auth_headers(customer)


@pytest.fixture()
def vendor_headers(vendor: Vendor) -> dict[str, str]:
    return auth_headers(vendor)


@pytest.fixture()
def admin_headers(admin: Admin) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture()
def product(db_session: Session, vendor: Vendor) -> Iterator[Product]:
    """A listed product with stock owned by ``vendor``."""
    product = Product(
        vendor_id=vendor.id,
        name="Pearl Necklace",
        description="Handcrafted pearl necklace",
        category="necklaces",
        price=100.0,
        stock=5,
        sku="NECK001",
    )
    db_session.add(product)
    db_session.flush()
    db_session.refresh(product)
    yield product


@pytest.fixture()
def other_product(db_session: Session, other_vendor: Vendor) -> Iterator[Product]:
    """A listed product owned by ``other_vendor``."""
    product = Product(
        vendor_id=other_vendor.id,
        name="Silk Scarf",
        description="Hand-painted silk scarf",
        category="scarves",
        price=50.0,
        stock=10,
        sku="SCRF001",
    )
    db_session.add(product)
    db_session.flush()
    db_session.refresh(product)
    yield product


ADDRESS = {
    "firstName": "Amara",
    "lastName": "Diallo",
    "email": "amara@example.com",
    "phone": "+15550123",
    "street": "1 Market St",
    "city": "Lagos",
    "state": "LA",
    "zipCode": "100001",
    "country": "NG",
}


def build_order_body(
    items: list[dict[str, Any]],
    payment: dict[str, Any] | None = None,
    shipping: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "items": items,
        "billingAddress": ADDRESS,
        "shippingAddress": ADDRESS,
        "payment": payment or {"method": "card"},
        "shipping": shipping or {"method": "standard", "cost": 5.0},
    }


@pytest.fixture()
def order_body() -> Any:
    """Return a builder for checkout request bodies."""
    return build_order_body


@pytest.fixture()
def headers_for() -> Any:
    """Return the helper that builds bearer headers for any participant."""
    return auth_headers

"""Shared fixtures: fakeredis-backed job store, in-memory SQLite session factory."""

from __future__ import annotations

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stylist.db.base import Base
import stylist.db.model  # noqa: F401  registers models on Base.metadata
from stylist.db.model import Brand, Product
from stylist.jobs.job_store import JobStore


@pytest.fixture
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    yield client
    client.flushall()


@pytest.fixture
def job_store(redis_client) -> JobStore:
    return JobStore(redis_client, key_prefix="test", max_attempts=3, processing_ttl=300)


@pytest.fixture
def session_factory():
    # one shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    yield TestingSessionLocal
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def brand(session_factory) -> Brand:
    with session_factory() as db:
        b = Brand(id="brand-1", name="Linen Co", shop_domain="linen-co.myshopify.com")
        db.add(b)
        db.commit()
        return b


@pytest.fixture
def product(session_factory, brand) -> Product:
    with session_factory() as db:
        p = Product(
            id="prod-1",
            brand_id=brand.id,
            source_product_id="1001",
            title="Linen Shirt",
            description_html="<p>Soft  <b>linen</b> shirt</p>",
            product_type="Shirt",
            vendor="Linen Co",
            tags='["summer", "linen"]',
            color_primary="navy",
        )
        db.add(p)
        db.commit()
        return p

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from proppool.api.deps import get_join_limiter
from proppool.config import get_settings
from proppool.db import get_db
from proppool.domain.types import PropRecord
from proppool.models import Base
from proppool.services.catalog import CURATED_CATALOG


@pytest.fixture
def catalog_props() -> dict[str, PropRecord]:
    """Curated catalog as pure records keyed by prop key (id == sort_order)."""
    return {
        entry.key: PropRecord(
            id=entry.sort_order,
            key=entry.key,
            sort_order=entry.sort_order,
            question=entry.question,
            prop_type=entry.prop_type,
            options=entry.options,
            auto_resolve=entry.auto_resolve,
            rule=entry.rule,
            category=entry.category,
            threshold=entry.threshold,
            stat_key=entry.stat_key,
            player_name=entry.player_name,
        )
        for entry in CURATED_CATALOG
    }


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def session(session_factory: sessionmaker) -> Iterator[Session]:
    with session_factory() as db:
        yield db


@pytest.fixture
def client(monkeypatch, session_factory: sessionmaker) -> Iterator[TestClient]:
    monkeypatch.setenv("ADMIN_SECRET", "letmein")
    monkeypatch.setenv("ALLOWED_PLAYER_NAMES", "Sam,Adam,Brian")
    monkeypatch.setenv("JOIN_RATE_LIMIT_MAX", "3")
    monkeypatch.delenv("LOCK_TIME", raising=False)
    get_settings.cache_clear()
    get_join_limiter.cache_clear()

    from proppool.main import app

    def override_get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_settings.cache_clear()
    get_join_limiter.cache_clear()

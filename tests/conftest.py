# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import fakeredis
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")

from solo_stage.api.dependencies import SessionDep
from solo_stage.api.endpoints import posts as posts_endpoints
from solo_stage.core.settings import settings
from solo_stage.db.session import build_engine, create_tables
from solo_stage.db.session import get_db as app_get_session
from solo_stage.main import app as fastapi_app
from solo_stage.models import Post
from solo_stage.repositories import PostRepository
from solo_stage.schemas.session import SessionIdentity
from solo_stage.services.kv import reset_kv_client, use_kv_client
from solo_stage.services.post_ids import PostIdAllocator
from solo_stage.services.posts import PostService
from solo_stage.services.sessions import SessionStore

ADMIN_EMAIL = "owner@example.com"
BASE_TIME = datetime(2025, 11, 12, 14, 30, 45, tzinfo=UTC)


class TickingClock:
    """Clock returning scripted instants; advances one second per call by default."""

    def __init__(self, start: datetime = BASE_TIME, script: list[int] | None = None) -> None:
        self.start = start
        self.script = list(script) if script is not None else None
        self._counter = count()

    def __call__(self) -> datetime:
        if self.script is not None:
            offset = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        else:
            offset = next(self._counter)
        return self.start + timedelta(seconds=offset)


class RecordingSleep:
    """Async sleep stand-in that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def kv() -> Iterator[fakeredis.FakeRedis]:
    """Install an in-memory Redis as the shared key-value store."""
    client = fakeredis.FakeRedis(decode_responses=True)
    use_kv_client(client)
    try:
        yield client
    finally:
        reset_kv_client()


@pytest.fixture(autouse=True)
def admin_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    monkeypatch.setattr(settings, "allowed_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "site_url", "https://blog.example")


@pytest.fixture()
def make_post(session_factory: sessionmaker[Session]) -> Callable[..., str]:
    """Insert a post in its own session and return its id."""

    def _make_post(
        post_id: str,
        *,
        content: str = "hello",
        is_pinned: bool = False,
        created_at: datetime | None = None,
    ) -> str:
        with session_factory() as session:
            moment = created_at or datetime.strptime(post_id, "%Y%m%d%H%M%S").replace(tzinfo=UTC)
            session.add(
                Post(
                    id=post_id,
                    content=content,
                    is_pinned=is_pinned,
                    created_at=moment,
                    updated_at=moment,
                )
            )
            session.commit()
        return post_id

    return _make_post


@pytest.fixture()
def pinned_ids(session_factory: sessionmaker[Session]) -> Callable[[], list[str]]:
    def _pinned() -> list[str]:
        with session_factory() as session:
            return sorted(PostRepository(session).pinned_ids())

    return _pinned


@pytest.fixture()
def app(
    session_factory: sessionmaker[Session],
    kv: fakeredis.FakeRedis,
) -> Iterator[FastAPI]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    clock = TickingClock()

    def _post_service_override(db: SessionDep) -> PostService:
        allocator = PostIdAllocator(PostRepository(db), clock=clock, sleep=RecordingSleep())
        return PostService(db, allocator=allocator)

    fastapi_app.dependency_overrides[app_get_session] = _get_session_override
    fastapi_app.dependency_overrides[posts_endpoints.get_post_service] = _post_service_override
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_token(kv: fakeredis.FakeRedis) -> str:
    """Create a session for the allow-listed admin."""
    store = SessionStore(kv, ttl_seconds=settings.session_ttl_seconds)
    return store.create(SessionIdentity(email=ADMIN_EMAIL, name="Owner"))


@pytest.fixture()
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Cookie": f"{settings.session_cookie_name}={admin_token}"}

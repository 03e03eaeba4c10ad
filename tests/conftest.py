# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from phochak.core.security import create_access_token
from phochak.core.settings import Settings
from phochak.db.session import Base
from phochak.db.session import get_db as app_get_session
from phochak.main import app as fastapi_app
from phochak.models import Post, PostCategory, Shorts, ShortsState, User

TEST_DB_URL = "sqlite://"

_PROVIDER_ID_COUNTER = count(1)
_TEST_SETTINGS_INSTANCE = Settings(
    SHORTS_STREAMING_URL_PREFIX_HEAD="https://stream.test/hls/",
    SHORTS_STREAMING_URL_PREFIX_TAIL="/index.m3u8",
    THUMBNAIL_URL_PREFIX_HEAD="https://img.test/thumb/",
    THUMBNAIL_URL_PREFIX_TAIL="_01.jpg",
)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN until the first DML; emit it ourselves so SAVEPOINTs nest.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

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
    # Each session-level commit or rollback only touches a SAVEPOINT, so the
    # outer transaction can discard everything the test wrote.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

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
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance with fixed URL templates."""
    return _TEST_SETTINGS_INSTANCE


def _make_user(db_session: Session, nickname: str) -> User:
    user = User(
        provider="KAKAO",
        provider_id=f"kakao-{next(_PROVIDER_ID_COUNTER)}",
        nickname=nickname,
        push_token=f"fcm-{nickname}",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> Iterator[User]:
    """Create and return a persisted test user."""
    yield _make_user(db_session, "tester")


@pytest.fixture()
def other_user(db_session: Session) -> Iterator[User]:
    """Create and return a second persisted user."""
    yield _make_user(db_session, "other")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture()
def test_post(db_session: Session, test_user: User) -> Iterator[Post]:
    """Create a baseline post without video."""
    post = Post(user_id=test_user.id, category=PostCategory.CAFE)
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    yield post


@pytest.fixture()
def pending_shorts(db_session: Session, test_settings: Settings) -> Iterator[Shorts]:
    """Create an in-progress Shorts row for upload key ``abc123``."""
    shorts = Shorts(
        upload_key="abc123",
        shorts_url=f"{test_settings.shorts_streaming_url_prefix_head}abc123"
        f"{test_settings.shorts_streaming_url_prefix_tail}",
        thumbnail_url=f"{test_settings.thumbnail_url_prefix_head}abc123"
        f"{test_settings.thumbnail_url_prefix_tail}",
        state=ShortsState.IN_PROGRESS,
    )
    db_session.add(shorts)
    db_session.commit()
    db_session.refresh(shorts)
    yield shorts

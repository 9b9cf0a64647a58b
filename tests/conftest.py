"""Shared fixtures: a throwaway SQLite database, fake senders and a recording transport."""

from __future__ import annotations

import os
import sys
import tempfile
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = (
    f"sqlite:///{Path(tempfile.gettempdir()) / 'innovatefund_test_bootstrap.db'}"
)
os.environ["SECRET_KEY"] = "test-secret"
for _name in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "FIREBASE_SERVICE_ACCOUNT",
    "OPENAI_API_KEY",
):
    os.environ.pop(_name, None)

from innovatefund.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from innovatefund.application.use_cases.ideas import create_idea  # noqa: E402
from innovatefund.domain.entities import User  # noqa: E402
from innovatefund.infrastructure import database  # noqa: E402
from innovatefund.infrastructure.notifications import NotificationDispatcher  # noqa: E402
from innovatefund.infrastructure.realtime import (  # noqa: E402
    ChannelManager,
    ConnectionRegistry,
)
from innovatefund.infrastructure.repositories import UserRepository  # noqa: E402
from innovatefund.infrastructure.security import get_password_hash  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def test_database(tmp_path: Path):
    """Bind the session factory to a fresh SQLite file for every test."""

    database.configure_database(f"sqlite:///{tmp_path / 'innovatefund.db'}")
    database.initialize_database()
    yield
    database.drop_database()
    database.engine.dispose()


@pytest.fixture
def session():
    with database.SessionLocal() as db:
        yield db


@pytest.fixture(scope="session")
def password_hash() -> str:
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
def make_user(password_hash: str):
    """Insert a principal directly through the repository."""

    def _make_user(
        name: str,
        *,
        email: str | None = None,
        user_type: str = "innovator",
        push_token: str | None = None,
        notifications_enabled: bool = True,
        is_active: bool = True,
    ) -> User:
        with database.SessionLocal() as db:
            return UserRepository(db).create(
                User(
                    id=None,
                    name=name,
                    email=email or f"{name.lower().replace(' ', '.')}@example.com",
                    password=password_hash,
                    user_type=user_type,
                    push_token=push_token,
                    notifications_enabled=notifications_enabled,
                    is_active=is_active,
                )
            )

    return _make_user


class RecordingTransport:
    """Collect every emit instead of talking to Socket.IO."""

    def __init__(self) -> None:
        self.emitted: list[tuple[str, Any, str]] = []
        self.failing: set[str] = set()

    async def emit(self, event: str, data: Any, *, to: str) -> None:
        if to in self.failing:
            raise ConnectionError(f"connection {to} is gone")
        self.emitted.append((event, data, to))

    def events(self, event: str, sid: str | None = None) -> list[Any]:
        return [
            data
            for name, data, target in self.emitted
            if name == event and (sid is None or target == sid)
        ]

    def clear(self) -> None:
        self.emitted.clear()


class FakePushSender:
    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self.delay = 0.0

    def send(self, *, token: str, title: str, body: str, data: Mapping[str, Any]) -> str:
        self.calls.append({"token": token, "title": title, "body": body, "data": dict(data)})
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return f"projects/test/messages/{len(self.calls)}"


class FakeEmailSender:
    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self.result = True

    def send(
        self, *, to: str, subject: str, template_id: str, data: Mapping[str, Any]
    ) -> bool:
        self.calls.append(
            {"to": to, "subject": subject, "template_id": template_id, "data": dict(data)}
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def registry():
    registry = ConnectionRegistry()
    registry.start()
    yield registry
    registry.shutdown()


@pytest.fixture
def channels(registry: ConnectionRegistry, transport: RecordingTransport) -> ChannelManager:
    return ChannelManager(registry, transport)


@pytest.fixture
def make_dispatcher(
    channels: ChannelManager,
    push_sender: FakePushSender,
    email_sender: FakeEmailSender,
):
    def _make_dispatcher(**overrides: Any) -> NotificationDispatcher:
        options: dict[str, Any] = {
            "session_factory": database.SessionLocal,
            "push_sender": push_sender,
            "email_sender": email_sender,
            "delivery_timeout": 2.0,
            "persistence_timeout": 2.0,
        }
        options.update(overrides)
        dispatcher = NotificationDispatcher(channels, **options)
        dispatcher.start()
        return dispatcher

    return _make_dispatcher


@pytest.fixture
def dispatcher(make_dispatcher) -> NotificationDispatcher:
    return make_dispatcher()


@pytest.fixture
def make_idea():
    def _make_idea(creator: User, **overrides: Any):
        values: dict[str, Any] = {
            "creator_id": creator.id,
            "title": "Solar Water Purifier",
            "description": "Portable purifier powered entirely by the sun.",
            "category": "environment",
            "funding_goal": 10_000,
        }
        values.update(overrides)
        with database.SessionLocal() as db:
            return create_idea(db, **values)

    return _make_idea

"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from datetime import datetime

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"

from townhall.config import get_settings  # noqa: E402

get_settings.cache_clear()

from townhall.domain.entities import (  # noqa: E402
    NotificationContent,
    NotificationRecord,
    NotificationStatus,
)
from townhall.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from townhall.infrastructure.notifications import NotificationChangeFeed  # noqa: E402
from townhall.infrastructure.repositories import (  # noqa: E402
    MembershipRepository,
    NotificationRepository,
)


@pytest.fixture()
def engine(tmp_path):
    """Return an engine bound to a fresh SQLite database file."""

    engine = build_engine(f"sqlite:///{tmp_path / 'townhall_test.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    with session_factory() as db:
        yield db


@pytest.fixture()
def change_feed() -> NotificationChangeFeed:
    return NotificationChangeFeed()


@pytest.fixture()
def seed_notifications(session_factory) -> Callable[..., list[str]]:
    """Insert notifications for a user and return their ids in insertion order."""

    def _seed(
        user_id: str,
        *,
        reads: Sequence[bool] = (False,),
        community_id: str = "community-1",
        post_id: str = "post-1",
        category_tag: str = "generalDiscussion",
        created_at: datetime | None = None,
    ) -> list[str]:
        records = [
            NotificationRecord(
                id=None,
                user_id=user_id,
                community_id=community_id,
                post_id=post_id,
                content=NotificationContent(
                    title="Road closure",
                    body="Main St closed for repairs",
                    source_id=post_id,
                    source_category_tag=category_tag,
                ),
                created_at=created_at,
                status=NotificationStatus(read=read),
            )
            for read in reads
        ]
        with session_factory() as db:
            saved = NotificationRepository(db).create_many(records)
        return [record.id for record in saved]

    return _seed


@pytest.fixture()
def add_member(session_factory) -> Callable[..., None]:
    def _add(user_id: str, community_id: str = "community-1", **kwargs) -> None:
        with session_factory() as db:
            MembershipRepository(db).add(user_id, community_id, **kwargs)

    return _add


@pytest.fixture()
def read_states(session_factory) -> Callable[[str], dict[str, bool]]:
    """Return ``{notification_id: status.read}`` for a user."""

    def _read(user_id: str) -> dict[str, bool]:
        with session_factory() as db:
            records = NotificationRepository(db).list_for_user(user_id, limit=None)
        return {record.id: record.status.read for record in records}

    return _read

"""
Posts API: Post SQLAlchemy Model
================================

What:  ORM model representing the `posts` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; init_models() creates the table.
Who:   Used by PostService for CRUD operations.

Table Design:
    - Integer primary key assigned by the database on insert
    - title limited to 120 characters (mirrors the validation rule)
    - content is TEXT: no length cap
    - tags stored as a JSON array; portable between PostgreSQL and SQLite
    - created_at / updated_at in UTC, never client-settable
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from posts_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp on every backend.

    PostgreSQL returns aware values, SQLite returns naive ones; both are
    normalized to UTC so a freshly flushed Post and a re-read Post compare
    equal and serialize identically.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Post(Base):
    """
    A published article.

    Lifecycle:
        1. Created by PostService.create_post (database assigns id)
        2. Mutated in place by PostService.update_post (only supplied fields)
        3. Removed permanently by PostService.delete_post
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Ordered list of tag strings; empty list when none were supplied
    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Python-side defaults keep the values available right after flush,
    # without a refresh round trip.
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', category='{self.category}')>"

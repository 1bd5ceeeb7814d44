"""
Base model class for all SQLAlchemy models.

WHY: Centralizing common model functionality (timestamps, ID) in a base class
ensures consistency across all models and reduces code duplication.

Column names keep the camelCase field names of the stored documents
(createdAt, updatedAt, ...) so existing data stays readable; Python
attributes are snake_case.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Repository clock used to resolve server timestamps."""
    return datetime.now(timezone.utc)


def new_document_id() -> str:
    """Opaque, repository-assigned document id."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    WHY: DeclarativeBase provides the foundation for SQLAlchemy 2.0 models
    with improved type hints and async support.
    """

    pass


class CreatedAtMixin:
    """
    Mixin for append-only documents that only carry a creation timestamp.

    WHY: Lead and quotation submissions are never updated, so an updatedAt
    column would always equal createdAt.
    """

    created_at = Column("createdAt", DateTime(timezone=True), default=utc_now, nullable=False)


class TimestampMixin(CreatedAtMixin):
    """
    Mixin to add createdAt and updatedAt timestamps to models.

    WHY: Timestamps are resolved by the repository at write time; callers
    never compute them.
    """

    updated_at = Column(
        "updatedAt",
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class PrimaryKeyMixin:
    """
    Mixin to add an opaque string primary key to models.

    WHY: Document ids are opaque strings assigned by the repository, never
    by callers.
    """

    id = Column(String(32), primary_key=True, default=new_document_id)

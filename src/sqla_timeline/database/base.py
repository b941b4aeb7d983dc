"""SQLAlchemy declarative base, common mixins and portable column types."""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import INET, JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from sqla_timeline.constants import MAX_IPV6_LENGTH


# JSONB / INET / BIGSERIAL on PostgreSQL, portable types elsewhere
JSONDocument = JSON().with_variant(JSONB(), "postgresql")
NetworkAddress = String(MAX_IPV6_LENGTH).with_variant(INET(), "postgresql")
BigIntegerKey = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """Base class for the bundled timeline models."""

    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

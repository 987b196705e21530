"""
Module: finops_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.  Provides
    the type annotation map for consistent column types and the TrackedBase
    mixin for audit timestamps.
Architecture position: Kernel > DB.  Imports only db.types.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Integer keys: transaction and approval ids are BigInteger values
      allocated by SequenceService, never by database autoincrement.
    - Audit timestamps: TrackedBase provides created_at, updated_at and
      created_by for every mutable record.
"""

from datetime import datetime
from typing import ClassVar

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from finops_kernel.db.types import UTCDateTime


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Contract:
        Every ORM model inherits from Base (or TrackedBase) and declares its
        own primary key.  The type_annotation_map keeps column types
        consistent across the schema.

    Guarantees:
        - datetime maps to UTCDateTime (aware UTC on every backend).
        - int maps to BigInteger -- safe for monotonic sequences.
        - str maps to String(255) unless a column overrides it.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: UTCDateTime(),
        int: BigInteger,
        str: String(255),
    }


class TrackedBase(Base):
    """
    Abstract base with audit timestamps and creator tracking.

    Contract:
        Services set created_at on insert and updated_at on every status
        change, both taken from the injected Clock so tests are
        deterministic.  created_by records the identity that issued the
        creating command.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    created_by: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
    )

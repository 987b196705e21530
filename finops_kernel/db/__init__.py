"""Database layer - engine, base classes, and column types."""

from finops_kernel.db.base import Base, TrackedBase
from finops_kernel.db.engine import (
    build_engine,
    build_session_factory,
    create_tables,
    drop_tables,
    read_scope,
    session_scope,
)
from finops_kernel.db.types import (
    NULL_IDENTITY,
    UINT256_MAX,
    UInt256,
    is_null_identity,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "session_scope",
    "read_scope",
    "create_tables",
    "drop_tables",
    "Base",
    "TrackedBase",
    "UInt256",
    "NULL_IDENTITY",
    "UINT256_MAX",
    "is_null_identity",
]

"""
Module: finops_kernel.db.types
Responsibility: Column types and identity helpers shared by every model.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - Amounts are unsigned 256-bit integers.  UInt256 stores them as
      zero-padded 78-digit strings so that no backend narrows them to a
      64-bit integer or a float, and lexical order equals numeric order.
    - Timestamps are timezone-aware UTC on the way in and on the way out,
      including on backends (SQLite) that drop the offset.
    - The null identity is a single canonical value; ``is_null_identity``
      is the only sanctioned check.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.types import TypeDecorator

NULL_IDENTITY = "0x0000000000000000000000000000000000000000"

UINT256_MAX = 2**256 - 1
_UINT256_DIGITS = len(str(UINT256_MAX))


def is_null_identity(identity: str | None) -> bool:
    """True for None, the empty string, and the all-zero address."""
    return identity is None or identity == "" or identity == NULL_IDENTITY


class UInt256(TypeDecorator):
    """
    Unsigned 256-bit integer stored as a fixed-width decimal string.

    Guarantees:
        - process_bind_param: int -> 78-character zero-padded string.
        - process_result_value: string -> int.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = String(_UINT256_DIGITS)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = int(value)
        if value < 0 or value > UINT256_MAX:
            raise ValueError(f"Value out of uint256 range: {value}")
        return str(value).zfill(_UINT256_DIGITS)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp.

    Guarantees:
        - process_bind_param: aware datetime -> UTC; naive values are
          taken to be UTC already.
        - process_result_value: always returns an aware UTC datetime.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

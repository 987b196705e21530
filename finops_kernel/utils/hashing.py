"""
Deterministic hashing for the notification log.

Every log entry stores the SHA-256 of its canonical payload and a chained
hash over (seq, event type, payload hash, previous hash).  Both must be
reproducible from the stored row alone so that ``validate_chain`` can
recompute them.
"""

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Any


def _json_serializer(obj: Any) -> Any:
    """
    Serializer for the non-JSON types an event payload may carry.

    Raises:
        TypeError: If object type is not supported.
    """
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()

    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonicalize_json(data: dict | list | Any) -> str:
    """
    Convert data to canonical JSON string.

    Keys are sorted, no whitespace.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_serializer,
    )


def hash_payload(payload: dict) -> str:
    """SHA-256 hex digest (64 characters) of the canonical JSON payload."""
    canonical = canonicalize_json(payload)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def hash_platform_event(
    seq: int,
    event_type: str,
    payload_hash: str,
    prev_hash: str | None,
) -> str:
    """
    Compute the chained hash for a notification log entry.

    The hash includes the previous entry's hash, so altering or removing
    any earlier entry changes every later expected hash.
    """
    data = "|".join([str(seq), event_type, payload_hash, prev_hash or "GENESIS"])
    return hashlib.sha256(data.encode("utf-8")).hexdigest()

"""Kernel utilities."""

from finops_kernel.utils.hashing import (
    canonicalize_json,
    hash_payload,
    hash_platform_event,
)

__all__ = [
    "canonicalize_json",
    "hash_payload",
    "hash_platform_event",
]

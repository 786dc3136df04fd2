"""Commitment digests binding a task's inputs."""

from __future__ import annotations

import hashlib


def hash_commitment(*parts: str) -> bytes:
    """SHA-256 over the UTF-8 bytes of each part, concatenated in order with no separator.

    The order of parts is part of the commitment: downstream consumers
    recompute it from the same ordered values.
    """
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
    return digest.digest()


def format_commitment(digest: bytes) -> str:
    """Render a digest as 0x-prefixed lowercase hex."""
    return f"0x{digest.hex()}"

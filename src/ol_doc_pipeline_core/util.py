from __future__ import annotations

import hashlib


def compute_checksum(data: bytes) -> str:
    """
    SHA-256 of the raw upload, as 64 lowercase hex chars.

    Two uploads with the same checksum are byte-identical; the second one is rejected
    before any processing happens.
    """
    return hashlib.sha256(data).hexdigest()


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()

import hashlib
from typing import Iterable


def sha256_hex(raw: str) -> str:
    """Hex SHA-256 of the UTF-8 encoding of ``raw``."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def content_fingerprint(parts: Iterable[str]) -> str:
    """
    Generate a deterministic fingerprint for a set of content parts.

    Parts are sorted before hashing, so the digest depends only on which
    parts are present and never on the order they were produced in.

    Args:
        parts: Canonical strings describing the content

    Returns:
        SHA256 hexdigest of the newline-joined, sorted parts
    """
    return sha256_hex("\n".join(sorted(parts)))


def short_id(digest: str, length: int = 12) -> str:
    trimmed = digest.strip()
    return trimmed[:length]

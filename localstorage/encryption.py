"""Hashing helpers."""

import hashlib


def get_md5_by_str(text: str) -> str:
    """Return the lower-case hexadecimal MD5 digest of a UTF-8 string."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()  # noqa: S324
"""Expiring HMAC-SHA256 signatures."""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import time
from dataclasses import dataclass

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_EXPIRE_RE = re.compile(r"[+-]?\d+")


class SignError(Exception):
    """Base class for signature verification failures."""


class SignExpiredError(SignError):
    def __init__(self) -> None:
        super().__init__("sign expired")


class SignInvalidError(SignError):
    def __init__(self) -> None:
        super().__init__("sign invalid")


class ExpireInvalidError(SignError):
    def __init__(self) -> None:
        super().__init__("expire invalid")


class ExpireMissingError(SignError):
    def __init__(self) -> None:
        super().__init__("expire missing")


@dataclass(frozen=True)
class HMACSign:
    """Signs data together with an expiry timestamp (0 means never expires)."""

    secret_key: bytes

    def sign(self, data: str, expire: int) -> str:
        """Return "<urlsafe base64 digest>:<expire>"."""
        stamp = str(expire)
        digest = hmac.new(
            self.secret_key, f"{data}:{stamp}".encode("utf-8"), hashlib.sha256
        ).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii") + ":" + stamp

    def verify(self, data: str, signature: str) -> None:
        """Check a signature; raise a SignError subclass if it does not hold."""
        stamp = signature.split(":")[-1]
        if stamp == "":
            raise ExpireMissingError()
        if not _EXPIRE_RE.fullmatch(stamp):
            raise ExpireInvalidError()
        expires = int(stamp)
        if not _INT64_MIN <= expires <= _INT64_MAX:
            raise ExpireInvalidError()
        if expires != 0 and expires < int(time.time()):
            raise SignExpiredError()
        if not hmac.compare_digest(self.sign(data, expires), signature):
            raise SignInvalidError()


def new_hmac_sign(secret: bytes) -> HMACSign:
    """Create a signer for the given secret key."""
    return HMACSign(secret_key=secret)
"""Request-level policy shared by the v1 and v2 HTTP APIs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import urlparse

LOCAL_ADDRESSES = ("::1", "127.0.0.1")
DOC_PREFIX = "/doc"
OPENAPI_FILE = "/openapi.yaml"


def _default_methods() -> list[str]:
    return ["POST", "GET", "OPTIONS", "PUT", "DELETE"]


def _default_allow_headers() -> list[str]:
    return [
        "Authorization",
        "Content-Length",
        "X-CSRF-Token",
        "Content-Type",
        "Access-Control-Allow-Origin",
        "Access-Control-Allow-Headers",
        "Access-Control-Allow-Methods",
        "Connection",
        "Origin",
        "X-Requested-With",
    ]


def _default_expose_headers() -> list[str]:
    return [
        "Content-Length",
        "Access-Control-Allow-Origin",
        "Access-Control-Allow-Headers",
    ]


@dataclass
class CorsSettings:
    """Cross-origin policy applied to every API response."""

    allow_origins: list[str] = field(default_factory=lambda: ["*"])
    allow_methods: list[str] = field(default_factory=_default_methods)
    allow_headers: list[str] = field(default_factory=_default_allow_headers)
    expose_headers: list[str] = field(default_factory=_default_expose_headers)
    max_age: int = 172800
    allow_credentials: bool = True

    def _allowed_origin(self, origin: str) -> str | None:
        for allowed in self.allow_origins:
            if allowed == "*" or allowed == origin:
                return allowed
        return None

    def headers(self, origin: str) -> dict[str, str]:
        """Return the CORS response headers for a request from ``origin``.

        Without an Origin header, or from an origin that is not allowed, only
        ``Vary: Origin`` is returned.
        """
        result = {"Vary": "Origin"}
        if not origin:
            return result
        allowed = self._allowed_origin(origin)
        if allowed is None:
            return result
        result["Access-Control-Allow-Origin"] = allowed
        if self.allow_credentials:
            result["Access-Control-Allow-Credentials"] = "true"
        if self.expose_headers:
            result["Access-Control-Expose-Headers"] = ", ".join(self.expose_headers)
        result["Access-Control-Allow-Methods"] = ",".join(self.allow_methods)
        result["Access-Control-Allow-Headers"] = ",".join(self.allow_headers)
        if self.max_age > 0:
            result["Access-Control-Max-Age"] = str(self.max_age)
        return result


def api_path_from_server_url(url: str) -> str:
    """Return the base path of the API served at ``url``, without a trailing slash."""
    return urlparse(url).path.rstrip("/")


def doc_path_for(api_path: str) -> str:
    """Return where the documentation of an API base path is served."""
    return DOC_PREFIX + api_path


def serve_doc(path: str, doc_path: str, doc_html: str, doc_yaml: str) -> str:
    """Return the documentation body for a request path.

    The HTML page is served at ``doc_path`` and the OpenAPI document below it;
    any other path gets an empty body.
    """
    if path == doc_path:
        return doc_html
    if path == doc_path + OPENAPI_FILE:
        return doc_yaml
    return ""


def is_local_address(ip: str) -> bool:
    """Requests from the loopback address skip token checks."""
    return ip in LOCAL_ADDRESSES


def _header(headers: Mapping[str, str], name: str) -> str:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value or ""
    return ""


def v1_token(headers: Mapping[str, str], query: Mapping[str, str]) -> str:
    """Return the v1 token: the Authorization header, else the ``token`` query value."""
    value = _header(headers, "Authorization")
    if value:
        return value
    return query.get("token", "") or ""


def v2_token(headers: Mapping[str, str]) -> str:
    """Return the v2 token, taken from the Authorization header only."""
    return _header(headers, "Authorization")
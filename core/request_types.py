"""Shared request and result data types."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class NoBody:
    """No body is attached to the outbound request."""


@dataclass(frozen=True)
class JsonBody:
    """Buffered inbound body, re-sent as JSON."""

    value: Any


@dataclass(frozen=True)
class StreamBody:
    """Inbound body passed through as an unbuffered byte stream."""

    stream: AsyncIterator[bytes]


RequestBody = NoBody | JsonBody | StreamBody


@dataclass(frozen=True)
class InboundRequest:
    """Request as received under the mount prefix.

    ``target`` is the raw path and may still carry ``?query``.
    """

    method: str
    target: str
    content_type: str | None = None
    cookie: str | None = None
    body: RequestBody = field(default_factory=NoBody)


@dataclass(frozen=True)
class ForwardHeaders:
    """The only headers ever sent to the backend."""

    content_type: str | None = None
    cookie: str | None = None

    def as_dict(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.content_type:
            headers["Content-Type"] = self.content_type
        if self.cookie:
            headers["Cookie"] = self.cookie
        return headers


@dataclass(frozen=True)
class OutboundRequest:
    """Request prepared for the backend."""

    method: str
    url: str
    headers: ForwardHeaders
    content: str | AsyncIterator[bytes] | None = None


@dataclass(frozen=True)
class ProxyResult:
    """Response handed back to the host runtime."""

    status_code: int
    body: Any
    content_type: str | None = None
    set_cookies: tuple[str, ...] = ()

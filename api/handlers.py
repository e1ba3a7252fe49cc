"""FastAPI route handlers."""

import json

from fastapi import Request, Response

from core.body import carries_body, is_multipart, parse_buffered_body
from core.headers import JSON_CONTENT_TYPE
from core.request_types import InboundRequest, NoBody, ProxyResult, RequestBody, StreamBody

# The HTTP server refuses to write a body for these.
NO_CONTENT_STATUSES = frozenset({204, 304})


async def read_inbound(request: Request) -> InboundRequest:
    """Describe a FastAPI request without decoding its path or query."""
    content_type = request.headers.get("content-type")
    return InboundRequest(
        method=request.method,
        target=_raw_target(request),
        content_type=content_type,
        cookie=request.headers.get("cookie"),
        body=await _read_body(request, content_type),
    )


def render_result(result: ProxyResult) -> Response:
    """Turn a ProxyResult into a response, one Set-Cookie header per cookie."""
    if isinstance(result.body, str):
        content = result.body
        media_type = result.content_type
    else:
        content = json.dumps(result.body, allow_nan=False)
        media_type = result.content_type or JSON_CONTENT_TYPE
    if result.status_code < 200 or result.status_code in NO_CONTENT_STATUSES:
        content = b""

    response = Response(content=content, status_code=result.status_code)
    if media_type:
        response.headers["content-type"] = media_type
    for cookie in result.set_cookies:
        response.headers.append("set-cookie", cookie)
    return response


async def handle_forward(request: Request) -> Response:
    """Forward any request under the mount prefix to the backend."""
    inbound = await read_inbound(request)
    forwarder = request.app.state.forwarder
    result = await forwarder.forward(inbound)
    return render_result(result)


async def _read_body(request: Request, content_type: str | None) -> RequestBody:
    if not carries_body(request.method):
        return NoBody()
    if is_multipart(content_type):
        return StreamBody(request.stream())
    return parse_buffered_body(await request.body(), content_type)


def _raw_target(request: Request) -> str:
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    # Some servers leave the query on raw_path.
    path = path.split("?", 1)[0]
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path

"""Inbound body selection and outbound body encoding."""

import json
import math
from json import JSONDecodeError
from typing import Any
from urllib.parse import parse_qs

from core.headers import HeaderBuilder
from core.request_types import (
    BODY_METHODS,
    ForwardHeaders,
    JsonBody,
    NoBody,
    RequestBody,
    StreamBody,
)

MULTIPART_FORM_DATA = "multipart/form-data"
FORM_URLENCODED = "application/x-www-form-urlencoded"


def loads_strict(text: str) -> Any:
    """Parse JSON, rejecting the NaN and Infinity literals Python would accept."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_float)


def carries_body(method: str) -> bool:
    """Only POST, PUT, PATCH and DELETE ever forward a body."""
    return method.upper() in BODY_METHODS


def is_multipart(content_type: str | None) -> bool:
    return bool(content_type) and MULTIPART_FORM_DATA in content_type


def parse_buffered_body(raw: bytes, content_type: str | None) -> RequestBody:
    """Turn a fully read inbound body into ``JsonBody`` or ``NoBody``.

    Form-encoded bodies become a mapping, anything else is tried as JSON
    and kept as plain text when it does not parse. Values that would be
    falsy in JavaScript (null, false, 0, "") are treated as no body.
    """
    if not raw:
        return NoBody()

    text = raw.decode("utf-8", errors="replace")
    if content_type and FORM_URLENCODED in content_type:
        value: Any = _parse_form(text)
    else:
        try:
            value = loads_strict(text)
        except (JSONDecodeError, ValueError):
            value = text

    if not _is_present(value):
        return NoBody()
    return JsonBody(value)


def encode_body(
    body: RequestBody,
    headers: ForwardHeaders,
    header_builder: HeaderBuilder,
) -> tuple[Any, ForwardHeaders]:
    """Return (outbound content, outbound headers) for a body variant."""
    if isinstance(body, StreamBody):
        return body.stream, headers
    if isinstance(body, JsonBody):
        content = json.dumps(body.value, separators=(",", ":"), allow_nan=False)
        return content, header_builder.with_json_content_type(headers)
    if isinstance(body, NoBody):
        return None, headers
    raise TypeError(f"Unsupported body variant: {type(body).__name__}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON literal: {name}")


def _parse_float(literal: str) -> float | None:
    # Overflowing literals (1e999) serialize as null, as in JavaScript.
    value = float(literal)
    return None if math.isinf(value) else value


def _parse_form(text: str) -> dict[str, Any]:
    """Parse urlencoded text; repeated keys collapse into lists."""
    parsed = parse_qs(text, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def _is_present(value: Any) -> bool:
    # Empty dicts and lists still count as a body.
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True

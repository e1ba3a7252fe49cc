"""Backend response mapping."""

from json import JSONDecodeError
from typing import Any

import httpx

from core.body import loads_strict
from core.headers import JSON_CONTENT_TYPE
from core.request_types import ProxyResult

SUCCESS_ENVELOPE = {"success": True}


class ResponseMapper:
    """Map a backend ``httpx.Response`` onto a ``ProxyResult``."""

    def map(self, response: httpx.Response) -> ProxyResult:
        """Copy status, content-type and cookies; normalize the body."""
        content_type = response.headers.get("content-type")
        return ProxyResult(
            status_code=response.status_code,
            body=self.map_body(response.text, content_type),
            content_type=content_type,
            # get_list keeps each Set-Cookie separate; commas in Expires would
            # break a joined value.
            set_cookies=tuple(response.headers.get_list("set-cookie")),
        )

    def map_body(self, text: str, content_type: str | None) -> Any:
        """Apply the empty / JSON / raw-text rules to a response body."""
        if not text:
            return dict(SUCCESS_ENVELOPE)

        if content_type and JSON_CONTENT_TYPE in content_type:
            try:
                return loads_strict(text)
            except (JSONDecodeError, ValueError):
                return {**SUCCESS_ENVELOPE, "data": text}

        return text


def error_result(exc: BaseException) -> ProxyResult:
    """Build the fixed 500 result for a failed forward."""
    return ProxyResult(status_code=500, body={"error": error_message(exc)})


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__

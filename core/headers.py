"""Header construction for backend requests."""

from core.request_types import ForwardHeaders, InboundRequest

JSON_CONTENT_TYPE = "application/json"


class HeaderBuilder:
    """Project inbound headers onto the backend allow-list."""

    def build_backend_headers(self, inbound: InboundRequest) -> ForwardHeaders:
        """Pass through content-type and cookie, nothing else."""
        return ForwardHeaders(
            content_type=inbound.content_type or None,
            cookie=inbound.cookie or None,
        )

    def with_json_content_type(self, headers: ForwardHeaders) -> ForwardHeaders:
        """Force the JSON content-type, keeping the cookie."""
        return ForwardHeaders(content_type=JSON_CONTENT_TYPE, cookie=headers.cookie)

"""HTTP forwarding of inbound requests to the backend."""

from collections.abc import Callable
from typing import Any

import httpx
from rich.console import Console

from core.body import carries_body, encode_body
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, NoBody, OutboundRequest, ProxyResult
from core.response import ResponseMapper, error_message, error_result
from core.target import build_target_url

console = Console(stderr=True)


class Forwarder:
    """Forward one inbound request to the backend and map the response back."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        mount_prefix: str,
        logger: RequestLogger,
        header_builder: HeaderBuilder | None = None,
        response_mapper: ResponseMapper | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._mount_prefix = mount_prefix
        self._logger = logger
        self._headers = header_builder or HeaderBuilder()
        self._mapper = response_mapper or ResponseMapper()

    async def forward(self, inbound: InboundRequest) -> ProxyResult:
        """Issue exactly one backend request; failures become a 500 result."""
        target_url = inbound.target
        try:
            outbound = self.prepare(inbound)
            target_url = outbound.url
            self._log(self._logger.log_forward, outbound.method, outbound.url, outbound.headers.as_dict())
            response = await self._send(outbound)
            result = self._mapper.map(response)
        except Exception as e:
            self._log(self._logger.log_error, inbound.method, target_url, error_message(e))
            return error_result(e)

        self._log(self._logger.log_response, inbound.method, target_url, result.status_code)
        return result

    def prepare(self, inbound: InboundRequest) -> OutboundRequest:
        """Build the outbound request: URL, allow-listed headers and body."""
        url = build_target_url(self._base_url, self._mount_prefix, inbound.target)
        headers = self._headers.build_backend_headers(inbound)
        body = inbound.body if carries_body(inbound.method) else NoBody()
        content, headers = encode_body(body, headers, self._headers)
        return OutboundRequest(
            method=inbound.method,
            url=url,
            headers=headers,
            content=content,
        )

    async def _send(self, outbound: OutboundRequest) -> httpx.Response:
        request = self._client.build_request(
            outbound.method,
            outbound.url,
            headers=outbound.headers.as_dict(),
            content=outbound.content,
        )
        # Not streamed: the body is read and the connection released here.
        return await self._client.send(request)

    @staticmethod
    def _log(log: Callable[..., None], *args: Any) -> None:
        """Call a logger hook; a failing logger never changes the result."""
        try:
            log(*args)
        except Exception as e:
            console.print(f"[red]Request logging failed:[/red] {error_message(e)}")

"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_forward
from core.config import Config
from core.protocols import RequestLogger
from core.request_types import HTTP_METHODS
from services.upstream import Forwarder


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    prefix = config.proxy.mount_prefix.rstrip("/")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        backend_client = httpx.AsyncClient(
            timeout=config.backend.timeout,
            transport=transport,
        )
        app.state.forwarder = Forwarder(
            client=backend_client,
            base_url=config.backend.base_url,
            mount_prefix=prefix,
            logger=logger,
        )
        try:
            yield
        finally:
            await backend_client.aclose()

    app = FastAPI(title="Backend API Proxy", version="0.1.0", lifespan=lifespan)

    @app.api_route(prefix or "/", methods=list(HTTP_METHODS))
    async def proxy_root(request: Request):
        return await handle_forward(request)

    @app.api_route(prefix + "/{path:path}", methods=list(HTTP_METHODS))
    async def proxy_path(path: str, request: Request):
        return await handle_forward(request)

    return app

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import Response

from tmdb_proxy.config import ProxyConfig, settings
from tmdb_proxy.models import ErrorKind, InboundRequest, OutboundResponse, ProxyResult
from tmdb_proxy.services import TMDbAPIClient

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"]


class ForwardingHandler:
    """
    Forwards one inbound request to TMDb with the server-side api_key
    and maps the outcome onto a JSON response. handle() never raises.
    """

    def __init__(self, config: ProxyConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.api_client = TMDbAPIClient(config, transport=transport)
        self.logger = logging.getLogger(__name__)

    async def handle(self, inbound: InboundRequest) -> OutboundResponse:
        try:
            result = await self._forward(inbound)
        except Exception as e:
            self.logger.exception(f"Error in TMDb proxy: {e}")
            result = ProxyResult.failure(ErrorKind.INTERNAL, 500, "Internal Server Error", details=str(e))
        return self.to_response(result)

    async def handle_event(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        """Serverless form of handle(): event dict in, {statusCode, headers, body} out."""
        try:
            inbound = InboundRequest.from_event(event)
        except Exception as e:
            self.logger.exception(f"Unreadable event: {e}")
            result = ProxyResult.failure(ErrorKind.INTERNAL, 500, "Internal Server Error", details=str(e))
            return self.to_response(result).to_event()
        response = await self.handle(inbound)
        return response.to_event()

    async def _forward(self, inbound: InboundRequest) -> ProxyResult:
        if not self.config.api_key:
            self.logger.error("TMDB_API_KEY is not set in environment variables.")
            return ProxyResult.failure(
                ErrorKind.CONFIGURATION, 500,
                "Server configuration error: TMDb API key missing.",
            )

        if inbound.method.upper() != "GET":
            self.logger.warning(f"Forwarding {inbound.method} {inbound.path} to TMDb as GET")

        url = self.api_client.build_url(inbound.path, inbound.query)
        return await self.api_client.fetch(url)

    @staticmethod
    def to_response(result: ProxyResult) -> OutboundResponse:
        return OutboundResponse.from_content(result.status_code, result.body())


def build_router(handler: ForwardingHandler) -> APIRouter:
    router = APIRouter()
    prefix = handler.config.prefix

    async def proxy(request: Request):
        """
        Relays the request to TMDb. The prefix is stripped from the path,
        query params are kept and api_key is added server-side.
        """
        outbound = await handler.handle(InboundRequest.from_request(request))
        return Response(
            content=outbound.body,
            status_code=outbound.status_code,
            headers=outbound.headers,
        )

    router.add_api_route(prefix or "/", proxy, methods=PROXY_METHODS, include_in_schema=False)
    router.add_api_route(f"{prefix}/{{path:path}}", proxy, methods=PROXY_METHODS)
    return router


def lambda_handler(event: Mapping[str, Any], context: Any) -> Dict[str, Any]:
    handler = ForwardingHandler(ProxyConfig.from_settings(settings))
    return asyncio.run(handler.handle_event(event))

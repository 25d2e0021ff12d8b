# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI

from tmdb_proxy import __version__
from tmdb_proxy.config import ProxyConfig, settings
from tmdb_proxy.reverse_proxy import ForwardingHandler, build_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[ProxyConfig] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    config = config or ProxyConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"TMDb Proxy starting, forwarding {config.prefix or '/'} to {config.base_url}")
        if not config.api_key:
            logger.warning("TMDB_API_KEY is not set; proxied requests will fail with 500")
        yield
        logger.info("TMDb Proxy shutting down...")

    app = FastAPI(
        title="TMDb Proxy",
        description="Forwards requests to the TMDb API with a server-side API key",
        version=__version__,
        lifespan=lifespan
    )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "TMDb Proxy"}

    @app.get("/")
    async def root():
        return {
            "message": "TMDb Proxy",
            "version": __version__,
            "documentation": "/docs"
        }

    app.include_router(build_router(ForwardingHandler(config, transport=transport)))
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )

import httpx
import logging
from typing import Dict, Mapping, Optional
from urllib.parse import quote, urlencode

from tmdb_proxy.config import ProxyConfig
from tmdb_proxy.models import ErrorKind, ProxyResult

logger = logging.getLogger(__name__)

API_KEY_PARAM = "api_key"


def relative_path(path: str, prefix: str) -> str:
    """
    Strip the routing prefix and make sure the result starts with '/'.
    '/.netlify/functions/tmdb-proxy/movie/popular' -> '/movie/popular'
    """
    relative = path.replace(prefix, "", 1) if prefix else path
    return relative if relative.startswith("/") else f"/{relative}"


def merge_query(query: Mapping[str, str], api_key: str) -> Dict[str, str]:
    params = dict(query)
    # a client supplied api_key is always replaced
    params[API_KEY_PARAM] = api_key
    return params


def redact(url: str, api_key: str) -> str:
    return url.replace(urlencode({API_KEY_PARAM: api_key}), f"{API_KEY_PARAM}=***")


class TMDbAPIClient:
    """Issues the single upstream GET against TMDb."""

    def __init__(self, config: ProxyConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.transport = transport

    def build_url(self, path: str, query: Mapping[str, str]) -> str:
        params = merge_query(query, self.config.api_key or "")
        # a literal "?" or "#" in the path must not open the query
        quoted = quote(relative_path(path, self.config.prefix), safe="/")
        return f"{self.base_url}{quoted}?{urlencode(params)}"

    async def fetch(self, url: str) -> ProxyResult:
        logger.info(f"Proxying request to TMDb: {redact(url, self.config.api_key or '')}")

        try:
            # no explicit timeout, the client default applies
            async with httpx.AsyncClient(transport=self.transport, follow_redirects=True) as client:
                response = await client.get(url)

                if not response.is_success:
                    error_text = response.text
                    logger.error(f"TMDb API returned an error: {response.status_code} - {error_text}")
                    return ProxyResult.failure(
                        ErrorKind.UPSTREAM,
                        response.status_code,
                        f"TMDb API error: {response.reason_phrase}",
                        details=error_text,
                    )

                return ProxyResult.success(response.json())

        except httpx.RequestError as e:
            logger.error(f"Request error contacting TMDb: {e}")
            return ProxyResult.failure(ErrorKind.INTERNAL, 500, "Internal Server Error", details=str(e))
        except ValueError as e:
            logger.error(f"TMDb returned a malformed body: {e}")
            return ProxyResult.failure(ErrorKind.INTERNAL, 500, "Internal Server Error", details=str(e))

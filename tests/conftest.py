import httpx
import pytest

from tmdb_proxy.config import ProxyConfig

PREFIX = "/.netlify/functions/tmdb-proxy"


class RecordingUpstream:
    """Stands in for TMDb; records every request it receives."""

    def __init__(self, responder=None):
        self.requests = []
        self.responder = responder or (lambda request: httpx.Response(200, json={"results": []}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def config():
    return ProxyConfig(api_key="secret-key", base_url="https://api.themoviedb.org/3", prefix=PREFIX)


@pytest.fixture
def upstream():
    return RecordingUpstream()


@pytest.fixture
def make_upstream():
    return RecordingUpstream

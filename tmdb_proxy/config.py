import os
from dataclasses import dataclass
from typing import Optional


class Settings:
    # TMDb Configuration
    TMDB_API_KEY: Optional[str] = os.getenv("TMDB_API_KEY")
    TMDB_BASE_URL: str = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")

    # Routing prefix stripped before forwarding
    TMDB_PROXY_PREFIX: str = os.getenv("TMDB_PROXY_PREFIX", "/.netlify/functions/tmdb-proxy")

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))


@dataclass(frozen=True)
class ProxyConfig:
    """Values a ForwardingHandler needs, fixed at construction."""
    api_key: Optional[str]
    base_url: str = "https://api.themoviedb.org/3"
    prefix: str = "/.netlify/functions/tmdb-proxy"

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip('/'))
        object.__setattr__(self, "prefix", self.prefix.rstrip('/'))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProxyConfig":
        return cls(
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_BASE_URL,
            prefix=settings.TMDB_PROXY_PREFIX,
        )


settings = Settings()

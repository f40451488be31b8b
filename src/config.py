"""
Worker configuration loaded from environment variables.

All tunables of the interception cache (origin, partition generation,
API host pattern, pre-population list, storage backend) are validated
through a pydantic model so a bad deployment fails at startup instead
of on the first intercepted request.
"""
import os
from typing import List, Literal
from urllib.parse import urljoin

from pydantic import BaseModel, Field, field_validator

# Files fetched into the static partition at install time
DEFAULT_PRECACHE_URLS = [
    "./Anki Dashboard.html",
    "./manifest.json",
    "https://cdn.tailwindcss.com",
    "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap",
    "https://fonts.gstatic.com",
    "https://pbs.twimg.com/profile_images/1785701767357120512/d0vRt0Gk_400x400.png",
]


class WorkerSettings(BaseModel):
    """
    Settings for the offline interception cache.

    Example:
        >>> settings = WorkerSettings(origin="https://study.example.com")
        >>> settings.absolute_precache_urls()[0]
        'https://study.example.com/Anki%20Dashboard.html'
    """

    origin: str = Field(
        "http://localhost:8000",
        description="Origin of the host application (scheme://host[:port])",
    )
    cache_prefix: str = Field(
        "anki-dashboard",
        min_length=1,
        pattern="^[A-Za-z0-9_-]+$",
        description="Namespace prefix for partition names",
    )
    cache_generation: int = Field(
        1,
        ge=1,
        description="Generation tag of the partitions this build uses",
    )
    api_host_pattern: str = Field(
        "api.jsonbin.io",
        min_length=1,
        description="URL substring identifying remote-data-API requests",
    )
    precache_urls: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PRECACHE_URLS),
        description="URLs fetched into the static partition on install",
    )
    app_entry: str = Field(
        "./Anki Dashboard.html",
        description="Document opened when a notification is explored",
    )
    cache_backend: Literal["redis", "memory"] = Field(
        "redis",
        description="Storage backend for cache partitions",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        description="Redis connection URL for the durable backend",
    )
    network_timeout_seconds: float = Field(
        30.0,
        gt=0,
        description="Timeout for network fetches",
    )

    @field_validator("origin")
    @classmethod
    def strip_origin(cls, v: str) -> str:
        """Normalize the origin to have no trailing slash."""
        origin = v.strip().rstrip("/")
        if not origin.startswith(("http://", "https://")):
            raise ValueError("origin must start with http:// or https://")
        return origin

    @classmethod
    def from_env(cls) -> "WorkerSettings":
        """
        Build settings from environment variables.

        Unset variables fall back to the model defaults.

        Raises:
            pydantic.ValidationError: If any value is invalid
        """
        env_map = {
            "origin": "SW_ORIGIN",
            "cache_prefix": "SW_CACHE_PREFIX",
            "cache_generation": "SW_CACHE_GENERATION",
            "api_host_pattern": "SW_API_HOST_PATTERN",
            "app_entry": "SW_APP_ENTRY",
            "cache_backend": "CACHE_BACKEND",
            "redis_url": "REDIS_URL",
            "network_timeout_seconds": "NETWORK_TIMEOUT_SECONDS",
        }
        values = {
            field: os.getenv(var)
            for field, var in env_map.items()
            if os.getenv(var) is not None
        }

        precache = os.getenv("SW_PRECACHE_URLS")
        if precache is not None:
            values["precache_urls"] = [
                url.strip() for url in precache.split(",") if url.strip()
            ]

        return cls(**values)

    def resolve(self, url: str) -> str:
        """Resolve a possibly relative URL against the origin."""
        return urljoin(self.origin + "/", url).replace(" ", "%20")

    def absolute_precache_urls(self) -> List[str]:
        return [self.resolve(url) for url in self.precache_urls]

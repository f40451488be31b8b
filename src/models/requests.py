"""
Pydantic model for intercepted outbound requests.

An InterceptedRequest is the engine's view of one request issued by
the host application: method, absolute URL, destination type, headers
and (for non-GET requests that pass through) a body.
"""
from enum import Enum
from typing import Dict, Tuple
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestDestination(str, Enum):
    """What the host application intends to do with the response."""

    DOCUMENT = "document"
    SCRIPT = "script"
    STYLE = "style"
    IMAGE = "image"
    FONT = "font"
    MANIFEST = "manifest"
    EMPTY = ""


class InterceptedRequest(BaseModel):
    """
    Outbound request seen by the interception layer.

    Attributes:
        method: HTTP method, upper-cased
        url: Absolute request URL
        destination: Destination type (document, script, style, ...)
        headers: Request headers with lower-cased names
        body: Request body (only meaningful for pass-through requests)
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field("GET", min_length=1, description="HTTP method")
    url: str = Field(..., min_length=1, description="Absolute request URL")
    destination: RequestDestination = Field(
        RequestDestination.EMPTY,
        description="Destination type of the request",
    )
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("url")
    @classmethod
    def require_absolute_url(cls, v: str) -> str:
        parts = urlsplit(v)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Request URL must be absolute: {v}")
        return v

    @field_validator("headers")
    @classmethod
    def lower_header_names(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {name.lower(): value for name, value in v.items()}

    @property
    def identity(self) -> Tuple[str, str]:
        """Request identity used as the cache key: (method, url)."""
        return (self.method, self.url)

    @property
    def is_read(self) -> bool:
        return self.method == "GET"

    def is_same_origin(self, origin: str) -> bool:
        """Check whether the request targets the given origin."""
        request_parts = urlsplit(self.url)
        origin_parts = urlsplit(origin)
        return (
            request_parts.scheme == origin_parts.scheme
            and request_parts.netloc == origin_parts.netloc
        )

    @classmethod
    def from_httpx(cls, request: httpx.Request) -> "InterceptedRequest":
        """
        Build an InterceptedRequest from an httpx request.

        The destination is taken from the ``Sec-Fetch-Dest`` header when
        present, the way browsers advertise it.

        Note:
            The request body must already be read (httpx does this for
            in-memory content).
        """
        dest = request.headers.get("sec-fetch-dest", "")
        try:
            destination = RequestDestination(dest)
        except ValueError:
            destination = RequestDestination.EMPTY

        return cls(
            method=request.method,
            url=str(request.url),
            destination=destination,
            headers=dict(request.headers),
            body=request.content,
        )

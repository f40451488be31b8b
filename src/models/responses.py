"""
Pydantic response models for the interception cache.

Defines the immutable response snapshot stored in cache partitions,
the offline placeholder payload expected by the host application and
the worker health report.
"""
import base64
import json
from typing import Any, Dict, List

import httpx
from pydantic import BaseModel, ConfigDict, Field


class ResponseSnapshot(BaseModel):
    """
    Immutable capture of an HTTP response.

    Snapshots are what the cache tier stores and what the engine hands
    back to the requester. The body is held as bytes so it can be
    returned any number of times; clone() produces an independent copy
    for storage.

    Example:
        >>> snap = ResponseSnapshot(status=200, body=b"{}")
        >>> snap.ok
        True
    """

    model_config = ConfigDict(frozen=True)

    status: int = Field(..., ge=100, le=599, description="HTTP status code")
    status_text: str = Field("", description="HTTP reason phrase")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Response headers with lower-cased names",
    )
    body: bytes = Field(b"", description="Response body bytes")
    url: str = Field("", description="URL the response was fetched from")

    @property
    def ok(self) -> bool:
        """Whether the response is cacheable (exact 200 status)."""
        return self.status == 200

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json_body(self) -> Any:
        return json.loads(self.body)

    def clone(self) -> "ResponseSnapshot":
        return self.model_copy(update={"headers": dict(self.headers)})

    def to_storage(self) -> str:
        """Serialize to a JSON string (body base64-encoded)."""
        return json.dumps(
            {
                "status": self.status,
                "status_text": self.status_text,
                "headers": self.headers,
                "body": base64.b64encode(self.body).decode("ascii"),
                "url": self.url,
            }
        )

    @classmethod
    def from_storage(cls, raw: str) -> "ResponseSnapshot":
        """
        Deserialize a snapshot written by to_storage().

        Raises:
            ValueError: If the stored data is malformed
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Stored snapshot must be a JSON object, got {type(data).__name__}")

        data["body"] = base64.b64decode(data.get("body", ""))
        return cls(**data)

    @classmethod
    def from_httpx(cls, response: httpx.Response, url: str = "") -> "ResponseSnapshot":
        """Capture a fully read httpx response."""
        return cls(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers={name.lower(): value for name, value in response.headers.items()},
            body=response.content,
            url=url,
        )

    def to_httpx(self, request: httpx.Request | None = None) -> httpx.Response:
        """Convert into an httpx response for the host application."""
        headers = {
            name: value
            for name, value in self.headers.items()
            if name not in ("content-encoding", "transfer-encoding", "content-length")
        }
        return httpx.Response(
            status_code=self.status,
            headers=headers,
            content=self.body,
            request=request,
        )


class OfflineRecord(BaseModel):
    """Dataset shape the host application reads from the data API."""

    model_config = ConfigDict(populate_by_name=True)

    study_tasks: List[Any] = Field(default_factory=list, alias="studyTasks")
    study_progress_state: Dict[str, Any] = Field(
        default_factory=dict, alias="studyProgressState"
    )
    study_daily_progress_state: Dict[str, Any] = Field(
        default_factory=dict, alias="studyDailyProgressState"
    )
    study_tracker_title: str = Field(..., alias="studyTrackerTitle")
    study_tracker_subtitle: str = Field(..., alias="studyTrackerSubtitle")


class OfflinePayload(BaseModel):
    """
    Placeholder body returned for data-API requests when offline.

    Serialized with field aliases so the host application sees
    ``{"record": {"studyTasks": [], ...}}``.
    """

    record: OfflineRecord


class HealthCheckResponse(BaseModel):
    """
    Health report for the interception worker.

    Used by the entry point to verify the worker installed, activated
    and can reach its storage backend.
    """

    status: str = Field(
        ...,
        description="Overall health status (healthy, degraded, unhealthy)",
    )
    state: str = Field(..., description="Lifecycle state of the worker")
    generation: int = Field(..., ge=1, description="Current generation tag")
    partitions: List[str] = Field(
        default_factory=list,
        description="Live partition names",
    )
    components: Dict[str, str] = Field(
        ...,
        description="Health status of individual components",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "state": "active",
                "generation": 1,
                "partitions": ["anki-dashboard-static-v1"],
                "components": {"storage": "healthy", "network": "healthy"},
            }
        }
    )

"""Export request, result and derived value models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ErrorKind(str, Enum):
    """Failure categories surfaced by the export pipeline."""

    INVALID_REQUEST = "invalid_request"
    UNREACHABLE_TARGET = "unreachable_target"
    INVALID_CONTENT_TYPE = "invalid_content_type"
    SESSION_LAUNCH_FAILED = "session_launch_failed"
    NAVIGATION_FAILED = "navigation_failed"
    LOGIN_PAGE_DETECTED = "login_page_detected"
    ASSET_MISSING = "asset_missing"
    RASTERIZATION_FAILED = "rasterization_failed"
    SESSION_TEARDOWN_FAILED = "session_teardown_failed"


class ExportRequest(BaseModel):
    """A single dashboard export, owned by exactly one pipeline run."""

    target_url: str
    credentials: SecretStr = Field(description="Basic auth credentials as user:password")
    width_hint: int = Field(default=1200, gt=0, description="Viewport width in pixels")
    force_kiosk: bool = False
    output_path_hint: str | None = None

    model_config = ConfigDict(frozen=True)


class ContentExtent(BaseModel):
    """Rendered width/height of the dashboard content in CSS pixels."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)


class DocumentMetadata(BaseModel):
    """Title, time range label and output location of a document."""

    title: str
    time_range_label: str
    output_path: str


class PipelineResult(BaseModel):
    """Terminal value of one pipeline run."""

    success: bool
    path: str | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls, path: str) -> "PipelineResult":
        """Build a successful result."""
        return cls(success=True, path=path)

    @classmethod
    def failed(cls, error_kind: ErrorKind, message: str) -> "PipelineResult":
        """Build a failed result."""
        return cls(success=False, error_kind=error_kind, message=message)

    def to_message(self) -> dict[str, Any]:
        """Serialize to the caller-facing result message."""
        if self.success:
            return {"success": True, "path": self.path}
        return {"success": False, "error": self.message or "Unknown error"}

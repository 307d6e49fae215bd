"""Data models for dashboard-pdf."""

from dashboard_pdf.models.export import (
    ContentExtent,
    DocumentMetadata,
    ErrorKind,
    ExportRequest,
    PipelineResult,
)

__all__ = [
    "ContentExtent",
    "DocumentMetadata",
    "ErrorKind",
    "ExportRequest",
    "PipelineResult",
]

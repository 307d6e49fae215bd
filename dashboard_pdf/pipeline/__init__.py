"""Dashboard render-to-PDF pipeline."""

from dashboard_pdf.pipeline.errors import (
    ExportError,
    InvalidContentTypeError,
    InvalidRequestError,
    LoginPageDetectedError,
    NavigationFailedError,
    RasterizationFailedError,
    SessionLaunchError,
    UnreachableTargetError,
)
from dashboard_pdf.pipeline.renderer import Renderer

__all__ = [
    "ExportError",
    "InvalidContentTypeError",
    "InvalidRequestError",
    "LoginPageDetectedError",
    "NavigationFailedError",
    "RasterizationFailedError",
    "SessionLaunchError",
    "UnreachableTargetError",
    "Renderer",
]

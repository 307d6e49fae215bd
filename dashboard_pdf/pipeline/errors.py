"""Typed failures raised by export pipeline stages."""

from dashboard_pdf.models import ErrorKind


class ExportError(Exception):
    """Fatal pipeline failure carrying the error kind reported to the caller."""

    kind: ErrorKind = ErrorKind.RASTERIZATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ExportError):
    kind = ErrorKind.INVALID_REQUEST


class UnreachableTargetError(ExportError):
    kind = ErrorKind.UNREACHABLE_TARGET


class InvalidContentTypeError(ExportError):
    kind = ErrorKind.INVALID_CONTENT_TYPE


class SessionLaunchError(ExportError):
    kind = ErrorKind.SESSION_LAUNCH_FAILED


class NavigationFailedError(ExportError):
    kind = ErrorKind.NAVIGATION_FAILED


class LoginPageDetectedError(ExportError):
    kind = ErrorKind.LOGIN_PAGE_DETECTED


class RasterizationFailedError(ExportError):
    kind = ErrorKind.RASTERIZATION_FAILED

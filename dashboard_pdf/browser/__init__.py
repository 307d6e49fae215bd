"""Browser management module."""

from dashboard_pdf.browser.cdp import CDPClient, CDPError
from dashboard_pdf.browser.chrome import ChromeLauncher, ChromeProcess
from dashboard_pdf.browser.session import BrowserSession, RenderSession, launch_session

__all__ = [
    "CDPClient",
    "CDPError",
    "ChromeLauncher",
    "ChromeProcess",
    "BrowserSession",
    "RenderSession",
    "launch_session",
]

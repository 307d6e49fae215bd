"""Session bootstrap: auth header, target URL rewriting, navigation and login detection."""

import base64
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dashboard_pdf.browser.cdp import CDPError
from dashboard_pdf.browser.session import RenderSession
from dashboard_pdf.config import Settings
from dashboard_pdf.pipeline import scripts
from dashboard_pdf.pipeline.errors import LoginPageDetectedError, NavigationFailedError
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

LOCAL_HOSTNAMES = ("localhost", "127.0.0.1")


def build_basic_auth_header(credentials: str) -> str:
    """Encode "user:password" credentials as a Basic Authorization header value."""
    return "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")


def prepare_target_url(url: str, force_kiosk: bool, localhost_alias: str | None = None) -> str:
    """
    Rewrite the dashboard URL for export.

    Args:
        url: Dashboard URL as supplied by the caller
        force_kiosk: Merge kiosk=true into the query if no kiosk flag is present
        localhost_alias: Host replacing localhost/127.0.0.1, for containerized runs

    Returns:
        URL to navigate to
    """
    parts = urlsplit(url)
    netloc = parts.netloc

    if localhost_alias and parts.hostname in LOCAL_HOSTNAMES:
        host = localhost_alias if parts.port is None else f"{localhost_alias}:{parts.port}"
        userinfo = netloc.rpartition("@")[0]
        netloc = f"{userinfo}@{host}" if userinfo else host
        logger.info("Rewrote local host", host=parts.hostname, alias=localhost_alias)

    query = parts.query
    if force_kiosk:
        params = parse_qsl(query, keep_blank_values=True)
        if not any(key == "kiosk" for key, _ in params):
            logger.info("Kiosk mode not enabled, enabling it")
            params.append(("kiosk", "true"))
            query = urlencode(params)

    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


async def bootstrap_session(
    session: RenderSession,
    url: str,
    auth_header: str,
    width: int,
    settings: Settings,
) -> None:
    """
    Configure the session and load the dashboard.

    Raises:
        NavigationFailedError: Navigation errored or never reached network idle
        LoginPageDetectedError: The loaded page is a login form
    """
    await session.set_extra_headers({"Authorization": auth_header})
    await session.set_viewport(width, settings.initial_viewport_height)

    try:
        await session.navigate(url, timeout=settings.navigation_timeout)
    except CDPError as e:
        raise NavigationFailedError(str(e)) from e

    logger.info("Page loaded", url=url)

    if await session.evaluate(scripts.FIND_LOGIN_MARKER, settings.login_marker_selectors):
        raise LoginPageDetectedError("Login page detected. Check your credentials.")

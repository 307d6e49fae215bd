"""Fail-fast reachability gate run before any browser is launched."""

import httpx

from dashboard_pdf.pipeline.errors import InvalidContentTypeError, UnreachableTargetError
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)


async def check_reachability(
    url: str,
    auth_header: str,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """
    Fetch the target once and verify it serves HTML.

    Args:
        url: Dashboard URL
        auth_header: Value of the Authorization header
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests

    Raises:
        UnreachableTargetError: Transport error or non-success status
        InvalidContentTypeError: Response is not text/html
    """
    logger.info("Checking URL accessibility", url=url)

    async with httpx.AsyncClient(
        timeout=timeout, transport=transport, follow_redirects=True
    ) as client:
        try:
            response = await client.get(url, headers={"Authorization": auth_header})
        except httpx.HTTPError as e:
            raise UnreachableTargetError(f"Unable to access URL: {e}") from e

    if not response.is_success:
        raise UnreachableTargetError(
            f"Unable to access URL. HTTP status: {response.status_code}"
        )

    content_type = response.headers.get("content-type", "")
    if "text/html" not in content_type.lower():
        raise InvalidContentTypeError(
            f"The URL does not serve a dashboard page (content-type: {content_type or 'missing'})"
        )

    logger.debug("Target reachable", status=response.status_code, content_type=content_type)

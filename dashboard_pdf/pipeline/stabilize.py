"""Content stabilization: scroll the dashboard so lazily-rendered panels mount."""

from dataclasses import dataclass

from dashboard_pdf.browser.session import RenderSession
from dashboard_pdf.pipeline import scripts
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StabilizationReport:
    """What a scroll pass did."""

    container: str
    scroll_height: int
    steps: int


async def stabilize(
    session: RenderSession,
    container_selectors: list[str],
    step_px: int,
    pause_ms: int,
    settle_ms: int,
    dispatch_resize: bool = False,
) -> StabilizationReport | None:
    """
    Walk the scroll container top to bottom, then return to the top.

    The first selector matching an element is scrolled; the document body is
    used when none match. There is no signal for "all data loaded", so a slow
    panel may still under-render.

    Returns:
        Report of the pass, or None if the page script failed
    """
    try:
        result = await session.evaluate(
            scripts.SCROLL_THROUGH,
            container_selectors,
            step_px,
            pause_ms,
            settle_ms,
            dispatch_resize,
        )
    except Exception as e:
        logger.warning("Stabilization pass failed, continuing", error=str(e))
        return None

    result = result or {}
    report = StabilizationReport(
        container=str(result.get("container", "body")),
        scroll_height=int(result.get("scrollHeight", 0)),
        steps=int(result.get("steps", 0)),
    )
    logger.info(
        "Stabilization pass complete",
        container=report.container,
        scroll_height=report.scroll_height,
        steps=report.steps,
    )
    return report

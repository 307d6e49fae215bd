"""Print decoration: resize to the content, hide chrome, add header and print styles."""

from dashboard_pdf.browser.session import RenderSession
from dashboard_pdf.config import Settings
from dashboard_pdf.models import ContentExtent, DocumentMetadata
from dashboard_pdf.pipeline import scripts
from dashboard_pdf.pipeline.stabilize import stabilize
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

HEADER_HEIGHT = 60

CONTAINER_SELECTORS = (
    ".dashboard-container",
    ".grafana-app",
    ".main-view",
    ".scroll-canvas",
    ".react-grid-layout",
)


def print_stylesheet(extent: ContentExtent, panel_selectors: list[str]) -> str:
    """
    Build the stylesheet applied before printing.

    Page size matches the extent with zero margins, horizontal overflow is
    hidden, containers lose their margins and padding, and panels take the
    full width and are never split across pages. Only body is offset below
    the header, so content moves down by exactly HEADER_HEIGHT.
    """
    panels = ", ".join(panel_selectors) or ".panel-container"
    containers = ", ".join(CONTAINER_SELECTORS)
    return f"""
@page {{
  size: {extent.width}px {extent.height}px;
  margin: 0;
}}
html, body {{
  margin: 0 !important;
  padding: 0 !important;
  width: 100% !important;
  max-width: 100% !important;
  overflow-x: hidden !important;
}}
body {{
  padding-top: {HEADER_HEIGHT}px !important;
}}
* {{
  box-sizing: border-box !important;
}}
@media print {{
  html, body {{
    overflow-x: hidden !important;
    -webkit-print-color-adjust: exact !important;
    print-color-adjust: exact !important;
  }}
  {containers} {{
    margin: 0 !important;
    padding: 0 !important;
    width: 100% !important;
    max-width: 100% !important;
    overflow-x: hidden !important;
  }}
  {panels} {{
    page-break-inside: avoid !important;
    break-inside: avoid !important;
    width: 100% !important;
    max-width: 100% !important;
  }}
  .react-grid-item {{
    margin: 0 !important;
    page-break-inside: avoid !important;
    break-inside: avoid !important;
  }}
  .dashboard-pdf-header {{
    position: fixed !important;
    top: 0 !important;
    left: 0 !important;
    right: 0 !important;
  }}
}}
"""


async def find_page_title(session: RenderSession, settings: Settings) -> str | None:
    """Look up the dashboard title on the page; None when nothing usable is found."""
    try:
        title = await session.evaluate(
            scripts.FIND_TITLE,
            settings.title_selectors,
            settings.use_panel_heading_title,
        )
    except Exception as e:
        logger.warning("Title lookup failed, falling back to URL", error=str(e))
        return None
    if isinstance(title, str) and title.strip():
        logger.info("Dashboard title fetched from page", title=title.strip())
        return title.strip()
    return None


async def find_page_date(session: RenderSession, settings: Settings) -> str | None:
    """Look up a date label rendered by the dashboard itself."""
    if not settings.date_selectors:
        return None
    try:
        date = await session.evaluate(scripts.FIND_TEXT, settings.date_selectors)
    except Exception as e:
        logger.warning("Date lookup failed, using time range", error=str(e))
        return None
    if isinstance(date, str) and date.strip():
        logger.info("Date fetched from page", date=date.strip())
        return date.strip()
    return None


async def hide_chrome(session: RenderSession, selectors: list[str]) -> int | None:
    """Hide navigation and interactive elements; returns how many were hidden."""
    try:
        hidden = int(await session.evaluate(scripts.HIDE_ELEMENTS, selectors))
    except Exception as e:
        logger.warning("Hiding page chrome failed", error=str(e))
        return None
    logger.debug("Hid page chrome", elements=hidden)
    return hidden


async def insert_header(
    session: RenderSession, metadata: DocumentMetadata, logo_data_url: str | None
) -> bool | None:
    """Prepend the title/time-range band; None when the page rejected it."""
    try:
        await session.evaluate(
            scripts.INSERT_HEADER,
            metadata.title,
            metadata.time_range_label,
            logo_data_url,
            HEADER_HEIGHT,
        )
    except Exception as e:
        logger.warning("Inserting header failed", error=str(e))
        return None
    return True


async def insert_print_styles(session: RenderSession, css: str) -> bool | None:
    try:
        await session.evaluate(scripts.INSERT_STYLESHEET, css)
    except Exception as e:
        logger.warning("Inserting print stylesheet failed", error=str(e))
        return None
    return True


async def decorate(
    session: RenderSession,
    extent: ContentExtent,
    metadata: DocumentMetadata,
    logo_data_url: str | None,
    settings: Settings,
) -> ContentExtent:
    """
    Prepare the measured page for printing.

    Args:
        session: Live render session
        extent: Measured content extent
        metadata: Title and time range shown in the header
        logo_data_url: Branding image, omitted when None
        settings: Export settings

    Returns:
        Extent of the decorated page, including the header band
    """
    await session.set_viewport(extent.width, extent.height)

    # Resizing re-lays out responsive panels
    await stabilize(
        session,
        settings.scroll_container_selectors,
        settings.confirm_scroll_step_px,
        settings.confirm_scroll_pause_ms,
        settings.confirm_scroll_settle_ms,
        dispatch_resize=True,
    )

    await hide_chrome(session, settings.hidden_selectors)

    page_extent = ContentExtent(width=extent.width, height=extent.height + HEADER_HEIGHT)

    header = await insert_header(session, metadata, logo_data_url)
    styled = await insert_print_styles(
        session, print_stylesheet(page_extent, settings.panel_selectors)
    )
    await session.set_viewport(page_extent.width, page_extent.height)

    logger.info(
        "Page decorated",
        title=metadata.title,
        logo=logo_data_url is not None,
        header=header is not None,
        styled=styled is not None,
        height=page_extent.height,
    )
    return page_extent

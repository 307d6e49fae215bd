"""Rasterization: print the decorated page to a single-page PDF."""

from pathlib import Path
from typing import Any

from dashboard_pdf.browser.session import RenderSession
from dashboard_pdf.models import ContentExtent
from dashboard_pdf.pipeline.errors import RasterizationFailedError
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

CSS_PIXELS_PER_INCH = 96


def pdf_params(extent: ContentExtent) -> dict[str, Any]:
    """Page.printToPDF parameters for one page exactly the size of the extent."""
    return {
        "paperWidth": extent.width / CSS_PIXELS_PER_INCH,
        "paperHeight": extent.height / CSS_PIXELS_PER_INCH,
        "marginTop": 0,
        "marginBottom": 0,
        "marginLeft": 0,
        "marginRight": 0,
        "printBackground": True,
        "displayHeaderFooter": False,
        "preferCSSPageSize": False,
        "scale": 1.0,
        "pageRanges": "1",
    }


async def rasterize(session: RenderSession, extent: ContentExtent, output_path: str) -> str:
    """
    Print the page and write the document.

    Args:
        session: Live render session
        extent: Page size in CSS pixels
        output_path: Destination file

    Returns:
        Absolute path of the written document

    Raises:
        RasterizationFailedError: Printing failed or produced no data
    """
    logger.info("Generating PDF", width=extent.width, height=extent.height)
    try:
        data = await session.print_pdf(pdf_params(extent))
    except Exception as e:
        raise RasterizationFailedError(f"PDF generation failed: {e}") from e

    if not data:
        raise RasterizationFailedError("PDF generation returned no data")

    path = Path(output_path).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise RasterizationFailedError(f"Unable to write {path}: {e}") from e

    logger.info("PDF generated", path=str(path), size=len(data))
    return str(path)

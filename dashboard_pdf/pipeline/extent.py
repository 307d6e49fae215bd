"""Extent measurement: the width/height the printed page must have."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dashboard_pdf.browser.session import RenderSession
from dashboard_pdf.models import ContentExtent
from dashboard_pdf.pipeline import scripts
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)


class ContentMeasurement(BaseModel):
    """Raw DOM measurements taken in the page."""

    panel_bottoms: list[float] = Field(default_factory=list, alias="panelBottoms")
    document_heights: list[float] = Field(default_factory=list, alias="documentHeights")
    viewport_width: float = Field(default=0, alias="viewportWidth")

    model_config = ConfigDict(populate_by_name=True)


def compute_extent(
    measurement: ContentMeasurement,
    bottom_padding: int,
    min_height: int,
    fallback_width: int,
) -> ContentExtent:
    """
    Derive the document extent from raw measurements.

    Height is the lowest panel bottom edge plus padding, or the largest of the
    redundant document heights when the page has no panels, never below
    min_height. Width follows the viewport the dashboard was laid out for.

    Args:
        measurement: Values reported by the page
        bottom_padding: Margin added below the lowest panel
        min_height: Height floor
        fallback_width: Width used when the page reports none

    Returns:
        ContentExtent in whole pixels
    """
    if measurement.panel_bottoms:
        height = max(measurement.panel_bottoms) + bottom_padding
    else:
        height = max(measurement.document_heights, default=0)

    height = max(math.ceil(height), min_height, 1)
    width = math.ceil(measurement.viewport_width) if measurement.viewport_width > 0 else fallback_width

    return ContentExtent(width=width, height=height)


async def measure_extent(
    session: RenderSession,
    panel_selectors: list[str],
    bottom_padding: int,
    min_height: int,
    fallback_width: int,
) -> ContentExtent:
    """Measure the stabilized page and compute its extent."""
    raw: dict[str, Any] = await session.evaluate(scripts.MEASURE_CONTENT, panel_selectors)
    measurement = ContentMeasurement.model_validate(raw or {})

    extent = compute_extent(measurement, bottom_padding, min_height, fallback_width)
    logger.info(
        "Calculated dimensions",
        panels=len(measurement.panel_bottoms),
        width=extent.width,
        height=extent.height,
    )
    return extent

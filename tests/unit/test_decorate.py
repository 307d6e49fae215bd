"""Tests for print decoration, branding and stabilization."""

import re
from pathlib import Path

import pytest

from dashboard_pdf.models import ContentExtent, DocumentMetadata
from dashboard_pdf.pipeline import scripts
from dashboard_pdf.pipeline.branding import load_logo, logo_candidates
from dashboard_pdf.pipeline.decorate import (
    HEADER_HEIGHT,
    decorate,
    find_page_date,
    find_page_title,
    print_stylesheet,
)
from dashboard_pdf.pipeline.stabilize import stabilize

METADATA = DocumentMetadata(
    title="CPU Usage",
    time_range_label="March 5, 2024, 01:07 PM to March 5, 2024, 02:07 PM",
    output_path="/tmp/cpu_usage_now-1h_to_now.pdf",
)


def test_print_stylesheet_rules() -> None:
    """Test the stylesheet sizes the page and keeps panels whole."""
    css = print_stylesheet(ContentExtent(width=1200, height=1561), [".panel-container"])

    assert "size: 1200px 1561px" in css
    assert "margin: 0;" in css
    assert "overflow-x: hidden" in css
    assert "break-inside: avoid" in css
    assert ".panel-container" in css
    assert "@media print" in css


def test_print_stylesheet_forces_full_width_panels() -> None:
    """Test the panel rule stretches panels to the page width."""
    css = print_stylesheet(ContentExtent(width=1200, height=1561), [".panel-container"])

    panel_rule = css[css.index(".panel-container {") :].split("}", 1)[0]
    assert "width: 100% !important" in panel_rule
    assert "break-inside: avoid !important" in panel_rule


@pytest.mark.asyncio
async def test_header_offset_matches_page_growth(make_session, settings) -> None:
    """Test content is pushed down by exactly the height the page grows by."""
    extent = ContentExtent(width=1200, height=1501)
    session = make_session()

    page_extent = await decorate(session, extent, METADATA, None, settings)
    css = dict(session.evaluated)[scripts.INSERT_STYLESHEET][0]

    offsets = [int(px) for px in re.findall(r"padding-top:\s*(\d+)px", css)]
    assert re.search(r"html, body \{[^}]*padding: 0 !important;", css)
    assert sum(offsets) == page_extent.height - extent.height


def test_logo_missing_everywhere(tmp_path: Path) -> None:
    """Test a missing logo yields None instead of an error."""
    assert load_logo([tmp_path / "a.png", tmp_path / "b.png"]) is None


def test_logo_first_existing_candidate_wins(tmp_path: Path) -> None:
    """Test candidates are tried in order."""
    second = tmp_path / "second.png"
    second.write_bytes(b"\x89PNG second")
    third = tmp_path / "third.png"
    third.write_bytes(b"\x89PNG third")

    data_url = load_logo([tmp_path / "first.png", second, third])

    assert data_url is not None
    assert data_url.startswith("data:image/png;base64,")
    assert data_url == load_logo([second])


def test_configured_logo_path_is_tried_first(settings, tmp_path: Path) -> None:
    """Test an explicit logo path precedes the default locations."""
    settings.logo_path = str(tmp_path / "brand.png")

    candidates = logo_candidates(settings)

    assert candidates[0] == tmp_path / "brand.png"
    assert Path("/app") / settings.logo_filename in candidates


@pytest.mark.asyncio
async def test_stabilize_reports_pass(make_session) -> None:
    """Test a scroll pass reports its container."""
    session = make_session()

    report = await stabilize(session, [".scrollbar-view"], 200, 100, 500)

    assert report is not None
    assert report.container == ".scrollbar-view"
    assert session.evaluated == [
        (scripts.SCROLL_THROUGH, ([".scrollbar-view"], 200, 100, 500, False))
    ]


@pytest.mark.asyncio
async def test_stabilize_failure_is_not_fatal(make_session) -> None:
    """Test a failing scroll script is swallowed and reported as None."""
    session = make_session(scroll_error=RuntimeError("Execution context was destroyed"))

    assert await stabilize(session, [], 200, 100, 500) is None


@pytest.mark.asyncio
async def test_find_page_title(make_session, settings) -> None:
    """Test the page title is trimmed and blank titles are ignored."""
    assert await find_page_title(make_session(title="  CPU Usage "), settings) == "CPU Usage"
    assert await find_page_title(make_session(title="   "), settings) is None
    assert await find_page_title(make_session(title=None), settings) is None


@pytest.mark.asyncio
async def test_decorate_resizes_then_decorates(make_session, settings) -> None:
    """Test the viewport follows the extent before the DOM is mutated."""
    session = make_session()
    extent = ContentExtent(width=1200, height=1501)

    page_extent = await decorate(session, extent, METADATA, None, settings)

    assert session.viewports[0] == (1200, 1501)
    assert session.viewports[-1] == (1200, 1501 + HEADER_HEIGHT)
    assert page_extent == ContentExtent(width=1200, height=1501 + HEADER_HEIGHT)
    assert session.scripts == [
        scripts.SCROLL_THROUGH,
        scripts.HIDE_ELEMENTS,
        scripts.INSERT_HEADER,
        scripts.INSERT_STYLESHEET,
    ]

    header_args = dict(session.evaluated)[scripts.INSERT_HEADER]
    assert header_args == (METADATA.title, METADATA.time_range_label, None, HEADER_HEIGHT)
    # Confirmatory pass dispatches a resize event
    assert dict(session.evaluated)[scripts.SCROLL_THROUGH][-1] is True


@pytest.mark.asyncio
async def test_decorate_survives_failed_confirmation_pass(make_session, settings) -> None:
    """Test decoration continues when the confirmatory scroll fails."""
    session = make_session(scroll_error=RuntimeError("boom"))

    page_extent = await decorate(
        session, ContentExtent(width=1200, height=1200), METADATA, "data:image/png;base64,AA", settings
    )

    assert page_extent.height == 1200 + HEADER_HEIGHT
    assert scripts.INSERT_STYLESHEET in session.scripts


@pytest.mark.asyncio
async def test_decorate_survives_page_script_errors(make_session, settings) -> None:
    """Test a page rejecting the header or stylesheet does not stop decoration."""
    session = make_session(
        script_errors={
            scripts.INSERT_HEADER: RuntimeError(
                "Cannot read properties of null (reading 'prepend')"
            ),
            scripts.INSERT_STYLESHEET: RuntimeError("document.head is null"),
        }
    )

    page_extent = await decorate(
        session, ContentExtent(width=1200, height=1400), METADATA, None, settings
    )

    assert page_extent.height == 1400 + HEADER_HEIGHT
    assert session.viewports[-1] == (1200, 1400 + HEADER_HEIGHT)


class UnreadablePath:
    """Path stand-in whose parent directory denies access."""

    name = "logo.png"

    def is_file(self) -> bool:
        raise PermissionError(13, "Permission denied")

    def __str__(self) -> str:
        return "/restricted/logo.png"


def test_logo_permission_error_is_skipped(tmp_path: Path) -> None:
    """Test an inaccessible candidate is skipped like a missing one."""
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG logo")

    assert load_logo([UnreadablePath()]) is None
    assert load_logo([UnreadablePath(), logo]) == load_logo([logo])


@pytest.mark.asyncio
async def test_find_page_date(make_session, settings) -> None:
    """Test the on-page date is trimmed and blank dates are ignored."""
    session = make_session(page_date=" 2024-03-05 ")

    assert await find_page_date(session, settings) == "2024-03-05"
    assert dict(session.evaluated)[scripts.FIND_TEXT] == (["#display_actual_date"],)
    assert await find_page_date(make_session(page_date=""), settings) is None

    settings.date_selectors = []
    assert await find_page_date(make_session(page_date="2024-03-05"), settings) is None

"""Filesystem-safe document naming."""

import re
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlsplit

from dashboard_pdf.models import DocumentMetadata

DEFAULT_DASHBOARD_NAME = "dashboard"
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_component(value: str) -> str:
    """Replace characters outside [A-Za-z0-9_-] with "_" and lower-case."""
    return UNSAFE_CHARS.sub("_", value).lower()


def time_params(url: str) -> tuple[str | None, str | None]:
    """Return the from/to query parameters of a dashboard URL."""
    query = parse_qs(urlsplit(url).query)
    from_values = query.get("from") or [None]
    to_values = query.get("to") or [None]
    return from_values[0], to_values[0]


def dashboard_name_from_url(url: str) -> str:
    """
    Derive a dashboard name from the URL path.

    Grafana dashboard URLs look like /d/<uid>/<slug>; the slug is preferred,
    then the last path segment, then a fixed default.
    """
    segments = [unquote(s) for s in urlsplit(url).path.split("/") if s]

    if "d" in segments:
        after = segments[segments.index("d") + 1 :]
        if len(after) >= 2 and after[1].strip():
            return after[1]

    if segments and segments[-1].strip():
        return segments[-1]
    return DEFAULT_DASHBOARD_NAME


def resolve_dashboard_name(page_title: str | None, url: str) -> str:
    """Pick the on-page title when present, falling back to the URL."""
    if page_title and page_title.strip():
        return page_title.strip()
    return dashboard_name_from_url(url)


def time_range_slug(from_expression: str | None, to_expression: str | None) -> str:
    return f"{from_expression or 'now'}_to_{to_expression or 'now'}"


def build_filename(dashboard_name: str, slug: str, extension: str = "pdf") -> str:
    """Build "<name>_<slug>.<ext>" with both parts sanitized."""
    name = sanitize_component(dashboard_name) or DEFAULT_DASHBOARD_NAME
    return f"{name}_{sanitize_component(slug)}.{extension}"


def derive_metadata(
    page_title: str | None,
    url: str,
    output_dir: str | Path,
    time_range_label: str,
    page_date: str | None = None,
) -> DocumentMetadata:
    """
    Derive title and output path for a document.

    Args:
        page_title: Title found on the page, if any
        url: Dashboard URL carrying the from/to parameters
        output_dir: Directory the document is written to
        time_range_label: Header label for the displayed range
        page_date: Date label found on the page; replaces the from/to slug

    Returns:
        DocumentMetadata with an absolute output path
    """
    title = resolve_dashboard_name(page_title, url)
    if page_date and page_date.strip():
        slug = page_date.strip()
    else:
        slug = time_range_slug(*time_params(url))
    filename = build_filename(title, slug)
    output_path = Path(output_dir).resolve() / filename

    return DocumentMetadata(
        title=title,
        time_range_label=time_range_label,
        output_path=str(output_path),
    )

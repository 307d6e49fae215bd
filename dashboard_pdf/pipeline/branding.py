"""Branding asset lookup for the document header."""

import base64
import mimetypes
from pathlib import Path

from dashboard_pdf.config import Settings
from dashboard_pdf.models import ErrorKind
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
CONTAINER_ROOT = Path("/app")


def logo_candidates(settings: Settings) -> list[Path]:
    """Ordered locations to look for the logo; the first existing file wins."""
    name = settings.logo_filename
    candidates = []
    if settings.logo_path:
        candidates.append(Path(settings.logo_path))
    candidates.extend(
        [
            Path.cwd() / name,
            Path.cwd() / "public" / "images" / name,
            PACKAGE_DIR / name,
            CONTAINER_ROOT / name,
            CONTAINER_ROOT / "public" / "images" / name,
        ]
    )
    return candidates


def load_logo(candidates: list[Path]) -> str | None:
    """
    Load the first readable candidate as a data URL.

    Returns:
        data: URL of the image, or None when no candidate could be read
    """
    for path in candidates:
        try:
            if not path.is_file():
                continue
            encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        except OSError as e:
            logger.warning("Failed to read logo", path=str(path), error=str(e))
            continue
        mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
        logger.info("Loaded logo", path=str(path))
        return f"data:{mime_type};base64,{encoded}"

    logger.warning(
        "Logo not found, document will have no logo",
        kind=ErrorKind.ASSET_MISSING.value,
        tried=[str(p) for p in candidates],
    )
    return None

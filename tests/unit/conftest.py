"""Shared fixtures: a fake render session and HTTP transports."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from dashboard_pdf.config import Settings
from dashboard_pdf.pipeline import scripts

FAKE_PDF = b"%PDF-1.7\n1 0 obj <<>> endobj\n%%EOF\n"


class FakeSession:
    """In-memory RenderSession answering the pipeline's page scripts."""

    def __init__(
        self,
        panel_bottoms: list[float] | None = None,
        document_heights: list[float] | None = None,
        viewport_width: float = 1200,
        title: str | None = None,
        page_date: str | None = None,
        login_page: bool = False,
        navigate_error: Exception | None = None,
        scroll_error: Exception | None = None,
        pdf: bytes = FAKE_PDF,
        stop_error: Exception | None = None,
        script_errors: dict[str, Exception] | None = None,
    ) -> None:
        self.panel_bottoms = panel_bottoms if panel_bottoms is not None else []
        self.document_heights = document_heights or [900, 900, 880, 880, 800, 800]
        self.viewport_width = viewport_width
        self.title = title
        self.page_date = page_date
        self.login_page = login_page
        self.navigate_error = navigate_error
        self.scroll_error = scroll_error
        self.pdf = pdf
        self.stop_error = stop_error
        self.script_errors = script_errors or {}

        self.headers: dict[str, str] = {}
        self.viewports: list[tuple[int, int]] = []
        self.navigated: list[str] = []
        self.scripts: list[str] = []
        self.evaluated: list[tuple[str, tuple[Any, ...]]] = []
        self.pdf_params: dict[str, Any] | None = None
        self.stopped = False

    async def set_extra_headers(self, headers: dict[str, str]) -> None:
        self.headers.update(headers)

    async def set_viewport(self, width: int, height: int) -> None:
        self.viewports.append((width, height))

    async def navigate(self, url: str, timeout: float) -> None:
        self.navigated.append(url)
        if self.navigate_error:
            raise self.navigate_error

    async def evaluate(self, script: str, *args: Any) -> Any:
        self.scripts.append(script)
        self.evaluated.append((script, args))
        if script in self.script_errors:
            raise self.script_errors[script]
        if script == scripts.FIND_LOGIN_MARKER:
            return self.login_page
        if script == scripts.SCROLL_THROUGH:
            if self.scroll_error:
                raise self.scroll_error
            return {"container": args[0][0] if args[0] else "body", "scrollHeight": 2000, "steps": 10}
        if script == scripts.FIND_TITLE:
            return self.title
        if script == scripts.FIND_TEXT:
            return self.page_date
        if script == scripts.MEASURE_CONTENT:
            return {
                "panelBottoms": self.panel_bottoms,
                "documentHeights": self.document_heights,
                "viewportWidth": self.viewport_width,
            }
        if script == scripts.HIDE_ELEMENTS:
            return 3
        return True

    async def content(self) -> str:
        return "<html><body><div class='panel-container'></div></body></html>"

    async def print_pdf(self, params: dict[str, Any]) -> bytes:
        self.pdf_params = params
        return self.pdf

    async def stop(self) -> None:
        self.stopped = True
        if self.stop_error:
            raise self.stop_error


@pytest.fixture
def make_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        output_dir=str(tmp_path / "output"),
        debug_dir=str(tmp_path / "debug"),
        logo_filename="no-such-logo-for-tests.png",
        timezone="UTC",
        _env_file=None,
    )


def html_handler(status_code: int = 200, content_type: str = "text/html; charset=UTF-8"):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"content-type": content_type},
            content=b"<html></html>",
        )

    return handler


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    def factory(
        status_code: int = 200, content_type: str = "text/html; charset=UTF-8"
    ) -> httpx.MockTransport:
        return httpx.MockTransport(html_handler(status_code, content_type))

    return factory

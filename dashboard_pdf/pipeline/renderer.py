"""Renderer: runs the export pipeline for one request."""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path

import httpx

from dashboard_pdf.browser.session import RenderSession, launch_session
from dashboard_pdf.config import Settings
from dashboard_pdf.models import DocumentMetadata, ErrorKind, ExportRequest, PipelineResult
from dashboard_pdf.pipeline.bootstrap import (
    bootstrap_session,
    build_basic_auth_header,
    prepare_target_url,
)
from dashboard_pdf.pipeline.branding import load_logo, logo_candidates
from dashboard_pdf.pipeline.decorate import decorate, find_page_date, find_page_title
from dashboard_pdf.pipeline.errors import ExportError, InvalidRequestError, SessionLaunchError
from dashboard_pdf.pipeline.extent import measure_extent
from dashboard_pdf.pipeline.naming import derive_metadata, sanitize_component, time_params
from dashboard_pdf.pipeline.reachability import check_reachability
from dashboard_pdf.pipeline.rasterize import rasterize
from dashboard_pdf.pipeline.stabilize import stabilize
from dashboard_pdf.pipeline.timerange import format_time_range
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[str, Settings], Awaitable[RenderSession]]


def utc_now() -> datetime:
    return datetime.now(UTC)


class Renderer:
    """
    Turns an ExportRequest into a single-page PDF.

    Every run launches its own browser session and tears it down on every exit
    path. The renderer keeps no state between runs, so one instance can serve
    concurrent runs.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory = launch_session,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings
        self._session_factory = session_factory
        self._transport = transport
        self._clock = clock

    def _output_dir(self, request: ExportRequest) -> Path:
        if request.output_path_hint:
            return Path(request.output_path_hint).parent
        return Path(self.settings.output_dir)

    async def run(self, request: ExportRequest) -> PipelineResult:
        """
        Run all stages for one request.

        Returns:
            PipelineResult with the document path, or the error kind and message
        """
        run_id = uuid.uuid4().hex[:12]
        log = logger.bind(run_id=run_id)
        log.info("Export started", url=request.target_url)

        session: RenderSession | None = None
        try:
            credentials = request.credentials.get_secret_value()
            if not request.target_url or not credentials:
                raise InvalidRequestError("URL and credentials are required")

            auth_header = build_basic_auth_header(credentials)
            await check_reachability(
                request.target_url,
                auth_header,
                timeout=self.settings.request_timeout,
                transport=self._transport,
            )

            target_url = prepare_target_url(
                request.target_url,
                force_kiosk=request.force_kiosk,
                localhost_alias=self.settings.localhost_alias,
            )

            try:
                session = await self._session_factory(run_id, self.settings)
            except Exception as e:
                raise SessionLaunchError(str(e)) from e

            await bootstrap_session(
                session, target_url, auth_header, request.width_hint, self.settings
            )

            await stabilize(
                session,
                self.settings.scroll_container_selectors,
                self.settings.scroll_step_px,
                self.settings.scroll_pause_ms,
                self.settings.scroll_settle_ms,
            )

            metadata = await self._derive_metadata(session, request)
            log.info("Output file path", path=metadata.output_path)

            if self.settings.debug_snapshot:
                await self._write_debug_snapshot(session, metadata, run_id)

            extent = await measure_extent(
                session,
                self.settings.panel_selectors,
                self.settings.bottom_padding,
                self.settings.min_height,
                request.width_hint,
            )

            logo = load_logo(logo_candidates(self.settings))
            page_extent = await decorate(session, extent, metadata, logo, self.settings)

            path = await rasterize(session, page_extent, metadata.output_path)
            result = PipelineResult.ok(path)
            log.info("Export completed", path=path)

        except ExportError as e:
            log.error("Export failed", kind=e.kind.value, error=e.message)
            result = PipelineResult.failed(e.kind, e.message)

        except Exception as e:
            log.error("Export failed unexpectedly", error=str(e), exc_info=True)
            result = PipelineResult.failed(ErrorKind.RASTERIZATION_FAILED, str(e))

        finally:
            if session is not None:
                await self._teardown(session, run_id)

        return result

    async def _derive_metadata(
        self, session: RenderSession, request: ExportRequest
    ) -> DocumentMetadata:
        page_title = await find_page_title(session, self.settings)
        page_date = await find_page_date(session, self.settings)
        from_expression, to_expression = time_params(request.target_url)
        label = format_time_range(
            from_expression, to_expression, self._clock(), self.settings.timezone
        )
        return derive_metadata(
            page_title, request.target_url, self._output_dir(request), label, page_date
        )

    async def _write_debug_snapshot(
        self, session: RenderSession, metadata: DocumentMetadata, run_id: str
    ) -> Path | None:
        """Save the raw DOM next to the other debug snapshots; failures are only logged."""
        stem = Path(metadata.output_path).stem
        path = Path(self.settings.debug_dir) / f"debug_{sanitize_component(stem)}_{run_id}.html"
        try:
            html = await session.content()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
        except Exception as e:
            logger.warning("Debug snapshot failed", run_id=run_id, error=str(e))
            return None
        logger.info("Debug HTML file saved", run_id=run_id, path=str(path))
        return path

    async def _teardown(self, session: RenderSession, run_id: str) -> None:
        try:
            await session.stop()
        except Exception as e:
            logger.error(
                "Session teardown failed",
                run_id=run_id,
                kind=ErrorKind.SESSION_TEARDOWN_FAILED.value,
                error=str(e),
            )

"""Command-line entry point used by the process that requests an export."""

import asyncio
import json

import typer

from dashboard_pdf.config import Settings
from dashboard_pdf.models import ExportRequest
from dashboard_pdf.pipeline import Renderer
from dashboard_pdf.utils.logging import get_logger, setup_logging

app = typer.Typer(add_completion=False, help="Render a dashboard URL into a single-page PDF.")


@app.command()
def export(
    target_url: str = typer.Argument(..., help="Dashboard URL, including from/to parameters"),
    auth_credentials: str = typer.Argument(..., help="Basic auth credentials as user:password"),
    output_path_hint: str | None = typer.Argument(
        None, help="Output file path; its directory receives the document"
    ),
) -> None:
    """Export a dashboard and print the result message as one JSON line."""
    settings = Settings()
    setup_logging(settings)
    logger = get_logger(__name__)

    request = ExportRequest(
        target_url=target_url,
        credentials=auth_credentials,
        width_hint=settings.viewport_width,
        force_kiosk=settings.force_kiosk,
        output_path_hint=output_path_hint
        or f"{settings.output_dir.rstrip('/')}/{settings.default_output_name}",
    )

    result = asyncio.run(Renderer(settings).run(request))
    typer.echo(json.dumps(result.to_message()))

    if not result.success:
        logger.error("Error during PDF generation", kind=result.error_kind, error=result.message)
        raise typer.Exit(code=1)


def main() -> None:
    app()

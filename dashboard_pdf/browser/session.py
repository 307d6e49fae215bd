"""Render session: one isolated Chrome plus one page target."""

import asyncio
from typing import Any, Protocol

from dashboard_pdf.browser.cdp import CDPClient, CDPError
from dashboard_pdf.browser.chrome import ChromeLauncher, ChromeProcess
from dashboard_pdf.config import Settings
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)


class RenderSession(Protocol):
    """Operations the export pipeline needs from a browser session."""

    async def set_extra_headers(self, headers: dict[str, str]) -> None: ...

    async def set_viewport(self, width: int, height: int) -> None: ...

    async def navigate(self, url: str, timeout: float) -> None: ...

    async def evaluate(self, script: str, *args: Any) -> Any: ...

    async def content(self) -> str: ...

    async def print_pdf(self, params: dict[str, Any]) -> bytes: ...

    async def stop(self) -> None: ...


class BrowserSession:
    """Manages a single headless Chrome with its CDP connection."""

    def __init__(self, run_id: str, settings: Settings) -> None:
        self.run_id = run_id
        self.settings = settings
        self.chrome_process: ChromeProcess | None = None
        self.cdp_client: CDPClient | None = None
        self._launcher = ChromeLauncher(settings)

    async def start(self) -> None:
        """Start the browser session."""
        try:
            self.chrome_process = await self._launcher.launch(self.run_id)

            self.cdp_client = CDPClient(
                self.chrome_process.devtools_port,
                command_timeout=self.settings.request_timeout,
            )
            await self.cdp_client.connect(timeout=self.settings.chrome_launch_timeout)

            await self.cdp_client.send("Page.enable")
            await self.cdp_client.send("Runtime.enable")
            if self.settings.ignore_https_errors:
                await self.cdp_client.send("Security.setIgnoreCertificateErrors", {"ignore": True})

            logger.info(
                "Browser session started",
                run_id=self.run_id,
                port=self.chrome_process.devtools_port,
            )

        except Exception as e:
            await self.stop()
            raise RuntimeError(f"Failed to start browser session: {e}") from e

    async def stop(self) -> None:
        """Stop the browser session and release resources."""
        logger.info("Stopping browser session", run_id=self.run_id)
        errors: list[str] = []

        if self.cdp_client:
            try:
                await self.cdp_client.disconnect()
            except Exception as e:
                logger.error("Error disconnecting CDP", error=str(e))
                errors.append(f"disconnect: {e}")
            self.cdp_client = None

        if self.chrome_process:
            try:
                await self._launcher.terminate(self.chrome_process)
            except Exception as e:
                errors.append(f"terminate: {e}")
            self.chrome_process = None

        if errors:
            raise RuntimeError("; ".join(errors))

        logger.info("Browser session stopped", run_id=self.run_id)

    @property
    def _client(self) -> CDPClient:
        if not self.cdp_client:
            raise CDPError("CDP client not connected")
        return self.cdp_client

    async def set_extra_headers(self, headers: dict[str, str]) -> None:
        await self._client.set_extra_headers(headers)

    async def set_viewport(self, width: int, height: int) -> None:
        await self._client.set_viewport(width, height, self.settings.device_scale_factor)

    async def navigate(self, url: str, timeout: float) -> None:
        """
        Navigate and wait until the network has been idle.

        Args:
            url: URL to navigate to
            timeout: Seconds allowed for the page to reach network idle

        Raises:
            CDPError: Navigation failed or did not settle in time
        """
        client = self._client
        await client.send("Page.setLifecycleEventsEnabled", {"enabled": True})
        events = client.subscribe("Page.lifecycleEvent")

        try:
            result = await client.navigate(url)
            if result.get("errorText"):
                raise CDPError(f"Navigation to {url} failed: {result['errorText']}")
            loader_id = result.get("loaderId")

            loop = asyncio.get_running_loop()
            deadline = loop.time() + timeout
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise CDPError(f"Page did not reach network idle within {timeout}s")
                try:
                    event = await asyncio.wait_for(events.get(), timeout=remaining)
                except TimeoutError as e:
                    raise CDPError(f"Page did not reach network idle within {timeout}s") from e
                if event.get("name") != "networkIdle":
                    continue
                if loader_id is None or event.get("loaderId") == loader_id:
                    break
        finally:
            client.unsubscribe("Page.lifecycleEvent", events)

        logger.debug("Page reached network idle", url=url)

    async def evaluate(self, script: str, *args: Any) -> Any:
        """Run a page-context function with JSON arguments and return its result."""
        return await self._client.call_function(script, *args)

    async def content(self) -> str:
        return await self._client.get_content()

    async def print_pdf(self, params: dict[str, Any]) -> bytes:
        return await self._client.print_to_pdf(params, timeout=self.settings.navigation_timeout)


async def launch_session(run_id: str, settings: Settings) -> BrowserSession:
    """Create and start a browser session for one export run."""
    session = BrowserSession(run_id, settings)
    await session.start()
    return session

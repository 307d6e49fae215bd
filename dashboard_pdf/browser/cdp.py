"""Chrome DevTools Protocol (CDP) client."""

import asyncio
import base64
import json
from typing import Any

import httpx
import websockets
from websockets import ClientConnection

from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)


class CDPError(Exception):
    """CDP protocol error."""

    pass


class CDPClient:
    """Client for Chrome DevTools Protocol communication with one page target."""

    def __init__(self, devtools_port: int, command_timeout: float = 30.0) -> None:
        self.devtools_port = devtools_port
        self.command_timeout = command_timeout
        self._ws: ClientConnection | None = None
        self._message_id = 0
        self._pending_responses: dict[int, asyncio.Future[Any]] = {}
        self._subscribers: dict[str, list[asyncio.Queue[dict[str, Any]]]] = {}
        self._receive_task: asyncio.Task[None] | None = None

    @property
    def base_url(self) -> str:
        """Base URL for DevTools HTTP endpoints."""
        return f"http://127.0.0.1:{self.devtools_port}"

    async def connect(self, timeout: float = 10.0) -> None:
        """
        Connect to the Chrome DevTools page target.

        Args:
            timeout: Connection timeout in seconds
        """
        ws_url = None

        async with httpx.AsyncClient() as client:
            for _attempt in range(max(int(timeout), 1)):
                try:
                    response = await client.get(f"{self.base_url}/json/list")
                    if response.status_code == 200:
                        for target in response.json():
                            if target.get("type") == "page":
                                ws_url = target.get("webSocketDebuggerUrl")
                                if ws_url:
                                    break
                        if ws_url:
                            break
                    logger.debug("Browser reachable but no page target yet, waiting...")
                except httpx.TransportError:
                    pass
                await asyncio.sleep(1)
            else:
                raise CDPError(f"Failed to connect to DevTools page after {timeout}s")

        logger.debug("Connecting to page WebSocket", url=ws_url)

        self._ws = await websockets.connect(ws_url, max_size=256 * 1024 * 1024)
        self._receive_task = asyncio.create_task(self._receive_messages())

        logger.info("CDP connected", port=self.devtools_port)

    async def disconnect(self) -> None:
        """Disconnect from Chrome DevTools."""
        if self._receive_task:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            self._receive_task = None

        if self._ws:
            await self._ws.close()
            self._ws = None

        for future in self._pending_responses.values():
            if not future.done():
                future.set_exception(CDPError("Connection closed"))
        self._pending_responses.clear()

        logger.debug("CDP disconnected")

    async def _receive_messages(self) -> None:
        """Background task to receive WebSocket messages."""
        if not self._ws:
            return

        try:
            async for message in self._ws:
                data = json.loads(message)

                # Response to one of our commands
                if "id" in data:
                    future = self._pending_responses.pop(data["id"], None)
                    if future is None or future.done():
                        continue
                    if "error" in data:
                        error_msg = data["error"].get("message", "Unknown error")
                        future.set_exception(CDPError(error_msg))
                    else:
                        future.set_result(data.get("result", {}))

                # Event
                elif "method" in data:
                    for queue in self._subscribers.get(data["method"], []):
                        queue.put_nowait(data.get("params", {}))

        except websockets.ConnectionClosed:
            logger.debug("WebSocket connection closed")
        except Exception as e:
            logger.error("Error receiving CDP messages", error=str(e))

    def subscribe(self, method: str) -> asyncio.Queue[dict[str, Any]]:
        """
        Start buffering events of the given method.

        Args:
            method: CDP event name (e.g., "Page.lifecycleEvent")

        Returns:
            Queue receiving the params of each matching event
        """
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._subscribers.setdefault(method, []).append(queue)
        return queue

    def unsubscribe(self, method: str, queue: asyncio.Queue[dict[str, Any]]) -> None:
        """Stop delivering events to a queue returned by subscribe()."""
        queues = self._subscribers.get(method, [])
        if queue in queues:
            queues.remove(queue)

    async def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Send a CDP command and wait for response.

        Args:
            method: CDP method name (e.g., "Page.navigate")
            params: Method parameters
            timeout: Response timeout in seconds, defaults to command_timeout

        Returns:
            Command result
        """
        if not self._ws:
            raise CDPError("Not connected to DevTools")

        self._message_id += 1
        msg_id = self._message_id

        message = {
            "id": msg_id,
            "method": method,
            "params": params or {},
        }

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending_responses[msg_id] = future

        await self._ws.send(json.dumps(message))
        logger.debug("CDP command sent", method=method, id=msg_id)

        try:
            return await asyncio.wait_for(future, timeout=timeout or self.command_timeout)
        except TimeoutError as e:
            self._pending_responses.pop(msg_id, None)
            raise CDPError(f"Timeout waiting for response to {method}") from e

    async def navigate(self, url: str) -> dict[str, Any]:
        """
        Navigate to a URL.

        Args:
            url: URL to navigate to

        Returns:
            Navigation result (frameId, loaderId and errorText on failure)
        """
        logger.info("Navigating to URL", url=url)
        result: dict[str, Any] = await self.send("Page.navigate", {"url": url})
        return result

    async def evaluate(self, expression: str, await_promise: bool = True) -> Any:
        """
        Evaluate an expression in the page and return its value.

        Args:
            expression: JavaScript expression
            await_promise: Resolve a returned promise before returning

        Returns:
            JSON-serializable value of the expression
        """
        result = await self.send(
            "Runtime.evaluate",
            {
                "expression": expression,
                "awaitPromise": await_promise,
                "returnByValue": True,
            },
            timeout=max(self.command_timeout, 120.0),
        )
        details = result.get("exceptionDetails")
        if details:
            exception = details.get("exception", {})
            text = exception.get("description") or details.get("text", "Script error")
            raise CDPError(f"Page script failed: {text}")
        return result.get("result", {}).get("value")

    async def call_function(self, function_source: str, *args: Any) -> Any:
        """
        Call a page-context function declaration with JSON arguments.

        Args:
            function_source: JavaScript function source, e.g. "(a, b) => a + b"
            args: JSON-serializable arguments

        Returns:
            JSON-serializable return value
        """
        arguments = ", ".join(json.dumps(arg) for arg in args)
        return await self.evaluate(f"({function_source})({arguments})")

    async def get_content(self) -> str:
        """
        Get page HTML content.

        Returns:
            HTML content of the page
        """
        content = await self.evaluate("document.documentElement.outerHTML", await_promise=False)
        logger.debug("Got page content", length=len(content or ""))
        return content or ""

    async def set_extra_headers(self, headers: dict[str, str]) -> None:
        """Attach headers to every request the page makes."""
        await self.send("Network.enable")
        await self.send("Network.setExtraHTTPHeaders", {"headers": headers})

    async def set_viewport(self, width: int, height: int, device_scale_factor: float) -> None:
        """Override the page viewport metrics."""
        await self.send(
            "Emulation.setDeviceMetricsOverride",
            {
                "width": width,
                "height": height,
                "deviceScaleFactor": device_scale_factor,
                "mobile": False,
            },
        )

    async def print_to_pdf(self, params: dict[str, Any], timeout: float = 120.0) -> bytes:
        """
        Print the page to PDF.

        Args:
            params: Page.printToPDF parameters
            timeout: Response timeout in seconds

        Returns:
            PDF document as bytes
        """
        result = await self.send("Page.printToPDF", params, timeout=timeout)
        return base64.b64decode(result.get("data", ""))

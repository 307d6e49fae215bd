"""Tests for the CDP client helpers that do not need a browser."""

import base64
from typing import Any

import pytest

from dashboard_pdf.browser.cdp import CDPClient, CDPError
from dashboard_pdf.browser.chrome import ChromeLauncher
from dashboard_pdf.config import Settings


class RecordingClient(CDPClient):
    """CDPClient whose send() returns canned responses."""

    def __init__(self, responses: dict[str, Any]) -> None:
        super().__init__(devtools_port=9222)
        self.responses = responses
        self.sent: list[tuple[str, dict[str, Any] | None]] = []

    async def send(self, method, params=None, timeout=None):
        self.sent.append((method, params))
        return self.responses.get(method, {})


@pytest.mark.asyncio
async def test_send_requires_connection() -> None:
    """Test commands fail before connect()."""
    with pytest.raises(CDPError, match="Not connected"):
        await CDPClient(9222).send("Page.enable")


@pytest.mark.asyncio
async def test_call_function_serializes_arguments() -> None:
    """Test page functions are invoked with JSON arguments."""
    client = RecordingClient({"Runtime.evaluate": {"result": {"type": "number", "value": 3}}})

    value = await client.call_function("(a, b) => a + b.length", 1, ["x", "y"])

    assert value == 3
    method, params = client.sent[0]
    assert method == "Runtime.evaluate"
    assert params["expression"] == '((a, b) => a + b.length)(1, ["x", "y"])'
    assert params["awaitPromise"] is True
    assert params["returnByValue"] is True


@pytest.mark.asyncio
async def test_evaluate_raises_on_page_exception() -> None:
    """Test page exceptions surface as CDPError."""
    client = RecordingClient(
        {
            "Runtime.evaluate": {
                "result": {"type": "object"},
                "exceptionDetails": {
                    "text": "Uncaught",
                    "exception": {"description": "TypeError: x is null"},
                },
            }
        }
    )

    with pytest.raises(CDPError, match="TypeError"):
        await client.evaluate("null.x")


@pytest.mark.asyncio
async def test_print_to_pdf_decodes_data() -> None:
    """Test PDF data is base64 decoded."""
    client = RecordingClient(
        {"Page.printToPDF": {"data": base64.b64encode(b"%PDF-1.7").decode()}}
    )

    assert await client.print_to_pdf({"pageRanges": "1"}) == b"%PDF-1.7"


@pytest.mark.asyncio
async def test_set_viewport() -> None:
    """Test viewport overrides use desktop metrics."""
    client = RecordingClient({})

    await client.set_viewport(1200, 1561, 2.0)

    assert client.sent == [
        (
            "Emulation.setDeviceMetricsOverride",
            {"width": 1200, "height": 1561, "deviceScaleFactor": 2.0, "mobile": False},
        )
    ]


def test_chrome_args() -> None:
    """Test Chrome runs headless, unsandboxed and with a private profile."""
    launcher = ChromeLauncher(Settings(chrome_binary="/opt/chrome", _env_file=None))

    args = launcher._build_chrome_args("/tmp/profile")

    assert args[0] == "/opt/chrome"
    assert "--headless=new" in args
    assert "--no-sandbox" in args
    assert "--remote-debugging-port=0" in args
    assert "--user-data-dir=/tmp/profile" in args
    assert "--ignore-certificate-errors" in args
    assert args[-1] == "about:blank"

"""Chrome process management."""

import asyncio
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dashboard_pdf.config import Settings
from dashboard_pdf.utils.logging import get_logger

logger = get_logger(__name__)

STDERR_LOG = "chrome_stderr.log"


@dataclass
class ChromeProcess:
    """Represents a running headless Chrome process."""

    process: asyncio.subprocess.Process
    devtools_port: int
    user_data_dir: str

    @property
    def pid(self) -> int:
        return self.process.pid


class ChromeLauncher:
    """Launches and terminates one headless Chrome per export run."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _build_chrome_args(self, user_data_dir: str) -> list[str]:
        """Build Chrome command line arguments."""
        args = [
            self.settings.chrome_binary,
            "--headless=new",
            "--remote-debugging-port=0",
            f"--user-data-dir={user_data_dir}",
            f"--window-size={self.settings.viewport_width},"
            f"{self.settings.initial_viewport_height}",
            # Sandboxing is off: the exporter only loads trusted dashboards in a container
            "--no-sandbox",
            "--disable-setuid-sandbox",
            # Disable features that interfere with automation
            "--no-first-run",
            "--no-default-browser-check",
            "--disable-background-networking",
            "--disable-client-side-phishing-detection",
            "--disable-default-apps",
            "--disable-extensions",
            "--disable-hang-monitor",
            "--disable-popup-blocking",
            "--disable-prompt-on-repost",
            "--disable-sync",
            "--disable-translate",
            "--metrics-recording-only",
            "--safebrowsing-disable-auto-update",
            # Performance
            "--disable-dev-shm-usage",
            "--disable-gpu",
            "--hide-scrollbars",
            "--lang=en-US",
            "about:blank",
        ]

        if self.settings.ignore_https_errors:
            args.insert(-1, "--ignore-certificate-errors")

        return args

    async def _wait_for_devtools_port(
        self, process: asyncio.subprocess.Process, user_data_dir: str
    ) -> int:
        """Read the DevTools port Chrome picked from its DevToolsActivePort file."""
        port_file = Path(user_data_dir) / "DevToolsActivePort"
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.settings.chrome_launch_timeout

        while loop.time() < deadline:
            if process.returncode is not None:
                stderr_file = Path(user_data_dir) / STDERR_LOG
                stderr = stderr_file.read_text(errors="replace") if stderr_file.exists() else ""
                raise RuntimeError(
                    f"Chrome exited with code {process.returncode}: {stderr.strip()[-2000:]}"
                )
            if port_file.exists():
                first_line = port_file.read_text().splitlines()[:1]
                if first_line and first_line[0].strip().isdigit():
                    return int(first_line[0])
            await asyncio.sleep(0.1)

        raise RuntimeError(
            f"Chrome did not open a DevTools port within {self.settings.chrome_launch_timeout}s"
        )

    async def launch(self, run_id: str) -> ChromeProcess:
        """
        Launch a new headless Chrome process.

        Args:
            run_id: Identifier of the export run, used in the profile dir name

        Returns:
            ChromeProcess instance with process details
        """
        if self.settings.chrome_user_data_base:
            Path(self.settings.chrome_user_data_base).mkdir(parents=True, exist_ok=True)
        user_data_dir = tempfile.mkdtemp(
            prefix=f"chrome_{run_id}_",
            dir=self.settings.chrome_user_data_base,
        )

        args = self._build_chrome_args(user_data_dir)

        logger.info("Launching Chrome", run_id=run_id, user_data_dir=user_data_dir)

        process: asyncio.subprocess.Process | None = None
        try:
            with open(Path(user_data_dir) / STDERR_LOG, "wb") as stderr_log:
                process = await asyncio.create_subprocess_exec(
                    *args,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=stderr_log,
                )
            devtools_port = await self._wait_for_devtools_port(process, user_data_dir)

            logger.info(
                "Chrome launched successfully",
                run_id=run_id,
                pid=process.pid,
                devtools_port=devtools_port,
            )
            return ChromeProcess(
                process=process,
                devtools_port=devtools_port,
                user_data_dir=user_data_dir,
            )

        except Exception as e:
            if process is not None and process.returncode is None:
                process.kill()
                await process.wait()
            shutil.rmtree(user_data_dir, ignore_errors=True)
            raise RuntimeError(f"Failed to launch Chrome: {e}") from e

    async def terminate(self, chrome_process: ChromeProcess, grace_period: float = 2.0) -> None:
        """
        Terminate a Chrome process and remove its profile directory.

        Args:
            chrome_process: Process returned by launch()
            grace_period: Seconds to wait after SIGTERM before SIGKILL
        """
        process = chrome_process.process
        logger.info("Terminating Chrome", pid=chrome_process.pid)

        try:
            if process.returncode is None:
                process.terminate()
                try:
                    await asyncio.wait_for(process.wait(), timeout=grace_period)
                except TimeoutError:
                    process.kill()
                    await process.wait()
                    logger.warning("Chrome required force kill", pid=chrome_process.pid)
        except ProcessLookupError:
            logger.debug("Chrome process already terminated", pid=chrome_process.pid)
        finally:
            shutil.rmtree(chrome_process.user_data_dir, ignore_errors=True)
            logger.debug("Cleaned up user data dir", path=chrome_process.user_data_dir)

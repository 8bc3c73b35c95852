"""
Screenshot capture with one shared headless Chromium.

The service owns the browser handle and the asyncio loop Playwright runs on (a
daemon thread). Request threads call capture(), which schedules the coroutine on
that loop and waits for it. The browser is launched on first use and relaunched
when it reports itself disconnected; every capture gets its own page.
"""

import asyncio
import base64
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 30000
SELECTOR_TIMEOUT_MS = 10000
DEFAULT_LOCAL_URL = "http://localhost:3000"

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]

_PAGE_DIMENSIONS_JS = """() => ({
  width: document.documentElement.scrollWidth,
  height: document.documentElement.scrollHeight,
})"""


class ScreenshotError(RuntimeError):
    """Capture failed (navigation, selector wait, browser launch...). The cause is chained."""


class ScreenshotOptionsError(ValueError):
    """screenshotOptions sent by the caller cannot be used."""


def _int_option(data: dict, key: str, default: int) -> int:
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ScreenshotOptionsError(f"screenshotOptions.{key} must be a number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ScreenshotOptionsError(f"screenshotOptions.{key} must be a number") from None
    if number < 0:
        raise ScreenshotOptionsError(f"screenshotOptions.{key} must not be negative")
    return number


@dataclass(frozen=True)
class ScreenshotOptions:
    full_page: bool = True
    width: int = 1920
    height: int = 1080
    wait_for_selector: str | None = None
    delay: int = 2000

    @classmethod
    def from_dict(cls, data: dict | None) -> "ScreenshotOptions":
        """Build from the JSON shape {fullPage, width, height, waitForSelector, delay}."""
        data = data or {}
        if not isinstance(data, dict):
            raise ScreenshotOptionsError("screenshotOptions must be an object")
        selector = data.get("waitForSelector") or None
        if selector is not None and not isinstance(selector, str):
            raise ScreenshotOptionsError("screenshotOptions.waitForSelector must be a string")
        defaults = cls()
        return cls(
            full_page=bool(data.get("fullPage", defaults.full_page)),
            width=_int_option(data, "width", defaults.width) or defaults.width,
            height=_int_option(data, "height", defaults.height) or defaults.height,
            wait_for_selector=selector,
            delay=_int_option(data, "delay", defaults.delay),
        )


@dataclass(frozen=True)
class ScreenshotResult:
    screenshot: str  # base64 PNG
    metadata: dict

    def to_dict(self) -> dict:
        return {"screenshot": self.screenshot, "metadata": dict(self.metadata)}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ChromiumLauncher:
    """Starts Playwright once and launches headless Chromium on demand."""

    def __init__(self, args: list[str] | None = None):
        self._args = list(args or CHROMIUM_ARGS)
        self._playwright = None

    async def launch(self):
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(headless=True, args=self._args)

    async def stop(self) -> None:
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


class ScreenshotService:
    """Owns the shared browser handle. Safe to call capture() from many threads."""

    def __init__(
        self,
        launcher=None,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        selector_timeout_ms: int = SELECTOR_TIMEOUT_MS,
    ):
        self._launcher = launcher or ChromiumLauncher()
        self.navigation_timeout_ms = navigation_timeout_ms
        self.selector_timeout_ms = selector_timeout_ms
        self._browser = None
        self._launch_lock: asyncio.Lock | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False

    # ── Event loop ──

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._closed:
                raise ScreenshotError("Failed to capture screenshot: screenshot service is closed")
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever, name="screenshot-loop", daemon=True
                )
                self._thread.start()
            return self._loop

    def _run(self, coro):
        loop = self._ensure_loop()
        return asyncio.run_coroutine_threadsafe(coro, loop).result()

    # ── Browser ──

    async def _get_browser(self):
        # Only ever touched from the service loop.
        if self._launch_lock is None:
            self._launch_lock = asyncio.Lock()
        async with self._launch_lock:
            if self._browser is None or not self._browser.is_connected():
                logger.info("[screenshot] Launching browser...")
                self._browser = await self._launcher.launch()
                logger.info("[screenshot] Browser launched")
            return self._browser

    async def _capture(self, url: str, options: ScreenshotOptions) -> ScreenshotResult:
        logger.info("[screenshot] Capturing %s", url)
        page = None
        try:
            browser = await self._get_browser()
            page = await browser.new_page(viewport={"width": options.width, "height": options.height})
            await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
            logger.info("[screenshot] Page loaded: %s", url)

            if options.wait_for_selector:
                logger.info("[screenshot] Waiting for selector: %s", options.wait_for_selector)
                await page.wait_for_selector(options.wait_for_selector, timeout=self.selector_timeout_ms)

            if options.delay > 0:
                await page.wait_for_timeout(options.delay)

            png = await page.screenshot(full_page=options.full_page, type="png")
            dims = await page.evaluate(_PAGE_DIMENSIONS_JS)
        except Exception as e:
            logger.error("[screenshot] Failed for %s: %s", url, e)
            raise ScreenshotError(f"Failed to capture screenshot: {e}") from e
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as e:
                    logger.warning("[screenshot] Could not close page for %s: %s", url, e)

        logger.info("[screenshot] Captured %sx%spx", dims["width"], dims["height"])
        return ScreenshotResult(
            screenshot=base64.b64encode(png).decode("ascii"),
            metadata={
                "width": dims["width"],
                "height": dims["height"],
                "url": url,
                "timestamp": _utc_now(),
            },
        )

    # ── Public API ──

    def capture(self, url: str, options: ScreenshotOptions | dict | None = None) -> ScreenshotResult:
        """Capture a PNG of url.

        Args:
            url: Page to load
            options: ScreenshotOptions or its JSON dict form; defaults when None

        Raises:
            ScreenshotError: navigation/selector timeout or any browser failure
        """
        if not isinstance(options, ScreenshotOptions):
            options = ScreenshotOptions.from_dict(options)
        return self._run(self._capture(url, options))

    def capture_local(self, local_url: str = DEFAULT_LOCAL_URL, options=None) -> ScreenshotResult:
        logger.info("[screenshot] Capturing local implementation: %s", local_url)
        return self.capture(local_url or DEFAULT_LOCAL_URL, options)

    async def _close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
                logger.info("[screenshot] Browser closed")
        finally:
            self._browser = None
            await self._launcher.stop()

    def close(self) -> None:
        """Close the browser and stop the loop thread. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread
        if loop is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self._close(), loop).result(timeout=10)
        except Exception as e:
            logger.warning("[screenshot] Error while closing browser: %s", e)
        finally:
            loop.call_soon_threadsafe(loop.stop)
            if thread is not None:
                thread.join(timeout=5)
            if not loop.is_running():
                loop.close()

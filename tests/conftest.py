"""
Shared fixtures: the real catalog, fake Playwright objects and a live API server
bound to an ephemeral port. No test starts a real browser.
"""
import asyncio
import os
import sys
import threading

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

# Make server.py and the packages importable without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from superui.catalog import get_catalog
from superui.config import Settings
from superui.screenshot import ScreenshotService

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


# ─── Fake Playwright ────────────────────────────────────────────

class FakePage:
    def __init__(self, browser, viewport):
        self.browser = browser
        self.viewport = viewport
        self.goto_calls = []
        self.selector_calls = []
        self.waited_ms = 0
        self.screenshot_kwargs = None
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if self.browser.fail_goto:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")

    async def wait_for_selector(self, selector, timeout=None):
        self.selector_calls.append((selector, timeout))
        if selector in self.browser.missing_selectors:
            await asyncio.sleep(timeout / 1000)
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def wait_for_timeout(self, ms):
        self.waited_ms += ms

    async def screenshot(self, full_page=True, type="png"):
        self.screenshot_kwargs = {"full_page": full_page, "type": type}
        return PNG_BYTES

    async def evaluate(self, script):
        return {"width": self.viewport["width"], "height": 2400}

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, fail_goto=False, missing_selectors=()):
        self.fail_goto = fail_goto
        self.missing_selectors = set(missing_selectors)
        self.connected = True
        self.pages = []
        self.closed = False

    def is_connected(self):
        return self.connected

    async def new_page(self, viewport=None):
        page = FakePage(self, viewport)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True
        self.connected = False


class FakeLauncher:
    def __init__(self, launch_delay=0, **browser_kwargs):
        self.launch_delay = launch_delay
        self.browser_kwargs = browser_kwargs
        self.browsers = []
        self.stopped = False

    async def launch(self):
        if self.launch_delay:
            await asyncio.sleep(self.launch_delay)
        browser = FakeBrowser(**self.browser_kwargs)
        self.browsers.append(browser)
        return browser

    async def stop(self):
        self.stopped = True


# ─── Fixtures ───────────────────────────────────────────────────

@pytest.fixture(scope="session")
def catalog():
    return get_catalog()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def screenshots(launcher):
    service = ScreenshotService(launcher=launcher)
    yield service
    service.close()


@pytest.fixture
def api_server(screenshots, catalog):
    """Running API server on 127.0.0.1:<ephemeral>. Yields its base URL."""
    from api_server.server import make_server

    settings = Settings(host="127.0.0.1", port=0, environment="test")
    httpd = make_server(settings, screenshots, catalog, host="127.0.0.1", port=0)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    host, port = httpd.server_address[:2]
    yield f"http://{host}:{port}"
    httpd.shutdown()
    httpd.server_close()
    thread.join(timeout=5)

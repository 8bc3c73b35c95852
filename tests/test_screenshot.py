"""Tests for the screenshot service, driven by the fake launcher in conftest."""
import base64
import threading

import pytest

from conftest import PNG_BYTES, FakeLauncher
from superui.screenshot import (
    ScreenshotError,
    ScreenshotOptions,
    ScreenshotOptionsError,
    ScreenshotService,
)


class TestOptions:
    def test_defaults(self):
        opts = ScreenshotOptions()
        assert (opts.full_page, opts.width, opts.height, opts.delay) == (True, 1920, 1080, 2000)
        assert opts.wait_for_selector is None

    def test_from_dict_reads_camel_case(self):
        opts = ScreenshotOptions.from_dict(
            {"fullPage": False, "width": 800, "height": 600, "waitForSelector": "#app", "delay": 0}
        )
        assert opts == ScreenshotOptions(False, 800, 600, "#app", 0)

    def test_from_dict_none(self):
        assert ScreenshotOptions.from_dict(None) == ScreenshotOptions()

    def test_numeric_strings_accepted(self):
        opts = ScreenshotOptions.from_dict({"width": "800", "delay": "0"})
        assert (opts.width, opts.delay) == (800, 0)

    @pytest.mark.parametrize("data", [
        {"width": "wide"},
        {"height": [1080]},
        {"delay": "soon"},
        {"delay": -5},
        {"width": True},
        {"waitForSelector": 5},
        ["width", 800],
    ])
    def test_invalid_options_rejected(self, data):
        with pytest.raises(ScreenshotOptionsError):
            ScreenshotOptions.from_dict(data)

    def test_invalid_options_error_is_a_value_error(self):
        assert issubclass(ScreenshotOptionsError, ValueError)


class TestCapture:
    def test_capture_returns_base64_and_metadata(self, screenshots, launcher):
        result = screenshots.capture("https://example.com")
        assert base64.b64decode(result.screenshot) == PNG_BYTES
        assert result.metadata["url"] == "https://example.com"
        assert result.metadata["width"] == 1920
        assert result.metadata["height"] == 2400
        assert result.metadata["timestamp"].endswith("Z")

        page = launcher.browsers[0].pages[0]
        assert page.viewport == {"width": 1920, "height": 1080}
        assert page.goto_calls == [("https://example.com", "networkidle", 30000)]
        assert page.waited_ms == 2000
        assert page.screenshot_kwargs == {"full_page": True, "type": "png"}
        assert page.closed

    def test_options_dict_is_applied(self, screenshots, launcher):
        screenshots.capture("https://example.com", {"width": 390, "height": 844, "delay": 0, "fullPage": False})
        page = launcher.browsers[0].pages[0]
        assert page.viewport == {"width": 390, "height": 844}
        assert page.waited_ms == 0
        assert page.screenshot_kwargs["full_page"] is False

    def test_browser_is_shared(self, screenshots, launcher):
        screenshots.capture("https://a.example")
        screenshots.capture("https://b.example")
        assert len(launcher.browsers) == 1
        assert len(launcher.browsers[0].pages) == 2

    def test_browser_relaunched_when_disconnected(self, screenshots, launcher):
        screenshots.capture("https://a.example")
        launcher.browsers[0].connected = False
        screenshots.capture("https://b.example")
        assert len(launcher.browsers) == 2

    def test_concurrent_first_captures_share_one_browser(self):
        launcher = FakeLauncher(launch_delay=0.2)
        service = ScreenshotService(launcher=launcher)
        errors = []

        def worker(i):
            try:
                service.capture(f"https://site{i}.example", {"delay": 0})
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        service.close()

        assert errors == []
        assert len(launcher.browsers) == 1
        assert len(launcher.browsers[0].pages) == 3
        assert launcher.browsers[0].closed

    def test_bad_options_fail_before_launch(self, screenshots, launcher):
        with pytest.raises(ScreenshotOptionsError):
            screenshots.capture("https://example.com", {"width": "wide"})
        assert launcher.browsers == []

    def test_capture_local_default_url(self, screenshots):
        result = screenshots.capture_local()
        assert result.metadata["url"] == "http://localhost:3000"


class TestFailures:
    def test_selector_timeout(self):
        launcher = FakeLauncher(missing_selectors={"#never"})
        service = ScreenshotService(launcher=launcher, selector_timeout_ms=50)
        try:
            with pytest.raises(ScreenshotError) as exc_info:
                service.capture("https://example.com", {"waitForSelector": "#never"})
            assert str(exc_info.value).startswith("Failed to capture screenshot:")
            assert exc_info.value.__cause__ is not None
            page = launcher.browsers[0].pages[0]
            assert page.selector_calls == [("#never", 50)]
            assert page.closed
        finally:
            service.close()

    def test_navigation_failure(self):
        launcher = FakeLauncher(fail_goto=True)
        service = ScreenshotService(launcher=launcher, navigation_timeout_ms=100)
        try:
            with pytest.raises(ScreenshotError, match="Failed to capture screenshot"):
                service.capture("https://slow.example")
            assert launcher.browsers[0].pages[0].closed
        finally:
            service.close()

    def test_service_usable_after_failure(self):
        launcher = FakeLauncher(missing_selectors={"#x"})
        service = ScreenshotService(launcher=launcher, selector_timeout_ms=10)
        try:
            with pytest.raises(ScreenshotError):
                service.capture("https://example.com", {"waitForSelector": "#x"})
            result = service.capture("https://example.com")
            assert result.metadata["url"] == "https://example.com"
        finally:
            service.close()


class TestClose:
    def test_close_is_idempotent(self, launcher):
        service = ScreenshotService(launcher=launcher)
        service.capture("https://example.com")
        service.close()
        service.close()
        assert launcher.stopped
        assert launcher.browsers[0].closed

    def test_capture_after_close_fails(self, launcher):
        service = ScreenshotService(launcher=launcher)
        service.close()
        with pytest.raises(ScreenshotError):
            service.capture("https://example.com")

    def test_close_without_use(self, launcher):
        service = ScreenshotService(launcher=launcher)
        service.close()
        assert launcher.browsers == []

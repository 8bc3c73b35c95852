"""Tests for the clone-frontend workflow and its guidance prompts."""
import base64

import pytest

from conftest import PNG_BYTES, FakeLauncher
from superui.clone import CloneRequest, CloneRequestError, CloneWorkflow
from superui.prompts import COMPLETION_MESSAGE, categorize_difference, generate_iteration_prompt
from superui.screenshot import ScreenshotError, ScreenshotService

PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def workflow(screenshots, catalog):
    return CloneWorkflow(screenshots, catalog)


def _request(**data):
    return CloneRequest.from_dict(data)


class TestRequest:
    def test_from_dict_reads_camel_case(self):
        req = _request(requestType="compare_screenshots", targetUrl="https://t.example",
                       localUrl="http://localhost:5173", iteration="2", differences=["a", "b"])
        assert req.request_type == "compare_screenshots"
        assert req.local_url == "http://localhost:5173"
        assert req.iteration == 2
        assert req.differences == ["a", "b"]

    def test_differences_must_be_list(self):
        with pytest.raises(CloneRequestError):
            _request(requestType="iteration_guide", differences="too dark")

    def test_iteration_must_be_number(self):
        with pytest.raises(CloneRequestError):
            _request(requestType="iteration_guide", iteration="first")

    def test_unknown_request_type(self, workflow):
        with pytest.raises(CloneRequestError, match="Invalid requestType"):
            workflow.handle(_request(requestType="deploy"))


class TestInitialAnalysis:
    def test_captures_target_url(self, workflow, launcher):
        resp = workflow.handle(_request(requestType="initial_analysis", targetUrl="https://t.example"))
        target = resp.screenshots["target"]
        assert target["data"] == PNG_B64
        assert target["mimeType"] == "image/png"
        assert target["metadata"]["url"] == "https://t.example"
        assert "# Target Website Analysis" in resp.text
        assert "component_suggestion" in resp.text
        assert len(launcher.browsers[0].pages) == 1

    def test_uses_provided_screenshot(self, workflow, launcher):
        resp = workflow.handle(_request(requestType="initial_analysis", targetScreenshotBase64="abc"))
        assert resp.screenshots["target"]["data"] == "abc"
        assert resp.screenshots["target"]["metadata"] == {"source": "user-provided"}
        assert launcher.browsers == []

    def test_requires_a_source(self, workflow):
        with pytest.raises(CloneRequestError, match="Either targetUrl or targetScreenshotBase64"):
            workflow.handle(_request(requestType="initial_analysis"))

    def test_capture_failure_propagates(self, catalog):
        service = ScreenshotService(launcher=FakeLauncher(fail_goto=True))
        try:
            with pytest.raises(ScreenshotError):
                CloneWorkflow(service, catalog).handle(
                    _request(requestType="initial_analysis", targetUrl="https://down.example")
                )
        finally:
            service.close()


class TestComponentSuggestion:
    def test_suggests_matched_components(self, workflow):
        resp = workflow.handle(_request(
            requestType="component_suggestion",
            targetDescription="A hero section with pricing cards and a FAQ",
        ))
        keys = [c.key for c in resp.components]
        assert keys[0] == "card"
        assert "accordion" in keys
        assert resp.installations[0] == "npx shadcn@latest add card"
        assert "**Card** (`card`)" in resp.text
        assert resp.to_dict()["components"][0]["componentName"] == "card"

    def test_long_description_is_truncated_in_summary(self, workflow):
        description = "hero " * 200
        resp = workflow.handle(_request(requestType="component_suggestion", targetDescription=description))
        assert description[:600] + "..." in resp.text
        assert description not in resp.text

    def test_requires_description(self, workflow):
        with pytest.raises(CloneRequestError, match="targetDescription"):
            workflow.handle(_request(requestType="component_suggestion"))


class TestCompareScreenshots:
    def test_captures_both(self, workflow, launcher):
        resp = workflow.handle(_request(
            requestType="compare_screenshots",
            targetUrl="https://t.example",
            localUrl="http://localhost:3000",
            iteration=3,
        ))
        assert set(resp.screenshots) == {"target", "current"}
        assert resp.screenshots["current"]["metadata"]["url"] == "http://localhost:3000"
        assert "# Iteration 3: Screenshot Comparison" in resp.text
        assert len(launcher.browsers[0].pages) == 2

    def test_provided_target_is_not_recaptured(self, workflow, launcher):
        resp = workflow.handle(_request(
            requestType="compare_screenshots",
            targetScreenshotBase64="abc",
            localUrl="http://localhost:3000",
        ))
        assert resp.screenshots["target"]["metadata"] == {"source": "provided-or-cached"}
        assert len(launcher.browsers[0].pages) == 1
        assert "# Iteration 1:" in resp.text

    def test_requires_local_url(self, workflow):
        with pytest.raises(CloneRequestError, match="localUrl is required"):
            workflow.handle(_request(requestType="compare_screenshots", targetScreenshotBase64="abc"))

    def test_requires_target(self, workflow):
        with pytest.raises(CloneRequestError):
            workflow.handle(_request(requestType="compare_screenshots", localUrl="http://localhost:3000"))


class TestIterationGuide:
    def test_no_differences_means_done(self, workflow):
        for differences in (None, []):
            resp = workflow.handle(_request(requestType="iteration_guide", differences=differences))
            assert resp.text == COMPLETION_MESSAGE

    def test_groups_differences(self, workflow):
        resp = workflow.handle(_request(
            requestType="iteration_guide",
            iteration=2,
            differences=["Card shadow is missing", "Hero heading is too small"],
        ))
        assert "# Iteration 2: Improvement Guide" in resp.text
        assert "### Components\n1. Card shadow is missing" in resp.text
        assert "### Typography\n2. Hero heading is too small" in resp.text
        assert "Iteration 2 complete" in resp.text


class TestPrompts:
    @pytest.mark.parametrize("difference,category", [
        ("Three column grid should be two columns", "layout"),
        ("Section padding is too large", "spacing"),
        ("Background color is white, target is dark", "colors"),
        ("Hero heading is too small", "typography"),
        ("Card shadow is missing", "components"),
        ("Buttons need rounded corners", "components"),
        ("Something feels off", "other"),
    ])
    def test_categorize(self, difference, category):
        assert categorize_difference(difference) == category

    def test_numbering_is_continuous_across_groups(self):
        text = generate_iteration_prompt(["Something feels off", "Section padding is too large"], 1)
        assert "### Spacing\n1. Section padding is too large" in text
        assert "### Other\n2. Something feels off" in text
        assert "2 difference(s) found" in text

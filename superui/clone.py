"""
Clone-frontend workflow: the four request types of the screenshot/compare loop.

  initial_analysis      capture (or accept) the target screenshot, return analysis prompt
  component_suggestion  match components from the assistant's analysis text
  compare_screenshots   capture target + local implementation side by side
  iteration_guide       turn reported differences into an ordered fix list
"""

import json
import logging
from dataclasses import dataclass, field

from superui.catalog import ComponentCatalog
from superui.matcher import match_components
from superui.prompts import (
    COMPLETION_MESSAGE,
    INITIAL_ANALYSIS_PROMPT,
    STYLE_COMPARISON_PROMPT,
    generate_iteration_prompt,
    implementation_order_markdown,
)
from superui.screenshot import ScreenshotService

logger = logging.getLogger(__name__)

REQUEST_TYPES = ("initial_analysis", "component_suggestion", "compare_screenshots", "iteration_guide")
MIME_TYPE = "image/png"
MAX_SUGGESTED_COMPONENTS = 15
SUMMARY_CHARS = 600


class CloneRequestError(ValueError):
    """Clone request is missing a field its request type needs, or names an unknown type."""


@dataclass
class CloneRequest:
    request_type: str
    target_url: str | None = None
    target_screenshot_base64: str | None = None
    local_url: str | None = None
    target_description: str | None = None
    current_description: str | None = None
    differences: list[str] | None = None
    iteration: int | None = None
    context: str | None = None
    screenshot_options: dict | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CloneRequest":
        differences = data.get("differences")
        if differences is not None and not isinstance(differences, list):
            raise CloneRequestError("differences must be a list of strings")
        try:
            iteration = int(data["iteration"]) if data.get("iteration") else None
        except (TypeError, ValueError):
            raise CloneRequestError("iteration must be a number") from None
        return cls(
            request_type=data.get("requestType") or "",
            target_url=data.get("targetUrl") or None,
            target_screenshot_base64=data.get("targetScreenshotBase64") or None,
            local_url=data.get("localUrl") or None,
            target_description=data.get("targetDescription") or None,
            current_description=data.get("currentDescription") or None,
            differences=[str(d) for d in differences] if differences is not None else None,
            iteration=iteration,
            context=data.get("context") or None,
            screenshot_options=data.get("screenshotOptions") or None,
        )


@dataclass
class CloneResponse:
    text: str
    screenshots: dict = field(default_factory=dict)
    components: list | None = None
    installations: list[str] | None = None

    def to_dict(self) -> dict:
        out = {"text": self.text}
        if self.screenshots:
            out["screenshots"] = self.screenshots
        if self.components is not None:
            out["components"] = [c.to_dict() for c in self.components]
        if self.installations is not None:
            out["installations"] = self.installations
        return out


def _screenshot_entry(data: str, metadata: dict) -> dict:
    return {"data": data, "mimeType": MIME_TYPE, "metadata": metadata}


class CloneWorkflow:
    """Stateless handler for clone requests. The caller carries screenshots between steps."""

    def __init__(self, screenshots: ScreenshotService, catalog: ComponentCatalog | None = None):
        self.screenshots = screenshots
        self.catalog = catalog

    def handle(self, request: CloneRequest) -> CloneResponse:
        """Dispatch on request_type.

        Raises:
            CloneRequestError: unknown type or a required field is missing
            ScreenshotError: a capture failed
        """
        logger.info("[clone] Handling %s", request.request_type)
        handlers = {
            "initial_analysis": self.initial_analysis,
            "component_suggestion": self.component_suggestion,
            "compare_screenshots": self.compare_screenshots,
            "iteration_guide": self.iteration_guide,
        }
        handler = handlers.get(request.request_type)
        if handler is None:
            raise CloneRequestError(f"Invalid requestType. Must be one of: {', '.join(REQUEST_TYPES)}")
        return handler(request)

    def _target_screenshot(self, request: CloneRequest, provided_source: str, missing_message: str):
        if request.target_url:
            result = self.screenshots.capture(request.target_url, request.screenshot_options)
            return result.screenshot, result.metadata
        if request.target_screenshot_base64:
            logger.info("[clone] Using provided target screenshot (%s)", provided_source)
            return request.target_screenshot_base64, {"source": provided_source}
        raise CloneRequestError(missing_message)

    # ── initial_analysis ──

    def initial_analysis(self, request: CloneRequest) -> CloneResponse:
        data, metadata = self._target_screenshot(
            request, "user-provided", "Either targetUrl or targetScreenshotBase64 is required"
        )
        text = f"""
# Target Website Analysis

The target screenshot has been captured and is provided below.

{INITIAL_ANALYSIS_PROMPT}

## Screenshot Metadata

```json
{json.dumps(metadata, indent=2)}
```

## Next Steps

1. Analyze the provided screenshot using your vision capabilities
2. Organize your findings in structured JSON format
3. Call `requestType: 'component_suggestion'` with your analysis as `targetDescription`

**Ready to analyze the screenshot!**
"""
        return CloneResponse(text=text, screenshots={"target": _screenshot_entry(data, metadata)})

    # ── component_suggestion ──

    def component_suggestion(self, request: CloneRequest) -> CloneResponse:
        description = request.target_description
        if not description:
            raise CloneRequestError("targetDescription is required for component_suggestion")

        match = match_components(description, self.catalog)
        top = match.components[:MAX_SUGGESTED_COMPONENTS]
        component_list = "\n".join(
            f"""
{i}. **{c.display_name}** (`{c.key}`)
   - {c.description}
   - Category: {c.category}
   - Import: `{c.import_snippet}`
   - Usage: `{c.usage_snippet}`"""
            for i, c in enumerate(top, 1)
        )
        install_commands = "\n".join(match.installations[:MAX_SUGGESTED_COMPONENTS])
        summary = description[:SUMMARY_CHARS] + ("..." if len(description) > SUMMARY_CHARS else "")

        text = f"""
# Component Recommendations & Implementation Guide

Based on your analysis, here are the recommended components for your implementation.
Use the `list_components` tool to find more components, and `get_component_details`
for the full installation guide of any of them.

**You are not limited to the options listed below.** If the UI needs additional or
different components, search for them and combine them as needed.

## 📋 Analysis Summary

{summary}

## 📦 Recommended Components ({len(top)})
{component_list}

## 🚀 Installation Commands

Run these commands in your project directory:

```bash
{install_commands}
```

## 🎯 Next Steps

1. Install the recommended components (or find others with `list_components` / `get_component_details`)
2. Generate your complete implementation based on your analysis
3. Use the component usage examples above as reference
4. Start your local development server (e.g., `npm run dev`)
5. Call `requestType: 'compare_screenshots'` with `localUrl` to compare

**Generate the implementation now!**
"""
        return CloneResponse(text=text, components=match.components, installations=match.installations)

    # ── compare_screenshots ──

    def compare_screenshots(self, request: CloneRequest) -> CloneResponse:
        target_data, target_meta = self._target_screenshot(
            request,
            "provided-or-cached",
            "Target screenshot source required (targetUrl or targetScreenshotBase64)",
        )
        if not request.local_url:
            raise CloneRequestError("localUrl is required to capture current implementation")

        current = self.screenshots.capture_local(request.local_url, request.screenshot_options)
        iteration = request.iteration or 1

        text = f"""
# Iteration {iteration}: Screenshot Comparison

Two screenshots are provided below:
1. **Target Screenshot** - The original website to clone
2. **Current Implementation** - Your current work in progress

{STYLE_COMPARISON_PROMPT}

## Screenshot Metadata

### Target
```json
{json.dumps(target_meta, indent=2)}
```

### Current Implementation
```json
{json.dumps(current.metadata, indent=2)}
```

## Next Steps

1. Compare both screenshots using your vision capabilities
2. Evaluate each checklist item (✅ Match, ⚠️ Close, ❌ Different)
3. Create a detailed list of differences
4. Call `requestType: 'iteration_guide'` with the `differences` array

**Ready to compare screenshots!**
"""
        return CloneResponse(
            text=text,
            screenshots={
                "target": _screenshot_entry(target_data, target_meta),
                "current": _screenshot_entry(current.screenshot, current.metadata),
            },
        )

    # ── iteration_guide ──

    def iteration_guide(self, request: CloneRequest) -> CloneResponse:
        if not request.differences:
            logger.info("[clone] No differences reported, clone complete")
            return CloneResponse(text=COMPLETION_MESSAGE)

        iteration = request.iteration or 1
        logger.info("[clone] Iteration %d guide for %d differences", iteration, len(request.differences))

        text = f"""
{generate_iteration_prompt(request.differences, iteration)}

## 🛠️ Implementation Strategy

### Recommended Order:
{implementation_order_markdown()}

### Tips:
- Make one category of changes at a time
- Test after each change
- Use browser DevTools to inspect and compare
- Reference the target screenshot frequently

## 🔄 Next Steps

1. Apply the suggested improvements to your code
2. Save and let your dev server refresh
3. Call `requestType: 'compare_screenshots'` again to verify changes
4. Continue iterating until satisfied or differences are minimal

**Iteration {iteration} complete. Continue improving!**
"""
        return CloneResponse(text=text)

"""
SuperUI MCP Server.
Exposes shadcn/ui component lookup, landing page templates and the clone-frontend loop
as MCP tools. Every tool calls the SuperUI API server; when it cannot be reached the
tool answers with a local fallback guide instead of an error.

Run (stdio, the default for editor integrations):
    python server.py API_BASE_URL=http://localhost:3001 TIMEOUT=30000
Run with HTTP transport:
    MCP_TRANSPORT=streamable-http MCP_PORT=8000 python server.py
"""

import base64
import binascii
import json
import logging
import sys

from mcp.server.fastmcp import FastMCP, Image

from superui import __version__
from superui.catalog import CATEGORIES
from superui.config import load_settings
from superui.http_client import ApiClient, ApiError

logger = logging.getLogger("superui.mcp")

DEFAULT_LOCAL_URL = "http://localhost:3000"
LIST_ALL_LIMIT = 1000

mcp = FastMCP(
    "SuperUI",
    json_response=True,
)

_client: ApiClient | None = None


def _get_client() -> ApiClient:
    global _client
    if _client is None:
        _client = ApiClient.from_settings(load_settings(sys.argv[1:]))
    return _client


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:].lower()


# --- Resources ---

@mcp.resource("superui://categories")
def get_categories_resource() -> str:
    """Component categories accepted by list_components."""
    return json.dumps(list(CATEGORIES), indent=2)


# ────────────── Tool 1: list_components ──────────────

@mcp.tool()
def list_components(query: str | None = None, category: str | None = None, limit: int | None = None) -> str:
    """
    List all available UI components, or search/filter them. First step of component discovery:
    call with no arguments to see every component, then use get_component_details on the one you pick.

    query: optional search text, e.g. "animated button", "date picker", "chat interface"
    category: optional filter: form, layout, navigation, data, feedback, ai, advanced-button, text
    limit: optional maximum number of results (default: all)
    """
    try:
        data = _get_client().post("/api/component/list", {
            "query": query or "all",
            "category": category,
            "limit": limit or LIST_ALL_LIMIT,
        })
    except ApiError as e:
        logger.error("[list_components] %s", e)
        return _list_fallback(e)

    results = data.get("results", [])
    lines = []
    for i, comp in enumerate(results, 1):
        badge = f" [{comp['library']}]" if comp.get("library") else ""
        lines.append(
            f"{i}. **{comp['name']}** ({comp['displayName']}){badge}\n"
            f"   - Category: {comp['category']}\n"
            f"   - {comp['description']}"
        )
    query_text = f'matching "{query}"' if query else "(all components)"
    category_text = f" in category: {category}" if category else ""
    example = results[0]["name"] if results else "button"
    return f"""
# Component Search Results

Found {len(results)} component(s) {query_text}{category_text}

{chr(10).join(lines) if lines else "_No components matched. Try a broader query or no query at all._"}

---

## Next Steps

To get full installation instructions for a specific component, use:
`get_component_details(component_name="component-name-here")`

For example:
- `get_component_details(component_name="{example}")`
"""


# ────────────── Tool 2: get_component_details ──────────────

@mcp.tool()
def get_component_details(
    component_name: str,
    absolute_path_to_current_file: str = "",
    absolute_path_to_project_directory: str = "",
) -> str:
    """
    Full installation guide for one component: install command, install path, import statement,
    usage example, documentation links. Second step of component discovery, after list_components.

    component_name: exact component name, e.g. button, glow-button, ai-message, typing-text
    absolute_path_to_current_file: file the component will be used in
    absolute_path_to_project_directory: project root
    """
    try:
        data = _get_client().post("/api/component/details", {
            "componentName": component_name,
            "absolutePathToCurrentFile": absolute_path_to_current_file,
            "absolutePathToProjectDirectory": absolute_path_to_project_directory,
        })
        return data["result"]
    except (ApiError, KeyError) as e:
        logger.error("[get_component_details] %s", e)
        return _component_fallback(component_name, absolute_path_to_project_directory, e)


# ────────────── Tool 3: get_component ──────────────

@mcp.tool()
def get_component(
    message: str,
    search_query: str,
    absolute_path_to_current_file: str = "",
    absolute_path_to_project_directory: str = "",
    standalone_request_query: str = "",
) -> str:
    """
    Get a UI component and instructions to install it in the project ("/ui get button",
    "I need a card component"). Returns the npx install command, import statement,
    usage example and install path.

    message: the user's full message
    search_query: component to look for, 2-4 words, e.g. "button", "date picker"
    absolute_path_to_current_file: file the component will be used in
    absolute_path_to_project_directory: project root
    standalone_request_query: the request restated with project context
    """
    try:
        data = _get_client().post("/api/component", {
            "message": message,
            "searchQuery": search_query,
            "absolutePathToCurrentFile": absolute_path_to_current_file,
            "absolutePathToProjectDirectory": absolute_path_to_project_directory,
            "standaloneRequestQuery": standalone_request_query or message or search_query,
        })
        return data["result"]
    except (ApiError, KeyError) as e:
        logger.error("[get_component] %s", e)
        return _component_fallback(search_query, absolute_path_to_project_directory, e)


# ────────────── Tools 4-5: get_template / build_landing ──────────────

def _converse(tool: str, message: str, conversation_state: dict | None, current_file: str,
              project_dir: str, standalone_request_query: str) -> str:
    try:
        data = _get_client().post("/api/template", {
            "message": message,
            "conversationState": conversation_state,
            "absolutePathToCurrentFile": current_file,
            "absolutePathToProjectDirectory": project_dir,
            "standaloneRequestQuery": standalone_request_query or message,
        })
        result = data["result"]
    except (ApiError, KeyError) as e:
        logger.error("[%s] %s", tool, e)
        return _template_fallback(message, project_dir, e)

    state = data.get("conversationState")
    if state and not data.get("complete"):
        result += (
            "\n\n---\n\nPass this back as `conversation_state` together with the user's answer:\n\n"
            f"```json\n{json.dumps(state, indent=2)}\n```\n"
        )
    return result


@mcp.tool()
def get_template(
    message: str,
    conversation_state: dict | None = None,
    absolute_path_to_current_file: str = "",
    absolute_path_to_project_directory: str = "",
    standalone_request_query: str = "",
) -> str:
    """
    Create a landing page template through a short conversation ("/template", "I need a SaaS
    landing page"). Asks 4 questions (purpose, audience, desired action, style), then returns
    recommended Tailark sections with install commands.

    message: the user's message, or their answer to the last question
    conversation_state: the state returned by the previous call; omit to start over
    absolute_path_to_current_file: file the template will be used in
    absolute_path_to_project_directory: project root
    standalone_request_query: the request restated with project context
    """
    return _converse("get_template", message, conversation_state, absolute_path_to_current_file,
                     absolute_path_to_project_directory, standalone_request_query)


@mcp.tool()
def build_landing(
    message: str,
    conversation_state: dict | None = None,
    absolute_path_to_current_file: str = "",
    absolute_path_to_project_directory: str = "",
    standalone_request_query: str = "",
) -> str:
    """
    Build a landing page step by step ("/landing", "build me a landing page for my app").
    Same conversation as get_template: 4 questions, then the recommended page structure.

    message: the user's message, or their answer to the last question
    conversation_state: the state returned by the previous call; omit to start over
    absolute_path_to_current_file: file the page will be used in
    absolute_path_to_project_directory: project root
    standalone_request_query: the request restated with project context
    """
    return _converse("build_landing", message, conversation_state, absolute_path_to_current_file,
                     absolute_path_to_project_directory, standalone_request_query)


# ────────────── Tool 6: clone_frontend ──────────────

@mcp.tool()
def clone_frontend(
    request_type: str,
    target_url: str | None = None,
    target_screenshot_base64: str | None = None,
    local_url: str | None = None,
    target_description: str | None = None,
    differences: list[str] | None = None,
    iteration: int | None = None,
    screenshot_options: dict | None = None,
    context: str | None = None,
) -> list:
    """
    Clone a target website by iteratively comparing screenshots and improving the implementation.
    The server captures screenshots with a headless browser; you analyze them and write the code.

    Workflow:
      1. initial_analysis: target_url (or target_screenshot_base64) -> target screenshot + analysis prompt
      2. component_suggestion: target_description (your analysis) -> recommended components + install commands
      3. compare_screenshots: target_url + local_url -> target and current screenshots + checklist
      4. iteration_guide: differences (list of strings) -> ordered fix list; repeat from 3

    request_type: initial_analysis | component_suggestion | compare_screenshots | iteration_guide
    local_url: local dev server (default http://localhost:3000)
    iteration: current iteration number (default 1)
    screenshot_options: {fullPage, width, height, waitForSelector, delay}
    """
    try:
        data = _get_client().post("/api/clone", {
            "requestType": request_type,
            "targetUrl": target_url,
            "targetScreenshotBase64": target_screenshot_base64,
            "localUrl": local_url or DEFAULT_LOCAL_URL,
            "targetDescription": target_description,
            "differences": differences,
            "iteration": iteration or 1,
            "screenshotOptions": screenshot_options,
            "context": context,
        })
    except ApiError as e:
        logger.error("[clone_frontend] %s", e)
        return [_clone_fallback(e)]

    content: list = [data.get("text", "")]
    screenshots = data.get("screenshots") or {}
    for role in ("target", "current"):
        shot = screenshots.get(role)
        if not shot:
            continue
        try:
            content.append(Image(data=base64.b64decode(shot["data"]), format="png"))
        except (binascii.Error, KeyError, TypeError) as e:
            logger.warning("[clone_frontend] Skipping %s screenshot: %s", role, e)
    logger.info("[clone_frontend] %s -> %d content item(s)", request_type, len(content))
    return content


# --- Fallback guides (API server unreachable) ---

def _component_fallback(name: str, project_dir: str, error: Exception) -> str:
    key = name.strip().lower()
    cd_line = f"cd {project_dir}\n" if project_dir else ""
    return f"""
# Component Installation Guide

## Component: {name}

⚠️ **API Server Unavailable**

The SuperUI API server is not responding. Here's a basic installation guide:

### Manual Installation

```bash
{cd_line}npx shadcn@latest add {key}
```

### Basic Usage

```tsx
import {{ {_capitalize(key)} }} from "@/components/ui/{key}";

// Use the component in your JSX
<{_capitalize(key)} />
```

### Next Steps

1. Make sure the SuperUI API server is running (http://localhost:3001)
2. Check the API server configuration in your .env file
3. Verify the component name is correct
4. Try the request again

**Error Details:** {error}
"""


def _list_fallback(error: Exception) -> str:
    return f"""
# Component Search Error

⚠️ **API Server Unavailable**

The SuperUI API server is not responding.

**Error Details:** {error}

### Troubleshooting Steps

1. Verify the API server is running (default: http://localhost:3001)
2. Check the API server logs for errors
3. Ensure the MCP server configuration is correct
4. Try restarting the API server

### Manual Alternative

You can search available components manually at:
- [shadcn/ui Components](https://ui.shadcn.com/docs/components)
- [shadcn/ui AI Components](https://www.shadcn.io/ai)
- [shadcn/ui Button Components](https://www.shadcn.io/button)
- [shadcn/ui Text Components](https://www.shadcn.io/text)
"""


def _template_fallback(message: str, project_dir: str, error: Exception) -> str:
    cd_line = f"cd {project_dir}\n" if project_dir else ""
    return f"""
# Template Generation Guide

## Template Request: {message}

⚠️ **API Server Unavailable**

The SuperUI API server is not responding. Here's a manual template creation guide:

### Manual Template Creation

```bash
{cd_line}pnpm dlx shadcn add @tailark/hero-section-1
pnpm dlx shadcn add @tailark/features-1
pnpm dlx shadcn add @tailark/pricing-1
pnpm dlx shadcn add @tailark/footer-1
```

### Available Tailark Sections

- Hero sections
- Features sections
- Pricing tables
- Testimonials
- Call-to-action sections
- Footer components

### Next Steps

1. Make sure the SuperUI API server is running
2. Check the API server configuration
3. Try the request again

**Error Details:** {error}
"""


def _clone_fallback(error: Exception) -> str:
    return f"""
# Clone Frontend Error

⚠️ **API Server Unavailable**

The SuperUI API server is not responding, so screenshots cannot be captured.

**Error Details:** {error}

### Next Steps

1. Start the SuperUI API server (default: http://localhost:3001)
2. Make sure Playwright's Chromium is installed: `playwright install chromium`
3. Try the request again
"""


def main(argv: list[str] | None = None):
    global _client
    settings = load_settings(argv if argv is not None else sys.argv[1:])
    # stdout carries the MCP protocol on stdio; logs go to stderr.
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _client = ApiClient.from_settings(settings)
    logger.info("SuperUI MCP Server v%s", __version__)
    logger.info("  API Base URL: %s", settings.api_base_url)
    logger.info("  Timeout: %dms", settings.timeout_ms)
    logger.info("  Transport: %s", settings.mcp_transport)

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.settings.host = settings.host
        mcp.settings.port = settings.mcp_port
        mcp.run(transport=settings.mcp_transport)


if __name__ == "__main__":
    main()

"""
LangChain tools over the component catalog, for agents that run in-process.

Same data as the MCP server, without the HTTP hop. Every tool returns a JSON string.
"""

import json

from langchain_core.tools import tool

from superui.catalog import get_catalog
from superui.details import documentation_url, install_command
from superui.matcher import match_components
from superui.search import find_component, get_component_by_name, list_components as _list_components


# ────────────── Tool 1: list_components (MCP equivalent) ──────────────

@tool
def list_components(query: str = "", category: str = "", limit: int = 0) -> str:
    """List UI components, optionally filtered by a search query and/or category.
    An empty query returns every component.

    Args:
        query: Search text, e.g. "animated button"
        category: form, layout, navigation, data, feedback, ai, advanced-button or text
        limit: Maximum results, 0 for all
    """
    results = _list_components(query or None, category or None, limit or None)
    return json.dumps([r.summary() for r in results], indent=2)


# ────────────── Tool 2: get_component_spec (MCP equivalent) ──────────────

@tool
def get_component_spec(component_name: str) -> str:
    """Get the full record for one component: import statement, usage, install command, docs link.

    Args:
        component_name: Component name or synonym, e.g. button, modal, glow-button
    """
    record = get_component_by_name(component_name.strip().lower()) or find_component(component_name)
    if record is None:
        available = list(get_catalog().records)
        return json.dumps({"error": f"'{component_name}' not found", "available": available})
    spec = record.to_dict()
    spec["installCommand"] = install_command(record)
    spec["documentationUrl"] = documentation_url(record)
    return json.dumps(spec, indent=2)


# ────────────── Tool 3: suggest_components (clone helper) ──────────────

@tool
def suggest_components(page_description: str) -> str:
    """Suggest components for a described page or screenshot analysis, highest priority first.

    Args:
        page_description: Free text, e.g. "hero with gradient heading, pricing cards, FAQ"
    """
    match = match_components(page_description)
    return json.dumps({
        "patterns": match.matched_patterns,
        "components": [
            {"name": r.key, "priority": match.priorities[r.key], "install": cmd}
            for r, cmd in zip(match.components, match.installations)
        ],
    }, indent=2)


ALL_TOOLS = [list_components, get_component_spec, suggest_components]

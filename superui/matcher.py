"""
Visual pattern matcher: free-text page analysis -> suggested components.

Each pattern is a keyword list, a component list and a priority. A pattern
matches when any of its keywords is a substring of the lowercased analysis; every
component of a matched pattern is suggested, tagged with the highest priority of
the patterns that suggested it.
"""

import logging
from dataclasses import dataclass

from superui.catalog import ComponentCatalog, ComponentRecord, get_catalog
from superui.details import install_command

logger = logging.getLogger(__name__)

DEFAULT_COMPONENTS = ("button", "card", "input")
DEFAULT_PRIORITY = 5


@dataclass(frozen=True)
class VisualPattern:
    name: str
    keywords: tuple[str, ...]
    component_keys: tuple[str, ...]
    priority: int


VISUAL_PATTERNS: tuple[VisualPattern, ...] = (
    VisualPattern(
        "hero",
        ("hero", "banner", "jumbotron", "large heading", "main heading", "hero section",
         "landing header", "above the fold", "headline"),
        ("card", "button", "gradient-text", "glow-button", "gradient-button"),
        10,
    ),
    VisualPattern(
        "navigation",
        ("navigation", "navbar", "nav bar", "menu", "header", "nav links", "top menu",
         "navigation bar", "site navigation", "main nav"),
        ("navigation-menu", "menubar", "tabs", "breadcrumb", "dropdown-menu"),
        9,
    ),
    VisualPattern(
        "features",
        ("features", "feature grid", "benefits", "three columns", "3 columns", "icon grid",
         "feature cards", "feature list", "key features", "highlights"),
        ("card", "badge", "avatar", "separator"),
        8,
    ),
    VisualPattern(
        "form",
        ("form", "input", "contact form", "signup", "sign up", "login", "text field",
         "input field", "form field", "contact", "subscribe"),
        ("form", "input", "textarea", "button", "select", "checkbox", "label"),
        8,
    ),
    VisualPattern(
        "pricing",
        ("pricing", "plans", "tiers", "subscription", "price table", "pricing table",
         "pricing cards", "plan options", "packages"),
        ("card", "badge", "button", "separator", "switch", "toggle"),
        7,
    ),
    VisualPattern(
        "testimonials",
        ("testimonials", "reviews", "quotes", "feedback", "customer stories", "testimonial",
         "review", "customer feedback", "user reviews", "ratings"),
        ("card", "avatar", "carousel", "badge"),
        7,
    ),
    VisualPattern(
        "cta",
        ("call to action", "cta", "sign up", "get started", "try now", "action button",
         "primary button", "start free trial", "download"),
        ("button", "glow-button", "gradient-button", "shimmer-button"),
        9,
    ),
    VisualPattern(
        "stats",
        ("statistics", "stats", "numbers", "metrics", "counter", "achievements",
         "key numbers", "data", "analytics"),
        ("card", "counting-number", "sliding-number", "badge", "progress"),
        6,
    ),
    VisualPattern(
        "gallery",
        ("gallery", "images", "portfolio", "showcase", "image grid", "photo gallery",
         "image showcase", "work samples"),
        ("carousel", "card", "aspect-ratio", "dialog"),
        6,
    ),
    VisualPattern(
        "faq",
        ("faq", "questions", "accordion", "collapsible", "q&a", "frequently asked", "help", "support"),
        ("accordion", "collapsible", "card"),
        5,
    ),
    VisualPattern(
        "footer",
        ("footer", "site footer", "bottom", "copyright", "links footer", "footer links", "social links"),
        ("separator", "button", "navigation-menu"),
        4,
    ),
    VisualPattern(
        "table",
        ("table", "data table", "grid", "rows", "columns", "comparison table", "feature comparison"),
        ("table", "badge", "checkbox"),
        6,
    ),
    VisualPattern(
        "tabs",
        ("tabs", "tabbed", "tab navigation", "tab panel", "switch between", "toggle views"),
        ("tabs", "toggle-group"),
        7,
    ),
)


@dataclass(frozen=True)
class MatchResult:
    components: list[ComponentRecord]
    priorities: dict[str, int]
    installations: list[str]
    matched_patterns: list[str]


def match_priorities(analysis: str, patterns=VISUAL_PATTERNS) -> tuple[dict[str, int], list[str]]:
    """Map component key -> highest priority among matched patterns, plus the matched pattern names.

    Falls back to DEFAULT_COMPONENTS at DEFAULT_PRIORITY when nothing matches.
    """
    text = (analysis or "").lower()
    priorities: dict[str, int] = {}
    matched: list[str] = []

    for pattern in patterns:
        for keyword in pattern.keywords:
            if keyword in text:
                logger.info("[matcher] Matched pattern %s (keyword: %r)", pattern.name, keyword)
                matched.append(pattern.name)
                for key in pattern.component_keys:
                    priorities[key] = max(priorities.get(key, 0), pattern.priority)
                break

    if not priorities:
        logger.info("[matcher] No patterns matched, using default components")
        priorities = {key: DEFAULT_PRIORITY for key in DEFAULT_COMPONENTS}
    return priorities, matched


def match_components(analysis: str, catalog: ComponentCatalog | None = None) -> MatchResult:
    """Suggest components for a page description, highest priority first.

    Args:
        analysis: Free-text description of the target page
        catalog: Catalog used to resolve component keys

    Returns:
        MatchResult with records, their priorities and install commands
    """
    if catalog is None:
        catalog = get_catalog()
    priorities, matched = match_priorities(analysis)

    components = [catalog.get(key) for key in priorities if catalog.get(key) is not None]
    components.sort(key=lambda r: priorities[r.key], reverse=True)
    installations = [install_command(r) for r in components]

    logger.info("[matcher] Matched %d components from %d pattern(s)", len(components), len(matched))
    return MatchResult(
        components=components,
        priorities={r.key: priorities[r.key] for r in components},
        installations=installations,
        matched_patterns=matched,
    )

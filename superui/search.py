"""
Component lookup and search over a ComponentCatalog.

Two code paths with different contracts, kept separate on purpose:
  - find_component: first rule that hits wins (key, alias, tag, key substring)
  - search_ranked: every component scored on a tier ladder, sorted by score

Callers depend on the difference (e.g. find_component("text") resolves the alias
to Input, while search_ranked("text") puts Textarea first on a key-prefix hit).
"""

import logging
import re

from superui.catalog import ComponentCatalog, ComponentRecord, get_catalog

logger = logging.getLogger(__name__)

_RE_WHITESPACE = re.compile(r"\s+")

LIST_ALL_QUERY = "all"

# Tier ladder: only the first matching tier counts.
SCORE_EXACT_KEY = 100
SCORE_EXACT_DISPLAY_NAME = 90
SCORE_KEY_PREFIX = 80
SCORE_DISPLAY_NAME_PREFIX = 70
SCORE_KEY_CONTAINS = 60
SCORE_DISPLAY_NAME_CONTAINS = 50
SCORE_TAG_EXACT = 40
SCORE_TAG_CONTAINS = 30
SCORE_DESCRIPTION_CONTAINS = 20
DESCRIPTION_WORD_BONUS = 5


def normalize_query(query: str | None) -> str:
    return (query or "").lower().strip()


# ────────────── Single-result lookup ──────────────

def get_component_by_name(name: str, catalog: ComponentCatalog | None = None) -> ComponentRecord | None:
    """Exact key lookup, no normalization."""
    if catalog is None:
        catalog = get_catalog()
    return catalog.get(name)


def find_component(query: str, catalog: ComponentCatalog | None = None) -> ComponentRecord | None:
    """Return one component for a free-text query, or None.

    Rules, first hit wins:
        1. exact key
        2. alias table
        3. first component with a tag that is a substring of the query or contains it
        4. first component whose key is a substring of the query or contains it

    Args:
        query: e.g. "modal", "btn", "date picker"
        catalog: catalog to search (defaults to the process-wide one)
    """
    if catalog is None:
        catalog = get_catalog()
    q = normalize_query(query)
    if not q:
        return None

    record = catalog.get(q)
    if record:
        return record

    record = catalog.resolve_alias(q)
    if record:
        return record

    for record in catalog:
        if any(tag in q or q in tag for tag in record.tags):
            return record

    for record in catalog:
        if record.key in q or q in record.key:
            return record

    return None


# ────────────── Ranked search ──────────────

def score_component(record: ComponentRecord, query: str) -> int:
    """Relevance of one component for an already-normalized, non-empty query."""
    display = record.display_name.lower()
    description = record.description.lower()

    if record.key == query:
        score = SCORE_EXACT_KEY
    elif display == query:
        score = SCORE_EXACT_DISPLAY_NAME
    elif record.key.startswith(query):
        score = SCORE_KEY_PREFIX
    elif display.startswith(query):
        score = SCORE_DISPLAY_NAME_PREFIX
    elif query in record.key:
        score = SCORE_KEY_CONTAINS
    elif query in display:
        score = SCORE_DISPLAY_NAME_CONTAINS
    elif query in record.tags:
        score = SCORE_TAG_EXACT
    elif any(query in tag for tag in record.tags):
        score = SCORE_TAG_CONTAINS
    elif query in description:
        score = SCORE_DESCRIPTION_CONTAINS
    else:
        score = 0

    words = _RE_WHITESPACE.split(query)
    if len(words) > 1:
        score += DESCRIPTION_WORD_BONUS * sum(1 for w in dict.fromkeys(words) if w in description)
    return score


def rank_components(
    query: str,
    category: str | None = None,
    catalog: ComponentCatalog | None = None,
) -> list[tuple[ComponentRecord, int]]:
    """Score every component (optionally in one category); drop zeros; sort descending.

    Ties keep catalog order. An empty query ranks nothing.
    """
    if catalog is None:
        catalog = get_catalog()
    q = normalize_query(query)
    if not q:
        return []

    candidates = catalog.by_category(category) if category else catalog.all()
    scored = []
    for record in candidates:
        score = score_component(record, q)
        if score > 0:
            scored.append((record, score))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def search_ranked(
    query: str,
    category: str | None = None,
    limit: int | None = None,
    catalog: ComponentCatalog | None = None,
) -> list[ComponentRecord]:
    """Components matching query, most relevant first.

    Args:
        query: Free text, e.g. "animated button"
        category: Exact category filter (form, layout, ai, ...)
        limit: Maximum results; None returns every match
    """
    results = [record for record, _ in rank_components(query, category, catalog)]
    if limit is not None:
        results = results[: max(limit, 0)]
    logger.info("[search] ranked %r (category=%s): %d result(s)", query, category or "all", len(results))
    return results


# ────────────── Listing ──────────────

def get_all_components(catalog: ComponentCatalog | None = None) -> list[ComponentRecord]:
    if catalog is None:
        catalog = get_catalog()
    return catalog.all()


def get_components_by_category(category: str, catalog: ComponentCatalog | None = None) -> list[ComponentRecord]:
    if catalog is None:
        catalog = get_catalog()
    return catalog.by_category(category)


def search_components(text: str, catalog: ComponentCatalog | None = None) -> list[ComponentRecord]:
    """Unranked substring search over key, display name, description and tags."""
    if catalog is None:
        catalog = get_catalog()
    q = normalize_query(text)
    if not q:
        return []
    return [
        r for r in catalog
        if q in r.key
        or q in r.display_name.lower()
        or q in r.description.lower()
        or any(q in tag for tag in r.tags)
    ]


def list_components(
    query: str | None = None,
    category: str | None = None,
    limit: int | None = None,
    catalog: ComponentCatalog | None = None,
) -> list[ComponentRecord]:
    """The list operation behind list_components: everything, or a ranked search.

    A missing, blank or "all" query lists the catalog (optionally one category)
    in table order; anything else goes through search_ranked.
    """
    q = normalize_query(query)
    if not q or q == LIST_ALL_QUERY:
        results = get_components_by_category(category, catalog) if category else get_all_components(catalog)
        if limit is not None:
            results = results[: max(limit, 0)]
        return results
    return search_ranked(q, category, limit, catalog)

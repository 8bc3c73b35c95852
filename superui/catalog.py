"""
Component catalog: the static table of shadcn/ui-style components.

Loaded once from superui/data/components.json into an immutable ComponentCatalog
(records and alias table are read-only mappings). Search and lookup functions take
the catalog as an argument; get_catalog() returns the process-wide instance.
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
CATALOG_PATH = DATA_DIR / "components.json"

CATEGORIES = (
    "form",
    "layout",
    "navigation",
    "data",
    "feedback",
    "ai",
    "advanced-button",
    "text",
)

LIBRARIES = ("shadcn-ui", "shadcn-ai", "shadcn-button", "shadcn-text")

_REQUIRED_TEXT = ("key", "display_name", "package_name", "import_snippet", "usage_snippet", "description")


class CatalogError(ValueError):
    """The component data file is malformed."""


@dataclass(frozen=True)
class ComponentRecord:
    key: str
    display_name: str
    package_name: str
    import_snippet: str
    usage_snippet: str
    description: str
    category: str
    tags: tuple[str, ...]
    library: str | None = None
    install_command: str | None = None
    documentation_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentRecord":
        for name in _REQUIRED_TEXT:
            if not str(data.get(name) or "").strip():
                raise CatalogError(f"component {data.get('key')!r}: '{name}' must be non-empty")
        category = data.get("category")
        if category not in CATEGORIES:
            raise CatalogError(f"component {data['key']!r}: unknown category {category!r}")
        library = data.get("library")
        if library is not None and library not in LIBRARIES:
            raise CatalogError(f"component {data['key']!r}: unknown library {library!r}")
        return cls(
            key=data["key"],
            display_name=data["display_name"],
            package_name=data["package_name"],
            import_snippet=data["import_snippet"],
            usage_snippet=data["usage_snippet"],
            description=data["description"],
            category=category,
            tags=tuple(data.get("tags") or ()),
            library=library,
            install_command=data.get("install_command"),
            documentation_url=data.get("documentation_url"),
        )

    def to_dict(self) -> dict:
        """Wire form used by the HTTP API (camelCase, optional fields omitted when unset)."""
        out = {
            "componentName": self.key,
            "displayName": self.display_name,
            "packageName": self.package_name,
            "importStatement": self.import_snippet,
            "usage": self.usage_snippet,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
        }
        if self.library:
            out["library"] = self.library
        if self.install_command:
            out["installCommand"] = self.install_command
        if self.documentation_url:
            out["documentationUrl"] = self.documentation_url
        return out

    def summary(self) -> dict:
        out = {
            "name": self.key,
            "displayName": self.display_name,
            "description": self.description,
            "category": self.category,
        }
        if self.library:
            out["library"] = self.library
        return out


class ComponentCatalog:
    """Read-only, insertion-ordered map of component key -> ComponentRecord, plus aliases."""

    def __init__(self, records, aliases: Mapping[str, str] | None = None):
        table: dict[str, ComponentRecord] = {}
        for record in records:
            if record.key in table:
                raise CatalogError(f"duplicate component key {record.key!r}")
            table[record.key] = record
        alias_table: dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            alias = alias.lower().strip()
            if target not in table:
                raise CatalogError(f"alias {alias!r} points at unknown component {target!r}")
            if alias in table:
                raise CatalogError(f"alias {alias!r} shadows a component key")
            alias_table[alias] = target
        self._records = MappingProxyType(table)
        self._aliases = MappingProxyType(alias_table)

    @property
    def records(self) -> Mapping[str, ComponentRecord]:
        return self._records

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def get(self, key: str) -> ComponentRecord | None:
        return self._records.get(key)

    def resolve_alias(self, alias: str) -> ComponentRecord | None:
        target = self._aliases.get(alias)
        return self._records[target] if target else None

    def by_category(self, category: str) -> list[ComponentRecord]:
        return [r for r in self._records.values() if r.category == category]

    def all(self) -> list[ComponentRecord]:
        return list(self._records.values())

    def __iter__(self) -> Iterator[ComponentRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key) -> bool:
        return key in self._records


def load_catalog(path: Path | str = CATALOG_PATH) -> ComponentCatalog:
    """Read a component data file and build a catalog from it.

    Args:
        path: JSON file with "components" (list) and "aliases" (object)

    Returns:
        A new ComponentCatalog
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    records = [ComponentRecord.from_dict(c) for c in data.get("components", [])]
    catalog = ComponentCatalog(records, data.get("aliases", {}))
    logger.info("[catalog] Loaded %d components, %d aliases from %s", len(catalog), len(catalog.aliases), Path(path).name)
    return catalog


_catalog: ComponentCatalog | None = None
_catalog_lock = threading.Lock()


def get_catalog() -> ComponentCatalog:
    """Return the process-wide catalog, loading it on first use."""
    global _catalog
    if _catalog is None:
        with _catalog_lock:
            if _catalog is None:
                _catalog = load_catalog()
    return _catalog

"""
Markdown rendering for component lookups: installation guide, not-found page,
install path inference and documentation links.
"""

import logging

from superui.catalog import ComponentCatalog, ComponentRecord
from superui.search import find_component, get_component_by_name

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_PATH = "src/components/ui"
SHADCN_DOCS_URL = "https://ui.shadcn.com/docs/components"

_DOC_URL_TEMPLATES = {
    "shadcn-ui": "https://ui.shadcn.com/docs/components/{key}",
    "shadcn-ai": "https://www.shadcn.io/ai/{slug}",
    "shadcn-button": "https://www.shadcn.io/button/{key}",
    "shadcn-text": "https://www.shadcn.io/text/{key}",
}

_LIBRARY_LABELS = {
    "shadcn-ui": "shadcn/ui Documentation",
    "shadcn-ai": "shadcn/ui AI Components",
    "shadcn-button": "shadcn/ui Button Components",
    "shadcn-text": "shadcn/ui Text Components",
}

# Shown on the not-found page, grouped the way the catalog is.
POPULAR_COMPONENTS = {
    "Form Components": [
        ("button", "Button component"),
        ("input", "Text input component"),
        ("textarea", "Multi-line text input"),
        ("select", "Dropdown select component"),
        ("checkbox", "Checkbox input"),
        ("radio-group", "Radio button group"),
    ],
    "Layout Components": [
        ("card", "Content container"),
        ("sheet", "Slide-out panel"),
        ("dialog", "Modal dialog"),
        ("popover", "Floating panel"),
    ],
    "Navigation Components": [
        ("tabs", "Tabbed interface"),
        ("accordion", "Collapsible content"),
        ("breadcrumb", "Navigation breadcrumb"),
    ],
    "Data Display Components": [
        ("table", "Data table"),
        ("badge", "Status indicator"),
        ("avatar", "Profile image"),
        ("progress", "Progress bar"),
        ("skeleton", "Loading placeholder"),
    ],
    "Feedback Components": [
        ("alert", "Alert notification"),
        ("toast", "Toast notification"),
        ("separator", "Visual separator"),
    ],
}


def install_command(record: ComponentRecord) -> str:
    return record.install_command or f"npx shadcn@latest add {record.key}"


def documentation_url(record: ComponentRecord) -> str:
    if record.documentation_url:
        return record.documentation_url
    template = _DOC_URL_TEMPLATES.get(record.library or "shadcn-ui", _DOC_URL_TEMPLATES["shadcn-ui"])
    slug = record.key[3:] if record.key.startswith("ai-") else record.key
    return template.format(key=record.key, slug=slug)


def determine_install_path(current_file: str, project_dir: str) -> str:
    """Where `shadcn add` will put the component, judged from the file being edited.

    Args:
        current_file: Absolute path to the file the component will be used in
        project_dir: Absolute path to the project root
    """
    current_file = (current_file or "").replace("\\", "/")
    project_dir = (project_dir or "").replace("\\", "/")
    relative = current_file.replace(project_dir, "", 1) if project_dir else current_file
    relative = relative.lower()

    if "/components/" in relative:
        parts = relative.split("/")
        idx = parts.index("components")
        if idx < len(parts) - 1:
            return "/".join(parts[: idx + 1]).lstrip("/") + "/ui"

    if "/src/" in relative:
        return "src/components/ui"
    if "/app/" in relative:
        return "app/components/ui"
    if "/lib/" in relative:
        return "lib/components/ui"
    return DEFAULT_INSTALL_PATH


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def render_component(record: ComponentRecord, install_path: str, project_dir: str = "") -> str:
    """Installation guide for one component."""
    cd_line = f"cd {project_dir}\n" if project_dir else ""
    resources = [f"- [{_LIBRARY_LABELS.get(record.library or 'shadcn-ui')}]({documentation_url(record)})"]
    if (record.library or "shadcn-ui") == "shadcn-ui":
        resources.append("- [Radix UI Documentation](https://www.radix-ui.com/primitives)")

    return f"""
# {record.display_name}

{record.description}

## 📦 Installation

```bash
{cd_line}{install_command(record)}
```

## 📁 Installation Path

The component will be installed to:
`{install_path}`

## 🔧 Import Statement

```tsx
{record.import_snippet}
```

## 💡 Basic Usage

```tsx
{record.usage_snippet}
```

## 🏷️ Component Details

- **Name**: {record.display_name}
- **Package**: {record.package_name}
- **Category**: {_capitalize_first(record.category)}
- **Tags**: {", ".join(record.tags)}

## 📚 Additional Resources

{chr(10).join(resources)}

## 🚀 Next Steps

1. Run the installation command above
2. Import the component in your file
3. Use the component as shown in the usage example
4. Customize the component with additional props and styling

## 💡 Pro Tips

- Check the component's props in the documentation for customization options
- Use Tailwind CSS classes for styling
- Consider using the component's variants (e.g., `variant="outline"` for buttons)
- Test the component in different states (loading, disabled, etc.)
"""


def render_not_found(query: str, project_dir: str = "") -> str:
    """Markdown body for an unknown component. Not an error: callers return it with 200."""
    sections = []
    for heading, entries in POPULAR_COMPONENTS.items():
        lines = "\n".join(f"- `{key}` - {label}" for key, label in entries)
        sections.append(f"#### {heading}\n{lines}")
    cd_line = f"cd {project_dir}\n" if project_dir else ""

    return f"""
# Component Not Found

## Search Query: "{query}"

❌ **Component "{query}" not found in the SuperUI library.**

### Available Components

Here are some popular components you can try:

{chr(10).join(sections)}

### Try Again

Please try with one of the available component names:

```bash
{cd_line}npx shadcn@latest add button
```

### Need Help?

If you're looking for a specific component that's not listed above, please:
1. Check the [shadcn/ui documentation]({SHADCN_DOCS_URL})
2. Verify the component name spelling
3. Try using a more generic term (e.g., "form" instead of "contact-form")
"""


def get_component_guide(
    search_query: str,
    current_file: str = "",
    project_dir: str = "",
    catalog: ComponentCatalog | None = None,
) -> str:
    """Installation guide for the first component matching a free-text query."""
    logger.info("[details] Component request for %r", search_query)
    record = find_component(search_query, catalog)
    if record is None:
        logger.info("[details] No component for %r", search_query)
        return render_not_found(search_query, project_dir)
    logger.info("[details] Found %s", record.display_name)
    return render_component(record, determine_install_path(current_file, project_dir), project_dir)


def get_component_details(
    component_name: str,
    current_file: str = "",
    project_dir: str = "",
    catalog: ComponentCatalog | None = None,
) -> str:
    """Installation guide for a named component: exact key first, then the fuzzy lookup."""
    name = (component_name or "").strip()
    record = get_component_by_name(name.lower(), catalog) or find_component(name, catalog)
    if record is None:
        return render_not_found(name, project_dir)
    return render_component(record, determine_install_path(current_file, project_dir), project_dir)

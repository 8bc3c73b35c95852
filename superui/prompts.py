"""
Guidance text for the clone-frontend loop.

The assistant on the other end does the vision work; these prompts tell it what
to look at and how to report back.
"""

import re

COMPARISON_CHECKLIST = {
    "layout": [
        "Overall page structure and section order",
        "Container widths and alignment",
        "Grid / column counts",
        "Responsive breakpoints visible at this width",
    ],
    "components": [
        "Navigation bar items and placement",
        "Buttons (variant, size, icon)",
        "Cards, badges and other content containers",
        "Form fields and their states",
    ],
    "colors": [
        "Background colors and gradients",
        "Text colors (headings, body, muted)",
        "Accent / brand colors on buttons and links",
        "Border colors",
    ],
    "typography": [
        "Font family",
        "Heading sizes and weights",
        "Body text size and line height",
        "Letter spacing and text transforms",
    ],
    "spacing": [
        "Section vertical padding",
        "Gaps between grid items",
        "Inner padding of cards and buttons",
        "Margins between headings and text",
    ],
    "effects": [
        "Shadows",
        "Border radius",
        "Opacity and blur",
        "Hover / animation hints",
    ],
}

_CATEGORY_KEYWORDS = {
    "layout": re.compile(r"\b(layout|align|column|grid|row|position|width|structure|order|flex)", re.I),
    "spacing": re.compile(r"\b(spacing|padding|margin|gap|space|tall|height)", re.I),
    "colors": re.compile(r"\b(colou?r|background|gradient|bg-|text-\w+-\d)", re.I),
    "typography": re.compile(r"\b(font|text size|heading|bold|weight|typography|letter|line height)", re.I),
    "components": re.compile(r"\b(button|card|nav|menu|input|badge|icon|image|logo|component)", re.I),
    "effects": re.compile(r"\b(shadow|radius|rounded|border|opacity|blur|animation|hover)", re.I),
}

IMPLEMENTATION_ORDER = (
    ("Layout fixes first", "Get the structure right"),
    ("Component adjustments", "Fix sizes, styles, arrangements"),
    ("Spacing polish", "Fine-tune margins and padding"),
    ("Content adjustments", "Adjust text content, image positioning, icon placement"),
    ("Color corrections", "Match the color palette"),
    ("Typography refinement", "Adjust text sizes and weights"),
    ("Visual effects", "Adjust shadows, gradients, borders, and opacity"),
    ("Other adjustments", "Adjust other aspects of the UI to match the target screenshot"),
)


def _checklist_markdown() -> str:
    blocks = []
    for category, items in COMPARISON_CHECKLIST.items():
        lines = "\n".join(f"- [ ] {item}" for item in items)
        blocks.append(f"### {category.capitalize()}\n{lines}")
    return "\n\n".join(blocks)


INITIAL_ANALYSIS_PROMPT = """## Analysis Instructions

Study the target screenshot from top to bottom and describe:

1. **Layout**: sections in order (navigation, hero, features, pricing, footer...), column counts, container width
2. **Components**: every distinct UI element (buttons, cards, inputs, badges, tabs, carousels...)
3. **Colors**: background, text, accent and border colors (hex values where you can tell)
4. **Typography**: font style, heading and body sizes, weights
5. **Spacing**: section padding, gaps, card padding
6. **Effects**: shadows, gradients, border radius, animations hinted by the design

Write the analysis as plain text or JSON. Use the section names above (hero, navigation,
features, pricing, testimonials, stats, gallery, faq, footer, table, tabs, call to action)
so matching components can be suggested."""


STYLE_COMPARISON_PROMPT = f"""## Comparison Checklist

Compare the current implementation against the target, one category at a time.
Mark each item ✅ Match, ⚠️ Close or ❌ Different.

{_checklist_markdown()}

Report every ⚠️ and ❌ item as one entry in the `differences` list, specific enough
to act on (e.g. "Hero heading is text-4xl, target looks text-6xl")."""


COMPLETION_MESSAGE = """
# ✅ Clone Complete

No differences were reported between the target and the current implementation.

## Final Checks

1. Resize the browser to check mobile and tablet widths
2. Check hover and focus states on interactive elements
3. Replace placeholder copy and images with real content
4. Run your linter and build once more

**Great work, the implementation matches the target!**
"""


def categorize_difference(difference: str) -> str:
    """First checklist category whose keywords appear in the difference, else "other"."""
    for category, pattern in _CATEGORY_KEYWORDS.items():
        if pattern.search(difference):
            return category
    return "other"


def generate_iteration_prompt(differences: list[str], iteration: int) -> str:
    """Numbered differences grouped by checklist category."""
    grouped: dict[str, list[str]] = {}
    for diff in differences:
        grouped.setdefault(categorize_difference(diff), []).append(diff)

    order = list(COMPARISON_CHECKLIST) + ["other"]
    blocks = []
    n = 0
    for category in order:
        if category not in grouped:
            continue
        lines = []
        for diff in grouped[category]:
            n += 1
            lines.append(f"{n}. {diff}")
        blocks.append(f"### {category.capitalize()}\n" + "\n".join(lines))

    return f"""
# Iteration {iteration}: Improvement Guide

{len(differences)} difference(s) found between the target and the current implementation.

## 📝 Differences to Fix

{chr(10).join(blocks)}
"""


def implementation_order_markdown() -> str:
    return "\n".join(f"{i}. **{title}** - {detail}" for i, (title, detail) in enumerate(IMPLEMENTATION_ORDER, 1))

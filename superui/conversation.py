"""
Landing page template conversation.

Four fixed questions, asked in order. The server keeps nothing between calls:
each reply carries the ConversationState the caller must send back with the next
answer. Once four answers are in, every further call renders the same template.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

TOTAL_STEPS = 4
INSTALL_PREFIX = "pnpm dlx shadcn add @tailark/"


@dataclass(frozen=True)
class Question:
    key: str
    text: str
    options: tuple[str, ...]
    option_notes: tuple[str, ...] = ()


QUESTIONS: tuple[Question, ...] = (
    Question(
        "purpose",
        "What is this landing page for?",
        ("SaaS Product", "Mobile App", "Ecommerce Product", "Personal Portfolio", "Event", "Other"),
        (
            "Software as a Service application",
            "Mobile application or app store listing",
            "Online store or product showcase",
            "Personal website or portfolio",
            "Conference, workshop, or event page",
            "Something else (please specify)",
        ),
    ),
    Question(
        "targetAudience",
        "Who is your target audience?",
        ("Customers", "Investors", "Partners", "Job Applicants", "General Users"),
    ),
    Question(
        "desiredAction",
        "What action do you want visitors to take?",
        ("Sign up", "Request a demo", "Buy", "Subscribe to newsletter", "Contact you"),
    ),
    Question(
        "style",
        "What style or tone do you prefer?",
        ("Professional", "Friendly", "Creative", "Minimalist"),
    ),
)

ANSWER_KEYS = tuple(q.key for q in QUESTIONS)


class ConversationStateError(ValueError):
    """conversationState sent by the caller is not usable."""


@dataclass(frozen=True)
class ConversationState:
    current_step: int = 0
    total_steps: int = TOTAL_STEPS
    answers: dict = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return self.current_step >= TOTAL_STEPS

    @classmethod
    def from_dict(cls, data: dict) -> "ConversationState":
        if not isinstance(data, dict):
            raise ConversationStateError("conversationState must be an object")
        try:
            step = int(data.get("currentStep", 0) or 0)
        except (TypeError, ValueError):
            raise ConversationStateError("conversationState.currentStep must be a number") from None
        answers = data.get("answers") or {}
        if not isinstance(answers, dict):
            raise ConversationStateError("conversationState.answers must be an object")
        return cls(
            current_step=max(step, 0),
            answers={str(k): str(v) for k, v in answers.items()},
        )

    def to_dict(self) -> dict:
        out = {
            "currentStep": self.current_step,
            "totalSteps": self.total_steps,
            "answers": dict(self.answers),
        }
        if not self.complete:
            out["nextQuestion"] = QUESTIONS[self.current_step].text
        return out


@dataclass(frozen=True)
class ConversationReply:
    result: str
    state: ConversationState
    complete: bool


@dataclass(frozen=True)
class Section:
    name: str
    component: str
    description: str
    priority: int


# ────────────── Answers ──────────────

def resolve_answer(question: Question, message: str) -> str:
    """Map "2" or "mobile app" to the option label; anything else is kept as typed."""
    text = (message or "").strip()
    if text.isdigit() and 1 <= int(text) <= len(question.options):
        return question.options[int(text) - 1]
    for option in question.options:
        if text.lower() == option.lower():
            return option
    return text


def advance(state: ConversationState | None, message: str, project_dir: str = "") -> ConversationReply:
    """One conversation turn.

    Args:
        state: State returned by the previous turn, or None to (re)start
        message: The user's answer to the question asked last turn
        project_dir: Project root, used in the setup commands of the final template

    Returns:
        ConversationReply with Markdown to show and the state to send back next time
    """
    if state is None:
        logger.info("[template] Starting new conversation")
        state = ConversationState()
        return ConversationReply(render_question(state), state, False)

    if state.complete:
        return ConversationReply(render_template(state.answers, project_dir), state, True)

    question = QUESTIONS[state.current_step]
    answers = dict(state.answers)
    answers[question.key] = resolve_answer(question, message)
    state = ConversationState(current_step=state.current_step + 1, answers=answers)
    logger.info("[template] Step %d/%d: %s=%r", state.current_step, TOTAL_STEPS, question.key, answers[question.key])

    if state.complete:
        return ConversationReply(render_template(state.answers, project_dir), state, True)
    return ConversationReply(render_question(state), state, False)


# ────────────── Rendering ──────────────

def render_question(state: ConversationState) -> str:
    """The question for the step after state.current_step, with previous answers."""
    number = state.current_step + 1
    question = QUESTIONS[state.current_step]
    if question.option_notes:
        options = "\n".join(
            f"{i}. **{opt}** - {note}" for i, (opt, note) in enumerate(zip(question.options, question.option_notes), 1)
        )
    else:
        options = "\n".join(f"{i}. **{opt}**" for i, opt in enumerate(question.options, 1))

    intro = ""
    if number == 1:
        intro = (
            "Let's create a custom landing page template for you! I'll ask you a few questions to "
            "understand your needs and recommend the perfect sections and components.\n\n"
        )
    previous = ""
    if state.answers:
        lines = "\n".join(f"- {k}: {v}" for k, v in state.answers.items())
        previous = f"\n---\n\n**Previous answers:**\n{lines}\n"

    return f"""
# 🎨 Landing Page Template Generator

{intro}## Question {number} of {TOTAL_STEPS}

**{question.text}**

Please choose one of the following options:

{options}

Please respond with the number or name of your choice, and I'll ask the next question!
{previous}"""


_PURPOSE_SECTIONS = {
    "SaaS Product": (
        Section("Features", "features-1", "Product features and benefits", 9),
        Section("Pricing", "pricing-1", "Pricing plans and tiers", 8),
        Section("Testimonials", "testimonials-1", "Customer testimonials", 7),
    ),
    "Mobile App": (
        Section("Features", "features-1", "App features and functionality", 9),
        Section("Stats", "stats-1", "Download numbers and user stats", 8),
        Section("Testimonials", "testimonials-1", "User reviews and ratings", 7),
    ),
    "Ecommerce Product": (
        Section("Features", "features-1", "Product features and benefits", 9),
        Section("Testimonials", "testimonials-1", "Customer reviews", 8),
        Section("Content", "content-1", "Product details", 7),
    ),
    "Personal Portfolio": (
        Section("Content", "content-1", "About section and experience", 9),
        Section("Testimonials", "testimonials-1", "Client testimonials", 8),
        Section("Team", "team-1", "Personal information", 7),
    ),
    "Event": (
        Section("Content", "content-1", "Event details and agenda", 9),
        Section("Stats", "stats-1", "Event statistics", 8),
        Section("Testimonials", "testimonials-1", "Previous event feedback", 7),
    ),
}

_INVESTOR_SECTIONS = (
    Section("Stats", "stats-1", "Key metrics and growth", 8),
    Section("Team", "team-1", "Founding team and advisors", 7),
)

_CTA_ACTIONS = ("Sign up", "Request a demo", "Subscribe to newsletter", "Contact you")

HERO_SECTION = Section("Hero Section", "hero-section-1", "Main landing section with headline and CTA", 10)
FOOTER_SECTION = Section("Footer", "footer-1", "Site footer with links", 1)

STYLE_RECOMMENDATIONS = {
    "Professional": (
        "Use clean, corporate colors (blues, grays)",
        "Choose professional fonts (Inter, Roboto)",
        "Keep layouts structured and formal",
        "Use subtle animations and transitions",
        "Focus on trust and credibility indicators",
    ),
    "Friendly": (
        "Use warm, approachable colors (oranges, greens)",
        "Choose friendly fonts (Poppins, Open Sans)",
        "Add rounded corners and soft shadows",
        "Use conversational copy and tone",
        "Include social proof and testimonials",
    ),
    "Creative": (
        "Use bold, vibrant colors and gradients",
        "Choose creative fonts (Montserrat, Playfair)",
        "Add dynamic animations and interactions",
        "Use unique layouts and visual elements",
        "Showcase creativity and innovation",
    ),
    "Minimalist": (
        "Use lots of white space and clean lines",
        "Choose simple, readable fonts (Helvetica, Arial)",
        "Stick to monochromatic or limited color palettes",
        "Focus on typography and content",
        "Remove unnecessary elements and distractions",
    ),
}

_DEFAULT_STYLE = (
    "Choose colors that match your brand",
    "Use fonts that reflect your personality",
    "Create a layout that serves your content",
    "Test different approaches and iterate",
    "Focus on user experience and conversion",
)


def select_sections(answers: dict) -> list[Section]:
    """Sections for the answers, highest priority first, one entry per component."""
    sections = [HERO_SECTION]
    sections.extend(_PURPOSE_SECTIONS.get(answers.get("purpose", ""), ()))
    if answers.get("targetAudience") == "Investors":
        sections.extend(_INVESTOR_SECTIONS)

    action = answers.get("desiredAction", "")
    if action in _CTA_ACTIONS:
        sections.append(Section("Call to Action", "call-to-action-1", "Action-oriented section", 9))
    elif action == "Buy":
        sections.append(Section("Pricing", "pricing-1", "Product pricing", 9))
    sections.append(FOOTER_SECTION)

    sections.sort(key=lambda s: s.priority, reverse=True)
    seen = set()
    unique = []
    for section in sections:
        if section.component not in seen:
            seen.add(section.component)
            unique.append(section)
    return unique


def style_recommendations(style: str) -> str:
    return "\n".join(f"- {tip}" for tip in STYLE_RECOMMENDATIONS.get(style, _DEFAULT_STYLE))


def render_template(answers: dict, project_dir: str = "") -> str:
    """Final landing page template for a complete answer set. Deterministic."""
    a = {key: answers.get(key, "") for key in ANSWER_KEYS}
    sections = select_sections(a)

    section_blocks = "".join(
        f"""
### {i}. {s.name}
- **Tailark Component**: `@tailark/{s.component}`
- **Description**: {s.description}
- **Priority**: {s.priority}/10
- **Installation**: `{INSTALL_PREFIX}{s.component}`
"""
        for i, s in enumerate(sections, 1)
    )
    installs = "\n".join(f"{INSTALL_PREFIX}{s.component}" for s in sections)
    cd_line = f"cd {project_dir}\n\n" if project_dir else ""
    tree = "\n".join(f"│   │   ├── {s.component}.tsx" for s in sections)

    return f"""
# 🎨 Your Custom Landing Page Template

Based on your answers, here's your personalized template:

## 📋 Your Requirements

- **Purpose**: {a["purpose"]}
- **Target Audience**: {a["targetAudience"]}
- **Desired Action**: {a["desiredAction"]}
- **Style**: {a["style"]}

## 🏗️ Recommended Page Structure
{section_blocks}
## 🚀 Quick Setup

```bash
{cd_line}# Install all recommended components
{installs}
```

## 📁 Suggested File Structure

```
src/
├── components/
│   ├── sections/
{tree}
│   └── ui/
│       └── (shadcn components)
├── app/
│   └── page.tsx
└── lib/
    └── utils.ts
```

## 💡 Implementation Tips

### Hero Section
- Make it compelling and action-oriented
- Include a clear value proposition
- Add a prominent call-to-action button

### Features Section
- Highlight your unique value proposition
- Use icons and visual elements
- Keep it scannable and easy to read

### Pricing Section (if applicable)
- Be transparent and competitive
- Show value clearly
- Include testimonials or social proof

### Call-to-Action
- Make it prominent and clear
- Use action-oriented language
- Reduce friction in the signup process

## 🎨 Style Recommendations

Based on your **{a["style"]}** preference:

{style_recommendations(a["style"])}

## 🔧 Next Steps

1. **Install Components**: Run the installation commands above
2. **Create Layout**: Set up your main page structure
3. **Customize Content**: Add your brand copy and images
4. **Style & Brand**: Apply your brand colors and fonts
5. **Test & Optimize**: Test on different devices and optimize

## 📚 Additional Resources

- [Tailark Blocks](https://tailark.com)
- [Shadcn/UI Components](https://ui.shadcn.com/docs)
- [Tailwind CSS](https://tailwindcss.com/docs)
"""


HELP_INFO = {
    "title": "SuperUI Template Generator",
    "description": "Generate custom landing page templates through conversation",
    "version": "1.0.0",
    "features": [
        "Interactive conversation flow",
        "Tailark component integration",
        "Custom section recommendations",
        "Style and tone customization",
        "Installation commands",
    ],
    "usage": {
        "start": "Send a message without conversationState to start template generation",
        "conversation": "Answer 4 questions, sending back the conversationState from each reply",
        "result": "Get a complete template with installation commands",
    },
    "questions": [q.text for q in QUESTIONS],
    "supportedComponents": [
        "hero", "features", "pricing", "testimonials",
        "stats", "team", "content", "call-to-action", "footer",
    ],
}

"""Tests for the four-question landing page conversation."""
import pytest

from superui.conversation import (
    QUESTIONS,
    ConversationState,
    ConversationStateError,
    advance,
    render_template,
    resolve_answer,
    select_sections,
)

SAAS_ANSWERS = {
    "purpose": "SaaS Product",
    "targetAudience": "Investors",
    "desiredAction": "Sign up",
    "style": "Professional",
}


def _run(messages, project_dir=""):
    reply = advance(None, "")
    replies = [reply]
    for message in messages:
        reply = advance(reply.state, message, project_dir)
        replies.append(reply)
    return replies


class TestAdvance:
    def test_start_asks_first_question(self):
        reply = advance(None, "hi")
        assert not reply.complete
        assert reply.state.current_step == 0
        assert "## Question 1 of 4" in reply.result
        assert "What is this landing page for?" in reply.result
        assert "**SaaS Product** - Software as a Service application" in reply.result

    def test_steps_advance_by_one(self):
        replies = _run(["1", "Investors", "sign up", "Professional"])
        assert [r.state.current_step for r in replies] == [0, 1, 2, 3, 4]
        assert [r.complete for r in replies] == [False, False, False, False, True]

    def test_answers_recorded_under_question_keys(self):
        final = _run(["1", "2", "1", "4"])[-1]
        assert final.state.answers == {
            "purpose": "SaaS Product",
            "targetAudience": "Investors",
            "desiredAction": "Sign up",
            "style": "Minimalist",
        }

    def test_next_question_shows_previous_answers(self):
        reply = _run(["Mobile App"])[-1]
        assert "## Question 2 of 4" in reply.result
        assert "**Previous answers:**\n- purpose: Mobile App" in reply.result
        assert reply.state.to_dict()["nextQuestion"] == QUESTIONS[1].text

    def test_complete_state_is_terminal(self):
        final = _run(["1", "Investors", "Sign up", "Professional"], "/proj")[-1]
        again = advance(final.state, "anything else", "/proj")
        assert again.complete
        assert again.state == final.state
        assert again.result == final.result

    def test_template_includes_project_dir(self):
        final = _run(["1", "1", "1", "1"], "/proj")[-1]
        assert "cd /proj\n\n# Install all recommended components" in final.result


class TestResolveAnswer:
    @pytest.mark.parametrize("message,expected", [
        ("2", "Mobile App"),
        ("  mobile app ", "Mobile App"),
        ("A podcast", "A podcast"),
        ("9", "9"),
        ("0", "0"),
    ])
    def test_purpose(self, message, expected):
        assert resolve_answer(QUESTIONS[0], message) == expected


class TestSections:
    def test_saas_investors_signup(self):
        names = [s.component for s in select_sections(SAAS_ANSWERS)]
        assert names == [
            "hero-section-1", "features-1", "call-to-action-1", "pricing-1",
            "stats-1", "testimonials-1", "team-1", "footer-1",
        ]

    def test_hero_first_footer_last(self):
        for purpose in QUESTIONS[0].options:
            sections = select_sections({"purpose": purpose})
            assert sections[0].component == "hero-section-1"
            assert sections[-1].component == "footer-1"

    def test_no_duplicate_components(self):
        answers = dict(SAAS_ANSWERS, desiredAction="Buy")
        components = [s.component for s in select_sections(answers)]
        assert len(components) == len(set(components))
        pricing = [s for s in select_sections(answers) if s.component == "pricing-1"]
        assert pricing[0].priority == 9

    def test_sorted_by_priority(self):
        priorities = [s.priority for s in select_sections(SAAS_ANSWERS)]
        assert priorities == sorted(priorities, reverse=True)


class TestRenderTemplate:
    def test_requirements_and_installs(self):
        text = render_template(SAAS_ANSWERS)
        assert "- **Purpose**: SaaS Product" in text
        assert "pnpm dlx shadcn add @tailark/hero-section-1" in text
        assert "Use clean, corporate colors (blues, grays)" in text

    def test_unknown_style_uses_generic_tips(self):
        text = render_template(dict(SAAS_ANSWERS, style="Retro"))
        assert "Choose colors that match your brand" in text

    def test_deterministic(self):
        assert render_template(SAAS_ANSWERS, "/p") == render_template(dict(SAAS_ANSWERS), "/p")


class TestState:
    def test_round_trip(self):
        state = ConversationState(current_step=2, answers={"purpose": "Event", "targetAudience": "Partners"})
        assert ConversationState.from_dict(state.to_dict()) == state

    def test_complete_state_has_no_next_question(self):
        assert "nextQuestion" not in ConversationState(current_step=4).to_dict()

    @pytest.mark.parametrize("data", [
        "step 2",
        {"currentStep": "two"},
        {"currentStep": 1, "answers": ["purpose"]},
    ])
    def test_invalid_state_rejected(self, data):
        with pytest.raises(ConversationStateError):
            ConversationState.from_dict(data)

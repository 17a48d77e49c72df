import pytest

from utils.prompts import (
    EVALUATION_FOCUS,
    FIRST_QUESTION_TEMPLATES,
    SCENARIO_TEMPLATES,
    build_evaluation_prompt,
    build_first_question_prompt,
    build_sample_answer_prompt,
    build_scenario_prompt,
    customization_instruction,
    domain_instruction,
    format_history,
)
from utils.schemas import ConversationTurn, Difficulty, Domain, InterviewSettings, InterviewType


class TestTemplateTables:
    @pytest.mark.parametrize("table", [SCENARIO_TEMPLATES, FIRST_QUESTION_TEMPLATES, EVALUATION_FOCUS])
    def test_every_interview_type_has_an_entry(self, table):
        assert set(table) == set(InterviewType)

    @pytest.mark.parametrize("interview_type", list(InterviewType))
    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_scenario_prompt_renders_completely(self, interview_type, difficulty):
        prompt = build_scenario_prompt(InterviewSettings(difficulty=difficulty, interview_type=interview_type))
        assert difficulty.value in prompt
        assert "{" not in prompt and "}" not in prompt

    @pytest.mark.parametrize("interview_type", list(InterviewType))
    def test_scenario_prompt_varies_by_difficulty(self, interview_type):
        prompts = {
            build_scenario_prompt(InterviewSettings(difficulty=d, interview_type=interview_type))
            for d in Difficulty
        }
        assert len(prompts) == 3

    @pytest.mark.parametrize("interview_type", list(InterviewType))
    def test_first_question_prompt_embeds_scenario(self, interview_type):
        prompt = build_first_question_prompt("The checkout team is overloaded.", interview_type)
        assert "The checkout team is overloaded." in prompt
        assert "Provide ONLY the question." in prompt


class TestInstructions:
    def test_general_domain(self):
        assert "not specific to any industry" in domain_instruction(Domain.GENERAL)

    def test_specific_domain(self):
        assert "E-commerce / Retail industry" in domain_instruction(Domain.ECOMMERCE)

    def test_customization_is_empty_without_company_or_job(self):
        assert customization_instruction() == ""

    def test_customization_fills_missing_parts(self):
        text = customization_instruction(job_description="Lead UAT for a core banking migration.")
        assert "an unspecified company" in text
        assert "Lead UAT for a core banking migration." in text


class TestEvaluationPrompt:
    def test_focused_types_mention_their_label(self):
        settings = InterviewSettings(interview_type=InterviewType.UAT)
        prompt = build_evaluation_prompt(settings, "scenario", "history", "answer", 1, 5)
        assert "Evaluation Focus (User Acceptance Testing (UAT))" in prompt
        assert "{interview_type}" not in prompt

    def test_defaults_for_missing_company_and_job(self):
        prompt = build_evaluation_prompt(InterviewSettings(), "scenario", "history", "answer", 3, 5)
        assert "**Company:** Not specified" in prompt
        assert "**Job Description:** Not provided" in prompt
        assert "**Current Turn:** 3 of 5" in prompt
        assert '"isGameOver": false' in prompt


class TestSampleAnswerPrompt:
    def test_behavioral_uses_star(self):
        prompt = build_sample_answer_prompt("s", InterviewType.BEHAVIORAL, "", "Tell me about a conflict.")
        assert "STAR" in prompt

    def test_other_types_use_default_instruction(self):
        prompt = build_sample_answer_prompt("s", InterviewType.SYSTEM_DESIGN, "", "How would you scale reads?")
        assert "directly addresses all parts of the question" in prompt
        assert '"How would you scale reads?"' in prompt


class TestFormatHistory:
    def test_empty(self):
        assert format_history([]) == ""

    def test_turns_are_joined_by_blank_line(self):
        turns = [
            ConversationTurn(question="Q1", category="Strategy Analysis", answer="A1", feedback="F1"),
            ConversationTurn(question="Q2"),
        ]
        assert format_history(turns) == (
            "Interviewer (Strategy Analysis): Q1\nCandidate: A1\n\n"
            "Interviewer (General): Q2\nCandidate: "
        )

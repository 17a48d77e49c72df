import logging
from typing import Optional
from utils.config import AppConfig
from utils.errors import GenerationError, SampleAnswerError
from utils.prompts import build_scenario_prompt, build_first_question_prompt, build_sample_answer_prompt
from utils.schemas import InterviewSettings, InterviewType
from agents.llm import build_chat_model, message_text

logger = logging.getLogger(__name__)


class InterviewerAgent:
    """Plain-text generation: scenario, opening question and sample answers."""

    def __init__(self, llm=None, config: Optional[AppConfig] = None):
        self.llm = llm if llm is not None else build_chat_model(config or AppConfig.from_env())

    async def _generate(self, prompt: str) -> str:
        response = await self.llm.ainvoke(prompt)
        text = message_text(response)
        if not text:
            raise ValueError("LLM returned an empty response")
        return text

    async def generate_scenario(self, settings: InterviewSettings) -> str:
        prompt = build_scenario_prompt(settings)
        try:
            return await self._generate(prompt)
        except Exception as e:
            logger.exception("Error generating scenario for type %s", settings.interview_type.value)
            raise GenerationError("Failed to generate interview scenario.") from e

    async def ask_first_question(self, scenario: str, interview_type: InterviewType) -> str:
        prompt = build_first_question_prompt(scenario, interview_type)
        try:
            return await self._generate(prompt)
        except Exception as e:
            logger.exception("Error generating first question for type %s", InterviewType(interview_type).value)
            raise GenerationError("Failed to generate the first question.") from e

    async def generate_sample_answer(
        self,
        scenario: str,
        interview_type: InterviewType,
        history_text: str,
        current_question: str,
        company_name: str = "",
        job_description: str = "",
    ) -> str:
        prompt = build_sample_answer_prompt(
            scenario, interview_type, history_text, current_question, company_name, job_description
        )
        try:
            return await self._generate(prompt)
        except Exception as e:
            logger.exception("Error generating sample answer for type %s", InterviewType(interview_type).value)
            raise SampleAnswerError("Failed to generate a sample answer.") from e

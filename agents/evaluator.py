import logging
from typing import Optional
from pydantic import ValidationError
from utils.config import AppConfig
from utils.errors import EvaluationError
from utils.prompts import build_evaluation_prompt
from utils.schemas import EVALUATION_RESPONSE_SCHEMA, EvaluationResult, InterviewSettings
from agents.llm import build_chat_model, message_text, strip_code_fences

logger = logging.getLogger(__name__)


class EvaluatorAgent:
    def __init__(self, llm=None, config: Optional[AppConfig] = None):
        # 응답 스키마를 지정한 JSON 전용 모델
        self.llm = llm if llm is not None else build_chat_model(
            config or AppConfig.from_env(), response_schema=EVALUATION_RESPONSE_SCHEMA
        )

    async def evaluate_answer(
        self,
        settings: InterviewSettings,
        scenario: str,
        conversation_history: str,
        answer: str,
        turn_number: int,
        max_turns: int,
    ) -> EvaluationResult:
        """Evaluate one answer and get the next question.

        Raises EvaluationError when the call fails or the reply is not exactly
        an EvaluationResult object (missing or unknown fields included).
        """
        final_prompt = build_evaluation_prompt(
            settings, scenario, conversation_history, answer, turn_number, max_turns
        )
        try:
            response = await self.llm.ainvoke(final_prompt)
        except Exception as e:
            logger.exception("Error evaluating answer (turn %d of %d)", turn_number, max_turns)
            raise EvaluationError("Failed to evaluate answer and get the next question.") from e

        cleaned_content = strip_code_fences(message_text(response))
        try:
            return EvaluationResult.model_validate_json(cleaned_content)
        except ValidationError as e:
            logger.warning("Malformed evaluation response: %s", e)
            raise EvaluationError("Evaluation response did not match the expected format.") from e

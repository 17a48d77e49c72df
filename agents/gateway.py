from typing import List, Optional
from utils.config import AppConfig
from utils.prompts import format_history
from utils.schemas import ConversationTurn, EvaluationResult, InterviewSettings, InterviewType
from agents.interviewer import InterviewerAgent
from agents.evaluator import EvaluatorAgent


class LLMGateway:
    """
    The four LLM operations the orchestrator needs, in one place.
    Failures surface as GenerationError / EvaluationError / SampleAnswerError.
    """

    def __init__(self, interviewer: InterviewerAgent, evaluator: EvaluatorAgent):
        self.interviewer = interviewer
        self.evaluator = evaluator

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None) -> "LLMGateway":
        config = config or AppConfig.from_env()
        return cls(InterviewerAgent(config=config), EvaluatorAgent(config=config))

    async def generate_scenario(self, settings: InterviewSettings) -> str:
        return await self.interviewer.generate_scenario(settings)

    async def ask_first_question(self, scenario: str, interview_type: InterviewType) -> str:
        return await self.interviewer.ask_first_question(scenario, interview_type)

    async def evaluate_answer_and_get_next(
        self,
        scenario: str,
        conversation: List[ConversationTurn],
        answer: str,
        turn_number: int,
        max_turns: int,
        settings: InterviewSettings,
    ) -> EvaluationResult:
        return await self.evaluator.evaluate_answer(
            settings=settings,
            scenario=scenario,
            conversation_history=format_history(conversation),
            answer=answer,
            turn_number=turn_number,
            max_turns=max_turns,
        )

    async def generate_sample_answer(
        self,
        scenario: str,
        interview_type: InterviewType,
        history_text: str,
        current_question: str,
        company_name: str = "",
        job_description: str = "",
    ) -> str:
        return await self.interviewer.generate_sample_answer(
            scenario, interview_type, history_text, current_question, company_name, job_description
        )

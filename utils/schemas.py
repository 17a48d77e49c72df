from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Domain(str, Enum):
    GENERAL = "General"
    FINANCE = "Finance / Banking"
    HEALTHCARE = "Healthcare"
    ECOMMERCE = "E-commerce / Retail"
    TECHNOLOGY = "Technology / SaaS"
    INSURANCE = "Insurance"
    TELECOM = "Telecommunications"


class InterviewType(str, Enum):
    # Business & Product
    CASE_STUDY = "Case Study"
    PRODUCT_MANAGEMENT = "Product Management"
    REQUIREMENT_GATHERING = "Requirement Gathering"
    # Technical
    SYSTEM_DESIGN = "System Design"
    DSA = "Data Structures & Algorithms (DSA)"
    TECHNICAL = "Technical Questions (SQL, API, etc.)"
    # Process & Methodology
    AGILE = "Agile / Scrum Methodology"
    UAT = "User Acceptance Testing (UAT)"
    # Behavioral
    BEHAVIORAL = "Behavioral Questions"
    SITUATIONAL = "Situational Judgement Tests"


# 난이도별 질문 수
MAX_TURNS: Dict[Difficulty, int] = {
    Difficulty.EASY: 3,
    Difficulty.MEDIUM: 5,
    Difficulty.HARD: 7,
}

CASE_STUDY_FIRST_CATEGORY = "Strategy Analysis"


def max_turns_for(difficulty: Difficulty) -> int:
    return MAX_TURNS[Difficulty(difficulty)]


def first_question_category(interview_type: InterviewType) -> str:
    """Case Study always opens with Strategy Analysis, other types use their own label."""
    if interview_type == InterviewType.CASE_STUDY:
        return CASE_STUDY_FIRST_CATEGORY
    return InterviewType(interview_type).value


class InterviewSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty = Difficulty.MEDIUM
    domain: Domain = Domain.GENERAL
    interview_type: InterviewType = InterviewType.CASE_STUDY
    company_name: str = ""
    job_description: str = ""

    @property
    def max_turns(self) -> int:
        return max_turns_for(self.difficulty)


class ConversationTurn(BaseModel):
    question: str
    category: str = ""
    answer: str = ""
    feedback: str = ""


class EvaluationResult(BaseModel):
    """Structured reply of the evaluation call. Field names follow the JSON the LLM returns.

    Validation is strict and by alias only: snake_case keys, extra keys and
    coerced values (``"true"`` for a boolean) are all rejected.
    """
    model_config = ConfigDict(extra="forbid", strict=True)

    feedback: str
    next_question: str = Field(alias="nextQuestion")
    next_question_category: str = Field(alias="nextQuestionCategory")
    is_game_over: bool = Field(alias="isGameOver")
    final_feedback: str = Field(alias="finalFeedback")


# Gemini 응답 스키마 (JSON Schema), 다섯 필드 모두 필수
EVALUATION_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "feedback": {
            "type": "string",
            "description": "Constructive feedback on the candidate's answer.",
        },
        "nextQuestion": {
            "type": "string",
            "description": "The next question, or an empty string when the interview is over.",
        },
        "nextQuestionCategory": {
            "type": "string",
            "description": "Category of the next question, or an empty string when the interview is over.",
        },
        "isGameOver": {
            "type": "boolean",
            "description": "True when this was the last turn.",
        },
        "finalFeedback": {
            "type": "string",
            "description": "Overall summary when the interview is over, otherwise an empty string.",
        },
    },
    "required": ["feedback", "nextQuestion", "nextQuestionCategory", "isGameOver", "finalFeedback"],
}


class SessionStatus(str, Enum):
    WELCOME = "WELCOME"
    GENERATING = "GENERATING"
    PLAYING = "PLAYING"
    EVALUATING = "EVALUATING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"


BUSY_STATUSES = (SessionStatus.GENERATING, SessionStatus.EVALUATING)


class InterviewSession(BaseModel):
    session_id: str
    settings: Optional[InterviewSettings] = None
    status: SessionStatus = SessionStatus.WELCOME
    scenario: str = ""
    conversation: List[ConversationTurn] = Field(default_factory=list)
    final_feedback: str = ""
    last_error: Optional[str] = None


class SampleAnswerStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"
    ERROR = "ERROR"


class SampleAnswer(BaseModel):
    status: SampleAnswerStatus = SampleAnswerStatus.IDLE
    turn_index: Optional[int] = None
    question: str = ""
    text: str = ""
    error: Optional[str] = None


class OrchestratorResponse(BaseModel):
    session: InterviewSession
    sample_answer: SampleAnswer = Field(default_factory=SampleAnswer)
    busy: bool = False
    capabilities: Dict[str, bool] = Field(default_factory=dict)


class StartRequest(BaseModel):
    difficulty: Difficulty = Difficulty.MEDIUM
    domain: Domain = Domain.GENERAL
    interview_type: InterviewType = InterviewType.CASE_STUDY
    company_name: str = ""
    job_description: str = ""


class AnswerRequest(BaseModel):
    answer: str


class OptionsResponse(BaseModel):
    difficulties: List[str]
    domains: List[str]
    interview_types: List[str]
    max_turns: Dict[str, int]

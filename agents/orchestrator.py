import logging
import uuid
from typing import Optional
from utils.prompts import format_history
from utils.schemas import (
    BUSY_STATUSES,
    ConversationTurn,
    Difficulty,
    Domain,
    EvaluationResult,
    InterviewSession,
    InterviewSettings,
    InterviewType,
    OrchestratorResponse,
    SampleAnswer,
    SampleAnswerStatus,
    SessionStatus,
    first_question_category,
)
from agents.gateway import LLMGateway
from agents.speech import Capabilities

logger = logging.getLogger(__name__)

DEFAULT_FINAL_FEEDBACK = "Great job! The interview is now complete."
MISSING_TURN_FEEDBACK = "No specific feedback was provided for this answer."
START_ERROR_MESSAGE = "Failed to start the interview. Please try again."
EVALUATION_ERROR_MESSAGE = "There was an error evaluating your answer. Please try again."
SAMPLE_ANSWER_ERROR_MESSAGE = "Failed to generate a sample answer. Please try again."


def final_turn_fallback() -> EvaluationResult:
    """Closing result used when the last evaluation of the interview cannot be obtained."""
    return EvaluationResult.model_validate({
        "feedback": "There was an issue processing your response, but since we've reached the end, let's wrap up.",
        "nextQuestion": "",
        "nextQuestionCategory": "",
        "isGameOver": True,
        "finalFeedback": "A technical error prevented a full evaluation. Thank you for completing the simulation.",
    })


class Orchestrator:
    """
    Session state machine for one interview.

    WELCOME -> GENERATING -> PLAYING <-> EVALUATING -> FINISHED, with ERROR
    reachable from GENERATING and EVALUATING. Every public method is an intent
    from the presentation layer and returns a snapshot; intents that the
    current state does not accept are ignored.

    All mutation happens on the event loop. `_epoch` changes on start and
    restart so that gateway replies belonging to an earlier run are dropped.
    """

    def __init__(self, gateway: LLMGateway, session_id: Optional[str] = None, capabilities: Optional[Capabilities] = None):
        self.gateway = gateway
        self.capabilities = capabilities or Capabilities()
        self.session = InterviewSession(session_id=session_id or str(uuid.uuid4()))
        self.sample_answer = SampleAnswer()
        self._epoch = 0
        self._sample_request = 0

    @property
    def busy(self) -> bool:
        return self.session.status in BUSY_STATUSES

    def snapshot(self) -> OrchestratorResponse:
        return OrchestratorResponse(
            session=self.session.model_copy(deep=True),
            sample_answer=self.sample_answer.model_copy(),
            busy=self.busy,
            capabilities=self.capabilities.available(),
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    async def start_interview(
        self,
        difficulty: Difficulty,
        domain: Domain,
        interview_type: InterviewType,
        company_name: str = "",
        job_description: str = "",
    ) -> OrchestratorResponse:
        if self.session.status != SessionStatus.WELCOME:
            logger.info("start_interview ignored in state %s", self.session.status.value)
            return self.snapshot()

        settings = InterviewSettings(
            difficulty=difficulty,
            domain=domain,
            interview_type=interview_type,
            company_name=(company_name or "").strip(),
            job_description=(job_description or "").strip(),
        )
        self._new_run(settings)
        logger.info(
            "Session %s starting: %s / %s / %s",
            self.session.session_id, settings.difficulty.value, settings.domain.value, settings.interview_type.value,
        )
        await self._generate()
        return self.snapshot()

    async def submit_answer(self, text: str) -> OrchestratorResponse:
        answer = (text or "").strip()
        session = self.session
        if not answer or session.status != SessionStatus.PLAYING or not session.conversation:
            logger.debug("submit_answer ignored (state=%s, empty=%s)", session.status.value, not answer)
            return self.snapshot()

        # 한 턴의 답변은 최초 1회만 기록
        last_turn = session.conversation[-1]
        if not last_turn.answer:
            last_turn.answer = answer

        await self._evaluate()
        return self.snapshot()

    async def retry_last_failed_step(self) -> OrchestratorResponse:
        session = self.session
        if session.status != SessionStatus.ERROR:
            logger.debug("retry ignored in state %s", session.status.value)
            return self.snapshot()

        if not session.conversation:
            await self._generate()
        elif session.conversation[-1].answer:
            await self._evaluate()
        else:
            session.last_error = None
            session.status = SessionStatus.PLAYING
        return self.snapshot()

    async def restart(self) -> OrchestratorResponse:
        self._epoch += 1
        self.session = InterviewSession(session_id=self.session.session_id)
        self.sample_answer = SampleAnswer()
        logger.info("Session %s restarted", self.session.session_id)
        return self.snapshot()

    async def request_sample_answer(self) -> OrchestratorResponse:
        session = self.session
        if not session.conversation or session.settings is None:
            return self.snapshot()

        epoch = self._epoch
        self._sample_request += 1
        request_id = self._sample_request

        index = len(session.conversation) - 1
        question = session.conversation[index].question
        history_text = format_history(session.conversation[:index])
        settings = session.settings
        self.sample_answer = SampleAnswer(status=SampleAnswerStatus.LOADING, turn_index=index, question=question)

        try:
            text = await self.gateway.generate_sample_answer(
                session.scenario,
                settings.interview_type,
                history_text,
                question,
                settings.company_name,
                settings.job_description,
            )
        except Exception as e:
            if self._sample_is_current(epoch, request_id):
                logger.warning("Sample answer failed for turn %d: %s", index + 1, e)
                self.sample_answer = SampleAnswer(
                    status=SampleAnswerStatus.ERROR,
                    turn_index=index,
                    question=question,
                    error=SAMPLE_ANSWER_ERROR_MESSAGE,
                )
            return self.snapshot()

        if self._sample_is_current(epoch, request_id):
            self.sample_answer = SampleAnswer(
                status=SampleAnswerStatus.READY, turn_index=index, question=question, text=text
            )
        else:
            logger.debug("Discarding superseded sample answer for turn %d", index + 1)
        return self.snapshot()

    def dismiss_sample_answer(self) -> OrchestratorResponse:
        # 진행 중인 요청의 결과도 버림
        self._sample_request += 1
        self.sample_answer = SampleAnswer()
        return self.snapshot()

    # ------------------------------------------------------------------
    # Internal steps
    # ------------------------------------------------------------------
    def _new_run(self, settings: InterviewSettings):
        self._epoch += 1
        self.session = InterviewSession(session_id=self.session.session_id, settings=settings)
        self.sample_answer = SampleAnswer()

    def _is_stale(self, epoch: int) -> bool:
        return epoch != self._epoch

    def _sample_is_current(self, epoch: int, request_id: int) -> bool:
        return epoch == self._epoch and request_id == self._sample_request

    def _fail(self, message: str):
        self.session.last_error = message
        self.session.status = SessionStatus.ERROR

    async def _generate(self):
        epoch = self._epoch
        session = self.session
        settings = session.settings
        session.last_error = None
        session.status = SessionStatus.GENERATING

        try:
            scenario = await self.gateway.generate_scenario(settings)
            if self._is_stale(epoch):
                return
            question = await self.gateway.ask_first_question(scenario, settings.interview_type)
        except Exception as e:
            if self._is_stale(epoch):
                return
            logger.warning("Session %s failed to start: %s", session.session_id, e)
            self._fail(START_ERROR_MESSAGE)
            return

        if self._is_stale(epoch):
            logger.debug("Discarding generation result from a previous run")
            return
        session.scenario = scenario
        session.conversation = [
            ConversationTurn(question=question, category=first_question_category(settings.interview_type))
        ]
        session.status = SessionStatus.PLAYING

    async def _evaluate(self):
        epoch = self._epoch
        session = self.session
        settings = session.settings
        answer = session.conversation[-1].answer
        turn_number = len(session.conversation)
        max_turns = settings.max_turns
        session.last_error = None
        session.status = SessionStatus.EVALUATING

        try:
            result = await self.gateway.evaluate_answer_and_get_next(
                session.scenario,
                [turn.model_copy() for turn in session.conversation],
                answer,
                turn_number,
                max_turns,
                settings,
            )
        except Exception as e:
            if self._is_stale(epoch):
                return
            if turn_number < max_turns:
                logger.warning("Evaluation failed on turn %d of %d: %s", turn_number, max_turns, e)
                self._fail(EVALUATION_ERROR_MESSAGE)
                return
            logger.warning("Evaluation failed on the final turn, closing the interview: %s", e)
            result = final_turn_fallback()

        if self._is_stale(epoch):
            logger.debug("Discarding evaluation result from a previous run")
            return
        self._apply_evaluation(result, turn_number, max_turns)

    def _apply_evaluation(self, result: EvaluationResult, turn_number: int, max_turns: int):
        session = self.session
        session.conversation[-1].feedback = result.feedback.strip() or MISSING_TURN_FEEDBACK

        next_question = result.next_question.strip()
        # isGameOver 가 nextQuestion 보다 우선
        if result.is_game_over or not next_question or turn_number >= max_turns:
            if result.is_game_over and next_question:
                logger.info("Evaluation set isGameOver with a non-empty nextQuestion; ending the interview")
            session.final_feedback = result.final_feedback.strip() or DEFAULT_FINAL_FEEDBACK
            session.status = SessionStatus.FINISHED
            logger.info("Session %s finished after %d turns", session.session_id, turn_number)
            return

        if result.final_feedback.strip():
            logger.debug("Dropping finalFeedback sent while the interview continues")
        session.conversation.append(
            ConversationTurn(question=next_question, category=result.next_question_category.strip())
        )
        session.status = SessionStatus.PLAYING

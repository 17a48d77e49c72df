import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request

from agents.gateway import LLMGateway
from agents.orchestrator import Orchestrator
from utils.config import AppConfig
from utils.schemas import (
    MAX_TURNS,
    AnswerRequest,
    Difficulty,
    Domain,
    InterviewType,
    OptionsResponse,
    OrchestratorResponse,
    StartRequest,
)
from utils.state_manager import SessionManager

logger = logging.getLogger(__name__)


def create_app(gateway: Optional[LLMGateway] = None, config: Optional[AppConfig] = None) -> FastAPI:
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 시작 시 초기화
        logger.info("Initializing interview gateway (model=%s)...", config.gemini_model)
        app.state.session_manager = SessionManager(gateway or LLMGateway.from_config(config))
        logger.info("Interview API ready")
        yield
        app.state.session_manager.sessions.clear()

    app = FastAPI(title="Interview Simulator API", lifespan=lifespan)

    def get_orchestrator(session_id: str, request: Request) -> Orchestrator:
        orchestrator = request.app.state.session_manager.get_session(session_id)
        if orchestrator is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        return orchestrator

    @app.get("/api/options", response_model=OptionsResponse)
    async def options():
        return OptionsResponse(
            difficulties=[d.value for d in Difficulty],
            domains=[d.value for d in Domain],
            interview_types=[t.value for t in InterviewType],
            max_turns={d.value: n for d, n in MAX_TURNS.items()},
        )

    @app.post("/api/sessions", response_model=OrchestratorResponse, status_code=201)
    async def create_session(request: Request):
        orchestrator = request.app.state.session_manager.create_new_session()
        logger.info("Created session %s", orchestrator.session.session_id)
        return orchestrator.snapshot()

    @app.get("/api/sessions/{session_id}", response_model=OrchestratorResponse)
    async def get_session(orchestrator: Orchestrator = Depends(get_orchestrator)):
        return orchestrator.snapshot()

    @app.delete("/api/sessions/{session_id}", status_code=204)
    async def delete_session(session_id: str, request: Request):
        if not request.app.state.session_manager.delete_session(session_id):
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")

    @app.post("/api/sessions/{session_id}/start", response_model=OrchestratorResponse)
    async def start(body: StartRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
        return await orchestrator.start_interview(
            body.difficulty, body.domain, body.interview_type, body.company_name, body.job_description
        )

    @app.post("/api/sessions/{session_id}/answer", response_model=OrchestratorResponse)
    async def answer(body: AnswerRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
        return await orchestrator.submit_answer(body.answer)

    @app.post("/api/sessions/{session_id}/sample-answer", response_model=OrchestratorResponse)
    async def sample_answer(orchestrator: Orchestrator = Depends(get_orchestrator)):
        return await orchestrator.request_sample_answer()

    @app.delete("/api/sessions/{session_id}/sample-answer", response_model=OrchestratorResponse)
    async def dismiss_sample_answer(orchestrator: Orchestrator = Depends(get_orchestrator)):
        return orchestrator.dismiss_sample_answer()

    @app.post("/api/sessions/{session_id}/retry", response_model=OrchestratorResponse)
    async def retry(orchestrator: Orchestrator = Depends(get_orchestrator)):
        return await orchestrator.retry_last_failed_step()

    @app.post("/api/sessions/{session_id}/restart", response_model=OrchestratorResponse)
    async def restart(orchestrator: Orchestrator = Depends(get_orchestrator)):
        return await orchestrator.restart()

    return app


app = create_app()

if __name__ == "__main__":
    settings = AppConfig.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=settings.host, port=settings.port)

import uuid
from typing import Callable, Dict, Optional
from agents.gateway import LLMGateway
from agents.orchestrator import Orchestrator
from agents.speech import Capabilities


class SessionManager:
    """
    단순한 메모리 기반 세션 관리 (실제 서비스에서는 DB/Redis 권장)
    One Orchestrator per session id; the LLM gateway is shared.
    """
    def __init__(self, gateway: LLMGateway, capabilities_factory: Optional[Callable[[], Capabilities]] = None):
        self.gateway = gateway
        self.capabilities_factory = capabilities_factory or Capabilities
        self.sessions: Dict[str, Orchestrator] = {}

    def create_new_session(self) -> Orchestrator:
        session_id = str(uuid.uuid4())
        orchestrator = Orchestrator(self.gateway, session_id=session_id, capabilities=self.capabilities_factory())
        self.sessions[session_id] = orchestrator
        return orchestrator

    def get_session(self, session_id: str) -> Optional[Orchestrator]:
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

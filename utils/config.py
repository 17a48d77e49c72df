import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel

# 환경 변수 로드 (.env 가 있으면)
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class AppConfig(BaseModel):
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    eval_temperature: float = 0.4
    host: str = "0.0.0.0"
    port: int = 8503
    log_level: str = "INFO"
    api_url: str = "http://localhost:8503"

    @classmethod
    def from_env(cls) -> "AppConfig":
        port = os.getenv("PORT", "8503")
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.7")),
            eval_temperature=float(os.getenv("GEMINI_EVAL_TEMPERATURE", "0.4")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(port),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_url=os.getenv("INTERVIEW_API_URL", f"http://localhost:{port}"),
        )

    def validate_keys(self):
        """Fail early when the Gemini client would have no credentials."""
        if not self.google_api_key:
            raise RuntimeError("Set GOOGLE_API_KEY (or GEMINI_API_KEY) to talk to Gemini.")

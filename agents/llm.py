from typing import Any, Dict, Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from utils.config import AppConfig


def build_chat_model(config: AppConfig, response_schema: Optional[Dict[str, Any]] = None) -> ChatGoogleGenerativeAI:
    """Gemini chat model. With a response_schema the model is asked for JSON of that shape (used by the evaluator)."""
    config.validate_keys()
    kwargs = {}
    if response_schema is not None:
        kwargs["response_mime_type"] = "application/json"
        kwargs["response_schema"] = response_schema
    return ChatGoogleGenerativeAI(
        model=config.gemini_model,
        temperature=config.eval_temperature if response_schema is not None else config.temperature,
        google_api_key=config.google_api_key,
        **kwargs,
    )


def message_text(message: Any) -> str:
    # content 는 str 또는 content block 리스트
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                parts.append(block.get("text", ""))
        content = "".join(parts)
    return (content or "").strip()


def strip_code_fences(content: str) -> str:
    # Gemini 는 JSON 을 마크다운 코드 블록으로 감싸는 경우가 많음
    cleaned_content = content.strip()
    if cleaned_content.startswith("```"):
        lines = cleaned_content.splitlines()
        if lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        cleaned_content = "\n".join(lines)
    return cleaned_content.strip()

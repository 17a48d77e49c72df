"""
Optional speech capabilities.

Nothing in the interview flow depends on these. When a capability is missing
the presentation layer hides the matching control.
"""
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Protocol
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TranscriptChunk(BaseModel):
    text: str
    is_final: bool = False


class TranscriptStream:
    """
    Async iterator over interim and final transcript chunks.

    stop() ends listening and keeps what was recognised so far, abort() ends
    it and drops the transcript. The underlying source is released exactly
    once, either by stop/abort, by exhaustion, or on leaving `async with`.
    """

    def __init__(
        self,
        source: AsyncIterator[TranscriptChunk],
        on_release: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self._source = source
        self._on_release = on_release
        self._finals: List[str] = []
        self._interim = ""
        self._closed = False
        self.aborted = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def interim(self) -> str:
        return self._interim

    @property
    def transcript(self) -> str:
        return " ".join(t for t in self._finals if t).strip()

    def __aiter__(self):
        return self

    async def __anext__(self) -> TranscriptChunk:
        if self._closed:
            raise StopAsyncIteration
        try:
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            await self._release()
            raise
        if chunk.is_final:
            self._finals.append(chunk.text.strip())
            self._interim = ""
        else:
            self._interim = chunk.text
        return chunk

    async def stop(self) -> str:
        await self._release()
        return self.transcript

    async def abort(self):
        self.aborted = True
        self._finals.clear()
        self._interim = ""
        await self._release()

    async def _release(self):
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._source, "aclose", None)
        try:
            if aclose is not None:
                await aclose()
        finally:
            if self._on_release is not None:
                await self._on_release()
            logger.debug("Transcript stream released")

    async def __aenter__(self) -> "TranscriptStream":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self._release()


class SpeechToText(Protocol):
    def listen(self) -> TranscriptStream: ...


class TextToSpeech(Protocol):
    async def speak(self, text: str) -> None: ...


class Capabilities:
    def __init__(self, speech_to_text: Optional[SpeechToText] = None, text_to_speech: Optional[TextToSpeech] = None):
        self.speech_to_text = speech_to_text
        self.text_to_speech = text_to_speech

    def available(self) -> Dict[str, bool]:
        return {
            "speech_to_text": self.speech_to_text is not None,
            "text_to_speech": self.text_to_speech is not None,
        }

    async def speak(self, text: str) -> bool:
        """Read text aloud if a synthesizer is present. Returns False when the capability is missing."""
        if self.text_to_speech is None:
            return False
        await self.text_to_speech.speak(text)
        return True

    def listen(self) -> Optional[TranscriptStream]:
        if self.speech_to_text is None:
            return None
        return self.speech_to_text.listen()

from unittest.mock import AsyncMock

import pytest

from agents.speech import Capabilities, TranscriptChunk, TranscriptStream


async def recognizer(chunks, released):
    try:
        for chunk in chunks:
            yield chunk
    finally:
        released.append(True)


CHUNKS = [
    TranscriptChunk(text="We should"),
    TranscriptChunk(text="We should interview", is_final=False),
    TranscriptChunk(text="We should interview stakeholders", is_final=True),
    TranscriptChunk(text="first", is_final=True),
]


class TestTranscriptStream:
    @pytest.mark.asyncio
    async def test_iterates_interim_and_final_chunks(self):
        released = []
        on_release = AsyncMock()
        stream = TranscriptStream(recognizer(CHUNKS, released), on_release=on_release)

        seen = [chunk async for chunk in stream]

        assert [c.is_final for c in seen] == [False, False, True, True]
        assert stream.transcript == "We should interview stakeholders first"
        assert stream.closed
        assert released == [True]
        on_release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_keeps_transcript_and_releases_once(self):
        released = []
        on_release = AsyncMock()
        stream = TranscriptStream(recognizer(CHUNKS, released), on_release=on_release)

        async for chunk in stream:
            if chunk.is_final:
                break
        text = await stream.stop()
        await stream.stop()

        assert text == "We should interview stakeholders"
        assert released == [True]
        on_release.assert_awaited_once()
        assert [c async for c in stream] == []

    @pytest.mark.asyncio
    async def test_abort_discards_transcript(self):
        stream = TranscriptStream(recognizer(CHUNKS, []))
        async for chunk in stream:
            if chunk.is_final:
                break

        await stream.abort()

        assert stream.aborted
        assert stream.transcript == ""
        assert stream.interim == ""

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_error(self):
        released = []
        with pytest.raises(RuntimeError):
            async with TranscriptStream(recognizer(CHUNKS, released)) as stream:
                await stream.__anext__()
                raise RuntimeError("component torn down")
        assert released == [True]


class TestCapabilities:
    @pytest.mark.asyncio
    async def test_missing_capabilities_degrade_gracefully(self):
        caps = Capabilities()
        assert caps.available() == {"speech_to_text": False, "text_to_speech": False}
        assert caps.listen() is None
        assert await caps.speak("Hello") is False

    @pytest.mark.asyncio
    async def test_present_capabilities_are_used(self):
        tts = AsyncMock()
        stt = AsyncMock()
        stream = TranscriptStream(recognizer([], []))
        stt.listen = lambda: stream
        caps = Capabilities(speech_to_text=stt, text_to_speech=tts)

        assert await caps.speak("Question one") is True
        tts.speak.assert_awaited_once_with("Question one")
        assert caps.listen() is stream
        assert caps.available() == {"speech_to_text": True, "text_to_speech": True}

"""Shared fixtures for gemini_stt tests."""

import pytest

from gemini_stt.app import create_app
from gemini_stt.config import Settings

SAMPLE_RATE = 8000


class StubTranscriber:
    """Stands in for GeminiTranscriber; records every call."""

    def __init__(self, result="hello world", error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def transcribe(self, audio_b64, mime_type="audio/flac"):
        self.calls.append((audio_b64, mime_type))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def temp_dir(tmp_path):
    d = tmp_path / "temp_audio"
    d.mkdir()
    return d


@pytest.fixture
def settings(temp_dir):
    return Settings(api_key="test-key", temp_dir=temp_dir)


@pytest.fixture
def transcriber():
    return StubTranscriber()


@pytest.fixture
def app(settings, transcriber):
    app = create_app(settings, transcriber)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def silence_pcm():
    """One second of 16-bit mono silence at 8000 Hz."""
    return bytes(SAMPLE_RATE * 2)

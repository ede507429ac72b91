"""HTTP-level tests for POST /transcribe."""

from unittest.mock import patch

import pytest

from gemini_stt.app import create_app
from gemini_stt.config import Settings
from gemini_stt.errors import ProviderError
from gemini_stt.transcription import GeminiTranscriber

from .conftest import StubTranscriber

OCTET = "application/octet-stream"


def post(client, data, rate="8000"):
    headers = {} if rate is None else {"X-Sample-Rate": rate}
    return client.post("/transcribe", data=data, headers=headers, content_type=OCTET)


def test_end_to_end_silence(client, transcriber, temp_dir, silence_pcm):
    response = post(client, silence_pcm)

    assert response.status_code == 200
    assert response.get_json() == {"transcription": "hello world"}
    assert len(transcriber.calls) == 1
    assert list(temp_dir.iterdir()) == []


def test_empty_audio(client, transcriber, temp_dir):
    with patch("gemini_stt.pipeline.encode_flac") as mock_encode:
        response = post(client, b"")

    assert response.status_code == 400
    assert response.get_json() == {"message": "Empty audio data received."}
    mock_encode.assert_not_called()
    assert transcriber.calls == []
    assert list(temp_dir.iterdir()) == []


def test_empty_audio_wins_over_bad_header(client):
    response = post(client, b"", rate=None)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Empty audio data received."


@pytest.mark.parametrize("rate", [None, "abc", "-1", "0", "8_000"])
def test_bad_sample_rate(client, transcriber, silence_pcm, rate):
    response = post(client, silence_pcm, rate=rate)

    assert response.status_code == 400
    assert response.get_json() == {"message": "Missing or invalid X-Sample-Rate header."}
    assert transcriber.calls == []


def test_no_text_returns_sentinel(client, transcriber, silence_pcm):
    transcriber.result = None
    response = post(client, silence_pcm)

    assert response.status_code == 200
    assert response.get_json() == {"transcription": "[No transcription]"}


def test_provider_failure_is_500(client, transcriber, temp_dir, silence_pcm):
    transcriber.error = ProviderError("429 Resource has been exhausted")
    response = post(client, silence_pcm)

    assert response.status_code == 500
    assert response.get_json() == {
        "message": "Transcription failed: 429 Resource has been exhausted"
    }
    assert list(temp_dir.iterdir()) == []


def test_encoding_failure_is_500(client, transcriber, temp_dir):
    response = post(client, b"\x00\x00\x00")

    assert response.status_code == 500
    assert response.get_json()["message"].startswith("Transcription failed: ")
    assert transcriber.calls == []
    assert list(temp_dir.iterdir()) == []


def test_unexpected_error_is_500(client, transcriber, silence_pcm):
    transcriber.error = KeyError("candidates")
    response = post(client, silence_pcm)

    assert response.status_code == 500
    assert response.get_json()["message"].startswith("Transcription failed: ")


def test_uninitialized_provider_is_503(settings, temp_dir, silence_pcm):
    client = create_app(settings, None).test_client()

    with patch("gemini_stt.pipeline.encode_flac") as mock_encode:
        for body in (silence_pcm, b""):
            response = post(client, body)
            assert response.status_code == 503
            assert response.get_json() == {"message": "Transcription service not ready."}

    mock_encode.assert_not_called()
    assert list(temp_dir.iterdir()) == []


def test_body_over_limit_is_413(temp_dir):
    settings = Settings(api_key="k", temp_dir=temp_dir, max_content_length=1024)
    transcriber = StubTranscriber()
    client = create_app(settings, transcriber).test_client()

    response = post(client, bytes(4096))

    assert response.status_code == 413
    assert "message" in response.get_json()
    assert transcriber.calls == []


def test_get_not_allowed(client):
    assert client.get("/transcribe").status_code == 405


def test_sequential_requests_through_gemini_sdk(settings, temp_dir, silence_pcm):
    """Each request runs in its own event loop; the shared SDK client must survive that."""
    from google.ai import generativelanguage as glm
    from google.generativeai import protos

    seen = []

    def fake_generate_content(self, request=None, **kwargs):
        seen.append(request)
        return protos.GenerateContentResponse(
            candidates=[
                protos.Candidate(
                    content=protos.Content(role="model", parts=[protos.Part(text="hello world")]),
                    finish_reason=protos.Candidate.FinishReason.STOP,
                )
            ]
        )

    with patch.object(glm.GenerativeServiceClient, "generate_content", fake_generate_content):
        transcriber = GeminiTranscriber.from_settings(settings)
        client = create_app(settings, transcriber).test_client()
        responses = [post(client, silence_pcm) for _ in range(3)]

    assert [(r.status_code, r.get_json()) for r in responses] == [
        (200, {"transcription": "hello world"})
    ] * 3
    assert len(seen) == 3
    audio_part = seen[0].contents[0].parts[1]
    assert audio_part.inline_data.mime_type == "audio/flac"
    assert audio_part.inline_data.data[:4] == b"fLaC"
    assert list(temp_dir.iterdir()) == []

"""Gemini speech-to-text adapter."""

import asyncio
import logging
from typing import Optional

import google.generativeai as genai

from .config import DEFAULT_PROMPT
from .errors import ProviderError
from .flac import FLAC_MIME_TYPE

logger = logging.getLogger(__name__)


def build_payload(prompt: str, audio_b64: str, mime_type: str):
    """Content list for one generate_content call: prompt text, then inline audio."""
    return [
        prompt,
        {"inline_data": {"mime_type": mime_type, "data": audio_b64}},
    ]


def extract_text(response) -> Optional[str]:
    """Return the response text, or None when Gemini produced none.

    A blocked prompt is a provider failure, not an empty transcript.
    """
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and feedback.block_reason:
        reason = getattr(feedback.block_reason, "name", feedback.block_reason)
        raise ProviderError(f"Prompt blocked by Gemini: {reason}")
    if not response.candidates or not response.parts:
        return None
    text = response.text
    return text if text and text.strip() else None


class GeminiTranscriber:
    """Sends audio to a Gemini model and returns its transcript.

    One instance is built at process start and shared by every request; it
    holds no per-request state.
    """

    def __init__(self, model, prompt: str = DEFAULT_PROMPT, timeout_s: float = 60.0):
        self.model = model
        self.prompt = prompt
        self.timeout_s = timeout_s

    @classmethod
    def from_settings(cls, settings) -> "GeminiTranscriber":
        genai.configure(api_key=settings.api_key)
        model = genai.GenerativeModel(settings.model_name)
        logger.info(f"Google Generative AI client initialized ({settings.model_name}).")
        return cls(model, prompt=settings.prompt, timeout_s=settings.timeout_s)

    async def transcribe(self, audio_b64: str, mime_type: str = FLAC_MIME_TYPE) -> Optional[str]:
        """Make exactly one provider call.

        Raises:
            ProviderError: On any SDK failure, malformed response or timeout.
        """
        payload = build_payload(self.prompt, audio_b64, mime_type)
        logger.info("Sending request to Gemini API...")
        try:
            # the SDK caches its grpc.aio client per event loop, so use the sync call
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.model.generate_content,
                    payload,
                    request_options={"timeout": self.timeout_s},
                ),
                timeout=self.timeout_s,
            )
            return extract_text(response)
        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Gemini request timed out after {self.timeout_s:g}s") from e
        except Exception as e:
            raise ProviderError(str(e) or type(e).__name__) from e

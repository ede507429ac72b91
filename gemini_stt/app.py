import logging
import time

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from .errors import ServiceUnavailable, TranscriptionServiceError
from .flac import DEFAULT_PROFILE
from .pipeline import run_pipeline
from .responses import failure, success
from .validation import SAMPLE_RATE_HEADER, validate_request

logger = logging.getLogger(__name__)

TRANSCRIBER_KEY = "gemini_stt.transcriber"
SETTINGS_KEY = "gemini_stt.settings"


def create_app(settings, transcriber=None):
    """Build the Flask app.

    ``transcriber`` is the shared provider client created at startup. When it
    is None every /transcribe request is answered with 503.
    """
    app = Flask(__name__)
    CORS(app)

    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.extensions[SETTINGS_KEY] = settings
    app.extensions[TRANSCRIBER_KEY] = transcriber

    app.register_error_handler(RequestEntityTooLarge, _too_large)
    app.add_url_rule("/transcribe", view_func=transcribe, methods=["POST"])
    return app


def _too_large(e):
    limit_mb = current_app.config["MAX_CONTENT_LENGTH"] / (1024 * 1024)
    return jsonify({"message": f"Audio payload exceeds {limit_mb:g} MB limit."}), 413


# --- Flask Routes ---

async def transcribe():
    started = time.monotonic()
    logger.info("Received request on /transcribe")

    transcriber = current_app.extensions[TRANSCRIBER_KEY]
    settings = current_app.extensions[SETTINGS_KEY]

    try:
        if transcriber is None:
            logger.error("Gemini model not initialized.")
            raise ServiceUnavailable()

        audio_request = validate_request(request.get_data(cache=False), request.headers)
        logger.info(
            f"Received audio buffer: {len(audio_request.raw_bytes) / 1024:.2f} KB, "
            f"Sample Rate: {audio_request.sample_rate_hz} Hz"
        )

        transcription = await run_pipeline(
            audio_request, transcriber, settings.temp_dir, DEFAULT_PROFILE
        )
    except TranscriptionServiceError as e:
        if e.status_code == 400:
            header = request.headers.get(SAMPLE_RATE_HEADER)
            logger.error(f"Rejected request: {e} ({SAMPLE_RATE_HEADER}={header!r})")
        else:
            logger.error(f"Error during transcription process: {e}")
        body, status = failure(e)
    except RequestEntityTooLarge:
        raise
    except Exception as e:
        logger.exception("Unexpected error during transcription process")
        body, status = failure(e)
    else:
        if transcription:
            logger.info(f"Transcription result: {transcription}")
        else:
            logger.info("Gemini returned no transcription text.")
        body, status = success(transcription)

    logger.info(f"Responded {status} in {time.monotonic() - started:.2f}s")
    return jsonify(body), status

"""Process entry point: ``python -m gemini_stt``."""

import logging
import sys

from .app import SETTINGS_KEY, create_app
from .config import load_settings
from .errors import ConfigError
from .transcription import GeminiTranscriber

logger = logging.getLogger(__name__)


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_app(environ=None):
    """Load settings, initialize the Gemini client and return the app.

    Raises on any startup failure so that no request is ever served without
    a working provider client. Usable as a WSGI factory, e.g.
    ``gunicorn "gemini_stt.__main__:build_app()"``.
    """
    settings = load_settings(environ)
    configure_logging(settings.log_level)
    settings.temp_dir.mkdir(parents=True, exist_ok=True)
    transcriber = GeminiTranscriber.from_settings(settings)
    return create_app(settings, transcriber)


def main(environ=None) -> int:
    try:
        app = build_app(environ)
    except ConfigError as e:
        configure_logging()
        logger.critical(f"FATAL: {e}")
        logger.critical("Ensure GEMINI_API_KEY is set in the environment or a .env file.")
        return 1
    except Exception as e:
        configure_logging()
        logger.critical(f"FATAL: Failed to initialize Google Generative AI client: {e}")
        return 1

    settings = app.extensions[SETTINGS_KEY]
    logger.info("=== Transcription Service Started ===")
    logger.info(f"Listening on {settings.host}:{settings.port}")
    logger.info(f"Model: {settings.model_name}")
    logger.info(f"Temporary audio directory: {settings.temp_dir.resolve()}")
    app.run(host=settings.host, port=settings.port, threaded=True)
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()

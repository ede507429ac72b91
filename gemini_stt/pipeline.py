"""The per-request audio-to-transcript pipeline."""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from .flac import DEFAULT_PROFILE, FLAC_MIME_TYPE, encode_flac, read_transfer_encoded

logger = logging.getLogger(__name__)


def artifact_path(temp_dir) -> Path:
    return Path(temp_dir) / f"audio-{uuid.uuid4().hex}.flac"


@contextmanager
def transient_artifact(temp_dir):
    """Yield a fresh artifact path and remove the file on every exit path.

    Removal failures are logged and never raised.
    """
    path = artifact_path(temp_dir)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
            logger.debug(f"Deleted temporary file: {path}")
        except OSError as e:
            logger.error(f"Error deleting temporary file {path}: {e}")


async def run_pipeline(audio_request, transcriber, temp_dir, profile=DEFAULT_PROFILE) -> Optional[str]:
    """Encode, transfer-encode and transcribe one validated request."""
    if audio_request.sample_rate_hz != profile.output_sample_rate_hz:
        logger.warning(
            f"Declared sample rate {audio_request.sample_rate_hz} Hz differs from "
            f"encoder rate {profile.output_sample_rate_hz} Hz; encoding at "
            f"{profile.output_sample_rate_hz} Hz"
        )

    with transient_artifact(temp_dir) as path:
        logger.info(f"Creating FLAC file at {path}")
        await encode_flac(audio_request.raw_bytes, path, profile)

        audio_b64 = await read_transfer_encoded(path)
        logger.info(f"Converted FLAC to base64 ({len(audio_b64) / 1024:.2f} KB)")

        return await transcriber.transcribe(audio_b64, FLAC_MIME_TYPE)

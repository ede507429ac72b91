"""Maps pipeline outcomes to (body, status) pairs."""

from .errors import TranscriptionServiceError

NO_TRANSCRIPTION = "[No transcription]"


def success(transcription):
    return {"transcription": transcription or NO_TRANSCRIPTION}, 200


def failure(error: Exception):
    if isinstance(error, TranscriptionServiceError) and error.status_code != 500:
        return {"message": str(error)}, error.status_code
    return {"message": f"Transcription failed: {error}"}, 500

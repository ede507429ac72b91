"""Error taxonomy for the transcription relay."""


class TranscriptionServiceError(Exception):
    """Base class for every failure a request can end with."""

    status_code = 500


# --- Caller errors (400) ---

class ValidationError(TranscriptionServiceError):
    status_code = 400


class EmptyAudio(ValidationError):
    def __init__(self, message="Empty audio data received."):
        super().__init__(message)


class InvalidSampleRate(ValidationError):
    def __init__(self, message="Missing or invalid X-Sample-Rate header."):
        super().__init__(message)


# --- Operational errors (503) ---

class ServiceUnavailable(TranscriptionServiceError):
    status_code = 503

    def __init__(self, message="Transcription service not ready."):
        super().__init__(message)


# --- Processing errors (500) ---

class PipelineError(TranscriptionServiceError):
    status_code = 500


class EncodingError(PipelineError):
    pass


class EmptyInput(EncodingError):
    def __init__(self, message="Cannot create FLAC from empty audio data."):
        super().__init__(message)


class ArtifactMissing(PipelineError):
    pass


class InvalidFormat(PipelineError):
    pass


class ProviderError(PipelineError):
    pass


class ConfigError(Exception):
    """Raised at startup when the environment cannot produce valid settings."""

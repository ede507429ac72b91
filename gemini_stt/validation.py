"""Inbound request checks."""

from dataclasses import dataclass

from .errors import EmptyAudio, InvalidSampleRate

SAMPLE_RATE_HEADER = "X-Sample-Rate"


@dataclass(frozen=True)
class AudioRequest:
    raw_bytes: bytes
    sample_rate_hz: int


def parse_sample_rate(value):
    """Return the header value as a positive int, or None if it is not one."""
    if value is None:
        return None
    text = str(value).strip()
    # int() would also take "8_000", "+8000" and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        return None
    rate = int(text)
    return rate if rate > 0 else None


def validate_request(body, headers) -> AudioRequest:
    """Check an inbound body and header map.

    The empty-body check runs first, so an empty request is rejected for
    that reason even when the sample-rate header is also bad.
    """
    if not body:
        raise EmptyAudio()

    sample_rate = parse_sample_rate(headers.get(SAMPLE_RATE_HEADER))
    if sample_rate is None:
        raise InvalidSampleRate()

    return AudioRequest(raw_bytes=bytes(body), sample_rate_hz=sample_rate)

"""Relay that FLAC-encodes raw PCM and transcribes it with Google Gemini."""

__version__ = "1.0.0"

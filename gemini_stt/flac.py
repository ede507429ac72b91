"""PCM to FLAC encoding and base64 transfer encoding of the result."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf

from .errors import ArtifactMissing, EmptyInput, EncodingError, InvalidFormat

logger = logging.getLogger(__name__)

FLAC_MAGIC = b"fLaC"
FLAC_MIME_TYPE = "audio/flac"
MAX_COMPRESSION_LEVEL = 8


@dataclass(frozen=True)
class EncodingProfile:
    channels: int = 1
    bits_per_sample: int = 16
    output_sample_rate_hz: int = 8000
    compression_level: int = 5

    @property
    def sample_width(self) -> int:
        return self.bits_per_sample // 8

    @property
    def subtype(self) -> str:
        return f"PCM_{self.bits_per_sample}"


DEFAULT_PROFILE = EncodingProfile()


def pcm_to_samples(pcm: bytes, profile: EncodingProfile) -> np.ndarray:
    """Interpret little-endian signed PCM as an int array shaped (frames, channels)."""
    frame_size = profile.sample_width * profile.channels
    if len(pcm) % frame_size:
        raise EncodingError(
            f"PCM length {len(pcm)} is not a multiple of the {frame_size}-byte frame size"
        )
    dtype = np.dtype(f"<i{profile.sample_width}")
    return np.frombuffer(pcm, dtype=dtype).reshape(-1, profile.channels)


def has_flac_magic(path) -> bool:
    with open(path, "rb") as f:
        return f.read(len(FLAC_MAGIC)) == FLAC_MAGIC


def _write_flac(samples: np.ndarray, output_path: Path, profile: EncodingProfile):
    # "xb" refuses to touch a file that already exists
    with open(output_path, "xb") as f:
        sf.write(
            f,
            samples,
            profile.output_sample_rate_hz,
            subtype=profile.subtype,
            format="FLAC",
            compression_level=profile.compression_level / MAX_COMPRESSION_LEVEL,
        )
    if not has_flac_magic(output_path):
        raise EncodingError(f"FLAC verification failed for {output_path}")


async def encode_flac(pcm: bytes, output_path, profile: EncodingProfile = DEFAULT_PROFILE):
    """Encode raw PCM into a new FLAC file at ``output_path``.

    Resolves once the file is closed and starts with the FLAC magic marker.

    Raises:
        EmptyInput: If ``pcm`` is empty.
        EncodingError: On codec, write or verification failure.
    """
    if not pcm:
        raise EmptyInput()

    output_path = Path(output_path)
    samples = pcm_to_samples(pcm, profile)

    try:
        await asyncio.to_thread(_write_flac, samples, output_path, profile)
    except EncodingError:
        raise
    except (RuntimeError, OSError, ValueError) as e:
        logger.error(f"FLAC encoder error for {output_path}: {e}")
        raise EncodingError(f"FLAC encoding failed: {e}") from e

    logger.info(
        f"FLAC file created at {output_path} "
        f"({profile.output_sample_rate_hz} Hz, {len(samples)} frames)"
    )


def _read_base64(path: Path) -> str:
    if not path.exists():
        raise ArtifactMissing(f"FLAC file was not created successfully at {path}")
    content = path.read_bytes()
    if not content.startswith(FLAC_MAGIC):
        raise InvalidFormat("Temporary file is not a valid FLAC file")
    return base64.b64encode(content).decode("ascii")


async def read_transfer_encoded(path) -> str:
    """Read a finished FLAC file and return it as base64 text."""
    return await asyncio.to_thread(_read_base64, Path(path))

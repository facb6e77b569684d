"""Decode uploaded bytes into per-channel float buffers.

libsndfile (via ``soundfile``) does the container work. The helpers here
only reshape its output into channel lists and reduce them to the mono
buffer the metrics calculator expects.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import soundfile as sf

from app.errors import AudioDecodeError, EmptyAudioError

logger = logging.getLogger(__name__)


@dataclass
class DecodedAudio:
    channels: List[np.ndarray]
    sample_rate: int

    @property
    def num_channels(self) -> int:
        return len(self.channels)


def decode_audio(raw: bytes) -> DecodedAudio:
    """Read ``raw`` with libsndfile and split it into channels.

    Raises ``AudioDecodeError`` for empty payloads and anything libsndfile
    cannot open or read.
    """

    if not raw:
        raise AudioDecodeError()

    try:
        # always_2d gives (frames, channels) even for mono files
        data, sr = sf.read(io.BytesIO(raw), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, TypeError, ValueError) as exc:
        logger.warning("Audio decode failed: %s", exc)
        raise AudioDecodeError(original_error=exc) from exc

    channels = [np.ascontiguousarray(data[:, ch]) for ch in range(data.shape[1])]
    return DecodedAudio(channels=channels, sample_rate=int(sr))


def ensure_samples(decoded: DecodedAudio) -> None:
    """Reject decoded audio with no channels or an empty first channel."""

    if not decoded.channels or decoded.channels[0] is None or len(decoded.channels[0]) == 0:
        raise EmptyAudioError()


def downmix(channels: Sequence[np.ndarray]) -> np.ndarray:
    """Average channels sample-by-sample up to the shortest channel.

    A single channel is returned untouched. If averaging fails for any
    reason the first channel is used instead.
    """

    first = channels[0]
    if len(channels) == 1:
        return np.asarray(first)

    try:
        length = min(len(c) for c in channels)
        stacked = np.stack([np.asarray(c[:length], dtype=np.float64) for c in channels])
        return stacked.mean(axis=0)
    except Exception as exc:
        logger.warning("Downmix failed, falling back to first channel: %s", exc)
        return np.asarray(first)

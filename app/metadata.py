"""Best-effort container metadata for an upload.

Metadata is informational only: any failure is logged and an empty dict
is returned so the analysis request still completes.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Dict, Optional

import soundfile as sf

logger = logging.getLogger(__name__)

LOSSLESS_FORMATS = {"WAV", "WAVEX", "AIFF", "FLAC", "CAF", "W64", "RF64", "AU", "RAW"}

# libsndfile subtypes whose bit depth is fixed
SUBTYPE_BITS = {
    "PCM_S8": 8,
    "PCM_U8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
    "FLOAT": 32,
    "DOUBLE": 64,
    "ALAC_16": 16,
    "ALAC_20": 20,
    "ALAC_24": 24,
    "ALAC_32": 32,
}


def extract_metadata(raw: bytes, mime_type: Optional[str] = None) -> Dict[str, Any]:
    """Return container format details, or ``{}`` if they cannot be read."""

    try:
        info = sf.info(io.BytesIO(raw))
    except Exception as exc:
        logger.warning("Metadata parse failed: %s", exc)
        return {}

    container = str(info.format or "")
    subtype = str(info.subtype or "")

    metadata: Dict[str, Any] = {
        "container": container,
        "codec": subtype,
        "sampleRate": int(info.samplerate),
        "numberOfChannels": int(info.channels),
        "numberOfSamples": int(info.frames),
        "duration": float(info.duration),
        "lossless": container.upper() in LOSSLESS_FORMATS,
    }

    bits = SUBTYPE_BITS.get(subtype.upper())
    if bits is not None:
        metadata["bitsPerSample"] = bits
    if mime_type:
        metadata["mimeType"] = mime_type
    return metadata

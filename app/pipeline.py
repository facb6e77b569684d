"""Sequential analysis pipeline for one upload.

metadata (best effort) -> decode -> empty check -> downmix -> metrics
-> model feedback. Kept free of FastAPI so it can be exercised directly.
"""
from __future__ import annotations

import logging
from typing import Optional

from app.analysis import compute_metrics
from app.config import Settings
from app.decoding import decode_audio, downmix, ensure_samples
from app.feedback import FeedbackClient, generate_feedback
from app.metadata import extract_metadata
from app.models import AnalyzeResponse

logger = logging.getLogger(__name__)


def analyze_upload(
    raw: bytes,
    content_type: Optional[str],
    feedback_client: FeedbackClient,
    settings: Settings,
) -> AnalyzeResponse:
    metadata = extract_metadata(raw, content_type)

    decoded = decode_audio(raw)
    ensure_samples(decoded)

    samples = downmix(decoded.channels)
    sample_rate = decoded.sample_rate or metadata.get("sampleRate") or settings.default_sample_rate

    analysis = compute_metrics(samples, sample_rate)
    logger.info(
        "Analysed %d samples at %d Hz across %d channel(s): lufs=%s peak=%s",
        len(samples),
        sample_rate,
        decoded.num_channels,
        analysis.lufs,
        analysis.peak,
    )

    feedback = generate_feedback(analysis, feedback_client)

    return AnalyzeResponse(
        analysis=analysis.to_dict(),
        feedback=feedback,
        metadata=metadata,
    )

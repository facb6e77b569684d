"""Mixing feedback from a chat completion model.

The metrics are embedded in a short prompt that asks for a single JSON
object. Models do not always comply, so the parser falls back to
wrapping the raw text instead of failing the request.
"""
from __future__ import annotations

import json
import logging
import threading
from typing import Optional

from openai import OpenAI
from pydantic import ValidationError

from app.analysis import AudioMetrics
from app.config import DEFAULT_MODEL, Settings
from app.errors import FeedbackServiceError
from app.models import MixFeedback

logger = logging.getLogger(__name__)

UNAVAILABLE_SUMMARY = "AI feedback is currently unavailable: {reason}"

PROMPT_TEMPLATE = """
You are an experienced mix engineer.
Given these metrics, provide 3 concise insights about mix quality for hip hop, trap, or R&B:

LUFS: {lufs}
RMS: {rms}
Peak: {peak}
Dynamic Range: {dynamic_range}
Stereo Width: {stereo_width}

Respond in JSON exactly as a single JSON object, without additional explanation:
{{
  "mixSummary": "...",
  "recommendations": ["...", "...", "..."]
}}
"""


def build_prompt(metrics: AudioMetrics) -> str:
    return PROMPT_TEMPLATE.format(
        lufs=metrics.lufs,
        rms=metrics.rms,
        peak=metrics.peak,
        dynamic_range=metrics.dynamicRange,
        stereo_width=metrics.stereoWidth,
    )


class FeedbackClient:
    """Thin wrapper around the OpenAI chat completions API.

    The SDK client is created lazily on first use and reused afterwards.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.5,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedbackClient":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
        )

    @property
    def client(self):
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._create_client()
        return self._client

    def _create_client(self) -> OpenAI:
        if not self.api_key:
            raise FeedbackServiceError("OPENAI_API_KEY is not configured")
        return OpenAI(api_key=self.api_key, timeout=self.timeout)

    def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text."""

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except FeedbackServiceError:
            raise
        except Exception as exc:
            raise FeedbackServiceError(f"Completion request failed: {exc}", original_error=exc) from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""


def parse_feedback(text: Optional[str]) -> MixFeedback:
    """Parse the model reply, wrapping it verbatim when it is not the expected JSON."""

    text = text or ""
    try:
        return MixFeedback.model_validate(json.loads(text))
    except (ValueError, RecursionError, ValidationError):
        logger.info("Model reply was not valid feedback JSON; returning raw text")
        return MixFeedback(mixSummary=text.strip(), recommendations=[])


def generate_feedback(metrics: AudioMetrics, client: FeedbackClient) -> MixFeedback:
    """Ask the model for feedback, degrading to a placeholder if it cannot be reached."""

    prompt = build_prompt(metrics)
    try:
        text = client.complete(prompt)
    except FeedbackServiceError as exc:
        logger.warning("Feedback generation failed: %s", exc.message)
        return MixFeedback(
            mixSummary=UNAVAILABLE_SUMMARY.format(reason=exc.message),
            recommendations=[],
        )
    return parse_feedback(text)

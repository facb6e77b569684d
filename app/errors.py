"""Exceptions raised while analysing an upload.

Each error carries the HTTP status the API reports it with, so the
FastAPI layer can render every failure as ``{"error": message}``
without a lookup table.
"""
from __future__ import annotations

from typing import Any, Optional


class MixFeedbackError(Exception):
    """Base exception for all request-level failures."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class MissingFileError(MixFeedbackError):
    """Raised when the request carries no file."""

    status_code = 400

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class UploadTooLargeError(MixFeedbackError):
    status_code = 413

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            f"File too large. Max supported size is {max_bytes} bytes",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class AudioDecodeError(MixFeedbackError):
    """Raised when the upload is not a container the decoder can read."""

    status_code = 415

    def __init__(
        self,
        message: str = "Failed to decode audio. Please upload a WAV or supported PCM file.",
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.original_error = original_error


class EmptyAudioError(MixFeedbackError):
    """Raised when decoding succeeded but produced no samples."""

    status_code = 422

    def __init__(self, message: str = "No audio samples found"):
        super().__init__(message)


class FeedbackServiceError(MixFeedbackError):
    """Raised by the completion client; the pipeline degrades instead of failing."""

    status_code = 502

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error

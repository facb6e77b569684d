"""Shared fixtures: in-memory WAV uploads and a canned completion client."""

import io
import wave

import numpy as np
import pytest
import soundfile as sf
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.errors import FeedbackServiceError
from app.main import app, get_feedback_client


GOOD_REPLY = '{"mixSummary": "Solid balance.", "recommendations": ["Tame the lows", "Add air", "Leave headroom"]}'


class StubFeedbackClient:
    """Returns a canned reply (or raises) without touching the network."""

    def __init__(self, reply=GOOD_REPLY, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def make_wav():
    def _make(data, sr=44100, subtype="PCM_16"):
        buf = io.BytesIO()
        sf.write(buf, np.asarray(data), sr, format="WAV", subtype=subtype)
        return buf.getvalue()

    return _make


@pytest.fixture
def empty_wav():
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(44100)
        w.writeframes(b"")
    return buf.getvalue()


@pytest.fixture
def sine_wav(make_wav):
    t = np.arange(4410) / 44100.0
    return make_wav(0.5 * np.sin(2 * np.pi * 440.0 * t))


@pytest.fixture
def stereo_wav(make_wav):
    left = np.full(1000, 0.5)
    right = np.full(1000, -0.25)
    return make_wav(np.stack([left, right], axis=1), subtype="FLOAT")


@pytest.fixture
def make_client():
    return StubFeedbackClient


@pytest.fixture
def stub_client():
    return StubFeedbackClient()


@pytest.fixture
def failing_client():
    return StubFeedbackClient(error=FeedbackServiceError("OPENAI_API_KEY is not configured"))


@pytest.fixture
def test_settings():
    return Settings(openai_api_key=None, max_upload_bytes=1024 * 1024)


@pytest.fixture
def api(stub_client, test_settings):
    app.dependency_overrides[get_feedback_client] = lambda: stub_client
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

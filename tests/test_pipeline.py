"""Tests for the request pipeline outside of HTTP."""

import pytest

from app.config import Settings
from app.errors import AudioDecodeError, EmptyAudioError
from app.pipeline import analyze_upload


def test_pipeline_returns_all_sections(sine_wav, stub_client):
    result = analyze_upload(sine_wav, "audio/wav", stub_client, Settings())
    assert result.analysis.peak == "0.500"
    assert result.feedback.mixSummary == "Solid balance."
    assert result.metadata["container"] == "WAV"


def test_metadata_failure_is_not_fatal(sine_wav, stub_client, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("tag parser crashed")

    monkeypatch.setattr("app.metadata.sf.info", broken)
    result = analyze_upload(sine_wav, None, stub_client, Settings())
    assert result.metadata == {}
    assert result.analysis.rms != "0.000"


def test_decode_error_propagates(stub_client):
    with pytest.raises(AudioDecodeError):
        analyze_upload(b"nope" * 50, "audio/mpeg", stub_client, Settings())
    assert stub_client.prompts == []


def test_empty_audio_short_circuits(empty_wav, stub_client, monkeypatch):
    calls = []
    monkeypatch.setattr("app.pipeline.compute_metrics", lambda *a: calls.append(a))
    with pytest.raises(EmptyAudioError):
        analyze_upload(empty_wav, "audio/wav", stub_client, Settings())
    assert calls == []
    assert stub_client.prompts == []


def test_sample_rate_falls_back_to_default(sine_wav, stub_client, monkeypatch):
    seen = {}

    def fake_decode(raw):
        from app.decoding import decode_audio

        decoded = decode_audio(raw)
        decoded.sample_rate = 0
        return decoded

    def spy_metrics(samples, sample_rate):
        seen["sample_rate"] = sample_rate
        from app.analysis import compute_metrics

        return compute_metrics(samples, sample_rate)

    monkeypatch.setattr("app.pipeline.decode_audio", fake_decode)
    monkeypatch.setattr("app.pipeline.extract_metadata", lambda raw, mime: {})
    monkeypatch.setattr("app.pipeline.compute_metrics", spy_metrics)

    analyze_upload(sine_wav, None, stub_client, Settings(default_sample_rate=22050))
    assert seen["sample_rate"] == 22050

"""Tests for best-effort metadata extraction."""

from app.metadata import extract_metadata


def test_wav_metadata(sine_wav):
    meta = extract_metadata(sine_wav, "audio/wav")
    assert meta["container"] == "WAV"
    assert meta["codec"] == "PCM_16"
    assert meta["sampleRate"] == 44100
    assert meta["numberOfChannels"] == 1
    assert meta["numberOfSamples"] == 4410
    assert meta["bitsPerSample"] == 16
    assert meta["lossless"] is True
    assert meta["mimeType"] == "audio/wav"
    assert abs(meta["duration"] - 0.1) < 1e-6


def test_float_stereo_metadata(stereo_wav):
    meta = extract_metadata(stereo_wav)
    assert meta["numberOfChannels"] == 2
    assert meta["codec"] == "FLOAT"
    assert meta["bitsPerSample"] == 32
    assert "mimeType" not in meta


def test_unreadable_input_returns_empty_dict():
    assert extract_metadata(b"not audio at all", "audio/mpeg") == {}


def test_empty_input_returns_empty_dict():
    assert extract_metadata(b"") == {}

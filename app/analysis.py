"""Level statistics for an uploaded mix.

Four scalar metrics plus a coarse stereo heuristic, computed from a
decoded mono buffer. The loudness figure is an RMS-derived approximation
and not a BS.1770 measurement; callers compare it against the feedback
prompt's expectations, so the formula must stay as it is.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Sequence, Union

import numpy as np

LUFS_OFFSET = -0.691
POWER_FLOOR = 1e-12
MEAN_THRESHOLD = 0.01
NARROW_WIDTH = 0.7
WIDE_WIDTH = 0.9


@dataclass(frozen=True)
class AudioMetrics:
    rms: str
    peak: str
    dynamicRange: str
    lufs: str
    stereoWidth: Union[int, float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EMPTY_METRICS = AudioMetrics(
    rms="0.000",
    peak="0.000",
    dynamicRange="0.00",
    lufs="0.00",
    stereoWidth=0,
)


def compute_metrics(samples: Sequence[float] | np.ndarray, sample_rate: int | None = None) -> AudioMetrics:
    """Return RMS, peak, dynamic range, approximate LUFS and stereo width.

    ``sample_rate`` is accepted to mirror the decoder output but none of
    the formulas depend on it. Non-finite samples are not filtered and
    simply propagate into the result.
    """

    y = np.asarray(samples, dtype=np.float64).ravel()
    n = y.size
    if n == 0:
        return EMPTY_METRICS

    # Huge or non-finite samples propagate as inf/nan instead of raising.
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        rms = float(np.sqrt(np.sum(y * y) / n))
        peak = float(np.max(np.abs(y)))

        # All-zero buffers would otherwise hit log10(0).
        if peak > 0 and rms > 0:
            dynamic_range = 20.0 * float(np.log10(peak / rms))
        else:
            dynamic_range = 0.0

        lufs = LUFS_OFFSET + 10.0 * float(np.log10(max(rms * rms, POWER_FLOOR)))

        # Placeholder on an already-downmixed signal: only the DC offset is seen.
        mean = float(np.sum(y)) / n
    stereo_width = NARROW_WIDTH if abs(mean) < MEAN_THRESHOLD else WIDE_WIDTH

    return AudioMetrics(
        rms=f"{rms:.3f}",
        peak=f"{peak:.3f}",
        dynamicRange=f"{dynamic_range:.2f}",
        lufs=f"{lufs:.2f}",
        stereoWidth=stereo_width,
    )

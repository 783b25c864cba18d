"""
Peak normalization.
"""

from __future__ import annotations
import numpy as np
from .audio import Audio


def peak_level(audio: Audio) -> float:
    """Largest signed sample value over all channels."""
    return float(np.max(audio.samples))


def normalize_volume(audio: Audio, target_peak: float) -> Audio:
    """
    Scale a copy of `audio` so its largest sample equals `target_peak`.
    Only the positive peak is considered; negative excursions may end up beyond -target_peak.
    """
    peak = peak_level(audio)
    if peak <= 0.0:
        raise ValueError(f"Cannot normalize audio whose peak sample is {peak}; no positive samples.")

    factor = float(target_peak) / peak
    out = audio.copy()
    out.samples *= factor
    return out

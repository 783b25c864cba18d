"""
Sample-rate conversion by nearest-index accumulation.

Every input sample is added into the output slot floor(i * r), r = (out_len - 1) / (in_len - 1),
then the channel is scaled by out_len / in_len. No band-limiting: content above the new
Nyquist aliases.
"""

from __future__ import annotations
import numpy as np
from .audio import Audio, AudioLayout, LayoutError


def output_length(samples_per_channel: int, sample_rate: int, target_rate: int) -> int:
    """floor(duration * target_rate), computed without float rounding."""
    return (int(samples_per_channel) * int(target_rate)) // int(sample_rate)


def _accumulate_channel(src: np.ndarray, dst: np.ndarray) -> None:
    n_in = len(src)
    n_out = len(dst)
    ratio = (n_out - 1) / float(n_in - 1) if n_in > 1 and n_out > 1 else 0.0

    index = np.floor(np.arange(n_in) * ratio).astype(np.intp)
    np.add.at(dst, index, src)

    dst *= n_out / float(n_in)


def resample(audio: Audio, target_rate: int) -> Audio:
    """Return a planar buffer at `target_rate`. Input must be planar."""
    if audio.layout != AudioLayout.PLANAR:
        raise LayoutError("Resampling expects a planar buffer.")
    target_rate = int(target_rate)
    if target_rate <= 0:
        raise ValueError(f"Target sample rate must be positive, got {target_rate}.")

    n_out = output_length(audio.samples_per_channel, audio.sample_rate, target_rate)
    if n_out <= 0:
        raise ValueError(
            f"A {audio.duration_seconds:.6f}s track has no samples at {target_rate}Hz."
        )

    # Accumulate in float64, store float32
    acc = np.zeros((audio.channels, n_out), dtype=np.float64)
    for ch in range(audio.channels):
        _accumulate_channel(np.asarray(audio.channel(ch), dtype=np.float64), acc[ch])

    return Audio(acc.reshape(-1).astype(np.float32), audio.channels, target_rate, AudioLayout.PLANAR)

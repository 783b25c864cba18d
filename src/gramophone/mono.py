"""
Mono downmix: average all channels into one.

Each (channel count, layout) combination has its own index mapping; the right one is
picked from a small dispatch table.
"""

from __future__ import annotations
from typing import Callable, Dict, Tuple
import numpy as np
from .audio import Audio, AudioLayout, LayoutError

_STEREO = "stereo"
_MULTI = "multi"

_Downmix = Callable[[Audio, np.ndarray], None]


def _interleaved_stereo(src: Audio, out: np.ndarray) -> None:
    x = src.samples
    out[:] = (x[0::2] + x[1::2]) * 0.5


def _planar_stereo(src: Audio, out: np.ndarray) -> None:
    x = src.samples
    half = len(x) // 2
    out[:] = (x[:half] + x[half:]) * 0.5


def _interleaved_multi(src: Audio, out: np.ndarray) -> None:
    x = src.samples
    c = src.channels
    for ch in range(c):
        out += x[ch::c]
    out *= 1.0 / c


def _planar_multi(src: Audio, out: np.ndarray) -> None:
    x = src.samples
    c = src.channels
    spc = src.samples_per_channel
    for ch in range(c):
        out += x[ch * spc:(ch + 1) * spc]
    out *= 1.0 / c


_DOWNMIXERS: Dict[Tuple[str, AudioLayout], _Downmix] = {
    (_STEREO, AudioLayout.INTERLEAVED): _interleaved_stereo,
    (_STEREO, AudioLayout.PLANAR): _planar_stereo,
    (_MULTI, AudioLayout.INTERLEAVED): _interleaved_multi,
    (_MULTI, AudioLayout.PLANAR): _planar_multi,
}


def convert_to_mono(audio: Audio) -> Audio:
    """
    Return a new single-channel buffer whose samples are the per-frame mean of all input channels.
    Sample rate and layout tag are kept. Mono input is copied unchanged.
    """
    if audio.channels <= 1:
        return audio.copy()

    kind = _STEREO if audio.channels == 2 else _MULTI
    fn = _DOWNMIXERS.get((kind, audio.layout))
    if fn is None:
        raise LayoutError(f"No downmix for {audio.channels} channel(s) in layout {audio.layout!r}.")

    out = np.zeros(audio.samples_per_channel, dtype=np.float32)
    fn(audio, out)
    return Audio(out, 1, audio.sample_rate, audio.layout)

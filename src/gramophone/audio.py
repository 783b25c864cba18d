"""
Audio buffer model: a flat float32 sample array plus channel count, sample rate and layout.

Two layouts are supported:
- INTERLEAVED: [c0s0, c1s0, ..., c0s1, c1s1, ...] (what decoders hand out)
- PLANAR: all samples of channel 0, then channel 1, ...
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
import numpy as np


class AudioError(Exception):
    """Base class for audio buffer errors."""


class InvalidAudioError(AudioError, ValueError):
    """The buffer does not describe any audio (bad channel count, rate or samples)."""


class LayoutError(AudioError, RuntimeError):
    """An operation was used on a buffer in the wrong layout."""


class AudioLayout(Enum):
    PLANAR = "planar"
    INTERLEAVED = "interleaved"


@dataclass
class Audio:
    samples: np.ndarray
    channels: int
    sample_rate: int
    layout: AudioLayout = AudioLayout.INTERLEAVED

    def __post_init__(self) -> None:
        # storage is always a flat float32 array; float32 arrays are borrowed, not copied
        if self.samples is not None:
            self.samples = np.asarray(self.samples, dtype=np.float32).reshape(-1)

    @classmethod
    def from_frames(cls, frames: np.ndarray, sample_rate: int) -> Audio:
        """
        Build an interleaved buffer from a (frames, channels) array, as returned by soundfile.read(always_2d=True).
        A 1-D array is treated as mono.
        """
        x = np.asarray(frames, dtype=np.float32)
        if x.ndim == 1:
            x = x[:, None]
        return cls(np.ascontiguousarray(x).reshape(-1), int(x.shape[1]), int(sample_rate), AudioLayout.INTERLEAVED)

    @property
    def samples_per_channel(self) -> int:
        return len(self.samples) // self.channels

    @property
    def duration_seconds(self) -> float:
        return self.samples_per_channel / float(self.sample_rate)

    @property
    def is_valid(self) -> bool:
        return (
            self.channels > 0
            and self.sample_rate > 0
            and self.samples is not None
            and len(self.samples) > 0
            and len(self.samples) % self.channels == 0
            and isinstance(self.layout, AudioLayout)
        )

    def validate(self) -> None:
        if not self.is_valid:
            raise InvalidAudioError(
                f"Invalid audio: channels={self.channels}, sample_rate={self.sample_rate}, "
                f"samples={0 if self.samples is None else len(self.samples)}, layout={self.layout!r}"
            )

    def channel(self, index: int) -> np.ndarray:
        """Contiguous view over one channel. Planar buffers only."""
        if self.layout != AudioLayout.PLANAR:
            raise LayoutError("Channel access is only available on planar buffers.")
        if index < 0 or index >= self.channels:
            raise IndexError(f"Channel {index} out of range for {self.channels} channel(s).")
        spc = self.samples_per_channel
        return self.samples[index * spc:(index + 1) * spc]

    def copy(self) -> Audio:
        """Copy with its own sample storage."""
        return replace(self, samples=self.samples.copy())

    def frames(self) -> np.ndarray:
        """(samples_per_channel, channels) array, for encoders. Always a fresh array."""
        spc = self.samples_per_channel
        if self.layout == AudioLayout.PLANAR:
            return self.samples.reshape(self.channels, spc).T.copy()
        return self.samples.reshape(spc, self.channels).copy()

    # ---------- Layout conversion (in place) ----------

    def interleave(self) -> None:
        """Reorder samples to interleaved storage. No-op if already interleaved."""
        if self.layout == AudioLayout.INTERLEAVED:
            return
        if self.channels > 1:
            scratch = self.samples.copy()
            # interleaved[i] = planar[i // C + (i % C) * spc]
            self.samples[:] = scratch.reshape(self.channels, self.samples_per_channel).T.reshape(-1)
        self.layout = AudioLayout.INTERLEAVED

    def deinterleave(self) -> None:
        """Reorder samples to planar storage. No-op if already planar."""
        if self.layout == AudioLayout.PLANAR:
            return
        if self.channels > 1:
            scratch = self.samples.copy()
            # planar[i] = interleaved[i // spc + (i % spc) * C]
            self.samples[:] = scratch.reshape(self.samples_per_channel, self.channels).T.reshape(-1)
        self.layout = AudioLayout.PLANAR

"""
High-pass filtering with a cascade of second-order Butterworth sections.

Each section is designed with the bilinear transform (pre-warped cutoff):
    H(s) = s^2 / (s^2 + 2*zeta*wc*s + wc^2),   s = 2*fs * (1 - z^-1) / (1 + z^-1)
which gives a fixed FIR numerator [4fs^2, -8fs^2, 4fs^2] and a 2-tap IIR feedback per section.
A cascade of N sections is an order-2N Butterworth high-pass: section k carries pole pair k of 2N.

Sections run one after another, each over the full output of the previous one.
Filter history starts at zero on every call.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
import numpy as np
from scipy import signal
from .audio import Audio
from .constants import DEFAULT_HP_SECTIONS, DEFAULT_HP_CUTOFF_RATIO

FIR_ORDER = 3
IIR_ORDER = 2


@dataclass(frozen=True)
class HighPassParameters:
    num_sections: int = DEFAULT_HP_SECTIONS
    cutoff_ratio: float = DEFAULT_HP_CUTOFF_RATIO  # cutoff / sample rate; keep below 0.5

    def __post_init__(self) -> None:
        if int(self.num_sections) < 1:
            raise ValueError(f"High-pass filtering needs at least one section, got {self.num_sections}.")
        if not float(self.cutoff_ratio) > 0.0:
            raise ValueError(f"High-pass cutoff ratio must be positive, got {self.cutoff_ratio}.")


@dataclass
class HighPassSection:
    fir_taps: np.ndarray = field(default_factory=lambda: np.zeros(FIR_ORDER))
    iir_taps: np.ndarray = field(default_factory=lambda: np.zeros(IIR_ORDER))
    gain: float = 1.0
    history: np.ndarray = field(default_factory=lambda: np.zeros(IIR_ORDER))

    @property
    def numerator(self) -> np.ndarray:
        return self.gain * self.fir_taps

    @property
    def denominator(self) -> np.ndarray:
        # y[n] = x[n] + A0*y[n-1] + A1*y[n-2]  ->  a = [1, -A0, -A1]
        return np.concatenate(([1.0], -self.iir_taps))

    def process(self, x: np.ndarray) -> np.ndarray:
        """Gain -> 3-tap FIR -> 2-tap IIR over a whole stream, carrying history across the stream."""
        y, self.history = signal.lfilter(self.numerator, self.denominator, x, zi=self.history)
        return y


def design_section(k: int, order: int, cutoff_hz: float, fs: float) -> HighPassSection:
    """Coefficients for section k (1-based) of an order-`order` Butterworth high-pass."""
    # Pre-warp the cutoff and invert it
    omega_inv = 1.0 / (2.0 * fs * np.tan(np.pi * cutoff_hz / fs))

    zeta = -np.cos(np.pi * (2.0 * k + order - 1.0) / (2.0 * order))

    fs2 = fs * fs
    b0 = 4.0 * fs2 + 4.0 * fs * zeta / omega_inv + 1.0 / (omega_inv * omega_inv)

    section = HighPassSection()
    section.fir_taps[:] = (4.0 * fs2, -8.0 * fs2, 4.0 * fs2)
    # Normalized so the output coefficient is 1, feedback taps negated
    section.iir_taps[0] = ((2.0 / (omega_inv * omega_inv)) - 8.0 * fs2) / -b0
    section.iir_taps[1] = (4.0 * fs2 - 4.0 * fs * zeta / omega_inv + 1.0 / (omega_inv * omega_inv)) / -b0
    section.gain = 1.0 / b0
    return section


def design_cascade(parameters: HighPassParameters, sample_rate: int) -> List[HighPassSection]:
    n = int(parameters.num_sections)
    fs = float(sample_rate)
    cutoff_hz = float(parameters.cutoff_ratio) * fs
    return [design_section(k, 2 * n, cutoff_hz, fs) for k in range(1, n + 1)]


def high_pass_filter(audio: Audio, parameters: HighPassParameters) -> Audio:
    """
    Return a filtered copy of `audio`. The sample array is treated as one stream
    regardless of layout, so multi-channel input should be planar or mono.
    """
    sections = design_cascade(parameters, audio.sample_rate)

    y = np.asarray(audio.samples, dtype=np.float64)
    for section in sections:
        y = section.process(y)

    out = audio.copy()
    out.samples[:] = y
    return out

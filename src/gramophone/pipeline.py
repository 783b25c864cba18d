"""
Processing pipeline: copy, deinterleave, downmix, high-pass, resample, normalize, re-layout.

Stage order is fixed; a stage runs only when its setting is present.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional
from .audio import Audio, AudioLayout
from .constants import DEFAULT_PEAK, DEFAULT_TARGET_RATE
from .filtering import HighPassParameters, high_pass_filter
from .mono import convert_to_mono
from .sampling import resample
from .volume import normalize_volume, peak_level


@dataclass
class PipelineConfig:
    convert_to_mono: bool = True
    volume_normalization: Optional[float] = DEFAULT_PEAK  # target peak, None to skip
    target_sampling_rate: Optional[int] = DEFAULT_TARGET_RATE  # None keeps the input rate
    target_layout: Optional[AudioLayout] = None  # None keeps the input layout
    high_pass_filtering: Optional[HighPassParameters] = field(default_factory=HighPassParameters)


def process(audio: Audio, config: Optional[PipelineConfig] = None,
            log: Optional[logging.Logger] = None) -> Audio:
    """
    Run the pipeline on a copy of `audio` and return it. `audio` itself is left untouched.
    Progress goes to `log` when given.
    """
    audio.validate()
    if config is None:
        config = PipelineConfig()

    def info(msg: str, *args) -> None:
        if log is not None:
            log.info(msg, *args)

    info("Copying input...")
    out = audio.copy()

    if out.layout == AudioLayout.INTERLEAVED:
        info("Deinterleaving input...")
        out.deinterleave()

    if config.convert_to_mono:
        info("Converting %d channel(s) to mono...", out.channels)
        out = convert_to_mono(out)

    if config.high_pass_filtering is not None:
        hp = config.high_pass_filtering
        info("Applying high-pass filtering (%d sections, cutoff %.1fHz)...",
             hp.num_sections, hp.cutoff_ratio * out.sample_rate)
        out = high_pass_filter(out, hp)

    if config.target_sampling_rate is not None:
        info("Resampling from %dHz to %dHz...", out.sample_rate, config.target_sampling_rate)
        out = resample(out, config.target_sampling_rate)

    if config.volume_normalization is not None:
        peak = peak_level(out)
        if peak > 0.0:
            info("Normalizing volume (peak %.4f -> %.4f)...", peak, config.volume_normalization)
            out = normalize_volume(out, config.volume_normalization)
        elif log is not None:
            log.warning("Skipping volume normalization: peak sample is %s.", peak)

    target_layout = config.target_layout or audio.layout
    if target_layout == AudioLayout.INTERLEAVED and out.layout != AudioLayout.INTERLEAVED:
        info("Interleaving output...")
        out.interleave()

    info("Processing completed.")
    return out

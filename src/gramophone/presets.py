"""
Named pipeline configurations.
Tweak or add your own easily.
"""

from __future__ import annotations
from typing import Any
from .audio import AudioLayout
from .filtering import HighPassParameters
from .pipeline import PipelineConfig

PIPELINE_PRESETS = {
    # gramophone disc: mono, low rate, planar for the encoder
    "disc": dict(convert_to_mono=True, target_sampling_rate=11025, target_layout=AudioLayout.PLANAR),
    # same chain, lighter filtering
    "disc-soft": dict(convert_to_mono=True, target_sampling_rate=11025, target_layout=AudioLayout.PLANAR,
                      high_pass_filtering=HighPassParameters(num_sections=16)),
    # keep channels and rate, only clean up lows and level
    "clean": dict(convert_to_mono=False, target_sampling_rate=None),
    # nothing but layout handling
    "raw": dict(convert_to_mono=False, volume_normalization=None, target_sampling_rate=None,
                high_pass_filtering=None),
}


def available_presets() -> list:
    return sorted(PIPELINE_PRESETS)


def preset_config(name: str, **overrides: Any) -> PipelineConfig:
    """Build a PipelineConfig from a preset name, with keyword overrides on top."""
    key = name.strip().lower()
    if key not in PIPELINE_PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(available_presets())}")
    params = dict(PIPELINE_PRESETS[key])
    params.update(overrides)
    return PipelineConfig(**params)

"""
Default processing parameters shared by the pipeline, presets and CLI.
"""

DEFAULT_TARGET_RATE: int = 11_025  # Output sample rate (Hz)
DEFAULT_PEAK: float = 0.95  # Peak level after normalization
DEFAULT_HP_SECTIONS: int = 32  # Second-order sections in the high-pass cascade
DEFAULT_HP_CUTOFF_RATIO: float = 425.0 / 48_000.0  # Cutoff relative to the sample rate

OUTPUT_SUFFIX: str = "_Disc"
OUTPUT_EXTENSION: str = ".ogg"
DEFAULT_OGG_QUALITY: float = 0.1  # Vorbis VBR quality, 0..1

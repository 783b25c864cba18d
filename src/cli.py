"""
Command-line entrypoint: decode audio files, run the gramophone pipeline, encode the results.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
import time
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
import soundfile as sf

from gramophone.audio import Audio, AudioLayout
from gramophone.constants import DEFAULT_OGG_QUALITY, OUTPUT_EXTENSION, OUTPUT_SUFFIX
from gramophone.filtering import HighPassParameters
from gramophone.pipeline import PipelineConfig, process
from gramophone.presets import available_presets, preset_config

log = logging.getLogger("gramophone")

T = TypeVar("T")

FILE_RETRIES = 5
FILE_RETRY_DELAY_S = 5.0


def run_file_operation(op: Callable[[], T], retries: int = FILE_RETRIES, delay_s: float = FILE_RETRY_DELAY_S) -> T:
    """Run a file-system operation, retrying on OS and libsndfile errors. The last failure propagates."""
    for attempt in range(1, retries):
        try:
            return op()
        except (OSError, sf.SoundFileError) as e:
            print(f"File system error: {e}")
            print(f"Retrying in {delay_s:g} seconds... ({attempt}/{retries - 1})")
            time.sleep(delay_s)
    return op()


def default_output_path(input_path: str, out_dir: Optional[str] = None) -> str:
    stem = os.path.splitext(os.path.basename(input_path))[0]
    folder = out_dir if out_dir is not None else (os.path.dirname(input_path) or ".")
    return os.path.join(folder, stem + OUTPUT_SUFFIX + OUTPUT_EXTENSION)


def resolve_paths(inputs: Sequence[str], out: Optional[str], out_dir: Optional[str]) -> List[Tuple[str, str]]:
    """Pair every input with its output path."""
    if out is not None:
        if len(inputs) != 1:
            raise ValueError("--out can only be used with a single input; use --out-dir instead.")
        if not os.path.splitext(out)[1]:
            out += OUTPUT_EXTENSION
        return [(inputs[0], out)]
    return [(p, default_output_path(p, out_dir)) for p in inputs]


def read_audio(path: str) -> Audio:
    data, sr = sf.read(path, dtype="float32", always_2d=True)
    return Audio.from_frames(data, sr)


def write_audio(path: str, audio: Audio, quality: float = DEFAULT_OGG_QUALITY) -> None:
    """
    Encode `audio` to `path`. When `path` already exists the data goes to `path.tmp` first
    and replaces it afterwards.
    """
    ext = os.path.splitext(path)[1].lstrip(".").upper() or OUTPUT_EXTENSION.lstrip(".").upper()
    kwargs = {}
    if ext == "OGG":
        # libsndfile maps vorbis quality to 1 - compression level
        kwargs = dict(subtype="VORBIS", compression_level=float(np.clip(1.0 - quality, 0.0, 1.0)))

    use_temp = os.path.exists(path)
    target = path + ".tmp" if use_temp else path
    if use_temp and os.path.exists(target):
        run_file_operation(lambda: os.remove(target))

    frames = audio.frames()
    run_file_operation(lambda: sf.write(target, frames, audio.sample_rate, format=ext, **kwargs))

    if use_temp:
        run_file_operation(lambda: os.replace(target, path))


def build_config(args: argparse.Namespace) -> PipelineConfig:
    overrides = {}
    if args.stereo:
        overrides["convert_to_mono"] = False
    if args.rate is not None:
        overrides["target_sampling_rate"] = args.rate if args.rate > 0 else None
    if args.no_normalize:
        overrides["volume_normalization"] = None
    elif args.peak is not None:
        overrides["volume_normalization"] = args.peak
    if args.layout is not None:
        overrides["target_layout"] = AudioLayout(args.layout)
    if args.no_highpass:
        overrides["high_pass_filtering"] = None
    elif args.hp_sections is not None or args.hp_cutoff is not None:
        base = preset_config(args.preset).high_pass_filtering or HighPassParameters()
        overrides["high_pass_filtering"] = HighPassParameters(
            num_sections=args.hp_sections if args.hp_sections is not None else base.num_sections,
            cutoff_ratio=args.hp_cutoff if args.hp_cutoff is not None else base.cutoff_ratio,
        )
    return preset_config(args.preset, **overrides)


def handle_file(input_path: str, output_path: str, config: PipelineConfig, quality: float,
                verbose: bool = True) -> Audio:
    print(f"Reading input - '{input_path}'...")
    audio = run_file_operation(lambda: read_audio(input_path))

    out = process(audio, config, log=log if verbose else None)

    print(f"Writing output - '{output_path}'...")
    out_dir = os.path.dirname(output_path) or "."
    os.makedirs(out_dir, exist_ok=True)
    write_audio(output_path, out, quality=quality)
    return out


def make_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Make audio sound like it is played from a gramophone disc.")
    ap.add_argument("inputs", nargs="+", help="Input audio file(s)")
    dest = ap.add_mutually_exclusive_group()
    dest.add_argument("--out", type=str, default=None, help="Output path (single input only)")
    dest.add_argument("--out-dir", type=str, default=None, help="Output directory for all inputs")
    ap.add_argument("--preset", choices=available_presets(), default="disc", help="Processing preset")
    ap.add_argument("--rate", type=int, default=None, help="Target sample rate in Hz (0 keeps the input rate)")
    ap.add_argument("--stereo", action="store_true", help="Keep all channels instead of downmixing")
    vol = ap.add_mutually_exclusive_group()
    vol.add_argument("--peak", type=float, default=None, help="Target peak level after normalization")
    vol.add_argument("--no-normalize", action="store_true", help="Skip volume normalization")
    ap.add_argument("--hp-sections", type=int, default=None, help="Second-order sections in the high-pass cascade")
    hp = ap.add_mutually_exclusive_group()
    hp.add_argument("--hp-cutoff", type=float, default=None, help="High-pass cutoff as a fraction of the sample rate")
    hp.add_argument("--no-highpass", action="store_true", help="Skip high-pass filtering")
    ap.add_argument("--layout", choices=[l.value for l in AudioLayout], default=None, help="Output sample layout")
    ap.add_argument("--quality", type=float, default=DEFAULT_OGG_QUALITY, help="OGG/Vorbis quality (0..1)")
    ap.add_argument("--quiet", action="store_true", help="Do not log pipeline steps")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = make_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="\t%(message)s")

    try:
        config = build_config(args)
        for input_path, output_path in resolve_paths(args.inputs, args.out, args.out_dir):
            handle_file(input_path, output_path, config, args.quality, verbose=not args.quiet)
            print(f"[OK] Wrote: {os.path.abspath(output_path)}")
    except Exception as e:
        print(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

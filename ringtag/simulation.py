"""Generate noisy, slightly blurred copies of an image to simulate video frames."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
from PIL import Image
from scipy.ndimage import median_filter

_NOISE_MEAN = 0.0
_NOISE_STDDEV = 1.5
_BLOCK = 3
_DEFAULT_FRAMES = 100


def _noise(rng: np.random.Generator, shape) -> np.ndarray:
    """Gaussian noise truncated toward zero to whole grey levels."""
    return np.trunc(rng.normal(_NOISE_MEAN, _NOISE_STDDEV, size=shape)).astype(np.int64)


def generate_compressed_frame(src, rng: np.random.Generator) -> np.ndarray:
    """Return a degraded copy of a grey-scale image.

    The image is median filtered with a 5x5 window, then each 3x3 block
    receives one shared noise value and each pixel one more, values being
    clamped to 0..255. Blocks start at the top-left corner and only whole
    blocks that fit inside the image are used.
    """
    image = np.asarray(src)
    if image.ndim != 2:
        raise ValueError("the source image must be a two-dimensional grey-scale array")
    work = median_filter(image.astype(np.uint8), size=5, mode="nearest").astype(np.int64)
    rows, cols = work.shape

    block_rows = len(range(1, rows - 1, _BLOCK))
    block_cols = len(range(1, cols - 1, _BLOCK))
    if block_rows and block_cols:
        block_noise = _noise(rng, (block_rows, block_cols))
        expanded = np.repeat(np.repeat(block_noise, _BLOCK, axis=0), _BLOCK, axis=1)
        height, width = expanded.shape
        work[:height, :width] = np.clip(work[:height, :width] + expanded, 0, 255)

    work = np.clip(work + _noise(rng, work.shape), 0, 255)
    return work.astype(np.uint8)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        description="Write noisy frames generated from one image as numbered PNG files."
    )
    parser.add_argument("input", help="source image")
    parser.add_argument("output_dir", help="directory receiving the frames")
    parser.add_argument(
        "--frames", type=int, default=_DEFAULT_FRAMES, help="number of frames to write"
    )
    parser.add_argument("--seed", type=int, default=0, help="seed of the noise generator")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Read an image and write ``--frames`` degraded versions as ``#####.png``."""
    args = _parse_args(argv)
    if args.frames < 0:
        raise ValueError("the number of frames cannot be negative")
    with Image.open(args.input) as image:
        gray = np.asarray(image.convert("L"))

    rng = np.random.default_rng(args.seed)
    output_dir = Path(args.output_dir)
    for index in range(args.frames):
        frame = generate_compressed_frame(gray, rng)
        Image.fromarray(frame).save(output_dir / f"{index:05d}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
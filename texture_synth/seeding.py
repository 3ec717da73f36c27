"""Bootstrap the output with a random patch copied from the sample."""

from __future__ import annotations

import logging

import numpy as np

from texture_synth.exceptions import InvalidDimensions

logger = logging.getLogger(__name__)


def seed_output(
    sample: np.ndarray,
    output_rows: int,
    output_cols: int,
    seed_size: int = 3,
    rng: np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Create a blank output with a random sample patch in its centre.

    The top-left corner of the patch is drawn uniformly from every valid
    offset in the sample. The patch is centred on row
    ``(output_rows - 1) // 2`` and column ``(output_cols - 1) // 2``, so
    even output sizes lean towards the top-left.

    Args:
        sample:      (H, W, C) float - the texture sample.
        output_rows: Height of the output.
        output_cols: Width of the output.
        seed_size:   Odd side length of the seed patch.
        rng:         Random generator (``None`` = non-deterministic).

    Returns:
        ``(output, filled)`` - (output_rows, output_cols, C) float64 buffer,
        zero except for the seed, and the matching (output_rows, output_cols)
        boolean mask.

    Raises:
        InvalidDimensions: if the seed does not fit the sample or the output.
    """
    if seed_size < 1 or seed_size % 2 == 0:
        msg = f"Seed size must be a positive odd integer, got {seed_size}"
        raise InvalidDimensions(msg)

    in_rows, in_cols = sample.shape[:2]
    if in_rows < seed_size or in_cols < seed_size:
        msg = (
            f"Sample {in_rows}x{in_cols} is smaller than the "
            f"{seed_size}x{seed_size} seed"
        )
        raise InvalidDimensions(msg)
    if output_rows < seed_size or output_cols < seed_size:
        msg = (
            f"Output {output_rows}x{output_cols} is smaller than the "
            f"{seed_size}x{seed_size} seed"
        )
        raise InvalidDimensions(msg)

    if rng is None:
        rng = np.random.default_rng()

    # Random top-left corner; the bottom/right margin keeps the patch inside
    margin = seed_size - 1
    src_row = int(rng.integers(0, in_rows - margin))
    src_col = int(rng.integers(0, in_cols - margin))
    patch = sample[src_row:src_row + seed_size, src_col:src_col + seed_size, :]

    half = seed_size // 2
    top = (output_rows - 1) // 2 - half
    left = (output_cols - 1) // 2 - half

    output = np.zeros((output_rows, output_cols, sample.shape[2]), dtype=np.float64)
    output[top:top + seed_size, left:left + seed_size, :] = patch

    filled = np.zeros((output_rows, output_cols), dtype=bool)
    filled[top:top + seed_size, left:left + seed_size] = True

    logger.debug(
        "Seed %dx%d from sample (%d, %d) placed at (%d, %d)",
        seed_size, seed_size, src_row, src_col, top, left,
    )
    return output, filled

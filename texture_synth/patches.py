"""Candidate patch table and Gaussian kernel, built once per run."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from texture_synth.exceptions import InvalidDimensions

logger = logging.getLogger(__name__)

# Classic Efros-Leung parameterisation: sigma = window_size / 6.4
SIGMA_DIVISOR = 6.4


def normalize_window_size(window_size: int) -> int:
    """Round an even window size up to the next odd one.

    Larger windows tend to give better textures, so rounding goes up.
    """
    if window_size % 2 == 0:
        window_size += 1
    if window_size < 3:
        msg = f"Window size must be at least 3, got {window_size}"
        raise InvalidDimensions(msg)
    return window_size


def gaussian_kernel(size: int, sigma: float) -> np.ndarray:
    """Rotationally symmetric (size, size) Gaussian that sums to one.

    Entries below machine epsilon relative to the peak are zeroed before
    normalisation, like MATLAB's ``fspecial("gaussian")``.
    """
    s = (size - 1) / 2.0
    y, x = np.ogrid[-s:s + 1, -s:s + 1]
    kernel = np.exp(-(x * x + y * y) / (2.0 * sigma * sigma))
    kernel[kernel < np.finfo(kernel.dtype).eps * kernel.max()] = 0.0
    total = kernel.sum()
    if total != 0:
        kernel /= total
    return kernel


def stack_channels(block: np.ndarray) -> np.ndarray:
    """Flatten (..., h, w, C) into (..., C*h*w) with channel 0 first."""
    moved = np.moveaxis(block, -1, -3)
    return moved.reshape(*moved.shape[:-3], -1)


@dataclass(frozen=True)
class PatchIndex:
    """Every window placement of the sample, flattened and channel-stacked.

    Attributes:
        window_size:   Odd side length of the window.
        candidates:    (N, C*w*w) float64 - one row per placement, row-major
                       over the placement's top-left corner.
        centers:       (N, 2) int - sample (row, col) of each window's centre.
        center_values: (N, C) float64 - sample pixel at each centre.
        gaussian:      (C*w*w,) float64 - kernel repeated once per channel.
    """

    window_size: int
    candidates: np.ndarray
    centers: np.ndarray
    center_values: np.ndarray
    gaussian: np.ndarray

    @property
    def half_window(self) -> int:
        return self.window_size // 2

    @property
    def num_candidates(self) -> int:
        return len(self.candidates)

    @property
    def num_channels(self) -> int:
        return self.center_values.shape[1]


def build_patch_index(
    sample: np.ndarray,
    window_size: int,
    sigma_divisor: float = SIGMA_DIVISOR,
) -> PatchIndex:
    """Slide the window over the sample with stride 1 and stack every patch.

    Args:
        sample:        (H, W, C) float - the texture sample.
        window_size:   Requested window side (even values grow by one).
        sigma_divisor: Gaussian sigma is ``window_size / sigma_divisor``.

    Returns:
        A read-only :class:`PatchIndex`.
    """
    window_size = normalize_window_size(window_size)
    rows, cols, channels = sample.shape
    if rows < window_size or cols < window_size:
        msg = (
            f"Sample {rows}x{cols} is smaller than the "
            f"{window_size}x{window_size} window"
        )
        raise InvalidDimensions(msg)

    # (rows', cols', C, w, w) view -> (N, C*w*w)
    windows = sliding_window_view(sample, (window_size, window_size), axis=(0, 1))
    n_rows, n_cols = windows.shape[:2]
    candidates = windows.reshape(n_rows * n_cols, -1).astype(np.float64)

    half = window_size // 2
    grid_r, grid_c = np.mgrid[0:n_rows, 0:n_cols]
    centers = np.column_stack([grid_r.ravel() + half, grid_c.ravel() + half])
    center_values = sample[centers[:, 0], centers[:, 1], :].astype(np.float64)

    kernel = gaussian_kernel(window_size, window_size / sigma_divisor)
    gaussian = np.tile(kernel.ravel(), channels)

    for arr in (candidates, centers, center_values, gaussian):
        arr.setflags(write=False)

    logger.info(
        "Candidate table: %d patches of %dx%dx%d",
        len(candidates), window_size, window_size, channels,
    )
    return PatchIndex(
        window_size=window_size,
        candidates=candidates,
        centers=centers,
        center_values=center_values,
        gaussian=gaussian,
    )

"""Colour-space conversion around the synthesis core.

The core works on any channel count, and its default error threshold
assumes values roughly in [0, 1]. CIELAB is therefore rescaled into that
range before synthesis and mapped back afterwards.
"""

from __future__ import annotations

import numpy as np
from skimage.color import gray2rgb, lab2rgb, rgb2gray, rgb2lab

COLOR_SPACES = ("rgb", "lab", "gray")

# L in [0, 100], a/b in about [-128, 127]
_LAB_OFFSET = np.array([0.0, 128.0, 128.0])
_LAB_SCALE = np.array([100.0, 255.0, 255.0])


def _check(color_space: str) -> None:
    if color_space not in COLOR_SPACES:
        available = ", ".join(COLOR_SPACES)
        msg = f"Unknown colour space '{color_space}'. Available: {available}"
        raise ValueError(msg)


def to_working_space(rgb: np.ndarray, color_space: str = "rgb") -> np.ndarray:
    """Convert (H, W, 3) float RGB in [0, 1] to the synthesis space.

    Returns:
        (H, W, 3) for ``"rgb"`` and ``"lab"``, (H, W, 1) for ``"gray"``.
    """
    _check(color_space)
    rgb = np.asarray(rgb, dtype=np.float64)
    if color_space == "lab":
        return (rgb2lab(rgb) + _LAB_OFFSET) / _LAB_SCALE
    if color_space == "gray":
        return rgb2gray(rgb)[:, :, np.newaxis]
    return rgb.copy()


def from_working_space(array: np.ndarray, color_space: str = "rgb") -> np.ndarray:
    """Map a synthesized array back to (H, W, 3) float RGB in [0, 1]."""
    _check(color_space)
    array = np.asarray(array, dtype=np.float64)
    if color_space == "lab":
        rgb = lab2rgb(array * _LAB_SCALE - _LAB_OFFSET)
    elif color_space == "gray":
        rgb = gray2rgb(array.reshape(array.shape[:2]))
    else:
        rgb = array
    return np.clip(rgb, 0.0, 1.0)

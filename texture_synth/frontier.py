"""Onion-skin growth order."""

from __future__ import annotations

import numpy as np
from skimage.morphology import dilation

# 8-connected, one-pixel dilation
_FOOTPRINT = np.ones((3, 3), dtype=bool)


def next_frontier(filled: np.ndarray) -> np.ndarray:
    """Unfilled pixels that touch at least one filled pixel.

    Computed fresh from the mask (dilation minus the mask), never
    maintained incrementally.

    Args:
        filled: (H, W) bool - current filled mask.

    Returns:
        (K, 2) int array of (row, col) positions in row-major order.
        Empty when the mask is full.
    """
    # Symmetric footprint, so grey dilation of the 0/1 mask is the binary one
    dilated = dilation(filled.astype(np.uint8), _FOOTPRINT).astype(bool)
    return np.argwhere(dilated & ~filled)

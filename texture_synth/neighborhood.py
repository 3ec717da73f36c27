"""Padded output canvas and neighbourhood extraction.

The output image and its filled mask live inside arrays padded by half a
window of zeros / ``False`` on every side, so a neighbourhood near the
border can be sliced without any bounds checks. The canonical buffers are
interior *views* of the padded ones: a pixel written through
:meth:`PaddedCanvas.fill` is visible to the very next neighbourhood read.
"""

from __future__ import annotations

import numpy as np

from texture_synth.exceptions import InternalInvariantViolation
from texture_synth.patches import stack_channels


def extract_neighborhood(
    padded_output: np.ndarray,
    padded_filled: np.ndarray,
    row: int,
    col: int,
    window_size: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the window around an output pixel and its validity mask.

    Args:
        padded_output: (H + 2h, W + 2h, C) float - padded output image.
        padded_filled: (H + 2h, W + 2h) bool - padded filled mask.
        row, col:      Pixel position in *unpadded* output coordinates.
        window_size:   Odd window side, ``2h + 1``.

    Returns:
        ``(neighborhood, mask)`` - (C*w*w,) channel-stacked values and the
        (w, w) boolean mask, not yet replicated across channels.
    """
    # Shifting by the padding and then back by half a window cancels out
    block = padded_output[row:row + window_size, col:col + window_size, :]
    mask = padded_filled[row:row + window_size, col:col + window_size]
    return stack_channels(block), mask


class PaddedCanvas:
    """Output buffer and filled mask with a zero border of ``half_window``."""

    def __init__(
        self,
        output: np.ndarray,
        filled: np.ndarray,
        window_size: int,
    ) -> None:
        self.window_size = window_size
        self.half_window = window_size // 2
        h = self.half_window
        self.padded_output = np.pad(output, ((h, h), (h, h), (0, 0)))
        self.padded_filled = np.pad(filled, ((h, h), (h, h)))
        rows, cols = filled.shape
        self._interior = (slice(h, h + rows), slice(h, h + cols))

    @property
    def output(self) -> np.ndarray:
        """(H, W, C) view of the unpadded output."""
        return self.padded_output[self._interior]

    @property
    def filled(self) -> np.ndarray:
        """(H, W) view of the unpadded filled mask."""
        return self.padded_filled[self._interior]

    def neighborhood(self, row: int, col: int) -> tuple[np.ndarray, np.ndarray]:
        return extract_neighborhood(
            self.padded_output, self.padded_filled, row, col, self.window_size,
        )

    def fill(self, row: int, col: int, values: np.ndarray) -> None:
        """Write one pixel and mark it filled."""
        self.output[row, col, :] = values
        self.filled[row, col] = True

    def sync(self) -> None:
        """Check the padding is still blank.

        The unpadded buffers are views, so the interior never drifts; only
        a write into the border could break neighbourhood reads.
        """
        h = self.half_window
        if h and (self.padded_filled.sum() != self.filled.sum()):
            msg = "Filled mask leaked into the canvas padding"
            raise InternalInvariantViolation(msg)

    def filled_count(self) -> int:
        return int(self.filled.sum())

    def is_complete(self) -> bool:
        return bool(self.filled.all())

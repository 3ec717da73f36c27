"""Efros-Leung texture synthesis: seed, then grow in onion-skin passes."""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from texture_synth.exceptions import (
    InternalInvariantViolation,
    InvalidDimensions,
    PassLimitExceeded,
)
from texture_synth.frontier import next_frontier
from texture_synth.matching import ERROR_TOLERANCE, select_match
from texture_synth.neighborhood import PaddedCanvas
from texture_synth.patches import SIGMA_DIVISOR, build_patch_index
from texture_synth.seeding import seed_output

logger = logging.getLogger(__name__)

SEED_SIZE = 3
INITIAL_THRESHOLD = 0.3
THRESHOLD_GROWTH = 1.1

PassCallback = Callable[[int, np.ndarray], None]


class SynthesisState(enum.Enum):
    SEEDING = "seeding"
    GROWING = "growing"
    DONE = "done"


@dataclass(frozen=True)
class PassStats:
    """What one growth pass did."""

    number: int
    frontier_size: int
    accepted: int
    filled: int
    threshold: float  # acceptance bound after the pass


def as_pixel_buffer(sample: np.ndarray) -> np.ndarray:
    """Return *sample* as an (H, W, C) float64 array.

    A 2-D array is treated as a single-channel image.
    """
    arr = np.array(sample, dtype=np.float64)
    if arr.ndim == 2:
        arr = arr[:, :, np.newaxis]
    if arr.ndim != 3 or arr.size == 0:
        msg = f"Sample must be a non-empty (H, W) or (H, W, C) array, got shape {arr.shape}"
        raise InvalidDimensions(msg)
    return arr


class SynthesisSession:
    """All mutable state of one synthesis call.

    The session walks ``SEEDING -> GROWING -> DONE``. Each growth pass
    visits the current frontier pixel by pixel; an accepted pixel is
    written straight into the canvas, so later pixels of the same pass
    already match against it. A pass that accepts nothing relaxes the
    error threshold, which guarantees termination.
    """

    def __init__(
        self,
        sample: np.ndarray,
        output_rows: int,
        output_cols: int,
        window_size: int,
        rng: np.random.Generator | int | None = None,
        *,
        seed_size: int = SEED_SIZE,
        error_tolerance: float = ERROR_TOLERANCE,
        initial_threshold: float = INITIAL_THRESHOLD,
        threshold_growth: float = THRESHOLD_GROWTH,
        sigma_divisor: float = SIGMA_DIVISOR,
        on_pass: PassCallback | None = None,
        max_passes: int | None = None,
    ) -> None:
        if initial_threshold <= 0:
            msg = f"initial_threshold must be positive, got {initial_threshold}"
            raise ValueError(msg)
        if threshold_growth <= 1:
            msg = f"threshold_growth must exceed 1, got {threshold_growth}"
            raise ValueError(msg)
        if error_tolerance < 0:
            msg = f"error_tolerance must be non-negative, got {error_tolerance}"
            raise ValueError(msg)

        self._squeeze = np.ndim(sample) == 2
        self.sample = as_pixel_buffer(sample)
        self.sample.setflags(write=False)

        if seed_size < 1 or seed_size % 2 == 0:
            msg = f"Seed size must be a positive odd integer, got {seed_size}"
            raise InvalidDimensions(msg)

        rows, cols = self.sample.shape[:2]
        if min(rows, cols) < seed_size or min(output_rows, output_cols) < seed_size:
            msg = (
                f"Sample {rows}x{cols} and output {output_rows}x{output_cols} "
                f"must both be at least {seed_size}x{seed_size}"
            )
            raise InvalidDimensions(msg)

        self.output_rows = output_rows
        self.output_cols = output_cols
        self.seed_size = seed_size
        self.error_tolerance = error_tolerance
        self.threshold = float(initial_threshold)
        self.threshold_growth = threshold_growth
        self.on_pass = on_pass
        self.max_passes = max_passes
        self.rng = np.random.default_rng(rng)

        self.index = build_patch_index(self.sample, window_size, sigma_divisor)
        self.canvas: PaddedCanvas | None = None
        self.state = SynthesisState.SEEDING
        self.history: list[PassStats] = []
        self._total_error = 0.0
        self._matches = 0

    # -- properties ----------------------------------------------------

    @property
    def window_size(self) -> int:
        return self.index.window_size

    @property
    def passes(self) -> int:
        return len(self.history)

    @property
    def mean_error(self) -> float:
        """Mean weighted error of every accepted match so far."""
        return self._total_error / self._matches if self._matches else 0.0

    @property
    def output(self) -> np.ndarray:
        """Copy of the current output, shaped like the sample."""
        if self.canvas is None:
            msg = "Session has not been seeded yet"
            raise RuntimeError(msg)
        result = self.canvas.output.copy()
        return result[:, :, 0] if self._squeeze else result

    # -- state machine -------------------------------------------------

    def seed(self) -> None:
        output, filled = seed_output(
            self.sample, self.output_rows, self.output_cols,
            self.seed_size, self.rng,
        )
        self.canvas = PaddedCanvas(output, filled, self.window_size)
        self.state = SynthesisState.GROWING

    def run_pass(self) -> int:
        """Fill one onion-skin layer.

        Returns:
            Number of pixels accepted in this pass (0 once done).
        """
        if self.state is SynthesisState.SEEDING:
            self.seed()
        if self.state is SynthesisState.DONE:
            return 0

        canvas = self.canvas
        frontier = next_frontier(canvas.filled)
        if len(frontier) == 0:
            if not canvas.is_complete():
                msg = "Frontier is empty but the output is not full"
                raise InternalInvariantViolation(msg)
            self.state = SynthesisState.DONE
            return 0

        if self.max_passes is not None and self.passes >= self.max_passes:
            msg = (
                f"Gave up after {self.passes} passes with "
                f"{canvas.filled.size - canvas.filled_count()} pixels unfilled"
            )
            raise PassLimitExceeded(msg)

        accepted = 0
        for row, col in frontier:
            neighborhood, mask = canvas.neighborhood(row, col)
            match = select_match(
                neighborhood, mask, self.index, self.threshold,
                self.rng, self.error_tolerance,
            )
            if match is None:
                continue
            canvas.fill(row, col, match.values)
            self._total_error += match.error
            self._matches += 1
            accepted += 1

        canvas.sync()

        if accepted == 0:
            self.threshold *= self.threshold_growth
            logger.debug("No match this pass; threshold raised to %.4f", self.threshold)

        stats = PassStats(
            number=self.passes + 1,
            frontier_size=len(frontier),
            accepted=accepted,
            filled=canvas.filled_count(),
            threshold=self.threshold,
        )
        self.history.append(stats)
        logger.debug(
            "  pass %4d  frontier=%d  accepted=%d  filled=%d/%d  threshold=%.4f",
            stats.number, stats.frontier_size, stats.accepted,
            stats.filled, canvas.filled.size, stats.threshold,
        )

        if self.on_pass is not None:
            self.on_pass(stats.number, self.output)
        return accepted

    def run(self) -> np.ndarray:
        """Grow until every pixel is filled and return the output."""
        logger.info(
            "Synthesis start | sample=%dx%dx%d  output=%dx%d  window=%d",
            *self.sample.shape, self.output_rows, self.output_cols, self.window_size,
        )
        t0 = time.perf_counter()

        while self.state is not SynthesisState.DONE:
            self.run_pass()

        logger.info(
            "Synthesis done  | passes=%d  mean error=%.4f  threshold=%.4f  (%.1f s)",
            self.passes, self.mean_error, self.threshold, time.perf_counter() - t0,
        )
        return self.output


def synthesize(
    sample: np.ndarray,
    output_rows: int,
    output_cols: int,
    window_size: int,
    rng: np.random.Generator | int | None = None,
    *,
    seed_size: int = SEED_SIZE,
    error_tolerance: float = ERROR_TOLERANCE,
    initial_threshold: float = INITIAL_THRESHOLD,
    threshold_growth: float = THRESHOLD_GROWTH,
    sigma_divisor: float = SIGMA_DIVISOR,
    on_pass: PassCallback | None = None,
    max_passes: int | None = None,
) -> np.ndarray:
    """Synthesize an (output_rows, output_cols) texture from *sample*.

    Args:
        sample:            (H, W, C) or (H, W) float - texture sample, values
                           typically in [0, 1].
        output_rows:       Height of the result (at least *seed_size*).
        output_cols:       Width of the result (at least *seed_size*).
        window_size:       Side of the matching window; even sizes grow by one.
        rng:               Generator or integer seed (``None`` = random).
        seed_size:         Side of the seed patch.
        error_tolerance:   Relative slack of the near-optimal set.
        initial_threshold: Starting acceptance bound.
        threshold_growth:  Multiplier applied after a pass with no matches.
        sigma_divisor:     Gaussian sigma is ``window_size / sigma_divisor``.
        on_pass:           Called as ``on_pass(pass_number, output_copy)``
                           after each growth pass.
        max_passes:        Raise :class:`PassLimitExceeded` beyond this many
                           passes (``None`` = unbounded).

    Returns:
        Synthesized texture with the sample's channel layout.

    Raises:
        InvalidDimensions: if the sample, output or window sizes don't fit.
    """
    session = SynthesisSession(
        sample, output_rows, output_cols, window_size, rng,
        seed_size=seed_size,
        error_tolerance=error_tolerance,
        initial_threshold=initial_threshold,
        threshold_growth=threshold_growth,
        sigma_divisor=sigma_divisor,
        on_pass=on_pass,
        max_passes=max_passes,
    )
    return session.run()

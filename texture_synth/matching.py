"""Gaussian-weighted partial-match search over the candidate table."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from scipy.spatial.distance import cdist

from texture_synth.exceptions import InternalInvariantViolation
from texture_synth.patches import PatchIndex

# Near-optimal set: every candidate within 10 % of the best distance
ERROR_TOLERANCE = 0.1


class Match(NamedTuple):
    """An accepted candidate for one output pixel."""

    index: int  # row of the candidate table
    row: int  # sample coordinates of the window centre
    col: int
    error: float
    values: np.ndarray  # (C,) sample pixel to copy


def partial_match_weights(mask: np.ndarray, gaussian: np.ndarray) -> np.ndarray:
    """Gaussian restricted to the filled positions, renormalised to sum one.

    Args:
        mask:     (w, w) bool - which neighbourhood positions are filled.
        gaussian: (C*w*w,) float - channel-stacked kernel.

    Returns:
        (C*w*w,) float - zero at unfilled positions.

    Raises:
        InternalInvariantViolation: if no filled position carries weight.
    """
    channels = gaussian.size // mask.size
    weighted = gaussian * np.tile(mask.ravel(), channels)
    weight = weighted.sum()
    if weight <= 0:
        msg = "Neighbourhood has no filled pixels to match against"
        raise InternalInvariantViolation(msg)
    return weighted / weight


def match_distances(
    neighborhood: np.ndarray,
    weights: np.ndarray,
    candidates: np.ndarray,
) -> np.ndarray:
    """Weighted squared error between the neighbourhood and each candidate.

    Returns:
        (N,) float - ``sum(weights * (candidate - neighborhood) ** 2)``.
    """
    return cdist(
        candidates, neighborhood[np.newaxis, :], "sqeuclidean", w=weights,
    ).ravel()


def select_match(
    neighborhood: np.ndarray,
    mask: np.ndarray,
    index: PatchIndex,
    max_error_threshold: float,
    rng: np.random.Generator,
    error_tolerance: float = ERROR_TOLERANCE,
) -> Match | None:
    """Pick a near-optimal candidate and test it against the threshold.

    Every candidate within ``(1 + error_tolerance)`` of the best distance
    is equally likely, which avoids a directional bias among ties.

    Returns:
        The :class:`Match`, or ``None`` if its error is not below
        *max_error_threshold*.
    """
    weights = partial_match_weights(mask, index.gaussian)
    distances = match_distances(neighborhood, weights, index.candidates)

    cutoff = distances.min() * (1 + error_tolerance)
    near_optimal = np.flatnonzero(distances <= cutoff)
    chosen = int(rng.choice(near_optimal))
    error = float(distances[chosen])

    if error >= max_error_threshold:
        return None

    row, col = index.centers[chosen]
    return Match(
        index=chosen,
        row=int(row),
        col=int(col),
        error=error,
        values=index.center_values[chosen],
    )

"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SynthesisConfig:
    """All tuneable parameters for a synthesis run.

    Attributes:
        output_rows:       Height of the synthesized texture.
        output_cols:       Width of the synthesized texture.
        window_size:       Side of the matching window (even values grow by one).
        seed_size:         Side of the random seed patch copied into the centre.
        error_tolerance:   Relative slack that defines the near-optimal set.
        initial_threshold: Starting acceptance bound on the match error.
        threshold_growth:  Factor applied to the bound after a pass with no matches.
        sigma_divisor:     Gaussian sigma is ``window_size / sigma_divisor``.
        seed:              Random seed (None = non-deterministic).
        max_side:          Downscale the sample so its longest side fits (None = keep).
        color_space:       Working space - "rgb", "lab" or "gray".
        max_passes:        Abort after this many growth passes (None = unbounded).
        pixel_upscale:     Each pixel becomes n x n in the saved images.
        output_format:     Image format for saved files.
        save_comparison:   Generate a side-by-side sample / texture grid.
        save_gif:          Save an animated GIF of the onion-skin growth.
        gif_frames:        Approximate number of frames in the growth GIF.
        input_dir:         Folder to scan for sample images.
        output_dir:        Folder for results.
    """

    # Output
    output_rows: int = 64
    output_cols: int = 64

    # Matching
    window_size: int = 11
    seed_size: int = 3
    error_tolerance: float = 0.1
    initial_threshold: float = 0.3
    threshold_growth: float = 1.1
    sigma_divisor: float = 6.4

    # Randomness
    seed: int | None = 42

    # Pre-processing
    max_side: int | None = None
    color_space: str = "rgb"  # "rgb" | "lab" | "gray"

    # Runtime cap
    max_passes: int | None = None

    # Saving
    pixel_upscale: int = 4
    output_format: str = "png"
    save_comparison: bool = True
    save_gif: bool = False
    gif_frames: int = 40

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("samples"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    def synthesis_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :func:`texture_synth.synthesis.synthesize`."""
        return {
            "seed_size": self.seed_size,
            "error_tolerance": self.error_tolerance,
            "initial_threshold": self.initial_threshold,
            "threshold_growth": self.threshold_growth,
            "sigma_divisor": self.sigma_divisor,
            "max_passes": self.max_passes,
        }

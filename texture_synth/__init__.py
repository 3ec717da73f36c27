"""
Texture Synth
=============

Grow an arbitrarily large texture from a small sample with the
Efros-Leung non-parametric sampling algorithm:

- a random **seed** patch is copied into the centre of a blank canvas,
- the canvas grows in **onion-skin** layers around what is already known,
- each new pixel copies the centre of a randomly chosen near-best
  **Gaussian-weighted** window match from the sample,
- an **adaptive error threshold** relaxes whenever a layer stalls.
"""

__version__ = "1.0.0"

from texture_synth.color_utils import from_working_space, to_working_space
from texture_synth.config import SynthesisConfig
from texture_synth.exceptions import (
    InternalInvariantViolation,
    InvalidDimensions,
    PassLimitExceeded,
    TextureSynthError,
)
from texture_synth.image_io import (
    load_sample,
    make_comparison_grid,
    save_progress_gif,
    save_texture,
)
from texture_synth.synthesis import SynthesisSession, SynthesisState, synthesize

__all__ = [
    "InternalInvariantViolation",
    "InvalidDimensions",
    "PassLimitExceeded",
    "SynthesisConfig",
    "SynthesisSession",
    "SynthesisState",
    "TextureSynthError",
    "from_working_space",
    "load_sample",
    "make_comparison_grid",
    "save_progress_gif",
    "save_texture",
    "synthesize",
    "to_working_space",
]

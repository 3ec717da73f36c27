#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop texture samples into ``samples/`` and run:

    python main.py batch

Or use the full CLI:

    python -m texture_synth.cli batch --help
    python -m texture_synth.cli single brick.png --rows 128 --cols 128
"""

from texture_synth.cli import app

if __name__ == "__main__":
    app()

"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from texture_synth.color_utils import from_working_space, to_working_space
from texture_synth.config import SynthesisConfig
from texture_synth.exceptions import TextureSynthError
from texture_synth.image_io import (
    load_sample,
    make_comparison_grid,
    save_progress_gif,
    save_texture,
)
from texture_synth.synthesis import SynthesisSession

app = typer.Typer(
    name="texture-synth",
    help="Grow large textures from small samples (Efros-Leung).",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger("texture_synth")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _synthesize_file(
    sample_path: Path,
    output: Path,
    cfg: SynthesisConfig,
    gif_path: Path | None = None,
    comparison_path: Path | None = None,
) -> SynthesisSession:
    """Load, synthesize and save one sample. Returns the finished session."""
    rgb = load_sample(sample_path, cfg.max_side)
    h, w = rgb.shape[:2]
    logger.info("Sample: %s  %dx%d  (%s)", sample_path.name, w, h, cfg.color_space)
    sample = to_working_space(rgb, cfg.color_space)

    frames: list[np.ndarray] = []
    # Onion-skin passes grow roughly one ring per pass
    expected_passes = max(cfg.output_rows, cfg.output_cols) // 2 + 1
    frame_interval = max(1, expected_passes // max(cfg.gif_frames, 1))

    def _capture_frame(number: int, partial: np.ndarray) -> None:
        if number % frame_interval == 0:
            frames.append(from_working_space(partial, cfg.color_space))

    session = SynthesisSession(
        sample, cfg.output_rows, cfg.output_cols, cfg.window_size, cfg.seed,
        on_pass=_capture_frame if gif_path is not None else None,
        **cfg.synthesis_kwargs(),
    )
    texture = from_working_space(session.run(), cfg.color_space)

    save_texture(texture, output, cfg.pixel_upscale)

    if comparison_path is not None:
        make_comparison_grid(rgb, texture, comparison_path, cfg.pixel_upscale)

    if gif_path is not None:
        frames.append(texture)
        save_progress_gif(frames, gif_path, cfg.pixel_upscale)
        logger.info("Growth animation saved: %s (%d frames)", gif_path, len(frames))

    return session


# Defaults come from SynthesisConfig - single source of truth
_DEFAULTS = SynthesisConfig()


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with texture samples",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    rows: int = typer.Option(_DEFAULTS.output_rows, "--rows", "-r", help="Output height"),
    cols: int = typer.Option(_DEFAULTS.output_cols, "--cols", "-c", help="Output width"),
    window: int = typer.Option(
        _DEFAULTS.window_size, "--window", "-w",
        help="Matching window side (even values grow by one)",
    ),
    max_side: int | None = typer.Option(
        _DEFAULTS.max_side, "--max-side", "-m",
        help="Shrink samples so the longest side fits",
    ),
    seed: int | None = typer.Option(
        _DEFAULTS.seed, "--seed", "-s", help="Random seed (None = random)",
    ),
    color_space: str = typer.Option(
        _DEFAULTS.color_space, "--color-space", help="'rgb', 'lab' or 'gray'",
    ),
    max_passes: int | None = typer.Option(
        _DEFAULTS.max_passes, "--max-passes", help="Give up after this many passes",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Pixel upscale factor",
    ),
    gif: bool = typer.Option(
        _DEFAULTS.save_gif, "--gif/--no-gif", help="Save growth GIF",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Synthesize a texture for every sample in INPUT_DIR."""
    _setup_logging(verbose)

    cfg = SynthesisConfig(
        output_rows=rows,
        output_cols=cols,
        window_size=window,
        max_side=max_side,
        seed=seed,
        color_space=color_space,
        max_passes=max_passes,
        pixel_upscale=upscale,
        save_gif=gif,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    samples = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not samples:
        console.print(f"\n[yellow]No samples found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]TEXTURE SYNTH[/bold]\n"
        f"Output: {cfg.output_cols}x{cfg.output_rows}  |  Window: {cfg.window_size}\n"
        f"Colour space: {cfg.color_space}  |  Seed: {cfg.seed}\n"
        f"Samples: {len(samples)}",
        border_style="cyan",
    ))

    failures = 0
    for idx, sample_path in enumerate(samples, 1):
        stem = sample_path.stem
        console.rule(f"[bold cyan][{idx}/{len(samples)}] {sample_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        texture_path = output_dir / f"{stem}_texture.{cfg.output_format}"
        comparison_path = (
            output_dir / f"{stem}_comparison.{cfg.output_format}"
            if cfg.save_comparison else None
        )
        gif_path = output_dir / f"{stem}_growth.gif" if cfg.save_gif else None

        try:
            session = _synthesize_file(
                sample_path, texture_path, cfg, gif_path, comparison_path,
            )
        except (TextureSynthError, ValueError) as exc:
            failures += 1
            console.print(f"  [red]✗[/red] {sample_path.name}: {exc}")
            continue

        elapsed = time.perf_counter() - t_total
        console.print(
            f"  [green]✓[/green] {texture_path.name}  "
            f"[dim]{cfg.output_cols}x{cfg.output_rows}  passes={session.passes}"
            f"  error={session.mean_error:.4f}  time={elapsed:.1f}s[/dim]"
        )

    if failures:
        console.print(Panel.fit(
            f"[bold red]{failures} of {len(samples)} samples failed[/bold red]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- single-sample command ---------------------------------------------

@app.command()
def single(
    sample: Path = typer.Argument(..., help="Path to the texture sample"),
    output: Path = typer.Option(Path("output/texture.png"), "--output", "-o"),
    rows: int = typer.Option(_DEFAULTS.output_rows, "--rows", "-r"),
    cols: int = typer.Option(_DEFAULTS.output_cols, "--cols", "-c"),
    window: int = typer.Option(_DEFAULTS.window_size, "--window", "-w"),
    max_side: int | None = typer.Option(_DEFAULTS.max_side, "--max-side", "-m"),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed", "-s"),
    color_space: str = typer.Option(_DEFAULTS.color_space, "--color-space"),
    max_passes: int | None = typer.Option(_DEFAULTS.max_passes, "--max-passes"),
    upscale: int = typer.Option(1, "--upscale", "-u"),
    gif: bool = typer.Option(_DEFAULTS.save_gif, "--gif/--no-gif"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Synthesize one texture."""
    _setup_logging(verbose)

    output.parent.mkdir(parents=True, exist_ok=True)

    cfg = SynthesisConfig(
        output_rows=rows,
        output_cols=cols,
        window_size=window,
        max_side=max_side,
        seed=seed,
        color_space=color_space,
        max_passes=max_passes,
        pixel_upscale=upscale,
        save_gif=gif,
    )
    gif_path = output.with_suffix(".gif") if gif else None

    try:
        session = _synthesize_file(sample, output, cfg, gif_path)
    except (TextureSynthError, ValueError) as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc

    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{cols}x{rows}  passes={session.passes}"
        f"  error={session.mean_error:.4f}[/dim]"
    )


if __name__ == "__main__":
    app()

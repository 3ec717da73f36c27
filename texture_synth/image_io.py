"""Image loading, saving, comparison grid and growth animation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    """
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_sample(path: str | Path, max_side: int | None = None) -> np.ndarray:
    """Load a texture sample as float RGB.

    Samples larger than *max_side* on their longest side are shrunk;
    smaller ones are never enlarged.

    Returns:
        (H, W, 3) float64 array in [0, 1].
    """
    img = Image.open(path).convert("RGB")
    if max_side is not None and max(img.width, img.height) > max_side:
        w, h = compute_target_size(img.width, img.height, max_side)
        img = img.resize((w, h), Image.LANCZOS)
    return np.asarray(img, dtype=np.float64) / 255.0


def to_image(array: np.ndarray, pixel_upscale: int = 1) -> Image.Image:
    """Float [0, 1] (H, W), (H, W, 1) or (H, W, 3) array -> RGB PIL image."""
    arr = np.asarray(array, dtype=np.float64)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[:, :, 0]
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    img = Image.fromarray(np.round(np.clip(arr, 0.0, 1.0) * 255).astype(np.uint8))
    if pixel_upscale > 1:
        h, w = arr.shape[:2]
        img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
    return img


def save_texture(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save a synthesized texture, optionally nearest-neighbour upscaled."""
    to_image(array, pixel_upscale).save(path)


def make_comparison_grid(
    sample: np.ndarray,
    texture: np.ndarray,
    output_path: str | Path,
    pixel_upscale: int = 4,
) -> None:
    """Create a 2-panel comparison: Sample | Synthesized.

    Both panels keep their true relative size; the sample is drawn at
    the top of its column.
    """
    label_height = 36
    gap = 8

    panels = [to_image(sample, pixel_upscale), to_image(texture, pixel_upscale)]
    sh, sw = sample.shape[:2]
    th, tw = texture.shape[:2]
    labels = [f"Sample {sw}x{sh}", f"Synthesized {tw}x{th}"]

    total_w = sum(p.width for p in panels) + gap * (len(panels) - 1)
    total_h = max(p.height for p in panels) + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    x = 0
    for panel, label in zip(panels, labels, strict=False):
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + max(0, (panel.width - text_w) // 2)
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)
        x += panel.width + gap

    canvas.save(output_path)


def save_progress_gif(
    frames: list[np.ndarray],
    path: str | Path,
    pixel_upscale: int = 4,
    duration: int = 80,
) -> None:
    """Save snapshots of the growing texture as a looping GIF."""
    if not frames:
        msg = "No frames to save"
        raise ValueError(msg)
    images = [to_image(f, pixel_upscale) for f in frames]
    images[0].save(
        Path(path),
        save_all=True,
        append_images=images[1:],
        duration=duration,
        loop=0,
    )

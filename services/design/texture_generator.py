"""
Grain overlays as PNG data URLs (numpy + Pillow).

Textures are rendered as a repeatable tile no larger than 256px per side and
meant to be tiled across the canvas; a full 1600x900 RGBA PNG of noise would
bloat every persisted slide. ``render=False`` returns the empty placeholder.
"""
import base64
import io
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

MAX_TILE_SIZE = 256


@dataclass(frozen=True)
class TextureOutput:
    data_url: str
    type: str
    opacity: float
    blend_mode: str = "overlay"
    tile_size: int = 0


def _tile_dims(width: int, height: int):
    return max(1, min(width, MAX_TILE_SIZE)), max(1, min(height, MAX_TILE_SIZE))


def _encode_png(pixels: np.ndarray) -> str:
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG", optimize=True)
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def _gray_alpha(values: np.ndarray, opacity: float) -> np.ndarray:
    alpha = np.full(values.shape, int(round(min(max(opacity, 0.0), 1.0) * 255)), dtype=np.uint8)
    return np.stack([values, alpha], axis=-1)


def generate_grain_texture(
    width: int = 1600,
    height: int = 900,
    opacity: float = 0.2,
    seed: Optional[int] = None,
    render: bool = True,
) -> TextureOutput:
    """Uniform gray grain."""
    if not render:
        return TextureOutput(data_url="", type="grain", opacity=opacity)

    tile_w, tile_h = _tile_dims(width, height)
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 256, size=(tile_h, tile_w), dtype=np.uint8)
    return TextureOutput(
        data_url=_encode_png(_gray_alpha(values, opacity)),
        type="grain",
        opacity=opacity,
        tile_size=max(tile_w, tile_h),
    )

"""
CSS gradients for slide backgrounds.
"""
from typing import Sequence

from models.pipeline import GradientAsset

DEFAULT_GRADIENT_COLORS = ("#667eea", "#764ba2")
DEFAULT_ANGLE = 135

# Style label (lowercase) -> color pair
STYLE_GRADIENTS = {
    "modern minimal": ("#f5f5f5", "#ffffff"),
    "bold pastel": ("#ffd1dc", "#ffb3d9"),
    "corporate": ("#1e3a8a", "#3b82f6"),
    "warm": ("#fbbf24", "#f59e0b"),
    "cool": ("#06b6d4", "#0891b2"),
    "dark": ("#0a0a0a", "#1a1a1a"),
}


def gradient_css(colors: Sequence[str], gradient_type: str = "linear", angle: int = DEFAULT_ANGLE) -> str:
    stops = ", ".join(colors)
    if gradient_type == "radial":
        return f"radial-gradient(circle, {stops})"
    if gradient_type == "conic":
        return f"conic-gradient(from {angle}deg, {stops})"
    return f"linear-gradient({angle}deg, {stops})"


def generate_gradient(colors: Sequence[str], gradient_type: str = "linear", angle: int = DEFAULT_ANGLE) -> GradientAsset:
    if gradient_type not in ("linear", "radial", "conic"):
        gradient_type = "linear"
    return GradientAsset(
        css=gradient_css(colors, gradient_type, angle),
        type=gradient_type,
        colors=tuple(colors),
    )


def get_themed_gradient(style: str) -> GradientAsset:
    """Gradient for a style label; unknown styles get the purple default."""
    colors = STYLE_GRADIENTS.get((style or "").strip().lower(), DEFAULT_GRADIENT_COLORS)
    return generate_gradient(colors, "linear", DEFAULT_ANGLE)

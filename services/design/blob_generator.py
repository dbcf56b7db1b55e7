"""
Procedural organic blobs rendered as SVG.

Points are placed around a circle with seeded radial jitter and joined with a
closed Catmull-Rom spline converted to cubic Bezier segments, so the same
seed always produces the same markup.
"""
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

DEFAULT_BLOB_COLOR = "#EFB7C6"
DEFAULT_BLOB_SIZE = 400

RANDOM_SEEDS = (
    "calmwave",
    "softflow",
    "organicshape",
    "fluidform",
    "gentlecurve",
    "smoothblob",
    "naturalform",
    "abstractshape",
)


@dataclass(frozen=True)
class BlobOutput:
    svg: str
    seed: str
    complexity: float
    contrast: float
    color: str
    size: int


def _scale(value: float) -> int:
    """Map a 0-1 knob onto the 3-13 integer range."""
    value = min(max(value, 0.0), 1.0)
    return int(math.floor(value * 10)) + 3


def blob_points(seed: str, complexity: float, contrast: float, size: int) -> List[Tuple[float, float]]:
    rng = random.Random(seed)
    count = _scale(complexity)
    # Higher contrast -> deeper radial variation, capped so the shape stays convex-ish
    variation = _scale(contrast) / 13 * 0.6
    center = size / 2
    base_radius = size / 2 * 0.9
    points = []
    for i in range(count):
        angle = 2 * math.pi * i / count
        radius = base_radius * (1 - variation * rng.random())
        points.append((center + radius * math.cos(angle), center + radius * math.sin(angle)))
    return points


def smooth_path(points: List[Tuple[float, float]]) -> str:
    n = len(points)
    if n < 3:
        return ""
    parts = [f"M{points[0][0]:.2f},{points[0][1]:.2f}"]
    for i in range(n):
        p0 = points[(i - 1) % n]
        p1 = points[i]
        p2 = points[(i + 1) % n]
        p3 = points[(i + 2) % n]
        c1 = (p1[0] + (p2[0] - p0[0]) / 6, p1[1] + (p2[1] - p0[1]) / 6)
        c2 = (p2[0] - (p3[0] - p1[0]) / 6, p2[1] - (p3[1] - p1[1]) / 6)
        parts.append(
            f"C{c1[0]:.2f},{c1[1]:.2f} {c2[0]:.2f},{c2[1]:.2f} {p2[0]:.2f},{p2[1]:.2f}"
        )
    parts.append("Z")
    return " ".join(parts)


def create_blob(
    seed: str,
    complexity: float = 0.6,
    contrast: float = 0.5,
    color: str = DEFAULT_BLOB_COLOR,
    size: int = DEFAULT_BLOB_SIZE,
) -> BlobOutput:
    path = smooth_path(blob_points(seed, complexity, contrast, size))
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size} {size}" '
        f'width="{size}" height="{size}"><path d="{path}" fill="{color}"/></svg>'
    )
    return BlobOutput(svg=svg, seed=seed, complexity=complexity, contrast=contrast, color=color, size=size)


def generate_random_blob(
    color: Optional[str] = None,
    rng: Optional[random.Random] = None,
    complexity: Optional[float] = None,
    contrast: Optional[float] = None,
    size: int = DEFAULT_BLOB_SIZE,
) -> BlobOutput:
    """Blob with a fresh seed; shape parameters left unset are drawn at random too."""
    rng = rng or random.Random()
    return create_blob(
        seed=f"{rng.choice(RANDOM_SEEDS)}-{rng.randrange(10 ** 6)}",
        complexity=0.4 + rng.random() * 0.4 if complexity is None else complexity,
        contrast=0.3 + rng.random() * 0.4 if contrast is None else contrast,
        color=color or DEFAULT_BLOB_COLOR,
        size=size,
    )

"""
Layout planning stage: one slide outline -> positioned elements on the
1600x900 canvas.

``plan_layout`` never raises for provider or parsing failures; a response
without a usable ``elements`` list is replaced wholesale by the profile's
fallback plan. A usable plan always carries a headline and at least one
blob or icon placeholder, borrowed from the fallback plan when missing.
"""
from typing import Any, List, Optional

from agents.core.interfaces import JSONGateway
from agents.config import CANVAS_HEIGHT, CANVAS_WIDTH
from agents.generation.exceptions import GenerationError, is_fallback_error
from agents.prompts.generation.profiles import CLASSIC_PROFILE, PromptProfile
from models.pipeline import ElementKind, LayoutElement, LayoutPlan, SlideSegment
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

VALID_ALIGNMENTS = ("left", "center", "right")
DEFAULT_COMPOSITION = "centered"
DECORATIVE_KINDS = (ElementKind.BLOB, ElementKind.ICON_PLACEHOLDER)


def fallback_layout(profile: PromptProfile = CLASSIC_PROFILE) -> LayoutPlan:
    """Fixed centered plan used whenever the model's plan is unusable."""
    return profile.fallback_layout


def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(round(value))
    if isinstance(value, str):
        try:
            return int(round(float(value.strip().rstrip("px"))))
        except ValueError:
            return None
    return None


def coerce_element(raw: Any) -> Optional[LayoutElement]:
    """Turn one model element into a LayoutElement, or None if unusable."""
    if not isinstance(raw, dict):
        return None
    try:
        kind = ElementKind(str(raw.get("type", "")).strip().lower())
    except ValueError:
        return None

    x = _coerce_int(raw.get("x"))
    y = _coerce_int(raw.get("y"))
    if x is None or y is None:
        return None

    width = _coerce_int(raw.get("width"))
    height = _coerce_int(raw.get("height"))
    align = raw.get("align")
    if align not in VALID_ALIGNMENTS:
        align = None

    return LayoutElement(
        type=kind,
        x=x,
        y=y,
        width=width if width and width > 0 else None,
        height=height if height and height > 0 else None,
        align=align,
    )


def _clamp_span(start: int, size: Optional[int], limit: int):
    if size is not None and size > limit:
        size = limit
    span = size or 0
    start = min(max(start, 0), limit - span)
    return start, size


def _bleed_span(start: int, size: Optional[int], limit: int):
    # At most half of the box may hang off either edge
    half = (size or 0) // 2
    return min(max(start, -half), limit - half), size


def _snap(value: int, grid: Optional[int]) -> int:
    if not grid:
        return value
    return int(round(value / grid)) * grid


def validate_layout(
    plan: LayoutPlan,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    grid: Optional[int] = None,
) -> LayoutPlan:
    """
    Clamp every element box into the canvas, snapping to ``grid`` first.

    Blobs are decorative and may bleed off the edge by up to half their
    size. Overlap between elements is reported, not corrected.
    """
    elements = []
    for element in plan.elements:
        span = _bleed_span if element.type == ElementKind.BLOB else _clamp_span
        x, w = span(_snap(element.x, grid), element.width, width)
        y, h = span(_snap(element.y, grid), element.height, height)
        if (x, y, w, h) != (element.x, element.y, element.width, element.height):
            logger.warning(
                f"[LAYOUT] Adjusted {element.type.value} from "
                f"({element.x},{element.y},{element.width}x{element.height}) to ({x},{y},{w}x{h})"
            )
            element = element.model_copy(update={"x": x, "y": y, "width": w, "height": h})
        elements.append(element)

    validated = plan.model_copy(update={"elements": tuple(elements)})
    _report_overlaps(validated)
    return validated


def _box(element: LayoutElement):
    return element.x, element.y, element.x + (element.width or 0), element.y + (element.height or 0)


def _report_overlaps(plan: LayoutPlan) -> None:
    image = plan.first(ElementKind.IMAGE_PLACEHOLDER)
    if image is None or plan.composition == "hero_background":
        return
    ix1, iy1, ix2, iy2 = _box(image)
    for element in plan.elements:
        if element.type not in (ElementKind.HEADLINE, ElementKind.BODY):
            continue
        x1, y1, x2, y2 = _box(element)
        if x1 < ix2 and ix1 < x2 and y1 < iy2 and iy1 < y2:
            logger.warning(f"[LAYOUT] {element.type.value} overlaps image_placeholder ({plan.composition})")


class LayoutPlanner:
    """Ask the model where to place each element on the slide."""

    def __init__(self, gateway: JSONGateway, profile: PromptProfile = CLASSIC_PROFILE, validate: bool = True):
        self.gateway = gateway
        self.profile = profile
        self.validate = validate

    async def plan_layout(self, segment: SlideSegment, style: str) -> LayoutPlan:
        try:
            response = await self.gateway.call(
                self.profile.layout_system(style),
                self.profile.layout_user(segment),
            )
        except GenerationError as e:
            if not is_fallback_error(e):
                raise
            logger.warning(f"[LAYOUT] Slide {segment.slide_index}: gateway failed, using fallback layout: {e.message}")
            return fallback_layout(self.profile)

        raw_elements = response.get("elements") if isinstance(response, dict) else None
        if not isinstance(raw_elements, list):
            logger.warning(f"[LAYOUT] Slide {segment.slide_index}: invalid layout response, using fallback")
            return fallback_layout(self.profile)

        elements: List[LayoutElement] = [e for e in (coerce_element(raw) for raw in raw_elements) if e is not None]
        if not elements:
            logger.warning(f"[LAYOUT] Slide {segment.slide_index}: no usable elements, using fallback")
            return fallback_layout(self.profile)

        if not any(e.type == ElementKind.HEADLINE for e in elements):
            elements.insert(0, self.profile.fallback_layout.first(ElementKind.HEADLINE))

        if not any(e.type in DECORATIVE_KINDS for e in elements):
            logger.info(f"[LAYOUT] Slide {segment.slide_index}: no blob or icon placeholder, adding fallback blob")
            elements.append(self.profile.fallback_layout.first(ElementKind.BLOB))

        composition = response.get("composition")
        if composition not in self.profile.compositions:
            logger.info(f"[LAYOUT] Slide {segment.slide_index}: unknown composition {composition!r}, using centered")
            composition = DEFAULT_COMPOSITION

        plan = LayoutPlan(composition=composition, elements=tuple(elements))
        if self.validate:
            plan = validate_layout(plan, grid=self.profile.grid)

        logger.info(f"[LAYOUT] Slide {segment.slide_index}: {plan.composition} with {len(plan.elements)} elements")
        return plan

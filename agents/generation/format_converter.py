"""
Convert assembled slides into the editor's flat element document.

Pure and total. Element ids depend only on slide index and element
position; the slide id alone carries a random suffix.
"""
import uuid
from typing import Iterable, List, Optional

from models.editor import (
    EditorSlide,
    ElementProps,
    ElementStyle,
    GradientBackground,
    ImageElement,
    ShapeElement,
    TextElement,
)
from models.pipeline import AssembledSlide, TextBox

# Canonical text boxes: (x, y, width, height)
HEADLINE_BOX = (100, 200, 1400, 150)
SUBTEXT_BOX = (100, 360, 1400, 80)
BODY_BOX = (150, 460, 1300, 300)
DEFAULT_IMAGE_BOX = (900, 200, 600, 500)

BLOB_OPACITY = 0.3

Z_BLOB = 0
Z_IMAGE = 5
Z_ICON = 8
Z_TEXT = 10

TEXT_STYLES = {
    "headline": {"fontSize": 72, "fontWeight": 700, "lineHeight": 1.1},
    "subtext": {"fontSize": 36, "fontWeight": 500, "lineHeight": 1.2},
    "body": {"fontSize": 28, "fontWeight": 400, "lineHeight": 1.5},
}


def icon_marker(name: str, variant: str) -> str:
    return f"icon:{name}:{variant}"


def _planned_box(planned: Optional[TextBox], canonical) -> tuple:
    if planned is None:
        return canonical
    _, _, width, height = canonical
    return planned.x, planned.y, planned.width or width, planned.height or height


def _text_boxes(slide: AssembledSlide, honor_layout: bool):
    if not honor_layout:
        return HEADLINE_BOX, SUBTEXT_BOX, BODY_BOX

    headline = _planned_box(slide.text_box("headline"), HEADLINE_BOX)
    body = _planned_box(slide.text_box("body"), BODY_BOX)
    if slide.text_box("headline") is None:
        subtext = SUBTEXT_BOX
    else:
        # Subtext has no planned box; it hangs under the planned headline
        hx, hy, hw, hh = headline
        subtext = (hx, hy + hh + 10, hw, SUBTEXT_BOX[3])
    return headline, subtext, body


def _text_align(slide: AssembledSlide, role: str, honor_layout: bool) -> str:
    kind = "body" if role == "body" else "headline"
    planned = slide.text_box(kind) if honor_layout else None
    if planned is not None and planned.align:
        return planned.align
    return "left"


def _props(box, z_index: int, opacity: float = 1.0) -> ElementProps:
    x, y, width, height = box
    return ElementProps(x=x, y=y, width=width, height=height, opacity=opacity, zIndex=z_index)


def to_editor_format(slide: AssembledSlide, honor_layout: bool = True) -> EditorSlide:
    """
    Convert one assembled slide.

    Args:
        slide: Pipeline output
        honor_layout: Place headline/body at their planned boxes when the
            layout supplied them; otherwise use the canonical positions

    Returns:
        EditorSlide with blobs, image, icons and text (back to front)
    """
    index = slide.meta.slide_index
    elements = []

    for pos, shape in enumerate(slide.shapes):
        elements.append(ShapeElement(
            id=f"blob-{index}-{pos}",
            shapeKind="blob",
            props=_props((shape.x, shape.y, shape.width, shape.height), Z_BLOB, BLOB_OPACITY),
            style=ElementStyle(fill=shape.color),
            content=shape.svg,
        ))

    if slide.image is not None:
        image = slide.image
        default_x, default_y, default_w, default_h = DEFAULT_IMAGE_BOX
        box = (
            image.x if image.x is not None else default_x,
            image.y if image.y is not None else default_y,
            image.width or default_w,
            image.height or default_h,
        )
        elements.append(ImageElement(
            id=f"image-{index}-0",
            props=_props(box, Z_IMAGE),
            content=image.url,
            fit=image.fit,
            photographer=image.photographer or None,
        ))

    for pos, icon in enumerate(slide.icons):
        elements.append(ShapeElement(
            id=f"icon-{index}-{pos}",
            shapeKind="icon",
            props=_props((icon.position.x, icon.position.y, icon.size, icon.size), Z_ICON),
            style=ElementStyle(fill=icon.color),
            content=icon_marker(icon.name, icon.variant),
        ))

    headline_box, subtext_box, body_box = _text_boxes(slide, honor_layout)
    for role, box, content in (
        ("headline", headline_box, slide.text.headline),
        ("subtext", subtext_box, slide.text.subtext),
        ("body", body_box, slide.text.body),
    ):
        elements.append(TextElement(
            id=f"{role}-{index}",
            role=role,
            props=_props(box, Z_TEXT),
            style=ElementStyle(
                fontFamily=slide.text.font,
                fill=slide.text.color,
                align=_text_align(slide, role, honor_layout),
                **TEXT_STYLES[role],
            ),
            content=content,
        ))

    gradient = slide.background.gradient
    texture = slide.background.texture
    return EditorSlide(
        id=f"slide-{index}-{uuid.uuid4().hex}",
        background=GradientBackground(
            angle=gradient.angle,
            colors=[gradient.from_color, gradient.to],
            texture={"type": texture.type, "opacity": texture.opacity, "dataUrl": texture.data_url},
        ),
        elements=elements,
        meta={
            "title": slide.text.headline,
            "slide_index": index,
            "composition": slide.meta.composition,
            "score": slide.meta.score,
            "keywords": list(slide.meta.keywords),
        },
    )


def to_editor_deck(slides: Iterable[AssembledSlide], honor_layout: bool = True) -> List[EditorSlide]:
    return [to_editor_format(slide, honor_layout) for slide in slides]

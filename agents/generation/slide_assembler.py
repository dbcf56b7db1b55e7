"""
Assembly stage: combine segment, layout and assets into the final slide.

``assemble_slide`` is pure and total: no clock, no randomness, no I/O.
"""
from typing import Optional

from agents.config import DEFAULT_QUALITY_SCORE
from agents.generation.asset_generator import BLOB_COMPLEXITY, BLOB_CONTRAST, blob_seed
from models.pipeline import (
    AssembledSlide,
    BackgroundGradient,
    BackgroundTexture,
    ElementKind,
    LayoutPlan,
    RefinementResult,
    SlideAssets,
    SlideBackground,
    SlideImage,
    SlideMeta,
    SlideSegment,
    SlideShape,
    SlideText,
    TextBox,
)

TEXT_COLOR = "#111111"
TEXT_FONT = "DM Sans"
GRADIENT_ANGLE = 135

_TEXT_KINDS = (ElementKind.HEADLINE, ElementKind.BODY)


def _image(assets: SlideAssets, layout: LayoutPlan) -> Optional[SlideImage]:
    if assets.image is None:
        return None
    placeholder = layout.first(ElementKind.IMAGE_PLACEHOLDER)
    return SlideImage(
        url=assets.image.src.large or assets.image.url,
        photographer=assets.image.photographer,
        fit="cover",
        x=placeholder.x if placeholder else None,
        y=placeholder.y if placeholder else None,
        width=placeholder.width if placeholder else None,
        height=placeholder.height if placeholder else None,
    )


def _text_boxes(layout: LayoutPlan):
    boxes = []
    for kind in _TEXT_KINDS:
        element = layout.first(kind)
        if element is not None:
            boxes.append((kind.value, TextBox(
                x=element.x,
                y=element.y,
                width=element.width,
                height=element.height,
                align=element.align,
            )))
    return tuple(boxes)


def assemble_slide(
    segment: SlideSegment,
    layout: LayoutPlan,
    assets: SlideAssets,
    refinement: Optional[RefinementResult] = None,
) -> AssembledSlide:
    colors = assets.gradient.colors
    gradient = BackgroundGradient(
        from_color=colors[0],
        to=colors[1] if len(colors) > 1 else colors[0],
        angle=GRADIENT_ANGLE,
        type=assets.gradient.type,
    )
    texture = BackgroundTexture(type="grain", opacity=assets.texture.opacity, data_url=assets.texture.data_url)

    shapes = tuple(
        SlideShape(
            type="blob",
            svg=blob.svg,
            x=blob.x,
            y=blob.y,
            width=blob.width,
            height=blob.height,
            color=blob.color,
            seed=blob_seed(segment.slide_index),
            complexity=BLOB_COMPLEXITY,
            contrast=BLOB_CONTRAST,
        )
        for blob in assets.blobs
    )

    return AssembledSlide(
        background=SlideBackground(gradient=gradient, texture=texture),
        shapes=shapes,
        icons=assets.icons,
        image=_image(assets, layout),
        text=SlideText(
            headline=segment.title,
            subtext=segment.subtitle,
            body=segment.body_text,
            color=TEXT_COLOR,
            font=TEXT_FONT,
        ),
        meta=SlideMeta(
            slide_index=segment.slide_index,
            composition=layout.composition,
            score=refinement.final_score if refinement else DEFAULT_QUALITY_SCORE,
            keywords=segment.keywords,
        ),
        text_boxes=_text_boxes(layout),
    )

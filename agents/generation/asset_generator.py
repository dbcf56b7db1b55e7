"""
Asset generation stage: gradient, blobs, icons, texture and one stock image
per slide.

Everything except the image search is deterministic for a given slide. An
image-search failure becomes ``image=None``; any other failure propagates.
"""
import asyncio
from typing import List, Optional, Sequence

import aiohttp

from agents.config import CANVAS_HEIGHT, CANVAS_WIDTH, ENABLE_TEXTURE_RENDERING, GRAIN_TEXTURE_OPACITY
from agents.core.interfaces import ImageSearch
from agents.generation.exceptions import GenerationError
from config.rate_limits import PEXELS_RESULTS_PER_SEARCH
from models.pipeline import (
    BlobAsset,
    ElementKind,
    GradientAsset,
    IconConfig,
    LayoutPlan,
    Position,
    SlideAssets,
    SlideSegment,
    StockImage,
    TextureAsset,
)
from services.design.blob_generator import DEFAULT_BLOB_SIZE, create_blob
from services.design.gradient_generator import get_themed_gradient
from services.design.icon_mapper import get_icons_for_keywords
from services.design.texture_generator import generate_grain_texture
from services.pexels_service import select_best_image
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

BLOB_COMPLEXITY = 0.6
BLOB_CONTRAST = 0.5
ICON_SIZE = 48
FALLBACK_IMAGE_QUERY = "abstract"


def blob_seed(slide_index: int) -> str:
    return f"slide-{slide_index}"


class AssetGenerator:
    """Derive all visual assets for one slide."""

    def __init__(
        self,
        image_search: Optional[ImageSearch],
        render_texture: bool = ENABLE_TEXTURE_RENDERING,
        texture_opacity: float = GRAIN_TEXTURE_OPACITY,
    ):
        self.image_search = image_search
        self.render_texture = render_texture
        self.texture_opacity = texture_opacity

    def build_blobs(self, layout: LayoutPlan, segment: SlideSegment, gradient: GradientAsset) -> List[BlobAsset]:
        blobs = []
        for element in layout.of_kind(ElementKind.BLOB):
            blob = create_blob(
                seed=blob_seed(segment.slide_index),
                complexity=BLOB_COMPLEXITY,
                contrast=BLOB_CONTRAST,
                color=gradient.primary,
                size=DEFAULT_BLOB_SIZE,
            )
            blobs.append(BlobAsset(
                svg=blob.svg,
                x=element.x,
                y=element.y,
                width=element.width or DEFAULT_BLOB_SIZE,
                height=element.height or DEFAULT_BLOB_SIZE,
                color=gradient.primary,
            ))
        return blobs

    def build_icons(self, layout: LayoutPlan, segment: SlideSegment, gradient: GradientAsset) -> List[IconConfig]:
        placeholders = layout.of_kind(ElementKind.ICON_PLACEHOLDER)
        # Placeholders beyond the keyword list get the default icon
        keywords = list(segment.keywords[:len(placeholders)])
        keywords += ["default"] * (len(placeholders) - len(keywords))
        return [
            IconConfig(
                name=name,
                variant="outline",
                color=gradient.primary,
                size=ICON_SIZE,
                position=Position(x=element.x, y=element.y),
            )
            for element, name in zip(placeholders, get_icons_for_keywords(keywords))
        ]

    def build_texture(self, segment: SlideSegment) -> TextureAsset:
        texture = generate_grain_texture(
            CANVAS_WIDTH,
            CANVAS_HEIGHT,
            self.texture_opacity,
            seed=segment.slide_index,
            render=self.render_texture,
        )
        return TextureAsset(data_url=texture.data_url, opacity=texture.opacity)

    async def _search(self, query: str) -> List[StockImage]:
        try:
            return await self.image_search.search_images(query, "landscape", PEXELS_RESULTS_PER_SEARCH)
        except (GenerationError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"[ASSETS] Image search failed for {query!r}: {e}")
            return []

    async def select_image(self, keywords: Sequence[str], tone: str) -> Optional[StockImage]:
        """Best image for the first keyword, then the second; None if both come back empty."""
        if self.image_search is None:
            return None

        primary = keywords[0] if keywords else FALLBACK_IMAGE_QUERY
        images = await self._search(primary)
        if images:
            return select_best_image(images, tone)

        if len(keywords) > 1 and keywords[1]:
            images = await self._search(keywords[1])
            if images:
                return select_best_image(images, tone)

        return None

    async def generate_assets(
        self,
        layout: LayoutPlan,
        segment: SlideSegment,
        style: str,
        tone: str,
    ) -> SlideAssets:
        gradient = get_themed_gradient(style)
        blobs = self.build_blobs(layout, segment, gradient)
        icons = self.build_icons(layout, segment, gradient)
        texture = self.build_texture(segment)
        image = await self.select_image(segment.keywords, tone)

        logger.info(
            f"[ASSETS] Slide {segment.slide_index}: {len(blobs)} blobs, {len(icons)} icons, "
            f"image={'yes' if image else 'no'}"
        )
        return SlideAssets(
            blobs=tuple(blobs),
            gradient=gradient,
            icons=tuple(icons),
            texture=texture,
            image=image,
        )

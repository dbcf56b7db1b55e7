import asyncio
import os
from typing import Any, Callable, Dict, List, Optional, Sequence

import aiohttp
from dotenv import load_dotenv

from agents.config import IMAGE_SEARCH_TIMEOUT
from agents.core.interfaces import ImageSearch
from agents.generation.exceptions import MissingConfigError, ProviderError, ProviderTimeoutError
from config.rate_limits import PEXELS_RESULTS_PER_SEARCH
from models.pipeline import StockImage, StockImageSrc
from setup_logging_optimized import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

# Tone label -> words looked for in image alt text
TONE_KEYWORDS = {
    "warm": ("warm", "orange", "yellow", "red"),
    "cool": ("blue", "cyan", "purple"),
    "minimal": ("white", "gray", "simple"),
    "vibrant": ("colorful", "bright", "vivid"),
}


def to_stock_image(photo: Dict[str, Any]) -> StockImage:
    """Normalize one Pexels photo record."""
    src = photo.get("src") or {}
    return StockImage(
        id=photo.get("id") or 0,
        url=photo.get("url") or "",
        photographer=photo.get("photographer") or "",
        photographer_url=photo.get("photographer_url") or "",
        alt=photo.get("alt") or "",
        avg_color=photo.get("avg_color"),
        width=photo.get("width"),
        height=photo.get("height"),
        src=StockImageSrc(**{key: value for key, value in src.items() if key in StockImageSrc.model_fields and value}),
    )


def select_best_image(images: Sequence[StockImage], tone: str) -> Optional[StockImage]:
    """
    Pick the image whose alt text best matches the tone.

    Each tone keyword found in the alt text scores one point; ties keep the
    provider's order. Unknown tones score everything zero (first image wins).
    """
    if not images:
        return None
    keywords = TONE_KEYWORDS.get((tone or "").strip().lower(), ())

    def score(image: StockImage) -> int:
        alt = image.alt.lower()
        return sum(1 for keyword in keywords if keyword in alt)

    # max() returns the first maximal element, preserving provider order on ties
    return max(images, key=score)


class PexelsService(ImageSearch):
    """Pexels stock photo search."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = IMAGE_SEARCH_TIMEOUT,
        session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("PEXELS_API_KEY")
        self.timeout = timeout
        self.base_url = "https://api.pexels.com/v1"
        self.session_factory = session_factory or aiohttp.ClientSession

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": self.api_key or ""}

    async def fetch_photos(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Raw Pexels request returning the ``photos`` array.

        Raises:
            MissingConfigError: PEXELS_API_KEY is not set
            ProviderError: non-200 status, timeout or transport failure
        """
        if not self.api_key:
            raise MissingConfigError("PEXELS_API_KEY")

        timeout = aiohttp.ClientTimeout(total=self.timeout, connect=10, sock_read=self.timeout)
        try:
            async with self.session_factory(timeout=timeout) as session:
                async with session.get(f"{self.base_url}/{path}", headers=self.headers, params=params) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise ProviderError(
                            f"Pexels API error: {response.status}",
                            status_code=response.status,
                            body=body,
                            provider="pexels",
                        )
                    data = await response.json()
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(f"Pexels request timed out after {self.timeout}s", provider="pexels", cause=e)
        except aiohttp.ClientError as e:
            raise ProviderError("Pexels connection failed", provider="pexels", cause=e)

        return data.get("photos") or []

    async def search_images(
        self,
        query: str,
        orientation: str = "landscape",
        per_page: int = PEXELS_RESULTS_PER_SEARCH,
    ) -> List[StockImage]:
        """Search photos; every failure degrades to an empty list."""
        if not query:
            return []
        if not self.api_key:
            logger.warning("[PEXELS] PEXELS_API_KEY not configured, returning empty results")
            return []

        params = {"query": query, "orientation": orientation, "per_page": min(per_page, 80)}
        try:
            photos = await self.fetch_photos("search", params)
        except ProviderError as e:
            logger.warning(f"[PEXELS] Search failed for {query!r}, treating as no results: {e.message}")
            return []

        logger.info(f"[PEXELS] {len(photos)} results for {query!r}")
        return [to_stock_image(photo) for photo in photos]

    async def search_curated(self, per_page: int = PEXELS_RESULTS_PER_SEARCH) -> List[StockImage]:
        """Editor-picked photos, used when keyword search comes back empty."""
        if not self.api_key:
            logger.warning("[PEXELS] PEXELS_API_KEY not configured, returning empty results")
            return []
        try:
            photos = await self.fetch_photos("curated", {"per_page": min(per_page, 80)})
        except ProviderError as e:
            logger.warning(f"[PEXELS] Curated request failed: {e.message}")
            return []
        return [to_stock_image(photo) for photo in photos]

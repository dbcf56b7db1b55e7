"""
Interfaces the pipeline depends on.

Stages receive these explicitly so tests can swap in fakes.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from models.pipeline import StockImage


class ImageSearch(ABC):
    """Keyword image search"""

    @abstractmethod
    async def search_images(
        self,
        query: str,
        orientation: str = "landscape",
        per_page: int = 15,
    ) -> List[StockImage]:
        """Return candidate images; an empty list means nothing usable was found."""
        pass


class JSONGateway(ABC):
    """Prompt pair in, parsed JSON out"""

    @abstractmethod
    async def call(self, system_prompt: str, user_prompt: str) -> Any:
        pass

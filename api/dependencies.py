"""FastAPI dependencies shared by the route modules."""
from functools import lru_cache

from agents.generation.deck_orchestrator import SlidePipeline
from services.pexels_service import PexelsService
from services.presentation_store import PresentationStore, get_presentation_store


@lru_cache(maxsize=1)
def get_slide_pipeline() -> SlidePipeline:
    return SlidePipeline.from_config()


def get_image_search() -> PexelsService:
    return PexelsService()


def get_store() -> PresentationStore:
    return get_presentation_store()

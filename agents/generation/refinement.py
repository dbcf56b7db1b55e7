"""
Optional critique pass: ask the model to score an assembled slide.
"""
from agents.config import DEFAULT_QUALITY_SCORE
from agents.core.interfaces import JSONGateway
from agents.generation.exceptions import GenerationError, is_fallback_error
from agents.prompts.generation.refinement_prompts import get_refinement_system_prompt, get_refinement_user_prompt
from models.pipeline import AssembledSlide, RefinementResult
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


def default_refinement() -> RefinementResult:
    return RefinementResult(improvements=(), final_score=DEFAULT_QUALITY_SCORE)


class SlideCritic:
    def __init__(self, gateway: JSONGateway):
        self.gateway = gateway

    async def refine(self, slide: AssembledSlide) -> RefinementResult:
        try:
            response = await self.gateway.call(
                get_refinement_system_prompt(),
                get_refinement_user_prompt(slide),
            )
        except GenerationError as e:
            if not is_fallback_error(e):
                raise
            logger.warning(f"[REFINE] Slide {slide.meta.slide_index}: critique unavailable: {e.message}")
            return default_refinement()

        if not isinstance(response, dict):
            return default_refinement()

        score = response.get("final_score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return default_refinement()

        improvements = response.get("improvements")
        if not isinstance(improvements, list):
            improvements = []

        return RefinementResult(
            improvements=tuple(str(item) for item in improvements if item),
            final_score=int(round(min(max(score, 0), 100))),
        )

"""
Segmentation stage: free text -> exactly N slide outlines.

``segment`` never raises for provider or parsing failures; it degrades to
``fallback_segments``, which splits the input by line.
"""
from typing import Any, List, Sequence

from agents.core.interfaces import JSONGateway
from agents.generation.exceptions import GenerationError, is_fallback_error
from agents.prompts.generation.profiles import CLASSIC_PROFILE, PromptProfile
from models.pipeline import DEFAULT_KEYWORDS, SlideSegment, UserInput
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

FALLBACK_BODY_CHARS = 100


def fallback_segments(user_input: UserInput, keywords: Sequence[str] = DEFAULT_KEYWORDS) -> List[SlideSegment]:
    """Deterministic segmentation: one non-blank input line per slide."""
    lines = [line.strip() for line in user_input.prompt.split("\n") if line.strip()]
    segments = []
    for i in range(user_input.num_slides):
        line = lines[i] if i < len(lines) else ""
        segments.append(SlideSegment(
            slide_index=i + 1,
            title=line or f"Slide {i + 1}",
            subtitle="",
            body_text=line or user_input.prompt[:FALLBACK_BODY_CHARS],
            keywords=tuple(keywords),
        ))
    return segments


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_slide(raw: Any, position: int, default_keywords: Sequence[str] = DEFAULT_KEYWORDS) -> SlideSegment:
    """Fill the gaps in one model-produced slide."""
    data = raw if isinstance(raw, dict) else {}

    index = data.get("slide_index")
    if not isinstance(index, int) or isinstance(index, bool) or index < 1:
        index = position + 1

    raw_keywords = data.get("keywords")
    if isinstance(raw_keywords, list):
        keywords = tuple(k for k in (_text(item) for item in raw_keywords) if k)
    else:
        keywords = tuple(default_keywords)

    return SlideSegment(
        slide_index=index,
        title=_text(data.get("title")) or f"Slide {index}",
        subtitle=_text(data.get("subtitle")),
        body_text=_text(data.get("body_text")),
        keywords=keywords,
    )


class TextSegmenter:
    """Split user text into slide segments through the LLM gateway."""

    def __init__(self, gateway: JSONGateway, profile: PromptProfile = CLASSIC_PROFILE):
        self.gateway = gateway
        self.profile = profile

    async def segment(self, user_input: UserInput) -> List[SlideSegment]:
        n = user_input.num_slides
        mode = "verbatim" if user_input.use_word_for_word else "transform"
        logger.info(f"[SEGMENT] Splitting input into {n} slides ({mode}, profile={self.profile.name})")

        try:
            response = await self.gateway.call(
                self.profile.segmentation_system(n),
                self.profile.segmentation_user(user_input),
            )
        except GenerationError as e:
            if not is_fallback_error(e):
                raise
            logger.warning(f"[SEGMENT] Gateway failed, using line-split fallback: {e.message}")
            return fallback_segments(user_input, self.profile.fallback_keywords)

        slides = response.get("slides") if isinstance(response, dict) else None
        if not isinstance(slides, list):
            logger.warning("[SEGMENT] Invalid segmentation response, using line-split fallback")
            return fallback_segments(user_input, self.profile.fallback_keywords)

        segments = [
            normalize_slide(raw, position, self.profile.fallback_keywords)
            for position, raw in enumerate(slides)
        ]
        return self._enforce_count(segments, user_input)

    def _enforce_count(self, segments: List[SlideSegment], user_input: UserInput) -> List[SlideSegment]:
        """Exactly N segments, indexed 1..N in the order the model returned them."""
        n = user_input.num_slides
        if len(segments) > n:
            logger.warning(f"[SEGMENT] Model returned {len(segments)} slides, keeping the first {n}")
            segments = segments[:n]
        elif len(segments) < n:
            logger.warning(f"[SEGMENT] Model returned {len(segments)} slides, padding to {n} from fallback")
            padding = fallback_segments(user_input, self.profile.fallback_keywords)[len(segments):]
            segments = segments + padding

        return [
            segment if segment.slide_index == i + 1 else segment.model_copy(update={"slide_index": i + 1})
            for i, segment in enumerate(segments)
        ]

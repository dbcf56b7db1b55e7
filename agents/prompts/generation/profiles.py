"""
Prompt profiles: versioned bundles of prompt templates and fallback tables.

The pipeline runs unchanged across profiles; switching between the classic
prompts and the design-trends prompts is configuration.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from agents.generation.exceptions import ConfigurationError
from agents.prompts.generation.layout_prompts import (
    CLASSIC_COMPOSITIONS,
    DESIGN_TRENDS_COMPOSITIONS,
    get_design_trends_layout_system_prompt,
    get_layout_system_prompt,
    get_layout_user_prompt,
)
from agents.prompts.generation.segmentation_prompts import (
    get_design_trends_segmentation_system_prompt,
    get_segmentation_system_prompt,
    get_segmentation_user_prompt,
)
from models.pipeline import DEFAULT_KEYWORDS, ElementKind, LayoutElement, LayoutPlan, SlideSegment, UserInput

FALLBACK_LAYOUT = LayoutPlan(
    composition="centered",
    elements=(
        LayoutElement(type=ElementKind.HEADLINE, x=100, y=250, width=1400, align="center"),
        LayoutElement(type=ElementKind.BODY, x=200, y=450, width=1200, align="center"),
        LayoutElement(type=ElementKind.BLOB, x=50, y=650, width=300, height=250),
        LayoutElement(type=ElementKind.ICON_PLACEHOLDER, x=1350, y=700),
    ),
)


@dataclass(frozen=True)
class PromptProfile:
    name: str
    version: str
    segmentation_system: Callable[[int], str]
    segmentation_user: Callable[[UserInput], str]
    layout_system: Callable[[str], str]
    layout_user: Callable[[SlideSegment], str]
    compositions: Tuple[str, ...]
    fallback_layout: LayoutPlan = FALLBACK_LAYOUT
    fallback_keywords: Tuple[str, ...] = DEFAULT_KEYWORDS
    # Snap validated coordinates to this grid (px); None leaves them as planned
    grid: Optional[int] = None


CLASSIC_PROFILE = PromptProfile(
    name="classic",
    version="1.0",
    segmentation_system=get_segmentation_system_prompt,
    segmentation_user=get_segmentation_user_prompt,
    layout_system=get_layout_system_prompt,
    layout_user=get_layout_user_prompt,
    compositions=CLASSIC_COMPOSITIONS,
)

DESIGN_TRENDS_PROFILE = PromptProfile(
    name="design_trends",
    version="2.0",
    segmentation_system=get_design_trends_segmentation_system_prompt,
    segmentation_user=get_segmentation_user_prompt,
    layout_system=get_design_trends_layout_system_prompt,
    layout_user=get_layout_user_prompt,
    compositions=DESIGN_TRENDS_COMPOSITIONS,
    grid=50,
)

PROMPT_PROFILES: Dict[str, PromptProfile] = {
    CLASSIC_PROFILE.name: CLASSIC_PROFILE,
    DESIGN_TRENDS_PROFILE.name: DESIGN_TRENDS_PROFILE,
}


def get_prompt_profile(name: Optional[str] = None) -> PromptProfile:
    """Resolve a profile by name; defaults to PROMPT_PROFILE from config."""
    if name is None:
        from agents.config import PROMPT_PROFILE
        name = PROMPT_PROFILE
    try:
        return PROMPT_PROFILES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown prompt profile: {name}",
            context={"available": sorted(PROMPT_PROFILES)},
        )

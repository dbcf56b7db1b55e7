from models.pipeline import AssembledSlide


def get_refinement_system_prompt() -> str:
    return """You are a design critic. Evaluate this slide design and suggest improvements.

Consider:
- Visual hierarchy (is the headline prominent?)
- Color contrast (is text readable?)
- Spacing (does it breathe?)
- Balance (is weight distributed well?)
- Harmony (do colors work together?)

Return JSON:
{
  "improvements": ["suggestion 1", "suggestion 2"],
  "final_score": 85
}

Score 0-100 where 90+ is excellent, 70-89 is good, below 70 needs work."""


def get_refinement_user_prompt(slide: AssembledSlide) -> str:
    return (
        "Evaluate this slide:\n"
        f"Title: {slide.text.headline}\n"
        f"Composition: {slide.meta.composition}\n"
        f"Background: {slide.background.gradient.type} gradient\n"
        f"Elements: {len(slide.shapes)} shapes, {len(slide.icons)} icons\n"
        f"Has image: {'yes' if slide.image else 'no'}"
    )

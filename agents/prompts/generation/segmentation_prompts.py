"""
Segmentation prompts: split free text into N structured slide outlines.
"""
from models.pipeline import UserInput


def get_segmentation_system_prompt(num_slides: int) -> str:
    return f"""You are a presentation designer. Split the user's content into {num_slides} logical slides with clear structure.

CRITICAL: Return ONLY valid JSON with properly escaped quotes. Do not include any markdown formatting or code fences.

Expected format:
{{
  "slides": [
    {{
      "slide_index": 1,
      "title": "Main Title",
      "subtitle": "Optional subtitle",
      "body_text": "Key points or description",
      "keywords": ["keyword1", "keyword2", "keyword3"]
    }}
  ]
}}

Rules:
- Return exactly {num_slides} slides
- Extract 2-4 keywords per slide for visual search
- Keep titles short (3-7 words)
- Body text should be concise (15-40 words)
- Escape any quotes in text with backslash: \\"
- Do not use line breaks within strings"""


def get_segmentation_user_prompt(user_input: UserInput) -> str:
    if user_input.use_word_for_word:
        return f"Use this text word-for-word, split into {user_input.num_slides} slides:\n\n{user_input.prompt}"
    return (
        f"Transform this into {user_input.num_slides} professional slides:\n\n{user_input.prompt}"
        f"\n\nTone: {user_input.tone}\nStyle: {user_input.style}"
    )


def get_design_trends_segmentation_system_prompt(num_slides: int) -> str:
    """Same contract, tuned for image-led layouts (keywords must be photographable)."""
    return get_segmentation_system_prompt(num_slides) + """
- Prefer concrete, photographable keywords (objects, places, scenes) over abstract concepts
- Put the most visual keyword first; it drives the background image search
- Subtitles are at most 10 words; leave empty rather than repeating the title"""

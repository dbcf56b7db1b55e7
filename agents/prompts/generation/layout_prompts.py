"""
Layout planning prompts for the fixed 1600x900 canvas.

The classic prompt asks for one of three compositions. The design-trends
prompt adds named templates, non-overlap rules, corner-only blobs and grid
alignment; both share the same response contract.
"""
from models.pipeline import SlideSegment

CLASSIC_COMPOSITIONS = ("rule_of_thirds", "centered", "asymmetric")
DESIGN_TRENDS_COMPOSITIONS = CLASSIC_COMPOSITIONS + ("split_screen", "hero_background")

ELEMENT_TYPES = ("headline", "body", "image_placeholder", "blob", "icon_placeholder")


def _quoted(values) -> str:
    return ", ".join(f'"{value}"' for value in values)


def get_layout_system_prompt(style: str) -> str:
    return f"""You are a JSON-only API. Return ONLY valid JSON with NO commentary, explanations, or markdown.

Task: Plan element positions for a 1600x900px slide.

REQUIRED OUTPUT FORMAT (copy this structure exactly):
{{
  "composition": "rule_of_thirds",
  "elements": [
    {{"type": "headline", "x": 100, "y": 200, "width": 1400, "align": "left"}},
    {{"type": "body", "x": 100, "y": 350, "width": 700}},
    {{"type": "image_placeholder", "x": 900, "y": 200, "width": 600, "height": 500}},
    {{"type": "blob", "x": 50, "y": 600, "width": 400, "height": 300}},
    {{"type": "icon_placeholder", "x": 1400, "y": 750}}
  ]
}}

Valid composition values: {_quoted(CLASSIC_COMPOSITIONS)}
Valid element types: {_quoted(ELEMENT_TYPES)}

IMPORTANT:
- Start your response with {{ and end with }}
- No text before or after the JSON
- No explanations or commentary
- Use double quotes for all strings
- Use whole numbers for every coordinate and size
- Always include one headline and at least one blob or icon_placeholder
- Style preference: {style}"""


def get_design_trends_layout_system_prompt(style: str) -> str:
    return f"""You are a JSON-only API. Return ONLY valid JSON with NO commentary, explanations, or markdown.

Task: Plan element positions for a 1600x900px slide following current editorial design trends.

REQUIRED OUTPUT FORMAT:
{{
  "composition": "split_screen",
  "elements": [
    {{"type": "headline", "x": 100, "y": 200, "width": 650, "height": 150, "align": "left"}},
    {{"type": "body", "x": 100, "y": 400, "width": 650, "height": 300, "align": "left"}},
    {{"type": "image_placeholder", "x": 800, "y": 0, "width": 800, "height": 900}},
    {{"type": "blob", "x": 0, "y": 700, "width": 300, "height": 200}},
    {{"type": "icon_placeholder", "x": 100, "y": 750}}
  ]
}}

Composition templates:
- "split_screen": text on one half, image filling the other half edge to edge
- "hero_background": image covers the canvas, headline and body centered above it
- "rule_of_thirds": headline and image anchored on third lines (x = 500 or 1050)
- "centered": stacked, center-aligned text, no image or a small one below
- "asymmetric": wide text column left, narrow image column right

Layout rules:
- Text boxes (headline, body) must never overlap the image_placeholder, except in "hero_background"
- Blobs sit only in canvas corners and may bleed off the edge
- Align every x and y to a 50px grid; widths and heights to a 100px grid where possible
- Keep 100px margins around text
- Always include one headline and at least one blob or icon_placeholder

Valid composition values: {_quoted(DESIGN_TRENDS_COMPOSITIONS)}
Valid element types: {_quoted(ELEMENT_TYPES)}

IMPORTANT:
- Start your response with {{ and end with }}
- Use double quotes for all strings and whole numbers for coordinates
- Style preference: {style}"""


def get_layout_user_prompt(segment: SlideSegment) -> str:
    return (
        f"Slide {segment.slide_index}:\n"
        f"Title: {segment.title}\n"
        f"Subtitle: {segment.subtitle}\n"
        f"Body: {segment.body_text}\n"
        f"Keywords: {', '.join(segment.keywords)}\n\n"
        "Plan layout positions."
    )

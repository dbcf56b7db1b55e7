"""Shared fakes for pipeline and API tests."""
import os
from typing import Any, Dict, List, Optional

import pytest

# Keep the test run hermetic: no provider keys, no Supabase, no Sentry
for _name in ("OPENROUTER_API_KEY", "GEMINI_API_KEY", "PEXELS_API_KEY", "SUPABASE_URL",
              "SUPABASE_KEY", "SUPABASE_SERVICE_KEY", "SENTRY_DSN"):
    os.environ.pop(_name, None)
os.environ.setdefault("ENABLE_REFINEMENT", "false")

from agents.ai.gateway import infer_context
from agents.core.interfaces import ImageSearch, JSONGateway
from models.pipeline import StockImage, StockImageSrc, UserInput


class ScriptedGateway(JSONGateway):
    """
    Answers by stage. Each entry of ``script`` maps a context label
    (segmentation, layout, refinement) to a response, a list of responses
    consumed in order, an exception to raise, or a callable taking the user
    prompt.
    """

    def __init__(self, **script: Any):
        self.script = script
        self.calls: List[Dict[str, str]] = []

    async def call(self, system_prompt: str, user_prompt: str) -> Any:
        context = infer_context(system_prompt)
        self.calls.append({"context": context, "system": system_prompt, "user": user_prompt})
        entry = self.script.get(context)
        if isinstance(entry, list):
            entry = entry.pop(0) if entry else None
        if callable(entry) and not isinstance(entry, type):
            entry = entry(user_prompt)
        if isinstance(entry, BaseException):
            raise entry
        return entry

    def count(self, context: str) -> int:
        return sum(1 for call in self.calls if call["context"] == context)


class FakeImageSearch(ImageSearch):
    def __init__(self, results: Optional[Dict[str, List[StockImage]]] = None, error: Optional[Exception] = None):
        self.results = results or {}
        self.error = error
        self.queries: List[str] = []

    async def search_images(self, query, orientation="landscape", per_page=15):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))


class ManualClock:
    """Deterministic clock; ``sleep`` advances it instead of waiting."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_image(image_id: int = 1, alt: str = "", photographer: str = "Jane Doe") -> StockImage:
    return StockImage(
        id=image_id,
        url=f"https://www.pexels.com/photo/{image_id}/",
        photographer=photographer,
        alt=alt,
        src=StockImageSrc(
            large=f"https://images.pexels.com/photos/{image_id}/large.jpeg",
            original=f"https://images.pexels.com/photos/{image_id}/original.jpeg",
        ),
    )


def segmentation_response(n: int) -> Dict[str, Any]:
    return {
        "slides": [
            {
                "slide_index": i + 1,
                "title": f"Title {i + 1}",
                "subtitle": f"Subtitle {i + 1}",
                "body_text": f"Body {i + 1}",
                "keywords": ["growth", "team"],
            }
            for i in range(n)
        ]
    }


LAYOUT_RESPONSE = {
    "composition": "rule_of_thirds",
    "elements": [
        {"type": "headline", "x": 100, "y": 150, "width": 700, "align": "left"},
        {"type": "body", "x": 100, "y": 400, "width": 700},
        {"type": "image_placeholder", "x": 900, "y": 100, "width": 600, "height": 700},
        {"type": "blob", "x": 1200, "y": 600, "width": 300, "height": 250},
        {"type": "icon_placeholder", "x": 100, "y": 750},
    ],
}


@pytest.fixture
def user_input():
    return UserInput(prompt="Quarterly results\nTeam growth\nNext steps", num_slides=3)


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway(segmentation=segmentation_response(3), layout=LAYOUT_RESPONSE)


@pytest.fixture
def image_search():
    return FakeImageSearch({"growth": [make_image(1, "blue sky"), make_image(2, "warm orange sunset")]})

import asyncio

import pytest

from agents.generation.exceptions import ConfigurationError, ExtractionError, MissingConfigError, ProviderError
from agents.generation.segmentation import TextSegmenter, fallback_segments, normalize_slide
from agents.prompts.generation.profiles import CLASSIC_PROFILE
from conftest import ScriptedGateway, segmentation_response
from models.pipeline import DEFAULT_KEYWORDS, UserInput


def segment(gateway, user_input):
    return asyncio.run(TextSegmenter(gateway, CLASSIC_PROFILE).segment(user_input))


def test_model_segments_are_used(user_input):
    segments = segment(ScriptedGateway(segmentation=segmentation_response(3)), user_input)

    assert [s.slide_index for s in segments] == [1, 2, 3]
    assert segments[0].title == "Title 1"
    assert segments[0].keywords == ("growth", "team")


def test_provider_failure_falls_back_to_line_split():
    user_input = UserInput(prompt="God is good\nHe never fails\nTrust Him always", num_slides=3)
    gateway = ScriptedGateway(segmentation=ProviderError("boom", status_code=503, provider="openrouter"))

    segments = segment(gateway, user_input)

    assert [s.title for s in segments] == ["God is good", "He never fails", "Trust Him always"]
    assert [s.body_text for s in segments] == ["God is good", "He never fails", "Trust Him always"]
    assert all(s.subtitle == "" for s in segments)
    assert all(s.keywords == DEFAULT_KEYWORDS for s in segments)


def test_extraction_errors_also_fall_back():
    user_input = UserInput(prompt="One\nTwo", num_slides=2)
    failure = ExtractionError("bad json", label="segmentation")
    segments = segment(ScriptedGateway(segmentation=failure), user_input)
    assert [s.title for s in segments] == ["One", "Two"]


@pytest.mark.parametrize("failure", [
    MissingConfigError("OPENROUTER_API_KEY"),
    ConfigurationError("bad provider"),
])
def test_configuration_errors_are_raised_not_absorbed(failure):
    user_input = UserInput(prompt="One\nTwo", num_slides=2)
    gateway = ScriptedGateway(segmentation=failure)

    with pytest.raises(type(failure)):
        segment(gateway, user_input)
    assert gateway.count("segmentation") == 1


def test_non_fallback_errors_propagate():
    class Broken(Exception):
        pass

    user_input = UserInput(prompt="One", num_slides=1)
    with pytest.raises(Broken):
        segment(ScriptedGateway(segmentation=Broken()), user_input)


def test_response_without_slides_list_falls_back():
    user_input = UserInput(prompt="Alpha\nBeta", num_slides=2)
    segments = segment(ScriptedGateway(segmentation={"slides": "nope"}), user_input)
    assert [s.title for s in segments] == ["Alpha", "Beta"]


def test_fallback_pads_with_numbered_titles():
    user_input = UserInput(prompt="Only line", num_slides=3)
    segments = fallback_segments(user_input)

    assert [s.title for s in segments] == ["Only line", "Slide 2", "Slide 3"]
    assert segments[2].body_text == "Only line"


def test_extra_model_slides_are_truncated():
    user_input = UserInput(prompt="text", num_slides=2)
    segments = segment(ScriptedGateway(segmentation=segmentation_response(5)), user_input)
    assert [s.title for s in segments] == ["Title 1", "Title 2"]


def test_missing_model_slides_are_padded_and_renumbered():
    user_input = UserInput(prompt="First\nSecond\nThird", num_slides=3)
    response = {"slides": [{"slide_index": 7, "title": "Only one"}]}

    segments = segment(ScriptedGateway(segmentation=response), user_input)

    assert [s.slide_index for s in segments] == [1, 2, 3]
    assert [s.title for s in segments] == ["Only one", "Second", "Third"]


def test_normalize_fills_gaps():
    slide = normalize_slide({"title": None, "keywords": ["  ", "ocean"]}, position=4)

    assert slide.slide_index == 5
    assert slide.title == "Slide 5"
    assert slide.subtitle == ""
    assert slide.keywords == ("ocean",)


def test_normalize_defaults_keywords_when_absent():
    assert normalize_slide({"title": "x"}, 0).keywords == DEFAULT_KEYWORDS


def test_verbatim_mode_changes_user_prompt():
    gateway = ScriptedGateway(segmentation=segmentation_response(1))
    segment(gateway, UserInput(prompt="Keep me", num_slides=1, use_word_for_word=True))
    assert gateway.calls[0]["user"].startswith("Use this text word-for-word")

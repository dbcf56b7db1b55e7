import asyncio

import pytest

from agents.generation.exceptions import MissingConfigError, ProviderTimeoutError
from agents.generation.layout_planner import LayoutPlanner, coerce_element, fallback_layout, validate_layout
from agents.prompts.generation.profiles import CLASSIC_PROFILE, DESIGN_TRENDS_PROFILE, FALLBACK_LAYOUT
from conftest import LAYOUT_RESPONSE, ScriptedGateway
from models.pipeline import ElementKind, LayoutElement, LayoutPlan, SlideSegment

SEGMENT = SlideSegment(slide_index=1, title="Hello", keywords=("growth",))


def plan(response, profile=CLASSIC_PROFILE, validate=True):
    planner = LayoutPlanner(ScriptedGateway(layout=response), profile, validate=validate)
    return asyncio.run(planner.plan_layout(SEGMENT, "modern minimal"))


def test_model_plan_is_used():
    layout = plan(LAYOUT_RESPONSE)

    assert layout.composition == "rule_of_thirds"
    assert [e.type for e in layout.elements] == [
        ElementKind.HEADLINE,
        ElementKind.BODY,
        ElementKind.IMAGE_PLACEHOLDER,
        ElementKind.BLOB,
        ElementKind.ICON_PLACEHOLDER,
    ]
    assert layout.first(ElementKind.HEADLINE).align == "left"


def test_null_elements_yield_exact_fallback():
    assert plan({"composition": "asymmetric", "elements": None}) == FALLBACK_LAYOUT


def test_provider_timeout_yields_fallback():
    assert plan(ProviderTimeoutError("slow", provider="openrouter")) == fallback_layout()


def test_unknown_composition_becomes_centered():
    response = {"composition": "zigzag", "elements": [{"type": "headline", "x": 10, "y": 10}]}
    assert plan(response).composition == "centered"


def test_design_trends_accepts_split_screen():
    response = {"composition": "split_screen", "elements": [{"type": "headline", "x": 100, "y": 100}]}
    assert plan(response, DESIGN_TRENDS_PROFILE).composition == "split_screen"
    assert plan(response, CLASSIC_PROFILE).composition == "centered"


def test_missing_headline_gets_fallback_headline():
    response = {"composition": "centered", "elements": [{"type": "body", "x": 200, "y": 450, "width": 1200}]}
    layout = plan(response)

    assert layout.elements[0] == FALLBACK_LAYOUT.first(ElementKind.HEADLINE)
    assert layout.elements[1].type == ElementKind.BODY


def test_unusable_elements_are_dropped():
    response = {"composition": "centered", "elements": [
        {"type": "headline", "x": "120px", "y": 80.6},
        {"type": "sparkles", "x": 1, "y": 1},
        {"type": "body", "x": None, "y": 5},
        "garbage",
    ]}
    layout = plan(response)

    assert [e.type for e in layout.elements] == [ElementKind.HEADLINE, ElementKind.BLOB]
    assert (layout.elements[0].x, layout.elements[0].y) == (120, 81)


def test_coerce_element_rejects_bad_alignment():
    element = coerce_element({"type": "body", "x": 1, "y": 2, "align": "justify", "width": -5})
    assert element.align is None
    assert element.width is None


def test_validate_layout_clamps_into_canvas():
    layout = LayoutPlan(composition="centered", elements=(
        LayoutElement(type=ElementKind.IMAGE_PLACEHOLDER, x=1400, y=-20, width=600, height=1200),
    ))
    element = validate_layout(layout, 1600, 900).elements[0]

    assert (element.x, element.y, element.width, element.height) == (1000, 0, 600, 900)


def test_validate_layout_snaps_to_grid():
    layout = LayoutPlan(composition="centered", elements=(
        LayoutElement(type=ElementKind.HEADLINE, x=113, y=262, width=700),
    ))
    element = validate_layout(layout, 1600, 900, grid=50).elements[0]

    assert (element.x, element.y) == (100, 250)


def test_validation_can_be_disabled():
    response = {"composition": "centered", "elements": [{"type": "headline", "x": 5000, "y": 10}]}
    assert plan(response, validate=False).elements[0].x == 5000
    assert plan(response, validate=True).elements[0].x == 1600


def test_plan_without_decoration_gets_fallback_blob():
    response = {"composition": "centered", "elements": [
        {"type": "headline", "x": 100, "y": 250, "width": 1400},
        {"type": "body", "x": 200, "y": 450, "width": 1200},
    ]}
    layout = plan(response)

    assert [e.type for e in layout.elements] == [ElementKind.HEADLINE, ElementKind.BODY, ElementKind.BLOB]
    assert layout.first(ElementKind.BLOB) == FALLBACK_LAYOUT.first(ElementKind.BLOB)


def test_icon_placeholder_counts_as_decoration():
    response = {"composition": "centered", "elements": [
        {"type": "headline", "x": 100, "y": 250},
        {"type": "icon_placeholder", "x": 1350, "y": 700},
    ]}
    assert plan(response).first(ElementKind.BLOB) is None


def test_blobs_may_bleed_off_the_canvas():
    layout = LayoutPlan(composition="centered", elements=(
        LayoutElement(type=ElementKind.BLOB, x=1450, y=750, width=300, height=200),
        LayoutElement(type=ElementKind.BLOB, x=-100, y=-60, width=300, height=200),
    ))
    corner, top_left = validate_layout(layout, 1600, 900, grid=50).elements

    assert (corner.x, corner.y, corner.width, corner.height) == (1450, 750, 300, 200)
    assert (top_left.x, top_left.y) == (-100, -50)


def test_blobs_never_leave_the_canvas_entirely():
    layout = LayoutPlan(composition="centered", elements=(
        LayoutElement(type=ElementKind.BLOB, x=5000, y=-900, width=300, height=200),
    ))
    blob = validate_layout(layout, 1600, 900).elements[0]

    assert (blob.x, blob.y) == (1450, -100)


def test_missing_credential_is_raised_not_replaced_by_fallback():
    with pytest.raises(MissingConfigError):
        plan(MissingConfigError("OPENROUTER_API_KEY"))

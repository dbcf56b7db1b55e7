import asyncio

from agents.generation.asset_generator import AssetGenerator
from agents.generation.slide_assembler import assemble_slide
from conftest import FakeImageSearch, make_image
from models.pipeline import ElementKind, LayoutElement, LayoutPlan, RefinementResult, SlideSegment

SEGMENT = SlideSegment(slide_index=1, title="Launch", subtitle="Q3", body_text="We shipped", keywords=("growth",))
LAYOUT = LayoutPlan(composition="rule_of_thirds", elements=(
    LayoutElement(type=ElementKind.HEADLINE, x=100, y=120, width=700, align="left"),
    LayoutElement(type=ElementKind.BODY, x=100, y=400, width=700),
    LayoutElement(type=ElementKind.IMAGE_PLACEHOLDER, x=900, y=100, width=600, height=700),
    LayoutElement(type=ElementKind.BLOB, x=1200, y=600, width=300, height=250),
))


def build_assets():
    search = FakeImageSearch({"growth": [make_image(5, photographer="Ann Lee")]})
    return asyncio.run(AssetGenerator(search, render_texture=False).generate_assets(LAYOUT, SEGMENT, "warm", "warm"))


def test_assembly_is_pure():
    assets = build_assets()
    assert assemble_slide(SEGMENT, LAYOUT, assets) == assemble_slide(SEGMENT, LAYOUT, assets)


def test_text_and_meta():
    slide = assemble_slide(SEGMENT, LAYOUT, build_assets())

    assert (slide.text.headline, slide.text.subtext, slide.text.body) == ("Launch", "Q3", "We shipped")
    assert slide.text.color == "#111111"
    assert slide.text.font == "DM Sans"
    assert slide.meta.slide_index == 1
    assert slide.meta.composition == "rule_of_thirds"
    assert slide.meta.score == 85
    assert slide.meta.keywords == ("growth",)


def test_background_from_gradient_and_texture():
    slide = assemble_slide(SEGMENT, LAYOUT, build_assets())

    assert slide.background.gradient.from_color == "#fbbf24"
    assert slide.background.gradient.to == "#f59e0b"
    assert slide.background.gradient.angle == 135
    assert slide.background.texture.type == "grain"
    assert slide.background.texture.opacity == 0.2


def test_image_uses_large_src_and_placeholder_box():
    slide = assemble_slide(SEGMENT, LAYOUT, build_assets())

    assert slide.image.url == "https://images.pexels.com/photos/5/large.jpeg"
    assert slide.image.photographer == "Ann Lee"
    assert (slide.image.x, slide.image.y, slide.image.width, slide.image.height) == (900, 100, 600, 700)


def test_shapes_carry_blob_parameters():
    shape = assemble_slide(SEGMENT, LAYOUT, build_assets()).shapes[0]
    assert (shape.seed, shape.complexity, shape.contrast) == ("slide-1", 0.6, 0.5)


def test_refinement_score_applied():
    slide = assemble_slide(SEGMENT, LAYOUT, build_assets(), RefinementResult(final_score=42))
    assert slide.meta.score == 42


def test_to_json_uses_wire_names():
    data = assemble_slide(SEGMENT, LAYOUT, build_assets()).to_json()

    assert data["background"]["gradient"]["from"] == "#fbbf24"
    assert "dataUrl" in data["background"]["texture"]
    assert data["text_boxes"]["headline"] == {"x": 100, "y": 120, "width": 700, "align": "left"}
    assert data["meta"]["keywords"] == ["growth"]

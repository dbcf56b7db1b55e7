import asyncio

import aiohttp

from agents.generation.asset_generator import AssetGenerator, blob_seed
from agents.generation.exceptions import ProviderError
from agents.generation.slide_assembler import assemble_slide
from conftest import FakeImageSearch, make_image
from models.pipeline import ElementKind, LayoutElement, LayoutPlan, SlideSegment

LAYOUT = LayoutPlan(composition="asymmetric", elements=(
    LayoutElement(type=ElementKind.HEADLINE, x=100, y=100, width=800),
    LayoutElement(type=ElementKind.BLOB, x=50, y=600, width=300, height=250),
    LayoutElement(type=ElementKind.BLOB, x=1200, y=50),
    LayoutElement(type=ElementKind.ICON_PLACEHOLDER, x=1300, y=700),
    LayoutElement(type=ElementKind.ICON_PLACEHOLDER, x=1400, y=700),
    LayoutElement(type=ElementKind.ICON_PLACEHOLDER, x=1500, y=700),
))

SEGMENT = SlideSegment(slide_index=2, title="Team", keywords=("growth", "team"))


def generate(image_search, tone="warm", style="corporate"):
    generator = AssetGenerator(image_search, render_texture=False)
    return asyncio.run(generator.generate_assets(LAYOUT, SEGMENT, style, tone))


def test_blobs_follow_layout_and_share_gradient_color():
    assets = generate(FakeImageSearch())

    assert len(assets.blobs) == 2
    assert {blob.color for blob in assets.blobs} == {assets.gradient.primary}
    assert assets.blobs[0].svg == assets.blobs[1].svg
    assert (assets.blobs[1].width, assets.blobs[1].height) == (400, 400)


def test_icons_map_keywords_by_position():
    assets = generate(FakeImageSearch())

    assert [icon.name for icon in assets.icons] == ["RocketLaunchIcon", "UserGroupIcon", "StarIcon"]
    assert all(icon.size == 48 and icon.variant == "outline" for icon in assets.icons)
    assert assets.icons[0].position.x == 1300


def test_image_chosen_by_tone():
    search = FakeImageSearch({"growth": [make_image(1, "blue sky"), make_image(2, "warm orange sunset")]})
    assert generate(search, tone="warm").image.id == 2


def test_ties_keep_provider_order():
    search = FakeImageSearch({"growth": [make_image(1, "a"), make_image(2, "b")]})
    assert generate(search, tone="unknown").image.id == 1


def test_second_keyword_tried_when_first_is_empty():
    search = FakeImageSearch({"team": [make_image(9)]})
    assets = generate(search)

    assert search.queries == ["growth", "team"]
    assert assets.image.id == 9


def test_no_results_means_no_image():
    assets = generate(FakeImageSearch())
    assert assets.image is None

    slide = assemble_slide(SEGMENT, LAYOUT, assets)
    assert slide.image is None


def test_search_failures_degrade_to_no_image():
    for error in (ProviderError("down", status_code=500), aiohttp.ClientConnectionError("reset")):
        assert generate(FakeImageSearch(error=error)).image is None


def test_no_image_search_configured():
    assert generate(None).image is None


def test_empty_keywords_search_abstract():
    search = FakeImageSearch()
    generator = AssetGenerator(search, render_texture=False)
    asyncio.run(generator.select_image((), "warm"))
    assert search.queries == ["abstract"]


def test_texture_is_seeded_by_slide():
    generator = AssetGenerator(None, render_texture=True)
    first = generator.build_texture(SEGMENT)
    again = generator.build_texture(SEGMENT)

    assert first.data_url.startswith("data:image/png;base64,")
    assert first == again
    assert first.opacity == 0.2


def test_blob_seed_is_stable():
    assert blob_seed(3) == "slide-3"

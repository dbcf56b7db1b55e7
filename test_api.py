import json

import pytest
from fastapi.testclient import TestClient

from agents.generation.deck_orchestrator import SlidePipeline
from agents.generation.exceptions import MissingConfigError
from agents.prompts.generation.profiles import CLASSIC_PROFILE
from api.auth import get_current_user_id, get_optional_user_id
from api.dependencies import get_image_search, get_slide_pipeline, get_store
from api.server import app
from conftest import LAYOUT_RESPONSE, FakeImageSearch, ScriptedGateway, segmentation_response
from services.pexels_service import PexelsService
from services.presentation_store import InMemoryPresentationStore, PersistenceError

STREAM_BODY = {
    "presentationTitle": "Quarterly review",
    "theme": "professional",
    "style": "corporate",
    "numSlides": 2,
    "slides": [{"id": "a", "content": "Revenue grew"}, {"id": "b", "content": "Hiring plan"}],
    "useUniformDesign": True,
}


def parse_sse(text):
    events = []
    for chunk in text.split("\n\n"):
        if chunk.startswith("data: "):
            events.append(json.loads(chunk[len("data: "):]))
    return events


@pytest.fixture
def store():
    return InMemoryPresentationStore()


@pytest.fixture
def gateway():
    return ScriptedGateway(segmentation=segmentation_response(2), layout=LAYOUT_RESPONSE)


@pytest.fixture
def client(store, gateway):
    pipeline = SlidePipeline(gateway, FakeImageSearch(), CLASSIC_PROFILE, refine=False, render_texture=False)
    app.dependency_overrides[get_slide_pipeline] = lambda: pipeline
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_optional_user_id] = lambda: "user-1"
    app.dependency_overrides[get_current_user_id] = lambda: "user-1"
    app.dependency_overrides[get_image_search] = lambda: PexelsService(api_key="")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestGenerateSlidesStream:
    def test_full_stream_saves_presentation(self, client, store, gateway):
        response = client.post("/api/generate-slides-stream", json=STREAM_BODY)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = parse_sse(response.text)

        assert events[0]["step"] == "init"
        assert events[0]["percentage"] == 0
        assert [e["step"] for e in events[-3:]] == ["finalizing", "saving", "complete"]
        percentages = [e["percentage"] for e in events]
        assert percentages == sorted(percentages)

        previews = [e for e in events if e["type"] == "slide_preview"]
        assert [e["slideIndex"] for e in previews] == [1, 2]

        presentation = events[-1]["presentation"]
        assert presentation["title"] == "Quarterly review"
        assert presentation["slides_json"]["meta"] == {
            "uniformDesign": True,
            "theme": "professional",
            "style": "corporate",
        }
        assert len(presentation["slides_json"]["slides"]) == 2
        assert store.prompts_history[0]["input_text"] == "Slide 1: Revenue grew\n\nSlide 2: Hiring plan"
        assert "Tone: professional" in gateway.calls[0]["user"]

    def test_invalid_body_yields_single_error_event(self, client, gateway):
        response = client.post("/api/generate-slides-stream", json={"presentationTitle": ""})
        events = parse_sse(response.text)

        assert len(events) == 1
        assert events[0]["type"] == "error"
        assert events[0]["message"] == "Invalid request data"
        assert {tuple(d["loc"])[0] for d in events[0]["details"]} >= {"presentationTitle", "theme", "slides"}
        assert gateway.calls == []

    def test_unauthenticated_yields_error_event(self, client, gateway):
        app.dependency_overrides[get_optional_user_id] = lambda: None
        events = parse_sse(client.post("/api/generate-slides-stream", json=STREAM_BODY).text)

        assert events == [{"type": "error", "message": "Unauthorized", "percentage": 0.0}]
        assert gateway.calls == []

    def test_failed_attempt_is_retried(self, client, store):
        class Flaky(Exception):
            pass

        gateway = ScriptedGateway(segmentation=[Flaky(), segmentation_response(2)], layout=LAYOUT_RESPONSE)
        pipeline = SlidePipeline(gateway, FakeImageSearch(), CLASSIC_PROFILE, render_texture=False)
        app.dependency_overrides[get_slide_pipeline] = lambda: pipeline

        events = parse_sse(client.post("/api/generate-slides-stream", json=STREAM_BODY).text)

        assert events[-1]["type"] == "complete"
        assert gateway.count("segmentation") == 2
        percentages = [e["percentage"] for e in events]
        assert percentages == sorted(percentages)

    def test_save_failure_reported(self, client, store):
        async def broken_create(*args, **kwargs):
            raise PersistenceError("Failed to save presentation")

        store.create = broken_create
        events = parse_sse(client.post("/api/generate-slides-stream", json=STREAM_BODY).text)

        assert events[-1]["type"] == "error"
        assert events[-1]["message"] == "Failed to save presentation"

    def test_prompt_history_failure_still_completes(self, client, store):
        async def broken_history(*args, **kwargs):
            raise PersistenceError("Failed to record prompt history")

        store.record_prompt = broken_history
        events = parse_sse(client.post("/api/generate-slides-stream", json=STREAM_BODY).text)

        assert events[-1]["type"] == "complete"
        saved_id = events[-1]["presentation"]["id"]
        assert saved_id in store.presentations
        assert all(e["type"] != "error" for e in events)

    def test_missing_credential_yields_error_event(self, client, store):
        gateway = ScriptedGateway(segmentation=MissingConfigError("OPENROUTER_API_KEY"), layout=LAYOUT_RESPONSE)
        pipeline = SlidePipeline(gateway, FakeImageSearch(), CLASSIC_PROFILE, render_texture=False)
        app.dependency_overrides[get_slide_pipeline] = lambda: pipeline

        events = parse_sse(client.post("/api/generate-slides-stream", json=STREAM_BODY).text)

        assert events[-1]["type"] == "error"
        assert "OPENROUTER_API_KEY" in events[-1]["message"]
        assert gateway.count("segmentation") == 1
        assert gateway.count("layout") == 0
        assert store.presentations == {}


class TestGenerateSlides:
    def test_batch_generation(self, client):
        response = client.post("/api/generate-slides", json={"prompt": "Two ideas", "numSlides": 2})

        assert response.status_code == 200
        assert [s["meta"]["slide_index"] for s in response.json()["slides"]] == [1, 2]
        assert "editorSlides" not in response.json()

    def test_editor_format_on_request(self, client):
        response = client.post(
            "/api/generate-slides",
            json={"prompt": "Two ideas", "numSlides": 2, "includeEditorFormat": True},
        )
        editor_slides = response.json()["editorSlides"]
        assert editor_slides[0]["elements"][-1]["id"] == "body-1"

    def test_missing_prompt_is_rejected(self, client):
        assert client.post("/api/generate-slides", json={"numSlides": 2}).status_code == 422


class TestPresentations:
    def test_list_update_delete(self, client, store):
        import asyncio

        created = asyncio.run(store.create("user-1", "Deck", {"slides": []}))

        listed = client.get("/api/presentations").json()["presentations"]
        assert [p["id"] for p in listed] == [created["id"]]

        updated = client.patch("/api/presentations", json={"id": created["id"], "title": "Renamed"})
        assert updated.json()["presentation"]["title"] == "Renamed"

        assert client.delete("/api/presentations", params={"id": created["id"]}).json() == {"success": True}
        assert client.delete("/api/presentations", params={"id": created["id"]}).status_code == 404

    def test_unauthenticated_list_is_rejected(self, client):
        app.dependency_overrides.pop(get_current_user_id)
        app.dependency_overrides[get_optional_user_id] = lambda: None
        assert client.get("/api/presentations").status_code == 401


class TestDesignAssets:
    def test_pexels_search_requires_query(self, client):
        assert client.get("/api/pexels-search").status_code == 400

    def test_pexels_search_without_key(self, client):
        response = client.get("/api/pexels-search", params={"q": "ocean"})
        assert response.status_code == 500
        assert response.json()["detail"] == "PEXELS_API_KEY not configured"

    def test_generate_blob(self, client):
        response = client.post("/api/generate-blob", json={"color": "#ff0000"})
        assert response.status_code == 200
        assert 'fill="#ff0000"' in response.json()["svg"]

    def test_generate_blob_defaults(self, client):
        svg = client.post("/api/generate-blob").json()["svg"]
        assert 'fill="#667eea"' in svg

    def test_generate_blob_draws_a_fresh_shape_each_call(self, client):
        first = client.post("/api/generate-blob", json={"size": 200}).json()["svg"]
        second = client.post("/api/generate-blob", json={"size": 200}).json()["svg"]
        assert first != second
        assert 'viewBox="0 0 200 200"' in first

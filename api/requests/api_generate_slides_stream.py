"""
Streaming slide generation endpoint.

Emits Server-Sent Events (``data: {json}\\n\\n``) for every pipeline step,
saves the finished deck and ends with a ``complete`` event carrying the
stored presentation. Every failure ends the stream with one ``error`` event.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Dict, List, Optional

import sentry_sdk
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError as PydanticValidationError

from agents.config import PIPELINE_MAX_ATTEMPTS
from agents.generation.deck_orchestrator import SlidePipeline
from agents.generation.exceptions import GenerationError, ValidationError, is_retryable, to_error_payload
from agents.generation.progress_manager import PipelineProgress
from api.auth import get_optional_user_id
from api.dependencies import get_slide_pipeline, get_store
from models.pipeline import UserInput
from models.requests import GenerateSlidesStreamRequest
from services.presentation_store import PersistenceError, PresentationStore
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _sse(event: Dict[str, Any]) -> bytes:
    return f"data: {json.dumps(event)}\n\n".encode("utf-8")


def build_user_input(request: GenerateSlidesStreamRequest) -> UserInput:
    """Join the user's slide blocks into one prompt; the theme doubles as the tone."""
    prompt = "\n\n".join(f"Slide {i + 1}: {slide.content}" for i, slide in enumerate(request.slides))
    return UserInput(
        prompt=prompt,
        num_slides=request.numSlides,
        tone=request.theme,
        style=request.style,
        use_word_for_word=request.useVerbatim,
    )


def parse_stream_request(body: Any) -> GenerateSlidesStreamRequest:
    try:
        return GenerateSlidesStreamRequest.model_validate(body)
    except PydanticValidationError as e:
        details = e.errors(include_url=False, include_context=False, include_input=False)
        raise ValidationError("Invalid request data", details=[dict(d) for d in details])


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def _watch_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("[STREAM] Client disconnected, cancelling generation")
            cancel_event.set()
            return
        await asyncio.sleep(0.5)


async def stream_generation(
    body: Any,
    user_id: Optional[str],
    pipeline: SlidePipeline,
    store: PresentationStore,
    cancel_event: asyncio.Event,
) -> AsyncIterator[bytes]:
    progress = PipelineProgress()

    if not user_id:
        yield _sse(progress.error("Unauthorized").to_event())
        return

    try:
        request = parse_stream_request(body)
    except ValidationError as e:
        logger.info(f"[STREAM] Rejected request: {e.details}")
        yield _sse(to_error_payload(e))
        return

    yield _sse(progress.init().to_event())
    user_input = build_user_input(request)

    try:
        slides: List[Dict[str, Any]] = []
        attempt = 1
        while True:
            try:
                async for update in pipeline.stream(user_input, cancel_event):
                    if update.type == "complete":
                        slides = (update.presentation or {}).get("slides", [])
                        continue
                    yield _sse(progress.relay(update).to_event())
                break
            except Exception as e:
                if attempt >= PIPELINE_MAX_ATTEMPTS or not is_retryable(e):
                    raise
                logger.warning(f"[STREAM] Generation attempt {attempt} failed, retrying: {e}")
                attempt += 1

        yield _sse(progress.saving().to_event())
        slides_json = {
            "slides": slides,
            "meta": {
                "uniformDesign": request.useUniformDesign,
                "theme": request.theme,
                "style": request.style,
            },
        }
        presentation = await store.create(user_id, request.presentationTitle, slides_json)
        try:
            await store.record_prompt(user_id, user_input.prompt, slides_json)
        except PersistenceError as e:
            # The deck is already saved; history is best effort
            logger.warning(f"[STREAM] Failed to record prompt history: {e}")
        logger.info(f"[STREAM] Saved presentation {presentation.get('id')} with {len(slides)} slides")
        yield _sse(progress.complete(presentation).to_event())

    except PersistenceError as e:
        logger.error(f"[STREAM] Failed to save presentation: {e}")
        yield _sse(progress.error("Failed to save presentation").to_event())
    except GenerationError as e:
        logger.error(f"[STREAM] Generation failed: {e}")
        yield _sse(to_error_payload(e))
    except Exception as e:
        logger.exception(f"[STREAM] Unexpected error: {e}")
        sentry_sdk.capture_exception(e)
        yield _sse(progress.error("Internal server error").to_event())


@router.post("/generate-slides-stream")
async def generate_slides_stream(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user_id),
    pipeline: SlidePipeline = Depends(get_slide_pipeline),
    store: PresentationStore = Depends(get_store),
):
    body = await _read_json(request)
    cancel_event = asyncio.Event()

    async def event_stream():
        watcher = asyncio.create_task(_watch_disconnect(request, cancel_event))
        try:
            async for chunk in stream_generation(body, user_id, pipeline, store, cancel_event):
                yield chunk
        finally:
            cancel_event.set()
            watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)

"""
Slide pipeline orchestrator.

Runs segmentation, then for each slide in order: layout planning, asset
generation and assembly. Slides are processed strictly one after another so
output order matches input order and progress only moves forward.

Handles:
- Batch runs (optionally with a critique pass per slide)
- Progress callbacks and a queue-backed async event stream
- Cancellation through an ``asyncio.Event`` raced against every await
"""

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, TypeVar

from agents.config import ENABLE_LAYOUT_VALIDATION, ENABLE_REFINEMENT, ENABLE_TEXTURE_RENDERING, PIPELINE_MAX_ATTEMPTS
from agents.core.interfaces import ImageSearch, JSONGateway
from agents.generation.asset_generator import AssetGenerator
from agents.generation.exceptions import PipelineCancelledError, is_retryable
from agents.generation.layout_planner import LayoutPlanner
from agents.generation.progress_manager import PipelineProgress
from agents.generation.refinement import SlideCritic
from agents.generation.segmentation import TextSegmenter
from agents.generation.slide_assembler import assemble_slide
from agents.prompts.generation.profiles import PromptProfile, get_prompt_profile
from models.pipeline import AssembledSlide, ProgressUpdate, UserInput
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]
T = TypeVar("T")


def _ignore(update: ProgressUpdate) -> None:
    pass


class SlidePipeline:
    """
    One orchestrator for every prompt profile and provider.

    The profile supplies prompt templates and fallback tables; the gateway
    and image search are injected so the pipeline itself holds no ambient
    state.
    """

    def __init__(
        self,
        gateway: JSONGateway,
        image_search: Optional[ImageSearch],
        profile: Optional[PromptProfile] = None,
        refine: bool = ENABLE_REFINEMENT,
        validate_layout: bool = ENABLE_LAYOUT_VALIDATION,
        render_texture: bool = ENABLE_TEXTURE_RENDERING,
    ):
        self.profile = profile or get_prompt_profile()
        self.segmenter = TextSegmenter(gateway, self.profile)
        self.planner = LayoutPlanner(gateway, self.profile, validate=validate_layout)
        self.asset_generator = AssetGenerator(image_search, render_texture=render_texture)
        self.critic = SlideCritic(gateway) if refine else None

    @classmethod
    def from_config(cls, **kwargs) -> "SlidePipeline":
        """Pipeline wired to the configured provider and Pexels."""
        from agents.ai.gateway import get_gateway
        from services.pexels_service import PexelsService

        return cls(get_gateway(), PexelsService(), **kwargs)

    # ------------------------------------------------------------------
    # Cancellation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise PipelineCancelledError("Generation cancelled")

    async def _await(self, awaitable: Awaitable[T], cancel_event: Optional[asyncio.Event]) -> T:
        """Await ``awaitable`` unless the cancel event fires first."""
        if cancel_event is None:
            return await awaitable

        task = asyncio.ensure_future(awaitable)
        if cancel_event.is_set():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise PipelineCancelledError("Generation cancelled")

        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise

        if task in done:
            waiter.cancel()
            return task.result()

        logger.info("[PIPELINE] Cancellation requested, aborting in-flight request")
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise PipelineCancelledError("Generation cancelled")

    def _emit(self, on_progress: ProgressCallback, update: ProgressUpdate, cancel_event: Optional[asyncio.Event]):
        self._check_cancelled(cancel_event)
        on_progress(update)

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    async def run_with_progress(
        self,
        user_input: UserInput,
        on_progress: ProgressCallback,
        cancel_event: Optional[asyncio.Event] = None,
        progress: Optional[PipelineProgress] = None,
    ) -> List[AssembledSlide]:
        """
        Generate every slide, reporting each sub-step to ``on_progress``.

        Args:
            user_input: The generation request
            on_progress: Called synchronously, in order, for every sub-step
            cancel_event: Setting it aborts the in-flight request; no further
                progress is reported and PipelineCancelledError is raised
            progress: Percentage tracker shared with the caller, if any

        Returns:
            Assembled slides in input order
        """
        progress = progress or PipelineProgress()

        def emit(update: ProgressUpdate) -> None:
            self._emit(on_progress, update, cancel_event)

        logger.info(
            f"[PIPELINE] Starting run: {user_input.num_slides} slides, tone={user_input.tone!r}, "
            f"style={user_input.style!r}, profile={self.profile.name}"
        )

        emit(progress.segmentation_started())
        segments = await self._await(self.segmenter.segment(user_input), cancel_event)
        total = len(segments)
        emit(progress.segmentation_complete(total))

        slides: List[AssembledSlide] = []
        for segment in segments:
            i = segment.slide_index
            emit(progress.slide_step(
                "slide_start", i, f'Designing slide {i}/{total}: "{segment.title}"', totalSlides=total
            ))

            emit(progress.slide_step("layout", i, "Planning layout composition..."))
            layout = await self._await(self.planner.plan_layout(segment, user_input.style), cancel_event)
            emit(progress.slide_step("layout_complete", i, f"Layout: {layout.composition}"))

            emit(progress.slide_step("assets", i, "Generating visuals (blobs, gradients, icons)..."))
            assets = await self._await(
                self.asset_generator.generate_assets(layout, segment, user_input.style, user_input.tone),
                cancel_event,
            )
            if assets.image is not None:
                emit(progress.slide_step("image_found", i, f"Found image by {assets.image.photographer}"))

            emit(progress.slide_step("assembling", i, "Assembling slide elements..."))
            slide = assemble_slide(segment, layout, assets)
            slides.append(slide)
            emit(progress.slide_complete(i, slide.to_json()))
            logger.info(f"[PIPELINE] Slide {i}/{total} assembled ({layout.composition})")

        emit(progress.finalizing())
        return slides

    async def run(self, user_input: UserInput, cancel_event: Optional[asyncio.Event] = None) -> List[AssembledSlide]:
        """Batch run; adds the critique score when refinement is enabled."""
        slides = await self.run_with_progress(user_input, _ignore, cancel_event)
        if self.critic is None:
            return slides

        refined = []
        for slide in slides:
            result = await self._await(self.critic.refine(slide), cancel_event)
            refined.append(slide.model_copy(update={"meta": slide.meta.model_copy(update={"score": result.final_score})}))
            logger.info(f"[PIPELINE] Slide {slide.meta.slide_index} scored {result.final_score}")
        return refined

    async def stream(
        self,
        user_input: UserInput,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[ProgressUpdate]:
        """
        Async iterator over the run's progress.

        The final item is a ``complete`` update whose ``presentation`` holds
        ``{"slides": [...]}``. Pipeline errors are re-raised after the events
        that preceded them; closing the iterator early cancels the run.
        """
        cancel_event = cancel_event or asyncio.Event()
        progress = PipelineProgress()
        queue: asyncio.Queue = asyncio.Queue()
        finished = object()

        async def produce():
            try:
                slides = await self.run_with_progress(user_input, queue.put_nowait, cancel_event, progress)
                queue.put_nowait(progress.complete({"slides": [slide.to_json() for slide in slides]}))
            finally:
                queue.put_nowait(finished)

        task = asyncio.create_task(produce())
        try:
            while True:
                item = await queue.get()
                if item is finished:
                    break
                yield item
            await task
        finally:
            if not task.done():
                cancel_event.set()
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)


async def run_with_retry(fn: Callable[[], Awaitable[T]], attempts: int = PIPELINE_MAX_ATTEMPTS) -> T:
    """Run ``fn`` again after a retryable failure, up to ``attempts`` times in total."""
    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt >= attempts or not is_retryable(e):
                raise
            logger.warning(f"[PIPELINE] Attempt {attempt}/{attempts} failed, retrying: {e}")
            attempt += 1


async def generate_slides_full_pipeline(user_input: UserInput, **kwargs: Any) -> List[AssembledSlide]:
    """Batch run with the configured provider, image search and profile."""
    return await SlidePipeline.from_config(**kwargs).run(user_input)


async def generate_slides_with_progress(
    user_input: UserInput,
    on_progress: ProgressCallback,
    cancel_event: Optional[asyncio.Event] = None,
    **kwargs: Any
) -> List[AssembledSlide]:
    """Streaming run with the configured provider, image search and profile."""
    return await SlidePipeline.from_config(**kwargs).run_with_progress(user_input, on_progress, cancel_event)

"""
Progress tracking for the slide pipeline.

Builds the ``ProgressUpdate`` events the stream consumer expects and keeps
the percentage sequence of one run non-decreasing within [0, 100].
"""

from enum import Enum
from typing import Any, Dict, Optional

from models.pipeline import ProgressUpdate


class PipelinePhase(Enum):
    """Percentage budget owners."""
    SEGMENTATION = "segmentation"
    SLIDES = "slides"
    FINALIZATION = "finalization"


class PipelineProgress:
    """
    Percentage bookkeeping for one pipeline run.

    Segmentation owns 0-15%, slides share 15-85% evenly and finalization owns
    85-100%. Inside a slide, sub-steps land at fixed fractions of the slide's
    share.
    """

    PHASE_PROGRESS = {
        PipelinePhase.SEGMENTATION: (0, 15),
        PipelinePhase.SLIDES: (15, 85),
        PipelinePhase.FINALIZATION: (85, 100),
    }

    # Fraction of the slide's share reached when the step is announced
    SLIDE_STEP_FRACTIONS = {
        "slide_start": 0.0,
        "layout": 0.2,
        "layout_complete": 0.3,
        "assets": 0.4,
        "image_found": 0.6,
        "assembling": 0.8,
        "slide_complete": 1.0,
    }

    SEGMENTATION_STARTED = 5
    FINALIZING = 95
    SAVING = 97
    COMPLETE = 100

    def __init__(self, total_slides: int = 0):
        self.total_slides = total_slides
        self.percentage = 0.0

    def _advance(self, value: float) -> float:
        # Never move backwards and never leave [0, 100]
        value = min(max(value, 0.0), 100.0)
        self.percentage = max(self.percentage, round(value, 2))
        return self.percentage

    def slide_percentage(self, slide_index: int, step: str) -> float:
        """Percentage for a sub-step of slide ``slide_index`` (1-based)."""
        start, end = self.PHASE_PROGRESS[PipelinePhase.SLIDES]
        per_slide = (end - start) / max(self.total_slides, 1)
        base = start + (slide_index - 1) * per_slide
        return base + per_slide * self.SLIDE_STEP_FRACTIONS[step]

    def status(self, step: str, message: str, percentage: Optional[float] = None, **extra: Any) -> ProgressUpdate:
        value = self.percentage if percentage is None else percentage
        return ProgressUpdate(type="status", step=step, message=message, percentage=self._advance(value), **extra)

    def init(self) -> ProgressUpdate:
        return self.status("init", "Starting AI slide generation...", 0)

    def segmentation_started(self) -> ProgressUpdate:
        return self.status("segmentation", "Analyzing content and splitting into slides...", self.SEGMENTATION_STARTED)

    def segmentation_complete(self, total_slides: int) -> ProgressUpdate:
        self.total_slides = total_slides
        end = self.PHASE_PROGRESS[PipelinePhase.SEGMENTATION][1]
        return self.status(
            "segmentation_complete",
            f"Created {total_slides} slide outlines",
            end,
            totalSlides=total_slides,
        )

    def slide_step(self, step: str, slide_index: int, message: str, **extra: Any) -> ProgressUpdate:
        return self.status(step, message, self.slide_percentage(slide_index, step), slideIndex=slide_index, **extra)

    def slide_complete(self, slide_index: int, preview: Dict[str, Any]) -> ProgressUpdate:
        return ProgressUpdate(
            type="slide_preview",
            step="slide_complete",
            message=f"Slide {slide_index} complete!",
            slideIndex=slide_index,
            totalSlides=self.total_slides,
            slidePreview=preview,
            percentage=self._advance(self.slide_percentage(slide_index, "slide_complete")),
        )

    def finalizing(self) -> ProgressUpdate:
        return self.status("finalizing", "All slides designed! Finalizing presentation...", self.FINALIZING)

    def saving(self) -> ProgressUpdate:
        return self.status("saving", "Saving presentation...", self.SAVING)

    def complete(self, presentation: Optional[Dict[str, Any]] = None) -> ProgressUpdate:
        return ProgressUpdate(
            type="complete",
            step="complete",
            message="Presentation ready",
            presentation=presentation,
            percentage=self._advance(self.COMPLETE),
        )

    def relay(self, update: ProgressUpdate) -> ProgressUpdate:
        """Forward an update from another tracker without letting the percentage fall back."""
        if update.percentage is None:
            return update
        return update.model_copy(update={"percentage": self._advance(update.percentage)})

    def error(self, message: str, details: Optional[list] = None) -> ProgressUpdate:
        return ProgressUpdate(type="error", message=message, details=details, percentage=self.percentage)

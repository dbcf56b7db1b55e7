"""
Value objects passed between generation stages.

Every stage returns a new frozen model; nothing downstream mutates what an
earlier stage produced.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


DEFAULT_KEYWORDS: Tuple[str, ...] = ("presentation", "slide")


class UserInput(FrozenModel):
    """Immutable generation request handed to the pipeline."""
    prompt: str
    num_slides: int = Field(ge=1)
    tone: str = "professional"
    style: str = "modern minimal"
    use_word_for_word: bool = False


class SlideSegment(FrozenModel):
    """Per-slide content outline produced by segmentation."""
    slide_index: int = Field(ge=1)
    title: str
    subtitle: str = ""
    body_text: str = ""
    keywords: Tuple[str, ...] = DEFAULT_KEYWORDS


class ElementKind(str, Enum):
    HEADLINE = "headline"
    BODY = "body"
    IMAGE_PLACEHOLDER = "image_placeholder"
    ICON_PLACEHOLDER = "icon_placeholder"
    BLOB = "blob"


class LayoutElement(FrozenModel):
    type: ElementKind
    x: int
    y: int
    width: Optional[int] = None
    height: Optional[int] = None
    align: Optional[str] = None


class LayoutPlan(FrozenModel):
    composition: str
    elements: Tuple[LayoutElement, ...] = ()

    def first(self, kind: ElementKind) -> Optional[LayoutElement]:
        """First element of the given kind, if the plan has one."""
        for element in self.elements:
            if element.type == kind:
                return element
        return None

    def of_kind(self, kind: ElementKind) -> List[LayoutElement]:
        return [element for element in self.elements if element.type == kind]


# --- Assets -----------------------------------------------------------------

class BlobAsset(FrozenModel):
    svg: str
    x: int
    y: int
    width: int
    height: int
    color: str


class GradientAsset(FrozenModel):
    css: str
    type: Literal["linear", "radial", "conic"] = "linear"
    colors: Tuple[str, ...]

    @property
    def primary(self) -> str:
        return self.colors[0]


class Position(FrozenModel):
    x: int
    y: int


class IconConfig(FrozenModel):
    name: str
    variant: Literal["outline", "solid"] = "outline"
    color: str
    size: int = 48
    position: Position


class TextureAsset(FrozenModel):
    data_url: str = Field("", alias="dataUrl")
    opacity: float


class StockImageSrc(FrozenModel):
    original: str = ""
    large2x: str = ""
    large: str = ""
    medium: str = ""
    small: str = ""
    portrait: str = ""
    landscape: str = ""
    tiny: str = ""


class StockImage(FrozenModel):
    id: int
    url: str = ""
    photographer: str = ""
    photographer_url: str = ""
    alt: str = ""
    avg_color: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    src: StockImageSrc = StockImageSrc()


class SlideAssets(FrozenModel):
    blobs: Tuple[BlobAsset, ...] = ()
    gradient: GradientAsset
    icons: Tuple[IconConfig, ...] = ()
    texture: TextureAsset
    image: Optional[StockImage] = None


class RefinementResult(FrozenModel):
    improvements: Tuple[str, ...] = ()
    final_score: int = Field(ge=0, le=100)


# --- Assembled slide ----------------------------------------------------------

class BackgroundGradient(FrozenModel):
    from_color: str = Field(alias="from")
    to: str
    angle: int = 135
    type: str = "linear"


class BackgroundTexture(FrozenModel):
    type: Literal["grain"] = "grain"
    opacity: float
    data_url: str = Field("", alias="dataUrl")


class SlideBackground(FrozenModel):
    gradient: BackgroundGradient
    texture: BackgroundTexture


class SlideShape(FrozenModel):
    type: Literal["blob"] = "blob"
    svg: str
    x: int
    y: int
    width: int
    height: int
    color: str
    seed: str
    complexity: float
    contrast: float


class SlideImage(FrozenModel):
    url: str
    photographer: str = ""
    fit: Literal["cover", "contain"] = "cover"
    x: Optional[int] = None
    y: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class SlideText(FrozenModel):
    headline: str
    subtext: str = ""
    body: str = ""
    color: str = "#111111"
    font: str = "DM Sans"


class TextBox(FrozenModel):
    x: int
    y: int
    width: Optional[int] = None
    height: Optional[int] = None
    align: Optional[str] = None


class SlideMeta(FrozenModel):
    slide_index: int
    composition: str
    score: int
    keywords: Tuple[str, ...] = ()


class AssembledSlide(FrozenModel):
    """Renderer-agnostic result for one slide."""
    background: SlideBackground
    shapes: Tuple[SlideShape, ...] = ()
    icons: Tuple[IconConfig, ...] = ()
    image: Optional[SlideImage] = None
    text: SlideText
    meta: SlideMeta
    # Planned headline/body boxes keyed by element kind value
    text_boxes: Tuple[Tuple[str, TextBox], ...] = ()

    def text_box(self, kind: str) -> Optional[TextBox]:
        for name, box in self.text_boxes:
            if name == kind:
                return box
        return None

    def to_json(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        data["text_boxes"] = {name: box.model_dump(mode="json", exclude_none=True) for name, box in self.text_boxes}
        return data


# --- Progress -----------------------------------------------------------------

class ProgressUpdate(BaseModel):
    """One event of the progress stream, camelCase on the wire."""
    type: Literal["status", "slide_preview", "error", "complete"]
    step: Optional[str] = None
    message: Optional[str] = None
    slideIndex: Optional[int] = None
    totalSlides: Optional[int] = None
    slidePreview: Optional[Dict[str, Any]] = None
    percentage: Optional[float] = None
    presentation: Optional[Dict[str, Any]] = None
    details: Optional[List[Dict[str, Any]]] = None

    def to_event(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

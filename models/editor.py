"""
Flat document shape owned by the canvas editor.

Elements and backgrounds are tagged unions keyed on ``type``; converters and
renderers dispatch on the tag.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ElementProps(BaseModel):
    x: int
    y: int
    width: int
    height: int
    rotation: float = 0
    opacity: float = 1.0
    zIndex: int = 1


class ElementStyle(BaseModel):
    fontFamily: Optional[str] = None
    fontSize: Optional[int] = None
    fontWeight: Optional[int] = None
    fill: Optional[str] = None
    align: Optional[str] = None
    lineHeight: Optional[float] = None


class TextElement(BaseModel):
    type: Literal["text"] = "text"
    id: str
    role: Literal["headline", "subtext", "body"]
    props: ElementProps
    style: ElementStyle = ElementStyle()
    content: str


class ImageElement(BaseModel):
    type: Literal["image"] = "image"
    id: str
    props: ElementProps
    content: str  # image url
    fit: str = "cover"
    photographer: Optional[str] = None


class ShapeElement(BaseModel):
    type: Literal["shape"] = "shape"
    id: str
    shapeKind: Literal["blob", "icon"]
    props: ElementProps
    style: ElementStyle = ElementStyle()
    # SVG markup for blobs, "icon:{name}:{variant}" for icons
    content: str


EditorElement = Annotated[
    Union[TextElement, ImageElement, ShapeElement],
    Field(discriminator="type"),
]


class SolidBackground(BaseModel):
    type: Literal["solid"] = "solid"
    color: str


class GradientBackground(BaseModel):
    type: Literal["gradient"] = "gradient"
    angle: int = 135
    colors: List[str]
    texture: Optional[Dict[str, Any]] = None


class ImageBackground(BaseModel):
    type: Literal["image"] = "image"
    url: str


Background = Annotated[
    Union[SolidBackground, GradientBackground, ImageBackground],
    Field(discriminator="type"),
]


class EditorSlide(BaseModel):
    id: str
    background: Background
    elements: List[EditorElement] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SlideContentInput(BaseModel):
    """One user-authored slide block in the streaming request"""
    id: str
    content: str = Field(min_length=1)


class GenerateSlidesStreamRequest(BaseModel):
    presentationTitle: str = Field(min_length=1, max_length=200)
    theme: str = Field(min_length=1, max_length=100)  # used as the tone
    style: str = Field(min_length=1, max_length=200)
    numSlides: int = Field(ge=1, le=20)
    slides: List[SlideContentInput] = Field(min_length=1)
    useUniformDesign: bool = False
    useVerbatim: bool = False


class GenerateSlidesRequest(BaseModel):
    """Batch generation request (no progress stream)"""
    prompt: str = Field(min_length=1)
    numSlides: int = Field(default=5, ge=1, le=20)
    tone: str = Field(default="professional", max_length=100)
    style: str = Field(default="modern minimal", max_length=200)
    useWordForWord: bool = False
    includeEditorFormat: bool = False


class UpdatePresentationRequest(BaseModel):
    id: str
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slides_json: Optional[Dict[str, Any]] = None


class GenerateBlobRequest(BaseModel):
    complexity: float = Field(default=0.6, ge=0, le=1)
    contrast: float = Field(default=0.5, ge=0, le=1)
    color: Optional[str] = None
    size: int = Field(default=400, ge=16, le=1600)

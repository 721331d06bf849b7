"""Generation request models.

Each generation mode has its own request type; ``GenerationRequest`` is the
tagged union of the four, discriminated on ``mode``.
"""

import base64
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

from .character import SceneCharacter


class GenerationMode(str, Enum):
    """Generation mode (one per input tab)."""
    STRUCTURED_VIDEO = "video"
    FREESTYLE_VIDEO = "freestyle"
    IMAGE_TO_VIDEO = "image_to_video"
    TEXT_TO_IMAGE = "image"


class AspectRatio(str, Enum):
    """Aspect ratios supported by the image model."""
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    STANDARD = "4:3"
    STANDARD_PORTRAIT = "3:4"


class UploadedImage(BaseModel):
    """An image attached by the user, kept as base64 and never modified."""

    mime_type: str = Field(..., description="Image MIME type, e.g. image/png")
    data: str = Field(..., description="Base64-encoded image bytes")

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def from_path(cls, path: Path) -> "UploadedImage":
        """Load an image file.

        Raises:
            ValueError: If the file does not look like an image.
        """
        mime_type, _ = mimetypes.guess_type(str(path))
        if not mime_type or not mime_type.startswith("image/"):
            raise ValueError(f"Not an image file: {path}")
        with open(path, "rb") as f:
            data = base64.b64encode(f.read()).decode("ascii")
        return cls(mime_type=mime_type, data=data)

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


class StructuredVideoRequest(BaseModel):
    """Video prompt from idea, setting, styles and characters."""

    mode: Literal[GenerationMode.STRUCTURED_VIDEO] = GenerationMode.STRUCTURED_VIDEO
    main_idea: str
    setting: str = ""
    styles: List[str] = Field(default_factory=list)
    characters: List[SceneCharacter] = Field(default_factory=list)


class FreestyleVideoRequest(BaseModel):
    """Video prompt from a free-form description."""

    mode: Literal[GenerationMode.FREESTYLE_VIDEO] = GenerationMode.FREESTYLE_VIDEO
    raw_text: str


class ImageToVideoRequest(BaseModel):
    """Video prompt from an uploaded image."""

    mode: Literal[GenerationMode.IMAGE_TO_VIDEO] = GenerationMode.IMAGE_TO_VIDEO
    image: UploadedImage
    supplemental_idea: str = ""
    dialogues: List[str] = Field(default_factory=list)


class TextToImageRequest(BaseModel):
    """Image from idea, setting, styles and characters (dialogue unused)."""

    mode: Literal[GenerationMode.TEXT_TO_IMAGE] = GenerationMode.TEXT_TO_IMAGE
    idea: str
    setting: str = ""
    styles: List[str] = Field(default_factory=list)
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    characters: List[SceneCharacter] = Field(default_factory=list)


class CharacterAnalysisRequest(BaseModel):
    """Character description from an image (library helper, not a mode)."""

    image: UploadedImage


GenerationRequest = Annotated[
    Union[
        StructuredVideoRequest,
        FreestyleVideoRequest,
        ImageToVideoRequest,
        TextToImageRequest,
    ],
    Field(discriminator="mode"),
]

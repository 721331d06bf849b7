"""Data models for prompt composition and generation."""

from .character import Character, SceneCharacter
from .request import (
    AspectRatio,
    GenerationMode,
    UploadedImage,
    StructuredVideoRequest,
    FreestyleVideoRequest,
    ImageToVideoRequest,
    TextToImageRequest,
    CharacterAnalysisRequest,
    GenerationRequest,
)
from .result import GenerationResult

__all__ = [
    "Character",
    "SceneCharacter",
    "AspectRatio",
    "GenerationMode",
    "UploadedImage",
    "StructuredVideoRequest",
    "FreestyleVideoRequest",
    "ImageToVideoRequest",
    "TextToImageRequest",
    "CharacterAnalysisRequest",
    "GenerationRequest",
    "GenerationResult",
]

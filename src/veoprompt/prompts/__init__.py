"""Prompt templates: one fixed system instruction and renderer per task."""

from typing import Dict

from ..models import GenerationMode
from .base import (
    FALLBACK_SETTING,
    NO_CHARACTERS,
    NO_DESCRIPTION,
    Contents,
    PromptTemplate,
    characters_inline,
    characters_with_dialogue,
    format_character,
)
from .character import CharacterAnalysisTemplate
from .image import TextToImageTemplate, describe_styles, ensure_aspect_ratio
from .video import FreestyleVideoTemplate, ImageToVideoTemplate, StructuredVideoTemplate

_TEMPLATES: Dict[GenerationMode, PromptTemplate] = {
    GenerationMode.STRUCTURED_VIDEO: StructuredVideoTemplate(),
    GenerationMode.FREESTYLE_VIDEO: FreestyleVideoTemplate(),
    GenerationMode.IMAGE_TO_VIDEO: ImageToVideoTemplate(),
    GenerationMode.TEXT_TO_IMAGE: TextToImageTemplate(),
}

character_analysis_template = CharacterAnalysisTemplate()


def template_for(mode: GenerationMode) -> PromptTemplate:
    """Return the template for a generation mode."""
    return _TEMPLATES[GenerationMode(mode)]


__all__ = [
    "Contents",
    "PromptTemplate",
    "StructuredVideoTemplate",
    "FreestyleVideoTemplate",
    "ImageToVideoTemplate",
    "TextToImageTemplate",
    "CharacterAnalysisTemplate",
    "character_analysis_template",
    "template_for",
    "ensure_aspect_ratio",
    "describe_styles",
    "format_character",
    "characters_inline",
    "characters_with_dialogue",
    "FALLBACK_SETTING",
    "NO_CHARACTERS",
    "NO_DESCRIPTION",
]

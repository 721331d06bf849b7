"""Text-to-image prompt template and aspect-ratio marker repair."""

import re
from typing import List, Union

from ..models import AspectRatio, TextToImageRequest
from .base import (
    FALLBACK_SETTING,
    Contents,
    PromptTemplate,
    characters_inline,
    or_fallback,
)

FALLBACK_IMAGE_STYLE = "photorealistic, cinematic, 8K, high detail"

# Style tags offered in the image form, mapped to what the model is told
IMAGE_STYLE_DESCRIPTIONS = {
    "3D Hoạt hình": "3D animation, Pixar style, charming, detailed, high resolution",
    "Hiện thực": "photorealistic, cinematic, 8K, high detail, professional photography",
}

_AR_MARKER = re.compile(r"\s*--ar(?:\s*=?\s*[\d.]+\s*:\s*[\d.]+|\b)")
_TRAILING_SEPARATORS = re.compile(r"[\s,]+$")

TEXT_TO_IMAGE_INSTRUCTION = """You are an expert prompt creator for AI image generation models like Imagen. Your task is to convert user-provided information, often written in Vietnamese, into a single, detailed, and descriptive image prompt in English.

**REQUIREMENTS:**
1.  **Language:** The entire output prompt must be in **English**.
2.  **Detail:** Don't just list the information. Weave it into a cohesive scene description. Add rich details about the subject, environment, lighting, atmosphere, and character expressions to create a vivid picture.
3.  **Composition:** Frame the scene for the requested aspect ratio.
4.  **Format:** Return only a single, coherent paragraph. DO NOT use markdown. End the paragraph with the aspect ratio marker exactly as given, for example `--ar 16:9`.

**EXAMPLE:**
Based on "cô gái ngồi bên cửa sổ, trời mưa", the output prompt should be something like this:
---
A melancholic young Vietnamese woman with long dark hair sits by a large window, raindrops streaming down the glass. The room is dimly lit, with a soft, cool light filtering through the rainy window, casting gentle reflections on her thoughtful face. She gazes out at the gray, wet world, a cup of steaming tea held in her hands. The atmosphere is quiet, contemplative, and slightly nostalgic. Photorealistic, cinematic lighting, 8K --ar 16:9
---"""


def describe_styles(styles: List[str]) -> str:
    """Expand image style tags into descriptive phrases."""
    if not styles:
        return FALLBACK_IMAGE_STYLE
    return ", ".join(IMAGE_STYLE_DESCRIPTIONS.get(style, style) for style in styles)


def ensure_aspect_ratio(text: str, ratio: Union[AspectRatio, str]) -> str:
    """Make ``text`` end with exactly one ``--ar <ratio>`` marker.

    Existing markers (right or wrong) are removed and trailing commas are
    stripped before the marker is appended.
    """
    value = ratio.value if isinstance(ratio, AspectRatio) else ratio
    body = _TRAILING_SEPARATORS.sub("", _AR_MARKER.sub("", text))
    if not body:
        return f"--ar {value}"
    return f"{body} --ar {value}"


class TextToImageTemplate(PromptTemplate[TextToImageRequest]):
    """Enriched English image prompt from idea, setting, styles and characters."""

    @property
    def name(self) -> str:
        return "text_to_image"

    @property
    def system_instruction(self) -> str:
        return TEXT_TO_IMAGE_INSTRUCTION

    def render(self, request: TextToImageRequest) -> Contents:
        lines = [
            "Please generate a rich, detailed, and single-paragraph English image prompt "
            "based on the following details:",
            f'- Main Idea: "{request.idea}"',
            f'- Setting: "{or_fallback(request.setting, FALLBACK_SETTING)}"',
            f'- Characters: "{characters_inline(request.characters)}"',
            f'- Desired Visual Style: "{describe_styles(request.styles)}"',
            f'- Aspect Ratio: "--ar {request.aspect_ratio.value}"',
        ]
        return "\n".join(lines) + "\n"

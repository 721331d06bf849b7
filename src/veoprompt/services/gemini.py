"""Google Gemini / Imagen API client wrapper."""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import config
from ..models import UploadedImage
from ..prompts import Contents

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async client wrapper for Gemini text generation and Imagen synthesis.

    Errors from the SDK are logged and re-raised unchanged; callers decide how
    to present them.
    """

    def __init__(
        self,
        api_key: str,
        text_model: Optional[str] = None,
        image_model: Optional[str] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Google AI API key.
            text_model: Text model name. Defaults to config.text_model.
            image_model: Image model name. Defaults to config.image_model.
        """
        if not api_key or not api_key.strip():
            raise ValueError("Gemini API key not provided")

        self._client = genai.Client(api_key=api_key)
        self._text_model = text_model or config.text_model
        self._image_model = image_model or config.image_model

    @property
    def text_model(self) -> str:
        return self._text_model

    @property
    def image_model(self) -> str:
        return self._image_model

    @staticmethod
    def _to_sdk_contents(contents: Contents):
        if isinstance(contents, str):
            return contents

        parts = []
        for part in contents:
            if isinstance(part, UploadedImage):
                parts.append(types.Part.from_bytes(data=part.to_bytes(), mime_type=part.mime_type))
            else:
                parts.append(types.Part.from_text(text=part))
        return parts

    @staticmethod
    async def _run(fn: Callable[[], Any]) -> Any:
        """Run a blocking SDK call in the loop's thread executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def generate_text(self, contents: Contents, system_instruction: str) -> str:
        """Generate text with a system instruction.

        Args:
            contents: Prompt text, or image and text parts.
            system_instruction: Task description for the model.

        Returns:
            The response text, stripped.

        Raises:
            google.genai.errors.APIError: If the API request fails.
            RuntimeError: If the response has no text.
        """
        logger.debug(f"Sending request to {self._text_model}")

        def _generate():
            return self._client.models.generate_content(
                model=self._text_model,
                contents=self._to_sdk_contents(contents),
                config=types.GenerateContentConfig(system_instruction=system_instruction),
            )

        try:
            response = await self._run(_generate)
        except genai_errors.APIError as e:
            logger.error(f"Gemini API call failed: {e}")
            raise

        text = response.text
        if not text:
            raise RuntimeError("Gemini returned an empty response")
        logger.debug(f"Received response of length: {len(text)}")
        return text.strip()

    async def generate_images(
        self,
        prompt: str,
        count: int = 1,
        aspect_ratio: str = "16:9",
        output_mime_type: str = "image/jpeg",
    ) -> List[bytes]:
        """Generate images from a text prompt.

        Args:
            prompt: Image description, used verbatim.
            count: Number of images to generate.
            aspect_ratio: Image aspect ratio ('1:1', '16:9', '9:16', '4:3', '3:4').
            output_mime_type: Output image format.

        Returns:
            Raw bytes of each generated image.

        Raises:
            google.genai.errors.APIError: If the API request fails.
        """
        logger.info(f"Generating image with Imagen: {prompt[:50]}...")

        def _generate():
            return self._client.models.generate_images(
                model=self._image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=count,
                    aspect_ratio=aspect_ratio,
                    output_mime_type=output_mime_type,
                ),
            )

        try:
            response = await self._run(_generate)
        except genai_errors.APIError as e:
            logger.error(f"Imagen API call failed: {e}")
            raise

        images = [
            generated.image.image_bytes
            for generated in (response.generated_images or [])
            if generated.image and generated.image.image_bytes
        ]
        logger.info(f"Received {len(images)} image(s)")
        return images

"""Generation result model."""

from typing import List, Optional
from pydantic import BaseModel, Field


class GenerationResult(BaseModel):
    """Output of one generation call.

    ``prompt_text`` is always the text that was produced or, for images, the
    text that was actually sent to the image model.
    """

    prompt_text: str = Field(..., description="Generated or used prompt text")
    media: Optional[List[bytes]] = Field(None, description="Generated image bytes")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def has_media(self) -> bool:
        return bool(self.media)

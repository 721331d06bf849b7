"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _default_storage_path() -> Path:
    return Path(
        os.getenv("VEOPROMPT_STORAGE", str(Path.home() / ".veoprompt" / "storage.json"))
    ).expanduser()


class Config(BaseModel):
    """Application configuration.

    The Gemini API key is deliberately absent: it is only ever entered by the
    user (``veoprompt key set``) and kept in the local store.
    """

    # Model settings
    text_model: str = Field(
        default_factory=lambda: os.getenv("VEOPROMPT_TEXT_MODEL", "gemini-2.5-flash"),
        description="Gemini model used for prompt writing and image analysis"
    )
    image_model: str = Field(
        default_factory=lambda: os.getenv("VEOPROMPT_IMAGE_MODEL", "imagen-4.0-generate-001"),
        description="Imagen model used for image synthesis"
    )
    image_mime_type: str = Field(
        default="image/jpeg",
        description="Output MIME type for generated images"
    )
    number_of_images: int = Field(
        default=1,
        description="Images requested per text-to-image generation",
        ge=1,
        le=4,
    )

    # Paths
    storage_path: Path = Field(
        default_factory=_default_storage_path,
        description="JSON file backing the local key-value store"
    )

    class Config:
        """Pydantic config."""
        frozen = False


# Global config instance
config = Config()

"""Character data models."""

from pydantic import BaseModel, Field


class Character(BaseModel):
    """A reusable character profile from the library."""

    id: int = Field(..., description="Unique id (creation timestamp in ms)")
    name: str = Field(..., description="User-facing name")
    description: str = Field(default="", description="Free-text appearance/personality notes")

    class Config:
        """Pydantic config."""
        frozen = False


class SceneCharacter(BaseModel):
    """A library character placed in one scene, with its own dialogue.

    Holds a reference to the library ``Character`` rather than a copy, so
    edits made in the library show up in scenes that already use it.
    """

    character: Character = Field(..., description="Library character")
    dialogue: str = Field(default="", description="Line spoken in this scene")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def id(self) -> int:
        return self.character.id

    @property
    def name(self) -> str:
        return self.character.name

    @property
    def description(self) -> str:
        return self.character.description

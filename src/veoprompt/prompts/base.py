"""Base prompt template abstraction."""

from abc import ABC, abstractmethod
from typing import Generic, List, Sequence, TypeVar, Union

from ..models import SceneCharacter, UploadedImage

RequestT = TypeVar("RequestT")

# What a template hands to the text model: plain text, or image + text parts.
Part = Union[UploadedImage, str]
Contents = Union[str, List[Part]]

NO_CHARACTERS = "Not specified"
NO_DESCRIPTION = "No description"
FALLBACK_SETTING = "An interesting and fitting location"


class PromptTemplate(ABC, Generic[RequestT]):
    """A fixed system instruction plus a renderer for one request type.

    Subclasses define the instruction as a static string and turn a request
    into the contents sent alongside it. Rendering is deterministic and never
    emits an empty field value.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the template's name."""
        ...

    @property
    @abstractmethod
    def system_instruction(self) -> str:
        """Return the system instruction for this task."""
        ...

    @abstractmethod
    def render(self, request: RequestT) -> Contents:
        """Render the request into model contents.

        Args:
            request: The request for this template's mode.

        Returns:
            A string, or a list of image and text parts.
        """
        ...


def or_fallback(value: str, fallback: str) -> str:
    """Return ``value``, or ``fallback`` when it is blank."""
    return value if value and value.strip() else fallback


def format_character(character: SceneCharacter, with_dialogue: bool = False) -> str:
    """Render ``Name (Description)``, optionally followed by the dialogue."""
    text = f"{character.name} ({or_fallback(character.description, NO_DESCRIPTION)})"
    if with_dialogue and character.dialogue and character.dialogue.strip():
        text += f' says: "{character.dialogue.strip()}"'
    return text


def characters_with_dialogue(characters: Sequence[SceneCharacter]) -> str:
    """One character per line, with dialogue where given."""
    if not characters:
        return NO_CHARACTERS
    return "\n".join(format_character(c, with_dialogue=True) for c in characters)


def characters_inline(characters: Sequence[SceneCharacter]) -> str:
    """Comma-separated characters, dialogue left out."""
    if not characters:
        return NO_CHARACTERS
    return ", ".join(format_character(c) for c in characters)

"""Scene composition: turns form state into a generation request."""

import logging
from typing import Dict, Iterable, List, Optional

from .characters import CharacterRegistry
from .models import (
    AspectRatio,
    Character,
    FreestyleVideoRequest,
    GenerationMode,
    ImageToVideoRequest,
    SceneCharacter,
    StructuredVideoRequest,
    TextToImageRequest,
    UploadedImage,
)

logger = logging.getLogger(__name__)

VIDEO_STYLES = {
    "Hiện thực": "Tái tạo thế giới thực một cách chân thực, như máy ảnh.",
    "Điện ảnh": "Tạo cảm giác như một bộ phim với ánh sáng, góc quay và màu sắc chuyên nghiệp.",
    "Hoạt hình": "Hoạt hình 3D hiện đại, mặc định theo phong cách Pixar. Rõ ràng và thân thiện.",
}
IMAGE_STYLES = ["3D Hoạt hình", "Hiện thực"]

DEFAULT_VIDEO_STYLES = ["Hoạt hình"]
DEFAULT_IMAGE_STYLES = ["3D Hoạt hình"]


class CompositionError(ValueError):
    """Raised when the form state cannot produce a valid request."""


class StyleSelection:
    """Ordered toggle set of style tags.

    A deselected style remembers its position, so selecting it again puts it
    back where it was. Styles never selected before are appended.
    """

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self._styles: List[str] = []
        self._slots: Dict[str, int] = {}
        for style in initial:
            if style not in self._styles:
                self._styles.append(style)

    def __contains__(self, style: str) -> bool:
        return style in self._styles

    def __len__(self) -> int:
        return len(self._styles)

    def toggle(self, style: str) -> None:
        if style in self._styles:
            self._slots[style] = self._styles.index(style)
            self._styles.remove(style)
        elif style in self._slots:
            self._styles.insert(min(self._slots.pop(style), len(self._styles)), style)
        else:
            self._styles.append(style)

    def to_list(self) -> List[str]:
        return list(self._styles)


class SceneSelection:
    """Characters placed in a scene, unique by id, each with its own dialogue."""

    def __init__(self) -> None:
        self._entries: List[SceneCharacter] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, character_id: int) -> bool:
        return any(entry.id == character_id for entry in self._entries)

    def add(self, character: Character) -> None:
        if character.id in self:
            return
        self._entries.append(SceneCharacter(character=character))

    def remove(self, character_id: int) -> None:
        self._entries = [e for e in self._entries if e.id != character_id]

    def set_dialogue(self, character_id: int, dialogue: str) -> None:
        for entry in self._entries:
            if entry.id == character_id:
                entry.dialogue = dialogue
                return

    def available(self, registry: CharacterRegistry) -> List[Character]:
        """Library characters not yet in this scene."""
        return [c for c in registry.list() if c.id not in self]

    def to_list(self) -> List[SceneCharacter]:
        return list(self._entries)


class SceneComposer:
    """Holds the input fields of every mode and builds requests from them.

    ``main_idea`` and ``setting`` are shared between modes, so switching tabs
    keeps what the user typed.
    """

    def __init__(self) -> None:
        self.active_mode: GenerationMode = GenerationMode.STRUCTURED_VIDEO
        self.main_idea: str = ""
        self.setting: str = ""
        self.freestyle_text: str = ""
        self.image: Optional[UploadedImage] = None
        self.image_dialogues: List[str] = []
        self.aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
        self.video_styles = StyleSelection(DEFAULT_VIDEO_STYLES)
        self.image_styles = StyleSelection(DEFAULT_IMAGE_STYLES)
        self.video_characters = SceneSelection()
        self.image_characters = SceneSelection()

    def switch_mode(self, mode: GenerationMode) -> None:
        if mode != GenerationMode.IMAGE_TO_VIDEO:
            self.image = None
        self.active_mode = mode

    def evict(self, character_id: int) -> None:
        """Drop a deleted library character from every scene."""
        self.video_characters.remove(character_id)
        self.image_characters.remove(character_id)

    def add_dialogue(self, text: str = "") -> None:
        self.image_dialogues.append(text)

    def set_dialogue_line(self, index: int, text: str) -> None:
        if 0 <= index < len(self.image_dialogues):
            self.image_dialogues[index] = text

    def remove_dialogue_line(self, index: int) -> None:
        if 0 <= index < len(self.image_dialogues):
            del self.image_dialogues[index]

    def can_build(self, mode: Optional[GenerationMode] = None) -> bool:
        mode = mode or self.active_mode
        if mode == GenerationMode.FREESTYLE_VIDEO:
            return bool(self.freestyle_text.strip())
        if mode == GenerationMode.IMAGE_TO_VIDEO:
            return self.image is not None
        return bool(self.main_idea.strip())

    def build(self, mode: Optional[GenerationMode] = None):
        """Build the request for a mode (the active one by default).

        Raises:
            CompositionError: If a required field is missing.
        """
        mode = mode or self.active_mode
        if not self.can_build(mode):
            raise CompositionError(f"Missing required input for {mode.value} generation")
        logger.debug(f"Building {mode.value} request")

        if mode == GenerationMode.STRUCTURED_VIDEO:
            return StructuredVideoRequest(
                main_idea=self.main_idea,
                setting=self.setting,
                styles=self.video_styles.to_list(),
                characters=self.video_characters.to_list(),
            )
        if mode == GenerationMode.FREESTYLE_VIDEO:
            return FreestyleVideoRequest(raw_text=self.freestyle_text)
        if mode == GenerationMode.IMAGE_TO_VIDEO:
            return ImageToVideoRequest(
                image=self.image,
                supplemental_idea=self.main_idea,
                dialogues=list(self.image_dialogues),
            )
        return TextToImageRequest(
            idea=self.main_idea,
            setting=self.setting,
            styles=self.image_styles.to_list(),
            aspect_ratio=self.aspect_ratio,
            characters=self.image_characters.to_list(),
        )

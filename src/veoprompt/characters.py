"""Character library: reusable character profiles and in-progress edits."""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .models import Character

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List[Character]], None]
RemovalListener = Callable[[int], None]


# Phrases offered while writing a character description
DESCRIPTION_SUGGESTIONS: Dict[str, List[str]] = {
    "Ngoại hình": [
        "tóc đen dài", "mắt bồ câu", "nước da trắng hồng", "dáng người thon thả",
        "khuôn mặt trái xoan", "nụ cười tỏa nắng", "vẻ mặt phúc hậu",
    ],
    "Trang phục": [
        "mặc áo dài truyền thống", "khoác áo bà ba", "đội nón lá",
        "mặc đồng phục học sinh", "trang phục công sở thanh lịch", "mặc áo sơ mi trắng",
    ],
    "Tính cách": [
        "trầm tư, ít nói", "vui vẻ, hòa đồng", "dịu dàng, nhân hậu",
        "nghiêm nghị, quyết đoán", "thông minh, nhanh nhẹn", "chân thành, giản dị",
    ],
    "Hành động": [
        "đang ngồi uống trà", "nhìn ra cửa sổ", "đi dạo trong vườn",
        "cười nói vui vẻ", "làm việc trên máy tính", "đọc một cuốn sách",
    ],
}


def append_suggestion(description: str, suggestion: str) -> str:
    """Append a suggested phrase, separated by a single space when needed."""
    separator = " " if description and not description.endswith(" ") else ""
    return description + separator + suggestion


def _require_name(name: str) -> str:
    if not name or not name.strip():
        raise ValueError("Character name cannot be empty")
    return name


class CharacterRegistry:
    """Ordered, in-memory library of characters.

    Identity is the numeric id; names may repeat. Listeners are notified after
    every mutation so the owner can persist the library and drop removed
    characters from scene selections.
    """

    def __init__(self, characters: Optional[List[Character]] = None) -> None:
        self._characters: List[Character] = list(characters or [])
        self._last_id = max((c.id for c in self._characters), default=0)
        self._change_listeners: List[ChangeListener] = []
        self._removal_listeners: List[RemovalListener] = []

    def __len__(self) -> int:
        return len(self._characters)

    def __iter__(self) -> Iterator[Character]:
        return iter(list(self._characters))

    def on_change(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def on_remove(self, listener: RemovalListener) -> None:
        self._removal_listeners.append(listener)

    def _notify_change(self) -> None:
        snapshot = self.list()
        for listener in self._change_listeners:
            listener(snapshot)

    def _next_id(self) -> int:
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    def list(self) -> List[Character]:
        """Return characters in insertion order."""
        return list(self._characters)

    def get(self, character_id: int) -> Optional[Character]:
        for character in self._characters:
            if character.id == character_id:
                return character
        return None

    def find(self, name: str) -> Optional[Character]:
        """Return the first character with the given name."""
        for character in self._characters:
            if character.name == name:
                return character
        return None

    def add(self, name: str, description: str = "") -> Character:
        """Create a character.

        Raises:
            ValueError: If the name is blank. The registry is left unchanged.
        """
        _require_name(name)
        character = Character(id=self._next_id(), name=name, description=description)
        self._characters.append(character)
        logger.info(f"Added character {character.id}: {name}")
        self._notify_change()
        return character

    def update(
        self,
        character_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Character]:
        """Replace a character's fields in place.

        Returns:
            The updated character, or None if the id is unknown.

        Raises:
            ValueError: If the new name is blank.
        """
        character = self.get(character_id)
        if character is None:
            return None
        if name is not None:
            character.name = _require_name(name)
        if description is not None:
            character.description = description
        logger.info(f"Updated character {character_id}")
        self._notify_change()
        return character

    def remove(self, character_id: int) -> None:
        """Delete a character and evict it from scene selections."""
        if self.get(character_id) is None:
            return
        self._characters = [c for c in self._characters if c.id != character_id]
        logger.info(f"Removed character {character_id}")
        for listener in self._removal_listeners:
            listener(character_id)
        self._notify_change()

    def to_json(self) -> str:
        return json.dumps([c.model_dump() for c in self._characters], ensure_ascii=False)

    @classmethod
    def from_json(cls, text: Optional[str]) -> "CharacterRegistry":
        """Build a registry from a JSON array; unreadable input gives an empty one."""
        if not text:
            return cls()
        try:
            data = json.loads(text)
            if not isinstance(data, list):
                raise ValueError("Character data is not a list")
            characters = [Character.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable character library: {e}")
            return cls()
        return cls(characters)

    def export_yaml(self, path: Path) -> None:
        """Save the library to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                {"characters": [c.model_dump(exclude={"id"}) for c in self._characters]},
                f,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )

    def import_yaml(self, path: Path) -> List[Character]:
        """Add every character from a YAML export, with fresh ids.

        Entries without a usable name are skipped.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        entries = data.get("characters", []) if isinstance(data, dict) else data
        added: List[Character] = []
        for entry in entries or []:
            if not isinstance(entry, dict):
                continue
            name = str(entry.get("name") or "")
            if not name.strip():
                logger.warning(f"Skipping character without a name: {entry}")
                continue
            added.append(self.add(name, str(entry.get("description") or "")))
        return added


class CharacterDraft(BaseModel):
    """A character being created or edited, not yet saved to the library."""

    id: int = Field(..., description="Id of the edited character, or a fresh one")
    name: str = Field(default="")
    description: str = Field(default="")
    is_new: bool = Field(default=True, description="True when creating a character")
    analysis_error: Optional[str] = Field(
        None, description="Error from the last image analysis, shown next to the description"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def new(cls) -> "CharacterDraft":
        return cls(id=int(time.time() * 1000))

    @classmethod
    def of(cls, character: Character) -> "CharacterDraft":
        return cls(
            id=character.id,
            name=character.name,
            description=character.description,
            is_new=False,
        )

    @property
    def can_save(self) -> bool:
        return bool(self.name.strip())

    def add_suggestion(self, suggestion: str) -> None:
        self.description = append_suggestion(self.description, suggestion)

    def commit(self, registry: CharacterRegistry) -> Optional[Character]:
        """Save the draft into the registry.

        Raises:
            ValueError: If the name is blank.
        """
        if self.is_new or registry.get(self.id) is None:
            return registry.add(self.name, self.description)
        return registry.update(self.id, name=self.name, description=self.description)

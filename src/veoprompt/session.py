"""User session: wires the character library, composer, orchestrator and store."""

import logging
from typing import List, Optional

from .characters import CharacterDraft, CharacterRegistry
from .composer import SceneComposer
from .models import Character, GenerationMode, GenerationResult, UploadedImage
from .orchestrator import GenerationOrchestrator
from .services.storage import LocalStore

logger = logging.getLogger(__name__)

API_KEY_SLOT = "gemini-api-key"
CHARACTERS_SLOT = "veo-project-characters"


class Session:
    """State of one user session.

    Loads the API key and character library once, saves the library on every
    change, and gates generation on the composer's validation.
    """

    def __init__(
        self,
        store: Optional[LocalStore] = None,
        orchestrator: Optional[GenerationOrchestrator] = None,
    ) -> None:
        self.store = store or LocalStore()
        self.orchestrator = orchestrator or GenerationOrchestrator()
        self.composer = SceneComposer()
        self.registry = CharacterRegistry()
        self.draft: Optional[CharacterDraft] = None
        self._api_key = ""
        self._loaded = False
        self._wire_registry()

    def _wire_registry(self) -> None:
        self.registry.on_change(self._save_characters)
        self.registry.on_remove(self._on_character_removed)

    def _save_characters(self, _characters: List[Character]) -> None:
        try:
            self.store.save(CHARACTERS_SLOT, self.registry.to_json())
        except OSError as e:
            logger.error(f"Could not save characters: {e}")

    def _on_character_removed(self, character_id: int) -> None:
        self.composer.evict(character_id)
        if self.draft is not None and self.draft.id == character_id:
            self.draft = None

    def load(self) -> None:
        """Read the API key and character library from the store (once)."""
        if self._loaded:
            return
        self._loaded = True

        stored_key = self.store.load(API_KEY_SLOT)
        if stored_key and stored_key.strip():
            self._api_key = stored_key.strip()
            self.orchestrator.set_credential(self._api_key)
        else:
            self.orchestrator.credential_requested = True

        self.registry = CharacterRegistry.from_json(self.store.load(CHARACTERS_SLOT))
        self._wire_registry()
        logger.info(f"Loaded {len(self.registry)} character(s)")

    # API key

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def credential_requested(self) -> bool:
        return self.orchestrator.credential_requested

    def set_api_key(self, api_key: str) -> bool:
        """Store and use a new API key. Blank keys are ignored.

        Raises:
            OSError: If the key cannot be written to the store.
        """
        key = (api_key or "").strip()
        if not key:
            return False
        self.store.save(API_KEY_SLOT, key)
        self._api_key = key
        self.orchestrator.set_credential(key)
        self.orchestrator.credential_requested = False
        self.orchestrator.clear_error()
        return True

    def clear_api_key(self) -> None:
        self._api_key = ""
        self.store.remove(API_KEY_SLOT)
        self.orchestrator.set_credential(None)
        self.orchestrator.credential_requested = True

    # Character library

    def add_character(self, name: str, description: str = "") -> Character:
        return self.registry.add(name, description)

    def update_character(
        self,
        character_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Character]:
        return self.registry.update(character_id, name=name, description=description)

    def remove_character(self, character_id: int) -> None:
        self.registry.remove(character_id)

    def start_new_character(self) -> CharacterDraft:
        self.draft = CharacterDraft.new()
        return self.draft

    def edit_character(self, character_id: int) -> Optional[CharacterDraft]:
        character = self.registry.get(character_id)
        if character is None:
            return None
        self.draft = CharacterDraft.of(character)
        return self.draft

    def save_draft(self) -> Optional[Character]:
        """Commit the draft to the library; a draft without a name stays open."""
        if self.draft is None or not self.draft.can_save:
            return None
        character = self.draft.commit(self.registry)
        self.draft = None
        return character

    def cancel_draft(self) -> None:
        self.draft = None

    async def analyze_draft_image(self, image: UploadedImage) -> bool:
        """Fill the draft description from an image.

        On failure only ``draft.analysis_error`` changes.
        """
        if self.draft is None:
            return False
        draft = self.draft
        draft.analysis_error = None

        outcome = await self.orchestrator.analyze_character(image)
        if outcome is None:
            return False
        if not outcome.ok:
            draft.analysis_error = outcome.error
            return False
        draft.description = outcome.description
        return True

    # Generation

    @property
    def result(self) -> Optional[GenerationResult]:
        return self.orchestrator.result

    @property
    def error(self) -> Optional[str]:
        return self.orchestrator.error

    @property
    def is_busy(self) -> bool:
        return self.orchestrator.is_busy or self.orchestrator.analyzing

    def switch_mode(self, mode: GenerationMode) -> None:
        """Change the active input tab, clearing the last result and error."""
        self.orchestrator.clear_result()
        self.orchestrator.clear_error()
        self.composer.switch_mode(mode)

    def can_generate(self, mode: Optional[GenerationMode] = None) -> bool:
        return not self.is_busy and self.composer.can_build(mode)

    async def generate(self, mode: Optional[GenerationMode] = None) -> Optional[GenerationResult]:
        """Generate for a mode (the active one by default).

        Returns None without calling the API when busy or when a required
        field is missing.
        """
        if self.is_busy:
            return None
        if not self.composer.can_build(mode):
            logger.info(f"Not generating: missing input for {(mode or self.composer.active_mode).value}")
            return None
        request = self.composer.build(mode)
        return await self.orchestrator.generate(request)

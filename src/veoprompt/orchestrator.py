"""Generation orchestration: one remote call at a time, one result slot."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .config import config
from .models import (
    CharacterAnalysisRequest,
    GenerationMode,
    GenerationResult,
    TextToImageRequest,
    UploadedImage,
)
from .prompts import character_analysis_template, ensure_aspect_ratio, template_for
from .services.errors import (
    ErrorKind,
    MissingCredentialError,
    classify_error,
    should_request_credential,
    user_message,
)
from .services.gemini import GeminiClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], GeminiClient]


class OrchestratorState(str, Enum):
    """Orchestrator state."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


@dataclass
class AnalysisOutcome:
    """Result of describing a character from an image."""

    description: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.description is not None


class GenerationOrchestrator:
    """Runs generation requests against the remote API, one at a time.

    A request issued while another call (generation or character analysis)
    is in flight is ignored. Failures never
    propagate: they are classified, logged and exposed through ``error``,
    ``error_kind`` and ``credential_requested``. The client handle is built
    lazily and rebuilt only when the API key changes.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None) -> None:
        """Initialize the orchestrator.

        Args:
            client_factory: Builds a client from an API key. Defaults to GeminiClient.
        """
        self._client_factory = client_factory or GeminiClient
        self._credential = ""
        self._client: Optional[GeminiClient] = None

        self.state = OrchestratorState.IDLE
        self.mode: Optional[GenerationMode] = None
        self.result: Optional[GenerationResult] = None
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self.credential_requested = False
        self.analyzing = False

    @property
    def is_busy(self) -> bool:
        return self.state == OrchestratorState.IN_FLIGHT

    @property
    def has_credential(self) -> bool:
        return bool(self._credential)

    def set_credential(self, api_key: Optional[str]) -> None:
        """Use a new API key; the client is rebuilt on the next call."""
        key = (api_key or "").strip()
        if key == self._credential:
            return
        self._credential = key
        self._client = None
        logger.info("API key changed; client will be rebuilt" if key else "API key cleared")

    def clear_error(self) -> None:
        self.error = None
        self.error_kind = None

    def clear_result(self) -> None:
        self.result = None

    def _get_client(self) -> GeminiClient:
        if not self._credential:
            raise MissingCredentialError()
        if self._client is None:
            self._client = self._client_factory(self._credential)
        return self._client

    async def generate(self, request) -> Optional[GenerationResult]:
        """Run one generation request.

        Args:
            request: Any GenerationRequest variant.

        Returns:
            The result, or None if the call failed or another was in flight.
        """
        if self.is_busy:
            logger.debug(f"Ignoring {request.mode.value} request while {self.mode.value} is in flight")
            return None
        if self.analyzing:
            logger.debug(f"Ignoring {request.mode.value} request while a character is being analyzed")
            return None

        self.state = OrchestratorState.IN_FLIGHT
        self.mode = request.mode
        self.result = None
        self.clear_error()
        logger.info(f"Starting {request.mode.value} generation")

        try:
            client = self._get_client()
            if isinstance(request, TextToImageRequest):
                result = await self._generate_image(client, request)
            else:
                result = await self._generate_prompt(client, request)
            self.result = result
            logger.info(f"Finished {request.mode.value} generation")
            return result
        except Exception as e:
            self._handle_error(e)
            return None
        finally:
            self.state = OrchestratorState.IDLE
            self.mode = None

    async def _generate_prompt(self, client: GeminiClient, request) -> GenerationResult:
        template = template_for(request.mode)
        text = await client.generate_text(template.render(request), template.system_instruction)
        return GenerationResult(prompt_text=text)

    async def _generate_image(
        self, client: GeminiClient, request: TextToImageRequest
    ) -> GenerationResult:
        """Enrich the idea into an English prompt, then synthesize from it verbatim."""
        template = template_for(GenerationMode.TEXT_TO_IMAGE)
        enriched = await client.generate_text(template.render(request), template.system_instruction)
        prompt = ensure_aspect_ratio(enriched, request.aspect_ratio)

        images = await client.generate_images(
            prompt,
            count=config.number_of_images,
            aspect_ratio=request.aspect_ratio.value,
            output_mime_type=config.image_mime_type,
        )
        return GenerationResult(prompt_text=prompt, media=images)

    def _handle_error(self, exc: Exception) -> None:
        kind = classify_error(exc)
        logger.error(f"Generation failed ({kind.value}): {exc}")
        self.error_kind = kind
        self.error = user_message(kind)
        if should_request_credential(kind):
            self.credential_requested = True

    async def analyze_character(self, image: UploadedImage) -> Optional[AnalysisOutcome]:
        """Describe the character shown in an image.

        Shares the one-call-at-a-time rule with ``generate`` but leaves the
        result and error slots alone and reports failure only in the returned outcome.

        Returns:
            The outcome, or None if an analysis or a generation is already running.
        """
        if self.analyzing or self.is_busy:
            logger.debug("Ignoring character analysis while another call is in flight")
            return None

        self.analyzing = True
        try:
            client = self._get_client()
            request = CharacterAnalysisRequest(image=image)
            description = await client.generate_text(
                character_analysis_template.render(request),
                character_analysis_template.system_instruction,
            )
            return AnalysisOutcome(description=description)
        except Exception as e:
            kind = classify_error(e)
            logger.error(f"Character analysis failed ({kind.value}): {e}")
            return AnalysisOutcome(error=user_message(kind))
        finally:
            self.analyzing = False

import asyncio
from typing import Any, List, Optional

import pytest

from veoprompt.config import config
from veoprompt.services.storage import LocalStore


class FakeClient:
    """Stands in for GeminiClient; records calls and replays canned output."""

    def __init__(
        self,
        api_key: str,
        text: str = "A generated prompt.",
        images: Optional[List[bytes]] = None,
        text_error: Optional[Exception] = None,
        image_error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ):
        self.api_key = api_key
        self.text = text
        self.images = images if images is not None else [b"\xff\xd8jpeg"]
        self.text_error = text_error
        self.image_error = image_error
        self.gate = gate
        self.text_calls: List[Any] = []
        self.image_calls: List[Any] = []

    async def generate_text(self, contents, system_instruction):
        self.text_calls.append((contents, system_instruction))
        if self.gate is not None:
            await self.gate.wait()
        if self.text_error is not None:
            raise self.text_error
        return self.text

    async def generate_images(self, prompt, count=1, aspect_ratio="16:9", output_mime_type="image/jpeg"):
        self.image_calls.append(
            {"prompt": prompt, "count": count, "aspect_ratio": aspect_ratio, "mime": output_mime_type}
        )
        if self.image_error is not None:
            raise self.image_error
        return list(self.images)


class FakeClientFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.clients: List[FakeClient] = []

    def __call__(self, api_key: str) -> FakeClient:
        client = FakeClient(api_key, **self.kwargs)
        self.clients.append(client)
        return client

    @property
    def last(self) -> FakeClient:
        return self.clients[-1]


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "storage.json")


@pytest.fixture
def isolated_storage(tmp_path, monkeypatch):
    path = tmp_path / "cli" / "storage.json"
    monkeypatch.setattr(config, "storage_path", path)
    return path


@pytest.fixture
def make_factory():
    return FakeClientFactory

import json

import pytest
from typer.testing import CliRunner

from veoprompt import __version__
from veoprompt.cli import app
from veoprompt.services.storage import LocalStore
from veoprompt.session import API_KEY_SLOT, CHARACTERS_SLOT

runner = CliRunner()


@pytest.fixture
def factory(make_factory, monkeypatch, isolated_storage):
    fake = make_factory(text="A warm classroom, 8K", images=[b"img-1", b"img-2"])
    monkeypatch.setattr("veoprompt.orchestrator.GeminiClient", fake)
    return fake


@pytest.fixture
def with_key(isolated_storage):
    LocalStore(isolated_storage).save(API_KEY_SLOT, "test-key")


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_key_set_and_clear(isolated_storage):
    result = runner.invoke(app, ["key", "set", "  my-key  "])
    assert result.exit_code == 0
    assert LocalStore(isolated_storage).load(API_KEY_SLOT) == "my-key"

    result = runner.invoke(app, ["key", "clear"])
    assert result.exit_code == 0
    assert LocalStore(isolated_storage).load(API_KEY_SLOT) is None


def test_key_set_rejects_blank(isolated_storage):
    result = runner.invoke(app, ["key", "set", "   "])
    assert result.exit_code == 1
    assert LocalStore(isolated_storage).load(API_KEY_SLOT) is None


def test_character_commands(isolated_storage):
    assert runner.invoke(app, ["characters", "add", "Lan", "-d", "cô giáo trẻ"]).exit_code == 0
    stored = json.loads(LocalStore(isolated_storage).load(CHARACTERS_SLOT))
    lan_id = stored[0]["id"]

    result = runner.invoke(app, ["characters", "list"])
    assert "Lan" in result.stdout
    assert "cô giáo trẻ" in result.stdout

    result = runner.invoke(app, ["characters", "edit", str(lan_id), "--name", "Lan Anh"])
    assert result.exit_code == 0
    assert json.loads(LocalStore(isolated_storage).load(CHARACTERS_SLOT))[0]["name"] == "Lan Anh"

    assert runner.invoke(app, ["characters", "remove", str(lan_id)]).exit_code == 0
    assert runner.invoke(app, ["characters", "remove", str(lan_id)]).exit_code == 1
    assert "empty" in runner.invoke(app, ["characters", "list"]).stdout


def test_character_add_rejects_blank_name(isolated_storage):
    result = runner.invoke(app, ["characters", "add", "  "])
    assert result.exit_code == 1
    assert LocalStore(isolated_storage).load(CHARACTERS_SLOT) is None


def test_character_export_and_import(isolated_storage, tmp_path):
    runner.invoke(app, ["characters", "add", "Lan", "-d", "cô giáo"])
    export = tmp_path / "out" / "characters.yaml"

    assert runner.invoke(app, ["characters", "export", str(export)]).exit_code == 0
    result = runner.invoke(app, ["characters", "import", str(export)])

    assert result.exit_code == 0
    assert "Imported 1" in result.stdout
    names = [c["name"] for c in json.loads(LocalStore(isolated_storage).load(CHARACTERS_SLOT))]
    assert names == ["Lan", "Lan"]


def test_video_without_key_asks_for_one(factory):
    result = runner.invoke(app, ["video", "hai giáo viên nói chuyện"])
    assert result.exit_code == 1
    assert "key set" in result.stdout
    assert factory.clients == []


def test_video_with_characters_and_dialogue(factory, with_key):
    runner.invoke(app, ["characters", "add", "Lan", "-d", "cô giáo"])

    result = runner.invoke(
        app,
        ["video", "hai giáo viên nói chuyện", "--style", "Điện ảnh", "-c", "Lan=Chào các em"],
    )

    assert result.exit_code == 0
    assert "A warm classroom, 8K" in result.stdout
    contents, _ = factory.last.text_calls[0]
    assert 'Lan (cô giáo) says: "Chào các em"' in contents
    assert "Điện ảnh" in contents


def test_video_with_unknown_character_fails(factory, with_key):
    result = runner.invoke(app, ["video", "idea", "-c", "Nobody"])
    assert result.exit_code == 1
    assert factory.clients == []


def test_freestyle_rejects_blank_text(factory, with_key):
    result = runner.invoke(app, ["freestyle", "   "])
    assert result.exit_code == 1
    assert "Missing required input" in result.stdout
    assert factory.clients == []


def test_image_writes_files(factory, with_key, tmp_path):
    out = tmp_path / "images"

    result = runner.invoke(app, ["image", "lớp học", "-a", "4:3", "-o", str(out)])

    assert result.exit_code == 0
    assert "A warm classroom, 8K --ar 4:3" in result.stdout
    assert (out / "image_1.jpg").read_bytes() == b"img-1"
    assert (out / "image_2.jpg").read_bytes() == b"img-2"
    assert factory.last.image_calls[0]["aspect_ratio"] == "4:3"


def test_from_image_sends_image_and_dialogue(factory, with_key, tmp_path):
    picture = tmp_path / "scene.png"
    picture.write_bytes(b"\x89PNG\r\n\x1a\n")

    result = runner.invoke(app, ["from-image", str(picture), "--dialogue", "Xin chào"])

    assert result.exit_code == 0
    contents, _ = factory.last.text_calls[0]
    assert contents[0].mime_type == "image/png"
    assert '"Xin chào"' in contents[1]


def test_from_image_rejects_non_image(factory, with_key, tmp_path):
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")
    result = runner.invoke(app, ["from-image", str(notes)])
    assert result.exit_code == 1
    assert factory.clients == []


def test_describe_character_saves_to_library(factory, with_key, isolated_storage, tmp_path):
    picture = tmp_path / "lan.png"
    picture.write_bytes(b"\x89PNG\r\n\x1a\n")

    result = runner.invoke(app, ["describe-character", str(picture), "--save", "Lan"])

    assert result.exit_code == 0
    stored = json.loads(LocalStore(isolated_storage).load(CHARACTERS_SLOT))
    assert stored[0]["name"] == "Lan"
    assert stored[0]["description"] == "A warm classroom, 8K"


def test_key_set_reports_storage_failure(isolated_storage, monkeypatch):
    def fail(self, key, value):
        raise OSError("read-only file system")

    monkeypatch.setattr(LocalStore, "save", fail)
    result = runner.invoke(app, ["key", "set", "my-key"])

    assert result.exit_code == 1
    assert "read-only file system" in result.stdout
    assert result.exception is None or isinstance(result.exception, SystemExit)

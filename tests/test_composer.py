import pytest

from veoprompt.characters import CharacterRegistry
from veoprompt.composer import (
    CompositionError,
    SceneComposer,
    SceneSelection,
    StyleSelection,
)
from veoprompt.models import (
    AspectRatio,
    FreestyleVideoRequest,
    GenerationMode,
    ImageToVideoRequest,
    StructuredVideoRequest,
    TextToImageRequest,
    UploadedImage,
)

IMAGE = UploadedImage(mime_type="image/png", data="iVBORw0KGgo=")


def test_style_toggle_appends_and_removes_in_order():
    styles = StyleSelection(["Hoạt hình"])
    styles.toggle("Điện ảnh")
    styles.toggle("Hiện thực")
    assert styles.to_list() == ["Hoạt hình", "Điện ảnh", "Hiện thực"]

    styles.toggle("Điện ảnh")
    assert styles.to_list() == ["Hoạt hình", "Hiện thực"]


def test_style_toggle_twice_restores_selection():
    styles = StyleSelection(["Hoạt hình", "Điện ảnh"])
    before = styles.to_list()

    for style in ["Hiện thực", "Hoạt hình"]:
        styles.toggle(style)
        styles.toggle(style)

    assert styles.to_list() == before


def test_reselected_style_returns_to_its_slot():
    styles = StyleSelection(["Hoạt hình", "Điện ảnh", "Hiện thực"])

    styles.toggle("Điện ảnh")
    assert styles.to_list() == ["Hoạt hình", "Hiện thực"]

    styles.toggle("Điện ảnh")
    assert styles.to_list() == ["Hoạt hình", "Điện ảnh", "Hiện thực"]

    styles.toggle("Cổ điển")
    assert styles.to_list()[-1] == "Cổ điển"


def test_default_styles_are_seeded():
    composer = SceneComposer()
    assert composer.video_styles.to_list() == ["Hoạt hình"]
    assert composer.image_styles.to_list() == ["3D Hoạt hình"]


def test_scene_selection_rejects_duplicates_and_remove_is_idempotent():
    registry = CharacterRegistry()
    lan = registry.add("Lan")
    minh = registry.add("Minh")
    selection = SceneSelection()

    selection.add(lan)
    selection.add(minh)
    selection.add(lan)
    assert [c.id for c in selection.to_list()] == [lan.id, minh.id]

    selection.remove(lan.id)
    once = [c.id for c in selection.to_list()]
    selection.remove(lan.id)
    selection.remove(424242)
    assert [c.id for c in selection.to_list()] == once == [minh.id]


def test_dialogue_is_per_scene_and_cleared_on_removal():
    registry = CharacterRegistry()
    lan = registry.add("Lan")
    video = SceneSelection()
    image = SceneSelection()
    video.add(lan)
    image.add(lan)

    video.set_dialogue(lan.id, "Chào các em!")
    assert video.to_list()[0].dialogue == "Chào các em!"
    assert image.to_list()[0].dialogue == ""

    video.remove(lan.id)
    video.add(lan)
    assert video.to_list()[0].dialogue == ""
    assert lan.description == ""


def test_scene_character_follows_library_edits():
    registry = CharacterRegistry()
    lan = registry.add("Lan", "old")
    selection = SceneSelection()
    selection.add(lan)

    registry.update(lan.id, description="new")

    assert selection.to_list()[0].description == "new"


def test_available_excludes_selected_characters():
    registry = CharacterRegistry()
    lan = registry.add("Lan")
    minh = registry.add("Minh")
    selection = SceneSelection()
    selection.add(lan)
    assert selection.available(registry) == [minh]


def test_evict_removes_from_every_mode():
    registry = CharacterRegistry()
    lan = registry.add("Lan")
    composer = SceneComposer()
    composer.video_characters.add(lan)
    composer.image_characters.add(lan)

    composer.evict(lan.id)

    assert len(composer.video_characters) == 0
    assert len(composer.image_characters) == 0


@pytest.mark.parametrize(
    "mode",
    [GenerationMode.STRUCTURED_VIDEO, GenerationMode.TEXT_TO_IMAGE],
)
def test_idea_modes_need_non_blank_idea(mode):
    composer = SceneComposer()
    composer.main_idea = "   "
    assert not composer.can_build(mode)
    with pytest.raises(CompositionError):
        composer.build(mode)

    composer.main_idea = "hai giáo viên nói chuyện"
    assert composer.can_build(mode)


def test_freestyle_needs_text_and_image_to_video_needs_image():
    composer = SceneComposer()
    composer.main_idea = "ignored here"
    assert not composer.can_build(GenerationMode.FREESTYLE_VIDEO)
    assert not composer.can_build(GenerationMode.IMAGE_TO_VIDEO)

    composer.freestyle_text = "Một con mèo nhảy lên bàn"
    composer.image = IMAGE
    composer.main_idea = ""
    assert composer.can_build(GenerationMode.FREESTYLE_VIDEO)
    assert composer.can_build(GenerationMode.IMAGE_TO_VIDEO)


def test_build_produces_mode_specific_requests():
    registry = CharacterRegistry()
    lan = registry.add("Lan")
    composer = SceneComposer()
    composer.main_idea = "idea"
    composer.setting = "school"
    composer.freestyle_text = "free"
    composer.image = IMAGE
    composer.aspect_ratio = AspectRatio.STANDARD
    composer.video_characters.add(lan)
    composer.add_dialogue("Xin chào")

    video = composer.build(GenerationMode.STRUCTURED_VIDEO)
    assert isinstance(video, StructuredVideoRequest)
    assert video.styles == ["Hoạt hình"]
    assert [c.name for c in video.characters] == ["Lan"]

    assert isinstance(composer.build(GenerationMode.FREESTYLE_VIDEO), FreestyleVideoRequest)

    from_image = composer.build(GenerationMode.IMAGE_TO_VIDEO)
    assert isinstance(from_image, ImageToVideoRequest)
    assert from_image.image == IMAGE
    assert from_image.dialogues == ["Xin chào"]

    image = composer.build(GenerationMode.TEXT_TO_IMAGE)
    assert isinstance(image, TextToImageRequest)
    assert image.aspect_ratio == AspectRatio.STANDARD
    assert image.characters == []


def test_dialogue_lines_edit_and_remove():
    composer = SceneComposer()
    composer.add_dialogue("một")
    composer.add_dialogue()
    composer.set_dialogue_line(1, "hai")
    composer.set_dialogue_line(7, "ignored")
    composer.remove_dialogue_line(0)
    composer.remove_dialogue_line(5)
    assert composer.image_dialogues == ["hai"]


def test_switch_mode_clears_image_outside_image_to_video():
    composer = SceneComposer()
    composer.switch_mode(GenerationMode.IMAGE_TO_VIDEO)
    composer.image = IMAGE
    composer.switch_mode(GenerationMode.IMAGE_TO_VIDEO)
    assert composer.image is IMAGE

    composer.main_idea = "kept"
    composer.switch_mode(GenerationMode.TEXT_TO_IMAGE)
    assert composer.image is None
    assert composer.main_idea == "kept"
    assert composer.active_mode == GenerationMode.TEXT_TO_IMAGE

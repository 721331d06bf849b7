"""CLI entry point for veoprompt."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .characters import DESCRIPTION_SUGGESTIONS
from .composer import IMAGE_STYLES, VIDEO_STYLES, SceneSelection, StyleSelection
from .config import config
from .models import AspectRatio, GenerationMode, GenerationResult, UploadedImage
from .session import Session

app = typer.Typer(
    name="veoprompt",
    help="Write Veo video prompts and Imagen images with Gemini",
    no_args_is_help=True
)
key_app = typer.Typer(help="Manage the Gemini API key", no_args_is_help=True)
characters_app = typer.Typer(help="Manage the character library", no_args_is_help=True)
app.add_typer(key_app, name="key")
app.add_typer(characters_app, name="characters")

_IMAGE_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"veoprompt version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging"
    )
) -> None:
    """veoprompt - Turn ideas into Veo prompts and Imagen images."""
    setup_logging(verbose)


def _open_session() -> Session:
    session = Session()
    session.load()
    return session


def _load_image(path: Path) -> UploadedImage:
    try:
        return UploadedImage.from_path(path)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Cannot use image {path}: {e}")
        raise typer.Exit(1)


def _select_characters(
    session: Session,
    selection: SceneSelection,
    entries: Optional[List[str]],
    with_dialogue: bool,
) -> None:
    """Add library characters to a scene from ``Name`` or ``Name=dialogue`` entries."""
    for entry in entries or []:
        name, _, dialogue = entry.partition("=")
        character = session.registry.find(name.strip())
        if character is None:
            typer.echo(f"❌ No character named '{name.strip()}' in the library")
            typer.echo("   Run 'veoprompt characters list' to see available characters")
            raise typer.Exit(1)
        selection.add(character)
        if with_dialogue and dialogue:
            selection.set_dialogue(character.id, dialogue)


def _run(session: Session, mode: GenerationMode) -> GenerationResult:
    """Generate for a mode and report failures the way the form would."""
    if not session.composer.can_build(mode):
        typer.echo("❌ Missing required input")
        raise typer.Exit(1)

    typer.echo("   Generating...")
    result = asyncio.run(session.generate(mode))
    if result is None:
        typer.echo(f"❌ {session.error or 'Generation did not run'}")
        if session.credential_requested:
            typer.echo("   Run 'veoprompt key set <API_KEY>' to configure your key")
        raise typer.Exit(1)
    return result


@key_app.command("set")
def key_set(api_key: str = typer.Argument(..., help="Google AI API key")) -> None:
    """Save the API key used for all generation calls."""
    session = _open_session()
    try:
        saved = session.set_api_key(api_key)
    except OSError as e:
        typer.echo(f"❌ Error saving API key: {e}")
        raise typer.Exit(1)
    if not saved:
        typer.echo("❌ API key cannot be empty")
        raise typer.Exit(1)
    typer.echo(f"✅ API key saved to {session.store.path}")


@key_app.command("clear")
def key_clear() -> None:
    """Forget the stored API key."""
    session = _open_session()
    try:
        session.clear_api_key()
    except OSError as e:
        typer.echo(f"❌ Error removing API key: {e}")
        raise typer.Exit(1)
    typer.echo("✅ API key removed")


@characters_app.command("list")
def characters_list() -> None:
    """List characters in the library."""
    session = _open_session()
    characters = session.registry.list()
    if not characters:
        typer.echo("Your library is empty. Add one with 'veoprompt characters add NAME'.")
        return
    for character in characters:
        typer.echo(f"👤 [{character.id}] {character.name}")
        typer.echo(f"      {character.description or 'No description'}")


@characters_app.command("add")
def characters_add(
    name: str = typer.Argument(..., help="Character name"),
    description: str = typer.Option("", "--description", "-d", help="Appearance, outfit, personality..."),
) -> None:
    """Add a character to the library."""
    session = _open_session()
    try:
        character = session.add_character(name, description)
    except ValueError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Added {character.name} [{character.id}]")


@characters_app.command("edit")
def characters_edit(
    character_id: int = typer.Argument(..., help="Character id"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
) -> None:
    """Edit a character in the library."""
    session = _open_session()
    try:
        character = session.update_character(character_id, name=name, description=description)
    except ValueError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)
    if character is None:
        typer.echo(f"❌ No character with id {character_id}")
        raise typer.Exit(1)
    typer.echo(f"✅ Updated {character.name} [{character.id}]")


@characters_app.command("remove")
def characters_remove(character_id: int = typer.Argument(..., help="Character id")) -> None:
    """Delete a character from the library."""
    session = _open_session()
    if session.registry.get(character_id) is None:
        typer.echo(f"❌ No character with id {character_id}")
        raise typer.Exit(1)
    session.remove_character(character_id)
    typer.echo(f"✅ Removed character {character_id}")


@characters_app.command("suggestions")
def characters_suggestions() -> None:
    """Show description phrases to build characters from."""
    for category, items in DESCRIPTION_SUGGESTIONS.items():
        typer.echo(f"{category}:")
        typer.echo("   " + " · ".join(items))


@characters_app.command("export")
def characters_export(path: Path = typer.Argument(..., help="YAML file to write")) -> None:
    """Export the library to YAML."""
    session = _open_session()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        session.registry.export_yaml(path)
    except OSError as e:
        typer.echo(f"❌ Error exporting characters: {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Exported {len(session.registry)} character(s) to {path}")


@characters_app.command("import")
def characters_import(
    path: Path = typer.Argument(..., help="YAML file to read", exists=True, dir_okay=False)
) -> None:
    """Import characters from a YAML export."""
    session = _open_session()
    try:
        added = session.registry.import_yaml(path)
    except Exception as e:
        typer.echo(f"❌ Error importing characters: {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Imported {len(added)} character(s)")


@app.command("describe-character")
def describe_character(
    image: Path = typer.Argument(..., help="Image of the character", exists=True, dir_okay=False),
    save: Optional[str] = typer.Option(None, "--save", help="Add to the library under this name"),
) -> None:
    """Describe the character in an image."""
    session = _open_session()
    draft = session.start_new_character()
    typer.echo(f"🔍 Analyzing: {image}")

    if not asyncio.run(session.analyze_draft_image(_load_image(image))):
        typer.echo(f"❌ {draft.analysis_error or 'Analysis did not run'}")
        raise typer.Exit(1)

    typer.echo(draft.description)
    if save:
        draft.name = save
        character = session.save_draft()
        if character is None:
            typer.echo("❌ Character name cannot be empty")
            raise typer.Exit(1)
        typer.echo(f"\n✅ Added {character.name} [{character.id}]")


@app.command()
def video(
    idea: str = typer.Argument(..., help="Main idea of the scene"),
    setting: str = typer.Option("", "--setting", help="Where the scene takes place"),
    style: Optional[List[str]] = typer.Option(
        None,
        "--style",
        help=f"Video style, repeatable ({', '.join(VIDEO_STYLES)})"
    ),
    character: Optional[List[str]] = typer.Option(
        None,
        "--character",
        "-c",
        help='Library character, optionally with dialogue: "Name=line"'
    ),
) -> None:
    """Write a Veo prompt from an idea, setting, styles and characters."""
    session = _open_session()
    session.switch_mode(GenerationMode.STRUCTURED_VIDEO)
    composer = session.composer
    composer.main_idea = idea
    composer.setting = setting
    if style:
        composer.video_styles = StyleSelection(style)
    _select_characters(session, composer.video_characters, character, with_dialogue=True)

    typer.echo(f"🎬 Video prompt: {idea}")
    result = _run(session, GenerationMode.STRUCTURED_VIDEO)
    typer.echo(f"\n{result.prompt_text}")


@app.command()
def freestyle(text: str = typer.Argument(..., help="Free-form scene description")) -> None:
    """Write a Veo prompt from a free-form description."""
    session = _open_session()
    session.switch_mode(GenerationMode.FREESTYLE_VIDEO)
    session.composer.freestyle_text = text

    typer.echo("🎬 Video prompt from description")
    result = _run(session, GenerationMode.FREESTYLE_VIDEO)
    typer.echo(f"\n{result.prompt_text}")


@app.command("from-image")
def from_image(
    image: Path = typer.Argument(..., help="Source image", exists=True, dir_okay=False),
    idea: str = typer.Option("", "--idea", help="Optional extra idea"),
    dialogue: Optional[List[str]] = typer.Option(None, "--dialogue", help="Dialogue line, repeatable"),
) -> None:
    """Write a Veo prompt that animates an image."""
    session = _open_session()
    session.switch_mode(GenerationMode.IMAGE_TO_VIDEO)
    composer = session.composer
    composer.image = _load_image(image)
    composer.main_idea = idea
    for line in dialogue or []:
        composer.add_dialogue(line)

    typer.echo(f"🎬 Video prompt from image: {image}")
    result = _run(session, GenerationMode.IMAGE_TO_VIDEO)
    typer.echo(f"\n{result.prompt_text}")


@app.command()
def image(
    idea: str = typer.Argument(..., help="What the image shows"),
    setting: str = typer.Option("", "--setting", help="Where the image takes place"),
    style: Optional[List[str]] = typer.Option(
        None,
        "--style",
        help=f"Image style, repeatable ({', '.join(IMAGE_STYLES)})"
    ),
    aspect_ratio: AspectRatio = typer.Option(
        AspectRatio.LANDSCAPE,
        "--aspect-ratio",
        "-a",
        help="Image aspect ratio"
    ),
    character: Optional[List[str]] = typer.Option(
        None,
        "--character",
        "-c",
        help="Library character in the image, repeatable"
    ),
    output: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        help="Directory for generated images"
    ),
) -> None:
    """Generate an image via an enriched English prompt."""
    session = _open_session()
    session.switch_mode(GenerationMode.TEXT_TO_IMAGE)
    composer = session.composer
    composer.main_idea = idea
    composer.setting = setting
    composer.aspect_ratio = aspect_ratio
    if style:
        composer.image_styles = StyleSelection(style)
    _select_characters(session, composer.image_characters, character, with_dialogue=False)

    typer.echo(f"🖼️  Image: {idea}")
    result = _run(session, GenerationMode.TEXT_TO_IMAGE)
    typer.echo(f"\nPrompt used:\n{result.prompt_text}")

    extension = _IMAGE_EXTENSIONS.get(config.image_mime_type, ".img")
    try:
        output.mkdir(parents=True, exist_ok=True)
        for index, data in enumerate(result.media or [], start=1):
            path = output / f"image_{index}{extension}"
            path.write_bytes(data)
            typer.echo(f"✅ Saved {path}")
    except OSError as e:
        typer.echo(f"❌ Error saving images: {e}")
        raise typer.Exit(1)

"""CLI entry point for the video script generator."""

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from typer.core import TyperGroup

from . import __version__
from .auth import UserStore
from .config import config
from .errors import GenerationError, StorageError, ValidationError, VsgError
from .models import Gender, Project, ProjectDraft, Scene
from .persistence import YamlFileBackend, open_project_store, open_user_store
from .store import ProjectStore
from .validation import MIN_TITLE_LENGTH


class ScriptMakerGroup(TyperGroup):
    """Command group that reports application errors as a single line."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except VsgError as e:
            typer.echo(f"❌ {e}")
            raise typer.Exit(1)


app = typer.Typer(
    name="script-maker",
    help="AI-assisted scripts, scenes and voice-over for short-form video",
    cls=ScriptMakerGroup,
    no_args_is_help=True
)
scene_app = typer.Typer(help="Edit the scenes of a project", no_args_is_help=True)
library_app = typer.Typer(help="Browse ready-made stories", no_args_is_help=True)
app.add_typer(scene_app, name="scene")
app.add_typer(library_app, name="library")


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
        typer.echo(f"script-maker version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Video Script Generator - Turn an idea into scripted, promptable scenes."""
    setup_logging(verbose)


# Helpers

def _fail(message: str) -> NoReturn:
    typer.echo(f"❌ {message}")
    raise typer.Exit(1)


def _backend() -> YamlFileBackend:
    return YamlFileBackend(config.data_dir)


def _project_store() -> ProjectStore:
    try:
        return open_project_store(_backend())
    except StorageError as e:
        _fail(f"Error loading projects: {e}")


def _user_store() -> UserStore:
    try:
        return open_user_store(_backend())
    except StorageError as e:
        _fail(f"Error loading user: {e}")


def _require_api_key() -> str:
    users = _user_store()
    if not users.is_authenticated:
        _fail("Not logged in. Run 'script-maker register' or 'script-maker login' first")
    if not users.api_key:
        _fail("No API key saved. Run 'script-maker set-key' first")
    return users.api_key


def _resolve_project(store: ProjectStore, ref: Optional[str]) -> Project:
    """Find a project by id or unique id prefix; None means the current project."""
    if ref is None:
        project = store.current_project
        if project is None:
            _fail("No current project. Pass a project id or run 'script-maker use <id>'")
        return project

    exact = store.get_project(ref)
    if exact is not None:
        return exact

    matches = [project for project in store.projects if project.id.startswith(ref)]
    if not matches:
        _fail(f"No project matching '{ref}'")
    if len(matches) > 1:
        _fail(f"'{ref}' matches {len(matches)} projects; use more characters")
    return matches[0]


def _resolve_scene(project: Project, ref: str) -> Scene:
    """Find a scene by 1-based number or by id prefix."""
    if ref.isdigit():
        number = int(ref)
        if 1 <= number <= len(project.scenes):
            return project.scenes[number - 1]
        _fail(f"Scene number must be between 1 and {len(project.scenes)}")

    matches = [scene for scene in project.scenes if scene.id.startswith(ref)]
    if len(matches) != 1:
        _fail(f"No unique scene matching '{ref}'")
    return matches[0]


def _preview(text: str, width: int = 70) -> str:
    text = " ".join(text.split())
    return text[:width] + "..." if len(text) > width else text


def _echo_project(project: Project, full: bool = False) -> None:
    typer.echo(f"📁 {project.title}  ({project.id})")
    typer.echo(f"   Format: {project.format}  |  Style: {project.story_style}  |  Audience: {project.target_audience}")
    typer.echo(f"   Duration: {project.duration}")
    typer.echo(f"   Updated: {project.updated_at:%Y-%m-%d %H:%M} UTC")
    if project.description:
        typer.echo(f"\n{project.description}")

    typer.echo(f"\n📽️  Scenes ({len(project.scenes)}):")
    for scene in project.scenes:
        status_icon = "✅" if scene.script else "⏳"
        typer.echo(f"   {status_icon} Scene {scene.order + 1}  ({scene.id[:8]})")
        if full:
            _echo_scene_details(scene)
        elif scene.script:
            typer.echo(f"      → {_preview(scene.script)}")


def _echo_scene_details(scene: Scene) -> None:
    voice = scene.voice_over
    for label, value in (
        ("Script", scene.script),
        ("Visual", scene.visual_description),
        ("Image prompt", scene.image_prompt),
        ("Video prompt", scene.video_prompt),
    ):
        if value:
            typer.echo(f"      {label}: {value}")
    typer.echo(f"      Voice: {voice.gender.value}, {voice.emotion}, {voice.style}")
    if voice.text and voice.text != scene.script:
        typer.echo(f"      Voice text: {voice.text}")


# Account

@app.command()
def register(
    name: str = typer.Argument(..., help="Your name"),
    email: str = typer.Argument(..., help="Your email address"),
) -> None:
    """Create a local user."""
    from .validation import validate_registration

    try:
        validate_registration(name, email)
    except ValidationError as e:
        _fail(str(e))

    user = _user_store().register(name, email)
    typer.echo(f"✅ Registered {user.name} <{user.email}>")
    typer.echo("   Next: save your API key with 'script-maker set-key'")


@app.command()
def login(
    email: str = typer.Argument(..., help="Your email address"),
) -> None:
    """Log in as a local user."""
    from .validation import validate_email

    try:
        validate_email(email)
    except ValidationError as e:
        _fail(str(e))

    user = _user_store().login(email)
    typer.echo(f"✅ Logged in as {user.name} <{user.email}>")


@app.command()
def logout() -> None:
    """Forget the current user (projects are kept)."""
    _user_store().logout()
    typer.echo("👋 Logged out")


@app.command()
def whoami() -> None:
    """Show the current user."""
    users = _user_store()
    if users.user is None:
        typer.echo("Not logged in")
        raise typer.Exit(1)

    typer.echo(f"👤 {users.user.name} <{users.user.email}>")
    typer.echo(f"   API key: {'saved' if users.api_key else 'not set'}")
    typer.echo(f"   Provider: {config.provider} ({config.model})")


@app.command("set-key")
def set_key(
    api_key: str = typer.Option(
        ...,
        "--api-key",
        prompt="API key",
        hide_input=True,
        help="Credential for the generation service"
    ),
) -> None:
    """Save the API key used for generation."""
    from .validation import validate_api_key

    users = _user_store()
    if not users.is_authenticated:
        _fail("Not logged in. Run 'script-maker register' or 'script-maker login' first")

    try:
        key = validate_api_key(api_key)
    except ValidationError as e:
        _fail(str(e))

    users.save_api_key(key)
    typer.echo("✅ API key saved")


# Projects

@app.command()
def create(
    title: str = typer.Option(..., "--title", "-t", prompt=True, help="Project title"),
    description: str = typer.Option(..., "--description", "-d", prompt=True, help="What the video is about"),
    audience: str = typer.Option("general", "--audience", "-a", help="Target audience"),
    style: str = typer.Option("educational", "--style", "-s", help="Story style (comedy, drama, horror, educational)"),
    content_format: str = typer.Option("short-video", "--format", "-f", help="Format (reels, short-video, fiction, product-promo)"),
    duration: str = typer.Option(
        "1-2 minutes",
        "--duration",
        help="Duration bucket (30-60 seconds, 1-2 minutes, 2-5 minutes, 5-10 minutes, 10+ minutes)"
    ),
    generate: bool = typer.Option(True, "--generate/--no-generate", help="Generate the script with AI"),
) -> None:
    """Create a project, generating its synopsis and scenes with AI."""
    from .generation import generate_script
    from .validation import validate_project_draft

    try:
        draft = validate_project_draft(ProjectDraft(
            title=title.strip(),
            description=description.strip(),
            target_audience=audience,
            story_style=style,
            format=content_format,
            duration=duration,
        ))
    except ValidationError as e:
        _fail(str(e))

    result = None
    if generate:
        api_key = _require_api_key()
        typer.echo(f"🎬 Generating script: {draft.title}")
        typer.echo(f"   Duration: {draft.duration}")
        try:
            result = generate_script(draft, api_key)
        except GenerationError as e:
            _fail(f"Failed to generate content: {e}")

        if result.synopsis:
            draft = draft.model_copy(update={
                "description": f"{draft.description}\n\nSynopsis: {result.synopsis}"
            })

    store = _project_store()
    project = store.create_project(draft)
    if result is not None:
        project = store.update_project(project.id, {"scenes": result.scenes})

    typer.echo(f"\n✅ Project created: {project.id}")
    if result is not None and result.padded:
        typer.echo(f"⚠️  {result.padded} scene(s) could not be generated and were left blank")
    _echo_project(project)


@app.command("list")
def list_projects() -> None:
    """List all projects, most recently updated first."""
    store = _project_store()
    if not store.projects:
        typer.echo("No projects yet. Run 'script-maker create' to start one")
        return

    for project in sorted(store.projects, key=lambda p: p.updated_at, reverse=True):
        marker = "▶" if project.id == store.current_project_id else " "
        typer.echo(
            f"{marker} {project.id[:8]}  {project.title}  "
            f"({len(project.scenes)} scenes, updated {project.updated_at:%Y-%m-%d %H:%M})"
        )


@app.command()
def show(
    project_ref: Optional[str] = typer.Argument(None, help="Project id or prefix (default: current)"),
    full: bool = typer.Option(False, "--full", help="Show every scene field"),
) -> None:
    """Show a project and its scenes."""
    _echo_project(_resolve_project(_project_store(), project_ref), full=full)


@app.command()
def use(
    project_ref: str = typer.Argument(..., help="Project id or prefix"),
) -> None:
    """Make a project the current project."""
    store = _project_store()
    project = store.set_current_project(_resolve_project(store, project_ref).id)
    typer.echo(f"▶ Current project: {project.title}")


@app.command()
def edit(
    project_ref: Optional[str] = typer.Argument(None, help="Project id or prefix (default: current)"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    audience: Optional[str] = typer.Option(None, "--audience", "-a"),
    style: Optional[str] = typer.Option(None, "--style", "-s"),
    content_format: Optional[str] = typer.Option(None, "--format", "-f"),
    duration: Optional[str] = typer.Option(None, "--duration"),
) -> None:
    """Change project details."""
    updates = {
        name: value
        for name, value in (
            ("title", title),
            ("description", description),
            ("target_audience", audience),
            ("story_style", style),
            ("format", content_format),
            ("duration", duration),
        )
        if value is not None
    }
    if not updates:
        _fail("Nothing to change")
    if "title" in updates and len(updates["title"].strip()) < MIN_TITLE_LENGTH:
        _fail(f"Title must be at least {MIN_TITLE_LENGTH} characters")

    store = _project_store()
    project = store.update_project(_resolve_project(store, project_ref).id, updates)
    typer.echo(f"✅ Updated {project.title}")


@app.command()
def delete(
    project_ref: str = typer.Argument(..., help="Project id or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a project and all its scenes."""
    store = _project_store()
    project = _resolve_project(store, project_ref)
    if not yes:
        typer.confirm(f"Delete '{project.title}' and its {len(project.scenes)} scene(s)?", abort=True)
    store.delete_project(project.id)
    typer.echo(f"🗑️  Deleted {project.title}")


@app.command()
def export(
    project_ref: Optional[str] = typer.Argument(None, help="Project id or prefix (default: current)"),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the JSON file (default: VSG_EXPORT_DIR or .)",
        file_okay=False,
        dir_okay=True
    ),
) -> None:
    """Export a project as JSON."""
    from .export import write_export

    project = _resolve_project(_project_store(), project_ref)
    try:
        path = write_export(project, output_dir or config.export_dir)
    except OSError as e:
        _fail(f"Error exporting project: {e}")
    typer.echo(f"✅ Exported: {path}")


# Scenes

ProjectOption = typer.Option(None, "--project", "-p", help="Project id or prefix (default: current)")


@scene_app.command("add")
def scene_add(project_ref: Optional[str] = ProjectOption) -> None:
    """Append a blank scene."""
    store = _project_store()
    project = store.add_scene(_resolve_project(store, project_ref).id)
    typer.echo(f"✅ Added scene {len(project.scenes)} to {project.title}")


@scene_app.command("edit")
def scene_edit(
    scene_ref: str = typer.Argument(..., help="Scene number or id prefix"),
    project_ref: Optional[str] = ProjectOption,
    script: Optional[str] = typer.Option(None, "--script"),
    visual: Optional[str] = typer.Option(None, "--visual", help="Visual description"),
    image_prompt: Optional[str] = typer.Option(None, "--image-prompt"),
    video_prompt: Optional[str] = typer.Option(None, "--video-prompt"),
    gender: Optional[Gender] = typer.Option(None, "--gender", help="Voice gender"),
    emotion: Optional[str] = typer.Option(None, "--emotion", help="Voice emotion"),
    voice_style: Optional[str] = typer.Option(None, "--voice-style", help="Voice style"),
    voice_text: Optional[str] = typer.Option(None, "--voice-text", help="Voice-over text"),
) -> None:
    """Change the fields of one scene."""
    updates = {
        name: value
        for name, value in (
            ("script", script),
            ("visual_description", visual),
            ("image_prompt", image_prompt),
            ("video_prompt", video_prompt),
        )
        if value is not None
    }
    voice = {
        name: value
        for name, value in (
            ("gender", gender),
            ("emotion", emotion),
            ("style", voice_style),
            ("text", voice_text),
        )
        if value is not None
    }
    if voice:
        updates["voice_over"] = voice
    if not updates:
        _fail("Nothing to change")

    store = _project_store()
    project = _resolve_project(store, project_ref)
    scene = _resolve_scene(project, scene_ref)
    try:
        store.update_scene(project.id, scene.id, updates)
    except ValidationError as e:
        _fail(str(e))
    typer.echo(f"✅ Updated scene {scene.order + 1}")


@scene_app.command("delete")
def scene_delete(
    scene_ref: str = typer.Argument(..., help="Scene number or id prefix"),
    project_ref: Optional[str] = ProjectOption,
) -> None:
    """Delete a scene (a project always keeps at least one)."""
    store = _project_store()
    project = _resolve_project(store, project_ref)
    scene = _resolve_scene(project, scene_ref)
    if store.delete_scene(project.id, scene.id) is None:
        _fail("A project must keep at least one scene")
    typer.echo(f"🗑️  Deleted scene {scene.order + 1}")


@scene_app.command("reorder")
def scene_reorder(
    scene_refs: List[str] = typer.Argument(..., help="Every scene, by number or id prefix, in the new order"),
    project_ref: Optional[str] = ProjectOption,
    drop_missing: bool = typer.Option(
        False,
        "--drop-missing",
        help="Remove scenes that are not listed instead of refusing"
    ),
) -> None:
    """Put the scenes of a project in a new order."""
    store = _project_store()
    project = _resolve_project(store, project_ref)
    scene_ids = [_resolve_scene(project, ref).id for ref in scene_refs]

    missing = len(project.scenes) - len(set(scene_ids))
    if missing and not drop_missing:
        _fail(f"{missing} scene(s) not listed; list every scene or pass --drop-missing")

    project = store.reorder_scenes(project.id, scene_ids)
    typer.echo("✅ New order:")
    for scene in project.scenes:
        typer.echo(f"   {scene.order + 1}. {_preview(scene.script) or scene.id[:8]}")


@scene_app.command("prompts")
def scene_prompts(
    scene_ref: str = typer.Argument(..., help="Scene number or id prefix"),
    project_ref: Optional[str] = ProjectOption,
) -> None:
    """Generate image and video prompts for a scene with AI."""
    from .generation import generate_visual_prompts

    store = _project_store()
    project = _resolve_project(store, project_ref)
    scene = _resolve_scene(project, scene_ref)
    api_key = _require_api_key()

    typer.echo(f"🎨 Generating visual prompts for scene {scene.order + 1}...")
    try:
        prompts = generate_visual_prompts(scene.script, scene.visual_description, api_key)
    except GenerationError as e:
        _fail(f"Failed to generate visual prompts: {e}")

    store.update_scene(project.id, scene.id, {
        "image_prompt": prompts.image_prompt,
        "video_prompt": prompts.video_prompt,
    })
    typer.echo(f"   Image: {_preview(prompts.image_prompt) or '(none)'}")
    typer.echo(f"   Video: {_preview(prompts.video_prompt) or '(none)'}")


@scene_app.command("voice")
def scene_voice(
    scene_ref: str = typer.Argument(..., help="Scene number or id prefix"),
    project_ref: Optional[str] = ProjectOption,
) -> None:
    """Generate voice-over recommendations for a scene with AI."""
    from .generation import generate_voice_over_recommendations

    store = _project_store()
    project = _resolve_project(store, project_ref)
    scene = _resolve_scene(project, scene_ref)
    api_key = _require_api_key()

    typer.echo(f"🎙️  Generating voice-over for scene {scene.order + 1}...")
    try:
        voice_over = generate_voice_over_recommendations(
            scene.script, project.target_audience, project.story_style, api_key
        )
    except GenerationError as e:
        _fail(f"Failed to generate voice-over recommendations: {e}")

    store.update_scene(project.id, scene.id, {"voice_over": voice_over})
    typer.echo(f"   {voice_over.gender.value}, {voice_over.emotion}, {voice_over.style}")
    typer.echo(f"   → {_preview(voice_over.text)}")


# Library

@library_app.command("list")
def library_list(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by title or synopsis"),
) -> None:
    """List ready-made stories."""
    from .library import search_stories

    stories = search_stories(search or "")
    if not stories:
        typer.echo("No matching stories")
        return
    for story in stories:
        typer.echo(f"📚 [{story.id}] {story.title}  ({story.category}, {story.format}, {len(story.scenes)} scenes)")
        typer.echo(f"      {_preview(story.synopsis)}")


@library_app.command("show")
def library_show(story_id: str = typer.Argument(..., help="Story id")) -> None:
    """Show a story and its scenes."""
    from .library import get_story

    story = get_story(story_id)
    if story is None:
        _fail(f"No story with id '{story_id}'")

    typer.echo(f"📚 {story.title}  ({story.category}, {story.format})")
    typer.echo(f"\n{story.synopsis}\n")
    for scene in story.scenes:
        typer.echo(f"   Scene {scene.order + 1}")
        _echo_scene_details(scene)


@library_app.command("use")
def library_use(story_id: str = typer.Argument(..., help="Story id")) -> None:
    """Start a new project from a story."""
    from .library import get_story, use_template

    story = get_story(story_id)
    if story is None:
        _fail(f"No story with id '{story_id}'")

    project = use_template(_project_store(), story)
    typer.echo(f"✅ Project created: {project.id}")
    _echo_project(project)


if __name__ == "__main__":
    app()

## storyboarder/projects.py

"""
In-place editing of a parsed project.

One project is edited from one flow at a time; every operation mutates the
project it is given and bumps ``updated_at``.
"""

import logging
from datetime import datetime
from typing import List, Optional

from storyboarder.architectural_prompting import (
    generate_architectural_panel_prompts,
    merge_architectural_metadata,
)
from storyboarder.errors import InvalidInputError, ProjectEditError
from storyboarder.extractors import detect_panel_count, extract_characters, extract_scenes
from storyboarder.models import (
    ArchitecturalProjectKind,
    Character,
    CharacterRole,
    ProjectType,
    Scene,
    StoryboardPanel,
    StoryboardProject,
    StoryboardPrompt,
    utcnow,
)
from storyboarder.parsing import (
    build_architectural_metadata,
    panels_from_prompts,
    synthesize_storyboard_prompts,
    technical_scene,
)
from storyboarder.prompting import generate_all_panel_prompts
from storyboarder.sequencing import generate_architectural_panel_sequence

logger = logging.getLogger(__name__)


def _is_architectural(project: StoryboardProject) -> bool:
    return project.project_type == ProjectType.ARCHITECTURAL


def _touch(project: StoryboardProject):
    project.updated_at = utcnow()


def get_panel(project: StoryboardProject, panel_number: int) -> StoryboardPanel:
    for panel in project.panels:
        if panel.panel_number == panel_number:
            return panel
    raise ProjectEditError(f"Panel {panel_number} does not exist", project.id, panel_number)


def renumber_panels(project: StoryboardProject):
    for index, panel in enumerate(project.panels, start=1):
        panel.panel_number = index
        panel.prompt.panel_number = index


def _merge_characters(project: StoryboardProject, found: List[Character]) -> List[Character]:
    """Add unseen characters to the project; returns `found` resolved to project instances."""
    resolved = []
    for character in found:
        existing = next((c for c in project.characters if c.description == character.description), None)
        if existing is None:
            if project.characters:
                character.role = CharacterRole.SUPPORTING
            project.characters.append(character)
            existing = character
        resolved.append(existing)
    return resolved


def _merge_scenes(project: StoryboardProject, found: List[Scene]) -> List[Scene]:
    resolved = []
    for scene in found:
        existing = next((s for s in project.scenes if s.location == scene.location), None)
        if existing is None:
            project.scenes.append(scene)
            existing = scene
        resolved.append(existing)
    return resolved


def _append(project: StoryboardProject, prompts: List[StoryboardPrompt]) -> List[StoryboardPanel]:
    start = len(project.panels)
    panels = panels_from_prompts(prompts)
    for offset, panel in enumerate(panels, start=1):
        panel.panel_number = start + offset
        panel.prompt.panel_number = start + offset
    project.panels.extend(panels)
    _touch(project)
    return panels


def append_panels_from_input(project: StoryboardProject, text: str) -> List[StoryboardPanel]:
    """Parse `text` as a continuation and append its panels after the existing ones."""
    if _is_architectural(project):
        raise ProjectEditError("Use architectural append for architectural projects", project.id)
    if not text or not text.strip():
        raise InvalidInputError("Input text is empty")

    characters = _merge_characters(project, extract_characters(text))
    scenes = _merge_scenes(project, extract_scenes(text))
    count = detect_panel_count(text)
    prompts = synthesize_storyboard_prompts(
        text, characters, scenes, count, project.metadata.target_audience, project.style,
    )
    panels = _append(project, prompts)
    logger.info("Appended %d panels to project %s", len(panels), project.id)
    return panels


def append_architectural_panels_from_input(
    project: StoryboardProject,
    text: str,
    kind: Optional[ArchitecturalProjectKind] = None,
) -> List[StoryboardPanel]:
    if not _is_architectural(project):
        raise ProjectEditError("Project is not architectural", project.id)
    if not text or not text.strip():
        raise InvalidInputError("Input text is empty")

    current = project.architectural_project_kind or ArchitecturalProjectKind.DETALLES
    try:
        kind = ArchitecturalProjectKind(kind) if kind else current
    except ValueError:
        raise ProjectEditError(f"Unknown architectural project kind '{kind}'", project.id) from None
    if kind != current:
        raise ProjectEditError(
            f"Cannot append {kind.value} panels to a {current.value} project", project.id,
        )

    count = detect_panel_count(text)
    incoming = build_architectural_metadata(text, kind, count)
    project.architectural_metadata = merge_architectural_metadata(project.architectural_metadata, incoming)
    if not project.scenes:
        project.scenes.append(technical_scene())

    skeletons = generate_architectural_panel_sequence(text, incoming, count, project.scenes[0], kind)
    prompts = generate_architectural_panel_prompts(skeletons, project.architectural_metadata, kind)
    panels = _append(project, prompts)
    logger.info("Appended %d %s panels to project %s", len(panels), kind.value, project.id)
    return panels


def _synthesize(project: StoryboardProject, prompt: StoryboardPrompt) -> StoryboardPrompt:
    if _is_architectural(project):
        kind = project.architectural_project_kind or ArchitecturalProjectKind.DETALLES
        metadata = project.architectural_metadata or build_architectural_metadata(project.user_input, kind)
        return generate_architectural_panel_prompts([prompt], metadata, kind)[0]
    return generate_all_panel_prompts([prompt], project.characters, project.scenes)[0]


def regenerate_panel_prompt(project: StoryboardProject, panel_number: int) -> StoryboardPanel:
    """Rebuild generated_prompt from the panel's structured fields; the image is left alone."""
    panel = get_panel(project, panel_number)
    panel.prompt = _synthesize(project, panel.prompt)
    panel.is_edited = False
    _touch(project)
    return panel


def edit_panel_prompt(
    project: StoryboardProject,
    panel_number: int,
    /,
    generated_prompt: Optional[str] = None,
    **changes,
) -> StoryboardPanel:
    """
    Apply structured field changes and/or a hand-written prompt.
    Structured changes without a new prompt text regenerate it.
    """
    panel = get_panel(project, panel_number)
    rejected = (set(changes) - set(StoryboardPrompt.model_fields)) | ({"id", "panel_number"} & set(changes))
    if rejected:
        raise ProjectEditError(f"Cannot edit prompt fields: {sorted(rejected)}", project.id, panel_number)

    prompt = StoryboardPrompt.model_validate({**panel.prompt.model_dump(), **changes})
    if generated_prompt is not None:
        panel.prompt = prompt.model_copy(update={"generated_prompt": generated_prompt})
        panel.is_edited = True
    elif changes:
        panel.prompt = _synthesize(project, prompt)
        panel.is_edited = True
    _touch(project)
    return panel


def attach_panel_image(
    project: StoryboardProject,
    panel_number: int,
    image_url: Optional[str],
    generated_at: Optional[datetime] = None,
) -> StoryboardPanel:
    panel = get_panel(project, panel_number)
    panel.generated_image_url = image_url
    panel.is_generating = False
    panel.last_generated = (generated_at or utcnow()) if image_url else None
    _touch(project)
    return panel


def remove_character(project: StoryboardProject, character_id: str) -> Character:
    """Drop a character from the cast; panels keep their (now dangling) references."""
    for index, character in enumerate(project.characters):
        if character.id == character_id:
            removed = project.characters.pop(index)
            _touch(project)
            logger.debug("Removed character %s from project %s", removed.name, project.id)
            return removed
    raise ProjectEditError(f"Character {character_id} does not exist", project.id)

## storyboarder/parsing.py

import logging
import time
from typing import List, Optional

from storyboarder import architectural_extractors as arch
from storyboarder.analysis import analyze_theme, analyze_visual_style
from storyboarder.architectural_prompting import (
    default_architectural_metadata,
    generate_architectural_panel_prompts,
)
from storyboarder.errors import InvalidInputError
from storyboarder.extractors import (
    detect_genre,
    detect_panel_count,
    detect_target_audience,
    extract_characters,
    extract_scenes,
    generate_title,
)
from storyboarder.models import (
    ArchitecturalMetadata,
    ArchitecturalProjectKind,
    ArchitecturalViewType,
    Character,
    ProjectMetadata,
    ProjectType,
    PromptGenerationResult,
    Scene,
    StoryboardPanel,
    StoryboardProject,
    StoryboardPrompt,
    StoryboardStyle,
    TargetAudience,
    TimeOfDay,
    UnitSystem,
)
from storyboarder.prompting import (
    add_contextual_notes,
    apply_audience_template,
    generate_all_panel_prompts,
    resolve_project_style,
)
from storyboarder.sequencing import (
    detail_levels_for,
    generate_architectural_panel_sequence,
    generate_panel_sequence,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def _require_text(text) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Input text is empty")
    return text


def _coerce_kind(kind) -> ArchitecturalProjectKind:
    try:
        return ArchitecturalProjectKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in ArchitecturalProjectKind)
        raise InvalidInputError(f"Unknown architectural project kind '{kind}'", {"valid": valid}) from None


def panels_from_prompts(prompts: List[StoryboardPrompt]) -> List[StoryboardPanel]:
    return [
        StoryboardPanel(panel_number=p.panel_number, prompt=p, detail_level=p.detail_level)
        for p in prompts
    ]


# --- Storyboard ---

def synthesize_storyboard_prompts(
    text: str,
    characters: List[Character],
    scenes: List[Scene],
    count: int,
    audience: TargetAudience,
    style: StoryboardStyle,
) -> List[StoryboardPrompt]:
    """Sequence panels for `text` and synthesize their prompts with theme, style and audience context."""
    theme = analyze_theme(text)
    visual_style = analyze_visual_style(text)
    skeletons = generate_panel_sequence(text, characters, scenes, count)
    prepared = [
        apply_audience_template(add_contextual_notes(p, theme, visual_style), audience, style)
        for p in skeletons
    ]
    return generate_all_panel_prompts(prepared, characters, scenes)


def build_storyboard_project(text: str) -> StoryboardProject:
    text = _require_text(text)
    characters = extract_characters(text)
    scenes = extract_scenes(text)
    audience = detect_target_audience(text)
    count = detect_panel_count(text)
    style = resolve_project_style(audience, analyze_visual_style(text))

    prompts = synthesize_storyboard_prompts(text, characters, scenes, count, audience, style)
    return StoryboardProject(
        title=generate_title(text),
        description=text,
        user_input=text,
        characters=characters,
        scenes=scenes,
        panels=panels_from_prompts(prompts),
        style=style,
        metadata=ProjectMetadata(target_audience=audience, genre=detect_genre(text), aspect_ratio="1:1"),
        project_type=ProjectType.STORYBOARD,
    )


def _fallback_warnings(project: StoryboardProject) -> List[str]:
    warnings = []
    text = project.user_input.strip()
    if len(project.characters) == 1 and project.characters[0].description == text:
        warnings.append("No known characters detected; the input is used as the main subject")
    if len(project.scenes) == 1 and project.scenes[0].location == text:
        warnings.append("No known location detected; the input is used as the setting")
    return warnings


def parse_user_input(text: str) -> PromptGenerationResult:
    """
    Turn a free-text idea into a complete storyboard project.
    Any failure comes back as success=False with the error message; nothing is raised.
    """
    start = time.perf_counter()
    try:
        project = build_storyboard_project(text)
    except Exception as e:
        logger.exception("Storyboard parsing failed")
        return PromptGenerationResult(
            success=False,
            errors=[getattr(e, "message", None) or str(e) or "Unknown parsing error"],
            processing_time=_elapsed_ms(start),
        )

    elapsed = _elapsed_ms(start)
    logger.info("Parsed storyboard '%s': %d panels in %.1f ms", project.title, len(project.panels), elapsed)
    return PromptGenerationResult(
        success=True,
        project=project,
        warnings=_fallback_warnings(project),
        processing_time=elapsed,
    )


# --- Architectural ---

def _units_note(units: UnitSystem) -> str:
    return "all dimensions in " + ("millimeters" if units == UnitSystem.METRIC else "inches")


def build_architectural_metadata(
    text: str,
    kind: ArchitecturalProjectKind,
    count: Optional[int] = None,
) -> ArchitecturalMetadata:
    """Kind defaults overlaid with whatever the text states explicitly."""
    base = default_architectural_metadata(kind)
    count = detect_panel_count(text) if count is None else count

    units = arch.detect_unit_system(text)
    primary = arch.detect_primary_view(text, default=base.primary_view)
    secondary = arch.secondary_view_for(primary) if primary != base.primary_view else base.secondary_view
    reinforcement = arch.extract_reinforcement(text)
    if not reinforcement and kind == ArchitecturalProjectKind.DETALLES:
        reinforcement = list(arch.DEFAULT_REINFORCEMENT_NOTES)

    general_notes = [_units_note(units)]
    general_notes += [n for n in base.general_notes if not n.startswith("all dimensions")]
    if kind == ArchitecturalProjectKind.DETALLES:
        general_notes.append("comply with structural code")

    return base.model_copy(update=dict(
        unit_system=units,
        primary_view=primary,
        secondary_view=secondary,
        scale=arch.detect_scale(text, default=base.scale),
        standards=arch.detect_standards(text) or base.standards,
        components=arch.extract_components(text) or base.components,
        materials=arch.extract_materials(text) or base.materials,
        dimensions=arch.extract_dimensions(text) or base.dimensions,
        reinforcement_notes=reinforcement or base.reinforcement_notes,
        general_notes=general_notes,
        detail_levels=detail_levels_for(kind, count),
        levels=arch.extract_levels(text) or base.levels,
        building_type=arch.detect_building_type(text) or base.building_type,
        floors=arch.detect_floors(text) or base.floors,
        project_kind=kind,
    ))


def technical_scene() -> Scene:
    return Scene(
        name="Technical Draft Space",
        location="architectural drafting workspace",
        time_of_day=TimeOfDay.UNKNOWN,
        lighting="neutral",
        mood="technical",
        environment="technical drawing workspace with CAD references",
    )


def architectural_title(text: str, view: ArchitecturalViewType) -> str:
    suffix = {ArchitecturalViewType.SECTION: "Section", ArchitecturalViewType.PLAN: "Plan"}.get(view, "Detail")
    return f"{generate_title(text, n_words=6)} {suffix}".strip()


def build_architectural_project(text: str, kind=ArchitecturalProjectKind.DETALLES) -> StoryboardProject:
    text = _require_text(text)
    kind = _coerce_kind(kind)
    count = detect_panel_count(text)
    metadata = build_architectural_metadata(text, kind, count)
    scene = technical_scene()

    skeletons = generate_architectural_panel_sequence(text, metadata, count, scene, kind)
    prompts = generate_architectural_panel_prompts(skeletons, metadata, kind)
    return StoryboardProject(
        title=architectural_title(text, metadata.primary_view),
        description=text,
        user_input=text,
        characters=[],
        scenes=[scene],
        panels=panels_from_prompts(prompts),
        style=StoryboardStyle.CLEAN_LINES,
        metadata=ProjectMetadata(target_audience=TargetAudience.ARCHITECTS, genre="technical", aspect_ratio="4:3"),
        project_type=ProjectType.ARCHITECTURAL,
        architectural_metadata=metadata,
        architectural_project_kind=kind,
    )


def parse_architectural_input(text: str, kind="detalles") -> PromptGenerationResult:
    start = time.perf_counter()
    try:
        project = build_architectural_project(text, kind)
    except Exception as e:
        logger.exception("Architectural parsing failed")
        return PromptGenerationResult(
            success=False,
            errors=[getattr(e, "message", None) or str(e) or "Unknown architectural parsing error"],
            processing_time=_elapsed_ms(start),
        )

    elapsed = _elapsed_ms(start)
    logger.info(
        "Parsed %s project '%s': %d panels in %.1f ms",
        project.architectural_project_kind.value, project.title, len(project.panels), elapsed,
    )
    return PromptGenerationResult(success=True, project=project, processing_time=elapsed)

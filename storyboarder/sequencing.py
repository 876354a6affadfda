## storyboarder/sequencing.py

from typing import Dict, List, Optional

from storyboarder.extractors import split_story_beats
from storyboarder.models import (
    ArchitecturalDetailLevel as DL,
    ArchitecturalMetadata,
    ArchitecturalProjectKind,
    ArchitecturalViewType as View,
    Character,
    CompositionType,
    PanelType,
    Scene,
    StoryboardPrompt,
    StoryboardStyle,
)

# --- Storyboard narrative arc ---


def generate_panel_sequence(
    text: str,
    characters: List[Character],
    scenes: List[Scene],
    count: int = 4,
) -> List[StoryboardPrompt]:
    """
    Panel skeletons following establish -> introduce -> act x (count-3) -> resolve.
    count=1 gives only the establishing panel and count=2 stops after the introduction.
    Skeletons carry an empty generated_prompt.
    """
    idea = (text or "").strip()
    main_character = characters[0]
    main_scene = scenes[0]
    all_ids = [c.id for c in characters]
    beats = split_story_beats(idea, count)

    def beat(i: int) -> str:
        return beats[i] if 0 <= i < len(beats) and beats[i] else idea

    prompts: List[StoryboardPrompt] = [StoryboardPrompt(
        panel_number=1,
        panel_type=PanelType.ESTABLISHING,
        composition=CompositionType.WIDE_SHOT,
        scene_description=f"{beat(0)} - establishing shot showing {main_scene.location}",
        action=f"{idea} - setting up the scene",
        characters=[],
        scene_id=main_scene.id,
        camera_angle="wide establishing angle",
        lighting=main_scene.lighting,
        mood=main_scene.mood,
        visual_notes=f"Scene context: {idea}",
    )]

    if count >= 2:
        prompts.append(StoryboardPrompt(
            panel_number=2,
            panel_type=PanelType.CHARACTER_INTRO,
            composition=CompositionType.MEDIUM_SHOT,
            scene_description=f"{beat(1)} - introducing the main subject",
            action=f"{idea} - {main_character.description} in the scene",
            characters=[main_character.id],
            scene_id=main_scene.id,
            camera_angle="medium shot on subject",
            lighting=main_scene.lighting,
            mood="introduction",
            visual_notes=beat(1),
        ))

    for i in range(max(0, count - 3)):
        number = 3 + i
        current = beat(min(2 + i, len(beats) - 1))
        prompts.append(StoryboardPrompt(
            panel_number=number,
            panel_type=PanelType.ACTION,
            composition=CompositionType.CLOSE_UP,
            scene_description=f"{current} - {idea}",
            action=current,
            characters=list(all_ids),
            scene_id=main_scene.id,
            camera_angle="dynamic angle on action",
            lighting=main_scene.lighting,
            mood="engaging",
            visual_notes=f"{idea} - panel {number} of {count}",
        ))

    if count >= 3:
        prompts.append(StoryboardPrompt(
            panel_number=count,
            panel_type=PanelType.RESOLUTION,
            composition=CompositionType.MEDIUM_SHOT,
            scene_description=f"{beat(len(beats) - 1)} - conclusion",
            action=f"{idea} - final moment",
            characters=list(all_ids),
            scene_id=main_scene.id,
            camera_angle="medium resolution shot",
            lighting=main_scene.lighting,
            mood="conclusive",
            visual_notes=f"{idea} - final panel showing resolution",
        ))

    return prompts


# --- Architectural detail-level progression ---

DETAIL_LEVEL_SEQUENCES: Dict[ArchitecturalProjectKind, List[DL]] = {
    ArchitecturalProjectKind.DETALLES: [DL.OVERVIEW, DL.REINFORCEMENT, DL.CONNECTION, DL.NOTES, DL.EXPLODED],
    ArchitecturalProjectKind.PLANOS: [DL.SITE, DL.PLAN, DL.SECTION, DL.ELEVATION, DL.LEGEND],
    ArchitecturalProjectKind.PROTOTIPOS: [
        DL.MASSING, DL.PROGRAM, DL.FACADE, DL.STRUCTURE, DL.CIRCULATION, DL.DIAGRAM,
    ],
}

# fixed views; OVERVIEW and REINFORCEMENT depend on the metadata
_DETAIL_VIEWS: Dict[DL, View] = {
    DL.CONNECTION: View.DETAIL,
    DL.NOTES: View.LEGEND,
    DL.EXPLODED: View.EXPLODED,
    DL.LEGEND: View.LEGEND,
    DL.PLAN: View.PLAN,
    DL.SECTION: View.SECTION,
    DL.ELEVATION: View.ELEVATION,
    DL.SITE: View.PLAN,
    DL.ROOF: View.PLAN,
    DL.PROGRAM: View.PLAN,
    DL.MASSING: View.AXONOMETRIC,
    DL.FACADE: View.ELEVATION,
    DL.STRUCTURE: View.AXONOMETRIC,
    DL.CIRCULATION: View.PLAN,
    DL.DIAGRAM: View.AXONOMETRIC,
}

VIEW_LABELS: Dict[View, str] = {
    View.SECTION: "Section cut through element",
    View.PLAN: "Plan view of element",
    View.ELEVATION: "Elevation view",
    View.DETAIL: "Enlarged detail view",
    View.ISOMETRIC: "Axonometric projection",
    View.AXONOMETRIC: "Axonometric projection",
    View.EXPLODED: "Exploded axonometric view",
    View.LEGEND: "Legend and notation panel",
}

_SCENE_DESCRIPTIONS: Dict[DL, str] = {
    DL.OVERVIEW: "{view} showing overall geometry and key dimensions",
    DL.REINFORCEMENT: "{view} highlighting reinforcement layout, bar sizes, spacing, and cover",
    DL.CONNECTION: "Detail view of connection showing plates, anchors, bolts, weld symbols, and edge distances",
    DL.NOTES: "Legend and general notes summarizing materials, symbols, and annotation conventions",
    DL.EXPLODED: "Exploded axonometric view illustrating component assembly with numbered callouts",
    DL.LEGEND: "Sheet legend with symbols, line types, and material hatches",
    DL.SITE: "Site plan showing property lines, setbacks, access, and north arrow",
    DL.PLAN: "{view} with structural grid, walls, openings, and room tags",
    DL.SECTION: "{view} showing floor levels, heights, and structural members",
    DL.ELEVATION: "{view} of the facade with levels, openings, and material callouts",
    DL.ROOF: "Roof plan showing slopes, drains, and equipment",
    DL.MASSING: "Massing diagram showing building volumes and their hierarchy",
    DL.PROGRAM: "Program diagram dividing the building into labelled zones",
    DL.FACADE: "Facade concept showing pattern, apertures, and shading elements",
    DL.STRUCTURE: "Structural diagram highlighting load paths and the structural system",
    DL.CIRCULATION: "Circulation diagram with primary routes, cores, and egress",
    DL.DIAGRAM: "Concept diagram overlay summarizing the design strategy",
}

_ACTIONS: Dict[DL, str] = {
    DL.OVERVIEW: "Present overall dimensions, reference grids, and section indicators",
    DL.REINFORCEMENT: "Detail reinforcement bars, spacing, and cover annotations",
    DL.CONNECTION: "Show connection components with dimension callouts and symbols",
    DL.NOTES: "List legend items, material schedule, and general notes",
    DL.EXPLODED: "Display exploded assembly with numbered parts and leader annotations",
    DL.LEGEND: "Summarize symbols, line types, and material hatches",
    DL.SITE: "Locate the building on site with setbacks and orientation",
    DL.PLAN: "Lay out walls, openings, and grid dimensions",
    DL.SECTION: "Cut through the building to show levels and heights",
    DL.ELEVATION: "Describe facade levels, openings, and materials",
    DL.ROOF: "Indicate roof slopes, drainage, and equipment",
    DL.MASSING: "Compose the main volumes and their proportions",
    DL.PROGRAM: "Assign program zones with labels and areas",
    DL.FACADE: "Develop the facade rhythm and shading strategy",
    DL.STRUCTURE: "Trace the load paths through the structural system",
    DL.CIRCULATION: "Draw circulation routes with flow arrows",
    DL.DIAGRAM: "Overlay concept annotations on the scheme",
}

DRAWING_CONVENTIONS = ["orthographic projection", "dimension annotations", "leader labels"]
LEGEND_ITEMS = ["symbol legend", "material legend"]

_DIAGRAM_LEVELS = {DL.PROGRAM, DL.STRUCTURE, DL.CIRCULATION, DL.DIAGRAM}


def detail_levels_for(kind: ArchitecturalProjectKind, count: int) -> List[DL]:
    """The kind's detail levels truncated to `count`; the last one repeats past the table."""
    table = DETAIL_LEVEL_SEQUENCES[kind]
    return [table[min(i, len(table) - 1)] for i in range(max(count, 0))]


def select_view_type(level: DL, metadata: ArchitecturalMetadata) -> View:
    match level:
        case DL.OVERVIEW:
            return metadata.primary_view
        case DL.REINFORCEMENT:
            if metadata.primary_view == View.PLAN:
                return View.PLAN
            return metadata.secondary_view or View.SECTION
        case _:
            return _DETAIL_VIEWS.get(level, metadata.primary_view)


def panel_type_for(level: DL) -> PanelType:
    if level in (DL.OVERVIEW, DL.SITE, DL.MASSING):
        return PanelType.ESTABLISHING
    if level in (DL.NOTES, DL.LEGEND, DL.DIAGRAM):
        return PanelType.RESOLUTION
    return PanelType.ACTION


def describe_detail_level(level: DL, view: View) -> str:
    template = _SCENE_DESCRIPTIONS.get(level, "{view} technical drawing")
    return template.format(view=VIEW_LABELS.get(view, "Technical view"))


def action_for(level: DL) -> str:
    return _ACTIONS.get(level, "Provide technical drawing information")


def _plan_level(level: DL, metadata: ArchitecturalMetadata, index: int) -> Optional[str]:
    if level not in (DL.PLAN, DL.SECTION, DL.ELEVATION) or not metadata.levels:
        return None
    return metadata.levels[index % len(metadata.levels)]


def generate_architectural_panel_sequence(
    text: str,
    metadata: ArchitecturalMetadata,
    count: int,
    scene: Scene,
    kind: ArchitecturalProjectKind = ArchitecturalProjectKind.DETALLES,
) -> List[StoryboardPrompt]:
    prompts: List[StoryboardPrompt] = []
    for index, level in enumerate(detail_levels_for(kind, count)):
        view = select_view_type(level, metadata)
        notes = metadata.reinforcement_notes if level == DL.REINFORCEMENT else metadata.general_notes
        prompts.append(StoryboardPrompt(
            panel_number=index + 1,
            panel_type=panel_type_for(level),
            composition=CompositionType.WIDE_SHOT,
            scene_description=describe_detail_level(level, view),
            characters=[],
            scene_id=scene.id,
            action=action_for(level),
            style=StoryboardStyle.CLEAN_LINES,
            view_type=view,
            detail_level=level,
            components=list(metadata.components),
            materials=list(metadata.materials),
            dimensions=list(metadata.dimensions),
            annotations=list(metadata.annotations),
            scale=metadata.scale,
            unit_system=metadata.unit_system,
            standards=list(metadata.standards),
            drawing_conventions=list(DRAWING_CONVENTIONS),
            legend_items=list(LEGEND_ITEMS) if level in (DL.NOTES, DL.LEGEND) else None,
            metadata_notes=list(notes),
            diagram_layers=list(metadata.diagram_layers) if level in _DIAGRAM_LEVELS else None,
            plan_level=_plan_level(level, metadata, index),
        ))
    return prompts

## storyboarder/architectural_prompting.py

from typing import Dict, Iterable, List

from storyboarder.models import (
    ArchitecturalDetailLevel as DL,
    ArchitecturalMetadata,
    ArchitecturalProjectKind,
    ArchitecturalViewType as View,
    StoryboardPrompt,
    UnitSystem,
)

BASE_STYLE = (
    "technical drawing, CAD line art, monochrome, high contrast, orthographic projection, "
    "precise line weights, blueprint aesthetic"
)
BASE_EXCLUSIONS = "no people, no characters, no cinematic camera, no photorealism, no shading, no background scenery"
DRAFTING_CONVENTIONS = "include dimension lines, leader arrows, text height 2.5mm, consistent line weights"
PLANOS_EXTRAS = "include north arrow, sheet title block, clean dimension strings"
PROTOTIPOS_EXTRAS = "diagram overlays with arrows and labels, no shading, conceptual massing emphasis"

DETAIL_FOCUS: Dict[DL, str] = {
    DL.OVERVIEW: "show overall geometry, reference grids, global dimensions",
    DL.REINFORCEMENT: "focus on reinforcement layout, bar labels, spacing callouts, cover dimensions",
    DL.CONNECTION: "focus on connection components, plates, bolts, weld symbols, edge distances",
    DL.NOTES: "present legend, material list, general notes, annotation symbols",
    DL.EXPLODED: "explode assembly, numbered balloons, part references",
    DL.LEGEND: "display symbol legend, annotation keys, material hatch legend",
    DL.PLAN: "floor plan with grids, dimensions, room tags, callouts",
    DL.SECTION: "section cut showing levels, heights, structural members",
    DL.ELEVATION: "elevation view highlighting facade elements and levels",
    DL.SITE: "site plan with property lines, setbacks, north arrow",
    DL.ROOF: "roof plan with slopes, drains, equipment",
    DL.PROGRAM: "diagram showing program zones with labels",
    DL.MASSING: "massing diagram showing building volumes and hierarchy",
    DL.FACADE: "facade concept with pattern, apertures, shading elements",
    DL.STRUCTURE: "structural diagram highlighting load paths and systems",
    DL.CIRCULATION: "circulation/egress diagram with primary routes",
    DL.DIAGRAM: "conceptual diagram overlay with annotations",
}

VIEW_DESCRIPTIONS: Dict[View, str] = {
    View.SECTION: "section view, cut plane through element, show depth and reinforcement",
    View.PLAN: "plan view, orthographic top-down projection, show grid and layout",
    View.ELEVATION: "elevation view, orthographic side projection",
    View.DETAIL: "enlarged detail view, high scale for clarity",
    View.ISOMETRIC: "isometric projection, 3D axonometric lines, no perspective",
    View.AXONOMETRIC: "axonometric projection, consistent scale on axes",
    View.EXPLODED: "exploded axonometric, spaced components, numbered callouts",
    View.LEGEND: "legend layout, organized lists and symbols",
}

UNIT_SYNONYMS: Dict[UnitSystem, str] = {
    UnitSystem.METRIC: "metric units (mm)",
    UnitSystem.IMPERIAL: "imperial units (inches)",
}


def unique_concat(*lists: Iterable) -> List:
    seen = set()
    out = []
    for items in lists:
        for item in items or []:
            if item is None or item in seen:
                continue
            seen.add(item)
            out.append(item)
    return out


def default_architectural_metadata(
    kind: ArchitecturalProjectKind = ArchitecturalProjectKind.DETALLES,
) -> ArchitecturalMetadata:
    """Baseline metadata each project kind starts from."""
    kind = ArchitecturalProjectKind(kind)
    if kind == ArchitecturalProjectKind.PLANOS:
        return ArchitecturalMetadata(
            primary_view=View.PLAN,
            secondary_view=View.SECTION,
            scale="1:100",
            standards=["ISO 128"],
            drawing_style="architectural plan drafting, CAD line work",
            components=["floor layout", "walls", "openings", "structural grid"],
            materials=["concrete", "masonry", "glass"],
            dimensions=["overall building dimensions", "room dimensions", "grid spacing"],
            annotations=["grid bubbles", "dimension strings", "room tags", "north arrow"],
            general_notes=["all dimensions in millimeters unless noted", "verify on site"],
            detail_levels=[DL.SITE, DL.PLAN, DL.SECTION, DL.ELEVATION, DL.LEGEND],
            project_kind=kind,
            levels=["Ground Floor", "First Floor"],
            grids=["Grid A-F", "Grid 1-6"],
            view_set=[View.PLAN, View.SECTION],
        )
    if kind == ArchitecturalProjectKind.PROTOTIPOS:
        return ArchitecturalMetadata(
            primary_view=View.AXONOMETRIC,
            secondary_view=View.PLAN,
            scale="1:200",
            standards=["Conceptual diagram"],
            drawing_style="concept massing line art, diagram overlays",
            components=["building volumes", "public plaza", "core"],
            materials=["concept massing"],
            dimensions=["overall footprint", "height zoning"],
            annotations=["program labels", "flow arrows", "legend"],
            general_notes=["conceptual prototype visualization"],
            detail_levels=[DL.MASSING, DL.PROGRAM, DL.FACADE, DL.STRUCTURE, DL.CIRCULATION, DL.DIAGRAM],
            project_kind=kind,
            building_type="mixed-use",
            floors=5,
            footprint="45m x 25m",
            orientation="north-up",
            program_items=["retail", "office", "residential"],
            diagram_layers=["program", "structure", "circulation"],
            concept_notes=["highlight public-private transition", "optimize daylight"],
        )
    return ArchitecturalMetadata(
        primary_view=View.SECTION,
        secondary_view=View.DETAIL,
        scale="1:20",
        standards=["ACI 318"],
        drawing_style="CAD drafting, orthographic line art, black and white",
        components=["reinforced concrete beam", "reinforcing steel"],
        materials=["concrete f'c 28 MPa", "steel grade 60"],
        dimensions=["overall dimensions", "cover 25 mm", "stirrups @150 mm"],
        annotations=["dimension strings", "leader labels", "section markers"],
        reinforcement_notes=["use standard hooks", "lap splice per code"],
        general_notes=["all dimensions in mm unless noted"],
        detail_levels=[DL.OVERVIEW, DL.REINFORCEMENT],
        project_kind=kind,
    )


_LIST_FIELDS = [
    "standards", "components", "materials", "dimensions", "annotations", "reinforcement_notes",
    "general_notes", "detail_levels", "levels", "grids", "view_set", "program_items",
    "diagram_layers", "concept_notes",
]


def merge_architectural_metadata(base, incoming: ArchitecturalMetadata) -> ArchitecturalMetadata:
    """Scalars keep the base value when it is set; lists are concatenated without duplicates."""
    if base is None:
        return incoming.model_copy(deep=True)
    merged = {}
    for name in ArchitecturalMetadata.model_fields:
        old, new = getattr(base, name), getattr(incoming, name)
        if name in _LIST_FIELDS:
            merged[name] = unique_concat(old, new)
        else:
            merged[name] = old if old not in (None, "") else new
    return ArchitecturalMetadata(**merged)


def build_architectural_prompt(
    prompt: StoryboardPrompt,
    metadata: ArchitecturalMetadata,
    kind: ArchitecturalProjectKind,
) -> str:
    view = prompt.view_type or metadata.primary_view
    level = prompt.detail_level or (metadata.detail_levels[0] if metadata.detail_levels else DL.OVERVIEW)
    scale = prompt.scale or metadata.scale
    units = prompt.unit_system or metadata.unit_system
    standards = prompt.standards or metadata.standards
    components = prompt.components or metadata.components
    materials = prompt.materials or metadata.materials
    dimensions = prompt.dimensions or metadata.dimensions
    annotations = prompt.annotations or metadata.annotations
    legend_items = prompt.legend_items or []
    notes = unique_concat(metadata.general_notes, prompt.metadata_notes)

    parts = [
        BASE_STYLE,
        metadata.drawing_style,
        VIEW_DESCRIPTIONS.get(view),
        DETAIL_FOCUS.get(level),
        f"scale {scale}",
        UNIT_SYNONYMS.get(units, str(units)),
    ]
    for label, values in (
        ("components", components),
        ("materials", materials),
        ("dimensions", dimensions),
        ("annotations", annotations),
        ("legend items", legend_items),
        ("standards", standards),
        ("notes", notes),
    ):
        if values:
            parts.append(f"{label}: {', '.join(values)}")

    if kind == ArchitecturalProjectKind.PLANOS:
        if metadata.levels:
            parts.append(f"levels included: {', '.join(metadata.levels)}")
        if metadata.grids:
            parts.append(f"grid references: {', '.join(metadata.grids)}")
        if metadata.view_set:
            parts.append(f"sheet views: {', '.join(v.value.replace('_', ' ') for v in metadata.view_set)}")
        current = prompt.plan_level or (metadata.levels[0] if metadata.levels else None)
        if current:
            parts.append(f"current level: {current}")
        parts.append(PLANOS_EXTRAS)
    elif kind == ArchitecturalProjectKind.PROTOTIPOS:
        program = unique_concat(metadata.program_items, [c for c in components if "program" in c])
        layers = unique_concat(metadata.diagram_layers, prompt.diagram_layers)
        if metadata.building_type:
            parts.append(f"building type: {metadata.building_type}")
        if metadata.floors:
            parts.append(f"number of floors: {metadata.floors}")
        if metadata.footprint:
            parts.append(f"footprint: {metadata.footprint}")
        if metadata.orientation:
            parts.append(f"orientation: {metadata.orientation}")
        if program:
            parts.append(f"program zones: {', '.join(program)}")
        if layers:
            parts.append(f"diagram layers: {', '.join(layers)}")
        if metadata.concept_notes:
            parts.append(f"concept notes: {', '.join(metadata.concept_notes)}")
        parts.append(PROTOTIPOS_EXTRAS)

    parts.append(DRAFTING_CONVENTIONS)
    parts.append(BASE_EXCLUSIONS)
    return ", ".join(p for p in parts if p)


def generate_architectural_panel_prompts(
    prompts: List[StoryboardPrompt],
    metadata: ArchitecturalMetadata,
    kind: ArchitecturalProjectKind = ArchitecturalProjectKind.DETALLES,
) -> List[StoryboardPrompt]:
    kind = ArchitecturalProjectKind(kind)
    return [
        p.model_copy(update={"generated_prompt": build_architectural_prompt(p, metadata, kind)})
        for p in prompts
    ]

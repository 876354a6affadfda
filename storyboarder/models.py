## storyboarder/models.py

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoryboardStyle(str, Enum):
    ROUGH_SKETCH = "rough_sketch"
    PENCIL_DRAWING = "pencil_drawing"
    CLEAN_LINES = "clean_lines"
    CONCEPT_ART = "concept_art"
    COMIC_STYLE = "comic_style"


class ProjectType(str, Enum):
    STORYBOARD = "storyboard"
    ARCHITECTURAL = "architectural"
    MINI_WORLD = "mini_world"


class ArchitecturalProjectKind(str, Enum):
    DETALLES = "detalles"
    PLANOS = "planos"
    PROTOTIPOS = "prototipos"


class ArchitecturalViewType(str, Enum):
    SECTION = "section"
    PLAN = "plan"
    ELEVATION = "elevation"
    DETAIL = "detail"
    ISOMETRIC = "isometric"
    AXONOMETRIC = "axonometric"
    EXPLODED = "exploded"
    LEGEND = "legend"


class ArchitecturalDetailLevel(str, Enum):
    OVERVIEW = "overview"
    REINFORCEMENT = "reinforcement"
    CONNECTION = "connection"
    NOTES = "notes"
    EXPLODED = "exploded"
    LEGEND = "legend"
    PLAN = "plan"
    SECTION = "section"
    ELEVATION = "elevation"
    SITE = "site"
    ROOF = "roof"
    PROGRAM = "program"
    MASSING = "massing"
    FACADE = "facade"
    STRUCTURE = "structure"
    CIRCULATION = "circulation"
    DIAGRAM = "diagram"


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class CompositionType(str, Enum):
    EXTREME_WIDE = "extreme_wide"
    WIDE_SHOT = "wide_shot"
    MEDIUM_SHOT = "medium_shot"
    CLOSE_UP = "close_up"
    EXTREME_CLOSE_UP = "extreme_close_up"
    OVER_SHOULDER = "over_shoulder"
    BIRD_EYE = "bird_eye"
    WORM_EYE = "worm_eye"


class PanelType(str, Enum):
    ESTABLISHING = "establishing"
    CHARACTER_INTRO = "character_intro"
    ACTION = "action"
    DIALOGUE = "dialogue"
    REACTION = "reaction"
    TRANSITION = "transition"
    RESOLUTION = "resolution"


class TimeOfDay(str, Enum):
    DAWN = "dawn"
    MORNING = "morning"
    NOON = "noon"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    UNKNOWN = "unknown"


class CharacterRole(str, Enum):
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    SUPPORTING = "supporting"
    BACKGROUND = "background"


class TargetAudience(str, Enum):
    ANIMATORS = "animators"
    FILMMAKERS = "filmmakers"
    MARKETERS = "marketers"
    ARCHITECTS = "architects"
    GENERAL = "general"


class ThemeType(str, Enum):
    HISTORICAL = "historical"
    EDUCATIONAL = "educational"
    TECHNICAL = "technical"
    FICTIONAL = "fictional"
    GENERAL = "general"


class VisualStyleName(str, Enum):
    TOONS = "toons"
    REALISTIC = "realistic"
    ANIME = "anime"
    SKETCH = "sketch"
    STORYBOARD = "storyboard"
    GENERIC = "generic"


class Complexity(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    COMPLEX = "complex"


class IssueType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class PDFLayout(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    QUAD = "quad"


# ---- Project entities ----

class CharacterAppearance(BaseModel):
    age: Optional[str] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    build: Optional[str] = None
    clothing: Optional[str] = None
    hair: Optional[str] = None
    distinctive_features: List[str] = []
    # non-human variants
    species: Optional[str] = None
    body_type: Optional[str] = None
    texture: Optional[str] = None
    coloration: Optional[str] = None


class Character(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str
    appearance: CharacterAppearance = Field(default_factory=CharacterAppearance)
    personality: List[str] = []
    role: CharacterRole = CharacterRole.SUPPORTING
    reference_image: Optional[str] = None
    use_reference_in_prompt: bool = False


class Scene(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    location: str
    time_of_day: TimeOfDay = TimeOfDay.UNKNOWN
    weather: Optional[str] = None
    lighting: str = "natural lighting"
    mood: str = "neutral"
    environment: str = ""
    props: List[str] = []


class StoryboardPrompt(BaseModel):
    id: str = Field(default_factory=new_id)
    panel_number: int
    panel_type: PanelType = PanelType.ACTION
    composition: CompositionType = CompositionType.MEDIUM_SHOT
    scene_description: str = ""
    characters: List[str] = []
    scene_id: str = ""
    action: str = ""
    dialogue: Optional[str] = None
    camera_angle: Optional[str] = None
    lighting: Optional[str] = None
    mood: Optional[str] = None
    visual_notes: Optional[str] = None
    generated_prompt: str = ""
    style: StoryboardStyle = StoryboardStyle.ROUGH_SKETCH
    # architectural extensions
    view_type: Optional[ArchitecturalViewType] = None
    detail_level: Optional[ArchitecturalDetailLevel] = None
    components: Optional[List[str]] = None
    materials: Optional[List[str]] = None
    dimensions: Optional[List[str]] = None
    annotations: Optional[List[str]] = None
    scale: Optional[str] = None
    unit_system: Optional[UnitSystem] = None
    standards: Optional[List[str]] = None
    drawing_conventions: Optional[List[str]] = None
    legend_items: Optional[List[str]] = None
    metadata_notes: Optional[List[str]] = None
    diagram_layers: Optional[List[str]] = None
    plan_level: Optional[str] = None


class StoryboardPanel(BaseModel):
    id: str = Field(default_factory=new_id)
    panel_number: int
    prompt: StoryboardPrompt
    generated_image_url: Optional[str] = None
    is_generating: bool = False
    last_generated: Optional[datetime] = None
    user_notes: Optional[str] = None
    is_edited: bool = False
    detail_level: Optional[ArchitecturalDetailLevel] = None


class ProjectMetadata(BaseModel):
    target_audience: TargetAudience = TargetAudience.GENERAL
    genre: Optional[str] = None
    duration: Optional[float] = None
    aspect_ratio: str = "1:1"


class ArchitecturalMetadata(BaseModel):
    unit_system: UnitSystem = UnitSystem.METRIC
    primary_view: ArchitecturalViewType = ArchitecturalViewType.SECTION
    secondary_view: Optional[ArchitecturalViewType] = None
    scale: str = "1:20"
    standards: List[str] = []
    drawing_style: str = ""
    components: List[str] = []
    materials: List[str] = []
    dimensions: List[str] = []
    annotations: List[str] = []
    reinforcement_notes: List[str] = []
    general_notes: List[str] = []
    detail_levels: List[ArchitecturalDetailLevel] = []
    project_kind: Optional[ArchitecturalProjectKind] = None
    # planos
    levels: List[str] = []
    grids: List[str] = []
    view_set: List[ArchitecturalViewType] = []
    sheet_title: Optional[str] = None
    sheet_number: Optional[str] = None
    # prototipos
    building_type: Optional[str] = None
    floors: Optional[int] = None
    footprint: Optional[str] = None
    orientation: Optional[str] = None
    program_items: List[str] = []
    diagram_layers: List[str] = []
    concept_notes: List[str] = []


class StoryboardProject(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str
    user_input: str
    characters: List[Character] = []
    scenes: List[Scene] = []
    panels: List[StoryboardPanel] = []
    style: StoryboardStyle = StoryboardStyle.ROUGH_SKETCH
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_complete: bool = True
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    project_type: ProjectType = ProjectType.STORYBOARD
    architectural_metadata: Optional[ArchitecturalMetadata] = None
    architectural_project_kind: Optional[ArchitecturalProjectKind] = None

    def character_ids(self) -> List[str]:
        return [c.id for c in self.characters]

    def find_scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None


# ---- Ephemeral analysis records ----

def _clean_strings(values) -> List[str]:
    seen = set()
    cleaned: List[str] = []
    for v in values or []:
        if v is None:
            continue
        text = str(v).strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            cleaned.append(text)
    return cleaned


class ThemeAnalysis(BaseModel):
    """Theme classification re-derived from a project's original input.

    Lists are stripped and de-duplicated here, so consumers never need to
    guard against missing or ``None`` entries.
    """

    type: ThemeType = ThemeType.GENERAL
    concepts: List[str] = []
    time_period: Optional[str] = None
    location: Optional[str] = None
    key_events: List[str] = []
    main_subject: Optional[str] = None

    @field_validator("concepts", "key_events", mode="before")
    @classmethod
    def _normalize_lists(cls, value):
        return _clean_strings(value)

    @field_validator("time_period", "location", "main_subject", mode="before")
    @classmethod
    def _normalize_text(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class VisualStyle(BaseModel):
    style: VisualStyleName = VisualStyleName.GENERIC
    characteristics: List[str] = []
    complexity: Complexity = Complexity.SIMPLE
    color_scheme: Optional[str] = None
    artistic_elements: List[str] = []

    @field_validator("characteristics", "artistic_elements", mode="before")
    @classmethod
    def _normalize_lists(cls, value):
        return _clean_strings(value)


# ---- Results ----

class ValidationIssue(BaseModel):
    type: IssueType
    message: str
    panel_number: Optional[int] = None


class ValidationResult(BaseModel):
    is_valid: bool
    score: int = Field(ge=0, le=100)
    issues: List[ValidationIssue] = []
    suggestions: List[str] = []

    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.type == IssueType.ERROR]


class PromptGenerationResult(BaseModel):
    success: bool
    project: Optional[StoryboardProject] = None
    errors: List[str] = []
    warnings: List[str] = []
    processing_time: float = 0.0

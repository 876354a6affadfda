## storyboarder/prompting.py

from typing import Dict, List, Optional

from storyboarder.analysis import build_theme_context, build_visual_style_context
from storyboarder.models import (
    Character,
    CompositionType,
    Scene,
    StoryboardPrompt,
    StoryboardStyle,
    TargetAudience,
    ThemeAnalysis,
    TimeOfDay,
    VisualStyle,
    VisualStyleName,
)

STYLE_TEMPLATES: Dict[StoryboardStyle, Dict[str, str]] = {
    StoryboardStyle.ROUGH_SKETCH: {
        "prefix": "Rough pencil sketch storyboard drawing, loose lines, sketchy style, black and white",
        "suffix": "storyboard panel, concept art style, unfinished sketch look, hand-drawn appearance",
    },
    StoryboardStyle.PENCIL_DRAWING: {
        "prefix": "Detailed pencil drawing storyboard, clean lines, shaded, black and white",
        "suffix": "professional storyboard panel, detailed pencil work, realistic proportions",
    },
    StoryboardStyle.CLEAN_LINES: {
        "prefix": "Clean line art storyboard, precise lines, minimal shading, black and white",
        "suffix": "professional storyboard panel, clean vector-like appearance",
    },
    StoryboardStyle.CONCEPT_ART: {
        "prefix": "Concept art style storyboard, detailed illustration, atmospheric",
        "suffix": "cinematic storyboard panel, professional concept art quality",
    },
    StoryboardStyle.COMIC_STYLE: {
        "prefix": "Comic book style storyboard, bold lines, dynamic composition",
        "suffix": "comic panel style, graphic novel aesthetic",
    },
}

COMPOSITION_TEMPLATES: Dict[CompositionType, Dict[str, str]] = {
    CompositionType.EXTREME_WIDE: {
        "description": "extreme wide shot showing the entire environment",
        "framing": "very wide framing, characters small in frame, emphasis on location and setting",
        "purpose": "establishing shot, showing scale and context",
    },
    CompositionType.WIDE_SHOT: {
        "description": "wide shot showing full characters and environment",
        "framing": "wide framing, full body characters visible, good amount of background",
        "purpose": "establishing characters in their environment",
    },
    CompositionType.MEDIUM_SHOT: {
        "description": "medium shot from waist up",
        "framing": "medium framing, characters from waist up, balanced character and background",
        "purpose": "dialogue and character interaction",
    },
    CompositionType.CLOSE_UP: {
        "description": "close-up shot focusing on character faces or important details",
        "framing": "tight framing, focus on faces or key objects, minimal background",
        "purpose": "emotional moments and important details",
    },
    CompositionType.EXTREME_CLOSE_UP: {
        "description": "extreme close-up on specific details",
        "framing": "very tight framing, focus on eyes, hands, or specific objects",
        "purpose": "dramatic emphasis and fine details",
    },
    CompositionType.OVER_SHOULDER: {
        "description": "over-the-shoulder shot showing conversation",
        "framing": "shot from behind one character looking at another",
        "purpose": "dialogue scenes and character relationships",
    },
    CompositionType.BIRD_EYE: {
        "description": "bird's eye view from above",
        "framing": "high angle looking down, showing layout and spatial relationships",
        "purpose": "showing movement patterns and spatial context",
    },
    CompositionType.WORM_EYE: {
        "description": "worm's eye view from below",
        "framing": "low angle looking up, making subjects appear powerful or imposing",
        "purpose": "dramatic effect and showing dominance",
    },
}

AUDIENCE_TEMPLATES: Dict[TargetAudience, Dict] = {
    TargetAudience.ANIMATORS: {
        "style_preference": StoryboardStyle.ROUGH_SKETCH,
        "additional_notes": "animation-ready, clear character poses, motion lines where appropriate",
        "focus": "character animation and movement",
    },
    TargetAudience.FILMMAKERS: {
        "style_preference": StoryboardStyle.CONCEPT_ART,
        "additional_notes": "cinematic composition, camera angles, lighting setup",
        "focus": "cinematography and visual direction",
    },
    TargetAudience.MARKETERS: {
        "style_preference": StoryboardStyle.CLEAN_LINES,
        "additional_notes": "clear product visibility, brand-appropriate styling, commercial appeal",
        "focus": "product presentation and brand messaging",
    },
    TargetAudience.ARCHITECTS: {
        "style_preference": StoryboardStyle.CLEAN_LINES,
        "additional_notes": "architectural accuracy, spatial relationships, technical precision",
        "focus": "spatial design and structural elements",
    },
    TargetAudience.GENERAL: {
        "style_preference": StoryboardStyle.ROUGH_SKETCH,
        "additional_notes": "clear visual communication, balanced composition",
        "focus": "general visual storytelling",
    },
}

# detected drawing style -> storyboard style, used when no audience preset applies
_VISUAL_STYLE_MAP = {
    VisualStyleName.TOONS: StoryboardStyle.COMIC_STYLE,
    VisualStyleName.REALISTIC: StoryboardStyle.PENCIL_DRAWING,
    VisualStyleName.ANIME: StoryboardStyle.COMIC_STYLE,
    VisualStyleName.SKETCH: StoryboardStyle.ROUGH_SKETCH,
    VisualStyleName.STORYBOARD: StoryboardStyle.ROUGH_SKETCH,
    VisualStyleName.GENERIC: StoryboardStyle.ROUGH_SKETCH,
}

STORYBOARD_ENHANCEMENTS = [
    "storyboard panel",
    "sequential art",
    "narrative flow",
    "cinematic composition",
    "professional storyboard quality",
    "clear visual storytelling",
    "appropriate for pre-visualization",
]


def _join(parts: List[Optional[str]], sep: str = ", ") -> str:
    return sep.join(p for p in parts if p)


def describe_character(character: Character) -> str:
    a = character.appearance
    features = _join([
        a.age,
        a.gender,
        a.build and f"{a.build} build",
        a.hair and f"{a.hair} hair",
        a.clothing and f"wearing {a.clothing}",
        ", ".join(a.distinctive_features),
    ])
    return f"{character.description} ({features})" if features else character.description


def describe_setting(scene: Scene) -> str:
    return _join([
        scene.location,
        scene.time_of_day != TimeOfDay.UNKNOWN and f"during {scene.time_of_day.value}",
        scene.weather and f"{scene.weather} weather",
        scene.environment if scene.environment != scene.location else None,
    ])


def generate_storyboard_prompt(prompt: StoryboardPrompt, characters: List[Character], scene: Optional[Scene]) -> str:
    style = STYLE_TEMPLATES[prompt.style]
    composition = COMPOSITION_TEMPLATES[prompt.composition]

    in_panel = [c for c in characters if c.id in prompt.characters]
    cast = " and ".join(describe_character(c) for c in in_panel)
    setting = describe_setting(scene) if scene else ""

    return _join([
        style["prefix"],
        composition["description"],
        prompt.scene_description,
        cast and f"featuring {cast}",
        setting and f"in {setting}",
        prompt.action,
        prompt.camera_angle and f"camera angle: {prompt.camera_angle}",
        prompt.lighting and f"lighting: {prompt.lighting}",
        prompt.mood and f"mood: {prompt.mood}",
        composition["framing"],
        prompt.visual_notes,
        style["suffix"],
    ])


def enhance_prompt_for_storyboard(base_prompt: str) -> str:
    return f"{base_prompt}, {', '.join(STORYBOARD_ENHANCEMENTS)}"


def generate_all_panel_prompts(
    prompts: List[StoryboardPrompt],
    characters: List[Character],
    scenes: List[Scene],
) -> List[StoryboardPrompt]:
    """Fill generated_prompt for every panel; the scene falls back to the first one."""
    by_id = {s.id: s for s in scenes}
    out: List[StoryboardPrompt] = []
    for p in prompts:
        scene = by_id.get(p.scene_id) or (scenes[0] if scenes else None)
        text = enhance_prompt_for_storyboard(generate_storyboard_prompt(p, characters, scene))
        out.append(p.model_copy(update={"generated_prompt": text}))
    return out


def _append_note(existing: Optional[str], note: str) -> str:
    return f"{existing}, {note}" if existing else note


def apply_audience_template(
    prompt: StoryboardPrompt,
    audience: TargetAudience,
    style: Optional[StoryboardStyle] = None,
) -> StoryboardPrompt:
    """Audience notes go into visual_notes; style is the given one or the audience preference."""
    template = AUDIENCE_TEMPLATES[TargetAudience(audience)]
    return prompt.model_copy(update={
        "style": style or template["style_preference"],
        "visual_notes": _append_note(prompt.visual_notes, template["additional_notes"]),
    })


def resolve_project_style(audience: TargetAudience, visual_style: VisualStyle) -> StoryboardStyle:
    if audience != TargetAudience.GENERAL:
        return AUDIENCE_TEMPLATES[audience]["style_preference"]
    return _VISUAL_STYLE_MAP[visual_style.style]


def add_contextual_notes(prompt: StoryboardPrompt, theme: ThemeAnalysis, style: VisualStyle) -> StoryboardPrompt:
    notes = _append_note(prompt.visual_notes, build_theme_context(prompt.panel_type, theme))
    notes = _append_note(notes, build_visual_style_context(style))
    return prompt.model_copy(update={"visual_notes": notes})


def character_consistency_prompt(character: Character) -> str:
    a = character.appearance
    return _join([
        "maintain consistent character appearance",
        a.age and f"always {a.age}",
        a.gender,
        a.build and f"{a.build} build",
        a.hair and f"{a.hair} hair",
        a.clothing and f"wearing {a.clothing}",
        a.distinctive_features and f"distinctive features: {', '.join(a.distinctive_features)}",
        "same character design across all panels",
    ])

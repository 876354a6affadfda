## storyboarder/extractors.py

import logging
import re
from typing import List, Tuple

from storyboarder.models import (
    Character,
    CharacterAppearance,
    CharacterRole,
    Scene,
    TargetAudience,
    TimeOfDay,
)

logger = logging.getLogger(__name__)

DEFAULT_PANEL_COUNT = 4
MIN_PANELS = 1
MAX_PANELS = 12

# --- Characters ---

# (pattern, type); first match per type yields one character
_CHARACTER_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\b(?:man|men|guy|dude|gentleman|hombre|señor)\b"), "man"),
    (re.compile(r"\b(?:woman|women|lady|mujer|señora)\b"), "woman"),
    (re.compile(r"\b(?:dogs?|pupp(?:y|ies)|canine|perros?|perrito)\b"), "dog"),
    (re.compile(r"\b(?:cats?|kittens?|feline|gatos?|gatito)\b"), "cat"),
    (re.compile(r"\b(?:child|children|kids?|boy|girl|niño|niña)\b"), "child"),
    (re.compile(r"\b(?:robots?|android|machine)\b"), "robot"),
]

_CHARACTER_DESCRIPTIONS = {
    "man": "A man with average build and casual appearance",
    "woman": "A woman with average build and casual appearance",
    "dog": "A friendly dog with medium size and expressive features",
    "cat": "A cat with sleek fur and alert posture",
    "child": "A child with youthful energy and curious expression",
    "robot": "A robot with mechanical features and technological design",
}

_CHARACTER_APPEARANCES = {
    "man": dict(age="adult", gender="male", build="average", clothing="casual"),
    "woman": dict(age="adult", gender="female", build="average", clothing="casual"),
    "dog": dict(age="adult", build="medium", species="dog", coloration="natural coat",
                distinctive_features=["four legs", "tail", "fur"]),
    "cat": dict(age="adult", build="small", species="cat", texture="sleek fur",
                distinctive_features=["four legs", "tail", "whiskers"]),
    "child": dict(age="child", build="small", clothing="casual"),
    "robot": dict(build="mechanical", species="robot", body_type="humanoid frame", texture="metallic",
                  distinctive_features=["metallic", "technological"]),
}

# --- Scenes ---

# (pattern, canonical location, environment)
_LOCATION_PATTERNS: List[Tuple[re.Pattern, str, str]] = [
    (re.compile(r"\b(?:parks?|gardens?|outdoors?|parque|jard[ií]n)\b"),
     "park", "outdoor natural setting with trees and grass"),
    (re.compile(r"\b(?:house|home|room|living room|casa|hogar)\b"),
     "indoor home", "comfortable indoor residential space"),
    (re.compile(r"\b(?:streets?|roads?|sidewalk|calle)\b"),
     "street", "urban street setting with buildings and pavement"),
    (re.compile(r"\b(?:office|workplace|oficina)\b"),
     "office", "professional indoor workspace"),
    (re.compile(r"\b(?:beach|ocean|sea|water|playa)\b"),
     "beach", "coastal setting with sand and water"),
    (re.compile(r"\b(?:construction site|worksite|obra)\b"),
     "construction site", "active construction area with structural elements and equipment"),
    (re.compile(r"\b(?:blueprints?|technical drawings?)\b"),
     "blueprint table", "architectural blueprints and technical drawings on a desk"),
    (re.compile(r"\b(?:studio|atelier|estudio)\b"),
     "design studio", "architectural studio with drafting tools and models"),
    (re.compile(r"\b(?:forest|woods|jungle|bosque|selva)\b"),
     "forest", "dense woodland with tall trees and dappled light"),
]

_TIME_OF_DAY_PATTERNS: List[Tuple[re.Pattern, TimeOfDay]] = [
    (re.compile(r"\b(?:morning|mañana)\b"), TimeOfDay.MORNING),
    (re.compile(r"\b(?:noon|midday|mediodía)\b"), TimeOfDay.NOON),
    (re.compile(r"\b(?:afternoon|tarde)\b"), TimeOfDay.AFTERNOON),
    (re.compile(r"\b(?:evening|sunset|atardecer)\b"), TimeOfDay.EVENING),
    (re.compile(r"\b(?:night|midnight|noche)\b"), TimeOfDay.NIGHT),
    (re.compile(r"\b(?:dawn|sunrise|amanecer)\b"), TimeOfDay.DAWN),
]

_TIME_OF_DAY_LIGHTING = {
    TimeOfDay.DAWN: "soft dawn light",
    TimeOfDay.MORNING: "bright morning light",
    TimeOfDay.NOON: "harsh midday sun",
    TimeOfDay.AFTERNOON: "warm afternoon light",
    TimeOfDay.EVENING: "golden evening light",
    TimeOfDay.NIGHT: "low night lighting with artificial light sources",
}

_MOOD_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\b(?:happy|joy\w*|cheerful|feliz|alegre)\b"), "happy"),
    (re.compile(r"\b(?:sad|melancholy|melancholic|triste)\b"), "sad"),
    (re.compile(r"\b(?:exciting|excited|energetic|emocionante)\b"), "exciting"),
    (re.compile(r"\b(?:calm|peaceful|tranquil|tranquilo|tranquila)\b"), "calm"),
    (re.compile(r"\b(?:tense|dramatic|tenso|tensa)\b"), "tense"),
]

_GENRE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\b(?:action|fight\w*|acción|pelea)\b"), "action"),
    (re.compile(r"\b(?:comedy|funny|comedia)\b"), "comedy"),
    (re.compile(r"\b(?:drama|emotional)\b"), "drama"),
    (re.compile(r"\b(?:horror|scary|terror)\b"), "horror"),
]

_AUDIENCE_PATTERNS: List[Tuple[re.Pattern, TargetAudience]] = [
    (re.compile(r"\b(?:animation|animated|cartoons?|animación)\b"), TargetAudience.ANIMATORS),
    (re.compile(r"\b(?:films?|movies?|película|cine)\b"), TargetAudience.FILMMAKERS),
    (re.compile(r"\b(?:products?|brands?|marca)\b"), TargetAudience.MARKETERS),
    (re.compile(
        r"\b(?:building|architecture|architectural|beams?|columns?|truss|blueprints?|cad|"
        r"technical drawing|construction detail|structural)\b"
    ), TargetAudience.ARCHITECTS),
]

_PANEL_COUNT_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
    "uno": 1, "dos": 2, "tres": 3, "cuatro": 4, "cinco": 5, "seis": 6,
    "siete": 7, "ocho": 8, "nueve": 9, "diez": 10, "once": 11, "doce": 12,
}

_PANEL_COUNT = re.compile(r"\b(\d{1,2})\s*(?:panels?|frames?|paneles|viñetas?)\b")
_PANEL_COUNT_LABEL = re.compile(r"\b(?:panels?|frames?|paneles)\s*[:=]\s*(\d{1,2})\b")
_PANEL_COUNT_WORD = re.compile(
    r"\b(" + "|".join(_PANEL_COUNT_WORDS) + r")\s+(?:panels?|frames?|paneles|viñetas?)\b"
)

# Sentence terminators for story beats
_BEAT_SPLIT = re.compile(r"[.!?]+")


def _first_match(text: str, table, default):
    for pattern, value in table:
        if pattern.search(text):
            return value
    return default


def extract_characters(text: str) -> List[Character]:
    """One character per detected category; falls back to the input itself."""
    lowered = (text or "").lower()
    characters: List[Character] = []
    for pattern, kind in _CHARACTER_PATTERNS:
        if not pattern.search(lowered):
            continue
        characters.append(Character(
            name=kind.capitalize(),
            description=_CHARACTER_DESCRIPTIONS[kind],
            appearance=CharacterAppearance(**_CHARACTER_APPEARANCES[kind]),
            role=CharacterRole.PROTAGONIST if not characters else CharacterRole.SUPPORTING,
        ))

    if not characters:
        logger.debug("No character keywords found, using input as main subject")
        characters.append(Character(
            name="Main Subject",
            description=(text or "").strip(),
            appearance=CharacterAppearance(age="adult", build="average", clothing="casual"),
            role=CharacterRole.PROTAGONIST,
        ))
    return characters


def detect_time_of_day(text: str) -> TimeOfDay:
    return _first_match((text or "").lower(), _TIME_OF_DAY_PATTERNS, TimeOfDay.UNKNOWN)


def detect_mood(text: str) -> str:
    return _first_match((text or "").lower(), _MOOD_PATTERNS, "neutral")


def detect_genre(text: str) -> str:
    return _first_match((text or "").lower(), _GENRE_PATTERNS, "general")


def detect_target_audience(text: str) -> TargetAudience:
    return _first_match((text or "").lower(), _AUDIENCE_PATTERNS, TargetAudience.GENERAL)


def lighting_for(time_of_day: TimeOfDay, default: str = "natural daylight") -> str:
    return _TIME_OF_DAY_LIGHTING.get(time_of_day, default)


def extract_scenes(text: str) -> List[Scene]:
    """
    Every matched location category becomes a scene, in table order.
    The first one is the main scene; with no match the input itself is the setting.
    """
    raw = (text or "").strip()
    lowered = raw.lower()
    time_of_day = detect_time_of_day(raw)
    mood = detect_mood(raw)

    scenes: List[Scene] = []
    for pattern, location, environment in _LOCATION_PATTERNS:
        if not pattern.search(lowered):
            continue
        scenes.append(Scene(
            name="Main Scene" if not scenes else f"{location.title()} Scene",
            location=location,
            time_of_day=time_of_day,
            lighting=lighting_for(time_of_day),
            mood=mood,
            environment=environment,
        ))

    if not scenes:
        logger.debug("No location keywords found, using input as scene")
        scenes.append(Scene(
            name="Main Scene",
            location=raw,
            time_of_day=time_of_day,
            lighting=lighting_for(time_of_day, default="natural lighting"),
            mood=mood,
            environment=raw,
        ))
    return scenes


def detect_panel_count(text: str) -> int:
    """`<N> panels`, `panels: N` or a spelled-out number; clamped to [1, 12]."""
    lowered = (text or "").lower()
    m = _PANEL_COUNT.search(lowered) or _PANEL_COUNT_LABEL.search(lowered)
    if m:
        n = int(m.group(1))
    else:
        m = _PANEL_COUNT_WORD.search(lowered)
        if not m:
            return DEFAULT_PANEL_COUNT
        n = _PANEL_COUNT_WORDS[m.group(1)]
    return min(max(n, MIN_PANELS), MAX_PANELS)


def generate_title(text: str, n_words: int = 4) -> str:
    words = [w for w in (text or "").split() if w][:n_words]
    return " ".join(w[0].upper() + w[1:] for w in words)


def split_story_beats(text: str, count: int) -> List[str]:
    """
    Map sentences onto `count` slots.
    More sentences than slots keeps the first `count`; fewer repeats them
    proportionally; no sentence at all repeats the whole input.
    """
    idea = (text or "").strip()
    count = max(count, 0)
    sentences = [s.strip() for s in _BEAT_SPLIT.split(idea) if s.strip()]
    if not sentences:
        return [idea] * count
    if len(sentences) >= count:
        return sentences[:count]
    return [sentences[(i * len(sentences)) // count] for i in range(count)]

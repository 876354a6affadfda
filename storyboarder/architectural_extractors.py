## storyboarder/architectural_extractors.py

import re
from typing import Dict, List, Optional

from storyboarder.models import ArchitecturalViewType, UnitSystem

DEFAULT_SCALE = "1:20"

_DIMENSION = re.compile(
    r"(\d+[.,]?\d*)\s?(?:×|x|by|-|\*)\s?(\d+[.,]?\d*)\s?(mm|cm|m|in|inch|inches)?\b", re.IGNORECASE
)
_SIMPLE_DIMENSION = re.compile(r"(\d+[.,]?\d*)\s?(mm|cm|m|in|inch|inches)\b", re.IGNORECASE)
_SCALE = re.compile(r"(1\s*:\s*\d+)")
_STANDARD = re.compile(r"\b(aci\s*318|aci|eurocode|aisc|iso|bs\s*8110)\b", re.IGNORECASE)
_BAR = re.compile(r"(?:ø|phi|#)?\s?\d{1,2}\s?(?:@|\bat\b)\s?\d{2,3}", re.IGNORECASE)
_IMPERIAL = re.compile(r"\b(?:inch|inches|ft|feet|foot)\b", re.IGNORECASE)
_STIRRUPS = re.compile(r"\b(?:stirrups?|links)\b", re.IGNORECASE)
_COVER = re.compile(r"\bcover\b", re.IGNORECASE)

_FLOORS = re.compile(r"\b(\d{1,3})\s*(?:floors?|stor(?:ey|ie|y)s?|pisos?|niveles|levels)\b", re.IGNORECASE)
_LEVEL_NAMES = re.compile(
    r"\b((?:ground|first|second|third|fourth|basement|roof|mezzanine)\s+(?:floor|level))\b", re.IGNORECASE
)

COMPONENT_KEYWORDS: Dict[str, str] = {
    "beam": "reinforced concrete beam",
    "column": "reinforced concrete column",
    "slab": "reinforced concrete slab",
    "footing": "footing",
    "foundation": "foundation",
    "rebar": "reinforcing steel",
    "reinforcement": "reinforcing steel",
    "stirrup": "stirrups",
    "shear": "shear reinforcement",
    "plate": "steel plate",
    "bolt": "anchor bolts",
    "anchor": "anchor bolts",
    "weld": "weld",
    "joint": "joint",
    "gusset": "gusset plate",
    "bracket": "bracket",
    "truss": "truss",
}

MATERIAL_KEYWORDS: Dict[str, str] = {
    "concrete": "concrete",
    "steel": "steel",
    "timber": "timber",
    "wood": "wood",
    "stainless": "stainless steel",
    "composite": "composite material",
}

BUILDING_TYPE_KEYWORDS: Dict[str, str] = {
    "mixed-use": "mixed-use",
    "mixed use": "mixed-use",
    "residential": "residential",
    "housing": "residential",
    "vivienda": "residential",
    "office": "office",
    "oficinas": "office",
    "school": "educational",
    "escuela": "educational",
    "hospital": "healthcare",
    "museum": "cultural",
    "museo": "cultural",
    "retail": "retail",
    "hotel": "hospitality",
}

DEFAULT_REINFORCEMENT_NOTES = [
    "show rebar callouts",
    "label spacing and sizes",
    "indicate concrete cover",
]

# ordered: first pattern wins
_VIEW_PATTERNS = [
    (re.compile(r"elevation", re.IGNORECASE), ArchitecturalViewType.ELEVATION),
    (re.compile(r"plan", re.IGNORECASE), ArchitecturalViewType.PLAN),
    (re.compile(r"axonometric|isometric", re.IGNORECASE), ArchitecturalViewType.AXONOMETRIC),
    (re.compile(r"exploded", re.IGNORECASE), ArchitecturalViewType.EXPLODED),
    (re.compile(r"legend|notes", re.IGNORECASE), ArchitecturalViewType.LEGEND),
    (re.compile(r"detail|connection|joint", re.IGNORECASE), ArchitecturalViewType.DETAIL),
]


def detect_unit_system(text: str) -> UnitSystem:
    return UnitSystem.IMPERIAL if _IMPERIAL.search(text or "") else UnitSystem.METRIC


def detect_scale(text: str, default: str = DEFAULT_SCALE) -> str:
    m = _SCALE.search(text or "")
    if m:
        return re.sub(r"\s+", "", m.group(1))
    return default


def detect_standards(text: str) -> List[str]:
    found: List[str] = []
    for m in _STANDARD.finditer(text or ""):
        code = re.sub(r"\s+", " ", m.group(1)).upper()
        if code not in found:
            found.append(code)
    return found


def extract_keywords(text: str, dictionary: Dict[str, str]) -> List[str]:
    """Canonical phrases for every keyword present, in dictionary order."""
    lowered = (text or "").lower()
    found: List[str] = []
    for keyword, phrase in dictionary.items():
        if keyword in lowered and phrase not in found:
            found.append(phrase)
    return found


def extract_components(text: str) -> List[str]:
    return extract_keywords(text, COMPONENT_KEYWORDS)


def extract_materials(text: str) -> List[str]:
    return extract_keywords(text, MATERIAL_KEYWORDS)


def _number(value: str) -> str:
    return value.replace(",", ".")


def normalize_unit(unit: Optional[str]) -> str:
    if not unit:
        return ""
    u = unit.lower()
    if u.startswith("mm"):
        return "mm"
    if u.startswith("cm"):
        return "cm"
    if u == "m" or u.startswith("met"):
        return "m"
    if u in ("in", "inch", "inches"):
        return "in"
    if u.startswith("ft") or u.startswith("feet"):
        return "ft"
    return unit


def extract_dimensions(text: str) -> List[str]:
    """`a × b unit` pairs first, then single `value unit` measures."""
    dims: List[str] = []

    def _add(value: str):
        value = value.strip()
        if value and value not in dims:
            dims.append(value)

    for a, b, unit in _DIMENSION.findall(text or ""):
        _add(f"{_number(a)} × {_number(b)} {normalize_unit(unit)}")
    for value, unit in _SIMPLE_DIMENSION.findall(text or ""):
        _add(f"{_number(value)} {normalize_unit(unit)}")
    return dims


def extract_reinforcement(text: str) -> List[str]:
    notes: List[str] = []
    for m in _BAR.finditer(text or ""):
        note = re.sub(r"\s+", " ", m.group(0)).strip()
        if note not in notes:
            notes.append(note)
    if _STIRRUPS.search(text or ""):
        notes.append("include stirrups/links spacing")
    if _COVER.search(text or ""):
        notes.append("note concrete cover")
    return notes


def detect_primary_view(
    text: str, default: ArchitecturalViewType = ArchitecturalViewType.SECTION
) -> ArchitecturalViewType:
    for pattern, view in _VIEW_PATTERNS:
        if pattern.search(text or ""):
            return view
    return default


def secondary_view_for(primary: ArchitecturalViewType) -> ArchitecturalViewType:
    if primary == ArchitecturalViewType.SECTION:
        return ArchitecturalViewType.DETAIL
    return ArchitecturalViewType.SECTION


def detect_building_type(text: str) -> Optional[str]:
    found = extract_keywords(text, BUILDING_TYPE_KEYWORDS)
    return found[0] if found else None


def detect_floors(text: str) -> Optional[int]:
    m = _FLOORS.search(text or "")
    if not m:
        return None
    n = int(m.group(1))
    return n if n > 0 else None


def extract_levels(text: str) -> List[str]:
    levels: List[str] = []
    for m in _LEVEL_NAMES.finditer(text or ""):
        name = " ".join(w.capitalize() for w in m.group(1).split())
        if name not in levels:
            levels.append(name)
    return levels

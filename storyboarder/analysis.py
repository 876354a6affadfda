## storyboarder/analysis.py

"""
Theme and visual-style analysis of free text.

Both analyzers are ordered keyword cascades (English and Spanish triggers):
the first category that matches wins and everything else falls back to
``general`` / ``generic``.
"""

import re
from typing import List, Optional, Tuple

from storyboarder.models import (
    Complexity,
    PanelType,
    ThemeAnalysis,
    ThemeType,
    VisualStyle,
    VisualStyleName,
)

# --- Theme cascade ---

_THEME_PATTERNS: List[Tuple[ThemeType, re.Pattern]] = [
    (ThemeType.HISTORICAL, re.compile(
        r"\b(?:historia|histórico|histórica|historical|history|guerra|war|reforma|reform|revolución|revolution|"
        r"presidente|president|gobierno|government|siglo|century|años?|década|decade|época|era)\b"
    )),
    (ThemeType.EDUCATIONAL, re.compile(
        r"\b(?:educativo|educational|enseñar|teach|aprender|learn|explicar|explain|concepto|concept|"
        r"lección|lesson|tutorial|instrucción|instruction)\b"
    )),
    (ThemeType.TECHNICAL, re.compile(
        r"\b(?:técnico|technical|arquitectura|architecture|construcción|construction|diseño|design|"
        r"blueprint|cad|ingeniería|engineering|estructura|structure)\b"
    )),
    (ThemeType.FICTIONAL, re.compile(
        r"\b(?:cuento|tale|narrativa|narrative|personaje|aventura|adventure|ficción|fiction|fantasy)\b"
    )),
]

_TIME_PERIOD_PATTERNS = [
    re.compile(r"\d{4}"),
    re.compile(r"siglo\s+\w+", re.IGNORECASE),
    re.compile(r"década\s+del\s+\d+", re.IGNORECASE),
    re.compile(r"años\s+\d+", re.IGNORECASE),
    re.compile(r"\d{1,2}(?:st|nd|rd|th)\s+century", re.IGNORECASE),
]

_COUNTRY = re.compile(r"\b(?:Guatemala|México|Mexico|España|Spain|Colombia|Argentina)\b", re.IGNORECASE)
_LOCATION_PATTERNS = [
    re.compile(r"\ben\s+[A-ZÁÉÍÓÚÑ]\w+"),
    re.compile(r"\bde\s+[A-ZÁÉÍÓÚÑ]\w+"),
    re.compile(r"\bin\s+[A-Z]\w+"),
]

# keyword -> concept, per theme
_HISTORICAL_CONCEPTS = [
    ("reforma agraria", "agrarian reform"),
    ("presidente", "president"),
    ("gobierno", "government"),
    ("tierra", "land distribution"),
    ("población", "population"),
    ("pobreza", "poverty"),
    ("decreto", "decree"),
    ("congreso", "congress"),
    ("president", "president"),
    ("government", "government"),
    ("revolution", "revolution"),
    ("war", "war"),
]

_KEY_EVENTS = [
    ("decreto 900", "Decree 900 approval"),
    ("redistribución", "land redistribution"),
    ("reforma", "agrarian reform implementation"),
    ("controversia", "political controversy"),
]

_MAIN_SUBJECTS = [
    ("jacobo arbenz", "Jacobo Arbenz Guzmán"),
    ("reforma agraria", "agrarian reform"),
    ("guatemala", "Guatemala"),
]

_THEME_CONCEPTS = {
    ThemeType.EDUCATIONAL: [
        ("concepto", "key concept"),
        ("concept", "key concept"),
        ("lección", "lesson"),
        ("lesson", "lesson"),
        ("aprender", "learning objective"),
        ("learn", "learning objective"),
        ("ejemplo", "example"),
        ("example", "example"),
    ],
    ThemeType.TECHNICAL: [
        ("estructura", "structure"),
        ("structur", "structure"),
        ("construcción", "construction"),
        ("construction", "construction"),
        ("diseño", "design"),
        ("design", "design"),
        ("blueprint", "blueprint"),
        ("cad", "CAD design"),
    ],
    ThemeType.FICTIONAL: [
        ("personaje", "character"),
        ("character", "character"),
        ("historia", "story"),
        ("story", "story"),
        ("aventura", "adventure"),
        ("adventure", "adventure"),
        ("narrativa", "narrative"),
        ("narrative", "narrative"),
    ],
    ThemeType.GENERAL: [
        ("escena", "scene"),
        ("scene", "scene"),
        ("acción", "action"),
        ("action", "action"),
        ("momento", "moment"),
        ("moment", "moment"),
        ("situación", "situation"),
        ("situation", "situation"),
    ],
}

# --- Visual style cascade ---

_STYLE_PATTERNS: List[Tuple[re.Pattern, dict]] = [
    (re.compile(r"\b(?:toons|bolitas|palitos|stick|figures|simple|cartoon|dibujo simple)\b"), dict(
        style=VisualStyleName.TOONS,
        characteristics=["simple shapes", "basic lines", "minimal details", "geometric forms"],
        complexity=Complexity.SIMPLE,
        artistic_elements=["bolitas", "palitos", "figuras simples"],
    )),
    (re.compile(r"\b(?:realista|realistic|fotográfico|photographic|foto|photo|real|detallado|detailed|preciso)\b"), dict(
        style=VisualStyleName.REALISTIC,
        characteristics=["detailed", "photographic", "realistic proportions", "textured"],
        complexity=Complexity.DETAILED,
    )),
    (re.compile(r"\b(?:anime|manga|japonés|japanese)\b"), dict(
        style=VisualStyleName.ANIME,
        characteristics=["large eyes", "stylized features", "dynamic poses", "expressive"],
        complexity=Complexity.DETAILED,
    )),
    (re.compile(r"\b(?:boceto|sketch|dibujo|lápiz|pencil|líneas)\b"), dict(
        style=VisualStyleName.SKETCH,
        characteristics=["line art", "sketchy", "hand-drawn", "rough"],
        complexity=Complexity.SIMPLE,
    )),
    (re.compile(r"\b(?:storyboard|guion gráfico|paneles|secuencia|sequence)\b"), dict(
        style=VisualStyleName.STORYBOARD,
        characteristics=["sequential", "panel-based", "narrative flow", "clear composition"],
        complexity=Complexity.SIMPLE,
    )),
]

_GENERIC_STYLE = dict(
    style=VisualStyleName.GENERIC,
    characteristics=["neutral", "standard"],
    complexity=Complexity.SIMPLE,
)


def _lookup_all(lowered: str, table) -> List[str]:
    return [value for keyword, value in table if keyword in lowered]


def _lookup_first(lowered: str, table) -> Optional[str]:
    for keyword, value in table:
        if keyword in lowered:
            return value
    return None


def extract_time_period(text: str) -> str:
    for pattern in _TIME_PERIOD_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(0)
    return "historical period"


def extract_location(text: str) -> str:
    m = _COUNTRY.search(text)
    if m:
        return m.group(0)
    for pattern in _LOCATION_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(0)
    return "the region"


def extract_main_subject(text: str) -> str:
    return _lookup_first(text.lower(), _MAIN_SUBJECTS) or "main subject"


def analyze_theme(text: str) -> ThemeAnalysis:
    """Classify text into a theme and collect the concepts that drive panel context."""
    text = text or ""
    lowered = text.lower()
    theme = ThemeType.GENERAL
    for candidate, pattern in _THEME_PATTERNS:
        if pattern.search(lowered):
            theme = candidate
            break

    if theme == ThemeType.HISTORICAL:
        return ThemeAnalysis(
            type=theme,
            concepts=_lookup_all(lowered, _HISTORICAL_CONCEPTS),
            time_period=extract_time_period(text),
            location=extract_location(text),
            key_events=_lookup_all(lowered, _KEY_EVENTS),
            main_subject=extract_main_subject(text),
        )
    return ThemeAnalysis(
        type=theme,
        concepts=_lookup_all(lowered, _THEME_CONCEPTS[theme]),
        main_subject=extract_main_subject(text),
    )


def analyze_visual_style(text: str) -> VisualStyle:
    lowered = (text or "").lower()
    for pattern, fields in _STYLE_PATTERNS:
        if pattern.search(lowered):
            return VisualStyle(**fields)
    return VisualStyle(**_GENERIC_STYLE)


# --- Per-panel context phrases ---

# (label, fallback) per slot 1..4
_CONTEXT_LABELS = {
    ThemeType.EDUCATIONAL: [
        ("Educational topic", "learning concept"),
        ("Key concept", "main learning point"),
        ("Application", "practical example"),
        ("Conclusion", "key takeaway"),
    ],
    ThemeType.TECHNICAL: [
        ("Technical overview", "technical system"),
        ("Technical detail", "specific component"),
        ("Technical process", "construction or assembly"),
        ("Technical result", "final structure or system"),
    ],
    ThemeType.FICTIONAL: [
        ("Story setup", "story beginning"),
        ("Character introduction", "main character"),
        ("Story development", "plot development"),
        ("Story resolution", "story conclusion"),
    ],
    ThemeType.GENERAL: [
        ("Scene introduction", "general scene"),
        ("Element focus", "key element"),
        ("Action development", "main action"),
        ("Scene conclusion", "scene resolution"),
    ],
}

_PANEL_TYPE_SLOT = {
    PanelType.ESTABLISHING: 1,
    PanelType.TRANSITION: 1,
    PanelType.CHARACTER_INTRO: 2,
    PanelType.DIALOGUE: 2,
    PanelType.ACTION: 3,
    PanelType.REACTION: 3,
    PanelType.RESOLUTION: 4,
}


def _nth(items: List[str], i: int) -> Optional[str]:
    return items[i] if i < len(items) else None


def _historical_context(slot: int, theme: ThemeAnalysis) -> str:
    if slot == 1:
        return f"Historical context: {theme.time_period or 'historical period'} in {theme.location or 'the region'}"
    if slot == 2:
        return f"Key historical figure: {theme.main_subject or 'historical figure'}"
    if slot == 3:
        event = _nth(theme.key_events, 0) or _nth(theme.concepts, 0)
        return f"Historical event: {event or 'significant historical moment'}"
    impact = _nth(theme.key_events, 1) or _nth(theme.concepts, 1)
    return f"Historical impact: {impact or 'consequences and legacy'}"


def build_theme_context(panel_type: PanelType, theme: ThemeAnalysis) -> str:
    """Theme phrase for a panel, chosen by the panel's narrative slot."""
    slot = _PANEL_TYPE_SLOT.get(panel_type, 3)
    if theme.type == ThemeType.HISTORICAL:
        return _historical_context(slot, theme)

    label, fallback = _CONTEXT_LABELS[theme.type][slot - 1]
    if slot == 1:
        value = theme.main_subject
        if value == "main subject":
            value = None
    else:
        value = _nth(theme.concepts, slot - 2)
    return f"{label}: {value or fallback}"


def build_visual_style_context(style: VisualStyle) -> str:
    descriptors = ", ".join(style.characteristics) or "characteristics"
    text = f"{style.style.value} style with {descriptors}, {style.complexity.value} detail level"
    if style.artistic_elements:
        text += f", featuring {', '.join(style.artistic_elements)}"
    return text

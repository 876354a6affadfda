## storyboarder/validation.py

"""
Post-hoc quality checks for storyboard projects and panel prompts.

Scores start at 100, lose fixed penalties for missing pieces and gain
bounded bonuses for cross-panel consistency. Issues are data: nothing in
this module raises on a bad project.
"""

import logging
from typing import Any, List, Tuple

from storyboarder.analysis import analyze_theme, analyze_visual_style
from storyboarder.models import (
    IssueType,
    StoryboardProject,
    StoryboardPrompt,
    ThemeAnalysis,
    ThemeType,
    ValidationIssue,
    ValidationResult,
    VisualStyle,
)

logger = logging.getLogger(__name__)

STANDARD_PANEL_COUNT = 4
MIN_PROMPT_LENGTH = 50
MAX_PROMPT_LENGTH = 500
CONSISTENCY_CAP = 20
COHERENCE_CAP = 20

# label words woven into visual notes for each theme
_THEME_MARKERS = {
    ThemeType.HISTORICAL: ["historical"],
    ThemeType.EDUCATIONAL: ["educational", "key concept", "application"],
    ThemeType.TECHNICAL: ["technical"],
    ThemeType.FICTIONAL: ["story", "character introduction"],
    ThemeType.GENERAL: ["scene introduction", "element focus", "action development", "scene conclusion"],
}

_PLACEHOLDERS = {"main subject", "historical period", "the region"}


def _clamp(score: float) -> int:
    return int(min(100, max(0, round(score))))


def _result(issues: List[ValidationIssue], suggestions: List[str], score: float) -> ValidationResult:
    return ValidationResult(
        is_valid=not any(i.type == IssueType.ERROR for i in issues),
        score=_clamp(score),
        issues=issues,
        suggestions=suggestions,
    )


def _malformed(kind: str, err: Exception) -> ValidationResult:
    logger.warning("Cannot validate malformed %s: %s", kind, err)
    return ValidationResult(
        is_valid=False,
        score=0,
        issues=[ValidationIssue(type=IssueType.ERROR, message=f"Malformed {kind}: {err}")],
    )


def _coerce(model, value: Any):
    """Validate a fresh copy; instances may have been mutated past field validation."""
    if isinstance(value, model):
        value = value.model_dump(warnings=False)
    if isinstance(value, dict):
        return model.model_validate(value)
    raise TypeError(f"expected {model.__name__} or dict, got {type(value).__name__}")


# --- Keywords for coherence checks ---

def theme_keywords(theme: ThemeAnalysis) -> List[str]:
    words = list(theme.concepts) + list(theme.key_events)
    for value in (theme.main_subject, theme.time_period, theme.location):
        if value and value.lower() not in _PLACEHOLDERS:
            words.append(value)
    words.extend(_THEME_MARKERS[theme.type])
    return [w.lower() for w in words]


def style_keywords(style: VisualStyle) -> List[str]:
    words = [style.style.value] + list(style.characteristics) + list(style.artistic_elements)
    return [w.lower() for w in words]


def _mentions_any(text: str, keywords: List[str]) -> bool:
    lowered = (text or "").lower()
    return any(k in lowered for k in keywords)


# --- Single prompt ---

def _prompt_checks(prompt: StoryboardPrompt) -> Tuple[List[ValidationIssue], List[str], int]:
    issues: List[ValidationIssue] = []
    suggestions: List[str] = []
    penalty = 0
    generated = prompt.generated_prompt or ""

    if not prompt.scene_description.strip():
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Prompt must have a scene description"))
        penalty += 25
    if not prompt.action.strip():
        issues.append(ValidationIssue(type=IssueType.WARNING, message="Prompt should have an action description"))
        penalty += 10
    if not generated.strip():
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Prompt must have generated prompt text"))
        penalty += 30

    if generated and len(generated) < MIN_PROMPT_LENGTH:
        issues.append(ValidationIssue(type=IssueType.WARNING, message="Generated prompt seems too short for good results"))
        suggestions.append("Consider adding more descriptive details to the prompt")
        penalty += 5
    if len(generated) > MAX_PROMPT_LENGTH:
        issues.append(ValidationIssue(type=IssueType.SUGGESTION, message="Generated prompt is very long, consider simplifying"))
        suggestions.append("Very long prompts may not generate better results")
    if generated and "storyboard" not in generated.lower():
        issues.append(ValidationIssue(type=IssueType.SUGGESTION, message="Prompt should include storyboard-specific styling"))
        suggestions.append("Adding 'storyboard' keywords helps generate appropriate style")
    return issues, suggestions, penalty


def validate_storyboard_prompt(prompt) -> ValidationResult:
    try:
        prompt = _coerce(StoryboardPrompt, prompt)
    except (TypeError, ValueError, AttributeError) as err:
        return _malformed("prompt", err)
    issues, suggestions, penalty = _prompt_checks(prompt)
    return _result(issues, suggestions, 100 - penalty)


def validate_contextual_prompt(prompt, user_input: str) -> ValidationResult:
    """Prompt checks plus whether the prompt echoes the input's theme and drawing style."""
    try:
        prompt = _coerce(StoryboardPrompt, prompt)
    except (TypeError, ValueError, AttributeError) as err:
        return _malformed("prompt", err)
    issues, suggestions, penalty = _prompt_checks(prompt)

    theme = analyze_theme(user_input or "")
    style = analyze_visual_style(user_input or "")
    if prompt.generated_prompt and not _mentions_any(prompt.generated_prompt, theme_keywords(theme)):
        issues.append(ValidationIssue(
            type=IssueType.WARNING,
            message=f"Prompt does not reflect the {theme.type.value} theme of the input",
            panel_number=prompt.panel_number,
        ))
        suggestions.append("Regenerate the prompt so it carries the theme context")
        penalty += 10
    if prompt.generated_prompt and not _mentions_any(prompt.generated_prompt, style_keywords(style)):
        issues.append(ValidationIssue(
            type=IssueType.WARNING,
            message=f"Prompt does not reflect the requested {style.style.value} style",
            panel_number=prompt.panel_number,
        ))
        suggestions.append("Mention the requested drawing style in the visual notes")
        penalty += 10
    return _result(issues, suggestions, 100 - penalty)


def prompt_quality_suggestions(prompt: StoryboardPrompt) -> List[str]:
    suggestions = []
    if not prompt.camera_angle:
        suggestions.append("Add camera angle specification for better composition")
    if not prompt.lighting:
        suggestions.append("Specify lighting conditions for more atmospheric results")
    if not prompt.mood:
        suggestions.append("Define the mood to enhance emotional impact")
    if not prompt.characters:
        suggestions.append("Include character references for better scene composition")
    if not prompt.visual_notes:
        suggestions.append("Add visual notes for specific artistic direction")
    return suggestions


def score_prompt_completeness(prompt: StoryboardPrompt) -> int:
    # required: 60, optional: 40
    score = 0
    score += 20 if prompt.scene_description else 0
    score += 15 if prompt.action else 0
    score += 25 if prompt.generated_prompt else 0
    for present in (prompt.camera_angle, prompt.lighting, prompt.mood, prompt.characters, prompt.visual_notes):
        score += 8 if present else 0
    return score


# --- Project ---

def character_consistency_bonus(project: StoryboardProject) -> int:
    bonus = 0
    for character in project.characters:
        prompts = [p.prompt.generated_prompt.lower() for p in project.panels if character.id in p.prompt.characters]
        if len(prompts) <= 1:
            continue
        bonus += 5
        name, description = character.name.lower(), character.description.lower()
        if all(name in text or description in text for text in prompts):
            bonus += 5
    return min(bonus, CONSISTENCY_CAP)


def coherence_bonus(project: StoryboardProject) -> Tuple[int, int]:
    """Thematic and stylistic bonuses: share of panels echoing the re-derived input analysis."""
    if not project.panels:
        return 0, 0
    theme_words = theme_keywords(analyze_theme(project.user_input))
    style_words = style_keywords(analyze_visual_style(project.user_input))
    texts = [p.prompt.generated_prompt for p in project.panels]
    n = len(texts)
    thematic = sum(_mentions_any(t, theme_words) for t in texts) / n * COHERENCE_CAP
    stylistic = sum(_mentions_any(t, style_words) for t in texts) / n * COHERENCE_CAP
    return round(thematic), round(stylistic)


def _reference_warnings(project: StoryboardProject) -> List[ValidationIssue]:
    issues = []
    character_ids = set(project.character_ids())
    scene_ids = {s.id for s in project.scenes}
    for index, panel in enumerate(project.panels, start=1):
        if panel.panel_number != index or panel.prompt.panel_number != index:
            issues.append(ValidationIssue(
                type=IssueType.WARNING,
                message=f"Panel at position {index} is numbered {panel.panel_number}",
                panel_number=index,
            ))
        dangling = [cid for cid in panel.prompt.characters if cid not in character_ids]
        if dangling:
            issues.append(ValidationIssue(
                type=IssueType.WARNING,
                message=f"Panel references {len(dangling)} unknown character(s)",
                panel_number=index,
            ))
        if panel.prompt.scene_id and panel.prompt.scene_id not in scene_ids:
            issues.append(ValidationIssue(
                type=IssueType.WARNING,
                message="Panel references an unknown scene",
                panel_number=index,
            ))
    return issues


def validate_storyboard_project(project, contextual: bool = True) -> ValidationResult:
    try:
        project = _coerce(StoryboardProject, project)
    except (TypeError, ValueError, AttributeError) as err:
        return _malformed("project", err)

    issues: List[ValidationIssue] = []
    suggestions: List[str] = []
    penalty = 0

    if not project.title.strip():
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Project must have a title"))
        penalty += 20
    if not project.description.strip():
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Project must have a description"))
        penalty += 15
    if not project.characters:
        issues.append(ValidationIssue(type=IssueType.WARNING, message="Project has no characters defined"))
        suggestions.append("Consider adding character descriptions for better consistency")
        penalty += 10
    if not project.scenes:
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Project must have at least one scene"))
        penalty += 20

    if not project.panels:
        issues.append(ValidationIssue(type=IssueType.ERROR, message="Project must have at least one panel"))
        penalty += 30
    for index, panel in enumerate(project.panels, start=1):
        panel_issues, _, _ = _prompt_checks(panel.prompt)
        if any(i.type == IssueType.ERROR for i in panel_issues):
            issues.extend(i.model_copy(update={"panel_number": index}) for i in panel_issues)
            penalty += 5

    if len(project.panels) != STANDARD_PANEL_COUNT:
        issues.append(ValidationIssue(
            type=IssueType.SUGGESTION,
            message=f"Project has {len(project.panels)} panels, consider using 4 panels for standard storyboard format",
        ))
        suggestions.append("Standard storyboards work best with 4 panels for clear narrative flow")

    issues.extend(_reference_warnings(project))

    bonus = character_consistency_bonus(project)
    if contextual:
        thematic, stylistic = coherence_bonus(project)
        bonus += thematic + stylistic

    result = _result(issues, suggestions, 100 - penalty + bonus)
    logger.debug("Validated project %s: score=%d valid=%s", project.id, result.score, result.is_valid)
    return result

"""
Tests for storyboard prompt synthesis and the template tables.
"""

import pytest

from storyboarder.analysis import analyze_theme, analyze_visual_style
from storyboarder.extractors import extract_characters, extract_scenes
from storyboarder.models import (
    Character,
    PanelType,
    StoryboardPrompt,
    StoryboardStyle,
    TargetAudience,
    VisualStyle,
    VisualStyleName,
)
from storyboarder.prompting import (
    AUDIENCE_TEMPLATES,
    STORYBOARD_ENHANCEMENTS,
    STYLE_TEMPLATES,
    add_contextual_notes,
    apply_audience_template,
    character_consistency_prompt,
    describe_character,
    describe_setting,
    enhance_prompt_for_storyboard,
    generate_all_panel_prompts,
    resolve_project_style,
)
from storyboarder.sequencing import generate_panel_sequence

TEXT = "A man and a dog in the park in the morning"


@pytest.fixture
def cast():
    return extract_characters(TEXT)


@pytest.fixture
def scenes():
    return extract_scenes(TEXT)


@pytest.fixture
def skeletons(cast, scenes):
    return generate_panel_sequence(TEXT, cast, scenes, 4)


class TestGenerateAllPanelPrompts:
    """Test the final prompt string assembly."""

    def test_every_prompt_filled(self, skeletons, cast, scenes):
        prompts = generate_all_panel_prompts(skeletons, cast, scenes)
        assert len(prompts) == 4
        assert all(p.generated_prompt for p in prompts)

    def test_style_prefix_and_enhancements(self, skeletons, cast, scenes):
        prompts = generate_all_panel_prompts(skeletons, cast, scenes)
        prefix = STYLE_TEMPLATES[StoryboardStyle.ROUGH_SKETCH]["prefix"]
        for p in prompts:
            assert p.generated_prompt.startswith(prefix)
            assert p.generated_prompt.endswith(STORYBOARD_ENHANCEMENTS[-1])

    def test_featuring_characters(self, skeletons, cast, scenes):
        prompts = generate_all_panel_prompts(skeletons, cast, scenes)
        assert "featuring" not in prompts[0].generated_prompt
        assert f"featuring {cast[0].description}" in prompts[1].generated_prompt
        assert " and " + cast[1].description in prompts[2].generated_prompt

    def test_setting(self, skeletons, cast, scenes):
        prompts = generate_all_panel_prompts(skeletons, cast, scenes)
        assert "in park, during morning, outdoor natural setting with trees and grass" in prompts[0].generated_prompt
        assert "lighting: bright morning light" in prompts[0].generated_prompt

    def test_unknown_scene_falls_back_to_first(self, cast, scenes):
        prompt = StoryboardPrompt(panel_number=1, scene_description="a view", scene_id="missing")
        result = generate_all_panel_prompts([prompt], cast, scenes)[0]
        assert "in park" in result.generated_prompt

    def test_no_scenes(self, cast):
        prompt = StoryboardPrompt(panel_number=1, scene_description="a view")
        result = generate_all_panel_prompts([prompt], cast, [])[0]
        assert "a view" in result.generated_prompt
        assert ", in " not in result.generated_prompt

    def test_input_not_mutated(self, skeletons, cast, scenes):
        generate_all_panel_prompts(skeletons, cast, scenes)
        assert all(p.generated_prompt == "" for p in skeletons)

    def test_deterministic(self, skeletons, cast, scenes):
        first = [p.generated_prompt for p in generate_all_panel_prompts(skeletons, cast, scenes)]
        second = [p.generated_prompt for p in generate_all_panel_prompts(skeletons, cast, scenes)]
        assert first == second


class TestDescriptions:
    """Test character and setting phrases."""

    def test_describe_character_with_appearance(self, cast):
        text = describe_character(cast[0])
        assert text.startswith(cast[0].description + " (")
        assert "adult" in text
        assert "wearing casual" in text

    def test_describe_character_bare(self):
        assert describe_character(Character(name="X", description="A robot")) == "A robot"

    def test_describe_setting_skips_duplicate_environment(self):
        scene = extract_scenes("xyzzy")[0]
        assert describe_setting(scene) == "xyzzy"

    def test_enhance(self):
        assert enhance_prompt_for_storyboard("base").startswith("base, storyboard panel, sequential art")

    def test_character_consistency_prompt(self):
        dog = extract_characters("a dog")[0]
        text = character_consistency_prompt(dog)
        assert text.startswith("maintain consistent character appearance")
        assert "always adult" in text
        assert "medium build" in text
        assert "distinctive features: four legs, tail, fur" in text
        assert text.endswith("same character design across all panels")


class TestAudienceAndStyle:
    """Test audience templates and style resolution."""

    def test_architects_prefer_clean_lines(self):
        assert AUDIENCE_TEMPLATES[TargetAudience.ARCHITECTS]["style_preference"] == StoryboardStyle.CLEAN_LINES

    def test_apply_audience_template(self):
        prompt = StoryboardPrompt(panel_number=1, visual_notes="existing")
        result = apply_audience_template(prompt, TargetAudience.ARCHITECTS)
        assert result.style == StoryboardStyle.CLEAN_LINES
        assert result.visual_notes.startswith("existing, architectural accuracy")

    def test_explicit_style_wins(self):
        prompt = StoryboardPrompt(panel_number=1)
        result = apply_audience_template(prompt, TargetAudience.ANIMATORS, StoryboardStyle.PENCIL_DRAWING)
        assert result.style == StoryboardStyle.PENCIL_DRAWING
        assert result.visual_notes.startswith("animation-ready")

    @pytest.mark.parametrize("audience, visual, expected", [
        (TargetAudience.FILMMAKERS, VisualStyleName.GENERIC, StoryboardStyle.CONCEPT_ART),
        (TargetAudience.MARKETERS, VisualStyleName.TOONS, StoryboardStyle.CLEAN_LINES),
        (TargetAudience.GENERAL, VisualStyleName.TOONS, StoryboardStyle.COMIC_STYLE),
        (TargetAudience.GENERAL, VisualStyleName.REALISTIC, StoryboardStyle.PENCIL_DRAWING),
        (TargetAudience.GENERAL, VisualStyleName.GENERIC, StoryboardStyle.ROUGH_SKETCH),
    ])
    def test_resolve_project_style(self, audience, visual, expected):
        assert resolve_project_style(audience, VisualStyle(style=visual)) == expected

    def test_add_contextual_notes(self):
        prompt = StoryboardPrompt(panel_number=1, panel_type=PanelType.ESTABLISHING, visual_notes="base")
        result = add_contextual_notes(prompt, analyze_theme("a dog"), analyze_visual_style("a dog"))
        assert result.visual_notes == (
            "base, Scene introduction: general scene, "
            "generic style with neutral, standard, simple detail level"
        )

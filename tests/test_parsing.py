"""
Tests for the parse entry points.

Tests:
- Storyboard scenarios: panel counts, fallbacks, audiences, failures
- Determinism and non-empty prompts
- Architectural scenarios per project kind
"""

import pytest

from storyboarder.architectural_extractors import DEFAULT_REINFORCEMENT_NOTES
from storyboarder.architectural_prompting import PLANOS_EXTRAS
from storyboarder.models import (
    ArchitecturalDetailLevel as DL,
    ArchitecturalProjectKind,
    ArchitecturalViewType,
    PanelType,
    ProjectType,
    StoryboardStyle,
    TargetAudience,
    UnitSystem,
)
from storyboarder.parsing import build_architectural_metadata, parse_architectural_input, parse_user_input
from storyboarder.prompting import STYLE_TEMPLATES


class TestParseUserInput:
    """Test free-text storyboard parsing."""

    def test_dog_park_scenario(self, dog_park_text):
        result = parse_user_input(dog_park_text)
        assert result.success
        assert result.errors == []
        assert result.warnings == []
        assert result.processing_time >= 0

        project = result.project
        assert project.user_input == dog_park_text
        assert project.title == "A Guy With A"
        assert [c.name for c in project.characters] == ["Man", "Dog"]
        assert [s.location for s in project.scenes] == ["park"]
        assert [p.prompt.panel_type for p in project.panels] == [
            PanelType.ESTABLISHING, PanelType.CHARACTER_INTRO, PanelType.ACTION, PanelType.RESOLUTION,
        ]
        assert project.project_type == ProjectType.STORYBOARD
        assert project.style == StoryboardStyle.ROUGH_SKETCH

    def test_labelled_panel_count(self):
        result = parse_user_input("A guy with a dog walking in the park (panels: 4)")
        assert result.success
        panels = result.project.panels
        assert len(panels) == 4
        assert panels[0].prompt.panel_type == PanelType.ESTABLISHING
        assert panels[0].prompt.characters == []
        assert panels[3].prompt.panel_type == PanelType.RESOLUTION
        descriptions = [c.description.lower() for c in result.project.characters]
        assert any("dog" in d or "man" in d for d in descriptions)

    def test_panels_resolve_their_scene(self, storyboard_project):
        for panel in storyboard_project.panels:
            assert storyboard_project.find_scene(panel.prompt.scene_id).location == "park"
        assert storyboard_project.find_scene("missing") is None

    @pytest.mark.parametrize("n", [1, 2, 3, 7, 12])
    def test_panel_count_invariant(self, n):
        project = parse_user_input(f"A story in {n} panels about a cat").project
        assert len(project.panels) == n
        assert [p.panel_number for p in project.panels] == list(range(1, n + 1))
        assert [p.prompt.panel_number for p in project.panels] == list(range(1, n + 1))

    def test_panel_count_clamped(self):
        assert len(parse_user_input("A cat in 20 panels").project.panels) == 12

    def test_prompts_never_empty(self, storyboard_project):
        assert all(p.prompt.generated_prompt for p in storyboard_project.panels)

    def test_deterministic(self, dog_park_text):
        first = parse_user_input(dog_park_text).project
        second = parse_user_input(dog_park_text).project
        assert [p.prompt.generated_prompt for p in first.panels] == [p.prompt.generated_prompt for p in second.panels]

    def test_fallback_completeness(self):
        result = parse_user_input("xyzzy plugh")
        assert result.success
        project = result.project
        assert len(project.characters) == 1
        assert project.characters[0].description == "xyzzy plugh"
        assert len(project.scenes) == 1
        assert project.scenes[0].location == "xyzzy plugh"
        assert project.scenes[0].environment == "xyzzy plugh"
        assert len(result.warnings) == 2

    def test_filmmaker_audience_sets_style(self):
        project = parse_user_input("A short film about a woman at the beach").project
        assert project.metadata.target_audience == TargetAudience.FILMMAKERS
        assert project.style == StoryboardStyle.CONCEPT_ART
        prefix = STYLE_TEMPLATES[StoryboardStyle.CONCEPT_ART]["prefix"]
        assert all(p.prompt.style == StoryboardStyle.CONCEPT_ART for p in project.panels)
        assert all(p.prompt.generated_prompt.startswith(prefix) for p in project.panels)
        assert all("cinematic composition, camera angles" in p.prompt.generated_prompt for p in project.panels)

    def test_detected_visual_style(self):
        project = parse_user_input("simple stick figures of a dog").project
        assert project.style == StoryboardStyle.COMIC_STYLE
        assert "toons style with simple shapes" in project.panels[0].prompt.generated_prompt

    def test_theme_context_in_prompts(self):
        project = parse_user_input("La reforma agraria en Guatemala en 1952, 4 panels").project
        assert "Historical context: 1952 in Guatemala" in project.panels[0].prompt.generated_prompt

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_input_fails(self, text):
        result = parse_user_input(text)
        assert not result.success
        assert result.project is None
        assert result.errors == ["Input text is empty"]


class TestParseArchitecturalInput:
    """Test technical-drawing parsing."""

    def test_beam_scenario(self, beam_text):
        result = parse_architectural_input(beam_text, "detalles")
        assert result.success
        project = result.project
        metadata = project.architectural_metadata

        assert project.project_type == ProjectType.ARCHITECTURAL
        assert project.architectural_project_kind == ArchitecturalProjectKind.DETALLES
        assert project.style == StoryboardStyle.CLEAN_LINES
        assert project.metadata.target_audience == TargetAudience.ARCHITECTS
        assert project.characters == []
        assert project.title.endswith("Section")

        assert [p.detail_level for p in project.panels] == [DL.OVERVIEW, DL.REINFORCEMENT, DL.CONNECTION]
        assert metadata.scale == "1:20"
        assert metadata.standards == ["ACI 318"]
        assert metadata.unit_system == UnitSystem.METRIC
        assert "300 × 600 mm" in metadata.dimensions
        assert metadata.components == ["reinforced concrete beam", "stirrups"]
        assert metadata.reinforcement_notes[:2] == ["#5@150", "include stirrups/links spacing"]
        assert all(p.prompt.generated_prompt for p in project.panels)

    def test_beam_detail_request(self):
        result = parse_architectural_input("Show a reinforced concrete beam detail, scale 1:20, 3 panels", "detalles")
        assert result.success
        project = result.project
        assert project.project_type == ProjectType.ARCHITECTURAL
        assert project.architectural_metadata.scale == "1:20"
        assert len(project.panels) == 3
        assert project.panels[0].detail_level == DL.OVERVIEW

    def test_default_kind(self, beam_text):
        result = parse_architectural_input(beam_text)
        assert result.project.architectural_project_kind == ArchitecturalProjectKind.DETALLES

    def test_planos(self):
        text = "Floor plan for a 3 storey residential building, ground floor and first floor"
        project = parse_architectural_input(text, "planos").project
        metadata = project.architectural_metadata
        assert metadata.primary_view == ArchitecturalViewType.PLAN
        assert metadata.levels == ["Ground Floor", "First Floor"]
        assert metadata.floors == 3
        assert metadata.building_type == "residential"
        assert metadata.scale == "1:100"
        assert [p.detail_level for p in project.panels] == [DL.SITE, DL.PLAN, DL.SECTION, DL.ELEVATION]
        assert all(PLANOS_EXTRAS in p.prompt.generated_prompt for p in project.panels)
        assert project.title.endswith("Plan")

    def test_prototipos(self):
        project = parse_architectural_input("A mixed use tower of 12 floors", ArchitecturalProjectKind.PROTOTIPOS).project
        metadata = project.architectural_metadata
        assert metadata.building_type == "mixed-use"
        assert metadata.floors == 12
        assert [p.detail_level for p in project.panels] == [DL.MASSING, DL.PROGRAM, DL.FACADE, DL.STRUCTURE]
        assert "number of floors: 12" in project.panels[0].prompt.generated_prompt

    def test_unknown_kind_fails(self, beam_text):
        result = parse_architectural_input(beam_text, "sketches")
        assert not result.success
        assert result.project is None
        assert result.errors[0].startswith("Unknown architectural project kind")

    def test_blank_input_fails(self):
        result = parse_architectural_input("  ", "planos")
        assert not result.success
        assert result.errors == ["Input text is empty"]


class TestArchitecturalMetadata:
    """Test metadata assembly from text and kind defaults."""

    def test_detalles_default_reinforcement(self):
        metadata = build_architectural_metadata("a beam", ArchitecturalProjectKind.DETALLES)
        assert metadata.reinforcement_notes == DEFAULT_REINFORCEMENT_NOTES
        assert metadata.general_notes[0] == "all dimensions in millimeters"
        assert metadata.general_notes[-1] == "comply with structural code"

    def test_imperial_note(self):
        metadata = build_architectural_metadata("a 12 inch slab", ArchitecturalProjectKind.DETALLES)
        assert metadata.unit_system == UnitSystem.IMPERIAL
        assert metadata.general_notes[0] == "all dimensions in inches"

    def test_explicit_view_sets_secondary(self):
        metadata = build_architectural_metadata("front elevation", ArchitecturalProjectKind.DETALLES)
        assert metadata.primary_view == ArchitecturalViewType.ELEVATION
        assert metadata.secondary_view == ArchitecturalViewType.SECTION

    def test_detail_levels_follow_count(self):
        metadata = build_architectural_metadata("a beam", ArchitecturalProjectKind.DETALLES, count=2)
        assert metadata.detail_levels == [DL.OVERVIEW, DL.REINFORCEMENT]

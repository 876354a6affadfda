"""
Tests for in-place project editing.
"""

import pytest

from storyboarder.errors import InvalidInputError, ProjectEditError
from storyboarder.models import ArchitecturalDetailLevel as DL, CharacterRole, IssueType
from storyboarder.projects import (
    append_architectural_panels_from_input,
    append_panels_from_input,
    attach_panel_image,
    edit_panel_prompt,
    get_panel,
    regenerate_panel_prompt,
    remove_character,
    renumber_panels,
)
from storyboarder.validation import validate_storyboard_project


class TestAppendPanels:
    """Test continuing a storyboard from more text."""

    def test_known_cast_is_reused(self, storyboard_project):
        panels = append_panels_from_input(storyboard_project, "The man and the dog go home. 2 panels")
        assert [p.panel_number for p in panels] == [5, 6]
        assert [p.panel_number for p in storyboard_project.panels] == list(range(1, 7))
        assert len(storyboard_project.characters) == 2
        assert [s.location for s in storyboard_project.scenes] == ["park", "indoor home"]
        known = set(storyboard_project.character_ids())
        assert all(set(p.prompt.characters) <= known for p in panels)

    def test_new_character_is_supporting(self, storyboard_project):
        append_panels_from_input(storyboard_project, "A cat appears in the park. 2 panels")
        cat = storyboard_project.characters[-1]
        assert cat.name == "Cat"
        assert cat.role == CharacterRole.SUPPORTING
        assert len(storyboard_project.scenes) == 1

    def test_appended_project_stays_consistent(self, storyboard_project):
        append_panels_from_input(storyboard_project, "The man and the dog go home. 2 panels")
        result = validate_storyboard_project(storyboard_project)
        assert result.is_valid
        assert not [i for i in result.issues if i.type == IssueType.WARNING]

    def test_updated_at_moves(self, storyboard_project):
        before = storyboard_project.updated_at
        append_panels_from_input(storyboard_project, "The dog sleeps. 1 panel")
        assert storyboard_project.updated_at >= before

    def test_empty_text(self, storyboard_project):
        with pytest.raises(InvalidInputError):
            append_panels_from_input(storyboard_project, "  ")

    def test_architectural_project_rejected(self, architectural_project):
        with pytest.raises(ProjectEditError):
            append_panels_from_input(architectural_project, "a dog")


class TestAppendArchitecturalPanels:
    """Test adding drawings to an architectural project."""

    def test_append_merges_metadata(self, architectural_project):
        panels = append_architectural_panels_from_input(
            architectural_project, "connection with anchor bolts, 2 panels",
        )
        assert [p.panel_number for p in panels] == [4, 5]
        assert [p.detail_level for p in panels] == [DL.OVERVIEW, DL.REINFORCEMENT]
        metadata = architectural_project.architectural_metadata
        assert "anchor bolts" in metadata.components
        assert "reinforced concrete beam" in metadata.components
        assert metadata.scale == "1:20"
        assert all(p.prompt.generated_prompt for p in panels)

    def test_kind_mismatch(self, architectural_project):
        with pytest.raises(ProjectEditError):
            append_architectural_panels_from_input(architectural_project, "a plan", "planos")

    def test_unknown_kind(self, architectural_project):
        with pytest.raises(ProjectEditError):
            append_architectural_panels_from_input(architectural_project, "a plan", "sketches")

    def test_storyboard_project_rejected(self, storyboard_project):
        with pytest.raises(ProjectEditError):
            append_architectural_panels_from_input(storyboard_project, "a beam")


class TestPanelEdits:
    """Test prompt regeneration, manual edits and images."""

    def test_get_panel_missing(self, storyboard_project):
        with pytest.raises(ProjectEditError) as exc:
            get_panel(storyboard_project, 99)
        assert exc.value.details["panel_number"] == 99

    def test_manual_prompt(self, storyboard_project):
        panel = edit_panel_prompt(storyboard_project, 1, generated_prompt="custom prompt")
        assert panel.prompt.generated_prompt == "custom prompt"
        assert panel.is_edited

    def test_structured_change_regenerates(self, storyboard_project):
        panel = edit_panel_prompt(storyboard_project, 2, action="jumps over a fence")
        assert "jumps over a fence" in panel.prompt.generated_prompt
        assert panel.is_edited

    @pytest.mark.parametrize("field", ["colour", "panel_number", "id", "project"])
    def test_rejected_fields(self, storyboard_project, field):
        with pytest.raises(ProjectEditError):
            edit_panel_prompt(storyboard_project, 1, **{field: "x"})

    def test_regenerate_restores_synthesized_prompt(self, storyboard_project):
        synthesized = storyboard_project.panels[0].prompt.generated_prompt
        edit_panel_prompt(storyboard_project, 1, generated_prompt="custom prompt")
        panel = regenerate_panel_prompt(storyboard_project, 1)
        assert panel.prompt.generated_prompt == synthesized
        assert not panel.is_edited

    def test_regenerate_architectural(self, architectural_project):
        synthesized = architectural_project.panels[1].prompt.generated_prompt
        architectural_project.panels[1].prompt.generated_prompt = ""
        panel = regenerate_panel_prompt(architectural_project, 2)
        assert panel.prompt.generated_prompt == synthesized

    def test_attach_image(self, storyboard_project):
        panel = storyboard_project.panels[1]
        panel.is_generating = True
        attach_panel_image(storyboard_project, 2, "outputs/panel.png")
        assert panel.generated_image_url == "outputs/panel.png"
        assert panel.last_generated is not None
        assert not panel.is_generating

    def test_image_and_prompt_are_independent(self, storyboard_project):
        attach_panel_image(storyboard_project, 1, "outputs/panel.png")
        regenerate_panel_prompt(storyboard_project, 1)
        assert storyboard_project.panels[0].generated_image_url == "outputs/panel.png"

    def test_clear_image(self, storyboard_project):
        panel = attach_panel_image(storyboard_project, 1, None)
        assert panel.generated_image_url is None
        assert panel.last_generated is None


class TestCastAndNumbering:
    """Test character removal and renumbering."""

    def test_remove_character_keeps_references(self, storyboard_project):
        dog = storyboard_project.characters[1]
        removed = remove_character(storyboard_project, dog.id)
        assert removed.id == dog.id
        assert dog.id not in storyboard_project.character_ids()
        assert dog.id in storyboard_project.panels[2].prompt.characters

        result = validate_storyboard_project(storyboard_project)
        assert result.is_valid
        assert any("unknown character" in i.message for i in result.issues)

    def test_remove_unknown_character(self, storyboard_project):
        with pytest.raises(ProjectEditError):
            remove_character(storyboard_project, "nope")

    def test_renumber(self, storyboard_project):
        del storyboard_project.panels[1]
        renumber_panels(storyboard_project)
        assert [p.panel_number for p in storyboard_project.panels] == [1, 2, 3]
        assert [p.prompt.panel_number for p in storyboard_project.panels] == [1, 2, 3]

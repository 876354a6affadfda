"""
Tests for the architectural extractors.

Tests:
- Units, scale and standards
- Components, materials and dimensions
- Reinforcement notation
- Views, building type, floors and levels
"""

import pytest

from storyboarder.architectural_extractors import (
    detect_building_type,
    detect_floors,
    detect_primary_view,
    detect_scale,
    detect_standards,
    detect_unit_system,
    extract_components,
    extract_dimensions,
    extract_levels,
    extract_materials,
    extract_reinforcement,
    normalize_unit,
    secondary_view_for,
)
from storyboarder.models import ArchitecturalViewType, UnitSystem


class TestUnitsScaleStandards:
    """Test unit system, scale and code detection."""

    def test_imperial_keywords(self):
        assert detect_unit_system("a 12 inch slab") == UnitSystem.IMPERIAL
        assert detect_unit_system("a 10 ft wall") == UnitSystem.IMPERIAL

    def test_metric_default(self):
        assert detect_unit_system("a 300 mm slab") == UnitSystem.METRIC

    def test_scale_whitespace_removed(self):
        assert detect_scale("drawn at 1 : 50") == "1:50"

    def test_scale_default(self):
        assert detect_scale("no scale") == "1:20"
        assert detect_scale("no scale", default="1:100") == "1:100"

    def test_standards_upper_and_unique(self):
        assert detect_standards("per ACI 318 and aci 318, also Eurocode") == ["ACI 318", "EUROCODE"]

    def test_no_standards(self):
        assert detect_standards("a beam") == []


class TestKeywordsAndDimensions:
    """Test keyword maps and dimension normalization."""

    def test_components_in_table_order(self):
        assert extract_components("a beam with stirrups and rebar") == [
            "reinforced concrete beam",
            "reinforcing steel",
            "stirrups",
        ]

    def test_materials(self):
        assert extract_materials("steel and concrete") == ["concrete", "steel"]

    def test_pair_dimension(self):
        dims = extract_dimensions("beam 300x600 mm, cover 40 mm")
        assert dims[0] == "300 × 600 mm"
        assert "40 mm" in dims

    def test_pair_dimension_with_by(self):
        assert extract_dimensions("a column 300 by 600 mm")[0] == "300 × 600 mm"

    def test_comma_decimal(self):
        assert extract_dimensions("a span of 2,5 m") == ["2.5 m"]

    def test_no_dimensions(self):
        assert extract_dimensions("a beam") == []

    @pytest.mark.parametrize("raw, unit", [
        ("MM", "mm"), ("cm", "cm"), ("m", "m"), ("inches", "in"), (None, ""),
    ])
    def test_normalize_unit(self, raw, unit):
        assert normalize_unit(raw) == unit


class TestReinforcement:
    """Test bar callouts and extra notes."""

    def test_bar_spacing_with_notes(self):
        notes = extract_reinforcement("#5@150 with stirrups and 40 mm cover")
        assert notes == ["#5@150", "include stirrups/links spacing", "note concrete cover"]

    def test_at_spelling(self):
        assert extract_reinforcement("bars 12 at 200") == ["12 at 200"]

    def test_nothing_found(self):
        assert extract_reinforcement("a plain wall") == []


class TestViewsAndBuildings:
    """Test view detection and prototype descriptors."""

    @pytest.mark.parametrize("text, view", [
        ("front elevation of the facade", ArchitecturalViewType.ELEVATION),
        ("floor plan of level 2", ArchitecturalViewType.PLAN),
        ("isometric of the roof", ArchitecturalViewType.AXONOMETRIC),
        ("exploded assembly", ArchitecturalViewType.EXPLODED),
        ("general notes sheet", ArchitecturalViewType.LEGEND),
        ("beam to column connection", ArchitecturalViewType.DETAIL),
        ("a beam", ArchitecturalViewType.SECTION),
    ])
    def test_primary_view(self, text, view):
        assert detect_primary_view(text) == view

    def test_secondary_view(self):
        assert secondary_view_for(ArchitecturalViewType.SECTION) == ArchitecturalViewType.DETAIL
        assert secondary_view_for(ArchitecturalViewType.PLAN) == ArchitecturalViewType.SECTION

    def test_building_type(self):
        assert detect_building_type("a mixed use tower") == "mixed-use"
        assert detect_building_type("una escuela rural") == "educational"
        assert detect_building_type("a shed") is None

    @pytest.mark.parametrize("text, floors", [
        ("a 5 storey building", 5),
        ("a 3 story house", 3),
        ("12 floors", 12),
        ("edificio de 4 pisos", 4),
        ("a building", None),
    ])
    def test_floors(self, text, floors):
        assert detect_floors(text) == floors

    def test_levels(self):
        assert extract_levels("ground floor and FIRST FLOOR, then ground floor") == ["Ground Floor", "First Floor"]

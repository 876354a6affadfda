"""
Pytest Configuration and Fixtures

Shared inputs and parsed projects for all tests.
"""

import logging

import pytest
from PIL import Image

from storyboarder.parsing import parse_architectural_input, parse_user_input

DOG_PARK_TEXT = "A guy with a dog walking in the park in the morning. They find a ball. They play happily."
BEAM_TEXT = (
    "Reinforced concrete beam section 300x600 mm with #5@150 stirrups, "
    "scale 1:20, ACI 318, 3 panels"
)


@pytest.fixture
def dog_park_text() -> str:
    return DOG_PARK_TEXT


@pytest.fixture
def beam_text() -> str:
    return BEAM_TEXT


@pytest.fixture
def storyboard_project():
    """A freshly parsed 4-panel storyboard project."""
    result = parse_user_input(DOG_PARK_TEXT)
    assert result.success, result.errors
    return result.project


@pytest.fixture
def architectural_project():
    """A freshly parsed 3-panel detalles project."""
    result = parse_architectural_input(BEAM_TEXT, "detalles")
    assert result.success, result.errors
    return result.project


@pytest.fixture
def panel_images(tmp_path):
    """Two small PNG files of different sizes."""
    paths = []
    for name, size, color in (("a.png", (40, 30), (200, 0, 0)), ("b.png", (20, 20), (0, 0, 200))):
        path = tmp_path / name
        Image.new("RGB", size, color=color).save(path)
        paths.append(str(path))
    return paths


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by setup_logging between tests."""
    yield
    logger = logging.getLogger("storyboarder")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

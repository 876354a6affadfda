"""
Tests for settings, logging setup and the exception hierarchy.
"""

import logging

from storyboarder.config import AppSettings
from storyboarder.errors import (
    ExportError,
    InvalidInputError,
    ParseError,
    ProjectEditError,
    RenderError,
    StoryboardError,
)
from storyboarder.logging_config import setup_logging


class TestAppSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("OUTPUTS_DIR", "LOG_LEVEL", "MODELS", "IMAGE_STEPS", "GUIDANCE_SCALE", "BASE_SEED", "DEFAULT_KIND"):
            monkeypatch.delenv(f"STORYBOARDER_{name}", raising=False)
        settings = AppSettings.from_env()
        assert settings.outputs_dir == "outputs"
        assert settings.log_level == "INFO"
        assert settings.model_candidates == ["stabilityai/sd-turbo", "runwayml/stable-diffusion-v1-5"]
        assert settings.image_steps is None
        assert settings.guidance_scale is None
        assert settings.base_seed == 1234
        assert settings.default_kind == "detalles"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("STORYBOARDER_OUTPUTS_DIR", "/tmp/boards")
        monkeypatch.setenv("STORYBOARDER_MODELS", "a/model, b/model ,")
        monkeypatch.setenv("STORYBOARDER_IMAGE_STEPS", "10")
        monkeypatch.setenv("STORYBOARDER_GUIDANCE_SCALE", "6.5")
        monkeypatch.setenv("STORYBOARDER_BASE_SEED", "7")
        settings = AppSettings.from_env()
        assert settings.outputs_dir == "/tmp/boards"
        assert settings.model_candidates == ["a/model", "b/model"]
        assert settings.image_steps == 10
        assert settings.guidance_scale == 6.5
        assert settings.base_seed == 7


class TestSetupLogging:
    """Test handler configuration on the package logger."""

    def test_console_handler(self):
        logger = setup_logging("DEBUG")
        assert logger.name == "storyboarder"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("loud").level == logging.INFO

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "storyboarder.log"
        setup_logging(logging.INFO, log_file=log_file, console_output=False)
        logging.getLogger("storyboarder.parsing").info("parsed a project")
        for handler in logging.getLogger("storyboarder").handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "storyboarder.parsing | parsed a project" in content


class TestErrors:
    """Test the exception hierarchy."""

    def test_hierarchy(self):
        for cls in (ParseError, ProjectEditError, RenderError, ExportError):
            assert issubclass(cls, StoryboardError)
        assert issubclass(InvalidInputError, ParseError)

    def test_str_with_details(self):
        assert str(StoryboardError("bad", {"a": 1})) == "bad | Details: {'a': 1}"
        assert str(StoryboardError("bad")) == "bad"

    def test_project_edit_details(self):
        err = ProjectEditError("no such panel", "p1", 3)
        assert err.details == {"project_id": "p1", "panel_number": 3}
        assert err.message == "no such panel"

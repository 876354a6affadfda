## storyboarder/__init__.py

"""Natural-language storyboard parsing, prompt synthesis and validation."""

from storyboarder.analysis import analyze_theme, analyze_visual_style
from storyboarder.architectural_prompting import generate_architectural_panel_prompts
from storyboarder.parsing import parse_architectural_input, parse_user_input
from storyboarder.prompting import generate_all_panel_prompts
from storyboarder.validation import validate_contextual_prompt, validate_storyboard_project

__version__ = "0.1.0"

__all__ = [
    "analyze_theme",
    "analyze_visual_style",
    "generate_all_panel_prompts",
    "generate_architectural_panel_prompts",
    "parse_architectural_input",
    "parse_user_input",
    "validate_contextual_prompt",
    "validate_storyboard_project",
]

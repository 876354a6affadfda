## storyboarder/errors.py

"""
Storyboarder exceptions.

Parse entry points convert these (and anything else raised inside the
pipeline) into a failed ``PromptGenerationResult``; editing, rendering and
export helpers let them propagate to the caller.
"""


class StoryboardError(Exception):
    """Base exception for all storyboarder errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ParseError(StoryboardError):
    """Raised when free text cannot be turned into a project."""
    pass


class InvalidInputError(ParseError):
    """Raised when the input text or parameters are unusable."""
    pass


class ProjectEditError(StoryboardError):
    """Raised when an edit would break a project's invariants."""

    def __init__(self, message: str, project_id: str = None, panel_number: int = None):
        details = {}
        if project_id:
            details["project_id"] = project_id
        if panel_number is not None:
            details["panel_number"] = panel_number
        super().__init__(message, details)


class RenderError(StoryboardError):
    """Raised when the image backend cannot produce panel images."""
    pass


class ExportError(StoryboardError):
    """Raised when a project cannot be serialized or exported."""
    pass

"""Exceptions raised by the lesson domain."""


class LessonError(Exception):
    """Base class for lesson errors."""
    pass


class NotFoundError(LessonError):
    """Raised when a lesson or module id resolves to no record."""
    pass


class ValidationError(LessonError):
    """Raised when a draft cannot be saved as-is (e.g. blank topic)."""
    pass


class NoActiveDraftError(LessonError):
    """Raised when a session operation needs a draft and there is none."""
    pass


class StoreUnavailableError(LessonError):
    """Raised when the record store cannot be reached or fails mid-call."""
    pass


class IndexOutOfRangeError(LessonError, IndexError):
    """Raised when a list item index falls outside the current list."""
    pass


class InvalidFieldPathError(LessonError, ValueError):
    """Raised when an editable field path names an unknown field."""
    pass


class RegenerationInProgressError(LessonError):
    """Raised when a section is regenerated while a previous request for it is still running."""

    def __init__(self, section):
        self.section = section
        super().__init__(f"Section already regenerating: {section}")


class GenerationError(LessonError):
    """Raised when the content generator fails or times out."""
    pass

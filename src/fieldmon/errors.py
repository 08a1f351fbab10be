"""Error types for the field monitor core.

Every failure surfaced to the presentation layer is a FieldmonError carrying
a short user-displayable message.
"""


class FieldmonError(Exception):
    """Base exception for field monitor errors."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        """Initialize error.

        Args:
            message: Detail message. Defaults to the class user message.
        """
        super().__init__(message or self.user_message)


class ConfigurationError(FieldmonError):
    """Raised when credentials or required collaborators are missing."""

    user_message = "The assistant is not configured. Check the API key setting."


class InferenceError(FieldmonError):
    """Raised when the inference backend fails to process a request."""

    user_message = "AI processing failed. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        """Initialize inference error.

        Args:
            message: Detail message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(InferenceError):
    """Raised when the backend rejects a request for quota or rate reasons."""

    user_message = (
        "System busy (quota exceeded). We retried, but if this persists, "
        "please wait 60 seconds."
    )


class NetworkError(InferenceError):
    """Raised when the backend cannot be reached."""

    user_message = "Network error. Please check your internet connection."


class MalformedResponseError(InferenceError):
    """Raised when the backend reply does not match the expected schema."""

    user_message = "The AI service returned an unexpected response. Please try again."


class PreconditionViolation(FieldmonError):
    """Raised when an operation is invoked in a state that forbids it."""

    user_message = "That action is not available right now."


class CategoryBusyError(PreconditionViolation):
    """Raised when a category already has a request in flight."""

    user_message = "Still processing the previous note for this section."


class JobResetError(PreconditionViolation):
    """Raised when the job was reset while a request for it was in flight."""

    user_message = "The job was reset before that request finished. Nothing was saved."


class NoteNotFoundError(FieldmonError):
    """Raised when a note id does not exist in a category."""

    user_message = "That note no longer exists."

    def __init__(self, note_id: str) -> None:
        """Initialize error.

        Args:
            note_id: The id that was not found.
        """
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class SchemaError(ValueError):
    """Raised when a payload does not conform to a structured-data schema."""


__all__ = [
    "CategoryBusyError",
    "ConfigurationError",
    "FieldmonError",
    "InferenceError",
    "JobResetError",
    "MalformedResponseError",
    "NetworkError",
    "NoteNotFoundError",
    "PreconditionViolation",
    "RateLimitedError",
    "SchemaError",
]

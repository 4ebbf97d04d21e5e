"""
Error definitions for the studio.

Every error here is recoverable: the HTTP layer turns it into a JSON
`{"error", "code"}` body and the editing session keeps its state intact.
"""

from typing import Any


class StudioError(Exception):
    """
    Base error for studio operations.

    Usage:
        raise SaveError(ErrorCodes.SAVE_FAILED, "db down", status_code=500)
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """For logs and JSON responses."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class FieldPathError(StudioError):
    """Edit path names a section or field the profile does not have."""
    pass


class ImageValidationError(StudioError):
    """
    A file in the batch broke the size or type policy.

    `errors` holds one reason per failing file, in batch order; `message`
    is the first of them.
    """

    def __init__(self, errors: list[str], **context: Any) -> None:
        self.errors = errors
        super().__init__(
            ErrorCodes.IMAGE_VALIDATION_FAILED,
            errors[0] if errors else "Invalid image batch.",
            **context,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class ImageReadError(StudioError):
    """A selected file could not be read; the batch was dropped."""
    pass


class SaveError(StudioError):
    """Persistence collaborator failed or refused the payload."""
    pass


class GenerationError(StudioError):
    """AI image generation failed or returned no image."""
    pass


class SessionNotFoundError(StudioError):
    """No editing session for the given id."""
    pass


class OperationInProgressError(StudioError):
    """Same operation already running for this session."""
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Form ===
    UNKNOWN_FIELD_PATH = "UNKNOWN_FIELD_PATH"

    # === Images ===
    IMAGE_VALIDATION_FAILED = "IMAGE_VALIDATION_FAILED"
    IMAGE_READ_FAILED = "IMAGE_READ_FAILED"

    # === Save ===
    SAVE_FAILED = "SAVE_FAILED"
    SAVE_REJECTED = "SAVE_REJECTED"
    SAVE_TRANSPORT_ERROR = "SAVE_TRANSPORT_ERROR"

    # === Generation ===
    GENERATION_FAILED = "GENERATION_FAILED"
    GENERATION_TIMEOUT = "GENERATION_TIMEOUT"
    NO_IMAGE_RETURNED = "NO_IMAGE_RETURNED"

    # === Session ===
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    OPERATION_IN_PROGRESS = "OPERATION_IN_PROGRESS"

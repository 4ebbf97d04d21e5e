"""Domain layer: errors, schemas and constants."""

from .errors import ErrorCodes, StudioError
from .schemas import (
    ImageReference,
    SavedConfirmation,
    SelectedFile,
    StoreProfile,
)

__all__ = [
    "ErrorCodes",
    "StudioError",
    "StoreProfile",
    "ImageReference",
    "SelectedFile",
    "SavedConfirmation",
]

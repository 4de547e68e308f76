"""
Exception hierarchy for the outfit transformation workflow.
"""
from __future__ import annotations


class OutfitStudioError(Exception):
    """Base class for every error raised by this package."""

    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(OutfitStudioError):
    """Upload rejected by the media validator."""


class UnsupportedType(ValidationError):
    user_message = "Please upload a valid image (JPEG, PNG, WebP)."


class TooLarge(ValidationError):
    user_message = "File size too large."

    def __init__(self, max_size_mb: float | None = None) -> None:
        self.max_size_mb = max_size_mb
        if max_size_mb is None:
            super().__init__()
        else:
            super().__init__(f"File size too large. Max {max_size_mb:g}MB.")


class DecodeFailed(ValidationError):
    user_message = "Could not read the image. Please upload a different photo."


class NoImage(OutfitStudioError):
    user_message = "Please upload an image first."


class TransformationFailed(OutfitStudioError):
    user_message = "Failed to generate outfit. Please try again or choose a different photo."


class UnknownStyle(OutfitStudioError):
    def __init__(self, style_id: str) -> None:
        self.style_id = style_id
        super().__init__(f"Unknown style preset: {style_id!r}")


class NothingToExport(OutfitStudioError):
    user_message = "Generate a look before saving it."


class ServiceError(OutfitStudioError):
    """Provider returned something that could not be turned into an image."""

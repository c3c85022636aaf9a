"""
Operation result data models.

Image generation and webhook uploads report expected failures as values
rather than exceptions, so the orchestration layer can show one error
string and move on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ImageGenerationResult:
    """
    Result of composing counts onto the template.

    On success image and filename are set; on failure only error is.
    """

    success: bool
    """Whether an image was produced."""

    image: Optional[bytes] = None
    """Encoded PNG bytes."""

    filename: Optional[str] = None
    """Suggested download filename."""

    error: Optional[str] = None
    """Error message if generation failed."""

    @classmethod
    def create_success(cls, image: bytes, filename: str) -> "ImageGenerationResult":
        return cls(success=True, image=image, filename=filename)

    @classmethod
    def create_failed(cls, error: str) -> "ImageGenerationResult":
        return cls(success=False, error=error)

    @property
    def size(self) -> int:
        """Encoded size in bytes (0 when no image)."""
        return len(self.image) if self.image else 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses (image bytes omitted)."""
        return {
            "success": self.success,
            "filename": self.filename,
            "size": self.size,
            "error": self.error,
        }


@dataclass
class UploadResult:
    """
    Result of delivering an image to the webhook.

    message_id is best-effort: it is None when the webhook response body
    could not be parsed, even on success.
    """

    success: bool
    """Whether the webhook accepted the upload."""

    message_id: Optional[str] = None
    """Identifier assigned by the remote endpoint."""

    status_code: Optional[int] = None
    """HTTP status code of the last attempt."""

    error: Optional[str] = None
    """Error message if the upload failed."""

    @classmethod
    def create_success(cls, status_code: int, message_id: Optional[str] = None) -> "UploadResult":
        return cls(success=True, message_id=message_id, status_code=status_code)

    @classmethod
    def create_failed(cls, error: str, status_code: Optional[int] = None) -> "UploadResult":
        return cls(success=False, error=error, status_code=status_code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        data: Dict[str, Any] = {"success": self.success}
        if self.message_id is not None:
            data["messageId"] = self.message_id
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        if self.error is not None:
            data["error"] = self.error
        return data

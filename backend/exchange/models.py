"""Pydantic models for the message/file exchange store."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel


class DirEntry(BaseModel):
    """A single directory entry as seen by the Directory Store."""
    name: str
    is_file: bool


class UploadPart(BaseModel):
    """One file part of a multipart submission, staged on disk."""
    name: str  # client-declared filename, not yet sanitized
    temp_path: Path
    size: int


class LandingStatus(str, Enum):
    """What happened to a single upload part."""
    LANDED = "landed"
    SKIPPED = "skipped"
    REJECTED = "rejected"
    FAILED = "failed"


class LandingOutcome(BaseModel):
    """Per-part result reported back to the client."""
    name: str
    status: LandingStatus
    error_message: str | None = None

    def describe(self) -> str:
        """One line of the plain-text upload report."""
        if self.status == LandingStatus.LANDED:
            return f"uploaded {self.name}"
        if self.status == LandingStatus.SKIPPED:
            return f"skipped {self.name or '(unnamed)'}: empty file"
        if self.status == LandingStatus.REJECTED:
            return f"rejected {self.name or '(unnamed)'}: invalid file name"
        return f"failed to save {self.name}"

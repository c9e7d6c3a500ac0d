"""Resume upload inspection.

An optional ``resume`` form part ends up in exactly one of three states:

* ``NoResume``: nothing was attached (absent part or an empty file field).
  The request carries on without a resume.
* ``AcceptedResume``: the file passed every rule and its bytes are buffered.
* ``RejectedResume``: a file was attached but breaks a rule. Callers turn
  this into a 400 before anything is written.

The rules themselves live in an ``UploadConfig`` value handed to the route
through ``Depends(get_upload_config)``.
"""
import random
import time
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union

from fastapi import UploadFile

from jobportal.config import RESUME_MAX_BYTES

ALLOWED_RESUME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})

INVALID_TYPE_MESSAGE = "Only PDF and DOC files are allowed"


@dataclass(frozen=True)
class UploadConfig:
    allowed_types: FrozenSet[str] = ALLOWED_RESUME_TYPES
    max_bytes: int = RESUME_MAX_BYTES


@dataclass(frozen=True)
class NoResume:
    pass


@dataclass(frozen=True)
class AcceptedResume:
    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class RejectedResume:
    message: str


ResumeOutcome = Union[NoResume, AcceptedResume, RejectedResume]


def get_upload_config() -> UploadConfig:
    return UploadConfig()


async def inspect_resume(file: Optional[UploadFile], config: UploadConfig) -> ResumeOutcome:
    # Browsers post an empty part with no filename when the picker was left blank
    if file is None or not file.filename:
        return NoResume()

    if file.content_type not in config.allowed_types:
        return RejectedResume(INVALID_TYPE_MESSAGE)

    contents = await file.read()
    if not contents:
        return RejectedResume("Uploaded resume is empty")
    if len(contents) > config.max_bytes:
        limit_mb = round(config.max_bytes / (1024 * 1024), 2)
        return RejectedResume(f"File size exceeds {limit_mb:g}MB limit")

    return AcceptedResume(filename=file.filename, content_type=file.content_type, data=contents)


def generate_resume_filename(original: str) -> str:
    """``<epoch millis>-<random>-<original name>``, unique per upload."""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    safe_name = original.replace("/", "_").replace("\\", "_")
    return f"{unique_suffix}-{safe_name}"

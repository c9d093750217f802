# errors.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, List, Optional, Union

BODY_EXCERPT_LIMIT = 500


def _excerpt(body: Union[bytes, str], limit: int = BODY_EXCERPT_LIMIT) -> str:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    body = body.strip()
    if len(body) > limit:
        return body[:limit] + "..."
    return body


class ArtifactError(Exception):
    """
    Base class for every failure of the artifact pipeline.

    Subclasses carry enough context for:
      - a distinct, actionable CLI message
      - debugging without a full traceback
    """
    title: ClassVar[str] = "Artifact pipeline failed"
    suggestion: ClassVar[Optional[str]] = None

    def details(self) -> List[str]:
        return []


@dataclass(eq=False)
class InvalidInput(ArtifactError):
    """Bad destination directory."""
    message: str
    path: Optional[Path] = None

    title: ClassVar[str] = "Invalid input"
    suggestion: ClassVar[Optional[str]] = (
        "Pass an existing, writable folder inside the project:\n  buildartifacts download --in public/"
    )

    def __str__(self) -> str:
        return self.message

    def details(self) -> List[str]:
        return [f"path={self.path}"] if self.path is not None else []


@dataclass(eq=False)
class ApiError(ArtifactError):
    """The API answered outside the success range, or could not be reached."""
    status_code: Optional[int]
    body: Union[bytes, str] = b""
    url: Optional[str] = None
    reason: Optional[str] = None

    title: ClassVar[str] = "API request failed"
    suggestion: ClassVar[Optional[str]] = "Check the API URL, the project identifier and the token permissions."

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Network error during API call: {self.reason or 'unknown error'}"
        return f"Error during API call\n[{self.status_code}] -> {_excerpt(self.body)}"

    def details(self) -> List[str]:
        lines = []
        if self.url:
            lines.append(f"url={self.url}")
        if self.status_code is not None:
            lines.append(f"status={self.status_code}")
        return lines


@dataclass(eq=False)
class DecodeError(ArtifactError):
    """The API body is not the structured data we expected."""
    message: str
    body: Union[bytes, str] = b""

    title: ClassVar[str] = "Invalid API response"
    suggestion: ClassVar[Optional[str]] = "Make sure --api points at a GitLab instance (v4 API)."

    def __str__(self) -> str:
        return self.message

    def details(self) -> List[str]:
        excerpt = _excerpt(self.body)
        return [f"body={excerpt}"] if excerpt else []


@dataclass(eq=False)
class BuildNotFound(ArtifactError):
    stage: str
    ref: Optional[str] = None
    tag: Optional[str] = None

    title: ClassVar[str] = "No matching build"
    suggestion: ClassVar[Optional[str]] = (
        "Check the --stage/--ref/--tag filters, or raise --perpage to look further back."
    )

    def __str__(self) -> str:
        return (
            "Can't find a successful build in the project "
            f"(stage={self.stage}, ref={self.ref or '*'}, tag={self.tag or '*'})"
        )


@dataclass(eq=False)
class IoError(ArtifactError):
    """Temporary file or filesystem failure."""
    message: str
    path: Optional[Path] = None

    title: ClassVar[str] = "Filesystem error"
    suggestion: ClassVar[Optional[str]] = "Check free disk space and permissions of the storage directory."

    def __str__(self) -> str:
        return self.message

    def details(self) -> List[str]:
        return [f"path={self.path}"] if self.path is not None else []


@dataclass(eq=False)
class ExtractError(ArtifactError):
    archive: str
    destination: Path
    reason: Optional[str] = None

    title: ClassVar[str] = "Extraction failed"

    def __str__(self) -> str:
        return f'Can\'t extract ZIP file "{self.archive}" in "{self.destination}"'

    def details(self) -> List[str]:
        return [self.reason] if self.reason else []


@dataclass(eq=False)
class DeadlineExceeded(ArtifactError):
    timeout: float
    during: str

    title: ClassVar[str] = "Timed out"
    suggestion: ClassVar[Optional[str]] = "Raise --timeout or check the network path to the API."

    def __str__(self) -> str:
        return f"Deadline of {self.timeout:g}s exceeded during {self.during}"

# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

DEFAULT_API_URL = "https://gitlab.com"
DEFAULT_STAGE = "prepare"
DEFAULT_PAGE_SIZE = 50


class Runner(BaseModel):
    """Runner that executed a job."""
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    description: Optional[str] = None


class User(BaseModel):
    """User that triggered a job."""
    model_config = ConfigDict(frozen=True)

    username: str


class BuildRecord(BaseModel):
    """
    One CI job as reported by the GitLab jobs API.

    Only the fields the selector and the build summary need are declared,
    everything else in the payload is ignored.
    """
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    status: str
    stage: str
    ref: Optional[str] = None
    # GitLab sends a boolean (ref is a tag); other providers send the tag name
    tag: Union[bool, str, None] = None
    created_at: Optional[datetime] = None
    runner: Optional[Runner] = None
    user: Optional[User] = None

    def matches_tag(self, tag: str) -> bool:
        if isinstance(self.tag, str):
            return self.tag == tag
        return self.tag is True and self.ref == tag


@dataclass(frozen=True)
class PipelineConfig:
    """
    Resolved input of one fetch-and-install run.

    Built once by the CLI; the pipeline never reads the environment itself.
    """
    api_base_url: str
    auth_token: str = field(repr=False)
    project_id: str
    destination_dir: Path
    project_root: Path
    stage_filter: str = DEFAULT_STAGE
    ref_filter: Optional[str] = None
    tag_filter: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    storage_dir: Optional[Path] = None  # None -> system temp dir
    timeout: Optional[float] = None  # seconds, whole run

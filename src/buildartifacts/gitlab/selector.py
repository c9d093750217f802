# gitlab/selector.py
from __future__ import annotations

import json
from typing import Any, List

from pydantic import ValidationError

from buildartifacts.errors import BuildNotFound, DecodeError
from buildartifacts.model import BuildRecord, PipelineConfig
from buildartifacts.ui.console import get_console

from .api_client import APIClient


def parse_page(payload: Any) -> List[BuildRecord]:
    """
    Validate one page of the jobs API into BuildRecords.

    Raises:
        DecodeError: If the page is not a list of job objects
    """
    if not isinstance(payload, list):
        raise DecodeError(
            message=f"Expected a list of jobs, got {type(payload).__name__}",
            body=json.dumps(payload)[:500],
        )
    try:
        return [BuildRecord.model_validate(item) for item in payload]
    except ValidationError as e:
        raise DecodeError(message=f"Malformed job record in GitLab API response:\n{e}") from e


def matches(build: BuildRecord, config: PipelineConfig) -> bool:
    """True if the build passes every filter of the config."""
    if build.status != "success":
        return False
    if build.stage != config.stage_filter:
        return False
    if config.ref_filter is not None and build.ref != config.ref_filter:
        return False
    if config.tag_filter is not None and not build.matches_tag(config.tag_filter):
        return False
    return True


def select_latest_successful_build(client: APIClient, config: PipelineConfig) -> BuildRecord:
    """
    Pick the newest successful build matching the config filters.

    Only the first page (config.page_size jobs) is inspected, in the order
    GitLab returns it (newest first). Older matching builds are not seen.

    Raises:
        ApiError: If the jobs request fails
        DecodeError: If the response is not a list of jobs
        BuildNotFound: If no job on the page matches
    """
    payload = client.get_json(client.jobs_url(config.project_id, config.page_size))
    builds = parse_page(payload)

    build = next((b for b in builds if matches(b, config)), None)
    if build is None:
        raise BuildNotFound(stage=config.stage_filter, ref=config.ref_filter, tag=config.tag_filter)

    get_console().print_build_selected(build)
    return build

# pipeline.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from .deadline import Deadline
from .errors import InvalidInput
from .gitlab.api_client import APIClient
from .gitlab.downloader import artifact_path, download_artifact
from .gitlab.selector import select_latest_successful_build
from .installer import install_artifact
from .model import PipelineConfig
from .ui.console import get_console


def validate_destination(config: PipelineConfig) -> Path:
    """
    Resolve the destination and check it is usable.

    Returns:
        Resolved destination directory

    Raises:
        InvalidInput: If it is missing, not writable or outside the project
    """
    destination = Path(config.destination_dir).resolve()
    if not destination.is_dir() or not os.access(destination, os.W_OK):
        raise InvalidInput(
            message="Invalid --in option, must be an existing, writable directory",
            path=destination,
        )
    root = Path(config.project_root).resolve()
    if not destination.is_relative_to(root):
        raise InvalidInput(
            message=f"--in option must define a folder inside the current project ({root})",
            path=destination,
        )
    return destination


def run(config: PipelineConfig, client: Optional[APIClient] = None) -> Path:
    """
    Select, download and install the latest matching artifact.

    The temporary archive is removed on every exit path, errors from any
    stage surface only after that cleanup.

    Returns:
        Resolved destination directory
    """
    console = get_console()
    destination = validate_destination(config)

    if client is None:
        client = APIClient(config.api_base_url, config.auth_token, deadline=Deadline(config.timeout))

    build = select_latest_successful_build(client, config)

    path = artifact_path(config, build)
    try:
        download_artifact(client, config, build, path)
        install_artifact(path, destination)
    finally:
        path.unlink(missing_ok=True)
        console.print_debug(f"Removed temporary archive {path}")

    return destination

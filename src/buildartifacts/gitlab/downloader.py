# gitlab/downloader.py
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional

from buildartifacts.errors import IoError
from buildartifacts.model import BuildRecord, PipelineConfig
from buildartifacts.ui.console import get_console

from .api_client import APIClient


def artifact_path(config: PipelineConfig, build: BuildRecord) -> Path:
    """Temporary archive location; named after the build so leftovers are traceable."""
    storage = Path(config.storage_dir) if config.storage_dir is not None else Path(tempfile.gettempdir())
    return storage / f"artifact-{build.id}.zip"


def download_artifact(
    client: APIClient,
    config: PipelineConfig,
    build: BuildRecord,
    path: Optional[Path] = None,
) -> Path:
    """
    Stream the build's artifact archive into a file.

    The body goes straight from the socket to disk, never fully into memory.
    Any request failure propagates; the caller owns (and removes) the file,
    which may hold a partial body at that point.

    Returns:
        Path of the written archive

    Raises:
        ApiError: If the artifacts request fails
        IoError: If the file cannot be created or written
    """
    if path is None:
        path = artifact_path(config, build)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fh:
            client.get(client.artifacts_url(config.project_id, build.id), sink=fh)
        size = path.stat().st_size
    except OSError as e:
        raise IoError(message=f"Can't download artifact to {path}: {e.strerror or e}", path=path) from e

    get_console().print_download_complete(path, size)
    return path

# installer.py
from __future__ import annotations

import zipfile
import zlib
from pathlib import Path
from typing import List

from .errors import ExtractError, IoError
from .ui.console import get_console


def _check_entries(zf: zipfile.ZipFile, archive: Path, destination: Path) -> List[str]:
    """Reject entries that would land outside destination (../, absolute names)."""
    names = []
    for info in zf.infolist():
        target = (destination / info.filename).resolve()
        if not target.is_relative_to(destination):
            raise ExtractError(
                archive=archive.name,
                destination=destination,
                reason=f"entry {info.filename!r} escapes the destination directory",
            )
        names.append(info.filename)
    return names


def install_artifact(archive_path: str | Path, destination_dir: str | Path) -> List[str]:
    """
    Extract a ZIP artifact into destination_dir, keeping its internal paths.

    Existing files are overwritten by extraction; nothing is cleaned first.

    Returns:
        Names of the extracted entries

    Raises:
        ExtractError: If the archive can't be opened or an entry is invalid
        IoError: If writing the extracted files fails
    """
    archive = Path(archive_path)
    destination = Path(destination_dir).resolve()

    try:
        zf = zipfile.ZipFile(archive)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractError(archive=archive.name, destination=destination, reason=str(e)) from e

    with zf:
        names = _check_entries(zf, archive, destination)
        try:
            zf.extractall(path=destination)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
            # corrupt member, unsupported compression or encrypted entry
            raise ExtractError(archive=archive.name, destination=destination, reason=str(e)) from e
        except OSError as e:
            raise IoError(message=f"Can't write artifact files in {destination}: {e}", path=destination) from e

    get_console().print_artifact_installed(destination, len(names))
    return names

"""Console output formatting utilities for buildartifacts."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from buildartifacts.model import BuildRecord, PipelineConfig


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_run_started(self, config: "PipelineConfig") -> None:
        """Print run start information. Never prints the token."""
        print("\nARTIFACT DOWNLOAD")
        print(f"API: {config.api_base_url}")
        print(f"Project: {config.project_id}")
        print(f"Destination: {config.destination_dir}")
        filters = [f"stage={config.stage_filter}"]
        if config.ref_filter:
            filters.append(f"ref={config.ref_filter}")
        if config.tag_filter:
            filters.append(f"tag={config.tag_filter}")
        print(f"Filters: {', '.join(filters)}")
        print()

    def print_request(self, url: str) -> None:
        """Trace an outgoing API request."""
        print(f"GET {url}")

    def print_build_selected(self, build: "BuildRecord") -> None:
        """Print a summary of the build whose artifact will be installed."""
        print(f"\nLatest build [{build.id}]")
        print(f"- ref: {build.ref}")
        print(f"- stage: {build.stage}")
        print(f"- at: {build.created_at.isoformat() if build.created_at else 'unknown'}")
        if build.runner is not None:
            print(f"- runner: {build.runner.id} -> {build.runner.description or ''}")
        else:
            print("- runner: unknown")
        print(f"- triggered by: {build.user.username if build.user else 'unknown'}")

    def print_download_complete(self, path: Path, size: int) -> None:
        """Print where the archive landed and how big it is."""
        print(f"Downloaded {size} bytes to {path}")

    def print_artifact_installed(self, destination: Path, entries: int) -> None:
        """Print installation result."""
        print(f"Artifact extracted in: {destination} ({entries} entries)")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console

# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from buildartifacts.errors import ArtifactError
from buildartifacts.git_facts.git import project_root as detect_project_root
from buildartifacts.model import DEFAULT_API_URL, DEFAULT_PAGE_SIZE, DEFAULT_STAGE, PipelineConfig
from buildartifacts.pipeline import run as run_pipeline
from buildartifacts.ui.console import Console, set_console, get_console


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """buildartifacts: install the latest GitLab CI artifact into a project."""
    # Initialize console with debug flag
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--token", envvar="GITLAB_TOKEN", required=True, help="GitLab authentication token [env: GITLAB_TOKEN]")
@click.option("--project", envvar="GITLAB_PROJECT", required=True, help="Project identifier on which artifact was built [env: GITLAB_PROJECT]")
@click.option("--api", envvar="GITLAB_API", default=DEFAULT_API_URL, show_default=True, help="GitLab root URL [env: GITLAB_API]")
@click.option("--in", "destination", default=".", show_default=True, type=click.Path(file_okay=False, path_type=Path), help="Path where the artifact must be extracted")
@click.option("--ref", default=None, help="Repository ref the build was ran on")
@click.option("--tag", default=None, help="Repository tag the build was ran on")
@click.option("--stage", default=DEFAULT_STAGE, show_default=True, help="Build stage from which artifact is downloaded")
@click.option("--perpage", default=DEFAULT_PAGE_SIZE, show_default=True, type=click.IntRange(1, 100), help="Number of jobs to retrieve from API")
@click.option("--timeout", default=None, type=click.FloatRange(min=0, min_open=True), help="Overall time budget in seconds")
@click.option("--storage-dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Where the temporary archive is written (defaults to the system temp dir)")
@click.option("--project-root", default=None, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Project checkout root (defaults to the git top-level)")
@click.pass_context
def download(ctx, token, project, api, destination, ref, tag, stage, perpage, timeout, storage_dir, project_root):
    """Retrieve a GitLab artifact and install it in the project."""
    console = get_console()

    if project_root is None:
        project_root = detect_project_root()
        console.print_debug(f"Using project root: {project_root}")

    config = PipelineConfig(
        api_base_url=api,
        auth_token=token,
        project_id=project,
        destination_dir=destination,
        project_root=project_root,
        stage_filter=stage,
        ref_filter=ref,
        tag_filter=tag,
        page_size=perpage,
        storage_dir=storage_dir,
        timeout=timeout,
    )

    try:
        console.print_run_started(config)
        run_pipeline(config)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except ArtifactError as e:
        console.print_error(e.title, str(e), details=e.details(), suggestion=e.suggestion)
        if ctx.obj.get("debug", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()

"""CLI interface for the Luarmor updater."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from . import actions
from .client import LuarmorClient, RateLimiter
from .config import ActionInputs, AppConfig, load_config
from .errors import InputResolutionError, UpdaterError
from .logging_utils import setup_logging
from .resolve import get_script_version, resolve_project
from .updater import run

app = typer.Typer(
    name="luarmor-updater",
    help="Upload a script to Luarmor and confirm the new version",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

ApiKeyOption = Annotated[
    str | None,
    typer.Option("--api-key", help="Luarmor API key (default: INPUT_API-KEY)"),
]
ScriptIdOption = Annotated[
    str | None,
    typer.Option("--script-id", "-s", help="Script to update (default: INPUT_SCRIPT-ID)"),
]
ProjectIdOption = Annotated[
    str | None,
    typer.Option(
        "--project-id",
        "-p",
        help="Owning project; looked up from the script when empty (default: INPUT_PROJECT-ID)",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose/debug output"),
]


def get_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from file and environment."""
    try:
        return load_config(config_path)
    except Exception as e:
        actions.set_failed(f"Error loading config: {e}")
        raise typer.Exit(1) from None


def run_async(coro: Any) -> Any:
    """Run an async function synchronously."""
    return asyncio.run(coro)


def make_client(config: AppConfig) -> LuarmorClient:
    """Build an API client from configuration."""
    return LuarmorClient(
        base_url=config.luarmor.base_url,
        timeout=config.luarmor.timeout,
        rate_limiter=RateLimiter(max_retries=config.luarmor.rate_limit_retries),
    )


def prepare(
    config: AppConfig,
    verbose: bool,
    **overrides: str | None,
) -> ActionInputs:
    """Merge command-line values over workflow inputs and set up logging."""
    inputs = config.inputs.with_overrides(**overrides)
    setup_logging(verbose, token=inputs.api_key)
    actions.mask(inputs.api_key)
    return inputs


@app.command()
def upload(
    api_key: ApiKeyOption = None,
    script_id: ScriptIdOption = None,
    project_id: ProjectIdOption = None,
    file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Script source to upload (default: INPUT_FILE)"),
    ] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Upload a script, polling for the new version after a gateway timeout."""
    config = get_config(config_path)
    inputs = prepare(
        config,
        verbose,
        api_key=api_key,
        script_id=script_id,
        project_id=project_id,
        file=file,
    )

    async def _upload():
        async with make_client(config) as client:
            return await run(inputs, client, config.luarmor)

    try:
        result = run_async(_upload())
    except UpdaterError as e:
        actions.set_failed(str(e))
        raise typer.Exit(1) from None
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        actions.set_failed(str(e) or type(e).__name__)
        raise typer.Exit(1) from None

    actions.set_output("project-id", result.project_id)
    if result.new_version is not None:
        actions.set_output("version", result.new_version)

    if result.polled:
        console.print(
            f"[green]Script {result.script_id} updated: "
            f"version {result.previous_version} -> {result.new_version}[/green]"
        )
    else:
        console.print(
            f"[green]Script {result.script_id} updated "
            f"(HTTP {result.status_code})[/green]"
        )


@app.command()
def resolve(
    api_key: ApiKeyOption = None,
    script_id: ScriptIdOption = None,
    project_id: ProjectIdOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show which project owns a script and its current version, without uploading."""
    config = get_config(config_path)
    inputs = prepare(
        config, verbose, api_key=api_key, script_id=script_id, project_id=project_id
    )

    async def _resolve():
        async with make_client(config) as client:
            details = await client.get_key_details(inputs.api_key)
        project = resolve_project(details, inputs.script_id, inputs.project_id)
        if project is None:
            raise InputResolutionError("could not find project. invalid projectId or scriptId?")
        script = get_script_version(project, inputs.script_id)
        if script is None:
            raise InputResolutionError(
                f"script {inputs.script_id} is not part of project {project.id}"
            )
        return project, script

    try:
        inputs.require("api_key", "script_id")
        project, script = run_async(_resolve())
    except UpdaterError as e:
        actions.set_failed(str(e))
        raise typer.Exit(1) from None

    table = Table(title="Script")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Project", project.id)
    table.add_row("Project Name", project.name or "[dim]Not set[/dim]")
    table.add_row("Script", script.script_id)
    table.add_row("Script Name", script.script_name or "[dim]Not set[/dim]")
    table.add_row("Version", str(script.version))
    console.print(table)


if __name__ == "__main__":
    app()

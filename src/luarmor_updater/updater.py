"""Upload a script and, after a gateway timeout, wait for its new version."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from .client import LuarmorClient, Script, api_message
from .config import ActionInputs, LuarmorConfig
from .errors import ApiError, InputResolutionError, PollTimeoutError
from .resolve import get_script_version, resolve_project

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

POLL_INTERVAL = 5.0


@dataclass
class UpdateResult:
    """Outcome of one update run."""

    project_id: str
    script_id: str
    previous_version: Any
    status_code: int
    new_version: Any = None
    polled: bool = False


async def poll_version_number(
    client: LuarmorClient,
    api_key: str,
    script_id: str,
    current_version: Any,
    project_id: str | None = None,
    interval: float = POLL_INTERVAL,
    max_polls: int | None = None,
    sleep: Sleep = asyncio.sleep,
) -> Script:
    """
    Re-fetch key details until the script's version differs from ``current_version``.

    There is no upper bound unless ``max_polls`` is given; with the default
    this only returns once the new version shows up.

    Args:
        client: API client
        api_key: Luarmor API key
        script_id: Script being waited on
        current_version: Version marker captured before the upload
        project_id: Owning project, if already known
        interval: Seconds to wait between fetches
        max_polls: Optional limit on the number of fetches
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        The script entry carrying the new version

    Raises:
        InputResolutionError: If the script is no longer listed
        PollTimeoutError: If ``max_polls`` fetches saw no change
    """
    polls = 0
    while True:
        polls += 1
        details = await client.get_key_details(api_key)
        project = resolve_project(details, script_id, project_id)
        script = get_script_version(project, script_id) if project else None
        if script is None:
            raise InputResolutionError(
                f"script {script_id} disappeared while waiting for its new version"
            )

        if script.version != current_version:
            logger.info("New script version: %s", script.version)
            return script

        if max_polls is not None and polls >= max_polls:
            raise PollTimeoutError(
                f"script version still {current_version} after {polls} checks"
            )

        logger.info(
            "Script version still %s, checking again in %.0fs", current_version, interval
        )
        await sleep(interval)


async def run(
    inputs: ActionInputs,
    client: LuarmorClient,
    config: LuarmorConfig | None = None,
    sleep: Sleep = asyncio.sleep,
) -> UpdateResult:
    """
    Resolve the target script, upload the file and confirm the result.

    Resolution failures abort before anything is uploaded. A 504 from the
    upload is not an error: the new version is polled for instead.
    """
    config = config or LuarmorConfig()
    inputs.require()

    details = await client.get_key_details(inputs.api_key)

    project = resolve_project(details, inputs.script_id, inputs.project_id)
    if project is None:
        raise InputResolutionError("could not find project. invalid projectId or scriptId?")

    script = get_script_version(project, inputs.script_id)
    if script is None:
        raise InputResolutionError(
            f"could not get current script version: script {inputs.script_id} "
            f"is not part of project {project.id}"
        )
    logger.info(
        "Resolved script %s in project %s at version %s",
        inputs.script_id,
        project.id,
        script.version,
    )

    response = await client.update_script(
        inputs.script_id, project.id, inputs.file, inputs.api_key
    )
    result = UpdateResult(
        project_id=project.id,
        script_id=inputs.script_id,
        previous_version=script.version,
        status_code=response.status_code,
    )

    if response.status_code == 504:
        logger.warning("Upload hit a gateway timeout, waiting for the new version to appear")
        new_script = await poll_version_number(
            client,
            inputs.api_key,
            inputs.script_id,
            script.version,
            project_id=project.id,
            interval=config.poll_interval,
            max_polls=config.max_polls,
            sleep=sleep,
        )
        result.new_version = new_script.version
        result.polled = True
        return result

    if response.status_code >= 400:
        raise ApiError(
            f"script upload failed: HTTP {response.status_code}",
            response.status_code,
            api_message(response),
        )

    logger.info("Script %s updated (HTTP %d)", inputs.script_id, response.status_code)
    return result

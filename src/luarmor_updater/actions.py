"""GitHub Actions workflow commands."""

import os
import uuid


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str = "") -> None:
    """Print a ``::command::message`` line for the runner to pick up."""
    print(f"::{command}::{_escape_data(message)}", flush=True)


def set_failed(message: str) -> None:
    """Report the run as failed. The caller is responsible for exiting non-zero."""
    issue_command("error", message)


def mask(value: str) -> None:
    """Ask the runner to redact *value* from every later log line."""
    if value:
        issue_command("add-mask", value)


def set_output(name: str, value: object) -> bool:
    """
    Publish a step output through ``$GITHUB_OUTPUT``.

    Returns:
        False when not running inside a workflow (nothing written)
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        return False

    text = "" if value is None else str(value)
    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in text or "\r" in text:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
        else:
            f.write(f"{name}={text}\n")
    return True

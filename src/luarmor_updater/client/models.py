"""Pydantic models for Luarmor API entities."""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class Script(BaseModel):
    """A script inside a project.

    ``version`` is an opaque marker; it is only ever compared for equality.
    """

    script_id: str
    version: Any = Field(
        default=None,
        validation_alias=AliasChoices("script_version", "version"),
    )
    script_name: str | None = None

    model_config = {"populate_by_name": True}


class Project(BaseModel):
    """A Luarmor project and the scripts it owns."""

    id: str
    name: str | None = None
    scripts: list[Script] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class KeyDetails(BaseModel):
    """Response of ``GET /keys/{api_key}/details``."""

    projects: list[Project] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

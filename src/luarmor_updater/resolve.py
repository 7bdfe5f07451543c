"""Locate a project and script inside a key details snapshot."""

from .client.models import KeyDetails, Project, Script


def resolve_project(
    details: KeyDetails, script_id: str, project_id: str | None = None
) -> Project | None:
    """
    Find the project that owns a script.

    An explicit ``project_id`` wins and is matched exactly, whatever scripts
    the project holds. Otherwise the first project listing ``script_id`` is
    returned.

    Returns:
        The matching project, or None when nothing matches
    """
    if project_id:
        return next((p for p in details.projects if p.id == project_id), None)

    return next(
        (p for p in details.projects if any(s.script_id == script_id for s in p.scripts)),
        None,
    )


def get_script_version(project: Project, script_id: str) -> Script | None:
    """Return the script entry for ``script_id`` in ``project``, if any."""
    return next((s for s in project.scripts if s.script_id == script_id), None)

"""Public asset naming.

These functions define the user-visible release asset names, so they are
total: every input either yields a name or raises :class:`NamingError`
under an explicit policy.

Given artifact ``wasabi-windows-x64`` holding ``wasabi.exe``, the asset is
named ``wasabi-windows-x64.exe``: the artifact identifier takes the place of
the bare project name and the original suffix is kept unchanged.
"""

from pathlib import PurePath

from releasebox.config.models import MissingProjectNamePolicy
from releasebox.core.errors import NamingError
from releasebox.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)

SEPARATOR = "/"


def _require_project_name(project_name: str) -> None:
    if not project_name:
        raise NamingError("Project name must not be empty", {"project_name": ""})


def base_name(file_name: str) -> str:
    """Return the last component of a path given as a string.

    Both ``/`` and ``\\`` are treated as separators so Windows-style names
    collapse the same way on every host.
    """
    return PurePath(file_name.replace("\\", SEPARATOR)).name


def split_artifact_identifier(identifier: str, project_name: str) -> str | None:
    """Return the qualifier of ``<project>-<qualifier>``, or None.

    >>> split_artifact_identifier("wasabi-windows-x64", "wasabi")
    'windows-x64'
    """
    _require_project_name(project_name)
    prefix = f"{project_name}-"
    if identifier.startswith(prefix) and len(identifier) > len(prefix):
        return identifier[len(prefix) :]
    return None


def extract_suffix(file_name: str, project_name: str) -> str | None:
    """Return what follows the project name in a file's base name.

    The match is the rightmost occurrence of the project name preceded by
    a path separator, so only a base name *starting* with the project name
    matches. The suffix may be empty. Returns None when there is no match.

    >>> extract_suffix("wasabi.exe", "wasabi")
    '.exe'
    >>> extract_suffix("wasabi", "wasabi")
    ''
    >>> extract_suffix("other.exe", "wasabi") is None
    True
    """
    _require_project_name(project_name)
    anchored = SEPARATOR + base_name(file_name)
    marker = SEPARATOR + project_name
    index = anchored.rfind(marker)
    if index < 0:
        return None
    return anchored[index + len(marker) :]


def destination_name(
    identifier: str,
    file_name: str,
    project_name: str,
    policy: MissingProjectNamePolicy | str = MissingProjectNamePolicy.FALLBACK,
) -> str:
    """Compute the flat destination name for one artifact file.

    Args:
        identifier: Artifact identifier, ``<project>-<qualifier>``
        file_name: Original file path or base name
        project_name: Project name expected at the start of the base name
        policy: What to do when the base name does not start with the
            project name

    Returns:
        ``identifier + suffix`` on a match. Under ``FALLBACK`` with no
        match, ``identifier + base name`` with no separator.

    Raises:
        NamingError: If the project name is empty, or there is no match
            under ``REJECT``
    """
    policy = MissingProjectNamePolicy(policy)
    suffix = extract_suffix(file_name, project_name)
    if suffix is not None:
        return f"{identifier}{suffix}"

    original = base_name(file_name)
    if policy == MissingProjectNamePolicy.REJECT:
        raise NamingError(
            f"File '{original}' in artifact '{identifier}' does not start with "
            f"project name '{project_name}'",
            {
                "artifact": identifier,
                "file": original,
                "project_name": project_name,
            },
        )

    name = f"{identifier}{original}"
    logger.warning(
        "project_name_missing_fallback",
        artifact=identifier,
        file=original,
        project_name=project_name,
        destination=name,
    )
    return name


__all__ = [
    "base_name",
    "destination_name",
    "extract_suffix",
    "split_artifact_identifier",
]

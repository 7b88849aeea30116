"""Version lookup for safecond."""

import tomllib
from importlib import metadata
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Return the installed distribution version.

    A source checkout that was never installed falls back to the
    ``[project]`` table of its pyproject.toml.
    """
    try:
        return metadata.version("safecond")
    except metadata.PackageNotFoundError:
        pass
    if _PYPROJECT.is_file():
        with open(_PYPROJECT, "rb") as f:
            project = tomllib.load(f).get("project", {})
        return str(project.get("version", "0.0.0"))
    return "0.0.0"

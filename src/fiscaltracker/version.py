"""Report the installed fiscal-tracker version."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

DISTRIBUTION_NAME: Final = "fiscal-tracker"
PYPROJECT_FILE: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the distribution version, read from ``pyproject.toml`` in a checkout."""

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return _version_from_pyproject(PYPROJECT_FILE)


def _version_from_pyproject(path: Path) -> str:
    if not path.exists():
        raise RuntimeError(f"Project metadata not found at {path}")

    in_project_table = False
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if line.startswith("["):
            in_project_table = line == "[project]"
            continue
        key, separator, value = line.partition("=")
        if in_project_table and separator and key.strip() == "version":
            version = value.strip().strip("\"'")
            if version:
                return version

    raise RuntimeError(f"No [project] version declared in {path}")


__all__ = ["get_project_version"]

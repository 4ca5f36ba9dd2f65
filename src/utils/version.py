"""Project version helpers."""

from pathlib import Path

import tomlkit

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def get_pyproject_version(root: Path = PROJECT_ROOT) -> str:
    """Read the project version from `pyproject.toml`.

    Args:
        root (Path): Directory that contains `pyproject.toml`

    Returns:
        str: The declared version, or "unknown" when it cannot be read
    """
    toml_file = root / "pyproject.toml"
    if not toml_file.is_file():
        return "unknown"

    with toml_file.open("r", encoding="utf-8") as fh:
        toml_data = tomlkit.load(fh)

    project = toml_data.get("project", {})
    version = project.get("version")
    return str(version) if version else "unknown"


def get_git_hash(root: Path = PROJECT_ROOT) -> str:
    """Resolve the commit hash of the checked-out branch without invoking git.

    Returns:
        str: The commit hash, or "unknown" outside a branch checkout
    """
    git_dir = root / ".git"
    head_file = git_dir / "HEAD"
    if not head_file.is_file():
        return "unknown"

    head = head_file.read_text(encoding="utf-8").strip()
    if not head.startswith("ref: refs/heads/"):
        return "unknown"

    ref_file = git_dir / head.removeprefix("ref: ")
    if not ref_file.is_file():
        return "unknown"
    return ref_file.read_text(encoding="utf-8").strip()

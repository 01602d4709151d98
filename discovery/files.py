import glob
from pathlib import Path

from discovery.project import load_project_config
from utils.globbing import expand_braces
from utils.logging import get_logger

logger = get_logger("discovery.files")


def _expand(project_root: Path, pattern: str) -> list[str]:
    # Hidden files and folders (the state dir included) are never matched
    matches: set[str] = set()
    for expanded in expand_braces(pattern):
        matches.update(glob.glob(expanded, root_dir=project_root, recursive=True))
    return sorted(Path(m).as_posix() for m in matches)


def discover(
    project_root: str | Path,
    patterns: list[str],
    ignore: list[str] | None = None,
) -> list[str]:
    """Enumerate project files matching bundle patterns.

    Args:
        project_root: Directory the patterns are relative to.
        patterns: Glob patterns (``**`` recursive).
        ignore: Glob patterns whose matches are dropped.

    Returns:
        Distinct relative POSIX paths of regular files, in pattern order
        then sorted within each pattern.
    """
    project_root = Path(project_root)

    ignored: set[str] = set()
    for pattern in ignore or []:
        ignored.update(_expand(project_root, pattern))

    found: dict[str, None] = {}
    for pattern in patterns:
        for rel in _expand(project_root, pattern):
            if rel in ignored or rel in found:
                continue
            if (project_root / rel).is_file():
                found[rel] = None

    logger.debug(
        f"Discovered {len(found)} files",
        extra={"context": {"patterns": patterns, "ignored": len(ignored)}},
    )
    return list(found)


def discover_project_files(project_root: str | Path) -> list[str]:
    """Discover files using the project's own bundle configuration."""
    config = load_project_config(project_root)
    return discover(project_root, config.asset_bundle_patterns, config.ignore_patterns)

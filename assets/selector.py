import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import PurePosixPath

from utils.globbing import expand_braces

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg"}


@dataclass
class AssetSelection:
    """Image candidates split into the full set and the user-filtered subset.

    ``all_candidates`` is always complete: stale state cleanup has to see
    every image that still exists, not just the ones the user asked for.
    """

    all_candidates: list[str] = field(default_factory=list)
    selected_candidates: list[str] = field(default_factory=list)

    def working_set(self, filtered: bool) -> list[str]:
        return self.selected_candidates if filtered else self.all_candidates


def is_image(path: str) -> bool:
    return PurePosixPath(path).suffix.lower() in SUPPORTED_EXTENSIONS


def filter_images(paths: list[str]) -> list[str]:
    """Keep PNGs and JPEGs, preserving order."""
    return [p for p in paths if is_image(p)]


@lru_cache(maxsize=128)
def _compile_glob(pattern: str) -> re.Pattern:
    """Translate a glob into a regex over POSIX relative paths.

    ``*`` and ``?`` stay within one path segment; ``**`` spans segments.
    """
    pattern = pattern.removeprefix("./")
    out = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif c == "*":
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            start = i + 2 if pattern[i + 1 : i + 2] == "!" else i + 1
            end = pattern.find("]", start)
            if end == -1:
                out.append(re.escape(c))
                i += 1
                continue
            body = pattern[i + 1 : end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return re.compile("".join(out) + r"\Z")


def glob_match(path: str, pattern: str) -> bool:
    """Match a relative POSIX path against a glob pattern (``{a,b}`` allowed)."""
    path = path.removeprefix("./")
    return any(_compile_glob(p).match(path) for p in expand_braces(pattern))


def select_assets(
    files: list[str],
    include: str | None = None,
    exclude: str | None = None,
) -> AssetSelection:
    """Split discovered files into all image candidates and the selected subset.

    Args:
        files: Relative paths from discovery, in discovery order.
        include: Only select files matching this glob (if given).
        exclude: Drop files matching this glob from the selection (if given).

    Returns:
        AssetSelection with both order-preserving lists.
    """
    all_candidates = filter_images(files)

    selected = all_candidates
    if include:
        selected = [p for p in selected if glob_match(p, include)]
    if exclude:
        selected = [p for p in selected if not glob_match(p, exclude)]

    return AssetSelection(all_candidates=all_candidates, selected_candidates=list(selected))

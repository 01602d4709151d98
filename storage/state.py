import json
import os
import tempfile
from pathlib import Path

from config import settings
from exceptions import StateCorruptError
from schemas import OptimizationState
from utils.logging import get_logger

logger = get_logger("storage.state")


def state_path(project_root: str | Path) -> Path:
    """Location of the shared asset state file for a project."""
    return Path(project_root) / settings.state_dir_name / settings.state_file_name


def is_initialized(project_root: str | Path) -> bool:
    return state_path(project_root).is_file()


class StateStore:
    """Persisted mapping of content hash -> finalized.

    Lifecycle per run: ``load`` once, mutate the returned dict in memory,
    ``commit`` once. No locking; two concurrent runs against the same
    project race on the final commit.
    """

    def __init__(self, project_root: str | Path):
        self.project_root = Path(project_root)
        self.path = state_path(self.project_root)
        self.created = False

    def is_initialized(self) -> bool:
        return self.path.is_file()

    def load(self) -> OptimizationState:
        """Read the state, creating the directory and an empty file if absent.

        Raises:
            OSError: If the directory or file cannot be created.
            StateCorruptError: If the existing file is malformed.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if not self.path.exists():
            relative = self.path.relative_to(self.project_root).as_posix()
            logger.info(
                f"Creating {relative} in the project's root directory. "
                "This file is autogenerated and should not be edited directly. "
                "Commit it to version control so asset state is shared between collaborators.",
                extra={"context": {"state_file": str(self.path)}},
            )
            self.commit({})
            self.created = True
            return {}

        return self.read()

    def read(self) -> OptimizationState:
        """Parse the state file without creating anything.

        Raises:
            OSError: If the file cannot be read.
            StateCorruptError: If the content is not a hash -> true object.
        """
        raw = self.path.read_bytes()
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StateCorruptError(
                f"{self.path} is not valid JSON: {e}",
                path=str(self.path),
            ) from e

        if not isinstance(data, dict):
            raise StateCorruptError(
                f"{self.path} must contain a JSON object, got {type(data).__name__}",
                path=str(self.path),
            )

        bad = [key for key, value in data.items() if value is not True]
        if bad:
            raise StateCorruptError(
                f"{self.path} has {len(bad)} entries not set to true",
                path=str(self.path),
                entries=bad[:10],
            )

        return dict(data)

    def commit(self, state: OptimizationState) -> None:
        """Atomically overwrite the state file with the full mapping."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(state, indent=2, sort_keys=True) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            f"Wrote {len(state)} entries to {self.path}",
            extra={"context": {"entries": len(state)}},
        )

import shutil
from pathlib import Path


def backup_path(path: str | Path) -> Path:
    """Insert ``.orig`` before the extension: ``logo.png`` -> ``logo.orig.png``."""
    path = Path(path)
    return path.with_name(f"{path.stem}.orig{path.suffix}")


def replace_with_backup(original: str | Path, replacement: str | Path) -> Path:
    """Swap ``replacement`` into ``original``'s place, keeping the old file aside.

    Step 1 moves the original to its backup path, step 2 moves the
    replacement in. If step 2 fails the original is moved back before
    the error propagates. Deleting or keeping the backup is the caller's
    call; a backup found on disk without ``save`` means a replace was
    interrupted.

    Returns:
        Path of the backup file.
    """
    original = Path(original)
    backup = backup_path(original)

    shutil.move(original, backup)
    try:
        shutil.move(replacement, original)
    except BaseException:
        shutil.move(backup, original)
        raise

    return backup

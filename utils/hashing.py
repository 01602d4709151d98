import hashlib
from pathlib import Path

CHUNK_SIZE = 1024 * 1024


def calculate_hash(path: str | Path) -> str:
    """SHA-256 hex digest of a file's raw bytes.

    Identity is purely content based: two paths holding the same bytes
    hash the same.

    Raises:
        OSError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()

from abc import ABC, abstractmethod
from pathlib import Path


class BaseCompressor(ABC):
    """Abstract base for compression backends.

    The engine treats a compressor as opaque: it hands over an input
    path, an output directory and a quality, and reads back a file.
    """

    name: str
    install_hint: str | None = None

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backend can run on this machine."""

    @abstractmethod
    async def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        """Compress one image.

        Args:
            input_path: Image to compress. Must not be modified.
            output_dir: Existing directory to write the result into.
            quality: Encoder quality, passed through unvalidated.

        Returns:
            Path of the compressed file inside output_dir.
        """

    def _output_path(self, input_path: Path, output_dir: Path) -> Path:
        return Path(output_dir) / Path(input_path).name

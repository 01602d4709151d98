import io
from pathlib import Path

import pytest
from PIL import Image

from optimizers.base import BaseCompressor


class FakeCompressor(BaseCompressor):
    """In-process compressor that rewrites bytes with ``transform``.

    Default transform keeps the first 60% of the input.
    """

    name = "fake"
    install_hint = "pip install fake-compressor"

    def __init__(self, transform=None, available=True):
        self.transform = transform or (lambda data: data[: len(data) * 6 // 10])
        self.available = available
        self.calls: list[tuple[Path, int]] = []

    def is_available(self) -> bool:
        if callable(self.available):
            return self.available()
        return self.available

    async def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        self.calls.append((Path(input_path), quality))
        output_path = self._output_path(input_path, output_dir)
        output_path.write_bytes(self.transform(Path(input_path).read_bytes()))
        return output_path


def asset_bytes(seed: int, size: int = 100_000) -> bytes:
    """Deterministic, seed-specific payload of exactly ``size`` bytes."""
    block = bytes((seed * 31 + i) % 256 for i in range(256))
    return (block * (size // 256 + 1))[:size]


def write_asset(root: Path, relative: str, data: bytes) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


@pytest.fixture
def project(tmp_path):
    """Empty project directory."""
    root = tmp_path / "app"
    root.mkdir()
    return root


@pytest.fixture
def compressor():
    return FakeCompressor()


@pytest.fixture
def png_bytes():
    img = Image.new("RGB", (64, 64), color=(100, 150, 200))
    buf = io.BytesIO()
    img.save(buf, format="PNG", compress_level=0)
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes():
    img = Image.effect_noise((128, 128), 64).convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=95)
    return buf.getvalue()

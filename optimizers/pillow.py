import asyncio
import io
from pathlib import Path

from exceptions import CompressionError
from optimizers.base import BaseCompressor

JPEG_EXTENSIONS = {".jpg", ".jpeg"}
PNG_EXTENSIONS = {".png"}


class PillowCompressor(BaseCompressor):
    """In-process backend: Pillow (JPEG) + pyoxipng (PNG).

    - JPEG: re-encode at ``quality`` with optimized Huffman tables,
      keeping ICC profile, EXIF and progressive scan.
    - PNG: lossless oxipng; quality < 70 uses the slower level 4,
      otherwise level 2.
    """

    name = "pillow"
    install_hint = "pip install Pillow pyoxipng"

    def is_available(self) -> bool:
        try:
            import oxipng  # noqa: F401
            from PIL import Image  # noqa: F401
        except ImportError:
            return False
        return True

    async def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        input_path = Path(input_path)
        data = await asyncio.to_thread(input_path.read_bytes)
        suffix = input_path.suffix.lower()

        if suffix in JPEG_EXTENSIONS:
            optimized = await asyncio.to_thread(self._encode_jpeg, data, quality)
        elif suffix in PNG_EXTENSIONS:
            optimized = await asyncio.to_thread(self._run_oxipng, data, quality)
        else:
            raise CompressionError(
                f"Unsupported file type: {input_path.name}",
                input=str(input_path),
            )

        output_path = self._output_path(input_path, output_dir)
        await asyncio.to_thread(output_path.write_bytes, optimized)
        return output_path

    def _encode_jpeg(self, data: bytes, quality: int) -> bytes:
        from PIL import Image

        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except OSError as e:
            raise CompressionError(f"Cannot decode JPEG: {e}")

        save_kwargs: dict = {
            "format": "JPEG",
            "quality": quality,
            "optimize": True,
        }
        if img.info.get("progressive") or img.info.get("progression"):
            save_kwargs["progressive"] = True
        if img.info.get("icc_profile"):
            save_kwargs["icc_profile"] = img.info["icc_profile"]
        if img.info.get("exif"):
            save_kwargs["exif"] = img.info["exif"]

        if img.mode not in ("RGB", "L", "CMYK"):
            img = img.convert("RGB")

        buf = io.BytesIO()
        try:
            img.save(buf, **save_kwargs)
        except ValueError as e:
            raise CompressionError(f"Pillow rejected quality={quality}: {e}", quality=quality)
        return buf.getvalue()

    def _run_oxipng(self, data: bytes, quality: int) -> bytes:
        """Lossless PNG recompression via pyoxipng (no subprocess)."""
        import oxipng

        level = 4 if quality < 70 else 2
        try:
            return oxipng.optimize_from_memory(data, level=level)
        except oxipng.PngError as e:
            raise CompressionError(f"oxipng failed: {e}", tool="oxipng")

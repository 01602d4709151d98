from config import settings
from exceptions import ConfigurationError
from optimizers.base import BaseCompressor
from optimizers.pillow import PillowCompressor
from optimizers.sharp import SharpCompressor

# Compressor registry: name -> factory
COMPRESSORS = {
    SharpCompressor.name: SharpCompressor,
    PillowCompressor.name: PillowCompressor,
}


def get_compressor(name: str | None = None) -> BaseCompressor:
    """Build the configured compression backend.

    Raises:
        ConfigurationError: If the name is not registered.
    """
    name = (name or settings.compressor).lower()
    try:
        factory = COMPRESSORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown compressor '{name}'",
            compressor=name,
            available=sorted(COMPRESSORS),
        )
    return factory()

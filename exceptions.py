class AssetOptimizeError(Exception):
    """Base exception for all asset optimization errors."""

    error_code: str = "internal_error"

    def __init__(self, message: str, **kwargs):
        self.message = message
        self.details = kwargs
        super().__init__(message)


class StateCorruptError(AssetOptimizeError):
    """Persisted asset state is malformed and cannot be trusted."""

    error_code = "state_corrupt"


class CompressorUnavailableError(AssetOptimizeError):
    """No optimization backend is installed."""

    error_code = "compressor_unavailable"


class CompressionError(AssetOptimizeError):
    """Compressor failed (tool crash, missing output, etc.)."""

    error_code = "compression_failed"


class ToolTimeoutError(AssetOptimizeError):
    """Compression tool exceeded the configured timeout."""

    error_code = "tool_timeout"


class ProjectConfigError(AssetOptimizeError):
    """Project app.json could not be parsed."""

    error_code = "project_config_invalid"


class ConfigurationError(AssetOptimizeError):
    """Invalid tool configuration (unknown compressor, etc.)."""

    error_code = "bad_configuration"

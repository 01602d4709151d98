from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tool configuration loaded from environment variables."""

    # --- Optimization Defaults ---
    default_quality: int = 80
    compressor: str = "sharp"  # "sharp" (sharp-cli subprocess) or "pillow" (in-process)
    sharp_binary: str = "sharp"
    tool_timeout_seconds: int = 0  # 0 = no timeout, a hung tool blocks the run

    # --- State File ---
    state_dir_name: str = ".expo-shared"
    state_file_name: str = "assets.json"

    # --- Logging ---
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()

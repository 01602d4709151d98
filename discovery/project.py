import json
from pathlib import Path

from pydantic import BaseModel, Field

from exceptions import ProjectConfigError

APP_CONFIG_FILE = "app.json"
DEFAULT_BUNDLE_PATTERNS = ["**/*"]
DEFAULT_WEB_OUTPUT = "web-build"


class ProjectConfig(BaseModel):
    """The parts of a project's app.json that decide which files are assets."""

    asset_bundle_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_BUNDLE_PATTERNS))
    web_output_path: str = DEFAULT_WEB_OUTPUT

    @property
    def ignore_patterns(self) -> list[str]:
        """Native project folders and web build output are never bundled."""
        return [
            "**/node_modules/**",
            "**/ios/**",
            "**/android/**",
            f"**/{self.web_output_path.strip('/')}/**",
        ]


def load_project_config(project_root: str | Path) -> ProjectConfig:
    """Read asset bundle settings from ``app.json``.

    Accepts both ``{"expo": {...}}`` and a bare config object. A missing
    file yields the defaults (bundle everything, ``web-build`` output).

    Raises:
        ProjectConfigError: If app.json exists but is not a JSON object.
    """
    path = Path(project_root) / APP_CONFIG_FILE
    if not path.is_file():
        return ProjectConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ProjectConfigError(f"Invalid {APP_CONFIG_FILE}: {e}", path=str(path))

    if not isinstance(data, dict):
        raise ProjectConfigError(f"{APP_CONFIG_FILE} must contain a JSON object", path=str(path))

    exp = data.get("expo", data)
    if not isinstance(exp, dict):
        raise ProjectConfigError(f"'expo' in {APP_CONFIG_FILE} must be an object", path=str(path))

    config = ProjectConfig()

    patterns = exp.get("assetBundlePatterns")
    if patterns:
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise ProjectConfigError(
                "assetBundlePatterns must be a list of glob strings",
                path=str(path),
            )
        config.asset_bundle_patterns = patterns

    web = exp.get("web")
    if isinstance(web, dict):
        output = (web.get("build") or {}).get("output")
        if isinstance(output, str) and output:
            config.web_output_path = output

    return config

"""Runtime settings and app-wide constants."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "TagTodo"

TODO_STORAGE_KEY = "tagtodo"
THEME_STORAGE_KEY = "tagtodo-theme"

MAX_TODO_TEXT_LENGTH = 280
MAX_TAGS_PER_TODO = 5
DEFAULT_TAGS = ["Work", "Personal", "Urgent", "Shopping"]

STORAGE_BACKENDS = ("toml", "sqlite")
DEFAULT_DATA_DIR = Path.home() / ".tagtodo"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.toml"

# env var -> settings field
_ENV_OVERRIDES = {
    "TAGTODO_STORAGE": "storage_backend",
    "TAGTODO_DATA_DIR": "data_dir",
    "TAGTODO_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    pass


@dataclass
class Settings:
    storage_backend: str = "toml"
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    default_tags: list[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    dark_mode: bool | None = None


def _expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


def load_settings(path: Path | None = None, environ=None) -> Settings:
    """Build Settings from the ``[tagtodo]`` table of a TOML file.

    A missing file just means defaults. Environment variables win over
    the file. Raises ConfigError on unreadable or invalid values.
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    environ = os.environ if environ is None else environ

    raw: dict = {}
    if path.exists():
        try:
            with path.open("rb") as f:
                raw = tomllib.load(f).get("tagtodo", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"[tagtodo] in {path} must be a table")
        logger.debug(f"Loaded config from {path}")

    for var, name in _ENV_OVERRIDES.items():
        if environ.get(var):
            raw[name] = environ[var]

    settings = Settings()

    backend = str(raw.get("storage_backend", settings.storage_backend)).lower()
    if backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"Unknown storage backend '{backend}'. Available: {list(STORAGE_BACKENDS)}"
        )
    settings.storage_backend = backend

    if "data_dir" in raw:
        if not isinstance(raw["data_dir"], str):
            raise ConfigError("data_dir must be a string")
        settings.data_dir = _expand_path(raw["data_dir"])

    level = str(raw.get("log_level", settings.log_level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level '{level}'")
    settings.log_level = level

    if "default_tags" in raw:
        tags = raw["default_tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ConfigError("default_tags must be a list of strings")
        settings.default_tags = [t.strip() for t in tags if t.strip()]

    if "dark_mode" in raw:
        if not isinstance(raw["dark_mode"], bool):
            raise ConfigError("dark_mode must be true or false")
        settings.dark_mode = raw["dark_mode"]

    return settings

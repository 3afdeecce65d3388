"""Config store: settings from env with an optional config file that is master over env."""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON config file into a flat dict. Returns {} when missing or unreadable."""
    if not path.exists():
        logger.debug("Config file not found: %s (optional; using env/defaults)", path)
        return {}
    try:
        raw = path.read_text()
    except OSError as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return {}

    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        elif suffix == ".json":
            data = json.loads(raw)
        else:
            logger.warning("Config file must be .yaml, .yml, or .json: %s", path)
            return {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file must contain a mapping; got %s", type(data).__name__)
        return {}
    return data

class ConfigStore:
    """
    Builds Settings from env and an optional YAML/JSON config file.
    Precedence: config file > env > defaults. Loaded once at startup.
    """

    def __init__(self, settings_cls: type, config_file_path: Optional[str] = None):
        self._settings_cls = settings_cls
        self._file_path: Optional[Path] = (
            Path(config_file_path).expanduser().resolve() if config_file_path else None
        )
        self._current: Optional[Any] = None
        self._lock = threading.RLock()

    def _build(self) -> Any:
        env_dict = self._settings_cls().model_dump()
        file_dict = _read_config_file(self._file_path) if self._file_path else {}
        return self._settings_cls(**{**env_dict, **file_dict})

    def load_initial(self) -> None:
        with self._lock:
            self._current = self._build()
            if self._file_path and self._file_path.exists():
                logger.info("Loaded config file (master over env): %s", self._file_path)

    def get_settings(self) -> Any:
        with self._lock:
            if self._current is None:
                self.load_initial()
            return self._current

"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_logging_config`: the `logging` section of a config file
 - `load_task_config`: validated configuration for a given task, with defaults applied
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


TASK_DEFAULTS: Dict[str, ConfigDict] = {
    "http": {
        "port": 8080,
        "directory": ".",
        "host": "0.0.0.0",
        "backlog": 128,
        "workers": 1,
        "read_timeout": None,
    },
    "size": {
        "directory": ".",
        "top": 20,
    },
    "count": {
        "directory": ".",
        "extensions": [],
    },
}

FIELD_ALIASES = {
    "dir": "directory",
    "root": "directory",
    "exts": "extensions",
}

PATH_FIELDS = {"directory"}
INTEGER_FIELDS = {"port", "backlog", "workers", "top"}
FLOAT_FIELDS = {"read_timeout"}
STRING_LIST_FIELDS = {"extensions"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

PORT_RANGE = (0, 65535)


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    return data


def read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    return data if data is not None else {}


def default_config_path() -> Optional[Path]:
    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    root = load_config(config_path)
    return _extract_logging_settings(root, config_path)


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """
    Load and validate the settings for ``task``.

    Unknown tasks and unsupported keys raise ``ValueError``. Keys missing from
    the file are filled from ``TASK_DEFAULTS``. The logging section is
    returned under ``__logging__``.
    """
    if task not in TASK_DEFAULTS:
        raise ValueError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_DEFAULTS))}")

    resolved_path = Path(config_path).expanduser() if config_path else None
    root_config = dict(load_config(resolved_path))
    config = _apply_aliases(_extract_task_config(root_config, task, resolved_path))

    allowed_keys = set(TASK_DEFAULTS[task])
    unexpected = [key for key in config if key not in allowed_keys]
    if unexpected:
        raise ValueError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': "
            f"{', '.join(sorted(unexpected))}"
        )

    normalized: ConfigDict = deepcopy(TASK_DEFAULTS[task])
    for key, value in config.items():
        if key in PATH_FIELDS:
            normalized[key] = _normalize_path(value, key, resolved_path)
        elif key in INTEGER_FIELDS:
            normalized[key] = _coerce_int(value, key, resolved_path)
        elif key in FLOAT_FIELDS:
            normalized[key] = _coerce_optional_float(value, key, resolved_path)
        elif key in STRING_LIST_FIELDS:
            normalized[key] = _normalize_str_list(value)
        else:
            normalized[key] = value

    if "port" in normalized:
        validate_port(normalized["port"])

    normalized["__task__"] = task
    normalized["__config_path__"] = str(resolved_path) if resolved_path else None
    normalized["__logging__"] = _extract_logging_settings(root_config, resolved_path)
    return normalized


def validate_port(port: int) -> int:
    low, high = PORT_RANGE
    if isinstance(port, bool) or not isinstance(port, int) or not low <= port <= high:
        raise ValueError(f"Port must be an integer between {low} and {high}, got {port!r}")
    return port


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _normalize_path(value: Any, field: str, config_path: Optional[Path]) -> str:
    if value is None or value == "":
        raise ValueError(f"Configuration '{config_path}' field '{field}' expects a path, received {value!r}")
    return str(Path(str(value)).expanduser())


def _coerce_int(value: Any, field: str, config_path: Optional[Path]) -> int:
    if isinstance(value, bool):
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        )
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        ) from exc


def _coerce_optional_float(value: Any, field: str, config_path: Optional[Path]) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Configuration '{config_path}' field '{field}' must be a number.")
    try:
        result = float(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Configuration '{config_path}' field '{field}' must be a number.") from exc
    if result <= 0:
        raise ValueError(f"Configuration '{config_path}' field '{field}' must be positive.")
    return result


def _normalize_str_list(value: Any) -> List[str]:
    if value is None:
        return []

    items: Iterable[Any]
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]
    return [str(item).strip() for item in items if str(item).strip()]


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Optional[Path]) -> ConfigDict:
    tasks_section = root.get(TASKS_SECTION_KEY) or {}
    if not isinstance(tasks_section, Mapping):
        raise ValueError(f"'{TASKS_SECTION_KEY}' section must be a mapping in {config_path}")
    task_payload = tasks_section.get(task) or {}
    if not isinstance(task_payload, Mapping):
        raise ValueError(f"Task '{task}' entry must be a mapping in {config_path}")
    return dict(task_payload)


def _extract_logging_settings(root: Mapping[str, Any], config_path: str | Path | None) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{LOGGING_SECTION_KEY}' section must be a mapping in {config_path}")

    invalid = [key for key in section if key not in LOGGING_ALLOWED_KEYS]
    if invalid:
        invalid_keys = ", ".join(sorted(invalid))
        raise ValueError(
            f"'{LOGGING_SECTION_KEY}' contains unsupported keys in {config_path}: {invalid_keys}"
        )
    return dict(section)

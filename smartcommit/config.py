"""Settings from defaults, a YAML config file, the environment and flags."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

DEFAULT_HOST = "127.0.0.1:11434"
DEFAULT_MODEL = "llama3.1:8b"
DEFAULT_TEMPERATURE = 0.3

ENV_PREFIX = "GH_SMART_COMMIT"
CONFIG_NAME = "gh-smart-commit"

_EXPLICIT_SUFFIXES = (".yaml", ".yml", ".json")
_SEARCH_SUFFIXES = (".json", ".yaml", ".yml", "")

# Setting name -> dotted key used in the config file and environment.
_KEYS = {
    "ollama_host": "ollama.host",
    "model": "ollama.model",
    "temperature": "ollama.temperature",
    "verbose": "verbose",
}

_MISSING = object()


def normalize_host(host: str) -> str:
    """Prefix ``host`` with ``http://`` unless it already starts with ``http``."""
    if host.startswith("http"):
        return host
    return "http://" + host


@dataclass
class Settings:
    """Options shared by every command."""

    ollama_host: str = DEFAULT_HOST
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    verbose: bool = False
    config_file_used: str | None = None

    @property
    def ollama_url(self) -> str:
        """The Ollama server address as a URL."""
        return normalize_host(self.ollama_host)


def _as_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip() in ("1", "t", "T", "TRUE", "true", "True")


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "ollama_host": _as_str,
    "model": _as_str,
    "temperature": _as_float,
    "verbose": _as_bool,
}


def _env_name(key: str) -> str:
    return f"{ENV_PREFIX}_{key.upper()}"


def _lookup(data: Mapping[Any, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping):
            return _MISSING
        node = next((v for k, v in node.items() if str(k).lower() == part), _MISSING)
        if node is _MISSING:
            return _MISSING
    return _MISSING if node is None else node


def _candidates(config_file: str | os.PathLike[str] | None) -> list[Path]:
    if config_file:
        return [Path(config_file)]
    base = Path.home() / ".config"
    return [base / f"{CONFIG_NAME}{suffix}" for suffix in _SEARCH_SUFFIXES]


def _read_config(config_file: str | os.PathLike[str] | None) -> tuple[str | None, dict]:
    for path in _candidates(config_file):
        if not path.is_file():
            continue
        if config_file and path.suffix.lower() not in _EXPLICIT_SUFFIXES:
            return None, {}
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return None, {}
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return None, {}
        return str(path), data
    return None, {}


def load_settings(
    config_file: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Resolve settings: overrides, then environment, then config file, then defaults.

    ``overrides`` maps setting names (``ollama_host``, ``model``, ``temperature``,
    ``verbose``) to values given on the command line; None values are ignored.
    Without ``config_file`` the file is looked up as ``~/.config/gh-smart-commit.yaml``.
    """
    given = {name: value for name, value in (overrides or {}).items() if value is not None}
    unknown = sorted(set(given) - set(_KEYS))
    if unknown:
        raise ValueError(f"unknown setting: {', '.join(unknown)}")

    used, data = _read_config(config_file)

    values: dict[str, Any] = {}
    for name, key in _KEYS.items():
        if name in given:
            raw = given[name]
        elif os.environ.get(_env_name(key)):
            raw = os.environ[_env_name(key)]
        else:
            raw = _lookup(data, key)
            if raw is _MISSING:
                continue
        values[name] = _CONVERTERS[name](raw)

    return Settings(**values, config_file_used=used)
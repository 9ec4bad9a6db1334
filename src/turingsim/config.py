import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Self

CONFIG_FILE = "turingsim.toml"
PYPROJECT = "pyproject.toml"

CONFIG_SCHEMA: dict[str, type] = {
    "max_steps": int,
    "one": str,
    "trace_window": int,
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    max_steps: int = 1_000_000
    one: str = "1"
    trace_window: int = 20

    def __post_init__(self) -> None:
        if self.max_steps < 0:
            raise ConfigError(f"'max_steps' must not be negative, got {self.max_steps}")
        if self.trace_window < 1:
            raise ConfigError(f"'trace_window' must be at least 1, got {self.trace_window}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        for key, value in data.items():
            if key not in CONFIG_SCHEMA:
                raise ConfigError(f"Unknown configuration key '{key}'")
            # bool is an int subclass but never a valid setting
            if type(value) is not CONFIG_SCHEMA[key]:
                raise ConfigError(
                    f"Configuration key '{key}' expected {CONFIG_SCHEMA[key].__name__}, got {type(value).__name__}"
                )
        return replace(cls(), **data)


def find_config(folder: Path) -> Path | None:
    for name in (CONFIG_FILE, PYPROJECT):
        if (candidate := folder / name).is_file():
            if name == PYPROJECT and "turingsim" not in read_toml(candidate).get("tool", {}):
                continue
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def load_settings(path: Path | None = None) -> Settings:
    """Reads settings from `path`, or from `turingsim.toml` / `[tool.turingsim]` in the working directory.

    Missing files fall back to the defaults, explicitly given files have to exist.
    """
    if path is None:
        path = find_config(Path.cwd())
        if path is None:
            return Settings()
    elif not path.is_file():
        raise ConfigError(f"Configuration file not found at: {path}")

    data = read_toml(path)
    if path.name == PYPROJECT:
        data = data.get("tool", {}).get("turingsim", {})
    return Settings.from_mapping(data)

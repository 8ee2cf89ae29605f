"""Shared config-loading utilities for seeding systems."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Metadata shared by every named system definition."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


ConfigT = TypeVar("ConfigT", bound=BaseSystemConfig)


def read_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file, prefixing decode errors with its path."""
    try:
        with file_path.open("rb") as file:
            return tomllib.load(file)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"{file_path}: invalid TOML ({exc})") from exc


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], ConfigT],
    *,
    duplicate_name_label: str = "seeding",
) -> list[ConfigT]:
    """Parse every ``*.toml`` file in ``config_dir``; system names must be unique."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems = [parser(read_toml(file_path), file_path) for file_path in config_files]

    duplicates = sorted(name for name, count in Counter(s.name for s in systems).items() if count > 1)
    if duplicates:
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_dir}: {duplicates}"
        )

    return systems


def parse_system_metadata(raw: dict[str, Any], file_path: Path) -> tuple[str, str | None]:
    """Read the required ``[system].name`` and optional description."""
    system_raw = raw.get("system", {})
    if not isinstance(system_raw, dict):
        raise ValueError(f"{file_path}: [system] must be a table")

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description = system_raw.get("description")
    return name, None if description is None else str(description)


__all__ = ["BaseSystemConfig", "load_system_configs", "parse_system_metadata", "read_toml"]

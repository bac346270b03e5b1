#!/usr/bin/env python3
"""
Application Settings
====================
Loader for configs/app.yaml plus path helpers for user-supplied files
(language definitions and word lists).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

from .generators.phonemes import LANGUAGES_DIR

PACKAGE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_DIR / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    if not APP_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Missing app config: {APP_CONFIG_PATH}")
    data = yaml.safe_load(APP_CONFIG_PATH.read_text(encoding="utf-8"))
    return data or {}


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path (e.g. 'cli.count')."""
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def data_dir() -> Path:
    """Base directory for relative user paths: paths.data_dir, else the working directory."""
    configured = get_setting('paths.data_dir')
    if configured:
        return Path(os.path.expanduser(str(configured))).resolve()
    return Path.cwd()


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Resolve a path string against `base` or data_dir() (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if not path.is_absolute():
        path = ((base or data_dir()) / path).resolve()
    return path


def resolve_language_file(value: str) -> Path:
    """
    Locate a language definition file.

    Tries the path as given (see resolve_path), then the bundled languages
    directory, with and without an added .yaml suffix.

    Raises:
        ValueError: If no candidate exists
    """
    path = resolve_path(value)
    if path.exists():
        return path

    name = Path(str(value)).name
    for candidate in (LANGUAGES_DIR / name, LANGUAGES_DIR / f"{name}.yaml"):
        if candidate.exists():
            return candidate
    raise ValueError(f"Language file not found: {path}")


__all__ = [
    "load_app_config",
    "get_setting",
    "data_dir",
    "resolve_path",
    "resolve_language_file",
    "PACKAGE_DIR",
    "APP_CONFIG_PATH",
]

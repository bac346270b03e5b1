#!/usr/bin/env python3
"""
Phoneme Configuration Loader
============================
Loads the IPA classification table, engine defaults and ready-made
language definitions from YAML files.

Usage:
    from wordkit.generators.phonemes import (
        load_ipa_table, load_generator_defaults, load_language, list_languages
    )

    defaults = load_generator_defaults()
    elvish = load_language('elvish')
"""

import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from functools import lru_cache


# =============================================================================
# Configuration Path
# =============================================================================

PHONEMES_DIR = Path(__file__).parent
LANGUAGES_DIR = PHONEMES_DIR / 'languages'


# =============================================================================
# Data Classes for Typed Access
# =============================================================================

@dataclass
class IPATable:
    """Raw rows of the IPA chart."""
    vowels: List[List[Any]]
    consonants: List[List[Any]]
    raw: Dict[str, Any]


@dataclass
class GeneratorDefaults:
    """Container for engine defaults (generator.yaml)."""
    generator: Dict[str, Any]
    costs: Dict[str, float]
    word_spec: Dict[str, Any]
    low_budget: Dict[str, Any]
    analysis: Dict[str, Any]
    raw: Dict[str, Any]

    def get(self, section: str, key: str) -> Any:
        """Get a required value, raising if the key is missing."""
        return _require_cfg(self.raw.get(section) or {}, key, f"generator.{section}")


@dataclass
class LanguageConfig:
    """A language definition loaded from languages/<name>.yaml."""
    name: str
    description: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def consonants(self) -> List[str]:
        return list(self.raw.get('consonants') or [])

    @property
    def vowels(self) -> List[str]:
        return list(self.raw.get('vowels') or [])

    @property
    def templates(self) -> List[Dict[str, Any]]:
        return list(self.raw.get('templates') or [])


# =============================================================================
# Loader Functions
# =============================================================================

def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file, raising if it does not exist."""
    if not path.exists():
        raise FileNotFoundError(f"Phoneme config not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _require_cfg(cfg: Dict[str, Any], key: str, context: str):
    value = cfg.get(key)
    if value is None:
        raise ValueError(f"{context}.{key} must be set")
    return value


@lru_cache(maxsize=1)
def load_ipa_table() -> IPATable:
    """Load the IPA phoneme classification table."""
    raw = _load_yaml(PHONEMES_DIR / 'ipa.yaml')

    return IPATable(
        vowels=raw.get('vowels', []),
        consonants=raw.get('consonants', []),
        raw=raw,
    )


@lru_cache(maxsize=1)
def load_generator_defaults() -> GeneratorDefaults:
    """Load engine defaults (costs, probabilities, fallback)."""
    raw = _load_yaml(PHONEMES_DIR / 'generator.yaml')

    return GeneratorDefaults(
        generator=raw.get('generator', {}),
        costs=raw.get('costs', {}),
        word_spec=raw.get('word_spec', {}),
        low_budget=raw.get('low_budget', {}),
        analysis=raw.get('analysis', {}),
        raw=raw,
    )


@lru_cache(maxsize=16)
def load_language(name: str) -> LanguageConfig:
    """
    Load a language definition by name.

    Raises
    ------
    ValueError
        If no languages/<name>.yaml exists.
    """
    path = LANGUAGES_DIR / f'{name.lower()}.yaml'
    if not path.exists():
        available = ', '.join(list_languages())
        raise ValueError(f"Unknown language '{name}'. Available languages: {available}")
    return load_language_file(path)


def load_language_file(path) -> LanguageConfig:
    """Load a language definition from an arbitrary YAML path."""
    raw = _load_yaml(Path(path))
    return LanguageConfig(
        name=raw.get('name') or Path(path).stem,
        description=raw.get('description', ''),
        raw=raw,
    )


def list_languages() -> List[str]:
    """Names of the bundled language definitions."""
    return sorted(p.stem for p in LANGUAGES_DIR.glob('*.yaml'))


def get_all_languages() -> Dict[str, LanguageConfig]:
    """Load every bundled language definition."""
    return {name: load_language(name) for name in list_languages()}


def get_language(name: str) -> Optional[LanguageConfig]:
    """Load a bundled language, or None when it does not exist."""
    if name.lower() not in list_languages():
        return None
    return load_language(name)


def reload_configs():
    """Clear cached configs and reload from disk."""
    load_ipa_table.cache_clear()
    load_generator_defaults.cache_clear()
    load_language.cache_clear()


__all__ = [
    'PHONEMES_DIR',
    'LANGUAGES_DIR',
    'IPATable',
    'GeneratorDefaults',
    'LanguageConfig',
    'load_ipa_table',
    'load_generator_defaults',
    'load_language',
    'load_language_file',
    'list_languages',
    'get_all_languages',
    'get_language',
    'reload_configs',
]

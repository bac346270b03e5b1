#!/usr/bin/env python3
"""
Word Generators
===============
Phoneme inventories, syllable templates and the word generation engine:
- PhonemeSet: consonants, vowels, custom groups, positions, weights
- SyllableTemplate: one syllable pattern with constraints and clusters
- WordSpec: syllable count policy and word-level constraints
- Generator: assembles, transforms and validates whole words
- GeneratorBuilder: fluent construction, also from YAML language files
"""

from .entropy import (
    TrueRandom,
    get_rng,
    set_seed,
)
from .ipa import (
    Phoneme,
    Vowel,
    Consonant,
)
from .romanization import RomanizationMap
from .phoneme_set import PhonemeSet
from .syllable_template import SyllableTemplate
from .word_spec import (
    SyllableCountSpec,
    WordSpec,
)
from .vowel_harmony import VowelHarmony
from .generator import (
    Generator,
    GenerationMode,
    ComplexityCosts,
)
from .builder import GeneratorBuilder
from .phonemes import (
    list_languages,
    load_language,
    reload_configs,
)

__all__ = [
    # Randomness
    'TrueRandom',
    'get_rng',
    'set_seed',
    # Phonemes
    'Phoneme',
    'Vowel',
    'Consonant',
    'RomanizationMap',
    'PhonemeSet',
    # Structure
    'SyllableTemplate',
    'SyllableCountSpec',
    'WordSpec',
    'VowelHarmony',
    # Engine
    'Generator',
    'GenerationMode',
    'ComplexityCosts',
    'GeneratorBuilder',
    # Configs
    'list_languages',
    'load_language',
    'reload_configs',
]

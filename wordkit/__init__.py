#!/usr/bin/env python3
"""
WordKit - Conlang Word Generator & Corpus Analyzer
==================================================

Procedural generation of pronounceable words for constructed languages
from a phoneme inventory, syllable templates and phonological
constraints, plus corpus analysis that turns example words into
generator settings.

Quick Start
-----------
    from wordkit import GeneratorBuilder, SyllableCountSpec

    generator = (GeneratorBuilder.create()
                 .with_phonemes(['t', 'n', 'k', 'r'], ['a', 'e', 'i', 'o'])
                 .with_syllable_patterns(['CV', 'CVC'])
                 .with_syllable_count(SyllableCountSpec.range(2, 3))
                 .with_complexity_budget(6)
                 .build())
    words = generator.generate_batch(10)

    # Bundled languages
    elvish = GeneratorBuilder.load_language('elvish').build()

    # Learn from examples
    analysis = Analyzer(RomanizationMap()).analyze(['tanaka', 'kirino'])

Modules
-------
    wordkit.generators - Phoneme sets, templates, word specs, the generator
    wordkit.analyzer   - Corpus analysis (WordAnalyzer, Analyzer)
    wordkit.analysis   - Analysis result types
    wordkit.settings   - Application settings (configs/app.yaml)

CLI Usage
---------
    python -m wordkit generate -l elvish -n 10
    python -m wordkit sequence -l basic --syllables 2
    python -m wordkit analyze thalion nimrodel -l elvish
    python -m wordkit languages
"""

__version__ = "0.1.0"
__author__ = "WordKit"

# =============================================================================
# Submodule Imports
# =============================================================================

from . import generators

# =============================================================================
# Generator Imports
# =============================================================================

from .generators import (
    TrueRandom,
    get_rng,
    set_seed,
    Phoneme,
    Vowel,
    Consonant,
    RomanizationMap,
    PhonemeSet,
    SyllableTemplate,
    SyllableCountSpec,
    WordSpec,
    VowelHarmony,
    Generator,
    GenerationMode,
    ComplexityCosts,
    GeneratorBuilder,
    list_languages,
    load_language,
    reload_configs,
)

# =============================================================================
# Analysis Imports
# =============================================================================

from .analysis import WordAnalysis, Analysis
from .analyzer import WordAnalyzer, Analyzer

__all__ = [
    '__version__',
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
    # Analysis
    'WordAnalysis',
    'Analysis',
    'WordAnalyzer',
    'Analyzer',
    # Configs
    'list_languages',
    'load_language',
    'reload_configs',
]

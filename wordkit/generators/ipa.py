#!/usr/bin/env python3
"""
IPA Phoneme Tables
==================
Phoneme value types and a generic vowel/consonant classifier backed by
the IPA chart in phonemes/ipa.yaml.

Usage:
    from wordkit.generators import ipa

    ipa.is_vowel('ɛ')        # True
    ipa.lookup('θ').romanization   # 'th'
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Union

from .phonemes import load_ipa_table


VOWEL = 'vowel'
CONSONANT = 'consonant'


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Phoneme:
    """A phoneme symbol with optional romanization, weight and positions."""
    symbol: str
    kind: str
    romanization: Optional[str] = None
    weight: Optional[float] = None
    positions: List[str] = field(default_factory=list)

    def __eq__(self, other):
        if isinstance(other, Phoneme):
            return self.symbol == other.symbol
        if isinstance(other, str):
            return self.symbol == other
        return NotImplemented

    def __hash__(self):
        return hash(self.symbol)

    def __str__(self):
        return self.symbol

    @property
    def is_vowel(self) -> bool:
        return self.kind == VOWEL

    @property
    def is_consonant(self) -> bool:
        return self.kind == CONSONANT

    def romanized(self) -> str:
        return self.romanization or self.symbol


@dataclass(eq=False)
class Vowel(Phoneme):
    """Vowel with articulatory features."""
    kind: str = VOWEL
    height: str = ""
    backness: str = ""
    rounded: bool = False


@dataclass(eq=False)
class Consonant(Phoneme):
    """Consonant with articulatory features and flags."""
    kind: str = CONSONANT
    manner: str = ""
    place: str = ""
    voiced: bool = False
    flags: List[str] = field(default_factory=list)

    @property
    def is_nasal(self) -> bool:
        return 'nasal' in self.flags

    @property
    def is_lateral(self) -> bool:
        return 'lateral' in self.flags

    @property
    def is_affricate(self) -> bool:
        return 'affricate' in self.flags


PhonemeLike = Union[str, Phoneme]


def symbol_of(value: PhonemeLike) -> str:
    """Normalize a string or Phoneme to its symbol."""
    if isinstance(value, Phoneme):
        return value.symbol
    return str(value)


# =============================================================================
# Chart Access
# =============================================================================

@lru_cache(maxsize=1)
def load_phonemes() -> Dict[str, Phoneme]:
    """Build Vowel/Consonant objects for every row of the IPA chart."""
    table = load_ipa_table()
    phonemes: Dict[str, Phoneme] = {}

    for row in table.vowels:
        symbol, roman, height, backness, rounded = row[:5]
        phonemes[str(symbol)] = Vowel(
            symbol=str(symbol),
            romanization=str(roman),
            height=height,
            backness=backness,
            rounded=bool(rounded),
        )

    for row in table.consonants:
        symbol, roman, manner, place, voiced = row[:5]
        phonemes[str(symbol)] = Consonant(
            symbol=str(symbol),
            romanization=str(roman),
            manner=manner,
            place=place,
            voiced=bool(voiced),
            flags=[str(f) for f in row[5:]],
        )

    return phonemes


def lookup(symbol: str) -> Optional[Phoneme]:
    """Chart entry for a symbol, or None."""
    return load_phonemes().get(symbol)


def is_vowel(symbol: str) -> bool:
    phoneme = lookup(symbol)
    return phoneme is not None and phoneme.is_vowel


def is_consonant(symbol: str) -> bool:
    phoneme = lookup(symbol)
    return phoneme is not None and phoneme.is_consonant


def vowels() -> List[Vowel]:
    return [p for p in load_phonemes().values() if p.is_vowel]


def consonants() -> List[Consonant]:
    return [p for p in load_phonemes().values() if p.is_consonant]


def default_romanization() -> Dict[str, str]:
    """Symbol -> romanization for chart entries whose spelling differs."""
    return {
        symbol: p.romanization
        for symbol, p in load_phonemes().items()
        if p.romanization and p.romanization != symbol
    }


__all__ = [
    'VOWEL',
    'CONSONANT',
    'Phoneme',
    'Vowel',
    'Consonant',
    'PhonemeLike',
    'symbol_of',
    'load_phonemes',
    'lookup',
    'is_vowel',
    'is_consonant',
    'vowels',
    'consonants',
    'default_romanization',
]

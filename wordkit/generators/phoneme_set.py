#!/usr/bin/env python3
"""
Phoneme Set
===========
The phoneme inventory of a language: consonants, vowels, custom pattern
groups, positional restrictions and sampling weights.

Features:
- Position rules ("initial", "medial", "final") restricting which
  phonemes may appear in a syllable position
- Custom single-character groups usable in syllable patterns
  (e.g. F for fricatives), optionally vowel-like
- Weighted sampling with an optional contextual (n-gram) overlay

Usage:
    ps = PhonemeSet(['p', 't', 'k'], ['a', 'i'])
    ps.add_weight('a', 3.0)
    ps.sample_phoneme('vowel')
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .entropy import get_rng
from . import ipa
from .ipa import PhonemeLike, symbol_of

logger = logging.getLogger(__name__)

VOWEL = ipa.VOWEL
CONSONANT = ipa.CONSONANT
POSITIONS = ('initial', 'medial', 'final')
RESERVED_SYMBOLS = ('C', 'V')

Transitions = Dict[str, Dict[str, float]]


class PhonemeSet:
    """Consonant/vowel inventory with groups, position rules and weights."""

    def __init__(self, consonants: Iterable[PhonemeLike] = (), vowels: Iterable[PhonemeLike] = ()):
        self.consonants: List[str] = []
        self.vowels: List[str] = []
        self.custom_groups: Dict[str, List[str]] = {}
        self.position_rules: Dict[str, Set[str]] = {}
        self.weights: Dict[str, float] = {}

        for phoneme in consonants:
            self.add_phoneme(phoneme, CONSONANT)
        for phoneme in vowels:
            self.add_phoneme(phoneme, VOWEL)

    def __repr__(self):
        return (f"PhonemeSet(consonants={self.consonants!r}, vowels={self.vowels!r}, "
                f"groups={sorted(self.custom_groups)!r})")

    # =========================================================================
    # Construction
    # =========================================================================

    def add_phoneme(self, phoneme: PhonemeLike, kind: Optional[str] = None,
                    positions: Sequence[str] = ()) -> None:
        """
        Add a phoneme to the inventory.

        Args:
            phoneme: Symbol string or ipa.Phoneme (its kind, weight and
                positions are used when not given explicitly)
            kind: 'consonant' or 'vowel'
            positions: Position tags the phoneme is allowed in
        """
        symbol = symbol_of(phoneme)
        if isinstance(phoneme, ipa.Phoneme):
            kind = kind or phoneme.kind
            positions = positions or phoneme.positions
            if phoneme.weight is not None:
                self.add_weight(symbol, phoneme.weight)

        if kind == CONSONANT:
            if symbol in self.vowels:
                raise ValueError(f"Phoneme '{symbol}' is already declared as a vowel")
            if symbol not in self.consonants:
                self.consonants.append(symbol)
        elif kind == VOWEL:
            if symbol in self.consonants:
                raise ValueError(f"Phoneme '{symbol}' is already declared as a consonant")
            if symbol not in self.vowels:
                self.vowels.append(symbol)
        else:
            raise ValueError(f"Unknown phoneme kind '{kind}' for '{symbol}'")

        self._add_positions([symbol], positions)

    def add_custom_group(self, symbol: str, phonemes: Iterable[PhonemeLike],
                         positions: Sequence[str] = ()) -> None:
        """Register a single-character pattern symbol standing for a phoneme group."""
        if symbol in RESERVED_SYMBOLS:
            raise ValueError(f"Symbol '{symbol}' is reserved for consonants and vowels")
        if len(symbol) != 1:
            raise ValueError(f"Custom group symbol must be a single character, got '{symbol}'")

        members = []
        for phoneme in phonemes:
            member = symbol_of(phoneme)
            if member not in members:
                members.append(member)
        if not members:
            raise ValueError(f"Custom group '{symbol}' has no phonemes")

        self.custom_groups[symbol] = members
        self._add_positions(members, positions)

    def add_position_rule(self, position: str, phonemes: Iterable[PhonemeLike]) -> None:
        """Allow the given phonemes in a position (restricts their type there)."""
        self._add_positions([symbol_of(p) for p in phonemes], [position])

    def _add_positions(self, symbols: List[str], positions: Sequence[str]) -> None:
        for position in positions:
            if position not in POSITIONS:
                raise ValueError(f"Unknown position '{position}' (expected one of {POSITIONS})")
            self.position_rules.setdefault(position, set()).update(symbols)

    def add_weight(self, phoneme: PhonemeLike, weight: float) -> None:
        if weight < 0:
            raise ValueError(f"Weight for '{symbol_of(phoneme)}' must be non-negative")
        self.weights[symbol_of(phoneme)] = float(weight)

    def with_weights(self, weights: Dict[str, float]) -> 'PhonemeSet':
        """Copy sharing the inventory but carrying a different weight table."""
        overlay = PhonemeSet.__new__(PhonemeSet)
        overlay.consonants = self.consonants
        overlay.vowels = self.vowels
        overlay.custom_groups = self.custom_groups
        overlay.position_rules = self.position_rules
        overlay.weights = dict(weights)
        return overlay

    # =========================================================================
    # Queries
    # =========================================================================

    def _filter(self, candidates: List[str], position: Optional[str]) -> List[str]:
        if position is None:
            return list(candidates)
        allowed = self.position_rules.get(position)
        # A rule only restricts the candidates it mentions at least one of
        if not allowed or not allowed.intersection(candidates):
            return list(candidates)
        return [c for c in candidates if c in allowed]

    def get_consonants(self, position: Optional[str] = None) -> List[str]:
        return self._filter(self.consonants, position)

    def get_vowels(self, position: Optional[str] = None) -> List[str]:
        return self._filter(self.vowels, position)

    def has_custom_group(self, symbol: str) -> bool:
        return symbol in self.custom_groups

    def get_custom_group(self, symbol: str, position: Optional[str] = None) -> List[str]:
        if symbol not in self.custom_groups:
            raise ValueError(f"Custom group '{symbol}' is not defined")
        return self._filter(self.custom_groups[symbol], position)

    def is_vowel(self, symbol: str) -> bool:
        """Local vowels first; symbols outside the inventory use the IPA chart."""
        if symbol in self.vowels:
            return True
        if symbol in self.consonants:
            return False
        return ipa.is_vowel(symbol)

    def is_consonant(self, symbol: str) -> bool:
        return not self.is_vowel(symbol)

    def is_vowel_like_group(self, symbol: str) -> bool:
        members = self.custom_groups.get(symbol)
        if not members:
            return False
        return all(self.is_vowel(m) for m in members)

    def is_vowel_like(self, pattern_symbol: str) -> bool:
        """True for 'V' and vowel-like custom groups."""
        return pattern_symbol == 'V' or self.is_vowel_like_group(pattern_symbol)

    def candidates(self, kind: str, position: Optional[str] = None) -> List[str]:
        """Candidates for a kind: 'consonant', 'vowel' or a custom group symbol."""
        if kind in (CONSONANT, 'C'):
            return self.get_consonants(position)
        if kind in (VOWEL, 'V'):
            return self.get_vowels(position)
        return self.get_custom_group(kind, position)

    def drawable(self, kind: str, position: Optional[str] = None,
                 exclude: Iterable[str] = ()) -> List[str]:
        """
        Candidates sample_phoneme() can actually return.

        Once any candidate of the pool carries a registered weight, only
        weighted candidates are drawable. Exclusion is applied afterwards,
        so it never re-admits unweighted candidates.
        """
        pool = self.candidates(kind, position)
        if any(c in self.weights for c in pool):
            pool = [c for c in pool if c in self.weights]
        excluded = set(exclude)
        return [c for c in pool if c not in excluded]

    # =========================================================================
    # Sampling
    # =========================================================================

    def sample_phoneme(self, kind: str, position: Optional[str] = None,
                       context: Optional[str] = None,
                       transitions: Optional[Transitions] = None,
                       transition_factor: float = 1.0,
                       positional_frequencies: Optional[Transitions] = None,
                       exclude: Iterable[str] = ()) -> str:
        """
        Sample one phoneme.

        Args:
            kind: 'consonant', 'vowel' or a custom group symbol
            position: Syllable position tag for position rules
            context: Previous phoneme in the word (None at word start)
            transitions: context -> {next phoneme -> frequency}
            transition_factor: Scale applied to transition frequencies
            positional_frequencies: phoneme -> {position -> frequency},
                used for the word-initial phoneme
            exclude: Phonemes that must not be returned

        Raises:
            ValueError: If no candidate is available
        """
        candidates = self.drawable(kind, position, exclude)
        if not candidates:
            raise ValueError(f"No candidates available for {kind} at position {position}")

        boosts = self._context_boosts(candidates, context, transitions,
                                      transition_factor, positional_frequencies)
        if boosts:
            weights = dict(self.weights)
            for candidate in candidates:
                base = self.weights.get(candidate, 1.0)
                weights[candidate] = base * (1.0 + boosts.get(candidate, 0.0))
            return self.with_weights(weights)._weighted_sample(candidates)

        return self._weighted_sample(candidates)

    def _context_boosts(self, candidates: List[str], context: Optional[str],
                        transitions: Optional[Transitions], factor: float,
                        positional_frequencies: Optional[Transitions]) -> Dict[str, float]:
        if context is not None and transitions:
            following = transitions.get(context) or {}
            return {c: following[c] * factor for c in candidates if following.get(c)}
        if context is None and positional_frequencies:
            return {
                c: positional_frequencies[c].get('initial', 0.0) * factor
                for c in candidates
                if c in positional_frequencies
            }
        return {}

    def _weighted_sample(self, candidates: List[str]) -> str:
        rng = get_rng()
        weighted = [(c, self.weights[c]) for c in candidates if c in self.weights]
        if not weighted:
            return rng.choice(candidates)
        # Only candidates with a registered weight take part in the draw
        if sum(w for _, w in weighted) <= 0:
            return rng.choice([c for c, _ in weighted])
        return rng.weighted_choice(weighted)


__all__ = ['PhonemeSet', 'POSITIONS', 'RESERVED_SYMBOLS', 'VOWEL', 'CONSONANT']

#!/usr/bin/env python3
"""
Syllable Template
=================
A syllable pattern such as "CV", "CCV" or "FVL" together with the rules
used to fill it from a PhonemeSet.

Pattern symbols:
    C   any consonant
    V   any vowel (may become a two-vowel hiatus)
    X   any custom group registered on the PhonemeSet

Patterns containing "CC" fill their onset and coda runs from explicit
cluster whitelists (romanized strings) when declared, else from distinct
consonants sampled directly.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .entropy import get_rng
from . import ipa
from .phoneme_set import PhonemeSet, CONSONANT, VOWEL, Transitions
from .romanization import RomanizationMap

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10


def collapse_pattern(pattern: str) -> str:
    """Collapse repeated symbols: CCV -> CV, CVCC -> CVC."""
    return re.sub(r'(.)\1+', r'\1', pattern)


@dataclass(frozen=True)
class SyllableTemplate:
    """Immutable syllable pattern with constraints and probabilities."""
    pattern: str
    constraints: Tuple[str, ...] = ()
    hiatus_probability: float = 0.0
    gemination_probability: float = 0.0
    vowel_lengthening_probability: float = 0.0
    allowed_clusters: Tuple[str, ...] = ()
    allowed_coda_clusters: Tuple[str, ...] = ()
    position_weights: Dict[str, float] = field(default_factory=dict, hash=False)
    probability: float = 1.0

    def __post_init__(self):
        if not self.pattern:
            raise ValueError("Syllable pattern cannot be empty")
        for name in ('hiatus_probability', 'gemination_probability',
                     'vowel_lengthening_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.probability < 0:
            raise ValueError(f"Template probability must be non-negative, got {self.probability}")
        object.__setattr__(self, 'constraints', tuple(self.constraints))
        object.__setattr__(self, 'allowed_clusters', tuple(self.allowed_clusters))
        object.__setattr__(self, 'allowed_coda_clusters', tuple(self.allowed_coda_clusters))
        object.__setattr__(self, 'position_weights', dict(self.position_weights))

    # =========================================================================
    # Structure
    # =========================================================================

    @property
    def has_cluster(self) -> bool:
        return 'CC' in self.pattern

    @property
    def has_complex_coda(self) -> bool:
        return self._trailing_consonants() >= 2

    @property
    def allows_hiatus(self) -> bool:
        return self.hiatus_probability > 0.0

    @property
    def simplified_pattern(self) -> str:
        return collapse_pattern(self.pattern)

    def simplified(self) -> 'SyllableTemplate':
        return replace(self, pattern=self.simplified_pattern)

    def weight_for(self, position: str) -> Optional[float]:
        return self.position_weights.get(position)

    def _leading_consonants(self) -> int:
        return len(self.pattern) - len(self.pattern.lstrip('C'))

    def _trailing_consonants(self) -> int:
        return len(self.pattern) - len(self.pattern.rstrip('C'))

    # =========================================================================
    # Generation
    # =========================================================================

    def generate(self, phoneme_set: PhonemeSet, position: str,
                 romanizer: Optional[RomanizationMap] = None,
                 hiatus_scale: float = 1.0,
                 context: Optional[str] = None,
                 transitions: Optional[Transitions] = None,
                 transition_factor: float = 1.0,
                 positional_frequencies: Optional[Transitions] = None) -> List[str]:
        """
        Generate one syllable.

        Args:
            phoneme_set: Inventory to sample from
            position: 'initial', 'medial' or 'final'
            romanizer: Decodes the romanized cluster whitelists
            hiatus_scale: Multiplier on hiatus_probability (escalation)
            context: Phoneme preceding this syllable in the word
            transitions, transition_factor, positional_frequencies:
                Optional contextual bias passed to the sampler

        Returns:
            List of phoneme symbols

        Raises:
            ValueError: On an unknown pattern symbol or empty candidate pool
        """
        for symbol in self.pattern:
            if symbol not in ('C', 'V') and not phoneme_set.has_custom_group(symbol):
                raise ValueError(f"Unknown pattern symbol '{symbol}' in '{self.pattern}'")

        sampler = _Sampler(phoneme_set, position, context, transitions,
                           transition_factor, positional_frequencies)

        for _ in range(MAX_ATTEMPTS):
            sampler.reset()
            syllable = self._attempt(sampler, romanizer, hiatus_scale)
            if syllable is not None and self.validate(syllable, romanizer, phoneme_set):
                return syllable

        logger.debug(f"Template '{self.pattern}' exhausted {MAX_ATTEMPTS} attempts, "
                     f"falling back to '{self.simplified_pattern}'")
        sampler.reset()
        fallback = self.simplified()
        syllable = fallback._attempt(sampler, romanizer, hiatus_scale)
        if syllable is None:
            # Only reachable when a single-consonant coda whitelist is unusable
            fallback = replace(fallback, allowed_coda_clusters=())
            syllable = fallback._attempt(sampler, romanizer, hiatus_scale)
        return syllable

    def _attempt(self, sampler: '_Sampler', romanizer: Optional[RomanizationMap],
                 hiatus_scale: float) -> Optional[List[str]]:
        pattern = self.pattern
        onset_len = self._leading_consonants()
        coda_len = self._trailing_consonants()
        if onset_len == len(pattern):
            coda_len = 0

        syllable: List[str] = []
        i = 0
        if self.has_cluster and onset_len >= 2:
            onset = self._fill_run(sampler, onset_len, self.allowed_clusters, romanizer)
            if onset is None:
                return None
            syllable.extend(onset)
            i = onset_len

        end = len(pattern) - coda_len
        while i < end:
            self._fill_symbol(sampler, pattern[i], hiatus_scale, syllable)
            i += 1

        if coda_len:
            if coda_len >= 2:
                coda = self._fill_run(sampler, coda_len, self.allowed_coda_clusters, romanizer)
            else:
                coda = self._fill_single_coda(sampler, romanizer)
            if coda is None:
                return None
            syllable.extend(coda)

        return syllable

    def _fill_symbol(self, sampler: '_Sampler', symbol: str, hiatus_scale: float,
                     syllable: List[str]) -> None:
        if symbol == 'C':
            syllable.append(sampler.sample(CONSONANT))
            return

        kind = VOWEL if symbol == 'V' else symbol
        first = sampler.sample(kind)
        syllable.append(first)

        vowel_like = symbol == 'V' or sampler.phoneme_set.is_vowel_like_group(symbol)
        if not vowel_like or not self.allows_hiatus:
            return
        if get_rng().chance(self.hiatus_probability * hiatus_scale):
            # Two different vowels; a single one when there is no alternative
            if sampler.phoneme_set.drawable(kind, sampler.position, exclude=(first,)):
                syllable.append(sampler.sample(kind, exclude=(first,)))

    def _fill_run(self, sampler: '_Sampler', length: int, whitelist: Sequence[str],
                  romanizer: Optional[RomanizationMap]) -> Optional[List[str]]:
        if whitelist:
            usable = self._usable_clusters(sampler.phoneme_set, whitelist, length, romanizer)
            if not usable:
                return None
            run = list(get_rng().choice(usable))
            sampler.advance(run)
            return run

        run: List[str] = []
        for _ in range(length):
            exclude = run if sampler.phoneme_set.drawable(CONSONANT, sampler.position, run) else ()
            run.append(sampler.sample(CONSONANT, exclude=exclude))
        return run

    def _fill_single_coda(self, sampler: '_Sampler',
                          romanizer: Optional[RomanizationMap]) -> Optional[List[str]]:
        declared = [c for c in self._decoded(self.allowed_coda_clusters, romanizer) if len(c) == 1]
        if not declared:
            return [sampler.sample(CONSONANT)]
        singles = self._usable_clusters(sampler.phoneme_set, self.allowed_coda_clusters,
                                        1, romanizer)
        if not singles:
            return None
        coda = list(get_rng().choice(singles))
        sampler.advance(coda)
        return coda

    @staticmethod
    def _decoded(whitelist: Sequence[str],
                 romanizer: Optional[RomanizationMap]) -> List[Tuple[str, ...]]:
        decoder = romanizer or RomanizationMap()
        return [tuple(decoder.decode(entry)) for entry in whitelist]

    def _usable_clusters(self, phoneme_set: PhonemeSet, whitelist: Sequence[str],
                         length: int, romanizer: Optional[RomanizationMap]) -> List[Tuple[str, ...]]:
        inventory = set(phoneme_set.consonants)
        return [
            cluster for cluster in self._decoded(whitelist, romanizer)
            if len(cluster) == length and all(p in inventory for p in cluster)
        ]

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, syllable: Sequence[str], romanizer: Optional[RomanizationMap] = None,
                 phoneme_set: Optional[PhonemeSet] = None) -> bool:
        """
        Check a generated syllable.

        Rejects a syllable matching any constraint regex, or whose onset/coda
        consonant run of 2+ is not an entry of the declared whitelist.
        """
        joined = ''.join(syllable)
        for constraint in self.constraints:
            if re.search(constraint, joined):
                return False

        if not self.allowed_clusters and not self.allowed_coda_clusters:
            return True

        is_vowel = phoneme_set.is_vowel if phoneme_set else ipa.is_vowel
        phonemes = list(syllable)
        onset: List[str] = []
        for p in phonemes:
            if is_vowel(p):
                break
            onset.append(p)
        if len(onset) == len(phonemes):
            return True

        coda: List[str] = []
        for p in reversed(phonemes):
            if is_vowel(p):
                break
            coda.insert(0, p)

        if self.allowed_clusters and len(onset) >= 2:
            if tuple(onset) not in self._decoded(self.allowed_clusters, romanizer):
                return False
        if self.allowed_coda_clusters and len(coda) >= 2:
            if tuple(coda) not in self._decoded(self.allowed_coda_clusters, romanizer):
                return False
        return True


# =============================================================================
# Sampling Context
# =============================================================================

class _Sampler:
    """Tracks the running context while a syllable is filled."""

    def __init__(self, phoneme_set: PhonemeSet, position: str, context: Optional[str],
                 transitions: Optional[Transitions], transition_factor: float,
                 positional_frequencies: Optional[Transitions]):
        self.phoneme_set = phoneme_set
        self.position = position
        self.initial_context = context
        self.context = context
        self.transitions = transitions
        self.transition_factor = transition_factor
        self.positional_frequencies = positional_frequencies

    def reset(self) -> None:
        self.context = self.initial_context

    def advance(self, phonemes: Sequence[str]) -> None:
        if phonemes:
            self.context = phonemes[-1]

    def sample(self, kind: str, exclude: Sequence[str] = ()) -> str:
        phoneme = self.phoneme_set.sample_phoneme(
            kind,
            position=self.position,
            context=self.context,
            transitions=self.transitions,
            transition_factor=self.transition_factor,
            positional_frequencies=self.positional_frequencies,
            exclude=exclude,
        )
        self.context = phoneme
        return phoneme


__all__ = ['SyllableTemplate', 'MAX_ATTEMPTS', 'collapse_pattern']

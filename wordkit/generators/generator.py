#!/usr/bin/env python3
"""
Word Generator
==============
Assembles whole words from a PhonemeSet and a WordSpec.

Features:
- Random, weighted-random and sequential (exhaustive) generation
- Complexity budget that spends an allowance on clusters, hiatus and
  complex codas, degrading to plain CV syllables once it runs out
- Hiatus escalation (each hiatus makes the next one less likely)
- Gemination and vowel lengthening, boosted by learned pattern frequencies
- Vowel harmony and contextual (previous-phoneme) sampling bias
- Required romanized prefix/suffix and thematic vowel
- Bounded retries with a deterministic fallback word

Usage:
    generator = Generator(phoneme_set, word_spec, romanizer)
    generator.generate()             # 'tanema'
    generator.generate_batch(5)
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .entropy import get_rng
from .phoneme_set import PhonemeSet, CONSONANT, VOWEL, Transitions
from .phonemes import load_generator_defaults
from .phonotactics import (
    count_adjacent_pairs,
    count_syllables,
    has_adjacent_identical_vowels,
    max_vowel_run,
)
from .romanization import RomanizationMap
from .syllable_template import SyllableTemplate, MAX_ATTEMPTS
from .vowel_harmony import VowelHarmony
from .word_spec import WordSpec

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 100


class GenerationMode(Enum):
    RANDOM = 'random'
    WEIGHTED_RANDOM = 'weighted_random'
    SEQUENTIAL = 'sequential'


@dataclass
class ComplexityCosts:
    """Budget cost of each costly structure."""
    cluster: float
    hiatus: float
    complex_coda: float
    gemination: float
    vowel_lengthening: float
    syllable_base: float = 1.0

    @classmethod
    def defaults(cls) -> 'ComplexityCosts':
        costs = load_generator_defaults().costs
        return cls(
            cluster=float(costs['cluster']),
            hiatus=float(costs['hiatus']),
            complex_coda=float(costs['complex_coda']),
            gemination=float(costs['gemination']),
            vowel_lengthening=float(costs['vowel_lengthening']),
            syllable_base=float(costs.get('syllable_base', 1.0)),
        )


@dataclass
class _Candidate:
    """Working state of one generation attempt."""
    syllables: List[List[str]] = field(default_factory=list)
    # Template that produced each syllable (None for spliced or degraded ones)
    owners: List[Optional[SyllableTemplate]] = field(default_factory=list)
    protected: List[bool] = field(default_factory=list)
    phonemes: List[str] = field(default_factory=list)
    remaining: Optional[float] = None

    def flat(self) -> List[str]:
        return [p for s in self.syllables for p in s]

    def last_phoneme(self) -> Optional[str]:
        for syllable in reversed(self.syllables):
            if syllable:
                return syllable[-1]
        return None

    def spend(self, cost: float) -> None:
        if self.remaining is not None:
            self.remaining = max(0.0, self.remaining - cost)


class Generator:
    """
    Word generation orchestrator.

    Configuration is read-only after construction; only the sequential
    cursor changes between calls.
    """

    def __init__(self, phoneme_set: PhonemeSet, word_spec: WordSpec,
                 romanizer: Optional[RomanizationMap] = None,
                 mode: GenerationMode = GenerationMode.RANDOM,
                 max_words: Optional[int] = None,
                 complexity_budget: Optional[float] = None,
                 hiatus_escalation_factor: Optional[float] = None,
                 gemination_probability: Optional[float] = None,
                 vowel_lengthening_probability: Optional[float] = None,
                 gemination_patterns: Optional[Dict[str, float]] = None,
                 vowel_lengthening_patterns: Optional[Dict[str, float]] = None,
                 transitions: Optional[Transitions] = None,
                 transition_weight_factor: Optional[float] = None,
                 positional_frequencies: Optional[Transitions] = None,
                 vowel_harmony: Optional[VowelHarmony] = None,
                 costs: Optional[ComplexityCosts] = None):
        defaults = load_generator_defaults()

        def default(value, key):
            return value if value is not None else defaults.get('generator', key)

        self.phoneme_set = phoneme_set
        self.word_spec = word_spec
        self.romanizer = romanizer or RomanizationMap()
        self.mode = mode
        self.max_words = int(default(max_words, 'max_words'))
        self.complexity_budget = complexity_budget
        self.hiatus_escalation_factor = float(default(hiatus_escalation_factor, 'hiatus_escalation_factor'))
        self.gemination_probability = float(default(gemination_probability, 'gemination_probability'))
        self.vowel_lengthening_probability = float(
            default(vowel_lengthening_probability, 'vowel_lengthening_probability'))
        self.gemination_patterns = dict(gemination_patterns or {})
        self.vowel_lengthening_patterns = dict(vowel_lengthening_patterns or {})
        self.transitions = transitions or None
        self.transition_weight_factor = float(default(transition_weight_factor, 'transition_weight_factor'))
        self.positional_frequencies = positional_frequencies or None
        self.vowel_harmony = vowel_harmony
        self.costs = costs or ComplexityCosts.defaults()

        self.pattern_frequency_boost = float(defaults.get('generator', 'pattern_frequency_boost'))
        self.fallback_word = str(defaults.get('generator', 'fallback_word'))
        self.vowel_reuse_probability = float(defaults.get('low_budget', 'vowel_reuse_probability'))

        if self.hiatus_escalation_factor <= 0:
            raise ValueError("hiatus_escalation_factor must be positive")
        if complexity_budget is not None and complexity_budget < 0:
            raise ValueError("complexity_budget must be non-negative")

        self._sequential_index = 0

    # =========================================================================
    # Public API
    # =========================================================================

    def generate(self, syllable_count: Optional[int] = None,
                 starting_type: Optional[str] = None) -> str:
        """
        Generate one romanized word.

        In sequential mode (and without arguments) this returns the next
        word of the enumeration.

        Raises:
            ValueError: When the sequential enumeration is exhausted, or on
                configuration errors
        """
        if self.mode == GenerationMode.SEQUENTIAL and syllable_count is None and starting_type is None:
            word = self.next_sequential()
            if word is None:
                raise ValueError("No more sequential words available")
            return word

        count = syllable_count if syllable_count is not None else self.word_spec.generate_syllable_count()
        if count < 1:
            raise ValueError(f"Syllable count must be at least 1, got {count}")
        return self._generate_word(count, starting_type or self.word_spec.starting_type)

    def generate_range(self, min_syllables: int, max_syllables: int,
                       starting_type: Optional[str] = None) -> str:
        if min_syllables < 1 or max_syllables < min_syllables:
            raise ValueError(f"Invalid syllable range {min_syllables}..{max_syllables}")
        count = get_rng().randint(min_syllables, max_syllables)
        return self._generate_word(count, starting_type or self.word_spec.starting_type)

    def generate_batch(self, count: int) -> List[str]:
        return [self.generate() for _ in range(count)]

    def next_sequential(self) -> Optional[str]:
        """Next word of the exhaustive CV enumeration, or None when exhausted."""
        consonants = self.phoneme_set.get_consonants()
        vowels = self.phoneme_set.get_vowels()
        if not consonants or not vowels:
            return None

        pairs = self.word_spec.syllable_count.min
        total = min(self.max_words, (len(consonants) * len(vowels)) ** pairs)
        if self._sequential_index >= total:
            return None

        index = self._sequential_index
        self._sequential_index += 1

        phonemes = []
        for _ in range(pairs):
            vowel = vowels[index % len(vowels)]
            index //= len(vowels)
            consonant = consonants[index % len(consonants)]
            index //= len(consonants)
            phonemes.extend([consonant, vowel])
        return self.romanizer.romanize(phonemes)

    def reset_sequential(self) -> None:
        self._sequential_index = 0

    @property
    def budget_enabled(self) -> bool:
        return self.complexity_budget is not None

    def template_cost(self, template: SyllableTemplate) -> float:
        """Static cost estimate of a template."""
        cost = self.costs.syllable_base
        if template.has_cluster:
            cost += self.costs.cluster
        if template.has_complex_coda:
            cost += self.costs.complex_coda
        return cost

    # =========================================================================
    # Word Assembly
    # =========================================================================

    def _generate_word(self, count: int, starting_type: Optional[str]) -> str:
        kept: Optional[str] = None

        for attempt in range(MAX_GENERATION_ATTEMPTS):
            candidate = self._build_candidate(count, starting_type)
            word = self.romanizer.romanize(candidate.phonemes)
            accepted, count_only = self._accept(candidate, word, count, starting_type)
            if accepted:
                return word
            if count_only:
                kept = word
            logger.debug(f"Rejected candidate '{word}' (attempt {attempt + 1})")

        if kept is not None:
            logger.debug(f"Returning '{kept}' after {MAX_GENERATION_ATTEMPTS} attempts "
                         f"despite its syllable count")
            return kept

        fallback = self._fallback_word()
        logger.warning(f"No valid word after {MAX_GENERATION_ATTEMPTS} attempts, "
                       f"using fallback '{fallback}'")
        return fallback

    def _fallback_word(self) -> str:
        consonants = self.phoneme_set.get_consonants()
        vowels = self.phoneme_set.get_vowels()
        if not consonants or not vowels:
            return self.fallback_word
        phonemes = (self.word_spec.required_prefix(self.romanizer)
                    + [consonants[0], vowels[0]]
                    + self.word_spec.required_suffix(self.romanizer))
        return self.romanizer.romanize(phonemes)

    def _build_candidate(self, count: int, starting_type: Optional[str]) -> _Candidate:
        spec = self.word_spec
        prefix = spec.required_prefix(self.romanizer)
        suffix = spec.required_suffix(self.romanizer)
        free_count = max(1, count - 1) if spec.has_sequence_constraints else count
        total = free_count + (1 if prefix else 0) + (1 if suffix else 0)

        candidate = _Candidate()
        if self.budget_enabled:
            candidate.remaining = float(count) + float(self.complexity_budget)

        if prefix:
            self._splice(candidate, prefix)

        hiatus_count = 0
        for i in range(free_count):
            index = i + (1 if prefix else 0)
            position = self._position(index, total)
            first = index == 0

            syllable, template = self._next_syllable(candidate, position, first,
                                                     starting_type, hiatus_count)

            if prefix and i == 0:
                syllable = self._avoid_triple_consonants(candidate, syllable, template,
                                                         position, hiatus_count)

            hiatus_count += count_adjacent_pairs(syllable, self.phoneme_set.is_vowel, vowels=True)
            candidate.spend(self._actual_cost(syllable))
            candidate.syllables.append(syllable)
            candidate.owners.append(template)
            candidate.protected.append(False)

        if spec.thematic_vowel and not any(self.phoneme_set.is_vowel(p) for p in suffix):
            self._apply_thematic_vowel(candidate)

        if suffix:
            self._splice(candidate, suffix)

        candidate.phonemes = self._apply_transforms(candidate)
        return candidate

    @staticmethod
    def _position(index: int, total: int) -> str:
        if index == 0:
            return 'initial'
        if index == total - 1:
            return 'final'
        return 'medial'

    def _splice(self, candidate: _Candidate, phonemes: List[str]) -> None:
        candidate.syllables.append(list(phonemes))
        candidate.owners.append(None)
        candidate.protected.append(True)
        candidate.spend(1.0)

    def _actual_cost(self, syllable: List[str]) -> float:
        is_vowel = self.phoneme_set.is_vowel
        return (count_adjacent_pairs(syllable, is_vowel, vowels=False) * self.costs.cluster
                + count_adjacent_pairs(syllable, is_vowel, vowels=True) * self.costs.hiatus
                + self.costs.syllable_base)

    # =========================================================================
    # Syllables
    # =========================================================================

    def _next_syllable(self, candidate: _Candidate, position: str, first: bool,
                       starting_type: Optional[str],
                       hiatus_count: int) -> Tuple[List[str], Optional[SyllableTemplate]]:
        templates = self.word_spec.templates
        pool = list(templates)
        if first and starting_type:
            compatible = [t for t in pool if self._starts_with_type(t, starting_type)]
            if compatible:
                pool = compatible

        cluster_cost = coda_cost = 0.0
        if self.budget_enabled:
            cheapest = min(self.template_cost(t) for t in templates)
            if candidate.remaining < cheapest:
                return self._low_budget_syllable(candidate, position, first, starting_type), None

            affordable = [t for t in pool if self.template_cost(t) <= candidate.remaining]
            if not affordable:
                # Cheapest template is affordable, so only the starting-type filter gets here
                literal = [t for t in templates if t.pattern == 'CV']
                affordable = [literal[0] if literal else templates[0]]
            pool = affordable
            cluster_cost = self.costs.cluster
            coda_cost = self.costs.complex_coda

        template = self.word_spec.select_template(position, cluster_cost, coda_cost, templates=pool)
        return self._fill(candidate, template, position, hiatus_count), template

    def _starts_with_type(self, template: SyllableTemplate, starting_type: str) -> bool:
        vowel_start = self.phoneme_set.is_vowel_like(template.pattern[0])
        return vowel_start if starting_type == VOWEL else not vowel_start

    def _hiatus_scale(self, hiatus_count: int) -> float:
        return self.hiatus_escalation_factor ** -hiatus_count

    def _fill(self, candidate: _Candidate, template: SyllableTemplate, position: str,
              hiatus_count: int) -> List[str]:
        harmony = self.vowel_harmony
        if harmony is not None and harmony.active:
            if template.has_cluster:
                syllable = self._generate(candidate, template, position, hiatus_count)
                return self._harmonize(candidate, syllable, position)
            return self._harmonic_syllable(candidate, template, position, hiatus_count)
        return self._generate(candidate, template, position, hiatus_count)

    def _generate(self, candidate: _Candidate, template: SyllableTemplate, position: str,
                  hiatus_count: int) -> List[str]:
        return template.generate(
            self.phoneme_set,
            position,
            romanizer=self.romanizer,
            hiatus_scale=self._hiatus_scale(hiatus_count),
            context=candidate.last_phoneme(),
            transitions=self.transitions,
            transition_factor=self.transition_weight_factor,
            positional_frequencies=self.positional_frequencies,
        )

    def _sample(self, kind: str, position: str, context: Optional[str],
                exclude=()) -> str:
        return self.phoneme_set.sample_phoneme(
            kind,
            position=position,
            context=context,
            transitions=self.transitions,
            transition_factor=self.transition_weight_factor,
            positional_frequencies=self.positional_frequencies,
            exclude=exclude,
        )

    def _low_budget_syllable(self, candidate: _Candidate, position: str, first: bool,
                             starting_type: Optional[str]) -> List[str]:
        """CV (or word-initial V) skeleton that prefers vowels already used."""
        syllable: List[str] = []
        context = candidate.last_phoneme()
        if not (first and starting_type == VOWEL):
            context = self._sample(CONSONANT, position, context)
            syllable.append(context)

        used = [p for p in candidate.flat() if self.phoneme_set.is_vowel(p)]
        rng = get_rng()
        if used and rng.chance(self.vowel_reuse_probability):
            syllable.append(rng.choice(used))
        else:
            syllable.append(self._sample(VOWEL, position, context))
        return syllable

    def _avoid_triple_consonants(self, candidate: _Candidate, syllable: List[str],
                                 template: Optional[SyllableTemplate], position: str,
                                 hiatus_count: int) -> List[str]:
        """Regenerate a syllable vowel-initial when it would extend a prefix into CCC."""
        is_vowel = self.phoneme_set.is_vowel
        before = candidate.flat()
        trailing = 0
        for p in reversed(before):
            if is_vowel(p):
                break
            trailing += 1
        leading = 0
        for p in syllable:
            if is_vowel(p):
                break
            leading += 1
        if trailing == 0 or leading == 0 or trailing + leading < 3:
            return syllable

        if template is None:
            # Low-budget skeleton: keep its vowel only
            logger.debug("Prefix ends in a consonant, dropping the onset of a low-budget syllable")
            return syllable[leading:]

        vowel_initial = replace(template, pattern=template.pattern.lstrip('C') or 'V')
        logger.debug(f"Prefix ends in a consonant, regenerating '{template.pattern}' "
                     f"as '{vowel_initial.pattern}'")
        return self._fill(candidate, vowel_initial, position, hiatus_count)

    # =========================================================================
    # Vowel Harmony
    # =========================================================================

    def _previous_vowel(self, phonemes: List[str]) -> Optional[str]:
        for p in reversed(phonemes):
            if self.phoneme_set.is_vowel(p):
                return p
        return None

    def _harmonic_syllable(self, candidate: _Candidate, template: SyllableTemplate,
                           position: str, hiatus_count: int) -> List[str]:
        """Fill a cluster-free pattern, choosing vowels from the harmony table."""
        for symbol in template.pattern:
            if symbol not in ('C', 'V') and not self.phoneme_set.has_custom_group(symbol):
                raise ValueError(f"Unknown pattern symbol '{symbol}' in '{template.pattern}'")

        harmony = self.vowel_harmony
        rng = get_rng()
        before = candidate.flat()
        syllable: List[str] = []

        for _ in range(MAX_ATTEMPTS):
            syllable = []
            context = candidate.last_phoneme()
            for symbol in template.pattern:
                kind = VOWEL if symbol == 'V' else (CONSONANT if symbol == 'C' else symbol)
                if not self.phoneme_set.is_vowel_like(symbol):
                    context = self._sample(kind, position, context)
                    syllable.append(context)
                    continue

                available = self.phoneme_set.drawable(kind, position)
                vowel = harmony.select_vowel(self._previous_vowel(before + syllable), available)
                syllable.append(vowel)
                scale = self._hiatus_scale(hiatus_count)
                if template.allows_hiatus and rng.chance(template.hiatus_probability * scale):
                    others = [v for v in available if v != vowel]
                    if others:
                        syllable.append(harmony.select_vowel(vowel, others))
                context = syllable[-1]

            if template.validate(syllable, self.romanizer, self.phoneme_set):
                return syllable

        return syllable

    def _harmonize(self, candidate: _Candidate, syllable: List[str], position: str) -> List[str]:
        """Replace the vowel slots of a generated syllable using the harmony table."""
        harmony = self.vowel_harmony
        before = candidate.flat()
        result = list(syllable)
        available = self.phoneme_set.drawable(VOWEL, position)

        for i, phoneme in enumerate(result):
            if not self.phoneme_set.is_vowel(phoneme):
                continue
            replacement = harmony.select_vowel(self._previous_vowel(before + result[:i]), available)
            prev = result[i - 1] if i > 0 else (before[-1] if before else None)
            nxt = result[i + 1] if i + 1 < len(result) else None
            if replacement in (prev, nxt):
                continue
            result[i] = replacement
        return result

    def _apply_thematic_vowel(self, candidate: _Candidate) -> None:
        thematic = self._thematic_symbol()
        for syllable, protected in zip(reversed(candidate.syllables), reversed(candidate.protected)):
            if protected:
                continue
            for i in range(len(syllable) - 1, -1, -1):
                if self.phoneme_set.is_vowel(syllable[i]):
                    syllable[i] = thematic
                    return
            return

    def _thematic_symbol(self) -> str:
        thematic = self.word_spec.thematic_vowel
        if thematic in self.phoneme_set.vowels:
            return thematic
        for vowel in self.phoneme_set.vowels:
            if self.romanizer.romanize_symbol(vowel) == thematic:
                return vowel
        return thematic

    # =========================================================================
    # Gemination and Lengthening
    # =========================================================================

    def _apply_transforms(self, candidate: _Candidate) -> List[str]:
        phonemes: List[str] = []
        owners: List[Optional[SyllableTemplate]] = []
        locked: List[bool] = []
        for syllable, owner, protected in zip(candidate.syllables, candidate.owners,
                                              candidate.protected):
            phonemes.extend(syllable)
            owners.extend([owner] * len(syllable))
            locked.extend([protected] * len(syllable))

        self._transform(candidate, phonemes, owners, locked, geminate=True)
        self._transform(candidate, phonemes, owners, locked, geminate=False)
        return phonemes

    def _transform_probability(self, phoneme: str, owner: Optional[SyllableTemplate],
                               geminate: bool) -> float:
        if geminate:
            own = owner.gemination_probability if owner else 0.0
            base = own if own > 0 else self.gemination_probability
            learned = self.gemination_patterns.get(phoneme + phoneme, 0.0)
        else:
            own = owner.vowel_lengthening_probability if owner else 0.0
            base = own if own > 0 else self.vowel_lengthening_probability
            learned = self.vowel_lengthening_patterns.get(phoneme + phoneme, 0.0)
        return min(1.0, base + self.pattern_frequency_boost * learned)

    def _transform(self, candidate: _Candidate, phonemes: List[str],
                   owners: List[Optional[SyllableTemplate]], locked: List[bool],
                   geminate: bool) -> None:
        is_vowel = self.phoneme_set.is_vowel
        cost = self.costs.gemination if geminate else self.costs.vowel_lengthening
        rng = get_rng()

        i = 1
        while i < len(phonemes) - 1:
            phoneme, prev, nxt = phonemes[i], phonemes[i - 1], phonemes[i + 1]
            if locked[i] or phoneme in (prev, nxt):
                i += 1
                continue

            if geminate:
                eligible = not is_vowel(phoneme) and is_vowel(prev)
            else:
                eligible = is_vowel(phoneme) and not is_vowel(prev) and not is_vowel(nxt)
            if not eligible:
                i += 1
                continue

            probability = self._transform_probability(phoneme, owners[i], geminate)
            if probability <= 0 or (candidate.remaining is not None and candidate.remaining < cost):
                i += 1
                continue

            if rng.chance(probability):
                phonemes.insert(i, phoneme)
                owners.insert(i, owners[i])
                locked.insert(i, False)
                candidate.spend(cost)
                i += 2
                continue
            i += 1

    # =========================================================================
    # Acceptance
    # =========================================================================

    def _accept(self, candidate: _Candidate, word: str, count: int,
                starting_type: Optional[str]) -> Tuple[bool, bool]:
        """
        Returns (accepted, failed_only_on_count).
        """
        is_vowel = self.phoneme_set.is_vowel
        phonemes = candidate.phonemes
        raw = candidate.flat()

        structural = bool(phonemes)
        structural = structural and self.word_spec.validate_word(
            phonemes, self.romanizer, self.phoneme_set.vowels)

        if structural and starting_type:
            starts_vowel = is_vowel(phonemes[0])
            structural = starts_vowel if starting_type == VOWEL else not starts_vowel

        if structural:
            syllables = [s for s in candidate.syllables if s]
            structural = not any(a[-1] == b[0] for a, b in zip(syllables, syllables[1:]))

        if structural:
            structural = max_vowel_run(phonemes, is_vowel) < 3

        harmony = self.vowel_harmony
        if structural and harmony is not None and harmony.active:
            structural = not has_adjacent_identical_vowels(raw, is_vowel)

        if not structural:
            return False, False

        if self.word_spec.has_sequence_constraints:
            detected = count_syllables(self.romanizer.decode(word), is_vowel)
            policy = self.word_spec.syllable_count
            count_ok = min(policy.min, count) <= detected <= max(policy.max, count)
        else:
            count_ok = len(candidate.syllables) == count

        return count_ok, not count_ok


__all__ = ['Generator', 'GenerationMode', 'ComplexityCosts', 'MAX_GENERATION_ATTEMPTS']

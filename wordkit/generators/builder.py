#!/usr/bin/env python3
"""
Generator Builder
=================
Fluent construction of Generator instances, from code or from YAML
language definitions.

Usage:
    generator = (GeneratorBuilder.create()
                 .with_phonemes(['p', 't', 'k'], ['a', 'i'])
                 .with_syllable_patterns(['CV', 'CVC'])
                 .with_syllable_count(SyllableCountSpec.range(2, 3))
                 .build())

    elvish = GeneratorBuilder.load_language('elvish').build()
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .entropy import set_seed
from .generator import Generator, GenerationMode, ComplexityCosts
from .ipa import PhonemeLike, symbol_of
from .phoneme_set import PhonemeSet
from .phonemes import load_generator_defaults, load_language, load_language_file, _require_cfg
from .romanization import RomanizationMap
from .syllable_template import SyllableTemplate
from .vowel_harmony import VowelHarmony
from .word_spec import SyllableCountSpec, WordSpec

logger = logging.getLogger(__name__)

TEMPLATE_KEYS = (
    'constraints', 'hiatus_probability', 'gemination_probability',
    'vowel_lengthening_probability', 'allowed_clusters', 'allowed_coda_clusters',
    'position_weights', 'probability',
)


class GeneratorBuilder:
    """Collects configuration step by step and validates it in build()."""

    def __init__(self):
        self._phoneme_set: Optional[PhonemeSet] = None
        self._templates: Optional[List[SyllableTemplate]] = None
        self._syllable_count: Optional[SyllableCountSpec] = None
        self._starting_type: Optional[str] = None
        self._constraints: List[str] = []
        self._romanizer: Optional[RomanizationMap] = None
        self._mode = GenerationMode.RANDOM
        self._max_words: Optional[int] = None
        self._complexity_budget: Optional[float] = None
        self._hiatus_escalation: Optional[float] = None
        self._vowel_harmony: Optional[VowelHarmony] = None
        self._thematic_vowel: Optional[str] = None
        self._starts_with: Optional[str] = None
        self._ends_with: Optional[str] = None
        self._gemination_probability: Optional[float] = None
        self._vowel_lengthening_probability: Optional[float] = None
        self._transitions: Optional[Dict[str, Dict[str, float]]] = None
        self._transition_weight_factor: Optional[float] = None
        self._positional_frequencies: Optional[Dict[str, Dict[str, float]]] = None
        self._gemination_patterns: Optional[Dict[str, float]] = None
        self._vowel_lengthening_patterns: Optional[Dict[str, float]] = None
        self._costs: Dict[str, float] = {}
        self._seed: Optional[int] = None

    @classmethod
    def create(cls) -> 'GeneratorBuilder':
        return cls()

    def _require_phonemes(self, step: str) -> PhonemeSet:
        if self._phoneme_set is None:
            raise ValueError(f"{step} needs phonemes; call with_phonemes() first")
        return self._phoneme_set

    # =========================================================================
    # Inventory
    # =========================================================================

    def with_phonemes(self, consonants: Iterable[PhonemeLike],
                      vowels: Iterable[PhonemeLike]) -> 'GeneratorBuilder':
        self._phoneme_set = PhonemeSet(consonants, vowels)
        return self

    def with_grouped_phonemes(self, groups: Dict[str, Iterable[PhonemeLike]]) -> 'GeneratorBuilder':
        """Inventory from {'C': [...], 'V': [...], 'F': [...]}; other keys become custom groups."""
        phoneme_set = PhonemeSet(groups.get('C', ()), groups.get('V', ()))
        for symbol, members in groups.items():
            if symbol not in ('C', 'V'):
                phoneme_set.add_custom_group(symbol, members)
        self._phoneme_set = phoneme_set
        return self

    def with_weights(self, weights: Dict[PhonemeLike, float]) -> 'GeneratorBuilder':
        phoneme_set = self._require_phonemes('with_weights')
        for phoneme, weight in weights.items():
            phoneme_set.add_weight(phoneme, weight)
        return self

    def with_positions(self, positions: Dict[str, Iterable[PhonemeLike]]) -> 'GeneratorBuilder':
        phoneme_set = self._require_phonemes('with_positions')
        for position, phonemes in positions.items():
            phoneme_set.add_position_rule(position, phonemes)
        return self

    def with_custom_group(self, symbol: str, phonemes: Iterable[PhonemeLike],
                          positions: Iterable[str] = ()) -> 'GeneratorBuilder':
        self._require_phonemes('with_custom_group').add_custom_group(symbol, phonemes, list(positions))
        return self

    def with_romanization(self, mappings: Union[Dict[str, str], RomanizationMap]) -> 'GeneratorBuilder':
        if isinstance(mappings, RomanizationMap):
            self._romanizer = mappings.copy()
        else:
            self._romanizer = RomanizationMap(mappings)
        return self

    # =========================================================================
    # Syllables and Words
    # =========================================================================

    def with_syllable_patterns(self, patterns: Iterable[str]) -> 'GeneratorBuilder':
        self._templates = [SyllableTemplate(p) for p in patterns]
        return self

    def with_syllable_pattern_probabilities(self, probabilities: Dict[str, float]) -> 'GeneratorBuilder':
        self._templates = [SyllableTemplate(p, probability=w) for p, w in probabilities.items()]
        return self

    def with_syllable_templates(self, templates: Iterable[SyllableTemplate]) -> 'GeneratorBuilder':
        self._templates = list(templates)
        return self

    def with_syllable_count(self, spec: SyllableCountSpec) -> 'GeneratorBuilder':
        self._syllable_count = spec
        return self

    def starting_with(self, kind: str) -> 'GeneratorBuilder':
        self._starting_type = kind
        return self

    def with_constraints(self, patterns: Iterable[str]) -> 'GeneratorBuilder':
        self._constraints = list(patterns)
        return self

    def with_thematic_vowel(self, vowel: PhonemeLike) -> 'GeneratorBuilder':
        self._thematic_vowel = symbol_of(vowel)
        return self

    def starting_with_sequence(self, sequence: str) -> 'GeneratorBuilder':
        self._starts_with = sequence
        return self

    def ending_with_sequence(self, sequence: str) -> 'GeneratorBuilder':
        self._ends_with = sequence
        return self

    # =========================================================================
    # Modes
    # =========================================================================

    def sequential_mode(self, max_words: Optional[int] = None) -> 'GeneratorBuilder':
        self._mode = GenerationMode.SEQUENTIAL
        self._max_words = max_words
        return self

    def random_mode(self) -> 'GeneratorBuilder':
        self._mode = GenerationMode.RANDOM
        return self

    def weighted_random_mode(self) -> 'GeneratorBuilder':
        self._mode = GenerationMode.WEIGHTED_RANDOM
        return self

    def with_seed(self, seed: Optional[int]) -> 'GeneratorBuilder':
        self._seed = seed
        return self

    # =========================================================================
    # Complexity
    # =========================================================================

    def with_complexity_budget(self, budget: float) -> 'GeneratorBuilder':
        self._complexity_budget = budget
        return self

    def with_hiatus_escalation(self, factor: float) -> 'GeneratorBuilder':
        self._hiatus_escalation = factor
        return self

    def with_gemination_probability(self, probability: float) -> 'GeneratorBuilder':
        self._gemination_probability = probability
        return self

    def with_vowel_lengthening_probability(self, probability: float) -> 'GeneratorBuilder':
        self._vowel_lengthening_probability = probability
        return self

    def enable_gemination(self) -> 'GeneratorBuilder':
        return self.with_gemination_probability(1.0)

    def disable_gemination(self) -> 'GeneratorBuilder':
        return self.with_gemination_probability(0.0)

    def enable_vowel_lengthening(self) -> 'GeneratorBuilder':
        return self.with_vowel_lengthening_probability(1.0)

    def disable_vowel_lengthening(self) -> 'GeneratorBuilder':
        return self.with_vowel_lengthening_probability(0.0)

    def with_cluster_cost(self, cost: float) -> 'GeneratorBuilder':
        self._costs['cluster'] = cost
        return self

    def with_hiatus_cost(self, cost: float) -> 'GeneratorBuilder':
        self._costs['hiatus'] = cost
        return self

    def with_complex_coda_cost(self, cost: float) -> 'GeneratorBuilder':
        self._costs['complex_coda'] = cost
        return self

    def with_gemination_cost(self, cost: float) -> 'GeneratorBuilder':
        self._costs['gemination'] = cost
        return self

    def with_vowel_lengthening_cost(self, cost: float) -> 'GeneratorBuilder':
        self._costs['vowel_lengthening'] = cost
        return self

    def with_complexity_costs(self, cluster: Optional[float] = None, hiatus: Optional[float] = None,
                              coda: Optional[float] = None, gemination: Optional[float] = None,
                              vowel_lengthening: Optional[float] = None) -> 'GeneratorBuilder':
        """Set several costs at once; unset ones keep the generator.yaml defaults."""
        given = {
            'cluster': cluster,
            'hiatus': hiatus,
            'complex_coda': coda,
            'gemination': gemination,
            'vowel_lengthening': vowel_lengthening,
        }
        self._costs.update({k: v for k, v in given.items() if v is not None})
        return self

    # =========================================================================
    # Vowel Harmony
    # =========================================================================

    def with_vowel_harmony(self, harmony: Union[VowelHarmony, bool]) -> 'GeneratorBuilder':
        """Install a harmony table, or toggle the one learned from analysis."""
        if isinstance(harmony, VowelHarmony):
            self._vowel_harmony = harmony
        elif not harmony:
            self._vowel_harmony = None
        elif self._vowel_harmony is None:
            logger.warning("No vowel harmony rules available; use with_analysis_of_words() first")
        return self

    def with_vowel_harmony_strength(self, strength: float) -> 'GeneratorBuilder':
        if self._vowel_harmony is None:
            logger.warning("No vowel harmony rules to adjust; use with_vowel_harmony() first")
        else:
            self._vowel_harmony = self._vowel_harmony.with_strength(strength)
        return self

    # =========================================================================
    # Analysis
    # =========================================================================

    def with_analysis(self, analysis, vowel_harmony: bool = True,
                      analysis_weight_factor: Optional[float] = None) -> 'GeneratorBuilder':
        """
        Configure the builder from a corpus Analysis.

        Phoneme weights become frequency * weight factor, the recommended
        budget and syllable count distribution are adopted, templates are
        taken from the recommendation unless already set, and transition /
        positional / gemination tables are carried over.
        """
        cfg = load_generator_defaults().analysis
        factor = float(analysis_weight_factor if analysis_weight_factor is not None
                       else _require_cfg(cfg, 'weight_factor', 'generator.analysis'))

        if self._phoneme_set is not None:
            for phoneme, frequency in analysis.phoneme_frequencies.items():
                self._phoneme_set.add_weight(phoneme, frequency * factor)

        self._complexity_budget = analysis.recommended_budget

        if analysis.recommended_templates and self._templates is None:
            self._templates = [
                SyllableTemplate(pattern, hiatus_probability=analysis.recommended_hiatus_probability)
                for pattern in analysis.recommended_templates
            ]

        if analysis.syllable_count_distribution:
            self._syllable_count = SyllableCountSpec.weighted(analysis.syllable_count_distribution)

        if vowel_harmony and analysis.vowel_transitions:
            self._vowel_harmony = analysis.generate_vowel_harmony(
                strength=float(_require_cfg(cfg, 'harmony_strength', 'generator.analysis')),
                threshold=float(_require_cfg(cfg, 'harmony_threshold', 'generator.analysis')),
            )

        if analysis.phoneme_transitions:
            self._transitions = analysis.phoneme_transitions
            scale = float(_require_cfg(cfg, 'transition_scale', 'generator.analysis'))
            self._transition_weight_factor = factor * scale

        if analysis.positional_frequencies:
            self._positional_frequencies = analysis.positional_frequencies
        if analysis.gemination_patterns:
            self._gemination_patterns = analysis.gemination_patterns
        if analysis.vowel_lengthening_patterns:
            self._vowel_lengthening_patterns = analysis.vowel_lengthening_patterns
        return self

    def with_analysis_of_words(self, words: Iterable[str], vowel_harmony: bool = True,
                               analysis_weight_factor: Optional[float] = None) -> 'GeneratorBuilder':
        if self._romanizer is None:
            raise ValueError("No romanization map set; call with_romanization() first")
        from ..analyzer import Analyzer

        vowels = self._phoneme_set.vowels if self._phoneme_set else None
        analysis = Analyzer(self._romanizer, vowels=vowels).analyze(list(words))
        return self.with_analysis(analysis, vowel_harmony, analysis_weight_factor)

    # =========================================================================
    # Build
    # =========================================================================

    def build(self) -> Generator:
        """
        Validate the collected configuration and create the Generator.

        Raises:
            ValueError: If phonemes, templates or the syllable count are
                missing, a pattern symbol is undefined, or the thematic
                vowel is not in the inventory
        """
        phoneme_set = self._require_phonemes('build')
        if not self._templates:
            raise ValueError("No syllable templates; call with_syllable_patterns() first")
        if self._syllable_count is None:
            raise ValueError("No syllable count; call with_syllable_count() first")

        self._validate_pattern_symbols(phoneme_set)
        romanizer = self._romanizer or RomanizationMap()
        self._validate_thematic_vowel(phoneme_set, romanizer)

        if self._seed is not None:
            set_seed(self._seed)

        word_spec = WordSpec(
            syllable_count=self._syllable_count,
            templates=list(self._templates),
            starting_type=self._starting_type,
            constraints=list(self._constraints),
            thematic_vowel=self._thematic_vowel,
            starts_with=self._starts_with,
            ends_with=self._ends_with,
        )

        costs = ComplexityCosts.defaults()
        for key, value in self._costs.items():
            setattr(costs, key, float(value))

        return Generator(
            phoneme_set=phoneme_set,
            word_spec=word_spec,
            romanizer=romanizer,
            mode=self._mode,
            max_words=self._max_words,
            complexity_budget=self._complexity_budget,
            hiatus_escalation_factor=self._hiatus_escalation,
            gemination_probability=self._gemination_probability,
            vowel_lengthening_probability=self._vowel_lengthening_probability,
            gemination_patterns=self._gemination_patterns,
            vowel_lengthening_patterns=self._vowel_lengthening_patterns,
            transitions=self._transitions,
            transition_weight_factor=self._transition_weight_factor,
            positional_frequencies=self._positional_frequencies,
            vowel_harmony=self._vowel_harmony,
            costs=costs,
        )

    def _validate_pattern_symbols(self, phoneme_set: PhonemeSet) -> None:
        for template in self._templates:
            for symbol in template.pattern:
                if symbol in ('C', 'V') or phoneme_set.has_custom_group(symbol):
                    continue
                raise ValueError(f"Pattern symbol '{symbol}' is not defined. "
                                 f"Use with_custom_group('{symbol}', [...]) to define it.")

    def _validate_thematic_vowel(self, phoneme_set: PhonemeSet, romanizer: RomanizationMap) -> None:
        thematic = self._thematic_vowel
        if thematic is None:
            return
        spellings = set(phoneme_set.vowels)
        spellings.update(romanizer.romanize_symbol(v) for v in phoneme_set.vowels)
        if thematic not in spellings:
            raise ValueError(f"Thematic vowel '{thematic}' is not in the vowel set")

    # =========================================================================
    # YAML Language Definitions
    # =========================================================================

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'GeneratorBuilder':
        """
        Builder populated from a language definition dict.

        See phonemes/languages/*.yaml for the recognised keys.
        """
        name = config.get('name', 'language')
        builder = cls.create()
        builder.with_phonemes(
            _require_cfg(config, 'consonants', name),
            _require_cfg(config, 'vowels', name),
        )

        if config.get('romanization'):
            builder.with_romanization({str(k): str(v) for k, v in config['romanization'].items()})

        for symbol, group in (config.get('custom_groups') or {}).items():
            if isinstance(group, dict):
                builder.with_custom_group(str(symbol), _require_cfg(group, 'phonemes', f"{name}.custom_groups.{symbol}"),
                                          group.get('positions') or ())
            else:
                builder.with_custom_group(str(symbol), group)

        if config.get('positions'):
            builder.with_positions(config['positions'])
        if config.get('weights'):
            builder.with_weights({str(k): float(v) for k, v in config['weights'].items()})

        templates = [_template_from_config(t, name) for t in _require_cfg(config, 'templates', name)]
        builder.with_syllable_templates(templates)
        builder.with_syllable_count(_count_from_config(_require_cfg(config, 'syllable_count', name), name))

        if config.get('constraints'):
            builder.with_constraints(config['constraints'])
        if config.get('starting_type'):
            builder.starting_with(config['starting_type'])
        if config.get('thematic_vowel'):
            builder.with_thematic_vowel(str(config['thematic_vowel']))
        if config.get('starts_with'):
            builder.starting_with_sequence(str(config['starts_with']))
        if config.get('ends_with'):
            builder.ending_with_sequence(str(config['ends_with']))

        if config.get('complexity_budget') is not None:
            builder.with_complexity_budget(float(config['complexity_budget']))
        if config.get('hiatus_escalation') is not None:
            builder.with_hiatus_escalation(float(config['hiatus_escalation']))
        if config.get('gemination_probability') is not None:
            builder.with_gemination_probability(float(config['gemination_probability']))
        if config.get('vowel_lengthening_probability') is not None:
            builder.with_vowel_lengthening_probability(float(config['vowel_lengthening_probability']))
        if config.get('costs'):
            costs = config['costs']
            builder.with_complexity_costs(
                cluster=costs.get('cluster'),
                hiatus=costs.get('hiatus'),
                coda=costs.get('complex_coda'),
                gemination=costs.get('gemination'),
                vowel_lengthening=costs.get('vowel_lengthening'),
            )
        if config.get('vowel_harmony'):
            builder.with_vowel_harmony(VowelHarmony.from_dict(config['vowel_harmony']))

        mode = config.get('mode', 'random')
        if mode == 'sequential':
            builder.sequential_mode(config.get('max_words'))
        elif mode == 'weighted_random':
            builder.weighted_random_mode()
        elif mode != 'random':
            raise ValueError(f"{name}.mode must be random, weighted_random or sequential, got '{mode}'")

        return builder

    @classmethod
    def load_language(cls, name: str) -> 'GeneratorBuilder':
        """Builder for a bundled language (phonemes/languages/<name>.yaml)."""
        return cls.from_config(load_language(name).raw)

    @classmethod
    def load_language_file(cls, path) -> 'GeneratorBuilder':
        return cls.from_config(load_language_file(path).raw)


def _template_from_config(entry: Union[str, Dict[str, Any]], context: str) -> SyllableTemplate:
    if isinstance(entry, str):
        return SyllableTemplate(entry)
    pattern = _require_cfg(entry, 'pattern', f"{context}.templates")
    unknown = set(entry) - set(TEMPLATE_KEYS) - {'pattern'}
    if unknown:
        raise ValueError(f"{context}.templates[{pattern}] has unknown keys: {', '.join(sorted(unknown))}")
    kwargs = {k: entry[k] for k in TEMPLATE_KEYS if entry.get(k) is not None}
    return SyllableTemplate(str(pattern), **kwargs)


def _count_from_config(entry: Union[int, Dict[str, Any]], context: str) -> SyllableCountSpec:
    if isinstance(entry, int):
        return SyllableCountSpec.exact(entry)
    if 'exact' in entry:
        return SyllableCountSpec.exact(int(entry['exact']))
    if 'range' in entry:
        low, high = entry['range']
        return SyllableCountSpec.range(int(low), int(high))
    if 'weighted' in entry:
        return SyllableCountSpec.weighted({int(k): float(v) for k, v in entry['weighted'].items()})
    raise ValueError(f"{context}.syllable_count must define exact, range or weighted")


__all__ = ['GeneratorBuilder']

#!/usr/bin/env python3
"""
Corpus Analyzer
===============
Reverse-engineers generator settings from example words.

- WordAnalyzer decodes one romanized word and measures its structure
  (syllables, clusters, hiatus, gemination, complexity, n-grams).
- Analyzer aggregates word analyses into an Analysis with frequency
  tables and recommendations (budget, templates, probabilities).

Usage:
    from wordkit.analyzer import Analyzer
    from wordkit.generators import RomanizationMap

    analysis = Analyzer(RomanizationMap({'θ': 'th'})).analyze(['thala', 'nira'])
    print(analysis.summary())
"""

import logging
import math
from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from .analysis import Analysis, WordAnalysis
from .generators import ipa
from .generators.phonemes import load_generator_defaults
from .generators.phonotactics import (
    detect_gemination,
    detect_syllables,
    detect_vowel_lengthening,
    runs,
    syllable_pattern,
)
from .generators.romanization import RomanizationMap
from .generators.syllable_template import SyllableTemplate

logger = logging.getLogger(__name__)

# Complexity score of common syllable shapes; others score their length
PATTERN_COMPLEXITY = {
    'CV': 1,
    'CVC': 2,
    'CCV': 3,
    'CVV': 3,
    'CCVC': 4,
    'CVCC': 4,
}

MAX_RECOMMENDED_PROBABILITY = 0.8


def _normalize(counts: Counter) -> Dict:
    total = sum(counts.values())
    if not total:
        return {}
    return {key: count / total for key, count in counts.items()}


def _normalize_table(counts: Dict[str, Counter]) -> Dict[str, Dict[str, float]]:
    return {key: _normalize(inner) for key, inner in counts.items() if sum(inner.values())}


class WordAnalyzer:
    """Structural analysis of single romanized words."""

    def __init__(self, romanizer: RomanizationMap, vowels: Optional[Iterable[str]] = None):
        self.romanizer = romanizer
        self.vowels = set(vowels) if vowels is not None else None

    def is_vowel(self, phoneme: str) -> bool:
        if self.vowels is not None and phoneme in self.vowels:
            return True
        return ipa.is_vowel(phoneme)

    def analyze(self, word: str) -> WordAnalysis:
        phonemes = self.romanizer.decode(word)
        is_vowel = self.is_vowel

        syllables = detect_syllables(phonemes, is_vowel)
        patterns = [syllable_pattern(s, is_vowel) for s in syllables]
        consonant_runs = runs(phonemes, lambda p: not is_vowel(p))
        vowel_runs = runs(phonemes, is_vowel)

        positions: Dict[str, List[str]] = defaultdict(list)
        for i, phoneme in enumerate(phonemes):
            if i == 0:
                positions['initial'].append(phoneme)
            elif i == len(phonemes) - 1:
                positions['final'].append(phoneme)
            else:
                positions['medial'].append(phoneme)

        return WordAnalysis(
            word=word,
            phonemes=phonemes,
            syllables=syllables,
            syllable_patterns=patterns,
            consonant_count=sum(1 for p in phonemes if not is_vowel(p)),
            vowel_count=sum(1 for p in phonemes if is_vowel(p)),
            clusters=[''.join(r) for r in consonant_runs],
            hiatus_sequences=[''.join(r) for r in vowel_runs],
            gemination_sequences=detect_gemination(phonemes, is_vowel),
            vowel_lengthening_sequences=detect_vowel_lengthening(phonemes, is_vowel),
            complexity_score=self._complexity(consonant_runs, vowel_runs, patterns),
            phoneme_positions=dict(positions),
            phoneme_transitions=list(zip(phonemes, phonemes[1:])),
            bigrams=[''.join(phonemes[i:i + 2]) for i in range(len(phonemes) - 1)],
            trigrams=[''.join(phonemes[i:i + 3]) for i in range(len(phonemes) - 2)],
        )

    @staticmethod
    def _complexity(consonant_runs: List[List[str]], vowel_runs: List[List[str]],
                    patterns: List[str]) -> int:
        score = sum(len(r) * 2 for r in consonant_runs)
        score += sum(len(r) for r in vowel_runs)
        score += sum(PATTERN_COMPLEXITY.get(p, len(p)) for p in patterns)
        return score


class Analyzer:
    """Aggregates word analyses into corpus statistics and recommendations."""

    def __init__(self, romanizer: RomanizationMap, vowels: Optional[Iterable[str]] = None):
        self.word_analyzer = WordAnalyzer(romanizer, vowels)
        self.templates: Optional[List[SyllableTemplate]] = None
        self._cfg = load_generator_defaults().analysis

    def with_templates(self, templates: Sequence[SyllableTemplate]) -> 'Analyzer':
        """Use known templates instead of recommending them from the corpus."""
        self.templates = list(templates)
        return self

    def analyze(self, words: Sequence[str], smoothing: bool = False,
                smoothing_factor: float = 0.3) -> Analysis:
        """
        Analyze a corpus.

        Args:
            words: Romanized example words
            smoothing: Blend phoneme frequencies with a Gusein-Zade
                rank distribution
            smoothing_factor: Blend factor in [0, 1]
        """
        words = [w for w in words if w]
        if not words:
            return Analysis()

        analyses = [self.word_analyzer.analyze(w) for w in words]
        logger.debug(f"Analyzed {len(analyses)} words")

        frequencies = self._phoneme_frequencies(analyses)
        if smoothing:
            frequencies = self._smooth(frequencies, smoothing_factor)

        pattern_distribution = _normalize(Counter(p for a in analyses for p in a.syllable_patterns))
        hiatus_patterns = _normalize(Counter(h for a in analyses for h in a.hiatus_sequences))
        gemination_patterns = _normalize(Counter(g for a in analyses for g in a.gemination_sequences))

        average_complexity = sum(a.complexity_score for a in analyses) / len(analyses)
        consonants = sum(a.consonant_count for a in analyses)
        vowels = sum(a.vowel_count for a in analyses)

        if self.templates is not None:
            templates = [t.pattern for t in self.templates]
            hiatus_probability = self._hiatus_from_templates(self.templates)
        else:
            templates = self._recommended_templates(pattern_distribution)
            hiatus_probability = self._recommended_probability(
                hiatus_patterns, analyses, lambda a: a.has_hiatus, 10.0)

        return Analysis(
            word_count=len(analyses),
            phoneme_frequencies=frequencies,
            positional_frequencies=self._positional_frequencies(analyses),
            syllable_count_distribution=_normalize(Counter(a.syllable_count for a in analyses)),
            syllable_pattern_distribution=pattern_distribution,
            cluster_patterns=_normalize(Counter(c for a in analyses for c in a.clusters)),
            hiatus_patterns=hiatus_patterns,
            gemination_patterns=gemination_patterns,
            vowel_lengthening_patterns=_normalize(
                Counter(v for a in analyses for v in a.vowel_lengthening_sequences)),
            complexity_distribution=_normalize(Counter(a.complexity_score for a in analyses)),
            average_complexity=average_complexity,
            average_syllable_count=sum(a.syllable_count for a in analyses) / len(analyses),
            consonant_vowel_ratio=consonants / vowels if vowels else 0.0,
            recommended_budget=self._recommended_budget(average_complexity),
            recommended_templates=templates,
            recommended_hiatus_probability=hiatus_probability,
            recommended_gemination_probability=self._recommended_probability(
                gemination_patterns, analyses, lambda a: a.has_gemination, 5.0),
            dominant_patterns=[p for p, _ in sorted(pattern_distribution.items(),
                                                    key=lambda kv: -kv[1])[:3]],
            vowel_transitions=self._vowel_transitions(analyses),
            phoneme_transitions=self._phoneme_transitions(analyses),
            bigram_frequencies=_normalize(Counter(b for a in analyses for b in a.bigrams)),
            trigram_frequencies=_normalize(Counter(t for a in analyses for t in a.trigrams)),
        )

    # =========================================================================
    # Frequencies
    # =========================================================================

    @staticmethod
    def _phoneme_frequencies(analyses: List[WordAnalysis]) -> Dict[str, float]:
        return _normalize(Counter(p for a in analyses for p in a.phonemes))

    @staticmethod
    def _smooth(frequencies: Dict[str, float], factor: float) -> Dict[str, float]:
        """
        Gusein-Zade smoothing: blend empirical frequencies with the rank
        distribution w(r) = ln(n + 1) - ln(r), then renormalize.
        """
        if not frequencies:
            return frequencies
        ranked = sorted(frequencies, key=lambda p: -frequencies[p])
        n = len(ranked)
        raw = [math.log(n + 1) - math.log(r) for r in range(1, n + 1)]
        total = sum(raw)
        if total <= 0:
            return frequencies
        rank_weights = {p: w / total for p, w in zip(ranked, raw)}

        factor = min(max(factor, 0.0), 1.0)
        smoothed = {
            p: (1.0 - factor) * f + factor * rank_weights.get(p, 0.0)
            for p, f in frequencies.items()
        }
        norm = sum(smoothed.values())
        return {p: v / norm for p, v in smoothed.items()} if norm > 0 else smoothed

    @staticmethod
    def _positional_frequencies(analyses: List[WordAnalysis]) -> Dict[str, Dict[str, float]]:
        counts: Dict[str, Counter] = defaultdict(Counter)
        for analysis in analyses:
            for position, phonemes in analysis.phoneme_positions.items():
                for phoneme in phonemes:
                    counts[phoneme][position] += 1
        return _normalize_table(counts)

    def _vowel_transitions(self, analyses: List[WordAnalysis]) -> Dict[str, Dict[str, float]]:
        counts: Dict[str, Counter] = defaultdict(Counter)
        for analysis in analyses:
            vowels = [p for p in analysis.phonemes if self.word_analyzer.is_vowel(p)]
            for a, b in zip(vowels, vowels[1:]):
                counts[a][b] += 1
        return _normalize_table(counts)

    @staticmethod
    def _phoneme_transitions(analyses: List[WordAnalysis]) -> Dict[str, Dict[str, float]]:
        counts: Dict[str, Counter] = defaultdict(Counter)
        for analysis in analyses:
            for a, b in analysis.phoneme_transitions:
                counts[a][b] += 1
        return _normalize_table(counts)

    # =========================================================================
    # Recommendations
    # =========================================================================

    def _recommended_budget(self, average_complexity: float) -> int:
        scale = float(self._cfg.get('budget_scale', 1.2))
        low = int(self._cfg.get('budget_min', 3))
        high = int(self._cfg.get('budget_max', 15))
        return max(low, min(int(round(average_complexity * scale)), high))

    def _recommended_templates(self, distribution: Dict[str, float]) -> List[str]:
        threshold = float(self._cfg.get('template_min_frequency', 0.1))
        limit = int(self._cfg.get('template_limit', 5))
        frequent = [p for p, f in sorted(distribution.items(), key=lambda kv: -kv[1]) if f > threshold]
        templates = frequent[:limit]
        for required in ('CV', 'CVC'):
            if required not in templates:
                templates.append(required)
        return templates

    @staticmethod
    def _recommended_probability(patterns: Dict[str, float], analyses: List[WordAnalysis],
                                 has_feature, diversity_scale: float) -> float:
        """Share of words showing the feature, nudged up by pattern diversity."""
        probability = sum(1 for a in analyses if has_feature(a)) / len(analyses)
        if patterns:
            probability += (len(patterns) / diversity_scale) * 0.1
        return max(0.0, min(probability, MAX_RECOMMENDED_PROBABILITY))

    @staticmethod
    def _hiatus_from_templates(templates: List[SyllableTemplate]) -> float:
        total_weight = sum(t.probability for t in templates)
        if total_weight <= 0:
            return 0.0
        return sum(t.hiatus_probability * t.probability for t in templates) / total_weight


__all__ = ['WordAnalyzer', 'Analyzer', 'PATTERN_COMPLEXITY']

#!/usr/bin/env python3
"""
Corpus Analysis Results
=======================
Result types produced by wordkit.analyzer:
- WordAnalysis: structure of a single word
- Analysis: statistics aggregated over a corpus, with helpers that turn
  them into generator settings (weights, harmony, syllable counts)
"""

import json
import math
from collections import Counter
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Tuple

from .generators.vowel_harmony import VowelHarmony

Table = Dict[str, Dict[str, float]]


def _top(frequencies: Dict, count: int) -> List:
    return [key for key, _ in sorted(frequencies.items(), key=lambda kv: -kv[1])[:count]]


def _entropy(frequencies: Dict[str, float]) -> float:
    return -sum(f * math.log2(f) for f in frequencies.values() if f > 0)


# =============================================================================
# Single Word
# =============================================================================

@dataclass
class WordAnalysis:
    """Structure of one analyzed word."""
    word: str
    phonemes: List[str]
    syllables: List[List[str]]
    syllable_patterns: List[str]
    consonant_count: int
    vowel_count: int
    clusters: List[str] = field(default_factory=list)
    hiatus_sequences: List[str] = field(default_factory=list)
    gemination_sequences: List[str] = field(default_factory=list)
    vowel_lengthening_sequences: List[str] = field(default_factory=list)
    complexity_score: int = 0
    # position ('initial' / 'medial' / 'final') -> phonemes found there
    phoneme_positions: Dict[str, List[str]] = field(default_factory=dict)
    phoneme_transitions: List[Tuple[str, str]] = field(default_factory=list)
    bigrams: List[str] = field(default_factory=list)
    trigrams: List[str] = field(default_factory=list)

    @property
    def syllable_count(self) -> int:
        return len(self.syllables)

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    @property
    def hiatus_count(self) -> int:
        return len(self.hiatus_sequences)

    @property
    def has_clusters(self) -> bool:
        return bool(self.clusters)

    @property
    def has_hiatus(self) -> bool:
        return bool(self.hiatus_sequences)

    @property
    def has_gemination(self) -> bool:
        return bool(self.gemination_sequences)

    @property
    def has_vowel_lengthening(self) -> bool:
        return bool(self.vowel_lengthening_sequences)

    @property
    def consonant_vowel_ratio(self) -> float:
        return self.consonant_count / self.vowel_count if self.vowel_count else 0.0

    @property
    def average_syllable_complexity(self) -> float:
        return self.complexity_score / self.syllable_count if self.syllable_count else 0.0

    def dominant_syllable_pattern(self) -> str:
        if not self.syllable_patterns:
            return 'CV'
        return Counter(self.syllable_patterns).most_common(1)[0][0]

    def summary(self) -> str:
        return (f"{self.syllable_count} syllables, {self.consonant_count}C/{self.vowel_count}V, "
                f"{self.cluster_count} clusters, {self.hiatus_count} hiatus, "
                f"complexity: {self.complexity_score}")


# =============================================================================
# Corpus
# =============================================================================

@dataclass
class Analysis:
    """Aggregated statistics of a word corpus."""
    word_count: int = 0
    phoneme_frequencies: Dict[str, float] = field(default_factory=dict)
    positional_frequencies: Table = field(default_factory=dict)
    syllable_count_distribution: Dict[int, float] = field(default_factory=dict)
    syllable_pattern_distribution: Dict[str, float] = field(default_factory=dict)
    cluster_patterns: Dict[str, float] = field(default_factory=dict)
    hiatus_patterns: Dict[str, float] = field(default_factory=dict)
    gemination_patterns: Dict[str, float] = field(default_factory=dict)
    vowel_lengthening_patterns: Dict[str, float] = field(default_factory=dict)
    complexity_distribution: Dict[int, float] = field(default_factory=dict)
    average_complexity: float = 0.0
    average_syllable_count: float = 0.0
    consonant_vowel_ratio: float = 0.0
    recommended_budget: int = 6
    recommended_templates: List[str] = field(default_factory=list)
    recommended_hiatus_probability: float = 0.2
    recommended_gemination_probability: float = 0.0
    dominant_patterns: List[str] = field(default_factory=list)
    vowel_transitions: Table = field(default_factory=dict)
    phoneme_transitions: Table = field(default_factory=dict)
    bigram_frequencies: Dict[str, float] = field(default_factory=dict)
    trigram_frequencies: Dict[str, float] = field(default_factory=dict)

    # --- Rankings ---

    def most_frequent_phonemes(self, count: int = 10) -> List[str]:
        return _top(self.phoneme_frequencies, count)

    def most_frequent_patterns(self, count: int = 5) -> List[str]:
        return _top(self.syllable_pattern_distribution, count)

    def most_frequent_clusters(self, count: int = 10) -> List[str]:
        return _top(self.cluster_patterns, count)

    def most_frequent_bigrams(self, count: int = 10) -> List[str]:
        return _top(self.bigram_frequencies, count)

    def most_frequent_trigrams(self, count: int = 10) -> List[str]:
        return _top(self.trigram_frequencies, count)

    def most_common_followers(self, phoneme: str, count: int = 5) -> List[Tuple[str, float]]:
        followers = self.phoneme_transitions.get(phoneme, {})
        return sorted(followers.items(), key=lambda kv: -kv[1])[:count]

    def preferred_transitions(self, vowel: str, count: int = 3) -> List[Tuple[str, float]]:
        following = self.vowel_transitions.get(vowel, {})
        return sorted(following.items(), key=lambda kv: -kv[1])[:count]

    def _positional(self, position: str, threshold: float) -> List[str]:
        found = [
            phoneme for phoneme, positions in self.positional_frequencies.items()
            if positions.get(position, 0.0) >= threshold
        ]
        return sorted(found, key=lambda p: -self.positional_frequencies[p][position])

    def initial_phonemes(self, threshold: float = 0.1) -> List[str]:
        return self._positional('initial', threshold)

    def final_phonemes(self, threshold: float = 0.1) -> List[str]:
        return self._positional('final', threshold)

    # --- Measures ---

    def transition_probability(self, from_phoneme: str, to_phoneme: str) -> float:
        return self.phoneme_transitions.get(from_phoneme, {}).get(to_phoneme, 0.0)

    def bigram_frequency(self, bigram: str) -> float:
        return self.bigram_frequencies.get(bigram, 0.0)

    def trigram_frequency(self, trigram: str) -> float:
        return self.trigram_frequencies.get(trigram, 0.0)

    def phoneme_diversity(self) -> float:
        """Shannon entropy (bits) of the phoneme distribution."""
        return _entropy(self.phoneme_frequencies)

    def ngram_diversity(self) -> Dict[str, float]:
        return {
            'bigram': _entropy(self.bigram_frequencies),
            'trigram': _entropy(self.trigram_frequencies),
        }

    def vowel_transition_diversity(self) -> float:
        entropies = [_entropy(t) for t in self.vowel_transitions.values() if t]
        return sum(entropies) / len(entropies) if entropies else 0.0

    def structural_complexity(self) -> float:
        return (len(self.cluster_patterns) * 0.3
                + len(self.hiatus_patterns) * 0.2
                + len(self.syllable_pattern_distribution) * 0.1
                + self.average_complexity * 0.1)

    def complexity_preference(self) -> str:
        if self.average_complexity < 4.0:
            return 'simple'
        if self.average_complexity < 8.0:
            return 'moderate'
        return 'complex'

    def vowel_harmony_strength(self) -> str:
        """none / weak / moderate / strong, from the share of dominant vowel transitions."""
        frequencies = [f for t in self.vowel_transitions.values() for f in t.values()]
        if not frequencies:
            return 'none'
        ratio = sum(1 for f in frequencies if f > 0.6) / len(frequencies)
        if ratio < 0.2:
            return 'none'
        if ratio < 0.4:
            return 'weak'
        if ratio < 0.7:
            return 'moderate'
        return 'strong'

    def is_valid(self) -> bool:
        if (sum(self.phoneme_frequencies.values()) <= 0
                or sum(self.syllable_pattern_distribution.values()) <= 0
                or sum(self.syllable_count_distribution.values()) <= 0):
            return False
        if self.average_complexity < 0 or self.average_syllable_count < 0:
            return False
        return 0 <= self.recommended_budget <= 50 and 0 <= self.recommended_hiatus_probability <= 1

    # --- Generator settings ---

    def optimal_syllable_weights(self) -> Dict[int, float]:
        total = sum(self.syllable_count_distribution.values())
        if total == 0:
            return {2: 1.0, 3: 1.0}
        return {count: freq / total for count, freq in self.syllable_count_distribution.items()}

    def generate_vowel_harmony(self, strength: float = 0.7, threshold: float = 0.1) -> VowelHarmony:
        """Harmony rules from the vowel transitions seen at least `threshold` often."""
        rules = {}
        for vowel, following in self.vowel_transitions.items():
            significant = {v: f for v, f in following.items() if f >= threshold}
            if significant:
                rules[vowel] = significant
        return VowelHarmony(rules=rules, strength=strength)

    # --- Output ---

    def summary(self) -> str:
        lines = [
            "=== Language Analysis Summary ===",
            f"Words analyzed: {self.word_count}",
            f"Phoneme count: {len(self.phoneme_frequencies)}",
            f"Average syllable count: {self.average_syllable_count:.2f}",
            f"Average complexity: {self.average_complexity:.2f}",
            f"Consonant/vowel ratio: {self.consonant_vowel_ratio:.2f}",
            f"Complexity preference: {self.complexity_preference()}",
            f"Recommended budget: {self.recommended_budget}",
            "",
            f"Most frequent phonemes: {', '.join(self.most_frequent_phonemes(5))}",
            f"Most frequent patterns: {', '.join(self.most_frequent_patterns(3))}",
            f"Most frequent clusters: {', '.join(self.most_frequent_clusters(3))}",
            "",
            f"Structural complexity: {self.structural_complexity():.2f}",
            f"Phoneme diversity: {self.phoneme_diversity():.2f}",
            f"Vowel harmony: {self.vowel_harmony_strength()}",
        ]
        return '\n'.join(lines)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Analysis':
        data = dict(data)
        # JSON object keys are strings
        for key in ('syllable_count_distribution', 'complexity_distribution'):
            if key in data:
                data[key] = {int(k): float(v) for k, v in data[key].items()}
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> 'Analysis':
        return cls.from_dict(json.loads(text))


__all__ = ['WordAnalysis', 'Analysis']

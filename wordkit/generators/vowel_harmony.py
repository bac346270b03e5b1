#!/usr/bin/env python3
"""
Vowel Harmony
=============
Preference table steering which vowel follows which.

The effective weight of a transition blends the rule's preference with the
default preference according to ``strength``:

    weight = default + strength * (preference - default)

so strength 0 disables harmony and strength 1 applies rules verbatim.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from .entropy import get_rng

# Thresholds used when describing a rule table
STRONG_PREFERENCE = 0.7
STRONG_AVOIDANCE = 0.3
SUMMARY_PREFERRED = 0.6
SUMMARY_AVOIDED = 0.4


@dataclass
class VowelHarmony:
    """Vowel-to-vowel transition preferences with a global strength."""
    rules: Dict[str, Dict[str, float]] = field(default_factory=dict)
    strength: float = 0.0
    default_preference: float = 0.5

    def __post_init__(self):
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Harmony strength must be between 0 and 1, got {self.strength}")
        self.rules = {k: dict(v) for k, v in self.rules.items()}

    @property
    def active(self) -> bool:
        return self.strength > 0.0 and bool(self.rules)

    def add_rule(self, from_vowel: str, to_vowel: str, preference: float) -> None:
        self.rules.setdefault(from_vowel, {})[to_vowel] = float(preference)

    def with_strength(self, strength: float) -> 'VowelHarmony':
        return replace(self, strength=strength)

    def get_transition_weight(self, from_vowel: str, to_vowel: str) -> float:
        if self.strength == 0.0:
            return self.default_preference
        preference = self.rules.get(from_vowel, {}).get(to_vowel)
        if preference is None:
            return self.default_preference
        return self.default_preference + self.strength * (preference - self.default_preference)

    def select_vowel(self, from_vowel: Optional[str], available: Sequence[str]) -> str:
        """Pick the next vowel given the previous one (None at word start)."""
        if not available:
            raise ValueError("No vowels available for harmony selection")
        rng = get_rng()
        if from_vowel is None or self.strength == 0.0:
            return rng.choice(list(available))

        weighted = [(v, self.get_transition_weight(from_vowel, v)) for v in available]
        if sum(w for _, w in weighted) <= 0.0:
            return rng.choice(list(available))
        return rng.weighted_choice(weighted)

    def preferred_vowels(self, from_vowel: str, count: int = 3) -> List[str]:
        prefs = self.rules.get(from_vowel, {})
        return [v for v, _ in sorted(prefs.items(), key=lambda kv: -kv[1])[:count]]

    def avoided_vowels(self, from_vowel: str, count: int = 3) -> List[str]:
        prefs = self.rules.get(from_vowel, {})
        return [v for v, _ in sorted(prefs.items(), key=lambda kv: kv[1])[:count]]

    def analyze_consistency(self) -> Dict[str, float]:
        """Share of rules that express a strong preference or avoidance."""
        if not self.rules:
            return {'consistency': 0.0}

        weights = [w for prefs in self.rules.values() for w in prefs.values()]
        strong = sum(1 for w in weights if w > STRONG_PREFERENCE)
        avoid = sum(1 for w in weights if w < STRONG_AVOIDANCE)
        total = len(weights)
        return {
            'consistency': (strong + avoid) / total if total else 0.0,
            'total_rules': float(total),
            'strong_preferences': float(strong),
            'strong_avoidances': float(avoid),
        }

    def summary(self) -> str:
        if not self.active:
            return f"Vowel harmony disabled (strength: {self.strength})"

        lines = [
            f"Vowel Harmony (strength: {self.strength})",
            f"Rules defined for: {', '.join(self.rules)}",
        ]
        for from_vowel, prefs in self.rules.items():
            preferred = [v for v, w in prefs.items() if w > SUMMARY_PREFERRED]
            avoided = [v for v, w in prefs.items() if w < SUMMARY_AVOIDED]
            if preferred:
                lines.append(f"  {from_vowel} -> {', '.join(preferred)} (preferred)")
            if avoided:
                lines.append(f"  {from_vowel} -/> {', '.join(avoided)} (avoided)")
        return '\n'.join(lines)

    def to_dict(self) -> Dict:
        return {
            'strength': self.strength,
            'default_preference': self.default_preference,
            'rules': {k: dict(v) for k, v in self.rules.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'VowelHarmony':
        rules = {
            str(k): {str(v): float(w) for v, w in (prefs or {}).items()}
            for k, prefs in (data.get('rules') or {}).items()
        }
        return cls(
            rules=rules,
            strength=float(data.get('strength', 0.0)),
            default_preference=float(data.get('default_preference', 0.5)),
        )


__all__ = ['VowelHarmony']

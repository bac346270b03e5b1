#!/usr/bin/env python3
"""
Romanization Map
================
Phoneme-to-spelling table used to turn generated phoneme lists into
readable words, and to decode romanized text back into phonemes.

Usage:
    from wordkit.generators.romanization import RomanizationMap

    rmap = RomanizationMap({'θ': 'th', 'ɑ': 'a'})
    rmap.romanize(['θ', 'ɑ'])   # 'tha'
    rmap.decode('tha')          # ['θ', 'ɑ']
"""

from typing import Dict, Iterable, List, Optional

# Longest romanization considered when decoding
MAX_MATCH_LENGTH = 3


class RomanizationMap:
    """Bidirectional phoneme <-> romanization table."""

    def __init__(self, mappings: Optional[Dict[str, str]] = None):
        self.mappings: Dict[str, str] = dict(mappings or {})

    def __len__(self):
        return len(self.mappings)

    def __contains__(self, phoneme: str) -> bool:
        return phoneme in self.mappings

    def __repr__(self):
        return f"RomanizationMap({self.mappings!r})"

    def add_mapping(self, phoneme: str, romanization: str) -> None:
        self.mappings[phoneme] = romanization

    def update(self, mappings: Dict[str, str]) -> None:
        self.mappings.update(mappings)

    def copy(self) -> 'RomanizationMap':
        return RomanizationMap(self.mappings)

    def romanize_symbol(self, phoneme: str) -> str:
        return self.mappings.get(phoneme, phoneme)

    def romanize(self, phonemes: Iterable[str]) -> str:
        """Join phonemes, spelling each through the map (unmapped pass through)."""
        return ''.join(self.romanize_symbol(p) for p in phonemes)

    def reverse_mappings(self) -> Dict[str, str]:
        """Romanization -> phoneme. The first phoneme declared for a spelling wins."""
        reverse: Dict[str, str] = {}
        for phoneme, roman in self.mappings.items():
            reverse.setdefault(roman, phoneme)
        return reverse

    def decode(self, text: str) -> List[str]:
        """
        Decode romanized text into phonemes.

        Greedy longest match: at each position try spellings of length 3,
        2, then 1. Characters with no mapping pass through unchanged.
        """
        reverse = self.reverse_mappings()
        phonemes = []
        i = 0
        while i < len(text):
            for length in range(MAX_MATCH_LENGTH, 0, -1):
                chunk = text[i:i + length]
                if len(chunk) == length and chunk in reverse:
                    phonemes.append(reverse[chunk])
                    i += length
                    break
            else:
                phonemes.append(text[i])
                i += 1
        return phonemes


__all__ = ['RomanizationMap', 'MAX_MATCH_LENGTH']

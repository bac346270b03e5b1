#!/usr/bin/env python3
"""
Phonotactic Sequence Helpers
============================
Pure functions over phoneme sequences shared by the generator and the
corpus analyzer: syllabification, consonant and vowel runs, and
gemination/lengthening detection.

Every function takes the phoneme list plus an ``is_vowel`` predicate so
the caller decides how symbols are classified.
"""

from typing import Callable, List, Sequence

IsVowel = Callable[[str], bool]


def syllable_pattern(syllable: Sequence[str], is_vowel: IsVowel) -> str:
    """CV skeleton of a phoneme sequence (e.g. ['t', 'a', 'n'] -> 'CVC')."""
    return ''.join('V' if is_vowel(p) else 'C' for p in syllable)


def detect_syllables(phonemes: Sequence[str], is_vowel: IsVowel) -> List[List[str]]:
    """
    Split a phoneme sequence into syllables.

    Adjacent vowels share a nucleus. A single consonant between nuclei
    opens the next syllable (V.CV); in a longer consonant run the first
    consonant closes the previous syllable (VC.CV).
    """
    phonemes = list(phonemes)
    if len(phonemes) <= 2:
        return [phonemes] if phonemes else []

    nuclei = []
    i = 0
    while i < len(phonemes):
        if is_vowel(phonemes[i]):
            start = i
            while i < len(phonemes) and is_vowel(phonemes[i]):
                i += 1
            nuclei.append((start, i))
        else:
            i += 1

    if len(nuclei) <= 1:
        return [phonemes]

    syllables = []
    start = 0
    for (_, end), (next_start, _) in zip(nuclei, nuclei[1:]):
        gap = next_start - end
        split = end if gap <= 1 else end + 1
        syllables.append(phonemes[start:split])
        start = split
    syllables.append(phonemes[start:])

    return [s for s in syllables if s]


def count_syllables(phonemes: Sequence[str], is_vowel: IsVowel) -> int:
    return len(detect_syllables(phonemes, is_vowel))


def runs(phonemes: Sequence[str], predicate: Callable[[str], bool]) -> List[List[str]]:
    """Maximal runs of two or more phonemes satisfying the predicate."""
    found = []
    i = 0
    while i < len(phonemes):
        if predicate(phonemes[i]):
            j = i
            while j < len(phonemes) and predicate(phonemes[j]):
                j += 1
            if j - i > 1:
                found.append(list(phonemes[i:j]))
            i = j
        else:
            i += 1
    return found


def _repeats(phonemes: Sequence[str], predicate: Callable[[str], bool]) -> List[str]:
    found = []
    i = 0
    while i < len(phonemes) - 1:
        current = phonemes[i]
        if predicate(current) and phonemes[i + 1] == current:
            j = i + 2
            while j < len(phonemes) and phonemes[j] == current:
                j += 1
            found.append(current * (j - i))
            i = j
        else:
            i += 1
    return found


def detect_gemination(phonemes: Sequence[str], is_vowel: IsVowel) -> List[str]:
    """Runs of an identical consonant (e.g. 'nn')."""
    return _repeats(phonemes, lambda p: not is_vowel(p))


def detect_vowel_lengthening(phonemes: Sequence[str], is_vowel: IsVowel) -> List[str]:
    """Runs of an identical vowel (e.g. 'aa')."""
    return _repeats(phonemes, is_vowel)


def count_adjacent_pairs(phonemes: Sequence[str], is_vowel: IsVowel, vowels: bool) -> int:
    """Number of adjacent vowel-vowel (or consonant-consonant) pairs."""
    kinds = [is_vowel(p) for p in phonemes]
    return sum(1 for a, b in zip(kinds, kinds[1:]) if a == vowels and b == vowels)


def max_vowel_run(phonemes: Sequence[str], is_vowel: IsVowel) -> int:
    longest = current = 0
    for p in phonemes:
        current = current + 1 if is_vowel(p) else 0
        longest = max(longest, current)
    return longest


def has_adjacent_identical_vowels(phonemes: Sequence[str], is_vowel: IsVowel) -> bool:
    return any(a == b and is_vowel(a) for a, b in zip(phonemes, phonemes[1:]))


__all__ = [
    'syllable_pattern',
    'runs',
    'detect_syllables',
    'count_syllables',
    'detect_gemination',
    'detect_vowel_lengthening',
    'count_adjacent_pairs',
    'max_vowel_run',
    'has_adjacent_identical_vowels',
]

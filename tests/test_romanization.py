"""
Tests for Romanization and Entropy
==================================
Tests for RomanizationMap (wordkit/generators/romanization.py) and the
shared random source (wordkit/generators/entropy.py).
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordkit.generators import RomanizationMap, TrueRandom, get_rng, set_seed


class TestRomanizationMap:
    """Tests for romanize/decode."""

    @pytest.fixture
    def rmap(self):
        return RomanizationMap({'θ': 'th', 'ʃ': 'sh', 'ŋ': 'ng', 'ɑ': 'a'})

    def test_romanize(self, rmap):
        """Test spelling of mapped and unmapped phonemes."""
        assert rmap.romanize(['θ', 'ɑ', 'ŋ', 'o']) == 'thango'

    def test_decode_longest_match(self, rmap):
        """Test that multi-character spellings win over single characters."""
        assert rmap.decode('thango') == ['θ', 'ɑ', 'ŋ', 'o']

    def test_decode_passes_unmapped(self, rmap):
        """Test that unmapped characters pass through."""
        assert rmap.decode('xyz') == ['x', 'y', 'z']
        assert rmap.decode('') == []

    def test_three_character_spelling(self):
        """Test matching of three-character spellings."""
        rmap = RomanizationMap({'t͡ʃ': 'tch', 't': 't'})
        assert rmap.decode('tcha') == ['t͡ʃ', 'a']
        assert rmap.decode('ta') == ['t', 'a']

    def test_first_declared_wins(self):
        """Test reverse mapping when two phonemes share a spelling."""
        rmap = RomanizationMap({'ɑ': 'a', 'a': 'a'})
        assert rmap.reverse_mappings() == {'a': 'ɑ'}
        assert rmap.decode('a') == ['ɑ']

    def test_mutation_helpers(self, rmap):
        """Test add_mapping, update, copy and container protocol."""
        copy = rmap.copy()
        copy.add_mapping('ʒ', 'zh')
        copy.update({'ɲ': 'ny'})
        assert 'ʒ' in copy and 'ɲ' in copy
        assert 'ʒ' not in rmap
        assert len(copy) == len(rmap) + 2
        assert copy.romanize_symbol('x') == 'x'


class TestEntropy:
    """Tests for the seedable random source."""

    def test_seeded_is_reproducible(self):
        """Test that the same seed replays the same stream."""
        a, b = TrueRandom(42), TrueRandom(42)
        assert [a.randint(0, 1000) for _ in range(10)] == [b.randint(0, 1000) for _ in range(10)]
        assert a.seeded

    def test_set_seed_global(self):
        """Test that set_seed controls get_rng()."""
        set_seed(3)
        first = [get_rng().random() for _ in range(5)]
        set_seed(3)
        assert [get_rng().random() for _ in range(5)] == first
        set_seed(None)
        assert not get_rng().seeded

    def test_weighted_choice_skips_zero(self):
        """Test that zero-weight items are never chosen."""
        rng = TrueRandom(1)
        picks = {rng.weighted_choice([('a', 0.0), ('b', 1.0), ('c', 0.0)]) for _ in range(100)}
        assert picks == {'b'}

    def test_chance_bounds(self):
        """Test that chance() is exact at 0 and 1."""
        rng = TrueRandom(1)
        assert not any(rng.chance(0.0) for _ in range(50))
        assert all(rng.chance(1.0) for _ in range(50))

    def test_empty_sequences(self):
        """Test errors on empty input."""
        rng = TrueRandom(1)
        with pytest.raises(IndexError):
            rng.choice([])
        with pytest.raises(IndexError):
            rng.weighted_choice([])

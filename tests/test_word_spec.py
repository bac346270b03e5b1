"""
Tests for WordSpec
==================
Tests for syllable count policies, template selection and whole-word
validation in wordkit/generators/word_spec.py.
"""

import re
import pytest
import sys
from collections import Counter
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordkit.generators import (
    RomanizationMap,
    SyllableCountSpec,
    SyllableTemplate,
    WordSpec,
    set_seed,
)


@pytest.fixture(autouse=True)
def seeded():
    """Deterministic randomness per test."""
    set_seed(7)
    yield
    set_seed(None)


def make_spec(**kwargs):
    kwargs.setdefault('syllable_count', SyllableCountSpec.exact(2))
    kwargs.setdefault('templates', [SyllableTemplate('CV')])
    return WordSpec(**kwargs)


class TestSyllableCountSpec:
    """Tests for count policies."""

    def test_exact(self):
        """Test that exact always returns its count."""
        spec = SyllableCountSpec.exact(3)
        assert {spec.generate_count() for _ in range(20)} == {3}

    def test_range(self):
        """Test that range stays inside its bounds and reaches both ends."""
        spec = SyllableCountSpec.range(2, 4)
        counts = {spec.generate_count() for _ in range(200)}
        assert counts == {2, 3, 4}

    def test_weighted(self):
        """Test that weighted counts follow their weights."""
        spec = SyllableCountSpec.weighted({2: 1.0, 3: 0.0, 4: 3.0})
        counts = Counter(spec.generate_count() for _ in range(400))
        assert counts[3] == 0
        assert counts[4] > counts[2]
        assert spec.min == 2 and spec.max == 4

    @pytest.mark.parametrize("factory", [
        lambda: SyllableCountSpec.exact(0),
        lambda: SyllableCountSpec.range(3, 2),
        lambda: SyllableCountSpec.weighted({}),
        lambda: SyllableCountSpec.weighted({2: 0.0}),
        lambda: SyllableCountSpec.weighted({0: 1.0}),
    ])
    def test_invalid(self, factory):
        """Test that bad count policies raise ValueError."""
        with pytest.raises(ValueError):
            factory()

    def test_to_dict(self):
        """Test the config-style representation."""
        assert SyllableCountSpec.exact(2).to_dict() == {'exact': 2}
        assert SyllableCountSpec.range(1, 3).to_dict() == {'range': [1, 3]}
        assert SyllableCountSpec.weighted({2: 1.0}).to_dict() == {'weighted': {2: 1.0}}


class TestWordSpecBasics:
    """Tests for construction and helpers."""

    def test_requires_templates(self):
        """Test that a spec without templates is rejected."""
        with pytest.raises(ValueError):
            make_spec(templates=[])

    def test_invalid_starting_type(self):
        """Test that starting_type is validated."""
        with pytest.raises(ValueError):
            make_spec(starting_type='glide')

    def test_sequence_helpers(self):
        """Test required prefix/suffix decoding."""
        rmap = RomanizationMap({'θ': 'th'})
        spec = make_spec(starts_with='thra', ends_with='el')
        assert spec.has_sequence_constraints
        assert spec.required_prefix(rmap) == ['θ', 'r', 'a']
        assert spec.required_suffix(rmap) == ['e', 'l']
        assert not make_spec().has_sequence_constraints
        assert make_spec().required_prefix() == []


class TestSelectTemplate:
    """Tests for select_template()."""

    def test_position_pool(self):
        """Test that templates weighted for a position form the pool."""
        initial = SyllableTemplate('V', position_weights={'initial': 1.0})
        plain = SyllableTemplate('CV')
        spec = make_spec(templates=[initial, plain])
        assert {spec.select_template('initial').pattern for _ in range(30)} == {'V'}
        assert {spec.select_template('medial').pattern for _ in range(60)} == {'V', 'CV'}

    def test_probability_weights(self):
        """Test that template probabilities drive selection."""
        spec = make_spec(templates=[SyllableTemplate('CV', probability=9.0),
                                    SyllableTemplate('CVC', probability=1.0)])
        counts = Counter(spec.select_template('medial').pattern for _ in range(500))
        assert counts['CV'] > counts['CVC'] * 4

    def test_cluster_cost_penalty(self):
        """Test that expensive cluster templates are penalized."""
        spec = make_spec(templates=[SyllableTemplate('CV'), SyllableTemplate('CCV')],
                         cost_penalty_factor=1.0)
        counts = Counter(spec.select_template('medial', cluster_cost=50.0).pattern
                         for _ in range(500))
        assert counts['CCV'] < 50

    def test_explicit_pool(self):
        """Test that an explicit template list replaces the WordSpec templates."""
        spec = make_spec(templates=[SyllableTemplate('CV')])
        chosen = spec.select_template('medial', templates=[SyllableTemplate('CVC')])
        assert chosen.pattern == 'CVC'

    def test_all_zero_weights_still_select(self):
        """Test that zero-probability templates fall back to a uniform choice."""
        spec = make_spec(templates=[SyllableTemplate('CV', probability=0.0)])
        assert spec.select_template('medial').pattern == 'CV'


class TestValidateWord:
    """Tests for validate_word()."""

    def test_constraints(self):
        """Test forbidden word-level sequences."""
        spec = make_spec(constraints=['nm', '^k'])
        assert spec.validate_word(list('tana'))
        assert not spec.validate_word(list('tanma'))
        assert not spec.validate_word(list('kana'))

    def test_malformed_regex(self):
        """Test that an invalid constraint raises re.error."""
        spec = make_spec(constraints=['[a-'])
        with pytest.raises(re.error):
            spec.validate_word(list('tana'))

    def test_thematic_vowel(self):
        """Test that the last vowel must be the thematic vowel."""
        spec = make_spec(thematic_vowel='o')
        assert spec.validate_word(list('tanon'))
        assert not spec.validate_word(list('tonan'))
        assert not spec.validate_word(list('tnk'), vowels=['a', 'o'])

    def test_thematic_vowel_romanized(self):
        """Test that the thematic vowel may be given in romanized form."""
        rmap = RomanizationMap({'ɑ': 'a'})
        spec = make_spec(thematic_vowel='a')
        assert spec.validate_word(['t', 'e', 'n', 'ɑ'], romanizer=rmap, vowels=['e', 'ɑ'])

    def test_prefix_and_suffix(self):
        """Test positional prefix/suffix matching."""
        spec = make_spec(starts_with='ka', ends_with='el')
        assert spec.validate_word(list('kamiel'))
        assert not spec.validate_word(list('tamiel'))
        assert not spec.validate_word(list('kamia'))
        assert not spec.validate_word(list('e'))

"""
Tests for SyllableTemplate
==========================
Tests for single-syllable generation, cluster whitelists, hiatus and the
simplification fallback in wordkit/generators/syllable_template.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordkit.generators import PhonemeSet, RomanizationMap, SyllableTemplate, set_seed
from wordkit.generators.syllable_template import collapse_pattern


@pytest.fixture(autouse=True)
def seeded():
    """Deterministic randomness per test."""
    set_seed(99)
    yield
    set_seed(None)


@pytest.fixture
def ps():
    """Small inventory with a few cluster-friendly consonants."""
    return PhonemeSet(['t', 'r', 'p', 'l', 'k', 'n', 's'], ['a', 'e', 'i', 'o'])


class TestStructure:
    """Tests for pattern properties."""

    def test_collapse_pattern(self):
        """Test that repeated symbols collapse."""
        assert collapse_pattern('CCV') == 'CV'
        assert collapse_pattern('CVCC') == 'CVC'
        assert collapse_pattern('CCVCC') == 'CVC'
        assert collapse_pattern('CV') == 'CV'

    def test_cluster_flags(self):
        """Test has_cluster and has_complex_coda."""
        assert SyllableTemplate('CCV').has_cluster
        assert not SyllableTemplate('CCV').has_complex_coda
        assert SyllableTemplate('CVCC').has_complex_coda
        assert not SyllableTemplate('CVC').has_cluster

    def test_simplified(self):
        """Test that simplified() keeps everything but the pattern."""
        template = SyllableTemplate('CCV', hiatus_probability=0.3, probability=2.0)
        simple = template.simplified()
        assert simple.pattern == 'CV'
        assert simple.hiatus_probability == 0.3
        assert simple.probability == 2.0

    def test_allows_hiatus(self):
        """Test allows_hiatus."""
        assert SyllableTemplate('CV', hiatus_probability=0.1).allows_hiatus
        assert not SyllableTemplate('CV').allows_hiatus

    def test_invalid_probability(self):
        """Test that probabilities outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            SyllableTemplate('CV', hiatus_probability=1.5)
        with pytest.raises(ValueError):
            SyllableTemplate('CV', probability=-1.0)

    def test_empty_pattern(self):
        """Test that an empty pattern is rejected."""
        with pytest.raises(ValueError):
            SyllableTemplate('')

    def test_templates_are_hashable(self):
        """Test that frozen templates can be used as dict keys."""
        template = SyllableTemplate('CV', constraints=['tt'], position_weights={'initial': 2.0})
        assert {template: 1}[template] == 1
        assert template.constraints == ('tt',)


class TestGenerate:
    """Tests for generate()."""

    def test_cv(self, ps):
        """Test that CV yields a consonant then a vowel."""
        for _ in range(30):
            syllable = SyllableTemplate('CV').generate(ps, 'initial')
            assert len(syllable) == 2
            assert syllable[0] in ps.consonants
            assert syllable[1] in ps.vowels

    def test_unknown_symbol(self, ps):
        """Test that an undefined pattern symbol raises immediately."""
        with pytest.raises(ValueError):
            SyllableTemplate('XV').generate(ps, 'initial')

    def test_custom_group(self, ps):
        """Test that custom symbols sample from their group."""
        ps.add_custom_group('F', ['f', 'v'])
        for _ in range(20):
            syllable = SyllableTemplate('FV').generate(ps, 'medial')
            assert syllable[0] in ('f', 'v')

    def test_hiatus_gives_two_different_vowels(self, ps):
        """Test that a certain hiatus produces two distinct vowels."""
        for _ in range(30):
            syllable = SyllableTemplate('CV', hiatus_probability=1.0).generate(ps, 'medial')
            assert len(syllable) == 3
            assert syllable[1] in ps.vowels and syllable[2] in ps.vowels
            assert syllable[1] != syllable[2]

    def test_hiatus_with_single_vowel(self):
        """Test that hiatus degrades to one vowel when no alternative exists."""
        ps = PhonemeSet(['t'], ['a'])
        assert SyllableTemplate('CV', hiatus_probability=1.0).generate(ps, 'medial') == ['t', 'a']

    def test_hiatus_with_one_weighted_vowel(self):
        """Test that hiatus yields a single vowel when no other vowel is weighted."""
        ps = PhonemeSet(['t'], ['a', 'e', 'i'])
        ps.add_weight('a', 3.0)
        template = SyllableTemplate('V', hiatus_probability=1.0)
        for _ in range(50):
            assert template.generate(ps, 'medial') == ['a']

    def test_hiatus_scale_zero(self, ps):
        """Test that a zero hiatus scale suppresses hiatus."""
        template = SyllableTemplate('CV', hiatus_probability=1.0)
        for _ in range(20):
            assert len(template.generate(ps, 'medial', hiatus_scale=0.0)) == 2

    def test_onset_whitelist(self, ps):
        """Test that CC onsets come from the whitelist."""
        template = SyllableTemplate('CCV', allowed_clusters=['tr', 'pl'])
        for _ in range(30):
            syllable = template.generate(ps, 'initial')
            assert tuple(syllable[:2]) in {('t', 'r'), ('p', 'l')}

    def test_romanized_whitelist(self):
        """Test that whitelist entries are decoded through the romanizer."""
        ps = PhonemeSet(['θ', 'r', 'n'], ['a'])
        rmap = RomanizationMap({'θ': 'th'})
        template = SyllableTemplate('CCV', allowed_clusters=['thr'])
        for _ in range(10):
            assert template.generate(ps, 'initial', romanizer=rmap)[:2] == ['θ', 'r']

    def test_coda_whitelist(self, ps):
        """Test that CC codas come from the coda whitelist."""
        template = SyllableTemplate('CVCC', allowed_coda_clusters=['nt', 'st'])
        for _ in range(30):
            syllable = template.generate(ps, 'final')
            assert tuple(syllable[2:]) in {('n', 't'), ('s', 't')}

    def test_single_coda_whitelist(self, ps):
        """Test that a single-consonant coda uses declared length-1 entries."""
        template = SyllableTemplate('CVC', allowed_coda_clusters=['n', 's'])
        for _ in range(30):
            assert template.generate(ps, 'final')[-1] in ('n', 's')

    def test_unusable_whitelist_falls_back(self, ps):
        """Test that an unusable whitelist ends in the simplified pattern."""
        template = SyllableTemplate('CCV', allowed_clusters=['zv'])
        syllable = template.generate(ps, 'initial')
        assert len(syllable) == 2
        assert syllable[0] in ps.consonants
        assert syllable[1] in ps.vowels

    def test_cluster_without_whitelist_is_distinct(self, ps):
        """Test that direct cluster sampling avoids repeating a consonant."""
        for _ in range(30):
            syllable = SyllableTemplate('CCV').generate(ps, 'initial')
            assert syllable[0] != syllable[1]

    def test_constraints_respected(self, ps):
        """Test that syllables matching a constraint are retried."""
        template = SyllableTemplate('CV', constraints=['^t'])
        for _ in range(30):
            assert template.generate(ps, 'initial')[0] != 't'


class TestValidate:
    """Tests for validate()."""

    def test_constraint_rejects(self):
        """Test regex constraint matching."""
        template = SyllableTemplate('CV', constraints=['ka'])
        assert not template.validate(['k', 'a'])
        assert template.validate(['t', 'a'])

    def test_onset_not_in_whitelist(self):
        """Test that an undeclared onset cluster is rejected."""
        template = SyllableTemplate('CCV', allowed_clusters=['tr'])
        assert template.validate(['t', 'r', 'a'])
        assert not template.validate(['k', 'r', 'a'])

    def test_coda_not_in_whitelist(self):
        """Test that an undeclared coda cluster is rejected."""
        template = SyllableTemplate('CVCC', allowed_coda_clusters=['nt'])
        assert template.validate(['t', 'a', 'n', 't'])
        assert not template.validate(['t', 'a', 'k', 's'])

    def test_malformed_regex_propagates(self):
        """Test that a broken constraint raises re.error."""
        import re
        template = SyllableTemplate('CV', constraints=['(unclosed'])
        with pytest.raises(re.error):
            template.validate(['t', 'a'])

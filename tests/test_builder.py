"""
Tests for GeneratorBuilder
==========================
Tests for fluent construction, build-time validation, analysis-driven
configuration and the bundled YAML languages in
wordkit/generators/builder.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordkit.generators import (
    GenerationMode,
    GeneratorBuilder,
    RomanizationMap,
    SyllableCountSpec,
    VowelHarmony,
    list_languages,
    set_seed,
)
from wordkit.analyzer import Analyzer


@pytest.fixture(autouse=True)
def seeded():
    set_seed(31)
    yield
    set_seed(None)


@pytest.fixture
def basic():
    """Minimal valid builder."""
    return (GeneratorBuilder.create()
            .with_phonemes(['t', 'n', 'k'], ['a', 'e', 'i'])
            .with_syllable_patterns(['CV'])
            .with_syllable_count(SyllableCountSpec.exact(2)))


class TestBuildValidation:
    """Tests for the construction contract enforced by build()."""

    def test_missing_phonemes(self):
        """Test that build() requires phonemes."""
        with pytest.raises(ValueError):
            GeneratorBuilder.create().with_syllable_patterns(['CV']).build()

    def test_missing_templates(self):
        """Test that build() requires templates."""
        builder = (GeneratorBuilder.create()
                   .with_phonemes(['t'], ['a'])
                   .with_syllable_count(SyllableCountSpec.exact(1)))
        with pytest.raises(ValueError):
            builder.build()

    def test_missing_count(self):
        """Test that build() requires a syllable count."""
        builder = GeneratorBuilder.create().with_phonemes(['t'], ['a']).with_syllable_patterns(['CV'])
        with pytest.raises(ValueError):
            builder.build()

    def test_undefined_pattern_symbol(self, basic):
        """Test that an undefined pattern symbol is reported at build time."""
        with pytest.raises(ValueError, match="with_custom_group"):
            basic.with_syllable_patterns(['CV', 'FV']).build()

    def test_custom_group_pattern(self, basic):
        """Test that a defined custom group makes the pattern valid."""
        generator = basic.with_custom_group('F', ['f', 's']).with_syllable_patterns(['FV']).build()
        for _ in range(20):
            word = generator.generate()
            assert word[0] in 'fs' and word[2] in 'fs'

    def test_invalid_thematic_vowel(self, basic):
        """Test that the thematic vowel must be in the inventory."""
        with pytest.raises(ValueError):
            basic.with_thematic_vowel('o').build()

    def test_romanized_thematic_vowel(self):
        """Test that a romanized spelling of an inventory vowel is accepted."""
        generator = (GeneratorBuilder.create()
                     .with_phonemes(['t', 'n'], ['ɑ', 'e'])
                     .with_romanization({'ɑ': 'a'})
                     .with_syllable_patterns(['CV'])
                     .with_syllable_count(SyllableCountSpec.exact(2))
                     .with_thematic_vowel('a')
                     .build())
        for _ in range(10):
            assert generator.generate().endswith('a')

    def test_steps_needing_phonemes(self):
        """Test that inventory setters require phonemes first."""
        with pytest.raises(ValueError):
            GeneratorBuilder.create().with_weights({'t': 1.0})
        with pytest.raises(ValueError):
            GeneratorBuilder.create().with_custom_group('F', ['f'])


class TestFluentSetters:
    """Tests for the fluent configuration surface."""

    def test_grouped_phonemes(self):
        """Test C/V/custom keys in with_grouped_phonemes."""
        generator = (GeneratorBuilder.create()
                     .with_grouped_phonemes({'C': ['t'], 'V': ['a'], 'N': ['m', 'n']})
                     .with_syllable_patterns(['CVN'])
                     .with_syllable_count(SyllableCountSpec.exact(1))
                     .build())
        assert generator.generate() in ('tam', 'tan')

    def test_pattern_probabilities(self, basic):
        """Test that pattern probabilities become template probabilities."""
        generator = basic.with_syllable_pattern_probabilities({'CV': 2.0, 'CVC': 0.5}).build()
        probabilities = {t.pattern: t.probability for t in generator.word_spec.templates}
        assert probabilities == {'CV': 2.0, 'CVC': 0.5}

    def test_modes(self, basic):
        """Test mode switching."""
        assert basic.weighted_random_mode().build().mode == GenerationMode.WEIGHTED_RANDOM
        assert basic.random_mode().build().mode == GenerationMode.RANDOM
        generator = basic.sequential_mode(max_words=5).build()
        assert generator.mode == GenerationMode.SEQUENTIAL
        assert generator.max_words == 5

    def test_costs_and_probabilities(self, basic):
        """Test that cost and probability setters reach the generator."""
        generator = (basic
                     .with_cluster_cost(7.0)
                     .with_hiatus_cost(4.0)
                     .with_complex_coda_cost(3.0)
                     .with_vowel_lengthening_cost(0.5)
                     .with_hiatus_escalation(2.0)
                     .enable_vowel_lengthening()
                     .with_gemination_probability(0.25)
                     .build())
        assert generator.costs.cluster == 7.0
        assert generator.costs.hiatus == 4.0
        assert generator.costs.complex_coda == 3.0
        assert generator.costs.vowel_lengthening == 0.5
        assert generator.hiatus_escalation_factor == 2.0
        assert generator.vowel_lengthening_probability == 1.0
        assert generator.gemination_probability == 0.25

    def test_vowel_harmony_toggle(self, basic):
        """Test installing, adjusting and removing harmony."""
        harmony = VowelHarmony(rules={'a': {'e': 0.9}}, strength=0.4)
        generator = basic.with_vowel_harmony(harmony).with_vowel_harmony_strength(0.8).build()
        assert generator.vowel_harmony.strength == 0.8
        assert harmony.strength == 0.4
        assert basic.with_vowel_harmony(False).build().vowel_harmony is None

    def test_romanization_map_copied(self, basic):
        """Test that a RomanizationMap passed in is copied."""
        rmap = RomanizationMap({'t': 'd'})
        generator = basic.with_romanization(rmap).build()
        rmap.add_mapping('k', 'g')
        assert 'k' not in generator.romanizer


class TestAnalysisIntegration:
    """Tests for with_analysis / with_analysis_of_words."""

    CORPUS = ['tanaka', 'kinata', 'nakita', 'tatana', 'kanna']

    def test_with_analysis_of_words(self, basic):
        """Test that analysis adopts weights, budget and a weighted count."""
        generator = basic.with_romanization({}).with_analysis_of_words(self.CORPUS).build()
        assert generator.complexity_budget >= 3
        assert generator.word_spec.syllable_count.kind == 'weighted'
        assert generator.phoneme_set.weights['a'] > generator.phoneme_set.weights['i']
        assert generator.transitions
        assert generator.gemination_patterns == {'nn': 1.0}
        for word in generator.generate_batch(10):
            assert set(word) <= set('tnkaei')

    def test_analysis_keeps_explicit_templates(self, basic):
        """Test that templates set before with_analysis are kept."""
        analysis = Analyzer(RomanizationMap()).analyze(self.CORPUS)
        generator = basic.with_analysis(analysis, vowel_harmony=False).build()
        assert [t.pattern for t in generator.word_spec.templates] == ['CV']
        assert generator.vowel_harmony is None

    def test_analysis_supplies_templates(self):
        """Test that recommended templates are used when none are set."""
        analysis = Analyzer(RomanizationMap()).analyze(self.CORPUS)
        generator = (GeneratorBuilder.create()
                     .with_phonemes(['t', 'n', 'k'], ['a', 'e', 'i'])
                     .with_analysis(analysis)
                     .build())
        patterns = [t.pattern for t in generator.word_spec.templates]
        assert 'CV' in patterns and 'CVC' in patterns

    def test_analysis_needs_romanization(self, basic):
        """Test that with_analysis_of_words requires a romanization map."""
        with pytest.raises(ValueError):
            basic.with_analysis_of_words(self.CORPUS)


class TestLanguageConfigs:
    """Tests for YAML language definitions."""

    def test_bundled_languages_listed(self):
        """Test that the bundled languages are discovered."""
        assert {'basic', 'elvish', 'fricative'} <= set(list_languages())

    @pytest.mark.parametrize("name", ['basic', 'elvish', 'fricative'])
    def test_bundled_languages_generate(self, name):
        """Test that every bundled language builds and generates words."""
        generator = GeneratorBuilder.load_language(name).build()
        words = generator.generate_batch(10)
        assert len(words) == 10
        assert all(words)

    def test_unknown_language(self):
        """Test that an unknown language name raises ValueError."""
        with pytest.raises(ValueError, match="Available languages"):
            GeneratorBuilder.load_language('klingon')

    def test_from_config(self):
        """Test building from a config dict with every count form."""
        for count in (2, {'exact': 2}, {'range': [1, 2]}, {'weighted': {1: 1.0, 2: 1.0}}):
            config = {
                'consonants': ['t', 'k'],
                'vowels': ['a', 'o'],
                'templates': ['CV', {'pattern': 'CVC', 'probability': 0.5}],
                'syllable_count': count,
            }
            word = GeneratorBuilder.from_config(config).build().generate()
            assert set(word) <= set('tkao')

    def test_from_config_rejects_unknown_template_keys(self):
        """Test that typos in template entries are reported."""
        config = {
            'consonants': ['t'], 'vowels': ['a'],
            'templates': [{'pattern': 'CV', 'probabilty': 0.5}],
            'syllable_count': 1,
        }
        with pytest.raises(ValueError, match="unknown keys"):
            GeneratorBuilder.from_config(config)

    def test_from_config_requires_keys(self):
        """Test that missing required keys raise ValueError."""
        with pytest.raises(ValueError):
            GeneratorBuilder.from_config({'vowels': ['a']})

    def test_from_config_mode(self):
        """Test the mode key."""
        config = {
            'consonants': ['t', 'k'], 'vowels': ['a'],
            'templates': ['CV'], 'syllable_count': 1,
            'mode': 'sequential', 'max_words': 2,
        }
        generator = GeneratorBuilder.from_config(config).build()
        assert [generator.next_sequential() for _ in range(3)] == ['ta', 'ka', None]
        config['mode'] = 'chaotic'
        with pytest.raises(ValueError):
            GeneratorBuilder.from_config(config)

    def test_load_language_file(self, tmp_path):
        """Test loading a language definition from an arbitrary path."""
        path = tmp_path / 'tiny.yaml'
        path.write_text("consonants: [m]\nvowels: [u]\ntemplates: [CV]\nsyllable_count: 2\n",
                        encoding='utf-8')
        assert GeneratorBuilder.load_language_file(path).build().generate() == 'mumu'

"""
Tests for CLI Commands
======================
Tests for the wordkit CLI interface in wordkit/cli.py.
"""

import json
import pytest
import sys
import subprocess
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "wordkit", *args],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
    )


class TestCLIBasic:
    """Basic CLI tests."""

    def test_version_flag(self):
        """Test --version flag."""
        result = run_cli("--version")
        assert result.returncode == 0
        assert "wordkit" in result.stdout.lower()

    def test_help_flag(self):
        """Test --help flag."""
        result = run_cli("--help")
        assert result.returncode == 0
        assert "generate" in result.stdout.lower()
        assert "analyze" in result.stdout.lower()

    def test_no_command_prints_help(self):
        """Test that running without a command shows help."""
        result = run_cli()
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_generate_help(self):
        """Test generate --help."""
        result = run_cli("generate", "--help")
        assert result.returncode == 0
        assert "--count" in result.stdout
        assert "--budget" in result.stdout


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_generate_json(self):
        """Test JSON output of generated words."""
        result = run_cli("generate", "-l", "basic", "-n", "5", "--seed", "1", "--json")
        assert result.returncode == 0
        words = json.loads(result.stdout)
        assert len(words) == 5
        assert all(set(w) <= set("tnkmaei") for w in words)

    def test_generate_seed_reproducible(self):
        """Test that the same seed gives the same words."""
        first = run_cli("generate", "-l", "elvish", "-n", "5", "--seed", "7", "--json")
        second = run_cli("generate", "-l", "elvish", "-n", "5", "--seed", "7", "--json")
        assert json.loads(first.stdout) == json.loads(second.stdout)

    def test_generate_alias_quiet(self):
        """Test the gen alias with quiet output (one word per line)."""
        result = run_cli("-q", "gen", "-l", "basic", "-n", "3", "--syllables", "2")
        assert result.returncode == 0
        lines = [line for line in result.stdout.splitlines() if line.strip()]
        assert len(lines) == 3

    def test_generate_prefix(self):
        """Test --prefix."""
        result = run_cli("generate", "-l", "basic", "-n", "4", "--prefix", "ka", "--json")
        assert result.returncode == 0
        assert all(w.startswith("ka") for w in json.loads(result.stdout))

    def test_generate_from_file(self, tmp_path):
        """Test --file with a language definition outside the package."""
        path = tmp_path / "tiny.yaml"
        path.write_text("consonants: [m]\nvowels: [u]\ntemplates: [CV]\nsyllable_count: 2\n",
                        encoding="utf-8")
        result = run_cli("generate", "-f", str(path), "-n", "2", "--json")
        assert result.returncode == 0
        assert json.loads(result.stdout) == ["mumu", "mumu"]

    def test_generate_from_bundled_file_name(self):
        """Test that --file falls back to the bundled languages directory."""
        result = run_cli("generate", "-f", "elvish", "-n", "2", "--seed", "5", "--json")
        assert result.returncode == 0
        assert len(json.loads(result.stdout)) == 2

    def test_generate_missing_file(self):
        """Test that a missing language file fails cleanly."""
        result = run_cli("generate", "-f", "no_such_language_file.yaml")
        assert result.returncode == 1
        assert "Language file not found" in result.stderr

    def test_unknown_language(self):
        """Test that an unknown language fails cleanly."""
        result = run_cli("generate", "-l", "klingon")
        assert result.returncode == 1
        assert "klingon" in result.stderr


class TestSequenceCommand:
    """Tests for the sequence command."""

    def test_sequence_json(self):
        """Test that one-syllable enumeration covers every CV pair."""
        result = run_cli("sequence", "-l", "basic", "--syllables", "1", "--json")
        assert result.returncode == 0
        words = json.loads(result.stdout)
        assert len(words) == 12
        assert words[:4] == ["ta", "te", "ti", "na"]

    def test_sequence_limit(self):
        """Test --limit."""
        result = run_cli("seq", "-l", "basic", "--syllables", "2", "--limit", "5", "--json")
        assert len(json.loads(result.stdout)) == 5


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_analyze_json(self):
        """Test JSON analysis output."""
        result = run_cli("analyze", "tana", "kira", "mola", "--json")
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["word_count"] == 3
        assert "recommended_budget" in data

    def test_analyze_input_file(self, tmp_path):
        """Test --input, skipping blanks and comments."""
        path = tmp_path / "words.txt"
        path.write_text("# corpus\ntana\n\nkira\n", encoding="utf-8")
        result = run_cli("analyze", "-i", str(path), "--json")
        assert result.returncode == 0
        assert json.loads(result.stdout)["word_count"] == 2

    def test_analyze_and_generate(self):
        """Test --generate with a bundled language."""
        result = run_cli("analyze", "thalion", "nimrodel", "-l", "elvish",
                         "--generate", "4", "--seed", "3", "--json")
        assert result.returncode == 0
        assert len(json.loads(result.stdout)["generated"]) == 4

    def test_analyze_generate_needs_language(self):
        """Test that --generate without --language is rejected."""
        result = run_cli("analyze", "tana", "--generate", "3")
        assert result.returncode == 1

    def test_analyze_without_words(self):
        """Test that an empty corpus is an error."""
        result = run_cli("analyze")
        assert result.returncode == 1
        assert "No words" in result.stderr

    def test_analyze_table_output(self):
        """Test the rich table rendering."""
        result = run_cli("analyze", "tana", "kira")
        assert result.returncode == 0
        assert "Phoneme" in result.stdout


class TestLanguagesCommand:
    """Tests for the languages command."""

    def test_languages_json(self):
        """Test that bundled languages are listed."""
        result = run_cli("languages", "--json")
        assert result.returncode == 0
        languages = json.loads(result.stdout)
        assert {"basic", "elvish", "fricative"} <= set(languages)

    def test_languages_alias(self):
        """Test the ls alias."""
        result = run_cli("ls")
        assert result.returncode == 0
        assert "elvish" in result.stdout

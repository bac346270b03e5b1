#!/usr/bin/env python3
"""
Terminal UI
===========
Rich-based rendering for the CLI: word lists, corpus analysis summaries
and the language catalogue.

Usage:
    from wordkit.ui import WordKitUI

    ui = WordKitUI()
    ui.print_words(['tana', 'kemi'], title="basic")
    ui.print_analysis(analysis, top=5)
"""

from typing import Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analysis import Analysis
from .generators.phonemes import LanguageConfig
from .settings import get_setting


class WordKitUI:
    """Renders CLI results to a rich Console."""

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet

    def print_words(self, words: Sequence[str], title: str = "Words",
                    phonemes: Optional[List[List[str]]] = None):
        if self.quiet:
            for word in words:
                self.console.print(word, highlight=False)
            return

        table = Table(title=title, box=box.SIMPLE_HEAD)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Word", style="bold cyan")
        if phonemes is not None:
            table.add_column("Phonemes", style="green")
        table.add_column("Length", justify="right")

        for i, word in enumerate(words, 1):
            row = [str(i), word]
            if phonemes is not None:
                row.append(' '.join(phonemes[i - 1]))
            row.append(str(len(word)))
            table.add_row(*row)
        self.console.print(table)

    def print_analysis(self, analysis: Analysis, top: Optional[int] = None):
        top = top or int(get_setting('display.top', 8))

        overview = Table(box=None, show_header=False, padding=(0, 1))
        overview.add_column(style="bold")
        overview.add_column()
        overview.add_row("Words analyzed", str(analysis.word_count))
        overview.add_row("Phonemes", str(len(analysis.phoneme_frequencies)))
        overview.add_row("Avg. syllables", f"{analysis.average_syllable_count:.2f}")
        overview.add_row("Avg. complexity", f"{analysis.average_complexity:.2f} "
                                            f"({analysis.complexity_preference()})")
        overview.add_row("C/V ratio", f"{analysis.consonant_vowel_ratio:.2f}")
        overview.add_row("Recommended budget", str(analysis.recommended_budget))
        overview.add_row("Recommended templates", ', '.join(analysis.recommended_templates) or '-')
        overview.add_row("Hiatus probability", f"{analysis.recommended_hiatus_probability:.2f}")
        overview.add_row("Gemination probability", f"{analysis.recommended_gemination_probability:.2f}")
        overview.add_row("Vowel harmony", analysis.vowel_harmony_strength())
        self.console.print(Panel(overview, title="[bold]Corpus Analysis[/bold]",
                                 border_style="cyan", box=box.ROUNDED))

        self.console.print(self._frequency_table("Phonemes", analysis.phoneme_frequencies, top))
        self.console.print(self._frequency_table("Syllable patterns",
                                                 analysis.syllable_pattern_distribution, top))
        if analysis.cluster_patterns:
            self.console.print(self._frequency_table("Clusters", analysis.cluster_patterns, top))
        if analysis.bigram_frequencies:
            self.console.print(self._frequency_table("Bigrams", analysis.bigram_frequencies, top))

    def print_languages(self, languages: Dict[str, LanguageConfig]):
        if self.quiet:
            for name in languages:
                self.console.print(name, highlight=False)
            return

        table = Table(title="Languages", box=box.SIMPLE_HEAD)
        table.add_column("Name", style="bold cyan")
        table.add_column("Consonants", justify="right")
        table.add_column("Vowels", justify="right")
        table.add_column("Templates")
        table.add_column("Description", style="dim")
        for name, config in languages.items():
            patterns = [t if isinstance(t, str) else t.get('pattern', '?') for t in config.templates]
            table.add_row(name, str(len(config.consonants)), str(len(config.vowels)),
                          ', '.join(patterns), config.description)
        self.console.print(table)

    @staticmethod
    def _frequency_table(title: str, frequencies: Dict, top: int) -> Table:
        table = Table(title=title, box=box.SIMPLE, title_justify="left")
        table.add_column("Item", style="cyan")
        table.add_column("Share", justify="right")
        table.add_column("", style="green")
        ranked = sorted(frequencies.items(), key=lambda kv: -kv[1])[:top]
        for item, share in ranked:
            table.add_row(str(item), f"{share:.1%}", "#" * max(1, round(share * 40)))
        return table


__all__ = ['WordKitUI']

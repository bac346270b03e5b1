#!/usr/bin/env python3
"""
WordKit CLI
===========
Command-line interface for conlang word generation and corpus analysis.

Usage:
    wordkit generate -l elvish -n 10
    wordkit sequence -l basic --syllables 2 --limit 20
    wordkit analyze thalion nimrodel galadriel -l elvish
    wordkit languages
"""

import argparse
import json
import logging
import sys
from typing import List

from rich.console import Console
from rich.logging import RichHandler

from wordkit import __version__
from wordkit.settings import get_setting, resolve_language_file, resolve_path

logger = logging.getLogger('wordkit')

STARTING_TYPES = ['vowel', 'consonant']

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def json(self, data):
        """JSON goes to stdout even in quiet mode."""
        print(json.dumps(data, indent=2, ensure_ascii=False))


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else get_setting('logging.level', 'WARNING')
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=bool(get_setting('logging.rich_tracebacks', True)),
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]",
                        handlers=[handler], force=True)


def load_builder(args):
    """GeneratorBuilder for --file if given, else the bundled --language."""
    from wordkit.generators import GeneratorBuilder

    if getattr(args, 'file', None):
        return GeneratorBuilder.load_language_file(resolve_language_file(args.file))
    return GeneratorBuilder.load_language(args.language or get_setting('cli.language', 'basic'))


def read_words(args) -> List[str]:
    words = list(args.words or [])
    if args.input:
        path = resolve_path(args.input)
        if not path.exists():
            raise ValueError(f"Word list not found: {path}")
        for line in path.read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if line and not line.startswith('#'):
                words.append(line)
    return words


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate random words for a language."""
    from wordkit.generators import SyllableCountSpec
    from wordkit.ui import WordKitUI

    builder = load_builder(args)
    if args.min_syllables or args.max_syllables:
        low = args.min_syllables or 1
        high = args.max_syllables or low
        builder.with_syllable_count(SyllableCountSpec.range(low, high))
    if args.start:
        builder.starting_with(args.start)
    if args.prefix:
        builder.starting_with_sequence(args.prefix)
    if args.suffix:
        builder.ending_with_sequence(args.suffix)
    if args.budget is not None:
        builder.with_complexity_budget(args.budget)
    if args.gemination is not None:
        builder.with_gemination_probability(args.gemination)
    builder.with_seed(args.seed)

    generator = builder.build()
    count = args.count or int(get_setting('cli.count', 10))
    words = [generator.generate(syllable_count=args.syllables) for _ in range(count)]

    if args.json:
        out.json(words)
        return 0

    phonemes = [generator.romanizer.decode(w) for w in words] if args.verbose else None
    title = args.file or args.language or get_setting('cli.language', 'basic')
    WordKitUI(quiet=out.quiet).print_words(words, title=title, phonemes=phonemes)
    return 0


def cmd_sequence(args, out: Output):
    """Enumerate words in deterministic order."""
    from wordkit.generators import SyllableCountSpec
    from wordkit.ui import WordKitUI

    limit = args.limit or int(get_setting('cli.sequence_limit', 50))
    builder = load_builder(args).sequential_mode(max_words=limit)
    if args.syllables:
        builder.with_syllable_count(SyllableCountSpec.exact(args.syllables))
    generator = builder.build()

    words = []
    while True:
        word = generator.next_sequential()
        if word is None:
            break
        words.append(word)

    if args.json:
        out.json(words)
        return 0

    WordKitUI(quiet=out.quiet).print_words(words, title=f"Sequence ({len(words)} words)")
    return 0


def cmd_analyze(args, out: Output):
    """Analyze a word corpus and optionally generate lookalike words."""
    from wordkit.analyzer import Analyzer
    from wordkit.generators import GeneratorBuilder, RomanizationMap
    from wordkit.generators.phonemes import load_language
    from wordkit.ui import WordKitUI

    words = read_words(args)
    if not words:
        out.error("No words to analyze; pass words or --input FILE")
        return 1

    romanizer = RomanizationMap()
    vowels = None
    if args.language:
        config = load_language(args.language)
        romanizer = RomanizationMap({str(k): str(v) for k, v in (config.raw.get('romanization') or {}).items()})
        vowels = config.vowels

    analysis = Analyzer(romanizer, vowels=vowels).analyze(
        words, smoothing=args.smoothing, smoothing_factor=args.smoothing_factor)
    logger.debug(f"Analysis valid: {analysis.is_valid()}")

    generated = []
    if args.generate:
        if not args.language:
            out.error("--generate needs --language for the phoneme inventory")
            return 1
        generator = (GeneratorBuilder.load_language(args.language)
                     .with_analysis(analysis)
                     .with_seed(args.seed)
                     .build())
        generated = generator.generate_batch(args.generate)

    if args.json:
        data = analysis.to_dict()
        if generated:
            data['generated'] = generated
        out.json(data)
        return 0

    ui = WordKitUI(quiet=out.quiet)
    if not out.quiet:
        ui.print_analysis(analysis, top=args.top)
    if generated:
        ui.print_words(generated, title="Generated from analysis")
    return 0


def cmd_languages(args, out: Output):
    """List bundled language definitions."""
    from wordkit.generators.phonemes import get_all_languages
    from wordkit.ui import WordKitUI

    languages = get_all_languages()
    if args.json:
        out.json({name: cfg.description for name, cfg in languages.items()})
        return 0
    WordKitUI(quiet=out.quiet).print_languages(languages)
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='wordkit',
        description='WordKit - Conlang Word Generator & Corpus Analyzer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -l elvish -n 20
  %(prog)s generate -l basic --syllables 3 --seed 42
  %(prog)s generate -l elvish --prefix thr --start consonant
  %(prog)s sequence -l basic --syllables 2 --limit 30
  %(prog)s analyze thalion nimrodel galadriel -l elvish --generate 10
  %(prog)s languages
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and details')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate random words')
    p.add_argument('-n', '--count', type=int, help='Number of words (default: cli.count)')
    p.add_argument('--language', '-l', help='Bundled language (default: cli.language)')
    p.add_argument('--file', '-f', help='Language definition YAML file')
    p.add_argument('--syllables', '-s', type=int, help='Exact syllable count')
    p.add_argument('--min-syllables', type=int, help='Minimum syllable count')
    p.add_argument('--max-syllables', type=int, help='Maximum syllable count')
    p.add_argument('--start', choices=STARTING_TYPES, help='Required starting phoneme type')
    p.add_argument('--prefix', help='Required romanized word start')
    p.add_argument('--suffix', help='Required romanized word end')
    p.add_argument('--budget', type=float, help='Complexity budget')
    p.add_argument('--gemination', type=float, help='Gemination probability')
    p.add_argument('--seed', type=int, help='Random seed for reproducible output')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- sequence ---
    p = subparsers.add_parser('sequence', aliases=['seq'], help='Enumerate words in order')
    p.add_argument('--language', '-l', help='Bundled language (default: cli.language)')
    p.add_argument('--file', '-f', help='Language definition YAML file')
    p.add_argument('--syllables', '-s', type=int, help='Syllables per word')
    p.add_argument('--limit', type=int, help='Max words (default: cli.sequence_limit)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- analyze ---
    p = subparsers.add_parser('analyze', aliases=['an', 'a'], help='Analyze a word corpus')
    p.add_argument('words', nargs='*', help='Romanized example words')
    p.add_argument('--input', '-i', help='File with one word per line')
    p.add_argument('--language', '-l', help='Language whose romanization/vowels to use')
    p.add_argument('--smoothing', action='store_true', help='Gusein-Zade smoothing of frequencies')
    p.add_argument('--smoothing-factor', type=float, default=0.3, help='Smoothing blend (default: 0.3)')
    p.add_argument('--generate', '-g', type=int, help='Generate N words from the analysis')
    p.add_argument('--seed', type=int, help='Random seed for --generate')
    p.add_argument('--top', type=int, help='Rows per table (default: display.top)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- languages ---
    p = subparsers.add_parser('languages', aliases=['langs', 'ls'], help='List bundled languages')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # Parse
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'seq': 'sequence',
        'an': 'analyze', 'a': 'analyze',
        'langs': 'languages', 'ls': 'languages',
    }
    command = cmd_map.get(args.command, args.command)

    setup_logging(args.verbose)
    out = Output(quiet=args.quiet)

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'sequence': cmd_sequence,
        'analyze': cmd_analyze,
        'languages': cmd_languages,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())

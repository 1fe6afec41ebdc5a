#!/usr/bin/env python3
"""
Precompute stem overrides for a word list.

Runs every word through the TRmorph analyzer + aggregator and writes the
resulting `word<TAB>stem` dictionary consumed by TRMORPH_OVERRIDE_FILE.
Words without a stem, and words whose stem is the word itself (including
irreducible "+?" words), are left out: an override map miss already keeps
the surface form at index time.

Usage:
    python scripts/build_override_cache.py words.txt overrides.tsv
    python scripts/build_override_cache.py words.txt overrides.tsv --aggregation min
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from dotenv import load_dotenv

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
load_dotenv(project_root / ".env.local")

from src.trmorph import StemFilterFactory, SubprocessAnalyzer, write_override_map
from src.trmorph.tokenizer import turkish_lower

logger = logging.getLogger("build_override_cache")


def read_words(path: Path, lowercase: bool) -> List[str]:
    """Unique non-empty words in file order."""
    seen = set()
    words = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word = line.strip()
            if lowercase:
                word = turkish_lower(word)
            if word and word not in seen:
                seen.add(word)
                words.append(word)
    return words


def stem_words(words: List[str], factory: StemFilterFactory) -> Iterator[Tuple[str, str]]:
    """Yield (word, stem) for every word whose analyzer stem differs from it."""
    stem_filter = factory.create([])
    for i, word in enumerate(words, start=1):
        stem = stem_filter.stem(word)
        if stem is not None and stem != word:
            yield word, stem
        if i % 1000 == 0:
            logger.info(f"Processed {i}/{len(words)} words")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build a TRmorph stem override dictionary")
    parser.add_argument("words", type=Path, help="Input word list (one word per line, UTF-8)")
    parser.add_argument("output", type=Path, help="Output dictionary (word<TAB>stem)")
    parser.add_argument(
        "--command",
        default=os.getenv("TRMORPH_LOOKUP_COMMAND"),
        help="Analyzer command (default: $TRMORPH_LOOKUP_COMMAND)"
    )
    parser.add_argument(
        "--aggregation",
        default=os.getenv("TRMORPH_AGGREGATION", "max"),
        choices=["max", "min"],
        help="Tie-break between distinct stems"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("TRMORPH_ANALYZER_TIMEOUT", "5")),
        help="Seconds per analyzer call (default: $TRMORPH_ANALYZER_TIMEOUT or 5)"
    )
    parser.add_argument("--lowercase", action="store_true", help="Turkish-lowercase words first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    if not args.command:
        parser.error("--command or TRMORPH_LOOKUP_COMMAND is required")

    analyzer = SubprocessAnalyzer(args.command, timeout=args.timeout)
    factory = StemFilterFactory(analyzer, aggregation=args.aggregation)

    words = read_words(args.words, args.lowercase)
    logger.info(f"Stemming {len(words)} unique words with: {args.command}")

    count = write_override_map(args.output, stem_words(words, factory))
    logger.info(f"Wrote {count} overrides to {args.output} ({len(words) - count} words left out)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

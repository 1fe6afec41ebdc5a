"""
Precomputed stem overrides.

Known words skip the analyzer entirely: their stems are looked up in an
immutable word → stem map. The map is loaded once (typically from a
dictionary file produced by scripts/build_override_cache.py) and is only
read afterwards, so it can be shared between filters and threads.

Dictionary file format (UTF-8, one entry per line):

    # comment
    kitaplar<TAB>kitap
    evler<TAB>ev
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Optional, Tuple, Union

from .tokenizer import turkish_lower

logger = logging.getLogger(__name__)


class StemmerOverrideMap:
    """Read-only word → stem lookup."""

    def __init__(self, entries: Dict[str, str], ignore_case: bool = False):
        self._entries = MappingProxyType(dict(entries))
        self.ignore_case = ignore_case

    def lookup(self, word: str) -> Optional[str]:
        """Return the override stem for `word`, or None if unknown."""
        if self.ignore_case:
            word = turkish_lower(word)
        return self._entries.get(word)

    def items(self):
        return self._entries.items()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word) -> bool:
        return self.lookup(word) is not None

    def __repr__(self) -> str:
        return f"StemmerOverrideMap(entries={len(self)}, ignore_case={self.ignore_case})"

    class Builder:
        """Accumulates overrides; the first mapping added for a word wins."""

        def __init__(self, ignore_case: bool = False):
            self.ignore_case = ignore_case
            self._entries: Dict[str, str] = {}

        def add(self, word: str, stem: str) -> bool:
            """
            Add an override.

            Returns:
                False if `word` was already mapped (entry is ignored)
            """
            if self.ignore_case:
                word = turkish_lower(word)
            if word in self._entries:
                return False
            self._entries[word] = stem
            return True

        def build(self) -> "StemmerOverrideMap":
            return StemmerOverrideMap(self._entries, ignore_case=self.ignore_case)


def load_override_map(path: Union[str, Path], ignore_case: bool = False) -> StemmerOverrideMap:
    """
    Load an override dictionary file.

    Args:
        path: Path to a UTF-8 `word<TAB>stem` file
        ignore_case: Match words case-insensitively (Turkish casing rules)

    Returns:
        StemmerOverrideMap with one entry per distinct word

    Raises:
        FileNotFoundError: path does not exist
    """
    path = Path(path)
    builder = StemmerOverrideMap.Builder(ignore_case=ignore_case)
    skipped = 0
    duplicates = 0

    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue

            word, sep, stem = line.partition("\t")
            word, stem = word.strip(), stem.strip()
            if not sep or not word or not stem:
                logger.warning(f"{path}:{lineno}: expected 'word<TAB>stem', got {line!r}")
                skipped += 1
                continue

            if not builder.add(word, stem):
                duplicates += 1

    override_map = builder.build()
    logger.info(
        f"Loaded {len(override_map)} stem overrides from {path} "
        f"(skipped={skipped}, duplicates={duplicates})"
    )
    return override_map


def write_override_map(path: Union[str, Path], entries: Iterable[Tuple[str, str]]) -> int:
    """
    Write overrides in dictionary file format.

    Returns:
        Number of entries written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for word, stem in entries:
            f.write(f"{word}\t{stem}\n")
            count += 1

    logger.debug(f"Wrote {count} stem overrides to {path}")
    return count

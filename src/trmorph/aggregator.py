"""
Stem aggregation over TRmorph analyzer output.

TRmorph (via flookup) prints one line per analysis:

    evi     ev<N><acc>
    evi     ev<N><p3s>
    xyz     +?

The first field echoes the input word, the second holds the stem followed by
feature tags starting at '<'. A field with no tags containing '+?' means the
analyzer could not decompose the word.

Aggregation pipeline:
1. Trim lines, skip blanks
2. Reject lines whose first field is not the word
3. Reject lines with fewer than two fields
4. Cut the stem field at the first '<'
5. Short-circuit on '+?' (return the word unchanged)
6. Collapse candidates into a code-point ordered set
7. Pick one: single candidate, else max/min by policy

Examples:
    >>> aggregate("ev", ["ev ev<noun>", "ev evi<noun><poss>"], "min")
    'ev'
    >>> aggregate("ev", ["ev ev<noun>", "ev evi<noun><poss>"], "max")
    'evi'
    >>> aggregate("xyz", ["xyz +?"], "max")
    'xyz'
    >>> aggregate("abc", ["abc"], "max") is None
    True
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union

from .errors import UnknownAggregationError

logger = logging.getLogger(__name__)

TAG_MARKER = "<"
IRREDUCIBLE_MARKER = "+?"


class AggregationPolicy(str, Enum):
    """Tie-break rule when a word has several distinct stems"""
    MAX = "max"
    MIN = "min"


class ParseStatus(str, Enum):
    CANDIDATE = "candidate"
    IRREDUCIBLE = "irreducible"
    REJECTED = "rejected"


@dataclass
class ParseResult:
    """Classification of a single analyzer line"""
    status: ParseStatus
    stem: Optional[str] = None   # Set only for CANDIDATE
    reason: str = ""             # Why a line was rejected


def parse_candidate(word: str, line: str) -> ParseResult:
    """
    Classify one raw analyzer line for `word`.

    Args:
        word: Surface form that was sent to the analyzer
        line: Raw output line (untrimmed)

    Returns:
        ParseResult with CANDIDATE (and stem), IRREDUCIBLE or REJECTED
    """
    line = line.strip()
    if not line:
        return ParseResult(ParseStatus.REJECTED, reason="blank line")

    parts = line.split()
    if parts[0] != word:
        return ParseResult(ParseStatus.REJECTED, reason=f"unexpected line from word {word} {line}")

    if len(parts) < 2:
        return ParseResult(ParseStatus.REJECTED, reason=f"unexpected line {line}")

    stem_field = parts[1].strip()
    i = stem_field.find(TAG_MARKER)

    if i == -1:
        if IRREDUCIBLE_MARKER in stem_field:
            return ParseResult(ParseStatus.IRREDUCIBLE)
        return ParseResult(ParseStatus.REJECTED, reason=f"unexpected stem {stem_field}")

    return ParseResult(ParseStatus.CANDIDATE, stem=stem_field[:i])


def collect_stems(word: str, raw_lines: Iterable[str]) -> Optional[List[str]]:
    """
    Build the ordered stem set for `word`.

    Returns:
        Sorted unique candidate stems, or None when an irreducible marker
        was seen (the word must pass through unchanged)
    """
    stems = set()

    for line in raw_lines:
        if not line.strip():
            continue

        result = parse_candidate(word, line)

        if result.status is ParseStatus.IRREDUCIBLE:
            # First '+?' wins, remaining lines are not examined
            return None

        if result.status is ParseStatus.REJECTED:
            logger.warning(result.reason)
            continue

        stems.add(result.stem)

    return sorted(stems)


def aggregate(
    word: str,
    raw_lines: Iterable[str],
    policy: Union[AggregationPolicy, str] = AggregationPolicy.MAX
) -> Optional[str]:
    """
    Reduce analyzer output for a word to a single stem.

    Args:
        word: Surface form that was analyzed
        raw_lines: Raw analyzer output lines (any order, duplicates allowed)
        policy: "max" or "min", applied only when several stems remain

    Returns:
        The selected stem, the word itself for irreducible words,
        or None when no valid candidate was found

    Raises:
        UnknownAggregationError: policy is not max/min and there is
            more than one candidate to choose from
    """
    stems = collect_stems(word, raw_lines)

    if stems is None:
        return word

    if not stems:
        logger.debug(f"No stem candidates for {word!r}")
        return None

    if len(stems) == 1:
        return stems[0]

    # Policy is validated lazily: only ambiguity exercises it
    if policy == AggregationPolicy.MAX:
        return stems[-1]
    if policy == AggregationPolicy.MIN:
        return stems[0]
    raise UnknownAggregationError(policy)

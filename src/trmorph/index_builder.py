"""
Index-side helpers: build stem filters and aggregate stemmed term frequencies.

StemFilterFactory holds the per-configuration pieces (analyzer, policy,
override map) and creates one TRMorphStemFilter per token stream.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Union

from .aggregator import AggregationPolicy
from .analyzer import BaseAnalyzer, SubprocessAnalyzer
from .config import StemmerSettings, parse_aggregation
from .override_cache import StemmerOverrideMap, load_override_map
from .stem_filter import TRMorphStemFilter
from .tokenizer import Token, tokenize

logger = logging.getLogger(__name__)


class StemFilterFactory:
    """Creates stem filters sharing one analyzer, policy and override map."""

    def __init__(
        self,
        analyzer: Optional[BaseAnalyzer],
        aggregation: Union[AggregationPolicy, str] = AggregationPolicy.MAX,
        cache: Optional[StemmerOverrideMap] = None
    ):
        # Policy checked up front here; the filter itself only fails
        # when an ambiguous word actually needs it
        self.aggregation = parse_aggregation(aggregation)
        if analyzer is None and cache is None:
            raise ValueError("StemFilterFactory needs an analyzer or an override map")
        self.analyzer = analyzer
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: StemmerSettings) -> "StemFilterFactory":
        """
        Build analyzer and override map from settings.

        The analyzer is only created when a lookup command is configured.
        """
        cache = None
        if settings.override_file:
            cache = load_override_map(settings.override_file, ignore_case=settings.override_ignore_case)

        analyzer = None
        if settings.lookup_command:
            analyzer = SubprocessAnalyzer(settings.lookup_command, timeout=settings.analyzer_timeout)

        return cls(analyzer=analyzer, aggregation=settings.aggregation, cache=cache)

    def create(self, tokens: Iterable[Token]) -> TRMorphStemFilter:
        return TRMorphStemFilter(tokens, self.analyzer, aggregation=self.aggregation, cache=self.cache)

    def close(self):
        if self.analyzer is not None:
            self.analyzer.close()


def analyze_text(
    text: str,
    factory: StemFilterFactory,
    protected_words: Optional[Iterable[str]] = None
) -> List[str]:
    """
    Tokenize and stem a text.

    Examples:
        >>> analyze_text("Kitapları okudum", factory)
        ['kitap', 'oku']
    """
    return [t.text for t in factory.create(tokenize(text, protected_words=protected_words))]


def build_term_index(
    texts: Iterable[str],
    factory: StemFilterFactory,
    protected_words: Optional[Iterable[str]] = None
) -> Dict[str, Dict[str, int]]:
    """
    Build a term frequency index over stemmed terms.

    Returns:
        {"term_frequencies": {"stem1": count1, ...}}
    """
    protected = list(protected_words or ())
    term_frequencies = defaultdict(int)
    text_count = 0

    for text in texts:
        text_count += 1
        for term in analyze_text(text, factory, protected_words=protected):
            term_frequencies[term] += 1

    # Convert defaultdict to regular dict (for JSON serialization)
    result = {
        "term_frequencies": dict(term_frequencies)
    }

    logger.debug(f"Built term index: {len(result['term_frequencies'])} unique stems from {text_count} texts")

    return result

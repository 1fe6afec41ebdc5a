"""
Token filter that replaces each term with its TRmorph stem.

Per token:
1. Keyword tokens pass through untouched
2. With an override map: use its stem on a hit, leave the token on a miss
3. Without one: analyze, aggregate, replace text only if the stem differs

Override map and analyzer are alternatives, never chained: once a map is
configured the analyzer is not consulted.

Tokens are processed strictly one at a time and in input order.
"""

import logging
from typing import Iterable, Iterator, Optional, Union

from .aggregator import AggregationPolicy, aggregate
from .analyzer import BaseAnalyzer
from .override_cache import StemmerOverrideMap
from .tokenizer import Token

logger = logging.getLogger(__name__)


class TRMorphStemFilter:
    """
    Stemmer based on TRmorph (https://github.com/coltekin/TRmorph).

    Wraps an iterable of Token and yields the same tokens with stemmed text.
    """

    def __init__(
        self,
        input: Iterable[Token],
        analyzer: Optional[BaseAnalyzer],
        aggregation: Union[AggregationPolicy, str] = AggregationPolicy.MAX,
        cache: Optional[StemmerOverrideMap] = None
    ):
        """
        Initialize stem filter.

        Args:
            input: Upstream token stream
            analyzer: Morphological analyzer (may be None when a cache is set)
            aggregation: "max" or "min" tie-break between distinct stems
            cache: Optional precomputed override map
        """
        self.input = input
        self.analyzer = analyzer
        self.aggregation = aggregation
        self.cache = cache

    def set_cache(self, cache: Optional[StemmerOverrideMap]):
        """Swap the override map. Call before iterating."""
        self.cache = cache

    def __iter__(self) -> Iterator[Token]:
        for token in self.input:
            yield self.process(token)

    def process(self, token: Token) -> Token:
        """Stem a single token in place and return it."""
        if token.keyword:
            return token

        if self.cache is not None:
            stem = self.cache.lookup(token.text)
            if stem is not None:
                token.text = stem
            return token

        term = token.text
        s = self.stem(term)
        # If not stemmed, don't touch the token
        if s is not None and s != term:
            token.text = s
        return token

    def stem(self, word: str) -> Optional[str]:
        """
        Resolve a word through the analyzer.

        Returns:
            Selected stem, the word itself if irreducible, None if the
            analyzer gave no usable parse
        """
        if self.analyzer is None:
            raise ValueError("TRMorphStemFilter has neither an override map nor an analyzer")

        parses = self.analyzer.analyze(word)
        return aggregate(word, parses, self.aggregation)

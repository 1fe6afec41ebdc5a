"""
TRmorph stemming stage for Turkish search indexing.

Components:
- aggregator: reduces raw analyzer lines to one stem (max/min policy)
- analyzer: external (flookup) and static morphological analyzers
- override_cache: precomputed word → stem overrides
- stem_filter: per-token driver (keyword skip, override map XOR analyzer)
- tokenizer: Turkish token stream with keyword marking
- index_builder: filter factory and stemmed term frequencies

Usage:
    from src.trmorph import StemFilterFactory, SubprocessAnalyzer, analyze_text

    factory = StemFilterFactory(SubprocessAnalyzer("flookup stem.fst"), aggregation="min")
    analyze_text("Kitapları okudum", factory)
"""

from .aggregator import AggregationPolicy, aggregate, parse_candidate
from .analyzer import BaseAnalyzer, StaticAnalyzer, SubprocessAnalyzer
from .config import StemmerSettings, load_settings
from .errors import AnalyzerConfigError, TRMorphError, UnknownAggregationError
from .index_builder import StemFilterFactory, analyze_text, build_term_index
from .override_cache import StemmerOverrideMap, load_override_map, write_override_map
from .stem_filter import TRMorphStemFilter
from .tokenizer import Token, tokenize, turkish_lower

__all__ = [
    "AggregationPolicy",
    "aggregate",
    "parse_candidate",
    "BaseAnalyzer",
    "StaticAnalyzer",
    "SubprocessAnalyzer",
    "StemmerSettings",
    "load_settings",
    "AnalyzerConfigError",
    "TRMorphError",
    "UnknownAggregationError",
    "StemFilterFactory",
    "analyze_text",
    "build_term_index",
    "StemmerOverrideMap",
    "load_override_map",
    "write_override_map",
    "TRMorphStemFilter",
    "Token",
    "tokenize",
    "turkish_lower",
]

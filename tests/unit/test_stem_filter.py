"""
Unit tests for the TRmorph stem filter (per-token driver).
"""

from unittest.mock import Mock

import pytest

from src.trmorph import BaseAnalyzer, StaticAnalyzer, StemmerOverrideMap, Token, TRMorphStemFilter
from src.trmorph.errors import UnknownAggregationError


def _tokens(*words, keywords=()):
    return [Token(text=w, position=i, keyword=w in keywords) for i, w in enumerate(words)]


class TestAnalyzerPath:
    """Test stemming through analyzer + aggregator"""

    def test_stems_replace_text(self, static_analyzer):
        stem_filter = TRMorphStemFilter(_tokens("kitapları", "okudum"), static_analyzer)
        assert [t.text for t in stem_filter] == ["kitap", "oku"]

    def test_policy_applied(self, static_analyzer):
        assert [t.text for t in TRMorphStemFilter(_tokens("yazı"), static_analyzer, "max")] == ["yazı"]
        assert [t.text for t in TRMorphStemFilter(_tokens("yazı"), static_analyzer, "min")] == ["yaz"]

    def test_irreducible_unchanged(self, static_analyzer):
        token = Token(text="xyz")
        assert TRMorphStemFilter([], static_analyzer).process(token).text == "xyz"

    def test_no_stem_leaves_token_unchanged(self, static_analyzer):
        """Malformed output and unknown words keep their surface form"""
        stem_filter = TRMorphStemFilter(_tokens("abc", "bilinmeyen"), static_analyzer)
        assert [t.text for t in stem_filter] == ["abc", "bilinmeyen"]

    def test_token_not_rewritten_when_stem_equals_text(self):
        class TrackingToken(Token):
            def __setattr__(self, name, value):
                if name == "text" and hasattr(self, "text"):
                    object.__setattr__(self, "rewrites", getattr(self, "rewrites", 0) + 1)
                object.__setattr__(self, name, value)

        analyzer = StaticAnalyzer({"ev": ["ev\tev<N>"], "evi": ["evi\tev<N>"]})
        stem_filter = TRMorphStemFilter([], analyzer)

        unchanged = stem_filter.process(TrackingToken(text="ev"))
        changed = stem_filter.process(TrackingToken(text="evi"))

        assert getattr(unchanged, "rewrites", 0) == 0
        assert changed.rewrites == 1
        assert changed.text == "ev"

    def test_interrupted_analyzer_degrades(self):
        """Analyzer returning nothing (timeout) never fails the stream"""
        analyzer = Mock(spec=BaseAnalyzer)
        analyzer.analyze.return_value = []
        stem_filter = TRMorphStemFilter(_tokens("kitapları"), analyzer)
        assert [t.text for t in stem_filter] == ["kitapları"]

    def test_idempotent(self, static_analyzer):
        """Re-stemming a stemmed token changes nothing"""
        first = [t.text for t in TRMorphStemFilter(_tokens("evi"), static_analyzer)]
        second = [t.text for t in TRMorphStemFilter(_tokens(*first), static_analyzer)]
        assert first == second == ["ev"]

    def test_unknown_policy_raises_on_ambiguous_word(self, static_analyzer):
        stem_filter = TRMorphStemFilter(_tokens("okudum", "yazı"), static_analyzer, aggregation="avg")
        tokens = iter(stem_filter)
        assert next(tokens).text == "oku"
        with pytest.raises(UnknownAggregationError):
            next(tokens)

    def test_stem_without_analyzer_raises(self):
        with pytest.raises(ValueError, match="neither"):
            TRMorphStemFilter([], None).stem("ev")


class TestKeywordTokens:
    """Test that keyword tokens bypass stemming"""

    def test_keyword_untouched(self, static_analyzer):
        stem_filter = TRMorphStemFilter(_tokens("kitapları", "okudum", keywords={"kitapları"}), static_analyzer)
        assert [t.text for t in stem_filter] == ["kitapları", "oku"]

    def test_keyword_skips_analyzer_and_cache(self, override_map):
        analyzer = Mock(spec=BaseAnalyzer)
        stem_filter = TRMorphStemFilter(_tokens("kitapları", keywords={"kitapları"}), analyzer, cache=override_map)
        assert [t.text for t in stem_filter] == ["kitapları"]
        analyzer.analyze.assert_not_called()


class TestOverridePath:
    """Test override map lookup"""

    def test_cache_hit_replaces_text(self, override_map):
        stem_filter = TRMorphStemFilter(_tokens("gözlükçü"), None, cache=override_map)
        assert [t.text for t in stem_filter] == ["gözlük"]

    def test_cache_short_circuits_analyzer(self, override_map):
        """Analyzer is never consulted once an override map is configured"""
        analyzer = Mock(spec=BaseAnalyzer)
        analyzer.analyze.return_value = ["kitapları\tkitaplar<N>"]
        stem_filter = TRMorphStemFilter(_tokens("kitapları", "okudum"), analyzer, cache=override_map)

        assert [t.text for t in stem_filter] == ["kitap", "okudum"]
        analyzer.analyze.assert_not_called()

    def test_cache_stem_may_be_longer(self):
        builder = StemmerOverrideMap.Builder()
        builder.add("ev", "evcilleştirme")
        stem_filter = TRMorphStemFilter(_tokens("ev"), None, cache=builder.build())
        assert [t.text for t in stem_filter] == ["evcilleştirme"]

    def test_set_cache(self, static_analyzer, override_map):
        stem_filter = TRMorphStemFilter(_tokens("gözlükçü", "okudum"), static_analyzer)
        stem_filter.set_cache(override_map)
        assert [t.text for t in stem_filter] == ["gözlük", "okudum"]

    def test_set_cache_none_restores_analyzer(self, static_analyzer, override_map):
        stem_filter = TRMorphStemFilter(_tokens("okudum"), static_analyzer, cache=override_map)
        stem_filter.set_cache(None)
        assert [t.text for t in stem_filter] == ["oku"]


class TestStreamOrder:
    """Test token stream semantics"""

    def test_order_and_metadata_preserved(self, static_analyzer):
        tokens = [
            Token(text="kitapları", start_offset=0, end_offset=9, position=0),
            Token(text="okudum", start_offset=10, end_offset=16, position=1),
        ]
        out = list(TRMorphStemFilter(tokens, static_analyzer))
        assert [(t.text, t.start_offset, t.end_offset, t.position) for t in out] == [
            ("kitap", 0, 9, 0),
            ("oku", 10, 16, 1),
        ]

    def test_empty_stream(self, static_analyzer):
        assert list(TRMorphStemFilter([], static_analyzer)) == []

    def test_tokens_pulled_one_at_a_time(self):
        """Each token is resolved before the next one is requested"""
        events = []

        class RecordingAnalyzer(StaticAnalyzer):
            def analyze(self, word):
                events.append(f"analyze:{word}")
                return super().analyze(word)

        def source():
            for word in ["evi", "okudum"]:
                events.append(f"pull:{word}")
                yield Token(text=word)

        analyzer = RecordingAnalyzer({"evi": ["evi\tev<N>"], "okudum": ["okudum\toku<V>"]})
        list(TRMorphStemFilter(source(), analyzer))
        assert events == ["pull:evi", "analyze:evi", "pull:okudum", "analyze:okudum"]

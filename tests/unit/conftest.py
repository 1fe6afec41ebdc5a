"""Unit test configuration - canned analyzer output, no external processes"""

import os
import tempfile
from pathlib import Path

import pytest

# src.main configures file logging on import; keep it out of the repo
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "trmorph-stem-tests" / "trmorph-stem.log"))

from src.trmorph import StaticAnalyzer, StemFilterFactory, StemmerOverrideMap


# Analyzer output in flookup format: "<word>\t<stem><tags>"
SAMPLE_PARSES = {
    "kitapları": [
        "kitapları\tkitap<N><pl><acc>",
        "kitapları\tkitap<N><pl><p3s>",
        "kitapları\tkitap<N><p3p>",
    ],
    "okudum": ["okudum\toku<V><past><1s>"],
    "yazı": [
        "yazı\tyazı<N>",
        "yazı\tyaz<V><vn:yis>",
    ],
    "evi": [
        "evi\tev<N><acc>",
        "evi\tev<N><p3s>",
    ],
    "ev": ["ev\tev<N>"],
    "xyz": ["xyz\t+?"],
    "abc": ["abc"],
}


@pytest.fixture
def static_analyzer():
    """Analyzer returning SAMPLE_PARSES (unknown words → no lines)"""
    return StaticAnalyzer(SAMPLE_PARSES)


@pytest.fixture
def factory(static_analyzer):
    """Factory using the static analyzer and max aggregation"""
    return StemFilterFactory(static_analyzer, aggregation="max")


@pytest.fixture
def override_map():
    builder = StemmerOverrideMap.Builder()
    builder.add("kitapları", "kitap")
    builder.add("gözlükçü", "gözlük")
    return builder.build()

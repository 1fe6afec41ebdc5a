"""
Unit tests for the HTTP API

The stemmer factory is injected via dependency override - the lifespan
(which reads TRMORPH_* env vars and starts no processes itself) is not run.
"""

import pytest
from fastapi.testclient import TestClient

from src import main
from src.main import app, get_stem_filter_factory


@pytest.fixture
def client(factory):
    app.dependency_overrides[get_stem_filter_factory] = lambda: factory
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestStemEndpoint:
    """Test POST /v1/stem"""

    def test_stem_words(self, client):
        response = client.post("/v1/stem", json={"words": ["kitapları", "ev", "xyz", "abc"]})
        assert response.status_code == 200
        assert response.json()["results"] == [
            {"word": "kitapları", "stem": "kitap", "changed": True},
            {"word": "ev", "stem": "ev", "changed": False},
            {"word": "xyz", "stem": "xyz", "changed": False},
            {"word": "abc", "stem": "abc", "changed": False},
        ]

    def test_empty_words_rejected(self, client):
        response = client.post("/v1/stem", json={"words": []})
        assert response.status_code == 422

    @pytest.mark.parametrize("word", ["", "   "])
    def test_blank_word_rejected(self, client, word):
        response = client.post("/v1/stem", json={"words": ["ev", word]})
        assert response.status_code == 422

    def test_words_trimmed(self, client):
        response = client.post("/v1/stem", json={"words": [" kitapları "]})
        assert response.json()["results"] == [{"word": "kitapları", "stem": "kitap", "changed": True}]

    def test_not_initialized(self, monkeypatch):
        monkeypatch.setattr(main, "stem_filter_factory", None)
        response = TestClient(app).post("/v1/stem", json={"words": ["ev"]})
        assert response.status_code == 503
        assert response.json()["detail"] == "Stemmer not initialized"


class TestAnalyzeEndpoint:
    """Test POST /v1/analyze"""

    def test_analyze(self, client):
        response = client.post("/v1/analyze", json={
            "text": "Kitapları İstanbul'da okudum",
            "protected_words": ["okudum"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["terms"] == ["kitap", "istanbul", "okudum"]
        assert data["tokens"][1] == {
            "text": "istanbul",
            "original": "İstanbul'da",
            "start_offset": 10,
            "end_offset": 21,
            "position": 1,
            "keyword": False,
        }
        assert data["tokens"][2]["keyword"] is True

    def test_keep_stopwords(self, client):
        response = client.post("/v1/analyze", json={"text": "ev ve kitapları", "remove_stopwords": False})
        assert response.json()["terms"] == ["ev", "ve", "kitap"]

    def test_empty_text_rejected(self, client):
        assert client.post("/v1/analyze", json={"text": ""}).status_code == 422


class TestIndexEndpoint:
    """Test POST /v1/index"""

    def test_index(self, client):
        response = client.post("/v1/index", json={"texts": ["Evi gördüm", "Ev ve kitapları"]})
        assert response.status_code == 200
        data = response.json()
        assert data["term_frequencies"]["ev"] == 2
        assert data["text_count"] == 2
        assert data["unique_terms"] == len(data["term_frequencies"])


class TestServiceEndpoints:
    """Test root and health"""

    def test_root(self, client):
        data = client.get("/").json()
        assert data["service"] == "TRmorph Stem Service"
        assert data["status"] == "running"

    def test_health_initialized(self, factory, monkeypatch):
        monkeypatch.setattr(main, "stem_filter_factory", factory)
        data = TestClient(app).get("/health").json()
        assert data["status"] == "healthy"
        assert data["aggregation"] == "max"
        assert data["override_entries"] is None
        assert data["analyzer"]["type"] == "static"

    def test_health_not_initialized(self, monkeypatch):
        monkeypatch.setattr(main, "stem_filter_factory", None)
        data = TestClient(app).get("/health").json()
        assert data["status"] == "initializing"
        assert data["aggregation"] is None

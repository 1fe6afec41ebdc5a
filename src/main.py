"""
TRmorph Stem Service - FastAPI application for Turkish token normalization

Exposes the indexing-time stemming stage over HTTP so indexing workers
can normalize terms without running the analyzer themselves:
- Override map lookup for known words (precomputed stems)
- TRmorph analysis (flookup subprocess) with max/min stem aggregation
- Turkish tokenization with protected (keyword) words

Endpoints:
- POST /v1/stem: stem individual words
- POST /v1/analyze: tokenize + stem a text, with offsets
- POST /v1/index: stemmed term frequencies for a batch of texts
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional
from pathlib import Path

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

# Load .env.local first (highest priority), then .env as fallback
env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    print(f"Loading environment from: {env_local}")
    load_dotenv(env_local, override=True)
elif env_file.exists():
    print(f"Loading environment from: {env_file}")
    load_dotenv(env_file, override=True)
else:
    print("WARNING: No .env.local or .env file found - using system environment variables only")

# Configure logging: console (brief) + file (detailed)
from src.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/trmorph-stem.log"),
    console_level=console_level,
    file_level=logging.DEBUG,  # Always DEBUG in file for troubleshooting
    aggregator_console_level=logging.ERROR  # Malformed analyzer lines go to file only
)

logger = logging.getLogger(__name__)


from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, constr

from .trmorph import StemFilterFactory, Token, build_term_index, load_settings, tokenize

PORT = int(os.getenv("PORT", "8080"))

# Version tracking
APP_VERSION = "0.1.0"
APP_START_TIME = datetime.utcnow().isoformat() + "Z"

# Global instances
stem_filter_factory: Optional[StemFilterFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources"""
    global stem_filter_factory

    # Startup: analyzer command + override map from environment
    logger.info("Initializing TRmorph stemmer...")
    settings = load_settings()
    stem_filter_factory = StemFilterFactory.from_settings(settings)
    logger.info("TRmorph stemmer initialized successfully")

    yield

    # Shutdown: Cleanup resources
    logger.info("Shutting down...")
    stem_filter_factory.close()
    stem_filter_factory = None


# FastAPI app
app = FastAPI(
    title="TRmorph Stem Service",
    description="Turkish stemming for search indexing (TRmorph + override map)",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_stem_filter_factory() -> StemFilterFactory:
    """Dependency: configured factory, 503 until startup completed"""
    if stem_filter_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Stemmer not initialized",
        )
    return stem_filter_factory


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    aggregation: Optional[str] = None
    override_entries: Optional[int] = None
    analyzer: Optional[dict] = None


class StemRequest(BaseModel):
    words: List[constr(strip_whitespace=True, min_length=1)] = Field(
        ..., description="Words to stem (blank words rejected)", min_length=1, max_length=1000
    )


class StemResult(BaseModel):
    word: str
    stem: str
    changed: bool


class StemResponse(BaseModel):
    results: List[StemResult]


class AnalyzeRequest(BaseModel):
    text: str = Field(..., description="Text to tokenize and stem", min_length=1)
    protected_words: List[str] = Field(
        default_factory=list,
        description="Words marked as keywords (never stemmed)"
    )
    remove_stopwords: bool = Field(default=True, description="Drop Turkish stopwords")


class TokenInfo(BaseModel):
    text: str
    original: str
    start_offset: int
    end_offset: int
    position: int
    keyword: bool


class AnalyzeResponse(BaseModel):
    tokens: List[TokenInfo]
    terms: List[str]


class IndexRequest(BaseModel):
    texts: List[str] = Field(..., description="Texts to index", min_length=1)
    protected_words: List[str] = Field(default_factory=list)


class IndexResponse(BaseModel):
    term_frequencies: dict
    unique_terms: int
    text_count: int


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "TRmorph Stem Service",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    start_time = datetime.fromisoformat(APP_START_TIME.rstrip('Z'))
    uptime = (datetime.utcnow() - start_time).total_seconds()

    factory = stem_filter_factory
    return HealthResponse(
        status="healthy" if factory is not None else "initializing",
        version=APP_VERSION,
        started_at=APP_START_TIME,
        uptime_seconds=round(uptime, 2),
        aggregation=factory.aggregation.value if factory else None,
        override_entries=len(factory.cache) if factory and factory.cache is not None else None,
        analyzer=factory.analyzer.get_info() if factory and factory.analyzer is not None else None,
    )


@app.post("/v1/stem", response_model=StemResponse)
def stem_words(request: StemRequest, factory: StemFilterFactory = Depends(get_stem_filter_factory)):
    """
    Stem individual words (no tokenization, no lowercasing)

    Example:
        POST /v1/stem
        {
            "words": ["kitapları", "evler"]
        }
    """
    try:
        tokens = [Token(text=word, position=i) for i, word in enumerate(request.words)]
        results = [
            StemResult(word=word, stem=token.text, changed=token.text != word)
            for word, token in zip(request.words, factory.create(tokens))
        ]
        return StemResponse(results=results)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Stemming failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Stemming failed: {str(e)}",
        )


@app.post("/v1/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest, factory: StemFilterFactory = Depends(get_stem_filter_factory)):
    """
    Tokenize and stem a text

    Example:
        POST /v1/analyze
        {
            "text": "Kitapları İstanbul'da okudum",
            "protected_words": ["istanbul"]
        }
    """
    try:
        tokens = tokenize(
            request.text,
            protected_words=request.protected_words,
            remove_stopwords=request.remove_stopwords,
        )
        stemmed = list(factory.create(tokens))

        token_infos = [
            TokenInfo(
                text=t.text,
                original=request.text[t.start_offset:t.end_offset],
                start_offset=t.start_offset,
                end_offset=t.end_offset,
                position=t.position,
                keyword=t.keyword,
            )
            for t in stemmed
        ]
        return AnalyzeResponse(tokens=token_infos, terms=[t.text for t in stemmed])

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis failed: {str(e)}",
        )


@app.post("/v1/index", response_model=IndexResponse)
def index_texts(request: IndexRequest, factory: StemFilterFactory = Depends(get_stem_filter_factory)):
    """Stemmed term frequencies aggregated over all texts"""
    try:
        index = build_term_index(request.texts, factory, protected_words=request.protected_words)
        term_frequencies = index["term_frequencies"]
        logger.info(f"Indexed {len(request.texts)} texts: {len(term_frequencies)} unique stems")
        return IndexResponse(
            term_frequencies=term_frequencies,
            unique_terms=len(term_frequencies),
            text_count=len(request.texts),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Indexing failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Indexing failed: {str(e)}",
        )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )

"""
Tokenizer for Turkish text ahead of TRmorph stemming.

Tokenization pipeline:
1. Extract word spans (letters, digits, inner apostrophes)
2. Turkish-aware lowercasing ("I" → "ı", "İ" → "i")
3. Strip apostrophe suffixes on proper nouns ("istanbul'da" → "istanbul")
4. Filter pure numbers
5. Filter stopwords (common Turkish function words)
6. Mark protected words as keywords (exempt from stemming)

Offsets always refer to the original text, so highlighting works on the
unmodified input.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from nltk.tokenize import RegexpTokenizer

# Turkish stopwords (based on the Lucene/Snowball Turkish list, trimmed)
STOPWORDS = frozenset([
    've', 'veya', 'ile', 'ama', 'fakat', 'ancak', 'çünkü', 'ki', 'de', 'da',
    'mi', 'mı', 'mu', 'mü', 'bu', 'şu', 'o', 'bir', 'her', 'hiç', 'için',
    'gibi', 'kadar', 'daha', 'çok', 'en', 'ne', 'neden', 'nasıl', 'hem',
    'ise', 'diye', 'olan', 'olarak', 'sonra', 'önce', 'biz', 'ben', 'sen',
    'siz', 'onlar', 'şey', 'yani', 'ya', 'eğer'
])

APOSTROPHES = "'’"

# Word = letters/digits, optionally joined by apostrophes ("ankara'ya")
_word_tokenizer = RegexpTokenizer(r"\w+(?:['’]\w+)*")
_number_pattern = re.compile(r'^[0-9_]+$')


@dataclass
class Token:
    """
    Single term flowing through the analysis chain.

    `text` is rewritten by filters; `keyword` is set by the tokenizer
    and only read downstream.
    """
    text: str
    start_offset: int = 0
    end_offset: int = 0
    position: int = 0
    keyword: bool = False


def turkish_lower(text: str) -> str:
    """
    Lowercase using Turkish casing rules.

    Examples:
        >>> turkish_lower("İSTANBUL")
        'istanbul'
        >>> turkish_lower("IRMAK")
        'ırmak'
    """
    return text.replace("I", "ı").replace("İ", "i").lower()


def strip_apostrophe(word: str) -> str:
    """Drop everything from the first apostrophe on ("ankara'ya" → "ankara")."""
    for i, ch in enumerate(word):
        if ch in APOSTROPHES:
            return word[:i]
    return word


def tokenize(
    text: str,
    protected_words: Optional[Iterable[str]] = None,
    remove_stopwords: bool = True
) -> List[Token]:
    """
    Tokenize Turkish text into a token stream for the stem filter.

    Args:
        text: Input text
        protected_words: Words to mark as keywords (never stemmed),
            compared after Turkish lowercasing
        remove_stopwords: Drop Turkish stopwords

    Returns:
        List of Token in text order; positions count emitted tokens

    Examples:
        >>> [t.text for t in tokenize("Kitapları İstanbul'da okudum")]
        ['kitapları', 'istanbul', 'okudum']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    protected = frozenset(turkish_lower(w) for w in (protected_words or ()))

    tokens = []
    for start, end in _word_tokenizer.span_tokenize(text):
        term = strip_apostrophe(turkish_lower(text[start:end]))

        if not term or _number_pattern.match(term):
            continue
        if remove_stopwords and term in STOPWORDS:
            continue

        tokens.append(Token(
            text=term,
            start_offset=start,
            end_offset=end,
            position=len(tokens),
            keyword=term in protected,
        ))

    return tokens

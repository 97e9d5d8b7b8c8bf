"""
Text normalization, tokenization, stemming and stopwords.

The tokenizer and stemmer are plain callables so the algorithm can be swapped
without touching the stem-completion logic:

    tokenize(text) -> list of tokens
    stem(token) -> stem
"""

import re
from typing import Callable, Iterable, List, Optional, Set

import nltk
import pandas as pd
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer, SnowballStemmer
from nltk.tokenize import WhitespaceTokenizer

from happy_moments.config import DEFAULT_STEMMER, DOMAIN_STOPWORDS


Tokenizer = Callable[[str], List[str]]
StemFunction = Callable[[str], str]

PUNCTUATION_RE = re.compile(r'[^\w\s]|_')
DIGIT_RE = re.compile(r'\d')
WHITESPACE_RE = re.compile(r'\s+')

_whitespace_tokenizer = WhitespaceTokenizer()


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize_text(text) -> str:
    """
    Lowercase, strip punctuation and digits, and collapse whitespace.

    Args:
        text: Raw text (NaN or None is treated as empty)

    Returns:
        Normalized string, possibly empty
    """
    if text is None or (isinstance(text, float) and pd.isna(text)):
        return ""
    text = str(text).lower()
    text = PUNCTUATION_RE.sub('', text)
    text = DIGIT_RE.sub('', text)
    text = WHITESPACE_RE.sub(' ', text)
    return text.strip()


def normalize_corpus(texts: pd.Series) -> pd.Series:
    """Normalize every entry, keeping the input index and order."""
    return texts.map(normalize_text)


# =============================================================================
# TOKENIZING AND STEMMING
# =============================================================================

def tokenize(text: str) -> List[str]:
    return _whitespace_tokenizer.tokenize(text)


def get_stemmer(name: str = DEFAULT_STEMMER) -> StemFunction:
    """
    Return the stem function for a named nltk stemming algorithm.

    Args:
        name: 'porter' or 'snowball'

    Raises:
        ValueError: If the name is not a known stemmer
    """
    name = name.lower()
    if name == 'porter':
        return PorterStemmer().stem
    if name == 'snowball':
        return SnowballStemmer('english').stem
    raise ValueError(f"Unknown stemmer '{name}'. Expected 'porter' or 'snowball'.")


def stem_corpus(
    texts: pd.Series,
    stem: Optional[StemFunction] = None,
    tokenizer: Tokenizer = tokenize,
) -> pd.Series:
    """Stem each whitespace token, one list of stems per record."""
    stem = stem or get_stemmer()
    return texts.map(lambda text: [stem(token) for token in tokenizer(text)])


# =============================================================================
# STOPWORDS
# =============================================================================

def ensure_nltk_data() -> None:
    try:
        nltk.data.find('corpora/stopwords')
    except LookupError:
        print("Downloading NLTK stopwords...")
        nltk.download('stopwords', quiet=True)


def build_stopwords(
    base_words: Optional[Iterable[str]] = None,
    extra_words: Iterable[str] = DOMAIN_STOPWORDS,
) -> Set[str]:
    """
    Build the stopword set used by the stem resolver.

    The base list defaults to the NLTK English stopwords. Every word is passed
    through normalize_text so contractions match normalized tokens
    ("don't" -> "dont").

    Args:
        base_words: Base stopword list, or None for NLTK English
        extra_words: Domain-specific additions

    Returns:
        Set of normalized stopwords
    """
    if base_words is None:
        ensure_nltk_data()
        base_words = stopwords.words('english')

    words = {normalize_text(w) for w in base_words}
    words.update(normalize_text(w) for w in extra_words)
    words.discard("")
    return words

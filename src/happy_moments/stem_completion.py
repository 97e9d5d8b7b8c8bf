"""
Stem completion: turn stemmed tokens back into readable words.

Every stem is mapped to the surface word it most often came from, after
stopwords are removed. Ties go to the alphabetically first surface word so the
result does not depend on row order. Stems whose only surface forms were
stopwords get no canonical word and their tokens drop out of the text.
"""

from typing import Dict, Iterable, Optional, Set

import pandas as pd
from tqdm import tqdm

from happy_moments.config import TEXT_COLUMN
from happy_moments.text_processing import (
    StemFunction,
    Tokenizer,
    get_stemmer,
    normalize_corpus,
    stem_corpus,
    tokenize,
)


PAIR_COLUMNS = ['record_id', 'position', 'stem', 'surface_word']


def assign_record_ids(moments: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of the records with a sequential 'id' column starting at 1."""
    records = moments.drop(columns='id', errors='ignore').reset_index(drop=True)
    records.insert(0, 'id', range(1, len(records) + 1))
    return records


def build_stem_word_pairs(
    normalized: pd.Series,
    stem: Optional[StemFunction] = None,
    tokenizer: Tokenizer = tokenize,
) -> pd.DataFrame:
    """
    Pair every token with its stem.

    Args:
        normalized: Normalized texts indexed by record id
        stem: Stem function (defaults to the configured nltk stemmer)
        tokenizer: Whitespace tokenizer

    Returns:
        DataFrame with columns record_id, position, stem, surface_word in
        corpus order
    """
    stems = stem_corpus(normalized, stem=stem or get_stemmer(), tokenizer=tokenizer)

    rows = []
    for record_id, text, record_stems in tqdm(
        zip(normalized.index, normalized, stems),
        total=len(normalized),
        desc="Pairing stems",
        unit="records",
    ):
        for position, (word, word_stem) in enumerate(zip(tokenizer(text), record_stems)):
            rows.append((record_id, position, word_stem, word))

    return pd.DataFrame(rows, columns=PAIR_COLUMNS)


def remove_stopwords(pairs: pd.DataFrame, stopwords: Set[str]) -> pd.DataFrame:
    return pairs.loc[~pairs['surface_word'].isin(stopwords)].reset_index(drop=True)


def resolve_stem_map(pairs: pd.DataFrame) -> Dict[str, str]:
    """
    Pick the canonical surface word for every stem.

    Args:
        pairs: Stopword-filtered stem/word pairs

    Returns:
        Dictionary of stem -> most frequent surface word
    """
    if pairs.empty:
        return {}

    counts = (
        pairs.groupby(['stem', 'surface_word'])
             .size()
             .rename('n')
             .reset_index()
             .sort_values(['stem', 'n', 'surface_word'], ascending=[True, False, True])
    )
    canonical = counts.drop_duplicates('stem', keep='first')
    return dict(zip(canonical['stem'], canonical['surface_word']))


def reassemble_records(
    pairs: pd.DataFrame,
    stem_map: Dict[str, str],
    record_ids: Iterable,
) -> pd.Series:
    """
    Rebuild one cleaned text per record from canonical words.

    Tokens keep their original order. Records without any surviving token get
    an empty string.

    Args:
        pairs: Stopword-filtered stem/word pairs
        stem_map: Output of resolve_stem_map
        record_ids: Every record id that must appear in the result

    Returns:
        Series of cleaned text indexed by record id
    """
    words = pairs.assign(word=pairs['stem'].map(stem_map)).dropna(subset=['word'])
    words = words.sort_values(['record_id', 'position'], kind='stable')
    texts = words.groupby('record_id', sort=False)['word'].agg(' '.join)
    return texts.reindex(pd.Index(list(record_ids)), fill_value="").rename('cleaned_text')


def complete_stems(
    moments: pd.DataFrame,
    stopwords: Set[str],
    stem: Optional[StemFunction] = None,
    tokenizer: Tokenizer = tokenize,
    text_column: str = TEXT_COLUMN,
) -> pd.DataFrame:
    """
    Normalize, stem, resolve and reassemble the text of every record.

    Args:
        moments: Raw happy-moment records
        stopwords: Stopword set applied to surface words
        stem: Stem function (defaults to the configured nltk stemmer)
        tokenizer: Whitespace tokenizer
        text_column: Column holding the raw text

    Returns:
        Copy of the records with 'id' and 'cleaned_text' columns added
    """
    records = assign_record_ids(moments)
    normalized = normalize_corpus(records.set_index('id')[text_column])

    pairs = build_stem_word_pairs(normalized, stem=stem, tokenizer=tokenizer)
    kept = remove_stopwords(pairs, stopwords)
    print(f"    {len(pairs):,} tokens, {len(kept):,} after stopword removal")

    stem_map = resolve_stem_map(kept)
    print(f"    Resolved {len(stem_map):,} stems to canonical words")

    cleaned = reassemble_records(kept, stem_map, records['id'])
    records['cleaned_text'] = records['id'].map(cleaned)
    return records

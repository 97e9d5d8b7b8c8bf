"""
Word-frequency aggregates over the analysis table.

All functions are read-only: they take the analysis table (one row per moment,
with 'cleaned_text' and 'word_count') and return new DataFrames. Ordering is
count descending, then word ascending, so equal counts come out in a stable
order.
"""

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer

from happy_moments.config import AGE_BUCKET_WIDTH, TOP_WORDS_PER_BUCKET


def tokenize_rows(table: pd.DataFrame, columns: Sequence[str] = ()) -> pd.DataFrame:
    """
    One row per word occurrence.

    Args:
        table: Analysis table
        columns: Extra columns to carry alongside each word

    Returns:
        DataFrame with 'row_id', the requested columns and 'word'
    """
    words = table.assign(word=table['cleaned_text'].fillna("").astype(str).str.split())
    words = words.explode('word').dropna(subset=['word'])
    words = words.rename_axis('row_id').reset_index()
    return words[['row_id', *columns, 'word']]


def unigram_counts(table: pd.DataFrame) -> pd.DataFrame:
    counts = tokenize_rows(table).groupby('word').size().rename('count').reset_index()
    return counts.sort_values(['count', 'word'], ascending=[False, True]).reset_index(drop=True)


def bigram_counts(table: pd.DataFrame) -> pd.DataFrame:
    """
    Count adjacent word pairs within each moment.

    Single-word moments are excluded before counting.

    Args:
        table: Analysis table with 'cleaned_text' and 'word_count'

    Returns:
        DataFrame with columns word1, word2, count
    """
    texts = table.loc[table['word_count'] != 1, 'cleaned_text'].fillna("").astype(str)
    if not (texts.str.split().str.len() >= 2).any():
        return pd.DataFrame({
            'word1': pd.Series(dtype=object),
            'word2': pd.Series(dtype=object),
            'count': pd.Series(dtype=np.int64),
        })

    vec = CountVectorizer(
        tokenizer=str.split,
        token_pattern=None,
        lowercase=False,
        ngram_range=(2, 2),
    )
    X = vec.fit_transform(texts)
    vocab = vec.get_feature_names_out()
    counts = np.asarray(X.sum(axis=0)).ravel()

    pairs = [bigram.split(' ') for bigram in vocab]
    bigrams = pd.DataFrame({
        'word1': [p[0] for p in pairs],
        'word2': [p[1] for p in pairs],
        'count': counts.astype(np.int64),
    })
    return (bigrams.sort_values(['count', 'word1', 'word2'], ascending=[False, True, True])
                   .reset_index(drop=True))


def grouped_proportions(table: pd.DataFrame, attribute: str) -> pd.DataFrame:
    """
    Word proportions within each value of a demographic attribute.

    Proportions are normalized by the total number of words observed for that
    attribute value, so they sum to 1 per value. Every observed value is kept.

    Args:
        table: Analysis table
        attribute: Column to group by (e.g. 'gender')

    Returns:
        DataFrame with columns <attribute>, word, count, proportion
    """
    words = tokenize_rows(table, [attribute])
    counts = words.groupby([attribute, 'word']).size().rename('count').reset_index()
    totals = counts.groupby(attribute)['count'].transform('sum')
    counts['proportion'] = counts['count'] / totals
    return (counts.sort_values([attribute, 'count', 'word'], ascending=[True, False, True])
                  .reset_index(drop=True))


def pivot_proportions(
    proportions: pd.DataFrame,
    attribute: str,
    values: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Wide view of grouped_proportions for side-by-side comparison.

    Args:
        proportions: Output of grouped_proportions
        attribute: The grouping column
        values: Attribute values to keep as columns (default: all observed)

    Returns:
        DataFrame with a 'word' column and one proportion column per value,
        zero where a word was not observed for that value

    Raises:
        ValueError: If a requested value was not observed
    """
    wide = proportions.pivot_table(
        index='word', columns=attribute, values='proportion', fill_value=0.0
    )
    if values is not None:
        missing = [v for v in values if v not in wide.columns]
        if missing:
            raise ValueError(
                f"Values {missing} not observed for '{attribute}'. "
                f"Available: {list(wide.columns)}"
            )
        wide = wide[list(values)]
    wide.columns.name = None
    return wide.reset_index()


def age_bucket_label(start: int, width: int = AGE_BUCKET_WIDTH) -> str:
    return f"[{start}, {start + width})"


def age_bucket_top_words(
    table: pd.DataFrame,
    width: int = AGE_BUCKET_WIDTH,
    top_n: int = TOP_WORDS_PER_BUCKET,
) -> pd.DataFrame:
    """
    Most frequent words per fixed-width age bucket.

    Buckets are half-open, [start, start + width), with start a multiple of
    width. Rows without a usable age are left out.

    Args:
        table: Analysis table with a numeric 'age' column
        width: Bucket width in years
        top_n: Words to keep per bucket

    Returns:
        DataFrame with columns age_bucket, bucket_start, word, count, rank
    """
    aged = table.dropna(subset=['age'])
    aged = aged.assign(bucket_start=(aged['age'].astype(int) // width) * width)

    words = tokenize_rows(aged, ['bucket_start'])
    counts = words.groupby(['bucket_start', 'word']).size().rename('count').reset_index()
    counts = counts.sort_values(['bucket_start', 'count', 'word'], ascending=[True, False, True])
    counts['rank'] = counts.groupby('bucket_start').cumcount() + 1

    top = counts.loc[counts['rank'] <= top_n].copy()
    top.insert(0, 'age_bucket', top['bucket_start'].map(lambda s: age_bucket_label(int(s), width)))
    return top.reset_index(drop=True)

"""
Join cleaned moments with respondent demographics and filter to the
analysis population.
"""

import numpy as np
import pandas as pd

from happy_moments.config import (
    ALLOWED_VALUES,
    ANALYSIS_COLUMNS,
    COLUMN_RENAMES,
    REFLECTION_PERIOD_LABELS,
    RESPONDENT_COLUMN,
)
from happy_moments.data_loading import SchemaMismatch, require_columns


def check_join_inputs(moments: pd.DataFrame, demographics: pd.DataFrame) -> None:
    """
    Fail before any text processing if the two sources cannot supply every
    analysis column between them.

    Raises:
        SchemaMismatch: If a column is found in neither table
    """
    available = set(moments.columns) | set(demographics.columns) | {'id', 'cleaned_text'}
    missing = [col for col in ANALYSIS_COLUMNS if col not in available]
    if missing:
        raise SchemaMismatch(
            f"Neither happy moments nor demographics provide columns: {missing}"
        )


def join_demographics(moments: pd.DataFrame, demographics: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join cleaned moments to demographics on the respondent id.

    Moments without a matching respondent are dropped. When both tables carry a
    column of the same name (HappyDB keeps reflection_period on the moments
    file) the moments column is used.

    Args:
        moments: Cleaned records with 'id' and 'cleaned_text'
        demographics: Per-respondent attributes keyed by 'wid'

    Returns:
        Joined table restricted to the analysis columns
    """
    demo_cols = [
        col for col in demographics.columns
        if col == RESPONDENT_COLUMN or col not in moments.columns
    ]
    joined = moments.merge(demographics[demo_cols], on=RESPONDENT_COLUMN, how='inner')
    require_columns(joined, ANALYSIS_COLUMNS, "joined moments")
    return joined[ANALYSIS_COLUMNS].copy()


def apply_filters(joined: pd.DataFrame) -> pd.DataFrame:
    """Keep rows whose categorical attributes all fall in the allowed sets."""
    keep = pd.Series(True, index=joined.index)
    for col, allowed in ALLOWED_VALUES.items():
        keep &= joined[col].isin(allowed)
    return joined.loc[keep].reset_index(drop=True)


def recode_reflection_period(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out['reflection_period'] = out['reflection_period'].replace(REFLECTION_PERIOD_LABELS)
    return out


def add_word_count(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out['word_count'] = out['cleaned_text'].fillna("").str.split().str.len().astype(int)
    return out


def build_analysis_table(moments: pd.DataFrame, demographics: pd.DataFrame) -> pd.DataFrame:
    """
    Produce the final analysis table from cleaned moments and demographics.

    Steps: inner join, conjunctive category filters, reflection period
    recoding, numeric age, has_children flag, word counts, and renaming to
    the analysis column names.

    Args:
        moments: Cleaned records (checkpoint contents)
        demographics: Demographic table

    Returns:
        Analysis table, one row per retained moment
    """
    joined = join_demographics(moments, demographics)
    print(f"    {len(joined):,} moments matched a respondent")

    table = apply_filters(joined)
    print(f"    {len(table):,} moments passed the demographic filters")

    table = recode_reflection_period(table)
    table = add_word_count(table)
    table['age'] = np.floor(pd.to_numeric(table['age'], errors='coerce')).astype('Int64')
    table['has_children'] = table['parenthood'] == 'y'
    return table.rename(columns=COLUMN_RENAMES)

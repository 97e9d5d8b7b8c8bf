"""
Readers for the two HappyDB sources and the processed-moments checkpoint.

Any failure to read a source ends the run: unreadable locations raise
DataSourceUnavailable, missing columns or malformed tables raise SchemaMismatch.
"""

from pathlib import Path
from typing import List, Union

import pandas as pd

from happy_moments.config import CHECKPOINT_FILENAME, REQUIRED_COLUMNS


class DataSourceUnavailable(OSError):
    """A source file or URL could not be read."""


class SchemaMismatch(KeyError):
    """A table is missing expected columns or is not valid tabular data."""


# =============================================================================
# VALIDATION
# =============================================================================

def validate_dataframe(df: pd.DataFrame, required: List[str]) -> List[str]:
    """
    Check that a dataframe has the required columns.

    Args:
        df: DataFrame to validate
        required: Column names that must be present

    Returns:
        List of missing columns (empty if all present)
    """
    return [col for col in required if col not in df.columns]


def require_columns(df: pd.DataFrame, required: List[str], name: str) -> None:
    missing = validate_dataframe(df, required)
    if missing:
        raise SchemaMismatch(
            f"{name} is missing required columns: {missing}. "
            f"Available columns: {list(df.columns)}"
        )


# =============================================================================
# SOURCES
# =============================================================================

def read_source(source: Union[str, Path], name: str, **read_kwargs) -> pd.DataFrame:
    """
    Read a CSV from a local path or URL.

    Args:
        source: File path or URL
        name: Label used in error messages
        **read_kwargs: Passed through to pd.read_csv

    Returns:
        The loaded DataFrame

    Raises:
        DataSourceUnavailable: If the location cannot be read
        SchemaMismatch: If the content is not a parsable table
    """
    try:
        df = pd.read_csv(source, **read_kwargs)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise SchemaMismatch(f"{name} at {source} is not a valid table: {e}") from e
    except OSError as e:
        raise DataSourceUnavailable(f"Could not read {name} from {source}: {e}") from e
    return df


def load_happy_moments(source: Union[str, Path]) -> pd.DataFrame:
    """Load the happy-moment records and check their columns."""
    print(f"  Loading happy moments: {source}")
    df = read_source(source, "happy moments")
    require_columns(df, REQUIRED_COLUMNS['moments'], "happy moments")
    print(f"    Loaded {len(df):,} rows")
    return df


def load_demographics(source: Union[str, Path]) -> pd.DataFrame:
    """Load the per-respondent demographic table and check its columns."""
    print(f"  Loading demographics: {source}")
    df = read_source(source, "demographics")
    require_columns(df, REQUIRED_COLUMNS['demographics'], "demographics")
    print(f"    Loaded {len(df):,} rows")
    return df


# =============================================================================
# CHECKPOINT
# =============================================================================

def save_processed_moments(df: pd.DataFrame, data_dir: Union[str, Path]) -> Path:
    """
    Write the reassembled records to processed_moments.csv.

    Args:
        df: Records with 'id' and 'cleaned_text' columns
        data_dir: Directory to write into (created if missing)

    Returns:
        Path of the written checkpoint
    """
    require_columns(df, ['id', 'cleaned_text'], "processed moments")
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / CHECKPOINT_FILENAME
    df.to_csv(path, index=False)
    print(f"  Saved checkpoint: {path} ({len(df):,} rows)")
    return path


def load_processed_moments(path: Union[str, Path]) -> pd.DataFrame:
    """
    Re-read the checkpoint written by save_processed_moments.

    cleaned_text is read verbatim: empty fields come back as "" and words
    such as "nan" or "null" are not treated as missing. Other columns keep
    the usual NA parsing.
    """
    df = read_source(path, "processed moments")
    require_columns(df, ['id', 'cleaned_text'], "processed moments")
    text = read_source(
        path, "processed moments",
        usecols=['cleaned_text'], dtype=str, keep_default_na=False,
    )
    df['cleaned_text'] = text['cleaned_text']
    return df

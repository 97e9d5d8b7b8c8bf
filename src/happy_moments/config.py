"""
Configuration for the happy-moment pipeline.

Paths and source locations come from a .env file (searched upward from this
module) or the process environment. Everything else is a fixed constant of the
analysis.

Environment Variables:
    DATA_DIR: Directory for the checkpoint and aggregate CSVs (default: ./data)
    OUTPUT_DIR: Directory for PNG plots (default: ./figures)
    HM_DATA_URL: Location of the happy-moment CSV
    DEMO_DATA_URL: Location of the demographic CSV
    STEMMER: Stemming strategy, 'porter' or 'snowball' (default: porter)
"""

import os
from pathlib import Path
from typing import Dict, Union

from dotenv import load_dotenv


# =============================================================================
# DATA SOURCES
# =============================================================================

HM_DATA_URL = "https://raw.githubusercontent.com/rit-public/HappyDB/master/happydb/data/cleaned_hm.csv"
DEMO_DATA_URL = "https://raw.githubusercontent.com/rit-public/HappyDB/master/happydb/data/demographic.csv"

TEXT_COLUMN = "cleaned_hm"
RESPONDENT_COLUMN = "wid"

REQUIRED_COLUMNS = {
    'moments': [RESPONDENT_COLUMN, TEXT_COLUMN, 'ground_truth_category'],
    'demographics': [RESPONDENT_COLUMN, 'age', 'country', 'gender', 'marital', 'parenthood'],
}

CHECKPOINT_FILENAME = "processed_moments.csv"


# =============================================================================
# TEXT PROCESSING
# =============================================================================

DEFAULT_STEMMER = "porter"

# Frequent in happy-moment prompts but carry no content
DOMAIN_STOPWORDS = [
    'happy', 'ago', 'yesterday', 'lot', 'today', 'months', 'month',
    'happier', 'happiest', 'last', 'week', 'past',
]


# =============================================================================
# DEMOGRAPHIC FILTERS
# =============================================================================

# Raw HappyDB column -> analysis table column
COLUMN_RENAMES = {
    'wid': 'respondent_id',
    'cleaned_hm': 'raw_text',
    'marital': 'marital_status',
}

ANALYSIS_COLUMNS = [
    'id', 'wid', 'cleaned_hm', 'cleaned_text', 'gender', 'marital',
    'parenthood', 'reflection_period', 'age', 'country', 'ground_truth_category',
]

ALLOWED_VALUES = {
    'gender': {'m', 'f'},
    'marital': {'single', 'married'},
    'parenthood': {'n', 'y'},
    'reflection_period': {'24h', '3m'},
}

REFLECTION_PERIOD_LABELS = {
    '24h': 'hours_24',
    '3m': 'months_3',
}

COMPARISON_ATTRIBUTES = ['gender', 'marital_status', 'parenthood', 'reflection_period']


# =============================================================================
# AGGREGATION
# =============================================================================

AGE_BUCKET_WIDTH = 5
TOP_WORDS_PER_BUCKET = 3
TOP_WORDS_TO_PLOT = 20


# =============================================================================
# ENVIRONMENT SETUP
# =============================================================================

def find_env_file() -> Union[Path, None]:
    """Return the nearest .env at or above this module, if any."""
    search_dir = Path(__file__).resolve().parent
    for parent in [search_dir] + list(search_dir.parents):
        env_path = parent / ".env"
        if env_path.exists():
            return env_path
    return None


def load_environment() -> Dict[str, Union[Path, str]]:
    """
    Load environment configuration and resolve data sources and directories.

    A .env file is optional; variables already set in the environment take
    precedence over it.

    Returns:
        Dictionary with 'data_dir', 'output_dir', 'hm_data_url',
        'demo_data_url' and 'stemmer'
    """
    env_path = find_env_file()
    if env_path is not None:
        load_dotenv(env_path)
        print(f"Loaded .env from: {env_path}")

    return {
        'data_dir': Path(os.environ.get('DATA_DIR', './data')),
        'output_dir': Path(os.environ.get('OUTPUT_DIR', './figures')),
        'hm_data_url': os.environ.get('HM_DATA_URL', HM_DATA_URL),
        'demo_data_url': os.environ.get('DEMO_DATA_URL', DEMO_DATA_URL),
        'stemmer': os.environ.get('STEMMER', DEFAULT_STEMMER),
    }


def create_directories(env: Dict[str, Union[Path, str]]) -> None:
    """Create the data and output directories if they do not exist."""
    for key in ('data_dir', 'output_dir'):
        Path(env[key]).mkdir(parents=True, exist_ok=True)

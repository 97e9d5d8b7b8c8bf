import pandas as pd
import pytest

from happy_moments.text_processing import build_stopwords


BASE_STOPWORDS = [
    'i', 'me', 'my', 'we', 'a', 'an', 'the', 'and', 'to', 'of', 'with',
    'had', 'was', 'is', 'it', 'for', 'in', 'on', "don't",
]


@pytest.fixture
def stopwords():
    return build_stopwords(base_words=BASE_STOPWORDS)


@pytest.fixture
def moments():
    return pd.DataFrame({
        'hmid': [101, 102, 103, 104, 105],
        'wid': [1, 1, 2, 3, 4],
        'reflection_period': ['24h', '3m', '24h', '3m', '24h'],
        'cleaned_hm': [
            "I had a great day! 123",
            "Walking the dogs with my family.",
            "happy",
            "We walked the dog and had a great dinner",
            "My family went walking",
        ],
        'ground_truth_category': ['achievement', None, None, 'affection', None],
    })


@pytest.fixture
def demographics():
    return pd.DataFrame({
        'wid': [1, 2, 3, 4],
        'age': ['27', '31', 'prefer not to say', '44.0'],
        'country': ['USA', 'IND', 'USA', 'USA'],
        'gender': ['f', 'm', 'm', 'nonbinary'],
        'marital': ['married', 'single', 'single', 'married'],
        'parenthood': ['y', 'n', 'n', 'y'],
    })


@pytest.fixture
def analysis_table():
    return pd.DataFrame({
        'id': [1, 2, 3, 4, 5, 6],
        'cleaned_text': [
            "great day",
            "great day friend",
            "dinner",
            "",
            "friend dinner great",
            "walk dog",
        ],
        'word_count': [2, 3, 1, 0, 3, 2],
        'gender': ['f', 'm', 'f', 'm', 'f', 'm'],
        'parenthood': ['y', 'n', 'n', 'y', 'y', 'n'],
        'age': pd.array([22, 24, 25, 31, None, 29], dtype='Int64'),
    })

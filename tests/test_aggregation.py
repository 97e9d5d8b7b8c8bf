import pandas as pd
import pytest

from happy_moments.aggregation import (
    age_bucket_label,
    age_bucket_top_words,
    bigram_counts,
    grouped_proportions,
    pivot_proportions,
    tokenize_rows,
    unigram_counts,
)


def test_tokenize_rows_skips_empty_texts(analysis_table):
    words = tokenize_rows(analysis_table, ['gender'])
    assert list(words.columns) == ['row_id', 'gender', 'word']
    assert 3 not in set(words['row_id'])
    assert len(words) == 11


def test_unigram_counts(analysis_table):
    counts = unigram_counts(analysis_table)
    assert counts.values.tolist() == [
        ['great', 3],
        ['day', 2],
        ['dinner', 2],
        ['friend', 2],
        ['dog', 1],
        ['walk', 1],
    ]


def test_bigram_counts(analysis_table):
    counts = bigram_counts(analysis_table)
    assert list(counts.columns) == ['word1', 'word2', 'count']
    assert counts.values.tolist() == [
        ['great', 'day', 2],
        ['day', 'friend', 1],
        ['dinner', 'great', 1],
        ['friend', 'dinner', 1],
        ['walk', 'dog', 1],
    ]


def test_bigram_counts_ignores_single_word_rows():
    table = pd.DataFrame({'cleaned_text': ["dinner", "great", ""], 'word_count': [1, 1, 0]})
    counts = bigram_counts(table)
    assert counts.empty
    assert list(counts.columns) == ['word1', 'word2', 'count']


def test_bigrams_do_not_cross_records():
    table = pd.DataFrame({'cleaned_text': ["great day", "walk dog"], 'word_count': [2, 2]})
    pairs = set(map(tuple, bigram_counts(table)[['word1', 'word2']].values.tolist()))
    assert ('day', 'walk') not in pairs


def test_grouped_proportions_sum_to_one(analysis_table):
    props = grouped_proportions(analysis_table, 'gender')
    assert list(props.columns) == ['gender', 'word', 'count', 'proportion']

    sums = props.groupby('gender')['proportion'].sum()
    assert sums.to_dict() == pytest.approx({'f': 1.0, 'm': 1.0})

    female = props.loc[props['gender'] == 'f']
    assert list(female['word']) == ['dinner', 'great', 'day', 'friend']
    assert female['proportion'].iloc[0] == pytest.approx(2 / 6)


def test_grouped_proportions_keeps_every_observed_value(analysis_table):
    table = analysis_table.assign(gender=['f', 'm', 'x', 'm', 'f', 'x'])
    props = grouped_proportions(table, 'gender')
    assert set(props['gender']) == {'f', 'm', 'x'}
    for _, group in props.groupby('gender'):
        assert group['proportion'].sum() == pytest.approx(1.0)


def test_pivot_proportions(analysis_table):
    props = grouped_proportions(analysis_table, 'gender')
    wide = pivot_proportions(props, 'gender')

    assert list(wide.columns) == ['word', 'f', 'm']
    walk = wide.loc[wide['word'] == 'walk'].iloc[0]
    assert walk['f'] == 0.0
    assert walk['m'] == pytest.approx(1 / 5)


def test_pivot_proportions_selects_and_validates_values(analysis_table):
    props = grouped_proportions(analysis_table, 'gender')
    assert list(pivot_proportions(props, 'gender', ['m', 'f']).columns) == ['word', 'm', 'f']
    with pytest.raises(ValueError):
        pivot_proportions(props, 'gender', ['m', 'x'])


def test_age_bucket_label():
    assert age_bucket_label(20) == "[20, 25)"
    assert age_bucket_label(30, width=10) == "[30, 40)"


def test_age_bucket_top_words(analysis_table):
    top = age_bucket_top_words(analysis_table)
    assert list(top.columns) == ['age_bucket', 'bucket_start', 'word', 'count', 'rank']
    assert top[['age_bucket', 'word', 'count', 'rank']].values.tolist() == [
        ['[20, 25)', 'day', 2, 1],
        ['[20, 25)', 'great', 2, 2],
        ['[20, 25)', 'friend', 1, 3],
        ['[25, 30)', 'dinner', 1, 1],
        ['[25, 30)', 'dog', 1, 2],
        ['[25, 30)', 'walk', 1, 3],
    ]


def test_age_bucket_top_words_respects_top_n(analysis_table):
    top = age_bucket_top_words(analysis_table, top_n=1)
    assert top.groupby('age_bucket').size().max() == 1

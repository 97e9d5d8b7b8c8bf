import pandas as pd
import pytest

from happy_moments.data_loading import SchemaMismatch
from happy_moments.demographics import (
    add_word_count,
    apply_filters,
    build_analysis_table,
    check_join_inputs,
    join_demographics,
    recode_reflection_period,
)
from happy_moments.stem_completion import complete_stems


@pytest.fixture
def processed(moments, stopwords):
    return complete_stems(moments, stopwords)


def test_join_keeps_moment_columns_and_drops_unmatched(processed, demographics):
    demographics = demographics.loc[demographics['wid'] != 2]
    joined = join_demographics(processed, demographics)

    assert 2 not in set(joined['wid'])
    assert sorted(joined['id']) == [1, 2, 4, 5]
    assert 'reflection_period' in joined.columns
    assert 'reflection_period_x' not in joined.columns


def test_join_prefers_moment_reflection_period(processed, demographics):
    demographics = demographics.assign(reflection_period='never')
    joined = join_demographics(processed, demographics)
    assert set(joined['reflection_period']) == {'24h', '3m'}


def test_join_missing_column_raises(processed, demographics):
    with pytest.raises(SchemaMismatch):
        join_demographics(processed, demographics.drop(columns=['country']))


def test_nonbinary_row_is_joined_but_filtered(processed, demographics):
    joined = join_demographics(processed, demographics)
    assert 'nonbinary' in set(joined['gender'])

    filtered = apply_filters(joined)
    assert 'nonbinary' not in set(filtered['gender'])
    assert 5 not in set(filtered['id'])


def test_filters_are_conjunctive():
    df = pd.DataFrame({
        'gender': ['m', 'f', 'm', 'f'],
        'marital': ['single', 'divorced', 'married', 'single'],
        'parenthood': ['n', 'y', 'maybe', 'y'],
        'reflection_period': ['24h', '3m', '3m', '1w'],
    })
    out = apply_filters(df)
    assert len(out) == 1
    assert out.loc[0, 'gender'] == 'm'


def test_recode_reflection_period():
    df = pd.DataFrame({'reflection_period': ['24h', '3m']})
    out = recode_reflection_period(df)
    assert list(out['reflection_period']) == ['hours_24', 'months_3']
    assert list(df['reflection_period']) == ['24h', '3m']


def test_add_word_count():
    df = pd.DataFrame({'cleaned_text': ["great day", "", "dinner", None]})
    assert list(add_word_count(df)['word_count']) == [2, 0, 1, 0]


def test_build_analysis_table(processed, demographics):
    table = build_analysis_table(processed, demographics)

    assert list(table['id']) == [1, 2, 3, 4]
    assert {'respondent_id', 'raw_text', 'marital_status', 'has_children', 'word_count'} <= set(table.columns)
    assert 'wid' not in table.columns
    assert set(table['reflection_period']) == {'hours_24', 'months_3'}
    assert list(table['word_count']) == [2, 3, 0, 4]
    assert list(table['has_children']) == [True, True, False, False]
    assert table.loc[0, 'age'] == 27
    assert pd.isna(table.loc[3, 'age'])


def test_check_join_inputs_accepts_column_from_either_table(moments, demographics):
    check_join_inputs(moments, demographics)
    check_join_inputs(
        moments.drop(columns=['reflection_period']),
        demographics.assign(reflection_period='24h'),
    )
    with pytest.raises(SchemaMismatch):
        check_join_inputs(moments.drop(columns=['reflection_period']), demographics)

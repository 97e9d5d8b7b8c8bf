"""
Happy-Moment Text Pipeline

Loads the HappyDB moments and demographics, rebuilds readable stemmed text,
joins respondent attributes and writes word-frequency aggregates and plots.

Usage:
    python -m happy_moments.pipeline

Environment Variables:
    see happy_moments.config
"""

from pathlib import Path
from typing import Dict, Optional, Set, Union

import pandas as pd

from happy_moments.aggregation import (
    age_bucket_top_words,
    bigram_counts,
    grouped_proportions,
    unigram_counts,
)
from happy_moments.config import COMPARISON_ATTRIBUTES, create_directories, load_environment
from happy_moments.data_loading import (
    load_demographics,
    load_happy_moments,
    load_processed_moments,
    save_processed_moments,
)
from happy_moments.demographics import build_analysis_table, check_join_inputs
from happy_moments.stem_completion import complete_stems
from happy_moments.text_processing import build_stopwords, get_stemmer
from happy_moments.visualization import (
    plot_age_bucket_top_words,
    plot_proportion_comparison,
    plot_top_words,
    plot_word_cloud,
)


def compute_aggregates(table: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """
    Every aggregate table derived from the analysis table.

    Returns:
        Dictionary keyed by output name (also used as the CSV file stem)
    """
    aggregates = {
        'unigram_counts': unigram_counts(table),
        'bigram_counts': bigram_counts(table),
        'age_bucket_top_words': age_bucket_top_words(table),
    }
    for attribute in COMPARISON_ATTRIBUTES:
        aggregates[f'proportions_{attribute}'] = grouped_proportions(table, attribute)
    return aggregates


def save_aggregates(aggregates: Dict[str, pd.DataFrame], data_dir: Path) -> None:
    for name, df in aggregates.items():
        path = data_dir / f"{name}.csv"
        df.to_csv(path, index=False)
        print(f"    Saved: {path.name} ({len(df):,} rows)")


def generate_plots(aggregates: Dict[str, pd.DataFrame], output_dir: Path) -> list:
    """
    Write the PNG plots for a set of aggregates.

    Proportion comparisons are drawn only for attributes with exactly two
    observed values.

    Returns:
        List of saved file names
    """
    saved = []
    if not aggregates['unigram_counts'].empty:
        saved.append(plot_top_words(aggregates['unigram_counts'], output_dir / "top_words.png"))
        saved.append(plot_word_cloud(aggregates['unigram_counts'], output_dir / "word_cloud.png"))
    if not aggregates['age_bucket_top_words'].empty:
        saved.append(plot_age_bucket_top_words(
            aggregates['age_bucket_top_words'], output_dir / "age_bucket_top_words.png"
        ))

    for attribute in COMPARISON_ATTRIBUTES:
        props = aggregates[f'proportions_{attribute}']
        values = sorted(props[attribute].unique())
        if len(values) != 2:
            print(f"    WARNING: Skipping {attribute} comparison - {len(values)} values observed")
            continue
        saved.append(plot_proportion_comparison(
            props, attribute, values, output_dir / f"proportions_{attribute}.png"
        ))

    names = [path.name for path in saved if path is not None]
    for name in names:
        print(f"    Saved: {name}")
    return names


def run_pipeline(
    env: Optional[Dict[str, Union[Path, str]]] = None,
    moments: Optional[pd.DataFrame] = None,
    demographics: Optional[pd.DataFrame] = None,
    stopwords: Optional[Set[str]] = None,
    make_plots: bool = True,
) -> Dict[str, pd.DataFrame]:
    """
    Run every stage once, end to end.

    Args:
        env: Output of load_environment (loaded when None)
        moments: Pre-loaded happy moments instead of reading hm_data_url
        demographics: Pre-loaded demographics instead of reading demo_data_url
        stopwords: Stopword set (NLTK English plus domain words when None)
        make_plots: Whether to write PNG plots

    Returns:
        Dictionary with 'processed_moments', 'analysis_table' and every
        aggregate table
    """
    print("=" * 60)
    print(" HAPPY MOMENTS PIPELINE")
    print("=" * 60)

    print("\n[1/7] Setting up environment...")
    env = env or load_environment()
    create_directories(env)
    data_dir, output_dir = Path(env['data_dir']), Path(env['output_dir'])
    print(f"  Data directory: {data_dir}")
    print(f"  Output directory: {output_dir}")

    print("\n[2/7] Loading datasets...")
    if moments is None:
        moments = load_happy_moments(env['hm_data_url'])
    if demographics is None:
        demographics = load_demographics(env['demo_data_url'])
    check_join_inputs(moments, demographics)

    print("\n[3/7] Cleaning and completing stems...")
    if stopwords is None:
        stopwords = build_stopwords()
    stem = get_stemmer(str(env.get('stemmer', 'porter')))
    processed = complete_stems(moments, stopwords, stem=stem)

    print("\n[4/7] Writing checkpoint...")
    checkpoint = save_processed_moments(processed, data_dir)
    processed = load_processed_moments(checkpoint)

    print("\n[5/7] Joining demographics...")
    table = build_analysis_table(processed, demographics)

    print("\n[6/7] Computing aggregates...")
    aggregates = compute_aggregates(table)
    save_aggregates(aggregates, data_dir)

    if make_plots:
        print("\n[7/7] Generating plots...")
        generate_plots(aggregates, output_dir)
    else:
        print("\n[7/7] Skipping plots")

    print("\n" + "=" * 60)
    print(" PIPELINE COMPLETE")
    print("=" * 60)

    return {'processed_moments': processed, 'analysis_table': table, **aggregates}


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    run_pipeline()

"""
Static plots of the happy-moment aggregates.

Each function takes an aggregate table, writes a PNG when given a path and
closes its figure. Nothing here feeds back into the pipeline.
"""

from pathlib import Path
from typing import List, Optional, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from wordcloud import WordCloud

from happy_moments.aggregation import pivot_proportions
from happy_moments.config import TOP_WORDS_TO_PLOT


PathLike = Union[str, Path]


def _require(df: pd.DataFrame, required: List[str], name: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"'{name}' is missing columns: {missing}")


def _save(fig: plt.Figure, out_path: Optional[PathLike]) -> Optional[Path]:
    saved = None
    if out_path:
        saved = Path(out_path)
        saved.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(saved, dpi=150, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    return saved


def plot_top_words(
    counts: pd.DataFrame,
    out_path: Optional[PathLike] = None,
    top_n: int = TOP_WORDS_TO_PLOT,
    title: str = "Most frequent words in happy moments",
) -> Optional[Path]:
    """
    Horizontal bar chart of the most frequent words.

    Args:
        counts: Output of unigram_counts (word, count)
        out_path: Where to write the PNG
        top_n: Number of words to show
        title: Figure title

    Returns:
        The saved path, or None when out_path is not given
    """
    _require(counts, ['word', 'count'], 'counts')
    top = counts.sort_values('count', ascending=False).head(top_n)

    fig, ax = plt.subplots(figsize=(8, max(3, 0.35 * len(top))))
    sns.barplot(data=top, x='count', y='word', color='#1f77b4', ax=ax)
    ax.set_title(title)
    ax.set_xlabel("Count")
    ax.set_ylabel("")
    fig.tight_layout()
    return _save(fig, out_path)


def plot_word_cloud(
    counts: pd.DataFrame,
    out_path: Optional[PathLike] = None,
    max_words: int = 100,
    colormap: str = 'YlOrRd',
) -> Optional[Path]:
    """Word cloud sized by word count."""
    _require(counts, ['word', 'count'], 'counts')
    frequencies = dict(zip(counts['word'], counts['count']))

    fig, ax = plt.subplots(figsize=(12, 6))
    if frequencies:
        wordcloud = WordCloud(
            width=1200,
            height=600,
            background_color='white',
            colormap=colormap,
            max_words=max_words,
        ).generate_from_frequencies(frequencies)
        ax.imshow(wordcloud, interpolation='bilinear')
    ax.axis('off')
    fig.tight_layout()
    return _save(fig, out_path)


def plot_proportion_comparison(
    proportions: pd.DataFrame,
    attribute: str,
    values: List[str],
    out_path: Optional[PathLike] = None,
    n_labels: int = 15,
) -> Optional[Path]:
    """
    Log-log scatter of word proportions for two values of an attribute.

    Words near the diagonal are used equally by both groups. Only words seen
    in both groups are plotted; the most frequent are labeled.

    Args:
        proportions: Output of grouped_proportions
        attribute: Grouping column
        values: Exactly two attribute values, x axis first
        out_path: Where to write the PNG
        n_labels: Number of words to label

    Raises:
        ValueError: If values does not hold exactly two entries
    """
    if len(values) != 2:
        raise ValueError(f"Expected two values to compare, got {values}")
    _require(proportions, [attribute, 'word', 'proportion'], 'proportions')

    x_val, y_val = values
    wide = pivot_proportions(proportions, attribute, values)
    wide = wide.loc[(wide[x_val] > 0) & (wide[y_val] > 0)]

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.scatter(wide[x_val], wide[y_val], s=10, alpha=0.3, color='#2ca02c')

    if not wide.empty:
        low = min(wide[x_val].min(), wide[y_val].min())
        high = max(wide[x_val].max(), wide[y_val].max())
        ax.plot([low, high], [low, high], linestyle='--', color='#7f7f7f')
        ax.set_xscale('log')
        ax.set_yscale('log')

        labeled = wide.assign(total=wide[x_val] + wide[y_val]).nlargest(n_labels, 'total')
        for _, row in labeled.iterrows():
            ax.annotate(row['word'], (row[x_val], row[y_val]), fontsize=8)

    ax.set_xlabel(f"{attribute} = {x_val}")
    ax.set_ylabel(f"{attribute} = {y_val}")
    ax.set_title(f"Word proportions by {attribute}")
    fig.tight_layout()
    return _save(fig, out_path)


def plot_age_bucket_top_words(
    top_words: pd.DataFrame,
    out_path: Optional[PathLike] = None,
) -> Optional[Path]:
    """Bar chart of the top words in each age bucket, buckets in age order."""
    _require(top_words, ['age_bucket', 'bucket_start', 'word', 'count'], 'top_words')
    data = top_words.sort_values(['bucket_start', 'count'], ascending=[True, False])
    data = data.assign(label=data['age_bucket'] + "  " + data['word'])

    fig, ax = plt.subplots(figsize=(9, max(3, 0.3 * len(data))))
    palette = sns.color_palette('Blues_d', n_colors=max(1, data['age_bucket'].nunique()))
    sns.barplot(
        data=data, x='count', y='label', hue='age_bucket',
        dodge=False, palette=palette, ax=ax,
    )
    ax.set_xlabel("Count")
    ax.set_ylabel("")
    ax.set_title("Top words by age group")
    if ax.get_legend() is not None:
        ax.get_legend().remove()
    ax.set_xlim(0, np.max(data['count'].to_numpy(), initial=0) * 1.1 + 1)
    fig.tight_layout()
    return _save(fig, out_path)

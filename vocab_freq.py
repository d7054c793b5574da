import logging
import os

import matplotlib.pyplot as plt
import seaborn as sns

import config
from viz_lengths import load_tokens, palette_for

LOGGER = logging.getLogger(__name__)


def word_frequencies(tokens):
    """Occurrences of every word within each acceptance category."""
    return (
        tokens.groupby(["Accepted", "word"])
        .size()
        .reset_index(name="n")
    )


def top_by(df, column, top_n):
    """Top `top_n` rows per category by `column`, ties broken alphabetically by word."""
    ranked = df.sort_values(["Accepted", column, "word"], ascending=[True, False, True])
    return ranked.groupby("Accepted", sort=True).head(top_n).reset_index(drop=True)


def top_words(freq, top_n=config.TOP_WORDS_N):
    return top_by(freq, "n", top_n)


def plot_word_frequencies(top, output_path):
    """Grouped horizontal bar chart: one bar per (word, category)."""
    sns.set_style("whitegrid")
    # the y axis holds the union of both top lists
    n_words = max(top["word"].nunique(), 1)
    fig, ax = plt.subplots(figsize=(12, max(6, 0.35 * n_words)))

    sns.barplot(
        data=top,
        x="n",
        y="word",
        hue="Accepted",
        hue_order=sorted(top["Accepted"].unique()),
        palette=palette_for(top["Accepted"].unique()),
        orient="h",
        ax=ax,
    )

    ax.set_title("Most Frequent Words in Accepted vs. Rejected Abstracts", fontsize=16)
    ax.set_xlabel("Frequency Count", fontsize=12)
    ax.set_ylabel("")
    ax.legend(title="Accepted")

    fig.tight_layout()
    fig.savefig(output_path, dpi=300)
    plt.close(fig)
    LOGGER.info("Word frequency chart saved to %s", output_path)
    return output_path


def main(tokens_csv=None, output_dir=config.OUTPUT_DIR):
    tokens_csv = tokens_csv or os.path.join(output_dir, config.TOKENS_CSV)
    print("Loading tokens...")
    try:
        tokens = load_tokens(tokens_csv)
    except FileNotFoundError:
        print(f"Error: Could not find '{tokens_csv}'. Run report.py first.")
        return None

    top = top_words(word_frequencies(tokens))
    output_image = plot_word_frequencies(top, os.path.join(output_dir, config.WORDS_IMAGE))
    print(f"Graph saved as '{output_image}'")
    print(top.to_string(index=False))
    return output_image


if __name__ == "__main__":
    main()

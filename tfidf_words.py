import logging
import os

import matplotlib.pyplot as plt
import numpy as np

import config
from viz_lengths import load_tokens, palette_for
from vocab_freq import top_by, word_frequencies

LOGGER = logging.getLogger(__name__)


def tf_idf(freq):
    """
    TF-IDF with each acceptance category treated as one document.

        tf     = n / total words in the category
        idf    = ln(number of categories / number of categories containing the word)
        tf_idf = tf * idf

    With two categories a word used by both gets idf = 0, so only words
    unique to one side score above zero.
    """
    scores = freq.copy()
    total = scores.groupby("Accepted")["n"].transform("sum")
    n_docs = scores["Accepted"].nunique()
    docs_with_word = scores.groupby("word")["Accepted"].transform("nunique")

    scores["tf"] = scores["n"] / total
    scores["idf"] = np.log(n_docs / docs_with_word)
    scores["tf_idf"] = scores["tf"] * scores["idf"]
    return scores


def top_tf_idf(scores, top_n=config.TOP_TFIDF_N):
    return top_by(scores, "tf_idf", top_n)


def plot_tf_idf(top, output_path):
    """One panel of horizontal bars per category."""
    categories = sorted(top["Accepted"].unique())
    colors = palette_for(categories)

    fig, axes = plt.subplots(1, max(len(categories), 1), figsize=(7 * max(len(categories), 1), 6),
                             squeeze=False)
    for ax, category in zip(axes[0], categories):
        subset = top[top["Accepted"] == category].sort_values("tf_idf")
        ax.barh(subset["word"], subset["tf_idf"], color=colors[category])
        ax.set_title(f"Accepted = {category}", fontsize=14)
        ax.set_xlabel("TF-IDF", fontsize=12)

    fig.suptitle("Highest TF-IDF Words by Acceptance", fontsize=16)
    fig.tight_layout()
    fig.savefig(output_path, dpi=300)
    plt.close(fig)
    LOGGER.info("TF-IDF chart saved to %s", output_path)
    return output_path


def main(tokens_csv=None, output_dir=config.OUTPUT_DIR):
    tokens_csv = tokens_csv or os.path.join(output_dir, config.TOKENS_CSV)
    print("Loading tokens...")
    try:
        tokens = load_tokens(tokens_csv)
    except FileNotFoundError:
        print(f"Error: Could not find '{tokens_csv}'. Run report.py first.")
        return None

    top = top_tf_idf(tf_idf(word_frequencies(tokens)))
    output_image = plot_tf_idf(top, os.path.join(output_dir, config.TFIDF_IMAGE))
    print(f"Graph saved as '{output_image}'")
    print(top[["Accepted", "word", "n", "tf_idf"]].to_string(index=False))
    return output_image


if __name__ == "__main__":
    main()

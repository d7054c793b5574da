import logging
import os

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

import config

LOGGER = logging.getLogger(__name__)

# accepted / rejected colours, shared by all charts
PALETTE = {"yes": "#2ca02c", "no": "#d62728"}


def palette_for(categories):
    """Fixed colours for yes/no, matplotlib defaults for anything else."""
    defaults = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    return {c: PALETTE.get(c, defaults[i % len(defaults)]) for i, c in enumerate(sorted(categories))}


def abstract_lengths(tokens):
    """Number of (cleaned) words per abstract, with its acceptance decision."""
    return (
        tokens.groupby(["AbstractID", "Accepted"])
        .size()
        .reset_index(name="n_words")
    )


def length_summary(lengths):
    # describe() per category, this goes straight into the report
    return lengths.groupby("Accepted")["n_words"].describe()


def plot_length_density(lengths, output_path):
    sns.set_style("whitegrid")
    fig, ax = plt.subplots(figsize=(10, 6))

    sns.kdeplot(
        data=lengths,
        x="n_words",
        hue="Accepted",
        hue_order=sorted(lengths["Accepted"].unique()),
        palette=palette_for(lengths["Accepted"].unique()),
        common_norm=False,
        fill=True,
        alpha=0.4,
        ax=ax,
    )

    ax.set_title("Distribution of Abstract Lengths by Acceptance", fontsize=16)
    ax.set_xlabel("Number of Words (after cleaning)", fontsize=12)
    ax.set_ylabel("Density", fontsize=12)

    fig.tight_layout()
    fig.savefig(output_path, dpi=300)
    plt.close(fig)
    LOGGER.info("Length density plot saved to %s", output_path)
    return output_path


def load_tokens(tokens_csv):
    # keep_default_na=False: "nan" and "null" are words here, not missing values
    return pd.read_csv(tokens_csv, keep_default_na=False, dtype={"Accepted": str, "word": str})


def main(tokens_csv=None, output_dir=config.OUTPUT_DIR):
    # we load the token table that report.py saved
    tokens_csv = tokens_csv or os.path.join(output_dir, config.TOKENS_CSV)
    print("Loading tokens...")
    try:
        tokens = load_tokens(tokens_csv)
    except FileNotFoundError:
        print(f"Error: Could not find '{tokens_csv}'. Run report.py first.")
        return None

    lengths = abstract_lengths(tokens)
    output_image = plot_length_density(lengths, os.path.join(output_dir, config.LENGTHS_IMAGE))
    print(f"\nDensity plot saved to '{output_image}'")

    print("\n--- ABSTRACT LENGTH STATISTICS ---")
    print(length_summary(lengths))
    return output_image


if __name__ == "__main__":
    main()

"""Abstract acceptance report: PDFs in, Markdown report with charts out.

Runs every step once, in order:

    pdf_converter      -> .txt next to each submission PDF
    abstract_extractor -> Title / Abstract per file
    clean_data         -> join with the acceptance table
    tokenize_text      -> one row per cleaned word
    viz_lengths, vocab_freq, tfidf_words -> tables + charts

and writes report.md into the output directory.

USAGE:

    python report.py --pdf-dir abstracts_pdf --acceptance acceptance.csv -o report_output

Paths and limits default to the values in config.py (overridable from the
environment or a .env file).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

import config
from abstract_extractor import load_abstracts, load_markers
from clean_data import DUPLICATE_POLICIES, acceptance_counts, join_abstracts, load_acceptance
from models import DEFAULT_MARKERS, ConversionResult, MarkerVocabulary
from pdf_converter import convert_directory, summarize_conversions
from tfidf_words import plot_tf_idf, tf_idf, top_tf_idf
from tokenize_text import load_stopwords, tokenize_abstracts
from viz_lengths import abstract_lengths, length_summary, plot_length_density
from vocab_freq import plot_word_frequencies, top_words, word_frequencies

LOGGER = logging.getLogger(__name__)


@dataclass
class Settings:
    pdf_dir: str = config.PDF_DIR
    txt_dir: str = config.TXT_DIR
    acceptance_csv: str = config.ACCEPTANCE_CSV
    output_dir: str = config.OUTPUT_DIR
    markers: MarkerVocabulary = DEFAULT_MARKERS
    convert: bool = True
    duplicates: str = config.DUPLICATE_POLICY
    pdftotext_bin: str = config.PDFTOTEXT_BIN
    top_words_n: int = config.TOP_WORDS_N
    top_tfidf_n: int = config.TOP_TFIDF_N
    retained_stopwords: tuple[str, ...] = config.RETAINED_STOPWORDS


@dataclass
class PipelineResult:
    conversions: list[ConversionResult]
    abstracts: pd.DataFrame
    joined: pd.DataFrame
    tokens: pd.DataFrame
    lengths: pd.DataFrame
    top_words: pd.DataFrame
    top_tf_idf: pd.DataFrame
    markers: MarkerVocabulary = DEFAULT_MARKERS
    charts: dict[str, Path] = field(default_factory=dict)

    @property
    def failed_conversions(self):
        return [r for r in self.conversions if not r.ok]


def run_pipeline(settings):
    """Run all stages once and render the three charts into settings.output_dir."""
    output_dir = Path(settings.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    conversions = []
    if settings.convert:
        conversions = convert_directory(settings.pdf_dir, binary=settings.pdftotext_bin)
        summarize_conversions(conversions)

    abstracts = load_abstracts(settings.txt_dir, settings.markers)
    acceptance = load_acceptance(settings.acceptance_csv)
    joined = join_abstracts(abstracts, acceptance, duplicates=settings.duplicates)

    stopwords = load_stopwords(keep=settings.retained_stopwords)
    tokens = tokenize_abstracts(joined, stopwords)
    tokens.to_csv(output_dir / config.TOKENS_CSV, index=False)

    lengths = abstract_lengths(tokens)
    freq = word_frequencies(tokens)
    words = top_words(freq, settings.top_words_n)
    tfidf = top_tf_idf(tf_idf(freq), settings.top_tfidf_n)

    charts = {}
    if tokens.empty:
        LOGGER.warning("No words left after cleaning, skipping charts")
    else:
        charts["lengths"] = plot_length_density(lengths, output_dir / config.LENGTHS_IMAGE)
        charts["words"] = plot_word_frequencies(words, output_dir / config.WORDS_IMAGE)
        charts["tfidf"] = plot_tf_idf(tfidf, output_dir / config.TFIDF_IMAGE)

    return PipelineResult(
        conversions=conversions,
        abstracts=abstracts,
        joined=joined,
        tokens=tokens,
        lengths=lengths,
        top_words=words,
        top_tf_idf=tfidf,
        markers=settings.markers,
        charts=charts,
    )


def _table(df, **kwargs):
    if df.empty:
        return "_(no rows)_\n"
    return "```\n" + df.to_string(**kwargs) + "\n```\n"


def render_report(result):
    lines = ["# Conference abstracts: accepted vs. rejected", ""]

    lines.append("## Data")
    lines.append("")
    if result.conversions:
        failed = len(result.failed_conversions)
        lines.append(f"- PDF files converted: {len(result.conversions) - failed} of {len(result.conversions)}"
                     + (f" ({failed} failed)" if failed else ""))
    lines.append(f"- Text files parsed: {len(result.abstracts)} (form markers v{result.markers.version})")
    lines.append(f"- Missing title: {int(result.abstracts['Title'].isna().sum())}, "
                 f"missing abstract: {int(result.abstracts['Abstract'].isna().sum())}")
    lines.append(f"- Matched with an acceptance decision: {len(result.joined)}")
    lines.append("")
    lines.append(_table(acceptance_counts(result.joined), index=False))

    lines.append("## Abstract length")
    lines.append("")
    lines.append("Words per abstract after removing stop words and numbers.")
    lines.append("")
    lines.append(_table(length_summary(result.lengths).round(1)) if not result.lengths.empty else _table(result.lengths))
    if "lengths" in result.charts:
        lines.append(f"![Abstract lengths]({Path(result.charts['lengths']).name})")
        lines.append("")

    lines.append("## Most frequent words")
    lines.append("")
    lines.append(_table(result.top_words, index=False))
    if "words" in result.charts:
        lines.append(f"![Top words]({Path(result.charts['words']).name})")
        lines.append("")

    lines.append("## Words characteristic of each group (TF-IDF)")
    lines.append("")
    lines.append("Each group's pooled text is one document, so words used by both groups score zero. "
                 "With only two documents this is a coarse signal.")
    lines.append("")
    lines.append(_table(result.top_tf_idf[["Accepted", "word", "n", "tf_idf"]], index=False))
    if "tfidf" in result.charts:
        lines.append(f"![Top TF-IDF]({Path(result.charts['tfidf']).name})")
        lines.append("")

    return "\n".join(lines)


def write_report(result, output_dir):
    path = Path(output_dir) / config.REPORT_FILE
    path.write_text(render_report(result), encoding="utf-8")
    LOGGER.info("Report written to %s", path)
    return path


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare accepted and rejected conference abstracts.")
    parser.add_argument("--pdf-dir", default=config.PDF_DIR, help="Directory of submission PDFs")
    parser.add_argument("--txt-dir", default=None,
                        help="Directory of converted .txt files (default: same as --pdf-dir)")
    parser.add_argument("--acceptance", default=config.ACCEPTANCE_CSV,
                        help="CSV with at least 'Title' and 'Accepted' columns")
    parser.add_argument("-o", "--output-dir", default=config.OUTPUT_DIR, help="Where charts and report.md go")
    parser.add_argument("--markers", default=config.MARKERS_FILE or None,
                        help="JSON file with the submission form's field labels")
    parser.add_argument("--skip-conversion", action="store_true",
                        help="Use existing .txt files instead of running pdftotext")
    parser.add_argument("--duplicates", choices=DUPLICATE_POLICIES, default=config.DUPLICATE_POLICY,
                        help="How to handle titles that share a join key")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        markers = load_markers(args.markers) if args.markers else DEFAULT_MARKERS
        settings = Settings(
            pdf_dir=args.pdf_dir,
            txt_dir=args.txt_dir or (config.TXT_DIR if args.pdf_dir == config.PDF_DIR else args.pdf_dir),
            acceptance_csv=args.acceptance,
            output_dir=args.output_dir,
            markers=markers,
            convert=not args.skip_conversion,
            duplicates=args.duplicates,
        )
        result = run_pipeline(settings)
        report_path = write_report(result, settings.output_dir)
    except (FileNotFoundError, ValueError) as err:
        LOGGER.error("%s", err)
        return 1

    print(f"\nReport saved to '{report_path}'")
    for name, path in result.charts.items():
        print(f"   {name}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

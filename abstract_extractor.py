import json
import logging
import re
import string
import unicodedata
from pathlib import Path

import pandas as pd

import config
from models import DEFAULT_MARKERS, AbstractRecord, MarkerVocabulary

LOGGER = logging.getLogger(__name__)

ABSTRACT_COLUMNS = ["AbstractID", "Title", "TitleShort", "Abstract", "source"]

_SPACE_RE = re.compile(r"\s+")


def load_markers(path):
    """
    Reads a marker vocabulary from JSON, e.g.
    {"version": "2", "title": "Title:", "abstract": "Abstract:", "boundaries": ["Keywords:"]}
    A single boundary may also be given as a plain string.
    """
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)

    missing = [k for k in ("version", "title", "abstract") if not data.get(k)]
    if missing:
        raise ValueError(f"Marker file {path} is missing {', '.join(missing)}")

    boundaries = data.get("boundaries") or []
    if isinstance(boundaries, str):
        boundaries = [boundaries]
    if not isinstance(boundaries, list):
        raise ValueError(f"Marker file {path}: 'boundaries' must be a list of labels")

    return MarkerVocabulary(
        version=str(data["version"]),
        title=data["title"],
        abstract=data["abstract"],
        boundaries=tuple(boundaries),
    )


def read_text_lines(path):
    return Path(path).read_text(encoding="utf-8", errors="replace").splitlines()


def _alternatives(markers):
    # longest first, so "Abstract:" wins over a shorter label it starts with
    return "|".join(re.escape(m) for m in sorted(markers, key=len, reverse=True))


def _section(lines, marker, markers):
    """
    Text after `marker` up to the next marker or the end of the input.

    A marker counts at the start of a line, or after a run of 2+ spaces, which
    is how `pdftotext -layout` separates the columns of a form row.
    """
    alt = _alternatives(markers)
    starts = re.compile(rf"^\s*(?:{alt})")
    column = re.compile(rf"\s{{2,}}(?:{alt})")
    own = re.compile(rf"(?:^\s*|\s{{2,}}){re.escape(marker)}")

    for idx, line in enumerate(lines):
        found = own.search(line)
        if found is None:
            continue

        rest = line[found.end():]
        cut = column.search(rest)
        collected = [rest[:cut.start()] if cut else rest]
        if cut is None:
            for following in lines[idx + 1:]:
                if starts.match(following):
                    break
                cut = column.search(following)
                if cut:
                    collected.append(following[:cut.start()])
                    break
                collected.append(following)

        text = "\n".join(collected).strip()
        return text or None
    return None


def extract_fields(lines, markers=DEFAULT_MARKERS):
    """
    Cuts one converted submission into (title, abstract).
    A field whose marker is missing (or whose section is empty) comes back as None.
    """
    lines = list(lines)
    title = _section(lines, markers.title, markers.all_markers)
    abstract = _section(lines, markers.abstract, markers.all_markers)
    if title is not None:
        title = _SPACE_RE.sub(" ", title)
    return title, abstract


def _strip_punctuation(text):
    # pdftotext keeps typographic quotes and dashes, the acceptance sheet usually has ASCII ones
    return "".join(
        ch for ch in text
        if ch not in string.punctuation and not unicodedata.category(ch).startswith("P")
    )


def title_short(title, width=config.TITLE_SHORT_WIDTH):
    """Join key: punctuation removed, whitespace collapsed, first `width` characters."""
    if title is None or (isinstance(title, float) and pd.isna(title)):
        return None
    key = _strip_punctuation(str(title))
    key = _SPACE_RE.sub(" ", key).strip()
    key = key[:width].rstrip()
    return key or None


def parse_file(path, abstract_id, markers=DEFAULT_MARKERS):
    title, abstract = extract_fields(read_text_lines(path), markers)
    return AbstractRecord(
        abstract_id=abstract_id,
        title=title,
        title_short=title_short(title),
        abstract=abstract,
        source=Path(path).name,
    )


def records_to_frame(records):
    rows = [
        {
            "AbstractID": r.abstract_id,
            "Title": r.title,
            "TitleShort": r.title_short,
            "Abstract": r.abstract,
            "source": r.source,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=ABSTRACT_COLUMNS)


def load_abstracts(txt_dir, markers=DEFAULT_MARKERS):
    """Parse every .txt file in `txt_dir` (sorted by name) into the abstracts table."""
    txt_dir = Path(txt_dir)
    if not txt_dir.is_dir():
        raise FileNotFoundError(f"Text directory not found: {txt_dir}")

    paths = sorted(p for p in txt_dir.iterdir() if p.is_file() and p.suffix.lower() == ".txt")
    records = [parse_file(path, idx, markers) for idx, path in enumerate(paths, 1)]
    df = records_to_frame(records)

    LOGGER.info("Read %d text files (markers v%s)", len(df), markers.version)
    no_title = int(df["Title"].isna().sum())
    no_abstract = int(df["Abstract"].isna().sum())
    if no_title or no_abstract:
        LOGGER.info("   %d without a title, %d without an abstract", no_title, no_abstract)
    return df

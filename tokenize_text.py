import logging
import re

import pandas as pd
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

import config

LOGGER = logging.getLogger(__name__)

TOKEN_COLUMNS = ["AbstractID", "Accepted", "word"]

# Words, keeping inner apostrophes and periods ("don't", "3.5", "data.frame")
_WORD_RE = re.compile(r"[^\W_]+(?:['’.][^\W_]+)*")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[+-]?\d+)?")


def load_stopwords(keep=config.RETAINED_STOPWORDS, words=ENGLISH_STOP_WORDS):
    """
    Stop words (scikit-learn's English list by default) minus the words we want to keep.
    scikit-learn's list has no single letters, so "r" only needs keeping with richer lists.
    """
    keep = {w.lower() for w in keep}
    return frozenset(w.lower() for w in words if w.lower() not in keep)


def tokenize(text):
    if text is None or (isinstance(text, float) and pd.isna(text)):
        return []
    return _WORD_RE.findall(str(text).lower())


def is_numeric(token):
    return _NUMBER_RE.fullmatch(token) is not None


def clean_tokens(tokens, stopwords):
    return [t for t in tokens if t not in stopwords and not is_numeric(t)]


def tokenize_abstracts(joined, stopwords):
    """One row per remaining word occurrence: (AbstractID, Accepted, word)."""
    rows = []
    for abstract_id, accepted, text in joined[["AbstractID", "Accepted", "Abstract"]].itertuples(index=False):
        for word in clean_tokens(tokenize(text), stopwords):
            rows.append((abstract_id, accepted, word))

    tokens = pd.DataFrame(rows, columns=TOKEN_COLUMNS)
    LOGGER.info("Tokenized %d abstracts into %d words (%d distinct)",
                len(joined), len(tokens), tokens["word"].nunique())
    return tokens

import logging

import pandas as pd

import config
from abstract_extractor import title_short

LOGGER = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("error", "first", "fanout")


class DuplicateTitleError(ValueError):
    """Two titles reduce to the same join key, so the join would be ambiguous."""

    def __init__(self, side, keys):
        self.side = side
        self.keys = sorted(keys)
        super().__init__(f"Duplicate TitleShort in {side}: {', '.join(repr(k) for k in self.keys)}")


def normalize_accepted(value):
    if value is None or pd.isna(value):
        return None
    value = str(value).strip().lower()
    return value or None


def load_acceptance(csv_path):
    """
    Loads the acceptance results table and reduces it to (TitleShort, Accepted).
    The join key is derived from Title the same way as for the extracted abstracts.
    """
    df = pd.read_csv(csv_path)

    if "Accepted" not in df.columns:
        raise ValueError(f"{csv_path} has no 'Accepted' column")
    if "Title" in df.columns:
        df["TitleShort"] = df["Title"].apply(title_short)
    elif "TitleShort" not in df.columns:
        raise ValueError(f"{csv_path} needs a 'Title' (or 'TitleShort') column")

    df["Accepted"] = df["Accepted"].apply(normalize_accepted)
    LOGGER.info("Loaded %d acceptance rows from %s", len(df), csv_path)
    return df[["TitleShort", "Accepted"]]


def _duplicated_keys(df):
    keys = df["TitleShort"]
    return set(keys[keys.duplicated(keep=False)])


def join_abstracts(abstracts, acceptance, duplicates=config.DUPLICATE_POLICY):
    """
    Inner join of the extracted abstracts with the acceptance table on TitleShort.
    Rows without a key, an abstract or an acceptance decision are dropped.
    """
    if duplicates not in DUPLICATE_POLICIES:
        raise ValueError(f"Unknown duplicate policy {duplicates!r}, expected one of {DUPLICATE_POLICIES}")

    # NaN keys would match each other in a pandas merge, so drop them first
    left = abstracts.dropna(subset=["TitleShort"])
    right = acceptance.dropna(subset=["TitleShort"])

    if duplicates == "error":
        for side, df in (("abstracts", left), ("acceptance table", right)):
            dup = _duplicated_keys(df)
            if dup:
                raise DuplicateTitleError(side, dup)
    elif duplicates == "first":
        left = left.drop_duplicates(subset=["TitleShort"], keep="first")
        right = right.drop_duplicates(subset=["TitleShort"], keep="first")

    joined = left.merge(right[["TitleShort", "Accepted"]], on="TitleShort", how="inner")
    joined = joined.dropna(subset=["Abstract", "Accepted"]).reset_index(drop=True)

    LOGGER.info("Joined %d of %d abstracts with an acceptance decision (%d dropped)",
                len(joined), len(abstracts), len(abstracts) - len(joined))
    return joined


def acceptance_counts(joined):
    """Number of joined abstracts per decision, for the report."""
    return joined["Accepted"].value_counts().rename_axis("Accepted").reset_index(name="n")

"""Record types shared by the conversion, extraction and report steps."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of running pdftotext on one PDF."""

    pdf_path: Path
    txt_path: Path
    ok: bool
    returncode: int | None = None
    stderr: str = ""


@dataclass(frozen=True, slots=True)
class MarkerVocabulary:
    """Field labels printed by one version of the submission form.

    `title` and `abstract` start the two sections we keep. `boundaries` are
    the other labels on the form; they only end a section.
    """

    version: str
    title: str
    abstract: str
    boundaries: tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.boundaries, tuple):
            raise ValueError(f"boundaries must be a tuple of labels, got {self.boundaries!r}")
        for label in self.all_markers:
            if not isinstance(label, str) or not label.strip():
                raise ValueError(f"Marker labels must be non-empty strings, got {label!r}")

    @property
    def all_markers(self) -> tuple[str, ...]:
        return (self.title, self.abstract, *self.boundaries)


DEFAULT_MARKERS = MarkerVocabulary(
    version="1",
    title="Title:",
    abstract="Abstract:",
    boundaries=("Authors:", "Affiliations:", "Keywords:", "Session:"),
)


@dataclass(frozen=True, slots=True)
class AbstractRecord:
    """One parsed submission. Fields the form did not yield are None."""

    abstract_id: int
    title: str | None
    title_short: str | None
    abstract: str | None
    source: str = ""

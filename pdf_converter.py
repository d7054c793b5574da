import logging
import shutil
import subprocess
from pathlib import Path

import config
from models import ConversionResult

LOGGER = logging.getLogger(__name__)


def list_pdfs(pdf_dir):
    """Return the PDFs in `pdf_dir` (any case of the .pdf suffix), sorted by name."""
    pdf_dir = Path(pdf_dir)
    if not pdf_dir.is_dir():
        raise FileNotFoundError(f"PDF directory not found: {pdf_dir}")
    return sorted(p for p in pdf_dir.iterdir() if p.is_file() and p.suffix.lower() == ".pdf")


def convert_pdf(pdf_path, binary=config.PDFTOTEXT_BIN):
    """
    Runs `pdftotext -layout` on a single PDF and waits for it.
    The text file is written next to the PDF, with the same name.
    """
    pdf_path = Path(pdf_path)
    txt_path = pdf_path.with_suffix(".txt")
    cmd = [binary, "-layout", str(pdf_path), str(txt_path)]

    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as err:
        LOGGER.debug("Could not launch %s for %s: %s", binary, pdf_path.name, err)
        return ConversionResult(pdf_path, txt_path, ok=False, stderr=str(err))

    ok = completed.returncode == 0 and txt_path.exists()
    if not ok:
        LOGGER.debug("pdftotext failed on %s (exit %s): %s",
                     pdf_path.name, completed.returncode, completed.stderr.strip())
    return ConversionResult(pdf_path, txt_path, ok=ok,
                            returncode=completed.returncode, stderr=completed.stderr or "")


def convert_directory(pdf_dir, binary=config.PDFTOTEXT_BIN):
    """Convert every PDF in `pdf_dir`, one at a time. Returns one ConversionResult per file."""
    if shutil.which(binary) is None:
        raise FileNotFoundError(f"PDF converter '{binary}' not found on PATH (install poppler-utils)")

    pdfs = list_pdfs(pdf_dir)
    LOGGER.info("Converting %d PDF files in %s", len(pdfs), pdf_dir)

    results = []
    for idx, pdf_path in enumerate(pdfs, 1):
        results.append(convert_pdf(pdf_path, binary=binary))
        if idx % 50 == 0:
            LOGGER.info("   Converted %d/%d...", idx, len(pdfs))
    return results


def summarize_conversions(results):
    """Log a single warning with the number of failed conversions and return the failures."""
    failed = [r for r in results if not r.ok]
    if failed:
        LOGGER.warning("%d of %d PDF files failed to convert", len(failed), len(results))
        for r in failed:
            LOGGER.debug("   failed: %s", r.pdf_path.name)
    else:
        LOGGER.info("All %d PDF files converted", len(results))
    return failed

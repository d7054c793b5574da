import os

from dotenv import load_dotenv

load_dotenv()

# --- CONFIGURATION ---
# Every value can be overridden from the environment (or a .env file next to the scripts)
PDF_DIR = os.getenv("ABSTRACTS_PDF_DIR", "abstracts_pdf")
TXT_DIR = os.getenv("ABSTRACTS_TXT_DIR", PDF_DIR)  # pdftotext writes the .txt next to each PDF
ACCEPTANCE_CSV = os.getenv("ACCEPTANCE_CSV", "acceptance.csv")
OUTPUT_DIR = os.getenv("REPORT_OUTPUT_DIR", "report_output")

PDFTOTEXT_BIN = os.getenv("PDFTOTEXT_BIN", "pdftotext")

# JSON file describing the submission form's field labels (empty -> built-in v1 markers)
MARKERS_FILE = os.getenv("MARKERS_FILE", "")

TITLE_SHORT_WIDTH = int(os.getenv("TITLE_SHORT_WIDTH", "15"))
TOP_WORDS_N = int(os.getenv("TOP_WORDS_N", "20"))
TOP_TFIDF_N = int(os.getenv("TOP_TFIDF_N", "10"))

# What to do when two titles share a join key: "error", "first" or "fanout"
DUPLICATE_POLICY = os.getenv("DUPLICATE_POLICY", "error")

# "r" is the language the conference is about, so it is not a stop word here
RETAINED_STOPWORDS = tuple(
    w.strip().lower() for w in os.getenv("RETAINED_STOPWORDS", "r").split(",") if w.strip()
)

# Output file names
LENGTHS_IMAGE = "abstract_lengths.png"
WORDS_IMAGE = "top_words.png"
TFIDF_IMAGE = "top_tfidf.png"
REPORT_FILE = "report.md"
TOKENS_CSV = "tokens.csv"  # cleaned token table, input for the per-chart scripts

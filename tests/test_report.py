import subprocess
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

import report
from models import ConversionResult

SUBMISSIONS = {
    "01.txt": "Title: Shiny dashboards in production\nAbstract: R is great for data science and R is fun\n",
    "02.txt": "Title: Tidy modelling\nAbstract: We fit tidy models in R with recipes and reproducible workflows\n",
    "03.txt": "Title: Spatial statistics\nAbstract: Spatial statistics with sf and terra for raster data\n",
    "04.txt": "Title: Package testing\nAbstract: Testing packages with testthat is great practice for data pipelines\n",
    "05.txt": "Title: Unknown talk\nAbstract: This title is not in the acceptance table\n",
    "06.txt": "Title: Broken form\nno abstract label here\n",
}


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    txt_dir = tmp_path / "abstracts"
    txt_dir.mkdir()
    for name, text in SUBMISSIONS.items():
        (txt_dir / name).write_text(text, encoding="utf-8")

    pd.DataFrame({
        "Title": ["Shiny dashboards in production", "Tidy modelling", "Spatial statistics",
                  "Package testing", "Broken form"],
        "Accepted": ["Yes", "yes", "No", "no", "yes"],
    }).to_csv(tmp_path / "acceptance.csv", index=False)
    return tmp_path


def _settings(workspace: Path, **kwargs) -> report.Settings:
    options = {
        "pdf_dir": str(workspace / "abstracts"),
        "txt_dir": str(workspace / "abstracts"),
        "acceptance_csv": str(workspace / "acceptance.csv"),
        "output_dir": str(workspace / "out"),
        "convert": False,
    }
    options.update(kwargs)
    return report.Settings(**options)


def test_run_pipeline_end_to_end(workspace: Path) -> None:
    result = report.run_pipeline(_settings(workspace))

    assert len(result.abstracts) == 6
    assert result.joined["AbstractID"].tolist() == [1, 2, 3, 4]
    assert set(result.tokens["Accepted"]) == {"yes", "no"}
    assert set(result.charts) == {"lengths", "words", "tfidf"}
    for path in result.charts.values():
        assert Path(path).exists()


def test_write_report(workspace: Path) -> None:
    result = report.run_pipeline(_settings(workspace))

    path = report.write_report(result, workspace / "out")

    text = path.read_text(encoding="utf-8")
    assert path.name == "report.md"
    assert "Text files parsed: 6" in text
    assert "Matched with an acceptance decision: 4" in text
    assert "missing abstract: 1" in text
    assert "![Top words](top_words.png)" in text
    assert "PDF files converted" not in text


def test_report_mentions_failed_conversions(workspace: Path) -> None:
    result = report.run_pipeline(_settings(workspace))
    result.conversions = [
        ConversionResult(Path("a.pdf"), Path("a.txt"), ok=True, returncode=0),
        ConversionResult(Path("b.pdf"), Path("b.txt"), ok=False, returncode=1),
    ]

    assert "PDF files converted: 1 of 2 (1 failed)" in report.render_report(result)


def test_run_pipeline_converts_first(workspace: Path) -> None:
    pdf_dir = workspace / "abstracts"
    (pdf_dir / "07.pdf").write_bytes(b"%PDF-1.4")

    def fake_run(cmd, **kwargs):
        Path(cmd[-1]).write_text("Title: Converted talk\nAbstract: converted text\n", encoding="utf-8")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    with patch("pdf_converter.shutil.which", return_value="/usr/bin/pdftotext"), \
            patch("pdf_converter.subprocess.run", side_effect=fake_run):
        result = report.run_pipeline(_settings(workspace, convert=True))

    assert [r.ok for r in result.conversions] == [True]
    assert len(result.abstracts) == 7


def test_run_pipeline_with_no_matches_skips_charts(workspace: Path) -> None:
    pd.DataFrame({"Title": ["Nothing matches"], "Accepted": ["yes"]}).to_csv(
        workspace / "acceptance.csv", index=False)

    result = report.run_pipeline(_settings(workspace))

    assert result.joined.empty
    assert result.charts == {}
    assert "_(no rows)_" in report.render_report(result)


def test_main_skip_conversion(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = report.main([
        "--pdf-dir", str(workspace / "abstracts"),
        "--acceptance", str(workspace / "acceptance.csv"),
        "-o", str(workspace / "out"),
        "--skip-conversion",
    ])

    assert code == 0
    assert (workspace / "out" / "report.md").exists()
    assert "report.md" in capsys.readouterr().out


def test_main_duplicate_titles_fail(workspace: Path) -> None:
    (workspace / "abstracts" / "08.txt").write_text(
        "Title: Spatial statistics again\nAbstract: duplicate key\n", encoding="utf-8")

    code = report.main([
        "--pdf-dir", str(workspace / "abstracts"),
        "--acceptance", str(workspace / "acceptance.csv"),
        "-o", str(workspace / "out"),
        "--skip-conversion",
    ])

    assert code == 1


def test_main_missing_acceptance_file(workspace: Path) -> None:
    code = report.main([
        "--pdf-dir", str(workspace / "abstracts"),
        "--acceptance", str(workspace / "missing.csv"),
        "-o", str(workspace / "out"),
        "--skip-conversion",
    ])

    assert code == 1


def test_chart_scripts_rerun_from_saved_tokens(workspace: Path) -> None:
    import tfidf_words
    import viz_lengths
    import vocab_freq

    settings = _settings(workspace)
    report.run_pipeline(settings)
    out = Path(settings.output_dir)
    for chart in out.glob("*.png"):
        chart.unlink()

    assert (out / "tokens.csv").exists()
    for module, image in ((viz_lengths, "abstract_lengths.png"),
                          (vocab_freq, "top_words.png"),
                          (tfidf_words, "top_tfidf.png")):
        assert Path(module.main(output_dir=str(out))) == out / image
        assert (out / image).exists()


def test_chart_script_without_tokens(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    import vocab_freq

    assert vocab_freq.main(output_dir=str(tmp_path)) is None
    assert "Run report.py first" in capsys.readouterr().out


def test_saved_tokens_keep_nan_as_a_word(tmp_path: Path) -> None:
    from viz_lengths import load_tokens

    path = tmp_path / "tokens.csv"
    pd.DataFrame({"AbstractID": [1], "Accepted": ["yes"], "word": ["nan"]}).to_csv(path, index=False)

    assert load_tokens(path)["word"].tolist() == ["nan"]

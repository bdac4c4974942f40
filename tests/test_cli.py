from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import BLOCK_A, BLOCK_B, FakeClient
from pipelines import PaperLatexPipeline
from src.cli import ptex
from src.cli.ptex import app
from scripts.validate_jsonl import main as validate_jsonl


runner = CliRunner()

TWO_PAPERS = '[{"index": 1, "title": "Gaussian Widgets"}, {"index": 2, "title": "Sparse Gizmos"}]'


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    pdf = tmp_path / "proceedings.pdf"
    pdf.write_bytes(b"%PDF-1.7 fake")
    return tmp_path


def use_replies(monkeypatch, replies):
    client = FakeClient(replies)
    monkeypatch.setattr(
        ptex, "build_pipeline", lambda cfg: PaperLatexPipeline(cfg, client=client)
    )
    return client


def test_convert_writes_tex_and_results(workdir: Path, monkeypatch):
    use_replies(monkeypatch, [TWO_PAPERS, BLOCK_A, RuntimeError("Deadline exceeded")])

    result = runner.invoke(app, ["convert", "proceedings.pdf", "--out-dir", "out"])
    assert result.exit_code == 0, result.output
    assert "Found 2 papers" in result.output
    assert "Deadline exceeded" in result.output

    tex = (workdir / "out" / "proceedings.tex").read_text(encoding="utf-8")
    assert BLOCK_A in tex

    out_jsonl = workdir / "out" / "proceedings_results.jsonl"
    lines = [json.loads(x) for x in out_jsonl.read_text(encoding="utf-8").splitlines()]
    assert [x["status"] for x in lines] == ["success", "error"]
    assert lines[1]["error_message"] == "Deadline exceeded"

    # QC should pass on a finished export
    qc_result = runner.invoke(app, ["qc", "--in-jsonl", str(out_jsonl)])
    assert qc_result.exit_code == 0, qc_result.output


def test_convert_exits_nonzero_when_analysis_fails(workdir: Path, monkeypatch):
    use_replies(monkeypatch, [""])

    result = runner.invoke(app, ["convert", "proceedings.pdf", "--out-dir", "out"])
    assert result.exit_code == 1
    assert "Failed to analyze PDF structure." in result.output


def test_convert_rejects_non_pdf(workdir: Path, monkeypatch):
    client = use_replies(monkeypatch, [])
    (workdir / "notes.txt").write_text("hello")

    result = runner.invoke(app, ["convert", "notes.txt"])
    assert result.exit_code == 1
    assert "PDF" in result.output
    assert client.calls == []


def test_analyze_lists_titles(workdir: Path, monkeypatch):
    use_replies(monkeypatch, [TWO_PAPERS])

    result = runner.invoke(app, ["analyze", "proceedings.pdf", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"index": 1, "title": "Gaussian Widgets"},
        {"index": 2, "title": "Sparse Gizmos"},
    ]
    assert not (workdir / "outputs").exists()


def test_missing_api_key(workdir: Path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    result = runner.invoke(app, ["analyze", "proceedings.pdf"])
    assert result.exit_code == 1
    assert "GEMINI_API_KEY" in result.output


def test_qc_fails_on_bad_block(workdir: Path):
    bad = {
        "document_id": "doc_3f9a2c7b",
        "session_id": "s",
        "id": "i",
        "index": 1,
        "title": "T",
        "status": "success",
        "content": "\\paperentrynum{T}{A}",
        "error_message": None,
        "timestamp_iso": "2025-08-09T13:00:00+09:00",
    }
    path = workdir / "bad.jsonl"
    path.write_text(json.dumps(bad) + "\n", encoding="utf-8")

    result = runner.invoke(app, ["qc", "--in-jsonl", str(path)])
    assert result.exit_code == 1
    assert "Expected 5 fields" in result.output


def test_aggregate(workdir: Path):
    (workdir / "a.tex").write_text(BLOCK_A, encoding="utf-8")
    (workdir / "b.tex").write_text(BLOCK_B + "\n", encoding="utf-8")

    result = runner.invoke(app, ["aggregate", "a.tex", "b.tex", "--out", "all.tex"])
    assert result.exit_code == 0, result.output
    assert (workdir / "all.tex").read_text(encoding="utf-8") == f"{BLOCK_A}\n{BLOCK_B}\n"


def test_validate_script_matches_qc(workdir: Path, monkeypatch, capsys):
    use_replies(monkeypatch, [TWO_PAPERS, BLOCK_A, BLOCK_B])
    result = runner.invoke(app, ["convert", "proceedings.pdf", "--out-dir", "out"])
    assert result.exit_code == 0, result.output
    out_jsonl = workdir / "out" / "proceedings_results.jsonl"

    assert validate_jsonl(["--jsonl", str(out_jsonl)]) == 0
    assert "All 2 lines passed" in capsys.readouterr().out

    records = [json.loads(x) for x in out_jsonl.read_text(encoding="utf-8").splitlines()]
    records[1]["content"] = "\\paperentrynum{T}{A}"
    bad = workdir / "bad.jsonl"
    bad.write_text("".join(json.dumps(r) + "\n" for r in records), encoding="utf-8")

    assert validate_jsonl(["--jsonl", str(bad)]) == 1
    out = capsys.readouterr().out
    assert "line 2" in out
    assert "Expected 5 fields" in out

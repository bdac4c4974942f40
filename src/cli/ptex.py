#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from pipelines import PaperLatexPipeline, PaperLatexConfig
from pipelines.config import config_from_dict
from src.texcore.config import DEFAULT_CONFIG_PATH, load_config
from src.texcore.errors import PaperEntryError
from src.texcore.io import read_jsonl, write_jsonl
from src.texcore.models import Phase, SessionSnapshot, Status
from src.texcore.qc import validate_result

app = typer.Typer(help="Convert the papers inside a PDF into \\paperentrynum LaTeX blocks")

# ---------- utils ----------


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def make_config(
    config_path: Optional[Path],
    provider: Optional[str],
    model: Optional[str],
    output_dir: Optional[Path],
    output_format: Optional[str] = None,
    save_results: Optional[bool] = None,
) -> PaperLatexConfig:
    data = {}
    if config_path is not None:
        data = load_config(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = load_config(DEFAULT_CONFIG_PATH)
    return config_from_dict(
        data,
        llm={"provider": provider, "model_name": model},
        output_dir=str(output_dir) if output_dir else None,
        output_format=output_format,
        save_results=save_results,
    )


def build_pipeline(config: PaperLatexConfig) -> PaperLatexPipeline:
    return PaperLatexPipeline(config)


def _open_pipeline(config: PaperLatexConfig) -> PaperLatexPipeline:
    try:
        return build_pipeline(config)
    except ValueError as e:
        typer.secho(f"❌ Failed to initialize model client: {e}", fg=typer.colors.RED)
        typer.secho(
            "💡 Set GEMINI_API_KEY or OPENROUTER_API_KEY (a .env file works too)",
            fg=typer.colors.YELLOW,
        )
        raise typer.Exit(code=1)


def echo_progress(snapshot: SessionSnapshot) -> None:
    if snapshot.phase is Phase.ANALYZING:
        typer.echo("🔎 Analyzing PDF structure...")
        return
    if snapshot.phase is not Phase.PROCESSING:
        return
    total = len(snapshot.results)
    for result in snapshot.results:
        meta = result.metadata
        if result.status is Status.PROCESSING:
            typer.echo(f"  [{meta.index}/{total}] 🤖 {meta.title[:60]}...")
    if snapshot.done_count == 0 and snapshot.processing_count == 0:
        typer.secho(f"📄 Found {total} papers", fg=typer.colors.BLUE)


# ---------- commands ----------


@app.command()
def analyze(
    pdf: Path = typer.Argument(..., exists=True, dir_okay=False),
    config: Optional[Path] = typer.Option(None, exists=True, help="YAML config"),
    provider: Optional[str] = typer.Option(None, help="gemini or openrouter"),
    model: Optional[str] = typer.Option(None),
    as_json: bool = typer.Option(False, "--json", help="Print the list as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """List the papers the model finds in the PDF."""
    setup_logging(verbose)
    cfg = make_config(config, provider, model, None, save_results=False)
    pipeline = _open_pipeline(cfg)

    try:
        papers = pipeline.analyze(pdf)
    except PaperEntryError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in papers], ensure_ascii=False, indent=2))
        return
    for p in papers:
        typer.echo(f"{p.index:>3}. {p.title}")


@app.command()
def convert(
    pdf: Path = typer.Argument(..., exists=True, dir_okay=False),
    out_dir: Optional[Path] = typer.Option(None, help="Where .tex and .jsonl go"),
    config: Optional[Path] = typer.Option(None, exists=True, help="YAML config"),
    provider: Optional[str] = typer.Option(None, help="gemini or openrouter"),
    model: Optional[str] = typer.Option(None),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Analyze the PDF, then extract every paper one at a time.
    Writes <stem>.tex with the successful blocks and <stem>_results.jsonl.
    """
    setup_logging(verbose)
    cfg = make_config(config, provider, model, out_dir, output_format="tex")
    pipeline = _open_pipeline(cfg)

    try:
        document = pipeline.load(pdf)
    except PaperEntryError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    snapshot = pipeline(document, on_update=echo_progress)

    if snapshot.phase is Phase.FAILED:
        typer.secho(f"❌ Analysis failed: {snapshot.error_message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    results_jsonl = Path(cfg.output_dir) / f"{pdf.stem}_results.jsonl"
    write_jsonl(results_jsonl, pipeline.export_records(snapshot, document))

    for result in snapshot.results:
        meta = result.metadata
        if result.status is Status.SUCCESS:
            typer.secho(f"  ✅ {meta.index}. {meta.title[:60]}", fg=typer.colors.GREEN)
        else:
            typer.secho(
                f"  ❌ {meta.index}. {meta.title[:60]}: {result.error_message}",
                fg=typer.colors.RED,
            )

    ok = len(snapshot.successes())
    typer.secho(
        f"\n🎉 {ok}/{len(snapshot.results)} papers converted → {Path(cfg.output_dir) / (pdf.stem + '.tex')}",
        fg=typer.colors.GREEN,
    )
    typer.secho(f"💡 Run validation: ptex qc --in-jsonl {results_jsonl}", fg=typer.colors.YELLOW)


@app.command()
def qc(
    in_jsonl: Path = typer.Option(..., exists=True),
    schema: Optional[Path] = typer.Option(None, exists=True),
):
    """
    Validate an exported results file against the JSON Schema and the
    five-field rule for successful blocks.
    """
    ok = True
    count = 0
    for obj in read_jsonl(in_jsonl):
        count += 1
        for err in validate_result(obj, schema):
            ok = False
            typer.secho(f"[line {count}] {err}", fg=typer.colors.RED)
    if ok:
        typer.secho(f"QC passed ✅ ({count} results)", fg=typer.colors.GREEN)
    else:
        raise typer.Exit(code=1)


@app.command()
def aggregate(
    files: List[Path] = typer.Argument(..., exists=True),
    out: Path = typer.Option(Path("outputs/combined.tex")),
):
    """Concatenate multiple .tex outputs."""
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as fout:
        for fp in files:
            text = fp.read_text(encoding="utf-8")
            fout.write(text if text.endswith("\n") else text + "\n")
    typer.secho(f"Aggregated → {out}", fg=typer.colors.GREEN)


def main():
    load_dotenv()
    app()


if __name__ == "__main__":
    main()

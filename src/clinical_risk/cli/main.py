"""CLI for clinical-risk: assess / scan commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from clinical_risk.core.config import AppSettings
from clinical_risk.core.startup_checks import validate_settings
from clinical_risk.exceptions import ConfigurationError, ExtractionParseError
from clinical_risk.hooks.logging_config import setup_logging
from clinical_risk.keywords.scanner import scan_keywords
from clinical_risk.models import KeywordCheckResult, RiskAssessmentResult
from clinical_risk.serialization import extraction_from_dict, keywords_to_dict, result_to_dict
from clinical_risk.validation.engine import RiskValidationEngine

app = typer.Typer(name="clinical-risk", help="Validate and conservatively merge clinical risk extractions")
console = Console()


def _configure_logging(verbose: bool) -> AppSettings:
    """Load settings, set up logging and run the startup checks."""
    settings = AppSettings()
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)
    try:
        validate_settings(settings)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error: {exc}[/red]")
        raise typer.Exit(code=2) from exc
    return settings


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid UTF-8 text: {exc}") from exc


def _load_json(path: Path) -> Any:
    try:
        return json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc


def _print_result(result: RiskAssessmentResult) -> None:
    status = "[bold red]REVIEW REQUIRED[/bold red]" if result.requires_review else "[green]No review needed[/green]"
    console.print(f"\n[bold]Determined risk level:[/bold] {result.determined_risk_level.value}")
    console.print(f"[bold]Status:[/bold] {status}")

    if result.discrepancies:
        table = Table(title="Discrepancies")
        table.add_column("Field", style="cyan")
        table.add_column("Original")
        table.add_column("Re-extracted")
        table.add_column("Resolved", style="green")
        for d in result.discrepancies:
            table.add_row(
                d.field_name,
                f"{d.original_value} ({d.original_confidence:.2f})",
                f"{d.re_extracted_value} ({d.re_extracted_confidence:.2f})",
                d.resolved_value,
            )
        console.print(table)

    if result.review_reasons:
        console.print("\n[bold]Review reasons:[/bold]")
        for reason in result.review_reasons:
            console.print(f"  - {reason}")


@app.command()
def assess(
    original_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON file with the original extraction"
    ),
    re_extracted_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON file with the safety re-extraction"
    ),
    note: Optional[Path] = typer.Option(
        None, "--note", exists=True, dir_okay=False, readable=True, help="Raw note text for the keyword safety net"
    ),
    threshold: Optional[float] = typer.Option(None, "--threshold", min=0.0, max=1.0, help="Confidence threshold"),
    output: Optional[Path] = typer.Option(None, help="Output path for result JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Reconcile two extraction passes and decide whether review is required."""
    settings = _configure_logging(verbose)
    if threshold is not None:
        settings.assessor.confidence_threshold = threshold

    try:
        original = extraction_from_dict(_load_json(original_file))
        re_extracted = extraction_from_dict(_load_json(re_extracted_file))
    except ExtractionParseError as exc:
        console.print(f"[red]Invalid extraction: {exc}[/red]")
        raise typer.Exit(code=2) from exc

    keywords = KeywordCheckResult()
    if note is not None:
        keywords = scan_keywords(_read_text(note))

    engine = RiskValidationEngine.from_config(settings.assessor)
    result = engine.validate(original, re_extracted, keywords)

    _print_result(result)

    if output:
        output.write_text(json.dumps(result_to_dict(result), indent=2), encoding="utf-8")
        console.print(f"[green]Result saved to {output}[/green]")

    raise typer.Exit(code=1 if result.requires_review else 0)


@app.command()
def scan(
    note_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Raw note text file"),
) -> None:
    """Scan a note for danger keywords."""
    _configure_logging(False)
    keywords = scan_keywords(_read_text(note_file))

    if not keywords.has_any_matches:
        console.print("[green]No danger keywords found[/green]")
        return

    console.print_json(data=keywords_to_dict(keywords))


if __name__ == "__main__":
    app()

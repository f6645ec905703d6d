"""Output formatters for CLI"""

import json

from rich.console import Console
from rich.table import Table

from tofuverify.data.models import ManifestChain, VerificationReport

OUTPUT_FORMATS = ("text", "json")


def format_report(report: VerificationReport, output_format: str, console: Console) -> None:
    """Format and print a verification report"""
    if output_format == "json":
        format_json(report, console)
    elif output_format == "text":
        format_text(report, console)
    else:
        raise ValueError(f"Unknown output format: {output_format}")


def format_json(report: VerificationReport, console: Console) -> None:
    """Format report as JSON"""
    console.print(
        json.dumps(report.to_dict(), indent=2),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def format_text(report: VerificationReport, console: Console) -> None:
    """Format report as a details table followed by the verdict"""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Package", report.package_id)
    if isinstance(report.evidence, ManifestChain):
        table.add_row("Manifest", f"{report.evidence.manifest_path} ({report.evidence.algorithm})")
    table.add_row("Signature", str(report.evidence.signature_path))
    table.add_row("Policy", report.policy.value)
    for note in report.notes:
        table.add_row("Note", note)

    console.print(table)

    if report.gpg_output and not report.verified:
        console.print(report.gpg_output.rstrip(), markup=False, highlight=False)

    if report.verified:
        console.print("[bold green]VERIFIED[/bold green]")
    else:
        console.print("[bold red]NOT VERIFIED[/bold red]")

"""Verify command"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tofuverify.cli.formatters import OUTPUT_FORMATS, format_report
from tofuverify.config import Config
from tofuverify.errors import (
    CryptoBackendError,
    InvalidInvocation,
    NoEvidenceFound,
    TofuVerifyError,
    TrustBootstrapIOFailure,
)
from tofuverify.utils.logging import setup_logging
from tofuverify.verifier.engine import SignatureVerifier

app = typer.Typer(help="Verify a downloaded artifact's signature (Trust On First Use)")
console = Console()
err_console = Console(stderr=True)

ERROR_LABELS = {
    InvalidInvocation: "Invalid invocation",
    NoEvidenceFound: "No evidence found",
    TrustBootstrapIOFailure: "Trust store error",
    CryptoBackendError: "gpg error",
}


def _error_label(error: TofuVerifyError) -> str:
    for error_type, label in ERROR_LABELS.items():
        if isinstance(error, error_type):
            return label
    return "Error"


@app.command()
def verify(
    artifact: str = typer.Argument(..., help="Downloaded file to verify (not its signature)"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json"),
    trust_root: Optional[Path] = typer.Option(None, "--trust-root", help="Directory holding per-package keyrings"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Verify an artifact against a co-located signature or signed SHA*SUMS manifest"""
    if output_format not in OUTPUT_FORMATS:
        err_console.print(f"Error: unknown format {output_format!r}", markup=False)
        raise typer.Exit(2)

    try:
        config = Config(config_path=config_file)
    except ValueError as e:
        err_console.print(f"Configuration error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)

    setup_logging(
        level=config.get("general", "log_level", "WARNING"),
        verbose=verbose,
        log_file=config.log_file,
    )

    try:
        verifier = SignatureVerifier(config, trust_root=trust_root)
        report = verifier.verify_artifact(artifact)
    except TofuVerifyError as e:
        err_console.print(f"{_error_label(e)}: {e}", markup=False, highlight=False)
        raise typer.Exit(1)
    except ValueError as e:
        err_console.print(f"Configuration error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)
    except OSError as e:
        err_console.print(f"I/O error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)

    format_report(report, output_format, console)
    raise typer.Exit(0 if report.verified else 1)


def main():
    """Entry point for the single-command tofuverify-verify script"""
    app()

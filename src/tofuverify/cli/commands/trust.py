"""Trust store inspection commands (read-only)"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from tofuverify.config import Config
from tofuverify.core.package import derive_package_id
from tofuverify.errors import InvalidInvocation
from tofuverify.verifier.trust import TrustStore, list_packages

app = typer.Typer(help="Inspect per-package trust stores")
console = Console()


def _trust_root(trust_root: Optional[Path]) -> Path:
    if trust_root is not None:
        return trust_root.expanduser()
    return Config().trust_root


@app.command("list")
def list_stores(
    trust_root: Optional[Path] = typer.Option(None, "--trust-root", help="Directory holding per-package keyrings"),
):
    """List packages that already have pinned keys"""
    root = _trust_root(trust_root)
    packages = list_packages(root)
    if not packages:
        console.print(f"No trust stores under {root}", markup=False, highlight=False)
        return

    table = Table(title=f"Trust stores in {root}")
    table.add_column("Package")
    table.add_column("State")
    for package_id in packages:
        table.add_row(package_id, TrustStore.open(root, package_id).state.value)
    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(..., help="Artifact filename or package name"),
    trust_root: Optional[Path] = typer.Option(None, "--trust-root", help="Directory holding per-package keyrings"),
):
    """Show the trust store a file or package would use"""
    try:
        package_id = derive_package_id(name)
    except InvalidInvocation as e:
        console.print(f"Error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)

    store = TrustStore.open(_trust_root(trust_root), package_id)
    console.print(f"Package: {package_id}", markup=False, highlight=False)
    console.print(f"Store: {store.store_directory}", markup=False, highlight=False)
    console.print(f"State: {store.state.value}", markup=False, highlight=False)

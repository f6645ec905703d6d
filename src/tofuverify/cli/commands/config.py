"""Configuration commands"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tofuverify.config import Config, default_config_path, parse_value

app = typer.Typer(help="Manage tofuverify configuration")
console = Console()

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Configuration file")


@app.command()
def init(config_file: Optional[Path] = CONFIG_OPTION):
    """Write a configuration file with default settings"""
    config_path = config_file or default_config_path()
    if config_path.exists():
        console.print(f"Configuration file already exists: {config_path}", markup=False, highlight=False)
        return

    Config(config_path=config_path).save()
    console.print(f"Created configuration file: {config_path}", markup=False, highlight=False)


@app.command()
def show(config_file: Optional[Path] = CONFIG_OPTION):
    """Show the configuration file"""
    config_path = config_file or default_config_path()
    if not config_path.exists():
        console.print("No configuration file found. Run 'tofuverify config init' to create one.")
        return

    console.print(config_path.read_text(encoding="utf-8"), markup=False, highlight=False)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting as section.key, e.g. gpg.timeout"),
    value: str = typer.Argument(..., help="New value"),
    config_file: Optional[Path] = CONFIG_OPTION,
):
    """Set a configuration value"""
    if "." not in key:
        console.print("Error: key must use the format section.key", markup=False)
        raise typer.Exit(1)

    section, name = key.split(".", 1)
    try:
        parsed = parse_value(section, name, value)
    except ValueError as e:
        console.print(f"Error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)

    try:
        config = Config(config_path=config_file)
    except ValueError as e:
        console.print(f"Configuration error: {e}", markup=False, highlight=False)
        raise typer.Exit(1)
    config.set(section, name, parsed)
    config.save()
    console.print("Configuration updated", markup=False)
    console.print(f"{section}.{name} = {parsed}", markup=False, highlight=False)

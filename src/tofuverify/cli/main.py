"""Main CLI entry point"""

import typer

from tofuverify.cli.commands import config, trust, verify

app = typer.Typer(
    name="tofuverify",
    help="tofuverify: verify downloads against signatures and signed checksum manifests, "
    "trusting each package's key on first use",
    no_args_is_help=True,
)

app.command("verify")(verify.verify)
app.add_typer(trust.app, name="trust")
app.add_typer(config.app, name="config")


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()

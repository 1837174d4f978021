"""Serve command."""

import click

from . import cli
from .shared import console


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def serve(debug):
    """Start the Bot Framework HTTP listener."""
    from teamsflow.main import run
    console.print("[bold blue]Starting teamsflow...[/bold blue]")
    run(debug=debug)

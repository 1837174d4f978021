"""Convert command — offline preview of what Teams would receive."""

import json

import click

from . import cli
from .shared import console, load_responses


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--platform", default="TEAMS", show_default=True, help="Platform tag to filter for")
def convert(path, platform):
    """Convert Dialogflow response messages in PATH to Teams activities."""
    from teamsflow.conversion import convert_to_activities

    try:
        responses = load_responses(path)
    except ValueError as e:
        raise click.ClickException(str(e))

    activities = convert_to_activities(responses, platform)
    console.print_json(json.dumps(activities))
    console.print(f"[dim]{len(responses)} responses → {len(activities)} activities[/dim]")

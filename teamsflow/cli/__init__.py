"""teamsflow CLI — command line interface."""

import click
from teamsflow import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="teamsflow")
@click.pass_context
def cli(ctx):
    """teamsflow — Dialogflow to Microsoft Teams bridge"""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]teamsflow v{__version__}[/bold] — Dialogflow to Microsoft Teams bridge\n")

    commands = [
        ("serve", "Start the Bot Framework HTTP listener"),
        ("convert", "Convert a JSON file of Dialogflow responses to Teams activities"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]teamsflow {name:10s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'teamsflow <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_serve  # noqa: E402, F401
from . import cmd_convert  # noqa: E402, F401


@cli.command(name="help", hidden=True)
def help_cmd():
    """Show all available commands."""
    _show_help()


def main():
    """CLI entry point."""
    import sys
    try:
        cli(standalone_mode=False)
    except click.UsageError as e:
        if e.ctx:
            click.echo(e.ctx.command.get_usage(e.ctx), err=True)
        click.echo("Try 'teamsflow help' for help.\n", err=True)
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(2)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)

"""Top command - launch the cctop TUI."""

import click


@click.command()
@click.pass_obj
def top(obj: dict) -> None:
    """Launch the cctop TUI.

    Shows all live sessions and auto-refreshes on changes.
    """
    from cctop.tui.app import CctopApp

    app = CctopApp(obj["config"])
    app.run()

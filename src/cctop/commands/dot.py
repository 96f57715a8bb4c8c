"""Dot command for cctop."""

import click

from cctop.core.transition import generate_dot_diagram


@click.command()
def dot() -> None:
    """Print the status state machine as a Graphviz DOT diagram.

    Examples:

        cctop dot | dot -Tsvg -o states.svg
    """
    click.echo(generate_dot_diagram())

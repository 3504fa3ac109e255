"""Top-level Click group for the stackinit CLI."""

import logging

import click

from stackinit.init_cmd.cli import init_cmd


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def main(verbose):
    """stackinit - scaffold projects from stack templates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


main.add_command(init_cmd)

"""Click command for the init workflow."""

import os
import sys

import click

from stackinit.errors import StackInitError
from stackinit.init_cmd.init_command import InitCommand
from stackinit.init_cmd.init_opts import InitOpts
from stackinit.stack.container_runtime import DockerRuntime
from stackinit.stack.stack_index import DEFAULT_INDEX_URL


def _fail(error):
    click.echo(f"Error: {error}", err=True)
    if error.remediation:
        click.echo(error.remediation, err=True)
    sys.exit(1)


@click.command("init")
@click.argument("stack", required=False)
@click.option("--overwrite", is_flag=True,
              help="Download and extract the template project, overwriting existing files.")
@click.option("--no-template", is_flag=True,
              help="Only create the .appsody-config.yaml file. Do not unzip the template project.")
@click.option("--dry-run", is_flag=True,
              help="Log what would be done without downloading, extracting or running anything.")
@click.option("--index", envvar="STACKINIT_INDEX", default=DEFAULT_INDEX_URL, show_default=True,
              help="URL or path of the stack index (env: STACKINIT_INDEX)")
def init_cmd(**kwargs):
    """Initialize a project with a stack and template app.

    With STACK, download the stack's template project into the current
    directory, then run the stack init script. Without STACK, only run the
    stack init script for the existing project.
    """
    opts = InitOpts(**kwargs)
    opts.validate()
    command = InitCommand(opts, os.getcwd(), DockerRuntime())
    try:
        command.execute()
    except StackInitError as e:
        _fail(e)

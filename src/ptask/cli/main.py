"""
ptask CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import inspect, options, render, validate
from .utils import setup_logging


@click.group()
@click.version_option(package_name="ptask")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """ptask: Parametric task configuration engine.

    Builds task names from a catalog of parameters, options and the
    dependencies between them.

    \b
    Quick Start:
      ptask validate -c catalog.yaml
      ptask options -c catalog.yaml -s tipo-de-tarea=Mampostería
      ptask render -c catalog.yaml -s tipo-de-tarea=Mampostería -s espesor=18
    """
    setup_logging(verbose)


main.add_command(inspect.inspect)
main.add_command(validate.validate)
main.add_command(options.options)
main.add_command(render.render)

if __name__ == "__main__":
    main()

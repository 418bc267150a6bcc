# smart_sorter/main.py

import click

from smart_sorter.cli.main import sorter
from smart_sorter.gui.main_window import run_gui


@click.group(invoke_without_command=True, context_settings=dict(help_option_names=['-h', '--help']))
@click.pass_context
def main(ctx: click.Context):
    """
    Smart Image Sorter: copy photos into folders named after their metadata.

    Without a command the GUI is started.

    \b
    Example (GUI): smart-sorter gui
    Example (CLI): smart-sorter cli organize ~/Pictures -p EquipMake -p EquipModel
    """
    if ctx.invoked_subcommand is None:
        run_gui()


@main.command()
def gui():
    """Launches the graphical user interface."""
    run_gui()


main.add_command(sorter, name='cli')

if __name__ == '__main__':
    main()

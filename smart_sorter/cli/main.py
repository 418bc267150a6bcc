# smart_sorter/cli/main.py

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from smart_sorter.core.config_manager import load_settings
from smart_sorter.core.errors import ImageReadError, SorterError
from smart_sorter.core.expressions import compile_classifiers
from smart_sorter.core.file_operations import DuplicateStrategy
from smart_sorter.core.image_metadata import read_image
from smart_sorter.core.organizer import ByClassifier, ByProperty, FileStatus, organize, to_text
from smart_sorter.utils.logger import setup_logging

console = Console()
logger = logging.getLogger(__name__)

STRATEGY_MAP = {
    'replace': DuplicateStrategy.REPLACE,
    'skip': DuplicateStrategy.SKIP,
    'append': DuplicateStrategy.APPEND_NUMBER,
}

# How many failed or skipped files are listed after a run before truncating.
REPORT_LIMIT = 20


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0", prog_name="Smart Image Sorter")
@click.option('-v', '--verbose', is_flag=True, help="Show per-file debug messages on the console.")
def sorter(verbose: bool):
    """
    Smart Image Sorter - copy images into folders named after their metadata.

    Use `[COMMAND] --help` for more information on a specific command.
    """
    setup_logging(verbose=verbose)


def _progress_reporter(bar: tqdm):
    def report(percent: int, source: Path, destination: Path):
        bar.n = percent
        bar.set_postfix_str(f"{source.name} -> {destination.parent.name}", refresh=False)
        bar.refresh()
    return report


def _print_summary(summary):
    table = Table(title="Organize Summary", show_header=False)
    table.add_column("Status", style="cyan")
    table.add_column("Count", style="bold magenta")
    table.add_row("Copied", str(summary.copied))
    table.add_row("Skipped", str(summary.skipped))
    table.add_row("[red]Failed[/red]" if summary.failed else "Failed", str(summary.failed))
    console.print(table)

    problems = summary.by_status(FileStatus.FAILED) + summary.by_status(FileStatus.SKIPPED)
    if not problems:
        return
    details = Table(title="Files Not Copied", style="yellow")
    details.add_column("File", style="green", no_wrap=True)
    details.add_column("Status")
    details.add_column("Reason")
    for result in problems[:REPORT_LIMIT]:
        details.add_row(str(result.source), result.status.value, result.reason)
    console.print(details)
    if len(problems) > REPORT_LIMIT:
        console.print(f"...and {len(problems) - REPORT_LIMIT} more. See the log file for every file.")


@sorter.command(name="organize")
@click.argument('paths', nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option('-p', '--property', 'properties', multiple=True,
              help="Metadata property whose value becomes part of the folder name (repeatable).")
@click.option('-e', '--expression', 'expressions', multiple=True,
              help="Python expression over 'image' and 'props' whose result becomes part of the folder name (repeatable).")
@click.option('--filter', 'name_filter', default=None, help="Wildcard applied to file names while scanning, e.g. '*.jpg'.")
@click.option('--include', multiple=True, help="Only process file names matching this wildcard (repeatable).")
@click.option('--exclude', multiple=True, help="Skip file names matching this wildcard (repeatable).")
@click.option('-r', '--recurse/--no-recurse', default=None, help="Descend into subdirectories.")
@click.option('--hide-progress/--show-progress', default=None, help="Hide the progress bar.")
@click.option('--duplicates', type=click.Choice(list(STRATEGY_MAP), case_sensitive=False), default=None,
              help="What to do when a file already exists in its folder. [default: replace]")
@click.option('--strict', is_flag=True, help="Stop at the first file that cannot be copied.")
@click.option('--config', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path), default=None,
              help="Path to a custom settings.json.")
def organize_command(paths, properties, expressions, name_filter, include, exclude, recurse, hide_progress,
                     duplicates, strict, config):
    """Copies images into folders named after their metadata.

    Give either --property names or --expression classifiers, not both.
    Without either, the property names from the settings file are used.
    """
    if properties and expressions:
        raise click.UsageError("--property and --expression cannot be used together.")

    defaults = load_settings(config)["organizer"]
    recurse = defaults["recurse"] if recurse is None else recurse
    hide_progress = defaults["hide_progress"] if hide_progress is None else hide_progress
    name_filter = name_filter or defaults["filter"]
    include = list(include) or defaults["include"]
    exclude = list(exclude) or defaults["exclude"]
    duplicate_strategy = STRATEGY_MAP[(duplicates or defaults["duplicates"]).lower()]

    try:
        if expressions:
            classification = ByClassifier(compile_classifiers(expressions))
        else:
            classification = ByProperty(list(properties) or defaults["properties"])
    except SorterError as e:
        raise click.BadParameter(str(e)) from e

    console.print("[bold cyan]Starting organize...[/bold cyan]")
    for path in paths:
        console.print(f"Source: [bright_magenta]{path}[/bright_magenta]")

    bar = None
    try:
        if not hide_progress:
            bar = tqdm(total=100, unit="%", desc="Organizing", leave=False)
        summary = organize(
            list(paths),
            classification,
            name_filter=name_filter,
            include=include,
            exclude=exclude,
            recurse=recurse,
            hide_progress=hide_progress,
            progress_callback=_progress_reporter(bar) if bar is not None else None,
            stop_on_error=strict,
            duplicate_strategy=duplicate_strategy,
        )
    except SorterError as e:
        console.print(f"[bold red]Organize stopped: {e}[/bold red]")
        logger.error("CLI organize command failed.", exc_info=True)
        sys.exit(1)
    finally:
        if bar is not None:
            bar.close()

    _print_summary(summary)
    console.print("[bold green]Organize complete.[/bold green]")


@sorter.command()
@click.argument('path', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
def inspect(path: Path):
    """Lists every metadata property of one image, for use with --property."""
    try:
        image = read_image(path)
    except ImageReadError as e:
        console.print(f"[bold red]{e}[/bold red]")
        sys.exit(1)

    table = Table(title=f"Metadata: {path.name}", style="cyan", title_style="bold magenta")
    table.add_column("Property", style="green", no_wrap=True)
    table.add_column("Value", style="yellow")
    for name in sorted(image.properties, key=str.lower):
        table.add_row(name, to_text(image.properties[name]))
    console.print(table)

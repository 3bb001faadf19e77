"""Command-line interface for Mactime Forensic."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from mactime_forensic import __version__
from mactime_forensic.core.builder import TimelineBuilder
from mactime_forensic.core.config import ENV_VAR_FILTER, ENV_VAR_SORT, load_config
from mactime_forensic.utils.exceptions import InvalidFilterSyntaxError, MactimeForensicError

# Status output goes to stderr; stdout carries only CSV
console = Console(stderr=True)

FILTER_HELP = "Date filter format: YYYY-MM-DD..YYYY-MM-DD (UTC days, time not handled)"


def print_status(status: str, message: str) -> None:
    """Print a status message with consistent formatting.

    Args:
        status: Status indicator ([OK], [FAIL], [WARN], [INFO], [ERROR])
        message: Message to display
    """
    color_map = {
        "[OK]": "green",
        "[FAIL]": "red",
        "[WARN]": "yellow",
        "[INFO]": "blue",
        "[ERROR]": "red bold",
    }
    color = color_map.get(status, "white")
    console.print(f"[{color}]{escape(status)}[/{color}] {escape(message)}")


def _configure_logging(verbose: int) -> None:
    """Route library logging through rich on stderr.

    Args:
        verbose: Verbosity level (0=warnings, 1=info, 2+=debug)
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def _create_progress_callback(verbose: int):
    """Create a progress callback for the timeline builder.

    Args:
        verbose: Verbosity level (0=quiet, 1=normal, 2+=detailed)

    Returns:
        Callback function for progress updates
    """
    step_names = {
        "parse": "Bodyfile Parsing",
        "coalesce": "MACB Coalescing",
        "filter": "Date Filter",
        "sort": "Timestamp Sort",
    }

    def callback(step: str, status: str, message: str) -> None:
        if verbose < 1:
            return

        step_name = step_names.get(step, step)
        if status == "start":
            if verbose >= 2:
                console.print(f"  [dim][...] {escape(step_name)}[/dim]")
        elif status == "complete":
            console.print(f"  [green][OK][/green] {escape(step_name)}: {escape(message)}")
        elif status == "skip":
            console.print(f"  [yellow][SKIP][/yellow] {escape(step_name)}: {escape(message)}")

    return callback


@click.group()
@click.version_option(version=__version__, prog_name="mactime-forensic")
def main():
    """Mactime Forensic - MACB timeline generator for forensic bodyfiles.

    Converts Sleuth Kit bodyfiles into chronological CSV timelines,
    merging timestamps that share the same instant into MACB flags.
    """


@main.command()
@click.option(
    "-b", "--bodyfile",
    required=True,
    type=click.Path(dir_okay=False, allow_dash=True),
    help="Bodyfile to read ('-' for stdin)",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="CSV output to file (stdout if not specified)")
@click.option("-f", "--filter", "date_filter", help=FILTER_HELP)
@click.option("-s", "--sort", is_flag=True, help="Sort timeline by datetime")
@click.option("--date-format", help="strftime format for the Date column (default: ISO 8601)")
@click.option("--encoding", help="Bodyfile text encoding (default: utf-8)")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (YAML/JSON)",
)
@click.option("-v", "--verbose", count=True, help="Verbosity level")
def timeline(
    bodyfile: str,
    output: str,
    date_filter: str,
    sort: bool,
    date_format: str,
    encoding: str,
    config_path: str,
    verbose: int,
):
    """Generate a MACB timeline CSV from a bodyfile.

    Each file record contributes one row per distinct timestamp; timestamps
    that coincide are merged into a single row with combined MACB flags.
    """
    _configure_logging(verbose)

    # Configuration problems are reported before any input is read
    try:
        config = load_config(
            config_path,
            date_filter=date_filter,
            sort=True if sort else None,
            date_format=date_format,
            encoding=encoding,
        )
    except InvalidFilterSyntaxError as e:
        print_status("[ERROR]", str(e))
        console.print(f"  [dim]{escape(FILTER_HELP)}[/dim]")
        sys.exit(1)
    except MactimeForensicError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)

    source = "stdin" if bodyfile == "-" else bodyfile
    builder = TimelineBuilder(config, progress_callback=_create_progress_callback(verbose))

    try:
        if bodyfile == "-":
            result = builder.build_from_stream(sys.stdin)
        else:
            result = builder.build_from_file(Path(bodyfile))

        print_status("[INFO]", f"Number of file records read from {source}: {result.record_count}")
        print_status("[INFO]", f"Number of datetime records read from {source}: {result.row_count}")

        statistics = result.statistics
        if statistics.malformed_records:
            print_status("[WARN]", f"Skipped {statistics.malformed_records} malformed record(s)")
        if statistics.unparsable_timestamps:
            print_status(
                "[WARN]",
                f"Ignored {statistics.unparsable_timestamps} unparsable timestamp(s)",
            )

        exporter = builder.exporter()
        if output:
            exporter.to_file(result.rows, output)
            print_status("[OK]", f"Timeline written to: {output}")
        else:
            exporter.write(result.rows, sys.stdout)
            sys.stdout.flush()

    except MactimeForensicError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)
    except Exception as e:
        print_status("[ERROR]", f"Timeline generation failed: {e}")
        if verbose > 0:
            console.print_exception()
        sys.exit(1)


@main.command()
def info():
    """Display tool information and supported formats."""
    console.print(Panel(
        f"[bold]Mactime Forensic v{__version__}[/bold]\n\n"
        "MACB timeline generator for forensic bodyfiles\n\n"
        "[bold]Input (bodyfile):[/bold]\n"
        "  MD5|name|inode|mode_as_string|UID|GID|size|atime|mtime|ctime|crtime\n"
        "  Timestamps are epoch seconds (UTC) or empty\n\n"
        "[bold]Output (CSV):[/bold]\n"
        "  Date,Size,Type,Mode,UID,GID,Meta,File Name\n\n"
        "[bold]MACB flags:[/bold]\n"
        "  [->] m: content modified (mtime)\n"
        "  [->] a: accessed (atime)\n"
        "  [->] c: metadata changed (ctime)\n"
        "  [->] b: born/created (crtime)\n\n"
        "[bold]Environment:[/bold]\n"
        f"  {ENV_VAR_FILTER}: default date filter\n"
        f"  {ENV_VAR_SORT}: default sort (true/false)",
        title="Tool Information",
        style="blue",
    ))


if __name__ == "__main__":
    main()

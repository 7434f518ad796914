"""
dir2cbz command line interface.

Packs one or more directories of images into CBZ (Comic Book ZIP) files.
Features include:
- Content-based image detection (JPEG, PNG, GIF, WebP)
- Natural page ordering (2.jpg before 10.jpg)
- Optional sequential renaming of pages (1.jpg, 2.jpg, ...)
- Optional full decode of every page to catch corrupt images
- Atomic archive writes, existing archives are never half-overwritten

Usage:
    dir2cbz "Vol 01" "Vol 02" --verify --delete
"""

# Standard library imports
import argparse  # Command-line argument parsing
import logging  # Routes core library messages to the console
from pathlib import Path  # Object-oriented filesystem paths

# Rich library for terminal output
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .errors import DeleteError, NonImageFilesError
from .models import DEFAULT_EXCLUDE_PATTERNS, PackOptions, RunStatus
from .pipeline import delete_source, process_directories

# Initialize Rich console for formatted output
console = Console()


def build_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dir2cbz",
        description="Create CBZ files from directories of images",
    )
    # Required positional argument: one or more directories of pages
    parser.add_argument(
        "dirs", nargs="+", type=Path, help="Directory(s) containing images"
    )
    parser.add_argument(
        "-n", "--no-rename", action="store_true", help="Don't rename files"
    )
    parser.add_argument(
        "-d",
        "--delete",
        action="store_true",
        help="Delete original files and directory after creating the CBZ",
    )
    parser.add_argument(
        "-v", "--verify", action="store_true", help="Verify image data"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output file if it exists",
    )

    # Optional: archive layout
    parser.add_argument(
        "--compress",
        action="store_true",
        help="Deflate images instead of storing them (rarely saves space)",
    )
    parser.add_argument(
        "--pad",
        type=int,
        nargs="?",
        const=0,
        default=None,
        metavar="WIDTH",
        help="Zero-pad page numbers (01.jpg); without WIDTH at least 2 digits",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Don't create a CBZ if the directory contains non-image files",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Leave out files matching PATTERN (repeatable). "
        f"Always excluded: {', '.join(DEFAULT_EXCLUDE_PATTERNS)}",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Write CBZ files here instead of next to each directory",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show per-file details",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def options_from_args(args):
    """Map parsed arguments onto PackOptions."""
    return PackOptions(
        rename=not args.no_rename,
        verify=args.verify,
        overwrite=args.overwrite,
        compress=args.compress,
        pad_width=args.pad,
        strict=args.strict,
        exclude=DEFAULT_EXCLUDE_PATTERNS + tuple(args.exclude),
        output_dir=args.output_dir,
    )


def configure_logging(verbose):
    """Send core library log records through Rich."""
    handler = RichHandler(console=console, show_time=False, show_path=False)
    # Results are reported by report_result(), logs only add detail on top
    logging.basicConfig(level=logging.ERROR, format="%(message)s", handlers=[handler])
    # Debug detail only for our own modules, Pillow's decoder chatter stays hidden
    if verbose:
        logging.getLogger("dir2cbz").setLevel(logging.DEBUG)


def create_header(args, options):
    """Create the configuration header panel."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    table.add_row(
        "Directories:",
        str(len(args.dirs)),
        "Rename:",
        "Yes" if options.rename else "No",
    )
    table.add_row(
        "Verify:",
        "Yes" if options.verify else "No",
        "Delete Originals:",
        "Yes" if args.delete else "No",
    )
    table.add_row(
        "Output:",
        str(options.output_dir) if options.output_dir else "Next to each directory",
        "Compression:",
        "Deflate" if options.compress else "Store",
    )

    return Panel(
        table,
        title="[bold green]dir2cbz - Configuration",
        border_style="green",
        box=box.ROUNDED,
    )


def ask_overwrite(path):
    """Ask the user whether an existing archive may be replaced."""
    return Confirm.ask(
        f"[bold yellow]WARNING:[/bold yellow] {escape(str(path))} already exists. Overwrite?",
        console=console,
        default=False,
    )


class VerifyProgress:
    """
    Progress bar for image verification, used as the validator's callback.

    The bar is started on the first image of a directory (the page count is
    only known once the directory has been scanned) and must not be live
    while the overwrite prompt is waiting for input, so close() is called
    after every directory.
    """

    def __init__(self):
        self.progress = None
        self.task = None

    def __call__(self, entry, done, total):
        if self.progress is None:
            self.progress = Progress(
                TextColumn("[bold blue]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TextColumn("{task.completed}/{task.total}"),
                console=console,
                transient=True,
            )
            self.progress.start()
            self.task = self.progress.add_task("Verifying files", total=total)
        self.progress.update(self.task, completed=done)

    def close(self):
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
            self.task = None


def report_result(result, verbose=False):
    """Print the outcome of one directory."""
    if result.status is RunStatus.PACKED:
        images = len(result.manifest.images)
        console.print(
            f"[green]✓ Created {escape(str(result.archive_path))} ({images} images)[/green]"
        )
    elif result.status is RunStatus.DECLINED:
        console.print("[yellow]Not creating cbz[/yellow]")
    elif result.status is RunStatus.EMPTY:
        console.print(
            f"[yellow]No images found in {escape(str(result.directory))}, skipped[/yellow]"
        )
    else:
        console.print(f"[bold red]ERROR:[/bold red] {escape(str(result.error))}")
        if isinstance(result.error, NonImageFilesError):
            for path in result.error.paths:
                console.print(f"\t{escape(str(path))}")

    # Non-images are never packaged, tell the user what was left out
    if result.manifest is not None and result.manifest.non_images:
        console.print(
            f"[yellow]Left out {len(result.manifest.non_images)} "
            "non-images/unsupported images:[/yellow]"
        )
        for entry in result.manifest.non_images:
            console.print(f"\t{escape(str(entry.path))}")
    if verbose and result.manifest is not None:
        for entry in result.manifest.excluded:
            console.print(f"[dim]  excluded {escape(str(entry.path))}[/dim]")


def create_summary(counts):
    """Create the final statistics table."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="bold cyan", justify="right", width=20)
    table.add_column(style="white")

    table.add_row("Created:", str(counts[RunStatus.PACKED]))
    table.add_row("Skipped (exists):", str(counts[RunStatus.DECLINED]))
    table.add_row("Skipped (empty):", str(counts[RunStatus.EMPTY]))
    table.add_row("Failed:", str(counts[RunStatus.FAILED]))
    table.add_row("Delete failures:", str(counts["delete_failed"]))

    return Panel(
        table, title="[bold green]Summary", border_style="green", box=box.ROUNDED
    )


def main(argv=None):
    """
    Main entry point.

    Processes every directory in order. A failure in one directory is
    reported and the next one is processed anyway.

    Returns:
        int: 0 if nothing failed, 1 otherwise
    """
    args = build_parser().parse_args(argv)
    options = options_from_args(args)
    configure_logging(args.verbose)

    if args.verbose:
        console.print(create_header(args, options))

    counts = {status: 0 for status in RunStatus}
    counts["delete_failed"] = 0

    progress = VerifyProgress()

    results = process_directories(
        args.dirs,
        options,
        confirm_overwrite=None if options.overwrite else ask_overwrite,
        on_progress=progress,
        on_start=lambda d: console.print(f"[bold]Processing {escape(str(d))}...[/bold]"),
    )
    for result in results:
        progress.close()
        report_result(result, args.verbose)
        counts[result.status] += 1

        # Only ever delete the originals once their archive exists
        if args.delete and result.status is RunStatus.PACKED:
            console.print("Deleting original files and directory...")
            try:
                delete_source(result.directory, result.archive_path)
            except DeleteError as e:
                console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
                counts["delete_failed"] += 1

    if len(args.dirs) > 1 or args.verbose:
        console.print(create_summary(counts))

    failed = counts[RunStatus.FAILED] + counts["delete_failed"]
    return 1 if failed else 0

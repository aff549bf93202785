"""
Main module: command line conversion of Backlog notation files.
"""

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import track

from .config import ensure_directories, load_options, resolve_output_dir
from .constants import SUPPORTED_EXTENSIONS
from .exceptions import Backlog2MdError, ConfigurationError, ConversionError
from .link_processor import update_all_markdown_links
from .markdown_converter import convert, convert_file_to_markdown

# Markdown may go to stdout, progress goes to stderr
console = Console(stderr=True)


def configure_logging(verbose=False):
    """Send library logging through rich, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="backlog2md",
        description="Convert Backlog notation documents to Markdown.",
        epilog=(
            "Examples:\n"
            "  backlog2md page.txt                  # writes markdown_output/page.md\n"
            "  backlog2md ./wiki/ -o ./markdown     # every .txt/.backlog file\n"
            "  backlog2md page.txt --stdout         # print to terminal\n"
            "  cat page.txt | backlog2md -          # read from stdin\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("sources", nargs="*", help="Files, directories, or - for stdin")
    parser.add_argument("-o", "--output", default=None, help="Output directory")
    parser.add_argument("--stdout", action="store_true", help="Print Markdown instead of writing files")
    parser.add_argument("--crlf", action="store_true", default=None, help="Use \\r\\n line endings")
    parser.add_argument(
        "--promote-header",
        action="store_true",
        default=None,
        help="Use the first row of a table without header as its header",
    )
    parser.add_argument("--config", default=None, help="JSON configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    return parser


def collect_sources(sources):
    """Expand directories into their supported files. Returns (files, missing)."""
    files = []
    missing = []
    for source in sources:
        if os.path.isdir(source):
            for filename in sorted(os.listdir(source)):
                path = os.path.join(source, filename)
                _, ext = os.path.splitext(filename.lower())
                if os.path.isfile(path) and ext in SUPPORTED_EXTENSIONS:
                    files.append(path)
        elif os.path.isfile(source):
            files.append(source)
        else:
            missing.append(source)
    return files, missing


def print_markdown(markdown):
    sys.stdout.write(markdown + "\n")


def convert_to_stdout(files, options):
    """Print each converted file. Returns the number of failures."""
    errors = 0
    for path in files:
        try:
            with open(path, "r", encoding="utf-8") as f:
                print_markdown(convert(f.read(), options))
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[bold red]Error:[/bold red] {escape(path)}: {escape(str(e))}")
            errors += 1
    return errors


def convert_to_directory(files, output_dir, options):
    """Write each converted file to ``output_dir``. Returns (processed_items, errors)."""
    processed_items = {}
    taken_slugs = set()
    errors = 0

    for path in track(files, description="Converting...", console=console, disable=len(files) < 2):
        try:
            slug, title = convert_file_to_markdown(path, output_dir, options, taken_slugs)
        except ConversionError as e:
            console.print(f"[bold red]Conversion Error:[/bold red] {escape(str(e))}")
            errors += 1
            continue
        processed_items[slug] = {"slug": slug, "title": title}
        console.print(f"Converted: [bold blue]{escape(path)}[/bold blue] → {escape(slug)}.md")

    return processed_items, errors


def main(argv=None):
    """Run the command line converter and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.sources:
        parser.print_help(sys.stderr)
        console.print("\n[bold red]Error:[/bold red] No sources provided.")
        return 1

    try:
        options = load_options(
            use_crlf=args.crlf,
            promote_first_row=args.promote_header,
            config_file=args.config,
        )

        errors = 0
        if "-" in args.sources:
            print_markdown(convert(sys.stdin.read(), options))

        files, missing = collect_sources([s for s in args.sources if s != "-"])
        for source in missing:
            console.print(f"[bold red]Error:[/bold red] Cannot find source: {escape(source)}")
        errors += len(missing)

        if args.stdout:
            errors += convert_to_stdout(files, options)
        elif files:
            output_dir = resolve_output_dir(args.output, args.config)
            ensure_directories(output_dir)

            processed_items, failed = convert_to_directory(files, output_dir, options)
            errors += failed

            updated = update_all_markdown_links(output_dir, processed_items)
            if updated:
                console.print(f"[yellow]Updated {updated} links between pages[/yellow]")
            console.print(
                f"[bold green]Converted {len(processed_items)} files. "
                f"Files saved in '{escape(output_dir)}'[/bold green]"
            )

    except ConfigurationError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        return 1
    except Backlog2MdError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())

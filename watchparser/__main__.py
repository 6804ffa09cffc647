"""CLI entry point: python -m watchparser {scrape,storyboard} [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from watchparser import settings
from watchparser.extractors.urlnorm import extract_id_slug, validate_source_url
from watchparser.items import MediaKind, RelatedContent
from watchparser.query import FetchError, extract, fetch_related_html
from watchparser.storyboard import build_storyboard, source_info_from_filename

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

_FETCH_TIP = (
    "Tip: Try the --browser flag to use a headless browser, or save the page "
    "with your browser and use the --file option."
)

_EMPTY_HINTS = (
    'The URL does not have a "Related" section',
    "The page structure has changed",
    "The website is blocking or returning different content",
    "The URL is incorrect (e.g., using /movie/ instead of /show/)",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watchparser",
        description=(
            "Parse related shows and movies from GoodWatch title pages\n"
            "and plan short-form videos from the results."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    sub = parser.add_subparsers(dest="command", required=True)

    scrape = sub.add_parser("scrape", help="Scrape related content from a GoodWatch URL")
    scrape.add_argument("--url", default=None, metavar="URL",
                        help="Title page URL (prompted for when omitted)")
    scrape.add_argument("-f", "--file", default=None, metavar="PATH",
                        help="Parse a saved HTML file instead of fetching the URL")
    scrape.add_argument("-b", "--browser", action="store_true", default=False,
                        help="Force the headless browser (slower, handles JS-rendered pages)")
    scrape.add_argument("--out", default=settings.OUTPUT_DIR, metavar="DIR",
                        help=f"Output directory (default: {settings.OUTPUT_DIR})")
    scrape.add_argument("--timeout", type=int, default=settings.DOWNLOAD_TIMEOUT, metavar="S",
                        help=f"Network timeout in seconds (default: {settings.DOWNLOAD_TIMEOUT})")

    board = sub.add_parser("storyboard", help="Plan video scenes from a scrape output file")
    board.add_argument("--input", default=None, metavar="FILE",
                       help=f"*{settings.OUTPUT_SUFFIX} file (chosen interactively when omitted)")
    board.add_argument("--dir", default=settings.OUTPUT_DIR, metavar="DIR",
                       help=f"Where to look for output files (default: {settings.OUTPUT_DIR})")
    board.add_argument("--out", default=settings.OUTPUT_DIR, metavar="DIR",
                       help=f"Output directory (default: {settings.OUTPUT_DIR})")
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format=settings.LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _prompt_url(message: str, *, require_scheme: bool) -> str:
    while True:
        url = Prompt.ask(message, console=console).strip()
        error = validate_source_url(url, require_scheme=require_scheme)
        if error is None:
            return url
        console.print(f"[red]{error}[/red]")


def _print_summary(content: RelatedContent) -> None:
    tbl = Table(title="[bold]Summary[/bold]", show_header=True, header_style="bold cyan")
    tbl.add_column("Category", style="cyan")
    tbl.add_column("Movies", justify="right")
    tbl.add_column("TV Shows", justify="right")
    for name in content.categories():
        tbl.add_row(
            name,
            str(len(content.movies.get(name, []))),
            str(len(content.tv_shows.get(name, []))),
        )
    console.print(tbl)
    console.print(f"  [bold]Movies     :[/bold] {content.count(MediaKind.MOVIE)}")
    console.print(f"  [bold]TV Shows   :[/bold] {content.count(MediaKind.SHOW)}")
    console.print(f"  [bold]Categories :[/bold] {len(content.movies)}")


def _warn_empty() -> None:
    err_console.print("\n[bold yellow]WARNING: Results are completely empty![/bold yellow]")
    err_console.print("This could mean:")
    for i, hint in enumerate(_EMPTY_HINTS, 1):
        err_console.print(f"  {i}. {hint}")
    err_console.print(
        "\nTip: Try saving the HTML with your browser and using the --file option "
        "to parse it locally.",
    )


def cmd_scrape(args: argparse.Namespace) -> int:
    console.print(Panel.fit("[bold cyan]GoodWatch Related Content Scraper[/bold cyan]"))

    from_file = args.file is not None
    if args.url:
        url = args.url.strip()
        error = validate_source_url(url, require_scheme=not from_file)
        if error:
            err_console.print(f"ERROR: {error}")
            return 1
    elif from_file:
        url = _prompt_url(
            "Enter the GoodWatch URL (for naming the output file)", require_scheme=False,
        )
    else:
        url = _prompt_url("Enter the GoodWatch URL to scrape", require_scheme=True)

    if from_file:
        path = Path(args.file)
        if not path.is_file():
            err_console.print(f"ERROR: File not found: {path}")
            return 1
        try:
            html = path.read_text(encoding="utf-8")
        except OSError as exc:
            err_console.print(f"ERROR: Could not read {path}: {exc}")
            return 1
    else:
        console.print("Fetching content...")
        try:
            html = fetch_related_html(url, render_js=args.browser, timeout=args.timeout)
        except FetchError as exc:
            err_console.print(f"ERROR: {exc}")
            err_console.print(_FETCH_TIP)
            return 1

    console.print("Parsing content...")
    content = extract(html)
    if content.is_empty():
        _warn_empty()

    out_dir = Path(args.out).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    id_slug = extract_id_slug(url)
    if id_slug:
        out_path = out_dir / f"{id_slug}{settings.OUTPUT_SUFFIX}"
        out_path.write_text(content.to_json(), encoding="utf-8")
        console.print(f"[green]Output saved to:[/green] {out_path}")
    else:
        logger.warning("No /movie/ or /show/ id in %s; output not saved", url)

    _print_summary(content)
    return 0


def _choose_output_file(directory: Path) -> Path | None:
    files = sorted(p.name for p in directory.glob(f"*{settings.OUTPUT_SUFFIX}"))
    if not files:
        err_console.print(
            f"ERROR: No *{settings.OUTPUT_SUFFIX} files found in {directory}. "
            "Please run the scrape command first.",
        )
        return None
    for i, name in enumerate(files, 1):
        console.print(f"  {i}. {name}")
    choice = Prompt.ask(
        "Select an output file",
        choices=[str(i) for i in range(1, len(files) + 1)],
        default="1",
        console=console,
    )
    return directory / files[int(choice) - 1]


def cmd_storyboard(args: argparse.Namespace) -> int:
    console.print(Panel.fit("[bold cyan]GoodWatch Storyboard[/bold cyan]"))

    if args.input:
        path = Path(args.input)
    else:
        chosen = _choose_output_file(Path(args.dir))
        if chosen is None:
            return 1
        path = chosen

    try:
        content = RelatedContent.from_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        err_console.print(f"ERROR: Could not read {path}: {exc}")
        return 1
    except ValueError as exc:
        err_console.print(f"ERROR: {path} is not a scrape output file: {exc}")
        return 1

    title, image = source_info_from_filename(content, path.name)
    console.print(f"Source: [bold]{title}[/bold]")
    if not image:
        console.print("[yellow]Warning: No source image found.[/yellow]")

    board = build_storyboard(content, title, image)

    out_dir = Path(args.out).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S")
    stem = path.name.removesuffix(settings.OUTPUT_SUFFIX)
    out_path = out_dir / f"{stem}-{stamp}{settings.STORYBOARD_SUFFIX}"

    out_path.write_text(
        json.dumps(board.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8",
    )
    console.print(
        f"[green]Storyboard saved to:[/green] {out_path}\n"
        f"  Scenes: {len(board.scenes)}  "
        f"Duration: {board.total_frames} frames ({board.duration_seconds:.1f}s)  "
        f"Resolution: {board.width}x{board.height} @ {board.fps} fps",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.command == "scrape":
        return cmd_scrape(args)
    return cmd_storyboard(args)


if __name__ == "__main__":
    sys.exit(main())

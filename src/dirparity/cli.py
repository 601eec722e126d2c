from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys
import threading
from pathlib import Path

import typer
from tqdm import tqdm

from .comparison import compare as compare_trees
from .config import CompareConfig, load_config
from .errors import CompareError
from .models import ComparisonReport

app = typer.Typer(add_completion=False, no_args_is_help=True)

EXIT_DIFFERS = 1
EXIT_ERROR = 2

def _setup_logging(log_file: str | None, log_level: int, verbose: bool) -> None:
    """Configure the dirparity logger for one CLI run."""
    level = logging.DEBUG if verbose else log_level

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt, datefmt))
    handlers.append(console)

    if log_file:
        from logging.handlers import RotatingFileHandler
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file, maxBytes=10 * 1024 * 1024, backupCount=5,
                encoding="utf-8", errors="backslashreplace",
            )
        except OSError as e:
            raise typer.BadParameter(f"Cannot open log file {log_file}: {e}", param_hint="--log-file") from e
        file_handler.setFormatter(logging.Formatter(fmt, datefmt))
        handlers.append(file_handler)

    logger = logging.getLogger("dirparity")
    # Repeated invocations in one process must not stack handlers
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.setLevel(level)
    for h in handlers:
        logger.addHandler(h)

def _cfg(config: str | None) -> CompareConfig:
    try:
        return load_config(config)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--config") from e

def _printable(value: str | os.PathLike[str]) -> str:
    """Render a path so undecodable bytes in its name show as \\xNN escapes."""
    return os.fsencode(os.fspath(value)).decode("utf-8", "backslashreplace")

def _render_text(report: ComparisonReport) -> None:
    if report.identical:
        typer.echo("The directories are identical.")
        return
    diffs = report.differences
    typer.echo(f"\nFound {len(diffs)} differences:")
    for d in diffs:
        present, missing = (
            (report.root_a, report.root_b) if d.side == "a_only" else (report.root_b, report.root_a)
        )
        typer.echo(
            f"File present in {_printable(present)} but missing in {_printable(missing)}: {_printable(d.path)}"
        )

@app.command()
def compare(
    dir1: str = typer.Argument(..., help="First directory to compare"),
    dir2: str = typer.Argument(..., help="Second directory to compare"),
    config: str = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    parallel: bool = typer.Option(None, "--parallel/--no-parallel", help="Override parallel config"),
    ignore: list[str] = typer.Option(None, "--ignore", "-i", help="Glob pattern to leave out (repeatable)"),
    follow_symlinks: bool = typer.Option(None, "--follow-symlinks/--no-follow-symlinks",
                                         help="Count symlinks that point at regular files"),
    progress: bool = typer.Option(None, "--progress/--no-progress", help="Override progress display"),
    check: bool = typer.Option(False, "--check", help=f"Exit with status {EXIT_DIFFERS} when the trees differ"),
    log_file: str = typer.Option(None, "--log-file", "-l", help="Log file path"),
    log_level: str = typer.Option(None, "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
):
    """Compare two directories and list files that exist in one but not in the other."""
    cfg = _cfg(config)

    overrides: dict = {}
    if ignore:
        overrides["ignore"] = [*cfg.ignore, *ignore]
    if parallel is not None:
        overrides["parallel"] = parallel
    if follow_symlinks is not None:
        overrides["follow_symlinks"] = follow_symlinks
    if progress is not None:
        overrides["show_progress"] = progress
    if as_json:
        overrides["output_format"] = "json"
    if log_file:
        overrides["log_file"] = log_file
    if log_level:
        overrides["log_level"] = log_level
    try:
        cfg = dataclasses.replace(cfg, **overrides)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    _setup_logging(cfg.log_file, cfg.log_level_value, verbose)

    lock = threading.Lock()
    with tqdm(desc="Scanning", unit=" files", file=sys.stderr, leave=False,
              disable=not cfg.show_progress) as bar:
        def on_entry(side: str, rel: str) -> None:
            with lock:
                bar.set_postfix_str(f"{side}: {_printable(rel)}", refresh=False)
                bar.update(1)

        try:
            report = compare_trees(dir1, dir2, config=cfg, on_entry=on_entry)
        except CompareError as e:
            bar.close()
            typer.echo(f"Error: {_printable(str(e))}", err=True)
            raise typer.Exit(code=EXIT_ERROR)

    if cfg.output_format == "json":
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _render_text(report)
        skipped = report.skipped_a + report.skipped_b
        if skipped:
            typer.echo(f"  ({skipped} unreadable entries skipped)", err=True)

    if check and not report.identical:
        raise typer.Exit(code=EXIT_DIFFERS)

@app.command()
def init(out: str = typer.Option("config.toml", help="Write example config to this path"),
         force: bool = typer.Option(False, "--force", help="Overwrite an existing file")):
    """Write a starter config.toml."""
    outp = Path(out)
    if outp.exists() and not force:
        raise typer.BadParameter(f"{outp} already exists (use --force to overwrite)", param_hint="--out")
    outp.write_text("""[compare]
ignore = [".git/**", "**/.DS_Store", "**/Thumbs.db"]
follow_symlinks = false
parallel = false

[output]
format = "text"  # text|json
progress = true

[logging]
level = "WARNING"
# file = "~/.local/state/dirparity/compare.log"
# Can also be set with the DIRPARITY_LOG_LEVEL environment variable
""", encoding="utf-8")
    typer.echo(f"Wrote {outp}")

if __name__ == "__main__":
    app()

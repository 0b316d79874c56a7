"""great-review CLI — Typer application with diff, files, info, prompt and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from greatreview import __version__
from greatreview.config.loader import ConfigError, load_config
from greatreview.config.schema import OUTPUT_FORMATS, GreatReviewConfig
from greatreview.git.errors import GitError
from greatreview.git.models import DiffFile
from greatreview.log import setup_logging

app = typer.Typer(
    name="great-review",
    help="Review git changes hunk by hunk.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _config_dir() -> Path:
    """Repo root when inside a repository, else the current directory."""
    from greatreview.git.adapter import find_repo_root

    try:
        return find_repo_root()
    except GitError:
        return Path.cwd()


def _load_config(config: Optional[str], verbose: bool) -> GreatReviewConfig:
    """Load config, exit 2 on failure."""
    try:
        cfg = load_config(_config_dir(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    level = "DEBUG" if verbose else cfg.log.level
    setup_logging(level, console=console, log_file=Path(cfg.log.file) if cfg.log.file else None)
    return cfg


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}", highlight=False)
    return typer.Exit(code=2)


def _check_format(fmt: Optional[str], cfg: GreatReviewConfig) -> None:
    if fmt is None:
        return
    if fmt not in OUTPUT_FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {fmt}")
        raise typer.Exit(code=2)
    cfg.output.format = fmt  # type: ignore[assignment]


def _load_files(diff_range: Optional[str], remote: Optional[str], cfg: GreatReviewConfig) -> List[DiffFile]:
    from greatreview.git.source import load_diff

    try:
        return load_diff(diff_range, remote, cfg)
    except GitError as exc:
        raise _fail("Git error", exc) from exc


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    diff_range: Optional[str] = typer.Argument(None, metavar="[RANGE]", help="Revision range, e.g. main..HEAD"),
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Remote repo as host:path"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON to file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .greatreview.toml"),
    with_repo: bool = typer.Option(False, "--with-repo", help="Include repository info in JSON output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show the diff for RANGE (default: working tree against HEAD)."""
    from greatreview.output import json_report, terminal

    cfg = _load_config(config, verbose)
    _check_format(format, cfg)
    files = _load_files(diff_range, remote, cfg)

    repo_info = None
    if with_repo:
        from greatreview.git.source import load_repo_info

        try:
            repo_info = load_repo_info(remote, cfg)
        except GitError as exc:
            raise _fail("Git error", exc) from exc

    report_text: Optional[str] = None
    if cfg.output.format == "json":
        report_text = json_report.render(files, repo_info)
        print(report_text)
    else:
        if repo_info is not None:
            terminal.render_repo_info(repo_info)
        terminal.render(
            files,
            show_line_numbers=cfg.output.show_line_numbers,
            show_summary=cfg.output.show_summary,
        )

    if output:
        report_text = report_text or json_report.render(files, repo_info)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {escape(output)}[/dim]")


# ── files ─────────────────────────────────────────────────────────────────────


@app.command()
def files(
    diff_range: Optional[str] = typer.Argument(None, metavar="[RANGE]", help="Revision range"),
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Remote repo as host:path"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .greatreview.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """List changed files with their status and line counts."""
    from greatreview.output import terminal

    cfg = _load_config(config, verbose)
    changed = _load_files(diff_range, remote, cfg)
    if not changed:
        console.print("[dim]No changes.[/dim]")
        raise typer.Exit(code=0)
    terminal.render_file_list(changed)


# ── info ──────────────────────────────────────────────────────────────────────


@app.command()
def info(
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Remote repo as host:path"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .greatreview.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show repository name, branch and root path."""
    from greatreview.git.source import load_repo_info
    from greatreview.output import json_report, terminal

    cfg = _load_config(config, verbose)
    _check_format(format, cfg)
    try:
        repo = load_repo_info(remote, cfg)
    except GitError as exc:
        raise _fail("Git error", exc) from exc

    if cfg.output.format == "json":
        print(json_report.render_repo_info(repo))
    else:
        terminal.render_repo_info(repo)


# ── prompt ────────────────────────────────────────────────────────────────────


@app.command()
def prompt(
    annotations: Path = typer.Argument(..., help="YAML/JSON file with hunk annotations"),
    diff_range: Optional[str] = typer.Argument(None, metavar="[RANGE]", help="Revision range"),
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Remote repo as host:path"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write prompt to file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .greatreview.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Build a feedback prompt from review annotations on the diff."""
    from greatreview.review import AnnotationError, generate_prompt, load_annotations, review_progress

    cfg = _load_config(config, verbose)
    try:
        reviews = load_annotations(annotations)
    except AnnotationError as exc:
        raise _fail("Annotation error", exc) from exc

    changed = _load_files(diff_range, remote, cfg)
    progress = review_progress(changed, reviews)
    if verbose:
        console.print(
            f"[dim]Reviewed {progress.reviewed}/{progress.total} hunks "
            f"({progress.approved} approved, {progress.commented} commented, "
            f"{progress.rejected} rejected)[/dim]"
        )

    text = generate_prompt(changed, reviews)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .greatreview.toml in the repo root (or current directory)."""
    from greatreview.config.defaults import DEFAULT_TOML
    from greatreview.config.loader import CONFIG_FILENAME

    config_path = _config_dir() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {escape(str(config_path))}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {escape(str(config_path))}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"great-review {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """great-review — structured, reviewable views of git diffs."""
    setup_logging(console=console)

"""Rich terminal reporter — file headers, hunk headers, coloured lines."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from greatreview.git.models import DiffFile, DiffHunk, FileStatus, LineType, RepoInfo

_STATUS_STYLE = {
    FileStatus.ADDED: "bold black on green",
    FileStatus.MODIFIED: "bold black on yellow",
    FileStatus.DELETED: "bold white on red",
    FileStatus.RENAMED: "bold black on bright_cyan",
}

_LINE_STYLE = {
    LineType.ADDITION: "green",
    LineType.DELETION: "red",
    LineType.CONTEXT: "",
}

_LINE_MARKER = {
    LineType.ADDITION: "+",
    LineType.DELETION: "-",
    LineType.CONTEXT: " ",
}


def _status_pill(status: FileStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLE[status])


def _file_title(diff_file: DiffFile) -> Text:
    title = Text.assemble(_status_pill(diff_file.status), " ")
    if diff_file.old_path is not None:
        title.append(diff_file.old_path, style="magenta")
        title.append(" → ")
    title.append(diff_file.path, style="bold magenta")
    title.append(f"  +{diff_file.additions} -{diff_file.deletions}", style="dim")
    return title


def _hunk_table(hunk: DiffHunk, show_line_numbers: bool) -> Table:
    table = Table.grid(padding=(0, 1))
    if show_line_numbers:
        table.add_column(justify="right", style="dim")
        table.add_column(justify="right", style="dim")
    table.add_column(no_wrap=True)

    for line in hunk.lines:
        body = Text(f"{_LINE_MARKER[line.line_type]}{line.content}", style=_LINE_STYLE[line.line_type])
        if show_line_numbers:
            old = "" if line.old_line_no is None else str(line.old_line_no)
            new = "" if line.new_line_no is None else str(line.new_line_no)
            table.add_row(old, new, body)
        else:
            table.add_row(body)
    return table


def render(
    files: List[DiffFile],
    *,
    console: Optional[Console] = None,
    show_line_numbers: bool = True,
    show_summary: bool = True,
) -> None:
    """Print the parsed diff using Rich."""
    console = console or Console()

    if not files:
        console.print("[dim]No changes.[/dim]")
        return

    for diff_file in files:
        console.print()
        console.print(_file_title(diff_file))
        if not diff_file.has_hunks:
            console.print("[dim]  (no textual changes: binary, mode-only or pure rename)[/dim]")
            continue
        for hunk in diff_file.hunks:
            console.print(Text(hunk.header, style="cyan"))
            console.print(_hunk_table(hunk, show_line_numbers))

    if show_summary:
        _print_summary(console, files)


def render_file_list(files: List[DiffFile], *, console: Optional[Console] = None) -> None:
    """One row per file: status, path, additions, deletions, hunk count."""
    console = console or Console()
    table = Table(title="Changed files", title_style="bold", border_style="dim")
    table.add_column("Status", justify="center", width=12)
    table.add_column("File", style="magenta")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Hunks", justify="right")

    for diff_file in files:
        path = diff_file.path
        if diff_file.old_path is not None:
            path = f"{diff_file.old_path} → {diff_file.path}"
        table.add_row(
            _status_pill(diff_file.status),
            Text(path),
            str(diff_file.additions),
            str(diff_file.deletions),
            str(len(diff_file.hunks)),
        )
    console.print(table)


def render_repo_info(info: RepoInfo, *, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(f"[bold]{escape(info.name)}[/bold] [dim]on[/dim] [cyan]{escape(info.branch)}[/cyan]")
    console.print(f"[dim]{escape(info.path)}[/dim]")


def _print_summary(console: Console, files: List[DiffFile]) -> None:
    console.print()
    console.print(f"[dim]Files changed:[/dim] {len(files)}")
    console.print(f"[dim]Hunks:[/dim]         {sum(len(f.hunks) for f in files)}")
    console.print(f"[dim]Additions:[/dim]     [green]{sum(f.additions for f in files)}[/green]")
    console.print(f"[dim]Deletions:[/dim]     [red]{sum(f.deletions for f in files)}[/red]")

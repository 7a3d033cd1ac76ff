"""Command-line interface for the copypasta snippet manager.

This module is a thin consumer of ``SnippetStore``: each snippet command
calls one store or query operation on the user's store and renders the
result with Rich. Every command respects the ``--quiet``, ``--no-color``, and
``--format`` global options.

Key design choices
------------------
* **Id prefix resolution** – Any command that accepts a snippet id also
  accepts a unique prefix, resolved via ``_resolve_id``.
* **Duplicate warning** – ``add`` and ``edit`` run the duplicate detector
  first and ask before committing unless ``--force`` is given.
* **Structured output** – Every listing supports ``--format json`` and
  ``--format csv`` in addition to the default Rich table output.
"""

from __future__ import annotations

import csv
import json
import logging
import sys

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .config import (
    CopyPastaConfig,
    config_path_get,
    load_config,
    remove_config_key,
    update_config,
)
from .errors import PersistenceError, SnippetImportError
from .models import Snippet, tags_parse
from .query import snippets_favorites, snippets_search, snippets_with_all_tags
from .similarity import snippet_find_duplicates
from .store import SnippetStore

logger = logging.getLogger(__name__)

# --- Rich Consoles ---

console = Console()
err_console = Console(stderr=True)

# --- Typer apps ---

app = typer.Typer(
    help="A personal manager for titled, tagged code snippets.",
    add_completion=False,
    rich_markup_mode="rich",
)
config_app = typer.Typer(help="Manage user configuration.", rich_markup_mode="rich")
app.add_typer(config_app, name="config")


# --- State ---


class State:
    """Shared state for all commands.

    The snippet store is opened on first use, so commands that never touch
    snippets (``config ...``) do not create the data file.
    """

    config: CopyPastaConfig
    quiet: bool = False
    no_color: bool = False
    format: str = "table"
    _store: SnippetStore | None = None

    @property
    def store(self) -> SnippetStore:
        if self._store is None:
            self._store = SnippetStore.open()
        return self._store


state = State()


def _echo(message: object, **kwargs: object) -> None:
    """Print a message unless ``--quiet`` is set."""
    if not state.quiet:
        console.print(message, **kwargs)


def _csv_value(value: object) -> object:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return value


def _echo_format(data: object) -> None:
    """Print data in the requested format (JSON/CSV) unless ``--quiet``."""
    if state.quiet:
        return
    if state.format == "csv":
        rows = data if isinstance(data, list) else [data]
        if rows and isinstance(rows[0], dict):
            writer = csv.DictWriter(sys.stdout, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            for row in rows:
                writer.writerow({k: _csv_value(v) for k, v in row.items()})
        else:
            console.print(json.dumps(data, indent=2))
    else:
        # JSON is the default structured format
        console.print_json(json.dumps(data, indent=2))


def _structured() -> bool:
    return state.format in ("json", "csv")


def _snippet_dict(snippet: Snippet, score: float | None = None) -> dict:
    data = {
        "id": snippet.id,
        "title": snippet.title,
        "language": snippet.language,
        "tags": list(snippet.tags),
        "is_favorite": snippet.is_favorite,
        "updated_at": snippet.updated_at.isoformat(),
    }
    if score is not None:
        data["score"] = round(score, 4)
    return data


def _snippets_table(title: str, snippets: list[Snippet]) -> Table:
    table = Table(title=title, title_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Id", style="bold")
    table.add_column("Title")
    table.add_column("Language", style="magenta")
    table.add_column("Tags", style="cyan")
    table.add_column("★", justify="center")
    for i, snippet in enumerate(snippets, 1):
        table.add_row(
            str(i),
            snippet.id[:8],
            snippet.title,
            snippet.language,
            ", ".join(snippet.tags),
            "[yellow]★[/yellow]" if snippet.is_favorite else "",
        )
    return table


def _duplicates_table(matches: list[tuple[Snippet, float]]) -> Table:
    table = Table(title="Potential Duplicates", title_style="bold yellow")
    table.add_column("Id", style="bold")
    table.add_column("Title")
    table.add_column("Similarity", justify="right")
    for snippet, score in matches:
        table.add_row(snippet.id[:8], snippet.title, f"{score:.0%}")
    return table


def _resolve_id(prefix: str) -> str | None:
    """Resolve a snippet id prefix to a full id.

    If *prefix* matches exactly one snippet, return its full id.
    If it matches zero or more than one, print an error and return ``None``.
    """
    if state.store.get_by_id(prefix):
        return prefix

    candidates = [s.id for s in state.store.get_all() if s.id.startswith(prefix)]
    if len(candidates) == 0:
        err_console.print(f"[red]Error:[/red] No snippet found matching '{prefix}'.")
        return None
    if len(candidates) > 1:
        err_console.print(
            f"[red]Error:[/red] Ambiguous prefix '{prefix}' matches {len(candidates)} snippets."
        )
        return None
    return candidates[0]


def _find_duplicates(candidate: Snippet) -> list[tuple[Snippet, float]]:
    return state.store.find_duplicates(
        candidate,
        threshold=float(state.config.duplicate_threshold),
        title_weight=float(state.config.title_weight),
        code_weight=float(state.config.code_weight),
    )


def _confirm_duplicates(candidate: Snippet, force: bool) -> None:
    """Show potential duplicates of *candidate* and ask before continuing."""
    if force:
        return
    matches = _find_duplicates(candidate)
    if not matches:
        return
    err_console.print(_duplicates_table(matches))
    typer.confirm(
        f"Found {len(matches)} similar snippet(s). Save anyway?", abort=True
    )


def _save_failed(e: PersistenceError) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] Could not save snippets: {e}")
    return typer.Exit(code=1)


@app.callback()
def app_callback(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress informational output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Increase output verbosity."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    format_opt: str | None = typer.Option(None, "--format", help="Output format: table, json, csv. Overrides config."),
) -> None:
    """Set up logging and shared state."""
    global console, err_console

    state.quiet = quiet
    state.no_color = no_color

    if no_color:
        console = Console(no_color=True, highlight=False)
        err_console = Console(stderr=True, no_color=True, highlight=False)

    log_level = logging.INFO
    if quiet:
        log_level = logging.WARNING
    elif verbose:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level, stream=sys.stderr)

    state.config = load_config()
    state.format = format_opt or state.config.get("format", "table")


# --- Snippet commands ---


@app.command()
def add(
    title: str = typer.Argument(help="The title of the snippet."),
    code: str | None = typer.Argument(None, help="The code of the snippet."),
    file: typer.FileText | None = typer.Option(None, "--file", help="Read the code from a file. Use '-' for stdin."),
    language: str | None = typer.Option(None, "--language", "-l", help="Language label. Defaults to the configured default_language."),
    tags: str = typer.Option("", "--tags", "-t", help="Comma-separated tags."),
    favorite: bool = typer.Option(False, "--favorite", help="Mark the snippet as a favorite."),
    force: bool = typer.Option(False, "--force", help="Save even if similar snippets exist."),
) -> None:
    """Add a new snippet."""
    if code is None and file is not None:
        code = file.read()
    if not title.strip() or not code or not code.strip():
        err_console.print("[red]Error:[/red] A snippet needs a title and some code.")
        raise typer.Exit(code=1)

    candidate = Snippet(
        title=title.strip(),
        language=language or state.config.default_language,
        tags=tags_parse(tags),
        code=code,
        is_favorite=favorite,
    )
    _confirm_duplicates(candidate, force)

    try:
        snippet = state.store.add(candidate)
    except PersistenceError as e:
        raise _save_failed(e)

    if _structured():
        _echo_format(_snippet_dict(snippet))
    else:
        _echo(f"[green]✓[/green] Added [bold]{snippet.title}[/bold] ({snippet.id[:8]})")


@app.command("list")
def list_cmd(
    search: str | None = typer.Option(None, "--search", "-s", help="Text to look for in titles, code and tags."),
    tag: list[str] | None = typer.Option(None, "--tag", "-t", help="Only snippets with this tag (repeatable)."),
    match_all: bool = typer.Option(False, "--match-all", help="Require every --tag instead of any."),
    favorites: bool = typer.Option(False, "--favorites", "-f", help="Only favorite snippets."),
) -> None:
    """List snippets, optionally filtered."""
    if match_all:
        snippets = snippets_with_all_tags(snippets_search(state.store.get_all(), search), tag)
        snippets = snippets_favorites(snippets, favorites)
    else:
        snippets = state.store.filter(search, tag, favorites)

    if _structured():
        _echo_format([_snippet_dict(s) for s in snippets])
        return
    if not snippets:
        _echo("[yellow]No snippets found.[/yellow]")
        return
    _echo(_snippets_table("Snippets", snippets))


@app.command()
def show(
    snippet_id: str = typer.Argument(help="The id (or prefix) of the snippet."),
) -> None:
    """Show a snippet with its code."""
    resolved = _resolve_id(snippet_id)
    if not resolved:
        raise typer.Exit(code=1)
    snippet = state.store.get_by_id(resolved)

    if _structured():
        data = _snippet_dict(snippet)
        data["code"] = snippet.code
        data["created_at"] = snippet.created_at.isoformat()
        _echo_format(data)
        return

    syntax = Syntax(snippet.code, snippet.language or "text", theme="monokai", word_wrap=True)
    subtitle = snippet.id[:8]
    if snippet.tags:
        subtitle += " · " + ", ".join(snippet.tags)
    _echo(Panel(syntax, title=f"[bold]{snippet.title}[/bold]", subtitle=subtitle, border_style="cyan"))


@app.command()
def edit(
    snippet_id: str = typer.Argument(help="The id (or prefix) of the snippet."),
    title: str | None = typer.Option(None, "--title", help="New title."),
    language: str | None = typer.Option(None, "--language", "-l", help="New language label."),
    tags: str | None = typer.Option(None, "--tags", "-t", help="New comma-separated tags (replaces the old ones)."),
    code: str | None = typer.Option(None, "--code", help="New code."),
    file: typer.FileText | None = typer.Option(None, "--file", help="Read the new code from a file."),
    force: bool = typer.Option(False, "--force", help="Save even if similar snippets exist."),
) -> None:
    """Edit a snippet's fields."""
    resolved = _resolve_id(snippet_id)
    if not resolved:
        raise typer.Exit(code=1)
    snippet = state.store.get_by_id(resolved)

    if code is None and file is not None:
        code = file.read()
    if title is not None:
        snippet.title = title.strip()
    if language is not None:
        snippet.language = language
    if tags is not None:
        snippet.tags = tags_parse(tags)
    if code is not None:
        snippet.code = code
    if not snippet.has_content():
        err_console.print("[red]Error:[/red] A snippet needs a title and some code.")
        raise typer.Exit(code=1)

    _confirm_duplicates(snippet, force)
    try:
        updated = state.store.update(snippet)
    except PersistenceError as e:
        raise _save_failed(e)

    if _structured():
        _echo_format(_snippet_dict(updated))
    else:
        _echo(f"[green]✓[/green] Updated [bold]{updated.title}[/bold] ({updated.id[:8]})")


@app.command()
def fav(
    snippet_id: str = typer.Argument(help="The id (or prefix) of the snippet."),
) -> None:
    """Toggle a snippet's favorite flag."""
    resolved = _resolve_id(snippet_id)
    if not resolved:
        raise typer.Exit(code=1)
    snippet = state.store.get_by_id(resolved)
    snippet.is_favorite = not snippet.is_favorite
    try:
        updated = state.store.update(snippet)
    except PersistenceError as e:
        raise _save_failed(e)

    if _structured():
        _echo_format(_snippet_dict(updated))
    elif updated.is_favorite:
        _echo(f"[yellow]★[/yellow] [bold]{updated.title}[/bold] is now a favorite")
    else:
        _echo(f"[bold]{updated.title}[/bold] is no longer a favorite")


@app.command()
def rm(
    snippet_id: str = typer.Argument(help="The id (or prefix) of the snippet to remove."),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompts."),
) -> None:
    """Remove a snippet by its id (or prefix)."""
    resolved = _resolve_id(snippet_id)
    if not resolved:
        raise typer.Exit(code=1)
    if not force:
        title = state.store.get_by_id(resolved).title
        typer.confirm(f"Are you sure you want to delete '{title}'?", abort=True)
    try:
        state.store.delete(resolved)
    except PersistenceError as e:
        raise _save_failed(e)


@app.command()
def tags() -> None:
    """List every tag with the number of snippets using it."""
    counts = state.store.stats()["tags"]
    names = state.store.all_tags()
    if _structured():
        _echo_format([{"tag": name, "count": counts.get(name, 0)} for name in names])
        return
    table = Table(title="Tags", title_style="bold cyan")
    table.add_column("Tag", style="bold")
    table.add_column("Snippets", justify="right")
    for name in names:
        table.add_row(name, str(counts.get(name, 0)))
    _echo(table)


@app.command()
def dupes(
    snippet_id: str | None = typer.Argument(None, help="Only check this snippet (id or prefix)."),
) -> None:
    """Find potential duplicates, for one snippet or across the whole library."""
    threshold = float(state.config.duplicate_threshold)
    title_weight = float(state.config.title_weight)
    code_weight = float(state.config.code_weight)

    if snippet_id:
        resolved = _resolve_id(snippet_id)
        if not resolved:
            raise typer.Exit(code=1)
        snippet = state.store.get_by_id(resolved)
        matches = _find_duplicates(snippet)
        if _structured():
            _echo_format([_snippet_dict(s, score) for s, score in matches])
        elif matches:
            _echo(_duplicates_table(matches))
        else:
            _echo("[green]No potential duplicates found.[/green]")
        return

    snippets = state.store.get_all()
    pairs = []
    for i, snippet in enumerate(snippets):
        for other, score in snippet_find_duplicates(
            snippet, snippets[i + 1:], threshold, title_weight, code_weight
        ):
            pairs.append((snippet, other, score))
    pairs.sort(key=lambda pair: pair[2], reverse=True)

    if _structured():
        _echo_format(
            [
                {"first": a.id, "first_title": a.title, "second": b.id, "second_title": b.title, "score": round(score, 4)}
                for a, b, score in pairs
            ]
        )
        return
    if not pairs:
        _echo("[green]No potential duplicates found.[/green]")
        return
    table = Table(title="Potential Duplicates", title_style="bold yellow")
    table.add_column("First")
    table.add_column("Second")
    table.add_column("Similarity", justify="right")
    for a, b, score in pairs:
        table.add_row(f"{a.title} ({a.id[:8]})", f"{b.title} ({b.id[:8]})", f"{score:.0%}")
    _echo(table)


@app.command()
def stats() -> None:
    """Show library statistics."""
    result = state.store.stats()
    if _structured():
        _echo_format(result)
        return

    table = Table(title="Library Statistics", show_header=False, title_style="bold cyan")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Number of snippets", str(result["num_snippets"]))
    table.add_row("Favorites", str(result["num_favorites"]))
    table.add_row("Distinct tags", str(result["num_tags"]))
    table.add_row("Avg snippet size", f"{result['avg_snippet_size']:.2f} chars")
    for language, count in result["languages"].items():
        table.add_row(f"Language: {language}", str(count))
    _echo(table)


@app.command("export")
def export_cmd(
    path: str = typer.Argument(help="The JSON file to export snippets to."),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompts."),
) -> None:
    """Export all snippets to a JSON document."""
    if not force:
        typer.confirm(f"Are you sure you want to export all snippets to '{path}'?", abort=True)
    try:
        count = state.store.export_to(path)
    except PersistenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if _structured():
        _echo_format({"num_exported": count, "path": path})
    else:
        _echo(f"[green]✓[/green] Exported {count} snippets to [bold]{path}[/bold]")


@app.command("import")
def import_cmd(
    path: str = typer.Argument(help="The JSON document to import."),
    replace: bool = typer.Option(False, "--replace", help="Delete all existing snippets first."),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompts."),
) -> None:
    """Import snippets from a JSON document, merging by default."""
    mode = "replace" if replace else "merge"
    if replace and not force:
        typer.confirm(
            "Replacing will delete every existing snippet. Continue?", abort=True
        )
    try:
        count = state.store.import_from(path, mode=mode)
    except SnippetImportError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    except PersistenceError as e:
        raise _save_failed(e)

    if _structured():
        _echo_format({"num_imported": count, "mode": mode})
    else:
        _echo(f"[green]✓[/green] Imported {count} snippets ({mode})")


@app.command()
def reset(
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompts."),
) -> None:
    """Delete every snippet and restore the sample library."""
    if not force:
        typer.confirm(
            "Are you sure you want to replace all snippets with the samples?", abort=True
        )
    try:
        snippets = state.store.reset()
    except PersistenceError as e:
        raise _save_failed(e)
    _echo(f"[green]✓[/green] Restored {len(snippets)} sample snippets")


# --- Config sub-commands ---


@config_app.command("path")
def config_path_cmd() -> None:
    """Show the path to the config file."""
    console.print(config_path_get())


@config_app.command("list")
def config_list_cmd() -> None:
    """List current settings."""
    full_config = load_config()
    if _structured():
        _echo_format(dict(full_config.items()))
    else:
        table = Table(title="Configuration", title_style="bold cyan")
        table.add_column("Key", style="bold")
        table.add_column("Value", justify="right")
        for key, value in full_config.items():
            table.add_row(key, str(value))
        _echo(table)


@config_app.command("get")
def config_get_cmd(
    key: str = typer.Argument(help="The configuration key to get."),
) -> None:
    """Get a configuration value."""
    value = load_config().get(key)
    if _structured():
        _echo_format({key: value})
    else:
        _echo(str(value))


@config_app.command("set")
def config_set_cmd(
    key: str = typer.Argument(help="The configuration key to set."),
    value: str = typer.Argument(help="The value to set."),
) -> None:
    """Set a configuration value."""
    if key not in state.config:
        err_console.print(f"[red]Error:[/red] Invalid configuration key: '{key}'")
        raise typer.Exit(code=1)
    try:
        new_config = update_config(key, value)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    _echo(f"[green]✓[/green] Set [bold]{key}[/bold] to {new_config[key]}")
    state.config.update(new_config)


@config_app.command("unset")
def config_unset_cmd(
    key: str = typer.Argument(help="The configuration key to unset."),
) -> None:
    """Unset a configuration value."""
    new_config = remove_config_key(key)
    _echo(f"[green]✓[/green] Unset [bold]{key}[/bold], returning to default.")
    state.config.clear()
    state.config.update(new_config)


def main() -> None:
    """Entry point for the copypasta command line interface."""
    app()


if __name__ == "__main__":
    main()

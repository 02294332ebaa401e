from __future__ import annotations

from typing import NoReturn

import typer
from rich import print
from rich.markup import escape

from ..config import OwnershipConfig, configure_logging
from ..errors import OwnershipError
from ..presentation import render_tree
from ..session import OwnershipSession


app = typer.Typer(add_completion=False, pretty_exceptions_show_locals=False)


def _session(root: str, log_level: str) -> OwnershipSession:
    try:
        cfg = OwnershipConfig(root=root, log_level=log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    configure_logging(cfg.log_level)
    return OwnershipSession(cfg)


def _fail(exc: OwnershipError) -> NoReturn:
    print(f"[bold red]error[/bold red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.command()
def owners(
    root: str = typer.Option(".", help="Repository root"),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """List every owner named in the CODEOWNERS file."""
    session = _session(root, log_level)
    try:
        names = session.owners()
    except OwnershipError as exc:
        _fail(exc)
    if not names:
        typer.echo("No code owners found.")
        return
    for name in names:
        typer.echo(name)


@app.command()
def patterns(
    owner: str = typer.Option(..., help="Owner, e.g. @org/team"),
    include: bool = typer.Option(
        False, "--include", help="Print a compact comma-separated include expression"
    ),
    root: str = typer.Option(".", help="Repository root"),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """Print the patterns an owner is responsible for."""
    session = _session(root, log_level)
    try:
        if include:
            typer.echo(session.include_pattern(owner))
            return
        owned = session.owner_index().patterns_for(owner)
    except OwnershipError as exc:
        _fail(exc)
    for pattern in owned:
        typer.echo(pattern)


@app.command()
def tree(
    owner: str = typer.Option(..., help="Owner, e.g. @org/team"),
    root: str = typer.Option(".", help="Repository root"),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """Show the files an owner ends up owning as a tree."""
    session = _session(root, log_level)
    try:
        snapshot = session.refresh(owner)
    except OwnershipError as exc:
        _fail(exc)
    if not snapshot.nodes:
        typer.echo(f"No paths owned by {owner}.")
        return
    print(render_tree(snapshot.nodes, title=f"[bold]Codeowner:[/bold] {escape(owner)}"))


@app.command()
def who(
    path: str = typer.Argument(..., help="Repository-relative path"),
    root: str = typer.Option(".", help="Repository root"),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """Print the owner of the most specific rule naming PATH."""
    session = _session(root, log_level)
    try:
        owner = session.most_specific_owner(path)
    except OwnershipError as exc:
        _fail(exc)
    typer.echo(owner or "(none)")


def main() -> None:
    app()

"""Commands: tree, hash, copy."""

from __future__ import annotations

import click

from .. import _paths
from .._types import WritingOptions
from ..access import LOCAL
from ..exceptions import FileNodeError
from ._helpers import _as_directory_path, _short_hash, _snapshot, _status, main


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("-l", "--long", "long_", is_flag=True,
              help="Show object hashes and file sizes.")
@click.option("--full-hash", "full_hash", is_flag=True, default=False,
              help="Show full 40-character object hashes (default: 7-char short hash).")
@click.pass_context
def tree(ctx, path, long_, full_hash):
    """List every entry of the tree at PATH, directories first per level."""
    node = _snapshot(ctx, path)

    def _line(rel, entry):
        if not long_:
            return rel
        size = "-" if entry.is_directory else str(len(entry.payload))
        return f"{_short_hash(entry.oid, full_hash)}  {size:>10}  {rel}"

    if node.is_leaf:
        click.echo(_line(node.resolved_name(), node))
        return
    for dirpath, dirnames, files in node.walk():
        parent = node
        if dirpath:
            for seg in dirpath.split("/"):
                parent = parent.children[seg]
        for name in dirnames:
            rel = f"{dirpath}/{name}" if dirpath else name
            click.echo(_line(rel + "/", parent.children[name]))
        for name, entry in files:
            rel = f"{dirpath}/{name}" if dirpath else name
            click.echo(_line(rel, entry))


@main.command("hash")
@click.argument("path", type=click.Path(exists=True))
@click.option("--full-hash", "full_hash", is_flag=True, default=False,
              help="Show the full 40-character object hash.")
@click.pass_context
def hash_(ctx, path, full_hash):
    """Print the git object hash of the tree or file at PATH."""
    node = _snapshot(ctx, path)
    click.echo(_short_hash(node.oid, full_hash))


@main.command()
@click.argument("src", type=click.Path(exists=True))
@click.argument("dest", type=click.Path())
@click.option("--atomic", is_flag=True, default=False, envvar="FILENODE_ATOMIC",
              help="Write each file to a temporary name, then rename it (or set FILENODE_ATOMIC).")
@click.option("-f", "--force", is_flag=True, help="Replace DEST if it exists.")
@click.pass_context
def copy(ctx, src, dest, atomic, force):
    """Snapshot SRC and write it to DEST."""
    node = _snapshot(ctx, src)
    if node.is_directory:
        dest = _as_directory_path(dest)
    if LOCAL.exists(dest):
        if not force:
            raise click.ClickException(
                f"Destination exists: {dest} (use --force to replace)"
            )
        _status(ctx, f"Removing {dest}")
        try:
            LOCAL.remove_recursive(dest)
        except FileNodeError as exc:
            raise click.ClickException(str(exc))

    options = WritingOptions.ATOMIC if atomic else WritingOptions(0)
    _status(ctx, f"Writing {_paths.base_name(src)} to {dest}")
    try:
        node.write(dest, options)
    except FileNodeError as exc:
        raise click.ClickException(str(exc))

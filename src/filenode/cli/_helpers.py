"""Shared helpers and the main CLI group."""

from __future__ import annotations

import logging

import click

from .. import _paths
from ..exceptions import FileNodeError
from ..node import FileNode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _as_directory_path(path: str) -> str:
    """Mark *path* as a directory path (trailing '/')."""
    return path if _paths.is_directory_path(path) else path + "/"


def _snapshot(ctx, path: str) -> FileNode:
    """Read the tree at *path*, turning library errors into click errors."""
    _status(ctx, f"Reading {path}")
    try:
        return FileNode.from_filesystem(path)
    except FileNodeError as exc:
        raise click.ClickException(str(exc))


def _short_hash(oid: str, full: bool) -> str:
    return oid if full else oid[:7]


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """filenode: snapshot, inspect and copy file trees.

    \b
    Quick start:
      filenode tree ./src
      filenode hash ./src
      filenode copy ./src ./backup
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

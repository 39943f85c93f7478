"""Console-script entry: report a missing click instead of a traceback."""

import sys


def main():
    try:
        import click  # noqa: F401
    except ImportError:
        print(
            "Error: the filenode commands need click (the 'cli' extra).\n"
            "Install it with:  pip install 'filenode[cli]'",
            file=sys.stderr,
        )
        raise SystemExit(1)
    from .cli import main as cli_main
    cli_main(prog_name="filenode")

"""Read command - print a JSON document."""

from __future__ import annotations

import sys

import click

from flowstate.atomic_io import read_json
from flowstate.commands._helpers import echo_json
from flowstate.errors import DocumentError
from flowstate.utils import log_error


@click.command("read")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--key", default=None, help="Print only this top-level key")
def read(path: str, key: str | None) -> None:
    """Print the document at PATH."""
    try:
        data = read_json(path)
    except DocumentError as exc:
        log_error(str(exc))
        sys.exit(1)

    if key is not None:
        if not isinstance(data, dict) or key not in data:
            log_error(f"Key not found: {key}")
            sys.exit(1)
        data = data[key]
    echo_json(data)

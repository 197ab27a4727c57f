## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
from pathlib import Path

from .errors import IoFailure
from .parser import split_lines


def resolve_script_path(filename: str) -> Path:
    """Relative script names are looked up from the current working directory."""
    return Path.cwd() / Path(filename).expanduser()


def read_lines(filename: str) -> list[str]:
    path = resolve_script_path(filename)
    try:
        # No newline translation, a lone `\r` stays part of its line.
        with path.open('r', encoding='utf-8', newline='') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise IoFailure(f"Cannot read script `{filename}`: {exc}", filename=filename) from exc
    return split_lines(source)


def read_stdin_lines(stream=None) -> list[str]:
    stream = stream or sys.stdin.buffer
    try:
        source = stream.read().decode('utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise IoFailure(f"Cannot read script from standard input: {exc}", filename='<STDIN>') from exc
    return split_lines(source)

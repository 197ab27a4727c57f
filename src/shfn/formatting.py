## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import shlex
from typing import Sequence

from .types import Assignment, Execution, Statement


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_statement(statement: Statement) -> str:
    match statement:
        case Assignment(variable, value):
            return f"{variable}={value}"
        case Execution(tokens):
            return ' '.join(tokens)
    raise NotImplementedError(f"Unknown statement type {type(statement).__name__}.")

def format_command(executable: str, args: Sequence[str]) -> str:
    # Empty arguments from undefined variables stay visible as ''.
    return shlex.join([executable, *args])

def format_environment(env: dict[str, str]) -> str:
    if not env: return '∅'
    return ' '.join(f"{k}={shlex.quote(v)}" for k, v in env.items())

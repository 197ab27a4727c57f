## shfn — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
import subprocess
from typing import Callable, Sequence
from dataclasses import dataclass

from .formatting import format_command


@dataclass(frozen=True)
class SpawnResult:
    executable: str
    args: tuple[str, ...]
    returncode: int | None = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0


# Given an executable name and its arguments, run to completion and report back.
Spawner = Callable[[str, Sequence[str]], SpawnResult]


def spawn_process(executable: str, args: Sequence[str]) -> SpawnResult:
    """Run the command synchronously without a shell, sharing the interpreter's stdio."""
    args = tuple(args)
    sys.stdout.flush(); sys.stderr.flush()
    try:
        completed = subprocess.run([executable, *args])
    except (OSError, ValueError) as exc:
        return SpawnResult(executable, args, returncode=None, error=str(exc))
    return SpawnResult(executable, args, returncode=completed.returncode)


def dry_run(executable: str, args: Sequence[str]) -> SpawnResult:
    print(format_command(executable, args))
    return SpawnResult(executable, tuple(args))

## shfn — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable

from .types import Program, Environment
from .errors import NoEntryFunction
from .parser import parse
from .loader import read_lines
from .process import Spawner, spawn_process
from .interpreter import Reporter, report_failure, run, ENTRY_FUNCTION


class Runtime:
    """Minimal runtime facade focused on embedding, with the process boundary injected."""

    def __init__(self, spawn: Spawner | None = None, report: Reporter | None = None):
        self.spawn = spawn or spawn_process
        self.report = report or report_failure

    # Parsing ─────────────────────────────────────────────────────────────────────────────────
    def parse(self, source: str | Iterable[str], filename: str | None = None) -> Program:
        return parse(source, filename=filename)

    def load_file(self, filename: str) -> Program:
        return parse(read_lines(filename), filename=filename)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def execute(self, program: Program, filename: str | None = None, entry: str = ENTRY_FUNCTION,
                verbosity: int = 0, stats: dict | None = None) -> Environment:
        try:
            return run(program, spawn=self.spawn, report=self.report, entry=entry, verbosity=verbosity, stats=stats)
        except NoEntryFunction as exc:
            exc.filename = filename
            raise

    def run(self, source: str | Iterable[str], filename: str | None = None,
            verbosity: int = 0, stats: dict | None = None) -> Environment:
        program = self.parse(source, filename=filename)
        return self.execute(program, filename=filename, verbosity=verbosity, stats=stats)

    def run_file(self, filename: str, verbosity: int = 0, stats: dict | None = None) -> Environment:
        program = self.load_file(filename)
        return self.execute(program, filename=filename, verbosity=verbosity, stats=stats)

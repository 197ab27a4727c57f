## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# shfn — A minimal interpreter for line-oriented shell function scripts.
#

import sys
import time
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import ShfnError, ShfnParseError, NoEntryFunction, IoFailure
from .parser import format_parse_error_context
from .formatting import write_without_ansi
from .interpreter import report_failure
from .process import SpawnResult, spawn_process, dry_run
from .loader import read_lines, read_stdin_lines
from .runtime import Runtime


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    plain: bool
    dry_run: bool
    strict: bool
    stats: bool


class ShfnRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.strict = config.strict
        self.stats_enabled = config.stats

        if config.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(spawn=dry_run if config.dry_run else spawn_process, report=self._report)
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.failed_commands = 0

    def _report(self, result: SpawnResult) -> None:
        self.failed_commands += 1
        report_failure(result)

    def _fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '') -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True

    def _handle_exception(self, exc: ShfnError, filename: str, lines: list[str] | None) -> None:
        if isinstance(exc, ShfnParseError):
            context = format_parse_error_context(filename, exc.line, exc.token, source=lines or [])
            context += f"\n\033[90m{exc}\033[0m\n"
            self._fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context)
        elif isinstance(exc, NoEntryFunction):
            detail = f"Function `\033[1;97m{exc.entry}\033[0m` from `\033[97m{filename}\033[0m` was not found in program!"
            self._fatal_error("ENTRY ERROR.", detail, type(exc).__name__)
        elif isinstance(exc, IoFailure):
            cause = exc.__cause__ if exc.__cause__ is not None else exc
            self._fatal_error("IO ERROR.", f"Reading `\033[97m{filename}\033[0m` failed!", type(cause).__name__, f"\033[90m{cause}\033[0m\n")
        else:
            self._fatal_error("ERROR.", str(exc), type(exc).__name__)

    def _read_script(self, filename: str) -> list[str]:
        if filename == '-':
            return read_stdin_lines()
        return read_lines(filename)

    def execute_script(self, filename: str, check_only: bool = False) -> None:
        display_name = '<STDIN>' if filename == '-' else filename
        lines = None
        try:
            lines = self._read_script(filename)
            program = self.runtime.parse(lines, filename=display_name)
            if check_only:
                print(f"\033[97m{display_name}\033[0m: {len(program)} function(s) defined: {', '.join(sorted(program)) or '∅'}")
                return
            self.runtime.execute(program, filename=display_name, verbosity=self.verbose, stats=self.total_stats)
        except ShfnError as exc:
            self._handle_exception(exc, display_name, lines)

    def finalize(self) -> int:
        if self.total_stats is not None and not self.failure:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"failed\t\033[97m{self.failed_commands:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        if self.failure: return 1
        return 1 if self.strict and self.failed_commands > 0 else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace statements as they execute; twice to show command lines.')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--dry-run', '-n', is_flag=True, help='Print each command line instead of running it.')
@click.option('--strict', is_flag=True, help='Exit with failure status if any command failed.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.pass_context
def cli(ctx: click.Context, verbose: int, plain: bool, dry_run: bool, strict: bool, stats: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, plain=plain, dry_run=dry_run, strict=strict, stats=stats)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command('run-file')
@click.argument('script')
@click.pass_context
def run_file(ctx: click.Context, script: str) -> None:
    runner = ShfnRunner(ctx.obj['config'])
    runner.execute_script(script)
    ctx.exit(runner.finalize())


@cli.command('check')
@click.argument('script')
@click.pass_context
def check(ctx: click.Context, script: str) -> None:
    runner = ShfnRunner(ctx.obj['config'])
    runner.execute_script(script, check_only=True)
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--plain', '-p', '--dry-run', '-n', '--strict', '--stats') or t.startswith('-v') or t == '--verbose']
    r = [t for t in a if t not in g]

    if len(r) == 0:
        # No args: read the script from stdin when piped, otherwise show usage.
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else (None, [])
    elif Path(r[0]).exists():
        # An existing script wins over a subcommand of the same name.
        cmd, tail = 'run-file', r
    elif r[0] in ('run-file', 'check', '--help', '-h'):
        cmd, tail = r[0], r[1:]
    elif r[0] == '--check':
        cmd, tail = 'check', r[1:]
    else:
        cmd, tail = 'run-file', r

    if cmd in ('-h', '--help'):
        cmd, tail = '--help', []
    cli.main(args=[*g, *([cmd] if cmd else []), *tail], prog_name='shfn')


if __name__ == "__main__":
    main()

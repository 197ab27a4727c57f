## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
from typing import Callable

from .types import Assignment, Execution, Statement, Program, Environment
from .errors import NoEntryFunction
from .process import SpawnResult, Spawner, spawn_process
from .formatting import format_statement, format_command, format_environment


ENTRY_FUNCTION = 'main'

Reporter = Callable[[SpawnResult], None]


def report_failure(result: SpawnResult, file=None) -> None:
    reason = result.error if result.error is not None else f"exit status {result.returncode}"
    print(f'\033[30;43m COMMAND FAILED. \033[0m `\033[1;97m{format_command(result.executable, result.args)}\033[0m` '
          f'\033[33m({reason})\033[0m', file=file or sys.stderr)


def execute_assignment(env: Environment, assignment: Assignment) -> None:
    # Values are stored verbatim, a leading `$` is only expanded inside commands.
    env[assignment.variable] = assignment.value


def expand(env: Environment, token: str) -> str:
    if token.startswith('$'):
        return env.get(token[1:], '')
    return token


def execute_execution(env: Environment, tokens, spawn: Spawner = spawn_process,
                      report: Reporter = report_failure, verbosity: int = 0) -> SpawnResult | None:
    """Substitute variables in every token, then run the first as executable with the rest as arguments.

    Failures are handed to `report` and never raised, the caller continues with the next statement.
    """
    cmdline = [expand(env, t) for t in tokens]
    if not cmdline:
        return None

    executable, *args = cmdline
    if verbosity > 1:
        print(f"\033[90m    $\033[0m {format_command(executable, args)}")
    result = spawn(executable, args)
    if not result.ok:
        report(result)
    return result


def execute_statement(env: Environment, statement: Statement, spawn: Spawner = spawn_process,
                      report: Reporter = report_failure, verbosity: int = 0) -> SpawnResult | None:
    match statement:
        case Assignment():
            execute_assignment(env, statement)
            return None
        case Execution(tokens):
            return execute_execution(env, tokens, spawn=spawn, report=report, verbosity=verbosity)
    raise NotImplementedError(f"Unknown statement type {type(statement).__name__}.")


def run(program: Program, spawn: Spawner = spawn_process, report: Reporter = report_failure,
        entry: str = ENTRY_FUNCTION, verbosity: int = 0, stats: dict | None = None) -> Environment:
    """Execute the entry function once, top to bottom, in a fresh environment which is returned."""
    if (function := program.get(entry)) is None:
        raise NoEntryFunction(f"no entry function `{entry}` defined", entry=entry)

    env: Environment = {}
    step = 0
    for statement in function:
        if verbosity > 0:
            print(f"\033[90m{step:>3} :\033[0m  {format_statement(statement)}")
        step += 1
        execute_statement(env, statement, spawn=spawn, report=report, verbosity=verbosity)

    if verbosity > 0:
        print(f"\033[90m{step:>3} :\033[0m  \033[36m{format_environment(env)}\033[0m")
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step

    return env

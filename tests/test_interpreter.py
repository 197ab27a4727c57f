## shfn — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from shfn.parser import parse
from shfn.process import SpawnResult
from shfn.types import Assignment, Execution
from shfn.errors import NoEntryFunction
from shfn.interpreter import expand, execute_assignment, execute_execution, execute_statement, run, report_failure


class RecordingSpawner:
    """Stands in for the process boundary, failing for any executable listed in `failing`."""
    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)

    def __call__(self, executable, args):
        self.calls.append((executable, list(args)))
        if executable in self.failing:
            return SpawnResult(executable, tuple(args), returncode=None, error="No such file or directory")
        return SpawnResult(executable, tuple(args))


def run_source(source: str, **kwargs):
    spawner, reports = RecordingSpawner(kwargs.pop('failing', ())), []
    env = run(parse(source), spawn=spawner, report=reports.append, **kwargs)
    return spawner.calls, env, reports


def test_expand_substitutes_known_variable():
    assert expand({"x": "hello"}, "$x") == "hello"

def test_expand_undefined_variable_is_empty():
    assert expand({}, "$missing") == ""

def test_expand_leaves_plain_tokens_unchanged():
    assert expand({"x": "hello"}, "x") == "x"
    assert expand({"x": "hello"}, "a$x") == "a$x"

def test_expand_lone_dollar_looks_up_empty_name():
    assert expand({}, "$") == ""
    assert expand({"": "blank"}, "$") == "blank"

def test_execute_assignment_inserts_and_overwrites():
    env = {}
    execute_assignment(env, Assignment("x", "1"))
    assert env == {"x": "1"}
    execute_assignment(env, Assignment("x", "$y"))
    assert env == {"x": "$y"}

def test_execute_execution_with_empty_tokens_runs_nothing():
    spawner = RecordingSpawner()
    assert execute_execution({}, (), spawn=spawner) is None
    assert spawner.calls == []

def test_execute_statement_dispatches_by_type():
    env, spawner = {}, RecordingSpawner()
    assert execute_statement(env, Assignment("who", "world"), spawn=spawner) is None
    result = execute_statement(env, Execution(("echo", "$who")), spawn=spawner)
    assert result.ok
    assert spawner.calls == [("echo", ["world"])]


def test_run_assignment_then_expansion():
    calls, _, _ = run_source("main(){\nx=hello\necho $x\n}")
    assert calls == [("echo", ["hello"])]

def test_run_undefined_variable_expands_to_empty_argument():
    calls, _, _ = run_source("main(){\necho $missing\n}")
    assert calls == [("echo", [""])]

def test_run_lone_executable_without_arguments():
    calls, _, _ = run_source("main(){\nls\n}")
    assert calls == [("ls", [])]

def test_run_executable_name_can_be_substituted():
    calls, _, _ = run_source("main(){\ntool=printf\n$tool %s done\n}")
    assert calls == [("printf", ["%s", "done"])]

def test_run_assignment_values_are_not_expanded():
    calls, env, _ = run_source("main(){\na=first\nb=$a\necho $b\n}")
    assert env == {"a": "first", "b": "$a"}
    assert calls == [("echo", ["$a"])]

def test_run_assignments_take_effect_in_order():
    calls, env, _ = run_source("main(){\necho $x\nx=1\necho $x\nx=2\necho $x\n}")
    assert calls == [("echo", [""]), ("echo", ["1"]), ("echo", ["2"])]
    assert env == {"x": "2"}

def test_run_only_executes_main():
    calls, _, _ = run_source("helper(){\necho helper\n}\nmain(){\necho main\n}")
    assert calls == [("echo", ["main"])]

def test_run_empty_main_returns_empty_environment():
    calls, env, _ = run_source("main(){\n}")
    assert calls == [] and env == {}

def test_run_uses_fresh_environment_each_time():
    program = parse("main(){\necho $x\nx=set\n}")
    spawner = RecordingSpawner()
    run(program, spawn=spawner)
    run(program, spawn=spawner)
    assert spawner.calls == [("echo", [""]), ("echo", [""])]

def test_run_missing_entry_function():
    program = parse("foo(){\n}")
    with pytest.raises(NoEntryFunction) as exc_info:
        run(program, spawn=RecordingSpawner())
    assert exc_info.value.entry == "main"
    assert isinstance(exc_info.value, NameError)

def test_run_continues_after_failed_command():
    calls, env, reports = run_source("main(){\nmissing-tool a\nx=after\necho $x\n}", failing={"missing-tool"})
    assert calls == [("missing-tool", ["a"]), ("echo", ["after"])]
    assert env == {"x": "after"}
    assert [r.executable for r in reports] == ["missing-tool"]

def test_run_reports_non_zero_exit_status():
    reports = []
    spawn = lambda exe, args: SpawnResult(exe, tuple(args), returncode=3)
    run(parse("main(){\nfalse\ntrue\n}"), spawn=spawn, report=reports.append)
    assert [(r.executable, r.returncode) for r in reports] == [("false", 3), ("true", 3)]

def test_run_counts_steps_in_stats():
    stats = {}
    run_source("main(){\nx=1\necho $x\n}", stats=stats)
    assert stats == {"steps": 2}

def test_run_verbose_traces_statements(capsys):
    run_source("main(){\nx=1\necho $x\n}", verbosity=2)
    out = capsys.readouterr().out
    assert "x=1" in out
    assert "echo $x" in out
    assert "echo 1" in out


def test_report_failure_prints_banner(capsys):
    report_failure(SpawnResult("nope", ("a b",), returncode=None, error="not found"))
    err = capsys.readouterr().err
    assert "COMMAND FAILED." in err
    assert "nope 'a b'" in err
    assert "not found" in err

def test_report_failure_mentions_exit_status(capsys):
    report_failure(SpawnResult("false", (), returncode=1))
    assert "exit status 1" in capsys.readouterr().err

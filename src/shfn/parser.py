## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable
from dataclasses import dataclass

import lark
from .types import Assignment, Execution, Function, Program, FuncStart, FuncEnd, StatementLine, Empty, LexicalPattern
from .errors import MalformedLine, NestedFunctionStart, UnmatchedFunctionEnd, StatementOutsideFunction, UnterminatedFunction


# One trimmed, non-empty line at a time. Terminal priorities give the order in
# which shapes are tried, first match wins; names are validated afterwards.
GRAMMAR = r"""start: FUNC_END       -> func_end
     | FUNC_START   -> func_start
     | ASSIGNMENT   -> assignment
     | COMMAND      -> command

FUNC_END.4: /\}\Z/
FUNC_START.3: /.*\(\)\{\Z/
ASSIGNMENT.2: /[^=]*=.*\Z/
COMMAND.1: /.+\Z/
"""

FUNC_START_SUFFIX = '(){'
RESERVED_CHARS = frozenset('{}()=')

_LINE_PARSER = lark.Lark(GRAMMAR, parser="lalr", lexer="basic")


def is_valid_name(name: str) -> bool:
    """Identifiers are non-empty, don't start with a decimal digit, and avoid `{}()=`."""
    if not name: return False
    if name[0] in '0123456789': return False
    return not any(ch in RESERVED_CHARS for ch in name)


def classify_line(line: str) -> LexicalPattern | None:
    """Classify one line of source text on its own, returns None when unrecognized."""
    trimmed = line.strip()
    if not trimmed:
        return Empty()

    try:
        tree = _LINE_PARSER.parse(trimmed)
    except lark.exceptions.LarkError:
        return None
    text = str(tree.children[0])

    match tree.data:
        case 'func_end':
            return FuncEnd()
        case 'func_start':
            name = text[:-len(FUNC_START_SUFFIX)]
            return FuncStart(name) if is_valid_name(name) else None
        case 'assignment':
            variable, _, value = text.partition('=')
            return StatementLine(Assignment(variable, value)) if is_valid_name(variable) else None
        case 'command':
            return StatementLine(Execution(tuple(text.split())))
    raise NotImplementedError(f"Unexpected line shape `{tree.data}` from grammar.")


@dataclass(frozen=True)
class Outside:
    pass

@dataclass(frozen=True)
class ConstructingFunction:
    name: str
    statements: tuple = ()
    start: int | None = None


ParseState = Outside | ConstructingFunction


def transform(state: ParseState, pattern: LexicalPattern | None, program: Program, *,
              filename: str | None = None, line: int | None = None, text: str = '') -> ParseState:
    """Apply one classified line to the current state; completed functions are committed to `program`."""
    def fail(error_class, message):
        raise error_class(message, filename=filename, line=line, token=text.strip())

    match state, pattern:
        case _, None:
            fail(MalformedLine, "malformed line, not a function start, function end, assignment or command")
        case _, Empty():
            return state
        case Outside(), FuncStart(name):
            return ConstructingFunction(name, (), line)
        case ConstructingFunction(current), FuncStart(name):
            fail(NestedFunctionStart, f"nested function start `{name}` while still constructing `{current}`")
        case ConstructingFunction(name, statements, start), FuncEnd():
            program[name] = Function(statements, meta={'filename': filename, 'lines': (start, line)})
            return Outside()
        case Outside(), FuncEnd():
            fail(UnmatchedFunctionEnd, "function end with no matching start")
        case ConstructingFunction(name, statements, start), StatementLine(statement):
            return ConstructingFunction(name, statements + (statement,), start)
        case Outside(), StatementLine():
            fail(StatementOutsideFunction, "statement outside any function")
    raise NotImplementedError(f"Unexpected parser state {state!r} with pattern {pattern!r}.")


def end_of_input(state: ParseState, *, filename: str | None = None) -> None:
    if isinstance(state, ConstructingFunction):
        raise UnterminatedFunction(f"unterminated function `{state.name}`, missing closing `}}`",
                                   filename=filename, line=state.start, token=state.name + FUNC_START_SUFFIX)


def split_lines(text: str) -> list[str]:
    """Split on newlines only, dropping a trailing carriage return; form feeds and other separators stay in the line."""
    lines = [line.removesuffix('\r') for line in text.split('\n')]
    if lines and lines[-1] == '':
        lines.pop()
    return lines


def parse(source: str | Iterable[str], filename: str | None = None) -> Program:
    """Build the whole program from source text or an iterable of lines, before anything runs."""
    lines = split_lines(source) if isinstance(source, str) else source

    program: Program = {}
    state: ParseState = Outside()
    for number, text in enumerate(lines, start=1):
        state = transform(state, classify_line(text), program, filename=filename, line=number, text=text)
    end_of_input(state, filename=filename)
    return program


def format_parse_error_context(filename, line, token_value, source=None):
    if line is None: return ''
    if source is not None:
        lines = split_lines(source) if isinstance(source, str) else list(source)
    else:
        with open(filename, 'r', encoding='utf-8') as f:
            lines = split_lines(f.read())
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if token_value and (column := line_content.find(token_value)) >= 0:
                line_content = (
                    line_content[:column] +
                    f"\033[48;5;30m\033[1;97m{token_value}\033[0m" +
                    line_content[column+len(token_value):]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'

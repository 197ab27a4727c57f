## shfn — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Assignment:
    variable: str
    value: str

@dataclass(frozen=True)
class Execution:
    tokens: tuple[str, ...]

    @property
    def command(self) -> str:
        return self.tokens[0]

    @property
    def arguments(self) -> tuple[str, ...]:
        return self.tokens[1:]


Statement = Assignment | Execution


@dataclass(frozen=True)
class Function:
    """Ordered statements of one committed function body; immutable once built."""
    statements: tuple[Statement, ...] = ()
    meta: dict = field(default_factory=dict, compare=False, hash=False)

    def __iter__(self):
        return iter(self.statements)

    def __len__(self):
        return len(self.statements)


# Function name to body, later definitions of the same name replace earlier ones.
Program = dict[str, Function]

# Variable name to current value, created fresh for every run.
Environment = dict[str, str]


# Lexical patterns, the classified shape of a single line before parsing.
@dataclass(frozen=True)
class FuncStart:
    name: str

@dataclass(frozen=True)
class FuncEnd:
    pass

@dataclass(frozen=True)
class StatementLine:
    statement: Statement

@dataclass(frozen=True)
class Empty:
    pass


LexicalPattern = FuncStart | FuncEnd | StatementLine | Empty

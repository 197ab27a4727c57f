## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class ShfnError(Exception):
    """Base class for all errors raised by the interpreter."""
    def __init__(self, message: str = "", *, filename=None):
        super().__init__(message)
        self.filename: str | None = filename


class ShfnParseError(ShfnError):
    def __init__(self, message, *, filename=None, line=None, token=None):
        super().__init__(message, filename=filename)
        self.line = line
        self.token = token

class MalformedLine(ShfnParseError):
    pass

class NestedFunctionStart(ShfnParseError):
    pass

class UnmatchedFunctionEnd(ShfnParseError):
    pass

class StatementOutsideFunction(ShfnParseError):
    pass

class UnterminatedFunction(ShfnParseError):
    pass


class NoEntryFunction(ShfnError, NameError):
    def __init__(self, message: str = "", *, filename=None, entry: str = 'main'):
        super().__init__(message, filename=filename)
        self.entry = entry


class IoFailure(ShfnError):
    """Script source could not be read; the original error is chained as `__cause__`."""
    pass

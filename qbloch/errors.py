from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """A circuit text could not be turned into a circuit program."""

    def __init__(self, message: str, statement: Optional[str] = None, gate: Optional[str] = None):
        self.message = message
        self.statement = statement
        self.gate = gate
        super().__init__(self._format())

    def _format(self) -> str:
        if self.statement:
            return f"{self.message} (in statement '{self.statement}')"
        return self.message


class MissingRegister(ParseError):
    pass


class DuplicateRegister(ParseError):
    pass


class QubitOutOfRange(ParseError):
    pass


class InvalidRegisterSize(ParseError):
    pass


class UnknownGate(ParseError):
    pass


class ArityMismatch(ParseError):
    pass


class InvalidAngleExpression(ParseError):
    pass

"""
Error types raised while compiling a production-rule grammar or expanding it.
"""

from typing import Optional


class GrammarError(ValueError):
    """Base class for every error raised by prodgen."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.line is not None:
            return f"line {self.line}, column {self.column}: {self.message}"
        return self.message


class ParseError(GrammarError):
    """
    Raised when a production-rule file cannot be compiled.

    Examples:
    - A nonterminal header that is not an identifier
    - A rule that does not begin with ':' or '|'
    - Malformed Context assignments or an unsupported literal in them
    - A reference to a nonterminal that is never declared
    """


class UsageError(GrammarError):
    """Raised when a builtin is invoked with an unsupported argument shape."""

"""
builtins.py

Default literal, terminal and builtin constructors.

    default_registry()  fresh Registry holding everything below

Literals  String, Char    the unquoted character data
          Int, Float      the token text as written
          Reference       `$name`, the current value bound to `name`
Terminals NL SP TAB DQ SQ EMPTY
Bnfs      range(max) / range(min, max)
"""

import re
from typing import List

from .errors import ParseError, UsageError
from .nodes import RANDOM_KEY, Context, Terminal
from .registry import REFERENCE, Registry
from .tokenizer import CHAR, FLOAT, INT, STRING, int_value


# -------------------------------------------------------
# Literals
# -------------------------------------------------------

_ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|.)", re.DOTALL)

_SIMPLE_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v",
    "\\": "\\", "'": "'", '"': '"',
}


def unquote(text: str) -> str:
    """
    Decode a String or Char token (quotes and escapes) into its characters.

    Accepted escapes: \\a \\b \\f \\n \\r \\t \\v \\\\ \\' \\" \\NNN (octal),
    \\xHH, \\uHHHH and \\UHHHHHHHH. Anything else is a ParseError.
    """
    if len(text) < 2 or text[0] not in "\"'" or text[-1] != text[0]:
        raise ParseError(f"invalid literal {text}")

    def decode(m: "re.Match[str]") -> str:
        escape = m.group(1)
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        try:
            if escape[0] in "xuU":
                return chr(int(escape[1:], 16))
            if len(escape) == 3:
                return chr(int(escape, 8))
        except ValueError:
            pass
        raise ParseError(f"unknown escape sequence \\{escape} in {text}")

    return _ESCAPE_RE.sub(decode, text[1:-1])


def string_literal(text: str) -> Terminal:
    return Terminal.constant(STRING, unquote(text))


def char_literal(text: str) -> Terminal:
    return Terminal.constant(CHAR, unquote(text))


def int_literal(text: str) -> Terminal:
    return Terminal.constant(INT, text)


def float_literal(text: str) -> Terminal:
    return Terminal.constant(FLOAT, text)


def reference_literal(name: str) -> Terminal:
    """`$name`: emit whatever is bound to `name` when the node is generated."""
    def lookup(context: Context) -> str:
        try:
            return str(context[name])
        except KeyError:
            raise UsageError(f"reference ${name} is not bound in this context") from None
    return Terminal(name=REFERENCE, value=name, generator=lookup)


# -------------------------------------------------------
# Terminals
# -------------------------------------------------------

TERMINALS = {
    "NL": "\n",
    "SP": " ",
    "TAB": "\t",
    "DQ": '"',
    "SQ": "'",
    "EMPTY": "",
}


def _terminal_constructor(name: str, value: str):
    def construct() -> Terminal:
        return Terminal.constant(name, value)
    return construct


# -------------------------------------------------------
# range
# -------------------------------------------------------

def range_(context: Context, *args: int) -> int:
    """
    Random integer drawn with the run's random source.

    range_(ctx, max)      -> value in [0, max)
    range_(ctx, min, max) -> value in [min, max)

    Raises UsageError for any other argument count or an empty interval.
    """
    if len(args) == 2:
        lo, hi = args
    elif len(args) == 1:
        lo, hi = 0, args[0]
    else:
        raise UsageError(f"range expects one or two arguments, got {len(args)}")
    if hi <= lo:
        raise UsageError(f"range({lo}, {hi}) is empty")
    rnd = context[RANDOM_KEY]
    return rnd.randrange(lo, hi)


def _parse_int_args(parser) -> List[int]:
    """Read `( int [, int]* )` from the parser; ints may be negative."""
    parser.expect("(")
    args: List[int] = []
    if parser.peek_token()[1] == ")":
        parser.next_token()
        return args
    while True:
        category, text = parser.next_token()
        sign = 1
        if text == "-":
            sign = -1
            category, text = parser.next_token()
        if category != INT:
            raise parser.error(f"expected integer argument, got {text!r}")
        args.append(sign * int_value(text))
        _, text = parser.next_token()
        if text == ")":
            return args
        if text != ",":
            raise parser.error(f"expected ',' or ')' in argument list, got {text!r}")


def range_bnf(parser) -> Terminal:
    args = _parse_int_args(parser)
    if len(args) not in (1, 2):
        raise UsageError(f"range expects one or two arguments, got {len(args)}",
                         parser.line, parser.column)

    def generate(context: Context) -> str:
        return str(range_(context, *args))
    return Terminal(name="range", value=", ".join(str(a) for a in args), generator=generate)


# -------------------------------------------------------
# Default registry
# -------------------------------------------------------

def register_defaults(registry: Registry) -> Registry:
    registry.register_literal(STRING, string_literal)
    registry.register_literal(CHAR, char_literal)
    registry.register_literal(INT, int_literal)
    registry.register_literal(FLOAT, float_literal)
    registry.register_literal(REFERENCE, reference_literal)
    for name, value in TERMINALS.items():
        registry.register_terminal(name, _terminal_constructor(name, value))
    registry.register_bnf("range", range_bnf)
    return registry


def default_registry() -> Registry:
    return register_defaults(Registry())


__all__ = ["default_registry", "register_defaults", "range_", "range_bnf", "unquote",
           "reference_literal", "TERMINALS"]

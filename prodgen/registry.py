"""
registry.py

Lookup tables the grammar parser consults for every token of a rule.

    literals   token category -> constructor(token_text) -> Terminal
    terminals  identifier     -> constructor() -> Terminal
    bnfs       identifier     -> constructor(parser) -> Terminal

A Bnf constructor receives the GrammarParser and may pull further tokens from
it, e.g. the argument list of `range(1, 10)`.

The literal table also holds the "Reference" entry used for `$name` nodes.
A registry is filled before parsing and only read while parsing.
"""

from typing import Any, Callable, Dict, Optional

from .nodes import Terminal

REFERENCE = "Reference"

LiteralConstructor = Callable[[str], Terminal]
TerminalConstructor = Callable[[], Terminal]
BnfConstructor = Callable[[Any], Terminal]


class Registry:
    """Literal, terminal and builtin constructors for one family of grammars."""

    def __init__(self,
                 literals: Optional[Dict[str, LiteralConstructor]] = None,
                 terminals: Optional[Dict[str, TerminalConstructor]] = None,
                 bnfs: Optional[Dict[str, BnfConstructor]] = None):
        self.literals: Dict[str, LiteralConstructor] = dict(literals or {})
        self.terminals: Dict[str, TerminalConstructor] = dict(terminals or {})
        self.bnfs: Dict[str, BnfConstructor] = dict(bnfs or {})

    # Each register_* method works as a plain call or as a decorator:
    #     registry.register_terminal("NL", make_newline)
    #     @registry.register_terminal("NL")
    #     def make_newline(): ...

    def register_literal(self, category: str, constructor: Optional[LiteralConstructor] = None):
        return self._register(self.literals, category, constructor)

    def register_terminal(self, name: str, constructor: Optional[TerminalConstructor] = None):
        return self._register(self.terminals, name, constructor)

    def register_bnf(self, name: str, constructor: Optional[BnfConstructor] = None):
        return self._register(self.bnfs, name, constructor)

    @staticmethod
    def _register(table: Dict[str, Callable], key: str, constructor: Optional[Callable]):
        if constructor is not None:
            table[key] = constructor
            return constructor

        def decorator(fn: Callable) -> Callable:
            table[key] = fn
            return fn
        return decorator

    def copy(self) -> "Registry":
        return Registry(self.literals, self.terminals, self.bnfs)

    def __repr__(self) -> str:
        return (f"Registry(literals={sorted(self.literals)}, "
                f"terminals={sorted(self.terminals)}, bnfs={sorted(self.bnfs)})")

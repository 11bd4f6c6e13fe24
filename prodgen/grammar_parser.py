"""
grammar_parser.py

Compiles production-rule text into a Grammar.

Syntax
------
    expr     : term "+" expr ;
             | term .
    term#8   : range(0, 100) ;
             | "(" expr ")" .
    greeting : "hello " $who .

    Context.
    greeting : who = "world", times = 2 .

- A definition is a nonterminal name followed by rules. The first rule starts
  with ':' and every further rule with '|'. A rule ends with ';' when more
  rules follow and with '.' when it is the last one.
- `name!N` or `name#N` (no whitespace before the marker) records N as the
  nonterminal's recursion-depth hint.
- `$name` emits the value currently bound to `name` in the variable context.
- The optional Context block after all definitions declares default bindings
  per nonterminal. Values are strings, characters (stored as code points),
  integers or floats.
- Any other bare word in a rule is a reference to a nonterminal, which may be
  declared later in the file.
"""

import logging
from typing import Any, Dict, List, Optional, TextIO, Tuple, Union

from .ast_builder import build_ast
from .builtins import default_registry, unquote
from .errors import GrammarError, ParseError
from .nodes import Grammar, Node, NonTerminal, Unresolved
from .registry import REFERENCE, Registry
from .tokenizer import CHAR, EOF, FLOAT, IDENT, INT, PUNCT, STRING, Token, Tokenizer, int_value

logger = logging.getLogger(__name__)

CONTEXT_KEYWORD = "Context"
REFERENCE_SIGIL = "$"
LRMAX_MARKERS = ("!", "#")
RULE_START = ":"
ALTERNATIVE = "|"
RULE_NEXT = ";"
RULE_END = "."


def _describe(token: Token) -> str:
    category, text = token
    if category == EOF:
        return "end of input"
    return repr(text)


class GrammarParser:
    """
    Recursive-descent parser over a Tokenizer.

    Bnf constructors receive the parser itself and may use next_token(),
    peek_token(), expect() and error() to read their own arguments.
    """

    def __init__(self, source: Union[str, TextIO], registry: Optional[Registry] = None):
        self.tokens = Tokenizer(source)
        self.registry = registry if registry is not None else default_registry()
        self.nonterminals: Dict[str, NonTerminal] = {}
        self.start: Optional[str] = None

    # ---------------------------------------------------
    # Token helpers
    # ---------------------------------------------------

    @property
    def line(self) -> int:
        return self.tokens.line

    @property
    def column(self) -> int:
        return self.tokens.column

    def next_token(self) -> Token:
        return self.tokens.next()

    def peek_token(self) -> Token:
        return self.tokens.peek()

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.line, self.column)

    def expect(self, text: str) -> None:
        token = self.next_token()
        if token != (PUNCT, text):
            raise self.error(f"expected {text!r}, got {_describe(token)}")

    # ---------------------------------------------------
    # Definitions
    # ---------------------------------------------------

    def parse(self) -> Grammar:
        """Parse the whole source. References are left unresolved; see build_ast."""
        name, lrmax = self._parse_header()
        while name is not None:
            if name == CONTEXT_KEYWORD:
                self._parse_context()
                break
            rules = self._parse_rules(name)
            if name in self.nonterminals:
                logger.warning("nonterminal %s is defined more than once, keeping the last definition", name)
            self.nonterminals[name] = NonTerminal(name=name, alternatives=rules, lrmax=lrmax)
            if self.start is None:
                self.start = name
            logger.debug("parsed nonterminal %s with %d rule(s)", name, len(rules))
            name, lrmax = self._parse_header()

        if not self.nonterminals:
            raise self.error("grammar does not define any nonterminal")
        return Grammar(nonterminals=self.nonterminals, start=self.start)

    def _parse_header(self) -> Tuple[Optional[str], Optional[int]]:
        token = self.next_token()
        while token == (PUNCT, RULE_NEXT):
            token = self.next_token()
        category, name = token
        if category == EOF:
            return None, None
        if category != IDENT:
            raise self.error(f"expected a nonterminal name, got {_describe(token)}")

        lrmax = None
        if self.tokens.peek_char() in LRMAX_MARKERS:
            _, marker = self.next_token()
            category, text = self.next_token()
            if category != INT:
                raise self.error(f"expected an integer after {name}{marker}, "
                                 f"got {_describe((category, text))}")
            lrmax = int_value(text)
        return name, lrmax

    def _parse_rules(self, name: str) -> List[List[Node]]:
        rules: List[List[Node]] = []
        more = True
        while more:
            token = self.next_token()
            delimiter = ALTERNATIVE if rules else RULE_START
            if token != (PUNCT, delimiter):
                raise self.error(f"rule {len(rules) + 1} of {name} should begin with "
                                 f"{delimiter!r}, got {_describe(token)}")
            rule, more = self._parse_nodes()
            rules.append(rule)
        return rules

    def _parse_nodes(self) -> Tuple[List[Node], bool]:
        nodes: List[Node] = []
        token = self.next_token()
        while token[0] != EOF and token not in ((PUNCT, RULE_END), (PUNCT, RULE_NEXT)):
            try:
                nodes.append(self._parse_node(*token))
            except GrammarError as e:
                if e.line is not None:
                    raise
                raise type(e)(e.message, self.line, self.column) from None
            token = self.next_token()
        return nodes, token == (PUNCT, RULE_NEXT)

    def _parse_node(self, category: str, text: str) -> Node:
        # Literal before Terminal before Bnf before `$` before a bare reference.
        literal = self.registry.literals.get(category)
        if literal is not None:
            return literal(text)
        terminal = self.registry.terminals.get(text)
        if terminal is not None:
            return terminal()
        bnf = self.registry.bnfs.get(text)
        if bnf is not None:
            return bnf(self)
        if (category, text) == (PUNCT, REFERENCE_SIGIL):
            token = self.next_token()
            if token[0] != IDENT:
                raise self.error(f"expected a name after '$', got {_describe(token)}")
            reference = self.registry.literals.get(REFERENCE)
            if reference is None:
                raise self.error("'$' references need a Reference literal in the registry")
            return reference(token[1])
        return Unresolved(text)

    # ---------------------------------------------------
    # Context block
    # ---------------------------------------------------

    def _parse_context(self) -> None:
        if self.peek_token() == (PUNCT, RULE_END):
            self.next_token()

        while True:
            token = self.next_token()
            category, name = token
            if category == EOF:
                return
            if category != IDENT:
                raise self.error(f"expected a nonterminal name in Context, got {_describe(token)}")
            self.expect(RULE_START)
            nonterminal = self.nonterminals.get(name)
            if nonterminal is None:
                raise self.error(f"Context given for undeclared nonterminal {name!r}")

            while True:
                token = self.next_token()
                if token[0] != IDENT:
                    raise self.error(f"invalid context for nonterminal {name}: "
                                     f"expected a variable name, got {_describe(token)}")
                self.expect("=")
                nonterminal.context[token[1]] = self._parse_context_value()
                token = self.next_token()
                if token == (PUNCT, RULE_END):
                    break
                if token != (PUNCT, ","):
                    raise self.error(f"expected ',' or '.' in context of {name}, got {_describe(token)}")

    def _parse_context_value(self) -> Any:
        category, text = self.next_token()
        sign = 1
        if (category, text) == (PUNCT, "-"):
            sign = -1
            category, text = self.next_token()
            if category not in (INT, FLOAT):
                raise self.error(f"expected a number after '-', got {_describe((category, text))}")

        try:
            if category == STRING:
                return unquote(text)
            if category == CHAR:
                return ord(unquote(text))
        except ParseError as e:
            raise self.error(e.message) from None
        if category == INT:
            return sign * int_value(text)
        if category == FLOAT:
            return sign * float(text)
        raise self.error(f"invalid context value {_describe((category, text))}")


def parse_grammar(source: Union[str, TextIO], registry: Optional[Registry] = None) -> Grammar:
    """
    Parse production rules and link every reference to its nonterminal.

    Parameters
    ----------
    source: str or text stream
        Production-rule text.
    registry: Registry
        Literal/terminal/builtin constructors; default_registry() when omitted.

    Returns
    -------
    A resolved Grammar whose `start` is the first nonterminal in the source.

    Raises
    ------
    ParseError on malformed input or unresolved references, UsageError when a
    builtin is given unsupported arguments.
    """
    grammar = GrammarParser(source, registry).parse()
    build_ast(grammar)
    return grammar


# Quick manual test (only runs if executed directly)
if __name__ == "__main__":
    from .tree_builder import format_grammar

    example = """
        sentence : subject SP verb " #" range(1, 100) .
        subject  : "the cat" ; | "a dog" .
        verb     : "runs" ; | "sleeps" ; | "eats" .
    """
    print(format_grammar(parse_grammar(example)))

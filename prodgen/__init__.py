"""
prodgen: random string generation from production-rule grammars.

    grammar = parse_grammar(text)
    strings = generate_strings(grammar, count=5, seed=1)
"""

from .ast_builder import build_ast
from .builtins import default_registry, range_
from .errors import GrammarError, ParseError, UsageError
from .generator import generate, generate_one, generate_strings, new_context
from .grammar_parser import GrammarParser, parse_grammar
from .nodes import RANDOM_KEY, Grammar, NonTerminal, Terminal, Unresolved
from .registry import Registry
from .tokenizer import Tokenizer
from .tree_builder import format_grammar, grammar_to_tree

__all__ = [
    "build_ast",
    "default_registry",
    "range_",
    "GrammarError",
    "ParseError",
    "UsageError",
    "generate",
    "generate_one",
    "generate_strings",
    "new_context",
    "GrammarParser",
    "parse_grammar",
    "RANDOM_KEY",
    "Grammar",
    "NonTerminal",
    "Terminal",
    "Unresolved",
    "Registry",
    "Tokenizer",
    "format_grammar",
    "grammar_to_tree",
]

"""
Links every Unresolved reference in a parsed grammar to its NonTerminal.
"""

import logging

from .errors import ParseError
from .nodes import Grammar, Unresolved

logger = logging.getLogger(__name__)


def build_ast(grammar: Grammar) -> Grammar:
    """
    Replace Unresolved placeholders in place with the NonTerminal they name.

    All names are declared by the time this runs, so one pass is enough.
    Raises ParseError for a reference to an undeclared nonterminal.
    """
    resolved = 0
    for nonterminal in grammar.nonterminals.values():
        for rule in nonterminal.alternatives:
            for i, node in enumerate(rule):
                if not isinstance(node, Unresolved):
                    continue
                target = grammar.nonterminals.get(node.ref)
                if target is None:
                    raise ParseError(f"Unknown reference {node.ref!r} in a rule of {nonterminal.name}")
                rule[i] = target
                resolved += 1

    logger.debug("resolved %d reference(s) across %d nonterminal(s)", resolved, len(grammar))
    return grammar

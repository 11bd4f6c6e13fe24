"""
generator.py

Random string generator driven by a compiled Grammar.

Every expansion of a nonterminal picks one of its rules uniformly at random and
concatenates the text of the rule's nodes, left to right:
    - a Terminal contributes whatever its generator returns for the context
    - a NonTerminal is expanded recursively; its text is then bound in the
      context under the nonterminal's name, so later siblings (and anything
      they expand) can refer to it with `$name`

The variable context is a collections.ChainMap. Each expansion works in its own
child frame that starts with the nonterminal's Context defaults; the frame is
dropped when the expansion returns, so bindings never leak to the caller.

Functions:
- new_context(rnd=None, bindings=None)
    Root context holding the random source under RANDOM_KEY.
- generate(context, nonterminal)
    Expand one nonterminal and return its text.
- generate_one(grammar, symbol=None, rnd=None, context=None)
    Expand `symbol` (the grammar's start symbol by default).
- generate_strings(grammar, start_symbol=None, count=10, seed=None)
    `count` expansions sharing one random source, seeded for reproducible output.
"""

import logging
import random
from collections import ChainMap
from typing import Any, List, Mapping, Optional

from .errors import GrammarError
from .nodes import RANDOM_KEY, Context, Grammar, NonTerminal, Terminal

logger = logging.getLogger(__name__)


def new_context(rnd: Optional[random.Random] = None,
                bindings: Optional[Mapping[str, Any]] = None) -> ChainMap:
    root = dict(bindings or {})
    root[RANDOM_KEY] = rnd if rnd is not None else random.Random()
    return ChainMap(root)


def _child_frame(context: Context, defaults: Mapping[str, Any]) -> ChainMap:
    if isinstance(context, ChainMap):
        return context.new_child(dict(defaults))
    return ChainMap(dict(defaults), context)


def generate(context: Context, nonterminal: NonTerminal) -> str:
    """
    Expand `nonterminal` with the random source found in `context`.

    `context` is only read; defaults and sibling bindings live in a child frame.
    """
    rule = context[RANDOM_KEY].choice(nonterminal.alternatives)
    frame = _child_frame(context, nonterminal.context)

    parts: List[str] = []
    for node in rule:
        if isinstance(node, Terminal):
            text = node.generate(frame)
        elif isinstance(node, NonTerminal):
            text = generate(frame, node)
            frame[node.name] = text
        else:
            raise TypeError(f"cannot generate from {node!r} in {nonterminal.name}; was build_ast run?")
        parts.append(text)
    return "".join(parts)


def generate_one(grammar: Grammar, symbol: Optional[str] = None,
                 rnd: Optional[random.Random] = None,
                 context: Optional[Context] = None) -> str:
    """
    Generate one string for `symbol` (default: the grammar's start symbol).

    When `context` is given its bindings are visible to the expansion; it is
    copied into a fresh root when it lacks a random source or `rnd` is passed.
    """
    symbol = symbol or grammar.start
    if symbol not in grammar:
        raise GrammarError(f"Unknown start symbol {symbol!r}")

    if context is None:
        context = new_context(rnd)
    elif rnd is not None or RANDOM_KEY not in context:
        context = new_context(rnd, context)
    return generate(context, grammar[symbol])


def generate_strings(grammar: Grammar, start_symbol: Optional[str] = None,
                     count: int = 10, seed: Optional[int] = None) -> List[str]:
    """
    Generate `count` strings from `start_symbol` with one shared random source.

    The same grammar, start symbol and seed always give the same list.
    Expansions that run past Python's recursion limit are skipped, so the
    result can be shorter than `count` for grammars that rarely terminate.
    """
    rnd = random.Random(seed)
    generated: List[str] = []
    for _ in range(count):
        try:
            generated.append(generate_one(grammar, start_symbol, rnd=rnd))
        except RecursionError:
            logger.warning("expansion of %s exceeded the recursion limit, skipping it",
                           start_symbol or grammar.start)
    return generated


# -------------------
# Quick manual test
# -------------------
if __name__ == "__main__":
    from .grammar_parser import parse_grammar

    example = parse_grammar("""
        S     : NP SP VP .
        NP    : Det SP N ; | N .
        VP    : V SP NP ; | V .
        Det   : "the" ; | "a" .
        N     : "cat" ; | "dog" ; | "man" .
        V     : "runs" ; | "eats" ; | "chased" .
    """)

    # deterministic outputs for testing
    for s in generate_strings(example, count=10, seed=42):
        print(s)

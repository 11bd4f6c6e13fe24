"""
nodes.py

In-memory shape of a compiled production-rule grammar.

A rule is a list of nodes. Right after parsing a node is one of:
    Terminal    - a leaf that produces text through its generator
    NonTerminal - a named symbol with alternative rules
    Unresolved  - a bare name that still has to be linked to its NonTerminal

The AST builder replaces every Unresolved in place, so a finished Grammar only
holds Terminal and NonTerminal nodes.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Union

# Name -> value environment handed to leaf generators.
Context = MutableMapping[str, Any]
# Context key holding the random.Random instance of a generation run.
RANDOM_KEY = "_random"
LeafGenerator = Callable[[Context], str]


def _constant(value: str) -> LeafGenerator:
    def generate(context: Context) -> str:
        return value
    return generate


@dataclass(frozen=True)
class Terminal:
    """Leaf value node. `name` records which registry entry built it."""

    name: str
    value: str = ""
    generator: Optional[LeafGenerator] = field(default=None, repr=False, compare=False)

    def generate(self, context: Context) -> str:
        if self.generator is None:
            return self.value
        return self.generator(context)

    @classmethod
    def constant(cls, name: str, value: str) -> "Terminal":
        return cls(name=name, value=value, generator=_constant(value))


@dataclass(frozen=True)
class Unresolved:
    """Reference to a nonterminal by name, waiting for the AST builder."""

    ref: str


@dataclass(eq=False)
class NonTerminal:
    """
    A named grammar symbol.

    alternatives: ordered rules, one of which is picked per expansion
    context:      default bindings declared for this symbol in the Context block
    lrmax:        recursion-depth hint given as `name!N` or `name#N`, None if unset.
                  It is kept as metadata only; generation does not consult it.
    """

    name: str
    alternatives: List[List["Node"]] = field(default_factory=list, repr=False)
    context: Dict[str, Any] = field(default_factory=dict, repr=False)
    lrmax: Optional[int] = None


Node = Union[Terminal, NonTerminal, Unresolved]


@dataclass
class Grammar:
    """Symbol table produced by parse_grammar; `start` is the first declared nonterminal."""

    nonterminals: Dict[str, NonTerminal]
    start: Optional[str] = None

    def __getitem__(self, name: str) -> NonTerminal:
        return self.nonterminals[name]

    def __contains__(self, name: str) -> bool:
        return name in self.nonterminals

    def __len__(self) -> int:
        return len(self.nonterminals)

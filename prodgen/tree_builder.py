# prodgen/tree_builder.py
"""
Render a compiled grammar for inspection: a D3-compatible JSON hierarchy for
the web frontend and a plain text dump for debugging.
"""

from typing import Any, Dict, List

from .nodes import Grammar, Node, NonTerminal, Terminal, Unresolved


# -------------------------------------------------------
# 1. Node descriptions
# -------------------------------------------------------

def describe_node(node: Node) -> str:
    """`name(value)` for leaves, the bare name for nonterminals."""
    if isinstance(node, Terminal):
        return f"{node.name}({node.value})"
    if isinstance(node, NonTerminal):
        return node.name
    if isinstance(node, Unresolved):
        return f"{node.ref}?"
    raise TypeError(f"Unknown node {node!r}")


def _header(nonterminal: NonTerminal) -> str:
    if nonterminal.lrmax is None:
        return nonterminal.name
    return f"{nonterminal.name}#{nonterminal.lrmax}"


# -------------------------------------------------------
# 2. D3 hierarchy
# -------------------------------------------------------

def rule_to_tree(index: int, rule: List[Node]) -> Dict[str, Any]:
    return {
        "name": f"rule {index}",
        "children": [{"name": describe_node(node)} for node in rule]
    }


def nonterminal_to_tree(nonterminal: NonTerminal) -> Dict[str, Any]:
    children = [rule_to_tree(i, rule) for i, rule in enumerate(nonterminal.alternatives, 1)]
    if nonterminal.context:
        children.append({
            "name": "Context",
            "children": [{"name": f"{k} = {v!r}"} for k, v in nonterminal.context.items()]
        })
    return {"name": _header(nonterminal), "children": children}


def grammar_to_tree(grammar: Grammar) -> Dict[str, Any]:
    """
    Output format:
    {
        "name": "<start symbol>",
        "children": [ {"name": "<nonterminal>", "children": [ rules... ]}, ... ]
    }
    """
    return {
        "name": grammar.start or "?",
        "children": [nonterminal_to_tree(nt) for nt in grammar.nonterminals.values()]
    }


# -------------------------------------------------------
# 3. Text dump
# -------------------------------------------------------

def format_grammar(grammar: Grammar) -> str:
    lines: List[str] = []
    for nonterminal in grammar.nonterminals.values():
        lines.append(_header(nonterminal))
        for rule in nonterminal.alternatives:
            lines.append("    : " + " . ".join(describe_node(node) for node in rule))
        for key, value in nonterminal.context.items():
            lines.append(f"    {key} = {value!r}")
        lines.append("")
    return "\n".join(lines)


__all__ = ["describe_node", "rule_to_tree", "nonterminal_to_tree", "grammar_to_tree", "format_grammar"]

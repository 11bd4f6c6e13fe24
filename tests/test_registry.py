"""Tests for the constructor registry."""

from prodgen.generator import generate, new_context
from prodgen.grammar_parser import parse_grammar
from prodgen.nodes import Terminal
from prodgen.registry import Registry


class TestRegistry:
    """Registration by call and by decorator, and isolation between registries."""

    def test_register_by_call(self) -> None:
        registry = Registry()
        constructor = registry.register_terminal("HI", lambda: Terminal.constant("HI", "hi"))
        assert registry.terminals["HI"] is constructor

    def test_register_by_decorator(self, registry) -> None:
        @registry.register_bnf("twice")
        def twice(parser) -> Terminal:
            parser.expect("(")
            _, text = parser.next_token()
            parser.expect(")")
            word = text.strip('"')
            return Terminal.constant("twice", word * 2)

        assert registry.bnfs["twice"] is twice
        grammar = parse_grammar('A : twice("ab") "!" .', registry)
        assert generate(new_context(), grammar["A"]) == "abab!"

    def test_copy_is_independent(self, registry) -> None:
        clone = registry.copy()
        clone.register_terminal("ONLY_IN_CLONE", lambda: Terminal.constant("x", "x"))
        assert "ONLY_IN_CLONE" in clone.terminals
        assert "ONLY_IN_CLONE" not in registry.terminals
        assert clone.literals == registry.literals

    def test_grammars_with_different_builtins(self, registry) -> None:
        """Two registries give the same word different meanings."""
        loud = registry.copy()
        loud.register_terminal("WORD", lambda: Terminal.constant("WORD", "HELLO"))
        quiet = registry.copy()
        quiet.register_terminal("WORD", lambda: Terminal.constant("WORD", "hello"))

        source = "A : WORD ."
        assert generate(new_context(), parse_grammar(source, loud)["A"]) == "HELLO"
        assert generate(new_context(), parse_grammar(source, quiet)["A"]) == "hello"

    def test_repr_lists_keys(self) -> None:
        registry = Registry(terminals={"B": lambda: None, "A": lambda: None})
        assert "terminals=['A', 'B']" in repr(registry)

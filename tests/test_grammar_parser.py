"""Tests for the production-rule parser."""

import io

import pytest

from prodgen.errors import ParseError, UsageError
from prodgen.generator import generate
from prodgen.grammar_parser import GrammarParser, parse_grammar
from prodgen.nodes import NonTerminal, Terminal, Unresolved
from prodgen.registry import REFERENCE, Registry


class TestDefinitions:
    """Nonterminal headers and rule lists."""

    def test_single_rule(self) -> None:
        """One nonterminal with one rule of one literal."""
        grammar = parse_grammar('A : "x" .')
        assert list(grammar.nonterminals) == ["A"]
        assert grammar.start == "A"
        [rule] = grammar["A"].alternatives
        assert rule == [Terminal(name="String", value="x")]

    def test_alternatives(self) -> None:
        """';' separates rules and '|' opens every rule after the first."""
        grammar = parse_grammar('A : "x" ; | "y" ; | "z" .')
        values = [rule[0].value for rule in grammar["A"].alternatives]
        assert values == ["x", "y", "z"]

    def test_start_is_first_definition(self) -> None:
        grammar = parse_grammar('B : "b" . A : "a" .')
        assert grammar.start == "B"

    def test_stray_semicolon_between_definitions(self) -> None:
        """A ';' after a finished definition is ignored."""
        grammar = parse_grammar('A : B . ; B : "y" .')
        assert set(grammar.nonterminals) == {"A", "B"}
        assert grammar["A"].alternatives[0] == [grammar["B"]]

    def test_empty_rule(self) -> None:
        grammar = parse_grammar('A : ; | "x" .')
        assert grammar["A"].alternatives[0] == []

    def test_rule_ends_at_end_of_input(self) -> None:
        grammar = parse_grammar('A : "x" "y"')
        assert [n.value for n in grammar["A"].alternatives[0]] == ["x", "y"]

    def test_terminator_inside_string_is_literal(self) -> None:
        grammar = parse_grammar('A : "." ";" .')
        assert [n.value for n in grammar["A"].alternatives[0]] == [".", ";"]

    def test_lrmax_markers(self) -> None:
        """`name#N` and `name!N` record the recursion hint."""
        grammar = parse_grammar('A#5 : "a" . B!3 : "b" . C : "c" .')
        assert grammar["A"].lrmax == 5
        assert grammar["B"].lrmax == 3
        assert grammar["C"].lrmax is None

    def test_lrmax_needs_adjacent_marker(self) -> None:
        """A marker separated by whitespace is not an attribute."""
        with pytest.raises(ParseError):
            parse_grammar('A #5 : "a" .')

    def test_redefinition_keeps_last(self) -> None:
        grammar = parse_grammar('A : "old" . A : "new" .')
        assert grammar["A"].alternatives[0][0].value == "new"

    def test_stream_source(self) -> None:
        grammar = parse_grammar(io.StringIO('A : "x" .'))
        assert "A" in grammar


class TestMalformed:
    """Syntax errors are fatal ParseErrors."""

    def test_header_must_be_identifier(self) -> None:
        with pytest.raises(ParseError, match="nonterminal name"):
            parse_grammar('"x" : "y" .')

    def test_first_rule_needs_colon(self) -> None:
        with pytest.raises(ParseError, match="should begin with ':'"):
            parse_grammar('A "x" .')

    def test_next_rule_needs_bar(self) -> None:
        with pytest.raises(ParseError, match="should begin with '\\|'"):
            parse_grammar('A : "x" ; "y" .')

    def test_empty_source(self) -> None:
        with pytest.raises(ParseError, match="does not define"):
            parse_grammar("  // nothing here\n")

    def test_error_carries_location(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_grammar('A : "x" .\nB "y" .')
        assert exc.value.line == 2


class TestNodeResolutionOrder:
    """Literal, Terminal, Bnf, `$`, then bare reference."""

    def test_terminal_and_bnf(self) -> None:
        grammar = parse_grammar("A : NL range(3) .")
        newline, ranged = grammar["A"].alternatives[0]
        assert newline.name == "NL" and newline.value == "\n"
        assert ranged.name == "range" and ranged.value == "3"

    def test_reference_sigil(self) -> None:
        grammar = parse_grammar("A : $who .")
        [node] = grammar["A"].alternatives[0]
        assert node.name == REFERENCE
        assert node.value == "who"

    def test_sigil_needs_identifier(self) -> None:
        with pytest.raises(ParseError, match="after '\\$'"):
            parse_grammar('A : $ "x" .')

    def test_terminal_beats_nonterminal(self, registry) -> None:
        """A registered terminal wins over a nonterminal of the same name."""
        grammar = parse_grammar('A : NL . NL : "not used" .', registry)
        assert isinstance(grammar["A"].alternatives[0][0], Terminal)

    def test_terminal_beats_bnf(self) -> None:
        registry = Registry()
        registry.register_terminal("x", lambda: Terminal.constant("terminal", "T"))
        registry.register_bnf("x", lambda parser: Terminal.constant("bnf", "B"))
        grammar = parse_grammar("A : x .", registry)
        assert grammar["A"].alternatives[0][0].name == "terminal"

    def test_literal_beats_terminal(self) -> None:
        """Literal lookup by category runs before terminal lookup by text."""
        registry = Registry()
        registry.register_literal("Int", lambda text: Terminal.constant("int", text))
        registry.register_terminal("7", lambda: Terminal.constant("terminal", "seven"))
        grammar = parse_grammar("A : 7 .", registry)
        assert grammar["A"].alternatives[0][0].name == "int"

    def test_unregistered_word_is_reference(self) -> None:
        parser = GrammarParser("A : B . B : \"b\" .")
        raw = parser.parse()
        assert raw["A"].alternatives[0] == [Unresolved("B")]

    def test_bnf_consumes_arguments(self) -> None:
        grammar = parse_grammar('A : range(-5, 5) "!" .')
        ranged, bang = grammar["A"].alternatives[0]
        assert ranged.value == "-5, 5"
        assert bang.value == "!"

    def test_range_bad_argument_count(self) -> None:
        with pytest.raises(UsageError):
            parse_grammar("A : range() .")
        with pytest.raises(UsageError):
            parse_grammar("A : range(1, 2, 3) .")

    def test_range_non_integer_argument(self) -> None:
        with pytest.raises(ParseError, match="integer argument"):
            parse_grammar('A : range("x") .')

    def test_literal_error_gets_location(self) -> None:
        registry = Registry()

        def reject(text):
            raise ParseError("rejected")
        registry.register_literal("String", reject)
        with pytest.raises(ParseError) as exc:
            parse_grammar('A :\n  "x" .', registry)
        assert (exc.value.line, exc.value.column) == (2, 3)


class TestContextBlock:
    """Default bindings declared after the definitions."""

    def test_typed_values(self) -> None:
        grammar = parse_grammar("""
            A : "a" .
            B : "b" .
            Context.
            A : s = "1", c = 'x', i = 42, f = 2.5, n = -3 .
            B : s = "b" .
        """)
        assert grammar["A"].context == {"s": "1", "c": ord("x"), "i": 42, "f": 2.5, "n": -3}
        assert grammar["B"].context == {"s": "b"}

    def test_dot_after_keyword_is_optional(self) -> None:
        grammar = parse_grammar('A : "a" . Context A : v = "1" .')
        assert grammar["A"].context == {"v": "1"}

    def test_missing_colon(self) -> None:
        with pytest.raises(ParseError, match="expected ':'"):
            parse_grammar('A : "a" . Context. A v = "1" .')

    def test_missing_equals(self) -> None:
        with pytest.raises(ParseError, match="expected '='"):
            parse_grammar('A : "a" . Context. A : v "1" .')

    def test_unsupported_literal(self) -> None:
        with pytest.raises(ParseError, match="invalid context value"):
            parse_grammar('A : "a" . Context. A : v = other .')

    def test_undeclared_nonterminal(self) -> None:
        with pytest.raises(ParseError, match="undeclared nonterminal 'Z'"):
            parse_grammar('A : "a" . Context. Z : v = 1 .')

    def test_bad_separator(self) -> None:
        with pytest.raises(ParseError, match="expected ',' or '.'"):
            parse_grammar('A : "a" . Context. A : v = 1 ; w = 2 .')

    def test_without_context(self) -> None:
        grammar = parse_grammar('A : "a" .')
        assert isinstance(grammar["A"], NonTerminal)
        assert grammar["A"].context == {}


class TestIdentifiers:
    """Nonterminal names follow identifier rules beyond ASCII."""

    def test_unicode_nonterminal(self, context) -> None:
        grammar = parse_grammar('café : "x" .')
        assert "café" in grammar
        assert generate(context, grammar["café"]) == "x"

    def test_unknown_escape_in_rule(self) -> None:
        with pytest.raises(ParseError, match="unknown escape") as exc:
            parse_grammar('A :\n  "\\q" .')
        assert (exc.value.line, exc.value.column) == (2, 3)


class TestLargeGrammar:
    """Long sources parse and report errors at the right line."""

    DEFINITIONS = 5000

    def source(self) -> str:
        lines = [f'N{i} : "v{i}" N{i + 1} ; | "w" .' for i in range(self.DEFINITIONS)]
        lines.append(f'N{self.DEFINITIONS} : "end" .')
        return "\n".join(lines)

    def test_chain_of_definitions(self) -> None:
        grammar = parse_grammar(self.source())
        assert len(grammar) == self.DEFINITIONS + 1
        assert grammar["N0"].alternatives[0][1] is grammar["N1"]

    def test_error_on_last_line(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_grammar(self.source() + '\nBad "x" .')
        assert (exc.value.line, exc.value.column) == (self.DEFINITIONS + 2, 5)

"""
Tests for the notation tokenizer, block parser and indent renderer.
"""

import pytest

from node_models import BlockNode, LeafNode, is_block
from notation_io import (
    format_as_box,
    format_with_indentation,
    indent_str,
    parse_block,
    parse_notation,
    parse_token,
    render_indented,
)


class TestParseToken:
    """Tests for reading a single token."""

    def test_trims_and_stops_at_delimiter(self):
        assert parse_token("  key = v", 0) == ("key", 6)

    def test_at_delimiter_returns_empty(self):
        assert parse_token("{a}", 0) == ("", 0)

    def test_runs_to_end_of_input(self):
        assert parse_token("a=hello world ", 2) == ("hello world", 14)

    def test_at_end_of_input(self):
        assert parse_token("abc", 3) == ("", 3)

    def test_every_delimiter_stops_the_token(self):
        for delimiter in "=,{}()":
            token, pos = parse_token(f"x{delimiter}y", 0)
            assert (token, pos) == ("x", 1)


class TestParseBlock:
    """Tests for building the node tree."""

    def test_deep_nesting_within_recursion_limit(self):
        depth = 60
        text = "{" * depth + "leaf" + "}" * depth
        node = parse_notation(text)
        for _ in range(depth - 1):
            assert len(node.children) == 1
            node = node.children[0]
        assert node.children == (LeafNode(value="leaf"),)
        assert format_with_indentation(text).count("\n") == 2 * depth + 1
        assert format_as_box(text).startswith("=")

    def test_flat_entries(self):
        root = parse_notation("{a=1,b=2}")
        assert root == BlockNode(children=(LeafNode("a", "1"), LeafNode("b", "2")))

    def test_key_attaches_to_nested_block(self):
        root = parse_notation("{outer={inner=5}}")
        assert len(root.children) == 1
        outer = root.children[0]
        assert is_block(outer)
        assert outer.key == "outer"
        assert outer.children == (LeafNode("inner", "5"),)

    def test_anonymous_block_and_bare_values(self):
        root = parse_notation("{x,{y=1},(z)}")
        assert root.children == (
            LeafNode(value="x"),
            BlockNode(children=(LeafNode("y", "1"),)),
            BlockNode(kind="(", children=(LeafNode(value="z"),)),
        )

    def test_delimiter_kind_tracked_per_node(self):
        root = parse_notation("(a={b=(c)})")
        assert root.kind == "("
        a = root.children[0]
        assert a.kind == "{"
        assert a.children[0].kind == "("
        assert a.children[0].closing == ")"

    def test_whitespace_around_tokens(self):
        root = parse_notation("{ a = 1 , b = two words }")
        assert root.children == (LeafNode("a", "1"), LeafNode("b", "two words"))

    def test_key_with_empty_value(self):
        root = parse_notation("{flag=}")
        assert root.children == (LeafNode("flag", ""),)

    def test_empty_input(self):
        root = parse_notation("")
        assert root.children == ()
        assert root.kind == "{"

    def test_empty_block(self):
        assert parse_notation("{}") == BlockNode()

    def test_trailing_comma_adds_empty_leaf(self):
        root = parse_notation("{a=1,}")
        assert root.children == (LeafNode("a", "1"), LeafNode())

    def test_consecutive_commas_yield_empty_leaf(self):
        root = parse_notation("{a,,b}")
        assert root.children == (LeafNode(value="a"), LeafNode(), LeafNode(value="b"))

    def test_unwrapped_input_reads_to_end(self):
        root = parse_notation("a=1, b={c=2}")
        assert root.delimited is False
        assert root.kind == "{"
        assert root.children == (
            LeafNode("a", "1"),
            BlockNode(key="b", children=(LeafNode("c", "2"),)),
        )

    def test_unterminated_block_is_partial(self):
        root = parse_notation("{a=1,b={c=2")
        assert root.children == (
            LeafNode("a", "1"),
            BlockNode(key="b", children=(LeafNode("c", "2"),)),
        )

    def test_mismatched_closer_is_skipped(self):
        root, pos = parse_block("{a)}", 0)
        assert root.children == (LeafNode(value="a"),)
        assert pos == 4

    def test_position_after_closing_delimiter(self):
        root, pos = parse_block("{a=1} trailing", 0)
        assert root.children == (LeafNode("a", "1"),)
        assert pos == 5

    def test_parse_from_offset(self):
        block, pos = parse_block("x=(1,2)", 2)
        assert block == BlockNode(kind="(", children=(LeafNode(value="1"), LeafNode(value="2")))
        assert pos == 7

    def test_none_input_rejected(self):
        with pytest.raises(ValueError):
            parse_notation(None)

    def test_non_string_input_rejected(self):
        with pytest.raises(TypeError):
            parse_notation(42)


class TestIndentRenderer:
    """Tests for the indented pretty-print."""

    def test_flat_block(self):
        assert format_with_indentation("{a=1,b=2}") == "{\n  a = 1,\n  b = 2\n}\n"

    def test_nested_keyed_block(self):
        assert format_with_indentation("{outer={inner=5}}") == (
            "{\n  outer = {\n    inner = 5\n  }\n}\n"
        )

    def test_parenthesised_blocks(self):
        assert format_with_indentation("{a=(x,y)}") == "{\n  a = (\n    x,\n    y\n  )\n}\n"
        assert format_with_indentation("(p)") == "(\n  p\n)\n"

    def test_empty_input(self):
        assert format_with_indentation("") == "{}\n"

    def test_empty_nested_block(self):
        assert format_with_indentation("{a={}}") == "{\n  a = {}\n}\n"

    def test_anonymous_nested_block_opens_without_indent(self):
        assert format_with_indentation("{{a=1}}") == "{\n{\n    a = 1\n  }\n}\n"

    def test_trailing_comma(self):
        assert format_with_indentation("{a=1,}") == "{\n  a = 1,\n  \n}\n"

    def test_key_with_empty_value(self):
        assert format_with_indentation("{flag=}") == "{\n  flag = \n}\n"

    def test_unwrapped_input_renders_braces(self):
        assert format_with_indentation("a=1,b=2") == "{\n  a = 1,\n  b = 2\n}\n"

    def test_render_leaf_at_level(self):
        assert render_indented(LeafNode("k", "v"), 2) == "    k = v"
        assert render_indented(LeafNode(value="v"), 1) == "  v"

    def test_indent_str(self):
        assert indent_str(0) == ""
        assert indent_str(3) == "      "

    def test_none_input_rejected(self):
        with pytest.raises(ValueError):
            format_with_indentation(None)

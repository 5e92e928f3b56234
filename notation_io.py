from typing import List, Optional, Tuple

from box_render import render_box_rows
from node_models import CLOSING_DELIMITERS, BlockKind, BlockNode, LeafNode, Node
from text_utils import join, trim


_DELIMITERS = frozenset("=,{}()")
_OPENING = frozenset(CLOSING_DELIMITERS)
_CLOSING = frozenset(CLOSING_DELIMITERS.values())
_INDENT_STEP = 2


def _require_text(text: object) -> str:
    if text is None:
        raise ValueError("input text must not be None")
    if not isinstance(text, str):
        raise TypeError(f"input text must be str, not {type(text).__name__}")
    return text


def parse_token(text: str, pos: int) -> Tuple[str, int]:
    """Read one token starting at ``pos``.

    A token is the run of characters up to the next ``= , { } ( )`` or the end
    of input, with surrounding whitespace trimmed. Returns the token and the
    position of the first unconsumed character.
    """
    end = pos
    while end < len(text) and text[end] not in _DELIMITERS:
        end += 1
    return trim(text[pos:end]), end


def _at_block_end(text: str, pos: int, closing: Optional[str]) -> bool:
    if pos >= len(text):
        return True
    # An unwrapped block has no closer and runs to the end of input.
    if closing is None:
        return False
    return text[pos] == closing


def _parse_entry(text: str, pos: int) -> Tuple[Node, int]:
    lookahead_token, lookahead = parse_token(text, pos)

    if lookahead < len(text) and text[lookahead] == "=":
        key = lookahead_token
        pos = lookahead + 1
        if pos < len(text) and text[pos] in _OPENING:
            inner, pos = parse_block(text, pos)
            return BlockNode(key=key, kind=inner.kind, children=inner.children), pos
        value, pos = parse_token(text, pos)
        return LeafNode(key=key, value=value), pos

    if text[pos] in _OPENING:
        return parse_block(text, pos)

    value, pos = parse_token(text, pos)
    return LeafNode(value=value), pos


def parse_block(text: str, pos: int = 0) -> Tuple[BlockNode, int]:
    """Parse one block starting at ``pos`` and return it with the new position.

    Input that does not start with ``{`` or ``(`` is read as an unwrapped
    ``{`` block that ends at end of input. Malformed input never raises:
    unterminated blocks stop at end of input and closers that do not match
    the current block are skipped.

    Each nesting level costs two Python frames here (and two more in the box
    renderer), so nesting depth is bounded by the interpreter recursion limit:
    roughly ``sys.getrecursionlimit() // 2`` levels, beyond which
    ``RecursionError`` propagates.
    """
    kind: BlockKind = "{"
    closing: Optional[str] = None
    if pos < len(text) and text[pos] in _OPENING:
        kind = text[pos]  # type: ignore[assignment]
        closing = CLOSING_DELIMITERS[kind]
        pos += 1

    children: List[Node] = []
    while not _at_block_end(text, pos, closing):
        if text[pos] in _CLOSING:
            pos += 1
            continue

        child, pos = _parse_entry(text, pos)
        children.append(child)

        if pos < len(text) and text[pos] == ",":
            pos += 1
            # A trailing comma still produces one (empty) entry.
            if closing is not None and pos < len(text) and text[pos] == closing:
                children.append(LeafNode())

    if closing is not None and pos < len(text) and text[pos] == closing:
        pos += 1

    block = BlockNode(kind=kind, children=tuple(children), delimited=closing is not None)
    return block, pos


def parse_notation(text: str) -> BlockNode:
    """Parse a whole notation string into its root block."""
    root, _ = parse_block(_require_text(text), 0)
    return root


def indent_str(level: int) -> str:
    return " " * (level * _INDENT_STEP)


def render_indented(node: Node, indent_level: int = 0) -> str:
    """Render ``node`` with one entry per line and two spaces per level."""
    ind = indent_str(indent_level)

    if isinstance(node, LeafNode):
        if node.key:
            return f"{ind}{node.key} = {node.value}"
        return f"{ind}{node.value}"

    parts: List[str] = []
    if node.key:
        parts.append(f"{ind}{node.key} = ")
    parts.append(node.kind)
    if node.children:
        rendered = [render_indented(child, indent_level + 1) for child in node.children]
        parts.append("\n")
        parts.append(join(rendered, ",\n"))
        parts.append("\n")
        parts.append(ind)
    parts.append(node.closing)
    return "".join(parts)


def format_with_indentation(text: str) -> str:
    root = parse_notation(text)
    return render_indented(root, 0) + "\n"


def format_as_box(text: str) -> str:
    root = parse_notation(text)
    return "".join(f"{row}\n" for row in render_box_rows(root))

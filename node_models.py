from dataclasses import dataclass
from typing import Literal, Tuple, Union

BlockKind = Literal["{", "("]

CLOSING_DELIMITERS = {"{": "}", "(": ")"}


@dataclass(frozen=True)
class LeafNode:
    key: str = ""
    value: str = ""


@dataclass(frozen=True)
class BlockNode:
    key: str = ""
    kind: BlockKind = "{"
    children: Tuple["Node", ...] = ()
    # False only for a top-level block whose input had no opening delimiter;
    # such a block is read until end of input.
    delimited: bool = True

    @property
    def closing(self) -> str:
        return CLOSING_DELIMITERS[self.kind]


Node = Union[LeafNode, BlockNode]


def is_block(node: Node) -> bool:
    return isinstance(node, BlockNode)

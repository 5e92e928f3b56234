from dataclasses import dataclass
from typing import List, Tuple

from node_models import BlockNode, LeafNode, Node
from text_utils import trim

H_PAD = 3
V_PAD = 1
MIN_INNER = 8

BORDER_CHAR = "="
WALL_CHAR = "|"

Grid = List[List[str]]


@dataclass
class _ChildLayout:
    rows: List[str]

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        return len(self.rows)


def leaf_text(node: LeafNode) -> str:
    if node.key:
        if node.value:
            return f"{node.key} = {node.value}"
        return node.key
    return node.value


def _layout_child(child: Node) -> _ChildLayout:
    if isinstance(child, BlockNode):
        return _ChildLayout(render_box_rows(child))
    return _ChildLayout([leaf_text(child)])


def _box_size(node: BlockNode, layouts: List[_ChildLayout]) -> Tuple[int, int]:
    max_child_width = max((layout.width for layout in layouts), default=0)
    sum_child_height = sum(layout.height for layout in layouts)
    inner_content_width = max(MIN_INNER, len(trim(node.key)), max_child_width) + 2 * H_PAD
    width = inner_content_width + 2
    height = 1 + (len(layouts) + 1) * V_PAD + sum_child_height + 1
    return width, height


def _draw_title(row: List[str], key: str) -> None:
    decorated = f" {key} "
    width = len(row)
    left = (width - len(decorated)) // 2 if width > len(decorated) else 0
    for offset, char in enumerate(decorated):
        if left + offset >= width:
            break
        row[left + offset] = char


def _blit(grid: Grid, top: int, left: int, rows: List[str]) -> None:
    """Copy ``rows`` into the interior of ``grid``, clipping at the walls."""
    height = len(grid)
    width = len(grid[0])
    for r, source in enumerate(rows):
        y = top + r
        if y >= height - 1:
            break
        for c, char in enumerate(source):
            if left + c >= width - 1:
                break
            grid[y][left + c] = char


def render_box_rows(node: BlockNode) -> List[str]:
    """Render a block as a bordered box; every returned row has the same length.

    The top border carries the block's key as a centered title. Children are
    stacked top-down, left-justified inside the walls, nested blocks as their
    own boxes.
    """
    layouts = [_layout_child(child) for child in node.children]
    width, height = _box_size(node, layouts)

    grid: Grid = [[" "] * width for _ in range(height)]
    grid[0] = [BORDER_CHAR] * width
    if node.key:
        _draw_title(grid[0], node.key)
    grid[height - 1] = [BORDER_CHAR] * width
    for row in grid[1:-1]:
        row[0] = WALL_CHAR
        row[-1] = WALL_CHAR

    y = 1 + V_PAD
    x = 1 + H_PAD
    for layout in layouts:
        _blit(grid, y, x, layout.rows)
        y += layout.height + V_PAD

    return ["".join(row) for row in grid]

from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import Literal, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static, Tree, TextArea
from textual.widgets._tree import TreeNode
from rich.text import Text, TextType

from node_models import BlockNode, LeafNode, Node
from notation_io import format_as_box, format_with_indentation, parse_notation
from box_render import leaf_text
import render_log
from text_utils import collapse_whitespace, surround

View = Literal["box", "indent"]
VIEWS: tuple[View, ...] = ("box", "indent")
DEFAULT_VIEW: View = "box"
SAMPLE_NOTATION = "{name=braceview, views=(box, indent), keys={open=o, save=s, edit=e}}"


def _key_name_and_modifiers(key_value: str) -> tuple[str, set[str]]:
    parts = key_value.split("+")
    key_name = parts[-1].lower()
    modifiers = {part.lower() for part in parts[:-1] if part}
    return key_name, modifiers


def get_default_view() -> View:
    value = os.getenv("BRACEVIEW_VIEW", DEFAULT_VIEW).strip().lower()
    if value in VIEWS:
        return value  # type: ignore[return-value]
    return DEFAULT_VIEW


def render_text(text: str, view: str) -> str:
    if view == "box":
        return format_as_box(text)
    if view == "indent":
        return format_with_indentation(text)
    raise ValueError(f"Unknown view {view!r}; expected one of {', '.join(VIEWS)}")


class NotationTree(Tree[Node]):
    """Tree widget specialised for parsed notation nodes."""

    def process_label(self, label: TextType) -> Text:
        # Notation text may contain square brackets; never read it as markup.
        if isinstance(label, str):
            return Text(label, justify="left")
        return label


def summarize_notation(root: BlockNode) -> str:
    """One-line shape summary of a parsed tree: block, leaf and depth counts."""

    def count(node: BlockNode, depth: int) -> tuple[int, int, int]:
        blocks, leaves, deepest = 1, 0, depth
        for child in node.children:
            if isinstance(child, BlockNode):
                child_blocks, child_leaves, child_depth = count(child, depth + 1)
                blocks += child_blocks
                leaves += child_leaves
                deepest = max(deepest, child_depth)
            else:
                leaves += 1
        return blocks, leaves, deepest

    blocks, leaves, depth = count(root, 1)
    block_word = "block" if blocks == 1 else "blocks"
    leaf_word = "leaf" if leaves == 1 else "leaves"
    return f"{blocks} {block_word} · {leaves} {leaf_word} · depth {depth}"


class SourceTextArea(TextArea):
    """Notation editor; Enter submits, Shift+Enter inserts a line break."""

    class Submitted(Message):
        def __init__(self, textarea: "SourceTextArea") -> None:
            super().__init__()
            self.textarea = textarea
            self.text = textarea.text

    async def on_event(self, event: events.Event) -> None:  # noqa: D401
        if isinstance(event, events.Key):
            key_name, modifiers = _key_name_and_modifiers(event.key)
            if key_name == "enter" and "shift" not in modifiers:
                event.stop()
                self.post_message(self.Submitted(self))
                return
        await super().on_event(event)


class SourceEditorScreen(ModalScreen[dict[str, str] | None]):
    """Modal editor for the notation source with a live parse summary."""

    DEFAULT_CSS = """
    SourceEditorScreen {
        align: center middle;
        background: transparent;
    }

    #source-editor-panel {
        width: 92;
        height: auto;
        border: round $secondary;
        background: $surface 6%;
    }

    #source-editor-text {
        height: 14;
        border: none;
        padding: 0;
    }

    #source-editor-summary {
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, initial_text: str) -> None:
        super().__init__()
        self._initial_text = initial_text

    def compose(self) -> ComposeResult:
        with Vertical(id="source-editor-panel"):
            yield SourceTextArea(
                text=self._initial_text,
                id="source-editor-text",
                placeholder="{key=value, nested={...}, list=(a, b)}",
                soft_wrap=True,
            )
            yield Static("", id="source-editor-summary")

    def on_mount(self) -> None:
        textarea = self.query_one("#source-editor-text", SourceTextArea)
        textarea.focus()
        # Typing replaces the whole source; arrow keys keep it for small edits.
        textarea.action_select_all()
        self._update_summary(textarea.text)

    def _update_summary(self, text: str) -> None:
        summary = summarize_notation(parse_notation(text))
        self.query_one("#source-editor-summary", Static).update(Text(summary))

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._update_summary(event.text_area.text)

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            self.dismiss(None)

    def on_source_text_area_submitted(self, message: SourceTextArea.Submitted) -> None:
        message.stop()
        self.dismiss({"action": "apply", "text": message.text})


class OpenPathScreen(ModalScreen[dict[str, str] | None]):
    """Modal prompt for the path of a notation file to open."""

    DEFAULT_CSS = """
    OpenPathScreen {
        align: center middle;
        background: transparent;
    }

    #open-path-field {
        width: 60;
        border: round $secondary;
        background: $surface;
    }
    """

    def __init__(self, initial_path: str) -> None:
        super().__init__()
        self._initial_path = initial_path

    def compose(self) -> ComposeResult:
        yield Input(
            value=self._initial_path,
            placeholder="path/to/notation.txt",
            id="open-path-field",
        )

    def on_mount(self) -> None:
        self.query_one("#open-path-field", Input).focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        path = event.value.strip()
        self.dismiss({"action": "open", "path": path} if path else None)


class BraceViewApp(App[None]):
    """Textual viewer showing a parsed notation tree next to its rendering."""

    TITLE = "braceview"

    CSS = """
    #main {
        height: 1fr;
    }
    #notation-tree {
        width: 1fr;
    }
    #preview-pane {
        width: 2fr;
        overflow-x: auto;
    }
    #preview {
        width: auto;
    }
    #notation-tree .tree--cursor,
    #notation-tree:focus .tree--cursor {
        text-style: none;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("s", "save", "Save"),
        Binding("o", "open", "Open"),
        Binding("e", "edit_source", "Edit"),
        Binding("v", "toggle_view", "Box/Indent"),
        Binding("a", "expand_all", "Expand All"),
        Binding("left", "collapse_cursor", "Collapse", show=False),
        Binding("right", "expand_cursor", "Expand", show=False),
    ]

    def __init__(
        self,
        initial_path: str | Path | None = None,
        view: View | None = None,
    ) -> None:
        super().__init__()
        self.title = "braceview"
        self._tree_widget: Optional[NotationTree] = None
        self.source_text = SAMPLE_NOTATION
        self.root_node: BlockNode = parse_notation(self.source_text)
        self.view_mode: View = view or get_default_view()
        self.rendered_text = ""
        self._active_path: Optional[Path] = None
        self._initial_load_path: Optional[Path] = (
            Path(initial_path).expanduser() if initial_path else None
        )
        render_log.reset_render_log()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            tree = NotationTree("Notation", id="notation-tree")
            tree.show_root = True
            self._tree_widget = tree
            yield tree
            with VerticalScroll(id="preview-pane"):
                yield Static("", id="preview")
        yield Footer()

    def on_mount(self) -> None:
        loaded = False
        if self._initial_load_path:
            loaded = self.load_path(self._initial_load_path)
        if not loaded:
            self.apply_source(self.source_text)

    def require_tree(self) -> NotationTree:
        if self._tree_widget is None:
            raise RuntimeError("Tree widget not initialised")
        return self._tree_widget

    def get_selected_tree_node(self) -> Optional[TreeNode[Node]]:
        return self.require_tree().cursor_node

    def _source_label(self) -> str:
        return str(self._active_path) if self._active_path else "<buffer>"

    @staticmethod
    def _format_node_label(node: Node) -> Text:
        if isinstance(node, LeafNode):
            return Text(collapse_whitespace(leaf_text(node)))
        braces = surround("…" if node.children else "", node.kind, node.closing)
        if node.key:
            return Text.assemble((node.key, "bold"), " ", (braces, "dim"))
        return Text(braces, style="dim")

    def apply_source(self, text: str) -> None:
        self.source_text = text
        self.root_node = parse_notation(text)
        self.rebuild_tree()
        self.refresh_preview()

    def rebuild_tree(self) -> None:
        tree = self.require_tree()
        tree.clear()
        self.populate_tree(tree.root, self.root_node)
        tree.root.expand_all()
        tree.select_node(tree.root)
        tree.focus()

    def populate_tree(self, tree_node: TreeNode[Node], node: BlockNode) -> None:
        tree_node.set_label(self._format_node_label(node))
        tree_node.data = node
        for child in node.children:
            label = self._format_node_label(child)
            if isinstance(child, BlockNode):
                self.populate_tree(tree_node.add(label, data=child), child)
            else:
                tree_node.add_leaf(label, data=child)

    def refresh_preview(self) -> None:
        self.rendered_text = render_text(self.source_text, self.view_mode)
        preview = self.query_one("#preview", Static)
        preview.update(Text(self.rendered_text, no_wrap=True))
        line_count = self.rendered_text.count("\n")
        render_log.log_render_event("OK", self.view_mode, self._source_label(), f"{line_count} lines")
        self.show_status()

    def load_path(self, path: Path) -> bool:
        target = path.expanduser()
        if not target.exists():
            self.bell()
            self.show_status(f"{target} not found.")
            render_log.log_render_event("FAIL", self.view_mode, str(target), "not found")
            return False
        try:
            text = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.bell()
            self.show_status(f"Failed to load {target}: {exc}")
            render_log.log_render_event("FAIL", self.view_mode, str(target), str(exc))
            return False
        self._active_path = target
        self.apply_source(text)
        self.show_status(f"Loaded {target}")
        return True

    def output_path(self) -> Path:
        if self._active_path:
            return self._active_path.with_name(f"{self._active_path.stem}.{self.view_mode}.txt")
        return Path.cwd() / f"untitled.{self.view_mode}.txt"

    def action_save(self) -> None:
        path = self.output_path()
        try:
            path.write_text(self.rendered_text, encoding="utf-8")
        except OSError as exc:
            self.bell()
            self.show_status(f"Failed to save {path}: {exc}")
            render_log.log_render_event("FAIL", self.view_mode, str(path), str(exc))
            return
        render_log.log_render_event("SAVED", self.view_mode, str(path))
        self.show_status(f"Saved to {path}")

    def action_open(self) -> None:
        def apply_path(result: dict[str, str] | None) -> None:
            if not isinstance(result, dict) or not result.get("path", "").strip():
                self.show_status("Nothing opened.")
                return
            self.load_path(Path(result["path"].strip()))

        initial = str(self._active_path) if self._active_path else ""
        self.push_screen(OpenPathScreen(initial), apply_path)

    def action_edit_source(self) -> None:
        def apply_edit(result: dict[str, str] | None) -> None:
            if not isinstance(result, dict) or result.get("action") != "apply":
                self.show_status("Source unchanged.")
                return
            self.apply_source(result.get("text", ""))
            self.show_status("Source updated.")

        self.push_screen(SourceEditorScreen(self.source_text), apply_edit)

    def action_toggle_view(self) -> None:
        index = VIEWS.index(self.view_mode)
        self.view_mode = VIEWS[(index + 1) % len(VIEWS)]
        self.refresh_preview()

    def action_expand_all(self) -> None:
        tree = self.require_tree()
        target = self.get_selected_tree_node() or tree.root
        target.expand_all()

    def action_collapse_cursor(self) -> None:
        node = self.get_selected_tree_node()
        if node:
            node.collapse()

    def action_expand_cursor(self) -> None:
        node = self.get_selected_tree_node()
        if node:
            node.expand()

    def show_status(self, message: str | None = None) -> None:
        view_text = f"{self.view_mode} view"
        composed = f"{view_text} · {message}" if message else view_text
        self.sub_title = f"{composed} | Source: {self._source_label()}"


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    print_view: Optional[str] = None
    if args and args[0] in ("--box", "--indent"):
        print_view = args.pop(0)[2:]

    path = args[0] if args else None
    if print_view is None:
        BraceViewApp(path).run()
        return 0

    source = path or "-"
    try:
        if source == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"braceview: cannot read {source}: {exc}", file=sys.stderr)
        render_log.log_render_event("FAIL", print_view, source, str(exc))
        return 1

    sys.stdout.write(render_text(text, print_view))
    render_log.log_render_event("OK", print_view, source)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Unit tests for the display runtime: layout and effect dispatch."""

from __future__ import annotations

import pytest

from lspinstall.ui import tree
from lspinstall.ui.display import DisplayOptions, EffectEvent, create_view, render_tree


def _plain(node: tree.ViewNode, width: int = 20) -> list[str]:
    return [line.plain for line in render_tree(node, width)]


class TestRenderTree:
    def test_indent_is_cumulative(self) -> None:
        node = tree.node(
            [
                tree.text("root"),
                tree.indent([tree.text("one"), tree.indent([tree.text("two")])]),
            ]
        )
        assert _plain(node) == ["root", "  one", "    two"]

    def test_centered(self) -> None:
        assert _plain(tree.centered([tree.text("abcd")]), width=10) == ["   abcd"]

    def test_centered_wider_than_window(self) -> None:
        assert _plain(tree.centered([tree.text("abcdefgh")]), width=4) == ["abcdefgh"]

    def test_text_splits_newlines(self) -> None:
        assert _plain(tree.text("a\nb")) == ["a", "b"]

    def test_hl_text_joins_spans(self) -> None:
        node = tree.hl_text([[("◍", "Green"), (" vimls", "")]])
        assert _plain(node) == ["◍ vimls"]

    def test_visible_if(self) -> None:
        node = tree.node([tree.when(False, tree.text("hidden")), tree.when(True, tree.text("shown"))])
        assert _plain(node) == ["shown"]

    def test_empty_line(self) -> None:
        assert _plain(tree.node([tree.text("a"), tree.EmptyLine(), tree.text("b")])) == ["a", "", "b"]

    def test_table_aligns_keys(self) -> None:
        node = tree.table([(("a", ""), ("1", "")), None, (("long key", ""), ("2", ""))])
        assert _plain(node) == ["a         1", "long key  2"]

    def test_keybind_attaches_to_previous_line(self) -> None:
        node = tree.node(
            [
                tree.text("first"),
                tree.text("second"),
                tree.keybind("enter", "OPEN", ["second"]),
            ]
        )
        lines = render_tree(node)
        assert lines[0].keybinds == ()
        assert lines[1].keybinds == (tree.Keybind("enter", "OPEN", ("second",)),)

    def test_leading_keybind_is_dropped(self) -> None:
        lines = render_tree(tree.node([tree.keybind("enter", "OPEN"), tree.text("a")]))
        assert lines[0].keybinds == ()

    def test_styles_applied(self) -> None:
        lines = render_tree(tree.text("x", "Error"), styles={"Error": "red"})
        assert str(lines[0].text.spans[0].style) == "red"

    def test_unknown_node_rejected(self) -> None:
        with pytest.raises(TypeError):
            render_tree(object())  # type: ignore[arg-type]

    def test_same_tree_same_lines(self) -> None:
        node = tree.indent([tree.text("a"), tree.keybind("i", "INSTALL", ["a"])])
        assert [(line.plain, line.keybinds) for line in render_tree(node)] == [
            (line.plain, line.keybinds) for line in render_tree(node)
        ]


class TestDisplayHandle:
    def test_init_requires_view(self) -> None:
        window = create_view("test")
        with pytest.raises(RuntimeError):
            window.init({})

    def test_init_renders_initial_state(self) -> None:
        window = create_view("test")
        window.view(lambda state: tree.text(state["label"]))
        window.init({"label": "hello"})
        assert [line.plain for line in window.lines] == ["hello"]

    def test_mutation_rerenders(self) -> None:
        window = create_view("test")
        window.view(lambda state: tree.text(state["label"]))
        mutate_state, get_state = window.init({"label": "before"})
        mutate_state(lambda s: s.update(label="after"))
        assert get_state() == {"label": "after"}
        assert [line.plain for line in window.lines] == ["after"]

    def test_dispatch_invokes_effect_with_payload(self) -> None:
        events: list[EffectEvent] = []
        window = create_view("test")
        window.view(lambda state: tree.node([tree.text("row"), tree.keybind("enter", "OPEN", ["row"])]))
        window.init({})
        window.open(DisplayOptions(effects={"OPEN": events.append}))
        assert window.dispatch("enter", 0) is True
        assert events == [EffectEvent(("row",))]

    def test_dispatch_wrong_key_or_line(self) -> None:
        window = create_view("test")
        window.view(lambda state: tree.node([tree.text("row"), tree.keybind("enter", "OPEN")]))
        window.init({})
        window.open(DisplayOptions(effects={"OPEN": lambda event: None}))
        assert window.dispatch("i", 0) is False
        assert window.dispatch("enter", 5) is False
        assert window.dispatch("enter", -1) is False

    def test_unregistered_effect_is_ignored(self) -> None:
        window = create_view("test")
        window.view(lambda state: tree.node([tree.text("row"), tree.keybind("enter", "MISSING")]))
        window.init({})
        window.open(DisplayOptions())
        assert window.dispatch("enter", 0) is False

    def test_open_applies_width(self) -> None:
        window = create_view("test")
        window.view(lambda state: tree.centered([tree.text("ab")]))
        window.init({})
        window.open(DisplayOptions(width=10))
        assert window.lines[0].plain == "    ab"

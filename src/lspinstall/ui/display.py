"""
Display runtime: turns view trees into rendered lines and key presses into effects.

The layout step (render_tree) is pure and has no Textual dependency. The
Textual surface in lspinstall.ui.app only paints RenderedLines and reports
which key was pressed on which line.

Usage::

    window = create_view("LSP servers")
    window.view(lambda state: build_tree(state))
    mutate_state, get_state = window.init(initial_state)
    app = window.open(DisplayOptions(width=95, effects={"EXPAND": on_expand}))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog
from rich.text import Text

from lspinstall.core.constants import DEFAULT_WINDOW_WIDTH
from lspinstall.ui.store import StateStore
from lspinstall.ui.tree import (
    CascadingStyle,
    CascadingStyleNode,
    EmptyLine,
    HlTextNode,
    Keybind,
    Node,
    Span,
    Table,
    ViewNode,
    VisibleIfNode,
)

if TYPE_CHECKING:
    from lspinstall.ui.app import StatusApp

logger = structlog.get_logger()

S = TypeVar("S")

INDENT_WIDTH = 2


@dataclass(frozen=True)
class RenderedLine:
    text: Text
    keybinds: tuple[Keybind, ...] = ()

    @property
    def plain(self) -> str:
        return self.text.plain


@dataclass(frozen=True)
class EffectEvent:
    payload: tuple[str, ...]


EffectHandler = Callable[[EffectEvent], None]


@dataclass
class DisplayOptions:
    width: int = DEFAULT_WINDOW_WIDTH
    highlight_groups: Mapping[str, str] = field(default_factory=dict)
    effects: Mapping[str, EffectHandler] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Context:
    indent: int = 0
    centered: bool = False


class _Layout:
    def __init__(self, width: int, styles: Mapping[str, str]) -> None:
        self.width = width
        self.styles = styles
        self.lines: list[RenderedLine] = []

    def _style(self, name: str) -> str:
        return self.styles.get(name, "")

    def _emit(self, spans: list[Span], ctx: _Context) -> None:
        line = Text(no_wrap=True, overflow="ellipsis")
        for value, style in spans:
            line.append(value, style=self._style(style))
        if ctx.centered:
            pad = max((self.width - line.cell_len) // 2, 0)
        else:
            pad = ctx.indent * INDENT_WIDTH
        if pad:
            line.pad_left(pad)
        self.lines.append(RenderedLine(line))

    def walk(self, node: ViewNode, ctx: _Context) -> None:
        if isinstance(node, Node):
            for child in node.children:
                self.walk(child, ctx)
        elif isinstance(node, HlTextNode):
            for spans in node.lines:
                self._emit(list(spans), ctx)
        elif isinstance(node, Table):
            key_width = max((len(key[0]) for key, _ in node.rows), default=0)
            for (key, key_style), (value, value_style) in node.rows:
                self._emit([(key.ljust(key_width) + "  ", key_style), (value, value_style)], ctx)
        elif isinstance(node, CascadingStyleNode):
            for style in node.styles:
                if style is CascadingStyle.INDENT:
                    ctx = replace(ctx, indent=ctx.indent + 1)
                elif style is CascadingStyle.CENTERED:
                    ctx = replace(ctx, centered=True)
            for child in node.children:
                self.walk(child, ctx)
        elif isinstance(node, VisibleIfNode):
            if node.condition:
                self.walk(node.child, ctx)
        elif isinstance(node, Keybind):
            # Binds to the line rendered just before it.
            if self.lines:
                last = self.lines[-1]
                self.lines[-1] = replace(last, keybinds=last.keybinds + (node,))
        elif isinstance(node, EmptyLine):
            self.lines.append(RenderedLine(Text("")))
        else:
            raise TypeError(f"Unknown view node: {node!r}")


def render_tree(
    tree: ViewNode,
    width: int = DEFAULT_WINDOW_WIDTH,
    styles: Mapping[str, str] | None = None,
) -> list[RenderedLine]:
    """Flatten *tree* into lines, applying indentation, centering and styles."""
    layout = _Layout(width, styles or {})
    layout.walk(tree, _Context())
    return layout.lines


# ---------------------------------------------------------------------------
# Display handle
# ---------------------------------------------------------------------------


class DisplayHandle(Generic[S]):
    """A view-only window: a view function, a state store, and an optional surface."""

    def __init__(self, title: str) -> None:
        self.title = title
        self._view: Callable[[S], ViewNode] | None = None
        self._store: StateStore[S] | None = None
        self._options = DisplayOptions()
        self._tree: ViewNode | None = None
        self._lines: list[RenderedLine] = []
        self._app: StatusApp | None = None
        self._surface_attached = False

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def view(self, fn: Callable[[S], ViewNode]) -> None:
        self._view = fn

    def init(self, initial: S) -> tuple[Callable[[Callable[[S], None]], None], Callable[[], S]]:
        """Create the backing store. Returns (mutate_state, get_state)."""
        if self._view is None:
            raise RuntimeError("view() must be called before init()")
        self._store = StateStore(initial)
        self._store.subscribe(self._render)
        self._render(self._store.get_state())
        return self._store.mutate_state, self._store.get_state

    def open(self, options: DisplayOptions) -> StatusApp:
        """Create the Textual surface. Calling open() again returns the same app."""
        self._options = options
        if self._store is not None:
            self._render(self._store.get_state())
        if self._app is None:
            from lspinstall.ui.app import StatusApp

            self._app = StatusApp(self)
        return self._app

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def store(self) -> StateStore[S] | None:
        return self._store

    @property
    def tree(self) -> ViewNode | None:
        return self._tree

    @property
    def lines(self) -> list[RenderedLine]:
        return self._lines

    @property
    def options(self) -> DisplayOptions:
        return self._options

    def _render(self, state: S) -> None:
        assert self._view is not None
        self._tree = self._view(state)
        self._lines = render_tree(self._tree, self._options.width, self._options.highlight_groups)
        if self._app is not None and self._surface_attached:
            self._app.refresh_surface(self._lines)

    def attach_surface(self) -> None:
        self._surface_attached = True

    def detach_surface(self) -> None:
        self._surface_attached = False

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def dispatch(self, key: str, line_index: int) -> bool:
        """Invoke the effect bound to *key* on line *line_index*. Returns True if one ran."""
        if not (0 <= line_index < len(self._lines)):
            return False
        for binding in self._lines[line_index].keybinds:
            if binding.key != key:
                continue
            handler = self._options.effects.get(binding.effect)
            if handler is None:
                logger.warning("effect_not_registered", effect=binding.effect)
                return False
            handler(EffectEvent(binding.payload))
            return True
        return False


def create_view(title: str) -> DisplayHandle:
    return DisplayHandle(title)

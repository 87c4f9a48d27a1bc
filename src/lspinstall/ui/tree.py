"""
View tree: the declarative structure a view function returns.

Nodes are frozen dataclasses, so two trees built from the same snapshot
compare equal. Conditional subtrees carry an evaluated boolean and an
already-built child; nothing in a tree is a deferred callable.

Building blocks::

    Node([...])                           plain grouping
    HlTextNode([[("text", "Style")]])     lines of styled spans
    Table([[("key", "Style"), ("value", "")]])
    CascadingStyleNode([INDENT], [...])   indent / center children
    VisibleIfNode(cond, child)            child only rendered when cond
    Keybind("enter", "EFFECT", payload)   binds a key on the preceding line
    EmptyLine()
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

Span = tuple[str, str]  # (text, style name; "" for none)
Line = tuple[Span, ...]


class CascadingStyle(Enum):
    INDENT = "indent"
    CENTERED = "centered"


@dataclass(frozen=True)
class Node:
    children: tuple[ViewNode, ...] = ()


@dataclass(frozen=True)
class HlTextNode:
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[Span, Span], ...] = ()


@dataclass(frozen=True)
class CascadingStyleNode:
    styles: tuple[CascadingStyle, ...]
    children: tuple[ViewNode, ...] = ()


@dataclass(frozen=True)
class VisibleIfNode:
    condition: bool
    child: ViewNode


@dataclass(frozen=True)
class Keybind:
    key: str
    effect: str
    payload: tuple[str, ...] = ()


@dataclass(frozen=True)
class EmptyLine:
    pass


ViewNode = Union[Node, HlTextNode, Table, CascadingStyleNode, VisibleIfNode, Keybind, EmptyLine]


# ---------------------------------------------------------------------------
# Constructors that accept lists (views read nicer that way)
# ---------------------------------------------------------------------------


def node(children: Iterable[ViewNode]) -> Node:
    return Node(tuple(children))


def hl_text(lines: Iterable[Iterable[Span]]) -> HlTextNode:
    return HlTextNode(tuple(tuple(line) for line in lines))


def text(value: str, style: str = "") -> HlTextNode:
    """Plain text; embedded newlines become separate lines."""
    return HlTextNode(tuple(((line, style),) for line in value.split("\n")))


def table(rows: Iterable[tuple[Span, Span] | None]) -> Table:
    """Two-column table; None rows are dropped."""
    return Table(tuple(row for row in rows if row is not None))


def indent(children: Iterable[ViewNode]) -> CascadingStyleNode:
    return CascadingStyleNode((CascadingStyle.INDENT,), tuple(children))


def centered(children: Iterable[ViewNode]) -> CascadingStyleNode:
    return CascadingStyleNode((CascadingStyle.CENTERED,), tuple(children))


def when(condition: object, child: ViewNode) -> VisibleIfNode:
    return VisibleIfNode(bool(condition), child)


def keybind(key: str, effect: str, payload: Iterable[str] = ()) -> Keybind:
    return Keybind(key, effect, tuple(payload))

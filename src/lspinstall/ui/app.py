"""
lspinstall UI — Textual surface that paints a DisplayHandle's rendered lines.

Widget tree::

    Header
    #surface  (OptionList — one option per rendered line)
    Footer

Keybindings:
  enter — keybind "enter" on the highlighted line
  i     — keybind "i" on the highlighted line
  X     — keybind "X" on the highlighted line
  q / escape — quit
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, OptionList

if TYPE_CHECKING:
    from lspinstall.ui.display import DisplayHandle, RenderedLine


class StatusApp(App):  # type: ignore[type-arg]
    """Interactive status window."""

    CSS = """
    #surface {
        height: 1fr;
        border: none;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "app.quit", "Quit", show=False, priority=True),
        Binding("q", "app.quit", "Quit", show=True),
        Binding("escape", "app.quit", "Quit", show=False),
        Binding("i", "keybind('i')", "Install", show=True),
        Binding("X", "keybind('X')", "Uninstall", show=True),
    ]

    def __init__(self, handle: DisplayHandle) -> None:
        super().__init__()
        self._handle = handle
        self.title = handle.title

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield OptionList(id="surface")
        yield Footer()

    def on_mount(self) -> None:
        surface = self.query_one("#surface", OptionList)
        surface.styles.width = self._handle.options.width
        self._handle.attach_surface()
        self.refresh_surface(self._handle.lines)
        surface.focus()

    def on_unmount(self) -> None:
        self._handle.detach_surface()

    def refresh_surface(self, lines: list[RenderedLine]) -> None:
        surface = self.query_one("#surface", OptionList)
        highlighted = surface.highlighted
        surface.clear_options()
        surface.add_options([line.text for line in lines])
        if lines:
            surface.highlighted = min(highlighted or 0, len(lines) - 1)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self._handle.dispatch("enter", event.option_index)

    def action_keybind(self, key: str) -> None:
        surface = self.query_one("#surface", OptionList)
        if surface.highlighted is not None:
            self._handle.dispatch(key, surface.highlighted)

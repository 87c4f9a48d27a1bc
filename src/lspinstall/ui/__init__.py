"""
lspinstall interactive status window — ``src/lspinstall/ui/``.

state.py, store.py, tree.py, status_view.py and display.py are pure Python and
testable without a terminal; app.py holds the Textual surface.

Entry point::

    from lspinstall.ui.status_window import StatusWindow
    window = StatusWindow(registry.get_available_servers())
    app = window.open()
"""

"""
lspinstall — manage language servers from an interactive terminal view.

Entry points::

    lspinstall ui                  # open the status window
    lspinstall install pyright     # queue installs and watch them run
"""

__version__ = "0.4.0"

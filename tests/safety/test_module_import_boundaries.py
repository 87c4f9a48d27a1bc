"""Safety tests: module import boundary enforcement.

Keeps the layers of lspinstall independent:
  - core/ is a leaf and imports nothing else from lspinstall
  - servers/ never reaches into the UI
  - the state, layout and queue modules stay importable without Textual
"""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src" / "lspinstall"

TEXTUAL_FREE = ("state.py", "store.py", "tree.py", "status_view.py", "display.py", "queue.py")


def _collect_imports(filepath: Path) -> list[str]:
    """Return all import source strings from a Python file."""
    try:
        tree = ast.parse(filepath.read_text(), filename=str(filepath))
    except SyntaxError:
        return []

    imports: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            imports.append(node.module)
        elif isinstance(node, ast.Import):
            for alias in node.names:
                imports.append(alias.name)
    return imports


def _violations(directory: Path, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for pyfile in directory.rglob("*.py"):
        for imp in _collect_imports(pyfile):
            if imp.startswith(forbidden):
                found.append(f"{pyfile.relative_to(ROOT)}: {imp}")
    return found


def test_core_is_a_leaf() -> None:
    """core/ must not import from servers/, ui/ or cli/."""
    violations = _violations(SRC / "core", ("lspinstall.servers", "lspinstall.ui", "lspinstall.cli"))
    assert not violations, "core/ must stay free of higher layers:\n" + "\n".join(
        f"  - {v}" for v in violations
    )


def test_servers_do_not_import_ui() -> None:
    """servers/ must not import from ui/ or cli/."""
    violations = _violations(SRC / "servers", ("lspinstall.ui", "lspinstall.cli", "textual"))
    assert not violations, "servers/ must not depend on the UI:\n" + "\n".join(
        f"  - {v}" for v in violations
    )


def test_pure_ui_modules_do_not_import_textual() -> None:
    """State, view and layout modules must be testable without a Textual app."""
    violations: list[str] = []
    for name in TEXTUAL_FREE:
        pyfile = SRC / "ui" / name
        for imp in _collect_imports(pyfile):
            if imp.startswith("textual"):
                violations.append(f"{pyfile.relative_to(ROOT)}: {imp}")

    assert not violations, "pure ui modules must not import textual:\n" + "\n".join(
        f"  - {v}" for v in violations
    )


def test_textual_confined_to_app() -> None:
    """Only ui/app.py talks to Textual directly."""
    offenders = sorted(
        str(pyfile.relative_to(ROOT))
        for pyfile in SRC.rglob("*.py")
        if pyfile.name != "app.py" and any(imp.startswith("textual") for imp in _collect_imports(pyfile))
    )
    assert offenders == []

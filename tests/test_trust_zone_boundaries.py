"""Dependency rules: domain and receipt parsing stay pure."""

from __future__ import annotations

import ast
from pathlib import Path

_PACKAGE = Path(__file__).resolve().parents[1] / "billscan"
_PURE_DIRS = ("domain", "receipt")
_FORBIDDEN_PREFIXES = (
    "billscan.runtime",
    "billscan.application",
    "billscan.cli",
    "httpx",
    "fastapi",
    "uvicorn",
)


def _imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            modules.add(node.module)
    return modules


def _pure_files() -> list[Path]:
    return sorted(path for name in _PURE_DIRS for path in (_PACKAGE / name).rglob("*.py"))


def test_pure_zone_has_files() -> None:
    assert _pure_files()


def test_pure_zone_does_not_import_runtime_or_network() -> None:
    violations = []
    for path in _pure_files():
        for module in sorted(_imported_modules(path)):
            if any(module == prefix or module.startswith(f"{prefix}.") for prefix in _FORBIDDEN_PREFIXES):
                violations.append(f"{path.relative_to(_PACKAGE)} imports {module}")

    assert violations == []

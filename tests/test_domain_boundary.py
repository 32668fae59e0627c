"""Architecture boundary checks: pure layers stay free of runtime services."""

from __future__ import annotations

import ast
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1] / "pocketledger"


def _imports(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    result: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                result.append(alias.name)
        elif isinstance(node, ast.ImportFrom):
            base = "." * node.level + (node.module or "")
            result.append(base)
    return result


def _violations(subpackage: str, forbidden: tuple[str, ...]) -> list[str]:
    violations: list[str] = []
    for path in sorted((PACKAGE_DIR / subpackage).rglob("*.py")):
        for mod in _imports(path):
            if any(mod == prefix or mod.startswith(f"{prefix}.") for prefix in forbidden):
                violations.append(f"{path}: {mod}")
    return violations


def test_domain_does_not_import_outer_layers() -> None:
    violations = _violations(
        "domain",
        ("pocketledger.runtime", "pocketledger.ledger", "pocketledger.application", "pocketledger.cli"),
    )
    assert not violations, "Domain -> outer layer import violations:\n" + "\n".join(violations)


def test_receipt_parser_does_not_import_runtime() -> None:
    violations = _violations("receipt", ("pocketledger.runtime", "httpx", "fastapi"))
    assert not violations, "Receipt parser -> runtime import violations:\n" + "\n".join(violations)

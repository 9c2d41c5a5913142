from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        if "dist" in path.parts:
            continue
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.module or ""


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "bursar_core"):
        for name in _imported_modules(path):
            if name == "bursar_infra" or name.startswith("bursar_infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_balance_resolver_stays_free_of_persistence():
    resolver_root = ROOT / "bursar_core" / "services" / "balances"
    offenders = [
        (str(path.relative_to(ROOT)), name)
        for path in _python_files(resolver_root)
        for name in _imported_modules(path)
        if name.startswith("sqlalchemy")
    ]

    assert not offenders, f"Balance resolver must stay pure: {offenders}"


def test_inventory_logs_are_never_rewritten():
    repo = ROOT / "bursar_infra" / "db" / "inventory" / "repository.py"
    tree = ast.parse(repo.read_text(encoding="utf-8"))
    log_repo = next(
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.ClassDef) and node.name == "SqlAlchemyInventoryLogRepository"
    )
    methods = {node.name for node in log_repo.body if isinstance(node, ast.FunctionDef)}

    assert "update" not in methods
    assert "delete" not in methods

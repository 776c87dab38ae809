#!/usr/bin/env python3
"""
Validate architectural layering via import rules.

This script is intended to run as a local pre-commit hook.
It checks that imports under `src/settingsstore` follow the intended
dependency direction:
- application -> infrastructure -> domain -> shared
- lower layers must not import higher layers
"""

from __future__ import annotations

import ast
import sys
from dataclasses import dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE = "settingsstore"
PACKAGE_ROOT = PROJECT_ROOT / "src" / PACKAGE


INTERNAL_LAYERS = {
    "application",
    "infrastructure",
    "domain",
    "shared",
}


SKIP_DIR_PARTS = {
    ".git",
    ".venv",
    "__pycache__",
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
}


LAYER_FORBIDDEN: dict[str, set[str]] = {
    # Use cases orchestrate; nothing imports them from below.
    "application": set(),
    # Persistence may use the domain but not the use cases.
    "infrastructure": {"application"},
    # The store itself is pure (no file/YAML access).
    "domain": {"application", "infrastructure"},
    # Constants and logging helpers depend on nothing internal.
    "shared": {"application", "infrastructure", "domain"},
}


@dataclass(frozen=True)
class Violation:
    path: Path
    lineno: int
    layer: str
    imported: str
    message: str

    def format(self) -> str:
        return f"{self.path}:{self.lineno}: [{self.layer}] {self.message} ({self.imported!r})"


def _should_skip_path(path: Path) -> bool:
    return any(part in SKIP_DIR_PARTS for part in path.parts)


def _detect_layer(path: Path, package_root: Path) -> str | None:
    """
    Determine the 'layer' for a file based on its directory under the package.
    Returns None for files outside known layers.
    """
    try:
        rel = path.relative_to(package_root)
    except ValueError:
        return None

    if len(rel.parts) < 2:
        return None

    root = rel.parts[0]
    if root in INTERNAL_LAYERS:
        return root
    return None


def _iter_python_files(package_root: Path) -> list[Path]:
    files: list[Path] = []
    for layer in sorted(INTERNAL_LAYERS):
        base = package_root / layer
        if not base.exists():
            continue
        for path in base.rglob("*.py"):
            if _should_skip_path(path):
                continue
            files.append(path)
    return sorted(files)


def _extract_imports(tree: ast.AST) -> list[tuple[int, str]]:
    """
    Return a list of (lineno, module) for absolute imports.
    - `import x.y` -> "x.y"
    - `from x.y import z` -> "x.y"
    """
    found: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                name = str(alias.name or "")
                if name:
                    found.append((int(node.lineno), name))
        elif isinstance(node, ast.ImportFrom):
            # Skip relative imports; they are within a package.
            if node.level and node.level > 0:
                continue
            module = str(node.module or "")
            if module:
                found.append((int(node.lineno), module))
    return found


def _imported_layer(module: str) -> str | None:
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in INTERNAL_LAYERS else None


def check_file(path: Path, package_root: Path = PACKAGE_ROOT) -> list[Violation]:
    layer = _detect_layer(path, package_root)
    if not layer:
        return []

    forbidden = LAYER_FORBIDDEN.get(layer, set())
    if not forbidden:
        return []

    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        return [Violation(path=path, lineno=0, layer=layer, imported="", message=f"读取失败：{e}")]

    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as e:
        lineno = int(getattr(e, "lineno", 0) or 0)
        return [
            Violation(path=path, lineno=lineno, layer=layer, imported="", message=f"语法错误：{e}")
        ]

    violations: list[Violation] = []
    for lineno, module in _extract_imports(tree):
        target = _imported_layer(module)
        if target in forbidden:
            violations.append(
                Violation(
                    path=path,
                    lineno=lineno,
                    layer=layer,
                    imported=module,
                    message=f"禁止依赖内部层：{target}",
                )
            )

    return violations


def main(package_root: Path = PACKAGE_ROOT) -> int:
    violations: list[Violation] = []
    for path in _iter_python_files(package_root):
        violations.extend(check_file(path, package_root))

    if violations:
        print("ERROR: 分层依赖校验失败：检测到不允许的跨层 import。", file=sys.stderr)
        for v in violations:
            print(f"- {v.format()}", file=sys.stderr)
        print("建议：调整依赖方向（上层依赖下层），或将胶水逻辑上移到 application。", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

# File: nestgen/writer.py
"""
nestgen - Incremental Code Writer
=================================
Accumulates output lines behind an explicit indent stack, plus an import
table mapping each module to the symbols taken from it.

Rendering puts one ``import { A, B } from 'module';`` line per module, in
first-registration order, above the body.
"""

from __future__ import annotations

import logging
from typing import Dict, List

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.writer")

DEFAULT_INDENT: str = "    "


class CodeWriter:
    """
    Line buffer with indentation and a de-duplicated import table.

    Usage::

        writer = CodeWriter("  ")
        writer.add_import("Entity", "typeorm")
        writer.write_line("@Entity()")
        writer.write_line("export class Order {")
        writer.indent()
        ...
        source = writer.render()
    """

    __slots__ = ("indent_unit", "_lines", "_indentations", "_imports")

    def __init__(self, indent_unit: str = DEFAULT_INDENT) -> None:
        self.indent_unit: str = indent_unit or DEFAULT_INDENT
        self._lines: List[str] = []
        self._indentations: List[str] = []
        self._imports: Dict[str, List[str]] = {}

    # -- Indentation ----------------------------------------------------------

    def indent(self) -> None:
        self._indentations.append(self.indent_unit)

    def outdent(self) -> None:
        if self._indentations:
            self._indentations.pop()

    @property
    def depth(self) -> int:
        return len(self._indentations)

    # -- Content --------------------------------------------------------------

    def add_import(self, symbol: str, module: str) -> None:
        """Register ``symbol`` from ``module``; repeated registrations are no-ops."""
        symbols: List[str] = self._imports.setdefault(module, [])
        if symbol not in symbols:
            symbols.append(symbol)

    def write_line(self, line: str = "") -> None:
        """Append *line* at the current indentation; empty lines stay empty."""
        if line:
            self._lines.append("".join(self._indentations) + line)
        else:
            self._lines.append("")

    @property
    def imports(self) -> Dict[str, List[str]]:
        return {module: list(symbols) for module, symbols in self._imports.items()}

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    # -- Rendering ------------------------------------------------------------

    def render_imports(self) -> str:
        return "\n".join(
            f"import {{ {', '.join(symbols)} }} from '{module}';"
            for module, symbols in self._imports.items()
        )

    def render(self) -> str:
        """Import block (if any) followed by the body lines."""
        header: str = self.render_imports()
        body: str = "\n".join(self._lines)
        if header:
            return header + "\n" + body
        return body

    def __repr__(self) -> str:
        return f"<CodeWriter {len(self._lines)} lines, {len(self._imports)} import modules>"


__all__: List[str] = ["CodeWriter", "DEFAULT_INDENT"]

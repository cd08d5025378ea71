"""
tests/test_writer.py
Unit tests for nestgen.writer.CodeWriter.
"""

from __future__ import annotations

from nestgen.writer import CodeWriter


class TestIndentation:
    def test_indent_stack(self) -> None:
        writer = CodeWriter("  ")
        writer.write_line("a {")
        writer.indent()
        writer.write_line("b;")
        writer.indent()
        writer.write_line("c;")
        writer.outdent()
        writer.outdent()
        writer.write_line("}")
        assert writer.lines == ["a {", "  b;", "    c;", "}"]

    def test_blank_lines_carry_no_indent(self) -> None:
        writer = CodeWriter("\t")
        writer.indent()
        writer.write_line()
        assert writer.lines == [""]

    def test_outdent_at_zero_is_a_no_op(self) -> None:
        writer = CodeWriter()
        writer.outdent()
        assert writer.depth == 0


class TestImports:
    def test_dedup_and_first_insertion_order(self) -> None:
        writer = CodeWriter()
        writer.add_import("Entity", "typeorm")
        writer.add_import("Column", "typeorm")
        writer.add_import("Entity", "typeorm")
        writer.add_import("OrderItem", "./order-item.entity")
        assert writer.imports == {
            "typeorm": ["Entity", "Column"],
            "./order-item.entity": ["OrderItem"],
        }
        assert writer.render_imports() == (
            "import { Entity, Column } from 'typeorm';\n"
            "import { OrderItem } from './order-item.entity';"
        )

    def test_same_symbol_from_two_modules(self) -> None:
        writer = CodeWriter()
        writer.add_import("Order", "./a")
        writer.add_import("Order", "./b")
        assert writer.imports == {"./a": ["Order"], "./b": ["Order"]}


class TestRender:
    def test_header_then_body(self) -> None:
        writer = CodeWriter()
        writer.add_import("Entity", "typeorm")
        writer.write_line("@Entity()")
        writer.write_line("export class Order {")
        writer.write_line("}")
        assert writer.render() == (
            "import { Entity } from 'typeorm';\n"
            "@Entity()\n"
            "export class Order {\n"
            "}"
        )

    def test_body_only(self) -> None:
        writer = CodeWriter()
        writer.write_line("export enum Status {")
        writer.write_line("}")
        assert writer.render() == "export enum Status {\n}"

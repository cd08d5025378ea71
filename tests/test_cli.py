"""
tests/test_cli.py
Tests for the nestgen command-line interface and its exit codes.
"""

from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from nestgen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as info:
        cli_main(argv)
    return info.value.code


def _write_yaml(data: Dict[str, Any], path: pathlib.Path) -> pathlib.Path:
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, sort_keys=False)
    return path


def _unbind_service(shop_dict: Dict[str, Any]) -> None:
    services = shop_dict["model"]["children"][0]["children"][0]["children"][1]["children"]
    services[0]["children"] = []


class TestGeneration:
    def test_success(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path, capsys) -> None:
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert (output_dir / "src/orders/orders.module.ts").is_file()
        assert "SUCCESS" in capsys.readouterr().out

    def test_option_flags(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        code = _run([
            "-m", str(shop_yaml_path),
            "-o", str(output_dir),
            "--root", "src.orders",
            "--tab",
            "--table-prefix", "shop",
            "--author", "Jane Roe",
            "--ext", "js",
            "-q",
        ])
        assert code == EXIT_SUCCESS
        entity = (output_dir / "orders/entities/order.entity.js").read_text(encoding="utf-8")
        assert "@Entity('shop_order')" in entity
        assert " * @author Jane Roe" in entity
        assert "\n\tpublic id: number;" in entity

    def test_no_doc_comments(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "--no-doc-comments", "-q"]) == EXIT_SUCCESS
        entity = (output_dir / "src/orders/entities/order.entity.ts").read_text(encoding="utf-8")
        assert "/**" not in entity

    def test_indent_width(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "--indent", "2", "-q"]) == EXIT_SUCCESS
        entity = (output_dir / "src/orders/entities/order.entity.ts").read_text(encoding="utf-8")
        assert "\n  public id: number;" in entity


class TestExitCodes:
    def test_missing_model_file(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-m", str(tmp_path / "none.yaml"), "-o", str(tmp_path / "out"), "-q"]) == EXIT_INPUT_ERROR

    def test_output_required(self, shop_yaml_path: pathlib.Path) -> None:
        assert _run(["-m", str(shop_yaml_path), "-q"]) == EXIT_INPUT_ERROR

    def test_invalid_document(self, tmp_path: pathlib.Path) -> None:
        path = _write_yaml({"model": {"children": [{"kind": "widget"}]}}, tmp_path / "bad.yaml")
        assert _run(["-m", str(path), "-o", str(tmp_path / "out"), "-q"]) == EXIT_INPUT_ERROR

    def test_unknown_root(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "--root", "nowhere", "-q"]) == EXIT_INPUT_ERROR

    def test_precondition_violation(
        self, shop_dict: Dict[str, Any], tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        _unbind_service(shop_dict)
        path = _write_yaml(shop_dict, tmp_path / "unbound.yaml")
        assert _run(["-m", str(path), "-o", str(output_dir), "-q"]) == EXIT_GENERATION_ERROR

    def test_warnings_as_errors(
        self, shop_dict: Dict[str, Any], tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        _unbind_service(shop_dict)
        path = _write_yaml(shop_dict, tmp_path / "unbound.yaml")
        code = _run(["-m", str(path), "-o", str(output_dir), "--fail-on-warnings", "-q"])
        assert code == EXIT_VALIDATION_ERROR

    def test_existing_output_tree(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_EXPORT_ERROR
        assert _run(["-m", str(shop_yaml_path), "-o", str(output_dir), "--clean", "-q"]) == EXIT_SUCCESS


class TestValidateOnly:
    def test_valid_model(self, shop_yaml_path: pathlib.Path, capsys) -> None:
        assert _run(["-m", str(shop_yaml_path), "--validate-only", "-q"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Model Validation Report" in out
        assert "Shop" in out

    def test_warnings_are_listed(self, shop_dict: Dict[str, Any], tmp_path: pathlib.Path, capsys) -> None:
        _unbind_service(shop_dict)
        path = _write_yaml(shop_dict, tmp_path / "unbound.yaml")
        assert _run(["-m", str(path), "--validate-only", "-q"]) == EXIT_SUCCESS
        assert "SERVICE_NOT_CRUD_BOUND" in capsys.readouterr().out

    def test_unparseable_model(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("model: [unclosed", encoding="utf-8")
        assert _run(["-m", str(path), "--validate-only", "-q"]) == EXIT_INPUT_ERROR

    def test_version(self, capsys) -> None:
        assert _run(["--version"]) == 0
        assert "nestgen v" in capsys.readouterr().out

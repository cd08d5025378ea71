"""
tests/test_generator.py
Integration tests for nestgen.generator: document loading, traversal and
dispatch, module registries, report contents and failure modes.
"""

from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import pytest

from nestgen.errors import ModelReferenceError, PreconditionViolation
from nestgen.generator import (
    GenerationReport,
    ModuleRegistry,
    NestGenerator,
    load_graph,
    load_model_file,
    merge_options,
    parse_document,
)
from nestgen.graph import ClassNode, ModelGraph
from nestgen.models import GenerationOptions

from conftest import element, make_graph, project_document


SHOP_FILES: List[str] = [
    "src/orders/entities/order.entity.ts",
    "src/orders/models/order.model.ts",
    "src/orders/entities/order-item.entity.ts",
    "src/orders/models/order-item.model.ts",
    "src/orders/entities/category.entity.ts",
    "src/orders/models/category.model.ts",
    "src/orders/services/order.service.ts",
    "src/orders/controllers/order.controller.ts",
    "src/orders/orders.module.ts",
]


def _relative(report: GenerationReport, root: pathlib.Path) -> List[str]:
    return [pathlib.Path(f.path).relative_to(root).as_posix() for f in report.files]


# ===========================================================================
# Document loading
# ===========================================================================


class TestLoading:
    def test_yaml_and_json_load_the_same(self, shop_yaml_path: pathlib.Path, shop_json_path: pathlib.Path) -> None:
        assert load_model_file(shop_yaml_path) == load_model_file(shop_json_path)

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_model_file(tmp_path / "nope.yaml")

    def test_directory_is_rejected(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(ValueError):
            load_model_file(tmp_path)

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("model: [unclosed", encoding="utf-8")
        with pytest.raises(ValueError):
            load_model_file(path)

    def test_top_level_must_be_a_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_model_file(path)

    def test_missing_model_root(self) -> None:
        with pytest.raises(ValueError, match="model"):
            parse_document({"options": {}})

    def test_schema_errors_become_value_errors(self) -> None:
        with pytest.raises(ValueError):
            parse_document({"model": {"name": "X", "children": [{"kind": "widget"}]}})

    def test_unknown_reference(self) -> None:
        raw = project_document({"kind": "class", "name": "A", "stereotype": {"ref": "Missing"}})
        with pytest.raises(ModelReferenceError):
            make_graph(raw)

    def test_load_graph_applies_overrides(self, shop_yaml_path: pathlib.Path) -> None:
        graph, options = load_graph(shop_yaml_path, {"table_prefix": "shop", "indent_width": 2})
        assert options.table_prefix == "shop"
        assert options.indent_width == 2
        assert graph.root.name == "Shop"

    def test_merge_options_rejects_bad_values(self) -> None:
        with pytest.raises(ValueError):
            merge_options(GenerationOptions(), {"indent_width": 0})

    def test_merge_options_accepts_aliases(self) -> None:
        base = GenerationOptions(author="x", indent_width=2)
        merged = merge_options(base, {"tablePrefix": "app", "useTabIndent": True, "author": "y"})
        assert merged.table_prefix == "app"
        assert merged.indent_unit == "\t"
        assert merged.author == "y"
        assert merged.indent_width == 2

    def test_merge_options_without_overrides(self) -> None:
        base = GenerationOptions(author="x")
        assert merge_options(base, None) is base


# ===========================================================================
# End-to-end generation
# ===========================================================================


class TestGenerateShop:
    def test_files_in_traversal_order(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate(shop_graph, output_dir)
        assert report.success, report.summary()
        assert _relative(report, output_dir) == SHOP_FILES
        for name in SHOP_FILES:
            assert (output_dir / name).is_file()

    def test_files_end_with_newline(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        for name in SHOP_FILES:
            assert (output_dir / name).read_text(encoding="utf-8").endswith("}\n")

    def test_scenario_order_entity(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        entity = (output_dir / "src/orders/entities/order.entity.ts").read_text(encoding="utf-8")
        assert "@PrimaryGeneratedColumn()\n    public id: number;" in entity
        assert "@OneToMany(type => OrderItem)" in entity

        inverse = (output_dir / "src/orders/entities/order-item.entity.ts").read_text(encoding="utf-8")
        assert "ManyToOne" not in inverse and "JoinColumn" not in inverse

        module = (output_dir / "src/orders/orders.module.ts").read_text(encoding="utf-8")
        assert "TypeOrmModule.forFeature([\n            Order,\n            OrderItem,\n            Category,\n" in module
        assert "providers: [\n        OrderService,\n" in module
        assert "controllers: [\n        OrderController,\n" in module

    def test_scenario_controller(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        controller = (output_dir / "src/orders/controllers/order.controller.ts").read_text(encoding="utf-8")
        assert "type: OrderModel," in controller
        assert "public readonly service: OrderService," in controller

    def test_scenario_tree(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        category = (output_dir / "src/orders/entities/category.entity.ts").read_text(encoding="utf-8")
        assert "@Tree('materialized-path')" in category
        assert "@TreeChildren()" in category and "@TreeParent()" in category
        assert "Join" not in category

    def test_report_contents(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate(shop_graph, output_dir)
        assert report.project_name == "Shop"
        assert report.modules == ["orders"]
        assert report.total_files == len(SHOP_FILES)
        assert len(report.files_of_kind("entity")) == 3
        assert len(report.files_of_kind("model")) == 3
        assert report.total_bytes == sum(f.bytes for f in report.files)
        assert report.total_lines == sum(f.lines for f in report.files)
        assert [m.step_name for m in report.step_metrics] == ["Validate Model", "Generate Artifacts"]
        summary = report.summary()
        assert "SUCCESS" in summary and "Shop" in summary

    def test_generate_from_file(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate_from_file(
            shop_yaml_path,
            output_dir,
            root_name="src.orders",
            option_overrides={"table_prefix": "shop", "file_extension": "js"},
        )
        assert report.success
        assert report.step_metrics[0].step_name == "Load Model"
        entity = (output_dir / "orders/entities/order.entity.js").read_text(encoding="utf-8")
        assert "@Entity('shop_order')" in entity
        assert (output_dir / "orders/models/order.model.js").is_file()
        assert (output_dir / "orders/orders.module.js").is_file()

    def test_unknown_root_name(self, shop_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        with pytest.raises(ValueError, match="nowhere"):
            NestGenerator().generate_from_file(shop_yaml_path, output_dir, root_name="nowhere")

    def test_generation_from_subtree(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate(shop_graph, output_dir, root=element(shop_graph, "orders"))
        assert _relative(report, output_dir)[-1] == "orders/orders.module.ts"
        assert not (output_dir / "src").exists()


# ===========================================================================
# Module registries
# ===========================================================================


class TestModuleRegistries:
    @pytest.fixture()
    def nested_graph(self) -> ModelGraph:
        return make_graph(project_document(
            {"kind": "class", "id": "loose", "name": "Loose", "stereotype": {"ref": "Entity"}},
            {
                "kind": "package",
                "name": "app",
                "stereotype": {"ref": "Module"},
                "children": [
                    {"kind": "class", "id": "outer", "name": "Outer", "stereotype": {"ref": "Entity"}},
                    {
                        "kind": "package",
                        "name": "inner",
                        "stereotype": {"ref": "Module"},
                        "children": [
                            {"kind": "class", "id": "deep", "name": "Deep", "stereotype": {"ref": "Entity"}},
                        ],
                    },
                    {
                        "kind": "package",
                        "name": "plain",
                        "children": [
                            {"kind": "class", "id": "folded", "name": "Folded", "stereotype": {"ref": "Entity"}},
                        ],
                    },
                ],
            },
        ))

    def test_registries_fold_per_module(self, nested_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate(nested_graph, output_dir)
        assert report.modules == ["inner", "app"]

        inner = (output_dir / "app/inner/inner.module.ts").read_text(encoding="utf-8")
        assert "Deep," in inner
        assert "Outer" not in inner

        outer = (output_dir / "app/app.module.ts").read_text(encoding="utf-8")
        assert "            Outer,\n            Folded,\n" in outer
        assert "Deep" not in outer
        assert "Loose" not in outer

    def test_registrations_outside_modules_are_not_listed(
        self, nested_graph: ModelGraph, output_dir: pathlib.Path
    ) -> None:
        NestGenerator().generate(nested_graph, output_dir)
        assert (output_dir / "loose.entity.ts").is_file()
        # A root-level class puts its read-model beside the output directory.
        assert (output_dir.parent / "models" / "loose.model.ts").is_file()

    def test_module_registry_merge(self) -> None:
        first = ModuleRegistry(entities=[ClassNode(name="A")])
        second = ModuleRegistry(services=[ClassNode(name="S")], controllers=[ClassNode(name="C")])
        first.merge(second)
        assert [c.name for c in first.entities] == ["A"]
        assert [c.name for c in first.services] == ["S"]
        assert len(first) == 3
        assert not ModuleRegistry()


# ===========================================================================
# Dispatch of other classifiers
# ===========================================================================


class TestDispatch:
    @pytest.fixture()
    def graph(self) -> ModelGraph:
        return make_graph(project_document(
            {
                "kind": "package",
                "name": "common",
                "children": [
                    {"kind": "interface", "name": "Priced"},
                    {"kind": "enumeration", "name": "Status", "literals": ["OPEN"]},
                    {"kind": "class", "name": "Audit", "stereotype": "annotationType"},
                    {"kind": "class", "name": "Helper"},
                    {"kind": "class", "name": "", "stereotype": {"ref": "Entity"}},
                    {"kind": "package", "name": "", "children": [{"kind": "interface", "name": "Hidden"}]},
                ],
            },
        ))

    def test_classifier_files(self, graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator(strict_validation=False).generate(graph, output_dir)
        assert _relative(report, output_dir) == [
            "common/Priced.ts",
            "common/Status.ts",
            "common/Audit.ts",
        ]
        assert [f.kind for f in report.files] == ["interface", "enumeration", "annotation"]
        assert (output_dir / "common/Status.ts").read_text(encoding="utf-8") == "export enum Status {\n    OPEN\n}\n"

    def test_unnamed_entity_is_reported(self, graph: ModelGraph, output_dir: pathlib.Path) -> None:
        report = NestGenerator().generate(graph, output_dir)
        assert any("UNNAMED_ARTIFACT" in w for w in report.validation_warnings)


# ===========================================================================
# Failure modes
# ===========================================================================


class TestFailures:
    def test_existing_package_directory(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        with pytest.raises(FileExistsError):
            NestGenerator().generate(shop_graph, output_dir)

    def test_clean_output_allows_rerun(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        NestGenerator().generate(shop_graph, output_dir)
        stale = output_dir / "stale.ts"
        stale.write_text("x", encoding="utf-8")
        report = NestGenerator(clean_output=True).generate(shop_graph, output_dir)
        assert report.success
        assert not stale.exists()

    def test_clean_output_for_subtree_only(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        orders = element(shop_graph, "orders")
        NestGenerator().generate(shop_graph, output_dir, root=orders)
        keep = output_dir / "keep.ts"
        keep.write_text("x", encoding="utf-8")
        NestGenerator(clean_output=True).generate(shop_graph, output_dir, root=orders)
        assert keep.exists()

    def test_precondition_violation_propagates(self, shop_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        services = shop_dict["model"]["children"][0]["children"][0]["children"][1]["children"]
        services[0]["children"] = []
        graph = make_graph(shop_dict)
        with pytest.raises(PreconditionViolation):
            NestGenerator().generate(graph, output_dir)
        # Files written before the failure stay on disk.
        assert (output_dir / "src/orders/entities/order.entity.ts").is_file()

    def test_fail_on_warnings_stops_before_writing(self, shop_dict: Dict[str, Any], output_dir: pathlib.Path) -> None:
        services = shop_dict["model"]["children"][0]["children"][0]["children"][1]["children"]
        services[0]["children"] = []
        graph = make_graph(shop_dict)
        report = NestGenerator(fail_on_warnings=True).generate(graph, output_dir)
        assert not report.success
        assert report.validation_warnings
        assert report.total_files == 0
        assert not output_dir.exists()

    def test_validation_errors_abort_strict_runs(self, shop_graph: ModelGraph, output_dir: pathlib.Path) -> None:
        element(shop_graph, "order-items").end1.reference = None
        shop_graph.reindex()
        report = NestGenerator().generate(shop_graph, output_dir)
        assert not report.success
        assert any("ASSOCIATION_END_UNRESOLVED" in e for e in report.validation_errors)
        assert not output_dir.exists()
        assert "FAILED" in report.summary()

"""
tests/test_paths.py
Unit tests for nestgen.paths: canonical paths and import specifiers.
"""

from __future__ import annotations

from nestgen.graph import ModelGraph
from nestgen.models import RenderMode
from nestgen.paths import canonical_path, enclosing_module_name, import_path

from conftest import element


class TestCanonicalPath:
    def test_project_root_contributes_nothing(self, shop_graph: ModelGraph) -> None:
        assert canonical_path(shop_graph.root) == "."

    def test_package_path(self, shop_graph: ModelGraph) -> None:
        assert canonical_path(element(shop_graph, "orders")) == "./src/orders"

    def test_class_shares_parent_path(self, shop_graph: ModelGraph) -> None:
        assert canonical_path(element(shop_graph, "order")) == "./src/orders/entities"

    def test_model_mode_replaces_owning_package(self, shop_graph: ModelGraph) -> None:
        assert canonical_path(element(shop_graph, "order"), RenderMode.MODEL) == "./src/orders/models"

    def test_scoped_library_package(self, shop_graph: ModelGraph) -> None:
        injectable = element(shop_graph, "Injectable")
        assert canonical_path(injectable) == "./node_modules/@nestjs/common"

    def test_plain_library_package(self, shop_graph: ModelGraph) -> None:
        assert canonical_path(element(shop_graph, "Entity")) == "./node_modules/typeorm"


class TestImportPath:
    def test_siblings(self, shop_graph: ModelGraph) -> None:
        order, item = element(shop_graph, "order"), element(shop_graph, "order-item")
        assert import_path(order, item) == "./order-item.entity"

    def test_cousin_directory(self, shop_graph: ModelGraph) -> None:
        service, order = element(shop_graph, "order-service"), element(shop_graph, "order")
        assert import_path(service, order) == "../entities/order.entity"

    def test_descendant_directory(self, shop_graph: ModelGraph) -> None:
        module, service = element(shop_graph, "orders"), element(shop_graph, "order-service")
        assert import_path(module, service) == "./services/order.service"

    def test_library_targets(self, shop_graph: ModelGraph) -> None:
        order = element(shop_graph, "order")
        assert import_path(order, element(shop_graph, "Entity")) == "typeorm"
        assert import_path(order, element(shop_graph, "Injectable")) == "@nestjs/common"
        assert import_path(order, element(shop_graph, "TypeOrmCrudService")) == "@nestjsx/crud-typeorm"

    def test_read_model_to_read_model(self, shop_graph: ModelGraph) -> None:
        order, item = element(shop_graph, "order"), element(shop_graph, "order-item")
        assert (
            import_path(order, item, RenderMode.MODEL, RenderMode.MODEL)
            == "./order-item.model"
        )

    def test_entity_to_read_model(self, shop_graph: ModelGraph) -> None:
        controller, order = element(shop_graph, "order-controller"), element(shop_graph, "order")
        assert (
            import_path(controller, order, RenderMode.ENTITY, RenderMode.MODEL)
            == "../models/order.model"
        )


class TestEnclosingModule:
    def test_nearest_module(self, shop_graph: ModelGraph) -> None:
        assert enclosing_module_name(element(shop_graph, "order-controller")) == "orders"
        assert enclosing_module_name(element(shop_graph, "orders")) == "orders"

    def test_outside_any_module(self, shop_graph: ModelGraph) -> None:
        assert enclosing_module_name(element(shop_graph, "src")) == ""

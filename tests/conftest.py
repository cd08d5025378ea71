"""
tests/conftest.py
Shared fixtures for the nestgen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import pathlib
from typing import Any, Dict, Optional

import pytest
import yaml

from nestgen.emitters import ArtifactEmitter
from nestgen.graph import ClassNode, ModelGraph, Node, build_graph
from nestgen.models import GenerationOptions, ModelDocument


# ---------------------------------------------------------------------------
# Reference model document
# ---------------------------------------------------------------------------

# Shop / src / orders (Module) / {entities, services, controllers}
SHOP_DOCUMENT: Dict[str, Any] = {
    "options": {},
    "model": {
        "name": "Shop",
        "children": [
            {
                "kind": "package",
                "name": "src",
                "children": [
                    {
                        "kind": "package",
                        "id": "orders",
                        "name": "orders",
                        "stereotype": {"ref": "Module"},
                        "children": [
                            {
                                "kind": "package",
                                "name": "entities",
                                "children": [
                                    {
                                        "kind": "class",
                                        "id": "order",
                                        "name": "Order",
                                        "documentation": "A customer order.",
                                        "stereotype": {"ref": "Entity"},
                                        "attributes": [
                                            {"name": "id", "type": "number", "isID": True, "is_derived": True},
                                            {"name": "total", "type": "number", "default_value": "0"},
                                            {"name": "note?", "type": "string"},
                                        ],
                                    },
                                    {
                                        "kind": "class",
                                        "id": "order-item",
                                        "name": "OrderItem",
                                        "stereotype": {"ref": "Entity"},
                                        "attributes": [
                                            {"name": "id", "type": "number", "isID": True, "is_derived": True},
                                            {"name": "quantity", "type": "number"},
                                        ],
                                    },
                                    {
                                        "kind": "class",
                                        "id": "category",
                                        "name": "Category",
                                        "stereotype": {"ref": "Entity"},
                                        "attributes": [
                                            {"name": "id", "type": "number", "isID": True, "is_derived": True},
                                            {"name": "title", "type": "string"},
                                        ],
                                    },
                                    {
                                        "kind": "association",
                                        "id": "order-items",
                                        "end1": {"reference": {"ref": "order"}, "multiplicity": "1", "navigable": False},
                                        "end2": {"reference": {"ref": "order-item"}, "multiplicity": "*"},
                                    },
                                    {
                                        "kind": "association",
                                        "id": "category-tree",
                                        "stereotype": {"ref": "Tree"},
                                        "end1": {"reference": {"ref": "category"}, "multiplicity": "1"},
                                        "end2": {"reference": {"ref": "category"}, "multiplicity": "*"},
                                    },
                                ],
                            },
                            {
                                "kind": "package",
                                "name": "services",
                                "children": [
                                    {
                                        "kind": "class",
                                        "id": "order-service",
                                        "name": "OrderService",
                                        "stereotype": {"ref": "Injectable"},
                                        "children": [
                                            {
                                                "kind": "generalization",
                                                "target": {"ref": "TypeOrmCrudService"},
                                                "stereotype": {"ref": "order"},
                                            },
                                        ],
                                    },
                                ],
                            },
                            {
                                "kind": "package",
                                "name": "controllers",
                                "children": [
                                    {
                                        "kind": "class",
                                        "id": "order-controller",
                                        "name": "OrderController",
                                        "stereotype": {"ref": "Controller"},
                                    },
                                    {
                                        "kind": "association",
                                        "id": "controller-service",
                                        "end1": {"reference": {"ref": "order-controller"}},
                                        "end2": {"reference": {"ref": "order-service"}},
                                    },
                                ],
                            },
                        ],
                    },
                ],
            },
        ],
    },
}


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def shop_dict() -> Dict[str, Any]:
    """Deep copy of the reference document so each test can mutate freely."""
    return copy.deepcopy(SHOP_DOCUMENT)


@pytest.fixture()
def shop_yaml_path(shop_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the reference document to a temporary YAML file and return its path."""
    path = tmp_path / "shop.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(shop_dict, fh, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return path


@pytest.fixture()
def shop_json_path(shop_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(shop_dict), encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "out"


# ---------------------------------------------------------------------------
# Graph fixtures
# ---------------------------------------------------------------------------


def make_graph(raw: Dict[str, Any], **options: Any) -> ModelGraph:
    """Build a graph from a raw document, with option overrides."""
    data = copy.deepcopy(raw)
    data.setdefault("options", {}).update(options)
    return build_graph(ModelDocument.model_validate(data))


def element(graph: ModelGraph, key: str) -> Node:
    node: Optional[Node] = graph.lookup(key)
    assert node is not None, f"'{key}' not found in graph"
    return node


def project_document(*children: Dict[str, Any], name: str = "App") -> Dict[str, Any]:
    """Minimal document whose project owns *children*."""
    return {"model": {"name": name, "children": list(children)}}


@pytest.fixture()
def shop_graph(shop_dict: Dict[str, Any]) -> ModelGraph:
    return make_graph(shop_dict)


@pytest.fixture()
def order(shop_graph: ModelGraph) -> ClassNode:
    return element(shop_graph, "order")


@pytest.fixture()
def emitter(shop_graph: ModelGraph) -> ArtifactEmitter:
    return ArtifactEmitter(GenerationOptions(), shop_graph.relations)

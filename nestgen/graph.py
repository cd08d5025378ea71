# File: nestgen/graph.py
"""
nestgen - Runtime Model Graph
=============================
Linked, read-only node graph walked by the generation engine, plus the
builder that produces it from a validated ``ModelDocument``.

Every node kind is its own small dataclass carrying a ``kind`` tag from the
closed ``NodeKind`` enumeration, so dispatch is a total match over
``node.kind``.  Nodes compare by identity.

Relationships touching a classifier are looked up through ``RelationIndex``,
an adjacency map built once per graph.

Build order::

    ModelDocument ─▶ nodes (declaration order) ─▶ library bootstrap
                  ─▶ reference resolution ─▶ RelationIndex
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, List, Optional, Set, Tuple, Union

from nestgen.errors import ModelReferenceError
from nestgen.models import (
    AttributeSpec,
    ElementSpec,
    EndSpec,
    ModelDocument,
    NodeKind,
    OperationSpec,
    RefSpec,
    Visibility,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.graph")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LIBRARY_ROOT_NAME: str = "node_modules"

# Library packages and the classes each one exports.
LIBRARY_PACKAGES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("nestjs/common", ("Injectable", "Module", "Controller")),
    ("nestjs/typeorm", ("InjectRepository",)),
    ("nestjsx/crud", ("Crud", "CrudController")),
    ("nestjsx/crud-typeorm", ("TypeOrmCrudService",)),
    (
        "typeorm",
        (
            "Column",
            "CreateDateColumn",
            "Entity",
            "OneToMany",
            "PrimaryColumn",
            "VersionColumn",
            "ManyToOne",
            "ManyToMany",
            "OneToOne",
            "UpdateDateColumn",
            "JoinColumn",
            "JoinTable",
            "Tree",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Node variants
# ---------------------------------------------------------------------------

Stereotype = Union["ClassNode", str, None]
TypeRef = Union["Node", str, None]


@dataclass(eq=False, slots=True, kw_only=True)
class Node:
    """Fields common to every node."""

    kind: ClassVar[NodeKind]

    name: str = ""
    id: Optional[str] = None
    documentation: str = ""
    visibility: Optional[Visibility] = Visibility.PUBLIC
    stereotype: Stereotype = field(default=None, repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)

    def ancestors(self) -> Iterator["Node"]:
        node: Optional[Node] = self.parent
        while node is not None:
            yield node
            node = node.parent


@dataclass(eq=False, slots=True, kw_only=True)
class Project(Node):
    """Graph root.  Never contributes a path segment."""

    kind: ClassVar[NodeKind] = NodeKind.PROJECT

    children: List[Node] = field(default_factory=list, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class Package(Node):
    kind: ClassVar[NodeKind] = NodeKind.PACKAGE

    children: List[Node] = field(default_factory=list, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class ClassNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.CLASS

    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False
    attributes: List["Attribute"] = field(default_factory=list, repr=False)
    operations: List["Operation"] = field(default_factory=list, repr=False)
    children: List[Node] = field(default_factory=list, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class Interface(ClassNode):
    kind: ClassVar[NodeKind] = NodeKind.INTERFACE


@dataclass(eq=False, slots=True, kw_only=True)
class Enumeration(ClassNode):
    kind: ClassVar[NodeKind] = NodeKind.ENUMERATION

    literals: List["Literal"] = field(default_factory=list, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class Literal(Node):
    kind: ClassVar[NodeKind] = NodeKind.LITERAL


@dataclass(eq=False, slots=True, kw_only=True)
class Attribute(Node):
    kind: ClassVar[NodeKind] = NodeKind.ATTRIBUTE

    type: TypeRef = field(default=None, repr=False)
    multiplicity: str = ""
    default_value: str = ""
    is_id: bool = False
    is_derived: bool = False
    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False


@dataclass(eq=False, slots=True, kw_only=True)
class Parameter(Node):
    kind: ClassVar[NodeKind] = NodeKind.PARAMETER

    direction: str = "in"
    type: TypeRef = field(default=None, repr=False)
    multiplicity: str = ""


@dataclass(eq=False, slots=True, kw_only=True)
class Operation(Node):
    kind: ClassVar[NodeKind] = NodeKind.OPERATION

    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False
    parameters: List[Parameter] = field(default_factory=list, repr=False)

    @property
    def input_parameters(self) -> List[Parameter]:
        return [p for p in self.parameters if p.direction != "return"]

    @property
    def return_parameter(self) -> Optional[Parameter]:
        for param in self.parameters:
            if param.direction == "return":
                return param
        return None


@dataclass(eq=False, slots=True, kw_only=True)
class AssociationEnd(Node):
    kind: ClassVar[NodeKind] = NodeKind.ASSOCIATION_END

    reference: Optional[ClassNode] = field(default=None, repr=False)
    multiplicity: str = ""
    navigable: bool = True
    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False
    default_value: str = ""


@dataclass(eq=False, slots=True, kw_only=True)
class Association(Node):
    kind: ClassVar[NodeKind] = NodeKind.ASSOCIATION

    end1: AssociationEnd = field(default_factory=AssociationEnd, repr=False)
    end2: AssociationEnd = field(default_factory=AssociationEnd, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class Generalization(Node):
    kind: ClassVar[NodeKind] = NodeKind.GENERALIZATION

    source: Optional[ClassNode] = field(default=None, repr=False)
    target: Optional[ClassNode] = field(default=None, repr=False)


@dataclass(eq=False, slots=True, kw_only=True)
class Realization(Node):
    kind: ClassVar[NodeKind] = NodeKind.REALIZATION

    source: Optional[ClassNode] = field(default=None, repr=False)
    target: Optional[ClassNode] = field(default=None, repr=False)


Relationship = Union[Association, Generalization, Realization]

_ADDRESSABLE_KINDS = (
    NodeKind.PACKAGE,
    NodeKind.CLASS,
    NodeKind.INTERFACE,
    NodeKind.ENUMERATION,
)


def owned_elements(node: Node) -> List[Node]:
    """Ordered owned elements of a container node (empty for leaves)."""
    return getattr(node, "children", None) or []


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order over *node* and everything it owns."""
    yield node
    if isinstance(node, ClassNode):
        yield from node.attributes
        for operation in node.operations:
            yield operation
            yield from operation.parameters
        if isinstance(node, Enumeration):
            yield from node.literals
    if isinstance(node, Association):
        yield node.end1
        yield node.end2
    for child in owned_elements(node):
        yield from walk(child)


# ---------------------------------------------------------------------------
# Relation index
# ---------------------------------------------------------------------------


class RelationIndex:
    """
    Adjacency map from each classifier to the relationships touching it.

    Built in one pass over the graph; relationships keep declaration order
    and a self-association is listed once for its class.
    """

    __slots__ = ("_by_node",)

    def __init__(self) -> None:
        self._by_node: Dict[Node, List[Relationship]] = {}

    @classmethod
    def build(cls, root: Node) -> "RelationIndex":
        index = cls()
        for node in walk(root):
            if isinstance(node, Association):
                index._add(node, node.end1.reference, node.end2.reference)
            elif isinstance(node, (Generalization, Realization)):
                index._add(node, node.source, node.target)
        return index

    def _add(self, rel: Relationship, *touching: Optional[Node]) -> None:
        seen: Set[Node] = set()
        for node in touching:
            if node is None or node in seen:
                continue
            seen.add(node)
            self._by_node.setdefault(node, []).append(rel)

    def relationships_of(self, node: Node) -> List[Relationship]:
        return list(self._by_node.get(node, []))

    def associations_of(self, node: Node) -> List[Association]:
        return [r for r in self._by_node.get(node, []) if isinstance(r, Association)]

    def generalizations_of(self, node: Node) -> List[Generalization]:
        """Generalizations whose source is *node*."""
        return [
            r
            for r in self._by_node.get(node, [])
            if isinstance(r, Generalization) and r.source is node
        ]

    def realizations_of(self, node: Node) -> List[Realization]:
        """Realizations whose source is *node*."""
        return [
            r
            for r in self._by_node.get(node, [])
            if isinstance(r, Realization) and r.source is node
        ]

    def superclasses(self, node: Node) -> List[ClassNode]:
        return [g.target for g in self.generalizations_of(node) if g.target is not None]

    def interfaces(self, node: Node) -> List[ClassNode]:
        return [r.target for r in self.realizations_of(node) if r.target is not None]

    def __len__(self) -> int:
        return len(self._by_node)


# ---------------------------------------------------------------------------
# Graph container
# ---------------------------------------------------------------------------


class ModelGraph:
    """A built graph: root node, lookup tables and the relation index."""

    def __init__(self, root: Project) -> None:
        self.root: Project = root
        self._by_id: Dict[str, Node] = {}
        self._by_name: Dict[str, Node] = {}
        self.relations: RelationIndex = RelationIndex()
        self.reindex()

    def reindex(self) -> None:
        """Rebuild name/id lookups and the relation index from the tree."""
        self._by_id = {}
        self._by_name = {}
        for node in walk(self.root):
            if node.id:
                self._by_id.setdefault(node.id, node)
            if node.name and node.kind in _ADDRESSABLE_KINDS:
                self._by_name.setdefault(node.name, node)
        self.relations = RelationIndex.build(self.root)

    def lookup(self, key: str) -> Optional[Node]:
        """Find a node by id, then by first declared name."""
        return self._by_id.get(key) or self._by_name.get(key)

    def find_package(self, name: str) -> Optional[Node]:
        """
        Find a package by dotted path below the root (``src.orders``).

        Falls back to the first package declared with that exact name.
        """
        node: Optional[Node] = self.root
        for part in (p for p in name.split(".") if p):
            node = next(
                (c for c in owned_elements(node) if isinstance(c, Package) and c.name == part),
                None,
            )
            if node is None:
                break
        if node is not None:
            return node
        found: Optional[Node] = self.lookup(name)
        return found if isinstance(found, Package) else None

    @property
    def library_root(self) -> Optional[Package]:
        for child in self.root.children:
            if isinstance(child, Package) and child.name == LIBRARY_ROOT_NAME:
                return child
        return None

    def __iter__(self) -> Iterator[Node]:
        return walk(self.root)

    def __repr__(self) -> str:
        return f"<ModelGraph {self.root.name!r} ({len(self._by_id)} ids, {len(self.relations)} related nodes)>"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class _PendingRefs:
    """References recorded during node creation, resolved afterwards."""

    __slots__ = ("items",)

    def __init__(self) -> None:
        self.items: List[Tuple[Node, str, Union[RefSpec, str], bool]] = []

    def add(self, node: Node, attr: str, value: Union[RefSpec, str, None], *, ref_only: bool) -> None:
        if value is None:
            return
        if isinstance(value, str) and not ref_only:
            setattr(node, attr, value)
            return
        self.items.append((node, attr, value, ref_only))


def _visibility(name: str) -> Visibility:
    return Visibility(name)


def _build_attribute(spec: AttributeSpec, owner: Node, refs: _PendingRefs) -> Attribute:
    attr = Attribute(
        name=spec.name,
        documentation=spec.documentation,
        visibility=_visibility(spec.visibility),
        multiplicity=spec.multiplicity,
        default_value=spec.default_value,
        is_id=spec.is_id,
        is_derived=spec.is_derived,
        is_static=spec.is_static,
        is_leaf=spec.is_leaf,
        parent=owner,
    )
    refs.add(attr, "type", spec.type, ref_only=False)
    refs.add(attr, "stereotype", spec.stereotype, ref_only=False)
    return attr


def _build_operation(spec: OperationSpec, owner: Node, refs: _PendingRefs) -> Operation:
    operation = Operation(
        name=spec.name,
        documentation=spec.documentation,
        visibility=_visibility(spec.visibility),
        is_static=spec.is_static,
        is_abstract=spec.is_abstract,
        is_leaf=spec.is_leaf,
        parent=owner,
    )
    for p in spec.parameters:
        param = Parameter(
            name=p.name,
            direction=p.direction,
            multiplicity=p.multiplicity,
            documentation=p.documentation,
            parent=operation,
        )
        refs.add(param, "type", p.type, ref_only=False)
        operation.parameters.append(param)
    return operation


def _build_end(spec: EndSpec, owner: Association, refs: _PendingRefs) -> AssociationEnd:
    end = AssociationEnd(
        name=spec.name,
        documentation=spec.documentation,
        visibility=_visibility(spec.visibility),
        multiplicity=spec.multiplicity,
        navigable=spec.navigable,
        parent=owner,
    )
    refs.add(end, "reference", spec.reference, ref_only=True)
    return end


def _build_element(spec: ElementSpec, parent: Node, refs: _PendingRefs) -> Node:
    common = dict(
        name=spec.name,
        id=spec.id,
        documentation=spec.documentation,
        visibility=_visibility(spec.visibility),
        parent=parent,
    )
    node: Node
    if spec.kind == "package":
        node = Package(**common)
    elif spec.kind in ("class", "interface", "enumeration"):
        flags = dict(is_static=spec.is_static, is_abstract=spec.is_abstract, is_leaf=spec.is_leaf)
        if spec.kind == "class":
            node = ClassNode(**common, **flags)
        elif spec.kind == "interface":
            node = Interface(**common, **flags)
        else:
            node = Enumeration(**common, **flags)
            node.literals = [Literal(name=lit, parent=node) for lit in spec.literals]
        node.attributes = [_build_attribute(a, node, refs) for a in spec.attributes]
        node.operations = [_build_operation(o, node, refs) for o in spec.operations]
    elif spec.kind == "association":
        node = Association(**common)
        if spec.end1 is None or spec.end2 is None:
            raise ModelReferenceError(f"association '{spec.name or spec.id or '?'}' needs both end1 and end2.")
        node.end1 = _build_end(spec.end1, node, refs)
        node.end2 = _build_end(spec.end2, node, refs)
    else:
        rel_cls = Generalization if spec.kind == "generalization" else Realization
        node = rel_cls(**common)
        if spec.source is None:
            node.source = parent if isinstance(parent, ClassNode) else None
        else:
            refs.add(node, "source", spec.source, ref_only=True)
        refs.add(node, "target", spec.target, ref_only=True)

    refs.add(node, "stereotype", spec.stereotype, ref_only=False)
    for child_spec in spec.children:
        node.children.append(_build_element(child_spec, node, refs))  # type: ignore[attr-defined]
    return node


def bootstrap_library(graph: ModelGraph) -> int:
    """
    Ensure the framework library packages exist under the root.

    An element whose name already exists anywhere in the graph is reused,
    otherwise it is created under its expected parent.  Returns the number
    of nodes created.
    """
    created: int = 0

    def _ensure(parent: Node, name: str, factory: type) -> Node:
        nonlocal created
        existing = graph.lookup(name)
        if existing is not None:
            return existing
        node = factory(name=name, parent=parent)
        parent.children.append(node)  # type: ignore[attr-defined]
        graph._by_name[name] = node
        created += 1
        return node

    library = _ensure(graph.root, LIBRARY_ROOT_NAME, Package)
    for package_name, class_names in LIBRARY_PACKAGES:
        package = _ensure(library, package_name, Package)
        for class_name in class_names:
            _ensure(package, class_name, ClassNode)

    if created:
        logger.debug("Library bootstrap created %d node(s).", created)
    return created


def _resolve_refs(graph: ModelGraph, refs: _PendingRefs) -> None:
    for node, attr, value, ref_only in refs.items:
        key: str = value.ref if isinstance(value, RefSpec) else value
        target: Optional[Node] = graph.lookup(key)
        if target is None:
            raise ModelReferenceError(
                f"{node.kind.value} '{node.name or node.id or '?'}' refers to "
                f"unknown element '{key}' (field '{attr}')."
            )
        if attr in ("reference", "source", "target", "stereotype") and not isinstance(target, ClassNode):
            raise ModelReferenceError(
                f"{node.kind.value} '{node.name or node.id or '?'}': field '{attr}' "
                f"must refer to a classifier, got {target.kind.value} '{target.name}'."
            )
        setattr(node, attr, target)


def build_graph(document: ModelDocument, *, bootstrap: Optional[bool] = None) -> ModelGraph:
    """
    Build the runtime graph for *document*.

    Args:
        document: Validated model document.
        bootstrap: Override ``document.options.bootstrap_library``.

    Raises:
        ModelReferenceError: If a reference cannot be resolved.
    """
    refs = _PendingRefs()
    root = Project(name=document.model.name, documentation=document.model.documentation)
    for spec in document.model.children:
        root.children.append(_build_element(spec, root, refs))

    graph = ModelGraph(root)
    use_library: bool = document.options.bootstrap_library if bootstrap is None else bootstrap
    if use_library:
        bootstrap_library(graph)

    _resolve_refs(graph, refs)
    graph.reindex()

    logger.info(
        "Built model graph '%s': %d node(s), %d reference(s) resolved.",
        root.name,
        sum(1 for _ in walk(root)),
        len(refs.items),
    )
    return graph


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "LIBRARY_ROOT_NAME",
    "LIBRARY_PACKAGES",
    "Node",
    "Project",
    "Package",
    "ClassNode",
    "Interface",
    "Enumeration",
    "Literal",
    "Attribute",
    "Parameter",
    "Operation",
    "AssociationEnd",
    "Association",
    "Generalization",
    "Realization",
    "Relationship",
    "owned_elements",
    "walk",
    "RelationIndex",
    "ModelGraph",
    "bootstrap_library",
    "build_graph",
]

logger.debug("nestgen.graph loaded.")

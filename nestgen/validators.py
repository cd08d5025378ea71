# File: nestgen/validators.py
"""
nestgen - Model Graph Validators
================================
A **pure-function validation pipeline** run over a built ``ModelGraph``
before anything is written.

The document loader and graph builder already guarantee structural shape
(kinds, required ends, resolvable references).  The checks here catch the
graphs that would make an emitter fail half-way through a run, or produce
colliding output, and report them up front.

Every check is a single pass over the project part of the graph; the
library root is never inspected.

Usage::

    from nestgen.validators import validate_graph
    result = validate_graph(graph)
    if result.has_errors:
        print(result.format_report())
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Dict, Iterator, List, Optional

from nestgen.graph import (
    Association,
    ClassNode,
    Enumeration,
    Generalization,
    Interface,
    ModelGraph,
    Node,
    Package,
    Realization,
    owned_elements,
    walk,
)
from nestgen.models import Role
from nestgen.naming import TREE_STEREOTYPE, classify_role, is_module, resolve_file_name
from nestgen.relations import CRUD_BASE_SERVICE, associated_classes, bound_entity

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.validators")

# Roles that produce an artifact file of their own.
_ARTIFACT_ROLES = (
    Role.ENTITY,
    Role.FIELDS,
    Role.INJECTABLE,
    Role.CONTROLLER,
    Role.ANNOTATION_TYPE,
)
_REGISTERED_ROLES = (Role.ENTITY, Role.INJECTABLE, Role.CONTROLLER)


# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """One finding: a level, a stable code, a message and optional context."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __str__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    __repr__ = __str__


class ValidationResult:
    """Ordered collection of ``ValidationError`` findings."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add_error(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self._items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            marker: str = {"error": "✗", "warning": "⚠", "info": "i"}.get(item.level, "•")
            lines.append(f"  {marker} [{item.code}] {item.message}")
        return "\n".join(lines)

    def __bool__(self) -> bool:
        """Truthy when there are NO errors."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------


def _project_nodes(graph: ModelGraph) -> Iterator[Node]:
    """Every node below the root except the library subtree."""
    library: Optional[Package] = graph.library_root
    for child in graph.root.children:
        if child is library:
            continue
        yield from walk(child)


def _label(node: Node) -> str:
    return node.name or node.id or f"<unnamed {node.kind.value}>"


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_relationship_ends(graph: ModelGraph) -> ValidationResult:
    """Associations need a class at both ends; edges need source and target."""
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if isinstance(node, Association):
            for position, end in (("end1", node.end1), ("end2", node.end2)):
                if not isinstance(end.reference, ClassNode):
                    result.add_error(
                        "ASSOCIATION_END_UNRESOLVED",
                        f"Association '{_label(node)}': {position} does not reference a class.",
                        {"association": _label(node), "end": position},
                    )
        elif isinstance(node, (Generalization, Realization)):
            if node.source is None or node.target is None:
                result.add_error(
                    "EDGE_INCOMPLETE",
                    f"{node.kind.value.capitalize()} '{_label(node)}' needs both a source and a target.",
                    {"edge": _label(node)},
                )
    return result


def validate_tree_associations(graph: ModelGraph) -> ValidationResult:
    """A ``Tree`` association must connect a class to itself."""
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if not isinstance(node, Association):
            continue
        stereotype = node.stereotype
        if isinstance(stereotype, ClassNode) and stereotype.name == TREE_STEREOTYPE:
            if node.end1.reference is not node.end2.reference:
                result.add_warning(
                    "TREE_ENDS_DIFFER",
                    f"Tree association '{_label(node)}' joins different classes; "
                    f"it will be emitted as a plain relation.",
                    {"association": _label(node)},
                )
    return result


def validate_services(graph: ModelGraph) -> ValidationResult:
    """Injectable classes must extend the CRUD base service with an entity."""
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if isinstance(node, ClassNode) and classify_role(node) is Role.INJECTABLE:
            if bound_entity(node, graph.relations) is None:
                result.add_warning(
                    "SERVICE_NOT_CRUD_BOUND",
                    f"Service '{_label(node)}' has no {CRUD_BASE_SERVICE} generalization "
                    f"carrying an entity stereotype.",
                    {"service": _label(node)},
                )
    return result


def validate_controllers(graph: ModelGraph) -> ValidationResult:
    """Controllers need at least one associated service."""
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if isinstance(node, ClassNode) and classify_role(node) is Role.CONTROLLER:
            if not associated_classes(node, graph.relations):
                result.add_warning(
                    "CONTROLLER_WITHOUT_SERVICE",
                    f"Controller '{_label(node)}' is not associated with any service.",
                    {"controller": _label(node)},
                )
    return result


def validate_artifact_names(graph: ModelGraph) -> ValidationResult:
    """
    Artifact classes must be named, and no two artifacts declared in one
    package may resolve to the same file name.
    """
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if isinstance(node, ClassNode) and not node.name and classify_role(node) in _ARTIFACT_ROLES:
            result.add_warning(
                "UNNAMED_ARTIFACT",
                f"A {classify_role(node).value} class has no name and will be skipped.",
                {"parent": _label(node.parent) if node.parent else ""},
            )
        if not isinstance(node, Package):
            continue
        file_names: List[str] = []
        for child in owned_elements(node):
            if not isinstance(child, ClassNode) or not child.name:
                continue
            if isinstance(child, (Interface, Enumeration)) or classify_role(child) in _ARTIFACT_ROLES:
                file_names.append(resolve_file_name(child))
        for file_name, count in Counter(file_names).items():
            if file_name and count > 1:
                result.add_warning(
                    "DUPLICATE_FILE_NAME",
                    f"Package '{_label(node)}' declares {count} artifacts named '{file_name}'.",
                    {"package": _label(node), "file": file_name},
                )
    return result


def _registers_artifacts(package: Node) -> bool:
    for child in owned_elements(package):
        if isinstance(child, ClassNode) and classify_role(child) in _REGISTERED_ROLES:
            return True
        if isinstance(child, Package) and not is_module(child) and _registers_artifacts(child):
            return True
    return False


def validate_modules(graph: ModelGraph) -> ValidationResult:
    """Flag Module packages whose descriptor would list nothing."""
    result: ValidationResult = ValidationResult()
    for node in _project_nodes(graph):
        if is_module(node) and not _registers_artifacts(node):
            result.add_info(
                "EMPTY_MODULE",
                f"Module '{_label(node)}' registers no entities, services or controllers.",
                {"module": _label(node)},
            )
    return result


# ---------------------------------------------------------------------------
# Master entry point
# ---------------------------------------------------------------------------


def validate_graph(graph: ModelGraph) -> ValidationResult:
    """
    Run every check and return the merged result.

    This is the single function ``generator.py`` and ``cli.py`` call before
    writing any file.
    """
    result: ValidationResult = ValidationResult()
    validators: List[Callable[[ModelGraph], ValidationResult]] = [
        validate_relationship_ends,
        validate_tree_associations,
        validate_services,
        validate_controllers,
        validate_artifact_names,
        validate_modules,
    ]
    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(graph))

    if result.has_errors:
        logger.error("Validation FAILED. %s", result.summary())
    else:
        logger.info("Validation passed. %s", result.summary())
    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_relationship_ends",
    "validate_tree_associations",
    "validate_services",
    "validate_controllers",
    "validate_artifact_names",
    "validate_modules",
    "validate_graph",
]

logger.debug("nestgen.validators loaded: %d public symbols.", len(__all__))

# File: nestgen/relations.py
"""
nestgen - Relation Inference
============================
Derives the storage relationship emitted for each association end visible
from a class.

An association seen from a class is *oriented*: ``source`` is the end
referencing the class being emitted and ``target`` is the opposite end,
which becomes the member.  Only targets marked navigable are visible.

Kind selection (``source`` many?, ``target`` many?)::

    (False, False) -> OneToOne      (False, True) -> OneToMany
    (True,  False) -> ManyToOne     (True,  True) -> ManyToMany

Tree associations select ``TreeParent`` when the source end is
collection-valued and ``TreeChildren`` otherwise, so the ``children`` member
carries ``@TreeChildren()``.  Tree relations never get a join decorator;
every other relation gets one only on the class referenced by ``end1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from nestgen.graph import Association, AssociationEnd, ClassNode, Generalization, RelationIndex
from nestgen.models import RelationKind
from nestgen.naming import (
    escape_keyword,
    is_collection_valued,
    is_optional,
    is_tree_association,
    resolve_member_name,
)
from nestgen.utils import to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.relations")

JOIN_TABLE: str = "JoinTable"
JOIN_COLUMN: str = "JoinColumn"
CRUD_BASE_SERVICE: str = "TypeOrmCrudService"


def _strip_optional(name: str) -> str:
    return name[:-1] if is_optional(name) else name


def relation_kind(source_many: bool, target_many: bool) -> RelationKind:
    """Relationship kind for a non-tree association."""
    if source_many:
        return RelationKind.MANY_TO_MANY if target_many else RelationKind.MANY_TO_ONE
    return RelationKind.ONE_TO_MANY if target_many else RelationKind.ONE_TO_ONE


def tree_relation_kind(source_many: bool) -> RelationKind:
    return RelationKind.TREE_PARENT if source_many else RelationKind.TREE_CHILDREN


def join_decorator(kind: RelationKind) -> Optional[str]:
    if kind.is_tree:
        return None
    return JOIN_TABLE if kind is RelationKind.MANY_TO_MANY else JOIN_COLUMN


@dataclass(frozen=True, slots=True)
class Relation:
    """One association as seen from *owner*."""

    association: Association
    owner: ClassNode
    source: AssociationEnd
    target: AssociationEnd
    kind: RelationKind
    join: Optional[str]
    parameter: str
    back_reference: str

    @property
    def is_tree(self) -> bool:
        return self.kind.is_tree

    @property
    def target_class(self) -> Optional[ClassNode]:
        return self.target.reference

    @property
    def is_self_relation(self) -> bool:
        return self.source.reference is self.target.reference


def infer_relation(
    association: Association,
    source: AssociationEnd,
    target: AssociationEnd,
    owner: ClassNode,
) -> Relation:
    """
    Infer the relation emitted on *owner* for the ``source -> target``
    orientation of *association*.
    """
    source_many: bool = is_collection_valued(source)
    if is_tree_association(association):
        kind: RelationKind = tree_relation_kind(source_many)
        join: Optional[str] = None
    else:
        kind = relation_kind(source_many, is_collection_valued(target))
        join = join_decorator(kind) if association.end1.reference is owner else None

    target_name: str = target.reference.name if target.reference is not None else ""
    return Relation(
        association=association,
        owner=owner,
        source=source,
        target=target,
        kind=kind,
        join=join,
        parameter=escape_keyword(to_camel_case(target_name)),
        back_reference=_strip_optional(resolve_member_name(source)),
    )


def relations_of(cls: ClassNode, index: RelationIndex) -> List[Relation]:
    """
    Relations visible from *cls*, in association declaration order.

    A self-association yields both orientations (``end1 -> end2`` first)
    when both ends are navigable.
    """
    relations: List[Relation] = []
    for association in index.associations_of(cls):
        end1, end2 = association.end1, association.end2
        if end1.reference is cls and end2.navigable:
            relations.append(infer_relation(association, end1, end2, cls))
        if end2.reference is cls and end1.navigable:
            relations.append(infer_relation(association, end2, end1, cls))
    logger.debug("%d relation(s) visible from '%s'.", len(relations), cls.name)
    return relations


def tree_association_of(cls: ClassNode, index: RelationIndex) -> Optional[Association]:
    """First tree association touching *cls*, if any."""
    for association in index.associations_of(cls):
        if is_tree_association(association):
            return association
    return None


# ---------------------------------------------------------------------------
# CRUD wiring
# ---------------------------------------------------------------------------


def crud_generalization(cls: ClassNode, index: RelationIndex) -> Optional[Generalization]:
    """First generalization of *cls* targeting the CRUD base service."""
    for generalization in index.generalizations_of(cls):
        target: Optional[ClassNode] = generalization.target
        if target is not None and target.name == CRUD_BASE_SERVICE:
            return generalization
    return None


def bound_entity(cls: ClassNode, index: RelationIndex) -> Optional[ClassNode]:
    """
    Entity a CRUD service is bound to: the stereotype of its CRUD base
    generalization.  None when either is missing.
    """
    generalization: Optional[Generalization] = crud_generalization(cls, index)
    if generalization is not None and isinstance(generalization.stereotype, ClassNode):
        return generalization.stereotype
    return None


def associated_classes(cls: ClassNode, index: RelationIndex) -> List[ClassNode]:
    """Distinct classes at the far end of the associations touching *cls*."""
    found: List[ClassNode] = []
    for association in index.associations_of(cls):
        far_end = association.end2 if association.end1.reference is cls else association.end1
        other: Optional[ClassNode] = far_end.reference
        if other is not None and other is not cls and other not in found:
            found.append(other)
    return found


__all__: List[str] = [
    "JOIN_TABLE",
    "JOIN_COLUMN",
    "CRUD_BASE_SERVICE",
    "Relation",
    "relation_kind",
    "tree_relation_kind",
    "join_decorator",
    "infer_relation",
    "relations_of",
    "tree_association_of",
    "crud_generalization",
    "bound_entity",
    "associated_classes",
]

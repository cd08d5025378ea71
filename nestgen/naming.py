# File: nestgen/naming.py
"""
nestgen - Naming & Type Resolution
==================================
Pure functions deriving identifiers, file names and type expressions from
graph nodes.

Nothing here mutates a node.  Where a class is rendered in its read-model
shape the caller passes ``RenderMode.MODEL`` instead.
"""

from __future__ import annotations

import logging
import re
from typing import FrozenSet, List, Optional

from nestgen.graph import (
    Association,
    AssociationEnd,
    Attribute,
    ClassNode,
    Enumeration,
    Interface,
    Node,
    Package,
    Parameter,
)
from nestgen.models import RenderMode, Role
from nestgen.utils import to_camel_case, to_kebab_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.naming")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OPTIONAL_MARKER: str = "?"
VOID_TYPE: str = "void"
COLLECTION_SUFFIX: str = "[]"
MODEL_SUFFIX: str = "Model"
TREE_STEREOTYPE: str = "Tree"

_COLLECTION_MULTIPLICITIES: FrozenSet[str] = frozenset({"0..*", "1..*", "*"})
_DIGITS_RE: re.Pattern[str] = re.compile(r"^\d+$")

# Words that cannot name a lambda parameter in the generated code.
RESERVED_KEYWORDS: FrozenSet[str] = frozenset({
    "break", "case", "catch", "continue", "debugger", "default", "delete",
    "do", "else", "finally", "for", "function", "if", "in", "instanceof",
    "new", "return", "switch", "this", "throw", "try", "typeof", "var",
    "void", "while", "with",
})

# Default return statement per declared return type name.
_DEFAULT_RETURNS = {
    "boolean": "false",
    "int": "0",
    "long": "0",
    "short": "0",
    "byte": "0",
    "float": "0.0f",
    "double": "0.0d",
    "char": '"0"',
    "String": '""',
}
_NULL_LITERAL: str = "null"

# Class-reference stereotype names mapped to roles.
_ROLE_BY_STEREOTYPE = {
    "Entity": Role.ENTITY,
    "Module": Role.MODULE,
    "Injectable": Role.INJECTABLE,
    "Controller": Role.CONTROLLER,
}
# String-tag stereotypes mapped to roles.
_ROLE_BY_TAG = {
    "fields": Role.FIELDS,
    "annotationType": Role.ANNOTATION_TYPE,
}

# Suffix length stripped from "...Fields" class names.
_FIELDS_SUFFIX_LENGTH: int = 6


# ---------------------------------------------------------------------------
# Role classification
# ---------------------------------------------------------------------------


def classify_role(node: Node) -> Role:
    """
    Derive the artifact role of *node* from its stereotype.

    A stereotype is either a reference to a class (its name selects the
    role) or a string tag.  Anything unrecognised is ``Role.NONE``.
    """
    stereotype = node.stereotype
    if isinstance(stereotype, ClassNode):
        return _ROLE_BY_STEREOTYPE.get(stereotype.name, Role.NONE)
    if isinstance(stereotype, str):
        return _ROLE_BY_TAG.get(stereotype, Role.NONE)
    return Role.NONE


def is_module(node: Node) -> bool:
    return isinstance(node, Package) and classify_role(node) is Role.MODULE


def is_tree_association(node: Optional[Node]) -> bool:
    """A self-association stereotyped with the ``Tree`` class."""
    return (
        isinstance(node, Association)
        and node.end1.reference is not None
        and node.end1.reference is node.end2.reference
        and isinstance(node.stereotype, ClassNode)
        and node.stereotype.name == TREE_STEREOTYPE
    )


# ---------------------------------------------------------------------------
# Multiplicity
# ---------------------------------------------------------------------------


def is_collection_valued(node: Node) -> bool:
    """
    True when the node's multiplicity denotes more than one value.

    ``0..*``, ``1..*`` and ``*`` are collections, as is any digit-only
    literal other than ``1``.  Nodes without a multiplicity are singular.
    """
    multiplicity: str = (getattr(node, "multiplicity", "") or "").strip()
    if not multiplicity:
        return False
    if multiplicity in _COLLECTION_MULTIPLICITIES:
        return True
    return multiplicity != "1" and bool(_DIGITS_RE.match(multiplicity))


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def declared_name(node: Node) -> str:
    """
    Raw declared name; an unnamed association end borrows its class's name.
    """
    if isinstance(node, AssociationEnd) and not node.name:
        if node.reference is not None:
            return node.reference.name
        return ""
    return node.name


def resolve_member_name(node: Node) -> str:
    """
    Member identifier for *node*: lower-camel, pluralised when
    collection-valued, keeping a trailing ``?`` optionality marker.
    """
    raw: str = declared_name(node)
    optional: bool = raw.endswith(OPTIONAL_MARKER)
    base: str = raw[:-1] if optional else raw
    if is_collection_valued(node):
        base = to_plural(base)
    name: str = to_camel_case(base)
    if not name:
        return ""
    return name + OPTIONAL_MARKER if optional else name


def tree_member_name(end: AssociationEnd) -> str:
    """Member name for an end of a tree association."""
    if end.name:
        return resolve_member_name(end)
    return "children" if is_collection_valued(end) else "parent"


def escape_keyword(name: str) -> str:
    return f"_{name}" if name in RESERVED_KEYWORDS else name


def is_optional(name: str) -> bool:
    return name.endswith(OPTIONAL_MARKER)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def class_type_name(cls: Node, mode: RenderMode = RenderMode.ENTITY) -> str:
    """Type name of a class in the given rendering shape."""
    if mode is RenderMode.MODEL:
        return cls.name + MODEL_SUFFIX
    return cls.name


def resolve_type(node: Node, mode: RenderMode = RenderMode.ENTITY) -> str:
    """
    Type expression for an association end, attribute or parameter.

    *mode* is the shape of the class the node's type refers to.  Class
    references use the class name (``Model``-suffixed in read-model shape),
    literal types are used verbatim, and collection-valued nodes get ``[]``.
    Falls back to ``void``.
    """
    type_name: str = VOID_TYPE
    if isinstance(node, AssociationEnd):
        if node.reference is not None and node.reference.name:
            type_name = class_type_name(node.reference, mode)
    elif isinstance(node, (Attribute, Parameter)):
        declared = node.type
        if isinstance(declared, Node) and declared.name:
            type_name = class_type_name(declared, mode)
        elif isinstance(declared, str) and declared:
            type_name = declared

    if is_collection_valued(node):
        type_name += COLLECTION_SUFFIX
    return type_name


def default_return_literal(type_name: str) -> str:
    """Placeholder return value for a stub with the given return type."""
    return _DEFAULT_RETURNS.get(type_name, _NULL_LITERAL)


# ---------------------------------------------------------------------------
# File names
# ---------------------------------------------------------------------------


def _strip_first(name: str, word: str) -> str:
    return name.replace(word, "", 1)


def resolve_file_name(node: Node, mode: RenderMode = RenderMode.ENTITY) -> str:
    """
    Base file name (without extension) of the artifact emitted for *node*.

    Pure in (stereotype, mode, declared name).  Interfaces, enumerations and
    annotation types keep their declared name; other nodes without an
    artifact role give ``""``.
    """
    stereotype = node.stereotype
    name: str = node.name
    if isinstance(stereotype, ClassNode):
        if mode is RenderMode.MODEL:
            return to_kebab_case(name) + ".model"
        role: Role = _ROLE_BY_STEREOTYPE.get(stereotype.name, Role.NONE)
        if role is Role.ENTITY:
            return to_kebab_case(name) + ".entity"
        if role is Role.MODULE:
            return to_kebab_case(name) + ".module"
        if role is Role.INJECTABLE:
            return to_kebab_case(_strip_first(name, "Service")) + ".service"
        if role is Role.CONTROLLER:
            return to_kebab_case(_strip_first(name, "Controller")) + ".controller"
        return ""
    if stereotype == "fields":
        return to_kebab_case(name[:-_FIELDS_SUFFIX_LENGTH]) + ".fields"
    if stereotype == "annotationType" or isinstance(node, (Interface, Enumeration)):
        return name
    return ""


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RESERVED_KEYWORDS",
    "OPTIONAL_MARKER",
    "VOID_TYPE",
    "MODEL_SUFFIX",
    "TREE_STEREOTYPE",
    "classify_role",
    "is_module",
    "is_tree_association",
    "is_collection_valued",
    "declared_name",
    "resolve_member_name",
    "tree_member_name",
    "escape_keyword",
    "is_optional",
    "class_type_name",
    "resolve_type",
    "default_return_literal",
    "resolve_file_name",
]

# File: nestgen/models.py
"""
nestgen - Core Data Models
==========================
Enumerations shared by the whole engine, the Pydantic V2 models describing
a model *document* (the JSON/YAML form of a modeling graph) and the
``GenerationOptions`` record that controls emission.

The document models are a loading format only.  ``nestgen.graph`` turns a
validated ``ModelDocument`` into the linked runtime node graph the engine
walks.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class NodeKind(str, Enum):
    """Closed set of graph node variants."""

    PROJECT = "project"
    PACKAGE = "package"
    CLASS = "class"
    INTERFACE = "interface"
    ENUMERATION = "enumeration"
    ASSOCIATION = "association"
    ASSOCIATION_END = "association_end"
    GENERALIZATION = "generalization"
    REALIZATION = "realization"
    ATTRIBUTE = "attribute"
    OPERATION = "operation"
    PARAMETER = "parameter"
    LITERAL = "literal"


class Role(str, Enum):
    """Artifact role of a class or package, derived from its stereotype."""

    ENTITY = "Entity"
    MODULE = "Module"
    INJECTABLE = "Injectable"
    CONTROLLER = "Controller"
    FIELDS = "fields"
    ANNOTATION_TYPE = "annotationType"
    NONE = "none"


class RenderMode(str, Enum):
    """Shape a class is rendered in: storage entity or API read-model."""

    ENTITY = "entity"
    MODEL = "model"


class RelationKind(str, Enum):
    """Storage relationship decorators."""

    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"
    TREE_PARENT = "TreeParent"
    TREE_CHILDREN = "TreeChildren"

    @property
    def is_tree(self) -> bool:
        return self in (RelationKind.TREE_PARENT, RelationKind.TREE_CHILDREN)


class Visibility(str, Enum):
    """Member / classifier visibility."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    PACKAGE = "package"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

VisibilityName = Literal["public", "protected", "private", "package"]


# ---------------------------------------------------------------------------
# Document primitives
# ---------------------------------------------------------------------------


class RefSpec(BaseModel):
    """A reference to another element, by id or by name."""

    model_config = _SHARED_CONFIG

    ref: str = Field(..., min_length=1, description="Target element id or name.")

    def __repr__(self) -> str:
        return f"<Ref {self.ref}>"


# A stereotype or type is either a reference or a literal tag / type string.
RefOrLiteral = Union[RefSpec, str, None]
# Where only references are legal a bare string is shorthand for ``{ref: X}``.
RefOnly = Union[RefSpec, str]


class ParameterSpec(BaseModel):
    """Operation parameter; ``direction == "return"`` marks the return value."""

    model_config = _SHARED_CONFIG

    name: str = ""
    direction: Literal["in", "return"] = "in"
    type: RefOrLiteral = None
    multiplicity: str = ""
    documentation: str = ""


class OperationSpec(BaseModel):
    model_config = _SHARED_CONFIG

    name: str = ""
    documentation: str = ""
    visibility: VisibilityName = "public"
    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False
    parameters: List[ParameterSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _single_return(self) -> "OperationSpec":
        returns: int = sum(1 for p in self.parameters if p.direction == "return")
        if returns > 1:
            raise ValueError(
                f"Operation '{self.name}' declares {returns} return parameters."
            )
        return self


class AttributeSpec(BaseModel):
    model_config = _SHARED_CONFIG

    name: str = ""
    type: RefOrLiteral = None
    multiplicity: str = ""
    default_value: str = ""
    documentation: str = ""
    visibility: VisibilityName = "public"
    stereotype: RefOrLiteral = None
    is_id: bool = Field(default=False, alias="isID")
    is_derived: bool = False
    is_static: bool = False
    is_leaf: bool = False


class EndSpec(BaseModel):
    """One end of a binary association."""

    model_config = _SHARED_CONFIG

    reference: RefOnly = Field(..., description="Class at this end.")
    name: str = ""
    multiplicity: str = ""
    navigable: bool = True
    visibility: VisibilityName = "public"
    documentation: str = ""


ElementKindName = Literal[
    "package",
    "class",
    "interface",
    "enumeration",
    "association",
    "generalization",
    "realization",
]


class ElementSpec(BaseModel):
    """
    Any owned element of the document.

    One model covers every kind; kind-specific requirements are checked
    in ``_check_kind_fields``.
    """

    model_config = _SHARED_CONFIG

    kind: ElementKindName
    id: Optional[str] = None
    name: str = ""
    documentation: str = ""
    stereotype: RefOrLiteral = None
    visibility: VisibilityName = "public"
    is_static: bool = False
    is_abstract: bool = False
    is_leaf: bool = False

    # -- classifiers ---------------------------------------------------------
    attributes: List[AttributeSpec] = Field(default_factory=list)
    operations: List[OperationSpec] = Field(default_factory=list)
    literals: List[str] = Field(default_factory=list)
    children: List["ElementSpec"] = Field(default_factory=list)

    # -- associations --------------------------------------------------------
    end1: Optional[EndSpec] = None
    end2: Optional[EndSpec] = None

    # -- generalizations / realizations --------------------------------------
    source: Optional[RefOnly] = None
    target: Optional[RefOnly] = None

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "ElementSpec":
        if self.kind == "association" and (self.end1 is None or self.end2 is None):
            raise ValueError(
                f"Association '{self.name or self.id}' needs both end1 and end2."
            )
        if self.kind in ("generalization", "realization") and self.target is None:
            raise ValueError(f"A {self.kind} needs a target.")
        if self.kind not in ("class", "interface", "enumeration") and (
            self.attributes or self.operations
        ):
            raise ValueError(
                f"{self.kind} '{self.name}' cannot own attributes or operations."
            )
        if self.literals and self.kind != "enumeration":
            raise ValueError(f"Only enumerations have literals (got {self.kind}).")
        return self

    def __repr__(self) -> str:
        return f"<ElementSpec {self.kind} {self.name!r}>"


class ProjectSpec(BaseModel):
    """The document root; never rendered as a path segment."""

    model_config = _SHARED_CONFIG

    name: str = Field(default="Model", min_length=1)
    documentation: str = ""
    children: List[ElementSpec] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generation options
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """
    Flat options record consumed by the emitters.

    Accepts both ``snake_case`` names and the camelCase aliases used by
    model-authoring tools.
    """

    model_config = _SHARED_CONFIG

    include_doc_comments: bool = Field(
        default=True,
        alias="includeDocComments",
        description="Emit /** */ documentation blocks.",
    )
    use_tab_indent: bool = Field(
        default=False, alias="useTabIndent", description="Indent with tabs."
    )
    indent_width: int = Field(
        default=4,
        ge=1,
        le=16,
        alias="indentWidth",
        description="Spaces per indent level when not using tabs.",
    )
    table_prefix: Optional[str] = Field(
        default=None,
        alias="tablePrefix",
        description="Prefix for storage table names (<prefix>_<snake_name>).",
    )
    author: Optional[str] = Field(
        default=None, description="Author line appended to class documentation."
    )
    file_extension: str = Field(
        default="ts",
        min_length=1,
        alias="fileExtension",
        description="Extension of every emitted file.",
    )
    bootstrap_library: bool = Field(
        default=True,
        alias="bootstrapLibrary",
        description="Add the framework library packages to the graph.",
    )

    @field_validator("file_extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.lstrip(".")

    @property
    def indent_unit(self) -> str:
        if self.use_tab_indent:
            return "\t"
        return " " * self.indent_width


class ModelDocument(BaseModel):
    """Top-level document: options plus the model root."""

    model_config = _SHARED_CONFIG

    options: GenerationOptions = Field(default_factory=GenerationOptions)
    model: ProjectSpec

    def __repr__(self) -> str:
        return f"<ModelDocument {self.model.name!r} ({len(self.model.children)} top-level)>"


ElementSpec.model_rebuild()

# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "NodeKind",
    "Role",
    "RenderMode",
    "RelationKind",
    "Visibility",
    "RefSpec",
    "ParameterSpec",
    "OperationSpec",
    "AttributeSpec",
    "EndSpec",
    "ElementSpec",
    "ProjectSpec",
    "GenerationOptions",
    "ModelDocument",
]

logger.debug("nestgen.models loaded: %d public symbols.", len(__all__))

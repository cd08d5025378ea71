# File: nestgen/__init__.py
"""
nestgen - NestJS Source Generator
=================================

Turns a UML-style model graph (loaded from JSON/YAML) into a NestJS +
TypeORM TypeScript source tree: storage entities, read-models, CRUD
services, CRUD controllers, module descriptors, interfaces and enums.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│  NestGenerator │────▶│  ArtifactEmitter │
    │   (cli.py)   │     │ (generator.py) │     │  (emitters.py)   │
    └──────────────┘     └───────┬────────┘     └────────┬─────────┘
                                 │                       │
                    ┌────────────┼────────────┐   ┌──────┼───────┐
                    ▼            ▼            ▼   ▼      ▼       ▼
             ┌──────────┐ ┌──────────┐ ┌────────┐ ┌──────┐ ┌─────────┐
             │validators│ │  graph   │ │ models │ │paths │ │relations│
             └──────────┘ └──────────┘ └────────┘ └──────┘ └─────────┘

Usage::

    # As a library
    from nestgen import NestGenerator, GenerationOptions
    report = NestGenerator(GenerationOptions(table_prefix="app")).generate(graph, out_dir)

    # From the command line
    nestgen --model shop.yaml --output ./server --verbose

Public API:
    - NestGenerator      - Traversal and dispatch
    - ArtifactEmitter    - Per-artifact source text
    - ModelGraph         - Linked runtime graph
    - GenerationOptions  - Emission settings model
    - validate_graph     - Validation entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "nestgen contributors"
__license__: str = "MIT"

from nestgen.errors import ModelReferenceError, NestgenError, PreconditionViolation
from nestgen.models import (
    GenerationOptions,
    ModelDocument,
    NodeKind,
    RelationKind,
    RenderMode,
    Role,
    Visibility,
)
from nestgen.graph import ModelGraph, RelationIndex, build_graph
from nestgen.naming import classify_role, resolve_file_name, resolve_member_name, resolve_type
from nestgen.paths import canonical_path, import_path
from nestgen.relations import Relation, infer_relation, relations_of
from nestgen.writer import CodeWriter
from nestgen.emitters import ArtifactEmitter
from nestgen.validators import ValidationResult, validate_graph
from nestgen.utils import Timer, to_camel_case, to_kebab_case, to_plural, to_snake_case
from nestgen.generator import (
    GenerationReport,
    ModuleRegistry,
    NestGenerator,
    load_graph,
    load_model_file,
    parse_document,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Errors
    "NestgenError",
    "ModelReferenceError",
    "PreconditionViolation",
    # Models
    "GenerationOptions",
    "ModelDocument",
    "NodeKind",
    "RelationKind",
    "RenderMode",
    "Role",
    "Visibility",
    # Graph
    "ModelGraph",
    "RelationIndex",
    "build_graph",
    # Naming, paths, relations
    "classify_role",
    "resolve_file_name",
    "resolve_member_name",
    "resolve_type",
    "canonical_path",
    "import_path",
    "Relation",
    "infer_relation",
    "relations_of",
    # Emission
    "CodeWriter",
    "ArtifactEmitter",
    # Validation
    "validate_graph",
    "ValidationResult",
    # Pipeline
    "NestGenerator",
    "GenerationReport",
    "ModuleRegistry",
    "load_graph",
    "load_model_file",
    "parse_document",
    # Utilities
    "Timer",
    "to_snake_case",
    "to_camel_case",
    "to_kebab_case",
    "to_plural",
]

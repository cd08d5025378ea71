# File: nestgen/generator.py
"""
nestgen - Generation Pipeline (Dispatcher)
==========================================
Connects every phase together:

    Model document → Graph → Validation → Traversal / Emission → Files

Workflow::

    1. Load the model document from JSON/YAML (or accept a built graph).
    2. Parse it into ``ModelDocument`` + ``GenerationOptions`` (models.py).
    3. Build the linked ``ModelGraph`` (graph.py).
    4. Run the validation pipeline (validators.py).
    5. Walk the package tree depth-first, dispatching every classifier to
       its emitter (emitters.py) and writing each artifact as it is made.
    6. Return a ``GenerationReport`` with metrics and status.

Module registries are plain values: each visit returns the entities,
services and controllers registered beneath it, a package folds its
children's registries together, and a Module package consumes the fold to
write its descriptor and returns an empty registry.

Error handling strategy:
    - Validation findings are collected in the report; errors (and, with
      ``fail_on_warnings``, warnings) stop the run before any file is
      written.
    - ``PreconditionViolation`` and ``OSError`` raised while emitting are
      fatal and propagate unchanged.  Files written so far stay on disk.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from nestgen.emitters import ArtifactEmitter
from nestgen.graph import (
    ClassNode,
    Enumeration,
    Interface,
    ModelGraph,
    Node,
    Package,
    Project,
    build_graph,
    owned_elements,
)
from nestgen.models import GenerationOptions, ModelDocument, RenderMode, Role
from nestgen.naming import classify_role, is_module, resolve_file_name
from nestgen.utils import Timer, count_lines, remove_tree, write_file
from nestgen.validators import ValidationResult, validate_graph

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.generator")

MODELS_DIRECTORY: str = "models"


# ---------------------------------------------------------------------------
# Module registry
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ModuleRegistry:
    """Artifacts registered beneath a package, pending a module descriptor."""

    entities: List[ClassNode] = field(default_factory=list)
    services: List[ClassNode] = field(default_factory=list)
    controllers: List[ClassNode] = field(default_factory=list)

    def merge(self, other: "ModuleRegistry") -> None:
        self.entities.extend(other.entities)
        self.services.extend(other.services)
        self.controllers.extend(other.controllers)

    def __len__(self) -> int:
        return len(self.entities) + len(self.services) + len(self.controllers)


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=True, slots=True)
class GeneratedFileRecord:
    """One file written during a run."""

    path: str
    kind: str
    lines: int
    bytes: int


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``NestGenerator.generate()``.

    Files are listed in write order, which is traversal order.
    """

    success: bool = False
    project_name: str = ""
    output_directory: str = ""

    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    files: List[GeneratedFileRecord] = field(default_factory=list)
    modules: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)

    def record(self, path: Path, kind: str, content: str, size: int) -> None:
        self.files.append(
            GeneratedFileRecord(path=str(path), kind=kind, lines=count_lines(content), bytes=size)
        )
        self.total_files += 1
        self.total_bytes += size
        self.total_lines += count_lines(content)

    def files_of_kind(self, kind: str) -> List[GeneratedFileRecord]:
        return [f for f in self.files if f.kind == kind]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  nestgen - Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:          {status}")
        lines.append(f"  Project:         {self.project_name}")
        lines.append(f"  Output:          {self.output_directory}")
        lines.append(f"  Modules:         {len(self.modules)}")
        lines.append(f"  Files generated: {self.total_files}")
        lines.append(f"  Total lines:     {self.total_lines:,}")
        lines.append(f"  Total bytes:     {self.total_bytes:,}")
        lines.append(f"  Total time:      {self.total_elapsed_seconds:.3f}s")
        lines.append("-" * 60)

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<24s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.validation_errors:
            lines.append("-" * 60)
            lines.append(f"  Validation Errors ({len(self.validation_errors)}):")
            for err in self.validation_errors:
                lines.append(f"    ✗ {err}")

        if self.validation_warnings:
            lines.append("-" * 60)
            lines.append(f"  Validation Warnings ({len(self.validation_warnings)}):")
            for warn in self.validation_warnings:
                lines.append(f"    ⚠ {warn}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Document loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at top level, got {type(data).__name__}.")
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level, got {type(data).__name__}.")
    return data


def load_model_file(path: Path) -> Dict[str, Any]:
    """
    Load a model document (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Model path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s'; trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_document(raw: Dict[str, Any]) -> ModelDocument:
    """
    Validate a raw mapping into a ``ModelDocument``.

    Raises:
        ValueError: If the mapping does not describe a valid document.
    """
    if "model" not in raw:
        raise ValueError("Cannot find the model root in input. Expected top-level key: 'model'.")
    try:
        return ModelDocument.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Model document validation failed: {exc}") from exc


def merge_options(
    base: GenerationOptions,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationOptions:
    """Return *base* with *overrides* (field names or aliases) applied."""
    if not overrides:
        return base
    field_names: Dict[str, str] = {
        info.alias: name for name, info in GenerationOptions.model_fields.items() if info.alias
    }
    normalised: Dict[str, Any] = {field_names.get(key, key): value for key, value in overrides.items()}
    try:
        return GenerationOptions.model_validate({**base.model_dump(), **normalised})
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid generation options: {exc}") from exc


def load_graph(
    path: Path,
    option_overrides: Optional[Dict[str, Any]] = None,
) -> Tuple[ModelGraph, GenerationOptions]:
    """Load *path* and build its graph; returns the graph and effective options."""
    document: ModelDocument = parse_document(load_model_file(path))
    options: GenerationOptions = merge_options(document.options, option_overrides)
    graph: ModelGraph = build_graph(document, bootstrap=options.bootstrap_library)
    logger.info("Loaded model file: %s (%r).", path, graph)
    return graph, options


# ---------------------------------------------------------------------------
# NestGenerator - dispatcher
# ---------------------------------------------------------------------------


class NestGenerator:
    """
    Depth-first traversal that writes one artifact per classified node.

    Usage::

        generator = NestGenerator(GenerationOptions(table_prefix="app"))

        # From a file
        report = generator.generate_from_file(Path("shop.yaml"), Path("./out"))

        # From a built graph
        report = generator.generate(graph, Path("./out"))

        print(report.summary())

    The generator is reusable; it keeps no state between runs.
    """

    def __init__(
        self,
        options: Optional[GenerationOptions] = None,
        *,
        strict_validation: bool = True,
        fail_on_warnings: bool = False,
        clean_output: bool = False,
    ) -> None:
        """
        Args:
            options: Emission options for ``generate``.
            strict_validation: If True, abort on any validation error.
            fail_on_warnings: If True, treat validation warnings as errors.
            clean_output: If True, remove the root's output directory first.
        """
        self._options: GenerationOptions = options or GenerationOptions()
        self._strict_validation: bool = strict_validation
        self._fail_on_warnings: bool = fail_on_warnings
        self._clean_output: bool = clean_output

        logger.debug(
            "NestGenerator initialised: strict=%s, fail_on_warnings=%s, clean=%s.",
            strict_validation,
            fail_on_warnings,
            clean_output,
        )

    @property
    def options(self) -> GenerationOptions:
        return self._options

    # -----------------------------------------------------------------
    # Public entry points
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        model_path: Path,
        output_dir: Path,
        *,
        root_name: Optional[str] = None,
        option_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → build graph → validate → generate.

        Document options are used, with *option_overrides* applied on top.

        Raises:
            FileNotFoundError: If the model file doesn't exist.
            ValueError: If the document is invalid or *root_name* is unknown.
        """
        report: GenerationReport = GenerationReport(output_directory=str(output_dir))

        with Timer("load_model") as t_load:
            graph, options = load_graph(model_path, option_overrides)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Model",
            success=True,
            elapsed_seconds=t_load.elapsed,
            detail=f"from {model_path.name}",
        ))

        root: Optional[Node] = None
        if root_name:
            root = graph.find_package(root_name)
            if root is None:
                raise ValueError(f"Package '{root_name}' not found in model.")

        return self._run(graph, Path(output_dir), root, options, report)

    def generate(
        self,
        graph: ModelGraph,
        output_dir: Path,
        *,
        root: Optional[Node] = None,
    ) -> GenerationReport:
        """
        Generate the source tree for *graph* (or the subtree at *root*)
        into *output_dir*.

        Raises:
            PreconditionViolation: If an emitter's structural assumption fails.
            OSError: If a directory or file cannot be created.
        """
        report: GenerationReport = GenerationReport(output_directory=str(output_dir))
        return self._run(graph, Path(output_dir), root, self._options, report)

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run(
        self,
        graph: ModelGraph,
        output_dir: Path,
        root: Optional[Node],
        options: GenerationOptions,
        report: GenerationReport,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()
        report.project_name = graph.root.name

        if not self._step_validate(graph, report):
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        start: Node = root if root is not None else graph.root
        if self._clean_output:
            target: Path = output_dir if isinstance(start, Project) else output_dir / start.name
            remove_tree(target)
        output_dir.mkdir(parents=True, exist_ok=True)

        emitter: ArtifactEmitter = ArtifactEmitter(options, graph.relations)
        library: Optional[Package] = graph.library_root
        with Timer("traverse") as t:
            leftover: ModuleRegistry = self._visit(
                start, output_dir, _Context(emitter, options, library, report)
            )
        if leftover:
            logger.debug(
                "%d registration(s) outside any module were not written to a descriptor.",
                len(leftover),
            )

        report.step_metrics.append(GenerationStepMetric(
            step_name="Generate Artifacts",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{report.total_files} files, {len(report.modules)} module(s)",
        ))
        logger.info(
            "Generation complete: %d files (%d lines) in %s, %.3fs.",
            report.total_files,
            report.total_lines,
            output_dir,
            t.elapsed,
        )
        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    def _step_validate(self, graph: ModelGraph, report: GenerationReport) -> bool:
        """Run validation; returns False when the run must stop."""
        with Timer("validation") as t:
            result: ValidationResult = validate_graph(graph)

        proceed: bool = result.is_valid or not self._strict_validation
        if result.has_warnings and self._fail_on_warnings:
            proceed = False

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Model",
            success=proceed,
            elapsed_seconds=t.elapsed,
            detail=result.summary(),
        ))

        for warning in result.warnings:
            logger.warning("  ⚠ %s", warning)
        for error in result.errors:
            logger.error("  ✗ %s", error)
        return proceed

    def _finalise_report(self, report: GenerationReport, total_elapsed: float) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = all(step.success for step in report.step_metrics)
        return report

    # -----------------------------------------------------------------
    # Internal: traversal
    # -----------------------------------------------------------------

    def _visit(self, node: Node, directory: Path, ctx: "_Context") -> ModuleRegistry:
        """
        Process *node* below *directory*; returns the registrations not yet
        consumed by a module descriptor.
        """
        registry: ModuleRegistry = ModuleRegistry()

        if isinstance(node, Project):
            for child in owned_elements(node):
                if child is ctx.library:
                    continue
                registry.merge(self._visit(child, directory, ctx))
            return registry

        if isinstance(node, Package):
            if not node.name:
                logger.debug("Skipping unnamed package under %s.", directory)
                return registry
            package_dir: Path = directory / node.name
            package_dir.mkdir()
            for child in owned_elements(node):
                registry.merge(self._visit(child, package_dir, ctx))
            if is_module(node):
                self._write_module(node, package_dir, registry, ctx)
                return ModuleRegistry()
            return registry

        if isinstance(node, (Interface, Enumeration)):
            if node.name:
                content: str = (
                    ctx.emitter.emit_interface(node)
                    if isinstance(node, Interface)
                    else ctx.emitter.emit_enum(node)
                )
                self._write(ctx, directory / f"{node.name}.{ctx.extension}", node.kind.value, content)
            return registry

        if isinstance(node, ClassNode):
            self._dispatch_class(node, directory, registry, ctx)
        return registry

    def _dispatch_class(
        self,
        cls: ClassNode,
        directory: Path,
        registry: ModuleRegistry,
        ctx: "_Context",
    ) -> None:
        role: Role = classify_role(cls)
        if role in (Role.NONE, Role.MODULE):
            return
        if not cls.name:
            logger.debug("Skipping unnamed %s class under %s.", role.value, directory)
            return

        emitter: ArtifactEmitter = ctx.emitter
        ext: str = ctx.extension

        if role is Role.ANNOTATION_TYPE:
            self._write(ctx, directory / f"{cls.name}.{ext}", "annotation", emitter.emit_annotation_type(cls))

        elif role in (Role.ENTITY, Role.FIELDS):
            if role is Role.ENTITY:
                registry.entities.append(cls)
            self._write(
                ctx, directory / f"{resolve_file_name(cls)}.{ext}", "entity", emitter.emit_entity(cls)
            )
            models_dir: Path = directory.parent / MODELS_DIRECTORY
            if not models_dir.exists():
                models_dir.mkdir()
            self._write(
                ctx,
                models_dir / f"{resolve_file_name(cls, RenderMode.MODEL)}.{ext}",
                "model",
                emitter.emit_model(cls),
            )

        elif role is Role.INJECTABLE:
            registry.services.append(cls)
            self._write(
                ctx, directory / f"{resolve_file_name(cls)}.{ext}", "service", emitter.emit_service(cls)
            )

        elif role is Role.CONTROLLER:
            registry.controllers.append(cls)
            self._write(
                ctx,
                directory / f"{resolve_file_name(cls)}.{ext}",
                "controller",
                emitter.emit_controller(cls),
            )

    def _write_module(
        self,
        package: Package,
        package_dir: Path,
        registry: ModuleRegistry,
        ctx: "_Context",
    ) -> None:
        content: str = ctx.emitter.emit_module(
            package,
            entities=registry.entities,
            services=registry.services,
            controllers=registry.controllers,
        )
        self._write(ctx, package_dir / f"{resolve_file_name(package)}.{ctx.extension}", "module", content)
        ctx.report.modules.append(package.name)
        logger.info(
            "Module '%s' written: %d entities, %d services, %d controllers.",
            package.name,
            len(registry.entities),
            len(registry.services),
            len(registry.controllers),
        )

    @staticmethod
    def _write(ctx: "_Context", path: Path, kind: str, content: str) -> None:
        if not content.endswith("\n"):
            content += "\n"
        size: int = write_file(path, content)
        ctx.report.record(path, kind, content, size)
        logger.debug("Wrote %s artifact: %s", kind, path)


@dataclass(slots=True)
class _Context:
    """Per-run values threaded through the traversal."""

    emitter: ArtifactEmitter
    options: GenerationOptions
    library: Optional[Package]
    report: GenerationReport

    @property
    def extension(self) -> str:
        return self.options.file_extension


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MODELS_DIRECTORY",
    "ModuleRegistry",
    "GenerationStepMetric",
    "GeneratedFileRecord",
    "GenerationReport",
    "load_model_file",
    "parse_document",
    "merge_options",
    "load_graph",
    "NestGenerator",
]

logger.debug("nestgen.generator loaded.")
